from __future__ import annotations

from harmonipy.domain.similarity import match_by_similar_name, similar_names, simplify_name


def test_simplify_name_drops_case_accents_and_punctuation() -> None:
    assert simplify_name("J.A.N.E. Döe") == "janedoe"
    assert simplify_name("Jane-Doe ") == "janedoe"


def test_simplify_name_keeps_non_latin_letters() -> None:
    assert simplify_name("宇多田 ヒカル") == "宇多田ヒカル"


def test_similar_names() -> None:
    assert similar_names("Sigur Rós", "sigur ros")
    assert not similar_names("Sigur Rós", "Sigur Ros Band")


def test_match_by_similar_name_returns_first_match() -> None:
    candidates = ["Other", "the beatles", "The Beatles!"]
    assert match_by_similar_name("The Beatles", candidates, lambda name: name) == "the beatles"
    assert match_by_similar_name("Nobody", candidates, lambda name: name) is None
    assert match_by_similar_name("", candidates, lambda name: name) is None
