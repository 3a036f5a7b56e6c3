from __future__ import annotations

from harmonipy.domain.harmonizer import merge_resolvable_entities, merge_sorted_resolvable_entities
from harmonipy.domain.model import ArtistCreditName

from tests.helpers.releases import external_id, make_artist


def _ids(artist: ArtistCreditName) -> list[tuple[str, str, str]]:
    return [external_id.key for external_id in artist.external_ids]


def test_sorted_merge_combines_ids_of_similar_names_at_same_position() -> None:
    target = [make_artist("Jane Doe", "Alpha", "a1"), make_artist("John Roe", "Alpha", "a2")]
    source = [make_artist("jane doe", "Beta", "b1"), make_artist("John Roe", "Beta", "b2")]

    merge_sorted_resolvable_entities(target, [source])

    assert _ids(target[0]) == [("alpha", "artist", "a1"), ("beta", "artist", "b1")]
    assert _ids(target[1]) == [("alpha", "artist", "a2"), ("beta", "artist", "b2")]


def test_sorted_merge_ignores_sources_of_different_length() -> None:
    target = [make_artist("Jane Doe", "Alpha", "a1")]
    source = [make_artist("Jane Doe", "Beta", "b1"), make_artist("John Roe", "Beta", "b2")]

    merge_sorted_resolvable_entities(target, [source, None])

    assert _ids(target[0]) == [("alpha", "artist", "a1")]


def test_sorted_merge_ignores_dissimilar_names() -> None:
    target = [make_artist("Jane Doe", "Alpha", "a1")]

    merge_sorted_resolvable_entities(target, [[make_artist("Somebody Else", "Beta", "b1")]])

    assert _ids(target[0]) == [("alpha", "artist", "a1")]


def test_sorted_merge_deduplicates_ids() -> None:
    target = [make_artist("Jane Doe", "Alpha", "a1")]
    duplicate = ArtistCreditName(name="Jane Doe", external_ids=[external_id("Alpha", "a1")])

    merge_sorted_resolvable_entities(target, [[duplicate]])

    assert _ids(target[0]) == [("alpha", "artist", "a1")]


def test_unordered_merge_matches_by_name() -> None:
    target = [make_artist("Jane Doe", "Alpha", "a1"), make_artist("John Roe", "Alpha", "a2")]
    source = [make_artist("John Roe", "Beta", "b2")]

    merge_resolvable_entities(target, [source])

    assert _ids(target[0]) == [("alpha", "artist", "a1")]
    assert _ids(target[1]) == [("alpha", "artist", "a2"), ("beta", "artist", "b2")]


def test_sorted_merge_with_swapped_names_combines_nothing() -> None:
    target = [make_artist("Jane Doe", "Alpha", "a1"), make_artist("John Roe", "Alpha", "a2")]
    swapped = [make_artist("John Roe", "Beta", "b2"), make_artist("Jane Doe", "Beta", "b1")]

    merge_sorted_resolvable_entities(target, [swapped])

    assert _ids(target[0]) == [("alpha", "artist", "a1")]
    assert _ids(target[1]) == [("alpha", "artist", "a2")]
