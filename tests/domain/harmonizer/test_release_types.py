from __future__ import annotations

import pytest

from harmonipy.domain.harmonizer import (
    guess_types_for_release,
    guess_types_from_title,
    merge_types,
)
from harmonipy.domain.harmonizer.release_types import capitalize_release_type, sort_types
from harmonipy.domain.model import Medium, Release, Track


def _release(title: str, *track_titles: str, types: tuple[str, ...] = ()) -> Release:
    return Release(
        title=title,
        types=list(types),
        media=[Medium(tracklist=[Track(title=track_title) for track_title in track_titles])],
    )


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Escape from Ultra City (EP)", {"EP"}),
        ("At Folsom Prison (Live)", {"Live"}),
        ("True Belief - Single", {"Single"}),
        ("Enter Suicidal Angels - EP (Remastered 2021)", {"EP"}),
        ("Zero Distance EP", {"EP"}),
        ("Parasite Inc. (Demo)", {"Demo"}),
        ("Human (Paul Woolford Remix)", {"Remix"}),
        ("Never Say Never - The Remixes", {"Remix"}),
        ("DJ-Kicks (Forest Swords) [DJ Mix]", {"DJ-mix"}),
        ("Stardew Valley (Original Game Soundtrack)", {"Soundtrack"}),
        ("Inception (Music from the Motion Picture)", {"Soundtrack"}),
        ("Get Up (Der Original Soundtrack zum Kinofilm)", {"Soundtrack"}),
        ("Fejkpatient (Musik från TV-serien)", {"Soundtrack"}),
        ("Kvitebjørn (Musikken fra filmen)", {"Soundtrack"}),
        ("The Lion King: Original Broadway Cast Recording", {"Soundtrack"}),
        ("Goblin OST", {"Soundtrack"}),
        ("Ghost (Deluxe Edition)", set[str]()),
    ],
)
def test_guess_types_from_title(title: str, expected: set[str]) -> None:
    assert guess_types_from_title(title) == expected


def test_ost_suffix_is_case_sensitive() -> None:
    assert guess_types_from_title("Lost") == set()
    assert guess_types_from_title("The Host ost") == set()


def test_guess_types_for_release_keeps_existing_types() -> None:
    release = _release("Wake of a Nation (EP)", types=("Interview",))

    assert guess_types_for_release(release) == {"EP", "Interview"}


def test_live_is_guessed_when_all_tracks_are_live() -> None:
    live = _release("One Second", "One Second - Live", "Darker Thoughts (Live)")
    partly_live = _release("One Second", "One Second - Live", "Darker Thoughts")

    assert guess_types_for_release(live) == {"Live"}
    assert guess_types_for_release(partly_live) == set()


def test_dj_mix_is_guessed_from_one_fully_mixed_medium() -> None:
    release = _release("DJ-Kicks: Modeselektor", "PREY - Mixed", "Permit Riddim [Mixed]")
    release.media.append(Medium(tracklist=[Track(title="PREY")]))

    assert guess_types_for_release(release) == {"DJ-mix"}


@pytest.mark.parametrize(
    ("source_type", "expected"),
    [("ep", "EP"), ("ALBUM", "Album"), ("dj-mix", "DJ-mix"), ("mixtape/street", "Mixtape/Street")],
)
def test_capitalize_release_type(source_type: str, expected: str) -> None:
    assert capitalize_release_type(source_type) == expected


def test_sort_types_puts_primary_type_first() -> None:
    assert sort_types(["Soundtrack", "Live", "Album"]) == ["Album", "Live", "Soundtrack"]


def test_merge_types_keeps_a_single_specific_primary_type() -> None:
    assert merge_types(["Album"], ["EP", "Live"], ["Single"]) == ["EP", "Live"]
    assert merge_types(["Single"], ["EP"]) == ["EP"]
    assert merge_types(["Broadcast"], ["Album"]) == ["Broadcast"]
    assert merge_types(["Other", "Compilation"], ["Compilation"]) == ["Other", "Compilation"]
    assert merge_types() == []
