"""Release group types: guessing them from titles and combining them.

Types follow MusicBrainz release group types. A release has at most one
primary type (``Album``, ``Single``, ``EP``, ``Broadcast``, ``Other``) and any
number of secondary types (``Live``, ``Soundtrack``, ``Remix``, ...).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from harmonipy.domain.model import Medium, Release, ReleaseGroupType, Track

PRIMARY_TYPES: Final[tuple[ReleaseGroupType, ...]] = (
    "Album",
    "Single",
    "EP",
    "Broadcast",
    "Other",
)

# Matchers without a type use the first group of their pattern as type.
_TITLE_MATCHERS: Final[tuple[tuple[ReleaseGroupType | None, re.Pattern[str]], ...]] = (
    # Bandcamp style
    (None, re.compile(r"\s\((EP|Single|Live|Demo)\)(?:\s\(.*?\))?$", re.IGNORECASE)),
    # iTunes style
    (None, re.compile(r"\s- (EP|Single|Live)(?:\s\(.*?\))?$", re.IGNORECASE)),
    (None, re.compile(r"\s(EP)(?:\s\(.*?\))?$", re.IGNORECASE)),
    # "Remixed", "The Remixes" or "<Track> (<Remixer> Remix)"
    (None, re.compile(r"\b(Remix)(?:e[sd])?\b", re.IGNORECASE)),
    ("DJ-mix", re.compile(r"\bContinuous DJ[\s-]Mix\b|[(\[]DJ[\s-]mix[)\]]", re.IGNORECASE)),
    ("Soundtrack", re.compile(r"(?:Original|Official)(?:.*?)(?:Soundtrack|Score)", re.IGNORECASE)),
    (
        "Soundtrack",
        re.compile(
            r"(?:Soundtrack|Score|Music)\s(?:(?:from|to) the)\s(?:.+[\s-])?"
            r"(?:(?:Video\s)?Game|Motion Picture|Film|Movie|"
            r"(?:(?:TV|Television)[\s-]?)?(?:Mini[\s-]?)?Series|Musical)",
            re.IGNORECASE,
        ),
    ),
    # O.S.T. / OST prefix or suffix, case sensitive
    (
        "Soundtrack",
        re.compile(
            r"(?:^(?:\(O\.S\.T\.\)|O\.S\.T\.|OST|\(OST\))\s.+"
            r"|.+\s(?:\(O\.S\.T\.\)|O\.S\.T\.|OST|\(OST\))$)"
        ),
    ),
    ("Soundtrack", re.compile(r"Original (?:.+\s)?Cast Recording", re.IGNORECASE)),
    # German
    (
        "Soundtrack",
        re.compile(
            r"(?:Soundtrack|Musik)\s(?:zum|zur)\s(?:.+[\s-])?"
            r"(?:(?:Kino)?Film|Theaterstück|(?:TV[\s-]?)?Serie)",
            re.IGNORECASE,
        ),
    ),
    # Swedish
    (
        "Soundtrack",
        re.compile(
            r"(?:Soundtrack|Musik(?:en)?)\s(?:från|till|ur)\s(?:.+[\s-])?"
            r"(?:Film(?:en)?|(?:TV[\s-]?)?(?:Mini[\s-]?)?Serien?|Musikalen)",
            re.IGNORECASE,
        ),
    ),
    # Norwegian
    (
        "Soundtrack",
        re.compile(
            r"Musikk(?:en)? (?:fra) (?:Filmen|TV[\s-]serien|(?:teater)?forestillingen)",
            re.IGNORECASE,
        ),
    ),
)

_LIVE_TRACK: Final = re.compile(r"\s(?:- Live|\(Live\))(?:\s\(.*?\))?$", re.IGNORECASE)
_DJ_MIX_TRACK: Final = re.compile(
    r"\s(?:- Mixed|\(Mixed\)|\[Mixed\])(?:\s\(.*?\))?$", re.IGNORECASE
)


def capitalize_release_type(source_type: str) -> ReleaseGroupType:
    """Turn a provider's type name into the capitalization of the release group type."""

    name = source_type.lower()
    match name:
        case "ep":
            return "EP"
        case "dj-mix":
            return "DJ-mix"
        case "mixtape/street":
            return "Mixtape/Street"
        case _:
            return name[:1].upper() + name[1:]


def guess_types_from_title(title: str) -> set[ReleaseGroupType]:
    types: set[ReleaseGroupType] = set()
    for release_type, pattern in _TITLE_MATCHERS:
        if release_type is not None and release_type in types:
            continue
        match = pattern.search(title)
        if match is None:
            continue
        guessed = match.group(1) if pattern.groups else release_type
        if guessed:
            types.add(capitalize_release_type(guessed))
    return types


def guess_live_release(tracks: Sequence[Track]) -> bool:
    """All track titles are marked as live."""

    return bool(tracks) and all(_LIVE_TRACK.search(track.title) for track in tracks)


def guess_dj_mix_release(media: Sequence[Medium]) -> bool:
    """All track titles of at least one medium are marked as mixed.

    DJ-mix releases sometimes come with an additional medium of unmixed tracks.
    """

    return any(
        medium.tracklist and all(_DJ_MIX_TRACK.search(track.title) for track in medium.tracklist)
        for medium in media
    )


def guess_types_for_release(release: Release) -> set[ReleaseGroupType]:
    """The types of the release, completed by the types guessed from its titles."""

    types = set(release.types) | guess_types_from_title(release.title)
    tracks = [track for medium in release.media for track in medium.tracklist]
    if "Live" not in types and guess_live_release(tracks):
        types.add("Live")
    if "DJ-mix" not in types and guess_dj_mix_release(release.media):
        types.add("DJ-mix")
    return types


def is_primary_type(release_type: ReleaseGroupType) -> bool:
    return release_type in PRIMARY_TYPES


def sort_types(types: Iterable[ReleaseGroupType]) -> list[ReleaseGroupType]:
    """Primary types first, then alphabetically."""

    return sorted(types, key=lambda release_type: (not is_primary_type(release_type), release_type))


def merge_types(*type_lists: Iterable[ReleaseGroupType]) -> list[ReleaseGroupType]:
    """Combine several lists of types into unique sorted types with a single primary type."""

    primary: list[ReleaseGroupType] = []
    result: set[ReleaseGroupType] = set()
    for types in type_lists:
        for release_type in types:
            if not is_primary_type(release_type):
                result.add(release_type)
            elif release_type not in primary:
                primary.append(release_type)
    if primary:
        result.add(_reduce_primary_types(primary))
    return sort_types(result)


def _reduce_primary_types(types: Sequence[ReleaseGroupType]) -> ReleaseGroupType:
    # Many providers use Album as generic type, more specific types win.
    chosen = types[0]
    for release_type in types[1:]:
        if chosen in ("Album", "Other") or (chosen == "Single" and release_type == "EP"):
            chosen = release_type
    return chosen
