"""Region availability helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from harmonipy.domain.model import CountryCode

type RegionSet = frozenset[CountryCode]


def combine_availability(
    available: RegionSet,
    excluded: RegionSet,
    new_available: Iterable[CountryCode] = (),
    new_excluded: Iterable[CountryCode] = (),
) -> tuple[RegionSet, RegionSet]:
    """Fold the availability of one more release into the accumulated region sets.

    A region which is available through any release is never excluded, even if
    an earlier release marked it as excluded.
    """

    combined_available = available | frozenset(new_available)
    combined_excluded = (excluded | frozenset(new_excluded)) - combined_available
    return combined_available, combined_excluded


def is_country_code(code: str) -> bool:
    """Check for an upper case ISO 3166-1 alpha-2 code (including MusicBrainz' XW/XE)."""

    return len(code) == 2 and code.isascii() and code.isalpha() and code.isupper()
