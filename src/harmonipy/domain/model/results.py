"""Tagged per-provider lookup outcomes.

Each provider of a combined lookup yields exactly one ``SourceResult``: either
the release it returned or the error which prevented it from returning one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .music import Release
    from .primitives import ProviderName


@dataclass(frozen=True, slots=True, kw_only=True)
class ReleaseFound:
    provider: ProviderName
    release: Release
    ok: Literal[True] = True


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceFailure:
    provider: ProviderName
    error: Exception
    ok: Literal[False] = False


type SourceResult = ReleaseFound | SourceFailure
type ProviderReleaseMapping = dict[ProviderName, SourceResult]
type ProviderReleaseMap = dict[ProviderName, Release]


def successful_releases(mapping: Mapping[ProviderName, SourceResult]) -> ProviderReleaseMap:
    """Return a new mapping which only contains the releases of successful lookups."""

    return {
        provider: result.release
        for provider, result in mapping.items()
        if isinstance(result, ReleaseFound)
    }


def failures(mapping: Mapping[ProviderName, SourceResult]) -> list[SourceFailure]:
    return [result for result in mapping.values() if isinstance(result, SourceFailure)]
