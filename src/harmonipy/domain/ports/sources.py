"""Port for metadata providers which look up releases from one source."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from harmonipy.domain.model import LookupMethod

if TYPE_CHECKING:
    from collections.abc import Iterable

    from harmonipy.domain.model import (
        CountryCode,
        EntityId,
        ExternalEntityId,
        FeatureQuality,
        ProviderFeature,
        Release,
    )


@dataclass(frozen=True, slots=True)
class ReleaseSpecifier:
    """Identifies a release for one provider: by provider ID, GTIN or provider URL."""

    method: LookupMethod
    value: str

    @classmethod
    def by_id(cls, provider_id: str) -> ReleaseSpecifier:
        return cls(LookupMethod.ID, provider_id)

    @classmethod
    def by_gtin(cls, gtin: str | int) -> ReleaseSpecifier:
        return cls(LookupMethod.GTIN, str(gtin))

    @classmethod
    def by_url(cls, url: str) -> ReleaseSpecifier:
        return cls(LookupMethod.URL, url)


@dataclass(frozen=True, slots=True, kw_only=True)
class LookupOptions:
    """Release lookup options which are passed on to every provider."""

    regions: tuple[CountryCode, ...] = ()
    """Ordered regions to try until a lookup succeeds (region-specific providers only)."""

    providers: frozenset[str] | None = None
    """Internal names of the providers which should be used for GTIN lookups."""

    with_isrc: bool = False
    with_availability: bool = False
    with_separate_media: bool = False
    with_all_track_artists: bool = False
    snapshot_max_timestamp: int | None = None

    def with_regions(self, regions: Iterable[CountryCode]) -> LookupOptions:
        return replace(self, regions=tuple(dict.fromkeys(regions)))


@runtime_checkable
class MetadataSource(Protocol):
    """Capabilities the lookup core needs from a metadata provider."""

    @property
    def name(self) -> str:
        """Unique display name."""
        ...

    @property
    def internal_name(self) -> str:
        """Unique simplified name."""
        ...

    @property
    def available_regions(self) -> frozenset[CountryCode] | None: ...

    async def get_release(self, specifier: ReleaseSpecifier, options: LookupOptions) -> Release:
        """Look up the given release, raising ``SourceError`` if that fails."""
        ...

    def supports_domain(self, url: str) -> bool: ...

    def get_quality(self, feature: ProviderFeature) -> FeatureQuality | int: ...

    def construct_url(self, entity: EntityId | ExternalEntityId) -> str: ...
