"""Public domain model surface."""

from __future__ import annotations

from harmonipy.domain.model.enums import (
    ArtworkType,
    DurationPrecision,
    FeatureQuality,
    LinkType,
    LookupMethod,
    MessageSeverity,
    ProviderFeature,
)
from harmonipy.domain.model.external_ids import (
    EntityId,
    ExternalEntityId,
    ExternalIdKey,
    unique_external_ids,
)
from harmonipy.domain.model.music import (
    ArtistCreditName,
    Artwork,
    ExternalLink,
    Label,
    LookupParameters,
    Medium,
    ProviderInfo,
    ProviderMessage,
    Recording,
    Release,
    ReleaseInfo,
    ResolvableEntity,
    Track,
)
from harmonipy.domain.model.primitives import (
    GTIN,
    WORLDWIDE,
    CountryCode,
    DurationMs,
    Language,
    PartialDate,
    ProviderName,
    ReleaseGroupType,
)
from harmonipy.domain.model.results import (
    ProviderReleaseMap,
    ProviderReleaseMapping,
    ReleaseFound,
    SourceFailure,
    SourceResult,
    failures,
    successful_releases,
)

__all__ = [  # noqa: RUF022
    # identifiers
    "EntityId",
    "ExternalEntityId",
    "ExternalIdKey",
    "unique_external_ids",
    # release
    "ResolvableEntity",
    "ArtistCreditName",
    "Label",
    "Recording",
    "Track",
    "Medium",
    "Artwork",
    "ExternalLink",
    "Release",
    # info
    "LookupParameters",
    "ProviderInfo",
    "ProviderMessage",
    "ReleaseInfo",
    # results
    "ReleaseFound",
    "SourceFailure",
    "SourceResult",
    "ProviderReleaseMapping",
    "ProviderReleaseMap",
    "successful_releases",
    "failures",
    # enums
    "ArtworkType",
    "DurationPrecision",
    "FeatureQuality",
    "LinkType",
    "LookupMethod",
    "MessageSeverity",
    "ProviderFeature",
    # primitives
    "GTIN",
    "WORLDWIDE",
    "CountryCode",
    "DurationMs",
    "Language",
    "PartialDate",
    "ProviderName",
    "ReleaseGroupType",
]
