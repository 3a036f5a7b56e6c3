"""Provider-independent release representation.

Every provider translates its payloads into these types. Source releases are
treated as read-only by the harmonizer; merging always writes into a fresh
``Release`` instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import MessageSeverity

if TYPE_CHECKING:
    from .enums import ArtworkType, LinkType, LookupMethod
    from .external_ids import ExternalEntityId
    from .primitives import (
        GTIN,
        CountryCode,
        DurationMs,
        Language,
        PartialDate,
        ProviderName,
        ReleaseGroupType,
    )


@dataclass(slots=True, kw_only=True)
class ResolvableEntity:
    """Entity which may have external IDs which can be resolved to its MBID."""

    name: str = ""
    external_ids: list[ExternalEntityId] = field(default_factory=list["ExternalEntityId"])
    mbid: str | None = None


@dataclass(slots=True, kw_only=True)
class ArtistCreditName(ResolvableEntity):
    credited_name: str | None = None
    join_phrase: str | None = None


@dataclass(slots=True, kw_only=True)
class Label(ResolvableEntity):
    catalog_number: str | None = None


@dataclass(slots=True, kw_only=True)
class Recording(ResolvableEntity):
    """Recording of a track, usually only known by its external IDs."""


@dataclass(slots=True, kw_only=True)
class Track:
    title: str
    number: int | str | None = None
    duration: DurationMs | None = None
    isrc: str | None = None
    recording: Recording | None = None
    artists: list[ArtistCreditName] | None = None
    available_in: list[CountryCode] | None = None


@dataclass(slots=True, kw_only=True)
class Medium:
    number: int | None = None
    title: str | None = None
    format: str | None = None
    tracklist: list[Track] = field(default_factory=list["Track"])


@dataclass(slots=True, kw_only=True)
class Artwork:
    url: str
    thumb_url: str | None = None
    types: tuple[ArtworkType, ...] = ()
    comment: str | None = None


@dataclass(slots=True, kw_only=True)
class ExternalLink:
    url: str
    types: tuple[LinkType, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class LookupParameters:
    """Parameters which were used to look up a release from one provider."""

    method: LookupMethod
    value: str
    region: CountryCode | None = None


@dataclass(slots=True, kw_only=True)
class ProviderInfo:
    name: ProviderName
    internal_name: str
    id: str
    url: str
    lookup: LookupParameters
    api_url: str | None = None
    processing_time: float | None = None
    cache_time: float | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderMessage:
    text: str
    severity: MessageSeverity = MessageSeverity.INFO
    provider: ProviderName | None = None


@dataclass(slots=True, kw_only=True)
class ReleaseInfo:
    providers: list[ProviderInfo] = field(default_factory=list["ProviderInfo"])
    messages: list[ProviderMessage] = field(default_factory=list["ProviderMessage"])
    source_map: dict[str, ProviderName] = field(default_factory=dict["str", "ProviderName"])


@dataclass(slots=True, kw_only=True)
class Release:
    title: str = ""
    artists: list[ArtistCreditName] = field(default_factory=list["ArtistCreditName"])
    gtin: GTIN | None = None
    external_links: list[ExternalLink] = field(default_factory=list["ExternalLink"])
    media: list[Medium] = field(default_factory=list["Medium"])
    language: Language | None = None
    script: str | None = None
    status: str | None = None
    types: list[ReleaseGroupType] = field(default_factory=list["ReleaseGroupType"])
    release_date: PartialDate | None = None
    labels: list[Label] | None = None
    packaging: str | None = None
    images: list[Artwork] | None = None
    credits: str | None = None
    copyright: str | None = None
    available_in: list[CountryCode] | None = None
    excluded_from: list[CountryCode] | None = None
    info: ReleaseInfo = field(default_factory=ReleaseInfo)

    @property
    def primary_lookup(self) -> LookupParameters | None:
        """Lookup parameters of the first provider which contributed to this release."""

        if not self.info.providers:
            return None
        return self.info.providers[0].lookup

    def add_message(
        self,
        text: str,
        severity: MessageSeverity = MessageSeverity.INFO,
        *,
        provider: ProviderName | None = None,
    ) -> None:
        self.info.messages.append(ProviderMessage(text=text, severity=severity, provider=provider))
