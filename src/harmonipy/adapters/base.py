"""Base class for metadata providers which look up releases from a web API.

A concrete provider declares its hosts, a URL path pattern and its features,
then implements how API URLs are built and how validated payloads are
converted into a ``Release``::

    class ExampleSource(HttpMetadataSource[ExamplePayload]):
        name = "Example"
        supported_hosts = frozenset({"example.com"})
        url_pattern = re.compile(r"/(?P<type>album|artist)/(?P<id>\\d+)")
        release_types = frozenset({"album"})
        payload_model = ExamplePayload

The path pattern has to contain the named groups ``type`` and ``id``; the
optional groups ``region`` and ``slug`` are extracted as well.
"""

from __future__ import annotations

import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ValidationError

from harmonipy.domain.errors import SourceError, TransportError
from harmonipy.domain.model import (
    EntityId,
    ExternalEntityId,
    FeatureQuality,
    LookupMethod,
    LookupParameters,
    MessageSeverity,
    ProviderInfo,
    ProviderMessage,
    ReleaseInfo,
)
from harmonipy.domain.similarity import simplify_name

from .http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from harmonipy.config.http_resilience import ResilienceConfig
    from harmonipy.domain.model import CountryCode, LinkType, ProviderFeature, Release
    from harmonipy.domain.ports import LookupOptions, ReleaseSpecifier

log = getLogger(__name__)

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


@dataclass(slots=True, kw_only=True)
class ReleaseQuery:
    """State of a single release lookup of one provider."""

    lookup: LookupParameters
    options: LookupOptions
    client: ResilientClient
    entity: EntityId | None = None
    cache_time: float | None = None
    messages: list[ProviderMessage] = field(default_factory=list["ProviderMessage"])

    def update_cache_time(self, timestamp: float) -> None:
        if self.cache_time is None or timestamp > self.cache_time:
            self.cache_time = timestamp


class HttpMetadataSource[Payload: BaseModel](ABC):
    """Metadata provider which loads raw releases from a JSON web API."""

    name: ClassVar[str]
    supported_hosts: ClassVar[frozenset[str]]
    url_pattern: ClassVar[re.Pattern[str]]
    release_types: ClassVar[frozenset[str]]
    payload_model: ClassVar[type[BaseModel]]
    features: ClassVar[Mapping[ProviderFeature, int]] = {}
    available_regions: ClassVar[frozenset[CountryCode] | None] = None

    def __init__(
        self,
        *,
        config: ResilienceConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient

    @property
    def internal_name(self) -> str:
        return simplify_name(self.name)

    def supports_domain(self, url: str) -> bool:
        host = (urlsplit(url).hostname or "").lower()
        return any(host == domain or host.endswith(f".{domain}") for domain in self.supported_hosts)

    def extract_entity_from_url(self, url: str) -> EntityId | None:
        """Extract the entity type and ID (and optionally region and slug) from a supported URL."""

        if not self.supports_domain(url):
            return None
        match = self.url_pattern.fullmatch(urlsplit(url).path)
        if match is None:
            return None
        groups = match.groupdict()
        entity_type, entity_id = groups.get("type"), groups.get("id")
        if not entity_type or not entity_id:
            return None
        region = groups.get("region")
        return EntityId(
            type=entity_type,
            id=entity_id,
            region=region.upper() if region else None,
            slug=groups.get("slug") or None,
        )

    def get_quality(self, feature: ProviderFeature) -> int:
        return self.features.get(feature, FeatureQuality.UNKNOWN)

    def make_external_ids(
        self,
        *entity_ids: EntityId,
        link_types: tuple[LinkType, ...] = (),
    ) -> list[ExternalEntityId]:
        return [
            ExternalEntityId(
                provider=self.internal_name,
                type=entity_id.type,
                id=entity_id.id,
                region=entity_id.region,
                slug=entity_id.slug,
                link_types=link_types,
            )
            for entity_id in entity_ids
        ]

    def make_external_ids_from_url(
        self,
        url: str,
        *,
        link_types: tuple[LinkType, ...] = (),
    ) -> list[ExternalEntityId]:
        entity_id = self.extract_entity_from_url(url)
        return self.make_external_ids(entity_id, link_types=link_types) if entity_id else []

    @abstractmethod
    def construct_url(self, entity: EntityId | ExternalEntityId) -> str:
        """Construct the canonical URL of the given provider entity."""

    @abstractmethod
    def construct_release_api_url(self, query: ReleaseQuery) -> str:
        """Construct the API URL for the current lookup parameters (including region)."""

    @abstractmethod
    def convert_raw_release(self, payload: Payload, query: ReleaseQuery) -> Release:
        """Convert the validated API payload into a release."""

    async def get_raw_release(self, query: ReleaseQuery) -> Payload:
        """Load the raw release, trying all regions of the lookup options by default."""

        return await self.query_all_regions(query)

    async def get_release(self, specifier: ReleaseSpecifier, options: LookupOptions) -> Release:
        start = time.perf_counter()
        async with self._client_factory(self._config) as client:
            query = self._prepare_query(specifier, options, client)
            payload = await self.get_raw_release(query)
            release = self.convert_raw_release(payload, query)

        self._with_excluded_regions(release)
        elapsed_ms = (time.perf_counter() - start) * 1000
        for provider_info in release.info.providers:
            provider_info.processing_time = elapsed_ms
        return release

    async def query(self, query: ReleaseQuery, url: str) -> Payload:
        """Request the given API URL and validate its JSON payload."""

        try:
            response = await query.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as error:
            raise TransportError(
                self.name, f"API returned HTTP {error.response.status_code}", url=url
            ) from error
        except httpx.HTTPError as error:
            raise TransportError(self.name, f"API request failed ({error})", url=url) from error

        try:
            payload = response.json()
        except ValueError as error:
            raise TransportError(self.name, "API returned invalid JSON", url=url) from error

        query.update_cache_time(time.time())
        try:
            return self.payload_model.model_validate(payload)  # type: ignore[return-value]
        except ValidationError as error:
            log.debug("%s payload validation failed: %s", self.name, error)
            raise TransportError(self.name, "API returned an unexpected payload", url=url) from error

    async def query_all_regions(
        self,
        query: ReleaseQuery,
        *,
        is_valid: Callable[[Payload], bool] = lambda _: True,
        is_critical_error: Callable[[Exception], bool] = lambda _: True,
    ) -> Payload:
        """Query the release API URL for each region of the options until valid data is returned.

        Without regions the URL is queried once. Errors for which
        ``is_critical_error`` returns false are ignored and the next region is tried.
        """

        regions: tuple[CountryCode | None, ...] = query.options.regions or (None,)
        for region in regions:
            if region is not None:
                query.lookup = replace(query.lookup, region=region)
            url = self.construct_release_api_url(query)
            try:
                payload = await self.query(query, url)
            except Exception as error:
                if is_critical_error(error):
                    raise
                log.debug("%s lookup in region %s failed: %s", self.name, region, error)
                continue
            if is_valid(payload):
                return payload

        raise TransportError(
            self.name, "API returned no results", url=self.construct_release_api_url(query)
        )

    def add_message(
        self,
        query: ReleaseQuery,
        text: str,
        severity: MessageSeverity = MessageSeverity.INFO,
    ) -> None:
        query.messages.append(ProviderMessage(text=text, severity=severity, provider=self.name))

    def release_info(self, query: ReleaseQuery, *, api_url: str | None = None) -> ReleaseInfo:
        """Generate the info of a release which was converted from a provider payload."""

        if query.entity is None:
            raise SourceError(self.name, "Release info can only be generated with a defined entity ID")
        return ReleaseInfo(
            providers=[
                ProviderInfo(
                    name=self.name,
                    internal_name=self.internal_name,
                    id=query.entity.id,
                    url=self.construct_url(query.entity),
                    api_url=api_url,
                    lookup=query.lookup,
                    cache_time=query.cache_time,
                )
            ],
            messages=list(query.messages),
        )

    def _prepare_query(
        self,
        specifier: ReleaseSpecifier,
        options: LookupOptions,
        client: ResilientClient,
    ) -> ReleaseQuery:
        # Only regions in which the provider offers its services are useful.
        if self.available_regions and options.regions:
            options = options.with_regions(
                region for region in options.regions if region in self.available_regions
            )

        entity: EntityId | None = None
        if specifier.method is LookupMethod.URL:
            entity = self.extract_entity_from_url(specifier.value)
            if entity is None:
                raise SourceError(self.name, f"Could not extract entity from {specifier.value}")
            if entity.type not in self.release_types:
                raise SourceError(self.name, f"{specifier.value} is not a release URL")
            lookup = LookupParameters(method=LookupMethod.ID, value=entity.id, region=entity.region)
            # The region of the release URL is preferred over the standard preferences.
            if entity.region:
                options = options.with_regions([entity.region])
        else:
            lookup = LookupParameters(method=specifier.method, value=specifier.value)
            if specifier.method is LookupMethod.ID:
                entity = self.parse_provider_id(specifier.value)

        return ReleaseQuery(lookup=lookup, options=options, client=client, entity=entity)

    def parse_provider_id(self, provider_id: str) -> EntityId:
        """Map a release ID to the provider entity, override if there are several release types."""

        if len(self.release_types) != 1:
            raise SourceError(
                self.name,
                "Unable to parse provider ID as the provider supports multiple release types",
            )
        (release_type,) = self.release_types
        return EntityId(type=release_type, id=provider_id)

    def _with_excluded_regions(self, release: Release) -> None:
        if not self.available_regions or release.available_in is None:
            return
        available = set(release.available_in)
        release.excluded_from = sorted(self.available_regions - available)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

