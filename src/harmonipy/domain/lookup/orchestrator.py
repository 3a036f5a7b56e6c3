"""Combined release lookup across several metadata providers.

A combined lookup accepts a GTIN, provider IDs and provider URLs. Each
provider is used at most once: IDs are queued before URLs and all remaining
providers are used for GTIN lookups. If no GTIN was given, the GTIN which
the first round of lookups returned is used for a second round.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from harmonipy.domain.errors import AggregateLookupError, ReleaseLookupError
from harmonipy.domain.gtin import InvalidGTINError, ensure_valid_gtin, is_equal_gtin
from harmonipy.domain.harmonizer import (
    detect_language_and_script,
    merge_release,
    resolve_incompatibilities,
)
from harmonipy.domain.model import (
    WORLDWIDE,
    FeatureQuality,
    MessageSeverity,
    ProviderFeature,
    ProviderMessage,
    ReleaseFound,
    SourceFailure,
    successful_releases,
)
from harmonipy.domain.ports import LookupOptions, ReleaseSpecifier

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from harmonipy.domain.harmonizer import IncompatibilityInfo, ProviderPreferences
    from harmonipy.domain.harmonizer.preferences import PreferenceInput
    from harmonipy.domain.model import (
        GTIN,
        CountryCode,
        ProviderName,
        ProviderReleaseMapping,
        Release,
        SourceResult,
    )
    from harmonipy.domain.ports import MetadataSource

    from .registry import SourceRegistry

log = getLogger(__name__)

type QueuedLookup = tuple[MetadataSource, ReleaseSpecifier, LookupOptions]


class CombinedReleaseLookup:
    """Look up one release from several providers and merge the results.

    All lookups which are queued until ``get_mapping`` is awaited run
    concurrently; the failure of one provider is recorded for that provider
    only. Results are cached, awaiting the mapping again without queuing new
    lookups does not contact any provider.
    """

    def __init__(
        self,
        *,
        registry: SourceRegistry,
        gtin: GTIN | int | None = None,
        provider_ids: Iterable[tuple[str, str]] = (),
        urls: Iterable[str] = (),
        options: LookupOptions | None = None,
    ) -> None:
        self._registry = registry
        self._options = options or LookupOptions()
        self._gtin: str | None = None
        self._pending: list[QueuedLookup] = []
        self._queued_provider_names: list[ProviderName] = []
        self._mapping: ProviderReleaseMapping | None = None
        self._gtin_round_checked = False

        self.messages: list[ProviderMessage] = []
        """Messages of the combined lookup process itself."""

        self.incompatibilities: tuple[IncompatibilityInfo, ...] = ()
        """Incompatibilities which were resolved during the last merge."""

        self._gtin_lookup_providers = self._initial_gtin_lookup_providers()

        for provider_name, provider_id in provider_ids:
            self.queue_by_id(provider_name, provider_id)
        for url in urls:
            self.queue_by_url(url)
        if gtin is not None and self._gtin_lookup_providers:
            self.queue_by_gtin(gtin)

    @property
    def gtin(self) -> str | None:
        return self._gtin

    @property
    def options(self) -> LookupOptions:
        return self._options

    @property
    def queued_provider_names(self) -> tuple[ProviderName, ...]:
        return tuple(self._queued_provider_names)

    def queue_by_id(self, provider_name: str, provider_id: str) -> bool:
        """Queue a lookup by provider ID, return whether it was accepted."""

        source = self._registry.find_by_name(provider_name)
        if source is None:
            self._add_message(f'There is no provider with the name "{provider_name}"')
            return False
        return self._queue(source, ReleaseSpecifier.by_id(provider_id), f"ID '{provider_id}'")

    def queue_by_url(self, url: str) -> bool:
        """Queue a lookup by provider URL, return whether it was accepted."""

        source = self._registry.find_by_url(url)
        if source is None:
            self._add_message(f"No provider supports {url}")
            return False
        return self._queue(source, ReleaseSpecifier.by_url(url), url)

    def queue_by_gtin(self, gtin: GTIN | int) -> bool:
        """Queue GTIN lookups for all remaining providers, return whether the GTIN was accepted."""

        code = str(gtin)
        # Once the GTIN is set, trying to change it is considered an error.
        if self._gtin is not None:
            if is_equal_gtin(code, self._gtin):
                return True
            self._add_message(
                f"Different GTIN '{code}' can not be combined with the current lookup"
            )
            return False

        try:
            ensure_valid_gtin(code)
        except InvalidGTINError as error:
            self._add_message(str(error))
            return False
        self._gtin = code

        for internal_name in tuple(self._gtin_lookup_providers):
            source = self._registry.find_by_name(internal_name)
            if source is None:
                continue
            if not _supports_gtin_lookup(source):
                self._gtin_lookup_providers.pop(internal_name, None)
                self._add_message(
                    f"GTIN lookups are not supported by {source.name}, skipping it",
                    MessageSeverity.INFO,
                )
                continue
            self._queue(source, ReleaseSpecifier.by_gtin(code), f"GTIN {code}")
        return True

    async def get_mapping(self) -> ProviderReleaseMapping:
        """Finalize all queued lookups and return the provider release mapping.

        Raises ``ReleaseLookupError`` (or ``AggregateLookupError``) if no lookup
        was queued at all.
        """

        if self._pending:
            batch, self._pending = self._pending, []
            names = ", ".join(source.name for source, _, _ in batch)
            log.debug("Looking up release with %s", names)
            results = await asyncio.gather(
                *(_settle(source, specifier, options) for source, specifier, options in batch)
            )
            mapping = dict(self._mapping or {})
            mapping.update((result.provider, result) for result in results)
            self._mapping = mapping

        if self._mapping is None:
            raise self._nothing_queued_error()
        return dict(self._mapping)

    async def get_complete_mapping(self) -> ProviderReleaseMapping:
        """Ensure that all requested providers have been used and return the mapping.

        Providers which could only be used with a GTIN are looked up in a second
        round if the first round returned exactly one GTIN.
        """

        mapping = await self.get_mapping()
        if self._gtin is not None or self._gtin_round_checked:
            return mapping
        self._gtin_round_checked = True

        remaining = self._remaining_gtin_providers()
        if not remaining:
            return mapping

        releases = list(successful_releases(mapping).values())
        regions = self._regions_for_gtin_lookups(releases)
        if regions:
            self._options = self._options.with_regions(regions)

        candidates = [release.gtin for release in releases if release.gtin]
        unique_gtins = {_gtin_identity(candidate) for candidate in candidates}
        if len(unique_gtins) == 1:
            if self.queue_by_gtin(candidates[0]):
                mapping = await self.get_mapping()
        elif not unique_gtins:
            self._add_message(
                "GTIN is unknown, lookups for the following providers were skipped: "
                + ", ".join(source.name for source in remaining),
                MessageSeverity.INFO,
            )
        else:
            # The merge will run into the same conflict, the compatibility check decides.
            self._add_message(
                f"Providers have returned multiple different GTIN: {', '.join(candidates)}"
            )
        return mapping

    async def get_merged_release(
        self,
        preferences: PreferenceInput | ProviderPreferences | None = None,
        *,
        primary_provider: str | None = None,
    ) -> Release:
        """Look up the release from all requested providers and merge the results.

        Script and language of the merged release are detected from its titles
        unless a provider has returned them.

        Raises ``UnresolvedConflict`` if the releases are incompatible and the
        ``primary_provider`` can not decide which ones to keep, and
        ``AggregateLookupError`` if no provider returned a release.
        """

        mapping = await self.get_complete_mapping()
        primary = self._registry.to_display_name(primary_provider) if primary_provider else None
        merge_messages: list[ProviderMessage] = []
        if primary_provider and primary is None:
            merge_messages.append(
                ProviderMessage(
                    text=f'There is no provider with the name "{primary_provider}"',
                    severity=MessageSeverity.WARNING,
                )
            )

        compatibility = resolve_incompatibilities(mapping, primary_provider=primary)
        self.incompatibilities = compatibility.incompatibilities
        release = merge_release(compatibility.mapping, preferences)

        # Messages of the combined lookup come first.
        release.info.messages[:0] = [
            *self.messages,
            *merge_messages,
            *(incompatibility.to_message() for incompatibility in self.incompatibilities),
        ]
        detect_language_and_script(release)
        return release

    def _queue(self, source: MetadataSource, specifier: ReleaseSpecifier, description: str) -> bool:
        if source.name in self._queued_provider_names:
            self._add_message(
                f"Provider {source.name} can only be used once per lookup, ignoring {description}",
                MessageSeverity.WARNING,
            )
            return False
        self._pending.append((source, specifier, self._options))
        self._queued_provider_names.append(source.name)
        self._gtin_lookup_providers.pop(source.internal_name, None)
        self._gtin_round_checked = False
        log.debug("Queued %s lookup by %s", source.name, description)
        return True

    def _initial_gtin_lookup_providers(self) -> dict[str, None]:
        requested = self._options.providers
        if requested is None:
            return dict.fromkeys(self._registry.internal_names)
        providers: dict[str, None] = {}
        for name in sorted(requested):
            internal_name = self._registry.to_internal_name(name)
            if internal_name is None:
                self._add_message(f'There is no provider with the name "{name}"')
                continue
            providers[internal_name] = None
        return providers

    def _remaining_gtin_providers(self) -> list[MetadataSource]:
        remaining: list[MetadataSource] = []
        for internal_name in self._gtin_lookup_providers:
            source = self._registry.find_by_name(internal_name)
            if source is not None and _supports_gtin_lookup(source):
                remaining.append(source)
        return remaining

    def _regions_for_gtin_lookups(self, releases: Sequence[Release]) -> list[CountryCode]:
        """Prefer regions of the completed lookups over the standard preferences."""

        used_regions = [
            release.primary_lookup.region
            for release in releases
            if release.primary_lookup is not None and release.primary_lookup.region
        ]
        if used_regions:
            return used_regions

        available = {region for release in releases for region in release.available_in or ()}
        available.discard(WORLDWIDE)
        if not available:
            return []
        preferred = [region for region in self._options.regions if region in available]
        return preferred or sorted(available)

    def _nothing_queued_error(self) -> ReleaseLookupError:
        errors = [message for message in self.messages if message.severity is MessageSeverity.ERROR]
        if len(errors) == 1:
            return ReleaseLookupError(errors[0].text)
        if errors:
            return AggregateLookupError(
                "No release lookup could be queued",
                [ReleaseLookupError(message.text) for message in errors],
            )
        return ReleaseLookupError("No release lookups have been queued")

    def _add_message(self, text: str, severity: MessageSeverity = MessageSeverity.ERROR) -> None:
        self.messages.append(ProviderMessage(text=text, severity=severity))


def _supports_gtin_lookup(source: MetadataSource) -> bool:
    return source.get_quality(ProviderFeature.GTIN_LOOKUP) > FeatureQuality.MISSING


def _gtin_identity(gtin: GTIN) -> int | str:
    return int(gtin) if gtin.isdigit() else gtin


async def _settle(
    source: MetadataSource,
    specifier: ReleaseSpecifier,
    options: LookupOptions,
) -> SourceResult:
    try:
        release = await source.get_release(specifier, options)
    except ReleaseLookupError as error:
        # Our own errors, no need for a stack trace.
        log.warning("%s: %s", source.name, error)
        return SourceFailure(provider=source.name, error=error)
    except Exception as error:  # noqa: BLE001
        log.exception("Unexpected error during %s lookup", source.name)
        return SourceFailure(provider=source.name, error=error)
    return ReleaseFound(provider=source.name, release=release)
