"""Application entry points for release lookups.

The entry points work with any ``SourceRegistry`` of metadata providers.
Options, the primary provider and provider preferences default to the
environment configuration (see ``harmonipy.config.lookup``); without a
preferences file the registry's feature based defaults are used.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from harmonipy.config.lookup import get_lookup_config
from harmonipy.domain.errors import ReleaseLookupError
from harmonipy.domain.lookup import CombinedReleaseLookup, default_preferences
from harmonipy.domain.ports import ReleaseSpecifier

if TYPE_CHECKING:
    from harmonipy.config.lookup import LookupConfig
    from harmonipy.domain.harmonizer import ProviderPreferences
    from harmonipy.domain.lookup import SourceRegistry
    from harmonipy.domain.model import GTIN, Release
    from harmonipy.domain.ports import LookupOptions

log = getLogger(__name__)


async def get_release_by_url(
    url: str,
    *,
    registry: SourceRegistry,
    options: LookupOptions | None = None,
    config: LookupConfig | None = None,
) -> Release:
    """Look up the given URL with the first matching provider."""

    source = registry.find_by_url(url)
    if source is None:
        raise ReleaseLookupError(f"No provider supports {url}")
    effective_options = options or (config or get_lookup_config()).lookup_options()
    log.info("Looking up %s with %s", url, source.name)
    return await source.get_release(ReleaseSpecifier.by_url(url), effective_options)


async def get_merged_release_by_gtin(
    gtin: GTIN | int,
    *,
    registry: SourceRegistry,
    options: LookupOptions | None = None,
    config: LookupConfig | None = None,
) -> Release:
    """Look up the given GTIN with each provider and merge the resulting releases into one."""

    effective_config = config or get_lookup_config()
    lookup = CombinedReleaseLookup(
        registry=registry,
        gtin=gtin,
        options=options or effective_config.lookup_options(),
    )
    log.info("Looking up GTIN %s with %s", gtin, ", ".join(lookup.queued_provider_names) or "no providers")
    return await _merge(lookup, registry, effective_config)


async def get_merged_release_by_url(
    url: str,
    *,
    registry: SourceRegistry,
    options: LookupOptions | None = None,
    config: LookupConfig | None = None,
) -> Release:
    """Look up the given URL, then find the release on the other providers by GTIN and merge the results."""

    effective_config = config or get_lookup_config()
    lookup = CombinedReleaseLookup(
        registry=registry,
        urls=[url],
        options=options or effective_config.lookup_options(),
    )
    log.info("Looking up %s", url)
    return await _merge(lookup, registry, effective_config)


async def _merge(
    lookup: CombinedReleaseLookup,
    registry: SourceRegistry,
    config: LookupConfig,
) -> Release:
    preferences: ProviderPreferences = config.load_preferences() or default_preferences(registry)
    release = await lookup.get_merged_release(
        preferences,
        primary_provider=config.primary_provider,
    )
    log.info(
        "Merged release %r from %s",
        release.title,
        ", ".join(provider.name for provider in release.info.providers),
    )
    return release
