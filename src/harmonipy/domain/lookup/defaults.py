"""Default provider preferences derived from the features of the registered providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from harmonipy.domain.harmonizer import EXTERNAL_ID, ProviderPreferences, ReleaseProperty, TrackProperty
from harmonipy.domain.model import ProviderFeature

if TYPE_CHECKING:
    from .registry import SourceRegistry


def default_preferences(registry: SourceRegistry) -> ProviderPreferences:
    """Prefer the providers with the most precise durations and the largest covers.

    External IDs of region-independent providers are combined first, as their
    entity URLs are valid everywhere.
    """

    region_independent = [source.name for source in registry if not source.available_regions]
    regional = [source.name for source in registry if source.available_regions]
    return ProviderPreferences.per_property(
        {
            TrackProperty.DURATION: registry.sort_names_by_quality(
                ProviderFeature.DURATION_PRECISION
            ),
            ReleaseProperty.IMAGES: registry.sort_names_by_quality(ProviderFeature.COVER_SIZE),
            EXTERNAL_ID: [*region_independent, *regional],
        }
    )
