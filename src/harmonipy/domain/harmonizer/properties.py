"""Release and track properties and how the harmonizer combines them.

The strategy table is the single source of truth: which properties are taken
from exactly one provider and which collect contributions of every provider.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class MergeStrategy(StrEnum):
    FIRST_FILLED = "first_filled"
    """Take the value of the first (preferred) provider which has one."""

    UNION = "union"
    """Keep the contributions of all providers side by side."""


class ReleaseProperty(StrEnum):
    """Release attribute names, values match ``Release`` field names."""

    TITLE = "title"
    ARTISTS = "artists"
    GTIN = "gtin"
    MEDIA = "media"
    LANGUAGE = "language"
    SCRIPT = "script"
    STATUS = "status"
    TYPES = "types"
    RELEASE_DATE = "release_date"
    LABELS = "labels"
    PACKAGING = "packaging"
    IMAGES = "images"
    COPYRIGHT = "copyright"
    CREDITS = "credits"
    EXTERNAL_LINKS = "external_links"
    AVAILABLE_IN = "available_in"
    EXCLUDED_FROM = "excluded_from"
    INFO = "info"


class TrackProperty(StrEnum):
    """Track attribute names, values match ``Track`` field names."""

    ISRC = "isrc"
    DURATION = "duration"
    RECORDING = "recording"


EXTERNAL_ID: Final = "external_id"
"""Preference key for the provider order used when combining external IDs."""

RELEASE_STRATEGIES: Final[dict[ReleaseProperty, MergeStrategy]] = {
    ReleaseProperty.TITLE: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.ARTISTS: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.GTIN: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.MEDIA: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.LANGUAGE: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.SCRIPT: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.STATUS: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.TYPES: MergeStrategy.UNION,
    ReleaseProperty.RELEASE_DATE: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.LABELS: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.PACKAGING: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.IMAGES: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.COPYRIGHT: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.CREDITS: MergeStrategy.FIRST_FILLED,
    ReleaseProperty.EXTERNAL_LINKS: MergeStrategy.UNION,
    ReleaseProperty.AVAILABLE_IN: MergeStrategy.UNION,
    ReleaseProperty.EXCLUDED_FROM: MergeStrategy.UNION,
    ReleaseProperty.INFO: MergeStrategy.UNION,
}

TRACK_STRATEGIES: Final[dict[TrackProperty, MergeStrategy]] = {
    TrackProperty.ISRC: MergeStrategy.FIRST_FILLED,
    TrackProperty.DURATION: MergeStrategy.FIRST_FILLED,
    TrackProperty.RECORDING: MergeStrategy.FIRST_FILLED,
}

IMMUTABLE_RELEASE_PROPERTIES: Final[tuple[ReleaseProperty, ...]] = tuple(
    prop for prop, strategy in RELEASE_STRATEGIES.items() if strategy is MergeStrategy.FIRST_FILLED
)
COMBINABLE_RELEASE_PROPERTIES: Final[tuple[ReleaseProperty, ...]] = tuple(
    prop for prop, strategy in RELEASE_STRATEGIES.items() if strategy is MergeStrategy.UNION
)
IMMUTABLE_TRACK_PROPERTIES: Final[tuple[TrackProperty, ...]] = tuple(
    prop for prop, strategy in TRACK_STRATEGIES.items() if strategy is MergeStrategy.FIRST_FILLED
)

type PreferenceProperty = ReleaseProperty | TrackProperty | str

PREFERENCE_PROPERTIES: Final[frozenset[str]] = frozenset(
    {*IMMUTABLE_RELEASE_PROPERTIES, *IMMUTABLE_TRACK_PROPERTIES, EXTERNAL_ID}
)


def is_track_property(name: str) -> bool:
    return name in TRACK_STRATEGIES
