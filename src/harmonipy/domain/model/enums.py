"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class MessageSeverity(StrEnum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LookupMethod(StrEnum):
    """How a provider is asked for a release."""

    ID = "id"
    GTIN = "gtin"
    URL = "url"


class ProviderFeature(StrEnum):
    COVER_SIZE = "cover size"
    DURATION_PRECISION = "duration precision"
    GTIN_LOOKUP = "GTIN lookup"
    MBID_RESOLVING = "MBID resolving"


class FeatureQuality(IntEnum):
    """General quality rating of a provider feature which has no specific scale.

    ``cover size`` (median image height in pixels) and ``duration precision``
    (see ``DurationPrecision``) use their own scales.
    """

    MISSING = -20
    BAD = -10
    UNKNOWN = 0
    EXPENSIVE = 1
    PRESENT = 2
    GOOD = 3


class DurationPrecision(IntEnum):
    UNKNOWN = 0
    SECONDS = 1
    MS = 2
    US = 3


class ArtworkType(StrEnum):
    FRONT = "front"
    BACK = "back"


class LinkType(StrEnum):
    DISCOGRAPHY_PAGE = "discography page"
    FREE_DOWNLOAD = "free download"
    FREE_STREAMING = "free streaming"
    MAIL_ORDER = "mail order"
    PAID_DOWNLOAD = "paid download"
    PAID_STREAMING = "paid streaming"
