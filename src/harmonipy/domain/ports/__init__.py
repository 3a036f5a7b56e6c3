"""Domain port definitions for adapters."""

from __future__ import annotations

from .sources import LookupOptions, MetadataSource, ReleaseSpecifier

__all__ = ["LookupOptions", "MetadataSource", "ReleaseSpecifier"]
