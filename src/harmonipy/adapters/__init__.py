"""HTTP building blocks for metadata providers."""

from __future__ import annotations

from .base import HttpMetadataSource, ReleaseQuery
from .http_resilience import ResilientClient

__all__ = ["HttpMetadataSource", "ReleaseQuery", "ResilientClient"]
