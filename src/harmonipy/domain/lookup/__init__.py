"""Combined release lookups over the registered metadata providers."""

from __future__ import annotations

from .defaults import default_preferences
from .orchestrator import CombinedReleaseLookup
from .registry import SourceRegistry

__all__ = ["CombinedReleaseLookup", "SourceRegistry", "default_preferences"]
