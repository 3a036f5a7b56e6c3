"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_list, optional_env_var, require_env_vars
from .errors import ConfigurationError, InvalidPreferencesError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .lookup import LookupConfig, get_lookup_config
from .preferences import PreferencesDocument, load_preferences, parse_preferences
from .storage import StorageConfig, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "InvalidPreferencesError",
    "LookupConfig",
    "MissingConfigurationError",
    "PreferencesDocument",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "get_lookup_config",
    "get_storage_config",
    "load_preferences",
    "optional_env_list",
    "optional_env_var",
    "parse_preferences",
    "require_env_vars",
]
