"""Errors raised while loading harmonipy configuration."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A configuration value or file could not be used."""


class MissingConfigurationError(ConfigurationError):
    """Required environment variables are absent or blank."""


class InvalidPreferencesError(ConfigurationError):
    """A provider preferences file is unreadable or does not match its schema."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid provider preferences in {path}: {reason}")
        self.path = path
