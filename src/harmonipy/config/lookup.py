"""Defaults for combined release lookups, read from the environment."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from harmonipy.domain.ports import LookupOptions
from harmonipy.domain.regions import is_country_code

from .env import optional_env_list, optional_env_var
from .errors import ConfigurationError
from .preferences import load_preferences

if TYPE_CHECKING:
    from collections.abc import Mapping

    from harmonipy.domain.harmonizer import ProviderPreferences

REGIONS_ENV_VAR: Final[str] = "HARMONIPY_REGIONS"
PROVIDERS_ENV_VAR: Final[str] = "HARMONIPY_PROVIDERS"
PRIMARY_PROVIDER_ENV_VAR: Final[str] = "HARMONIPY_PRIMARY_PROVIDER"
PREFERENCES_FILE_ENV_VAR: Final[str] = "HARMONIPY_PREFERENCES_FILE"


@dataclass(frozen=True, slots=True)
class LookupConfig:
    regions: tuple[str, ...] = ()
    providers: frozenset[str] | None = None
    primary_provider: str | None = None
    preferences_file: Path | None = None

    def lookup_options(self) -> LookupOptions:
        return LookupOptions(regions=self.regions, providers=self.providers)

    def load_preferences(self) -> ProviderPreferences | None:
        """Provider preferences from the configured file, ``None`` if there is none."""

        if self.preferences_file is None:
            return None
        return load_preferences(self.preferences_file)


def get_lookup_config(environ: Mapping[str, str] | None = None) -> LookupConfig:
    regions = optional_env_list(REGIONS_ENV_VAR, environ, upper=True)
    invalid = [region for region in regions if not is_country_code(region)]
    if invalid:
        raise ConfigurationError(
            f"{REGIONS_ENV_VAR} contains invalid country codes: {', '.join(invalid)}"
        )

    providers = optional_env_list(PROVIDERS_ENV_VAR, environ)
    preferences_file = optional_env_var(PREFERENCES_FILE_ENV_VAR, environ)
    return LookupConfig(
        regions=tuple(dict.fromkeys(regions)),
        providers=frozenset(providers) if providers else None,
        primary_provider=optional_env_var(PRIMARY_PROVIDER_ENV_VAR, environ),
        preferences_file=Path(preferences_file).expanduser() if preferences_file else None,
    )
