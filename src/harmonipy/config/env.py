"""Environment variable readers used by the configuration loaders.

All readers accept an explicit ``environ`` mapping, ``os.environ`` is used
when it is omitted.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def optional_env_var(name: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Return the stripped value of the variable, ``None`` if it is unset or blank."""

    value = (os.environ if environ is None else environ).get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def require_env_vars(
    names: Sequence[str],
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    values = {name: optional_env_var(name, environ) for name in names}
    missing = sorted(name for name, value in values.items() if value is None)
    if missing:
        raise MissingConfigurationError(f"Missing configuration for: {', '.join(missing)}")
    return {name: value for name, value in values.items() if value is not None}


def optional_env_list(
    name: str,
    environ: Mapping[str, str] | None = None,
    *,
    upper: bool = False,
) -> tuple[str, ...]:
    """Split a comma separated environment variable into its non-blank items."""

    raw = optional_env_var(name, environ)
    if raw is None:
        return ()
    items = (item.strip() for item in raw.split(","))
    return tuple(item.upper() if upper else item for item in items if item)
