"""Logging setup for scripts and applications which use harmonipy."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV_VAR = "HARMONIPY_LOG_LEVEL"

# Loggers of the HTTP stack which report every request at INFO/DEBUG level.
_CHATTY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Configure the root logger with a terse format for command line output.

    Without an explicit ``level`` the ``HARMONIPY_LOG_LEVEL`` environment
    variable (a level name such as ``DEBUG``) is used, falling back to INFO.
    Pass ``force=True`` to replace handlers which were configured before.
    """

    resolved = _resolve_level(level if level is not None else os.getenv(LOG_LEVEL_ENV_VAR))
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))


def _resolve_level(level: int | str | None) -> int:
    if level is None or level == "":
        return logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelNamesMapping().get(level.strip().upper())
    if resolved is None:
        raise ValueError(f"Unknown log level: {level}")
    return resolved
