"""Location of harmonipy's cached data (HTTP response cache)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from .env import optional_env_var

if TYPE_CHECKING:
    from collections.abc import Mapping

APP_DIR_NAME: Final[str] = "harmonipy"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
DATA_DIR_ENV_VAR: Final[str] = "HARMONIPY_DATA_DIR"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    http_cache_filename: str = HTTP_CACHE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        """Path of the sqlite HTTP cache, creating the data directory unless ``ensure`` is false."""

        data_dir = self.resolve_data_dir()
        if ensure:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.http_cache_filename


def default_data_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Per-user cache directory: ``$XDG_CACHE_HOME`` (or ``%LOCALAPPDATA%``) plus the app name."""

    if os.name == "nt":
        base = optional_env_var("LOCALAPPDATA", environ)
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = optional_env_var("XDG_CACHE_HOME", environ)
        base_path = Path(base) if base else (Path.home() / ".cache")
    return base_path / APP_DIR_NAME


def get_storage_config(environ: Mapping[str, str] | None = None) -> StorageConfig:
    env_dir = optional_env_var(DATA_DIR_ENV_VAR, environ)
    data_dir = Path(env_dir) if env_dir else default_data_dir(environ)
    return StorageConfig(data_dir=data_dir)
