"""Provider preferences files.

A preferences file (TOML or JSON) either prefers one provider order for all
properties::

    providers = ["MusicBrainz", "Deezer"]

or gives an order per property::

    [properties]
    duration = ["Deezer", "iTunes"]
    external_id = ["MusicBrainz"]
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from harmonipy.domain.harmonizer import ProviderPreferences
from harmonipy.domain.harmonizer.properties import PREFERENCE_PROPERTIES

from .errors import InvalidPreferencesError


class PreferencesDocument(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    providers: list[str] | None = None
    properties: dict[str, list[str]] | None = None

    @field_validator("properties")
    @classmethod
    def _known_properties(cls, value: dict[str, list[str]] | None) -> dict[str, list[str]] | None:
        if value is not None:
            unknown = sorted(set(value) - PREFERENCE_PROPERTIES)
            if unknown:
                raise ValueError(f"unknown properties: {', '.join(unknown)}")
        return value

    @model_validator(mode="after")
    def _exactly_one_form(self) -> Self:
        if (self.providers is None) == (self.properties is None):
            raise ValueError("either 'providers' or 'properties' has to be given")
        return self

    def to_preferences(self) -> ProviderPreferences:
        if self.providers is not None:
            return ProviderPreferences.prefer(*self.providers)
        return ProviderPreferences.per_property(self.properties or {})


def parse_preferences(text: str, *, format: str, source: str = "<string>") -> ProviderPreferences:  # noqa: A002
    """Parse the content of a preferences file in the given format (``toml`` or ``json``)."""

    try:
        if format == "toml":
            data = tomllib.loads(text)
        elif format == "json":
            data = json.loads(text)
        else:
            raise InvalidPreferencesError(source, f"unsupported format {format!r}")
        return PreferencesDocument.model_validate(data).to_preferences()
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as error:
        raise InvalidPreferencesError(source, f"not valid {format.upper()} ({error})") from error
    except ValidationError as error:
        details = "; ".join(
            f"{'.'.join(map(str, item['loc'])) or 'document'}: {item['msg']}"
            for item in error.errors()
        )
        raise InvalidPreferencesError(source, details) from error


def load_preferences(path: str | Path) -> ProviderPreferences:
    """Load provider preferences from a ``.toml`` or ``.json`` file."""

    file_path = Path(path)
    file_format = file_path.suffix.lower().removeprefix(".")
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as error:
        raise InvalidPreferencesError(str(file_path), error.strerror or str(error)) from error
    return parse_preferences(text, format=file_format, source=str(file_path))
