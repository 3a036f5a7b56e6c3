"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

from dataclasses import dataclass

type CountryCode = str
type GTIN = str
type ProviderName = str
type DurationMs = int
type ReleaseGroupType = str

WORLDWIDE: CountryCode = "XW"
"""Special region code for worldwide availability, not usable for regional lookups."""


@dataclass(frozen=True, slots=True)
class PartialDate:
    year: int | None = None
    month: int | None = None
    day: int | None = None

    def __bool__(self) -> bool:
        return any(part is not None for part in (self.year, self.month, self.day))

    def __str__(self) -> str:
        parts = [f"{self.year:04d}" if self.year is not None else "????"]
        if self.month is not None:
            parts.append(f"{self.month:02d}")
            if self.day is not None:
                parts.append(f"{self.day:02d}")
        return "-".join(parts)


@dataclass(frozen=True, slots=True)
class Language:
    """ISO 639 language code with an optional detection confidence."""

    code: str
    confidence: float | None = None
