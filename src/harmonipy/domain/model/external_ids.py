"""External identifiers of resolvable entities.

An ``ExternalEntityId`` names an entity as a specific provider knows it. Two
identifiers are the same when provider, type and id match; region and slug
are presentation details.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .enums import LinkType
    from .primitives import CountryCode


type ExternalIdKey = tuple[str, str, str]


@dataclass(frozen=True, slots=True)
class EntityId:
    """Identifier for an entity of the current metadata provider."""

    type: str
    id: str
    region: CountryCode | None = None
    slug: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalEntityId:
    """Identifier for an entity from a specific metadata provider."""

    provider: str
    type: str
    id: str
    region: CountryCode | None = None
    slug: str | None = None
    link_types: tuple[LinkType, ...] = field(default=(), compare=False)

    @property
    def key(self) -> ExternalIdKey:
        return (self.provider, self.type, self.id)


def unique_external_ids(*groups: Iterable[ExternalEntityId]) -> list[ExternalEntityId]:
    """Concatenate identifier groups, keeping the first occurrence of each key."""

    seen: dict[ExternalIdKey, ExternalEntityId] = {}
    for group in groups:
        for external_id in group:
            seen.setdefault(external_id.key, external_id)
    return list(seen.values())
