"""Provider preferences for merging.

Callers either prefer one provider order for everything (a plain sequence of
provider names) or give an order per property. In the per-property form the
``media`` order doubles as the general order and ``external_id`` orders the
providers whose identifiers are combined last.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .properties import EXTERNAL_ID, PREFERENCE_PROPERTIES, ReleaseProperty

if TYPE_CHECKING:
    from harmonipy.domain.model import ProviderName

type PreferenceInput = Sequence[ProviderName] | Mapping[str, Sequence[ProviderName]]


@dataclass(frozen=True, slots=True)
class ProviderPreferences:
    """Normalized provider preferences."""

    same_provider: bool = False
    general: tuple[ProviderName, ...] = ()
    by_property: Mapping[str, tuple[ProviderName, ...]] = field(
        default_factory=dict["str", "tuple[ProviderName, ...]"]
    )

    @classmethod
    def prefer(cls, *providers: ProviderName) -> ProviderPreferences:
        """Always prefer the given provider order for all properties."""

        return cls(same_provider=True, general=tuple(providers))

    @classmethod
    def from_value(cls, value: PreferenceInput | ProviderPreferences | None) -> ProviderPreferences:
        if value is None:
            return cls()
        if isinstance(value, ProviderPreferences):
            return value
        if isinstance(value, Mapping):
            return cls.per_property(value)
        if isinstance(value, str):
            raise TypeError("Provider preferences must be a sequence of names, not a string")
        return cls.prefer(*value)

    @classmethod
    def per_property(cls, preferences: Mapping[str, Sequence[ProviderName]]) -> ProviderPreferences:
        unknown = sorted(set(preferences) - PREFERENCE_PROPERTIES)
        if unknown:
            raise ValueError(f"Unknown preference properties: {', '.join(unknown)}")
        by_property = {str(prop): tuple(order) for prop, order in preferences.items()}
        return cls(
            same_provider=False,
            general=by_property.get(ReleaseProperty.MEDIA, ()),
            by_property=by_property,
        )

    @property
    def deferred_properties(self) -> tuple[str, ...]:
        """Properties which get their own merge pass after the general one."""

        if self.same_provider:
            return ()
        return tuple(
            prop for prop in self.by_property if prop not in (ReleaseProperty.MEDIA, EXTERNAL_ID)
        )

    @property
    def external_id(self) -> tuple[ProviderName, ...]:
        return self.by_property.get(EXTERNAL_ID, ())


def order_by_preference[T](items: Sequence[T], preference: Sequence[T]) -> list[T]:
    """Sort items by the given order of preference.

    Items without a preference keep their relative order after all preferred ones.
    """

    if not preference:
        return list(items)
    rank: dict[T, int] = {}
    for index, item in enumerate(preference):
        rank.setdefault(item, index)
    unranked = len(preference)
    return sorted(items, key=lambda item: rank.get(item, unranked))
