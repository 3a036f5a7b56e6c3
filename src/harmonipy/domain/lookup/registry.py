"""Registry of the metadata providers which are available for lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from harmonipy.domain.model import ExternalEntityId, ProviderFeature
    from harmonipy.domain.ports import MetadataSource


class SourceRegistry:
    """Look up registered providers by display name, internal name or URL."""

    def __init__(self, sources: Iterable[MetadataSource] = ()) -> None:
        self._sources: list[MetadataSource] = []
        self._by_internal_name: dict[str, MetadataSource] = {}
        self._display_to_internal: dict[str, str] = {}
        for source in sources:
            self.add(source)

    def add(self, source: MetadataSource) -> None:
        if source.name in self._display_to_internal:
            raise ValueError(f'Provider names have to be unique, "{source.name}" already exists')
        if source.internal_name in self._by_internal_name:
            raise ValueError(
                f'Internal provider names have to be unique, "{source.internal_name}" already exists'
            )
        self._sources.append(source)
        self._by_internal_name[source.internal_name] = source
        self._display_to_internal[source.name] = source.internal_name

    def __iter__(self) -> Iterator[MetadataSource]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    @property
    def display_names(self) -> list[str]:
        return [source.name for source in self._sources]

    @property
    def internal_names(self) -> list[str]:
        return [source.internal_name for source in self._sources]

    def find_by_name(self, name: str) -> MetadataSource | None:
        """Find a provider by its internal name or display name."""

        internal_name = self.to_internal_name(name)
        return self._by_internal_name.get(internal_name) if internal_name else None

    def find_by_url(self, url: str) -> MetadataSource | None:
        """Find the first provider which supports the domain of the given URL."""

        return next((source for source in self._sources if source.supports_domain(url)), None)

    def to_display_name(self, name: str) -> str | None:
        if name in self._display_to_internal:
            return name
        source = self._by_internal_name.get(name)
        return source.name if source else None

    def to_internal_name(self, name: str) -> str | None:
        if name in self._by_internal_name:
            return name
        return self._display_to_internal.get(name)

    def sort_names_by_quality(self, feature: ProviderFeature) -> list[str]:
        """Return provider display names sorted by their quality of the given feature (best first)."""

        ranked = sorted(self._sources, key=lambda source: source.get_quality(feature), reverse=True)
        return [source.name for source in ranked]

    def construct_entity_url(self, entity_id: ExternalEntityId) -> str:
        source = self.find_by_name(entity_id.provider)
        if source is None:
            raise ValueError(f'There is no provider with the name "{entity_id.provider}"')
        return source.construct_url(entity_id)
