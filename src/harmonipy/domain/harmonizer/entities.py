"""Reconciliation of resolvable entities (artists, labels) across providers.

Merging never replaces an entity, it only combines the external IDs of
entities which are considered identical into the target entity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from harmonipy.domain.model import unique_external_ids
from harmonipy.domain.similarity import match_by_similar_name, similar_names

if TYPE_CHECKING:
    from collections.abc import Sequence

    from harmonipy.domain.model import ResolvableEntity


def merge_sorted_resolvable_entities[T: ResolvableEntity](
    target: Sequence[T],
    sources: Sequence[Sequence[T] | None],
) -> None:
    """Combine the external IDs of matching entities at the same position.

    Only source arrays with the same length as ``target`` are considered, and
    a source entity only contributes if its name is similar to the name of
    the target entity at the same index.
    """

    aligned_sources = [source for source in sources if source and len(source) == len(target)]
    for index, target_item in enumerate(target):
        groups = [target_item.external_ids]
        for source in aligned_sources:
            source_item = source[index]
            if (
                source_item.external_ids
                and source_item.name
                and target_item.name
                and similar_names(source_item.name, target_item.name)
            ):
                groups.append(source_item.external_ids)
        target_item.external_ids = unique_external_ids(*groups)


def merge_resolvable_entities[T: ResolvableEntity](
    target: Sequence[T],
    sources: Sequence[Sequence[T] | None],
) -> None:
    """Combine the external IDs of matching entities regardless of their order.

    Each target entity is matched with the first entity of similar name in
    every source array.
    """

    for target_item in target:
        groups = [target_item.external_ids]
        for source in sources:
            if not source:
                continue
            match = match_by_similar_name(target_item, source, lambda item: item.name)
            if match is not None and match.external_ids:
                groups.append(match.external_ids)
        target_item.external_ids = unique_external_ids(*groups)
