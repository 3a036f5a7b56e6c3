"""Merge releases from different providers into one combined release.

Merging happens in three phases:

1. Copy every property which has no specific provider preference from the
   first provider (in general preference order) which has a filled value.
   Combinable data (external links, provider info, messages, release group
   types and region availability) is collected from all providers, types
   guessed from the titles are added.
2. Copy each property with its own provider preference from the first
   preferred provider which has a filled value, overwriting phase 1.
3. Combine the external IDs of artists, labels and recordings which are
   identical across providers.

The releases have to be compatible (see ``compatibility``): all media and
tracklists are assumed to be index-aligned and this is not checked again.
Source releases are never modified, the merge target is a fresh release.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import fields, is_dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from harmonipy.domain.errors import AggregateLookupError
from harmonipy.domain.model import (
    MessageSeverity,
    ProviderMessage,
    Release,
    ReleaseInfo,
    failures,
    successful_releases,
    unique_external_ids,
)
from harmonipy.domain.regions import RegionSet, combine_availability

from .entities import merge_sorted_resolvable_entities
from .preferences import ProviderPreferences, order_by_preference
from .properties import (
    IMMUTABLE_RELEASE_PROPERTIES,
    IMMUTABLE_TRACK_PROPERTIES,
    ReleaseProperty,
    TrackProperty,
    is_track_property,
)
from .release_types import guess_types_for_release, merge_types

if TYPE_CHECKING:
    from collections.abc import Sequence

    from harmonipy.domain.model import (
        ProviderName,
        ProviderReleaseMap,
        ProviderReleaseMapping,
        ReleaseGroupType,
        Track,
    )

    from .preferences import PreferenceInput

log = getLogger(__name__)


def is_filled(value: object) -> bool:
    """Check whether a value counts as provided.

    ``None``, empty strings, empty collections and value objects without any
    filled field (e.g. an empty partial date) do not count.
    """

    if value is None:
        return False
    if isinstance(value, str | list | tuple | dict | set | frozenset):
        return len(value) > 0
    if is_dataclass(value) and not isinstance(value, type):
        return any(is_filled(getattr(value, field.name)) for field in fields(value))
    return True


def merge_release(
    mapping: ProviderReleaseMapping,
    preferences: PreferenceInput | ProviderPreferences | None = None,
) -> Release:
    """Merge the releases of the given provider mapping into a single release.

    ``preferences`` is either a sequence of provider names which is preferred
    for all properties, or a mapping from property names to preferred provider
    names (see ``ProviderPreferences``).

    Raises ``AggregateLookupError`` if no provider returned a release.
    """

    prefs = ProviderPreferences.from_value(preferences)
    releases = successful_releases(mapping)
    provider_failures = failures(mapping)

    if not releases:
        raise AggregateLookupError(
            "No provider returned a release",
            [failure.error for failure in provider_failures],
        )

    merged = Release(
        info=ReleaseInfo(
            messages=[
                ProviderMessage(
                    provider=failure.provider,
                    text=str(failure.error),
                    severity=MessageSeverity.ERROR,
                )
                for failure in provider_failures
            ],
        )
    )

    providers = order_by_preference(list(releases), prefs.general)
    _merge_unpreferred_properties(merged, releases, providers, prefs)

    if prefs.same_provider:
        return merged

    _merge_preferred_properties(merged, releases, providers, prefs)
    _combine_external_ids(merged, releases, order_by_preference(providers, prefs.external_id))

    log.debug("Merged release from %s: %s", ", ".join(providers), merged.info.source_map)
    return merged


def _merge_unpreferred_properties(
    merged: Release,
    releases: ProviderReleaseMap,
    providers: Sequence[ProviderName],
    prefs: ProviderPreferences,
) -> None:
    deferred = set(prefs.deferred_properties)
    missing_release_properties = [
        prop for prop in IMMUTABLE_RELEASE_PROPERTIES if prop not in deferred
    ]
    missing_track_properties = [
        prop for prop in IMMUTABLE_TRACK_PROPERTIES if prop not in deferred
    ]
    available: RegionSet = frozenset()
    excluded: RegionSet = frozenset()
    type_lists: list[list[ReleaseGroupType]] = []

    for provider in providers:
        source = releases[provider]

        for prop in tuple(missing_release_properties):
            if _copy_release_property(merged, source, prop):
                merged.info.source_map[prop] = provider
                missing_release_properties.remove(prop)

        # Nothing happens here as long as the merged release has no media.
        if merged.media and source.media:
            for track_prop in tuple(missing_track_properties):
                if _copy_track_property(merged, source, track_prop):
                    merged.info.source_map[track_prop] = provider
                    missing_track_properties.remove(track_prop)

        merged.external_links.extend(deepcopy(source.external_links))
        merged.info.providers.extend(deepcopy(source.info.providers))
        merged.info.messages.extend(source.info.messages)
        type_lists.append(source.types)

        available, excluded = combine_availability(
            available,
            excluded,
            source.available_in or (),
            source.excluded_from or (),
        )

    # Types guessed from the titles are combined with the types of all providers.
    type_lists.append(sorted(guess_types_for_release(merged)))
    merged.types = merge_types(*type_lists)

    if available:
        merged.available_in = sorted(available)
        merged.excluded_from = sorted(excluded)


def _merge_preferred_properties(
    merged: Release,
    releases: ProviderReleaseMap,
    providers: Sequence[ProviderName],
    prefs: ProviderPreferences,
) -> None:
    # Providers without a preference for the property keep the general order.
    for prop in prefs.deferred_properties:
        for provider in order_by_preference(providers, prefs.by_property[prop]):
            source = releases[provider]
            if is_track_property(prop):
                if not source.media:
                    continue
                copied = _copy_track_property(merged, source, TrackProperty(prop))
            else:
                copied = _copy_release_property(merged, source, ReleaseProperty(prop))
            if copied:
                merged.info.source_map[prop] = provider
                break


def _combine_external_ids(
    merged: Release,
    releases: ProviderReleaseMap,
    providers: Sequence[ProviderName],
) -> None:
    sources = [releases[provider] for provider in providers]

    merge_sorted_resolvable_entities(merged.artists, [source.artists for source in sources])
    if merged.labels:
        merge_sorted_resolvable_entities(merged.labels, [source.labels for source in sources])

    for medium_index, medium in enumerate(merged.media):
        for track_index, track in enumerate(medium.tracklist):
            source_tracks = [
                source_track
                for source in sources
                if (source_track := _track_at(source, medium_index, track_index)) is not None
            ]
            if track.artists:
                merge_sorted_resolvable_entities(
                    track.artists,
                    [source_track.artists for source_track in source_tracks],
                )
            if track.recording is not None:
                track.recording.external_ids = unique_external_ids(
                    track.recording.external_ids,
                    *(
                        source_track.recording.external_ids
                        for source_track in source_tracks
                        if source_track.recording is not None
                    ),
                )


def _copy_release_property(target: Release, source: Release, prop: ReleaseProperty) -> bool:
    """Clone the property value into the target and report whether it is filled."""

    value = getattr(source, prop)
    if value is None:
        return False
    setattr(target, prop, deepcopy(value))
    return is_filled(value)


def _copy_track_property(target: Release, source: Release, prop: TrackProperty) -> bool:
    """Copy the property of all index-aligned tracks into the target tracks.

    The property counts as filled once any target track has a value. Tracks are
    not completed one by one from different providers, as that would mix data
    of several providers into one tracklist.
    """

    for target_medium, source_medium in zip(target.media, source.media, strict=False):
        for target_track, source_track in zip(
            target_medium.tracklist, source_medium.tracklist, strict=False
        ):
            value = getattr(source_track, prop)
            if value is not None:
                setattr(target_track, prop, deepcopy(value))

    return any(
        is_filled(getattr(track, prop)) for medium in target.media for track in medium.tracklist
    )


def _track_at(release: Release, medium_index: int, track_index: int) -> Track | None:
    if medium_index >= len(release.media):
        return None
    tracklist = release.media[medium_index].tracklist
    if track_index >= len(tracklist):
        return None
    return tracklist[track_index]
