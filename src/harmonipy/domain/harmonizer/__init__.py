"""Harmonization of provider releases into one combined release.

Flow:
1) ``compatibility.resolve_incompatibilities`` removes releases which can not
   be merged with the release of the primary provider
2) ``merge.merge_release`` combines the remaining releases by preference
3) ``entities`` reconciles artists/labels by name to combine their IDs
4) ``language_script`` guesses script and language of the merged release
"""

from __future__ import annotations

from .compatibility import (
    CompatibilityResult,
    IncompatibilityInfo,
    IncompatibleCluster,
    assert_release_compatibility,
    resolve_incompatibilities,
)
from .entities import merge_resolvable_entities, merge_sorted_resolvable_entities
from .language_script import ScriptFrequency, detect_language_and_script, detect_scripts
from .merge import is_filled, merge_release
from .preferences import ProviderPreferences, order_by_preference
from .properties import (
    COMBINABLE_RELEASE_PROPERTIES,
    EXTERNAL_ID,
    IMMUTABLE_RELEASE_PROPERTIES,
    IMMUTABLE_TRACK_PROPERTIES,
    MergeStrategy,
    ReleaseProperty,
    TrackProperty,
)
from .release_types import guess_types_for_release, guess_types_from_title, merge_types
from .tracklist import track_count_summary

__all__ = [
    "COMBINABLE_RELEASE_PROPERTIES",
    "EXTERNAL_ID",
    "IMMUTABLE_RELEASE_PROPERTIES",
    "IMMUTABLE_TRACK_PROPERTIES",
    "CompatibilityResult",
    "IncompatibilityInfo",
    "IncompatibleCluster",
    "MergeStrategy",
    "ProviderPreferences",
    "ReleaseProperty",
    "ScriptFrequency",
    "TrackProperty",
    "assert_release_compatibility",
    "detect_language_and_script",
    "detect_scripts",
    "guess_types_for_release",
    "guess_types_from_title",
    "is_filled",
    "merge_release",
    "merge_resolvable_entities",
    "merge_types",
    "merge_sorted_resolvable_entities",
    "order_by_preference",
    "resolve_incompatibilities",
    "track_count_summary",
]
