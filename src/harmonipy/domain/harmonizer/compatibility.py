"""Compatibility checks which guard the merge of provider releases.

Releases can only be merged if the providers agree on the GTIN and on the
shape of the tracklist (track count per medium). When they disagree, the
providers are clustered by their divergent value and every cluster which
does not contain the primary provider is excluded from the merge.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from harmonipy.domain.errors import CompatibilityConflict, UnresolvedConflict
from harmonipy.domain.gtin import gtin_value
from harmonipy.domain.model import MessageSeverity, ProviderMessage, successful_releases

from .tracklist import track_count_summary

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from harmonipy.domain.model import (
        ProviderInfo,
        ProviderName,
        ProviderReleaseMap,
        ProviderReleaseMapping,
        Release,
    )

log = getLogger(__name__)

GTIN_MISMATCH: Final = "Providers have returned multiple different GTIN"
TRACKLIST_MISMATCH: Final = "Providers have returned incompatible track lists"


@dataclass(frozen=True, slots=True, kw_only=True)
class IncompatibleCluster:
    """Providers which share one value that diverges from the accepted one."""

    value: str
    providers: tuple[ProviderName, ...]
    provider_info: tuple[ProviderInfo, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class IncompatibilityInfo:
    reason: str
    accepted_value: str | None
    clusters: tuple[IncompatibleCluster, ...]

    @property
    def excluded_providers(self) -> tuple[ProviderName, ...]:
        return tuple(provider for cluster in self.clusters for provider in cluster.providers)

    def to_message(self) -> ProviderMessage:
        excluded = "; ".join(
            f"{cluster.value} ({', '.join(cluster.providers)})" for cluster in self.clusters
        )
        return ProviderMessage(
            text=f"{self.reason}, using {self.accepted_value} and skipping {excluded}",
            severity=MessageSeverity.WARNING,
        )


@dataclass(frozen=True, slots=True)
class CompatibilityResult:
    """Provider mapping without incompatible releases and the reasons for their removal."""

    mapping: ProviderReleaseMapping
    incompatibilities: tuple[IncompatibilityInfo, ...] = ()


type ValueAccessor = Callable[[Release], str | None]
type ValuesAndSources = list[tuple[str, list[ProviderName]]]


def _gtin_identifier(release: Release) -> str | None:
    if not release.gtin:
        return None
    try:
        return str(gtin_value(release.gtin))
    except ValueError:
        return release.gtin


def _gtin_display(release: Release) -> str | None:
    return release.gtin or None


_CHECKS: Final[tuple[tuple[str, ValueAccessor, ValueAccessor], ...]] = (
    (GTIN_MISMATCH, _gtin_identifier, _gtin_display),
    (TRACKLIST_MISMATCH, track_count_summary, track_count_summary),
)
_DISPLAYS: Final[dict[str, ValueAccessor]] = {reason: display for reason, _, display in _CHECKS}


def unique_mapped_values(
    releases: Mapping[ProviderName, Release],
    identify: ValueAccessor,
    display: ValueAccessor | None = None,
) -> ValuesAndSources:
    """Return pairs of unique values and the providers which have this value.

    Values are grouped by ``identify``; the displayed value of a group is the
    ``display`` value of its first provider. Releases without a value are skipped.
    """

    groups: dict[str, tuple[str, list[ProviderName]]] = {}
    for provider, release in releases.items():
        identifier = identify(release)
        if identifier is None:
            continue
        if identifier in groups:
            groups[identifier][1].append(provider)
        else:
            shown = display(release) if display else identifier
            groups[identifier] = (shown or identifier, [provider])
    return list(groups.values())


def assert_release_compatibility(releases: Mapping[ProviderName, Release]) -> None:
    """Raise ``CompatibilityConflict`` for the first property the providers disagree on."""

    for reason, identify, display in _CHECKS:
        values_and_sources = unique_mapped_values(releases, identify, display)
        if len(values_and_sources) > 1:
            raise CompatibilityConflict(reason, values_and_sources)


def resolve_incompatibilities(
    mapping: ProviderReleaseMapping,
    *,
    primary_provider: ProviderName | None = None,
) -> CompatibilityResult:
    """Exclude all releases which are incompatible with the release of the primary provider.

    Checks are repeated until the remaining releases are compatible, so one
    call may report several incompatibilities (e.g. GTIN, then track count).
    The given mapping is not modified; failed lookups are kept as they are.

    Raises ``UnresolvedConflict`` when the releases are incompatible and no
    primary provider has been given or its release has no value to decide on.
    """

    releases = successful_releases(mapping)
    incompatibilities: list[IncompatibilityInfo] = []
    excluded: set[ProviderName] = set()

    while True:
        try:
            assert_release_compatibility(releases)
        except CompatibilityConflict as conflict:
            incompatibility = _cluster_conflict(conflict, releases, primary_provider)
            incompatibilities.append(incompatibility)
            removed = set(incompatibility.excluded_providers)
            log.info(
                "%s: keeping %s, excluding %s",
                incompatibility.reason,
                incompatibility.accepted_value,
                ", ".join(sorted(removed)),
            )
            excluded |= removed
            releases = {name: release for name, release in releases.items() if name not in removed}
        else:
            break

    return CompatibilityResult(
        mapping={name: result for name, result in mapping.items() if name not in excluded},
        incompatibilities=tuple(incompatibilities),
    )


def _cluster_conflict(
    conflict: CompatibilityConflict,
    releases: ProviderReleaseMap,
    primary_provider: ProviderName | None,
) -> IncompatibilityInfo:
    accepted_value: str | None = None
    clusters: list[IncompatibleCluster] = []
    for value, sources in conflict.values_and_sources:
        if primary_provider is not None and primary_provider in sources:
            # Show the value as the primary provider has returned it.
            display = _DISPLAYS.get(conflict.reason)
            shown = display(releases[primary_provider]) if display else None
            accepted_value = shown or value
            continue
        clusters.append(
            IncompatibleCluster(
                value=value,
                providers=tuple(sources),
                provider_info=tuple(
                    info for source in sources for info in releases[source].info.providers
                ),
            )
        )

    incompatibility = IncompatibilityInfo(
        reason=conflict.reason,
        accepted_value=accepted_value,
        clusters=tuple(clusters),
    )
    if accepted_value is None:
        if primary_provider is None:
            message = f"{conflict}, a primary provider is required to decide"
        else:
            message = f"{conflict}, primary provider {primary_provider} has no value to decide"
        raise UnresolvedConflict(message, incompatibility=incompatibility) from conflict
    return incompatibility
