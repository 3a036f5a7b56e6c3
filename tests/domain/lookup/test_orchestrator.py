from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from harmonipy.domain.errors import AggregateLookupError, ReleaseLookupError, SourceError
from harmonipy.domain.harmonizer.compatibility import GTIN_MISMATCH
from harmonipy.domain.lookup import CombinedReleaseLookup, SourceRegistry
from harmonipy.domain.model import (
    FeatureQuality,
    LookupMethod,
    MessageSeverity,
    ProviderFeature,
    ReleaseFound,
    SourceFailure,
)
from harmonipy.domain.ports import LookupOptions, ReleaseSpecifier

from tests.helpers.releases import EAN_13, OTHER_EAN_13, UPC_12, FakeSource, make_release

if TYPE_CHECKING:
    from harmonipy.domain.model import Release


def _texts(lookup: CombinedReleaseLookup, severity: MessageSeverity) -> list[str]:
    return [message.text for message in lookup.messages if message.severity is severity]


def test_gtin_lookup_uses_every_provider_once(
    registry: SourceRegistry, alpha: FakeSource, beta: FakeSource
) -> None:
    lookup = CombinedReleaseLookup(registry=registry, gtin=EAN_13)

    mapping = asyncio.run(lookup.get_mapping())

    assert list(mapping) == ["Alpha", "Beta"]
    assert all(isinstance(result, ReleaseFound) for result in mapping.values())
    assert alpha.calls[0][0] == ReleaseSpecifier.by_gtin(EAN_13)
    assert len(beta.calls) == 1


def test_mapping_is_cached_until_new_lookups_are_queued(
    registry: SourceRegistry, alpha: FakeSource, beta: FakeSource
) -> None:
    lookup = CombinedReleaseLookup(registry=registry, provider_ids=[("Alpha", "1")])

    async def run() -> None:
        first = await lookup.get_mapping()
        second = await lookup.get_mapping()
        assert first == second
        assert len(alpha.calls) == 1

        assert lookup.queue_by_id("Beta", "2")
        third = await lookup.get_mapping()
        assert list(third) == ["Alpha", "Beta"]
        assert len(alpha.calls) == 1
        assert len(beta.calls) == 1

    asyncio.run(run())


def test_lookups_run_concurrently() -> None:
    started = {"Alpha": asyncio.Event(), "Beta": asyncio.Event()}

    class WaitingSource(FakeSource):
        async def get_release(self, specifier: ReleaseSpecifier, options: LookupOptions) -> Release:
            started[self.name].set()
            other = "Beta" if self.name == "Alpha" else "Alpha"
            await asyncio.wait_for(started[other].wait(), timeout=1)
            return await super().get_release(specifier, options)

    registry = SourceRegistry(
        [
            WaitingSource("Alpha", default=make_release("Alpha")),
            WaitingSource("Beta", default=make_release("Beta")),
        ]
    )
    lookup = CombinedReleaseLookup(registry=registry, gtin=EAN_13)

    mapping = asyncio.run(lookup.get_mapping())

    assert all(isinstance(result, ReleaseFound) for result in mapping.values())


def test_nothing_queued_raises() -> None:
    lookup = CombinedReleaseLookup(registry=SourceRegistry())

    with pytest.raises(ReleaseLookupError, match="No release lookups have been queued"):
        asyncio.run(lookup.get_mapping())


def test_single_queue_error_is_raised(registry: SourceRegistry) -> None:
    lookup = CombinedReleaseLookup(registry=registry, provider_ids=[("Nope", "1")])

    message = 'There is no provider with the name "Nope"'
    with pytest.raises(ReleaseLookupError, match=message) as info:
        asyncio.run(lookup.get_mapping())

    assert not isinstance(info.value, AggregateLookupError)


def test_several_queue_errors_are_aggregated(registry: SourceRegistry) -> None:
    lookup = CombinedReleaseLookup(
        registry=registry,
        provider_ids=[("Nope", "1")],
        urls=["https://unknown.test/album/1"],
    )

    with pytest.raises(AggregateLookupError) as info:
        asyncio.run(lookup.get_mapping())

    assert [str(error) for error in info.value.errors] == [
        'There is no provider with the name "Nope"',
        "No provider supports https://unknown.test/album/1",
    ]


def test_provider_is_used_only_once(registry: SourceRegistry, alpha: FakeSource) -> None:
    lookup = CombinedReleaseLookup(
        registry=registry,
        provider_ids=[("Alpha", "1")],
        urls=["https://alpha.test/album/2"],
    )

    assert lookup.queued_provider_names == ("Alpha",)
    assert _texts(lookup, MessageSeverity.WARNING) == [
        "Provider Alpha can only be used once per lookup, ignoring https://alpha.test/album/2"
    ]
    assert not lookup.queue_by_id("alpha", "3")

    asyncio.run(lookup.get_mapping())
    assert [call[0] for call in alpha.calls] == [ReleaseSpecifier.by_id("1")]


def test_gtin_skips_providers_which_were_already_used(
    registry: SourceRegistry, alpha: FakeSource, beta: FakeSource
) -> None:
    lookup = CombinedReleaseLookup(registry=registry, gtin=EAN_13, provider_ids=[("Alpha", "1")])

    asyncio.run(lookup.get_mapping())

    assert [call[0].method for call in alpha.calls] == [LookupMethod.ID]
    assert [call[0].method for call in beta.calls] == [LookupMethod.GTIN]
    assert lookup.messages == []


def test_invalid_and_conflicting_gtins(registry: SourceRegistry) -> None:
    lookup = CombinedReleaseLookup(registry=registry)

    assert not lookup.queue_by_gtin("4006381333932")
    assert lookup.queue_by_gtin(UPC_12)
    assert lookup.queue_by_gtin("0" + UPC_12)
    assert not lookup.queue_by_gtin(EAN_13)

    assert _texts(lookup, MessageSeverity.ERROR) == [
        "Checksum of GTIN '4006381333932' is invalid",
        f"Different GTIN '{EAN_13}' can not be combined with the current lookup",
    ]
    assert lookup.gtin == UPC_12


def test_sources_without_gtin_lookup_are_skipped(alpha: FakeSource) -> None:
    no_gtin = FakeSource(
        "NoGTIN",
        default=make_release("NoGTIN"),
        features={ProviderFeature.GTIN_LOOKUP: FeatureQuality.MISSING},
    )
    lookup = CombinedReleaseLookup(registry=SourceRegistry([alpha, no_gtin]), gtin=EAN_13)

    mapping = asyncio.run(lookup.get_mapping())

    assert list(mapping) == ["Alpha"]
    assert no_gtin.calls == []
    assert _texts(lookup, MessageSeverity.INFO) == [
        "GTIN lookups are not supported by NoGTIN, skipping it"
    ]


def test_provider_option_restricts_gtin_lookups(
    registry: SourceRegistry, alpha: FakeSource, beta: FakeSource
) -> None:
    lookup = CombinedReleaseLookup(
        registry=registry,
        gtin=EAN_13,
        options=LookupOptions(providers=frozenset({"beta", "Missing"})),
    )

    asyncio.run(lookup.get_mapping())

    assert alpha.calls == []
    assert len(beta.calls) == 1
    assert _texts(lookup, MessageSeverity.ERROR) == ['There is no provider with the name "Missing"']


def test_failures_are_isolated_per_provider(alpha: FakeSource) -> None:
    broken = FakeSource("Broken", default=SourceError("Broken", "API returned HTTP 500"))
    crashing = FakeSource("Crashing", default=RuntimeError("boom"))
    lookup = CombinedReleaseLookup(
        registry=SourceRegistry([alpha, broken, crashing]), gtin=EAN_13
    )

    mapping = asyncio.run(lookup.get_mapping())

    assert isinstance(mapping["Alpha"], ReleaseFound)
    assert isinstance(mapping["Broken"], SourceFailure)
    assert isinstance(mapping["Crashing"], SourceFailure)
    assert str(mapping["Crashing"].error) == "boom"


def test_url_lookup_is_extended_by_gtin(beta: FakeSource) -> None:
    alpha_release = make_release("Alpha", method=LookupMethod.ID, region="GB")
    url_source = FakeSource(
        "Alpha", responses={"https://alpha.test/album/1": alpha_release}, domains=("alpha.test",)
    )
    lookup = CombinedReleaseLookup(
        registry=SourceRegistry([url_source, beta]),
        urls=["https://alpha.test/album/1"],
        options=LookupOptions(regions=("US", "GB")),
    )

    mapping = asyncio.run(lookup.get_complete_mapping())

    assert list(mapping) == ["Alpha", "Beta"]
    (specifier, options) = beta.calls[0]
    assert specifier == ReleaseSpecifier.by_gtin(EAN_13)
    assert options.regions == ("GB",)
    assert url_source.calls[0][1].regions == ("US", "GB")
    assert lookup.gtin == EAN_13


def test_extension_prefers_available_regions(beta: FakeSource) -> None:
    alpha = FakeSource(
        "Alpha",
        responses={
            "1": make_release("Alpha", method=LookupMethod.ID, available_in=["DE", "XW", "FR"])
        },
    )
    lookup = CombinedReleaseLookup(
        registry=SourceRegistry([alpha, beta]),
        provider_ids=[("Alpha", "1")],
        options=LookupOptions(regions=("FR", "US")),
    )

    asyncio.run(lookup.get_complete_mapping())

    assert beta.calls[0][1].regions == ("FR",)


def test_extension_without_gtin_is_skipped(beta: FakeSource) -> None:
    alpha = FakeSource("Alpha", responses={"1": make_release("Alpha", gtin=None)})
    lookup = CombinedReleaseLookup(
        registry=SourceRegistry([alpha, beta]), provider_ids=[("Alpha", "1")]
    )

    async def run() -> None:
        await lookup.get_complete_mapping()
        await lookup.get_complete_mapping()

    asyncio.run(run())

    assert beta.calls == []
    assert _texts(lookup, MessageSeverity.INFO) == [
        "GTIN is unknown, lookups for the following providers were skipped: Beta"
    ]


def test_extension_with_different_gtins_is_skipped() -> None:
    alpha = FakeSource("Alpha", responses={"1": make_release("Alpha")})
    beta = FakeSource("Beta", responses={"2": make_release("Beta", gtin=OTHER_EAN_13)})
    gamma = FakeSource("Gamma", default=make_release("Gamma"))
    lookup = CombinedReleaseLookup(
        registry=SourceRegistry([alpha, beta, gamma]),
        provider_ids=[("Alpha", "1"), ("Beta", "2")],
    )

    asyncio.run(lookup.get_complete_mapping())

    assert gamma.calls == []
    assert _texts(lookup, MessageSeverity.ERROR) == [
        f"Providers have returned multiple different GTIN: {EAN_13}, {OTHER_EAN_13}"
    ]


def test_merged_release_reports_lookup_messages_and_incompatibilities() -> None:
    alpha = FakeSource("Alpha", default=make_release("Alpha", title="Alpha Title"))
    beta = FakeSource("Beta", default=make_release("Beta", gtin="0" + UPC_12))
    broken = FakeSource("Broken", default=SourceError("Broken", "not found"))
    lookup = CombinedReleaseLookup(
        registry=SourceRegistry([alpha, beta, broken]),
        provider_ids=[("Alpha", "1"), ("Beta", "2"), ("Broken", "3"), ("Alpha", "4")],
    )

    release = asyncio.run(lookup.get_merged_release(primary_provider="alpha"))

    assert release.title == "Alpha Title"
    assert [provider.name for provider in release.info.providers] == ["Alpha"]
    (incompatibility,) = lookup.incompatibilities
    assert incompatibility.reason == GTIN_MISMATCH
    assert incompatibility.excluded_providers == ("Beta",)

    messages = [(message.severity, message.provider) for message in release.info.messages]
    assert messages[:3] == [
        (MessageSeverity.WARNING, None),
        (MessageSeverity.WARNING, None),
        (MessageSeverity.ERROR, "Broken"),
    ]
    assert release.info.messages[0].text.startswith("Provider Alpha can only be used once")
    assert release.info.messages[1].text.startswith(GTIN_MISMATCH)


def test_unknown_primary_provider_is_reported_once_per_merge(registry: SourceRegistry) -> None:
    lookup = CombinedReleaseLookup(registry=registry, gtin=EAN_13)
    warning = 'There is no provider with the name "Nope"'

    first = asyncio.run(lookup.get_merged_release(primary_provider="Nope"))
    second = asyncio.run(lookup.get_merged_release(primary_provider="Nope"))

    for release in (first, second):
        assert [message.text for message in release.info.messages].count(warning) == 1
    assert _texts(lookup, MessageSeverity.WARNING) == []


def test_merged_release_gets_script_detected_from_titles(registry: SourceRegistry) -> None:
    lookup = CombinedReleaseLookup(registry=registry, gtin=EAN_13)

    release = asyncio.run(lookup.get_merged_release())

    assert release.script == "Latn"
    debug = [m.text for m in release.info.messages if m.severity is MessageSeverity.DEBUG]
    assert "Detected scripts of the titles: Latin (100%)" in debug
