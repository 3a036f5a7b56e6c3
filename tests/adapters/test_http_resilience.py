from __future__ import annotations

import asyncio

import httpx

from harmonipy.adapters.http_resilience import (
    ResilientClient,
    _CachePredicateFilter,  # type: ignore[reportPrivateUsage]
    build_retry,
)
from harmonipy.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy


def test_client_sends_user_agent_through_rate_limiter() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="example",
        cache=None,
        ratelimit=RateLimit(max_calls=1, per_seconds=0.01),
        extra_headers={"Accept": "application/json"},
    )
    client = ResilientClient(config)
    client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        transport=httpx.MockTransport(handler), headers=config.headers()
    )

    async def run() -> list[int]:
        async with client:
            responses = [await client.get("https://api.example.test/a") for _ in range(2)]
        return [response.status_code for response in responses]

    assert asyncio.run(run()) == [200, 200]
    assert seen[0].headers["User-Agent"].startswith("harmonipy")
    assert seen[0].headers["Accept"] == "application/json"


def test_build_retry_only_retries_reads() -> None:
    retry = build_retry(RetryPolicy(attempts=2))

    assert retry.total == 2
    assert retry.is_retryable_method("GET")
    assert not retry.is_retryable_method("POST")


def test_cache_predicate_filter_decides_on_json_payload() -> None:
    only_complete = _CachePredicateFilter(lambda payload: payload != {"status": "pending"})

    assert only_complete.needs_body()
    assert only_complete.apply(None, b'{"status": "done"}')  # type: ignore[arg-type]
    assert not only_complete.apply(None, b'{"status": "pending"}')  # type: ignore[arg-type]
    assert only_complete.apply(None, b"not json")  # type: ignore[arg-type]


def test_extra_headers_may_override_user_agent() -> None:
    config = ResilienceConfig(name="example", extra_headers={"User-Agent": "custom/1.0"})

    assert config.headers() == {"User-Agent": "custom/1.0"}
    assert ResilienceConfig(name="example").headers()["User-Agent"].startswith("harmonipy")
    assert config.cache is not None
    assert config.cache.ttl_seconds == 24 * 60 * 60
