"""Configuration types for the HTTP clients of metadata providers.

Provider APIs are only ever read, so retries are limited to idempotent
methods and responses are cached on disk for a day unless a provider
configures otherwise.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Literal

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

type ResponseHook = Callable[[httpx.Response], Awaitable[None] | None]
type CachePredicate = Callable[[object], bool]
"""Decides whether a decoded JSON payload may be cached."""

DEFAULT_USER_AGENT: Final[str] = "harmonipy (+https://github.com/harmonipy/harmonipy)"
IDEMPOTENT_METHODS: Final[frozenset[str]] = frozenset({"GET", "HEAD", "OPTIONS"})
RETRY_STATUSES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})
TRANSIENT_ERRORS: Final[tuple[type[httpx.HTTPError], ...]] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)
ONE_DAY: Final[float] = 24 * 60 * 60


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    attempts: int = 3
    backoff_factor: float = 0.5
    max_backoff_seconds: float = 30.0
    jitter: float = 1.0
    honor_retry_after: bool = True
    methods: frozenset[str] = IDEMPOTENT_METHODS
    statuses: frozenset[int] = RETRY_STATUSES
    errors: tuple[type[httpx.HTTPError], ...] = TRANSIENT_ERRORS


@dataclass(slots=True, frozen=True)
class RateLimit:
    """At most ``max_calls`` requests per ``per_seconds`` for one provider."""

    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """HTTP response cache of a provider.

    The sqlite database lives in the data directory (see ``storage``) unless
    ``path`` is given.
    """

    backend: Literal["sqlite", "memory"] = "sqlite"
    path: str | None = None
    ttl_seconds: float | None = ONE_DAY
    refresh_on_access: bool = False
    predicate: CachePredicate | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """Everything a provider needs to build its HTTP client, ``cache=None`` disables caching."""

    name: str
    base_url: str | None = None
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    extra_headers: Mapping[str, str] | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    response_hooks: tuple[ResponseHook, ...] = ()

    def headers(self) -> dict[str, str]:
        """Default request headers, ``extra_headers`` may override the user agent."""

        return {"User-Agent": self.user_agent, **(self.extra_headers or {})}
