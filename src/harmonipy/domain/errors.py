"""Error taxonomy of release lookups and harmonization.

Per-provider failures are captured as values (see ``model.results``) and only
the terminal conditions below are ever raised to callers of a combined lookup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from harmonipy.domain.model import ProviderName

    from .harmonizer.compatibility import IncompatibilityInfo


class ReleaseLookupError(RuntimeError):
    """Something went wrong during a release lookup."""


class SourceError(ReleaseLookupError):
    """Something went wrong during a lookup using a specific provider."""

    def __init__(self, provider_name: ProviderName, message: str) -> None:
        super().__init__(message)
        self.provider_name = provider_name


class TransportError(SourceError):
    """The HTTP (API) response a specific provider received was unusable."""

    def __init__(self, provider_name: ProviderName, message: str, *, url: str) -> None:
        super().__init__(provider_name, f"{message}: {url}")
        self.url = url


class CompatibilityConflict(ReleaseLookupError):
    """Providers disagree on a property which makes their releases unmergeable."""

    def __init__(
        self,
        reason: str,
        values_and_sources: Sequence[tuple[str, Sequence[ProviderName]]],
    ) -> None:
        details = ", ".join(
            f"{value} ({', '.join(sources)})" for value, sources in values_and_sources
        )
        super().__init__(f"{reason}: {details}")
        self.reason = reason
        self.values_and_sources = tuple(
            (value, tuple(sources)) for value, sources in values_and_sources
        )


class UnresolvedConflict(ReleaseLookupError):
    """Incompatible releases could not be reconciled by a primary provider."""

    def __init__(self, message: str, *, incompatibility: IncompatibilityInfo) -> None:
        super().__init__(message)
        self.incompatibility = incompatibility


class AggregateLookupError(ReleaseLookupError):
    """Several independent failures left nothing usable."""

    def __init__(self, message: str, errors: Sequence[BaseException]) -> None:
        super().__init__(message)
        self.errors = tuple(errors)

    def __str__(self) -> str:
        reasons = "; ".join(str(error) for error in self.errors)
        return f"{self.args[0]} ({reasons})" if reasons else str(self.args[0])
