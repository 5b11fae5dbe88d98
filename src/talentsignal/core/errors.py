"\"\"\"Error taxonomy for signal gathering and scoring.\"\"\""

from __future__ import annotations

from ..schemas.signals import FetchErrorKind, FetchFailure, Provider


class FetchError(Exception):
    """Raised by a source fetcher when a provider lookup fails."""

    def __init__(self, provider: Provider, kind: FetchErrorKind, cause: str = ""):
        super().__init__(f"{provider.value} fetch failed ({kind}): {cause}")
        self.provider = provider
        self.kind: FetchErrorKind = kind
        self.cause = cause

    def to_failure(self) -> FetchFailure:
        return FetchFailure(provider=self.provider, kind=self.kind, cause=self.cause)


class RateLimitedError(FetchError):
    """Provider window exhausted; the caller should back off this provider."""

    def __init__(self, provider: Provider, cause: str = "", *, retry_after: float | None = None):
        super().__init__(provider, "rate_limited", cause)
        self.retry_after = retry_after


class InsufficientSignalError(ValueError):
    """Strict composition was requested for a bundle with no successful providers."""

    def __init__(self, candidate_id: str):
        super().__init__(f"No provider signals available for candidate {candidate_id!r}")
        self.candidate_id = candidate_id


class InterpretationAmbiguousError(ValueError):
    """Reserved for request layers; query interpretation always returns a result."""
