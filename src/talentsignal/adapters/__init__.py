"\"\"\"Provider-specific source fetchers.\"\"\""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from ..core.ratelimit import RateLimitConfig, RateLimiter
from ..schemas.signals import Provider, SourceProfile
from .base import BaseFetcher
from .code_hosting import CodeHostingFetcher
from .forum import ForumFetcher
from .microblog import MicroblogFetcher
from .network import NetworkFetcher
from .reputation import ReputationFetcher
from .transport import HTTPProfileTransport, ProfileTransport, StaticProfileTransport


@runtime_checkable
class SourceFetcher(Protocol):
    """Provider adapter contract.

    Implementations look up one provider identity and return a
    ``SourceProfile``. An identity with no data yields an empty profile;
    lookup failures raise ``FetchError``.
    """

    provider: Provider

    async def fetch(self, identity: str) -> SourceProfile:
        """Return the provider profile for ``identity``."""


FETCHER_TYPES: dict[Provider, type[BaseFetcher]] = {
    Provider.CODE_HOSTING: CodeHostingFetcher,
    Provider.REPUTATION: ReputationFetcher,
    Provider.NETWORK: NetworkFetcher,
    Provider.MICROBLOG: MicroblogFetcher,
    Provider.FORUM: ForumFetcher,
}


def build_fetchers(
    transport: ProfileTransport,
    *,
    rate_limits: Mapping[str, Mapping[str, Any]] | None = None,
    now_provider: Any | None = None,
) -> list[BaseFetcher]:
    """Instantiate one fetcher per provider sharing ``transport``."""
    fetchers: list[BaseFetcher] = []
    overrides = {Provider(key): value for key, value in (rate_limits or {}).items()}
    for provider, fetcher_type in FETCHER_TYPES.items():
        limit_config = RateLimitConfig(**overrides.get(provider, {}))
        fetchers.append(
            fetcher_type(
                transport,
                limiter=RateLimiter(provider.value, config=limit_config),
                now_provider=now_provider,
            )
        )
    return fetchers


__all__ = [
    "BaseFetcher",
    "CodeHostingFetcher",
    "FETCHER_TYPES",
    "ForumFetcher",
    "HTTPProfileTransport",
    "MicroblogFetcher",
    "NetworkFetcher",
    "ProfileTransport",
    "ReputationFetcher",
    "SourceFetcher",
    "StaticProfileTransport",
    "build_fetchers",
]
