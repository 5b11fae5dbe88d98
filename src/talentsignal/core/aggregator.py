"\"\"\"Concurrent, failure-tolerant signal aggregation.\"\"\""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

import pendulum
import structlog

from ..schemas.candidate import CandidateRecord
from ..schemas.signals import FetchFailure, Provider, SignalBundle, SourceProfile
from .errors import FetchError, RateLimitedError

if TYPE_CHECKING:
    from ..adapters import SourceFetcher


@dataclass
class AggregatorConfig:
    """Timeouts and concurrency limits for provider fan-out."""

    fetch_timeout_seconds: float = 10.0
    max_concurrency: int = 8
    rate_limit_backoff_seconds: float = 60.0


class SignalAggregator:
    """Fan out to every applicable fetcher and settle all results."""

    def __init__(
        self,
        fetchers: Iterable["SourceFetcher"],
        *,
        config: AggregatorConfig | None = None,
        now_provider: Any | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._fetchers: dict[Provider, SourceFetcher] = {
            Provider(fetcher.provider): fetcher for fetcher in fetchers
        }
        self._config = config or AggregatorConfig()
        self._now_provider = now_provider or pendulum.now
        self._clock = clock or time.monotonic
        self._backoff_until: dict[Provider, float] = {}
        self._logger = structlog.get_logger(__name__)

    @property
    def providers(self) -> list[Provider]:
        return list(self._fetchers.keys())

    async def aggregate(
        self,
        candidate_id: str,
        identities: Mapping[Provider | str, str],
    ) -> SignalBundle:
        planned: list[tuple[Provider, str]] = []
        for key, identity in identities.items():
            if not identity:
                continue
            try:
                provider = Provider(key)
            except ValueError:
                self._logger.warning(
                    "aggregate.unknown_provider", candidate_id=candidate_id, provider=str(key)
                )
                continue
            if provider in self._fetchers:
                planned.append((provider, identity))

        # settle-all: each task converts its own failure into a FetchFailure
        settled = await asyncio.gather(
            *(self._settle(candidate_id, provider, identity) for provider, identity in planned)
        )
        results = {provider: outcome for (provider, _), outcome in zip(planned, settled)}
        bundle = SignalBundle(
            candidate_id=candidate_id,
            assembled_at=self._now_provider(),
            results=results,
        )
        self._logger.info(
            "aggregate.bundle",
            candidate_id=candidate_id,
            providers_ok=sorted(p.value for p in bundle.profiles),
            providers_failed=sorted(p.value for p in bundle.failures),
        )
        return bundle

    async def aggregate_many(
        self, candidates: Iterable[CandidateRecord]
    ) -> dict[str, SignalBundle]:
        semaphore = asyncio.Semaphore(max(1, self._config.max_concurrency))

        async def run(candidate: CandidateRecord) -> SignalBundle:
            async with semaphore:
                return await self.aggregate(candidate.candidate_id, candidate.identities_present())

        ordered = list(candidates)
        bundles = await asyncio.gather(*(run(candidate) for candidate in ordered))
        return {candidate.candidate_id: bundle for candidate, bundle in zip(ordered, bundles)}

    def is_backing_off(self, provider: Provider) -> bool:
        until = self._backoff_until.get(provider)
        if until is None:
            return False
        if self._clock() >= until:
            self._backoff_until.pop(provider, None)
            return False
        return True

    async def _settle(
        self, candidate_id: str, provider: Provider, identity: str
    ) -> SourceProfile | FetchFailure:
        if self.is_backing_off(provider):
            return FetchFailure(provider=provider, kind="rate_limited", cause="provider backing off")

        fetcher = self._fetchers[provider]
        try:
            return await asyncio.wait_for(
                fetcher.fetch(identity), timeout=self._config.fetch_timeout_seconds
            )
        except asyncio.TimeoutError:
            self._logger.warning(
                "aggregate.fetch_timeout",
                candidate_id=candidate_id,
                provider=provider.value,
                timeout=self._config.fetch_timeout_seconds,
            )
            return FetchFailure(
                provider=provider,
                kind="timeout",
                cause=f"no response within {self._config.fetch_timeout_seconds}s",
            )
        except RateLimitedError as exc:
            backoff = max(self._config.rate_limit_backoff_seconds, exc.retry_after or 0.0)
            self._backoff_until[provider] = self._clock() + backoff
            self._logger.warning(
                "aggregate.rate_limited",
                candidate_id=candidate_id,
                provider=provider.value,
                backoff_seconds=backoff,
            )
            return exc.to_failure()
        except FetchError as exc:
            self._logger.warning(
                "aggregate.fetch_failed",
                candidate_id=candidate_id,
                provider=provider.value,
                kind=exc.kind,
                cause=exc.cause,
            )
            return FetchFailure(provider=provider, kind=exc.kind, cause=exc.cause)
        except Exception as exc:  # noqa: BLE001
            self._logger.error(
                "aggregate.fetch_crashed",
                candidate_id=candidate_id,
                provider=provider.value,
                error=str(exc),
                exc_info=True,
            )
            return FetchFailure(provider=provider, kind="malformed", cause=str(exc))
