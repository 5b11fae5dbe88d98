"\"\"\"Shared fetch flow for provider adapters.\"\"\""

from __future__ import annotations

import math
from typing import Any, ClassVar, Iterable

import pendulum
import structlog
from pydantic import ValidationError

from ..core.errors import FetchError, RateLimitedError
from ..core.ratelimit import RateLimiter
from ..schemas.providers import ProviderPayload
from ..schemas.signals import DIMENSIONS, ActivityItem, Provider, SourceProfile
from .transport import ProfileTransport


def log_scale(value: float, ceiling: float) -> float:
    """Map a non-negative count onto [0, 10], saturating at ``ceiling``."""
    if value <= 0 or ceiling <= 0:
        return 0.0
    return round(10.0 * min(math.log1p(value) / math.log1p(ceiling), 1.0), 4)


def linear_scale(value: float, ceiling: float) -> float:
    if value <= 0 or ceiling <= 0:
        return 0.0
    return round(10.0 * min(value / ceiling, 1.0), 4)


def mean(values: Iterable[float]) -> float:
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def dedupe(values: Iterable[str]) -> list[str]:
    """Case-insensitive de-duplication keeping first-seen spelling."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = value.strip().lower()
        if key and key not in seen:
            seen.add(key)
            result.append(value.strip())
    return result


class BaseFetcher:
    """Rate-limit, transport, validate, derive.

    Subclasses declare ``provider`` and ``payload_model`` and implement
    ``derive`` which turns a validated payload into metrics, skills and
    per-dimension sub-scores.
    """

    provider: ClassVar[Provider]
    payload_model: ClassVar[type[ProviderPayload]]

    def __init__(
        self,
        transport: ProfileTransport,
        *,
        limiter: RateLimiter | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._transport = transport
        self._limiter = limiter or RateLimiter(self.provider.value)
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    @property
    def limiter(self) -> RateLimiter:
        return self._limiter

    async def fetch(self, identity: str) -> SourceProfile:
        if not await self._limiter.try_acquire():
            retry_after = await self._limiter.retry_after()
            raise RateLimitedError(
                self.provider,
                "local request window exhausted",
                retry_after=retry_after,
            )

        raw = await self._transport.fetch_payload(self.provider, identity)
        try:
            payload = self.payload_model.model_validate(raw or {})
        except ValidationError as exc:
            raise FetchError(self.provider, "malformed", str(exc)) from exc

        metrics, skills, dimension_scores = self.derive(payload)
        dimension_scores = {dim: round(dimension_scores.get(dim, 0.0), 4) for dim in DIMENSIONS}
        profile = SourceProfile(
            provider=self.provider,
            identity=identity,
            metrics=metrics,
            recent_activity=_sorted_activity(payload.recent_activity),
            skills=skills,
            score=round(mean(dimension_scores.values()), 4),
            dimension_scores=dimension_scores,
            fetched_at=self._now_provider(),
        )
        self._logger.debug(
            "fetch.profile_built",
            provider=self.provider.value,
            identity=identity,
            score=profile.score,
        )
        return profile

    def derive(
        self, payload: Any
    ) -> tuple[dict[str, Any], list[str], dict[str, float]]:  # pragma: no cover - abstract
        raise NotImplementedError


def _sorted_activity(items: list[ActivityItem]) -> list[ActivityItem]:
    dated = [item for item in items if item.occurred_at is not None]
    undated = [item for item in items if item.occurred_at is None]
    dated.sort(key=lambda item: item.occurred_at, reverse=True)
    return dated + undated
