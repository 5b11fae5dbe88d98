"""Provider signal models: profiles, bundles, composite scores."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Provider(str, Enum):
    """External signal providers."""

    CODE_HOSTING = "code_hosting"
    REPUTATION = "reputation"
    NETWORK = "network"
    MICROBLOG = "microblog"
    FORUM = "forum"


DIMENSIONS: tuple[str, ...] = (
    "technical_depth",
    "influence",
    "community_engagement",
    "learning_velocity",
)

FetchErrorKind = Literal["timeout", "rate_limited", "not_found", "malformed", "network"]

AvailabilitySignalType = Literal[
    "profile_update",
    "job_search_activity",
    "network_expansion",
    "skill_updates",
    "side_project_focus",
    "open_to_opportunities",
]


class ActivityItem(BaseModel):
    """Single recent-activity entry reported by a provider."""

    kind: str
    title: str = ""
    occurred_at: datetime | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class SourceProfile(BaseModel):
    """Provider-specific profile; replaced wholesale on re-fetch."""

    provider: Provider
    identity: str
    metrics: dict[str, Any] = Field(default_factory=dict)
    recent_activity: list[ActivityItem] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    score: float = Field(default=0.0, ge=0.0, le=10.0)
    dimension_scores: dict[str, float] = Field(default_factory=dict)
    fetched_at: datetime

    model_config = ConfigDict(extra="forbid", frozen=True)

    def subscore(self, dimension: str) -> float:
        return float(self.dimension_scores.get(dimension, self.score))


class FetchFailure(BaseModel):
    """Recorded fetch error for one provider inside a bundle."""

    provider: Provider
    kind: FetchErrorKind
    cause: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)


class SignalBundle(BaseModel):
    """Per-candidate merged, possibly partial, set of provider results."""

    candidate_id: str
    assembled_at: datetime
    results: dict[Provider, SourceProfile | FetchFailure] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @property
    def profiles(self) -> dict[Provider, SourceProfile]:
        return {
            provider: result
            for provider, result in self.results.items()
            if isinstance(result, SourceProfile)
        }

    @property
    def failures(self) -> dict[Provider, FetchFailure]:
        return {
            provider: result
            for provider, result in self.results.items()
            if isinstance(result, FetchFailure)
        }

    def get(self, provider: Provider) -> SourceProfile | None:
        result = self.results.get(provider)
        return result if isinstance(result, SourceProfile) else None

    def without(self, provider: Provider) -> "SignalBundle":
        """Return a copy with one provider's result dropped."""
        remaining = {key: value for key, value in self.results.items() if key != provider}
        return SignalBundle(
            candidate_id=self.candidate_id,
            assembled_at=self.assembled_at,
            results=remaining,
        )


class CompositeScore(BaseModel):
    """Normalized [0, 10] metrics derived from a signal bundle."""

    overall: float = Field(default=0.0, ge=0.0, le=10.0)
    technical_depth: float = Field(default=0.0, ge=0.0, le=10.0)
    influence: float = Field(default=0.0, ge=0.0, le=10.0)
    community_engagement: float = Field(default=0.0, ge=0.0, le=10.0)
    learning_velocity: float = Field(default=0.0, ge=0.0, le=10.0)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    providers_used: list[Provider] = Field(default_factory=list)
    providers_missing: list[Provider] = Field(default_factory=list)
    insufficient_data: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    def dimension(self, name: str) -> float:
        return float(getattr(self, name))


class AvailabilitySignal(BaseModel):
    """Append-only hint that a candidate may be open to a move."""

    signal_type: AvailabilitySignalType
    confidence: float = Field(ge=0.0, le=1.0)
    source: Provider
    detected_at: datetime
    detail: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)
