from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .signals import AvailabilitySignal, CompositeScore

Severity = Literal["low", "medium", "high"]


class SkillCategory(BaseModel):
    """One axis of the skill radar."""

    name: str
    score: float = Field(ge=0.0)
    max_score: float = 10.0
    evidence: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class AchievementBadge(BaseModel):
    """Threshold-derived recognition shown next to a candidate."""

    badge_id: str
    title: str
    description: str
    evidence: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)


class RiskSignal(BaseModel):
    """Hiring-risk observation with a suggested follow-up."""

    risk_type: str
    severity: Severity
    title: str
    description: str
    recommendation: str
    detected_from: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)


class Snapshot(BaseModel):
    """Cached, user-facing digest for one candidate."""

    candidate_id: str
    summary: str
    skill_radar: list[SkillCategory] = Field(default_factory=list)
    badges: list[AchievementBadge] = Field(default_factory=list)
    risk_signals: list[RiskSignal] = Field(default_factory=list)
    composite: CompositeScore
    availability: list[AvailabilitySignal] = Field(default_factory=list)
    generated_at: datetime
    confidence: float = Field(ge=0.0, le=1.0)

    model_config = ConfigDict(extra="forbid", frozen=True)
