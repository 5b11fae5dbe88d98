from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .candidate import CandidateRecord
from .query import QueryInterpretation
from .signals import AvailabilitySignal, CompositeScore


class RankedCandidate(BaseModel):
    """Candidate scored against an interpreted query."""

    candidate: CandidateRecord
    composite: CompositeScore
    availability: list[AvailabilitySignal] = Field(default_factory=list)
    match_score: float = Field(default=0.0, ge=0.0, le=100.0)
    breakdown: dict[str, float] = Field(default_factory=dict)
    matched_requirements: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def candidate_id(self) -> str:
        return self.candidate.candidate_id


class DiversityMetrics(BaseModel):
    """Distribution view over a ranked candidate set."""

    location_distribution: dict[str, int] = Field(default_factory=dict)
    experience_distribution: dict[str, int] = Field(default_factory=dict)
    background_diversity_score: float = Field(default=0.0, ge=0.0, le=10.0)

    model_config = ConfigDict(extra="forbid")


class RankedResult(BaseModel):
    """Search output handed back to the request layer."""

    interpretation: QueryInterpretation
    candidates: list[RankedCandidate] = Field(default_factory=list)
    total_found: int = 0
    search_quality_score: float = Field(default=0.0, ge=0.0, le=10.0)
    diversity: DiversityMetrics = Field(default_factory=DiversityMetrics)
    suggested_refinements: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")
