"\"\"\"Pydantic schema definitions for provider signals and talent search.\"\"\""

from __future__ import annotations

from .alerts import DetectedChange, RiskAlert
from .candidate import CandidateRecord, ExperienceEntry
from .query import PlatformQuery, QueryInterpretation, Requirement, SearchPlan
from .results import DiversityMetrics, RankedCandidate, RankedResult
from .signals import (
    DIMENSIONS,
    ActivityItem,
    AvailabilitySignal,
    CompositeScore,
    FetchFailure,
    Provider,
    SignalBundle,
    SourceProfile,
)
from .snapshot import AchievementBadge, RiskSignal, SkillCategory, Snapshot

__all__ = [
    "DIMENSIONS",
    "AchievementBadge",
    "ActivityItem",
    "AvailabilitySignal",
    "CandidateRecord",
    "CompositeScore",
    "DetectedChange",
    "DiversityMetrics",
    "ExperienceEntry",
    "FetchFailure",
    "PlatformQuery",
    "Provider",
    "QueryInterpretation",
    "RankedCandidate",
    "RankedResult",
    "Requirement",
    "RiskAlert",
    "RiskSignal",
    "SearchPlan",
    "SignalBundle",
    "SkillCategory",
    "Snapshot",
    "SourceProfile",
]
