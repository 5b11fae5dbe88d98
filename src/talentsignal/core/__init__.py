"\"\"\"Core signal engine components.\"\"\""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .aggregator import AggregatorConfig, SignalAggregator
from .alerts import AlertBroadcaster, AlertSubscription
from .availability import AvailabilityConfig, AvailabilityDetector, prune_signals
from .composer import DEFAULT_WEIGHTS, ComposerConfig, ScoreComposer
from .errors import (
    FetchError,
    InsufficientSignalError,
    InterpretationAmbiguousError,
    RateLimitedError,
)
from .interpreter import InterpreterConfig, QueryInterpreter
from .monitor import MonitorConfig, RiskMonitor
from .ranking import CandidateEvidence, RankingConfig, RankingEngine
from .ratelimit import RateLimitConfig, RateLimiter
from .search_plan import build_search_plan
from .snapshot import SnapshotBuilder, SnapshotCache, SnapshotConfig
from .tenure import TenureConfig, TenureEstimator

__all__ = [
    "DEFAULT_WEIGHTS",
    "AggregatorConfig",
    "AlertBroadcaster",
    "AlertSubscription",
    "AvailabilityConfig",
    "AvailabilityDetector",
    "CandidateEvidence",
    "ComposerConfig",
    "FetchError",
    "InsufficientSignalError",
    "InterpretationAmbiguousError",
    "InterpreterConfig",
    "MonitorConfig",
    "QueryInterpreter",
    "RankingConfig",
    "RankingEngine",
    "RateLimitConfig",
    "RateLimitedError",
    "RateLimiter",
    "RiskMonitor",
    "ScoreComposer",
    "SignalAggregator",
    "SnapshotBuilder",
    "SnapshotCache",
    "SnapshotConfig",
    "TenureConfig",
    "TenureEstimator",
    "build_search_plan",
    "prune_signals",
]
