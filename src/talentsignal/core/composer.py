"\"\"\"Provider-availability-aware composite scoring.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import structlog

from ..schemas.signals import DIMENSIONS, CompositeScore, Provider, SignalBundle
from .errors import InsufficientSignalError

DEFAULT_WEIGHTS: dict[Provider, dict[str, float]] = {
    Provider.CODE_HOSTING: {
        "technical_depth": 1.0,
        "influence": 0.6,
        "community_engagement": 0.8,
        "learning_velocity": 0.9,
    },
    Provider.REPUTATION: {
        "technical_depth": 0.9,
        "influence": 0.5,
        "community_engagement": 0.7,
        "learning_velocity": 0.6,
    },
    Provider.NETWORK: {
        "technical_depth": 0.4,
        "influence": 0.8,
        "community_engagement": 0.5,
        "learning_velocity": 0.5,
    },
    Provider.MICROBLOG: {
        "technical_depth": 0.3,
        "influence": 0.9,
        "community_engagement": 0.6,
        "learning_velocity": 0.4,
    },
    Provider.FORUM: {
        "technical_depth": 0.3,
        "influence": 0.4,
        "community_engagement": 0.9,
        "learning_velocity": 0.5,
    },
}


@dataclass
class ComposerConfig:
    """Weight overrides keyed by provider then dimension."""

    weights: dict[str, dict[str, float]] | None = None
    strict: bool = False


class ScoreComposer:
    """Collapse a signal bundle into normalized dimension scores.

    Each dimension is the weighted mean of the sub-scores of the providers
    that actually returned a profile. Missing or failed providers are left
    out of both numerator and denominator; they only lower ``confidence``.
    """

    def __init__(self, *, config: ComposerConfig | None = None) -> None:
        self._config = config or ComposerConfig()
        self._weights = _merge_weights(DEFAULT_WEIGHTS, self._config.weights or {})
        self._logger = structlog.get_logger(__name__)

    @property
    def weights(self) -> dict[Provider, dict[str, float]]:
        return {provider: dict(table) for provider, table in self._weights.items()}

    @property
    def configured_providers(self) -> list[Provider]:
        return list(self._weights.keys())

    def compose(self, bundle: SignalBundle, *, strict: bool | None = None) -> CompositeScore:
        strict_mode = self._config.strict if strict is None else strict
        present = {
            provider: profile
            for provider, profile in bundle.profiles.items()
            if provider in self._weights
        }
        missing = [provider for provider in self._weights if provider not in present]

        if not present:
            if strict_mode:
                raise InsufficientSignalError(bundle.candidate_id)
            self._logger.info("compose.insufficient_data", candidate_id=bundle.candidate_id)
            return CompositeScore(
                confidence=0.0,
                providers_used=[],
                providers_missing=missing,
                insufficient_data=True,
            )

        dimensions: dict[str, float] = {}
        for dimension in DIMENSIONS:
            numerator = 0.0
            denominator = 0.0
            for provider, profile in present.items():
                weight = self._weights[provider][dimension]
                numerator += profile.subscore(dimension) * weight
                denominator += weight
            dimensions[dimension] = _clamp(numerator / denominator if denominator else 0.0)

        overall = _clamp(sum(dimensions.values()) / len(DIMENSIONS))
        confidence = len(present) / len(self._weights)
        return CompositeScore(
            overall=round(overall, 4),
            **{name: round(value, 4) for name, value in dimensions.items()},
            confidence=round(confidence, 4),
            providers_used=sorted(present, key=lambda provider: provider.value),
            providers_missing=missing,
            insufficient_data=False,
        )


def _merge_weights(
    defaults: Mapping[Provider, Mapping[str, float]],
    overrides: Mapping[str, Mapping[str, float]],
) -> dict[Provider, dict[str, float]]:
    merged = {provider: dict(table) for provider, table in defaults.items()}
    for key, table in overrides.items():
        provider = Provider(key)
        merged.setdefault(provider, {dim: 1.0 for dim in DIMENSIONS})
        for dimension, weight in table.items():
            if dimension not in DIMENSIONS:
                raise ValueError(f"Unknown scoring dimension: {dimension!r}")
            if weight <= 0:
                raise ValueError(
                    f"Weight for {provider.value}.{dimension} must be positive, got {weight}"
                )
            merged[provider][dimension] = float(weight)
    return merged


def _clamp(value: float, low: float = 0.0, high: float = 10.0) -> float:
    return max(low, min(high, value))
