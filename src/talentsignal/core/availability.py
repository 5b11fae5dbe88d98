"\"\"\"Rule-based availability detection over a signal bundle.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable

import pendulum
import structlog

from ..schemas.signals import AvailabilitySignal, Provider, SignalBundle, SourceProfile


@dataclass
class AvailabilityConfig:
    """Thresholds for availability heuristics."""

    profile_update_window_days: int = 30
    connection_growth_threshold: int = 50
    side_project_min_repos: int = 3
    min_new_skills: int = 1
    job_search_phrases: tuple[str, ...] = (
        "open to work",
        "open to opportunities",
        "looking for",
        "seeking",
        "job hunting",
        "available for hire",
        "exploring opportunities",
        "next challenge",
    )


class AvailabilityDetector:
    """Derive availability hints from present provider profiles."""

    def __init__(
        self,
        *,
        config: AvailabilityConfig | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._config = config or AvailabilityConfig()
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def detect(self, bundle: SignalBundle) -> list[AvailabilitySignal]:
        detected_at = bundle.assembled_at
        signals: list[AvailabilitySignal] = []
        network = bundle.get(Provider.NETWORK)
        code = bundle.get(Provider.CODE_HOSTING)
        microblog = bundle.get(Provider.MICROBLOG)

        if network is not None:
            signals.extend(self._network_rules(network, detected_at))
        if code is not None:
            signals.extend(self._code_rules(code, detected_at))

        phrase_sources = [
            (Provider.NETWORK, network, "headline"),
            (Provider.MICROBLOG, microblog, "bio"),
        ]
        for provider, profile, field_name in phrase_sources:
            if profile is None:
                continue
            text = str(profile.metrics.get(field_name) or "").lower()
            phrase = next((p for p in self._config.job_search_phrases if p in text), None)
            if phrase:
                signals.append(
                    AvailabilitySignal(
                        signal_type="job_search_activity",
                        confidence=0.7,
                        source=provider,
                        detected_at=detected_at,
                        detail=f"{field_name} mentions '{phrase}'",
                    )
                )
                break

        signals.sort(key=lambda signal: (signal.signal_type, signal.source.value))
        self._logger.debug(
            "availability.detected",
            candidate_id=bundle.candidate_id,
            signals=[signal.signal_type for signal in signals],
        )
        return signals

    def _network_rules(
        self, profile: SourceProfile, detected_at: datetime
    ) -> list[AvailabilitySignal]:
        cfg = self._config
        metrics = profile.metrics
        found: list[AvailabilitySignal] = []

        if metrics.get("open_to_work"):
            found.append(
                AvailabilitySignal(
                    signal_type="open_to_opportunities",
                    confidence=0.9,
                    source=Provider.NETWORK,
                    detected_at=detected_at,
                    detail="open-to-work flag set",
                )
            )

        updated_raw = metrics.get("profile_updated_at")
        if updated_raw:
            updated_at = pendulum.parse(str(updated_raw))
            age_days = (pendulum.instance(self._now_provider()) - updated_at).in_days()
            if 0 <= age_days <= cfg.profile_update_window_days:
                found.append(
                    AvailabilitySignal(
                        signal_type="profile_update",
                        confidence=0.5,
                        source=Provider.NETWORK,
                        detected_at=detected_at,
                        detail=f"profile updated {age_days} days ago",
                    )
                )

        growth = int(metrics.get("connections_added_30d") or 0)
        if growth >= cfg.connection_growth_threshold:
            found.append(
                AvailabilitySignal(
                    signal_type="network_expansion",
                    confidence=0.6,
                    source=Provider.NETWORK,
                    detected_at=detected_at,
                    detail=f"{growth} new connections in 30 days",
                )
            )

        new_skills = int(metrics.get("recently_added_skills") or 0)
        if new_skills >= cfg.min_new_skills:
            found.append(
                AvailabilitySignal(
                    signal_type="skill_updates",
                    confidence=0.4,
                    source=Provider.NETWORK,
                    detected_at=detected_at,
                    detail=f"{new_skills} skills added recently",
                )
            )
        return found

    def _code_rules(self, profile: SourceProfile, detected_at: datetime) -> list[AvailabilitySignal]:
        found: list[AvailabilitySignal] = []
        recent_repos = int(profile.metrics.get("recent_repos") or 0)
        if recent_repos >= self._config.side_project_min_repos:
            found.append(
                AvailabilitySignal(
                    signal_type="side_project_focus",
                    confidence=0.5,
                    source=Provider.CODE_HOSTING,
                    detected_at=detected_at,
                    detail=f"{recent_repos} repositories created recently",
                )
            )
        if profile.metrics.get("hireable"):
            found.append(
                AvailabilitySignal(
                    signal_type="open_to_opportunities",
                    confidence=0.8,
                    source=Provider.CODE_HOSTING,
                    detected_at=detected_at,
                    detail="marked as hireable",
                )
            )
        return found


def prune_signals(
    signals: Iterable[AvailabilitySignal],
    max_age: timedelta,
    now: datetime,
) -> list[AvailabilitySignal]:
    """Drop signals detected more than ``max_age`` before ``now``."""
    cutoff = now - max_age
    return [signal for signal in signals if signal.detected_at >= cutoff]
