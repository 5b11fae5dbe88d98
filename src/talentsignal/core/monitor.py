"\"\"\"Background polling monitor that turns signal changes into risk alerts.\"\"\""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Literal

import pendulum
import structlog

from ..directory import CandidateDirectory
from ..schemas.alerts import DetectedChange, RiskAlert
from ..schemas.signals import Provider, SignalBundle, SourceProfile
from ..schemas.snapshot import Severity
from .aggregator import SignalAggregator
from .alerts import AlertBroadcaster
from .availability import AvailabilityDetector

MonitorState = Literal["idle", "polling", "unchanged", "changed"]
ChangeKind = Literal["metric", "status", "provider", "availability"]

URGENT_SIGNAL_TYPES = frozenset({"open_to_opportunities", "job_search_activity"})


@dataclass
class MonitorConfig:
    """Polling cadence and materiality thresholds."""

    poll_interval_seconds: float = 6 * 3600.0
    relative_threshold: float = 0.2
    absolute_threshold: float = 5.0
    max_concurrency: int = 4
    status_fields: tuple[str, ...] = ("headline", "open_to_work", "bio", "hireable")


@dataclass(slots=True)
class _Baseline:
    profiles: dict[Provider, SourceProfile]
    signal_types: set[str] = field(default_factory=set)


class RiskMonitor:
    """Poll monitored candidates on an interval and publish material changes.

    The first successful poll for a candidate only records a baseline.
    Providers that fail during a poll keep their previous baseline profile.
    Ticks never overlap; ``stop`` lets an in-flight tick finish.
    """

    def __init__(
        self,
        *,
        aggregator: SignalAggregator,
        availability: AvailabilityDetector,
        broadcaster: AlertBroadcaster,
        directory: CandidateDirectory,
        config: MonitorConfig | None = None,
        now_provider: Any | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._availability = availability
        self._broadcaster = broadcaster
        self._directory = directory
        self._config = config or MonitorConfig()
        self._now_provider = now_provider or pendulum.now
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._monitored: set[str] = set()
        self._states: dict[str, MonitorState] = {}
        self._outcomes: dict[str, MonitorState] = {}
        self._baselines: dict[str, _Baseline] = {}
        self._tick_lock = asyncio.Lock()
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None
        self._logger = structlog.get_logger(__name__)

    @property
    def monitored(self) -> list[str]:
        return sorted(self._monitored)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def state(self, candidate_id: str) -> MonitorState | None:
        return self._states.get(candidate_id)

    def last_outcome(self, candidate_id: str) -> MonitorState | None:
        return self._outcomes.get(candidate_id)

    def watch(self, candidate_ids: Iterable[str]) -> list[str]:
        added: list[str] = []
        for candidate_id in candidate_ids:
            if candidate_id in self._monitored:
                continue
            self._monitored.add(candidate_id)
            self._states[candidate_id] = "idle"
            added.append(candidate_id)
        if added:
            self._logger.info("monitor.watch", added=added, monitored=len(self._monitored))
        return added

    def unwatch(self, candidate_id: str) -> bool:
        if candidate_id not in self._monitored:
            return False
        self._monitored.discard(candidate_id)
        self._states.pop(candidate_id, None)
        self._outcomes.pop(candidate_id, None)
        self._baselines.pop(candidate_id, None)
        self._logger.info("monitor.unwatch", candidate_id=candidate_id)
        return True

    async def start(self) -> None:
        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._run(self._stop_event))
        self._logger.info("monitor.started", interval=self._config.poll_interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        if self._stop_event is not None:
            self._stop_event.set()
        task, self._task = self._task, None
        await task
        self._logger.info("monitor.stopped")

    async def tick(self) -> list[RiskAlert]:
        """Poll every monitored candidate once and publish resulting alerts."""
        async with self._tick_lock:
            candidate_ids = sorted(self._monitored)
            semaphore = asyncio.Semaphore(max(1, self._config.max_concurrency))

            async def run(candidate_id: str) -> RiskAlert | None:
                async with semaphore:
                    return await self._poll(candidate_id)

            results = await asyncio.gather(*(run(cid) for cid in candidate_ids))
            alerts = [alert for alert in results if alert is not None]
            for alert in alerts:
                self._broadcaster.publish(alert)
                self._logger.info(
                    "monitor.alert",
                    candidate_id=alert.candidate_id,
                    severity=alert.severity,
                    changes=len(alert.changes),
                )
            self._logger.info("monitor.tick", polled=len(candidate_ids), alerts=len(alerts))
            return alerts

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await self.tick()
            except Exception as exc:  # noqa: BLE001
                self._logger.error("monitor.tick_failed", error=str(exc), exc_info=True)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._config.poll_interval_seconds)
            except asyncio.TimeoutError:
                continue

    async def _poll(self, candidate_id: str) -> RiskAlert | None:
        record = self._directory.get(candidate_id)
        if record is None:
            self._logger.warning("monitor.unknown_candidate", candidate_id=candidate_id)
            return None

        self._states[candidate_id] = "polling"
        bundle = await self._aggregator.aggregate(candidate_id, record.identities_present())
        if candidate_id not in self._monitored:
            return None

        previous = self._baselines.get(candidate_id)
        profiles = dict(bundle.profiles)
        if previous is not None:
            for provider in bundle.failures:
                if provider in previous.profiles:
                    profiles[provider] = previous.profiles[provider]
        merged = SignalBundle(
            candidate_id=candidate_id,
            assembled_at=bundle.assembled_at,
            results=profiles,
        )
        signals = self._availability.detect(merged)
        current = _Baseline(profiles=profiles, signal_types={s.signal_type for s in signals})
        self._baselines[candidate_id] = current

        if previous is None:
            self._states[candidate_id] = "idle"
            self._outcomes[candidate_id] = "unchanged"
            self._logger.info("monitor.baseline", candidate_id=candidate_id, providers=len(profiles))
            return None

        changes = self._diff(previous, current, signals)
        if not changes:
            self._states[candidate_id] = "idle"
            self._outcomes[candidate_id] = "unchanged"
            return None

        self._states[candidate_id] = "changed"
        alert = RiskAlert(
            alert_id=self._id_factory(),
            candidate_id=candidate_id,
            changes=[change for _, change in changes],
            severity=_severity(changes),
            created_at=self._now_provider(),
        )
        self._states[candidate_id] = "idle"
        self._outcomes[candidate_id] = "changed"
        return alert

    def _diff(self, previous: _Baseline, current: _Baseline, signals) -> list[tuple[ChangeKind, DetectedChange]]:
        changes: list[tuple[ChangeKind, DetectedChange]] = []
        providers = sorted(set(previous.profiles) | set(current.profiles), key=lambda p: p.value)
        for provider in providers:
            before = previous.profiles.get(provider)
            after = current.profiles.get(provider)
            if before is None:
                changes.append(
                    (
                        "provider",
                        DetectedChange(
                            provider=provider,
                            field="provider",
                            previous=None,
                            current="present",
                            description=f"{provider.value} profile became available",
                        ),
                    )
                )
                continue
            if after is None:
                changes.append(
                    (
                        "provider",
                        DetectedChange(
                            provider=provider,
                            field="provider",
                            previous="present",
                            current=None,
                            description=f"{provider.value} profile is no longer available",
                        ),
                    )
                )
                continue
            changes.extend(self._diff_metrics(provider, before.metrics, after.metrics))

        for signal in signals:
            if signal.signal_type in previous.signal_types:
                continue
            changes.append(
                (
                    "availability",
                    DetectedChange(
                        provider=signal.source,
                        field="availability",
                        previous=None,
                        current=signal.signal_type,
                        description=f"new {signal.signal_type.replace('_', ' ')} signal: {signal.detail}",
                    ),
                )
            )
        return changes

    def _diff_metrics(
        self, provider: Provider, before: dict[str, Any], after: dict[str, Any]
    ) -> list[tuple[ChangeKind, DetectedChange]]:
        cfg = self._config
        found: list[tuple[ChangeKind, DetectedChange]] = []
        for name in sorted(set(before) | set(after)):
            old = before.get(name)
            new = after.get(name)
            if name in cfg.status_fields:
                if old != new:
                    found.append(
                        (
                            "status",
                            DetectedChange(
                                provider=provider,
                                field=name,
                                previous=old,
                                current=new,
                                description=f"{provider.value} {name} changed from {old!r} to {new!r}",
                            ),
                        )
                    )
                continue
            if not (_is_number(old) and _is_number(new)):
                continue
            delta = float(new) - float(old)
            if abs(delta) < cfg.absolute_threshold:
                continue
            if abs(delta) < cfg.relative_threshold * max(abs(float(old)), 1.0):
                continue
            direction = "rose" if delta > 0 else "fell"
            found.append(
                (
                    "metric",
                    DetectedChange(
                        provider=provider,
                        field=name,
                        previous=old,
                        current=new,
                        description=f"{provider.value} {name} {direction} from {old} to {new}",
                    ),
                )
            )
        return found


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _severity(changes: list[tuple[ChangeKind, DetectedChange]]) -> Severity:
    kinds = [kind for kind, _ in changes]
    if "status" in kinds:
        return "high"
    if any(
        kind == "availability" and change.current in URGENT_SIGNAL_TYPES for kind, change in changes
    ):
        return "high"
    if "provider" in kinds or kinds.count("metric") >= 2:
        return "medium"
    return "low"
