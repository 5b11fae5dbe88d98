"\"\"\"Inbound facade used by request-handling layers.\"\"\""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

import structlog

from .adapters.transport import ProfileTransport
from .core import (
    AlertBroadcaster,
    AlertSubscription,
    AvailabilityDetector,
    CandidateEvidence,
    QueryInterpreter,
    RankingEngine,
    RiskMonitor,
    ScoreComposer,
    SignalAggregator,
    SnapshotCache,
    build_search_plan,
)
from .core.alerts import AlertCallback
from .directory import CandidateDirectory
from .schemas import (
    AvailabilitySignal,
    CandidateRecord,
    CompositeScore,
    RankedResult,
    RiskAlert,
    SearchPlan,
    Snapshot,
)


@runtime_checkable
class ScoreSink(Protocol):
    """Optional write-back of derived scores for durability."""

    def record(
        self,
        candidate_id: str,
        composite: CompositeScore,
        availability: list[AvailabilitySignal],
    ) -> None:
        """Persist the latest composite score and availability signals."""


class TalentSignalService:
    """Search, snapshot and monitoring entry points over one shared engine."""

    def __init__(
        self,
        *,
        interpreter: QueryInterpreter,
        aggregator: SignalAggregator,
        composer: ScoreComposer,
        availability: AvailabilityDetector,
        ranking: RankingEngine,
        snapshots: SnapshotCache,
        monitor: RiskMonitor,
        broadcaster: AlertBroadcaster,
        directory: CandidateDirectory,
        score_sink: ScoreSink | None = None,
        transport: ProfileTransport | None = None,
    ) -> None:
        self._interpreter = interpreter
        self._aggregator = aggregator
        self._composer = composer
        self._availability = availability
        self._ranking = ranking
        self._snapshots = snapshots
        self._monitor = monitor
        self._broadcaster = broadcaster
        self._directory = directory
        self._score_sink = score_sink
        self._transport = transport
        self._logger = structlog.get_logger(__name__)

    @property
    def directory(self) -> CandidateDirectory:
        return self._directory

    @property
    def snapshots(self) -> SnapshotCache:
        return self._snapshots

    @property
    def monitor(self) -> RiskMonitor:
        return self._monitor

    def set_score_sink(self, sink: ScoreSink | None) -> None:
        self._score_sink = sink

    def plan_search(self, query_text: str) -> SearchPlan:
        return build_search_plan(self._interpreter.interpret(query_text))

    async def interpret_and_search(
        self,
        query_text: str,
        roster: Iterable[CandidateRecord] | None = None,
    ) -> RankedResult:
        interpretation = self._interpreter.interpret(query_text)
        if roster is None:
            records = self._directory.all()
        else:
            records = list(roster)
            self._directory.add_many(records)

        bundles = await self._aggregator.aggregate_many(records)
        evidence: list[CandidateEvidence] = []
        for record in records:
            bundle = bundles[record.candidate_id]
            composite = self._composer.compose(bundle)
            signals = self._availability.detect(bundle)
            provider_skills = [
                skill for profile in bundle.profiles.values() for skill in profile.skills
            ]
            evidence.append(
                CandidateEvidence(
                    candidate=record,
                    composite=composite,
                    availability=signals,
                    provider_skills=provider_skills,
                )
            )
            self._write_back(record.candidate_id, composite, signals)

        result = self._ranking.rank(evidence, interpretation)
        self._logger.info(
            "search.completed",
            query=query_text,
            candidates=result.total_found,
            search_quality=result.search_quality_score,
        )
        return result

    async def get_snapshot(self, candidate_id: str) -> Snapshot:
        record = self._directory.get(candidate_id)
        if record is None:
            raise KeyError(f"Unknown candidate: {candidate_id!r}")
        return await self._snapshots.get_or_build(record)

    async def start_monitoring(self, candidate_ids: Iterable[str]) -> list[str]:
        added = self._monitor.watch(candidate_ids)
        await self._monitor.start()
        return added

    async def stop_monitoring(self, candidate_id: str) -> bool:
        removed = self._monitor.unwatch(candidate_id)
        if not self._monitor.monitored:
            await self._monitor.stop()
        return removed

    async def poll_once(self) -> list[RiskAlert]:
        """Run a single monitor tick outside the background loop."""
        return await self._monitor.tick()

    def subscribe_alerts(self, callback: AlertCallback | None = None) -> AlertSubscription:
        return self._broadcaster.subscribe(callback)

    async def aclose(self) -> None:
        await self._monitor.stop()
        if self._transport is not None:
            await self._transport.aclose()

    def _write_back(
        self,
        candidate_id: str,
        composite: CompositeScore,
        signals: list[AvailabilitySignal],
    ) -> None:
        if self._score_sink is None:
            return
        try:
            self._score_sink.record(candidate_id, composite, signals)
        except OSError as exc:
            self._logger.warning("search.write_back_failed", candidate_id=candidate_id, error=str(exc))
