"\"\"\"Batch pipeline assembly around the talent signal service.\"\"\""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, Iterable

import pendulum
import structlog
from pydantic import ValidationError

from .schemas import AvailabilitySignal, CandidateRecord, CompositeScore, RiskAlert
from .service import TalentSignalService
from . import __version__


class RosterLoadError(ValueError):
    """Raised when roster loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[CandidateRecord]):
        super().__init__("Roster loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Roster loading failed: {self.errors}"


class RosterLoader:
    """Load candidate records from a JSONL roster."""

    def load(self, path: Path) -> list[CandidateRecord]:
        records: list[CandidateRecord] = []
        errors: list[str] = []
        seen: set[str] = set()
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    data = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(data, dict):
                    errors.append(f"line {idx}: record must be a JSON object")
                    continue
                try:
                    record = CandidateRecord.model_validate(data)
                except ValidationError as exc:
                    errors.append(f"line {idx}: {exc.error_count()} validation error(s) ({exc.errors()[0]['msg']})")
                    continue
                if record.candidate_id in seen:
                    errors.append(f"line {idx}: duplicate candidate_id '{record.candidate_id}'")
                    continue
                seen.add(record.candidate_id)
                records.append(record)
        if errors:
            raise RosterLoadError(errors, records)
        return records


class OutputWriter:
    """Persist pipeline outcomes."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False, default=_json_default))
            handle.write("\n")


class JsonlScoreSink:
    """Score write-back that appends composite scores to an audit log."""

    def __init__(self, audit_logger: AuditLogger):
        self._audit = audit_logger

    def record(
        self,
        candidate_id: str,
        composite: CompositeScore,
        availability: list[AvailabilitySignal],
    ) -> None:
        self._audit.append(
            {
                "kind": "composite_score",
                "candidate_id": candidate_id,
                "composite": composite.model_dump(mode="json"),
                "availability": [signal.model_dump(mode="json") for signal in availability],
                "recorded_at": pendulum.now().to_iso8601_string(),
            }
        )


class TalentPipeline:
    """Synchronous entry points used by the CLI and batch jobs."""

    def __init__(
        self,
        *,
        service: TalentSignalService,
        roster_loader: RosterLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._service = service
        self._roster = roster_loader or RosterLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    @property
    def service(self) -> TalentSignalService:
        return self._service

    def load_roster(self, path: Path) -> tuple[list[CandidateRecord], list[str]]:
        try:
            return self._roster.load(path), []
        except RosterLoadError as exc:
            self._logger.warning("roster.partial_load", errors=exc.errors)
            return exc.partial, list(exc.errors)

    def search(
        self,
        *,
        query: str,
        roster_path: Path,
        output_path: Path | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> dict[str, Any]:
        records, load_errors = self.load_roster(roster_path)
        if audit_logger:
            self._service.set_score_sink(JsonlScoreSink(audit_logger))

        result = asyncio.run(self._search(query, records))
        serialized = result.model_dump(mode="json")

        if audit_logger:
            audit_logger.append(
                {
                    "kind": "search",
                    "query": query,
                    "candidate_ids": [item.candidate_id for item in result.candidates],
                    "match_scores": [item.match_score for item in result.candidates],
                    "search_quality_score": result.search_quality_score,
                }
            )

        payload = {
            "metadata": self._metadata(
                query=query,
                candidate_count=len(records),
                errors=load_errors,
            ),
            "result": serialized,
        }
        if output_path is not None:
            self._writer.write(output_path, payload)
        return payload

    def snapshot(
        self,
        *,
        candidate_id: str,
        roster_path: Path,
        output_path: Path | None = None,
    ) -> dict[str, Any]:
        records, load_errors = self.load_roster(roster_path)
        snapshot = asyncio.run(self._snapshot(candidate_id, records))
        payload = {
            "metadata": self._metadata(candidate_id=candidate_id, errors=load_errors),
            "snapshot": snapshot.model_dump(mode="json"),
        }
        if output_path is not None:
            self._writer.write(output_path, payload)
        return payload

    def monitor(
        self,
        *,
        candidate_ids: Iterable[str],
        roster_path: Path,
        ticks: int = 2,
        interval_seconds: float = 0.0,
        on_alert: Callable[[dict[str, Any]], None] | None = None,
    ) -> list[dict[str, Any]]:
        records, _ = self.load_roster(roster_path)
        alerts = asyncio.run(
            self._monitor(list(candidate_ids), records, max(ticks, 0), interval_seconds)
        )
        serialized = [alert.model_dump(mode="json") for alert in alerts]
        if on_alert is not None:
            for entry in serialized:
                on_alert(entry)
        return serialized

    def plan(self, *, query: str) -> dict[str, Any]:
        return self._service.plan_search(query).model_dump(mode="json")

    async def _search(self, query: str, records: list[CandidateRecord]):
        try:
            return await self._service.interpret_and_search(query, records)
        finally:
            await self._service.aclose()

    async def _snapshot(self, candidate_id: str, records: list[CandidateRecord]):
        self._service.directory.add_many(records)
        try:
            return await self._service.get_snapshot(candidate_id)
        finally:
            await self._service.aclose()

    async def _monitor(
        self,
        candidate_ids: list[str],
        records: list[CandidateRecord],
        ticks: int,
        interval_seconds: float,
    ) -> list[RiskAlert]:
        self._service.directory.add_many(records)
        subscription = self._service.subscribe_alerts()
        self._service.monitor.watch(candidate_ids)
        alerts: list[RiskAlert] = []
        try:
            for tick in range(ticks):
                if tick and interval_seconds > 0:
                    await asyncio.sleep(interval_seconds)
                await self._service.poll_once()
                alerts.extend(subscription.drain())
        finally:
            subscription.close()
            await self._service.aclose()
        self._logger.info("monitor.completed", ticks=ticks, alerts=len(alerts))
        return alerts

    def _metadata(self, *, errors: list[str], **fields: Any) -> dict[str, Any]:
        return {
            **fields,
            "errors": errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }


def _json_default(value):  # type: ignore[override]
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
