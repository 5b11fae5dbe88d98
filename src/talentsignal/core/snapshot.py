"\"\"\"Candidate snapshot construction and time-boxed caching.\"\"\""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable

import pendulum
import structlog

from ..schemas.candidate import CandidateRecord
from ..schemas.signals import DIMENSIONS, CompositeScore, Provider, SignalBundle
from ..schemas.snapshot import SkillCategory, Snapshot
from ..vocabulary import canonical_skills
from .aggregator import SignalAggregator
from .availability import AvailabilityDetector
from .composer import ScoreComposer
from .rules import BadgeRules, RiskRules, RuleContext

TECHNICAL_RADAR: dict[str, frozenset[str]] = {
    "Backend": frozenset(
        {
            "python", "java", "go", "node.js", "ruby", "php", "c#", "scala", "kotlin",
            "rust", "c++", "backend", "django", "flask", "fastapi", "spring", "graphql", "sql",
        }
    ),
    "Frontend": frozenset(
        {"javascript", "typescript", "react", "vue", "angular", "frontend", "ios", "android", "swift"}
    ),
    "Infrastructure & DevOps": frozenset(
        {"kubernetes", "docker", "aws", "gcp", "azure", "terraform", "devops", "security"}
    ),
    "Data & ML": frozenset(
        {
            "machine learning", "deep learning", "artificial intelligence", "data science",
            "data engineering", "nlp", "computer vision", "pytorch", "tensorflow",
        }
    ),
}


@dataclass
class SnapshotConfig:
    """Cache lifetime."""

    ttl_hours: float = 24.0


class SnapshotBuilder:
    """Run the full aggregation-to-narrative path for one candidate."""

    def __init__(
        self,
        *,
        aggregator: SignalAggregator,
        composer: ScoreComposer,
        availability: AvailabilityDetector,
        badges: BadgeRules,
        risks: RiskRules,
        now_provider: Any | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._composer = composer
        self._availability = availability
        self._badges = badges
        self._risks = risks
        self._now_provider = now_provider or pendulum.now

    async def build(self, record: CandidateRecord) -> Snapshot:
        bundle = await self._aggregator.aggregate(record.candidate_id, record.identities_present())
        return self.from_bundle(record, bundle)

    def from_bundle(self, record: CandidateRecord, bundle: SignalBundle) -> Snapshot:
        composite = self._composer.compose(bundle)
        context = RuleContext(record=record, bundle=bundle, composite=composite)
        badges = self._badges.evaluate(context)
        risks = self._risks.evaluate(context)
        return Snapshot(
            candidate_id=record.candidate_id,
            summary=_summary(record, composite, len(badges), len(risks)),
            skill_radar=skill_radar(record, bundle, composite),
            badges=badges,
            risk_signals=risks,
            composite=composite,
            availability=self._availability.detect(bundle),
            generated_at=self._now_provider(),
            confidence=composite.confidence,
        )


@dataclass(slots=True)
class _CacheEntry:
    snapshot: Snapshot
    expires_at: float


class SnapshotCache:
    """TTL cache of snapshots; concurrent misses share one in-flight build."""

    def __init__(
        self,
        builder: SnapshotBuilder,
        *,
        config: SnapshotConfig | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._builder = builder
        self._config = config or SnapshotConfig()
        self._clock = clock or time.monotonic
        self._entries: dict[str, _CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task[Snapshot]] = {}
        self._generations: dict[str, int] = {}
        self._lock = asyncio.Lock()
        self._logger = structlog.get_logger(__name__)

    @property
    def ttl_seconds(self) -> float:
        return self._config.ttl_hours * 3600.0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, candidate_id: object) -> bool:
        entry = self._entries.get(candidate_id)  # type: ignore[arg-type]
        return entry is not None and entry.expires_at > self._clock()

    async def get_or_build(self, record: CandidateRecord) -> Snapshot:
        """Return the cached snapshot or await the single build for ``record``.

        The build runs as a cache-owned task, so a cancelled caller never
        cancels the build other callers are waiting on.
        """
        key = record.candidate_id
        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at > self._clock():
                self._logger.debug("snapshot.cache_hit", candidate_id=key)
                return entry.snapshot
            task = self._inflight.get(key)
            if task is None:
                self._logger.info("snapshot.cache_miss", candidate_id=key)
                generation = self._generations.get(key, 0)
                task = asyncio.ensure_future(self._build_and_store(record, generation))
                task.add_done_callback(_consume_exception)
                self._inflight[key] = task
            else:
                self._logger.debug("snapshot.await_inflight", candidate_id=key)
        return await asyncio.shield(task)

    async def _build_and_store(self, record: CandidateRecord, generation: int) -> Snapshot:
        key = record.candidate_id
        current = asyncio.current_task()
        try:
            snapshot = await self._builder.build(record)
        except BaseException:
            async with self._lock:
                if self._inflight.get(key) is current:
                    del self._inflight[key]
            raise

        async with self._lock:
            if self._inflight.get(key) is current:
                del self._inflight[key]
            if self._generations.get(key, 0) == generation:
                self._entries[key] = _CacheEntry(snapshot, self._clock() + self.ttl_seconds)
            else:
                self._logger.info("snapshot.stale_build_discarded", candidate_id=key)
        return snapshot

    def invalidate(self, candidate_id: str) -> bool:
        """Drop the cached entry; a build already in flight will not be stored."""
        removed = self._entries.pop(candidate_id, None) is not None
        self._bump_generation(candidate_id)
        self._logger.info("snapshot.invalidated", candidate_id=candidate_id, removed=removed)
        return removed

    def clear(self) -> None:
        self._entries.clear()
        for key in list(self._inflight):
            self._bump_generation(key)
        self._logger.info("snapshot.cleared")

    def _bump_generation(self, candidate_id: str) -> None:
        self._generations[candidate_id] = self._generations.get(candidate_id, 0) + 1
        self._inflight.pop(candidate_id, None)

    def evict_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            self._logger.info("snapshot.evicted", count=len(expired))
        return len(expired)


def skill_radar(
    record: CandidateRecord,
    bundle: SignalBundle,
    composite: CompositeScore,
) -> list[SkillCategory]:
    """Six-axis skill view combining roster skills, provider skills and scores."""
    raw_skills = list(record.skills)
    for profile in bundle.profiles.values():
        raw_skills.extend(profile.skills)
    known = canonical_skills(raw_skills)

    radar: list[SkillCategory] = []
    for name, members in TECHNICAL_RADAR.items():
        matched = [skill for skill in known if skill in members]
        score = min(10.0, 2.0 * len(matched) + 0.4 * composite.technical_depth) if matched else 0.0
        radar.append(SkillCategory(name=name, score=round(score, 2), evidence=matched))

    collaboration_evidence: list[str] = []
    network = bundle.get(Provider.NETWORK)
    if network is not None and network.metrics.get("recommendations"):
        collaboration_evidence.append(f"{network.metrics['recommendations']} recommendations")
    reputation = bundle.get(Provider.REPUTATION)
    if reputation is not None and reputation.metrics.get("accepted_answers"):
        collaboration_evidence.append(f"{reputation.metrics['accepted_answers']} accepted answers")
    radar.append(
        SkillCategory(
            name="Collaboration & Leadership",
            score=round(composite.community_engagement, 2),
            evidence=collaboration_evidence,
        )
    )

    communication_evidence: list[str] = []
    microblog = bundle.get(Provider.MICROBLOG)
    if microblog is not None and microblog.metrics.get("posts_90d"):
        communication_evidence.append(f"{microblog.metrics['posts_90d']} posts in 90 days")
    forum = bundle.get(Provider.FORUM)
    if forum is not None and forum.metrics.get("karma"):
        communication_evidence.append(f"{forum.metrics['karma']} forum karma")
    radar.append(
        SkillCategory(
            name="Communication",
            score=round(composite.influence, 2),
            evidence=communication_evidence,
        )
    )
    return radar


def _summary(record: CandidateRecord, composite: CompositeScore, badges: int, risks: int) -> str:
    who = record.name or record.candidate_id
    role = record.current_title or "professional"
    where = f" at {record.current_company}" if record.current_company else ""
    parts = [f"{who} is a {role}{where} with {record.experience_years:g} years of experience."]
    if composite.insufficient_data:
        parts.append("No provider returned usable signals, so scores are not yet meaningful.")
    else:
        strongest = max(DIMENSIONS, key=lambda name: (composite.dimension(name), name))
        label = strongest.replace("_", " ")
        parts.append(
            f"Strongest signal is {label} ({composite.dimension(strongest):.1f}/10), "
            f"overall {composite.overall:.1f}/10 from {len(composite.providers_used)} providers."
        )
    if badges:
        parts.append(f"Earned {badges} achievement badge{'s' if badges != 1 else ''}.")
    if risks:
        parts.append(f"{risks} risk signal{'s' if risks != 1 else ''} to review.")
    return " ".join(parts)


def _consume_exception(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()
