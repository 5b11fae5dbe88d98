"\"\"\"Candidate ranking, diversity metrics and query refinements.\"\"\""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

import structlog
from rapidfuzz import fuzz

from ..schemas.candidate import CandidateRecord
from ..schemas.query import QueryInterpretation, Requirement
from ..schemas.results import DiversityMetrics, RankedCandidate, RankedResult
from ..schemas.signals import AvailabilitySignal, CompositeScore
from ..vocabulary import CULTURE, INDUSTRIES, LOCATIONS, SENIORITY, SKILLS, alias_pattern

REFINEMENT_TEMPLATES: dict[str, str] = {
    "skills": "Add a skills requirement (a core language, framework or domain) to sharpen technical matching",
    "experience": "Specify a seniority level or minimum years of experience",
    "location": "Add a location or remote preference to narrow the candidate pool",
    "industry": "Mention a target industry or company stage (e.g. startup, fintech)",
    "culture": "Describe team culture or soft skills you value (e.g. collaborative, mentoring)",
}

GENERIC_REFINEMENTS: tuple[str, ...] = (
    "Broaden the skill list with adjacent technologies to surface transferable talent",
    "Prioritize candidates with recent activity to improve responsiveness",
    "Consider relaxing the least important requirement if results are sparse",
    "Review candidates with open-to-opportunity signals first",
)


@dataclass
class RankingConfig:
    """Blend weights and thresholds for match scoring."""

    profile_weight: float = 0.40
    requirement_weight: float = 0.40
    technical_weight: float = 0.12
    culture_weight: float = 0.08
    dimension_weights: dict[str, float] = field(
        default_factory=lambda: {
            "technical_depth": 0.35,
            "influence": 0.20,
            "community_engagement": 0.20,
            "learning_velocity": 0.25,
        }
    )
    min_similarity: float = 85.0
    diversity_bonus_scale: float = 0.1
    refinement_count: int = 4
    junior_max_years: float = 3.0
    mid_max_years: float = 7.0


@dataclass(slots=True)
class CandidateEvidence:
    """Ranking input: roster record plus derived signals."""

    candidate: CandidateRecord
    composite: CompositeScore
    availability: list[AvailabilitySignal] = field(default_factory=list)
    provider_skills: list[str] = field(default_factory=list)


class RankingEngine:
    """Score candidates against requirements and summarize the result set."""

    def __init__(self, *, config: RankingConfig | None = None) -> None:
        self._config = config or RankingConfig()
        self._logger = structlog.get_logger(__name__)

    def rank(
        self,
        candidates: Iterable[CandidateEvidence],
        interpretation: QueryInterpretation,
    ) -> RankedResult:
        ranked = [self.score(evidence, interpretation) for evidence in candidates]
        ranked.sort(key=lambda item: (-item.match_score, item.candidate_id))

        diversity = self.diversity(ranked)
        quality = self.search_quality(ranked, diversity)
        refinements = self.refinements(interpretation)
        self._logger.info(
            "rank.result",
            total=len(ranked),
            search_quality=quality,
            diversity=diversity.background_diversity_score,
        )
        return RankedResult(
            interpretation=interpretation,
            candidates=ranked,
            total_found=len(ranked),
            search_quality_score=quality,
            diversity=diversity,
            suggested_refinements=refinements,
        )

    def score(
        self,
        evidence: CandidateEvidence,
        interpretation: QueryInterpretation,
    ) -> RankedCandidate:
        cfg = self._config
        composite = evidence.composite
        profile_strength = self._profile_strength(composite)
        cultural_fit = (composite.community_engagement + composite.influence) / 2.0
        corpus = self._skill_corpus(evidence)

        weighted_sum = 0.0
        total_importance = 0.0
        matched: list[str] = []
        skill_reqs = interpretation.by_category("skills")
        skill_hits = 0
        culture_scores: list[float] = []

        for requirement in interpretation.requirements:
            satisfaction = self._satisfaction(requirement, evidence, corpus, cultural_fit)
            weighted_sum += requirement.importance * satisfaction
            total_importance += requirement.importance
            if satisfaction >= 1.0:
                matched.append(f"{requirement.category}:{requirement.value}")
            if requirement.category == "skills" and satisfaction >= 1.0:
                skill_hits += 1
            if requirement.category == "culture":
                culture_scores.append(satisfaction)

        requirement_fit = weighted_sum / total_importance if total_importance > 0 else profile_strength
        skill_fraction = skill_hits / len(skill_reqs) if skill_reqs else 0.0
        technical = skill_fraction * composite.technical_depth / 10.0
        culture_match = sum(culture_scores) / len(culture_scores) if culture_scores else 0.0
        culture = culture_match * cultural_fit / 10.0

        match = 100.0 * (
            cfg.profile_weight * profile_strength
            + cfg.requirement_weight * requirement_fit
            + cfg.technical_weight * technical
            + cfg.culture_weight * culture
        )
        breakdown = {
            "profile": round(profile_strength * 10.0, 4),
            "requirements": round(requirement_fit * 10.0, 4),
            "skills": round(skill_fraction * (5.0 + 0.5 * composite.technical_depth), 4),
            "technical": round(technical * 10.0, 4),
            "culture": round(culture * 10.0, 4),
            "cultural_fit": round(cultural_fit, 4),
        }
        return RankedCandidate(
            candidate=evidence.candidate,
            composite=composite,
            availability=list(evidence.availability),
            match_score=round(max(0.0, min(100.0, match)), 4),
            breakdown=breakdown,
            matched_requirements=matched,
        )

    def diversity(self, ranked: Sequence[RankedCandidate]) -> DiversityMetrics:
        locations = Counter(
            (item.candidate.location or "Unknown").strip() or "Unknown" for item in ranked
        )
        buckets = Counter(self._experience_bucket(item.candidate.experience_years) for item in ranked)
        companies = Counter(
            (item.candidate.current_company or "Unknown").strip().lower() or "unknown"
            for item in ranked
        )
        entropies = [_normalized_entropy(counter) for counter in (locations, companies, buckets)]
        score = 10.0 * sum(entropies) / len(entropies) if ranked else 0.0
        return DiversityMetrics(
            location_distribution=dict(sorted(locations.items())),
            experience_distribution=dict(sorted(buckets.items())),
            background_diversity_score=round(score, 4),
        )

    def search_quality(self, ranked: Sequence[RankedCandidate], diversity: DiversityMetrics) -> float:
        if not ranked:
            return 0.0
        mean_match = sum(item.match_score for item in ranked) / len(ranked)
        mean_confidence = sum(item.composite.confidence for item in ranked) / len(ranked)
        bonus = self._config.diversity_bonus_scale * diversity.background_diversity_score
        quality = min(mean_match / 10.0 + bonus, 10.0) * (0.5 + 0.5 * mean_confidence)
        return round(max(0.0, min(10.0, quality)), 4)

    def refinements(self, interpretation: QueryInterpretation) -> list[str]:
        present = interpretation.categories()
        suggestions = [
            template for category, template in REFINEMENT_TEMPLATES.items() if category not in present
        ]
        for generic in GENERIC_REFINEMENTS:
            if len(suggestions) >= self._config.refinement_count:
                break
            suggestions.append(generic)
        return suggestions[: self._config.refinement_count]

    def _profile_strength(self, composite: CompositeScore) -> float:
        weights = self._config.dimension_weights
        total = sum(weights.values())
        if total <= 0:
            return 0.0
        value = sum(composite.dimension(name) * weight for name, weight in weights.items()) / total
        return value / 10.0

    def _satisfaction(
        self,
        requirement: Requirement,
        evidence: CandidateEvidence,
        corpus: list[str],
        cultural_fit: float,
    ) -> float:
        record = evidence.candidate
        value = requirement.value.lower()
        if requirement.category == "skills":
            return 1.0 if self._matches(value, corpus) else 0.0
        if requirement.category == "experience":
            target = _target_years(value)
            if target <= 0:
                return 1.0
            return min(record.experience_years / target, 1.0)
        if requirement.category == "location":
            if value == "remote":
                return 1.0
            location = (record.location or "").lower()
            return 1.0 if location and self._matches(value, [location], LOCATIONS) else 0.0
        if requirement.category == "industry":
            texts = [item.lower() for item in record.industries]
            texts.extend(
                text.lower() for text in (record.current_company, record.bio) if text
            )
            texts.extend(exp.summary.lower() for exp in record.experiences if exp.summary)
            return 1.0 if self._matches(value, texts, INDUSTRIES) else 0.0
        # culture: stated trait in the bio counts fully, otherwise fall back to engagement
        bio = (record.bio or "").lower()
        if bio and self._matches(value, [bio], CULTURE, fuzzy=False):
            return 1.0
        return cultural_fit / 10.0

    def _skill_corpus(self, evidence: CandidateEvidence) -> list[str]:
        corpus = [skill.lower() for skill in evidence.candidate.skills]
        corpus.extend(skill.lower() for skill in evidence.provider_skills)
        return [text for text in corpus if text]

    def _matches(
        self,
        keyword: str,
        corpus: Sequence[str],
        vocabulary: Mapping[str, tuple[str, ...]] = SKILLS,
        *,
        fuzzy: bool = True,
    ) -> bool:
        aliases = vocabulary.get(keyword, (keyword,))
        for text in corpus:
            for alias in aliases:
                if alias == text or alias_pattern(alias).search(text):
                    return True
            if fuzzy and self._similar(keyword, text):
                return True
        return False

    def _similar(self, left: str, right: str) -> bool:
        return fuzz.token_set_ratio(left, right) >= self._config.min_similarity

    def _experience_bucket(self, years: float) -> str:
        if years < self._config.junior_max_years:
            return "Junior"
        if years < self._config.mid_max_years:
            return "Mid-level"
        return "Senior"


def _target_years(value: str) -> float:
    if value.endswith("years"):
        digits = "".join(ch for ch in value if ch.isdigit())
        return float(digits) if digits else 0.0
    entry = SENIORITY.get(value)
    return entry[1] if entry else 0.0


def _normalized_entropy(counter: Counter) -> float:
    total = sum(counter.values())
    if total <= 1 or len(counter) <= 1:
        return 0.0
    entropy = -sum((count / total) * math.log(count / total) for count in counter.values())
    return entropy / math.log(len(counter))
