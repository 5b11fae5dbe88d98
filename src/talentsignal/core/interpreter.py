"\"\"\"Deterministic keyword-based hiring query interpretation.\"\"\""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import structlog

from ..schemas.query import QueryInterpretation, Requirement, RequirementCategory
from ..vocabulary import CULTURE, INDUSTRIES, LOCATIONS, SENIORITY, SKILLS, find_terms

CATEGORY_ORDER: tuple[RequirementCategory, ...] = (
    "skills",
    "experience",
    "location",
    "industry",
    "culture",
)

_YEARS_PATTERN = re.compile(r"(\d{1,2})\s*\+?\s*(?:years?|yrs?)\b")

_INTENT_FRAGMENTS: dict[str, str] = {
    "skills": "with hands-on {skills} skills",
    "experience": "at {experience} level",
    "location": "based in or open to {location}",
    "industry": "ideally with {industry} background",
    "culture": "who is {culture}",
}

_STRATEGY_FRAGMENTS: dict[str, str] = {
    "skills": "Prioritize code-hosting and Q&A activity showing {skills}",
    "experience": "weight professional-network history for {experience} seniority",
    "location": "filter on stated location ({location})",
    "industry": "look for {industry} exposure in employment history",
    "culture": "use community and forum engagement as a proxy for {culture} traits",
}


@dataclass
class InterpreterConfig:
    """Importance per requirement category and confidence weights."""

    importance: dict[str, float] = field(
        default_factory=lambda: {
            "skills": 0.9,
            "experience": 0.8,
            "location": 0.7,
            "industry": 0.6,
            "culture": 0.5,
        }
    )
    base_confidence: float = 0.2
    category_confidence: dict[str, float] = field(
        default_factory=lambda: {
            "skills": 0.3,
            "experience": 0.15,
            "location": 0.1,
            "industry": 0.1,
            "culture": 0.05,
        }
    )
    per_requirement_bonus: float = 0.02
    max_confidence: float = 0.95


class QueryInterpreter:
    """Turn free-text hiring queries into weighted requirements."""

    def __init__(self, *, config: InterpreterConfig | None = None) -> None:
        self._config = config or InterpreterConfig()
        self._logger = structlog.get_logger(__name__)

    def interpret(self, text: str) -> QueryInterpretation:
        query = (text or "").strip()
        found = self._extract(query)

        requirements: list[Requirement] = []
        for category in CATEGORY_ORDER:
            for value in found[category]:
                requirements.append(
                    Requirement(
                        category=category,
                        value=value,
                        importance=self._config.importance[category],
                        provenance="explicit",
                    )
                )

        interpretation = QueryInterpretation(
            original_query=text or "",
            requirements=requirements,
            confidence=self._confidence(query, found),
            interpreted_intent=self._intent(found),
            search_strategy=self._strategy(found),
        )
        self._logger.info(
            "interpret.query",
            requirement_count=len(requirements),
            categories=[category for category in CATEGORY_ORDER if found[category]],
            confidence=interpretation.confidence,
        )
        return interpretation

    def _extract(self, query: str) -> dict[str, list[str]]:
        found: dict[str, list[str]] = {category: [] for category in CATEGORY_ORDER}
        if not query:
            return found

        found["skills"] = [value for _, value in find_terms(query, SKILLS)]

        experience_hits = find_terms(
            query, {name: aliases for name, (aliases, _) in SENIORITY.items()}
        )
        lowered = query.lower()
        for match in _YEARS_PATTERN.finditer(lowered):
            experience_hits.append((match.start(), f"{int(match.group(1))}+ years"))
        experience_hits.sort()
        found["experience"] = _unique(value for _, value in experience_hits)

        found["location"] = [value for _, value in find_terms(query, LOCATIONS)]
        found["industry"] = [value for _, value in find_terms(query, INDUSTRIES)]
        found["culture"] = [value for _, value in find_terms(query, CULTURE)]
        return found

    def _confidence(self, query: str, found: dict[str, list[str]]) -> float:
        if not query:
            return 0.0
        cfg = self._config
        score = cfg.base_confidence
        total = 0
        for category in CATEGORY_ORDER:
            if found[category]:
                score += cfg.category_confidence.get(category, 0.0)
                total += len(found[category])
        score += cfg.per_requirement_bonus * max(total - 1, 0)
        return round(min(score, cfg.max_confidence), 4)

    @staticmethod
    def _intent(found: dict[str, list[str]]) -> str:
        parts = [
            _INTENT_FRAGMENTS[category].format(**{category: _join(found[category])})
            for category in CATEGORY_ORDER
            if found[category]
        ]
        if not parts:
            return "Looking for candidates; the query named no specific requirements."
        return "Looking for a candidate " + ", ".join(parts) + "."

    @staticmethod
    def _strategy(found: dict[str, list[str]]) -> str:
        parts = [
            _STRATEGY_FRAGMENTS[category].format(**{category: _join(found[category])})
            for category in CATEGORY_ORDER
            if found[category]
        ]
        parts.append("rank by composite signal strength across all available providers")
        text = "; ".join(parts)
        return text[0].upper() + text[1:] + "."


def _join(values: list[str]) -> str:
    if len(values) <= 1:
        return "".join(values)
    return ", ".join(values[:-1]) + " and " + values[-1]


def _unique(values) -> list[str]:
    result: list[str] = []
    for value in values:
        if value not in result:
            result.append(value)
    return result
