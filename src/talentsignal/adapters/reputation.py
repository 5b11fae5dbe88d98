"\"\"\"Q&A reputation provider adapter.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..schemas.providers import ReputationPayload
from ..schemas.signals import Provider
from .base import BaseFetcher, dedupe, log_scale, mean


@dataclass
class ReputationConfig:
    reputation_ceiling: float = 100_000.0
    accepted_ceiling: float = 500.0
    answers_ceiling: float = 1000.0
    questions_ceiling: float = 200.0
    badge_points_ceiling: float = 500.0
    tags_ceiling: float = 20.0
    top_tags: int = 10


class ReputationFetcher(BaseFetcher):
    provider = Provider.REPUTATION
    payload_model = ReputationPayload

    def __init__(self, transport, *, config: ReputationConfig | None = None, **kwargs: Any) -> None:
        super().__init__(transport, **kwargs)
        self._config = config or ReputationConfig()

    def derive(self, payload: ReputationPayload):
        cfg = self._config
        badges = payload.badges
        badge_points = badges.gold * 10 + badges.silver * 3 + badges.bronze
        metrics = {
            "reputation": payload.reputation,
            "answers": payload.answer_count,
            "questions": payload.question_count,
            "accepted_answers": payload.accepted_answer_count,
            "gold_badges": badges.gold,
            "silver_badges": badges.silver,
            "bronze_badges": badges.bronze,
        }
        skills = dedupe(payload.top_tags)[: cfg.top_tags]
        dimensions = {
            "technical_depth": mean(
                [
                    log_scale(payload.reputation, cfg.reputation_ceiling),
                    log_scale(payload.accepted_answer_count, cfg.accepted_ceiling),
                ]
            ),
            "influence": mean(
                [
                    log_scale(payload.reputation, cfg.reputation_ceiling),
                    log_scale(badge_points, cfg.badge_points_ceiling),
                ]
            ),
            "community_engagement": log_scale(payload.answer_count, cfg.answers_ceiling),
            "learning_velocity": mean(
                [
                    log_scale(len(payload.top_tags), cfg.tags_ceiling),
                    log_scale(payload.question_count, cfg.questions_ceiling),
                ]
            ),
        }
        return metrics, skills, dimensions
