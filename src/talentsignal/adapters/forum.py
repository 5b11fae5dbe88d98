"\"\"\"Community forum provider adapter.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..schemas.providers import ForumPayload
from ..schemas.signals import Provider
from ..vocabulary import canonical_skills
from .base import BaseFetcher, log_scale


@dataclass
class ForumConfig:
    karma_ceiling: float = 50_000.0
    activity_ceiling: float = 2000.0
    tech_communities_ceiling: float = 10.0
    communities_ceiling: float = 20.0


class ForumFetcher(BaseFetcher):
    provider = Provider.FORUM
    payload_model = ForumPayload

    def __init__(self, transport, *, config: ForumConfig | None = None, **kwargs: Any) -> None:
        super().__init__(transport, **kwargs)
        self._config = config or ForumConfig()

    def derive(self, payload: ForumPayload):
        cfg = self._config
        skills = canonical_skills(payload.communities)
        metrics = {
            "karma": payload.karma,
            "posts": payload.post_count,
            "comments": payload.comment_count,
            "community_count": len(payload.communities),
            "tech_community_count": len(skills),
        }
        dimensions = {
            "technical_depth": log_scale(len(skills), cfg.tech_communities_ceiling),
            "influence": log_scale(payload.karma, cfg.karma_ceiling),
            "community_engagement": log_scale(
                payload.post_count + payload.comment_count, cfg.activity_ceiling
            ),
            "learning_velocity": log_scale(len(payload.communities), cfg.communities_ceiling),
        }
        return metrics, skills, dimensions
