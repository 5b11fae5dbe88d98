"\"\"\"Microblogging provider adapter.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..schemas.providers import MicroblogPayload
from ..schemas.signals import Provider
from ..vocabulary import canonical_skills
from .base import BaseFetcher, log_scale, mean


@dataclass
class MicroblogConfig:
    followers_ceiling: float = 10_000.0
    posts_ceiling: float = 300.0


class MicroblogFetcher(BaseFetcher):
    provider = Provider.MICROBLOG
    payload_model = MicroblogPayload

    def __init__(self, transport, *, config: MicroblogConfig | None = None, **kwargs: Any) -> None:
        super().__init__(transport, **kwargs)
        self._config = config or MicroblogConfig()

    def derive(self, payload: MicroblogPayload):
        cfg = self._config
        tech_posts = payload.posts_last_90_days * payload.tech_post_ratio
        metrics = {
            "followers": payload.followers,
            "following": payload.following,
            "posts_90d": payload.posts_last_90_days,
            "tech_post_ratio": payload.tech_post_ratio,
            "bio": payload.bio,
        }
        skills = canonical_skills([payload.bio]) if payload.bio else []
        dimensions = {
            "technical_depth": 10.0 * payload.tech_post_ratio,
            "influence": log_scale(payload.followers, cfg.followers_ceiling),
            "community_engagement": log_scale(payload.posts_last_90_days, cfg.posts_ceiling),
            "learning_velocity": mean(
                [
                    10.0 * payload.tech_post_ratio,
                    log_scale(tech_posts, cfg.posts_ceiling),
                ]
            ),
        }
        return metrics, skills, dimensions
