"\"\"\"Professional network provider adapter.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..schemas.providers import NetworkPayload
from ..schemas.signals import Provider
from .base import BaseFetcher, dedupe, linear_scale, log_scale, mean


@dataclass
class NetworkConfig:
    connections_ceiling: float = 3000.0
    recommendations_ceiling: float = 50.0
    experience_years_ceiling: float = 15.0
    skills_ceiling: float = 50.0
    recent_skills_ceiling: float = 10.0


class NetworkFetcher(BaseFetcher):
    provider = Provider.NETWORK
    payload_model = NetworkPayload

    def __init__(self, transport, *, config: NetworkConfig | None = None, **kwargs: Any) -> None:
        super().__init__(transport, **kwargs)
        self._config = config or NetworkConfig()

    def derive(self, payload: NetworkPayload):
        cfg = self._config
        updated_at = payload.profile_updated_at
        metrics = {
            "connections": payload.connections,
            "recommendations": payload.recommendations,
            "experience_years": payload.experience_years,
            "skill_count": len(payload.skills),
            "connections_added_30d": payload.connections_added_30d,
            "recently_added_skills": len(payload.recently_added_skills),
            "headline": payload.headline,
            "open_to_work": payload.open_to_work,
            "profile_updated_at": updated_at.isoformat() if updated_at else None,
        }
        skills = dedupe(payload.skills + payload.recently_added_skills)
        dimensions = {
            "technical_depth": linear_scale(payload.experience_years, cfg.experience_years_ceiling),
            "influence": mean(
                [
                    log_scale(payload.connections, cfg.connections_ceiling),
                    log_scale(payload.recommendations, cfg.recommendations_ceiling),
                ]
            ),
            "community_engagement": mean(
                [
                    log_scale(payload.connections, cfg.connections_ceiling),
                    log_scale(len(payload.recent_activity), 20.0),
                ]
            ),
            "learning_velocity": mean(
                [
                    log_scale(len(payload.skills), cfg.skills_ceiling),
                    log_scale(len(payload.recently_added_skills), cfg.recent_skills_ceiling),
                ]
            ),
        }
        return metrics, skills, dimensions
