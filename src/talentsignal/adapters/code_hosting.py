"\"\"\"Code-hosting provider adapter (repositories, stars, contributions).\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pendulum

from ..schemas.providers import CodeHostingPayload
from ..schemas.signals import Provider
from .base import BaseFetcher, dedupe, log_scale, mean


@dataclass
class CodeHostingConfig:
    stars_ceiling: float = 1000.0
    repos_ceiling: float = 100.0
    followers_ceiling: float = 2000.0
    contributions_ceiling: float = 1500.0
    languages_ceiling: float = 10.0
    recent_repos_ceiling: float = 8.0
    recent_repo_window_days: int = 90


class CodeHostingFetcher(BaseFetcher):
    provider = Provider.CODE_HOSTING
    payload_model = CodeHostingPayload

    def __init__(self, transport, *, config: CodeHostingConfig | None = None, **kwargs: Any) -> None:
        super().__init__(transport, **kwargs)
        self._config = config or CodeHostingConfig()

    def derive(self, payload: CodeHostingPayload):
        cfg = self._config
        total_stars = payload.total_stars
        if total_stars is None:
            total_stars = sum(repo.stars for repo in payload.repositories)

        languages = list(payload.languages)
        topics = list(payload.topics)
        for repo in payload.repositories:
            if repo.language and repo.language not in languages:
                languages.append(repo.language)
            topics.extend(repo.topics)

        cutoff = pendulum.instance(self._now_provider()).subtract(days=cfg.recent_repo_window_days)
        recent_repos = sum(
            1
            for repo in payload.repositories
            if repo.created_at is not None and pendulum.instance(repo.created_at) >= cutoff
        )

        metrics = {
            "public_repos": payload.public_repos,
            "followers": payload.followers,
            "total_stars": total_stars,
            "contributions": payload.contributions_last_year,
            "language_count": len(languages),
            "recent_repos": recent_repos,
            "hireable": payload.hireable,
            "bio": payload.bio,
        }
        skills = dedupe(languages + topics)
        dimensions = {
            "technical_depth": mean(
                [
                    log_scale(total_stars, cfg.stars_ceiling),
                    log_scale(payload.public_repos, cfg.repos_ceiling),
                    log_scale(len(languages), cfg.languages_ceiling),
                ]
            ),
            "influence": mean(
                [
                    log_scale(payload.followers, cfg.followers_ceiling),
                    log_scale(total_stars, cfg.stars_ceiling),
                ]
            ),
            "community_engagement": log_scale(
                payload.contributions_last_year, cfg.contributions_ceiling
            ),
            "learning_velocity": mean(
                [
                    log_scale(len(languages), cfg.languages_ceiling),
                    log_scale(recent_repos, cfg.recent_repos_ceiling),
                ]
            ),
        }
        return metrics, skills, dimensions

