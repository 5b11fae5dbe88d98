"\"\"\"Achievement badge rules.\"\"\""

from __future__ import annotations

from dataclasses import dataclass

from ...schemas.signals import Provider
from ...schemas.snapshot import AchievementBadge
from .base import RuleContext, run_rules


@dataclass
class BadgeConfig:
    """Thresholds for achievement badges."""

    open_source_min_contributions: int = 100
    open_source_min_repos: int = 10
    top_performer_technical_depth: float = 8.5
    thought_leader_influence: float = 8.0
    rapid_learner_learning_velocity: float = 8.5
    community_builder_engagement: float = 8.0
    mentor_min_accepted_answers: int = 25


class BadgeRules:
    """Derive badges from composite scores and provider counters."""

    def __init__(self, *, config: BadgeConfig | None = None) -> None:
        self._config = config or BadgeConfig()

    @property
    def rules(self):
        return [
            ("open_source_contributor", self.open_source_contributor),
            ("top_performer", self.top_performer),
            ("technical_thought_leader", self.technical_thought_leader),
            ("rapid_learner", self.rapid_learner),
            ("community_builder", self.community_builder),
            ("mentor", self.mentor),
        ]

    def evaluate(self, context: RuleContext) -> list[AchievementBadge]:
        return run_rules(self.rules, context)

    def open_source_contributor(self, context: RuleContext) -> AchievementBadge | None:
        profile = context.bundle.get(Provider.CODE_HOSTING)
        if profile is None:
            return None
        contributions = int(profile.metrics.get("contributions", 0))
        repos = int(profile.metrics.get("public_repos", 0))
        cfg = self._config
        if contributions < cfg.open_source_min_contributions and repos < cfg.open_source_min_repos:
            return None
        return AchievementBadge(
            badge_id="open_source_contributor",
            title="Open Source Contributor",
            description="Sustained public code contributions.",
            evidence=f"{contributions} contributions across {repos} public repositories",
        )

    def top_performer(self, context: RuleContext) -> AchievementBadge | None:
        value = context.composite.technical_depth
        if value <= self._config.top_performer_technical_depth:
            return None
        return AchievementBadge(
            badge_id="top_performer",
            title="Top Performer",
            description="Technical depth in the top band across providers.",
            evidence=f"technical_depth {value:.1f}/10",
        )

    def technical_thought_leader(self, context: RuleContext) -> AchievementBadge | None:
        value = context.composite.influence
        if value <= self._config.thought_leader_influence:
            return None
        return AchievementBadge(
            badge_id="technical_thought_leader",
            title="Technical Thought Leader",
            description="Widely followed voice in the technical community.",
            evidence=f"influence {value:.1f}/10",
        )

    def rapid_learner(self, context: RuleContext) -> AchievementBadge | None:
        value = context.composite.learning_velocity
        if value <= self._config.rapid_learner_learning_velocity:
            return None
        return AchievementBadge(
            badge_id="rapid_learner",
            title="Rapid Learner",
            description="Picks up new languages and tools quickly.",
            evidence=f"learning_velocity {value:.1f}/10",
        )

    def community_builder(self, context: RuleContext) -> AchievementBadge | None:
        value = context.composite.community_engagement
        if value <= self._config.community_builder_engagement:
            return None
        return AchievementBadge(
            badge_id="community_builder",
            title="Community Builder",
            description="Highly engaged in developer communities.",
            evidence=f"community_engagement {value:.1f}/10",
        )

    def mentor(self, context: RuleContext) -> AchievementBadge | None:
        profile = context.bundle.get(Provider.REPUTATION)
        if profile is None:
            return None
        accepted = int(profile.metrics.get("accepted_answers", 0))
        if accepted < self._config.mentor_min_accepted_answers:
            return None
        return AchievementBadge(
            badge_id="mentor",
            title="Mentor",
            description="Regularly helps others solve problems.",
            evidence=f"{accepted} accepted answers",
        )
