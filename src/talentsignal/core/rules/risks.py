"\"\"\"Hiring risk rules.\"\"\""

from __future__ import annotations

from dataclasses import dataclass

from ...schemas.snapshot import RiskSignal
from ..tenure import TenureEstimator
from .base import RuleContext, run_rules


@dataclass
class RiskConfig:
    """Thresholds for risk signals."""

    switches_medium: float = 2.0
    switches_high: float = 3.0
    low_activity_engagement: float = 5.0
    min_skills: int = 3


class RiskRules:
    """Derive risk signals from the roster record and composite score."""

    def __init__(
        self,
        *,
        config: RiskConfig | None = None,
        tenure: TenureEstimator | None = None,
    ) -> None:
        self._config = config or RiskConfig()
        self._tenure = tenure or TenureEstimator()

    @property
    def rules(self):
        return [
            ("job_switching", self.job_switching),
            ("low_activity", self.low_activity),
            ("skill_gap", self.skill_gap),
        ]

    def evaluate(self, context: RuleContext) -> list[RiskSignal]:
        return run_rules(self.rules, context)

    def job_switching(self, context: RuleContext) -> RiskSignal | None:
        switches, average, source = self._tenure.estimated_switches(context.record)
        cfg = self._config
        if switches <= cfg.switches_medium:
            return None
        severity = "high" if switches > cfg.switches_high else "medium"
        return RiskSignal(
            risk_type="job_switching",
            severity=severity,
            title="Frequent job changes",
            description=(
                f"Roughly {switches:.1f} role changes estimated from "
                f"{context.record.experience_years:g} years at {average:.1f} years average tenure."
            ),
            recommendation="Ask about motivations behind past moves and what would make them stay.",
            detected_from=source,
        )

    def low_activity(self, context: RuleContext) -> RiskSignal | None:
        value = context.composite.community_engagement
        if value >= self._config.low_activity_engagement:
            return None
        return RiskSignal(
            risk_type="low_activity",
            severity="medium",
            title="Low public activity",
            description=f"Community engagement is {value:.1f}/10.",
            recommendation="Verify recent work through references or a technical conversation.",
            detected_from="composite_score",
        )

    def skill_gap(self, context: RuleContext) -> RiskSignal | None:
        skills = {skill.lower() for skill in context.record.skills}
        for profile in context.bundle.profiles.values():
            skills.update(skill.lower() for skill in profile.skills)
        if len(skills) >= self._config.min_skills:
            return None
        return RiskSignal(
            risk_type="skill_gap",
            severity="low",
            title="Narrow visible skill set",
            description=f"Only {len(skills)} distinct skills are visible.",
            recommendation="Probe for skills not reflected in public profiles.",
            detected_from="skills",
        )
