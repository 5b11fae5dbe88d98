from __future__ import annotations

import pendulum

from talentsignal.core import TenureEstimator
from talentsignal.core.rules import BadgeConfig, BadgeRules, RiskConfig, RiskRules, RuleContext, run_rules
from talentsignal.schemas import CandidateRecord, CompositeScore, Provider, SignalBundle, SourceProfile

NOW = pendulum.datetime(2026, 3, 1, tz="UTC")


def context(record: CandidateRecord, composite: CompositeScore, **metrics_by_provider) -> RuleContext:
    results = {
        Provider(key): SourceProfile(provider=Provider(key), identity="x", metrics=metrics, fetched_at=NOW)
        for key, metrics in metrics_by_provider.items()
    }
    bundle = SignalBundle(candidate_id=record.candidate_id, assembled_at=NOW, results=results)
    return RuleContext(record=record, bundle=bundle, composite=composite)


def test_failing_rule_is_isolated():
    record = CandidateRecord(candidate_id="c-1")
    ctx = context(record, CompositeScore())

    def broken(_):
        raise KeyError("missing metric")

    produced = run_rules([("broken", broken), ("ok", lambda _: "badge"), ("none", lambda _: None)], ctx)

    assert produced == ["badge"]


def test_score_badges_use_strict_thresholds():
    record = CandidateRecord(candidate_id="c-1")
    composite = CompositeScore(
        technical_depth=9.0,
        influence=8.0,
        community_engagement=8.5,
        learning_velocity=8.6,
    )

    badges = BadgeRules().evaluate(context(record, composite))

    assert [badge.badge_id for badge in badges] == ["top_performer", "rapid_learner", "community_builder"]


def test_counter_badges_read_provider_metrics():
    record = CandidateRecord(candidate_id="c-1")
    ctx = context(
        record,
        CompositeScore(),
        code_hosting={"contributions": 20, "public_repos": 12},
        reputation={"accepted_answers": 10},
    )

    default_ids = [badge.badge_id for badge in BadgeRules().evaluate(ctx)]
    tuned_ids = [
        badge.badge_id
        for badge in BadgeRules(config=BadgeConfig(mentor_min_accepted_answers=5)).evaluate(ctx)
    ]

    assert default_ids == ["open_source_contributor"]
    assert tuned_ids == ["open_source_contributor", "mentor"]


def test_job_switching_severity_from_history():
    record = CandidateRecord(
        candidate_id="c-1",
        experience_years=6,
        experiences=[
            {"company": "A", "start": "2020-01", "end": "2022-01"},
            {"company": "B", "start": "2022-01", "end": "2023-01"},
        ],
        skills=["python", "go", "sql"],
    )
    rules = RiskRules(tenure=TenureEstimator(now_provider=lambda: NOW))

    risks = rules.evaluate(context(record, CompositeScore(community_engagement=7.0)))

    assert [risk.risk_type for risk in risks] == ["job_switching"]
    assert risks[0].severity == "high"
    assert risks[0].detected_from == "employment_history"


def test_low_activity_and_skill_gap():
    record = CandidateRecord(candidate_id="c-1", experience_years=2, average_tenure_years=2.0, skills=["cobol"])
    rules = RiskRules(config=RiskConfig(low_activity_engagement=5.0))

    risks = rules.evaluate(context(record, CompositeScore(community_engagement=1.5)))

    assert [(risk.risk_type, risk.severity) for risk in risks] == [
        ("low_activity", "medium"),
        ("skill_gap", "low"),
    ]
