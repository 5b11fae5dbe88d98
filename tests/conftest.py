from __future__ import annotations

import copy

import pendulum
import pytest

from talentsignal.adapters import StaticProfileTransport, build_fetchers
from talentsignal.core import SignalAggregator
from talentsignal.schemas import CandidateRecord, Provider

FIXED_NOW = pendulum.datetime(2026, 3, 1, 12, tz="UTC")

PAYLOADS: dict[str, dict[str, dict]] = {
    "code_hosting": {
        "alice-gh": {
            "public_repos": 42,
            "followers": 850,
            "contributions_last_year": 640,
            "languages": ["Python", "TypeScript"],
            "topics": ["react", "machine-learning"],
            "repositories": [
                {"name": "react-charts", "stars": 420, "language": "TypeScript", "topics": ["react"], "created_at": "2026-02-10T00:00:00Z"},
                {"name": "tiny-ml", "stars": 310, "language": "Python", "topics": ["pytorch"], "created_at": "2025-05-01T00:00:00Z"},
            ],
            "hireable": False,
            "recent_activity": [
                {"kind": "push", "title": "react-charts", "occurred_at": "2026-02-27T09:00:00Z"},
                {"kind": "release", "title": "tiny-ml 0.3", "occurred_at": "2026-02-28T09:00:00Z"},
            ],
        },
        "bob-gh": {
            "public_repos": 4,
            "followers": 12,
            "contributions_last_year": 35,
            "languages": ["Java"],
            "repositories": [{"name": "billing", "stars": 3, "language": "Java"}],
        },
    },
    "reputation": {
        "alice-so": {
            "reputation": 15200,
            "answer_count": 410,
            "question_count": 25,
            "accepted_answer_count": 130,
            "top_tags": ["python", "reactjs"],
            "badges": {"gold": 3, "silver": 22, "bronze": 61},
        },
    },
    "network": {
        "alice-li": {
            "headline": "Senior ML Engineer",
            "connections": 900,
            "recommendations": 12,
            "experience_years": 7,
            "skills": ["Python", "Machine Learning", "React"],
            "open_to_work": False,
            "profile_updated_at": "2025-06-01T00:00:00Z",
        },
        "bob-li": {
            "headline": "Backend developer",
            "connections": 150,
            "experience_years": 3,
            "skills": ["Java", "Spring"],
        },
    },
    "microblog": {
        "alice-mb": {
            "followers": 3100,
            "following": 220,
            "posts_last_90_days": 64,
            "tech_post_ratio": 0.8,
            "bio": "Building ML systems with PyTorch and React",
        },
    },
    "forum": {
        "alice-fm": {
            "karma": 5200,
            "post_count": 120,
            "comment_count": 940,
            "communities": ["MachineLearning", "reactjs", "python"],
        },
    },
}


@pytest.fixture
def now() -> pendulum.DateTime:
    return FIXED_NOW


@pytest.fixture
def payloads() -> dict[str, dict[str, dict]]:
    return copy.deepcopy(PAYLOADS)


@pytest.fixture
def transport(payloads) -> StaticProfileTransport:
    return StaticProfileTransport(payloads)


@pytest.fixture
def aggregator(transport) -> SignalAggregator:
    fetchers = build_fetchers(transport, now_provider=lambda: FIXED_NOW)
    return SignalAggregator(fetchers, now_provider=lambda: FIXED_NOW)


@pytest.fixture
def alice() -> CandidateRecord:
    return CandidateRecord(
        candidate_id="alice",
        name="Alice Moreau",
        location="Berlin, Germany",
        current_title="Senior ML Engineer",
        current_company="Lumen Labs",
        experience_years=7,
        skills=["Python", "PyTorch"],
        industries=["startup"],
        bio="Collaborative engineer who enjoys mentoring.",
        identities={
            Provider.CODE_HOSTING: "alice-gh",
            Provider.REPUTATION: "alice-so",
            Provider.NETWORK: "alice-li",
            Provider.MICROBLOG: "alice-mb",
            Provider.FORUM: "alice-fm",
        },
    )


@pytest.fixture
def bob() -> CandidateRecord:
    return CandidateRecord(
        candidate_id="bob",
        name="Bob Tanaka",
        location="Osaka, Japan",
        current_title="Backend Developer",
        current_company="Ledger Co",
        experience_years=3,
        skills=["Java"],
        industries=["fintech"],
        identities={
            Provider.CODE_HOSTING: "bob-gh",
            Provider.NETWORK: "bob-li",
        },
    )
