from __future__ import annotations

import asyncio

import pytest

from talentsignal.adapters import (
    CodeHostingFetcher,
    ForumFetcher,
    MicroblogFetcher,
    NetworkFetcher,
    ReputationFetcher,
    StaticProfileTransport,
    build_fetchers,
)
from talentsignal.core import FetchError, RateLimitConfig, RateLimitedError, RateLimiter
from talentsignal.schemas import DIMENSIONS, Provider


def test_code_hosting_fetcher_derives_metrics_and_skills(transport, now):
    fetcher = CodeHostingFetcher(transport, now_provider=lambda: now)

    profile = asyncio.run(fetcher.fetch("alice-gh"))

    assert profile.provider == Provider.CODE_HOSTING
    assert profile.identity == "alice-gh"
    assert profile.metrics["total_stars"] == 730
    assert profile.metrics["contributions"] == 640
    assert profile.metrics["recent_repos"] == 1
    assert profile.metrics["language_count"] == 2
    assert "react" in [skill.lower() for skill in profile.skills]
    assert set(profile.dimension_scores) == set(DIMENSIONS)
    assert all(0.0 <= value <= 10.0 for value in profile.dimension_scores.values())
    assert profile.fetched_at == now
    assert [item.title for item in profile.recent_activity] == ["tiny-ml 0.3", "react-charts"]


def test_explicit_total_stars_wins_over_repository_sum(now):
    transport = StaticProfileTransport(
        {"code_hosting": {"dev": {"total_stars": 5, "repositories": [{"name": "x", "stars": 900}]}}}
    )
    profile = asyncio.run(CodeHostingFetcher(transport, now_provider=lambda: now).fetch("dev"))
    assert profile.metrics["total_stars"] == 5


def test_each_provider_fetcher_produces_bounded_scores(transport, now):
    cases = [
        (ReputationFetcher, "alice-so"),
        (NetworkFetcher, "alice-li"),
        (MicroblogFetcher, "alice-mb"),
        (ForumFetcher, "alice-fm"),
    ]
    for fetcher_type, identity in cases:
        profile = asyncio.run(fetcher_type(transport, now_provider=lambda: now).fetch(identity))
        assert profile.provider == fetcher_type.provider
        assert 0.0 < profile.score <= 10.0
        assert set(profile.dimension_scores) == set(DIMENSIONS)


def test_reputation_fetcher_reports_badges_and_tags(transport, now):
    profile = asyncio.run(ReputationFetcher(transport, now_provider=lambda: now).fetch("alice-so"))
    assert profile.metrics["accepted_answers"] == 130
    assert profile.metrics["gold_badges"] == 3
    assert profile.skills == ["python", "reactjs"]


def test_microblog_and_forum_skills_are_canonicalized(transport, now):
    microblog = asyncio.run(MicroblogFetcher(transport, now_provider=lambda: now).fetch("alice-mb"))
    forum = asyncio.run(ForumFetcher(transport, now_provider=lambda: now).fetch("alice-fm"))

    assert "machine learning" in microblog.skills
    assert "pytorch" in microblog.skills
    assert "react" in forum.skills
    assert "python" in forum.skills


def test_empty_payload_yields_zero_profile(now):
    transport = StaticProfileTransport({"forum": {"quiet": {}}})
    profile = asyncio.run(ForumFetcher(transport, now_provider=lambda: now).fetch("quiet"))
    assert profile.score == 0.0
    assert profile.skills == []


def test_invalid_payload_raises_malformed(now):
    transport = StaticProfileTransport({"code_hosting": {"broken": {"public_repos": -3}}})
    fetcher = CodeHostingFetcher(transport, now_provider=lambda: now)

    with pytest.raises(FetchError) as exc:
        asyncio.run(fetcher.fetch("broken"))
    assert exc.value.kind == "malformed"
    assert exc.value.provider == Provider.CODE_HOSTING


def test_unknown_identity_raises_not_found(transport, now):
    fetcher = NetworkFetcher(transport, now_provider=lambda: now)
    with pytest.raises(FetchError) as exc:
        asyncio.run(fetcher.fetch("nobody"))
    assert exc.value.kind == "not_found"


def test_exhausted_local_window_raises_rate_limited(transport, now):
    limiter = RateLimiter(
        "reputation",
        config=RateLimitConfig(max_requests=1, window_seconds=60.0),
        clock=lambda: 100.0,
    )
    fetcher = ReputationFetcher(transport, limiter=limiter, now_provider=lambda: now)

    asyncio.run(fetcher.fetch("alice-so"))
    with pytest.raises(RateLimitedError) as exc:
        asyncio.run(fetcher.fetch("alice-so"))
    assert exc.value.kind == "rate_limited"
    assert exc.value.retry_after == pytest.approx(60.0)


def test_build_fetchers_applies_rate_limit_overrides(transport):
    fetchers = build_fetchers(transport, rate_limits={"forum": {"max_requests": 2}})
    by_provider = {fetcher.provider: fetcher for fetcher in fetchers}

    assert set(by_provider) == set(Provider)
    assert by_provider[Provider.FORUM].limiter.config.max_requests == 2
    assert by_provider[Provider.NETWORK].limiter.config.max_requests == 30
