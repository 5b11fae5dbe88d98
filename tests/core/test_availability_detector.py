from __future__ import annotations

from datetime import timedelta

import pendulum

from talentsignal.core import AvailabilityConfig, AvailabilityDetector, prune_signals
from talentsignal.schemas import Provider, SignalBundle, SourceProfile

NOW = pendulum.datetime(2026, 3, 1, tz="UTC")


def make_bundle(**metrics_by_provider) -> SignalBundle:
    results = {}
    for key, metrics in metrics_by_provider.items():
        provider = Provider(key)
        results[provider] = SourceProfile(
            provider=provider,
            identity="someone",
            metrics=metrics,
            fetched_at=NOW,
        )
    return SignalBundle(candidate_id="c-1", assembled_at=NOW, results=results)


def test_network_rules_fire_in_stable_order():
    detector = AvailabilityDetector(now_provider=lambda: NOW)
    bundle = make_bundle(
        network={
            "open_to_work": True,
            "profile_updated_at": NOW.subtract(days=10).isoformat(),
            "connections_added_30d": 80,
            "recently_added_skills": 2,
            "headline": "Staff engineer",
        }
    )

    signals = detector.detect(bundle)

    assert [signal.signal_type for signal in signals] == [
        "network_expansion",
        "open_to_opportunities",
        "profile_update",
        "skill_updates",
    ]
    assert all(signal.detected_at == NOW for signal in signals)
    assert all(signal.source == Provider.NETWORK for signal in signals)


def test_stale_profile_and_small_growth_are_ignored():
    detector = AvailabilityDetector(now_provider=lambda: NOW)
    bundle = make_bundle(
        network={
            "profile_updated_at": NOW.subtract(days=90).isoformat(),
            "connections_added_30d": 10,
            "recently_added_skills": 0,
        }
    )
    assert detector.detect(bundle) == []


def test_job_search_phrase_and_code_hosting_rules():
    detector = AvailabilityDetector(now_provider=lambda: NOW)
    bundle = make_bundle(
        code_hosting={"recent_repos": 4, "hireable": True},
        microblog={"bio": "Rust hacker, looking for my next challenge"},
    )

    signals = detector.detect(bundle)
    kinds = [(signal.signal_type, signal.source) for signal in signals]

    assert kinds == [
        ("job_search_activity", Provider.MICROBLOG),
        ("open_to_opportunities", Provider.CODE_HOSTING),
        ("side_project_focus", Provider.CODE_HOSTING),
    ]
    assert "looking for" in signals[0].detail


def test_thresholds_are_configurable():
    detector = AvailabilityDetector(
        config=AvailabilityConfig(connection_growth_threshold=5),
        now_provider=lambda: NOW,
    )
    bundle = make_bundle(network={"connections_added_30d": 10})
    assert [signal.signal_type for signal in detector.detect(bundle)] == ["network_expansion"]


def test_prune_signals_drops_old_entries():
    detector = AvailabilityDetector(now_provider=lambda: NOW)
    signals = detector.detect(make_bundle(network={"open_to_work": True}))

    assert prune_signals(signals, timedelta(days=1), NOW.add(hours=2)) == signals
    assert prune_signals(signals, timedelta(days=1), NOW.add(days=3)) == []
