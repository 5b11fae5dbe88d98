from __future__ import annotations

import pendulum
import pytest

from talentsignal.core import ComposerConfig, InsufficientSignalError, ScoreComposer
from talentsignal.schemas import DIMENSIONS, FetchFailure, Provider, SignalBundle, SourceProfile

FIXED = pendulum.datetime(2026, 3, 1, tz="UTC")


def profile(provider: Provider, value: float) -> SourceProfile:
    return SourceProfile(
        provider=provider,
        identity=f"{provider.value}-user",
        score=value,
        dimension_scores={dimension: value for dimension in DIMENSIONS},
        fetched_at=FIXED,
    )


def bundle(*results) -> SignalBundle:
    return SignalBundle(
        candidate_id="c-1",
        assembled_at=FIXED,
        results={result.provider: result for result in results},
    )


def test_dimensions_are_weighted_means_of_present_providers():
    composite = ScoreComposer().compose(
        bundle(profile(Provider.CODE_HOSTING, 8.0), profile(Provider.NETWORK, 4.0))
    )

    assert composite.technical_depth == pytest.approx(9.6 / 1.4, abs=1e-3)
    assert composite.influence == pytest.approx(8.0 / 1.4, abs=1e-3)
    assert composite.community_engagement == pytest.approx(8.4 / 1.3, abs=1e-3)
    assert composite.learning_velocity == pytest.approx(9.2 / 1.4, abs=1e-3)
    assert composite.confidence == pytest.approx(0.4)
    assert composite.providers_used == [Provider.CODE_HOSTING, Provider.NETWORK]
    assert Provider.FORUM in composite.providers_missing
    assert not composite.insufficient_data


def test_removing_a_provider_matches_composing_without_it():
    composer = ScoreComposer()
    full = bundle(
        profile(Provider.CODE_HOSTING, 9.0),
        profile(Provider.REPUTATION, 6.0),
        profile(Provider.MICROBLOG, 2.0),
    )
    without_microblog = bundle(profile(Provider.CODE_HOSTING, 9.0), profile(Provider.REPUTATION, 6.0))

    assert composer.compose(full.without(Provider.MICROBLOG)) == composer.compose(without_microblog)


def test_failed_providers_only_lower_confidence():
    composer = ScoreComposer()
    healthy = bundle(profile(Provider.FORUM, 7.0))
    with_failure = bundle(
        profile(Provider.FORUM, 7.0),
        FetchFailure(provider=Provider.NETWORK, kind="timeout"),
    )

    left = composer.compose(healthy)
    right = composer.compose(with_failure)

    assert left.overall == right.overall
    assert left.confidence == right.confidence == pytest.approx(0.2)


def test_composition_is_order_independent():
    composer = ScoreComposer()
    profiles = [
        profile(Provider.CODE_HOSTING, 3.0),
        profile(Provider.FORUM, 8.0),
        profile(Provider.MICROBLOG, 5.5),
    ]

    assert composer.compose(bundle(*profiles)) == composer.compose(bundle(*reversed(profiles)))


def test_empty_bundle_is_flagged_insufficient():
    composite = ScoreComposer().compose(bundle())

    assert composite.insufficient_data
    assert composite.overall == 0.0
    assert composite.confidence == 0.0
    assert len(composite.providers_missing) == 5


def test_strict_mode_raises_when_no_provider_succeeded():
    all_failed = bundle(FetchFailure(provider=Provider.NETWORK, kind="not_found"))

    with pytest.raises(InsufficientSignalError):
        ScoreComposer(config=ComposerConfig(strict=True)).compose(all_failed)
    with pytest.raises(InsufficientSignalError):
        ScoreComposer().compose(all_failed, strict=True)


def test_weight_overrides_are_validated():
    composer = ScoreComposer(config=ComposerConfig(weights={"forum": {"technical_depth": 2.0}}))
    assert composer.weights[Provider.FORUM]["technical_depth"] == 2.0
    assert composer.weights[Provider.FORUM]["influence"] == 0.4

    with pytest.raises(ValueError):
        ScoreComposer(config=ComposerConfig(weights={"forum": {"charisma": 1.0}}))
    with pytest.raises(ValueError):
        ScoreComposer(config=ComposerConfig(weights={"forum": {"influence": 0.0}}))
