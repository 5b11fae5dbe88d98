from __future__ import annotations

import pendulum
import pytest
from pydantic import ValidationError

from talentsignal.schemas import (
    CandidateRecord,
    CompositeScore,
    FetchFailure,
    Provider,
    SignalBundle,
    SourceProfile,
)

NOW = pendulum.datetime(2026, 3, 1, tz="UTC")


def make_bundle() -> SignalBundle:
    return SignalBundle(
        candidate_id="c-1",
        assembled_at=NOW,
        results={
            Provider.CODE_HOSTING: SourceProfile(
                provider=Provider.CODE_HOSTING,
                identity="c1-gh",
                score=7.0,
                dimension_scores={"influence": 3.0},
                fetched_at=NOW,
            ),
            Provider.FORUM: FetchFailure(provider=Provider.FORUM, kind="timeout", cause="slow"),
        },
    )


def test_bundle_separates_profiles_and_failures():
    bundle = make_bundle()

    assert list(bundle.profiles) == [Provider.CODE_HOSTING]
    assert list(bundle.failures) == [Provider.FORUM]
    assert bundle.get(Provider.FORUM) is None
    assert bundle.get(Provider.CODE_HOSTING).subscore("influence") == 3.0
    assert bundle.get(Provider.CODE_HOSTING).subscore("technical_depth") == 7.0


def test_bundle_without_leaves_original_untouched():
    bundle = make_bundle()

    reduced = bundle.without(Provider.CODE_HOSTING)

    assert list(reduced.results) == [Provider.FORUM]
    assert Provider.CODE_HOSTING in bundle.results


def test_profiles_are_immutable_and_bounded():
    profile = make_bundle().get(Provider.CODE_HOSTING)

    with pytest.raises(ValidationError):
        profile.score = 2.0
    with pytest.raises(ValidationError):
        CompositeScore(overall=11.0)
    with pytest.raises(ValidationError):
        FetchFailure(provider=Provider.NETWORK, kind="exploded")


def test_candidate_identities_skip_blank_handles():
    record = CandidateRecord(
        candidate_id="c-1",
        identities={"code_hosting": "c1-gh", "network": ""},
    )

    assert record.identities_present() == {Provider.CODE_HOSTING: "c1-gh"}


def test_candidate_record_rejects_negative_experience():
    with pytest.raises(ValidationError):
        CandidateRecord(candidate_id="c-1", experience_years=-1)
