import itertools
from datetime import UTC, datetime, timedelta

import pytest

from aggie_nexus.domain.profile_status import (
    evaluate_profile_status,
    has_just_logged_in,
    is_legacy_complete_profile,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    ("completed", "skipped", "just_logged_in", "expected"),
    [
        (True, False, False, False),
        (True, False, True, False),
        (True, True, False, False),
        (True, True, True, False),
        (False, True, True, True),
        (False, True, False, False),
        (False, False, False, True),
        (False, False, True, True),
    ],
)
def test_should_setup_profile(make_profile, completed, skipped, just_logged_in, expected):
    profile = make_profile(profile_setup_completed=completed, profile_setup_skipped=skipped)

    result = evaluate_profile_status(profile, just_logged_in=just_logged_in)

    assert result.should_setup_profile is expected
    assert result.has_completed_setup is completed
    assert result.has_skipped_setup is skipped


def test_same_inputs_give_same_status(make_profile):
    for completed, skipped, just_logged_in in itertools.product([True, False], repeat=3):
        profile = make_profile(profile_setup_completed=completed, profile_setup_skipped=skipped)

        first = evaluate_profile_status(profile, just_logged_in=just_logged_in)
        second = evaluate_profile_status(profile, just_logged_in=just_logged_in)

        assert first == second
        expected = not completed and (not skipped or just_logged_in)
        assert first.should_setup_profile is expected


def test_just_logged_in_defaults_to_false(make_profile):
    profile = make_profile(profile_setup_skipped=True)

    assert evaluate_profile_status(profile).should_setup_profile is False


def test_login_within_window(make_profile):
    profile = make_profile(last_login_at=NOW - timedelta(seconds=30))

    assert has_just_logged_in(profile, 60, now=NOW) is True


def test_login_window_is_inclusive(make_profile):
    profile = make_profile(last_login_at=NOW - timedelta(seconds=60))

    assert has_just_logged_in(profile, 60, now=NOW) is True


def test_login_outside_window(make_profile):
    profile = make_profile(last_login_at=NOW - timedelta(seconds=61))

    assert has_just_logged_in(profile, 60, now=NOW) is False


def test_future_login_counts_as_fresh(make_profile):
    profile = make_profile(last_login_at=NOW + timedelta(seconds=5))

    assert has_just_logged_in(profile, 60, now=NOW) is True


def test_naive_login_timestamp_is_treated_as_utc(make_profile):
    profile = make_profile(last_login_at=datetime(2025, 3, 1, 11, 59, 30))

    assert has_just_logged_in(profile, 60, now=NOW) is True


def test_never_logged_in(make_profile):
    assert has_just_logged_in(make_profile(last_login_at=None), 60, now=NOW) is False


def test_legacy_profile_with_bio_and_skills(make_profile):
    profile = make_profile(bio="Building things", skills=["python"])

    assert is_legacy_complete_profile(profile) is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"bio": "   ", "skills": ["python"]},
        {"bio": "Building things", "skills": []},
        {"bio": "Building things", "skills": ["python"], "profile_setup_skipped": True},
        {"bio": "Building things", "skills": ["python"], "profile_setup_completed": True},
    ],
)
def test_not_legacy_profile(make_profile, overrides):
    assert is_legacy_complete_profile(make_profile(**overrides)) is False
