"""
Profile-setup status evaluation.

Decides whether the onboarding flow should be presented to a user. Every
function here is pure so the same answer comes out whether it is called
from a route handler or from a background job.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from aggie_nexus.models.domain.user_domain import UserProfile

DEFAULT_LOGIN_WINDOW_SECONDS = 60


@dataclass(frozen=True, slots=True)
class ProfileStatusResult:
    should_setup_profile: bool
    has_skipped_setup: bool
    has_completed_setup: bool


def evaluate_profile_status(
    profile: UserProfile, just_logged_in: bool = False
) -> ProfileStatusResult:
    """
    Decide whether onboarding must be shown.

    Completion always wins. A skipped setup is only surfaced again on a
    fresh login; an untouched profile always needs setup.
    """
    has_completed = profile.profile_setup_completed is True
    has_skipped = profile.profile_setup_skipped is True

    if has_completed:
        should_setup = False
    elif has_skipped:
        should_setup = just_logged_in
    else:
        should_setup = True

    return ProfileStatusResult(
        should_setup_profile=should_setup,
        has_skipped_setup=has_skipped,
        has_completed_setup=has_completed,
    )


def has_just_logged_in(
    profile: UserProfile,
    window_seconds: float = DEFAULT_LOGIN_WINDOW_SECONDS,
    now: datetime | None = None,
) -> bool:
    """
    True when the last login happened within `window_seconds` of `now`.

    The window is inclusive. A login stamped in the future (clock skew)
    counts as just logged in.
    """
    if profile.last_login_at is None:
        return False

    now = now or datetime.now(UTC)
    last_login = profile.last_login_at
    if last_login.tzinfo is None:
        last_login = last_login.replace(tzinfo=UTC)

    elapsed = (now - last_login).total_seconds()
    return elapsed <= window_seconds


def is_legacy_complete_profile(profile: UserProfile) -> bool:
    """
    Profiles filled in before the setup flags existed.

    Neither flag is set, yet the profile already has a bio and skills.
    """
    if profile.profile_setup_completed or profile.profile_setup_skipped:
        return False
    return bool(profile.bio and profile.bio.strip()) and len(profile.skills) > 0
