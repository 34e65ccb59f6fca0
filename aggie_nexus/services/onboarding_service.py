"""
Onboarding service for the profile-setup flow.

Computes the profile-setup status for protected-page navigation and
handles the setup form submit and skip actions.

Service layer returns domain models only - API layer handles HTTP concerns.
"""

from datetime import datetime

from aggie_nexus.config import settings
from aggie_nexus.db.helpers import DatabaseError
from aggie_nexus.domain.profile_status import (
    ProfileStatusResult,
    evaluate_profile_status,
    has_just_logged_in,
    is_legacy_complete_profile,
)
from aggie_nexus.errors import NotFoundError
from aggie_nexus.infrastructure.observability.logging import get_logger
from aggie_nexus.models.domain.user_domain import UserProfile
from aggie_nexus.services.affiliation_service import merge_claims
from aggie_nexus.services.user_service import (
    get_user_profile,
    save_profile_setup,
    set_profile_setup_flags,
)

logger = get_logger(__name__)


async def get_profile_status(user_id: str, now: datetime | None = None) -> ProfileStatusResult:
    """
    Evaluate whether the user should be sent to profile setup.

    Legacy profiles (filled in before the setup flags existed) are reported
    as completed and get profile_setup_completed persisted so they
    are not re-evaluated. That write is best-effort: a failure is logged and
    the computed status is still returned.

    Raises:
        NotFoundError: no profile row for the user
    """
    profile = await get_user_profile(user_id)
    if not profile:
        raise NotFoundError("User profile not found")

    just_logged_in = has_just_logged_in(profile, settings.LOGIN_WINDOW_SECONDS, now=now)
    status = evaluate_profile_status(profile, just_logged_in)

    if is_legacy_complete_profile(profile):
        status = ProfileStatusResult(
            should_setup_profile=False,
            has_skipped_setup=False,
            has_completed_setup=True,
        )
        try:
            await set_profile_setup_flags(user_id, completed=True)
            logger.info("Legacy profile marked as setup completed", user_id=user_id)
        except DatabaseError as e:
            logger.warning(
                "Could not persist legacy profile completion",
                user_id=user_id,
                error=str(e),
            )

    logger.info(
        "Profile status evaluated",
        user_id=user_id,
        should_setup_profile=status.should_setup_profile,
        just_logged_in=just_logged_in,
    )
    return status


async def complete_profile_setup(
    user_id: str,
    bio: str,
    skills: list[str],
    organizations: list[str],
    full_name: str | None = None,
) -> tuple[UserProfile, list[str]]:
    """
    Save the setup form, creating organization claims for new selections.

    Returns:
        (updated profile, organizations auto-verified by email domain)
    """
    profile = await get_user_profile(user_id)
    if not profile:
        raise NotFoundError("User profile not found")

    claims, auto_verified = merge_claims(profile, organizations)
    affected = await save_profile_setup(user_id, bio, skills, claims, full_name=full_name)
    if affected == 0:
        raise NotFoundError("User profile not found")

    logger.info(
        "Profile setup completed",
        user_id=user_id,
        skills=len(skills),
        claims=len(claims),
        auto_verified=auto_verified,
    )

    updated = await get_user_profile(user_id)
    if not updated:
        raise NotFoundError("User profile not found")
    return updated, auto_verified


async def skip_profile_setup(user_id: str) -> UserProfile:
    affected = await set_profile_setup_flags(user_id, skipped=True)
    if affected == 0:
        raise NotFoundError("User profile not found")

    logger.info("Profile setup skipped", user_id=user_id)

    profile = await get_user_profile(user_id)
    if not profile:
        raise NotFoundError("User profile not found")
    return profile
