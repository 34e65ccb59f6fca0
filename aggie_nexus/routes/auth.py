"""
auth.py
-------
Purpose:
    Session-adjacent endpoints used by the web client on navigation.

Usage:
    1. POST /auth/logins - Record a fresh sign-in (called from the auth callback)
    2. GET /auth/profile-status - Should the onboarding flow be shown?
    3. GET /auth/redirect - Where a page navigation should be redirected, if anywhere
"""

from fastapi import APIRouter, Depends, Query

from aggie_nexus.auth.verify import current_user_id, optional_user_id
from aggie_nexus.domain.route_guard import resolve_redirect
from aggie_nexus.errors import NotFoundError
from aggie_nexus.infrastructure.observability.logging import get_logger
from aggie_nexus.models.api.user_response import (
    LoginRecordedResponse,
    ProfileStatusResponse,
    PageRedirectResponse,
)
from aggie_nexus.services.onboarding_service import get_profile_status
from aggie_nexus.services.user_service import record_login

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


@router.get("/profile-status", response_model=ProfileStatusResponse)
async def profile_status(user_id: str = Depends(current_user_id)):
    """
    Profile-setup status for the authenticated user.

    Raises:
        401: Missing or invalid session
        404: User profile not found
    """
    status = await get_profile_status(user_id)
    return ProfileStatusResponse(
        should_setup_profile=status.should_setup_profile,
        has_skipped_setup=status.has_skipped_setup,
        has_completed_setup=status.has_completed_setup,
    )


@router.post("/logins", response_model=LoginRecordedResponse)
async def login_recorded(user_id: str = Depends(current_user_id)):
    if not await record_login(user_id):
        raise NotFoundError("User profile not found")
    logger.info("Login recorded", user_id=user_id)
    return LoginRecordedResponse(success=True)


@router.get("/redirect", response_model=PageRedirectResponse)
async def page_redirect(
    path: str = Query(..., min_length=1),
    on_password_reset: bool = False,
    user_id: str | None = Depends(optional_user_id),
):
    should_setup = False
    if user_id:
        try:
            should_setup = (await get_profile_status(user_id)).should_setup_profile
        except NotFoundError:
            logger.warning("Authenticated user has no profile row", user_id=user_id)
            should_setup = True

    target = resolve_redirect(
        path,
        is_authenticated=user_id is not None,
        should_setup_profile=should_setup,
        on_password_reset=on_password_reset,
    )
    return PageRedirectResponse(path=path, redirect_to=target)
