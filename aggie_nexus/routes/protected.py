"""
protected.py
------------
Purpose:
    Endpoints that require a valid Supabase Auth JWT for access.

    - `/me` returns the caller's profile, the organizations they manage,
      and the token metadata.

Usage:
    Call `/me` with:
        Authorization: Bearer <access_token>
    where <access_token> is from Supabase Auth sign-in.
"""

from fastapi import APIRouter, Depends

from aggie_nexus.auth.verify import auth_dependency, current_user_id
from aggie_nexus.domain.affiliation import get_pending_organizations, get_verified_organizations
from aggie_nexus.errors import NotFoundError
from aggie_nexus.models.api.user_response import AuthMeta, UserProfileResponse
from aggie_nexus.services.organization_service import list_managed_organizations
from aggie_nexus.services.user_service import get_user_profile

router = APIRouter(tags=["profile"])


@router.get("/me", response_model=UserProfileResponse)
async def me(
    claims: dict = Depends(auth_dependency),
    user_id: str = Depends(current_user_id),
):
    profile = await get_user_profile(user_id)
    if not profile:
        raise NotFoundError("User profile not found")

    managed = await list_managed_organizations(user_id)

    auth = AuthMeta(
        user_id=user_id,
        email=claims.get("email"),
        role=claims.get("role", "authenticated"),
        aud=claims.get("aud"),
        iat=claims.get("iat"),
        exp=claims.get("exp"),
    )

    return UserProfileResponse(
        profile=profile,
        managed_organizations=managed,
        verified_organizations=get_verified_organizations(profile),
        pending_organizations=get_pending_organizations(profile),
        auth=auth,
    )
