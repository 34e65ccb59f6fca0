"""
profile.py
----------
Purpose:
    Profile-setup flow and organization claims.

Architecture:
    - API layer: Handles HTTP concerns, validation, auth
    - Service layer: Returns domain models (UserProfile, OrganizationClaim)
    - API layer: Converts domain models -> HTTP response models

Usage:
    1. PUT /profile/setup - Save bio, skills and organization selections
    2. POST /profile/setup/skip - Dismiss the setup flow until the next sign-in
    3. GET /profile/organizations/{organization}/status - Claim verification status
    4. DELETE /profile/claims/{organization} - Withdraw a pending claim
"""

from fastapi import APIRouter, Depends, Request

from aggie_nexus.auth.verify import current_user_id
from aggie_nexus.models.api.user_request import ProfileSetupRequest
from aggie_nexus.models.api.user_response import (
    ClaimStatusResponse,
    ClaimWithdrawnResponse,
    ProfileSetupResponse,
)
from aggie_nexus.services.affiliation_service import get_claim_status, withdraw_claim
from aggie_nexus.services.onboarding_service import complete_profile_setup, skip_profile_setup
from aggie_nexus.utils.audit_helpers import audit_action

router = APIRouter(prefix="/profile", tags=["profile"])


@router.put("/setup", response_model=ProfileSetupResponse)
async def setup_profile(
    body: ProfileSetupRequest,
    request: Request,
    user_id: str = Depends(current_user_id),
):
    """
    Save the profile-setup form.

    Newly selected organizations become pending claims, or verified ones
    when the account email belongs to the organization's domain.

    Raises:
        400: Invalid form data
        401: Invalid authentication token
        404: User profile not found
    """
    profile, auto_verified = await complete_profile_setup(
        user_id,
        bio=body.bio,
        skills=body.skills,
        organizations=body.organizations,
        full_name=body.full_name,
    )

    for organization in auto_verified:
        await audit_action(
            request=request,
            actor_id=user_id,
            action="claim_auto_verified",
            resource_type="organization_claim",
            resource_id=organization,
            metadata={"method": "email_domain"},
        )

    return ProfileSetupResponse(
        success=True,
        profile=profile,
        auto_verified_organizations=auto_verified,
    )


@router.post("/setup/skip", response_model=ProfileSetupResponse)
async def skip_setup(user_id: str = Depends(current_user_id)):
    profile = await skip_profile_setup(user_id)
    return ProfileSetupResponse(success=True, profile=profile)


@router.get("/organizations/{organization}/status", response_model=ClaimStatusResponse)
async def claim_status(organization: str, user_id: str = Depends(current_user_id)):
    status = await get_claim_status(user_id, organization)
    return ClaimStatusResponse(organization=organization, status=status)


@router.delete("/claims/{organization}", response_model=ClaimWithdrawnResponse)
async def remove_claim(
    organization: str,
    request: Request,
    user_id: str = Depends(current_user_id),
):
    """
    Withdraw a pending claim. Verified and rejected claims stay on record.

    Raises:
        400: Claim is no longer pending
        404: No claim for that organization
    """
    remaining = await withdraw_claim(user_id, organization)

    await audit_action(
        request=request,
        actor_id=user_id,
        action="claim_withdrawn",
        resource_type="organization_claim",
        resource_id=organization,
    )

    return ClaimWithdrawnResponse(
        success=True,
        remaining_organizations=[claim.organization for claim in remaining],
    )
