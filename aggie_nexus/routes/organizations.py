"""
organizations.py
----------------
Purpose:
    Organization profile editing for admins and the organization's managers.

Usage:
    1. GET /organizations/{org_id}/can-edit - Whether the caller may edit, and why
    2. PATCH /organizations/{org_id} - Update profile fields
    3. POST /organizations/{org_id}/images - Add a gallery image
    4. DELETE /organizations/{org_id}/images/{image_id} - Remove a gallery image
"""

from fastapi import APIRouter, Depends, Request, status

from aggie_nexus.auth.verify import current_user_id
from aggie_nexus.models.api.organization_api import (
    CanEditResponse,
    OrganizationImageRequest,
    OrganizationResponse,
    OrganizationUpdateRequest,
)
from aggie_nexus.models.domain.organization_domain import OrganizationImage
from aggie_nexus.services.organization_service import (
    add_organization_image,
    check_can_edit,
    delete_organization_image,
    update_organization,
)
from aggie_nexus.utils.audit_helpers import audit_action

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.get("/{org_id}/can-edit", response_model=CanEditResponse)
async def can_edit(org_id: str, user_id: str = Depends(current_user_id)):
    decision = await check_can_edit(user_id, org_id)
    return CanEditResponse(can_edit=decision.allowed, reason=decision.reason)


@router.patch("/{org_id}", response_model=OrganizationResponse)
async def edit_organization(
    org_id: str,
    body: OrganizationUpdateRequest,
    request: Request,
    user_id: str = Depends(current_user_id),
):
    changes = body.model_dump(exclude_unset=True)
    organization = await update_organization(user_id, org_id, changes)

    await audit_action(
        request=request,
        actor_id=user_id,
        action="organization_updated",
        resource_type="organization",
        resource_id=org_id,
        metadata={"fields": sorted(changes)},
    )
    return OrganizationResponse(organization=organization)


@router.post(
    "/{org_id}/images",
    response_model=OrganizationImage,
    status_code=status.HTTP_201_CREATED,
)
async def add_image(
    org_id: str,
    body: OrganizationImageRequest,
    user_id: str = Depends(current_user_id),
):
    return await add_organization_image(user_id, org_id, body.url, body.position)


@router.delete("/{org_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_image(org_id: str, image_id: str, user_id: str = Depends(current_user_id)):
    await delete_organization_image(user_id, org_id, image_id)
