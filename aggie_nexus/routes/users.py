"""
users.py
--------
Purpose:
    Administrative user management.

Usage:
    1. PATCH /users/{user_id}/role - Set role to user or manager (admins only)
    2. DELETE /users/{user_id} - Soft-delete an account (self or admin)
"""

from fastapi import APIRouter, Depends, Request, status

from aggie_nexus.auth.verify import current_user_id
from aggie_nexus.models.api.user_request import RoleChangeRequest
from aggie_nexus.models.api.user_response import RoleChangeResponse
from aggie_nexus.services.user_service import change_user_role, delete_user
from aggie_nexus.utils.audit_helpers import audit_action

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/{user_id}/role", response_model=RoleChangeResponse)
async def update_role(
    user_id: str,
    body: RoleChangeRequest,
    request: Request,
    actor_id: str = Depends(current_user_id),
):
    """
    Change a user's role.

    Demoting to `user` removes every organization_managers row for the
    target; promoting to `manager` adds rows for the listed organizations.

    Raises:
        400: Role is not user or manager
        403: Caller is not an admin
        404: Target user not found
    """
    result = await change_user_role(actor_id, user_id, body.role, body.org_ids)

    await audit_action(
        request=request,
        actor_id=actor_id,
        action="user_role_changed",
        resource_type="user",
        resource_id=user_id,
        metadata={
            "role": result["role"],
            "added_org_ids": result["added_org_ids"],
            "removed_memberships": result["removed_memberships"],
        },
    )
    return RoleChangeResponse(**result)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_user(user_id: str, actor_id: str = Depends(current_user_id)):
    await delete_user(actor_id, user_id)
