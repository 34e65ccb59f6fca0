"""
projects.py
-----------
Purpose:
    Project submission with program-claim validation, owner updates and deletion.

Usage:
    1. POST /projects - Create a project owned by the caller
    2. PUT /projects/{project_id} - Update (owner only)
    3. DELETE /projects/{project_id} - Soft delete (owner); `?hard=true` removes it (admin)
"""

from fastapi import APIRouter, Depends, Request, status

from aggie_nexus.auth.verify import current_user_id
from aggie_nexus.models.api.project_request import ProjectCreateRequest, ProjectUpdateRequest
from aggie_nexus.models.api.project_response import ProjectDeleteResponse, ProjectResponse
from aggie_nexus.services.project_service import (
    create_project,
    hard_delete_project,
    soft_delete_project,
    update_project,
)
from aggie_nexus.utils.audit_helpers import audit_action

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def submit_project(body: ProjectCreateRequest, user_id: str = Depends(current_user_id)):
    """
    Create a project.

    Every listed incubator/accelerator program must be backed by a claim on
    its required organization; otherwise 400 with one error per program.
    """
    project, warnings = await create_project(user_id, body.model_dump())
    return ProjectResponse(project=project, warnings=warnings)


@router.put("/{project_id}", response_model=ProjectResponse)
async def edit_project(
    project_id: str,
    body: ProjectUpdateRequest,
    user_id: str = Depends(current_user_id),
):
    project, warnings = await update_project(
        user_id, project_id, body.model_dump(exclude_unset=True)
    )
    return ProjectResponse(project=project, warnings=warnings)


@router.delete("/{project_id}", response_model=ProjectDeleteResponse)
async def remove_project(
    project_id: str,
    request: Request,
    hard: bool = False,
    user_id: str = Depends(current_user_id),
):
    if not hard:
        await soft_delete_project(user_id, project_id)
        return ProjectDeleteResponse(success=True)

    await hard_delete_project(user_id, project_id)
    await audit_action(
        request=request,
        actor_id=user_id,
        action="project_hard_deleted",
        resource_type="project",
        resource_id=project_id,
    )
    return ProjectDeleteResponse(success=True, hard_deleted=True)
