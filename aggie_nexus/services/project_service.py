"""
Project service - ownership checks and program-claim validation around
project writes.

Claimed programs are validated against the owner's organization claims
before anything is persisted; a failing claim rejects the whole write.
Warnings are returned next to the saved project.
"""

from typing import Any

from aggie_nexus.db.helpers import execute_query, fetch_one
from aggie_nexus.domain.affiliation import (
    ProjectValidationResult,
    claimable_organizations,
    validate_project_submission,
)
from aggie_nexus.domain.authorization import (
    Caller,
    can_hard_delete_project,
    can_soft_delete_project,
    can_update_project,
    require,
)
from aggie_nexus.errors import NotFoundError, ValidationError
from aggie_nexus.infrastructure.observability.logging import get_logger
from aggie_nexus.models.domain.project_domain import ProjectRecord
from aggie_nexus.services.affiliation_service import get_affiliation_rules
from aggie_nexus.services.user_service import get_user_profile, load_caller

logger = get_logger(__name__)

_PROJECT_COLUMNS = """
    id::text AS id, owner_id::text AS owner_id, title, description,
    incubator_accelerator, organizations, deleted, created_at, updated_at
"""


def _project_from_row(row: dict[str, Any]) -> ProjectRecord:
    return ProjectRecord(
        **{
            **row,
            "incubator_accelerator": row.get("incubator_accelerator") or [],
            "organizations": row.get("organizations") or [],
        }
    )


async def get_project(project_id: str, *, include_deleted: bool = False) -> ProjectRecord | None:
    query = f"SELECT {_PROJECT_COLUMNS} FROM projects WHERE id = %s"
    if not include_deleted:
        query += " AND deleted = false"
    row = await fetch_one(query, (project_id,))
    return _project_from_row(row) if row else None


async def validate_programs_for_owner(
    owner_id: str, programs: list[str], organizations: list[str]
) -> ProjectValidationResult:
    """Validate program and organization claims against the owner's current claims."""
    rules = get_affiliation_rules()
    profile = await get_user_profile(owner_id)
    user_organizations = claimable_organizations(profile, rules)

    result = validate_project_submission(user_organizations, programs, organizations, rules)
    if not result.is_valid:
        logger.info(
            "Project program claims rejected",
            owner_id=owner_id,
            programs=programs,
            error_count=len(result.errors),
        )
        raise ValidationError(
            "Invalid program claims", errors=result.errors, warnings=result.warnings
        )
    return result


async def create_project(user_id: str, data: dict[str, Any]) -> tuple[ProjectRecord, list[str]]:
    programs = list(data.get("incubator_accelerator") or [])
    organizations = list(data.get("organizations") or [])
    validation = await validate_programs_for_owner(user_id, programs, organizations)

    row = await fetch_one(
        f"""
        INSERT INTO projects (
            owner_id, title, description, incubator_accelerator, organizations,
            deleted, created_at, updated_at
        ) VALUES (%s, %s, %s, %s, %s, false, NOW(), NOW())
        RETURNING {_PROJECT_COLUMNS}
        """,
        (user_id, data["title"], data.get("description"), programs, organizations),
    )
    project = _project_from_row(row)
    logger.info("Project created", project_id=project.id, owner_id=user_id)
    return project, validation.warnings


async def update_project(
    user_id: str, project_id: str, changes: dict[str, Any]
) -> tuple[ProjectRecord, list[str]]:
    """
    Update a project. Owner only.

    Projects are publicly readable, so existence is checked before ownership.
    """
    project = await get_project(project_id)
    if not project:
        raise NotFoundError("Project not found")

    require(
        can_update_project(Caller(user_id=user_id), project),
        "You don't have permission to update this project",
    )

    programs = changes.get("incubator_accelerator")
    organizations = changes.get("organizations")
    programs = project.incubator_accelerator if programs is None else list(programs)
    organizations = project.organizations if organizations is None else list(organizations)

    validation = await validate_programs_for_owner(project.owner_id, programs, organizations)

    row = await fetch_one(
        f"""
        UPDATE projects
        SET
            title = COALESCE(%s, title),
            description = COALESCE(%s, description),
            incubator_accelerator = %s,
            organizations = %s,
            updated_at = NOW()
        WHERE id = %s AND deleted = false
        RETURNING {_PROJECT_COLUMNS}
        """,
        (changes.get("title"), changes.get("description"), programs, organizations, project_id),
    )
    if not row:
        raise NotFoundError("Project not found")

    logger.info("Project updated", project_id=project_id, user_id=user_id)
    return _project_from_row(row), validation.warnings


async def soft_delete_project(user_id: str, project_id: str) -> None:
    project = await get_project(project_id)
    if not project:
        raise NotFoundError("Project not found")

    require(
        can_soft_delete_project(Caller(user_id=user_id), project),
        "You don't have permission to delete this project",
    )

    await execute_query(
        "UPDATE projects SET deleted = true, updated_at = NOW() WHERE id = %s",
        (project_id,),
    )
    logger.info("Project soft-deleted", project_id=project_id, user_id=user_id)


async def hard_delete_project(user_id: str, project_id: str) -> None:
    """Permanently remove a project, soft-deleted or not. Admin only."""
    project = await get_project(project_id, include_deleted=True)
    if not project:
        raise NotFoundError("Project not found")

    caller = await load_caller(user_id)
    require(can_hard_delete_project(caller), "Only admins can permanently delete projects")

    await execute_query("DELETE FROM projects WHERE id = %s", (project_id,))
    logger.info("Project hard-deleted", project_id=project_id, user_id=user_id)
