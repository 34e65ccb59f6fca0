"""
User service for database operations.
Reads user profiles and callers, and writes profile, role and login changes.
"""

from typing import Any

from psycopg.types.json import Jsonb

from aggie_nexus.db.helpers import DatabaseError, execute_query, fetch_all, fetch_one
from aggie_nexus.db.pool import db_pool
from aggie_nexus.domain.authorization import (
    Caller,
    can_change_user_role,
    can_delete_user,
    plan_role_change,
    require,
)
from aggie_nexus.errors import AuthorizationError, NotFoundError
from aggie_nexus.infrastructure.observability.logging import get_logger
from aggie_nexus.models.domain.user_domain import OrganizationClaim, UserProfile

logger = get_logger(__name__)

_PROFILE_COLUMNS = """
    id::text AS id, email, full_name, bio, skills,
    profile_setup_skipped, profile_setup_completed, last_login_at,
    role, organization_claims, deleted, created_at, updated_at
"""


def profile_from_row(row: dict[str, Any]) -> UserProfile:
    """Build the domain model from a users row, tolerating legacy NULLs."""
    return UserProfile(
        user_id=row["id"],
        email=row.get("email") or "",
        full_name=row.get("full_name"),
        bio=row.get("bio") or "",
        skills=row.get("skills") or [],
        profile_setup_skipped=bool(row.get("profile_setup_skipped")),
        profile_setup_completed=bool(row.get("profile_setup_completed")),
        last_login_at=row.get("last_login_at"),
        role=row.get("role") or "user",
        organization_claims=row.get("organization_claims") or [],
        deleted=bool(row.get("deleted")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def get_user_profile(user_id: str) -> UserProfile | None:
    """
    Fetch a non-deleted user's profile.

    Returns:
        UserProfile domain model, None if not found
    """
    row = await fetch_one(
        f"SELECT {_PROFILE_COLUMNS} FROM users WHERE id = %s AND deleted = false",
        (user_id,),
    )
    if not row:
        logger.info("User not found or deleted", user_id=user_id)
        return None
    return profile_from_row(row)


async def load_caller(user_id: str) -> Caller:
    """
    Load the caller's role and managed organizations for an authorization check.

    Fails closed: a missing profile or a failed lookup is a denial.
    """
    try:
        row = await fetch_one(
            """
            SELECT
                u.role,
                COALESCE(
                    array_agg(om.org_id::text) FILTER (WHERE om.org_id IS NOT NULL),
                    '{}'
                ) AS managed_org_ids
            FROM users u
            LEFT JOIN organization_managers om ON om.user_id = u.id
            WHERE u.id = %s AND u.deleted = false
            GROUP BY u.role
            """,
            (user_id,),
        )
    except DatabaseError as e:
        logger.error("Role lookup failed, denying", user_id=user_id, error=str(e))
        raise AuthorizationError("Failed to verify permissions") from e

    if not row:
        logger.warning("Caller has no profile, denying", user_id=user_id)
        raise AuthorizationError("Failed to verify permissions")

    return Caller(
        user_id=user_id,
        role=row["role"] or "user",
        managed_org_ids=frozenset(row["managed_org_ids"] or ()),
    )


async def user_exists(user_id: str) -> bool:
    row = await fetch_one("SELECT 1 AS found FROM users WHERE id = %s AND deleted = false", (user_id,))
    return row is not None


async def record_login(user_id: str) -> bool:
    """Stamp last_login_at; the profile-status check reads it as the fresh-login signal."""
    affected = await execute_query(
        "UPDATE users SET last_login_at = NOW() WHERE id = %s AND deleted = false",
        (user_id,),
    )
    return affected > 0


async def set_profile_setup_flags(
    user_id: str, *, completed: bool | None = None, skipped: bool | None = None
) -> int:
    """Update either setup flag, leaving the other untouched when None."""
    return await execute_query(
        """
        UPDATE users
        SET
            profile_setup_completed = COALESCE(%s, profile_setup_completed),
            profile_setup_skipped = COALESCE(%s, profile_setup_skipped),
            updated_at = NOW()
        WHERE id = %s AND deleted = false
        """,
        (completed, skipped, user_id),
    )


async def save_profile_setup(
    user_id: str,
    bio: str,
    skills: list[str],
    claims: list[OrganizationClaim],
    full_name: str | None = None,
) -> int:
    """Persist the profile-setup form and mark setup completed."""
    return await execute_query(
        """
        UPDATE users
        SET
            full_name = COALESCE(%s, full_name),
            bio = %s,
            skills = %s,
            organization_claims = %s,
            profile_setup_completed = true,
            updated_at = NOW()
        WHERE id = %s AND deleted = false
        """,
        (full_name, bio, skills, _claims_json(claims), user_id),
    )


async def save_organization_claims(user_id: str, claims: list[OrganizationClaim]) -> int:
    return await execute_query(
        """
        UPDATE users SET organization_claims = %s, updated_at = NOW()
        WHERE id = %s AND deleted = false
        """,
        (_claims_json(claims), user_id),
    )


def _claims_json(claims: list[OrganizationClaim]) -> Jsonb:
    return Jsonb([claim.model_dump(mode="json", exclude_none=True) for claim in claims])


async def change_user_role(
    actor_id: str, target_user_id: str, role: str, org_ids: list[str] | None = None
) -> dict[str, Any]:
    """
    Change another user's role and cascade organization_managers rows.

    The role update and the membership cascade run in one transaction, so
    a failed cascade leaves the role unchanged.

    Returns:
        dict with the user id, new role and the membership changes applied
    """
    caller = await load_caller(actor_id)
    require(can_change_user_role(caller), "Insufficient permissions")

    # Validates the role before anything is written
    plan_role_change(role, org_ids or ())

    async with db_pool.transaction() as conn:
        updated = await fetch_one(
            """
            UPDATE users SET role = %s, updated_at = NOW()
            WHERE id = %s AND deleted = false
            RETURNING id::text AS id, role
            """,
            (role, target_user_id),
            connection=conn,
        )
        if not updated:
            raise NotFoundError("User not found")

        existing = await fetch_all(
            "SELECT org_id::text AS org_id FROM organization_managers WHERE user_id = %s",
            (target_user_id,),
            connection=conn,
        )
        plan = plan_role_change(role, org_ids or (), {r["org_id"] for r in existing})

        removed = 0
        if plan.remove_all_memberships:
            removed = await execute_query(
                "DELETE FROM organization_managers WHERE user_id = %s",
                (target_user_id,),
                connection=conn,
            )

        for org_id in plan.add_org_ids:
            await execute_query(
                """
                INSERT INTO organization_managers (org_id, user_id, created_at, updated_at)
                VALUES (%s, %s, NOW(), NOW())
                """,
                (org_id, target_user_id),
                connection=conn,
            )

    logger.info(
        "User role updated",
        actor_id=actor_id,
        user_id=target_user_id,
        role=role,
        memberships_added=len(plan.add_org_ids),
        memberships_removed=removed,
    )

    return {
        "id": updated["id"],
        "role": updated["role"],
        "added_org_ids": list(plan.add_org_ids),
        "removed_memberships": removed,
    }


async def delete_user(actor_id: str, target_user_id: str) -> None:
    """
    Soft-delete a user record. Allowed for the user themself or an admin.

    Existence is checked before permission.
    """
    if not await user_exists(target_user_id):
        raise NotFoundError("User not found")

    if actor_id == target_user_id:
        caller = Caller(user_id=actor_id)
    else:
        caller = await load_caller(actor_id)
    require(can_delete_user(caller, target_user_id), "You don't have permission to delete this user")

    await execute_query(
        "UPDATE users SET deleted = true, updated_at = NOW() WHERE id = %s",
        (target_user_id,),
    )
    logger.info("User soft-deleted", actor_id=actor_id, user_id=target_user_id)
