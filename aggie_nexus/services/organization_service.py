"""
Organization service - edit rights, field updates and gallery images.
"""

from typing import Any

from psycopg import sql

from aggie_nexus.db.helpers import execute_query, fetch_all, fetch_one
from aggie_nexus.domain.authorization import AccessDecision, can_edit_organization, require
from aggie_nexus.errors import NotFoundError, ValidationError
from aggie_nexus.infrastructure.observability.logging import get_logger
from aggie_nexus.models.domain.organization_domain import (
    Organization,
    OrganizationImage,
    OrganizationRef,
)
from aggie_nexus.services.user_service import load_caller

logger = get_logger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "website_url",
    "logo_url",
    "industry",
    "founded_date",
    "joined_aggiex_date",
)
# Empty strings in these fields are stored as NULL
_NULLABLE_FIELDS = {"description", "website_url", "logo_url", "founded_date", "joined_aggiex_date"}

_ORG_COLUMNS = """
    id::text AS id, name, description, website_url, logo_url, industry,
    founded_date, joined_aggiex_date, updated_at
"""


async def get_organization(org_id: str) -> Organization | None:
    row = await fetch_one(f"SELECT {_ORG_COLUMNS} FROM organizations WHERE id = %s", (org_id,))
    if not row:
        return None
    return Organization(**{**row, "industry": row.get("industry") or []})


async def list_managed_organizations(user_id: str) -> list[OrganizationRef]:
    rows = await fetch_all(
        """
        SELECT o.id::text AS id, o.name
        FROM organization_managers om
        JOIN organizations o ON o.id = om.org_id
        WHERE om.user_id = %s
        ORDER BY o.name
        """,
        (user_id,),
    )
    return [OrganizationRef(**row) for row in rows]


async def check_can_edit(user_id: str, org_id: str) -> AccessDecision:
    caller = await load_caller(user_id)
    return can_edit_organization(caller, org_id)


async def _require_edit_rights(user_id: str, org_id: str) -> None:
    decision = await check_can_edit(user_id, org_id)
    require(decision, "Forbidden: You do not have permission to edit this organization")


async def update_organization(user_id: str, org_id: str, changes: dict[str, Any]) -> Organization:
    """
    Update the given fields. Admins, or managers of this organization.

    Permission is checked first, then existence.
    """
    await _require_edit_rights(user_id, org_id)

    if not await get_organization(org_id):
        raise NotFoundError("Organization not found")

    fields = {
        k: v
        for k, v in changes.items()
        if k in EDITABLE_FIELDS and (v is not None or k in _NULLABLE_FIELDS)
    }
    for key in _NULLABLE_FIELDS & fields.keys():
        fields[key] = fields[key] or None

    assignments = [sql.SQL("{} = %s").format(sql.Identifier(k)) for k in fields]
    assignments.append(sql.SQL("updated_at = NOW()"))
    query = sql.SQL("UPDATE organizations SET {} WHERE id = %s RETURNING {}").format(
        sql.SQL(", ").join(assignments), sql.SQL(_ORG_COLUMNS)
    )

    row = await fetch_one(query, (*fields.values(), org_id))
    if not row:
        raise NotFoundError("Organization not found")

    logger.info("Organization updated", org_id=org_id, user_id=user_id, fields=sorted(fields))
    return Organization(**{**row, "industry": row.get("industry") or []})


async def add_organization_image(
    user_id: str, org_id: str, url: str, position: int | None = None
) -> OrganizationImage:
    await _require_edit_rights(user_id, org_id)

    if not await get_organization(org_id):
        raise NotFoundError("Organization not found")

    if not url.startswith(("https://", "http://")):
        raise ValidationError("Image url must be an http(s) URL")

    row = await fetch_one(
        """
        INSERT INTO organization_images (org_id, url, position)
        VALUES (
            %s, %s,
            COALESCE(%s, (SELECT COALESCE(MAX(position) + 1, 0)
                          FROM organization_images WHERE org_id = %s))
        )
        RETURNING id::text AS id, org_id::text AS org_id, url, position
        """,
        (org_id, url, position, org_id),
    )
    logger.info("Organization image added", org_id=org_id, image_id=row["id"])
    return OrganizationImage(**row)


async def delete_organization_image(user_id: str, org_id: str, image_id: str) -> None:
    await _require_edit_rights(user_id, org_id)

    affected = await execute_query(
        "DELETE FROM organization_images WHERE id = %s AND org_id = %s",
        (image_id, org_id),
    )
    if affected == 0:
        raise NotFoundError("Image not found")

    logger.info("Organization image deleted", org_id=org_id, image_id=image_id)
