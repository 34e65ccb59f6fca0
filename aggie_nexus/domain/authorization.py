"""
Role- and ownership-based authorization decisions.

The functions here never read storage. Services load the caller (role and
managed organization ids) and the target resource fresh on every request,
then ask this module for a decision. Denials carry a reason string so the
can-edit style endpoints can report why.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import get_args

from aggie_nexus.errors import AuthorizationError, ValidationError
from aggie_nexus.models.domain.event_domain import EventRecord, EventStatus
from aggie_nexus.models.domain.project_domain import ProjectRecord
from aggie_nexus.models.domain.user_domain import Role

EVENT_STATUSES: tuple[str, ...] = get_args(EventStatus)
ASSIGNABLE_ROLES: tuple[str, ...] = ("user", "manager")


@dataclass(frozen=True, slots=True)
class Caller:
    """The authenticated user as seen by an authorization check."""

    user_id: str
    role: Role = "user"
    managed_org_ids: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(frozen=True, slots=True)
class AccessDecision:
    allowed: bool
    reason: str


@dataclass(frozen=True, slots=True)
class RoleChangePlan:
    """Membership writes that must accompany a role change."""

    role: Role
    remove_all_memberships: bool = False
    add_org_ids: tuple[str, ...] = ()


def _allow(reason: str) -> AccessDecision:
    return AccessDecision(allowed=True, reason=reason)


def _deny(reason: str) -> AccessDecision:
    return AccessDecision(allowed=False, reason=reason)


def require(decision: AccessDecision, message: str | None = None) -> None:
    """Raise AuthorizationError unless the decision allows the action."""
    if not decision.allowed:
        raise AuthorizationError(message or decision.reason)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def can_create_event(caller: Caller | None) -> AccessDecision:
    if caller is None:
        return _deny("unauthenticated")
    return _allow("authenticated")


def can_change_event_status(caller: Caller) -> AccessDecision:
    if caller.role in ("manager", "admin"):
        return _allow(caller.role)
    return _deny("not_manager")


def apply_event_status(
    event: EventRecord, new_status: str, manager_id: str, now: datetime | None = None
) -> EventRecord:
    """
    Return the event moved to `new_status`.

    approved_by/approved_at are set only for approved events and cleared
    for every other status.
    """
    if new_status not in EVENT_STATUSES:
        raise ValidationError(
            "Invalid status value. Must be 'pending', 'approved', or 'rejected'"
        )

    if new_status == "approved":
        update = {
            "status": new_status,
            "approved_by": manager_id,
            "approved_at": now or datetime.now(UTC),
        }
    else:
        update = {"status": new_status, "approved_by": None, "approved_at": None}

    return event.model_copy(update=update)


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------


def can_edit_organization(caller: Caller, org_id: str) -> AccessDecision:
    """Admins edit any organization; managers only the ones they manage."""
    if caller.is_admin:
        return _allow("admin")
    if org_id in caller.managed_org_ids:
        return _allow("manager")
    return _deny("not_manager")


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def can_update_project(caller: Caller, project: ProjectRecord) -> AccessDecision:
    if caller.user_id == project.owner_id:
        return _allow("owner")
    return _deny("not_owner")


def can_soft_delete_project(caller: Caller, project: ProjectRecord) -> AccessDecision:
    if caller.user_id == project.owner_id:
        return _allow("owner")
    return _deny("not_owner")


def can_hard_delete_project(caller: Caller) -> AccessDecision:
    if caller.is_admin:
        return _allow("admin")
    return _deny("not_admin")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def can_change_user_role(caller: Caller) -> AccessDecision:
    if caller.is_admin:
        return _allow("admin")
    return _deny("not_admin")


def can_delete_user(caller: Caller, target_user_id: str) -> AccessDecision:
    if caller.user_id == target_user_id:
        return _allow("self")
    if caller.is_admin:
        return _allow("admin")
    return _deny("not_self_or_admin")


def plan_role_change(
    new_role: str,
    requested_org_ids: list[str] | tuple[str, ...] = (),
    existing_org_ids: set[str] | frozenset[str] = frozenset(),
) -> RoleChangePlan:
    """
    Work out the organization_managers writes for a role change.

    Demotion to user drops every membership. Promotion to manager adds the
    requested organizations the user does not already manage.
    """
    if new_role not in ASSIGNABLE_ROLES:
        raise ValidationError("Invalid role value")

    if new_role == "user":
        return RoleChangePlan(role="user", remove_all_memberships=True)

    to_add = []
    for org_id in requested_org_ids:
        if org_id not in existing_org_ids and org_id not in to_add:
            to_add.append(org_id)
    return RoleChangePlan(role="manager", add_org_ids=tuple(to_add))
