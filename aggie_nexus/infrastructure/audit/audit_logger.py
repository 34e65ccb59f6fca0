"""
AuditLogger - audit trail for permission and verification changes.

Covers role changes, event approvals, organization edits, claim
auto-verification and hard deletes.

Usage:
    from aggie_nexus.infrastructure.audit import audit_logger

    await audit_logger.log(
        actor_id="user-123",
        action="user_role_changed",
        resource_type="user",
        resource_id="user-456",
        metadata={"role": "manager"},
        request_id="req-abc123",
    )

Writes go to the structured log first and then to the audit_logs table.
A failed insert is logged and reported as False; it never fails the
request that triggered it.
"""

from datetime import UTC, datetime
from typing import Any

from psycopg.types.json import Jsonb

from aggie_nexus.db.helpers import DatabaseError, execute_query
from aggie_nexus.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class AuditLogger:
    """Writes audit events to structured logs and the audit_logs table."""

    @staticmethod
    async def log(
        actor_id: str | None,
        action: str,
        resource_type: str | None = None,
        resource_id: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        request_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """
        Record an audit event.

        Args:
            actor_id: User who performed the action ("system" for automatic actions)
            action: Action name (e.g., "event_status_changed")
            resource_type: Kind of resource touched (event, organization, project, user)
            resource_id: Id of the resource
            ip_address: Client IP address
            user_agent: Client user agent string
            request_id: Request correlation ID
            metadata: Additional JSON-serializable context

        Returns:
            True if the database row was written, False otherwise (never raises)
        """
        logger.info(
            "Audit event",
            audit_action=action,
            actor_id=actor_id,
            resource_type=resource_type,
            resource_id=resource_id,
            request_id=request_id,
        )

        try:
            await execute_query(
                """
                INSERT INTO audit_logs (
                    actor_id, action, resource_type, resource_id,
                    ip_address, user_agent, request_id, metadata, created_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    actor_id,
                    action,
                    resource_type,
                    resource_id,
                    ip_address,
                    user_agent,
                    request_id,
                    Jsonb(metadata or {}),
                    datetime.now(UTC),
                ),
            )
            return True

        except (DatabaseError, RuntimeError) as e:
            logger.error(
                "Failed to write audit log to database",
                error=str(e),
                error_type=type(e).__name__,
                audit_action=action,
                actor_id=actor_id,
                resource_id=resource_id,
            )
            return False


audit_logger = AuditLogger()
