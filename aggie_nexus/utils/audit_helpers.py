"""
Audit helper for route handlers.

Pulls the request context (IP, user agent, request id) set by
RequestContextMiddleware so endpoints only pass what changed.

Usage:
    await audit_action(
        request=request,
        actor_id=user_id,
        action="event_status_changed",
        resource_type="event",
        resource_id=event_id,
        metadata={"status": "approved"},
    )
"""

from typing import Any

from fastapi import Request

from aggie_nexus.infrastructure.audit import audit_logger


async def audit_action(
    request: Request,
    actor_id: str | None,
    action: str,
    resource_type: str,
    resource_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> bool:
    state = request.state
    return await audit_logger.log(
        actor_id=actor_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        ip_address=getattr(state, "ip_address", None),
        user_agent=getattr(state, "user_agent", None),
        request_id=getattr(state, "request_id", None),
        metadata=metadata,
    )
