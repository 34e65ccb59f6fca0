"""
Event service - event creation and the manager approval workflow.
"""

from typing import Any

from aggie_nexus.db.helpers import fetch_one
from aggie_nexus.domain.authorization import apply_event_status, can_change_event_status, require
from aggie_nexus.errors import NotFoundError
from aggie_nexus.infrastructure.observability.logging import get_logger
from aggie_nexus.models.domain.event_domain import EventRecord
from aggie_nexus.services.user_service import load_caller

logger = get_logger(__name__)

_EVENT_COLUMNS = """
    id::text AS id, title, description, start_time, end_time, location,
    event_link, event_type, poster_url, status, created_by::text AS created_by,
    approved_by::text AS approved_by, approved_at, created_at, updated_at
"""


async def get_event(event_id: str) -> EventRecord | None:
    row = await fetch_one(f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = %s", (event_id,))
    return EventRecord(**row) if row else None


async def create_event(user_id: str, data: dict[str, Any]) -> EventRecord:
    """
    Insert an event on behalf of any authenticated user.

    The status is always pending, whatever the request asked for.
    """
    row = await fetch_one(
        f"""
        INSERT INTO events (
            title, description, start_time, end_time, location, event_link,
            event_type, poster_url, created_by, status, created_at, updated_at
        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, 'pending', NOW(), NOW())
        RETURNING {_EVENT_COLUMNS}
        """,
        (
            data["title"],
            data.get("description"),
            data["start_time"],
            data["end_time"],
            data.get("location"),
            data.get("event_link"),
            data["event_type"],
            data.get("poster_url"),
            user_id,
        ),
    )
    event = EventRecord(**row)
    logger.info("Event created", event_id=event.id, created_by=user_id)
    return event


async def update_event_status(user_id: str, event_id: str, new_status: str) -> EventRecord:
    """
    Move an event to a new status. Managers and admins only.

    Permission is checked before the lookup since non-approved events are
    only visible to managers. Concurrent updates are last-writer-wins.
    """
    caller = await load_caller(user_id)
    require(can_change_event_status(caller), "Only managers can approve or reject events")

    event = await get_event(event_id)
    if not event:
        raise NotFoundError("Event not found")

    updated = apply_event_status(event, new_status, manager_id=user_id)

    row = await fetch_one(
        f"""
        UPDATE events
        SET status = %s, approved_by = %s, approved_at = %s, updated_at = NOW()
        WHERE id = %s
        RETURNING {_EVENT_COLUMNS}
        """,
        (updated.status, updated.approved_by, updated.approved_at, event_id),
    )
    if not row:
        raise NotFoundError("Event not found")

    logger.info(
        "Event status updated",
        event_id=event_id,
        previous_status=event.status,
        status=updated.status,
        manager_id=user_id,
    )
    return EventRecord(**row)
