"""
events.py
---------
Purpose:
    Event submission and the manager approval workflow.

Usage:
    1. POST /events - Submit an event (always created pending)
    2. PATCH /events/{event_id}/status - Approve, reject or re-open (managers and admins)
"""

from typing import get_args

from fastapi import APIRouter, Depends, Request, status

from aggie_nexus.auth.verify import current_user_id
from aggie_nexus.errors import ValidationError
from aggie_nexus.models.api.event_request import EventCreateRequest, EventStatusRequest
from aggie_nexus.models.domain.event_domain import EventRecord, EventType
from aggie_nexus.services.event_service import create_event, update_event_status
from aggie_nexus.utils.audit_helpers import audit_action

router = APIRouter(prefix="/events", tags=["events"])

EVENT_TYPES: tuple[str, ...] = get_args(EventType)


@router.post("", response_model=EventRecord, status_code=status.HTTP_201_CREATED)
async def submit_event(body: EventCreateRequest, user_id: str = Depends(current_user_id)):
    if body.event_type not in EVENT_TYPES:
        raise ValidationError("Invalid event_type", errors=[f"event_type must be one of {', '.join(EVENT_TYPES)}"])
    if body.end_time < body.start_time:
        raise ValidationError("end_time must not be before start_time")

    return await create_event(user_id, body.model_dump())


@router.patch("/{event_id}/status", response_model=EventRecord)
async def change_event_status(
    event_id: str,
    body: EventStatusRequest,
    request: Request,
    user_id: str = Depends(current_user_id),
):
    """
    Set an event's status.

    Raises:
        400: Status is not pending, approved or rejected
        403: Caller is not a manager or admin
        404: Event not found
    """
    event = await update_event_status(user_id, event_id, body.status)

    await audit_action(
        request=request,
        actor_id=user_id,
        action="event_status_changed",
        resource_type="event",
        resource_id=event_id,
        metadata={"status": event.status},
    )
    return event
