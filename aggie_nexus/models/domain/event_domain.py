from datetime import datetime
from typing import Literal

from pydantic import BaseModel

EventStatus = Literal["pending", "approved", "rejected"]
EventType = Literal[
    "workshop",
    "info_session",
    "networking",
    "hackathon",
    "deadline",
    "meeting",
    "other",
    "personal",
]


class EventRecord(BaseModel):
    """A calendar event with an approval workflow."""

    id: str
    title: str
    description: str | None = None
    start_time: datetime
    end_time: datetime
    location: str | None = None
    event_link: str | None = None
    event_type: EventType
    poster_url: str | None = None
    status: EventStatus = "pending"
    created_by: str
    approved_by: str | None = None
    approved_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
