from datetime import datetime

from pydantic import BaseModel, Field


class EventCreateRequest(BaseModel):
    """Request body for POST /events. Any `status` sent by the client is ignored."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    start_time: datetime
    end_time: datetime
    location: str | None = None
    event_link: str | None = None
    # Checked against the allowed types in the route for a 400 with a clear message
    event_type: str
    poster_url: str | None = None


class EventStatusRequest(BaseModel):
    """Request body for PATCH /events/{id}/status."""

    status: str
