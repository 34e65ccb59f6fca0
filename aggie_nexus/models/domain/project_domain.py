from datetime import datetime

from pydantic import BaseModel, Field


class ProjectRecord(BaseModel):
    """A project/idea with its owner and claimed program affiliations."""

    id: str
    owner_id: str
    title: str
    description: str | None = None
    incubator_accelerator: list[str] = Field(default_factory=list)
    organizations: list[str] = Field(default_factory=list)
    deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
