from datetime import date, datetime

from pydantic import BaseModel, Field


class OrganizationRef(BaseModel):
    """Id plus display name of an organization row."""

    id: str
    name: str


class OrganizationImage(BaseModel):
    id: str
    org_id: str
    url: str
    position: int = 0


class Organization(BaseModel):
    id: str
    name: str
    description: str | None = None
    website_url: str | None = None
    logo_url: str | None = None
    industry: list[str] = Field(default_factory=list)
    founded_date: date | None = None
    joined_aggiex_date: date | None = None
    updated_at: datetime | None = None
