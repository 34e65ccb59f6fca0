from datetime import date

from pydantic import BaseModel, Field, field_validator

from aggie_nexus.models.domain.organization_domain import Organization


class OrganizationUpdateRequest(BaseModel):
    """Request body for PATCH /organizations/{id}; only sent fields change."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    website_url: str | None = None
    logo_url: str | None = None
    industry: list[str] | None = None
    founded_date: date | None = None
    joined_aggiex_date: date | None = None

    @field_validator("name", "industry")
    @classmethod
    def reject_null(cls, value):
        # Only runs for fields present in the body; the columns are NOT NULL
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class OrganizationImageRequest(BaseModel):
    url: str = Field(..., min_length=1)
    position: int | None = Field(None, ge=0)


class OrganizationResponse(BaseModel):
    organization: Organization


class CanEditResponse(BaseModel):
    can_edit: bool
    reason: str
