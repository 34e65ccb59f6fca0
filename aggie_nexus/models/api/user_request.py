from pydantic import AliasChoices, BaseModel, Field


class ProfileSetupRequest(BaseModel):
    """Request body for PUT /profile/setup."""

    full_name: str | None = Field(None, min_length=1, max_length=120)
    bio: str = Field(..., min_length=1, max_length=2000)
    skills: list[str] = Field(..., min_length=1)
    organizations: list[str] = Field(default_factory=list)


class RoleChangeRequest(BaseModel):
    """Request body for PATCH /users/{id}/role."""

    # Checked by the role-change plan so a bad value is a 400, not a schema error
    role: str
    org_ids: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("org_ids", "orgIds")
    )
