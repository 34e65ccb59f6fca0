from pydantic import BaseModel, Field


class ProjectCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    incubator_accelerator: list[str] = Field(default_factory=list)
    organizations: list[str] = Field(default_factory=list)


class ProjectUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their stored values."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    incubator_accelerator: list[str] | None = None
    organizations: list[str] | None = None
