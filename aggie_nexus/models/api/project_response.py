from pydantic import BaseModel, Field

from aggie_nexus.models.domain.project_domain import ProjectRecord


class ProjectResponse(BaseModel):
    """Saved project plus advisory program-claim warnings."""

    project: ProjectRecord
    warnings: list[str] = Field(default_factory=list)


class ProjectDeleteResponse(BaseModel):
    success: bool
    hard_deleted: bool = False
