from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from aggie_nexus.models.domain.organization_domain import OrganizationRef
from aggie_nexus.models.domain.user_domain import UserProfile, VerificationStatus


class AuthMeta(BaseModel):
    """Auth metadata extracted from JWT claims."""

    user_id: str
    email: str | None = None
    role: str | None = "authenticated"
    aud: str | None = None
    iat: int | None = None
    exp: int | None = None


class UserProfileResponse(BaseModel):
    """API response for /me endpoint."""

    profile: UserProfile = Field(..., description="User profile data")
    managed_organizations: list[OrganizationRef] = Field(default_factory=list)
    verified_organizations: list[str] = Field(default_factory=list)
    pending_organizations: list[str] = Field(default_factory=list)
    auth: AuthMeta = Field(..., description="JWT authentication metadata")


class ProfileStatusResponse(BaseModel):
    """Response for GET /auth/profile-status (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    should_setup_profile: bool
    has_skipped_setup: bool
    has_completed_setup: bool


class PageRedirectResponse(BaseModel):
    path: str
    redirect_to: str | None


class LoginRecordedResponse(BaseModel):
    success: bool


class ProfileSetupResponse(BaseModel):
    """Response for PUT /profile/setup"""

    success: bool
    profile: UserProfile
    auto_verified_organizations: list[str] = Field(default_factory=list)


class ClaimStatusResponse(BaseModel):
    organization: str
    status: VerificationStatus


class ClaimWithdrawnResponse(BaseModel):
    success: bool
    remaining_organizations: list[str]


class RoleChangeResponse(BaseModel):
    id: str
    role: str
    added_org_ids: list[str] = Field(default_factory=list)
    removed_memberships: int = 0
