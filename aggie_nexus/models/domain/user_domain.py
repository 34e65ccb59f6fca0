from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "manager", "admin"]
ClaimStatus = Literal["pending", "verified", "rejected"]
VerificationStatus = Literal["pending", "verified", "rejected", "not_claimed"]


class ClaimVerification(BaseModel):
    """Audit record attached to a claim when it is verified."""

    verified_at: datetime
    verified_by: str
    verification_method: str
    notes: str | None = None


class OrganizationClaim(BaseModel):
    """A user's assertion of membership in an organization, keyed by name."""

    organization: str
    claimed_at: datetime
    verification_method: str | None = None
    status: ClaimStatus = "pending"
    verification: ClaimVerification | None = None


class UserProfile(BaseModel):
    """Onboarding-relevant view of a users row."""

    model_config = ConfigDict(extra="allow")

    user_id: str
    email: str = ""
    full_name: str | None = None
    bio: str = ""
    skills: list[str] = Field(default_factory=list)
    profile_setup_skipped: bool = False
    profile_setup_completed: bool = False
    last_login_at: datetime | None = None
    role: Role = "user"
    organization_claims: list[OrganizationClaim] = Field(default_factory=list)
    deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
