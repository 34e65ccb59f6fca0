"""
Affiliation service - organization claims on user profiles.

Loads the configured affiliation rules and applies the claim lifecycle:
new claims start pending and are promoted to verified immediately when the
submitter's email qualifies for auto-verification.
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from functools import lru_cache

from aggie_nexus.config import settings
from aggie_nexus.domain.affiliation import (
    DEFAULT_RULES,
    AffiliationRules,
    auto_verify_claim,
    create_claim,
    find_claim,
    get_verification_status,
    has_verified_membership,
    load_affiliation_rules,
)
from aggie_nexus.errors import NotFoundError, ValidationError
from aggie_nexus.infrastructure.observability.logging import get_logger
from aggie_nexus.models.domain.user_domain import (
    OrganizationClaim,
    UserProfile,
    VerificationStatus,
)
from aggie_nexus.services.user_service import get_user_profile, save_organization_claims

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_affiliation_rules() -> AffiliationRules:
    if settings.AFFILIATION_RULES_PATH:
        logger.info("Loading affiliation rules", path=settings.AFFILIATION_RULES_PATH)
        return load_affiliation_rules(settings.AFFILIATION_RULES_PATH)
    return DEFAULT_RULES


def merge_claims(
    profile: UserProfile,
    organizations: Iterable[str],
    rules: AffiliationRules | None = None,
    verification_method: str | None = None,
    now: datetime | None = None,
) -> tuple[list[OrganizationClaim], list[str]]:
    """
    Reconcile the profile's claims with the organizations selected in the form.

    Existing claims for still-selected organizations are kept as they are,
    deselected ones are dropped, and new ones are created pending (or
    auto-verified when the profile email qualifies).

    Returns:
        (claims, names of organizations auto-verified in this call)
    """
    rules = rules or get_affiliation_rules()
    now = now or datetime.now(UTC)

    claims = []
    auto_verified = []
    seen = set()

    for organization in organizations:
        if organization in seen:
            continue
        seen.add(organization)

        existing = find_claim(profile, organization)
        if existing:
            claims.append(existing)
            continue

        claim = create_claim(organization, verification_method, now=now)
        verification = auto_verify_claim(organization, profile.email, rules, now=now)
        if verification:
            claim = claim.model_copy(update={"status": "verified", "verification": verification})
            auto_verified.append(organization)
        claims.append(claim)

    return claims, auto_verified


async def get_claim_status(user_id: str, organization: str) -> VerificationStatus:
    profile = await get_user_profile(user_id)
    if not profile:
        raise NotFoundError("User profile not found")
    return get_verification_status(profile, organization)


async def withdraw_claim(user_id: str, organization: str) -> list[OrganizationClaim]:
    """Remove a pending claim. Verified or rejected claims cannot be withdrawn."""
    profile = await get_user_profile(user_id)
    if not profile:
        raise NotFoundError("User profile not found")

    claim = find_claim(profile, organization)
    if claim is None:
        raise NotFoundError(f'No claim for "{organization}"')
    if has_verified_membership(profile, organization):
        raise ValidationError(f'Verified membership in "{organization}" cannot be withdrawn')
    if claim.status != "pending":
        raise ValidationError(f"Only pending claims can be withdrawn (claim is {claim.status})")

    remaining = [c for c in profile.organization_claims if c.organization != organization]
    await save_organization_claims(user_id, remaining)

    logger.info("Organization claim withdrawn", user_id=user_id, organization=organization)
    return remaining
