"""
Organization affiliation verification and program-claim validation.

Membership claims are stored on the user as a JSON list keyed by
organization name. Programs (incubators, accelerators) shown on a project
are gated by the owner's claimed organizations. The organization/program
tables are data (`AffiliationRules`) so they can be swapped without
touching the logic below.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from aggie_nexus.models.domain.user_domain import (
    ClaimVerification,
    OrganizationClaim,
    UserProfile,
    VerificationStatus,
)


class AffiliationRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Claims for these organizations go through review
    verification_required_organizations: frozenset[str] = frozenset()
    # Organization name -> accepted email suffixes (domains or full addresses)
    auto_verify_rules: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    # Program name -> organization the owner must be affiliated with
    program_to_required_organization: dict[str, str] = Field(default_factory=dict)
    # Programs anyone may claim
    open_programs: tuple[str, ...] = ()


DEFAULT_RULES = AffiliationRules(
    verification_required_organizations=frozenset({"Aggies Create", "AggieX"}),
    auto_verify_rules={
        "Aggies Create": ("@aggiescreate.com",),
        "AggieX": ("@aggiex.org",),
    },
    program_to_required_organization={
        "Aggies Create Incubator": "Aggies Create",
        "AggieX Accelerator": "AggieX",
        "Startup Aggieland": "Startup Aggieland",
        "Texas A&M Innovation": "Texas A&M Innovation",
        "Mays Business School Programs": "Mays Business School",
        "Engineering Entrepreneurship Programs": "Engineering Entrepreneurship",
    },
)


def load_affiliation_rules(path: str | Path) -> AffiliationRules:
    """Read rules from a JSON file with the same keys as `AffiliationRules`."""
    return AffiliationRules.model_validate_json(Path(path).read_text(encoding="utf-8"))


@dataclass(slots=True)
class ProjectValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    available_programs: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Membership claims
# ---------------------------------------------------------------------------


def requires_verification(organization: str, rules: AffiliationRules = DEFAULT_RULES) -> bool:
    return organization in rules.verification_required_organizations


def can_auto_verify(
    organization: str, email: str, rules: AffiliationRules = DEFAULT_RULES
) -> bool:
    """True iff the email (case-insensitive) ends with one of the organization's suffixes."""
    suffixes = rules.auto_verify_rules.get(organization)
    if not suffixes or not email:
        return False

    email = email.lower()
    return any(email.endswith(suffix.lower()) for suffix in suffixes)


def find_claim(profile: UserProfile | None, organization: str) -> OrganizationClaim | None:
    if profile is None:
        return None
    # Exact name match; duplicates are left as-is and the first one wins
    for claim in profile.organization_claims:
        if claim.organization == organization:
            return claim
    return None


def get_verification_status(
    profile: UserProfile | None, organization: str
) -> VerificationStatus:
    claim = find_claim(profile, organization)
    return claim.status if claim else "not_claimed"


def has_verified_membership(profile: UserProfile | None, organization: str) -> bool:
    return get_verification_status(profile, organization) == "verified"


def get_verified_organizations(profile: UserProfile | None) -> list[str]:
    if profile is None:
        return []
    return [c.organization for c in profile.organization_claims if c.status == "verified"]


def get_pending_organizations(profile: UserProfile | None) -> list[str]:
    if profile is None:
        return []
    return [c.organization for c in profile.organization_claims if c.status == "pending"]


def create_claim(
    organization: str,
    verification_method: str | None = None,
    now: datetime | None = None,
) -> OrganizationClaim:
    """
    Build a new pending claim.

    Auto-verification is not applied here; callers run `auto_verify_claim`
    and attach the result themselves.
    """
    return OrganizationClaim(
        organization=organization,
        claimed_at=now or datetime.now(UTC),
        verification_method=verification_method,
        status="pending",
    )


def auto_verify_claim(
    organization: str,
    email: str,
    rules: AffiliationRules = DEFAULT_RULES,
    now: datetime | None = None,
) -> ClaimVerification | None:
    """Return the system verification record when the email qualifies, else None."""
    if not can_auto_verify(organization, email, rules):
        return None

    return ClaimVerification(
        verified_at=now or datetime.now(UTC),
        verified_by="system",
        verification_method="email_domain",
        notes=f"Auto-verified based on email domain: {email}",
    )


def claimable_organizations(
    profile: UserProfile | None, rules: AffiliationRules = DEFAULT_RULES
) -> set[str]:
    """
    Organizations that count as affiliations when claiming programs.

    Verified claims always count. Pending claims count only for
    organizations that are accepted at face value.
    """
    organizations = set(get_verified_organizations(profile))
    organizations.update(
        org for org in get_pending_organizations(profile) if not requires_verification(org, rules)
    )
    return organizations


# ---------------------------------------------------------------------------
# Program claims
# ---------------------------------------------------------------------------


def can_user_claim_program(
    user_organizations: Iterable[str], program: str, rules: AffiliationRules = DEFAULT_RULES
) -> bool:
    required = rules.program_to_required_organization.get(program)
    if required is None:
        return True
    return required in set(user_organizations)


def get_available_programs(
    user_organizations: Iterable[str], rules: AffiliationRules = DEFAULT_RULES
) -> list[str]:
    organizations = set(user_organizations)
    gated = [
        program
        for program, required in rules.program_to_required_organization.items()
        if required in organizations
    ]
    return gated + [p for p in rules.open_programs if p not in gated]


def get_program_claim_explanation(program: str, rules: AffiliationRules = DEFAULT_RULES) -> str:
    required = rules.program_to_required_organization.get(program)
    if required is None:
        return f'"{program}" is open to every project.'
    return f'To claim "{program}", you must be affiliated with "{required}" in your profile.'


def validate_project_programs(
    user_organizations: Iterable[str],
    claimed_programs: Sequence[str],
    rules: AffiliationRules = DEFAULT_RULES,
) -> ProjectValidationResult:
    """
    Check every claimed program against the user's organizations.

    Errors block the save; warnings are advisory only.
    """
    organizations = set(user_organizations)
    available = get_available_programs(organizations, rules)
    errors = []
    warnings = []

    for program in claimed_programs:
        if not can_user_claim_program(organizations, program, rules):
            errors.append(
                f'You cannot claim "{program}". '
                f"{get_program_claim_explanation(program, rules)} "
                "Please update your profile to include that organization."
            )

    if not claimed_programs and available:
        warnings.append(
            f"You are eligible to claim these programs: {', '.join(available)}. "
            "Consider adding them to showcase your project's affiliations."
        )

    return ProjectValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        available_programs=available,
    )


def validate_project_submission(
    user_organizations: Iterable[str],
    claimed_programs: Sequence[str],
    project_organizations: Sequence[str] = (),
    rules: AffiliationRules = DEFAULT_RULES,
) -> ProjectValidationResult:
    """
    Program validation plus a warning for project organizations the owner has not claimed.
    """
    organizations = set(user_organizations)
    result = validate_project_programs(organizations, claimed_programs, rules)

    unclaimed = [org for org in project_organizations if org not in organizations]
    if unclaimed:
        result.warnings.append(
            "You're claiming project affiliation with organizations not in your profile: "
            f"{', '.join(unclaimed)}. Consider updating your profile to include these organizations."
        )

    return result
