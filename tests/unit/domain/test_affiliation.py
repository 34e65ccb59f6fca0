from datetime import UTC, datetime

import pytest

from aggie_nexus.domain.affiliation import (
    DEFAULT_RULES,
    AffiliationRules,
    auto_verify_claim,
    can_auto_verify,
    can_user_claim_program,
    claimable_organizations,
    create_claim,
    get_available_programs,
    get_pending_organizations,
    get_program_claim_explanation,
    get_verification_status,
    get_verified_organizations,
    has_verified_membership,
    load_affiliation_rules,
    requires_verification,
    validate_project_programs,
    validate_project_submission,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def test_requires_verification():
    assert requires_verification("Aggies Create") is True
    assert requires_verification("AggieX") is True
    assert requires_verification("Startup Aggieland") is False


@pytest.mark.parametrize(
    ("organization", "email", "expected"),
    [
        ("Aggies Create", "founder@aggiescreate.com", True),
        ("Aggies Create", "Founder@AggiesCreate.COM", True),
        ("AggieX", "lead@aggiex.org", True),
        ("AggieX", "lead@aggiex.org.evil.com", False),
        ("AggieX", "student@tamu.edu", False),
        ("Startup Aggieland", "someone@startupaggieland.com", False),
        ("AggieX", "", False),
    ],
)
def test_can_auto_verify(organization, email, expected):
    assert can_auto_verify(organization, email) is expected


def test_verification_status_by_claim(make_profile, make_claim):
    profile = make_profile(
        organization_claims=[
            make_claim("AggieX", "verified"),
            make_claim("Aggies Create", "pending"),
            make_claim("Startup Aggieland", "rejected"),
        ]
    )

    assert get_verification_status(profile, "AggieX") == "verified"
    assert get_verification_status(profile, "Aggies Create") == "pending"
    assert get_verification_status(profile, "Startup Aggieland") == "rejected"
    assert get_verification_status(profile, "Mays Business School") == "not_claimed"
    assert has_verified_membership(profile, "AggieX") is True
    assert has_verified_membership(profile, "Aggies Create") is False


def test_missing_profile_has_no_claims():
    assert get_verification_status(None, "AggieX") == "not_claimed"
    assert has_verified_membership(None, "AggieX") is False
    assert get_verified_organizations(None) == []
    assert get_pending_organizations(None) == []
    assert claimable_organizations(None) == set()


def test_first_matching_claim_wins(make_profile, make_claim):
    profile = make_profile(
        organization_claims=[make_claim("AggieX", "pending"), make_claim("AggieX", "verified")]
    )

    assert get_verification_status(profile, "AggieX") == "pending"


def test_verified_and_pending_lists(make_profile, make_claim):
    profile = make_profile(
        organization_claims=[
            make_claim("AggieX", "verified"),
            make_claim("Aggies Create", "pending"),
            make_claim("Startup Aggieland", "pending"),
        ]
    )

    assert get_verified_organizations(profile) == ["AggieX"]
    assert get_pending_organizations(profile) == ["Aggies Create", "Startup Aggieland"]


def test_create_claim_is_pending():
    claim = create_claim("AggieX", "self_reported", now=NOW)

    assert claim.status == "pending"
    assert claim.claimed_at == NOW
    assert claim.verification_method == "self_reported"
    assert claim.verification is None


def test_auto_verify_claim_builds_system_record():
    verification = auto_verify_claim("AggieX", "lead@aggiex.org", now=NOW)

    assert verification is not None
    assert verification.verified_by == "system"
    assert verification.verification_method == "email_domain"
    assert verification.verified_at == NOW
    assert "lead@aggiex.org" in verification.notes


def test_auto_verify_claim_rejects_other_domains():
    assert auto_verify_claim("AggieX", "student@tamu.edu", now=NOW) is None


def test_claimable_organizations_skips_unreviewed_gated_claims(make_profile, make_claim):
    profile = make_profile(
        organization_claims=[
            make_claim("AggieX", "verified"),
            make_claim("Aggies Create", "pending"),
            make_claim("Startup Aggieland", "pending"),
            make_claim("Mays Business School", "rejected"),
        ]
    )

    assert claimable_organizations(profile) == {"AggieX", "Startup Aggieland"}


def test_can_user_claim_program():
    assert can_user_claim_program({"AggieX"}, "AggieX Accelerator") is True
    assert can_user_claim_program(set(), "AggieX Accelerator") is False
    assert can_user_claim_program(set(), "Unlisted Program") is True


def test_available_programs_follow_organizations():
    available = get_available_programs({"AggieX", "Mays Business School"})

    assert available == ["AggieX Accelerator", "Mays Business School Programs"]


def test_open_programs_are_always_available():
    rules = AffiliationRules(
        program_to_required_organization={"AggieX Accelerator": "AggieX"},
        open_programs=("Innovation Week",),
    )

    assert get_available_programs(set(), rules) == ["Innovation Week"]


def test_program_claim_explanation():
    message = get_program_claim_explanation("AggieX Accelerator")

    assert "AggieX Accelerator" in message
    assert '"AggieX"' in message


def test_validate_programs_reports_each_unbacked_program():
    result = validate_project_programs(
        {"AggieX"}, ["AggieX Accelerator", "Aggies Create Incubator", "Startup Aggieland"]
    )

    assert result.is_valid is False
    assert len(result.errors) == 2
    assert "Aggies Create Incubator" in result.errors[0]
    assert '"Aggies Create"' in result.errors[0]
    assert get_program_claim_explanation("Aggies Create Incubator") in result.errors[0]
    assert "Startup Aggieland" in result.errors[1]


def test_validate_programs_warns_about_unclaimed_eligibility():
    result = validate_project_programs({"AggieX"}, [])

    assert result.is_valid is True
    assert result.errors == []
    assert len(result.warnings) == 1
    assert "AggieX Accelerator" in result.warnings[0]
    assert result.available_programs == ["AggieX Accelerator"]


def test_validate_programs_no_warning_without_eligibility():
    result = validate_project_programs(set(), [])

    assert result.is_valid is True
    assert result.warnings == []


def test_validate_submission_warns_about_unclaimed_project_organizations():
    result = validate_project_submission(
        {"AggieX"}, ["AggieX Accelerator"], ["AggieX", "Mays Business School"]
    )

    assert result.is_valid is True
    assert len(result.warnings) == 1
    assert "Mays Business School" in result.warnings[0]


def test_load_rules_from_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(
        """
        {
            "verification_required_organizations": ["Maker Lab"],
            "auto_verify_rules": {"Maker Lab": ["@makerlab.tamu.edu"]},
            "program_to_required_organization": {"Maker Residency": "Maker Lab"}
        }
        """,
        encoding="utf-8",
    )

    rules = load_affiliation_rules(path)

    assert requires_verification("Maker Lab", rules) is True
    assert can_auto_verify("Maker Lab", "ta@makerlab.tamu.edu", rules) is True
    assert can_user_claim_program(set(), "Maker Residency", rules) is False
    assert requires_verification("AggieX", rules) is False
    assert DEFAULT_RULES.program_to_required_organization["AggieX Accelerator"] == "AggieX"
