from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from aggie_nexus.errors import NotFoundError, ValidationError
from aggie_nexus.services.affiliation_service import (
    get_claim_status,
    merge_claims,
    withdraw_claim,
)

SERVICE = "aggie_nexus.services.affiliation_service"
NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def test_merge_keeps_existing_claims(make_profile, make_claim):
    verified = make_claim("AggieX", "verified")
    profile = make_profile(organization_claims=[verified])

    claims, auto_verified = merge_claims(profile, ["AggieX"], now=NOW)

    assert claims == [verified]
    assert auto_verified == []


def test_merge_drops_deselected_organizations(make_profile, make_claim):
    profile = make_profile(
        organization_claims=[make_claim("AggieX"), make_claim("Startup Aggieland")]
    )

    claims, _ = merge_claims(profile, ["Startup Aggieland"], now=NOW)

    assert [c.organization for c in claims] == ["Startup Aggieland"]


def test_merge_auto_verifies_matching_email(make_profile):
    profile = make_profile(email="lead@aggiex.org")

    claims, auto_verified = merge_claims(profile, ["AggieX", "AggieX"], now=NOW)

    assert len(claims) == 1
    assert claims[0].status == "verified"
    assert claims[0].verification.verified_by == "system"
    assert auto_verified == ["AggieX"]


def test_merge_leaves_gated_claims_pending(make_profile):
    claims, auto_verified = merge_claims(make_profile(), ["Aggies Create"], now=NOW)

    assert claims[0].status == "pending"
    assert claims[0].claimed_at == NOW
    assert auto_verified == []


@pytest.mark.asyncio
async def test_claim_status(monkeypatch, make_profile, make_claim):
    profile = make_profile(organization_claims=[make_claim("AggieX", "verified")])
    monkeypatch.setattr(f"{SERVICE}.get_user_profile", AsyncMock(return_value=profile))

    assert await get_claim_status("user-123", "AggieX") == "verified"
    assert await get_claim_status("user-123", "Aggies Create") == "not_claimed"


@pytest.mark.asyncio
async def test_withdraw_pending_claim(monkeypatch, make_profile, make_claim):
    profile = make_profile(
        organization_claims=[make_claim("AggieX", "verified"), make_claim("Aggies Create")]
    )
    save_mock = AsyncMock(return_value=1)
    monkeypatch.setattr(f"{SERVICE}.get_user_profile", AsyncMock(return_value=profile))
    monkeypatch.setattr(f"{SERVICE}.save_organization_claims", save_mock)

    remaining = await withdraw_claim("user-123", "Aggies Create")

    assert [c.organization for c in remaining] == ["AggieX"]
    save_mock.assert_awaited_once_with("user-123", remaining)


@pytest.mark.asyncio
async def test_withdraw_verified_claim_rejected(monkeypatch, make_profile, make_claim):
    profile = make_profile(organization_claims=[make_claim("AggieX", "verified")])
    save_mock = AsyncMock()
    monkeypatch.setattr(f"{SERVICE}.get_user_profile", AsyncMock(return_value=profile))
    monkeypatch.setattr(f"{SERVICE}.save_organization_claims", save_mock)

    with pytest.raises(ValidationError, match="Verified membership"):
        await withdraw_claim("user-123", "AggieX")
    save_mock.assert_not_awaited()


@pytest.mark.asyncio
async def test_withdraw_unknown_claim(monkeypatch, make_profile):
    monkeypatch.setattr(f"{SERVICE}.get_user_profile", AsyncMock(return_value=make_profile()))

    with pytest.raises(NotFoundError):
        await withdraw_claim("user-123", "AggieX")
