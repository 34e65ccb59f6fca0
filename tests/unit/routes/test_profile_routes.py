from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from aggie_nexus.errors import ValidationError
from aggie_nexus.main import app
from aggie_nexus.models.domain.organization_domain import OrganizationRef

PROFILE_ROUTES = "aggie_nexus.routes.profile"


@pytest.fixture
def client(apply_auth_override):
    apply_auth_override(app)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_me_includes_managed_organizations(client, monkeypatch, make_profile, make_claim):
    profile = make_profile(
        organization_claims=[make_claim("AggieX", "verified"), make_claim("Aggies Create")]
    )
    monkeypatch.setattr(
        "aggie_nexus.routes.protected.get_user_profile",
        AsyncMock(return_value=profile),
    )
    monkeypatch.setattr(
        "aggie_nexus.routes.protected.list_managed_organizations",
        AsyncMock(return_value=[OrganizationRef(id="org-1", name="AggieX")]),
    )

    response = client.get("/me")

    assert response.status_code == 200
    data = response.json()
    assert data["profile"]["user_id"] == "user-123"
    assert data["managed_organizations"] == [{"id": "org-1", "name": "AggieX"}]
    assert data["verified_organizations"] == ["AggieX"]
    assert data["pending_organizations"] == ["Aggies Create"]
    assert data["auth"]["email"] == "student@tamu.edu"


def test_setup_audits_auto_verified_claims(client, monkeypatch, make_profile, audit_calls):
    setup_mock = AsyncMock(return_value=(make_profile(profile_setup_completed=True), ["AggieX"]))
    monkeypatch.setattr(f"{PROFILE_ROUTES}.complete_profile_setup", setup_mock)

    response = client.put(
        "/profile/setup",
        json={"bio": "Builder", "skills": ["python"], "organizations": ["AggieX"]},
    )

    assert response.status_code == 200
    assert response.json()["auto_verified_organizations"] == ["AggieX"]
    setup_mock.assert_awaited_once_with(
        "user-123", bio="Builder", skills=["python"], organizations=["AggieX"], full_name=None
    )
    assert [call["action"] for call in audit_calls] == ["claim_auto_verified"]
    assert audit_calls[0]["resource_id"] == "AggieX"


def test_setup_requires_skills(client):
    response = client.put("/profile/setup", json={"bio": "Builder", "skills": []})

    assert response.status_code == 400
    assert response.json()["detail"] == "validation_error"
    assert any("skills" in error for error in response.json()["errors"])


def test_skip_setup(client, monkeypatch, make_profile):
    monkeypatch.setattr(
        f"{PROFILE_ROUTES}.skip_profile_setup",
        AsyncMock(return_value=make_profile(profile_setup_skipped=True)),
    )

    response = client.post("/profile/setup/skip")

    assert response.status_code == 200
    assert response.json()["profile"]["profile_setup_skipped"] is True


def test_claim_status(client, monkeypatch):
    monkeypatch.setattr(f"{PROFILE_ROUTES}.get_claim_status", AsyncMock(return_value="pending"))

    response = client.get("/profile/organizations/Aggies Create/status")

    assert response.json() == {"organization": "Aggies Create", "status": "pending"}


def test_withdraw_non_pending_claim(client, monkeypatch, audit_calls):
    monkeypatch.setattr(
        f"{PROFILE_ROUTES}.withdraw_claim",
        AsyncMock(side_effect=ValidationError("Only pending claims can be withdrawn")),
    )

    response = client.delete("/profile/claims/AggieX")

    assert response.status_code == 400
    assert audit_calls == []
