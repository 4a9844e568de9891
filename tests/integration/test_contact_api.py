"""Тесты для формы обратной связи."""
import pytest

from tests.conftest import bearer

MESSAGE = {"fullName": "Jane Roe", "email": "jane@example.com", "subject": "Quote", "message": "Need a site"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_anonymous_contact(http):
    response = await http.post("/api/v1/contact", json=MESSAGE, headers={"X-Forwarded-For": "203.0.113.9"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["client"] is None
    assert data["ipAddress"] == "203.0.113.9"
    assert data["status"] == "pending"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_contact_validation(http):
    response = await http.post("/api/v1/contact", json={**MESSAGE, "email": "nope"})
    assert response.status_code == 400

    response = await http.post("/api/v1/contact", json={**MESSAGE, "admin": True})
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_authenticated_contact_links_client(http, make_client):
    client, token = await make_client()
    _, other_token = await make_client()

    response = await http.post("/api/v1/contact/auth", json=MESSAGE, headers=bearer(token))
    assert response.status_code == 201
    assert response.json()["data"]["client"]["id"] == client.id

    mine = await http.get("/api/v1/contact/client/me", headers=bearer(token))
    assert mine.json()["data"]["pagination"]["total"] == 1
    others = await http.get("/api/v1/contact/client/me", headers=bearer(other_token))
    assert others.json()["data"]["contacts"] == []

    assert (await http.post("/api/v1/contact/auth", json=MESSAGE)).status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_contact_management(http, make_admin):
    admin, token = await make_admin()
    _, no_access_token = await make_admin(permissions={"manageContacts": False})
    await http.post("/api/v1/contact", json=MESSAGE)
    await http.post("/api/v1/contact", json={**MESSAGE, "subject": "Other"})

    assert (await http.get("/api/v1/contact", headers=bearer(no_access_token))).status_code == 403

    listing = await http.get("/api/v1/contact", params={"status": "all"}, headers=bearer(token))
    contacts = listing.json()["data"]["contacts"]
    assert len(contacts) == 2

    updated = await http.patch(
        f"/api/v1/contact/{contacts[0]['id']}",
        json={"status": "resolved", "responseMessage": "Done"},
        headers=bearer(token),
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["respondedById"] == admin.id

    resolved = await http.get("/api/v1/contact", params={"status": "resolved"}, headers=bearer(token))
    assert resolved.json()["data"]["pagination"]["total"] == 1
    invalid = await http.get("/api/v1/contact", params={"status": "weird"}, headers=bearer(token))
    assert invalid.status_code == 400

    deleted = await http.delete(f"/api/v1/contact/{contacts[1]['id']}", headers=bearer(token))
    assert deleted.status_code == 200
    assert (await http.get(f"/api/v1/contact/{contacts[1]['id']}", headers=bearer(token))).status_code == 404
