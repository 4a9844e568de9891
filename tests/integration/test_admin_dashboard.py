"""Тесты для панели администратора."""
import pytest
from sqlalchemy import func, select

from codix.models import Blog, ClientServiceRequest
from tests.conftest import bearer

BASE = "/api/v1/adminDashboard"
BLOG = {"title": "Case study", "content": "Some text", "category": "news"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_client_management_requires_permission(http, make_admin, make_client):
    await make_client()
    _, moderator_token = await make_admin(role="moderator")
    _, token = await make_admin()

    assert (await http.get(f"{BASE}/clients", headers=bearer(moderator_token))).status_code == 403
    response = await http.get(f"{BASE}/clients", headers=bearer(token))
    assert response.json()["data"]["pagination"]["total"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_ban_client_revokes_session(http, make_admin, make_client):
    client, client_token = await make_client()
    _, token = await make_admin()

    response = await http.patch(
        f"{BASE}/clients/{client.id}", json={"status": "banned", "role": "admin"}, headers=bearer(token)
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "banned"
    assert (await http.get("/api/v1/client/me", headers=bearer(client_token))).status_code == 403

    empty = await http.patch(f"{BASE}/clients/{client.id}", json={}, headers=bearer(token))
    assert empty.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_client_cascades(http, make_admin, make_client, storage, session_maker):
    client, client_token = await make_client()
    _, token = await make_admin()
    blog = (await http.post("/api/v1/blog", json=BLOG, headers=bearer(client_token))).json()["data"]
    await http.patch(
        f"/api/v1/blog/{blog['id']}/cover-image",
        files={"coverImage": ("c.png", b"\x89PNG", "image/png")},
        headers=bearer(client_token),
    )
    request = await http.post(
        "/api/v1/clientService",
        json={"title": "App", "description": "Mobile app"},
        headers=bearer(client_token),
    )
    await http.post(
        f"/api/v1/clientService/{request.json()['data']['id']}/attachments",
        files=[("attachments", ("brief.pdf", b"%PDF", "application/pdf"))],
        headers=bearer(client_token),
    )
    storage.fail_delete = True

    response = await http.delete(f"{BASE}/clients/{client.id}", headers=bearer(token))

    assert response.status_code == 200
    async with session_maker() as session:
        assert await session.scalar(select(func.count()).select_from(Blog)) == 0
        assert await session.scalar(select(func.count()).select_from(ClientServiceRequest)) == 0
    assert (await http.get(f"{BASE}/clients/{client.id}", headers=bearer(token))).status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_blog_moderation(http, make_admin, make_client, storage):
    _, client_token = await make_client()
    _, token = await make_admin(role="moderator")
    blog = (await http.post("/api/v1/blog", json=BLOG, headers=bearer(client_token))).json()["data"]
    url = f"{BASE}/blogs/{blog['id']}"

    drafts = await http.get(f"{BASE}/blogs", params={"status": "draft"}, headers=bearer(token))
    assert drafts.json()["data"]["pagination"]["total"] == 1

    published = await http.patch(f"{url}/status", json={"status": "published"}, headers=bearer(token))
    assert published.json()["data"]["status"] == "published"
    assert (await http.patch(f"{url}/status", json={"status": "gone"}, headers=bearer(token))).status_code == 400

    featured = await http.patch(f"{url}/toggle", headers=bearer(token))
    assert featured.json()["data"]["featured"] is True
    assert featured.json()["message"] == "Blog marked as featured"
    unfeatured = await http.patch(f"{url}/toggle", headers=bearer(token))
    assert unfeatured.json()["data"]["featured"] is False

    assert (await http.delete(url, headers=bearer(token))).status_code == 200
    assert (await http.get(url, headers=bearer(token))).status_code == 404
