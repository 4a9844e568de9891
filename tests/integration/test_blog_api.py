"""Тесты для блога."""
import pytest

from tests.conftest import bearer

BLOG = {"title": "Shipping FastAPI", "content": "word " * 250, "category": "engineering", "tags": ["python"]}


async def _create(http, token, **overrides):
    response = await http.post("/api/v1/blog", json={**BLOG, **overrides}, headers=bearer(token))
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_blog_derives_fields(http, make_client):
    client, token = await make_client()
    blog = await _create(http, token, status="published")

    assert blog["slug"].startswith("shipping-fastapi-")
    assert blog["readingTime"] == "2 min read"
    assert len(blog["excerpt"]) <= 300
    assert blog["author"]["id"] == client.id
    assert blog["likeCount"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_blog_validation(http, make_client):
    _, token = await make_client()
    too_many_tags = await http.post(
        "/api/v1/blog", json={**BLOG, "tags": [f"t{i}" for i in range(11)]}, headers=bearer(token)
    )
    assert too_many_tags.status_code == 400

    _, banned_token = await make_client(status="banned")
    banned = await http.post("/api/v1/blog", json=BLOG, headers=bearer(banned_token))
    assert banned.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_foreign_blog_is_forbidden(http, make_client):
    _, owner_token = await make_client()
    _, other_token = await make_client()
    blog = await _create(http, owner_token)

    response = await http.delete(f"/api/v1/blog/{blog['id']}", headers=bearer(other_token))
    assert response.status_code == 403
    assert response.json()["success"] is False

    missing = await http.delete("/api/v1/blog/9999", headers=bearer(other_token))
    assert missing.status_code == 404

    own = await http.delete(f"/api/v1/blog/{blog['id']}", headers=bearer(owner_token))
    assert own.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_own_blog_only(http, make_client):
    _, owner_token = await make_client()
    _, other_token = await make_client()
    blog = await _create(http, owner_token)

    foreign = await http.patch(f"/api/v1/blog/{blog['id']}", json={"title": "Hijack"}, headers=bearer(other_token))
    assert foreign.status_code == 403

    updated = await http.patch(
        f"/api/v1/blog/{blog['id']}", json={"title": "New Title", "content": "short"}, headers=bearer(owner_token)
    )
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["slug"].startswith("new-title-")
    assert data["readingTime"] == "1 min read"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_drafts_visible_only_to_author(http, make_client):
    _, owner_token = await make_client()
    _, reader_token = await make_client()
    draft = await _create(http, owner_token)
    await _create(http, owner_token, title="Live", status="published")

    listing = await http.get("/api/v1/blog")
    titles = [b["title"] for b in listing.json()["data"]["blogs"]]
    assert titles == ["Live"]
    assert listing.json()["data"]["pagination"]["total"] == 1

    assert (await http.get(f"/api/v1/blog/{draft['id']}", headers=bearer(reader_token))).status_code == 404
    own = await http.get(f"/api/v1/blog/{draft['slug']}", headers=bearer(owner_token))
    assert own.status_code == 200
    assert own.json()["data"]["views"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_views_counted_for_readers(http, make_client):
    _, owner_token = await make_client()
    blog = await _create(http, owner_token, status="published")

    await http.get(f"/api/v1/blog/{blog['id']}")
    response = await http.get(f"/api/v1/blog/{blog['id']}")
    assert response.json()["data"]["views"] == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_toggle_like(http, make_client):
    _, owner_token = await make_client()
    reader, reader_token = await make_client()
    published = await _create(http, owner_token, status="published")
    draft = await _create(http, owner_token, title="Draft")

    liked = await http.post(f"/api/v1/blog/{published['id']}/like", headers=bearer(reader_token))
    assert liked.json()["data"] == {"liked": True, "likeCount": 1}
    unliked = await http.post(f"/api/v1/blog/{published['id']}/like", headers=bearer(reader_token))
    assert unliked.json()["data"] == {"liked": False, "likeCount": 0}

    assert (await http.post(f"/api/v1/blog/{draft['id']}/like", headers=bearer(reader_token))).status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cover_image_replaces_previous(http, make_client, storage):
    _, token = await make_client()
    blog = await _create(http, token)
    upload = {"coverImage": ("cover.png", b"\x89PNG data", "image/png")}

    first = await http.patch(f"/api/v1/blog/{blog['id']}/cover-image", files=upload, headers=bearer(token))
    assert first.status_code == 200
    first_id = first.json()["data"]["coverImage"]["publicId"]

    second = await http.patch(f"/api/v1/blog/{blog['id']}/cover-image", files=upload, headers=bearer(token))
    assert second.json()["data"]["coverImage"]["publicId"] != first_id
    assert storage.deleted == [first_id]

    bad_type = await http.patch(
        f"/api/v1/blog/{blog['id']}/cover-image",
        files={"coverImage": ("cv.pdf", b"%PDF", "application/pdf")},
        headers=bearer(token),
    )
    assert bad_type.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_ignores_null_fields(http, make_client):
    _, token = await make_client()
    blog = await _create(http, token)
    url = f"/api/v1/blog/{blog['id']}"

    only_null = await http.patch(url, json={"title": None}, headers=bearer(token))
    assert only_null.status_code == 400

    mixed = await http.patch(url, json={"title": None, "tags": None, "category": "devops"}, headers=bearer(token))
    assert mixed.status_code == 200
    data = mixed.json()["data"]
    assert data["title"] == BLOG["title"]
    assert data["slug"] == blog["slug"]
    assert data["tags"] == ["python"]
    assert data["category"] == "devops"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_banned_reader_is_treated_as_anonymous(http, make_client):
    _, owner_token = await make_client()
    _, banned_token = await make_client(status="banned")
    blog = await _create(http, owner_token, status="published")

    response = await http.get(f"/api/v1/blog/{blog['id']}", headers=bearer(banned_token))
    assert response.status_code == 200
    assert response.json()["data"]["views"] == 1
    assert (await http.post(f"/api/v1/blog/{blog['id']}/like", headers=bearer(banned_token))).status_code == 403
