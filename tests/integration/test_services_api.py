"""Тесты для услуг и прайсов."""
import pytest

from tests.conftest import bearer

SERVICE = {"title": "Landing page", "category": "business", "description": "One page site", "price": 499}
TIERS = [
    {"name": "Basic", "price": 100},
    {"name": "Pro", "price": 250, "features": ["SEO"], "isPopular": True},
]


async def _create_service(http, token, **overrides):
    response = await http.post("/api/v1/services", json={**SERVICE, **overrides}, headers=bearer(token))
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_requires_manage_services(http, make_admin):
    _, token = await make_admin(permissions={"manageServices": False})
    response = await http.post("/api/v1/services", json=SERVICE, headers=bearer(token))
    assert response.status_code == 403

    _, allowed_token = await make_admin(permissions={"manageServices": True})
    service = await _create_service(http, allowed_token)
    assert service["status"] == "active"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_services_require_admin(http, make_client):
    _, client_token = await make_client()
    assert (await http.get("/api/v1/services", headers=bearer(client_token))).status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_requires_creator_or_superadmin(http, make_admin):
    _, creator_token = await make_admin()
    _, other_token = await make_admin()
    _, root_token = await make_admin(role="superadmin")
    service = await _create_service(http, creator_token)
    url = f"/api/v1/services/{service['id']}"

    assert (await http.patch(url, json={"price": 1}, headers=bearer(other_token))).status_code == 403
    assert (await http.patch("/api/v1/services/999", json={"price": 1}, headers=bearer(other_token))).status_code == 404

    by_root = await http.patch(url, json={"price": 650}, headers=bearer(root_token))
    assert by_root.status_code == 200
    assert by_root.json()["data"]["price"] == 650

    toggled = await http.patch(f"{url}/toggle-status", headers=bearer(creator_token))
    assert toggled.json()["data"]["status"] == "inactive"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_services_filters(http, make_admin):
    _, token = await make_admin()
    await _create_service(http, token, title="Cheap", price=100)
    await _create_service(http, token, title="Pricey", price=900, category="e-commerce")

    response = await http.get("/api/v1/services", params={"minPrice": 500}, headers=bearer(token))
    assert [s["title"] for s in response.json()["data"]["services"]] == ["Pricey"]

    response = await http.get(
        "/api/v1/services", params={"sortBy": "price", "sortOrder": "asc"}, headers=bearer(token)
    )
    assert [s["title"] for s in response.json()["data"]["services"]] == ["Cheap", "Pricey"]

    bad_sort = await http.get("/api/v1/services", params={"sortBy": "secret"}, headers=bearer(token))
    assert bad_sort.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pricing_lifecycle(http, make_admin):
    _, token = await make_admin()
    service = await _create_service(http, token)

    created = await http.post(
        "/api/v1/pricing", json={"serviceId": service["id"], "tiers": TIERS}, headers=bearer(token)
    )
    assert created.status_code == 201
    pricing = created.json()["data"]
    assert pricing["tiers"][1]["isPopular"] is True

    duplicate = await http.post(
        "/api/v1/pricing", json={"serviceId": service["id"], "tiers": TIERS}, headers=bearer(token)
    )
    assert duplicate.status_code == 409

    public = await http.get(f"/api/v1/pricing/service/{service['id']}")
    assert public.status_code == 200
    assert public.json()["data"]["id"] == pricing["id"]

    await http.patch(f"/api/v1/services/{service['id']}/toggle-status", headers=bearer(token))
    hidden = await http.get(f"/api/v1/pricing/service/{service['id']}")
    assert hidden.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pricing_validation_and_permission(http, make_admin):
    _, token = await make_admin()
    _, moderator_token = await make_admin(role="moderator")
    service = await _create_service(http, token)

    negative = await http.post(
        "/api/v1/pricing",
        json={"serviceId": service["id"], "tiers": [{"name": "Bad", "price": -1}]},
        headers=bearer(token),
    )
    assert negative.status_code == 400
    unnamed = await http.post(
        "/api/v1/pricing", json={"serviceId": service["id"], "tiers": [{"price": 10}]}, headers=bearer(token)
    )
    assert unnamed.status_code == 400
    forbidden = await http.post(
        "/api/v1/pricing", json={"serviceId": service["id"], "tiers": TIERS}, headers=bearer(moderator_token)
    )
    assert forbidden.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_service_cleans_thumbnail(http, make_admin, storage):
    _, token = await make_admin()
    service = await _create_service(http, token)
    url = f"/api/v1/services/{service['id']}"

    uploaded = await http.post(
        f"{url}/thumbnail", files={"thumbnail": ("t.png", b"\x89PNG", "image/png")}, headers=bearer(token)
    )
    assert uploaded.status_code == 200
    public_id = uploaded.json()["data"]["thumbnailPublicId"]

    assert (await http.delete(url, headers=bearer(token))).status_code == 200
    assert storage.deleted == [public_id]
    assert (await http.get(url, headers=bearer(token))).status_code == 404
