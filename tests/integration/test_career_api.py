"""Тесты для заявок на вакансии."""
import pytest

from tests.conftest import bearer

FORM = {"fullName": "Sam Lee", "email": "Sam@Example.com", "phone": "+1 555 123 4567", "positionApplied": "Backend"}
RESUME = ("resume.pdf", b"%PDF-1.4 resume", "application/pdf")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_submit_application(http, storage):
    response = await http.post("/api/v1/career", data=FORM, files={"resume": RESUME})

    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["email"] == "sam@example.com"
    assert data["status"] == "Applied"
    assert data["resume"]["resourceType"] == "raw"
    assert data["coverLetter"] is None
    assert len(storage.uploaded) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_application_conflicts(http, storage):
    await http.post("/api/v1/career", data=FORM, files={"resume": RESUME})
    response = await http.post("/api/v1/career", data=FORM, files={"resume": RESUME})

    assert response.status_code == 409
    assert len(storage.uploaded) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_application_validation(http):
    missing_resume = await http.post("/api/v1/career", data=FORM, files={"other": ("x.txt", b"x", "text/plain")})
    assert missing_resume.status_code == 400

    missing_field = await http.post("/api/v1/career", data={**FORM, "phone": ""}, files={"resume": RESUME})
    assert missing_field.status_code == 400
    assert "phone" in missing_field.json()["message"]

    bad_type = await http.post("/api/v1/career", data=FORM, files={"resume": ("r.png", b"\x89PNG", "image/png")})
    assert bad_type.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_reviews_applications(http, make_admin, storage):
    _, token = await make_admin(role="moderator")
    created = await http.post(
        "/api/v1/career",
        data=FORM,
        files={"resume": RESUME, "coverLetter": ("letter.pdf", b"%PDF letter", "application/pdf")},
    )
    career_id = created.json()["data"]["id"]

    assert (await http.get("/api/v1/career")).status_code == 401

    updated = await http.patch(
        f"/api/v1/career/{career_id}/status", json={"status": "Interview"}, headers=bearer(token)
    )
    assert updated.json()["data"]["status"] == "Interview"
    invalid = await http.patch(f"/api/v1/career/{career_id}/status", json={"status": "Maybe"}, headers=bearer(token))
    assert invalid.status_code == 400

    listing = await http.get("/api/v1/career", params={"status": "Interview"}, headers=bearer(token))
    assert listing.json()["data"]["pagination"]["total"] == 1

    deleted = await http.delete(f"/api/v1/career/{career_id}", headers=bearer(token))
    assert deleted.status_code == 200
    assert sorted(storage.deleted) == sorted(item["publicId"] for item in storage.uploaded)
