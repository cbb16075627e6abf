"""
Tests for Applications API endpoints.

Key rules:
- One application per (job, applicant), enforced by a unique index
- Only the job's creator sees its applicants or changes their status
"""
import pytest
from httpx import AsyncClient
from pymongo.errors import DuplicateKeyError

from app.services.mongo_service import ApplicationService


RESUME = {"resumeLink": "https://cv.example.com/casey.pdf", "coverLetter": "Hire me"}


async def _apply(client: AsyncClient, job: dict, user: dict, payload: dict = RESUME):
    return await client.post(f"/api/applications/{job['id']}", json=payload, headers=user["headers"])


# ============================================================
# APPLY
# ============================================================

@pytest.mark.asyncio
async def test_apply_to_job(async_client: AsyncClient, candidate: dict, job: dict):
    response = await _apply(async_client, job, candidate)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "applied"
    assert data["resumeLink"] == RESUME["resumeLink"]
    assert data["coverLetter"] == "Hire me"
    assert data["job"]["id"] == job["id"]
    assert data["applicant"]["id"] == candidate["id"]


@pytest.mark.asyncio
async def test_duplicate_application_rejected(async_client: AsyncClient, candidate: dict, job: dict, db):
    first = await _apply(async_client, job, candidate)
    second = await _apply(async_client, job, candidate)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json() == {"message": "You have already applied for this job"}
    assert db["applications"].count_documents({}) == 1


@pytest.mark.asyncio
async def test_duplicate_application_race_hits_unique_index(
    async_client: AsyncClient, candidate: dict, job: dict, monkeypatch, db
):
    """Two requests that both pass the pre-check: the index stops the second."""
    await _apply(async_client, job, candidate)
    monkeypatch.setattr(ApplicationService, "exists", lambda self, job_id, applicant_id: False)

    response = await _apply(async_client, job, candidate)

    assert response.status_code == 409
    assert db["applications"].count_documents({}) == 1


def test_unique_index_on_job_and_applicant(candidate: dict, employer: dict, db):
    job_id = db["jobs"].insert_one({"title": "x"}).inserted_id
    service = ApplicationService()
    service.create(job_id=job_id, applicant_id=candidate["id"], resume_link="r")

    with pytest.raises(DuplicateKeyError):
        service.create(job_id=job_id, applicant_id=candidate["id"], resume_link="r")

    # A different applicant for the same job is fine
    service.create(job_id=job_id, applicant_id=employer["id"], resume_link="r")


@pytest.mark.asyncio
async def test_different_candidates_can_apply(
    async_client: AsyncClient, candidate: dict, other_candidate: dict, job: dict
):
    assert (await _apply(async_client, job, candidate)).status_code == 201
    assert (await _apply(async_client, job, other_candidate)).status_code == 201


@pytest.mark.asyncio
async def test_apply_requires_resume_link(async_client: AsyncClient, candidate: dict, job: dict):
    response = await _apply(async_client, job, candidate, {"coverLetter": "no resume"})

    assert response.status_code == 400
    assert response.json() == {"message": "Resume link is required"}


@pytest.mark.asyncio
async def test_apply_unknown_job(async_client: AsyncClient, candidate: dict):
    response = await _apply(async_client, {"id": "64b7f0c2a1b2c3d4e5f6a7b8"}, candidate)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_employer_cannot_apply(async_client: AsyncClient, other_employer: dict, job: dict):
    response = await _apply(async_client, job, other_employer)

    assert response.status_code == 403


# ============================================================
# LISTING
# ============================================================

@pytest.mark.asyncio
async def test_job_applicants_visible_to_creator(
    async_client: AsyncClient, employer: dict, candidate: dict, job: dict
):
    await _apply(async_client, job, candidate)

    response = await async_client.get(f"/api/applications/job/{job['id']}", headers=employer["headers"])

    assert response.status_code == 200
    applications = response.json()
    assert len(applications) == 1
    assert applications[0]["applicant"]["email"] == candidate["email"]
    assert applications[0]["applicant"]["name"] == candidate["name"]


@pytest.mark.asyncio
async def test_job_applicants_hidden_from_others(
    async_client: AsyncClient, other_employer: dict, candidate: dict, job: dict
):
    await _apply(async_client, job, candidate)

    for user in (other_employer, candidate):
        response = await async_client.get(f"/api/applications/job/{job['id']}", headers=user["headers"])
        assert response.status_code == 403


@pytest.mark.asyncio
async def test_my_applications(
    async_client: AsyncClient, employer: dict, candidate: dict, other_candidate: dict, job: dict
):
    company = (await async_client.post(
        "/api/companies", json={"name": "Acme", "logo": "acme.png"}, headers=employer["headers"]
    )).json()
    linked_job = (await async_client.post("/api/jobs", headers=employer["headers"], json={
        "title": "Data Engineer", "description": "Pipelines", "salary": "100k",
        "location": "Remote", "companyName": "Acme", "company": company["id"]
    })).json()
    await _apply(async_client, job, candidate)
    await _apply(async_client, linked_job, candidate)
    await _apply(async_client, job, other_candidate)

    response = await async_client.get("/api/applications", headers=candidate["headers"])

    applications = response.json()
    assert [a["job"]["id"] for a in applications] == [linked_job["id"], job["id"]]
    assert applications[0]["job"]["title"] == "Data Engineer"
    assert applications[0]["job"]["company"]["name"] == "Acme"
    assert applications[1]["job"]["company"] is None


@pytest.mark.asyncio
async def test_employer_applicants_across_jobs(
    async_client: AsyncClient, employer: dict, other_employer: dict,
    candidate: dict, job: dict, job_payload: dict
):
    foreign_job = (await async_client.post(
        "/api/jobs", json=job_payload, headers=other_employer["headers"]
    )).json()
    await _apply(async_client, job, candidate)
    await _apply(async_client, foreign_job, candidate)

    response = await async_client.get("/api/applications/employer/applicants", headers=employer["headers"])

    applications = response.json()
    assert len(applications) == 1
    assert applications[0]["job"]["id"] == job["id"]
    assert applications[0]["applicant"]["skills"] == []


@pytest.mark.asyncio
async def test_employer_applicants_without_jobs(async_client: AsyncClient, other_employer: dict):
    response = await async_client.get(
        "/api/applications/employer/applicants", headers=other_employer["headers"]
    )

    assert response.status_code == 200
    assert response.json() == []


# ============================================================
# STATUS UPDATES
# ============================================================

@pytest.mark.asyncio
async def test_creator_updates_status(async_client: AsyncClient, employer: dict, candidate: dict, job: dict):
    application = (await _apply(async_client, job, candidate)).json()

    response = await async_client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "shortlisted"}, headers=employer["headers"]
    )

    assert response.status_code == 200
    assert response.json()["status"] == "shortlisted"


@pytest.mark.asyncio
async def test_other_users_cannot_update_status(
    async_client: AsyncClient, other_employer: dict, candidate: dict, job: dict
):
    application = (await _apply(async_client, job, candidate)).json()

    for user in (other_employer, candidate):
        response = await async_client.put(
            f"/api/applications/{application['id']}/status",
            json={"status": "hired"}, headers=user["headers"]
        )
        assert response.status_code == 403


@pytest.mark.asyncio
async def test_invalid_status(async_client: AsyncClient, employer: dict, candidate: dict, job: dict):
    application = (await _apply(async_client, job, candidate)).json()

    response = await async_client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "ghosted"}, headers=employer["headers"]
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_status_unknown_application(async_client: AsyncClient, employer: dict):
    response = await async_client.put(
        "/api/applications/64b7f0c2a1b2c3d4e5f6a7b8/status",
        json={"status": "hired"}, headers=employer["headers"]
    )

    assert response.status_code == 404
