"""
Pytest fixtures for testing.

Every test gets a fresh in-memory mongomock database with the same indexes
as production, so uniqueness rules (email, company name, one application
per job/applicant) behave exactly as they do against MongoDB.
"""
import mongomock
import pytest
import pytest_asyncio
from typing import AsyncGenerator, Callable

from httpx import AsyncClient, ASGITransport

# Import database module BEFORE app to allow override
import app.db.mongodb
from app.db.mongodb import init_mongo_indexes
from app.core.auth import hash_password, create_user_token
from app.services.mongo_service import UserService

# Now import app (after we can override database)
from app.main import app as fastapi_app


TEST_PASSWORD = "password123"


@pytest.fixture
def db():
    """
    Replace the app's database with an in-memory one for each test.
    Restores the original afterwards, even if the test fails.
    """
    client = mongomock.MongoClient()
    original_db = app.db.mongodb._db

    app.db.mongodb._db = client["jobportal_test"]
    init_mongo_indexes()

    try:
        yield app.db.mongodb._db
    finally:
        app.db.mongodb._db = original_db
        client.close()


@pytest_asyncio.fixture
async def async_client(db) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client talking to the app in-process.

    The db fixture already swapped in the test database, so every
    endpoint reads and writes mongomock.
    """
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_user(db) -> Callable[..., dict]:
    """Factory: insert a user directly and return it with auth headers attached."""
    def _make_user(name: str, email: str, role: str = "candidate", **extra) -> dict:
        user = UserService().create(
            name=name,
            email=email,
            password_hash=hash_password(TEST_PASSWORD),
            role=role,
            company_name=extra.get("company_name", "")
        )
        user["headers"] = {"Authorization": f"Bearer {create_user_token(user)}"}
        return user
    return _make_user


@pytest.fixture
def candidate(make_user) -> dict:
    return make_user("Casey Candidate", "casey@example.com", "candidate")


@pytest.fixture
def other_candidate(make_user) -> dict:
    return make_user("Robin Seeker", "robin@example.com", "candidate")


@pytest.fixture
def employer(make_user) -> dict:
    return make_user("Erin Employer", "erin@example.com", "employer", company_name="Acme")


@pytest.fixture
def other_employer(make_user) -> dict:
    return make_user("Oscar Owner", "oscar@example.com", "employer", company_name="Globex")


@pytest.fixture
def job_payload() -> dict:
    return {
        "title": "Backend Engineer",
        "description": "Build REST APIs with Python",
        "salary": "90k-120k",
        "location": "Berlin",
        "type": "Full-time",
        "companyName": "Acme",
    }


@pytest_asyncio.fixture
async def job(async_client: AsyncClient, employer: dict, job_payload: dict) -> dict:
    """A job posted by `employer`."""
    response = await async_client.post("/api/jobs", json=job_payload, headers=employer["headers"])
    assert response.status_code == 201
    return response.json()
