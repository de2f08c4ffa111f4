"""
Certificate registry - test configuration and fixtures.
"""
import os
import tempfile
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

# Settings are read at import time, so the environment must be prepared
# before the application is imported.
_TEST_DIR = tempfile.mkdtemp(prefix="certificate-registry-tests-")
os.environ["JWT_SECRET"] = "test-jwt-secret-for-testing-only"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "60"
os.environ["DATABASE_URL"] = os.path.join(_TEST_DIR, "test.db")
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_DIR, "uploads")
os.environ["VERIFICATION_BASE_URL"] = "https://certificates.example.org"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"
os.environ["DEBUG"] = "false"

from certificate_registry_api.app.core.config import settings  # noqa: E402
from certificate_registry_api.app.core.db import init_db  # noqa: E402
from certificate_registry_api.app.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def database(tmp_path_factory, monkeypatch) -> str:
    """Point the store at a fresh SQLite file for each test."""
    db_path = str(tmp_path_factory.mktemp("db") / "test.db")
    monkeypatch.setattr(settings, "database_url", db_path)
    init_db()
    return db_path


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def test_user_data() -> dict:
    return {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "password": "s3cret-passw0rd",
    }


@pytest.fixture
def student_form() -> dict:
    return {
        "studentName": "Jane Doe",
        "courseName": "Full Stack Development",
        "certificateNumber": "FSD-2024-0012",
        "passingYear": "2024",
        "courseDuration": "6 months",
        "skills": "Python, SQL, FastAPI",
    }


@pytest.fixture
async def auth_headers(client: AsyncClient, test_user_data: dict) -> dict:
    await client.post("/api/register", json=test_user_data)
    response = await client.post(
        "/api/login",
        json={"email": test_user_data["email"], "password": test_user_data["password"]},
    )
    return {"Authorization": response.json()["token"]}
