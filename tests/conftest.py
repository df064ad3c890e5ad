"""
Test configuration and fixtures for the blood donation backend.
Provides isolated databases, authentication helpers and data factories.
"""

import os
from typing import AsyncGenerator, Generator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Test database configuration
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Override environment variables before the application reads its settings
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["SECRET_KEY"] = "test-secret-key-for-jwt-tokens"
os.environ["ENABLE_FILE_LOGGING"] = "false"
os.environ["ENABLE_ADMIN_UI"] = "false"
os.environ["SYS_ADMIN"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from bloodhub.db.base import Base  # noqa: E402
from bloodhub.dependencies import get_db  # noqa: E402
from bloodhub.main import app  # noqa: E402
from bloodhub.utils.security import TokenManager  # noqa: E402

DEFAULT_PASSWORD = "SecurePass123!"


def make_engine():
    return create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )


def make_session_factory(engine):
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


async def create_tables(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


# --- Database Fixtures ---


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh database and session for service-level tests."""
    engine = make_engine()
    await create_tables(engine)
    session_factory = make_session_factory(engine)
    async with session_factory() as session:
        yield session
    await drop_tables(engine)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    Test client backed by its own in-memory database. Tables are created on
    the client's event loop so every query runs on the loop that owns the
    connection.
    """
    engine = make_engine()
    session_factory = make_session_factory(engine)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        test_client.portal.call(create_tables, engine)
        yield test_client
        test_client.portal.call(drop_tables, engine)
    app.dependency_overrides.clear()


# --- Data Factories ---


class TestDataFactory:
    """Factory for realistic payloads."""

    __test__ = False

    @staticmethod
    def unique_email(prefix: str = "test") -> str:
        return f"{prefix}_{uuid4().hex[:8]}@college.edu"

    @staticmethod
    def create_user_data(role: str = None, email: str = None) -> dict:
        data = {
            "email": email or TestDataFactory.unique_email("user"),
            "password": DEFAULT_PASSWORD,
        }
        if role:
            data["role"] = role
        return data

    @staticmethod
    def create_donor_data(blood_group: str = "O+", roll_number: str = None) -> dict:
        return {
            "name": "Ama Mensah",
            "branch": "Computer Science",
            "rollNumber": roll_number or f"CS{uuid4().hex[:6].upper()}",
            "bloodGroup": blood_group,
            "contactInfo": "+233244000000",
        }

    @staticmethod
    def create_request_form(
        blood_type: str = "A+",
        units_required: int = 2,
        is_emergency: bool = False,
        patient_name: str = "Kwame Asante",
    ) -> dict:
        """Multipart text fields for a blood request submission."""
        return {
            "patientName": patient_name,
            "patientAge": "34",
            "gender": "Male",
            "bloodTypeNeeded": blood_type,
            "unitsRequired": str(units_required),
            "hospitalName": "Korle Bu Teaching Hospital",
            "medicalReason": "Scheduled surgery",
            "collegeRollNumber": "CS2020",
            "collegeEmail": "student@college.edu",
            "contactNumber": "+233244000001",
            "isEmergency": "true" if is_emergency else "false",
        }


# --- Authentication Helpers ---


def register_and_login(client: TestClient, role: str = None) -> dict:
    """Register a fresh account and return its bearer headers."""
    user_data = TestDataFactory.create_user_data(role=role)
    register_response = client.post("/api/auth/register", json=user_data)
    assert register_response.status_code == 201, register_response.text

    login_response = client.post(
        "/api/auth/login",
        json={"email": user_data["email"], "password": user_data["password"]},
    )
    assert login_response.status_code == 200, login_response.text
    token = login_response.json()["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    """Bearer headers for a regular user."""
    return register_and_login(client)


@pytest.fixture
def admin_auth_headers(client: TestClient) -> dict:
    """Bearer headers for an admin."""
    return register_and_login(client, role="admin")


def bearer_for(user_id, email: str = "someone@college.edu", role: str = "user") -> dict:
    token = TokenManager.create_access_token(user_id, email, role)
    return {"Authorization": f"Bearer {token}"}


# --- Utility Functions ---


def assert_response_error(response, expected_status: int = 400, message: str = None):
    """Assert response carries the error envelope."""
    assert response.status_code == expected_status, response.text
    data = response.json()
    assert "message" in data
    if message is not None:
        assert data["message"] == message
    return data


def assert_validation_error(response, field_name: str = None):
    """Assert response is a validation error."""
    data = assert_response_error(response, 400, "Validation failed")
    if field_name:
        assert any(error["field"].endswith(field_name) for error in data["error"])
    return data
