"""
Shared pytest fixtures.

The API runs against an in-memory SQLite database that lives for one test,
with the in-memory cache backend and rate limiting switched off.
"""

import os

# Settings are read at import time
os.environ["ENVIRONMENT"] = "test"
os.environ["SQLITE_MODE"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DEBUG_TOOLS_ENABLED"] = "true"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from core.cache import init_memory_cache, invalidate_namespace
from db.database import Base, get_db
from main import app
from schemas.doctor_schemas import DoctorCreate
from services.doctor_service import doctor_service
from utils.scheduling import shift_date, today_str
from utils.security import create_access_token

ADMIN_PASSWORD = "admin-secret-1"
DOCTOR_PASSWORD = "doctor-secret-1"


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def async_engine():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(async_engine) -> async_sessionmaker:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, with get_db pointed at the test database"""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    init_memory_cache()
    # The in-memory store outlives a single test
    await invalidate_namespace()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_doctor(session_factory, **fields):
    async with session_factory() as session:
        return await doctor_service.create_doctor(session, DoctorCreate(**fields))


@pytest_asyncio.fixture
async def admin_doctor(session_factory):
    return await _make_doctor(
        session_factory,
        first_name="Ana",
        last_name="Garcia",
        email="ana.garcia@clinica-dental.es",
        password=ADMIN_PASSWORD,
        specialization="Ortodoncia",
        is_admin=True,
    )


@pytest_asyncio.fixture
async def doctor(session_factory):
    return await _make_doctor(
        session_factory,
        first_name="Luis",
        last_name="Moreno",
        email="luis.moreno@clinica-dental.es",
        password=DOCTOR_PASSWORD,
        specialization="Endodoncia",
    )


def bearer(doctor) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': doctor.id})}"}


@pytest.fixture
def admin_headers(admin_doctor) -> dict:
    return bearer(admin_doctor)


@pytest.fixture
def doctor_headers(doctor) -> dict:
    return bearer(doctor)


# ============================================================================
# TEST DATA
# ============================================================================


@pytest.fixture
def future_date() -> str:
    """A bookable date; appointments cannot be created in the past"""
    return shift_date(today_str(), 30)


@pytest.fixture
def patient_payload() -> dict:
    return {
        "firstName": "Carmen",
        "lastName": "Ruiz",
        "email": "carmen.ruiz@correo.es",
        "phone": "600123456",
        "dateOfBirth": "1985-06-15",
        "allergies": ["penicilina", "latex"],
        "insurance": "Sanitas",
    }


@pytest_asyncio.fixture
async def patient(client, admin_headers, patient_payload) -> dict:
    response = await client.post("/patients/", json=patient_payload, headers=admin_headers)
    assert response.status_code == 201, response.text
    return response.json()
