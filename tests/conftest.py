# tests/conftest.py
import os

# Point the app at throwaway settings before anything imports config.appconfig
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database.connection import Base, get_db
from app.main import app
from app.model_registry import Disease, Medicine, Patient, UsageMethod, User
from app.users.security import get_password_hash

VISIT_DAY = date(2024, 1, 10)
PASSWORD = "secret123"


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'clinic.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def visit_day(monkeypatch):
    """Freeze the clinic calendar on the visit day."""
    monkeypatch.setattr("app.system_services.medical_record_services.clinic_today", lambda: VISIT_DAY)
    monkeypatch.setattr("app.system_services.appointment_services.clinic_today", lambda: VISIT_DAY)
    monkeypatch.setattr("app.system_services.appointment_routes.clinic_today", lambda: VISIT_DAY)
    return VISIT_DAY


@pytest.fixture
async def staff(db):
    """One active account per role, all with PASSWORD."""
    hashed = get_password_hash(PASSWORD)
    users = {
        role: User(username=name, hashed_password=hashed, role=role)
        for name, role in (("admin", "admin"), ("reception", "receptionist"), ("doctor", "doctor"))
    }
    db.add_all(users.values())
    await db.commit()
    return users


@pytest.fixture
async def tokens(client, staff):
    """Bearer headers keyed by role, obtained through the login endpoint."""
    headers = {}
    for role, user in staff.items():
        resp = await client.post("/api/auth/login", json={"username": user.username, "password": PASSWORD})
        assert resp.status_code == 200, resp.text
        headers[role] = {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}
    return headers


@pytest.fixture
async def patient(db):
    p = Patient(full_name="Nguyen Van A", gender="male", birth_year=1990, phone_number="0901234567")
    db.add(p)
    await db.commit()
    return p


@pytest.fixture
async def catalog(db):
    """Active reference rows plus one inactive medicine."""
    rows = {
        "paracetamol": Medicine(name="Paracetamol 500mg", unit="tablet", price=Decimal("2000")),
        "amoxicillin": Medicine(name="Amoxicillin 500mg", unit="tablet", price=Decimal("5000")),
        "retired": Medicine(name="Old syrup", unit="bottle", price=Decimal("9000"), is_active=False),
        "after_meals": UsageMethod(name="Take after meals"),
        "flu": Disease(name="Influenza", description="Viral illness"),
    }
    db.add_all(rows.values())
    await db.commit()
    return rows
