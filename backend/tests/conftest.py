"""
Petly Backend: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite) with
       the full schema, a QueryExecutor over it and, for route tests, an
       httpx AsyncClient talking to the app through ASGITransport.
       Petfinder is replaced by FakeCatalog; SMTP by FakeMailer.

Fixture Hierarchy:
    db_engine        in-memory engine, schema created, foreign keys on
    └── db_session   AsyncSession on that engine
        └── executor QueryExecutor on that session
            └── breeds   seeded breed rows 1..3
    catalog          FakeCatalog (empty unless a test fills it)
    mailer           FakeMailer recording sent messages
    client           AsyncClient with get_db_session/get_catalog/
                     get_email_service overridden
"""

import os

# Override settings BEFORE any petly imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "petly-test-secret-key-long-enough-for-hs256"
os.environ["BCRYPT_WORK_FACTOR"] = "4"
os.environ["PETFINDER_API_KEY"] = ""
os.environ["PETFINDER_SECRET"] = ""
os.environ["SMTP_HOST"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict, List, Mapping, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import petly.models  # noqa: F401  (registers tables on Base.metadata)
from petly.database import Base, get_db_session
from petly.dependencies import get_catalog, get_email_service
from petly.exceptions import EmailDeliveryError
from petly.services.catalog_base import ExternalCatalog
from petly.services.query import QueryExecutor
from petly.services.tokens import ADOPTER_USER, SHELTER_USER, create_token


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

class FakeCatalog(ExternalCatalog):
    """
    In-memory remote catalog. Searches return every stored record (filters
    are recorded, not applied); lookups match on the string id.
    """

    def __init__(self):
        self.dogs: List[Dict[str, Any]] = []
        self.shelters: List[Dict[str, Any]] = []
        self.breed_names: List[str] = []
        self.dog_filters: List[Mapping[str, Any]] = []
        self.shelter_filters: List[Mapping[str, Any]] = []
        self.healthy = True

    async def list_dogs(self, filters: Optional[Mapping[str, Any]] = None):
        self.dog_filters.append(dict(filters or {}))
        return [dict(dog) for dog in self.dogs]

    async def get_dog(self, dog_id: str):
        for dog in self.dogs:
            if dog["id"] == dog_id:
                return dict(dog)
        return None

    async def list_shelters(self, filters: Optional[Mapping[str, Any]] = None):
        self.shelter_filters.append(dict(filters or {}))
        return [dict(shelter) for shelter in self.shelters]

    async def get_shelter(self, shelter_id: str):
        for shelter in self.shelters:
            if shelter["id"] == shelter_id:
                return dict(shelter)
        return None

    async def list_breed_names(self):
        return list(self.breed_names)

    async def health_check(self):
        return self.healthy


class FakeMailer:
    def __init__(self):
        self.sent: List[Dict[str, Any]] = []
        self.fail = False

    async def send_contact_shelter(self, adopter_email, name, message, shelter_email, **kwargs):
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append(
            {
                "adopter_email": adopter_email,
                "name": name,
                "message": message,
                "shelter_email": shelter_email,
                **kwargs,
            }
        )


def remote_dog(dog_id: str = "58512345", **overrides) -> Dict[str, Any]:
    """A dog as PetfinderCatalog normalizes it."""
    dog = {
        "id": dog_id,
        "name": "Remote Rex",
        "breedId": None,
        "breed": "Beagle",
        "gender": "Male",
        "age": "Young",
        "picture": "https://photos.example/rex.jpg",
        "description": "",
        "goodWKids": True,
        "goodWDogs": None,
        "goodWCats": False,
        "shelterId": "CO123",
    }
    dog.update(overrides)
    return dog


def remote_shelter(shelter_id: str = "CO123", **overrides) -> Dict[str, Any]:
    shelter = {
        "id": shelter_id,
        "name": "Mountain Rescue",
        "address": "",
        "city": "Denver",
        "state": "CO",
        "postcode": "80202",
        "phoneNumber": "555-0100",
        "email": "adopt@mountain.example",
        "logo": "/assets/shelter.jpg",
        "description": "",
    }
    shelter.update(overrides)
    return shelter


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures (fresh database per test)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite ignores foreign keys unless asked per connection
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def executor(db_session):
    return QueryExecutor(db_session)


@pytest_asyncio.fixture
async def breeds(executor):
    """Breed rows 1: Beagle, 2: Boxer, 3: Poodle."""
    names = ["Beagle", "Boxer", "Poodle"]
    for breed_id, name in enumerate(names, start=1):
        await executor.execute("INSERT INTO breeds (id, breed) VALUES ($1, $2)", [breed_id, name])
    await executor.commit()
    return {name: breed_id for breed_id, name in enumerate(names, start=1)}


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest_asyncio.fixture
async def client(session_factory, catalog, mailer):
    """
    HTTPX AsyncClient routed straight into the app.

    Usage:
        async def test_breeds(client):
            response = await client.get("/api/breeds")
            assert response.status_code == 200
    """
    from petly.main import app

    async def _test_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_session
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_email_service] = lambda: mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


# ── Token helpers ─────────────────────────────────────────────────────────

def bearer(record: Mapping[str, Any], user_type: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_token(record, user_type)}"}


def shelter_auth(record: Mapping[str, Any]) -> Dict[str, str]:
    return bearer(record, SHELTER_USER)


def adopter_auth(record: Mapping[str, Any]) -> Dict[str, str]:
    return bearer(record, ADOPTER_USER)
