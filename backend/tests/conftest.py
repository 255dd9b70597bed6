"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from backend.app.main import app
from backend.app.core.config import settings
from backend.app.db.session import get_db, get_session_factory, Base
from backend.app.services.archive_store import ArchiveStore, get_archive_store

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture
def archive_store(tmp_path):
    """Archive store writing into a per-test temporary directory."""
    return ArchiveStore(str(tmp_path / "arquivos"))


@pytest.fixture(autouse=True)
def apply_overrides(archive_store, monkeypatch):
    """Route app dependencies to the test database and archive directory."""
    # The in-memory database is one shared connection; sessions must not interleave
    monkeypatch.setattr(settings, "reconciliation_max_concurrency", 1)


    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    app.dependency_overrides[get_archive_store] = lambda: archive_store
    yield

    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
async def customer(client):
    """A persisted customer (client-facing JSON)."""
    response = await client.post("/api/clientes", json={
        "nome": "Maria Souza",
        "email": "maria@example.com",
        "telefone": "11999990000",
        "codigo": "C001",
        "contaCorrente": "12345-6"
    })
    assert response.status_code == 201
    return response.json()


@pytest.fixture
async def make_charge(client, customer):
    """Factory creating charges for the fixture customer."""

    async def _make(descricao="Mensalidade", valor=450.0, vencimento="2025-01-10", **extra):
        payload = {
            "clienteId": customer["id"],
            "descricao": descricao,
            "valor": valor,
            "vencimento": vencimento,
            **extra
        }
        response = await client.post("/api/cobrancas", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
