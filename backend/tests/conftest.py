"""
Clientes API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── upload_dir: Temporary upload directory patched into settings
    ├── memory_store: In-memory ClienteStore (no database)
    ├── cliente_factory: Builds unsaved Cliente rows
    ├── session_factory: SQLite (aiosqlite) session factory with the schema created
    ├── db_session: One AsyncSession from session_factory
    ├── test_client: HTTPX AsyncClient against the app, DB dependency overridden
    ├── sample_image_bytes: Fake image content for upload tests
    └── sample_payload: A valid create/update JSON body
"""

import os
import tempfile
from datetime import date
from typing import List, Optional, Tuple

# Override settings BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="clientes_test_db_"), "unused.db"
)
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="clientes_test_uploads_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings
from app.database import Base, get_db_session
from app.models.cliente import Cliente
from app.repositories.cliente_store import SORTABLE_FIELDS, ClienteStore


# ══════════════════════════════════════════════════════════════════════════
# In-memory store
# ══════════════════════════════════════════════════════════════════════════

class InMemoryClienteStore(ClienteStore):
    """
    ClienteStore kept in a dict, for service tests.

    `fail_on` names methods that should raise `fail_with` instead of running,
    to exercise the service's error mapping.
    """

    def __init__(self):
        self.rows = {}
        self._next_id = 1
        self.fail_on = set()
        self.fail_with: Optional[Exception] = None
        self.calls: List[str] = []

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_with

    async def find_all(self) -> List[Cliente]:
        self._enter("find_all")
        return [self.rows[k] for k in sorted(self.rows)]

    async def find_page(self, page, limit, sort_field, descending) -> Tuple[List[Cliente], int]:
        self._enter("find_page")
        attr = SORTABLE_FIELDS[sort_field].key
        ordered = sorted(self.rows.values(), key=lambda c: getattr(c, attr), reverse=descending)
        return ordered[page * limit:(page + 1) * limit], len(ordered)

    async def find_by_id(self, cliente_id: int) -> Optional[Cliente]:
        self._enter("find_by_id")
        return self.rows.get(cliente_id)

    async def save(self, cliente: Cliente) -> Cliente:
        self._enter("save")
        if cliente.id is None:
            cliente.id = self._next_id
            self._next_id += 1
        self.rows[cliente.id] = cliente
        return cliente

    async def delete(self, cliente: Cliente) -> None:
        self._enter("delete")
        self.rows.pop(cliente.id, None)


def make_cliente(**overrides) -> Cliente:
    data = {
        "nombre": "Juan",
        "apellido": "Pérez",
        "email": "juan.perez@gmail.com",
        "created_at": date(2021, 1, 22),
    }
    data.update(overrides)
    return Cliente(**data)


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """A fresh upload directory; FileService resolves settings.upload_dir per call."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(settings, "upload_dir", str(directory))
    return directory


@pytest.fixture
def memory_store():
    return InMemoryClienteStore()


@pytest.fixture
def cliente_factory():
    """Builds unsaved Cliente rows: cliente_factory(email="x@gmail.com")."""
    return make_cliente


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Isolated SQLite database per test, schema created from the ORM metadata."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory, upload_dir):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    The app's get_db_session dependency is replaced with one bound to the
    per-test SQLite database.
    """
    from app.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_payload():
    return {
        "nombre": "Juan",
        "apellido": "Pérez",
        "email": "juan.perez@gmail.com",
        "createdAt": "2021-01-22",
    }
