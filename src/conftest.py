import contextlib

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.config.database import create_engine
from src.main import app
from src.models.base import Base
from src.rsvps.dependencies import get_audit_log, get_current_event
from src.rsvps.repository.orm_models import Rsvp  # noqa: F401
from src.rsvps.tests.inmemory_models import TEST_EVENT, InMemoryAuditLog


@pytest.fixture
def audit_log():
    """Fresh in-memory audit log for each test."""
    return InMemoryAuditLog()


@pytest.fixture
def client_factory(audit_log):
    """Build a test client with FastAPI dependency overrides applied."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides[get_audit_log] = lambda: audit_log
        app.dependency_overrides[get_current_event] = lambda: TEST_EVENT
        app.dependency_overrides.update(overrides or {})

        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest_asyncio.fixture
async def client(client_factory):
    """Create a test client without storage overrides."""
    async with client_factory() as ac:
        yield ac


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """File backed SQLite database with the RSVP schema, one per test."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'rsvp.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()
