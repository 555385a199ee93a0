"""Root conftest — shared environment and fixtures for both tiers.

Invariants:
    - Required settings have test defaults so imports never hit a real database
    - Every test gets a fresh in-memory SQLite store, already CONNECTED
    - service_app has the test manager installed on app.state (lifespan not run)
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("SERVICE_PORT", "8000")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GATEWAY_PORT", "8080")
os.environ.setdefault("GATEWAY_UPSTREAM_URL", "http://product-service:8000")

from shopfront.config import ServiceSettings  # noqa: E402
from shopfront.core.domain_types import HealthMode  # noqa: E402
from shopfront.db.base import Base  # noqa: E402
from shopfront.infrastructure.database import DatabaseSessionManager  # noqa: E402
from shopfront.main import create_app  # noqa: E402
import shopfront.models  # noqa: E402,F401

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager(TEST_DATABASE_URL)
    await manager.connect()
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.disconnect()


def make_service_settings(**overrides) -> ServiceSettings:
    values = {
        "service_port": 8000,
        "database_url": TEST_DATABASE_URL,
        "health_mode": HealthMode.STRICT,
    }
    values.update(overrides)
    return ServiceSettings(**values)


@pytest.fixture
def service_settings():
    return make_service_settings()


@pytest.fixture
def service_app(service_settings, db_manager):
    app = create_app(service_settings)
    app.state.db_manager = db_manager
    return app


@pytest.fixture
async def client(service_app):
    """Product service test client backed by the in-memory store."""
    async with AsyncClient(
        transport=ASGITransport(app=service_app), base_url="http://test",
    ) as c:
        yield c
