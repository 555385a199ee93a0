"""Configuration — required variables, coercion and defaults.

Tests cover:
    - missing required variables fail at construction time
    - postgresql:// rewritten for asyncpg
    - HEALTH_MODE parsed from the environment
    - gateway upstream trailing slash dropped
"""

import pytest
from pydantic import ValidationError

from shopfront.config import GatewaySettings, ServiceSettings, asyncpg_url
from shopfront.core.domain_types import HealthMode


def test_service_settings_from_env(monkeypatch):
    monkeypatch.setenv("SERVICE_PORT", "9001")
    monkeypatch.setenv("DATABASE_URL", "postgresql://shop:pw@db:5432/shop")
    monkeypatch.setenv("HEALTH_MODE", "optimistic")
    settings = ServiceSettings()
    assert settings.service_port == 9001
    assert settings.database_url == "postgresql+asyncpg://shop:pw@db:5432/shop"
    assert settings.health_mode is HealthMode.OPTIMISTIC


def test_health_mode_defaults_to_strict(monkeypatch):
    monkeypatch.delenv("HEALTH_MODE", raising=False)
    assert ServiceSettings().health_mode is HealthMode.STRICT


def test_invalid_health_mode_rejected(monkeypatch):
    monkeypatch.setenv("HEALTH_MODE", "sometimes")
    with pytest.raises(ValidationError):
        ServiceSettings()


@pytest.mark.parametrize("missing", ["SERVICE_PORT", "DATABASE_URL"])
def test_service_requires(monkeypatch, missing):
    monkeypatch.delenv(missing, raising=False)
    with pytest.raises(ValidationError):
        ServiceSettings()


@pytest.mark.parametrize("missing", ["GATEWAY_PORT", "GATEWAY_UPSTREAM_URL"])
def test_gateway_requires(monkeypatch, missing):
    monkeypatch.delenv(missing, raising=False)
    with pytest.raises(ValidationError):
        GatewaySettings()


def test_gateway_settings_from_env(monkeypatch):
    monkeypatch.setenv("GATEWAY_PORT", "80")
    monkeypatch.setenv("GATEWAY_UPSTREAM_URL", "http://backend:3000/")
    settings = GatewaySettings()
    assert settings.gateway_port == 80
    assert settings.gateway_upstream_url == "http://backend:3000"
    assert settings.gateway_api_prefix == "/api"
    assert settings.gateway_timeout_seconds == 10.0


@pytest.mark.parametrize("url, expected", [
    ("postgresql://u:p@db/shop", "postgresql+asyncpg://u:p@db/shop"),
    ("postgresql+asyncpg://u:p@db/shop", "postgresql+asyncpg://u:p@db/shop"),
    ("sqlite+aiosqlite:///shop.db", "sqlite+aiosqlite:///shop.db"),
])
def test_asyncpg_url_rewrites_bare_scheme_only(url, expected):
    assert asyncpg_url(url) == expected
