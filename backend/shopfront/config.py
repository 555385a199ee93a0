"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Ports, the database URL and the gateway upstream have no defaults: a missing
      value raises pydantic.ValidationError at startup, never at request time
    - Each tier reads only its own settings class
    - get_*_settings() are cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - HEALTH_MODE resolved here once; request handlers never branch on the environment
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopfront.core.domain_types import HealthMode


def asyncpg_url(url: str) -> str:
    """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class CommonSettings(BaseSettings):
    """Settings shared by both tiers."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    host: str = "0.0.0.0"

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


class ServiceSettings(CommonSettings):
    """Product service settings."""

    service_port: int

    # Database
    database_url: str

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        return asyncpg_url(v) if isinstance(v, str) else v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Health
    health_mode: HealthMode = HealthMode.STRICT


class GatewaySettings(CommonSettings):
    """Edge gateway settings."""

    gateway_port: int
    gateway_upstream_url: str
    gateway_api_prefix: str = "/api"
    gateway_timeout_seconds: float = 10.0

    @field_validator("gateway_upstream_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_service_settings() -> ServiceSettings:
    return ServiceSettings()


@lru_cache
def get_gateway_settings() -> GatewaySettings:
    return GatewaySettings()
