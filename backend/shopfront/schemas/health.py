"""Health Schemas — payloads of the liveness endpoints of both tiers."""

from datetime import datetime

from pydantic import BaseModel

from shopfront.core.domain_types import ConnectionPhase


class ServiceHealthResponse(BaseModel):
    ok: bool
    database: ConnectionPhase
    timestamp: datetime


class GatewayHealthResponse(BaseModel):
    ok: bool = True
