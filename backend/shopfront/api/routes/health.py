"""Health Probe — service liveness with the store's connection phase.

Invariants:
    - The phase is read from the session manager on every request, never cached
    - STRICT mode answers 503 with ok=false unless the store is CONNECTED
    - OPTIMISTIC mode always answers 200 with ok=true
    - The probe never opens a store session
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from shopfront.core.domain_types import ConnectionPhase, HealthMode
from shopfront.core.health import compute_health
from shopfront.schemas.health import ServiceHealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get(
    "", response_model=ServiceHealthResponse,
    responses={503: {"model": ServiceHealthResponse, "description": "Store not connected"}},
)
async def health_check(request: Request):
    """Liveness plus store connection phase."""
    manager = getattr(request.app.state, "db_manager", None)
    phase = manager.phase if manager is not None else ConnectionPhase.DISCONNECTED
    mode: HealthMode = request.app.state.health_mode

    health = compute_health(phase, mode)
    if not health.ok:
        logger.warning(
            f"Health degraded: database {phase.value}",
            extra={"phase": phase.value, "path": request.url.path},
        )
    body = ServiceHealthResponse(
        ok=health.ok,
        database=health.phase,
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=health.status, content=body.model_dump(mode="json"),
    )
