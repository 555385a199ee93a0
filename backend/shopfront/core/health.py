"""Health Aggregation — reduces the store connection phase to an ok/status pair.

Invariants:
    - compute_health is PURE: the phase is read by the caller, never cached here
    - OPTIMISTIC always reports ok=True / 200
    - STRICT reports ok=True / 200 only in CONNECTED, else ok=False / 503
"""

from shopfront.core.domain_types import ConnectionPhase, HealthMode, HealthState

HTTP_OK: int = 200
HTTP_SERVICE_UNAVAILABLE: int = 503


def compute_health(phase: ConnectionPhase, mode: HealthMode) -> HealthState:
    if mode is HealthMode.OPTIMISTIC:
        return HealthState(ok=True, status=HTTP_OK, phase=phase)
    connected = phase is ConnectionPhase.CONNECTED
    return HealthState(
        ok=connected,
        status=HTTP_OK if connected else HTTP_SERVICE_UNAVAILABLE,
        phase=phase,
    )
