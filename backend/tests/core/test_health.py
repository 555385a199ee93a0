"""Health Aggregation — tests for the phase → ok/status reduction in both modes."""

import pytest

from shopfront.core.domain_types import ConnectionPhase, HealthMode
from shopfront.core.health import compute_health


def test_strict_connected_is_ok():
    health = compute_health(ConnectionPhase.CONNECTED, HealthMode.STRICT)
    assert health.ok is True
    assert health.status == 200


@pytest.mark.parametrize("phase", [
    ConnectionPhase.DISCONNECTED,
    ConnectionPhase.CONNECTING,
    ConnectionPhase.DISCONNECTING,
])
def test_strict_not_connected_is_unavailable(phase):
    health = compute_health(phase, HealthMode.STRICT)
    assert health.ok is False
    assert health.status == 503
    assert health.phase is phase


@pytest.mark.parametrize("phase", list(ConnectionPhase))
def test_optimistic_always_ok(phase):
    health = compute_health(phase, HealthMode.OPTIMISTIC)
    assert health.ok is True
    assert health.status == 200
    assert health.phase is phase
