"""Domain Types — value types that replace bare primitives across the codebase.

Invariants:
    - NewProduct only exists as the output of an accepted validation
    - ConnectionPhase has exactly four states; only DatabaseSessionManager moves between them
    - All valid states encoded as Enums — no raw string matching
"""

from dataclasses import dataclass
from enum import Enum


# ─── Limits ──────────────────────────────────────────────────────

NAME_MIN_LENGTH: int = 3
NAME_MAX_LENGTH: int = 100
PRICE_MAX: float = 999999.99
PAGE_LIMIT_MIN: int = 1
PAGE_LIMIT_MAX: int = 100
DEFAULT_PAGE_LIMIT: int = 100
DEFAULT_PAGE_SKIP: int = 0
MAX_PAYLOAD_BYTES: int = 1_048_576


# ─── Enums ───────────────────────────────────────────────────────

class ConnectionPhase(str, Enum):
    """Store connection lifecycle, as observed by the session manager."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


class HealthMode(str, Enum):
    """How the service reports store health — resolved once at startup."""
    OPTIMISTIC = "optimistic"
    STRICT = "strict"


# ─── Values ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class NewProduct:
    """Sanitized, bounded product payload ready for persistence."""
    name: str
    price: float


@dataclass(frozen=True)
class PaginationParams:
    limit: int = DEFAULT_PAGE_LIMIT
    skip: int = DEFAULT_PAGE_SKIP


@dataclass(frozen=True)
class HealthState:
    """Reduced health signal — recomputed on every query."""
    ok: bool
    status: int
    phase: ConnectionPhase
