# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Foundation - Core enums shared by health and healing
# PURPOSE: Status, reason, and strategy enums for dependency recovery
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: DependencyStatus, OverallStatus, DependencyKind, HealingStrategy,
#          HealReason, OrchestratorState
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the dependency healing system.

These enums cross every boundary:
- Probe adapters (DependencyCheck.status)
- HealthRegistry aggregation (OverallStatus)
- HealingPolicy decisions (HealingStrategy, HealReason)
- JSON reports and the HTTP surface (string values)
"""

from enum import Enum


# ============================================================================
# HEALTH ENUMS
# ============================================================================

class DependencyStatus(str, Enum):
    """Status of a single dependency after a probe."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"          # Never probed


class OverallStatus(str, Enum):
    """
    Aggregate status across all dependencies.

    Rule:
        healthy   - every dependency healthy
        degraded  - strictly more than half healthy
        unhealthy - otherwise (exactly half counts as unhealthy)
    """
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    @classmethod
    def aggregate(cls, healthy_count: int, total_count: int) -> "OverallStatus":
        """Classify a healthy/total pair."""
        if healthy_count == total_count:
            return cls.HEALTHY
        if healthy_count > total_count / 2:
            return cls.DEGRADED
        return cls.UNHEALTHY


class DependencyKind(str, Enum):
    """Kind of external dependency (drives healing strategy choice)."""
    API = "api"
    DATABASE = "database"
    NETWORK = "network"
    OTHER = "other"


# ============================================================================
# HEALING ENUMS
# ============================================================================

class HealingStrategy(str, Enum):
    """
    Closed set of healing strategies.

    RECONNECT           - short delay, then re-probe (APIs)
    DATABASE_RECONNECT  - longer delay, then re-probe (databases)
    NETWORK_REFRESH     - brief delay, then re-probe (egress/network)
    GENERIC_RETRY       - delay only, always needs manual intervention
    """
    RECONNECT = "api_reconnect"
    DATABASE_RECONNECT = "database_reconnect"
    NETWORK_REFRESH = "network_refresh"
    GENERIC_RETRY = "generic_restart"

    @classmethod
    def for_kind(cls, kind: DependencyKind) -> "HealingStrategy":
        """Default strategy for a dependency kind."""
        return {
            DependencyKind.API: cls.RECONNECT,
            DependencyKind.DATABASE: cls.DATABASE_RECONNECT,
            DependencyKind.NETWORK: cls.NETWORK_REFRESH,
        }.get(kind, cls.GENERIC_RETRY)


class HealReason(str, Enum):
    """Outcome reason of a heal attempt."""
    COOLDOWN = "cooldown"                    # Refused: inside cooldown window
    MAX_ATTEMPTS = "max_attempts"            # Refused: attempt budget spent
    RECONNECTED = "reconnected"              # Re-probe healthy
    NETWORK_REFRESHED = "network_refreshed"  # Re-probe healthy after refresh
    STILL_FAILING = "still_failing"          # Re-probe still unhealthy
    GENERIC_RETRY = "generic_retry"          # No automated fix available
    ERROR = "error"                          # Strategy raised
    UNKNOWN_STRATEGY = "unknown_strategy"    # No executor for strategy


class OrchestratorState(str, Enum):
    """
    Healing orchestrator states.

    State transitions:
        IDLE -> HEALING (timer tick) -> IDLE
        A tick that fires while HEALING is dropped.
    """
    IDLE = "idle"
    HEALING = "healing"


__all__ = [
    "DependencyStatus",
    "OverallStatus",
    "DependencyKind",
    "HealingStrategy",
    "HealReason",
    "OrchestratorState",
]
