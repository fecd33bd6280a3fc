# ============================================================================
# HEALTH CORE TYPES
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - Base classes for dependency probes
# PURPOSE: Probe interface and check/aggregate result types
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health Core Types

Defines the probe interface and result types for dependency health.

Aggregation (see OverallStatus.aggregate):
- healthy: every dependency healthy
- degraded: strictly more than half healthy
- unhealthy: otherwise

Kinds (drive the default healing strategy):
- api: reconnect after a short delay
- database: reconnect after a longer delay
- network: refresh then re-probe
- other: generic retry, needs manual intervention
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone

from core.contracts import DependencyKind, DependencyStatus, OverallStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DependencyCheck:
    """Result of probing one dependency."""
    name: str
    status: DependencyStatus = DependencyStatus.UNKNOWN
    last_checked_at: datetime = field(default_factory=_utcnow)
    latency_ms: Optional[float] = None
    detail: str = ""
    error_message: Optional[str] = None

    @property
    def is_healthy(self) -> bool:
        return self.status == DependencyStatus.HEALTHY

    @classmethod
    def healthy(cls, name: str, detail: str = "") -> "DependencyCheck":
        """Create healthy check."""
        return cls(name=name, status=DependencyStatus.HEALTHY, detail=detail)

    @classmethod
    def unhealthy(
        cls,
        name: str,
        error_message: str,
        detail: str = "",
    ) -> "DependencyCheck":
        """Create unhealthy check."""
        return cls(
            name=name,
            status=DependencyStatus.UNHEALTHY,
            detail=detail,
            error_message=error_message,
        )

    @classmethod
    def unknown(cls, name: str) -> "DependencyCheck":
        """Placeholder for a dependency that was never probed."""
        return cls(name=name, detail="Not yet checked")

    @classmethod
    def from_exception(cls, name: str, e: Exception) -> "DependencyCheck":
        """Create unhealthy check from exception."""
        return cls.unhealthy(
            name,
            error_message=str(e) or type(e).__name__,
            detail=f"Probe raised {type(e).__name__}",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to report schema: {status, lastCheck, detail, error}."""
        result = {
            "status": self.status.value,
            "lastCheck": self.last_checked_at.isoformat(),
            "detail": self.detail,
            "error": self.error_message,
        }
        if self.latency_ms is not None:
            result["latencyMs"] = round(self.latency_ms, 2)
        return result


@dataclass
class AggregateHealth:
    """Aggregated result from one full probe pass (recomputed, never patched)."""
    overall: OverallStatus
    checks: Dict[str, DependencyCheck]
    healthy_count: int
    total_count: int
    check_duration_ms: float = 0.0
    checked_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_checks(
        cls,
        checks: Dict[str, DependencyCheck],
        check_duration_ms: float = 0.0,
    ) -> "AggregateHealth":
        """Aggregate a complete set of checks."""
        healthy_count = sum(1 for c in checks.values() if c.is_healthy)
        total_count = len(checks)
        return cls(
            overall=OverallStatus.aggregate(healthy_count, total_count),
            checks=dict(checks),
            healthy_count=healthy_count,
            total_count=total_count,
            check_duration_ms=check_duration_ms,
        )

    @property
    def unhealthy(self) -> List[str]:
        """Names with status unhealthy, in check order."""
        return [
            name for name, check in self.checks.items()
            if check.status == DependencyStatus.UNHEALTHY
        ]

    def is_healthy(self, name: str) -> bool:
        check = self.checks.get(name)
        return check is not None and check.is_healthy

    def to_dict(self) -> Dict[str, Any]:
        """Convert to health report schema."""
        return {
            "overall": self.overall.value,
            "services": {
                name: check.to_dict()
                for name, check in self.checks.items()
            },
            "checkDuration": round(self.check_duration_ms, 2),
            "healthyServices": self.healthy_count,
            "totalServices": self.total_count,
            "checkedAt": self.checked_at.isoformat(),
        }


class DependencyProbe(ABC):
    """
    Base class for dependency probes.

    Subclass and implement probe() to check one external dependency.
    A probe is a single request/response call: no retries inside it.
    Failures should be returned as DependencyCheck.unhealthy(...); the
    executor also converts timeouts and stray exceptions.

    Attributes:
        name: Stable dependency name (e.g. "primary-database")
        kind: Dependency kind (selects the default healing strategy)
        timeout_seconds: Max execution time before timeout

    Example:
        class CacheProbe(DependencyProbe):
            name = "cache"
            kind = DependencyKind.NETWORK

            async def probe(self) -> DependencyCheck:
                await cache.ping()
                return DependencyCheck.healthy(self.name, "PONG")
    """

    name: str = "unnamed"
    kind: DependencyKind = DependencyKind.OTHER
    timeout_seconds: float = 10.0

    @abstractmethod
    async def probe(self) -> DependencyCheck:
        """
        Execute one health check.

        Returns:
            DependencyCheck with status, detail and optional error
        """
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} kind={self.kind.value}>"
