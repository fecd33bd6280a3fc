# ============================================================================
# HEALTH MODULE
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - Dependency probe system
# PURPOSE: Probe external dependencies and aggregate their health
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health Module

Probe system for external dependencies:
- DependencyProbe: Base class for one dependency check
- ProbeExecutor: Concurrent execution with per-probe timeouts
- HealthRegistry: Probe registration, check_all(), last snapshot
- ReportWriter: JSON health/startup reports
- create_health_router: FastAPI endpoints

Usage:
    from health import HealthRegistry, DependencyProbe, DependencyCheck

    class CacheProbe(DependencyProbe):
        name = "cache"

        async def probe(self) -> DependencyCheck:
            return DependencyCheck.healthy(self.name)

    registry = HealthRegistry()
    registry.register(CacheProbe())
    health = await registry.check_all()
"""

from health.core import (
    DependencyCheck,
    AggregateHealth,
    DependencyProbe,
)
from health.executor import ProbeExecutor
from health.registry import HealthRegistry
from health.reports import ReportWriter

__all__ = [
    # Core types
    "DependencyCheck",
    "AggregateHealth",
    "DependencyProbe",
    # Execution
    "ProbeExecutor",
    "HealthRegistry",
    # Reports
    "ReportWriter",
]
