# ============================================================================
# HEALTH REGISTRY
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - Probe registration and health state
# PURPOSE: Register probes, run them concurrently, hold last-known state
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health Registry

Owns the set of dependency probes and the latest health state.

- check_all(): probe every dependency concurrently and store the result
  as the current AggregateHealth snapshot
- get_last(): return the snapshot without re-probing
- probe(name): re-probe one dependency; updates that dependency's
  last-known check but never patches the aggregate snapshot

Probes keep registration order; every listing (names, unhealthy
dependencies, report services) follows it.

Usage:
    registry = HealthRegistry(timeout_seconds=10.0)
    registry.register(PostgresProbe(settings.probes))

    health = await registry.check_all()
    if health.overall != OverallStatus.HEALTHY:
        ...
"""

import logging
import time
from typing import Dict, List, Optional

from core.contracts import DependencyKind, HealingStrategy
from health.core import AggregateHealth, DependencyCheck, DependencyProbe
from health.executor import ProbeExecutor


class HealthRegistry:
    """
    Registry of dependency probes plus their last-known state.

    Only the registry writes DependencyCheck state, always after a probe
    completes.
    """

    def __init__(
        self,
        executor: Optional[ProbeExecutor] = None,
        timeout_seconds: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize registry.

        Args:
            executor: Probe executor (built from timeout_seconds if None)
            timeout_seconds: Per-probe timeout override
            logger: Logger to use (module logger if None)
        """
        self._logger = logger or logging.getLogger(__name__)
        self.executor = executor or ProbeExecutor(
            default_timeout=timeout_seconds,
            logger=self._logger,
        )
        self._probes: Dict[str, DependencyProbe] = {}
        self._checks: Dict[str, DependencyCheck] = {}
        self._last: Optional[AggregateHealth] = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, probe: DependencyProbe) -> None:
        """Register a probe. Re-registering a name replaces the probe."""
        if probe.name in self._probes:
            self._logger.warning(f"Overwriting dependency probe: {probe.name}")

        self._probes[probe.name] = probe
        self._checks.setdefault(probe.name, DependencyCheck.unknown(probe.name))
        self._logger.debug(
            f"Registered dependency probe: {probe.name} (kind={probe.kind.value})"
        )

    def unregister(self, name: str) -> bool:
        """
        Remove a probe by name.

        Returns:
            True if the probe was removed
        """
        if name in self._probes:
            del self._probes[name]
            self._checks.pop(name, None)
            return True
        return False

    def get(self, name: str) -> Optional[DependencyProbe]:
        """Get probe by name."""
        return self._probes.get(name)

    def names(self) -> List[str]:
        """Dependency names in registration order."""
        return list(self._probes)

    def kind_of(self, name: str) -> DependencyKind:
        probe = self._probes.get(name)
        return probe.kind if probe else DependencyKind.OTHER

    def strategy_table(self) -> Dict[str, HealingStrategy]:
        """Static dependency -> healing strategy table derived from probe kinds."""
        return {
            name: HealingStrategy.for_kind(probe.kind)
            for name, probe in self._probes.items()
        }

    # ------------------------------------------------------------------
    # Probing
    # ------------------------------------------------------------------

    async def check_all(self) -> AggregateHealth:
        """
        Probe every registered dependency concurrently.

        Returns:
            Fresh AggregateHealth, also stored as the current snapshot
        """
        start_time = time.monotonic()
        probes = list(self._probes.values())

        results = await self.executor.run_all(probes)

        checks: Dict[str, DependencyCheck] = {}
        for check in results:
            checks[check.name] = check
            self._checks[check.name] = check

        duration_ms = (time.monotonic() - start_time) * 1000
        health = AggregateHealth.from_checks(checks, check_duration_ms=duration_ms)
        self._last = health

        self._logger.info(
            f"Health check completed in {duration_ms:.0f}ms: {health.overall.value} "
            f"({health.healthy_count}/{health.total_count} dependencies healthy)"
        )
        return health

    async def probe(self, name: str) -> DependencyCheck:
        """
        Re-probe a single dependency.

        Raises:
            KeyError: If no probe is registered under name
        """
        probe = self._probes.get(name)
        if probe is None:
            raise KeyError(f"Unknown dependency: {name}")

        check = await self.executor.run(probe)
        self._checks[name] = check
        return check

    def get_last(self) -> Optional[AggregateHealth]:
        """Latest AggregateHealth from check_all() (None before the first pass)."""
        return self._last

    def get_check(self, name: str) -> Optional[DependencyCheck]:
        """Last-known check for one dependency (includes single re-probes)."""
        return self._checks.get(name)

    def __len__(self) -> int:
        return len(self._probes)

    def __contains__(self, name: str) -> bool:
        return name in self._probes


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthRegistry",
]
