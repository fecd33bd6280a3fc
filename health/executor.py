# ============================================================================
# PROBE EXECUTOR
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - Concurrent probe execution
# PURPOSE: Execute probes with timeouts and per-probe error isolation
# CREATED: 17 OCT 2026
# ============================================================================
"""
Probe Executor

Executes dependency probes with:
- Concurrent fan-out / fan-in (asyncio.gather)
- Per-probe timeouts
- Per-probe error isolation (a raising probe becomes an unhealthy check)
- Latency measurement

The executor never raises for probe failures. Results are returned in
the same order as the probes were given.
"""

import asyncio
import logging
import time
from typing import List, Optional

from health.core import DependencyCheck, DependencyProbe


class ProbeExecutor:
    """Runs probes concurrently with timeouts."""

    def __init__(
        self,
        default_timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize executor.

        Args:
            default_timeout: Overrides each probe's timeout_seconds when set
            logger: Logger to use (module logger if None)
        """
        self.default_timeout = default_timeout
        self._logger = logger or logging.getLogger(__name__)

    def _timeout_for(self, probe: DependencyProbe) -> float:
        if self.default_timeout is not None:
            return self.default_timeout
        return probe.timeout_seconds

    async def run(self, probe: DependencyProbe) -> DependencyCheck:
        """Execute a single probe with timeout. Never raises."""
        timeout = self._timeout_for(probe)
        start_time = time.monotonic()

        try:
            result = await asyncio.wait_for(probe.probe(), timeout=timeout)
            if result.name != probe.name:
                result.name = probe.name

        except asyncio.TimeoutError:
            self._logger.warning(f"Probe {probe.name} timed out after {timeout}s")
            result = DependencyCheck.unhealthy(
                probe.name,
                error_message=f"Timeout after {timeout}s",
                detail="Probe timed out",
            )

        except Exception as e:
            self._logger.error(f"Probe {probe.name} failed: {e}")
            result = DependencyCheck.from_exception(probe.name, e)

        result.latency_ms = (time.monotonic() - start_time) * 1000

        self._logger.debug(
            f"Probe {probe.name}: {result.status.value} ({result.latency_ms:.1f}ms)"
        )
        return result

    async def run_all(self, probes: List[DependencyProbe]) -> List[DependencyCheck]:
        """Execute probes concurrently; one slow or failing probe never blocks the rest."""
        if not probes:
            return []
        return list(await asyncio.gather(*(self.run(p) for p in probes)))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ProbeExecutor",
]
