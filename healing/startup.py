# ============================================================================
# STARTUP GATE
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core - Bounded wait for required dependencies at process start
# PURPOSE: Block (non-fatally) until required dependencies are healthy
# CREATED: 17 OCT 2026
# ============================================================================
"""
Startup Gate

await_ready(required, max_wait, poll_interval) -> bool

Loop until max_wait elapses:
1. registry.check_all()
2. Every required dependency healthy -> write startup report, True
3. Otherwise heal each unhealthy required dependency inline through the
   shared HealingPolicy, sleep poll_interval, repeat

On timeout a final check_all() is taken, the startup report reflects it,
and the gate returns False. Timeout is a normal outcome; the gate never
raises.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from core.config import StartupDefaults
from core.logging import log_checkpoint, log_context
from healing.policy import HealingPolicy
from health.core import AggregateHealth
from health.registry import HealthRegistry
from health.reports import ReportWriter


class StartupGate:
    """Bounded-time readiness wait with inline healing."""

    def __init__(
        self,
        registry: HealthRegistry,
        policy: HealingPolicy,
        config: Optional[StartupDefaults] = None,
        report_writer: Optional[ReportWriter] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize gate.

        Args:
            registry: Source of dependency health
            policy: Healing policy shared with the orchestrator
            config: Default required set, max wait, poll interval
            report_writer: Writes the startup report
            clock: Monotonic seconds (time.monotonic by default)
            sleep: Coroutine used between polls
            logger: Logger to use (module logger if None)
        """
        self.registry = registry
        self.policy = policy
        self.config = config or StartupDefaults()
        self.report_writer = report_writer
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep
        self._logger = logger or logging.getLogger(__name__)

        self.ready = False
        self.attempts = 0
        self.duration_seconds: Optional[float] = None
        self.last_health: Optional[AggregateHealth] = None

    async def await_ready(
        self,
        required: Optional[Iterable[str]] = None,
        max_wait: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        """
        Wait for required dependencies.

        Args:
            required: Dependency names that must be healthy
            max_wait: Seconds before giving up
            poll_interval: Seconds between checks

        Returns:
            True if all required dependencies became healthy in time
        """
        required = list(required if required is not None else self.config.required_dependencies)
        max_wait = self.config.max_wait_seconds if max_wait is None else max_wait
        poll_interval = (
            self.config.poll_interval_seconds if poll_interval is None else poll_interval
        )

        self.ready = False
        self.attempts = 0
        start = self._clock()

        with log_context(component="startup"):
            try:
                return await self._wait(required, max_wait, poll_interval, start)
            except Exception as e:
                self._logger.exception(f"Startup gate failed unexpectedly: {e}")
                self._finish(False, start, required)
                return False

    async def _wait(
        self,
        required: List[str],
        max_wait: float,
        poll_interval: float,
        start: float,
    ) -> bool:
        self._logger.info(
            f"Startup health gate: waiting up to {max_wait}s for "
            f"{len(required)} required dependencies (poll every {poll_interval}s)"
        )

        unknown = [name for name in required if name not in self.registry]
        if unknown:
            self._logger.warning(
                f"Required dependencies with no registered probe: {', '.join(unknown)}"
            )

        while self._clock() - start < max_wait:
            self.attempts += 1
            health = await self.registry.check_all()
            self.last_health = health

            not_ready = [name for name in required if not health.is_healthy(name)]
            if not not_ready:
                self._logger.info("All required dependencies are healthy - startup complete")
                self._finish(True, start, required)
                return True

            self._logger.info(
                f"Startup check #{self.attempts}: waiting on {', '.join(not_ready)}"
            )

            for name in not_ready:
                if name not in self.registry:
                    continue
                with log_context(dependency=name, operation="startup_heal"):
                    await self.policy.attempt_heal(name, self.registry.probe)

            remaining = max_wait - (self._clock() - start)
            if remaining <= 0:
                break
            await self._sleep(min(poll_interval, remaining))

        self._logger.warning("Startup timeout reached - some dependencies may be unhealthy")
        self.last_health = await self.registry.check_all()
        self._finish(False, start, required)
        return False

    def _finish(self, ready: bool, start: float, required: List[str]) -> None:
        self.ready = ready
        self.duration_seconds = self._clock() - start

        log_checkpoint(
            "startup_complete" if ready else "startup_timeout",
            {"attempts": self.attempts, "duration_seconds": round(self.duration_seconds, 3)},
        )

        if self.report_writer is not None:
            self.report_writer.write_startup_report(
                startup_complete=ready,
                startup_duration_ms=self.duration_seconds * 1000,
                attempts=self.attempts,
                final_health=self.last_health,
                required=required,
            )

    def get_startup_status(self) -> Dict[str, Any]:
        return {
            "complete": self.ready,
            "attempts": self.attempts,
            "duration_seconds": self.duration_seconds,
            "health": self.last_health.to_dict() if self.last_health else None,
        }


__all__ = [
    "StartupGate",
]
