# ============================================================================
# HEALING ORCHESTRATOR
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core - Periodic health-driven recovery loop
# PURPOSE: Drive check -> filter -> heal -> record -> escalate cycles
# CREATED: 17 OCT 2026
# ============================================================================
"""
Healing Orchestrator

Two states, IDLE and HEALING. A background timer fires every
`interval_seconds`; each tick launches one cycle as its own task:

1. registry.check_all()
2. Keep dependencies whose status is unhealthy (registration order)
3. None unhealthy -> back to IDLE, no history record
4. policy.attempt_heal() for each unhealthy dependency
5. Append a HealingRecord with success/failure counts
6. Critical dependencies whose heal failed this cycle -> call the
   escalation hook if auto_restart is enabled, append a
   CriticalEscalationRecord noting whether the hook completed, and
   clear their HealingState either way
7. Back to IDLE

A tick that finds the orchestrator HEALING is dropped, not queued. The
check-and-set of the state has no await in between, so it is atomic on
the event loop.

Stopping cancels the timer but lets an in-flight cycle finish.

Escalation resets the critical dependency's attempt counter, so the
next cycle starts again from attempt 1. A permanently broken critical
dependency therefore escalates every cycle instead of locking out at
max_attempts.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from core.config import HealingDefaults
from core.contracts import OrchestratorState
from core.logging import log_checkpoint, log_context
from core.models import CriticalEscalationRecord, HealingRecord, HealResult
from healing.history import HealingHistory
from healing.policy import HealingPolicy
from health.registry import HealthRegistry
from health.reports import ReportWriter

# Escalation collaborator: receives the failed critical dependency names
EscalationHook = Callable[[List[str]], Awaitable[None]]


class HealingOrchestrator:
    """
    Periodic healing loop over a HealthRegistry.

    Owns the healing history; HealingState stays with the policy.
    """

    def __init__(
        self,
        registry: HealthRegistry,
        policy: HealingPolicy,
        config: Optional[HealingDefaults] = None,
        escalation_hook: Optional[EscalationHook] = None,
        report_writer: Optional[ReportWriter] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            registry: Source of dependency health
            policy: Healing policy (shared with the startup gate)
            config: Interval, critical set, auto-restart, history capacity
            escalation_hook: Called with failed critical dependencies when
                auto_restart is enabled (e.g. a process restart)
            report_writer: Writes the health report after each check
            logger: Logger to use (module logger if None)
        """
        self.registry = registry
        self.policy = policy
        self.config = config or policy.config
        self.escalation_hook = escalation_hook
        self.report_writer = report_writer
        self._logger = logger or logging.getLogger(__name__)

        self.history = HealingHistory(self.config.history_capacity)

        # State
        self._state = OrchestratorState.IDLE
        self._running = False
        self._stop_event = asyncio.Event()

        # Background tasks
        self._timer_task: Optional[asyncio.Task] = None
        self._cycle_task: Optional[asyncio.Task] = None

        # Metrics
        self._started_at: Optional[datetime] = None
        self._cycle_seq = 0
        self._cycles = 0
        self._cycles_skipped = 0
        self._escalations = 0
        self._errors = 0
        self._last_cycle_at: Optional[datetime] = None

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def is_healing(self) -> bool:
        return self._state == OrchestratorState.HEALING

    @property
    def running(self) -> bool:
        return self._running

    # ========================================================================
    # LIFECYCLE
    # ========================================================================

    async def start(self) -> None:
        """Start the periodic timer."""
        if self._running:
            self._logger.warning("Healing orchestrator already running")
            return

        self._running = True
        self._started_at = datetime.now(timezone.utc)
        self._stop_event.clear()

        self._timer_task = asyncio.create_task(
            self._timer_loop(),
            name="healing-timer",
        )
        self._logger.info(
            f"Healing orchestrator started (every {self.config.interval_seconds}s, "
            f"max_attempts={self.policy.config.max_attempts}, "
            f"cooldown={self.policy.config.cooldown_seconds}s)"
        )

    async def stop(self) -> None:
        """
        Stop the orchestrator gracefully.

        Cancels the timer; an in-flight cycle runs to completion.
        """
        self._logger.info("Stopping healing orchestrator")

        self._running = False
        self._stop_event.set()

        if self._timer_task:
            self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass
            self._timer_task = None

        if self._cycle_task and not self._cycle_task.done():
            self._logger.info("Waiting for in-flight healing cycle to finish")
            await asyncio.shield(self._cycle_task)

        self._logger.info("Healing orchestrator stopped")

    async def _timer_loop(self) -> None:
        """Fire tick() every interval until stopped."""
        while self._running and not self._stop_event.is_set():
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(),
                    timeout=self.config.interval_seconds,
                )
            except asyncio.TimeoutError:
                self.tick()

    def tick(self) -> Optional[asyncio.Task]:
        """
        Timer callback: launch a cycle unless one is already running.

        The HEALING state is claimed here, before the task is created, so
        a second tick in the same loop iteration is dropped.

        Returns:
            The cycle task, or None if the tick was dropped
        """
        cycle_id = self._claim()
        if cycle_id is None:
            return None

        self._cycle_task = asyncio.create_task(
            self._run_claimed(cycle_id),
            name=f"healing-{cycle_id}",
        )
        return self._cycle_task

    def _claim(self) -> Optional[str]:
        """IDLE -> HEALING. Returns the new cycle id, or None if already HEALING."""
        if self._state == OrchestratorState.HEALING:
            self._cycles_skipped += 1
            self._logger.debug("Healing cycle already in progress - skipped")
            return None

        self._state = OrchestratorState.HEALING
        self._cycle_seq += 1
        return f"cycle-{self._cycle_seq}"

    # ========================================================================
    # CYCLE
    # ========================================================================

    async def run_cycle(self) -> Optional[HealingRecord]:
        """
        Run one healing cycle.

        Returns:
            The HealingRecord appended, or None when skipped (already
            HEALING), when everything was healthy, or when the cycle
            aborted on an unexpected error
        """
        cycle_id = self._claim()
        if cycle_id is None:
            return None
        return await self._run_claimed(cycle_id)

    async def _run_claimed(self, cycle_id: str) -> Optional[HealingRecord]:
        """Run a cycle whose HEALING state has already been claimed."""
        try:
            with log_context(cycle_id=cycle_id, component="orchestrator"):
                return await self._cycle()

        except Exception as e:
            self._errors += 1
            self._logger.exception(f"Error during healing cycle: {e}")
            return None

        finally:
            self._cycles += 1
            self._last_cycle_at = datetime.now(timezone.utc)
            self._state = OrchestratorState.IDLE

    async def _cycle(self) -> Optional[HealingRecord]:
        health = await self.registry.check_all()

        if self.report_writer is not None:
            self.report_writer.write_health_report(health)

        unhealthy = health.unhealthy
        if not unhealthy:
            self._logger.debug("All dependencies healthy - no healing needed")
            return None

        self._logger.info(
            f"Found {len(unhealthy)} unhealthy dependencies: {', '.join(unhealthy)}"
        )

        results: Dict[str, HealResult] = {}
        for name in unhealthy:
            with log_context(dependency=name, operation="heal"):
                results[name] = await self.policy.attempt_heal(name, self.registry.probe)

        record = HealingRecord.from_results(unhealthy, results)
        self.history.append(record)

        self._logger.info(
            f"Healing cycle complete: {record.success_count} successful, "
            f"{record.failure_count} failed"
        )
        log_checkpoint(
            "healing_cycle_completed",
            {
                "unhealthy": unhealthy,
                "successful": record.success_count,
                "failed": record.failure_count,
            },
        )

        await self._handle_critical_failures(results)
        return record

    async def _handle_critical_failures(
        self,
        results: Dict[str, HealResult],
    ) -> Optional[CriticalEscalationRecord]:
        """Escalate critical dependencies whose heal failed this cycle."""
        critical = set(self.config.critical_dependencies)
        failed = [
            name for name, result in results.items()
            if name in critical and not result.success
        ]
        if not failed:
            return None

        self._logger.error(f"Critical dependency healing failed: {', '.join(failed)}")
        self._escalations += 1

        restarted = False
        if self.config.auto_restart:
            restarted = await self._trigger_escalation(failed)

        record = CriticalEscalationRecord(
            failed_dependencies=failed,
            restart_triggered=restarted,
        )
        self.history.append(record)
        log_checkpoint("critical_escalation", {"failed": failed, "restart_triggered": restarted})

        # Escalation ends this attempt window; counting restarts next cycle
        for name in failed:
            self.policy.reset(name)

        return record

    async def _trigger_escalation(self, failed: List[str]) -> bool:
        """Await the escalation hook. Returns True if it completed."""
        self._logger.error("Triggering emergency restart procedures")

        if self.escalation_hook is None:
            self._logger.error("No escalation hook configured - restart not performed")
            return False

        try:
            await self.escalation_hook(failed)
        except Exception as e:
            self._errors += 1
            self._logger.exception(f"Escalation hook failed: {e}")
            return False
        return True

    # ========================================================================
    # CALLER SURFACE
    # ========================================================================

    async def attempt_heal(self, name: str) -> Optional[HealResult]:
        """
        Manually attempt to heal one dependency.

        Runs under the same IDLE/HEALING exclusion as a cycle.

        Returns:
            HealResult, or None if a cycle is in progress

        Raises:
            KeyError: If the dependency is not registered
        """
        if name not in self.registry:
            raise KeyError(f"Unknown dependency: {name}")

        if self._state == OrchestratorState.HEALING:
            return None

        self._state = OrchestratorState.HEALING
        try:
            with log_context(dependency=name, operation="manual_heal"):
                return await self.policy.attempt_heal(name, self.registry.probe)
        finally:
            self._state = OrchestratorState.IDLE

    def get_healing_stats(self) -> Dict[str, Any]:
        """Healing statistics (safe to call at any time)."""
        recent_size = self.config.recent_history_size
        recent = self.history.recent(recent_size)

        return {
            "running": self._running,
            "state": self._state.value,
            "currently_healing": self.is_healing,
            "started_at": self._started_at.isoformat() if self._started_at else None,
            "total_attempts": len(self.history),
            "recent_attempts": len(recent),
            "recent_history": self.history.to_list(recent_size),
            "services_in_cooldown": self.policy.in_cooldown(),
            "services_at_max_attempts": self.policy.at_max_attempts(),
            "healing_interval": self.config.interval_seconds,
            "max_attempts": self.policy.config.max_attempts,
            "cycles": self._cycles,
            "cycles_skipped": self._cycles_skipped,
            "escalations": self._escalations,
            "errors": self._errors,
            "last_cycle_at": self._last_cycle_at.isoformat() if self._last_cycle_at else None,
        }


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealingOrchestrator",
    "EscalationHook",
]
