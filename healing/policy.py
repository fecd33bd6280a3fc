# ============================================================================
# HEALING POLICY
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core - Per-dependency healing decisions
# PURPOSE: Cooldown and attempt-budget gate plus strategy execution
# CREATED: 17 OCT 2026
# ============================================================================
"""
Healing Policy

Decides whether and how to heal one unhealthy dependency.

attempt_heal(name, probe_fn):
1. Inside the cooldown window since the last attempt -> COOLDOWN
   (nothing attempted, no state change)
2. attempt_count >= max_attempts -> MAX_ATTEMPTS (nothing attempted)
3. Resolve the dependency's strategy from the static table
4. Execute it: strategy delay, then re-probe (generic retry never
   re-probes and always reports failure)
5. Success clears the dependency's HealingState entirely; any other
   outcome increments attempt_count and stamps last_attempt_at

A dependency at MAX_ATTEMPTS stays locked out until reset() is called
(manual override) or the process restarts.

The policy is the only writer of HealingState.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Optional, Tuple, Union

from core.config import HealingDefaults
from core.contracts import HealingStrategy, HealReason
from core.models import HealResult, HealingState
from health.core import DependencyCheck

# Re-probe callable: takes the dependency name, returns a check or a bool
ProbeFn = Callable[[str], Awaitable[Union[DependencyCheck, bool]]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _outcome(result: Union[DependencyCheck, bool]) -> Tuple[bool, Optional[str]]:
    """Normalize a probe outcome to (healthy, error)."""
    if isinstance(result, DependencyCheck):
        return result.is_healthy, result.error_message
    return bool(result), None


class HealingPolicy:
    """
    Cooldown-gated, bounded healing per dependency.

    HealingState is created lazily on the first failed attempt and
    dropped on success, so "never failed" and "just healed" look the same.
    """

    _MESSAGES = {
        HealingStrategy.RECONNECT: (
            "API service reconnected successfully",
            "API service still failing",
        ),
        HealingStrategy.DATABASE_RECONNECT: (
            "Database reconnected successfully",
            "Database still failing",
        ),
        HealingStrategy.NETWORK_REFRESH: (
            "Network connectivity restored",
            "Network still failing",
        ),
    }

    def __init__(
        self,
        config: Optional[HealingDefaults] = None,
        strategies: Optional[Dict[str, HealingStrategy]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize policy.

        Args:
            config: Cooldown, max attempts and strategy delays
            strategies: Static dependency name -> strategy table
            clock: Returns the current time (timezone-aware)
            sleep: Coroutine used for strategy delays
            logger: Logger to use (module logger if None)
        """
        self.config = config or HealingDefaults()
        self._strategies: Dict[str, HealingStrategy] = dict(strategies or {})
        self._clock = clock or _utcnow
        self._sleep = sleep or asyncio.sleep
        self._logger = logger or logging.getLogger(__name__)
        self._states: Dict[str, HealingState] = {}

    # ------------------------------------------------------------------
    # Strategy table
    # ------------------------------------------------------------------

    def resolve_strategy(self, name: str) -> HealingStrategy:
        """Strategy for a dependency (GENERIC_RETRY if not in the table)."""
        return self._strategies.get(name, HealingStrategy.GENERIC_RETRY)

    def set_strategy(self, name: str, strategy: HealingStrategy) -> None:
        self._strategies[name] = strategy

    # ------------------------------------------------------------------
    # Healing
    # ------------------------------------------------------------------

    async def attempt_heal(self, name: str, probe_fn: ProbeFn) -> HealResult:
        """
        Attempt to heal one dependency.

        Never raises: strategy errors become HealResult(reason=ERROR).
        """
        now = self._clock()
        state = self._states.get(name)

        if state is not None and state.last_attempt_at is not None:
            elapsed = (now - state.last_attempt_at).total_seconds()
            if elapsed < self.config.cooldown_seconds:
                self._logger.debug(
                    f"Heal {name} refused: cooldown ({elapsed:.0f}s of "
                    f"{self.config.cooldown_seconds:.0f}s)"
                )
                return HealResult.cooldown()

        attempts = state.attempt_count if state else 0
        if attempts >= self.config.max_attempts:
            self._logger.warning(
                f"Heal {name} refused: max attempts ({self.config.max_attempts}) reached"
            )
            return HealResult.max_attempts()

        strategy = self.resolve_strategy(name)
        attempt = attempts + 1
        self._logger.info(
            f"Attempting to heal {name} with {strategy.value} "
            f"(attempt {attempt}/{self.config.max_attempts})"
        )

        try:
            result = await self._execute(name, strategy, probe_fn, attempt)
        except Exception as e:
            self._logger.error(f"Error healing {name}: {e}")
            result = HealResult.from_exception(e, strategy=strategy, attempt=attempt)

        if result.success:
            self._states.pop(name, None)
            self._logger.info(f"Successfully healed {name}")
        else:
            self._states[name] = HealingState(attempt_count=attempt, last_attempt_at=now)
            self._logger.warning(f"Failed to heal {name}: {result.message}")

        return result

    async def _execute(
        self,
        name: str,
        strategy: HealingStrategy,
        probe_fn: ProbeFn,
        attempt: int,
    ) -> HealResult:
        """Run one strategy. Unhandled strategies report UNKNOWN_STRATEGY."""
        delay = self.config.get_delay(strategy)

        if strategy in (
            HealingStrategy.RECONNECT,
            HealingStrategy.DATABASE_RECONNECT,
            HealingStrategy.NETWORK_REFRESH,
        ):
            await self._sleep(delay)
            healthy, error = _outcome(await probe_fn(name))

            if healthy:
                reason = (
                    HealReason.NETWORK_REFRESHED
                    if strategy == HealingStrategy.NETWORK_REFRESH
                    else HealReason.RECONNECTED
                )
                message = self._MESSAGES[strategy][0]
            else:
                reason = HealReason.STILL_FAILING
                message = self._MESSAGES[strategy][1]
                if error:
                    message = f"{message}: {error}"

            return HealResult(
                success=healthy,
                reason=reason,
                message=message,
                strategy=strategy,
                attempt=attempt,
            )

        elif strategy == HealingStrategy.GENERIC_RETRY:
            await self._sleep(delay)
            return HealResult(
                success=False,
                reason=HealReason.GENERIC_RETRY,
                message="Generic healing strategy applied - manual intervention may be required",
                strategy=strategy,
                attempt=attempt,
            )

        return HealResult(
            success=False,
            reason=HealReason.UNKNOWN_STRATEGY,
            message=f"Unknown healing strategy: {strategy}",
            strategy=strategy,
            attempt=attempt,
        )

    # ------------------------------------------------------------------
    # State inspection / manual override
    # ------------------------------------------------------------------

    def get_state(self, name: str) -> Optional[HealingState]:
        """Copy of a dependency's HealingState (None if absent)."""
        state = self._states.get(name)
        return replace(state) if state else None

    def states(self) -> Dict[str, HealingState]:
        return {name: replace(state) for name, state in self._states.items()}

    def in_cooldown(self, now: Optional[datetime] = None) -> List[str]:
        """Dependencies whose last attempt is still inside the cooldown window."""
        now = now or self._clock()
        return [
            name for name, state in self._states.items()
            if state.last_attempt_at is not None
            and (now - state.last_attempt_at).total_seconds() < self.config.cooldown_seconds
        ]

    def at_max_attempts(self) -> List[str]:
        """Dependencies locked out until reset."""
        return [
            name for name, state in self._states.items()
            if state.attempt_count >= self.config.max_attempts
        ]

    def reset(self, name: str) -> bool:
        """
        Clear a dependency's HealingState.

        Returns:
            True if there was state to clear
        """
        return self._states.pop(name, None) is not None

    def reset_all(self) -> List[str]:
        """
        Clear every dependency's HealingState.

        Returns:
            Names whose state was cleared
        """
        cleared = list(self._states)
        self._states.clear()
        if cleared:
            self._logger.info(f"Healing state reset for: {', '.join(cleared)}")
        return cleared


__all__ = [
    "HealingPolicy",
    "ProbeFn",
]
