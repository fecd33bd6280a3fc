# ============================================================================
# HEALING MODELS
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core model - Heal results, per-dependency state, history records
# PURPOSE: Typed outcomes and immutable log entries for the healing loop
# CREATED: 17 OCT 2026
# EXPORTS: HealResult, HealingState, HealingRecord, CriticalEscalationRecord,
#          HistoryEntry
# DEPENDENCIES: pydantic
# ============================================================================
"""
Healing Models

Key concepts:
- HealResult: typed outcome of one heal attempt (never an exception)
- HealingState: per-dependency attempt counter, owned by HealingPolicy
- HealingRecord: immutable summary of one orchestrator cycle
- CriticalEscalationRecord: immutable marker that critical dependencies
  failed healing and escalation was triggered

Both record types share the bounded healing history and are told apart
by their `record_type` discriminator.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from core.contracts import HealReason, HealingStrategy


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealResult(BaseModel):
    """
    Outcome of a single heal attempt.

    Refusals (cooldown, max_attempts) leave HealingState untouched.
    Every other non-success increments the attempt counter.
    """

    model_config = {"frozen": True}

    success: bool
    reason: HealReason
    message: str = ""
    strategy: Optional[HealingStrategy] = Field(
        default=None,
        description="Strategy executed (None for refusals)"
    )
    attempt: Optional[int] = Field(
        default=None,
        description="1-based attempt number (None for refusals)"
    )

    @classmethod
    def cooldown(cls) -> "HealResult":
        return cls(
            success=False,
            reason=HealReason.COOLDOWN,
            message="Service is in healing cooldown period",
        )

    @classmethod
    def max_attempts(cls) -> "HealResult":
        return cls(
            success=False,
            reason=HealReason.MAX_ATTEMPTS,
            message="Maximum healing attempts reached",
        )

    @classmethod
    def from_exception(
        cls,
        e: Exception,
        strategy: Optional[HealingStrategy] = None,
        attempt: Optional[int] = None,
    ) -> "HealResult":
        return cls(
            success=False,
            reason=HealReason.ERROR,
            message=str(e) or type(e).__name__,
            strategy=strategy,
            attempt=attempt,
        )


@dataclass
class HealingState:
    """Attempt bookkeeping for one dependency (created on first failure)."""
    attempt_count: int = 0
    last_attempt_at: Optional[datetime] = None


class HealingRecord(BaseModel):
    """
    One orchestrator cycle that found unhealthy dependencies.

    Appended to the bounded history after every heal attempt resolves.
    """

    model_config = {"frozen": True}

    record_type: Literal["healing"] = "healing"
    timestamp: datetime = Field(default_factory=_utcnow)
    unhealthy_dependencies: List[str]
    results: Dict[str, HealResult]
    success_count: int = 0
    failure_count: int = 0

    @classmethod
    def from_results(
        cls,
        unhealthy: List[str],
        results: Dict[str, HealResult],
        timestamp: Optional[datetime] = None,
    ) -> "HealingRecord":
        """Build a record, deriving success/failure counts."""
        successes = sum(1 for r in results.values() if r.success)
        return cls(
            timestamp=timestamp or _utcnow(),
            unhealthy_dependencies=list(unhealthy),
            results=dict(results),
            success_count=successes,
            failure_count=len(results) - successes,
        )


class CriticalEscalationRecord(BaseModel):
    """Critical dependencies stayed down after their heal attempt."""

    model_config = {"frozen": True}

    record_type: Literal["critical_escalation"] = "critical_escalation"
    timestamp: datetime = Field(default_factory=_utcnow)
    failed_dependencies: List[str]
    reason: str = "critical_service_healing_failed"
    restart_triggered: bool = False


HistoryEntry = Union[HealingRecord, CriticalEscalationRecord]


__all__ = [
    "HealResult",
    "HealingState",
    "HealingRecord",
    "CriticalEscalationRecord",
    "HistoryEntry",
]
