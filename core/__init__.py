# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core module initialization
# PURPOSE: Export core contracts and models
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================

from core.contracts import (
    DependencyStatus,
    OverallStatus,
    DependencyKind,
    HealingStrategy,
    HealReason,
    OrchestratorState,
)
from core.models import (
    HealResult,
    HealingState,
    HealingRecord,
    CriticalEscalationRecord,
)

__all__ = [
    # Enums
    "DependencyStatus",
    "OverallStatus",
    "DependencyKind",
    "HealingStrategy",
    "HealReason",
    "OrchestratorState",
    # Models
    "HealResult",
    "HealingState",
    "HealingRecord",
    "CriticalEscalationRecord",
]
