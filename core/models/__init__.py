# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Model exports
# PURPOSE: Central export point for healing models
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models for heal outcomes and the bounded healing history.
"""

from core.models.healing import (
    HealResult,
    HealingState,
    HealingRecord,
    CriticalEscalationRecord,
    HistoryEntry,
)

__all__ = [
    "HealResult",
    "HealingState",
    "HealingRecord",
    "CriticalEscalationRecord",
    "HistoryEntry",
]
