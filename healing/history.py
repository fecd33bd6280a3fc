# ============================================================================
# HEALING HISTORY
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core - Bounded record log
# PURPOSE: FIFO ring of healing and escalation records
# CREATED: 17 OCT 2026
# ============================================================================
"""
Healing History

Bounded, append-only log shared by HealingRecord and
CriticalEscalationRecord entries. When full, the oldest entry is evicted.
"""

from collections import deque
from typing import Any, Deque, Dict, List

from core.models import CriticalEscalationRecord, HealingRecord, HistoryEntry


class HealingHistory:
    """FIFO ring buffer of history entries."""

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError(f"History capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._entries: Deque[HistoryEntry] = deque(maxlen=capacity)

    def append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def recent(self, count: int) -> List[HistoryEntry]:
        """Newest `count` entries, oldest first."""
        if count <= 0:
            return []
        return list(self._entries)[-count:]

    def all(self) -> List[HistoryEntry]:
        return list(self._entries)

    def healing_records(self) -> List[HealingRecord]:
        return [e for e in self._entries if isinstance(e, HealingRecord)]

    def escalations(self) -> List[CriticalEscalationRecord]:
        return [e for e in self._entries if isinstance(e, CriticalEscalationRecord)]

    def to_list(self, count: int) -> List[Dict[str, Any]]:
        """JSON-ready dump of the newest `count` entries."""
        return [e.model_dump(mode="json") for e in self.recent(count)]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "HealingHistory",
]
