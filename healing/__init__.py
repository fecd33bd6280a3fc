# ============================================================================
# HEALING MODULE
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core - Health-driven recovery
# PURPOSE: Policy, orchestrator loop and startup gate
# CREATED: 17 OCT 2026
# ============================================================================
"""
Healing Module

Health-driven recovery for external dependencies:
- HealingPolicy: cooldown + attempt budget, strategy execution
- HealingOrchestrator: periodic check -> heal -> record -> escalate
- StartupGate: bounded wait for required dependencies at boot
- HealingHistory: bounded FIFO log of cycle and escalation records

Usage:
    from healing import HealingPolicy, HealingOrchestrator

    policy = HealingPolicy(settings.healing, strategies=registry.strategy_table())
    orchestrator = HealingOrchestrator(registry, policy)
    await orchestrator.start()
"""

from healing.history import HealingHistory
from healing.policy import HealingPolicy, ProbeFn
from healing.orchestrator import HealingOrchestrator, EscalationHook
from healing.startup import StartupGate

__all__ = [
    "HealingHistory",
    "HealingPolicy",
    "ProbeFn",
    "HealingOrchestrator",
    "EscalationHook",
    "StartupGate",
]
