# ============================================================================
# HEALING POLICY TESTS
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Tests - Cooldown, attempt budget, strategy execution
# PURPOSE: Verify HealingPolicy.attempt_heal() state transitions
# CREATED: 17 OCT 2026
# ============================================================================
"""
Healing Policy Tests

Covers:
1. Cooldown refusal (idempotent, no state change)
2. attempt_count growth and the max_attempts lockout
3. Success clears HealingState entirely
4. Strategy resolution and per-strategy delays/reasons
5. Probe exceptions counted as failed attempts
6. Manual reset

Time is injected through a fake clock; strategy delays go to a recorder
instead of sleeping.

Run with:
    pytest tests/test_healing_policy.py -v
"""

import asyncio
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from core.config import HealingDefaults
from core.contracts import HealingStrategy, HealReason
from health.core import DependencyCheck
from healing.policy import HealingPolicy


# ============================================================================
# HELPERS
# ============================================================================

class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self):
        self.now = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance_ms(self, ms):
        self.now += timedelta(milliseconds=ms)


class SleepRecorder:
    """Records requested delays without sleeping."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def _failing_probe():
    return AsyncMock(side_effect=lambda name: DependencyCheck.unhealthy(name, "still down"))


def _healthy_probe():
    return AsyncMock(side_effect=lambda name: DependencyCheck.healthy(name, "ok"))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def policy(clock, sleeper):
    return HealingPolicy(
        HealingDefaults(cooldown_seconds=300.0, max_attempts=5),
        strategies={
            "llm": HealingStrategy.RECONNECT,
            "db": HealingStrategy.DATABASE_RECONNECT,
            "egress": HealingStrategy.NETWORK_REFRESH,
        },
        clock=clock,
        sleep=sleeper,
    )


# ============================================================================
# COOLDOWN
# ============================================================================

class TestCooldown:

    def test_first_failure_records_state(self, policy, clock):
        result = asyncio.run(policy.attempt_heal("llm", _failing_probe()))

        assert result.success is False
        assert result.reason == HealReason.STILL_FAILING
        state = policy.get_state("llm")
        assert state.attempt_count == 1
        assert state.last_attempt_at == clock.now

    def test_attempt_inside_cooldown_is_refused(self, policy, clock):
        asyncio.run(policy.attempt_heal("llm", _failing_probe()))
        t0 = clock.now
        clock.advance_ms(100000)
        probe = _failing_probe()

        result = asyncio.run(policy.attempt_heal("llm", probe))

        assert result.reason == HealReason.COOLDOWN
        assert result.success is False
        probe.assert_not_called()
        state = policy.get_state("llm")
        assert state.attempt_count == 1
        assert state.last_attempt_at == t0

    def test_cooldown_refusal_is_idempotent(self, policy, clock):
        asyncio.run(policy.attempt_heal("llm", _failing_probe()))
        clock.advance_ms(1000)

        first = asyncio.run(policy.attempt_heal("llm", _failing_probe()))
        second = asyncio.run(policy.attempt_heal("llm", _failing_probe()))

        assert first.reason == HealReason.COOLDOWN
        assert second.reason == HealReason.COOLDOWN
        assert policy.get_state("llm").attempt_count == 1

    def test_attempt_after_cooldown_increments(self, policy, clock):
        asyncio.run(policy.attempt_heal("llm", _failing_probe()))
        clock.advance_ms(300001)

        result = asyncio.run(policy.attempt_heal("llm", _failing_probe()))

        assert result.reason == HealReason.STILL_FAILING
        assert result.attempt == 2
        state = policy.get_state("llm")
        assert state.attempt_count == 2
        assert state.last_attempt_at == clock.now

    def test_in_cooldown_listing(self, policy, clock):
        asyncio.run(policy.attempt_heal("llm", _failing_probe()))

        assert policy.in_cooldown() == ["llm"]
        clock.advance_ms(300001)
        assert policy.in_cooldown() == []


# ============================================================================
# ATTEMPT BUDGET
# ============================================================================

class TestMaxAttempts:

    def test_sixth_attempt_refused_without_probing(self, policy, clock):
        probe = _failing_probe()
        for expected in range(1, 6):
            result = asyncio.run(policy.attempt_heal("llm", probe))
            assert result.reason == HealReason.STILL_FAILING
            assert policy.get_state("llm").attempt_count == expected
            clock.advance_ms(300001)

        result = asyncio.run(policy.attempt_heal("llm", probe))

        assert result.reason == HealReason.MAX_ATTEMPTS
        assert probe.call_count == 5
        assert policy.get_state("llm").attempt_count == 5
        assert policy.at_max_attempts() == ["llm"]

    def test_attempt_count_never_exceeds_max(self, clock, sleeper):
        policy = HealingPolicy(
            HealingDefaults(cooldown_seconds=0.0, max_attempts=3),
            strategies={"llm": HealingStrategy.RECONNECT},
            clock=clock,
            sleep=sleeper,
        )
        probe = _failing_probe()

        for _ in range(10):
            asyncio.run(policy.attempt_heal("llm", probe))

        assert policy.get_state("llm").attempt_count == 3
        assert probe.call_count == 3

    def test_reset_lifts_lockout(self, policy, clock):
        probe = _failing_probe()
        for _ in range(5):
            asyncio.run(policy.attempt_heal("llm", probe))
            clock.advance_ms(300001)

        assert policy.reset("llm") is True
        assert policy.get_state("llm") is None
        assert policy.reset("llm") is False

        result = asyncio.run(policy.attempt_heal("llm", probe))
        assert result.reason == HealReason.STILL_FAILING
        assert policy.get_state("llm").attempt_count == 1


# ============================================================================
# SUCCESS
# ============================================================================

class TestSuccess:

    def test_success_leaves_no_state(self, policy):
        result = asyncio.run(policy.attempt_heal("llm", _healthy_probe()))

        assert result.success is True
        assert result.reason == HealReason.RECONNECTED
        assert policy.get_state("llm") is None

    def test_success_clears_state_to_absent(self, policy, clock):
        asyncio.run(policy.attempt_heal("db", _failing_probe()))
        clock.advance_ms(300001)
        asyncio.run(policy.attempt_heal("db", _failing_probe()))
        assert policy.get_state("db").attempt_count == 2
        clock.advance_ms(300001)

        result = asyncio.run(policy.attempt_heal("db", _healthy_probe()))

        assert result.success is True
        assert policy.get_state("db") is None
        assert "db" not in policy.states()

        # Next failure starts fresh, with no cooldown carried over
        result = asyncio.run(policy.attempt_heal("db", _failing_probe()))
        assert result.attempt == 1
        assert policy.get_state("db").attempt_count == 1

    def test_boolean_probe_outcome(self, policy):
        result = asyncio.run(policy.attempt_heal("llm", AsyncMock(return_value=True)))

        assert result.success is True


# ============================================================================
# STRATEGIES
# ============================================================================

class TestStrategies:

    def test_unlisted_dependency_uses_generic_retry(self, policy):
        assert policy.resolve_strategy("mystery") == HealingStrategy.GENERIC_RETRY

    def test_reconnect_delay_and_reprobe(self, policy, sleeper):
        probe = _healthy_probe()

        result = asyncio.run(policy.attempt_heal("llm", probe))

        assert sleeper.delays == [2.0]
        probe.assert_awaited_once_with("llm")
        assert result.strategy == HealingStrategy.RECONNECT

    def test_database_reconnect_uses_longer_delay(self, policy, sleeper):
        result = asyncio.run(policy.attempt_heal("db", _healthy_probe()))

        assert sleeper.delays == [5.0]
        assert result.reason == HealReason.RECONNECTED
        assert result.message == "Database reconnected successfully"

    def test_network_refresh_reason(self, policy, sleeper):
        result = asyncio.run(policy.attempt_heal("egress", _healthy_probe()))

        assert sleeper.delays == [1.0]
        assert result.reason == HealReason.NETWORK_REFRESHED

    def test_still_failing_message_carries_probe_error(self, policy):
        result = asyncio.run(policy.attempt_heal("llm", _failing_probe()))

        assert result.message == "API service still failing: still down"

    def test_generic_retry_never_probes_and_fails(self, policy, sleeper):
        probe = _healthy_probe()

        result = asyncio.run(policy.attempt_heal("mystery", probe))

        assert result.success is False
        assert result.reason == HealReason.GENERIC_RETRY
        assert "manual intervention" in result.message
        assert sleeper.delays == [3.0]
        probe.assert_not_called()
        assert policy.get_state("mystery").attempt_count == 1

    def test_set_strategy(self, policy):
        policy.set_strategy("mystery", HealingStrategy.NETWORK_REFRESH)
        assert policy.resolve_strategy("mystery") == HealingStrategy.NETWORK_REFRESH


# ============================================================================
# ERRORS
# ============================================================================

class TestErrors:

    def test_probe_exception_counts_as_failed_attempt(self, policy, clock):
        probe = AsyncMock(side_effect=RuntimeError("driver crashed"))

        result = asyncio.run(policy.attempt_heal("db", probe))

        assert result.success is False
        assert result.reason == HealReason.ERROR
        assert result.message == "driver crashed"
        assert result.strategy == HealingStrategy.DATABASE_RECONNECT
        state = policy.get_state("db")
        assert state.attempt_count == 1
        assert state.last_attempt_at == clock.now

    def test_state_copies_are_detached(self, policy):
        asyncio.run(policy.attempt_heal("llm", _failing_probe()))

        copy = policy.get_state("llm")
        copy.attempt_count = 99

        assert policy.get_state("llm").attempt_count == 1


class TestManualReset:

    def test_reset_all_clears_every_dependency(self, policy):
        asyncio.run(policy.attempt_heal("llm", _failing_probe()))
        asyncio.run(policy.attempt_heal("db", _failing_probe()))

        cleared = policy.reset_all()

        assert sorted(cleared) == ["db", "llm"]
        assert policy.states() == {}
        assert policy.in_cooldown() == []
        assert policy.reset_all() == []
