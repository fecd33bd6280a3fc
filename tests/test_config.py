# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Tests - Defaults and environment overrides
# PURPOSE: Verify config dataclasses and from_env() parsing
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

from core.config import (
    DEFAULT_CRITICAL,
    DEFAULT_DEPENDENCIES,
    EGRESS_IP,
    HealingDefaults,
    Settings,
    StartupDefaults,
)
from core.contracts import DependencyKind, HealingStrategy


class TestHealingDefaults:

    def test_defaults(self):
        config = HealingDefaults()

        assert config.interval_seconds == 60.0
        assert config.cooldown_seconds == 300.0
        assert config.max_attempts == 5
        assert config.auto_restart is True
        assert config.history_capacity == 100
        assert EGRESS_IP not in config.critical_dependencies

    def test_strategy_delays(self):
        config = HealingDefaults()

        assert config.get_delay(HealingStrategy.RECONNECT) == 2.0
        assert config.get_delay(HealingStrategy.DATABASE_RECONNECT) == 5.0
        assert config.get_delay(HealingStrategy.NETWORK_REFRESH) == 1.0
        assert config.get_delay(HealingStrategy.GENERIC_RETRY) == 3.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HEALING_INTERVAL_SECONDS", "15")
        monkeypatch.setenv("HEALING_MAX_ATTEMPTS", "2")
        monkeypatch.setenv("HEALING_CRITICAL_DEPENDENCIES", "primary-database, voice-api,")
        monkeypatch.setenv("HEALING_AUTO_RESTART", "false")

        config = HealingDefaults.from_env()

        assert config.interval_seconds == 15.0
        assert config.max_attempts == 2
        assert config.critical_dependencies == ("primary-database", "voice-api")
        assert config.auto_restart is False


class TestStartupDefaults:

    def test_defaults(self):
        config = StartupDefaults()

        assert config.max_wait_seconds == 120.0
        assert config.poll_interval_seconds == 5.0
        assert config.required_dependencies == DEFAULT_DEPENDENCIES

    def test_empty_required_list(self, monkeypatch):
        monkeypatch.setenv("STARTUP_REQUIRED_DEPENDENCIES", "")

        assert StartupDefaults.from_env().required_dependencies == ()


class TestSettings:

    def test_from_env_without_overrides(self, monkeypatch):
        for name in ("HEALING_CRITICAL_DEPENDENCIES", "HEALING_AUTO_RESTART", "HEALTH_REPORT_DIR",
                     "PROBE_TIMEOUT_SECONDS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.healing.critical_dependencies == DEFAULT_CRITICAL
        assert settings.reports.report_dir == "logs"
        assert settings.probes.timeout_seconds == 10.0


class TestStrategyMapping:

    def test_kind_to_strategy(self):
        assert HealingStrategy.for_kind(DependencyKind.API) == HealingStrategy.RECONNECT
        assert HealingStrategy.for_kind(DependencyKind.DATABASE) == HealingStrategy.DATABASE_RECONNECT
        assert HealingStrategy.for_kind(DependencyKind.NETWORK) == HealingStrategy.NETWORK_REFRESH
        assert HealingStrategy.for_kind(DependencyKind.OTHER) == HealingStrategy.GENERIC_RETRY
