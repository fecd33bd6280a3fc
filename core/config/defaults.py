# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for probes, healing, startup, reports
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for probing and healing external dependencies.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Built once by the application and passed explicitly to components
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from core.contracts import HealingStrategy


# Stable dependency names
LLM_API = "primary-llm-api"
TELEPHONY_API = "telephony-api"
VOICE_API = "voice-api"
PRIMARY_DATABASE = "primary-database"
EGRESS_IP = "egress-ip-resolution"

DEFAULT_DEPENDENCIES = (LLM_API, TELEPHONY_API, VOICE_API, PRIMARY_DATABASE, EGRESS_IP)
DEFAULT_CRITICAL = (LLM_API, TELEPHONY_API, VOICE_API, PRIMARY_DATABASE)


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    """Read a comma-separated list from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _env_bool(name: str, default: bool) -> bool:
    """Read a true/false flag from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ProbeDefaults:
    """
    Defaults for dependency probes.

    Each probe is a single request/response call bounded by timeout_seconds.
    API keys are read from the named environment variables at probe time.
    """
    timeout_seconds: float = 10.0

    # LLM API
    llm_api_url: str = "https://api.openai.com/v1/models"
    llm_api_key_env: str = "OPENAI_API_KEY"

    # Telephony API
    telephony_api_url: str = "https://api.telnyx.com/v2/phone_numbers"
    telephony_api_key_env: str = "TELNYX_API_KEY"

    # Voice API
    voice_api_url: str = "https://api.retellai.com/health"
    voice_api_key_env: str = "RETELL_API_KEY"

    # Egress IP lookup
    egress_ip_url: str = "https://api.ipify.org?format=json"

    # PostgreSQL
    postgres_port: int = 5432
    postgres_connect_timeout: int = 10

    @classmethod
    def from_env(cls) -> "ProbeDefaults":
        """Create from environment variables."""
        return cls(
            timeout_seconds=float(os.getenv("PROBE_TIMEOUT_SECONDS", 10.0)),
            llm_api_url=os.getenv("LLM_API_HEALTH_URL", cls.llm_api_url),
            telephony_api_url=os.getenv("TELEPHONY_API_HEALTH_URL", cls.telephony_api_url),
            voice_api_url=os.getenv("VOICE_API_HEALTH_URL", cls.voice_api_url),
            egress_ip_url=os.getenv("EGRESS_IP_URL", cls.egress_ip_url),
            postgres_port=int(os.getenv("POSTGRES_PORT", 5432)),
            postgres_connect_timeout=int(os.getenv("POSTGRES_CONNECT_TIMEOUT", 10)),
        )


@dataclass(frozen=True)
class HealingDefaults:
    """
    Defaults for the healing policy and orchestrator.

    Controls cycle timing and escalation.
    """
    interval_seconds: float = 60.0
    cooldown_seconds: float = 300.0  # 5 min between attempts per dependency
    max_attempts: int = 5

    critical_dependencies: Tuple[str, ...] = DEFAULT_CRITICAL
    auto_restart: bool = True

    # Bounded history
    history_capacity: int = 100
    recent_history_size: int = 10

    # Delay before re-probing, per strategy (seconds)
    strategy_delays: Dict[HealingStrategy, float] = field(default_factory=lambda: {
        HealingStrategy.RECONNECT: 2.0,
        HealingStrategy.DATABASE_RECONNECT: 5.0,
        HealingStrategy.NETWORK_REFRESH: 1.0,
        HealingStrategy.GENERIC_RETRY: 3.0,
    })

    def get_delay(self, strategy: HealingStrategy) -> float:
        """Get the pre-probe delay for a strategy."""
        return self.strategy_delays.get(strategy, 0.0)

    @classmethod
    def from_env(cls) -> "HealingDefaults":
        """Create from environment variables."""
        return cls(
            interval_seconds=float(os.getenv("HEALING_INTERVAL_SECONDS", 60)),
            cooldown_seconds=float(os.getenv("HEALING_COOLDOWN_SECONDS", 300)),
            max_attempts=int(os.getenv("HEALING_MAX_ATTEMPTS", 5)),
            critical_dependencies=_env_list("HEALING_CRITICAL_DEPENDENCIES", DEFAULT_CRITICAL),
            auto_restart=_env_bool("HEALING_AUTO_RESTART", True),
            history_capacity=int(os.getenv("HEALING_HISTORY_CAPACITY", 100)),
        )


@dataclass(frozen=True)
class StartupDefaults:
    """
    Defaults for the startup gate.

    The gate blocks (non-fatally) until required dependencies are healthy.
    """
    max_wait_seconds: float = 120.0  # 2 min
    poll_interval_seconds: float = 5.0
    required_dependencies: Tuple[str, ...] = DEFAULT_DEPENDENCIES

    @classmethod
    def from_env(cls) -> "StartupDefaults":
        """Create from environment variables."""
        return cls(
            max_wait_seconds=float(os.getenv("STARTUP_MAX_WAIT_SECONDS", 120)),
            poll_interval_seconds=float(os.getenv("STARTUP_POLL_INTERVAL_SECONDS", 5)),
            required_dependencies=_env_list("STARTUP_REQUIRED_DEPENDENCIES", DEFAULT_DEPENDENCIES),
        )


@dataclass(frozen=True)
class ReportDefaults:
    """Where JSON health and startup reports are written."""
    report_dir: str = "logs"
    health_report_name: str = "health-report.json"
    startup_report_name: str = "startup-report.json"

    @classmethod
    def from_env(cls) -> "ReportDefaults":
        """Create from environment variables."""
        return cls(
            report_dir=os.getenv("HEALTH_REPORT_DIR", "logs"),
        )


# ============================================================================
# SETTINGS CONTAINER
# ============================================================================

@dataclass
class Settings:
    """Container for all configuration sections."""
    probes: ProbeDefaults = field(default_factory=ProbeDefaults)
    healing: HealingDefaults = field(default_factory=HealingDefaults)
    startup: StartupDefaults = field(default_factory=StartupDefaults)
    reports: ReportDefaults = field(default_factory=ReportDefaults)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create all sections from environment variables."""
        return cls(
            probes=ProbeDefaults.from_env(),
            healing=HealingDefaults.from_env(),
            startup=StartupDefaults.from_env(),
            reports=ReportDefaults.from_env(),
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LLM_API",
    "TELEPHONY_API",
    "VOICE_API",
    "PRIMARY_DATABASE",
    "EGRESS_IP",
    "DEFAULT_DEPENDENCIES",
    "DEFAULT_CRITICAL",
    "ProbeDefaults",
    "HealingDefaults",
    "StartupDefaults",
    "ReportDefaults",
    "Settings",
]
