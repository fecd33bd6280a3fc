# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Module

Provides configuration sections and defaults for the dependency healer.
"""

from core.config.defaults import (
    LLM_API,
    TELEPHONY_API,
    VOICE_API,
    PRIMARY_DATABASE,
    EGRESS_IP,
    DEFAULT_DEPENDENCIES,
    DEFAULT_CRITICAL,
    ProbeDefaults,
    HealingDefaults,
    StartupDefaults,
    ReportDefaults,
    Settings,
)

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
