# ============================================================================
# DEPENDENCY PROBES
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - Probe implementations
# PURPOSE: Concrete probes for the service's external dependencies
# CREATED: 17 OCT 2026
# ============================================================================
"""
Dependency Probes

API Probes (kind=api):
- primary-llm-api: LlmApiProbe
- telephony-api: TelephonyApiProbe
- voice-api: VoiceApiProbe

Database Probes (kind=database):
- primary-database: PostgresProbe

Network Probes (kind=network):
- egress-ip-resolution: EgressIpProbe

Build a registry with every default probe:
    registry = create_default_registry(settings.probes)
"""

import logging
from typing import List, Optional

from core.config import ProbeDefaults
from health.core import DependencyProbe
from health.registry import HealthRegistry
from health.probes.api import HttpApiProbe, LlmApiProbe, TelephonyApiProbe, VoiceApiProbe
from health.probes.database import PostgresProbe
from health.probes.network import EgressIpProbe


def build_default_probes(config: ProbeDefaults) -> List[DependencyProbe]:
    """Default probes, in reporting order."""
    return [
        LlmApiProbe(config),
        TelephonyApiProbe(config),
        VoiceApiProbe(config),
        PostgresProbe(config),
        EgressIpProbe(config),
    ]


def create_default_registry(
    config: ProbeDefaults,
    logger: Optional[logging.Logger] = None,
) -> HealthRegistry:
    """HealthRegistry with every default probe registered."""
    registry = HealthRegistry(timeout_seconds=config.timeout_seconds, logger=logger)
    for probe in build_default_probes(config):
        registry.register(probe)
    return registry


__all__ = [
    "HttpApiProbe",
    "LlmApiProbe",
    "TelephonyApiProbe",
    "VoiceApiProbe",
    "PostgresProbe",
    "EgressIpProbe",
    "build_default_probes",
    "create_default_registry",
]
