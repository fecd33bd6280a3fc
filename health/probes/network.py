# ============================================================================
# NETWORK DEPENDENCY PROBES
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - Egress connectivity
# PURPOSE: External IP resolution check
# CREATED: 17 OCT 2026
# ============================================================================
"""
Network Dependency Probes

- EgressIpProbe: resolves this host's public IP through an IP lookup
  service (kind=network). Proves outbound connectivity and DNS.
"""

from typing import Optional

import httpx

from core.config import EGRESS_IP, ProbeDefaults
from core.contracts import DependencyKind
from health.core import DependencyCheck, DependencyProbe


class EgressIpProbe(DependencyProbe):
    """External IP resolution."""

    name = EGRESS_IP
    kind = DependencyKind.NETWORK

    def __init__(self, config: ProbeDefaults, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = config.egress_ip_url
        self.timeout_seconds = config.timeout_seconds
        self._transport = transport

    async def probe(self) -> DependencyCheck:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(self.url)
            response.raise_for_status()
            body = response.json()
            ip = body.get("ip") if isinstance(body, dict) else None

        except (httpx.HTTPError, ValueError) as e:
            return DependencyCheck.unhealthy(
                self.name,
                error_message=str(e) or type(e).__name__,
                detail="Failed to resolve external IP",
            )

        if not ip:
            return DependencyCheck.unhealthy(
                self.name,
                error_message="IP lookup response has no 'ip' field",
                detail="Failed to resolve external IP",
            )

        return DependencyCheck.healthy(self.name, detail=f"External IP: {ip}")


__all__ = [
    "EgressIpProbe",
]
