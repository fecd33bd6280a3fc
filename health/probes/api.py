# ============================================================================
# API DEPENDENCY PROBES
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - External HTTP API reachability
# PURPOSE: LLM, telephony and voice API probes over httpx
# CREATED: 17 OCT 2026
# ============================================================================
"""
API Dependency Probes

Bearer-authenticated GET against a known endpoint (kind=api):
- LlmApiProbe: model listing, detail reports the model count
- TelephonyApiProbe: phone number listing (page size 1)
- VoiceApiProbe: vendor health endpoint

A key that is missing or still set to the "your_..._here" placeholder is
reported as unconfigured without any network call.
"""

import os
from typing import Any, Dict, Optional

import httpx

from core.config import LLM_API, TELEPHONY_API, VOICE_API, ProbeDefaults
from core.contracts import DependencyKind
from health.core import DependencyCheck, DependencyProbe


def _is_placeholder(value: str) -> bool:
    return value.startswith("your_") and value.endswith("_here")


class HttpApiProbe(DependencyProbe):
    """
    Generic authenticated HTTP API probe.

    Healthy iff the endpoint answers 200 and describe() can read the body.
    """

    kind = DependencyKind.API
    label = "API"

    def __init__(
        self,
        name: str,
        url: str,
        api_key_env: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.name = name
        self.url = url
        self.api_key_env = api_key_env
        self.params = params
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def describe(self, response: httpx.Response) -> str:
        """Detail text for a successful response (may raise ValueError)."""
        return "API connection successful"

    async def probe(self) -> DependencyCheck:
        headers = {"Content-Type": "application/json"}

        if self.api_key_env:
            api_key = os.environ.get(self.api_key_env, "")
            if not api_key or _is_placeholder(api_key):
                return DependencyCheck.unhealthy(
                    self.name,
                    error_message=f"{self.label} API key not configured",
                    detail=f"Set {self.api_key_env}",
                )
            headers["Authorization"] = f"Bearer {api_key}"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(self.url, headers=headers, params=self.params)

            if response.status_code != 200:
                return DependencyCheck.unhealthy(
                    self.name,
                    error_message=f"{self.label} returned status {response.status_code}",
                    detail=f"Failed to connect to {self.label}",
                )

            return DependencyCheck.healthy(self.name, detail=self.describe(response))

        except httpx.TimeoutException:
            return DependencyCheck.unhealthy(
                self.name,
                error_message=f"{self.label} request timed out",
                detail=f"Failed to connect to {self.label}",
            )

        except httpx.HTTPError as e:
            return DependencyCheck.unhealthy(
                self.name,
                error_message=str(e) or type(e).__name__,
                detail=f"Failed to connect to {self.label}",
            )

        except ValueError as e:
            return DependencyCheck.unhealthy(
                self.name,
                error_message=f"Malformed response: {e}",
                detail=f"{self.label} returned an unreadable body",
            )


class LlmApiProbe(HttpApiProbe):
    """Primary LLM API: lists models."""

    label = "LLM API"

    def __init__(self, config: ProbeDefaults, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(
            name=LLM_API,
            url=config.llm_api_url,
            api_key_env=config.llm_api_key_env,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )

    def describe(self, response: httpx.Response) -> str:
        body = response.json()
        if not isinstance(body, dict):
            raise ValueError("expected a JSON object")
        models = body.get("data") or []
        return f"{len(models)} models available"


class TelephonyApiProbe(HttpApiProbe):
    """Telephony API: lists one phone number."""

    label = "Telephony API"

    def __init__(self, config: ProbeDefaults, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(
            name=TELEPHONY_API,
            url=config.telephony_api_url,
            api_key_env=config.telephony_api_key_env,
            params={"page[size]": 1},
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )


class VoiceApiProbe(HttpApiProbe):
    """Voice API: vendor health endpoint."""

    label = "Voice API"

    def __init__(self, config: ProbeDefaults, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(
            name=VOICE_API,
            url=config.voice_api_url,
            api_key_env=config.voice_api_key_env,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HttpApiProbe",
    "LlmApiProbe",
    "TelephonyApiProbe",
    "VoiceApiProbe",
]
