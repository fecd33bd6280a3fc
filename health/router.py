# ============================================================================
# HEALTH & HEALING ROUTER
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - FastAPI health and healing endpoints
# PURPOSE: Probes, health status, and healing controls over HTTP
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health & Healing Router

Endpoints:
    GET  /livez                 - Process alive (no dependency checks)
    GET  /readyz                - Required dependencies healthy in the last
                                  snapshot (no re-probe)
    GET  /health                - Fresh check of every dependency
    GET  /health/{name}         - Re-probe one dependency
    GET  /healing/stats         - Healing statistics and cooldown state
    POST /healing/{name}        - Manual heal attempt
    POST /healing/{name}/reset  - Clear a dependency's attempt counter
    DELETE /healing             - Clear every attempt counter

Response Codes:
    200 - Healthy
    206 - Degraded (partial content)
    404 - Unknown dependency
    409 - Healing cycle in progress
    503 - Unhealthy / not ready
"""

from typing import Iterable, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from __version__ import __version__, BUILD_DATE
from core.contracts import DependencyStatus, OverallStatus
from healing.orchestrator import HealingOrchestrator
from health.registry import HealthRegistry


def _status_to_http_code(status: OverallStatus) -> int:
    """Map overall status to HTTP status code."""
    return {
        OverallStatus.HEALTHY: 200,
        OverallStatus.DEGRADED: 206,  # Partial Content
        OverallStatus.UNHEALTHY: 503,  # Service Unavailable
    }[status]


def create_health_router(
    registry: HealthRegistry,
    orchestrator: HealingOrchestrator,
    required: Optional[Iterable[str]] = None,
) -> APIRouter:
    """
    Build the router around explicit component instances.

    Args:
        registry: Health registry to read and probe
        orchestrator: Healing orchestrator (stats and manual heals)
        required: Dependencies that gate /readyz (all registered if None)
    """
    router = APIRouter(tags=["Health"])
    required_names = list(required) if required is not None else None

    # ========================================================================
    # PROBES
    # ========================================================================

    @router.get("/livez")
    async def liveness_probe():
        """Process is alive. No external checks."""
        return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}

    @router.get("/readyz")
    async def readiness_probe():
        """
        Ready to accept work.

        Reads the last snapshot; never re-probes, so it stays fast.
        """
        names = required_names if required_names is not None else registry.names()
        not_ready = {}
        for name in names:
            check = registry.get_check(name)
            if check is None or check.status != DependencyStatus.HEALTHY:
                not_ready[name] = check.to_dict() if check else {"status": "unknown"}

        if not_ready:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready", "checks": not_ready},
            )
        return {"status": "ready", "checks_passed": len(names)}

    # ========================================================================
    # HEALTH
    # ========================================================================

    @router.get("/health")
    async def full_health_check():
        """Probe every dependency and return the aggregate."""
        health = await registry.check_all()

        body = health.to_dict()
        body["version"] = __version__
        body["build_date"] = BUILD_DATE
        body["healing"] = {
            "state": orchestrator.state.value,
            "services_in_cooldown": orchestrator.policy.in_cooldown(),
        }
        return JSONResponse(status_code=_status_to_http_code(health.overall), content=body)

    @router.get("/health/{name}")
    async def single_health_check(name: str):
        """Re-probe a single dependency."""
        if name not in registry:
            return JSONResponse(
                status_code=404,
                content={"error": f"Dependency not found: {name}"},
            )

        check = await registry.probe(name)
        code = 200 if check.status == DependencyStatus.HEALTHY else 503
        return JSONResponse(status_code=code, content={"name": name, **check.to_dict()})

    # ========================================================================
    # HEALING
    # ========================================================================

    @router.get("/healing/stats")
    async def healing_stats():
        return orchestrator.get_healing_stats()

    @router.post("/healing/{name}")
    async def heal_dependency(name: str):
        """Manual heal attempt (subject to cooldown and max attempts)."""
        try:
            result = await orchestrator.attempt_heal(name)
        except KeyError:
            return JSONResponse(
                status_code=404,
                content={"error": f"Dependency not found: {name}"},
            )

        if result is None:
            return JSONResponse(
                status_code=409,
                content={"error": "Healing cycle in progress"},
            )
        return {"name": name, **result.model_dump(mode="json")}

    @router.post("/healing/{name}/reset")
    async def reset_dependency(name: str):
        """Manual override: clear the attempt counter and cooldown."""
        if name not in registry:
            return JSONResponse(
                status_code=404,
                content={"error": f"Dependency not found: {name}"},
            )
        cleared = orchestrator.policy.reset(name)
        return {"name": name, "cleared": cleared}

    @router.delete("/healing")
    async def reset_all_dependencies():
        """Manual override: clear attempt counters and cooldowns for every dependency."""
        cleared = orchestrator.policy.reset_all()
        return {"cleared": cleared}

    return router


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "create_health_router",
]
