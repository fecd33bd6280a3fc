# ============================================================================
# HEALTH ROUTER TESTS
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Tests - HTTP surface
# PURPOSE: Verify health and healing endpoints via FastAPI TestClient
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health Router Tests

Covers:
1. /livez and /readyz (snapshot only)
2. /health status code mapping (200 / 206 / 503)
3. /health/{name} single re-probe and 404
4. /healing/stats, manual heal, reset
5. Application wiring through create_app()

Run with:
    pytest tests/test_health_router.py -v
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.config import HealingDefaults, ReportDefaults, Settings, StartupDefaults
from core.contracts import DependencyKind
from health.core import DependencyCheck, DependencyProbe
from health.registry import HealthRegistry
from health.router import create_health_router
from healing.orchestrator import HealingOrchestrator
from healing.policy import HealingPolicy


# ============================================================================
# HELPERS
# ============================================================================

class StubProbe(DependencyProbe):

    def __init__(self, name, healthy=True):
        self.name = name
        self.kind = DependencyKind.API
        self.healthy = healthy

    async def probe(self) -> DependencyCheck:
        if self.healthy:
            return DependencyCheck.healthy(self.name, "ok")
        return DependencyCheck.unhealthy(self.name, "down")


async def _no_sleep(delay):
    return None


def _client(*probes, required=None):
    registry = HealthRegistry(timeout_seconds=5.0)
    for probe in probes:
        registry.register(probe)
    config = HealingDefaults(critical_dependencies=())
    policy = HealingPolicy(config, strategies=registry.strategy_table(), sleep=_no_sleep)
    orchestrator = HealingOrchestrator(registry, policy, config)

    app = FastAPI()
    app.include_router(create_health_router(registry, orchestrator, required=required))
    return TestClient(app), registry, policy


# ============================================================================
# PROBES
# ============================================================================

class TestProbeEndpoints:

    def test_livez(self):
        client, _, _ = _client(StubProbe("a", healthy=False))

        response = client.get("/livez")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_readyz_before_first_check(self):
        client, _, _ = _client(StubProbe("a"))

        response = client.get("/readyz")

        assert response.status_code == 503
        assert response.json()["checks"]["a"]["status"] == "unknown"

    def test_readyz_after_check(self):
        client, _, _ = _client(StubProbe("a"), StubProbe("optional", healthy=False), required=["a"])

        client.get("/health")
        response = client.get("/readyz")

        assert response.status_code == 200
        assert response.json() == {"status": "ready", "checks_passed": 1}


# ============================================================================
# HEALTH
# ============================================================================

class TestHealthEndpoints:

    @pytest.mark.parametrize("flags,expected", [
        ((True, True, True), 200),
        ((True, True, False), 206),
        ((True, False, False), 503),
    ])
    def test_status_codes(self, flags, expected):
        probes = [StubProbe(f"dep-{i}", healthy=flag) for i, flag in enumerate(flags)]
        client, _, _ = _client(*probes)

        response = client.get("/health")

        assert response.status_code == expected
        body = response.json()
        assert body["totalServices"] == 3
        assert body["healing"]["state"] == "idle"
        assert "version" in body

    def test_single_dependency(self):
        client, _, _ = _client(StubProbe("a"), StubProbe("b", healthy=False))

        assert client.get("/health/a").status_code == 200
        response = client.get("/health/b")
        assert response.status_code == 503
        assert response.json()["error"] == "down"

    def test_unknown_dependency(self):
        client, _, _ = _client(StubProbe("a"))

        assert client.get("/health/missing").status_code == 404


# ============================================================================
# HEALING
# ============================================================================

class TestHealingEndpoints:

    def test_stats(self):
        client, _, _ = _client(StubProbe("a"))

        response = client.get("/healing/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["state"] == "idle"
        assert body["total_attempts"] == 0

    def test_manual_heal_and_reset(self):
        client, _, policy = _client(StubProbe("a", healthy=False))

        response = client.post("/healing/a")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "a"
        assert body["success"] is False
        assert body["reason"] == "still_failing"

        response = client.post("/healing/a")
        assert response.json()["reason"] == "cooldown"

        response = client.post("/healing/a/reset")
        assert response.json() == {"name": "a", "cleared": True}
        assert policy.get_state("a") is None

    def test_reset_all(self):
        client, _, policy = _client(StubProbe("a", healthy=False), StubProbe("b", healthy=False))
        client.post("/healing/a")
        client.post("/healing/b")

        response = client.delete("/healing")

        assert response.status_code == 200
        assert sorted(response.json()["cleared"]) == ["a", "b"]
        assert policy.states() == {}
        assert client.post("/healing/a").json()["reason"] == "still_failing"

    def test_manual_heal_unknown(self):
        client, _, _ = _client(StubProbe("a"))

        assert client.post("/healing/missing").status_code == 404
        assert client.post("/healing/missing/reset").status_code == 404


# ============================================================================
# APPLICATION
# ============================================================================

class TestApplication:

    def test_create_app_lifespan(self, tmp_path):
        from main import create_app

        registry = HealthRegistry(timeout_seconds=5.0)
        registry.register(StubProbe("a"))
        settings = Settings(
            healing=HealingDefaults(critical_dependencies=()),
            startup=StartupDefaults(required_dependencies=("a",)),
            reports=ReportDefaults(report_dir=str(tmp_path)),
        )
        app = create_app(settings=settings, registry=registry, run_startup_gate=True)

        with TestClient(app) as client:
            root = client.get("/").json()
            assert root["startup"]["complete"] is True
            assert app.state.orchestrator.running
            assert client.get("/readyz").status_code == 200

        assert not app.state.orchestrator.running
        assert (tmp_path / "startup-report.json").exists()
