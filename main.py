# ============================================================================
# DEPENDENCY HEALER - MAIN APPLICATION
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Core - FastAPI application entry point
# PURPOSE: Wire probes, healing policy, orchestrator and startup gate
# CREATED: 17 OCT 2026
# ============================================================================
"""
Dependency Healer Main Application

FastAPI application that:
1. Waits (non-fatally) for required dependencies at startup
2. Runs the healing orchestrator in the background
3. Exposes health and healing endpoints

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
import os
import signal
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE, EPOCH
from core.config import Settings
from core.logging import configure_logging, get_logger
from healing import HealingOrchestrator, HealingPolicy, StartupGate
from health import HealthRegistry, ReportWriter
from health.probes import create_default_registry
from health.router import create_health_router

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


async def emergency_restart(failed: List[str]) -> None:
    """
    Escalation hook for critical dependencies that failed healing.

    Sends SIGTERM to this process when HEALING_RESTART_PROCESS=true so the
    supervisor (container runtime) restarts it; otherwise only logs.
    """
    logger.error(f"Emergency restart requested for: {', '.join(failed)}")
    if os.environ.get("HEALING_RESTART_PROCESS", "").lower() == "true":
        os.kill(os.getpid(), signal.SIGTERM)
    else:
        logger.error("HEALING_RESTART_PROCESS not enabled - restart skipped")


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[HealthRegistry] = None,
    run_startup_gate: Optional[bool] = None,
) -> FastAPI:
    """
    Build the application around explicit component instances.

    Args:
        settings: Configuration (from environment if None)
        registry: Health registry (default probes if None)
        run_startup_gate: Block startup on the gate (env STARTUP_GATE_ENABLED)
    """
    settings = settings or Settings.from_env()
    registry = registry or create_default_registry(settings.probes)
    if run_startup_gate is None:
        run_startup_gate = os.environ.get("STARTUP_GATE_ENABLED", "true").lower() == "true"

    report_writer = ReportWriter(settings.reports)
    policy = HealingPolicy(settings.healing, strategies=registry.strategy_table())
    orchestrator = HealingOrchestrator(
        registry,
        policy,
        settings.healing,
        escalation_hook=emergency_restart,
        report_writer=report_writer,
    )
    gate = StartupGate(registry, policy, settings.startup, report_writer=report_writer)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Runs the startup gate, starts the orchestrator, stops it on shutdown.
        """
        logger.info(f"Starting Dependency Healer v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")
        logger.info(f"{len(registry)} dependency probes registered: {', '.join(registry.names())}")

        if run_startup_gate:
            ready = await gate.await_ready()
            if not ready:
                logger.warning("Continuing startup with unhealthy dependencies")

        await orchestrator.start()

        yield

        logger.info("Shutting down Dependency Healer...")
        await orchestrator.stop()
        logger.info("Dependency Healer stopped")

    app = FastAPI(
        title="Dependency Healer",
        description=f"Epoch {EPOCH} health-driven dependency recovery",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.registry = registry
    app.state.policy = policy
    app.state.orchestrator = orchestrator
    app.state.startup_gate = gate

    # Health routes (no prefix - /livez, /readyz, /health, /healing/*)
    app.include_router(
        create_health_router(
            registry,
            orchestrator,
            required=settings.startup.required_dependencies,
        )
    )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": "Dependency Healer",
            "version": __version__,
            "epoch": EPOCH,
            "build_date": BUILD_DATE,
            "startup": gate.get_startup_status(),
        }

    return app


app = create_app()
