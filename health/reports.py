# ============================================================================
# HEALTH REPORTS
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - JSON report persistence
# PURPOSE: Write health and startup reports after key events
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health Reports

Two JSON artifacts, overwritten on each write:

health-report.json:
    {overall, services: {name: {status, lastCheck, detail, error}},
     checkDuration, healthyServices, totalServices, generatedAt, version}

startup-report.json:
    {startupComplete, startupDuration, healthCheckAttempts,
     finalHealthStatus, requiredServices, timestamp, version}

Write failures are logged and swallowed: a report is never allowed to
break a healing cycle or the startup gate.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from __version__ import __version__
from core.config import ReportDefaults
from health.core import AggregateHealth


class ReportWriter:
    """Writes JSON reports into a single directory."""

    def __init__(
        self,
        config: Optional[ReportDefaults] = None,
        logger: Optional[logging.Logger] = None,
    ):
        config = config or ReportDefaults()
        self.report_dir = Path(config.report_dir)
        self.health_report_path = self.report_dir / config.health_report_name
        self.startup_report_path = self.report_dir / config.startup_report_name
        self._logger = logger or logging.getLogger(__name__)

    @staticmethod
    def build_health_report(health: AggregateHealth) -> Dict[str, Any]:
        report = health.to_dict()
        report.pop("checkedAt", None)
        report["generatedAt"] = datetime.now(timezone.utc).isoformat()
        report["version"] = __version__
        return report

    @staticmethod
    def build_startup_report(
        startup_complete: bool,
        startup_duration_ms: float,
        attempts: int,
        final_health: Optional[AggregateHealth],
        required: List[str],
    ) -> Dict[str, Any]:
        return {
            "startupComplete": startup_complete,
            "startupDuration": round(startup_duration_ms, 2),
            "healthCheckAttempts": attempts,
            "finalHealthStatus": final_health.to_dict() if final_health else None,
            "requiredServices": list(required),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
        }

    def write_health_report(self, health: AggregateHealth) -> Optional[Path]:
        """Persist the health report. Returns the path, or None on failure."""
        return self._write(self.health_report_path, self.build_health_report(health))

    def write_startup_report(
        self,
        startup_complete: bool,
        startup_duration_ms: float,
        attempts: int,
        final_health: Optional[AggregateHealth],
        required: List[str],
    ) -> Optional[Path]:
        """Persist the startup report. Returns the path, or None on failure."""
        report = self.build_startup_report(
            startup_complete, startup_duration_ms, attempts, final_health, required,
        )
        return self._write(self.startup_report_path, report)

    def _write(self, path: Path, report: Dict[str, Any]) -> Optional[Path]:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(report, indent=2, default=str))
        except OSError as e:
            self._logger.error(f"Failed to save report {path}: {e}")
            return None

        self._logger.info(f"Report saved to {path}")
        return path


__all__ = [
    "ReportWriter",
]
