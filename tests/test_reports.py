# ============================================================================
# REPORT WRITER TESTS
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Tests - JSON report persistence
# PURPOSE: Verify health/startup report schema and write-failure handling
# CREATED: 17 OCT 2026
# ============================================================================
"""
Report Writer Tests

Run with:
    pytest tests/test_reports.py -v
"""

import json

from __version__ import __version__
from core.config import ReportDefaults
from health.core import AggregateHealth, DependencyCheck
from health.reports import ReportWriter


def _health():
    return AggregateHealth.from_checks(
        {
            "a": DependencyCheck.healthy("a", "fine"),
            "b": DependencyCheck.unhealthy("b", "refused"),
        },
        check_duration_ms=4.2,
    )


class TestHealthReport:

    def test_written_schema(self, tmp_path):
        writer = ReportWriter(ReportDefaults(report_dir=str(tmp_path / "logs")))

        path = writer.write_health_report(_health())

        assert path == tmp_path / "logs" / "health-report.json"
        report = json.loads(path.read_text())
        assert report["overall"] == "unhealthy"
        assert report["healthyServices"] == 1
        assert report["totalServices"] == 2
        assert report["services"]["b"]["error"] == "refused"
        assert report["version"] == __version__
        assert "generatedAt" in report
        assert "checkedAt" not in report

    def test_rewritten_each_time(self, tmp_path):
        writer = ReportWriter(ReportDefaults(report_dir=str(tmp_path)))

        writer.write_health_report(_health())
        healthy = AggregateHealth.from_checks({"a": DependencyCheck.healthy("a")})
        path = writer.write_health_report(healthy)

        assert json.loads(path.read_text())["overall"] == "healthy"


class TestStartupReport:

    def test_written_schema(self, tmp_path):
        writer = ReportWriter(ReportDefaults(report_dir=str(tmp_path)))

        path = writer.write_startup_report(
            startup_complete=False,
            startup_duration_ms=1234.567,
            attempts=3,
            final_health=_health(),
            required=["a", "b"],
        )

        report = json.loads(path.read_text())
        assert report["startupComplete"] is False
        assert report["startupDuration"] == 1234.57
        assert report["healthCheckAttempts"] == 3
        assert report["requiredServices"] == ["a", "b"]
        assert report["finalHealthStatus"]["overall"] == "unhealthy"

    def test_without_final_health(self):
        report = ReportWriter.build_startup_report(True, 0.0, 1, None, [])

        assert report["finalHealthStatus"] is None


class TestWriteFailure:

    def test_unwritable_directory_returns_none(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        writer = ReportWriter(ReportDefaults(report_dir=str(blocker / "logs")))

        assert writer.write_health_report(_health()) is None
        assert writer.write_startup_report(True, 1.0, 1, None, []) is None
