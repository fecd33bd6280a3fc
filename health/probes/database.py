# ============================================================================
# DATABASE DEPENDENCY PROBES
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# STATUS: Infrastructure - PostgreSQL connectivity
# PURPOSE: Database ping via a short-lived connection
# CREATED: 17 OCT 2026
# ============================================================================
"""
Database Dependency Probes

- PostgresProbe: opens a dedicated connection, runs SELECT 1, closes it
  (kind=database). No pool: the probe must observe a fresh connect.
"""

import os

from psycopg import AsyncConnection
from psycopg.rows import dict_row

from core.config import PRIMARY_DATABASE, ProbeDefaults
from core.contracts import DependencyKind
from health.core import DependencyCheck, DependencyProbe


class PostgresProbe(DependencyProbe):
    """
    PostgreSQL connectivity probe.

    Reads POSTGRES_HOST / POSTGRES_DB / POSTGRES_USER / POSTGRES_PASSWORD
    at probe time so credentials can rotate without a restart.
    """

    name = PRIMARY_DATABASE
    kind = DependencyKind.DATABASE

    def __init__(self, config: ProbeDefaults):
        self.port = config.postgres_port
        self.connect_timeout = config.postgres_connect_timeout
        self.timeout_seconds = config.timeout_seconds

    async def probe(self) -> DependencyCheck:
        host = os.environ.get("POSTGRES_HOST")
        database = os.environ.get("POSTGRES_DB")

        if not host or not database:
            return DependencyCheck.unhealthy(
                self.name,
                error_message="PostgreSQL not configured",
                detail="Set POSTGRES_HOST and POSTGRES_DB",
            )

        target = f"{host}:{self.port}/{database}"
        conn = None
        try:
            conn = await AsyncConnection.connect(
                host=host,
                port=self.port,
                dbname=database,
                user=os.environ.get("POSTGRES_USER"),
                password=os.environ.get("POSTGRES_PASSWORD"),
                connect_timeout=self.connect_timeout,
                autocommit=True,
                row_factory=dict_row,
            )
            result = await conn.execute("SELECT 1 AS health_check")
            row = await result.fetchone()

            if row and row.get("health_check") == 1:
                return DependencyCheck.healthy(self.name, detail=f"Connected to {target}")

            return DependencyCheck.unhealthy(
                self.name,
                error_message="PostgreSQL query returned unexpected result",
                detail=target,
            )

        except Exception as e:
            return DependencyCheck.unhealthy(
                self.name,
                error_message=f"PostgreSQL connection failed: {e}",
                detail="Failed to connect to database",
            )

        finally:
            if conn is not None:
                await conn.close()


__all__ = [
    "PostgresProbe",
]
