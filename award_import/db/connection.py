from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2
from psycopg2.pool import ThreadedConnectionPool

from ..config.loader import DatabaseConfig

"""PostgreSQL connection handling.

DSN resolution order:
    1. DATABASE_URL / PGDSN environment variables (a .env file is loaded by the CLI beforehand)
    2. Individual PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE variables
    3. The database section of config/import.yml (fallback for missing values)
"""

__all__ = [
    "resolve_dsn",
    "connection_pool",
]


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def connection_pool(db_cfg: DatabaseConfig, max_connections: int) -> Iterator[Any]:
    """Provide a thread-safe psycopg2 pool sized for the import workers.

    Raises psycopg2.Error when the first connection cannot be opened.
    All pooled connections are closed on exit.
    """
    pool = ThreadedConnectionPool(1, max(1, max_connections), resolve_dsn(db_cfg))
    try:
        yield pool
    finally:
        try:
            pool.closeall()
        except psycopg2.Error:  # pragma: no cover
            pass
