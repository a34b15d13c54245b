"""
PostgreSQL executor built on psycopg 3 and psycopg_pool.

Each call borrows one pooled connection for the duration of a single
statement. `pool.connection()` commits on success, rolls back on error and
returns the connection to the pool on every exit path; an exhausted pool
blocks the caller up to the configured timeout.

Includes a connection check with retry logic for transient failures using
tenacity.
"""

from __future__ import annotations

import threading
from typing import Any, List, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool, PoolTimeout
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from hftools.config import Settings, get_settings
from hftools.errors import ExecutionError
from hftools.infrastructure.placeholders import translate_placeholders
from hftools.orm.executor import AbstractExecutor, Params, Row
from hftools.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def check_connection(dsn: Optional[str] = None, attempts: Optional[int] = None) -> str:
    """
    Open a dedicated connection, run `SELECT 1` and return the server version.

    Retries with exponential backoff on transient connection errors.

    Raises
    ------
    ExecutionError
        If the server is still unreachable after all attempts.
    """
    settings = get_settings()
    target = dsn or build_dsn(settings)

    @retry(
        stop=stop_after_attempt(attempts or settings.db_connect_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
        reraise=True,
    )
    def _probe() -> str:
        with psycopg.connect(target, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                cur.fetchone()
            return str(conn.info.server_version)

    try:
        return _probe()
    except psycopg.Error as exc:
        raise ExecutionError(f"cannot connect to PostgreSQL: {exc}") from exc


class PostgresExecutor(AbstractExecutor):
    """
    Executor contract over a psycopg ConnectionPool.

    Parameters
    ----------
    dsn : str | None
        Connection string; defaults to one built from settings.
    min_size, max_size : int | None
        Pool bounds; default to settings.db_pool_min_size / db_pool_max_size.
    timeout : float | None
        Seconds a borrower waits on an exhausted pool.
    pool : ConnectionPool | None
        Pre-built pool. The executor takes ownership and closes it in `close()`.
    """

    def __init__(
        self,
        dsn: Optional[str] = None,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
        timeout: Optional[float] = None,
        pool: Optional[ConnectionPool] = None,
    ) -> None:
        settings = get_settings()
        self._dsn = dsn or build_dsn(settings)
        self.min_size = settings.db_pool_min_size if min_size is None else min_size
        self.max_size = settings.db_pool_max_size if max_size is None else max_size
        self.timeout = settings.db_pool_timeout_seconds if timeout is None else timeout
        self._pool_instance: Optional[ConnectionPool] = pool
        self._lock = threading.Lock()

    def _get_pool(self) -> ConnectionPool:
        with self._lock:
            if self._pool_instance is None:
                self._pool_instance = ConnectionPool(
                    conninfo=self._dsn,
                    min_size=self.min_size,
                    max_size=self.max_size,
                    timeout=self.timeout,
                    open=True,
                )
            return self._pool_instance

    def _run(self, sql: str, params: Params, fetch: str) -> Any:
        text, ordered = translate_placeholders(sql, params, style="pyformat")
        values = [p.to_param() for p in ordered]
        log.debug("[POSTGRES] statement", extra={"sql": text, "params": len(values)})
        try:
            with self._get_pool().connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(text, values)
                    if fetch == "one":
                        return cur.fetchone()
                    if fetch == "many":
                        return cur.fetchall()
                    return cur.rowcount
        except (psycopg.Error, PoolTimeout) as exc:
            log.warning("[POSTGRES] statement failed", extra={"sql": text, "error": str(exc)})
            raise ExecutionError(f"PostgreSQL error: {exc}") from exc

    def query_one(self, sql: str, params: Params) -> Optional[Row]:
        return self._run(sql, params, fetch="one")

    def query_many(self, sql: str, params: Params) -> List[Row]:
        return list(self._run(sql, params, fetch="many"))

    def execute(self, sql: str, params: Params) -> int:
        return max(self._run(sql, params, fetch="none"), 0)

    def close(self) -> None:
        with self._lock:
            if self._pool_instance is not None:
                try:
                    self._pool_instance.close()
                finally:
                    self._pool_instance = None


__all__ = ["PostgresExecutor", "build_dsn", "check_connection"]
