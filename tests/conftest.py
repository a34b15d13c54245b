"""
Pytest configuration for HFTools.

Provides fixtures for:
- In-memory executors (empty and seeded with the sample data)
- Sample entities
- Database connection management for integration tests
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import psycopg
import pytest

from hftools.config import Settings, get_settings
from hftools.infrastructure.memory import InMemoryExecutor
from hftools.model.entities import FXInstrument2
from hftools.model.schema import lookup
from hftools.seeding import SEEDED_TYPES, seeded_memory_executor

INTEGRATION_TABLES = ("trades", "FXInstrument2", "fxinstruments", "users")


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Drop cached settings so monkeypatched env vars take effect per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fill() -> FXInstrument2:
    """A fully populated FXInstrument2 entity."""
    return FXInstrument2(
        id=7,
        user_id=3,
        instrument_id=1,
        side="BUY",
        quantity=100000.0,
        price=1.085,
        timestamp=datetime(2024, 1, 28, 10, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def memory_executor() -> InMemoryExecutor:
    """Executor with an empty table for every seeded entity type."""
    executor = InMemoryExecutor()
    for entity_type in SEEDED_TYPES:
        schema = lookup(entity_type)
        executor.create_table(schema.table_name, primary_key=schema.primary_key)
    return executor


@pytest.fixture
def seeded_executor() -> InMemoryExecutor:
    """Executor holding the sample users, instruments, trades and fills."""
    return seeded_memory_executor()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "hftools_db"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the tables of db/init.sql exist.
    """
    init_sql_path = Path(__file__).parent.parent / "db" / "init.sql"
    with db_connection.cursor() as cur:
        cur.execute(init_sql_path.read_text(encoding="utf-8"))
    db_connection.commit()
    return True


@pytest.fixture(scope="function")
def clean_tables(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty every mapped table before and after each test function.
    """

    def _truncate() -> None:
        with db_connection.cursor() as cur:
            cur.execute(f"TRUNCATE TABLE {', '.join(INTEGRATION_TABLES)} CASCADE;")
        db_connection.commit()

    _truncate()
    yield
    _truncate()
