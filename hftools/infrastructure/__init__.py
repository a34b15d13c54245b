"""
Infrastructure package for HFTools.

Executors implementing the ORM's executor contract: an in-memory store and a
pooled PostgreSQL backend, plus `$n` placeholder translation. Keep this layer
focused on I/O and resource management, decoupled from the ORM core.
"""

from hftools.infrastructure.memory import InMemoryExecutor
from hftools.infrastructure.placeholders import translate_placeholders
from hftools.infrastructure.postgres import PostgresExecutor, build_dsn, check_connection

__all__ = [
    "InMemoryExecutor",
    "PostgresExecutor",
    "build_dsn",
    "check_connection",
    "translate_placeholders",
]
