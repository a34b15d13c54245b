"""
Sample-data seeding through repositories.

Used by the CLI `memory` backend, the demo and `scripts/seed_data.py`.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from hftools.infrastructure.memory import InMemoryExecutor
from hftools.model.entities import FXInstrument, FXInstrument2, Trade, User
from hftools.model.samples import sample_fills, sample_instruments, sample_trades, sample_users
from hftools.model.schema import lookup
from hftools.orm.executor import Executor
from hftools.orm.repository import Repository
from hftools.utils.logging import get_logger

log = get_logger(__name__)

SEEDED_TYPES = (User, FXInstrument, Trade, FXInstrument2)


def _datasets() -> List[Tuple[type, Iterable]]:
    return [
        (User, sample_users()),
        (FXInstrument, sample_instruments()),
        (Trade, sample_trades()),
        (FXInstrument2, sample_fills()),
    ]


def seed(executor: Executor) -> Dict[str, int]:
    """Insert every sample entity; returns inserted row counts per table."""
    counts: Dict[str, int] = {}
    for entity_type, entities in _datasets():
        repo = Repository(entity_type, executor)
        inserted = sum(repo.insert(entity) for entity in entities)
        counts[repo.schema.table_name] = inserted
        log.info(
            f"[SEED] {repo.schema.table_name}",
            extra={"table": repo.schema.table_name, "rows": inserted},
        )
    return counts


def seeded_memory_executor() -> InMemoryExecutor:
    """In-memory executor with one table per seeded type, filled with samples."""
    executor = InMemoryExecutor()
    for entity_type in SEEDED_TYPES:
        schema = lookup(entity_type)
        executor.create_table(schema.table_name, primary_key=schema.primary_key)
    seed(executor)
    return executor


__all__ = ["SEEDED_TYPES", "seed", "seeded_memory_executor"]
