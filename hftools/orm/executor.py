"""
Database executor contract consumed by the repository.

Concrete executors (in-memory, PostgreSQL) live in `hftools.infrastructure`.
They receive SQL with `$n` placeholders plus a list of FieldValue parameters,
and are responsible for connection handling, transactions, placeholder
translation and wrapping driver failures into ExecutionError.
"""

from __future__ import annotations

import abc
from typing import Any, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from hftools.model.values import FieldValue

Row = Mapping[str, Any]
Params = Sequence[FieldValue]


@runtime_checkable
class Executor(Protocol):
    """Prepared-statement interface the repository calls through."""

    def query_one(self, sql: str, params: Params) -> Optional[Row]:
        """Return the first row of the result, or None when it is empty."""
        ...

    def query_many(self, sql: str, params: Params) -> List[Row]:
        """Return every row of the result."""
        ...

    def execute(self, sql: str, params: Params) -> int:
        """Run a statement and return the affected row count."""
        ...


class AbstractExecutor(abc.ABC):
    """
    Optional ABC helper for class-based executors.

    Adds `close()` and context-manager support on top of the contract.
    """

    @abc.abstractmethod
    def query_one(self, sql: str, params: Params) -> Optional[Row]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def query_many(self, sql: str, params: Params) -> List[Row]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def execute(self, sql: str, params: Params) -> int:  # pragma: no cover
        raise NotImplementedError

    def close(self) -> None:
        """Release resources held by the executor."""

    def __enter__(self) -> "AbstractExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["AbstractExecutor", "Executor", "Params", "Row"]
