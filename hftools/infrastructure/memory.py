"""
In-memory executor.

Stands in for a database in the demo, the CLI `memory` backend and the tests.
It understands exactly the statement shapes produced by `hftools.orm.sql` and
stores every value as its JSON scalar, so reads return loosely typed rows the
way a real driver would.
"""

from __future__ import annotations

import re
import threading
from typing import Any, Dict, List, Optional

from hftools.errors import ExecutionError
from hftools.orm.executor import AbstractExecutor, Params, Row
from hftools.utils.logging import get_logger

log = get_logger(__name__)

_NAME = r"[A-Za-z_][A-Za-z0-9_.]*"
_INSERT = re.compile(rf"^INSERT INTO ({_NAME}) \((.+)\) VALUES \((.+)\)$", re.IGNORECASE)
_UPDATE = re.compile(rf"^UPDATE ({_NAME}) SET (.+) WHERE ({_NAME})=\$(\d+)$", re.IGNORECASE)
_DELETE = re.compile(rf"^DELETE FROM ({_NAME}) WHERE ({_NAME})=\$(\d+)$", re.IGNORECASE)
_SELECT = re.compile(
    rf"^SELECT \* FROM ({_NAME})(?: WHERE ({_NAME})=\$(\d+))?$", re.IGNORECASE
)
_ASSIGNMENT = re.compile(rf"^({_NAME})=\$(\d+)$")


class _Table:
    def __init__(self, name: str, primary_key: Optional[str]) -> None:
        self.name = name
        self.primary_key = primary_key
        self.rows: List[Dict[str, Any]] = []


class InMemoryExecutor(AbstractExecutor):
    """
    Dict-backed tables behind the executor contract.

    Tables must be created with `create_table` before use; inserting a
    duplicate primary key or touching an unknown table raises ExecutionError.
    """

    def __init__(self) -> None:
        self._tables: Dict[str, _Table] = {}
        self._lock = threading.Lock()

    def create_table(self, name: str, primary_key: Optional[str] = None) -> None:
        with self._lock:
            self._tables.setdefault(name.lower(), _Table(name, primary_key))

    def rows(self, table: str) -> List[Dict[str, Any]]:
        """Copy of the stored rows of `table`."""
        with self._lock:
            return [dict(row) for row in self._table(table).rows]

    def _table(self, name: str) -> _Table:
        try:
            return self._tables[name.lower()]
        except KeyError:
            raise ExecutionError(f'relation "{name}" does not exist') from None

    @staticmethod
    def _param(params: Params, index: str) -> Any:
        position = int(index)
        if not 1 <= position <= len(params):
            raise ExecutionError(f"placeholder ${position} has no parameter")
        return params[position - 1].to_json()

    @staticmethod
    def _matches(row: Dict[str, Any], column: str, value: Any) -> bool:
        if column not in row:
            raise ExecutionError(f'column "{column}" does not exist')
        return row[column] == value

    def query_one(self, sql: str, params: Params) -> Optional[Row]:
        rows = self.query_many(sql, params)
        return rows[0] if rows else None

    def query_many(self, sql: str, params: Params) -> List[Row]:
        log.debug("[MEMORY] query", extra={"sql": sql, "params": len(params)})
        match = _SELECT.match(sql.strip())
        if not match:
            raise ExecutionError(f"unsupported query: {sql}")
        name, key_column, key_index = match.groups()
        with self._lock:
            table = self._table(name)
            if key_column is None:
                return [dict(row) for row in table.rows]
            key = self._param(params, key_index)
            return [dict(row) for row in table.rows if self._matches(row, key_column, key)]

    def execute(self, sql: str, params: Params) -> int:
        log.debug("[MEMORY] execute", extra={"sql": sql, "params": len(params)})
        statement = sql.strip()
        with self._lock:
            match = _INSERT.match(statement)
            if match:
                return self._insert(*match.groups(), params=params)
            match = _UPDATE.match(statement)
            if match:
                return self._update(*match.groups(), params=params)
            match = _DELETE.match(statement)
            if match:
                return self._delete(*match.groups(), params=params)
        raise ExecutionError(f"unsupported statement: {sql}")

    def _insert(self, name: str, columns: str, values: str, params: Params) -> int:
        table = self._table(name)
        names = [c.strip() for c in columns.split(",")]
        markers = [v.strip() for v in values.split(",")]
        if len(names) != len(markers) or not all(m.startswith("$") for m in markers):
            raise ExecutionError(f"malformed INSERT into {name}")
        row = {col: self._param(params, marker[1:]) for col, marker in zip(names, markers)}
        pk = table.primary_key
        if pk is not None:
            if pk not in row:
                raise ExecutionError(f'null value in column "{pk}" of relation "{name}"')
            if any(existing.get(pk) == row[pk] for existing in table.rows):
                raise ExecutionError(
                    f'duplicate key value violates unique constraint "{table.name}_pkey"'
                )
        table.rows.append(row)
        return 1

    def _update(
        self, name: str, assignments: str, key_column: str, key_index: str, params: Params
    ) -> int:
        table = self._table(name)
        changes: Dict[str, Any] = {}
        for part in assignments.split(","):
            match = _ASSIGNMENT.match(part.strip())
            if not match:
                raise ExecutionError(f"malformed SET clause in UPDATE {name}")
            changes[match.group(1)] = self._param(params, match.group(2))
        key = self._param(params, key_index)
        affected = 0
        for row in table.rows:
            if self._matches(row, key_column, key):
                unknown = set(changes) - set(row)
                if unknown:
                    raise ExecutionError(f'column "{sorted(unknown)[0]}" does not exist')
                row.update(changes)
                affected += 1
        return affected

    def _delete(self, name: str, key_column: str, key_index: str, params: Params) -> int:
        table = self._table(name)
        key = self._param(params, key_index)
        kept = [row for row in table.rows if not self._matches(row, key_column, key)]
        affected = len(table.rows) - len(kept)
        table.rows = kept
        return affected


__all__ = ["InMemoryExecutor"]
