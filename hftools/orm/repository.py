"""
Generic CRUD repository over a registered entity type.

Each call builds the SQL and parameters from the entity schema, runs them
through the bound executor and, for reads, decodes rows with the codec:

    repo = Repository(Trade, executor)
    trade = repo.get_by_id(1)
    trade.price = 1.0852
    repo.update(trade)

The repository keeps no state between calls besides the executor and the
resolved schema.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from hftools.config import get_settings
from hftools.errors import ExecutionError, NotFoundError, OrmError, TypeMismatchError
from hftools.model.schema import EntitySchema, lookup
from hftools.orm import binder, sql
from hftools.orm.codec import from_row
from hftools.orm.executor import Executor, Params
from hftools.utils.logging import get_logger

log = get_logger(__name__)

E = TypeVar("E")
R = TypeVar("R")


class Repository(Generic[E]):
    """
    CRUD over one entity type.

    Parameters
    ----------
    entity_type : type
        Registered entity type; raises SchemaNotFoundError otherwise.
    executor : Executor
        Object implementing query_one / query_many / execute.
    strict : bool | None
        When true, an update or remove that affects no row raises
        NotFoundError. Defaults to settings.orm_strict_affected_rows.
    """

    def __init__(
        self, entity_type: Type[E], executor: Executor, strict: Optional[bool] = None
    ) -> None:
        self.entity_type = entity_type
        self.schema: EntitySchema = lookup(entity_type)
        self.executor = executor
        self.strict = get_settings().orm_strict_affected_rows if strict is None else strict

    def _call(
        self, operation: str, fn: Callable[[str, Params], R], statement: str, params: Params
    ) -> R:
        log.debug(
            f"[{operation.upper()}] {self.schema.table_name}",
            extra={"table": self.schema.table_name, "sql": statement, "params": len(params)},
        )
        try:
            return fn(statement, params)
        except OrmError:
            raise
        except Exception as exc:
            raise ExecutionError(
                f"{operation} on {self.schema.table_name} failed: {exc}"
            ) from exc

    def _check_entity(self, entity: Any) -> None:
        if type(entity) is not self.entity_type:
            raise TypeMismatchError(
                f"Repository[{self.entity_type.__name__}] cannot store {type(entity).__name__}"
            )

    def _check_affected(self, operation: str, entity: Any, affected: int) -> None:
        if self.strict and affected == 0:
            key = binder.delete_params(entity)[0].value
            raise NotFoundError(
                f"{operation} on {self.schema.table_name}: no row with "
                f"{self.schema.primary_key}={key!r}"
            )

    def get_by_id(self, entity_id: Any) -> E:
        statement = sql.build_select_by_id(self.schema)
        params = binder.id_params(self.schema, entity_id)
        row = self._call("get_by_id", self.executor.query_one, statement, params)
        if not row:
            raise NotFoundError(
                f"{self.schema.table_name}: no row with {self.schema.primary_key}={entity_id!r}"
            )
        return from_row(self.entity_type, row)

    def get_all(self) -> List[E]:
        statement = sql.build_select_all(self.schema)
        rows = self._call("get_all", self.executor.query_many, statement, [])
        return [from_row(self.entity_type, row) for row in rows]

    def insert(self, entity: E) -> int:
        self._check_entity(entity)
        statement = sql.build_insert(self.schema)
        return self._call("insert", self.executor.execute, statement, binder.insert_params(entity))

    def update(self, entity: E) -> int:
        self._check_entity(entity)
        statement = sql.build_update(self.schema)
        affected = self._call("update", self.executor.execute, statement, binder.update_params(entity))
        self._check_affected("update", entity, affected)
        return affected

    def remove(self, entity: E) -> int:
        self._check_entity(entity)
        statement = sql.build_delete(self.schema)
        affected = self._call("remove", self.executor.execute, statement, binder.delete_params(entity))
        self._check_affected("remove", entity, affected)
        return affected


__all__ = ["Repository"]
