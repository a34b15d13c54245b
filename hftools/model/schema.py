"""
Column descriptors, entity schemas and the schema registry.

A schema is attached to an entity *type* once, at import time, and is
read-only afterwards. Column order is the single source of truth for JSON key
order, SQL placeholder order and parameter order.

Usage:
    from hftools.model.schema import column, entity_schema
    from hftools.model.values import ScalarKind

    @entity_schema("users", "id", [
        column("id", ScalarKind.INT),
        column("username", ScalarKind.STRING),
    ])
    class User(Entity):
        ...
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from hftools.errors import SchemaDefinitionError, SchemaNotFoundError
from hftools.model.accessor import AttributeAccessor, FieldAccessor
from hftools.model.values import ScalarKind
from hftools.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_TABLE_NAME = re.compile(r"^(?:[A-Za-z_][A-Za-z0-9_]*\.)?[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Column:
    """One named field binding of an entity type."""

    name: str
    kind: ScalarKind
    accessor: FieldAccessor


def column(name: str, kind: ScalarKind, attribute: Optional[str] = None) -> Column:
    """Build a column bound to `attribute` (defaults to the column name)."""
    return Column(name=name, kind=ScalarKind(kind), accessor=AttributeAccessor(attribute or name))


@dataclass(frozen=True)
class EntitySchema:
    """Table name, primary key and ordered columns of one entity type."""

    entity_type: type
    table_name: str
    primary_key: str
    columns: Tuple[Column, ...]

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    @property
    def primary_column(self) -> Column:
        return self.column(self.primary_key)

    @property
    def non_key_columns(self) -> Tuple[Column, ...]:
        return tuple(col for col in self.columns if col.name != self.primary_key)

    def column(self, name: str) -> Column:
        for col in self.columns:
            if col.name == name:
                return col
        raise KeyError(f"{self.table_name} has no column '{name}'")


def _validate(table_name: str, primary_key: str, columns: Tuple[Column, ...]) -> None:
    if not _TABLE_NAME.match(table_name or ""):
        raise SchemaDefinitionError(f"invalid table name {table_name!r}")
    if not columns:
        raise SchemaDefinitionError(f"{table_name}: at least one column is required")

    seen: set[str] = set()
    for col in columns:
        if not isinstance(col, Column):
            raise SchemaDefinitionError(f"{table_name}: {col!r} is not a Column")
        if not _IDENTIFIER.match(col.name or ""):
            raise SchemaDefinitionError(f"{table_name}: invalid column name {col.name!r}")
        if col.name in seen:
            raise SchemaDefinitionError(f"{table_name}: duplicate column '{col.name}'")
        seen.add(col.name)

    if primary_key not in seen:
        raise SchemaDefinitionError(
            f"{table_name}: primary key '{primary_key}' matches no column"
        )


class SchemaRegistry:
    """
    Holds exactly one immutable schema per entity type.

    Registering an equal schema twice is a no-op; registering a different
    schema for an already registered type raises SchemaDefinitionError.
    Lookups match the exact type, never a base class.
    """

    def __init__(self) -> None:
        self._schemas: Dict[type, EntitySchema] = {}
        self._lock = threading.Lock()

    def register(
        self,
        entity_type: type,
        table_name: str,
        primary_key: str,
        columns: Iterable[Column],
    ) -> EntitySchema:
        cols = tuple(columns)
        _validate(table_name, primary_key, cols)
        schema = EntitySchema(
            entity_type=entity_type,
            table_name=table_name,
            primary_key=primary_key,
            columns=cols,
        )
        with self._lock:
            existing = self._schemas.get(entity_type)
            if existing is not None:
                if existing == schema:
                    return existing
                raise SchemaDefinitionError(
                    f"{entity_type.__name__} is already registered with a different schema"
                )
            self._schemas[entity_type] = schema
        log.debug(
            "Schema registered",
            extra={"entity": entity_type.__name__, "table": table_name, "columns": len(cols)},
        )
        return schema

    def lookup(self, entity_type: type) -> EntitySchema:
        try:
            return self._schemas[entity_type]
        except KeyError:
            name = getattr(entity_type, "__name__", repr(entity_type))
            raise SchemaNotFoundError(f"no schema registered for {name}") from None

    def is_registered(self, entity_type: type) -> bool:
        return entity_type in self._schemas

    def find_by_table(self, table_name: str) -> type:
        wanted = table_name.lower()
        for entity_type, schema in self._schemas.items():
            if schema.table_name.lower() == wanted:
                return entity_type
        raise SchemaNotFoundError(f"no schema registered for table '{table_name}'")

    def registered_types(self) -> List[type]:
        return list(self._schemas)


registry = SchemaRegistry()


def register(
    entity_type: type, table_name: str, primary_key: str, columns: Iterable[Column]
) -> EntitySchema:
    """Register a schema in the process-wide registry."""
    return registry.register(entity_type, table_name, primary_key, columns)


def lookup(entity_type: type) -> EntitySchema:
    """Schema of `entity_type` from the process-wide registry."""
    return registry.lookup(entity_type)


def entity_schema(
    table_name: str, primary_key: str, columns: Iterable[Column]
) -> Callable[[Type[T]], Type[T]]:
    """Class decorator registering the decorated type."""

    def decorator(cls: Type[T]) -> Type[T]:
        register(cls, table_name, primary_key, columns)
        return cls

    return decorator


__all__ = [
    "Column",
    "EntitySchema",
    "SchemaRegistry",
    "column",
    "entity_schema",
    "lookup",
    "register",
    "registry",
]
