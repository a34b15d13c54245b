"""
JSON codec driven by entity schemas.

`to_json` emits one flat object per entity with keys in declared column order.
`from_json` fills a default-constructed entity from a JSON object, coercing
loosely typed values (numbers as strings, Decimals, ISO timestamps) to each
column's scalar kind. `from_row` does the same for executor rows after
checking they carry exactly the schema's columns.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Type, TypeVar

from hftools.errors import (
    ColumnCountMismatchError,
    MissingFieldError,
    SchemaDefinitionError,
    TypeMismatchError,
)
from hftools.model.accessor import get_value, set_value
from hftools.model.schema import Column, EntitySchema, lookup
from hftools.model.values import FieldValue, ScalarKind, parse_timestamp

E = TypeVar("E")


def _coerce_int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError("booleans are not integers")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, (float, Decimal)):
        if raw != raw or raw in (float("inf"), float("-inf")) or raw != int(raw):
            raise ValueError(f"{raw!r} is not integral")
        return int(raw)
    if isinstance(raw, str):
        return int(raw.strip())
    raise ValueError(f"cannot read {type(raw).__name__} as int")


def _coerce_float(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValueError("booleans are not floats")
    if isinstance(raw, (int, float, Decimal)):
        return float(raw)
    if isinstance(raw, str):
        return float(Decimal(raw.strip()))
    raise ValueError(f"cannot read {type(raw).__name__} as float")


def _coerce_string(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    raise ValueError(f"cannot read {type(raw).__name__} as string")


def _coerce_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str):
        return parse_timestamp(raw)
    raise ValueError(f"cannot read {type(raw).__name__} as timestamp")


_COERCERS = {
    ScalarKind.INT: _coerce_int,
    ScalarKind.FLOAT: _coerce_float,
    ScalarKind.STRING: _coerce_string,
    ScalarKind.TIMESTAMP: _coerce_timestamp,
}


def coerce(column: Column, raw: Any) -> FieldValue:
    """Convert a loosely typed JSON/row value into the column's FieldValue."""
    try:
        return FieldValue(column.kind, _COERCERS[column.kind](raw))
    except (ValueError, InvalidOperation, OverflowError, TypeMismatchError) as exc:
        raise TypeMismatchError(
            f"column '{column.name}' ({column.kind.value}): cannot use {raw!r}: {exc}"
        ) from exc


def _new_instance(schema: EntitySchema) -> Any:
    try:
        return schema.entity_type()
    except TypeError as exc:
        raise SchemaDefinitionError(
            f"{schema.entity_type.__name__} cannot be default-constructed: {exc}"
        ) from exc


def to_json(entity: Any) -> Dict[str, Any]:
    schema = lookup(type(entity))
    return {col.name: get_value(entity, col).to_json() for col in schema.columns}


def from_json(entity_type: Type[E], data: Mapping[str, Any], strict: bool = False) -> E:
    """
    Build an entity of `entity_type` from a JSON object.

    Absent or null keys leave the field at its default unless `strict` is set,
    in which case an absent key raises MissingFieldError. Present values that
    cannot be coerced raise TypeMismatchError.
    """
    if not isinstance(data, Mapping):
        raise TypeMismatchError(
            f"expected a JSON object for {entity_type.__name__}, got {type(data).__name__}"
        )
    schema = lookup(entity_type)
    entity = _new_instance(schema)
    for col in schema.columns:
        if col.name not in data:
            if strict:
                raise MissingFieldError(f"{schema.table_name}: missing key '{col.name}'")
            continue
        raw = data[col.name]
        if raw is None:
            continue
        set_value(entity, col, coerce(col, raw))
    return entity


def _align_row(schema: EntitySchema, row: Mapping[str, Any]) -> Dict[str, Any]:
    expected = schema.column_names
    if len(row) != len(expected):
        raise ColumnCountMismatchError(
            f"{schema.table_name}: row has {len(row)} columns, schema has {len(expected)}"
        )
    folded = {str(key).lower(): key for key in row}
    aligned: Dict[str, Any] = {}
    for name in expected:
        if name in row:
            aligned[name] = row[name]
        elif name.lower() in folded:
            aligned[name] = row[folded[name.lower()]]
        else:
            raise ColumnCountMismatchError(
                f"{schema.table_name}: row lacks column '{name}' (got {sorted(map(str, row))})"
            )
    return aligned


def from_row(entity_type: Type[E], row: Mapping[str, Any]) -> E:
    """Decode an executor row; its key set must match the schema's columns."""
    schema = lookup(entity_type)
    return from_json(entity_type, _align_row(schema, row))


def from_json_list(entity_type: Type[E], items: Iterable[Mapping[str, Any]]) -> List[E]:
    if isinstance(items, (Mapping, str, bytes)):
        raise TypeMismatchError(f"expected a JSON array of {entity_type.__name__} objects")
    return [from_json(entity_type, item) for item in items]


def dumps(entity: Any, indent: int | None = None) -> str:
    return json.dumps(to_json(entity), indent=indent, allow_nan=False)


def loads(entity_type: Type[E], text: str, strict: bool = False) -> E:
    return from_json(entity_type, json.loads(text), strict=strict)


__all__ = [
    "coerce",
    "dumps",
    "from_json",
    "from_json_list",
    "from_row",
    "loads",
    "to_json",
]
