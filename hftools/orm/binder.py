"""
Parameter binders mirroring the placeholder order of `hftools.orm.sql`.
"""

from __future__ import annotations

from typing import Any, List

from hftools.model.accessor import get_value
from hftools.model.schema import EntitySchema, lookup
from hftools.model.values import FieldValue


def insert_params(entity: Any) -> List[FieldValue]:
    schema = lookup(type(entity))
    return [get_value(entity, col) for col in schema.columns]


def update_params(entity: Any) -> List[FieldValue]:
    """Non-key columns in declared order, then the primary key."""
    schema = lookup(type(entity))
    columns = schema.non_key_columns or (schema.primary_column,)
    params = [get_value(entity, col) for col in columns]
    params.append(get_value(entity, schema.primary_column))
    return params


def delete_params(entity: Any) -> List[FieldValue]:
    schema = lookup(type(entity))
    return [get_value(entity, schema.primary_column)]


def id_params(schema: EntitySchema, entity_id: Any) -> List[FieldValue]:
    """Bind a raw primary-key value; raises TypeMismatchError if it does not fit."""
    return [FieldValue(schema.primary_column.kind, entity_id)]


__all__ = ["delete_params", "id_params", "insert_params", "update_params"]
