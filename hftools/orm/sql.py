"""
SQL statement builders.

Statements use PostgreSQL-style positional placeholders (`$1 ... $n`) and never
embed values. Columns are traversed in the schema's declared order, so the Nth
placeholder always matches the Nth value of the corresponding binder function
in `hftools.orm.binder`.
"""

from __future__ import annotations

from functools import lru_cache

from hftools.model.schema import EntitySchema


def _placeholder(index: int) -> str:
    return f"${index}"


@lru_cache(maxsize=None)
def build_insert(schema: EntitySchema) -> str:
    names = ", ".join(col.name for col in schema.columns)
    placeholders = ", ".join(_placeholder(i) for i in range(1, len(schema.columns) + 1))
    return f"INSERT INTO {schema.table_name} ({names}) VALUES ({placeholders})"


@lru_cache(maxsize=None)
def build_update(schema: EntitySchema) -> str:
    """
    UPDATE with every non-key column in order, then the key as last placeholder.

    A schema whose only column is the key yields `SET <pk>=$1 WHERE <pk>=$2`,
    which keeps the statement valid and the binder alignment intact.
    """
    columns = schema.non_key_columns or (schema.primary_column,)
    assignments = ", ".join(
        f"{col.name}={_placeholder(i)}" for i, col in enumerate(columns, start=1)
    )
    key_index = len(columns) + 1
    return (
        f"UPDATE {schema.table_name} SET {assignments} "
        f"WHERE {schema.primary_key}={_placeholder(key_index)}"
    )


@lru_cache(maxsize=None)
def build_delete(schema: EntitySchema) -> str:
    return f"DELETE FROM {schema.table_name} WHERE {schema.primary_key}={_placeholder(1)}"


@lru_cache(maxsize=None)
def build_select_by_id(schema: EntitySchema) -> str:
    return f"SELECT * FROM {schema.table_name} WHERE {schema.primary_key}={_placeholder(1)}"


@lru_cache(maxsize=None)
def build_select_all(schema: EntitySchema) -> str:
    return f"SELECT * FROM {schema.table_name}"


__all__ = [
    "build_delete",
    "build_insert",
    "build_select_all",
    "build_select_by_id",
    "build_update",
]
