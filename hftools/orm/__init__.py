"""
Schema-driven ORM engine: JSON codec, SQL builders, parameter binders,
executor contract and the generic repository.
"""

from hftools.orm.binder import delete_params, id_params, insert_params, update_params
from hftools.orm.codec import dumps, from_json, from_json_list, from_row, loads, to_json
from hftools.orm.executor import AbstractExecutor, Executor, Row
from hftools.orm.repository import Repository
from hftools.orm.sql import (
    build_delete,
    build_insert,
    build_select_all,
    build_select_by_id,
    build_update,
)

__all__ = [
    # Codec
    "dumps",
    "from_json",
    "from_json_list",
    "from_row",
    "loads",
    "to_json",
    # SQL builders
    "build_delete",
    "build_insert",
    "build_select_all",
    "build_select_by_id",
    "build_update",
    # Parameter binders
    "delete_params",
    "id_params",
    "insert_params",
    "update_params",
    # Execution
    "AbstractExecutor",
    "Executor",
    "Repository",
    "Row",
]
