"""
Model package for HFTools.

Exports scalar kinds, field values, column descriptors and the schema
registry. Concrete entities live in `hftools.model.entities`.
"""

from hftools.model.accessor import AttributeAccessor, FieldAccessor, get_value, set_value
from hftools.model.schema import (
    Column,
    EntitySchema,
    SchemaRegistry,
    column,
    entity_schema,
    lookup,
    register,
    registry,
)
from hftools.model.values import FieldValue, ScalarKind

__all__ = [
    "AttributeAccessor",
    "Column",
    "EntitySchema",
    "FieldAccessor",
    "FieldValue",
    "ScalarKind",
    "SchemaRegistry",
    "column",
    "entity_schema",
    "get_value",
    "lookup",
    "register",
    "registry",
    "set_value",
]
