"""
HFTools - schema-driven object-relational mapping for trading data.

Given a statically declared column schema for an entity type, the package
derives without per-entity marshaling code:

- JSON conversion in both directions
- parameterized INSERT / UPDATE / DELETE / SELECT text with `$n` placeholders
- the ordered parameter lists bound to that text

A generic repository composes these over any executor implementing the
`Executor` contract (in-memory and PostgreSQL executors are included).
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from hftools.config import Settings, get_settings
from hftools.errors import (
    ColumnCountMismatchError,
    ExecutionError,
    MissingFieldError,
    NotFoundError,
    OrmError,
    SchemaDefinitionError,
    SchemaNotFoundError,
    TypeMismatchError,
)
from hftools.model.entities import Entity, FXInstrument, FXInstrument2, Serializable, Trade, User
from hftools.model.schema import Column, EntitySchema, column, entity_schema, lookup, register
from hftools.model.values import FieldValue, ScalarKind
from hftools.orm.executor import AbstractExecutor, Executor
from hftools.orm.repository import Repository
from hftools.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "OrmError",
    "SchemaDefinitionError",
    "SchemaNotFoundError",
    "TypeMismatchError",
    "MissingFieldError",
    "ColumnCountMismatchError",
    "NotFoundError",
    "ExecutionError",
    # Schema
    "Column",
    "EntitySchema",
    "FieldValue",
    "ScalarKind",
    "column",
    "entity_schema",
    "lookup",
    "register",
    # Entities
    "Entity",
    "Serializable",
    "FXInstrument",
    "FXInstrument2",
    "Trade",
    "User",
    # Execution
    "AbstractExecutor",
    "Executor",
    "Repository",
    # Logging
    "configure_logging",
    "get_logger",
]
