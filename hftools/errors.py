"""
Error taxonomy for the HFTools ORM.

Every failure raised by the core derives from `OrmError`, so callers can catch
the whole family at once or a specific subclass. The core never retries and
never recovers silently; resilience belongs to the executor layer.
"""

from __future__ import annotations


class OrmError(Exception):
    """Base class for all ORM failures."""


class SchemaDefinitionError(OrmError):
    """A schema registration was rejected (empty columns, bad primary key, ...)."""


class SchemaNotFoundError(OrmError, LookupError):
    """No schema is registered for the requested entity type or table."""


class TypeMismatchError(OrmError, TypeError):
    """A value does not match (or cannot be coerced to) a column's scalar kind."""


class MissingFieldError(OrmError):
    """A strict decode found a column key absent from the JSON object."""


class ColumnCountMismatchError(OrmError):
    """A row returned by an executor does not carry the schema's column set."""


class NotFoundError(OrmError, LookupError):
    """No row matched the requested primary key."""


class ExecutionError(OrmError):
    """Wraps any failure reported by a database executor."""


__all__ = [
    "OrmError",
    "SchemaDefinitionError",
    "SchemaNotFoundError",
    "TypeMismatchError",
    "MissingFieldError",
    "ColumnCountMismatchError",
    "NotFoundError",
    "ExecutionError",
]
