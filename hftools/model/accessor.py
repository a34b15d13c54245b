"""
Field access for schema-driven code.

The codec, SQL binder and repository iterate a schema's columns without
knowing the concrete entity layout; they read and write fields only through
`get_value` / `set_value`, which enforce the column's scalar kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from hftools.errors import TypeMismatchError
from hftools.model.values import FieldValue

if TYPE_CHECKING:
    from hftools.model.schema import Column


@runtime_checkable
class FieldAccessor(Protocol):
    """Raw read/write of one field on an entity instance."""

    def read(self, entity: Any) -> Any:
        ...

    def write(self, entity: Any, raw: Any) -> None:
        ...


@dataclass(frozen=True)
class AttributeAccessor:
    """Binds a column to a plain attribute of the entity."""

    attribute: str

    def read(self, entity: Any) -> Any:
        try:
            return getattr(entity, self.attribute)
        except AttributeError as exc:
            raise TypeMismatchError(
                f"{type(entity).__name__} has no attribute '{self.attribute}'"
            ) from exc

    def write(self, entity: Any, raw: Any) -> None:
        try:
            setattr(entity, self.attribute, raw)
        except (AttributeError, ValueError) as exc:
            raise TypeMismatchError(
                f"cannot write attribute '{self.attribute}' of {type(entity).__name__}: {exc}"
            ) from exc


def get_value(entity: Any, column: Column) -> FieldValue:
    """
    Read `column` from `entity` as a tagged value.

    Raises TypeMismatchError when the stored attribute does not hold a value
    of the column's kind.
    """
    raw = column.accessor.read(entity)
    try:
        return FieldValue(column.kind, raw)
    except TypeMismatchError as exc:
        raise TypeMismatchError(
            f"{type(entity).__name__}.{column.name}: {exc}"
        ) from exc


def set_value(entity: Any, column: Column, value: FieldValue) -> None:
    """
    Write a tagged value into `column` of `entity`.

    The tag must equal the column's kind exactly; no coercion happens here.
    """
    if not isinstance(value, FieldValue):
        raise TypeMismatchError(
            f"{column.name}: expected FieldValue, got {type(value).__name__}"
        )
    if value.kind is not column.kind:
        raise TypeMismatchError(
            f"{column.name}: column is {column.kind.value}, value is {value.kind.value}"
        )
    column.accessor.write(entity, value.value)


__all__ = ["AttributeAccessor", "FieldAccessor", "get_value", "set_value"]
