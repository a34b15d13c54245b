"""
Scalar kinds and the tagged `FieldValue` carried between entities, JSON and SQL.

Timestamps are always handled in UTC with second resolution, matching the
`YYYY-MM-DD HH:MM:SS` wire format used for JSON.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from hftools.errors import TypeMismatchError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class ScalarKind(str, enum.Enum):
    """Closed set of column kinds supported by the mapper."""

    INT = "int"
    FLOAT = "float"
    STRING = "string"
    TIMESTAMP = "timestamp"

    def default(self) -> Any:
        """Value a freshly constructed field of this kind holds."""
        return _DEFAULTS[self]


_DEFAULTS = {
    ScalarKind.INT: 0,
    ScalarKind.FLOAT: 0.0,
    ScalarKind.STRING: "",
    ScalarKind.TIMESTAMP: EPOCH,
}


def normalize_timestamp(value: datetime) -> datetime:
    """
    Convert to an aware UTC datetime truncated to whole seconds.

    Naive datetimes are taken to already be UTC (gmtime semantics).
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=0)


def format_timestamp(value: datetime) -> str:
    return normalize_timestamp(value).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """
    Parse the fixed wire format, falling back to ISO-8601.

    An empty string yields the epoch, the default of a timestamp field.
    Raises ValueError when the text is neither.
    """
    text = text.strip()
    if not text:
        return EPOCH
    try:
        parsed = datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError:
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    return normalize_timestamp(parsed)


def _check(kind: ScalarKind, value: Any) -> Any:
    if kind is ScalarKind.INT:
        if isinstance(value, int) and not isinstance(value, bool):
            if not _INT64_MIN <= value <= _INT64_MAX:
                raise TypeMismatchError(f"integer {value} does not fit in 64 bits")
            return value
    elif kind is ScalarKind.FLOAT:
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                value = float(value)
            except OverflowError:
                raise TypeMismatchError(f"integer {value} does not fit in a float") from None
        if isinstance(value, float):
            if not math.isfinite(value):
                raise TypeMismatchError(f"float values must be finite, got {value!r}")
            return value
    elif kind is ScalarKind.STRING:
        if isinstance(value, str):
            return value
    elif kind is ScalarKind.TIMESTAMP:
        if isinstance(value, datetime):
            return normalize_timestamp(value)
    raise TypeMismatchError(
        f"expected a {kind.value} value, got {type(value).__name__} {value!r}"
    )


@dataclass(frozen=True)
class FieldValue:
    """
    One scalar tagged with its kind.

    Construction validates the payload against the tag: `Int` rejects bools,
    `Float` widens plain ints and rejects NaN and infinities, `Timestamp` is
    normalised to UTC seconds.
    """

    kind: ScalarKind
    value: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ScalarKind(self.kind))
        object.__setattr__(self, "value", _check(self.kind, self.value))

    def to_json(self) -> Any:
        """JSON scalar for this value (timestamps as the fixed-format string)."""
        if self.kind is ScalarKind.TIMESTAMP:
            return format_timestamp(self.value)
        return self.value

    def to_param(self) -> Any:
        """Value handed to a database driver."""
        return self.value


__all__ = [
    "EPOCH",
    "TIMESTAMP_FORMAT",
    "FieldValue",
    "ScalarKind",
    "format_timestamp",
    "normalize_timestamp",
    "parse_timestamp",
]
