"""
Concrete entities of the trading domain and their schemas.

Entities are plain pydantic models with a default for every field, so the
codec can create an empty instance and fill it column by column. The schema is
attached to the class with `entity_schema`; instances carry no schema state.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, Mapping, Protocol, Type, TypeVar, runtime_checkable

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field

from hftools.model.schema import column, entity_schema
from hftools.model.values import EPOCH, ScalarKind, normalize_timestamp, parse_timestamp
from hftools.orm import codec

EntityT = TypeVar("EntityT", bound="Entity")


def _parse_text(value: Any) -> Any:
    return parse_timestamp(value) if isinstance(value, str) else value


# UTC, whole seconds; strings accepted in the JSON wire format or ISO-8601.
Timestamp = Annotated[datetime, BeforeValidator(_parse_text), AfterValidator(normalize_timestamp)]


@runtime_checkable
class Serializable(Protocol):
    """Capability for contexts that only need a JSON view of an object."""

    def to_json(self) -> Dict[str, Any]:
        ...


class Entity(BaseModel):
    """
    Base for schema-mapped records.

    `to_json` / `from_json` resolve the schema from the concrete class, never
    from this base. Assignments are validated, so a timestamp set after
    construction is normalised the same way as one passed to the constructor.
    """

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
    }

    def to_json(self) -> Dict[str, Any]:
        return codec.to_json(self)

    @classmethod
    def from_json(cls: Type[EntityT], data: Mapping[str, Any], strict: bool = False) -> EntityT:
        return codec.from_json(cls, data, strict=strict)


@entity_schema(
    "FXInstrument2",
    "id",
    [
        column("id", ScalarKind.INT),
        column("userId", ScalarKind.INT, "user_id"),
        column("instrumentId", ScalarKind.INT, "instrument_id"),
        column("side", ScalarKind.STRING),
        column("quantity", ScalarKind.FLOAT),
        column("price", ScalarKind.FLOAT),
        column("timestamp", ScalarKind.TIMESTAMP),
    ],
)
class FXInstrument2(Entity):
    """A fill on an FX instrument, keyed by camelCase columns."""

    id: int = 0
    user_id: int = 0
    instrument_id: int = 0
    side: str = Field("", description='"BUY" or "SELL".')
    quantity: float = 0.0
    price: float = 0.0
    timestamp: Timestamp = EPOCH


@entity_schema(
    "users",
    "id",
    [
        column("id", ScalarKind.INT),
        column("username", ScalarKind.STRING),
        column("email", ScalarKind.STRING),
        column("role", ScalarKind.STRING),
    ],
)
class User(Entity):
    id: int = 0
    username: str = ""
    email: str = ""
    role: str = Field("", description="TRADER, ADMIN, ANALYST or MANAGER.")


@entity_schema(
    "fxinstruments",
    "id",
    [
        column("id", ScalarKind.INT),
        column("symbol", ScalarKind.STRING),
        column("base_currency", ScalarKind.STRING),
        column("quote_currency", ScalarKind.STRING),
        column("tick_size", ScalarKind.FLOAT),
    ],
)
class FXInstrument(Entity):
    id: int = 0
    symbol: str = ""
    base_currency: str = ""
    quote_currency: str = ""
    tick_size: float = 0.0001


@entity_schema(
    "trades",
    "id",
    [
        column("id", ScalarKind.INT),
        column("user_id", ScalarKind.INT),
        column("instrument_id", ScalarKind.INT),
        column("side", ScalarKind.STRING),
        column("quantity", ScalarKind.FLOAT),
        column("price", ScalarKind.FLOAT),
        column("timestamp", ScalarKind.TIMESTAMP),
    ],
)
class Trade(Entity):
    id: int = 0
    user_id: int = 0
    instrument_id: int = 0
    side: str = ""
    quantity: float = 0.0
    price: float = 0.0
    timestamp: Timestamp = EPOCH


__all__ = [
    "Entity",
    "FXInstrument",
    "FXInstrument2",
    "Serializable",
    "Timestamp",
    "Trade",
    "User",
]
