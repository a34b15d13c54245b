from __future__ import annotations

import pytest

from hftools.errors import SchemaDefinitionError, SchemaNotFoundError
from hftools.model.accessor import AttributeAccessor
from hftools.model.entities import FXInstrument2, Trade
from hftools.model.schema import (
    Column,
    SchemaRegistry,
    column,
    entity_schema,
    lookup,
    registry,
)
from hftools.model.values import ScalarKind

FX_COLUMNS = ["id", "userId", "instrumentId", "side", "quantity", "price", "timestamp"]


class _Quote:
    def __init__(self) -> None:
        self.id = 0
        self.bid = 0.0


def _quote_columns() -> list[Column]:
    return [column("id", ScalarKind.INT), column("bid", ScalarKind.FLOAT)]


def test_fx_schema_keeps_declared_column_order():
    schema = lookup(FXInstrument2)
    assert schema.table_name == "FXInstrument2"
    assert schema.primary_key == "id"
    assert schema.column_names == FX_COLUMNS
    assert schema.primary_column.kind is ScalarKind.INT
    assert [c.name for c in schema.non_key_columns] == FX_COLUMNS[1:]


def test_column_binds_to_attribute_name():
    col = column("userId", ScalarKind.INT, "user_id")
    assert col.accessor == AttributeAccessor("user_id")
    assert column("side", ScalarKind.STRING).accessor == AttributeAccessor("side")


def test_register_rejects_empty_columns():
    with pytest.raises(SchemaDefinitionError, match="at least one column"):
        SchemaRegistry().register(_Quote, "quotes", "id", [])


def test_register_rejects_unknown_primary_key():
    with pytest.raises(SchemaDefinitionError, match="primary key"):
        SchemaRegistry().register(_Quote, "quotes", "quote_id", _quote_columns())


def test_register_rejects_duplicate_columns():
    columns = _quote_columns() + [column("bid", ScalarKind.FLOAT)]
    with pytest.raises(SchemaDefinitionError, match="duplicate"):
        SchemaRegistry().register(_Quote, "quotes", "id", columns)


@pytest.mark.parametrize("table", ["", "quotes; DROP TABLE users", "1quotes", "a.b.c"])
def test_register_rejects_invalid_table_names(table: str):
    with pytest.raises(SchemaDefinitionError, match="table name"):
        SchemaRegistry().register(_Quote, table, "id", _quote_columns())


def test_register_rejects_invalid_column_names():
    columns = [column("id", ScalarKind.INT), column("bid price", ScalarKind.FLOAT)]
    with pytest.raises(SchemaDefinitionError, match="column name"):
        SchemaRegistry().register(_Quote, "quotes", "id", columns)


def test_register_accepts_schema_qualified_table():
    schema = SchemaRegistry().register(_Quote, "public.quotes", "id", _quote_columns())
    assert schema.table_name == "public.quotes"


def test_registering_equal_schema_twice_is_idempotent():
    reg = SchemaRegistry()
    first = reg.register(_Quote, "quotes", "id", _quote_columns())
    second = reg.register(_Quote, "quotes", "id", _quote_columns())
    assert first is second


def test_registering_a_different_schema_is_rejected():
    reg = SchemaRegistry()
    reg.register(_Quote, "quotes", "id", _quote_columns())
    with pytest.raises(SchemaDefinitionError, match="already registered"):
        reg.register(_Quote, "quotes_v2", "id", _quote_columns())


def test_lookup_of_unregistered_type_fails():
    with pytest.raises(SchemaNotFoundError):
        SchemaRegistry().lookup(_Quote)
    with pytest.raises(SchemaNotFoundError):
        lookup(_Quote)


def test_lookup_does_not_fall_back_to_base_class():
    class _DerivedTrade(Trade):
        pass

    with pytest.raises(SchemaNotFoundError):
        lookup(_DerivedTrade)


def test_schema_not_found_is_a_lookup_error():
    with pytest.raises(LookupError):
        SchemaRegistry().lookup(dict)


def test_find_by_table_is_case_insensitive():
    assert registry.find_by_table("fxinstrument2") is FXInstrument2
    assert registry.find_by_table("TRADES") is Trade
    with pytest.raises(SchemaNotFoundError):
        registry.find_by_table("orders")


def test_entity_schema_decorator_registers_the_class():
    @entity_schema("ticks", "id", [column("id", ScalarKind.INT), column("bid", ScalarKind.FLOAT)])
    class _Tick:
        def __init__(self) -> None:
            self.id = 0
            self.bid = 0.0

    assert registry.is_registered(_Tick)
    assert lookup(_Tick).column_names == ["id", "bid"]


def test_schema_column_lookup_by_name():
    schema = lookup(Trade)
    assert schema.column("price").kind is ScalarKind.FLOAT
    with pytest.raises(KeyError):
        schema.column("fee")
