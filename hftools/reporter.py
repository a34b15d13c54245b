from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table

from hftools.model.schema import EntitySchema
from hftools.model.values import FieldValue
from hftools.orm import binder, codec, sql

_KIND_STYLES = {
    "int": "magenta",
    "float": "green",
    "string": "cyan",
    "timestamp": "yellow",
}


def entities_table(
    schema: EntitySchema, entities: Sequence[Any], title: Optional[str] = None
) -> Table:
    """
    Build a rich table with one column per schema column, in declared order.
    """
    table = Table(
        title=title or f"{schema.table_name} ({len(entities)} rows)",
        box=box.ROUNDED,
    )
    for col in schema.columns:
        justify = "right" if col.kind.value in ("int", "float") else "left"
        style = _KIND_STYLES[col.kind.value]
        if col.name == schema.primary_key:
            style = f"bold {style}"
        table.add_column(col.name, justify=justify, style=style, no_wrap=True)

    for entity in entities:
        row = codec.to_json(entity)
        table.add_row(*(str(row[name]) for name in schema.column_names))
    return table


def statements_table(schema: EntitySchema, sample: Optional[Any] = None) -> Table:
    """
    Generated SQL for a schema and, given a sample entity, the bound parameters.
    """
    table = Table(title=f"Statements for {schema.table_name}", box=box.ROUNDED)
    table.add_column("Operation", style="cyan", no_wrap=True)
    table.add_column("SQL", style="green")
    if sample is not None:
        table.add_column("Parameters", style="yellow")

    rows: List[Tuple[str, str, Optional[Callable[[Any], List[FieldValue]]]]] = [
        ("insert", sql.build_insert(schema), binder.insert_params),
        ("update", sql.build_update(schema), binder.update_params),
        ("delete", sql.build_delete(schema), binder.delete_params),
        ("select_by_id", sql.build_select_by_id(schema), None),
        ("select_all", sql.build_select_all(schema), None),
    ]
    for operation, statement, bind in rows:
        if sample is None:
            table.add_row(operation, statement)
            continue
        params = ", ".join(repr(p.to_json()) for p in bind(sample)) if bind else ""
        table.add_row(operation, statement, params)
    return table


def print_entities(
    schema: EntitySchema, entities: Sequence[Any], console: Optional[Console] = None
) -> None:
    """Render entities as a rich table."""
    console = console or Console()
    if not entities:
        console.print(f"[yellow]No {schema.table_name} rows to display.[/yellow]")
        return
    console.print(entities_table(schema, entities))


__all__ = ["entities_table", "print_entities", "statements_table"]
