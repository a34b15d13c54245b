from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

import typer
from rich.console import Console

from hftools.config import get_settings
from hftools.errors import OrmError
from hftools.infrastructure.postgres import PostgresExecutor, build_dsn, check_connection
from hftools.model.entities import FXInstrument2
from hftools.model.schema import EntitySchema, lookup, registry
from hftools.model.samples import sample_fills
from hftools.orm import codec
from hftools.orm.executor import AbstractExecutor
from hftools.orm.repository import Repository
from hftools.reporter import print_entities, statements_table
from hftools.seeding import seeded_memory_executor
from hftools.utils.logging import configure_logging

app = typer.Typer(help="HFTools schema-driven ORM CLI.")
console = Console()

BACKENDS = ("memory", "postgres")


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@contextmanager
def _errors() -> Generator[None, None, None]:
    try:
        yield
    except OrmError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _schema_for(table: str) -> EntitySchema:
    return lookup(registry.find_by_table(table))


def _open_executor(backend: str) -> AbstractExecutor:
    if backend == "memory":
        return seeded_memory_executor()
    if backend == "postgres":
        return PostgresExecutor()
    raise typer.BadParameter(f"unknown backend '{backend}' (choose from {', '.join(BACKENDS)})")


@app.command()
def info() -> None:
    """
    Show effective configuration values and registered tables.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) "
        f"strict_affected_rows={settings.orm_strict_affected_rows}"
    )
    tables = sorted(lookup(t).table_name for t in registry.registered_types())
    typer.echo("Tables: " + ", ".join(tables))


@app.command("sql")
def show_sql(
    table: str = typer.Argument(..., help="Registered table name (e.g. trades, FXInstrument2)."),
    params: bool = typer.Option(
        False, "--params", "-p", help="Also show parameters bound from a default entity."
    ),
) -> None:
    """
    Print the statements generated for a table.
    """
    with _errors():
        schema = _schema_for(table)
        sample = schema.entity_type() if params else None
        console.print(statements_table(schema, sample))


@app.command("load-json")
def load_json(
    path: Path = typer.Argument(..., help="JSON file holding an array of objects."),
    entity: Optional[str] = typer.Option(
        None,
        "--entity",
        "-e",
        help="Table to decode into; inferred from the file name when omitted.",
    ),
) -> None:
    """
    Load a JSON file and display the decoded entities.
    """
    with _errors():
        table = entity or _infer_table(path)
        schema = _schema_for(table)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            typer.secho(f"Error: could not open {path}: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc
        except json.JSONDecodeError as exc:
            typer.secho(f"Error: failed to parse {path}: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc
        entities = codec.from_json_list(schema.entity_type, payload)
        print_entities(schema, entities, console=console)


def _infer_table(path: Path) -> str:
    stem = path.stem.lower()
    for entity_type in registry.registered_types():
        table = lookup(entity_type).table_name
        if table.lower() in stem:
            return table
    raise typer.BadParameter(f"cannot infer the entity of '{path.name}'; pass --entity")


@app.command("list")
def list_rows(
    table: str = typer.Argument(..., help="Registered table name."),
    backend: str = typer.Option("memory", "--backend", "-b", help="memory or postgres."),
) -> None:
    """
    Fetch every row of a table through the generic repository.
    """
    with _errors():
        schema = _schema_for(table)
        with _open_executor(backend) as executor:
            entities = Repository(schema.entity_type, executor).get_all()
        print_entities(schema, entities, console=console)


@app.command("get")
def get_row(
    table: str = typer.Argument(..., help="Registered table name."),
    entity_id: str = typer.Argument(..., help="Primary-key value."),
    backend: str = typer.Option("memory", "--backend", "-b", help="memory or postgres."),
) -> None:
    """
    Fetch one row by primary key and print it as JSON.
    """
    with _errors():
        schema = _schema_for(table)
        key = codec.coerce(schema.primary_column, entity_id).value
        with _open_executor(backend) as executor:
            entity = Repository(schema.entity_type, executor).get_by_id(key)
        typer.echo(codec.dumps(entity, indent=2))


@app.command()
def ping() -> None:
    """
    Check that the configured PostgreSQL server is reachable.
    """
    settings = get_settings()
    with _errors():
        version = check_connection(build_dsn(settings))
    typer.echo(f"PostgreSQL reachable at {settings.db_host}:{settings.db_port} (server {version})")


@app.command()
def demo() -> None:
    """
    Walk through JSON conversion and repository CRUD on the in-memory backend.
    """
    with _errors():
        _demo()


def _demo() -> None:
    schema = lookup(FXInstrument2)
    fill = sample_fills()[0]

    console.rule("JSON serialization")
    document = fill.to_json()
    typer.echo(json.dumps(document, indent=2))
    decoded = FXInstrument2.from_json(document)
    typer.echo(f"Round trip equal: {decoded == fill}")

    console.rule("Generated SQL")
    console.print(statements_table(schema, fill))

    console.rule("Repository CRUD (memory backend)")
    with seeded_memory_executor() as executor:
        repo: Repository[Any] = Repository(FXInstrument2, executor)
        print_entities(schema, repo.get_all(), console=console)

        created = FXInstrument2(
            id=100, user_id=2, instrument_id=9, side="BUY", quantity=25000.0, price=162.41,
            timestamp=fill.timestamp,
        )
        repo.insert(created)
        typer.echo(f"Inserted id={created.id}: {codec.dumps(repo.get_by_id(100))}")

        created.price = 162.45
        repo.update(created)
        typer.echo(f"Updated id={created.id}: price={repo.get_by_id(100).price}")

        repo.remove(created)
        typer.echo(f"Removed id={created.id}; {len(repo.get_all())} rows remain")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
