"""
Sample data export and loading script for HFTools.

Writes the sample users, FX instruments and trades as JSON arrays (the format
`hftools load-json` reads) and inserts them into PostgreSQL through the
generic repository. Tables must exist already; see `db/init.sql`.
"""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from typing import Dict, List

import typer

from hftools.infrastructure.postgres import PostgresExecutor, build_dsn
from hftools.model.samples import sample_instruments, sample_trades, sample_users
from hftools.orm import codec
from hftools.seeding import seed
from hftools.utils.logging import configure_logging

app = typer.Typer(help="Export sample data as JSON and load it into Postgres.")


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn()


def _export_json(directory: Path) -> List[Path]:
    directory.mkdir(parents=True, exist_ok=True)
    datasets = {
        "users.json": sample_users(),
        "fxinstruments.json": sample_instruments(),
        "trades.json": sample_trades(),
    }
    written: List[Path] = []
    for filename, entities in datasets.items():
        path = directory / filename
        with path.open("w", encoding="utf-8") as f:
            json.dump([codec.to_json(e) for e in entities], f, indent=2)
        written.append(path)
    return written


def _load_into_db(dsn: str) -> Dict[str, int]:
    with PostgresExecutor(dsn=dsn, min_size=1, max_size=2) as executor:
        return seed(executor)


@app.command()
def main(
    export: Path | None = typer.Option(
        None,
        "--export",
        "-o",
        help="Directory to write users.json, fxinstruments.json and trades.json into.",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    no_load: bool = typer.Option(
        False,
        "--no-load",
        help="Only export JSON; skip loading into Postgres.",
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level."),
) -> None:
    """
    Export the sample data set and optionally insert it into Postgres.
    """
    configure_logging(level=log_level)
    if export:
        for path in _export_json(export):
            typer.echo(f"Wrote {path}")

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    start = time.perf_counter()
    typer.echo("Inserting sample rows into Postgres...")
    counts = _load_into_db(_build_dsn(dsn))
    duration = time.perf_counter() - start
    summary = ", ".join(f"{table}={rows}" for table, rows in counts.items())
    typer.echo(f"Load completed in {duration:.2f}s ({summary}).")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
