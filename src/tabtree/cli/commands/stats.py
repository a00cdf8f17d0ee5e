from __future__ import annotations

from collections import Counter
from typing import Optional

import typer
from rich.table import Table

from tabtree.cli.utils import build_options, console, load_table_forest


def stats_command(
    source: str = typer.Argument(..., help="Path to the table, or '-' for STDIN"),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d"),
    id_column: Optional[str] = typer.Option(None, "--id-column"),
    link_column: Optional[str] = typer.Option(None, "--link-column"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m"),
    column_types: Optional[str] = typer.Option(None, "--column-types", "-t"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """
    Show summary statistics for a table's tree.
    """
    options = build_options(delimiter, id_column, link_column, mode, column_types)
    forest = load_table_forest(source, options, verbose=verbose)

    summary = Table(title="Tree Statistics")
    summary.add_column("Metric", style="bold")
    summary.add_column("Value", justify="right")

    summary.add_row("Rows", str(forest.size()))
    summary.add_row("Top-level nodes", str(len(forest)))
    summary.add_row("Depth", str(forest.depth()))
    summary.add_row("Anomalies", str(len(forest.anomalies)))
    console.print(summary)

    columns = Table(title="Columns")
    columns.add_column("#", justify="right")
    columns.add_column("Name", style="bold")
    columns.add_column("Type")
    for pos, col in enumerate(forest.schema, start=1):
        columns.add_row(str(pos), col.name, col.type.value)
    console.print(columns)

    if forest.anomalies:
        counts = Counter(a.kind.value for a in forest.anomalies)

        anomalies = Table(title="Anomalies")
        anomalies.add_column("Kind", style="yellow")
        anomalies.add_column("Count", justify="right")
        for kind, count in sorted(counts.items()):
            anomalies.add_row(kind, str(count))
        console.print(anomalies)
