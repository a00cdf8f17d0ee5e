from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from tabtree.cli.utils import build_options, load_table_forest
from tabtree.exporter import export_forest_json, serialize_forest


def export_command(
    source: str = typer.Argument(..., help="Path to the table, or '-' for STDIN"),
    delimiter: Optional[str] = typer.Option(
        None,
        "--delimiter",
        "-d",
        help="Literal field delimiter ('\\t' or 'tab' for a tab)",
    ),
    id_column: Optional[str] = typer.Option(
        None, "--id-column", help="Column holding row ids (default: first column)"
    ),
    link_column: Optional[str] = typer.Option(
        None,
        "--link-column",
        help="Parent-id column, or child-id list column in child mode (default: last column)",
    ),
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", help="'parent' (rows name their parent) or 'child'"
    ),
    column_types: Optional[str] = typer.Option(
        None,
        "--column-types",
        "-t",
        help="Types as name:type,... or positional type,... (string, double, boolean, url)",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Pretty-print JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """
    Export the assembled tree as JSON (stdout by default).
    """
    options = build_options(delimiter, id_column, link_column, mode, column_types)
    forest = load_table_forest(source, options, verbose=verbose)

    indent = 2 if pretty else None
    if out:
        export_forest_json(forest, out, indent=indent)
    else:
        typer.echo(serialize_forest(forest, indent=indent))
