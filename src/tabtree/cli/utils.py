from __future__ import annotations

import time
from typing import NoReturn, Optional

import typer
from rich.console import Console

from tabtree.config import get_config
from tabtree.core.exceptions import ConfigurationError, TabTreeError
from tabtree.core.options import TreeOptions
from tabtree.core.pipeline import load_forest
from tabtree.logging import set_debug
from tabtree.tree.nodes import Forest

console = Console()
err_console = Console(stderr=True)

_DELIMITER_ESCAPES = {
    "\\t": "\t",
    "`t": "\t",
    "\\\\": "\\",
}


def decode_delimiter(text: Optional[str]) -> str:
    """
    Turn a delimiter as typed on a shell into the literal string to split on.

    ``\\t``, ``tab`` and PowerShell-style `` `t `` mean a tab character; anything
    else is used verbatim. None falls back to the configured default.
    """
    if text is None:
        return get_config().default_delimiter
    if text.lower() == "tab":
        return "\t"
    return _DELIMITER_ESCAPES.get(text, text)


def fail(exc: Exception) -> NoReturn:
    """Print a one-line error and exit with status 1."""
    err_console.print(f"[bold red]Error:[/bold red] {exc}")
    raise typer.Exit(code=1) from exc


def build_options(
    delimiter: Optional[str],
    id_column: Optional[str],
    link_column: Optional[str],
    mode: Optional[str],
    column_types: Optional[str],
) -> TreeOptions:
    try:
        return TreeOptions.from_strings(
            delimiter=decode_delimiter(delimiter),
            id_column=id_column,
            link_column=link_column,
            mode=mode or get_config().default_mode,
            column_types=column_types,
        )
    except ConfigurationError as exc:
        fail(exc)


def load_table_forest(source: str, options: TreeOptions, *, verbose: bool = False) -> Forest:
    """
    Run the pipeline for a CLI command.

    Configuration, source and pipeline errors are printed and turned into
    exit code 1.
    """
    if verbose:
        set_debug(True)

    t0 = time.perf_counter()
    try:
        forest = load_forest(source, options)
    except TabTreeError as exc:
        fail(exc)

    if verbose:
        err_console.log(
            f"Loaded {forest.size()} rows in {time.perf_counter() - t0:.2f}s "
            f"({len(forest.anomalies)} anomalies)"
        )
    return forest
