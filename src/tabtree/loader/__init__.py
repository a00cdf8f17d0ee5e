# src/tabtree/loader/__init__.py

"""
Public interface for the tabular reader.

    from tabtree.loader import Row, Table, read_stream, read_table, split_line
"""

from __future__ import annotations

from .reader import (
    STDIN_SENTINEL,
    Row,
    Table,
    fit_fields,
    open_source,
    read_stream,
    read_table,
    resolve_input_path,
    split_line,
)

__all__ = [
    "STDIN_SENTINEL",
    "Row",
    "Table",
    "fit_fields",
    "open_source",
    "read_stream",
    "read_table",
    "resolve_input_path",
    "split_line",
]
