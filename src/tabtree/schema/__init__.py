"""
Column schema: types, columns and type resolution.
"""

from .columns import Column, ColumnType, Schema
from .inference import classify_sample, first_non_empty, resolve_columns

__all__ = [
    "Column",
    "ColumnType",
    "Schema",
    "classify_sample",
    "first_non_empty",
    "resolve_columns",
]
