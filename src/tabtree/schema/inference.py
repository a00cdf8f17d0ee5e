# src/tabtree/schema/inference.py

"""
Column type resolution.

Every column gets exactly one ColumnType:

    - an explicit declaration (by header name or by 0-based position) wins;
    - otherwise the type is inferred from the first non-empty value found in
      that column across all data rows:

        "http://..." / "https://..."   -> URL
        "42", "-3.5", "+7"             -> DOUBLE
        anything else, or no value     -> STRING

BOOLEAN is never inferred; it can only be declared.
"""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional, Sequence, Union

from tabtree.core.diagnostics import AnomalyKind, Diagnostics
from tabtree.core.exceptions import ConfigurationError
from tabtree.logging import get_logger

from .columns import Column, ColumnType, Schema

log = get_logger(__name__)

_URL_RE = re.compile(r"https?://.+", re.DOTALL)
_NUMBER_RE = re.compile(r"[+-]?[0-9]+(\.[0-9]+)?")

TypeDeclarations = Mapping[Union[str, int], ColumnType]


def classify_sample(sample: str) -> ColumnType:
    """Classify a single sampled cell value. Never raises."""
    if _URL_RE.fullmatch(sample):
        return ColumnType.URL
    if _NUMBER_RE.fullmatch(sample):
        return ColumnType.DOUBLE
    return ColumnType.STRING


def first_non_empty(rows: Sequence[Sequence[str]], position: int) -> str:
    """Return the first non-empty value of column ``position`` (or "")."""
    for fields in rows:
        if position < len(fields) and fields[position]:
            return fields[position]
    return ""


def _declared_by_position(
    header: Sequence[str],
    declared: Optional[TypeDeclarations],
) -> Dict[int, ColumnType]:
    """Resolve name- and position-keyed declarations to positions."""
    by_position: Dict[int, ColumnType] = {}
    if not declared:
        return by_position

    for key, col_type in declared.items():
        if isinstance(key, int):
            if not 0 <= key < len(header):
                raise ConfigurationError(
                    f"Column type declared for position {key + 1}, "
                    f"but the header only has {len(header)} columns"
                )
            by_position[key] = col_type
            continue

        matches = [pos for pos, name in enumerate(header) if name == key]
        if not matches:
            raise ConfigurationError(
                f"Column type declared for unknown column {key!r} "
                f"(columns: {', '.join(header)})"
            )
        for pos in matches:
            by_position[pos] = col_type

    return by_position


def resolve_columns(
    header: Sequence[str],
    rows: Sequence[Sequence[str]],
    declared: Optional[TypeDeclarations] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> Schema:
    """
    Build the Schema for one input.

    Args:
        header: Header field names, in order.
        rows: Materialized data rows (field sequences), used for sampling.
        declared: Explicit types keyed by column name or 0-based position.
        diagnostics: Optional collector for repeated header names.

    Raises:
        ConfigurationError: when a declaration names a column that does not
            exist. Inference itself never fails.
    """
    explicit = _declared_by_position(header, declared)

    seen: Dict[str, int] = {}
    columns: List[Column] = []
    for pos, name in enumerate(header):
        if name in seen and diagnostics is not None:
            diagnostics.record(
                AnomalyKind.DUPLICATE_COLUMN,
                f"column {name!r} repeats at position {pos + 1}; "
                f"lookups by name use position {seen[name] + 1}",
                lineno=1,
            )
        seen.setdefault(name, pos)

        if pos in explicit:
            col_type = explicit[pos]
            log.debug("Column %r declared as %s", name, col_type.value)
        else:
            col_type = classify_sample(first_non_empty(rows, pos))
            log.debug("Column %r inferred as %s", name, col_type.value)

        columns.append(Column(name=name, type=col_type))

    return Schema(columns=tuple(columns))
