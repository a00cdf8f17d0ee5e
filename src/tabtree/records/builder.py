"""
Record Builder: typed records from raw string fields.

Parsing rules per column type (all total, none raise):

    DOUBLE   decimal text; "" or unparseable text -> NaN
    BOOLEAN  True only for "true" in any letter case, otherwise False
    STRING   verbatim
    URL      verbatim (no URL validation)
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Iterator, Optional, Sequence, Tuple, Union

from tabtree.core.diagnostics import AnomalyKind, Diagnostics
from tabtree.schema.columns import ColumnType, Schema

CellValue = Union[str, float, bool]

NAN = float("nan")

_INFINITY_RE = re.compile(r"[+-]?(inf|infinity)", re.IGNORECASE)


def parse_double(text: str) -> float:
    """
    Parse a decimal number, or NaN when ``text`` is empty or not a number.

    Narrower than ``float()``: digit separators (``1_000``) and the lowercase
    ``inf`` / ``infinity`` spellings give NaN. Only ``Infinity`` with an
    optional sign reads as an infinite value.
    """
    if text is None or "_" in text:
        return NAN
    token = text.strip()
    if _INFINITY_RE.fullmatch(token) and token.lstrip("+-") != "Infinity":
        return NAN
    try:
        return float(text)
    except (TypeError, ValueError):
        return NAN


def parse_boolean(text: str) -> bool:
    return (text or "").lower() == "true"


def parse_cell(text: str, column_type: ColumnType) -> CellValue:
    """Convert one raw cell according to its column type."""
    if column_type is ColumnType.DOUBLE:
        return parse_double(text)
    if column_type is ColumnType.BOOLEAN:
        return parse_boolean(text)
    if column_type in (ColumnType.STRING, ColumnType.URL):
        return text
    raise AssertionError(f"unhandled column type: {column_type!r}")


@dataclass(frozen=True)
class Record(Mapping):
    """
    One parsed input row: an immutable, ordered mapping of column name to
    typed value. Iteration follows header order.

    Attributes:
        schema: The Schema shared by every record of the same input.
        cells: One typed value per column, aligned with ``schema.columns``.
        lineno: 1-based source line (0 when built outside a reader).
    """

    schema: Schema
    cells: Tuple[CellValue, ...]
    lineno: int = 0

    def __getitem__(self, name: str) -> CellValue:
        pos = self.schema.position(name)
        if pos is None:
            raise KeyError(name)
        return self.cells[pos]

    def __iter__(self) -> Iterator[str]:
        # Repeated header names are visited once, at their first position
        seen = set()
        for name in self.schema.names:
            if name not in seen:
                seen.add(name)
                yield name

    def __len__(self) -> int:
        return len(set(self.schema.names))

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        body = ", ".join(f"{k}={v!r}" for k, v in self.items())
        return f"<Record line={self.lineno} {body}>"


def build_record(
    schema: Schema,
    fields: Sequence[str],
    lineno: int = 0,
    diagnostics: Optional[Diagnostics] = None,
) -> Record:
    """
    Parse one padded field sequence into a Record.

    ``fields`` must hold one entry per schema column (the reader guarantees
    this); missing trailing entries are treated as empty strings.
    """
    cells = []
    for pos, column in enumerate(schema.columns):
        text = fields[pos] if pos < len(fields) else ""
        value = parse_cell(text, column.type)

        if (
            diagnostics is not None
            and column.type is ColumnType.DOUBLE
            and text
            and isinstance(value, float)
            and math.isnan(value)
            and text.strip().lower() != "nan"
        ):
            diagnostics.record(
                AnomalyKind.UNPARSEABLE_NUMBER,
                f"column {column.name!r}: {text!r} is not a number; using NaN",
                lineno=lineno,
            )

        cells.append(value)

    return Record(schema=schema, cells=tuple(cells), lineno=lineno)
