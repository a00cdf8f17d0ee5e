# src/tabtree/loader/reader.py

from __future__ import annotations

import io
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator, List, Optional, Tuple, Union

from tabtree.core.diagnostics import AnomalyKind, Diagnostics
from tabtree.core.exceptions import ConfigurationError, SourceNotFound
from tabtree.logging import get_logger

log = get_logger(__name__)

STDIN_SENTINEL = "-"

Source = Union[str, Path, IO[str]]


@dataclass(frozen=True)
class Row:
    """
    One data line split into fields.

    Attributes:
        lineno: 1-based line number in the source (the header is line 1).
        fields: Exactly one field per header column, after padding/truncation.
    """

    lineno: int
    fields: Tuple[str, ...]


@dataclass
class Table:
    """
    Header plus a lazy stream of rows.

    ``rows`` can only be consumed once; call ``materialize()`` to get a list.
    """

    header: Tuple[str, ...]
    rows: Iterator[Row]

    def materialize(self) -> List[Row]:
        return list(self.rows)


def _strip_eol(line: str) -> str:
    """Strip trailing CR/LF characters but preserve all other whitespace."""
    return line.rstrip("\r\n")


def split_line(line: str, delimiter: str) -> List[str]:
    """
    Split one line on a literal delimiter.

    No quoting, no escaping, adjacent delimiters yield empty fields, and
    characters such as ``|`` or ``.`` carry no pattern meaning.
    """
    if not delimiter:
        raise ConfigurationError("Delimiter must be a non-empty string")
    return line.split(delimiter)


def fit_fields(
    fields: List[str],
    width: int,
    lineno: int = 0,
    diagnostics: Optional[Diagnostics] = None,
) -> Tuple[str, ...]:
    """Pad a short row with "" or drop the surplus of a long one."""
    if len(fields) < width:
        if diagnostics is not None:
            diagnostics.record(
                AnomalyKind.SHORT_ROW,
                f"{len(fields)} fields for {width} columns; padded with empty values",
                lineno=lineno,
            )
        return tuple(fields) + ("",) * (width - len(fields))

    if len(fields) > width:
        if diagnostics is not None:
            diagnostics.record(
                AnomalyKind.LONG_ROW,
                f"{len(fields)} fields for {width} columns; extra fields dropped",
                lineno=lineno,
            )
        return tuple(fields[:width])

    return tuple(fields)


def resolve_input_path(path: Union[str, Path]) -> Path:
    """
    Convert a user-provided path into an absolute, validated file path.

    Raises:
        SourceNotFound: if the path does not exist or is not a regular file.
    """
    abs_path = Path(path).expanduser().resolve()
    log.debug("Resolving input file: %s", abs_path)

    if not abs_path.exists():
        raise SourceNotFound(f"Input file not found: {abs_path}")
    if not abs_path.is_file():
        raise SourceNotFound(f"Input path is not a file: {abs_path}")

    return abs_path


@contextmanager
def open_source(source: Source) -> Iterator[IO[str]]:
    """
    Yield a text stream for ``source``.

    ``source`` may be a path, the ``"-"`` sentinel for standard input, or an
    already-open text stream (which is left open).
    """
    if isinstance(source, io.IOBase) or hasattr(source, "readline"):
        yield source  # type: ignore[misc]
        return

    if str(source) == STDIN_SENTINEL:
        log.debug("Reading table from standard input")
        yield sys.stdin
        return

    path = resolve_input_path(source)  # type: ignore[arg-type]
    try:
        handle = path.open("r", encoding="utf-8", errors="replace", newline="")
    except OSError as exc:
        raise SourceNotFound(f"Cannot open input file {path}: {exc}") from exc

    log.info("Reading table from %s", path)
    with handle:
        yield handle


def _iter_rows(
    lines: Iterator[str],
    delimiter: str,
    width: int,
    diagnostics: Optional[Diagnostics],
) -> Iterator[Row]:
    for lineno, raw_line in enumerate(lines, start=2):
        raw = _strip_eol(raw_line)

        if not raw:
            if diagnostics is not None:
                diagnostics.record(AnomalyKind.BLANK_LINE, "empty line skipped", lineno=lineno)
            continue

        fields = fit_fields(split_line(raw, delimiter), width, lineno, diagnostics)
        yield Row(lineno=lineno, fields=fields)


def read_stream(
    stream: IO[str],
    delimiter: str,
    diagnostics: Optional[Diagnostics] = None,
) -> Table:
    """
    Split an open text stream into a header and lazy data rows.

    The rows iterator reads from ``stream`` on demand, so the stream must
    stay open until the rows are consumed.
    """
    if not delimiter:
        raise ConfigurationError("Delimiter must be a non-empty string")

    first = stream.readline()
    if not first:
        log.warning("Input is empty; no header row found")
        return Table(header=(), rows=iter(()))

    header_line = _strip_eol(first)
    # Handle an optional UTF-8 BOM on the header line.
    if header_line.startswith("\ufeff"):
        header_line = header_line.lstrip("\ufeff")

    header = tuple(split_line(header_line, delimiter))
    log.debug("Header: %s", header)

    return Table(
        header=header,
        rows=_iter_rows(iter(stream), delimiter, len(header), diagnostics),
    )


def read_table(
    source: Source,
    delimiter: str,
    diagnostics: Optional[Diagnostics] = None,
) -> Tuple[Tuple[str, ...], List[Row]]:
    """
    Read a whole source and return ``(header, rows)``.

    This is a thin wrapper around read_stream() that opens the source and
    materializes the rows before closing it.

    Raises:
        SourceNotFound: if ``source`` is a path that cannot be opened.
        ConfigurationError: if ``delimiter`` is empty.
    """
    with open_source(source) as stream:
        table = read_stream(stream, delimiter, diagnostics)
        rows = table.materialize()

    log.debug("Read %d data rows", len(rows))
    return table.header, rows
