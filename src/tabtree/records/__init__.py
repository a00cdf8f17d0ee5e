from .builder import (
    CellValue,
    Record,
    build_record,
    parse_boolean,
    parse_cell,
    parse_double,
)

__all__ = [
    "CellValue",
    "Record",
    "build_record",
    "parse_boolean",
    "parse_cell",
    "parse_double",
]
