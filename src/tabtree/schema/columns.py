# src/tabtree/schema/columns.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from tabtree.core.exceptions import ConfigurationError


class ColumnType(str, Enum):
    """The closed set of cell types a column can carry."""

    STRING = "string"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    URL = "url"

    @classmethod
    def parse(cls, token: str) -> "ColumnType":
        """
        Map a type token (``string``, ``double``, ``boolean``, ``url``) to a
        ColumnType. Matching ignores case and surrounding whitespace.

        Raises:
            ConfigurationError: for any other token.
        """
        cleaned = (token or "").strip().lower()
        for member in cls:
            if member.value == cleaned:
                return member
        valid = ", ".join(m.value for m in cls)
        raise ConfigurationError(f"Unknown column type {token!r} (expected one of: {valid})")


@dataclass(frozen=True)
class Column:
    name: str
    type: ColumnType = ColumnType.STRING


@dataclass(frozen=True)
class Schema:
    """
    Ordered, immutable column list shared by every Record of one input.

    Attributes:
        columns: Columns in header order.
    """

    columns: Tuple[Column, ...]

    _index: Dict[str, int] = field(
        default_factory=dict, init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        index: Dict[str, int] = {}
        for pos, col in enumerate(self.columns):
            # First column wins when a header repeats a name
            index.setdefault(col.name, pos)
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.columns)

    def position(self, name: str) -> Optional[int]:
        """Return the position of the column called ``name``, or None."""
        return self._index.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def require(self, name: str, role: str = "column") -> int:
        """Like ``position`` but raises ConfigurationError for unknown names."""
        pos = self.position(name)
        if pos is None:
            raise ConfigurationError(
                f"{role} {name!r} not found in header (columns: {', '.join(self.names)})"
            )
        return pos
