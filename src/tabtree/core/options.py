from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from tabtree.core.exceptions import ConfigurationError
from tabtree.schema.columns import ColumnType


class LinkMode(str, Enum):
    """How rows reference each other."""

    PARENT = "parent"  # each row names its parent
    CHILD = "child"  # each row names its children

    @classmethod
    def parse(cls, text: Union[str, "LinkMode"]) -> "LinkMode":
        if isinstance(text, LinkMode):
            return text
        cleaned = (text or "").strip().lower()
        for member in cls:
            if member.value == cleaned:
                return member
        raise ConfigurationError(f"Invalid mode {text!r}. Use 'parent' or 'child'.")


def parse_type_declarations(text: Optional[str]) -> Dict[Union[str, int], ColumnType]:
    """
    Parse explicit column types.

    Two forms are accepted:

        "item:url,size:double"      by column name
        "url,,double,string"        by position, aligned to header order;
                                    blank entries are left to inference

    Raises:
        ConfigurationError: for unknown type tokens, malformed entries, or a
            list that mixes both forms.
    """
    if text is None or not text.strip():
        return {}

    entries = text.split(",")
    named = [":" in e for e in entries if e.strip()]

    if any(named) and not all(named):
        raise ConfigurationError(
            f"Column types {text!r} mix 'name:type' and positional entries"
        )

    declared: Dict[Union[str, int], ColumnType] = {}

    if any(named):
        for entry in entries:
            if not entry.strip():
                continue
            name, _, token = entry.partition(":")
            if not name or ":" in token:
                raise ConfigurationError(f"Malformed column type entry {entry!r}")
            declared[name] = ColumnType.parse(token)
        return declared

    for pos, token in enumerate(entries):
        if token.strip():
            declared[pos] = ColumnType.parse(token)
    return declared


@dataclass(frozen=True)
class TreeOptions:
    """
    Everything the pipeline needs besides the input itself.

    Attributes:
        delimiter: Literal field separator.
        id_column: Column holding each row's id. Defaults to the first
            header column in parent mode.
        link_column: Column holding the parent id (parent mode) or the
            comma-separated child ids (child mode). Defaults to the last
            header column in parent mode.
        mode: LinkMode.PARENT or LinkMode.CHILD.
        column_types: Explicit types keyed by column name or 0-based position.
    """

    delimiter: str = "\t"
    id_column: Optional[str] = None
    link_column: Optional[str] = None
    mode: LinkMode = LinkMode.PARENT
    column_types: Mapping[Union[str, int], ColumnType] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.delimiter, str) or not self.delimiter:
            raise ConfigurationError("Delimiter must be a non-empty string")
        object.__setattr__(self, "mode", LinkMode.parse(self.mode))

    @classmethod
    def from_strings(
        cls,
        delimiter: str,
        id_column: Optional[str] = None,
        link_column: Optional[str] = None,
        mode: str = "parent",
        column_types: Optional[str] = None,
    ) -> "TreeOptions":
        """Build options from raw text values (CLI, config files)."""
        return cls(
            delimiter=delimiter,
            id_column=id_column or None,
            link_column=link_column or None,
            mode=LinkMode.parse(mode),
            column_types=parse_type_declarations(column_types),
        )

    def resolve_link_columns(self, header: Sequence[str]) -> Tuple[str, str]:
        """
        Return ``(id_column, link_column)`` for ``header``.

        In parent mode unspecified columns default to the first and last
        header columns. Child mode has no defaults.

        Raises:
            ConfigurationError: if a column is missing or not in the header.
        """
        id_column, link_column = self.id_column, self.link_column

        if self.mode is LinkMode.PARENT:
            if not header:
                raise ConfigurationError("Input has no header row")
            id_column = id_column or header[0]
            link_column = link_column or header[-1]
        elif not id_column or not link_column:
            raise ConfigurationError(
                "Child mode requires both an id column and a child-list column"
            )

        for role, name in (("id column", id_column), ("link column", link_column)):
            if name not in header:
                raise ConfigurationError(
                    f"{role} {name!r} not found in header (columns: {', '.join(header)})"
                )

        return id_column, link_column

    def resolve_column_types(
        self,
        header: Sequence[str],
        link_column: str,
    ) -> Dict[Union[str, int], ColumnType]:
        """
        Return the explicit type declarations to apply to ``header``.

        In child mode the link column holds comma-separated id lists, so it is
        read as STRING unless the caller declared a type for it by name or
        position. Sampling a single id such as ``2`` would otherwise type the
        column DOUBLE and turn every later list into NaN.
        """
        declared: Dict[Union[str, int], ColumnType] = dict(self.column_types)
        if self.mode is not LinkMode.CHILD:
            return declared

        positions = {pos for pos, name in enumerate(header) if name == link_column}
        if link_column not in declared and not declared.keys() & positions:
            declared[link_column] = ColumnType.STRING
        return declared
