# src/tabtree/tree/nodes.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from tabtree.core.diagnostics import Anomaly
from tabtree.records.builder import CellValue, Record
from tabtree.schema.columns import Schema


@dataclass(eq=False)
class Node:
    """
    A tree element wrapping one Record.

    Children are appended only by the assembler; once a Forest is returned
    the structure is read-only through ``children`` and ``parent``.

    Attributes:
        record: The wrapped Record.
        key: Lookup key text of the record's id value ("" if it had none).
    """

    record: Record
    key: str = ""

    _children: List["Node"] = field(default_factory=list, init=False, repr=False)
    _parent: Optional["Node"] = field(default=None, init=False, repr=False)

    @property
    def children(self) -> Tuple["Node", ...]:
        return tuple(self._children)

    @property
    def parent(self) -> Optional["Node"]:
        """The owning Node, or None for a top-level Node."""
        return self._parent

    @property
    def lineno(self) -> int:
        return self.record.lineno

    def __getitem__(self, column: str) -> CellValue:
        return self.record[column]

    def is_leaf(self) -> bool:
        return not self._children

    def ancestors(self) -> Iterator["Node"]:
        """Yield the parent, grandparent, ... up to the top-level Node."""
        current = self._parent
        while current is not None:
            yield current
            current = current._parent

    def iter_subtree(self) -> Iterator["Node"]:
        """Yield this node and all descendants in depth-first pre-order."""
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def _adopt(self, child: "Node") -> None:
        self._children.append(child)
        child._parent = self

    def __repr__(self) -> str:
        return f"<Node {self.key!r} line={self.lineno} children={len(self._children)}>"


@dataclass
class Forest:
    """
    Root container of an assembled tree.

    This is the structure handed to presentation code: the resolved schema
    plus the ordered top-level Nodes. It is not itself a Node and carries no
    record.

    Attributes:
        schema: Columns (name, type, order) shared by every record.
        nodes: Top-level Nodes in input row order.
        anomalies: Data problems recovered while building this forest.
    """

    schema: Schema
    nodes: Tuple[Node, ...]
    anomalies: Tuple[Anomaly, ...] = ()

    _lookup: Dict[str, Node] = field(default_factory=dict, repr=False)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def iter_nodes(self) -> Iterator[Node]:
        """Iterate over every node (depth-first), top-level nodes included."""
        for root in self.nodes:
            yield from root.iter_subtree()

    def size(self) -> int:
        """Total number of nodes in the forest."""
        return sum(1 for _ in self.iter_nodes())

    def depth(self) -> int:
        """Number of levels; 0 for an empty forest, 1 when all nodes are top-level."""
        deepest = 0
        stack: List[Tuple[Node, int]] = [(n, 1) for n in self.nodes]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((c, level + 1) for c in node.children)
        return deepest

    def find(self, key: str) -> Optional[Node]:
        """
        Return the Node an id reference resolves to, if any.

        With duplicate ids this is the last record carrying the id, the same
        node parent/child references were wired to.
        """
        if not key:
            return None
        return self._lookup.get(key)

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"<Forest top_level={len(self.nodes)} columns={len(self.schema)}>"
