# src/tabtree/tree/assembler.py

"""
Tree Assembler: link flat records into a Forest.

Two passes over the records, in input order:

    1. Create one Node per record and index it under the key text of its id.
       A repeated id replaces the earlier entry, so the lookup is
       last-write-wins. The lookup is complete before any wiring happens:
       every reference to a duplicated id resolves to the LAST record with
       that id, no matter where the referencing row sits.

    2. Wire relationships.
         parent mode: each record names its parent. Empty or unknown parent
                      ids put the node at the top level.
         child mode:  each record names its children as a comma-separated
                      list. Unknown ids are skipped. Nodes no one claims are
                      top-level.

Tree shape is enforced while wiring. An edge that would close a cycle is not
made: in parent mode the node goes to the top level instead, in child mode
the edge is skipped. In child mode a node already claimed keeps its first
parent. Every recovery is reported through Diagnostics.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Sequence

from tabtree.core.diagnostics import AnomalyKind, Diagnostics
from tabtree.core.exceptions import ConfigurationError
from tabtree.core.options import LinkMode
from tabtree.logging import get_logger
from tabtree.records.builder import CellValue, Record
from tabtree.schema.columns import Schema

from .nodes import Forest, Node

log = get_logger(__name__)

CHILD_SEPARATOR = ","


def key_text(value: CellValue) -> str:
    """
    Render a typed id/reference value as lookup key text.

    Integral floats drop their fraction so that a DOUBLE id column ``1``
    matches a STRING parent column ``1``. NaN (an empty or unparseable
    number) has no key.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return value


class _Components:
    """
    Disjoint sets of nodes already joined by an edge.

    A node is only attached while it has no parent, so at that moment it is
    the root of its own tree. The new edge closes a cycle exactly when the
    parent already sits in that tree, that is when both share a component.
    """

    def __init__(self) -> None:
        self._leader: Dict[Node, Node] = {}
        self._size: Dict[Node, int] = {}

    def find(self, node: Node) -> Node:
        leader = self._leader.get(node, node)
        while leader is not node:
            # path splitting
            grand = self._leader.get(leader, leader)
            self._leader[node] = grand
            node, leader = leader, grand
        return node

    def closes_cycle(self, parent: Node, child: Node) -> bool:
        """True if attaching ``child`` under ``parent`` would create a cycle."""
        return self.find(parent) is self.find(child)

    def join(self, parent: Node, child: Node) -> None:
        big, small = self.find(parent), self.find(child)
        if big is small:
            return
        if self._size.get(big, 1) < self._size.get(small, 1):
            big, small = small, big
        self._leader[small] = big
        self._size[big] = self._size.get(big, 1) + self._size.get(small, 1)


def _index_nodes(
    nodes: Sequence[Node],
    diagnostics: Diagnostics,
) -> Dict[str, Node]:
    lookup: Dict[str, Node] = {}
    for node in nodes:
        if not node.key:
            diagnostics.record(
                AnomalyKind.EMPTY_ID,
                "row has an empty id and cannot be referenced",
                lineno=node.lineno,
            )
            continue

        previous = lookup.get(node.key)
        if previous is not None:
            diagnostics.record(
                AnomalyKind.DUPLICATE_ID,
                f"id {node.key!r} already used on line {previous.lineno}; "
                f"references now resolve to this row",
                lineno=node.lineno,
            )
        lookup[node.key] = node
    return lookup


def _wire_parent_mode(
    nodes: Sequence[Node],
    lookup: Dict[str, Node],
    link_column: str,
    diagnostics: Diagnostics,
) -> List[Node]:
    top_level: List[Node] = []
    components = _Components()

    for node in nodes:
        parent_key = key_text(node[link_column])
        if not parent_key:
            top_level.append(node)
            continue

        parent = lookup.get(parent_key)
        if parent is None:
            diagnostics.record(
                AnomalyKind.DANGLING_PARENT,
                f"parent id {parent_key!r} not found; placed at top level",
                lineno=node.lineno,
            )
            top_level.append(node)
            continue

        if components.closes_cycle(parent, node):
            diagnostics.record(
                AnomalyKind.CYCLE,
                f"parent id {parent_key!r} would create a cycle; placed at top level",
                lineno=node.lineno,
            )
            top_level.append(node)
            continue

        parent._adopt(node)
        components.join(parent, node)

    return top_level


def split_child_ids(value: CellValue) -> List[str]:
    """Split a child-list cell into stripped, non-empty ids."""
    text = key_text(value)
    if not text:
        return []
    return [part.strip() for part in text.split(CHILD_SEPARATOR) if part.strip()]


def _wire_child_mode(
    nodes: Sequence[Node],
    lookup: Dict[str, Node],
    link_column: str,
    diagnostics: Diagnostics,
) -> List[Node]:
    components = _Components()
    for node in nodes:
        for child_key in split_child_ids(node[link_column]):
            child = lookup.get(child_key)
            if child is None:
                diagnostics.record(
                    AnomalyKind.DANGLING_CHILD,
                    f"child id {child_key!r} not found; skipped",
                    lineno=node.lineno,
                )
                continue

            if child.parent is not None:
                diagnostics.record(
                    AnomalyKind.MULTIPLE_PARENTS,
                    f"child id {child_key!r} already belongs to line "
                    f"{child.parent.lineno}; skipped",
                    lineno=node.lineno,
                )
                continue

            if components.closes_cycle(node, child):
                diagnostics.record(
                    AnomalyKind.CYCLE,
                    f"child id {child_key!r} would create a cycle; skipped",
                    lineno=node.lineno,
                )
                continue

            node._adopt(child)
            components.join(node, child)

    return [node for node in nodes if node.parent is None]


def assemble_forest(
    records: Iterable[Record],
    schema: Schema,
    id_column: str,
    link_column: str,
    mode: LinkMode = LinkMode.PARENT,
    diagnostics: Optional[Diagnostics] = None,
) -> Forest:
    """
    Link ``records`` into a Forest.

    Args:
        records: Records in input order; all built from ``schema``.
        schema: The shared column schema.
        id_column: Name of the id column.
        link_column: Name of the parent-id column (parent mode) or of the
            child-id list column (child mode).
        mode: LinkMode.PARENT or LinkMode.CHILD.
        diagnostics: Collector for recovered anomalies; a private one is
            used when omitted.

    Raises:
        ConfigurationError: if a column is not in the schema or the mode is
            invalid. Nothing is assembled in that case.
    """
    mode = LinkMode.parse(mode)
    schema.require(id_column, role="id column")
    schema.require(link_column, role="link column")
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    nodes = [Node(record=rec, key=key_text(rec[id_column])) for rec in records]
    lookup = _index_nodes(nodes, diagnostics)

    if mode is LinkMode.PARENT:
        top_level = _wire_parent_mode(nodes, lookup, link_column, diagnostics)
    else:
        top_level = _wire_child_mode(nodes, lookup, link_column, diagnostics)

    log.info(
        "Assembled %d nodes (%s mode): %d top-level",
        len(nodes),
        mode.value,
        len(top_level),
    )

    return Forest(
        schema=schema,
        nodes=tuple(top_level),
        anomalies=tuple(diagnostics.anomalies),
        _lookup=lookup,
    )
