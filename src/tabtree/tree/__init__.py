"""
Tree assembly: Node / Forest model and the record linker.

    from tabtree.tree import Forest, Node, assemble_forest
"""

from __future__ import annotations

from .assembler import assemble_forest, key_text, split_child_ids
from .nodes import Forest, Node

__all__ = [
    "Forest",
    "Node",
    "assemble_forest",
    "key_text",
    "split_child_ids",
]
