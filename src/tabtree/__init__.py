"""
tabtree: rebuild parent/child trees from delimiter-separated tables.

    from tabtree import TreeOptions, LinkMode, load_forest

    forest = load_forest("items.tsv", TreeOptions(delimiter="\\t"))
    for node in forest.iter_nodes():
        print(node.key, node["name"], len(node.children))
"""

from __future__ import annotations

from tabtree.core.diagnostics import Anomaly, AnomalyKind, Diagnostics
from tabtree.core.exceptions import (
    ConfigurationError,
    PipelineError,
    SourceNotFound,
    TabTreeError,
)
from tabtree.core.options import LinkMode, TreeOptions, parse_type_declarations
from tabtree.core.pipeline import Pipeline, load_forest
from tabtree.records import Record
from tabtree.schema import Column, ColumnType, Schema
from tabtree.tree import Forest, Node, assemble_forest

__version__ = "0.1.0"

__all__ = [
    "Anomaly",
    "AnomalyKind",
    "Column",
    "ColumnType",
    "ConfigurationError",
    "Diagnostics",
    "Forest",
    "LinkMode",
    "Node",
    "Pipeline",
    "PipelineError",
    "Record",
    "Schema",
    "SourceNotFound",
    "TabTreeError",
    "TreeOptions",
    "assemble_forest",
    "load_forest",
    "parse_type_declarations",
]
