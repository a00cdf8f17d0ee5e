"""
json_exporter.py
JSON exporter for assembled forests.

This exporter:
- Emits plain dicts/lists (columns, nested nodes, anomalies)
- Maps NaN to null so the output is strict JSON
- Walks the tree with an explicit stack, so deep inputs cannot hit the
  recursion limit
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Tuple

from tabtree.logging import get_logger
from tabtree.records.builder import CellValue, Record
from tabtree.tree.nodes import Forest, Node

log = get_logger(__name__)


def _to_json_value(value: CellValue) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None if math.isnan(value) else str(value)
    return value


def record_to_dict(record: Record) -> Dict[str, Any]:
    return {name: _to_json_value(value) for name, value in record.items()}


def _nodes_to_list(nodes: Tuple[Node, ...]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    stack: List[Tuple[Node, List[Dict[str, Any]]]] = [
        (node, out) for node in reversed(nodes)
    ]
    while stack:
        node, target = stack.pop()
        entry: Dict[str, Any] = {
            "id": node.key,
            "line": node.lineno,
            "values": record_to_dict(node.record),
            "children": [],
        }
        target.append(entry)
        stack.extend((child, entry["children"]) for child in reversed(node.children))
    return out


def forest_to_dict(forest: Forest) -> Dict[str, Any]:
    """Convert a Forest into a JSON-safe dict."""
    return {
        "columns": [
            {"name": col.name, "type": col.type.value} for col in forest.schema
        ],
        "nodes": _nodes_to_list(forest.nodes),
        "anomalies": [
            {"kind": a.kind.value, "line": a.lineno, "message": a.message}
            for a in forest.anomalies
        ],
    }


def serialize_forest(forest: Forest, indent: int | None = 2) -> str:
    if indent is None:
        return json.dumps(
            forest_to_dict(forest), separators=(",", ":"), ensure_ascii=False
        )
    return json.dumps(forest_to_dict(forest), indent=indent, ensure_ascii=False)


def export_forest_json(forest: Forest, output_path: str | Path, indent: int | None = 2) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    log.info(
        "Exporting forest JSON to: %s (columns=%d, top_level=%d)",
        output_path,
        len(forest.schema),
        len(forest),
    )

    with output_path.open("w", encoding="utf-8") as f:
        f.write(serialize_forest(forest, indent=indent))

    log.info("JSON export complete. size=%d bytes", output_path.stat().st_size)
