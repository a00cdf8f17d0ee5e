# tests/test_exporter.py

from __future__ import annotations

import io
import json

from tabtree import ColumnType, TreeOptions, load_forest
from tabtree.exporter import export_forest_json, forest_to_dict, serialize_forest
from tabtree.utils import mock_file_path


def test_forest_to_dict_shape() -> None:
    forest = load_forest(mock_file_path("parent_mode.csv"), TreeOptions(delimiter=","))
    data = forest_to_dict(forest)

    assert data["columns"] == [
        {"name": "id", "type": "double"},
        {"name": "name", "type": "string"},
        {"name": "parentId", "type": "double"},
    ]
    assert [n["id"] for n in data["nodes"]] == ["1", "6", "7"]

    root = data["nodes"][0]
    assert root["values"] == {"id": 1.0, "name": "root", "parentId": None}
    assert [c["id"] for c in root["children"]] == ["2", "3"]
    assert [c["id"] for c in root["children"][0]["children"]] == ["4", "5"]
    assert data["anomalies"] == [
        {
            "kind": "dangling_parent",
            "line": 8,
            "message": "parent id '999' not found; placed at top level",
        }
    ]


def test_serialized_output_is_strict_json() -> None:
    options = TreeOptions(column_types={"size": ColumnType.DOUBLE})
    forest = load_forest(io.StringIO("id\tsize\tp\n1\tabc\t\n"), options)
    text = serialize_forest(forest, indent=None)

    assert '"size":NaN' not in text
    assert json.loads(text)["nodes"][0]["values"]["size"] is None


def test_export_forest_json_writes_file(tmp_path) -> None:
    forest = load_forest(mock_file_path("parent_mode.csv"), TreeOptions(delimiter=","))
    out = tmp_path / "nested" / "forest.json"

    export_forest_json(forest, out)

    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["nodes"]) == 3


def test_deep_tree_exports_without_recursion() -> None:
    lines = ["id,p", "0,"] + [f"{i},{i - 1}" for i in range(1, 1500)]
    forest = load_forest(io.StringIO("\n".join(lines) + "\n"), TreeOptions(delimiter=","))

    data = forest_to_dict(forest)

    depth = 0
    level = data["nodes"]
    while level:
        depth += 1
        level = level[0]["children"]
    assert depth == 1500
