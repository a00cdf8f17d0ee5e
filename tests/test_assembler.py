# tests/test_assembler.py

from __future__ import annotations

import time

import pytest

from tabtree.core.diagnostics import AnomalyKind, Diagnostics
from tabtree.core.exceptions import ConfigurationError
from tabtree.core.options import LinkMode
from tabtree.records import build_record
from tabtree.schema import ColumnType, resolve_columns
from tabtree.tree import assemble_forest, key_text, split_child_ids


def make_records(header, rows, declared=None):
    """Build (schema, records) the way the pipeline does; line numbers start at 2."""
    schema = resolve_columns(header, rows, declared)
    records = [
        build_record(schema, fields, lineno=i + 2) for i, fields in enumerate(rows)
    ]
    return schema, records


def build(header, rows, mode=LinkMode.PARENT, declared=None, diagnostics=None):
    schema, records = make_records(header, rows, declared)
    return assemble_forest(
        records,
        schema,
        header[0],
        header[-1],
        mode,
        diagnostics,
    )


def keys(nodes):
    return [n.key for n in nodes]


# ---------------------------------------------------------------------------
# Parent mode
# ---------------------------------------------------------------------------

def test_parent_mode_dangling_parent_falls_back_to_top_level() -> None:
    diagnostics = Diagnostics()
    forest = build(
        ("id", "name", "parentId"),
        [("1", "root", ""), ("2", "child", "1"), ("3", "orphan", "999")],
        diagnostics=diagnostics,
    )

    assert keys(forest.nodes) == ["1", "3"]
    assert keys(forest.nodes[0].children) == ["2"]
    assert forest.nodes[1].is_leaf()
    assert [(a.kind, a.lineno) for a in diagnostics] == [
        (AnomalyKind.DANGLING_PARENT, 4)
    ]


def test_parent_mode_sibling_order_follows_rows() -> None:
    forest = build(
        ("id", "parentId"),
        [("c", "p"), ("a", "p"), ("p", ""), ("b", "p")],
    )

    assert keys(forest.nodes) == ["p"]
    assert keys(forest.nodes[0].children) == ["c", "a", "b"]


def test_empty_parent_reference_is_always_top_level() -> None:
    forest = build(("id", "parentId"), [("1", ""), ("2", ""), ("3", "")])
    assert keys(forest.nodes) == ["1", "2", "3"]


def test_node_values_and_parent_links() -> None:
    forest = build(
        ("id", "size", "parentId"),
        [("1", "10", ""), ("2", "2.5", "1")],
    )
    root = forest.nodes[0]
    child = root.children[0]

    assert root["size"] == 10.0
    assert child["size"] == 2.5
    assert child.parent is root
    assert root.parent is None
    assert list(child.ancestors()) == [root]


def test_double_id_matches_string_parent() -> None:
    # id inferred as DOUBLE ("1" -> 1.0); parent declared STRING
    forest = build(
        ("id", "parentId"),
        [("1", ""), ("2", "1")],
        declared={"parentId": ColumnType.STRING},
    )

    assert forest.schema.columns[0].type is ColumnType.DOUBLE
    assert keys(forest.nodes) == ["1"]
    assert keys(forest.nodes[0].children) == ["2"]


def test_parent_cycle_sends_later_node_to_top_level() -> None:
    diagnostics = Diagnostics()
    forest = build(
        ("id", "parentId"),
        [("a", "b"), ("b", "a")],
        diagnostics=diagnostics,
    )

    assert keys(forest.nodes) == ["b"]
    assert keys(forest.nodes[0].children) == ["a"]
    assert forest.size() == 2
    assert [(a.kind, a.lineno) for a in diagnostics] == [(AnomalyKind.CYCLE, 3)]


def test_self_parent_is_top_level() -> None:
    diagnostics = Diagnostics()
    forest = build(("id", "parentId"), [("a", "a")], diagnostics=diagnostics)

    assert keys(forest.nodes) == ["a"]
    assert forest.nodes[0].is_leaf()
    assert diagnostics.of_kind(AnomalyKind.CYCLE)


def test_longer_cycle_is_broken_once() -> None:
    forest = build(
        ("id", "parentId"),
        [("a", "c"), ("b", "a"), ("c", "b")],
    )

    assert keys(forest.nodes) == ["c"]
    assert keys(forest.nodes[0].children) == ["a"]
    assert keys(forest.nodes[0].children[0].children) == ["b"]


# ---------------------------------------------------------------------------
# Child mode
# ---------------------------------------------------------------------------

def test_child_mode_children_in_listed_order() -> None:
    forest = build(
        ("id", "name", "childIds"),
        [("1", "root", "3,2"), ("2", "a", ""), ("3", "b", "")],
        mode=LinkMode.CHILD,
    )

    assert keys(forest.nodes) == ["1"]
    assert keys(forest.nodes[0].children) == ["3", "2"]


def test_child_mode_scenario() -> None:
    forest = build(
        ("id", "name", "childIds"),
        [("1", "root", "2,3"), ("2", "a", ""), ("3", "b", "")],
        mode=LinkMode.CHILD,
    )

    root = forest.nodes[0]
    assert keys(root.children) == ["2", "3"]
    assert keys(forest.nodes) == ["1"]
    assert all(child.parent is root for child in root.children)


def test_child_mode_skips_unknown_ids_and_trims_entries() -> None:
    diagnostics = Diagnostics()
    forest = build(
        ("id", "childIds"),
        [("1", " 2 , 404,,3 "), ("2", ""), ("3", "")],
        mode=LinkMode.CHILD,
        diagnostics=diagnostics,
    )

    assert keys(forest.nodes[0].children) == ["2", "3"]
    dangling = diagnostics.of_kind(AnomalyKind.DANGLING_CHILD)
    assert len(dangling) == 1
    assert "404" in dangling[0].message


def test_child_mode_single_numeric_child_column() -> None:
    # "2" makes the child column DOUBLE; 2.0 must still find id "2"
    forest = build(
        ("id", "childIds"),
        [("1", "2"), ("2", "")],
        mode=LinkMode.CHILD,
    )

    assert forest.schema.columns[1].type is ColumnType.DOUBLE
    assert keys(forest.nodes[0].children) == ["2"]


def test_child_mode_first_parent_keeps_the_child() -> None:
    diagnostics = Diagnostics()
    forest = build(
        ("id", "childIds"),
        [("1", "3"), ("2", "3"), ("3", "")],
        mode=LinkMode.CHILD,
        diagnostics=diagnostics,
    )

    assert keys(forest.nodes) == ["1", "2"]
    assert keys(forest.nodes[0].children) == ["3"]
    assert forest.nodes[1].is_leaf()
    assert [a.kind for a in diagnostics] == [AnomalyKind.MULTIPLE_PARENTS]


def test_child_mode_cycle_is_skipped() -> None:
    diagnostics = Diagnostics()
    forest = build(
        ("id", "childIds"),
        [("a", "b"), ("b", "a"), ("c", "c")],
        mode=LinkMode.CHILD,
        diagnostics=diagnostics,
    )

    assert keys(forest.nodes) == ["a", "c"]
    assert keys(forest.nodes[0].children) == ["b"]
    assert forest.size() == 3
    assert len(diagnostics.of_kind(AnomalyKind.CYCLE)) == 2


# ---------------------------------------------------------------------------
# Duplicate ids
# ---------------------------------------------------------------------------

def test_duplicate_id_lookup_resolves_to_last_record() -> None:
    """
    The lookup is complete before wiring, so a row referencing id 5 attaches
    to the second "5" even when it sits before the redefinition.
    """
    diagnostics = Diagnostics()
    forest = build(
        ("id", "name", "parentId"),
        [
            ("5", "first", ""),
            ("7", "early kid", "5"),
            ("5", "second", ""),
            ("8", "late kid", "5"),
        ],
        diagnostics=diagnostics,
    )

    first, second = forest.nodes
    assert first["name"] == "first"
    assert second["name"] == "second"
    assert first.is_leaf()
    assert [c["name"] for c in second.children] == ["early kid", "late kid"]
    assert forest.find("5") is second
    assert forest.size() == 4
    assert [(a.kind, a.lineno) for a in diagnostics] == [
        (AnomalyKind.DUPLICATE_ID, 4)
    ]


def test_empty_ids_are_not_indexed() -> None:
    diagnostics = Diagnostics()
    forest = build(
        ("id", "childIds"),
        [("", ""), ("1", "")],
        mode=LinkMode.CHILD,
        diagnostics=diagnostics,
    )

    assert keys(forest.nodes) == ["", "1"]
    assert forest.find("") is None
    assert [a.kind for a in diagnostics] == [AnomalyKind.EMPTY_ID]


# ---------------------------------------------------------------------------
# Forest-wide properties
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("mode", [LinkMode.PARENT, LinkMode.CHILD])
def test_every_row_becomes_exactly_one_node(mode) -> None:
    rows = [
        ("1", "2,3"),
        ("2", "1"),
        ("3", "9"),
        ("3", ""),
        ("4", "4"),
        ("", "1"),
    ]
    schema, records = make_records(("id", "link"), rows)
    forest = assemble_forest(records, schema, "id", "link", mode)

    seen = list(forest.iter_nodes())
    assert len(seen) == len(records)
    assert len({id(n) for n in seen}) == len(records)
    assert {id(n.record) for n in seen} == {id(r) for r in records}


def test_assembly_is_deterministic() -> None:
    header = ("id", "name", "parentId")
    rows = [("1", "a", ""), ("2", "b", "1"), ("3", "c", "2"), ("4", "d", "1")]

    def shape(forest):
        return [
            (n.key, dict(n.record), tuple(c.key for c in n.children))
            for n in forest.iter_nodes()
        ]

    assert shape(build(header, rows)) == shape(build(header, rows))


def test_deep_chain_does_not_recurse() -> None:
    rows = [("0", "")] + [(str(i), str(i - 1)) for i in range(1, 2000)]
    forest = build(("id", "parentId"), rows)

    assert len(forest) == 1
    assert forest.depth() == 2000
    assert forest.size() == 2000


def test_long_chain_cycle_checks_stay_linear() -> None:
    # Row 0 names the last row as parent, so the final edge closes the loop
    n = 20000
    rows = [("0", str(n - 1))] + [(str(i), str(i - 1)) for i in range(1, n)]
    diagnostics = Diagnostics()

    t0 = time.perf_counter()
    forest = build(("id", "parentId"), rows, diagnostics=diagnostics)
    elapsed = time.perf_counter() - t0

    assert elapsed < 5.0
    assert keys(forest.nodes) == [str(n - 1)]
    assert forest.depth() == n
    assert [(a.kind, a.lineno) for a in diagnostics] == [(AnomalyKind.CYCLE, n + 1)]


def test_forest_depth_and_find() -> None:
    forest = build(
        ("id", "parentId"),
        [("1", ""), ("2", "1"), ("3", "2"), ("4", "")],
    )

    assert forest.depth() == 3
    assert forest.find("3").parent.key == "2"
    assert forest.find("missing") is None


def test_unknown_columns_are_rejected_before_assembly() -> None:
    schema, records = make_records(("id", "parentId"), [("1", "")])

    with pytest.raises(ConfigurationError, match="id column"):
        assemble_forest(records, schema, "ident", "parentId")
    with pytest.raises(ConfigurationError, match="link column"):
        assemble_forest(records, schema, "id", "parent")


def test_invalid_mode_is_rejected() -> None:
    schema, records = make_records(("id", "parentId"), [("1", "")])

    with pytest.raises(ConfigurationError):
        assemble_forest(records, schema, "id", "parentId", "sideways")


def test_key_text() -> None:
    assert key_text("abc") == "abc"
    assert key_text(1.0) == "1"
    assert key_text(-3.0) == "-3"
    assert key_text(2.5) == "2.5"
    assert key_text(float("nan")) == ""
    assert key_text(True) == "true"
    assert key_text(False) == "false"


def test_split_child_ids() -> None:
    assert split_child_ids("a, b,,c ") == ["a", "b", "c"]
    assert split_child_ids("") == []
    assert split_child_ids(4.0) == ["4"]
