import logging

import pytest
from graphviz import Digraph, ExecutableNotFound

import valuegraph as vg


@pytest.fixture
def expression():
    a = vg.create_leaf(2.0, "a")
    b = vg.create_leaf(-3.0, "b")
    c = vg.create_leaf(10.0, "c")
    e = vg.multiply(a, b)
    vg.set_label(e, "e")
    d = vg.add(c, e)
    vg.set_label(d, "d")
    o = vg.tanh(vg.multiply(d, a))
    vg.set_label(o, "o")
    return a, b, c, e, d, o


def test_describe_lists_immediate_operands_only(expression):
    a, b, c, e, d, o = expression
    assert vg.describe(a) == "a (data: 2.0, op: NONE, prev: [])"
    assert vg.describe(d) == "d (data: 4.0, op: ADD, prev: [c, e])"
    assert vg.describe(o).startswith("o (data: ")
    assert vg.describe(o).endswith("op: TANH, prev: [(d * a)])")


def test_collect_nodes_and_edges(expression):
    a, b, c, e, d, o = expression
    nodes, edges = vg.collect_nodes_and_edges(o)
    assert len(nodes) == 7
    assert nodes[0] is o
    assert sum(1 for node in nodes if node is a) == 1
    # a feeds both e and (d * a).
    assert sum(1 for child, _ in edges if child is a) == 2
    assert len(edges) == 7


def test_collect_keeps_equal_but_distinct_nodes_apart():
    left = vg.create_leaf(1.0, "x")
    right = vg.create_leaf(1.0, "x")
    assert left == right
    nodes, edges = vg.collect_nodes_and_edges(vg.add(left, right))
    assert len(nodes) == 3
    assert len(edges) == 2


def test_topological_order(expression):
    a, b, c, e, d, o = expression
    order = vg.topological_order(o)
    assert order[-1] is o
    assert len(order) == 7
    position = {id(node): i for i, node in enumerate(order)}
    for node in order:
        for operand in node.operands:
            assert position[id(operand)] < position[id(node)]


def test_topological_order_of_leaf():
    a = vg.create_leaf(1, "a")
    assert vg.topological_order(a) == [a]


def test_draw_graph(expression):
    *_, o = expression
    graph = vg.draw_graph(o)
    assert isinstance(graph, Digraph)
    assert graph.format == "svg"
    source = graph.source
    assert "rankdir=LR" in source
    assert "d | data 4.0000" in source
    assert "a | data 2.0000" in source
    assert "tanh" in source
    assert f"{id(o)}TANH" in source


def test_render_graph(monkeypatch, expression):
    *_, o = expression
    calls = []

    def fake_render(self, filename, view=False):
        calls.append((filename, view))
        return f"{filename}.{self.format}"

    monkeypatch.setattr(Digraph, "render", fake_render)
    assert vg.render_graph(o, "out", fmt="png") == "out.png"
    assert calls == [("out", False)]


def test_render_graph_without_graphviz_binary(monkeypatch, caplog, expression):
    *_, o = expression

    def missing_dot(self, filename, view=False):
        raise ExecutableNotFound(["dot"])

    monkeypatch.setattr(Digraph, "render", missing_dot)
    with caplog.at_level(logging.WARNING, logger="valuegraph.graph"):
        assert vg.render_graph(o, "out") is None
    assert "graphviz executable not found" in caplog.text


def test_draw_graph_escapes_record_characters():
    node = vg.create_leaf(1.0, "a|b {c} <d>")
    source = vg.draw_graph(node).source
    assert r"a\|b \{c\} \<d\> | data 1.0000" in source
