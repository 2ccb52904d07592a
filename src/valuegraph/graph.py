from __future__ import annotations
import logging
import re

from graphviz import Digraph, ExecutableNotFound

from valuegraph.node import Node

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "svg"
RANK_DIRECTION = "LR"
VALUE_PRECISION = 4

# Characters with a meaning inside Graphviz record labels.
_RECORD_SPECIAL = re.compile(r"([{}|<>\\])")


def describe(node: Node) -> str:
    """
    One-line diagnostic summary of a node.

    Shows the node's label, value and operation, followed by the labels of
    its immediate operands. Operands are not expanded further.

    Args:
        node: The node to describe.

    Returns:
        A string such as "d (data: 4, op: ADD, prev: [c, e])".
    """
    prev = ", ".join(operand.label for operand in node.operands)
    return f"{node.label} (data: {node.data}, op: {node.op.name}, prev: [{prev}])"


def collect_nodes_and_edges(root: Node) -> tuple[list[Node], list[tuple[Node, Node]]]:
    """
    Traverses the computational graph starting from the root node.

    Nodes are tracked by identity rather than by equality: two separately
    built nodes with the same derivation compare equal but are still
    separate nodes of the drawn graph.

    Args:
        root: The root node of the computational graph.

    Returns:
        A tuple containing:
        - nodes: Every reachable node once, in discovery order.
        - edges: (child_node, parent_node) pairs, one per operand slot.
    """
    nodes: list[Node] = []
    edges: list[tuple[Node, Node]] = []
    seen: set[int] = set()

    stack = [root]
    while stack:
        parent_node = stack.pop()
        if id(parent_node) in seen:
            continue
        seen.add(id(parent_node))
        nodes.append(parent_node)
        for child_node in parent_node.operands:
            # Edge direction: child -> parent.
            edges.append((child_node, parent_node))
            stack.append(child_node)

    return nodes, edges


def topological_order(root: Node) -> list[Node]:
    """
    Orders the graph so every node appears after all of its operands.

    The root is always last. Walking the list in reverse visits each node
    before any of its operands, which is the order a reverse sweep over the
    graph needs.

    Args:
        root: The node whose derivation should be ordered.

    Returns:
        Every node reachable from root exactly once.
    """
    ordering: list[Node] = []
    visited: set[int] = set()

    # (node, expanded) pairs; a node is emitted the second time it is popped,
    # once all of its operands have been emitted.
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            ordering.append(node)
            continue
        if id(node) in visited:
            continue
        visited.add(id(node))
        stack.append((node, True))
        for child_node in reversed(node.operands):
            if id(child_node) not in visited:
                stack.append((child_node, False))

    return ordering


def draw_graph(root: Node, fmt: str = DEFAULT_FORMAT) -> Digraph:
    """
    Visualizes the computational graph using Graphviz.

    Every node becomes a record showing its label and value. Derived nodes
    get an extra operation node in front of them, so edges run
    operand -> operation -> result.

    Args:
        root: The root node of the computational graph to visualize.
        fmt: Output format used when the graph is rendered.

    Returns:
        A Digraph object representing the computational graph.
    """
    graph = Digraph(format=fmt, graph_attr={"rankdir": RANK_DIRECTION})

    nodes, edges = collect_nodes_and_edges(root)

    for node in nodes:
        node_id = str(id(node))
        node_label = _RECORD_SPECIAL.sub(r"\\\1", node.label)
        graph.node(
            name=node_id,
            label=f"{node_label} | data {node.data:.{VALUE_PRECISION}f}",
            shape="record",
        )

        if not node.is_leaf:
            op_node_id = node_id + node.op.name
            graph.node(name=op_node_id, label=node.op.symbol)
            graph.edge(op_node_id, node_id)

    for child_node, parent_node in edges:
        # Operands feed the parent's operation node.
        graph.edge(str(id(child_node)), str(id(parent_node)) + parent_node.op.name)

    return graph


def render_graph(
    root: Node,
    filename: str,
    fmt: str = DEFAULT_FORMAT,
    view: bool = False,
) -> str | None:
    """
    Draws the graph and writes it to disk.

    Rendering needs the Graphviz `dot` executable. When it is not installed
    the graph is skipped with a warning.

    Args:
        root: The root node of the computational graph.
        filename: Output path without the format extension.
        fmt: Output format, e.g. "svg" or "png".
        view: Open the rendered file with the system viewer.

    Returns:
        The path of the rendered file, or None if rendering was skipped.
    """
    graph = draw_graph(root, fmt=fmt)
    try:
        path = graph.render(filename, view=view)
    except ExecutableNotFound:
        logger.warning("graphviz executable not found, skipping render of %s", filename)
        return None
    logger.debug("rendered graph for %r to %s", root.label, path)
    return path
