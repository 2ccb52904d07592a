"""
Scalar computation graphs.

Leaves hold literal values; add, multiply and tanh build new nodes that
remember the operands and operation they came from.
"""

import logging

from valuegraph.errors import GraphConstructionError, InvalidOperandError
from valuegraph.graph import (
    collect_nodes_and_edges,
    describe,
    draw_graph,
    render_graph,
    topological_order,
)
from valuegraph.node import Node
from valuegraph.operation import Operation
from valuegraph.ops import (
    add,
    create_leaf,
    label,
    multiply,
    operands,
    set_label,
    tanh,
    value,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Node",
    "Operation",
    "GraphConstructionError",
    "InvalidOperandError",
    "create_leaf",
    "add",
    "multiply",
    "tanh",
    "value",
    "label",
    "set_label",
    "operands",
    "describe",
    "collect_nodes_and_edges",
    "topological_order",
    "draw_graph",
    "render_graph",
]
