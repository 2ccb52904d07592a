"""
Functional surface over Node.

Every combinator takes existing nodes, leaves them untouched and returns a
new node that records them as operands. The accessors read and write the
few node fields callers are allowed to touch.
"""

from __future__ import annotations

from valuegraph.errors import InvalidOperandError
from valuegraph.node import Node, Scalar


def _check_operand(node: object, name: str) -> Node:
    if not isinstance(node, Node):
        raise InvalidOperandError(
            f"{name} must be a Node, got {type(node).__name__}"
        )
    return node


def create_leaf(value: Scalar, label: str = "") -> Node:
    """Create a node with no operands holding a literal value."""
    return Node(value, label=label)


def add(a: Node, b: Node) -> Node:
    """
    Sum two nodes into a new node.

    Args:
        a: The left operand.
        b: The right operand.

    Returns:
        A node holding a.data + b.data with operands (a, b) and the
        label "(<a> + <b>)".

    Raises:
        InvalidOperandError: If either operand is not a Node.
    """
    return _check_operand(a, "a") + _check_operand(b, "b")


def multiply(a: Node, b: Node) -> Node:
    """
    Multiply two nodes into a new node.

    Args:
        a: The left operand.
        b: The right operand.

    Returns:
        A node holding a.data * b.data with operands (a, b) and the
        label "(<a> * <b>)".

    Raises:
        InvalidOperandError: If either operand is not a Node.
    """
    return _check_operand(a, "a") * _check_operand(b, "b")


def tanh(a: Node) -> Node:
    """
    Apply the hyperbolic tangent to a node.

    Args:
        a: The single operand.

    Returns:
        A node holding tanh(a.data) with operands (a,) and the label
        "tanh(<a>)". Infinite inputs give +/-1 and NaN propagates.

    Raises:
        InvalidOperandError: If the operand is not a Node.
    """
    return _check_operand(a, "a").tanh()


def value(node: Node) -> Scalar:
    """Return the value computed when the node was built."""
    return _check_operand(node, "node").data


def label(node: Node) -> str:
    return _check_operand(node, "node").label


def set_label(node: Node, new_label: str) -> None:
    """
    Relabel a node in place.

    The node is shared, not copied, so the new label shows up everywhere
    the node is referenced, including as an operand of downstream nodes.
    """
    _check_operand(node, "node").label = new_label


def operands(node: Node) -> tuple[Node, ...]:
    return _check_operand(node, "node").operands
