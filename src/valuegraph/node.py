from __future__ import annotations
import logging
import math
from decimal import Decimal
from functools import total_ordering
from typing import Union

from valuegraph.errors import GraphConstructionError, InvalidOperandError
from valuegraph.operation import Operation

logger = logging.getLogger(__name__)

Scalar = Union[int, float, Decimal]


def _exp(x: Scalar) -> Scalar:
    # Decimal keeps its own precision; everything else goes through floats.
    if isinstance(x, Decimal):
        return x.exp()
    return math.exp(x)


def _tanh(x: Scalar) -> Scalar:
    """
    Evaluate (e^(2x) - 1) / (e^(2x) + 1) without overflowing.

    For non-negative x the fraction is rewritten in terms of e^(-2x), so the
    exponential is always taken of a non-positive number and stays in [0, 1].
    NaN is returned as is. Decimal NaN cannot be ordered against zero.
    """
    if x != x:
        return x
    if x >= 0:
        e = _exp(-2 * x)
        return (1 - e) / (1 + e)
    e = _exp(2 * x)
    return (e - 1) / (e + 1)


@total_ordering
class Node:
    """
    Represents a node in a scalar computational graph.

    Each node stores a numerical value (data) together with the operation
    that produced it and the nodes it was computed from (its operands).
    A Python reference to a Node is the handle to that data: storing a node
    as an operand of several downstream nodes shares it rather than copying
    it, so a label change is visible through every reference.

    Only the label can change after construction. The value, operation and
    operands are fixed, which keeps the graph acyclic: an operation can only
    consume nodes that already exist.

    Nodes compare structurally. Two nodes are equal when their values,
    labels, operations and operands (recursively) are equal, so separately
    built nodes with the same derivation are interchangeable in sets, dicts
    and sorted containers.
    """

    def __init__(
        self,
        data: Scalar,
        _children: tuple[Node, ...] = (),
        _op: Operation = Operation.NONE,
        label: str = "",
    ) -> None:
        """
        Initialize a Node in the computational graph.

        Args:
            data: The numerical value stored in this node.
            _children: Operand nodes, in the order the operation consumed them.
            _op: The operation that produced this node (Operation.NONE for leaves).
            label: Human-readable label for display and graph drawing.

        Raises:
            InvalidOperandError: If an operand is not a Node.
            GraphConstructionError: If the operand count does not match the
                operation's arity.
        """
        if not isinstance(_op, Operation):
            raise GraphConstructionError(f"unknown operation {_op!r}")
        children = tuple(_children)
        for child in children:
            if not isinstance(child, Node):
                raise InvalidOperandError(
                    f"operands must be Node instances, got {type(child).__name__}"
                )
        if len(children) != _op.arity:
            raise GraphConstructionError(
                f"{_op.name} takes {_op.arity} operand(s), got {len(children)}"
            )

        self._data = data
        self._prev = children
        self._op = _op
        self.label = label
        # Labels are left out so relabeling a node held in a set is safe.
        self._hash = hash((data, _op, tuple(child._hash for child in children)))

        logger.debug("created %s node %r with data %s", _op.name, label, data)

    @property
    def data(self) -> Scalar:
        return self._data

    @property
    def op(self) -> Operation:
        return self._op

    @property
    def operands(self) -> tuple[Node, ...]:
        return self._prev

    @property
    def is_leaf(self) -> bool:
        return self._op.is_leaf

    def __repr__(self) -> str:
        return f"Node(data={self._data}, label={self.label!r})"

    def __str__(self) -> str:
        from valuegraph.graph import describe

        return describe(self)

    def __copy__(self) -> Node:
        # Copying a handle aliases the node.
        return self

    def __deepcopy__(self, memo: dict) -> Node:
        return self

    def __hash__(self) -> int:
        return self._hash

    def _first_difference(self, other: Node) -> tuple | None:
        """
        Find the first field where two derivations disagree.

        Both graphs are walked side by side in the order a comparison of
        (data, label, op, operands) tuples would visit them: a node's own
        fields first, then each operand pair left to right. The walk uses an
        explicit stack, and a pair of nodes reached again through a shared
        operand is only checked once.

        Args:
            other: The node to compare against.

        Returns:
            The (mine, theirs) pair of the first differing field, or None if
            the derivations are identical.
        """
        pending = [(self, other)]
        checked: set[tuple[int, int]] = set()
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            pair = (id(left), id(right))
            if pair in checked:
                continue
            checked.add(pair)
            for mine, theirs in (
                (left._data, right._data),
                (left.label, right.label),
                (left._op, right._op),
            ):
                if mine != theirs:
                    return mine, theirs
            # Reversed so the first operand pair is popped first.
            pending.extend(reversed(list(zip(left._prev, right._prev))))
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        if self._hash != other._hash:
            return False
        return self._first_difference(other) is None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        difference = self._first_difference(other)
        return difference is not None and difference[0] < difference[1]

    def __add__(self, other: Node) -> Node:
        """
        Overload the addition operator to create a new node.

        The new node's operands are (self, other), its operation is ADD and
        its label is the parenthesized infix form of both operand labels.

        Args:
            other: The node to add to this node.

        Returns:
            A new Node holding self.data + other.data.
        """
        if not isinstance(other, Node):
            return NotImplemented
        return Node(
            self._data + other._data,
            (self, other),
            Operation.ADD,
            label=f"({self.label} {Operation.ADD.symbol} {other.label})",
        )

    def __mul__(self, other: Node) -> Node:
        """
        Overload the multiplication operator to create a new node.

        Same shape as addition: operands (self, other), operation MULTIPLY,
        label "(<self> * <other>)".

        Args:
            other: The node to multiply with this node.

        Returns:
            A new Node holding self.data * other.data.
        """
        if not isinstance(other, Node):
            return NotImplemented
        return Node(
            self._data * other._data,
            (self, other),
            Operation.MULTIPLY,
            label=f"({self.label} {Operation.MULTIPLY.symbol} {other.label})",
        )

    def tanh(self) -> Node:
        """
        Compute the hyperbolic tangent of this node.

        The value follows (e^(2x) - 1) / (e^(2x) + 1). Results stay within
        [-1, 1] for every finite input; infinities map to +/-1 and NaN
        propagates. Integer data is promoted to float by the exponential,
        Decimal data stays Decimal.

        Returns:
            A new Node with this node as its single operand.
        """
        return Node(
            _tanh(self._data),
            (self,),
            Operation.TANH,
            label=f"{Operation.TANH.symbol}({self.label})",
        )
