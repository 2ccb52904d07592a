from __future__ import annotations
from enum import Enum
from functools import total_ordering


@total_ordering
class Operation(Enum):
    """
    Tag recording how a node's value was produced.

    Each member carries the symbol used when synthesizing labels and
    drawing graphs, and the number of operands the operation consumes.
    Members order by declaration so nodes holding them can be sorted.
    """

    NONE = ("", 0)
    ADD = ("+", 2)
    MULTIPLY = ("*", 2)
    TANH = ("tanh", 1)

    def __init__(self, symbol: str, arity: int) -> None:
        self.symbol = symbol
        self.arity = arity

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Operation):
            return NotImplemented
        members = list(Operation)
        return members.index(self) < members.index(other)

    @property
    def is_leaf(self) -> bool:
        return self is Operation.NONE
