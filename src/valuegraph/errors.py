class GraphConstructionError(ValueError):
    """Raised when a node cannot be built from the given operands."""


class InvalidOperandError(GraphConstructionError, TypeError):
    """Raised when an operand is not a Node."""
