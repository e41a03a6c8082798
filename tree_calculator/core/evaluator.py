"""Evaluate operand trees."""
import math
import operator
from typing import Callable, Dict, List, Tuple

from tree_calculator.common.errors import ParseError
from tree_calculator.common.models import OperandNode, OperatorKind


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn = Callable[[float, float], float]


def ieee_divide(a: float, b: float) -> float:
    """
    Divide following IEEE-754 instead of raising ZeroDivisionError.

    ``x/0`` is an infinity signed by both operands (``-0.0`` counts as negative),
    ``0/0`` and ``nan/0`` are NaN.

    :param float a: Dividend
    :param float b: Divisor

    :return: Quotient
    :rtype: float
    """
    if b != 0:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


OPERATORS: Dict[OperatorKind, OperatorFn] = {
    OperatorKind.MINUS: operator.sub,
    OperatorKind.PLUS: operator.add,
    OperatorKind.DIV: ieee_divide,
    OperatorKind.TIMES: operator.mul,
}


class Evaluator:
    """
    Reduce an operand tree to a float.

    The walk is post-order with an explicit stack, so right-leaning chains of any
    length evaluate without hitting the interpreter recursion limit.
    """

    @staticmethod
    def evaluate(node: OperandNode) -> float:
        """
        Evaluate a tree.

        :param OperandNode node: Root of the tree

        :return: Computed result, possibly infinite or NaN after a division by zero
        :rtype: float
        :raises ParseError: If an operator node is missing one of its operands
        """
        values: List[float] = []
        stack: List[Tuple[OperandNode, bool]] = [(node, False)]

        while stack:
            current, operands_ready = stack.pop()
            if operands_ready:
                right: float = values.pop()
                left: float = values.pop()
                values.append(OPERATORS[current.kind](left, right))
                continue

            if current.is_leaf and current.kind == OperatorKind.NUMBER:
                values.append(current.value)
                continue

            if current.left is None or current.right is None:
                raise ParseError(f"{current.kind.name} node is missing an operand")

            # Left is popped first so its value lands below the right one
            stack.append((current, True))
            stack.append((current.right, False))
            stack.append((current.left, False))

        return values[0]
