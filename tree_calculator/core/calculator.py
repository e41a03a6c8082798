"""Entry points chaining the tree builder and the evaluator."""
from tree_calculator.common.errors import ParseError
from tree_calculator.common.logger import logger
from tree_calculator.common.operations import OperationRequest, OperationResult
from tree_calculator.core.builder import TreeBuilder
from tree_calculator.core.evaluator import Evaluator


def calculate(expression: str) -> float:
    """
    Build the operand tree of an expression and evaluate it.

    The tree is built fresh on every call and discarded afterwards.

    :param str expression: Display expression, e.g. ``-5+3``

    :return: Computed result
    :rtype: float
    :raises ParseError: If the expression is empty or malformed
    """
    return Evaluator.evaluate(TreeBuilder.build(expression))


def compute(request: OperationRequest) -> OperationResult:
    """
    Evaluate a request without raising on malformed expressions.

    :param OperationRequest request: Expression to evaluate

    :return: Result carrying either the value or the parse error message
    :rtype: OperationResult
    """
    try:
        result: float = calculate(request.expression)
    except ParseError as exc:
        logger.error(f"🧮❌ Could not evaluate {request.expression!r}: {exc}")
        return OperationResult(expression=request.expression, error=str(exc))

    logger.debug(f"🧮✅ {request.expression} = {result}")
    return OperationResult(expression=request.expression, result=result)
