"""Build an operand tree from a calculator display expression."""
import string
from typing import Dict, List, Optional, Tuple

from tree_calculator.common.errors import ParseError
from tree_calculator.common.logger import logger
from tree_calculator.common.models import BINARY_SYMBOLS, OperandNode, OperatorKind, SYMBOLS


DIGITS = frozenset(string.digits)
DECIMAL_POINT = SYMBOLS[OperatorKind.DECIMAL]
SIGN = SYMBOLS[OperatorKind.MINUS]


class TreeBuilder:
    """
    Turn a flat calculator expression into a binary operand tree.

    Expressions are what the calculator display holds, e.g. ``-5+3`` or ``2+3x4``:
    numeric literals alternating with the single-character operators ``-``, ``+``,
    ``/`` and ``x``. A ``-`` opening a literal is its sign, not an operator.

    Algorithm:
        1. Drop a pending trailing operator (last character not a digit)
        2. Tokenize into literals and operator symbols in a single left-to-right scan
        3. Insert every token into the tree using the rank of its kind

    Insertion rule:
        - An empty tree becomes the inserted node
        - A node ranking strictly lower than the current root becomes the new root,
          the old root being its left child
        - Otherwise the node is inserted into the right subtree

    Ranks are MINUS(1) < PLUS(2) < DIV(3) < TIMES(4) < NUMBER(5). This is not
    conventional precedence: equal or higher ranks chain to the right, so
    ``10-4-3`` groups as ``10-(4-3)`` while ``2x3+4`` groups as ``(2x3)+4``.
    """

    @staticmethod
    def strip_pending(expression: str) -> str:
        """
        Drop the last character if it is not a digit.

        A trailing operator or decimal point is still waiting for its right operand.

        :param str expression: Display expression

        :return: Expression ending with a digit, or an empty string
        :rtype: str
        """
        if expression and expression[-1] not in DIGITS:
            return expression[:-1]
        return expression

    @staticmethod
    def tokenize(expression: str) -> List[str]:
        """
        Split an expression into literal and operator tokens.

        :param str expression: Expression without a pending trailing operator

        :return: Tokens alternating literal and operator, starting and ending with a literal
        :rtype: List[str]
        :raises ParseError: If a literal is empty or a character is not supported
        """
        tokens: List[str] = []
        literal = ""

        for position, char in enumerate(expression):
            if char in DIGITS or char == DECIMAL_POINT or (not literal and char == SIGN):
                literal += char
                continue

            if char not in BINARY_SYMBOLS:
                raise ParseError(f"Unsupported character {char!r} at position {position}: {expression!r}")
            if not literal:
                raise ParseError(f"Missing operand before {char!r} at position {position}: {expression!r}")

            tokens.append(literal)
            tokens.append(char)
            literal = ""

        # Flush the last literal
        if not literal:
            raise ParseError(f"Missing final operand: {expression!r}")
        tokens.append(literal)
        return tokens

    @staticmethod
    def parse_literal(text: str) -> float:
        """
        Convert a literal token to a float.

        :param str text: Literal made of an optional sign, digits and a decimal point

        :return: Parsed value
        :rtype: float
        :raises ParseError: If the literal is malformed (e.g. ``1.2.3`` or a lone ``-``)
        """
        try:
            return float(text)
        except ValueError as exc:
            raise ParseError(f"Malformed number: {text!r}") from exc

    @staticmethod
    def insert(tree: Optional[OperandNode], elem: OperandNode) -> OperandNode:
        """
        Insert a node into a tree according to the rank rule.

        The tree is never mutated: the returned root shares untouched subtrees with
        the input and replaces only the nodes along the insertion path.

        :param Optional[OperandNode] tree: Current root, None when the tree is empty
        :param OperandNode elem: Node to insert

        :return: New root of the tree
        :rtype: OperandNode
        """
        # Walk down the right spine until a node ranks strictly higher than elem
        path: List[OperandNode] = []
        node: Optional[OperandNode] = tree
        while node is not None and elem.rank >= node.rank:
            path.append(node)
            node = node.right

        # Lower rank captures the displaced subtree as its left operand
        subtree: OperandNode = elem if node is None else elem.model_copy(update={"left": node})
        for parent in reversed(path):
            subtree = parent.model_copy(update={"right": subtree})
        return subtree

    @staticmethod
    def build(expression: str) -> OperandNode:
        """
        Build the operand tree of an expression.

        Produces the same tree as folding ``insert`` over the tokens, in linear time.
        Ranks never decrease along the right spine, so the spine is kept as a stack:
        a new node pops every spine node ranking higher than itself, takes the topmost
        popped one as left child and hangs below the remaining spine.

        :param str expression: Display expression, e.g. ``2+3x4``

        :return: Root of the complete operand tree
        :rtype: OperandNode
        :raises ParseError: If the expression is empty or malformed
        """
        if not expression:
            raise ParseError("Empty expression")

        tokens: List[str] = TreeBuilder.tokenize(TreeBuilder.strip_pending(expression))
        logger.debug(f"🌳 Tokens for {expression!r}: {tokens}")

        slots: List[_Slot] = []
        spine: List[int] = []
        # Tokens alternate literal, operator, literal, ...
        for index, token in enumerate(tokens):
            if index % 2 == 0:
                slot = _Slot(OperatorKind.NUMBER, TreeBuilder.parse_literal(token))
            else:
                slot = _Slot(BINARY_SYMBOLS[token])
            slots.append(slot)

            displaced: Optional[int] = None
            while spine and slots[spine[-1]].kind > slot.kind:
                displaced = spine.pop()
            slot.left = displaced
            if spine:
                slots[spine[-1]].right = index
            spine.append(index)

        return TreeBuilder._freeze(slots, spine[0])

    @staticmethod
    def _freeze(slots: List["_Slot"], root: int) -> OperandNode:
        """
        Turn the slot arena into immutable nodes, children first.

        :param List[_Slot] slots: Arena filled by ``build``
        :param int root: Index of the root slot

        :return: Root node
        :rtype: OperandNode
        """
        nodes: Dict[int, OperandNode] = {}
        stack: List[Tuple[int, bool]] = [(root, False)]
        while stack:
            index, children_done = stack.pop()
            slot = slots[index]
            if children_done:
                nodes[index] = OperandNode(
                    kind=slot.kind,
                    value=slot.value,
                    left=nodes.get(slot.left),
                    right=nodes.get(slot.right),
                )
                continue
            stack.append((index, True))
            for child in (slot.left, slot.right):
                if child is not None:
                    stack.append((child, False))
        return nodes[root]


class _Slot:
    """Mutable node used while building, children referenced by arena index."""

    __slots__ = ("kind", "value", "left", "right")

    def __init__(self, kind: OperatorKind, value: Optional[float] = None):
        self.kind = kind
        self.value = value
        self.left: Optional[int] = None
        self.right: Optional[int] = None
