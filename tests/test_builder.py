"""Test class TreeBuilder."""
import pytest

from tree_calculator.common.errors import ParseError
from tree_calculator.common.models import BINARY_SYMBOLS, OperandNode, OperatorKind
from tree_calculator.core.builder import TreeBuilder


@pytest.mark.parametrize("expr,expected", [
    ("3+", "3"),
    ("3.", "3"),
    ("3", "3"),
    ("-", ""),
    ("", ""),
])
def test_strip_pending(expr, expected):
    """strip_pending drops a single trailing non-digit character."""
    assert TreeBuilder.strip_pending(expr) == expected


@pytest.mark.parametrize("expr,expected", [
    ("42", ["42"]),
    ("-5+3", ["-5", "+", "3"]),
    ("2+3x4", ["2", "+", "3", "x", "4"]),
    ("1.5/2", ["1.5", "/", "2"]),
    ("5x-3", ["5", "x", "-3"]),  # sign of the literal following an operator
    ("10-4", ["10", "-", "4"]),
])
def test_tokenize(expr, expected):
    """tokenize splits literals and operator symbols."""
    assert TreeBuilder.tokenize(expr) == expected


@pytest.mark.parametrize("expr", [
    "",         # Nothing to flush
    "5+x3",     # Operator without left operand
    "3+",       # Missing final operand
    "2*3",      # Unsupported operator symbol
    "2 + 3",    # Whitespace is not part of the alphabet
])
def test_tokenize_invalid(expr):
    """tokenize raises ParseError on empty literals and unknown characters."""
    with pytest.raises(ParseError):
        TreeBuilder.tokenize(expr)


@pytest.mark.parametrize("text,expected", [
    ("42", 42.0),
    ("-8.5", -8.5),
    (".5", 0.5),
    ("5.", 5.0),
])
def test_parse_literal(text, expected):
    """parse_literal converts well-formed literals."""
    assert TreeBuilder.parse_literal(text) == expected


@pytest.mark.parametrize("text", ["1..2", "1.2.3", "-", ".", "-."])
def test_parse_literal_invalid(text):
    """parse_literal raises ParseError on malformed literals."""
    with pytest.raises(ParseError):
        TreeBuilder.parse_literal(text)


def test_build_single_literal():
    """A lone literal builds a NUMBER leaf."""
    tree = TreeBuilder.build("42")
    assert tree.kind == OperatorKind.NUMBER
    assert tree.value == 42.0
    assert tree.is_leaf


def test_build_higher_rank_chains_right():
    """2+3x4 groups as 2+(3x4)."""
    tree = TreeBuilder.build("2+3x4")
    assert tree.kind == OperatorKind.PLUS
    assert tree.left.value == 2.0
    assert tree.right.kind == OperatorKind.TIMES
    assert tree.right.left.value == 3.0
    assert tree.right.right.value == 4.0


def test_build_lower_rank_becomes_root():
    """2x3+4 groups as (2x3)+4: the later, lower-rank operator captures the tree."""
    tree = TreeBuilder.build("2x3+4")
    assert tree.kind == OperatorKind.PLUS
    assert tree.left.kind == OperatorKind.TIMES
    assert tree.left.left.value == 2.0
    assert tree.left.right.value == 3.0
    assert tree.right.value == 4.0


def test_build_equal_rank_chains_right():
    """10-4-3 groups as 10-(4-3) under the rank rule."""
    tree = TreeBuilder.build("10-4-3")
    assert tree.kind == OperatorKind.MINUS
    assert tree.left.value == 10.0
    assert tree.right.kind == OperatorKind.MINUS
    assert tree.right.left.value == 4.0
    assert tree.right.right.value == 3.0


def test_build_leading_minus_is_signed_literal():
    """A leading '-' is the sign of the first literal, not a MINUS node."""
    tree = TreeBuilder.build("-5+3")
    assert tree.kind == OperatorKind.PLUS
    assert tree.left.kind == OperatorKind.NUMBER
    assert tree.left.value == -5.0


def test_insert_does_not_mutate_tree():
    """insert returns a new root and leaves the original tree untouched."""
    tree = TreeBuilder.build("1+2")
    new_tree = TreeBuilder.insert(tree, OperandNode(kind=OperatorKind.TIMES))

    assert tree.right.kind == OperatorKind.NUMBER
    assert tree.right.value == 2.0
    assert new_tree.right.kind == OperatorKind.TIMES
    assert new_tree.right.left.value == 2.0
    assert new_tree.left is tree.left


def test_insert_into_empty_tree():
    """Inserting into an empty tree returns the inserted node."""
    node = OperandNode(value=7.0)
    assert TreeBuilder.insert(None, node) is node


@pytest.mark.parametrize("expr", [
    "",      # Empty expression
    "-",     # Lone sign, nothing left after stripping
    "1..2",  # Several decimal points
    "3+-",   # Trailing sign leaves a pending operator
    "5+x3",  # Operator without left operand
    "2*3",   # Unsupported operator
])
def test_build_invalid_expression(expr):
    """build raises ParseError, a ValueError, for malformed expressions."""
    with pytest.raises(ValueError):
        TreeBuilder.build(expr)


def fold_insert(expr: str) -> OperandNode:
    """Build a tree by inserting every token one at a time."""
    tree = None
    for index, token in enumerate(TreeBuilder.tokenize(TreeBuilder.strip_pending(expr))):
        if index % 2 == 0:
            node = OperandNode(value=TreeBuilder.parse_literal(token))
        else:
            node = OperandNode(kind=BINARY_SYMBOLS[token])
        tree = TreeBuilder.insert(tree, node)
    return tree


@pytest.mark.parametrize("expr", [
    "42",
    "1+2+3",
    "2+3x4",
    "2x3+4",
    "10-4-3",
    "2-3x4+5",
    "8/4x2-1+6/3x2",
    "-5x-3/2+1-7",
])
def test_build_matches_repeated_insert(expr):
    """build yields the same tree as inserting the tokens one by one."""
    assert TreeBuilder.build(expr).model_dump() == fold_insert(expr).model_dump()


def test_insert_into_deep_tree():
    """insert walks a right spine deeper than the recursion limit."""
    tree = TreeBuilder.build("1+" * 5000 + "1")
    new_tree = TreeBuilder.insert(tree, OperandNode(kind=OperatorKind.MINUS))

    assert new_tree.kind == OperatorKind.MINUS
    assert new_tree.left is tree
    assert new_tree.right is None
