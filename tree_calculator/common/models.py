"""Pydantic models for the operand tree."""
from enum import IntEnum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OperatorKind(IntEnum):
    """
    Node kinds of the operand tree.

    The integer value doubles as the precedence rank used by the tree builder:
    a lower rank binds looser and ends up closer to the root.

    PERCENT, DECIMAL and NEGATE are display symbols only and never become tree nodes.
    """

    MINUS = 1
    PLUS = 2
    DIV = 3
    TIMES = 4
    NUMBER = 5
    PERCENT = 6
    DECIMAL = 7
    NEGATE = 8


# Binary operators allowed inside the tree
BINARY_KINDS = (OperatorKind.MINUS, OperatorKind.PLUS, OperatorKind.DIV, OperatorKind.TIMES)

# Display symbol of each kind (NUMBER has none)
SYMBOLS: Dict[OperatorKind, str] = {
    OperatorKind.MINUS: "-",
    OperatorKind.PLUS: "+",
    OperatorKind.DIV: "/",
    OperatorKind.TIMES: "x",
    OperatorKind.PERCENT: "%",
    OperatorKind.DECIMAL: ".",
    OperatorKind.NEGATE: "_",
}

# Reverse lookup restricted to the binary operators
BINARY_SYMBOLS: Dict[str, OperatorKind] = {SYMBOLS[kind]: kind for kind in BINARY_KINDS}


class OperandNode(BaseModel):
    """
    Node of the binary operand tree.

    A NUMBER node is a leaf holding a parsed literal. An operator node combines
    its left and right subtrees; both children are present once the tree is complete.
    Nodes are immutable: the builder derives new nodes with ``model_copy`` instead of
    rewiring existing ones.
    """

    model_config = ConfigDict(frozen=True)

    kind: OperatorKind = Field(default=OperatorKind.NUMBER, description="Operator or NUMBER")
    value: Optional[float] = Field(default=None, description="Literal value, only set on NUMBER nodes")
    left: Optional["OperandNode"] = Field(default=None, description="Left operand subtree")
    right: Optional["OperandNode"] = Field(default=None, description="Right operand subtree")

    @model_validator(mode="after")
    def check_kind_consistency(self) -> "OperandNode":
        """Ensure the node kind matches its value and children."""
        if self.kind == OperatorKind.NUMBER:
            if self.value is None:
                raise ValueError("NUMBER node requires a value")
            if self.left is not None or self.right is not None:
                raise ValueError("NUMBER node cannot have children")
        elif self.kind in BINARY_KINDS:
            if self.value is not None:
                raise ValueError(f"{self.kind.name} node cannot carry a value")
        else:
            raise ValueError(f"{self.kind.name} is a display symbol, not a tree node")
        return self

    @property
    def rank(self) -> int:
        """Precedence rank of the node."""
        return int(self.kind)

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None
