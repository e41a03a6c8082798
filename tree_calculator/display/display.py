"""Headless calculator display: the text buffer edited by keypad input."""
import math
import string
from typing import Dict

from pydantic import BaseModel, Field, field_validator

from tree_calculator.common.logger import logger
from tree_calculator.common.models import BINARY_KINDS, OperatorKind, SYMBOLS
from tree_calculator.common.operations import OperationRequest, OperationResult
from tree_calculator.core.calculator import compute


EMPTY_DISPLAY = "0"
# Kinds that can be appended to the display as a symbol
APPENDABLE_KINDS = BINARY_KINDS + (OperatorKind.DECIMAL,)

# Keyboard keys mapped to operator kinds ('*' is the keypad multiply key)
KEY_OPERATORS: Dict[str, OperatorKind] = {
    "+": OperatorKind.PLUS,
    "-": OperatorKind.MINUS,
    "/": OperatorKind.DIV,
    "x": OperatorKind.TIMES,
    "*": OperatorKind.TIMES,
    ".": OperatorKind.DECIMAL,
}
EQUALS_KEYS = ("=", "\n", "\r")
CLEAR_KEYS = ("c", "C")
BACKSPACE_KEYS = ("<", "\b")


def format_result(value: float) -> str:
    """
    Render a result for the display.

    Integral values are shown without a fractional part, anything else
    (fractions, infinities, NaN) through ``repr``.

    :param float value: Result to render

    :return: Display text
    :rtype: str
    """
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


class Display(BaseModel):
    """
    Text buffer of the calculator screen.

    Keypad input edits the text; ``equals`` hands the text to the calculator core
    and replaces it with the formatted result. Percent and sign negation are
    transforms of the text itself and never reach the tree builder.

    Rules:
        - The empty display reads "0" and is replaced by the first digit or operator
        - A "0" typed right after an operator is ignored
        - Backspace on a single character clears the display
        - A failed evaluation leaves the text untouched
    """

    text: str = Field(default=EMPTY_DISPLAY, description="Current display text")

    @field_validator("text")
    def text_must_not_be_empty(cls, v: str) -> str:
        """Replace an empty text with the empty display."""
        return v or EMPTY_DISPLAY

    def _last_is_digit(self) -> bool:
        return self.text[-1] in string.digits

    def add_digit(self, digit: int) -> None:
        """
        Append a digit.

        :param int digit: Digit between 0 and 9
        :raises ValueError: If ``digit`` is not a single decimal digit
        """
        if not 0 <= digit <= 9:
            raise ValueError(f"Not a digit: {digit}")

        if self._last_is_digit():
            if self.text == EMPTY_DISPLAY:
                self.text = ""
            self.text += str(digit)
        elif digit != 0 or self.text[-1] == SYMBOLS[OperatorKind.DECIMAL]:
            self.text += str(digit)

    def add_operator(self, kind: OperatorKind) -> None:
        """
        Append an operator symbol or the decimal point.

        :param OperatorKind kind: MINUS, PLUS, DIV, TIMES or DECIMAL
        :raises ValueError: If the kind cannot be typed on the display
        """
        if kind not in APPENDABLE_KINDS:
            raise ValueError(f"{kind.name} cannot be appended to the display")

        if self.text == EMPTY_DISPLAY:
            self.text = ""
        self.text += SYMBOLS[kind]

    def clear(self) -> None:
        self.text = EMPTY_DISPLAY

    def backspace(self) -> None:
        """Delete the last character, clearing the display when one is left."""
        if len(self.text) <= 1:
            self.clear()
        else:
            self.text = self.text[:-1]

    def negate(self) -> None:
        """Toggle the leading minus sign; a display starting with 0 is left as is."""
        if self.text.startswith("0"):
            return
        if self.text.startswith(SYMBOLS[OperatorKind.MINUS]):
            self.text = self.text[1:] or EMPTY_DISPLAY
        else:
            self.text = SYMBOLS[OperatorKind.MINUS] + self.text

    def percent(self) -> None:
        """Replace a plain number on the display by its hundredth."""
        try:
            value = float(self.text)
        except ValueError:
            logger.warning(f"📟 Percent ignored, display is not a number: {self.text!r}")
            return
        self.text = format_result(value / 100)

    def equals(self) -> OperationResult:
        """
        Evaluate the display text and show the result.

        :return: Outcome of the evaluation
        :rtype: OperationResult
        """
        outcome: OperationResult = compute(OperationRequest(expression=self.text))
        if outcome.ok:
            self.text = format_result(outcome.result)
        return outcome

    def press(self, key: str) -> None:
        """
        Dispatch a single keyboard key.

        :param str key: Digit, operator key, ``%``, ``_`` (negate), ``=`` or newline,
            ``c``/``C`` (clear), ``<`` or backspace

        :raises ValueError: If the key is not bound
        """
        if len(key) == 1 and key in string.digits:
            self.add_digit(int(key))
        elif key in KEY_OPERATORS:
            self.add_operator(KEY_OPERATORS[key])
        elif key == SYMBOLS[OperatorKind.PERCENT]:
            self.percent()
        elif key == SYMBOLS[OperatorKind.NEGATE]:
            self.negate()
        elif key in EQUALS_KEYS:
            self.equals()
        elif key in CLEAR_KEYS:
            self.clear()
        elif key in BACKSPACE_KEYS:
            self.backspace()
        else:
            raise ValueError(f"Unbound key: {key!r}")
