"""Exceptions raised by the calculator package."""


class CalculatorError(Exception):
    """Base class for every error raised by the calculator."""


class ParseError(CalculatorError, ValueError):
    """
    Raised when an expression cannot be turned into an operand tree.

    Covers empty expressions, empty or malformed numeric literals,
    unsupported characters and incomplete operator nodes.
    """


class ArchiveError(CalculatorError, ValueError):
    """Raised when an input archive is unsupported or holds no .txt file."""
