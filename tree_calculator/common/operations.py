"""Pydantic models for calculation requests and results."""
from typing import Optional

from pydantic import BaseModel, Field


class OperationRequest(BaseModel):
    """Represents a single expression submitted for evaluation."""

    expression: str = Field(..., description="Calculator expression, e.g. '2+3x4'")


class OperationResult(BaseModel):
    """
    Represents the outcome of an evaluated expression.

    Exactly one of ``result`` or ``error`` is set. Division by zero is not an error:
    the result is then an IEEE infinity or NaN.
    """

    expression: str = Field(..., description="Original expression")
    result: Optional[float] = Field(default=None, description="Evaluated numeric result")
    error: Optional[str] = Field(default=None, description="Parse error message when evaluation failed")

    @property
    def ok(self) -> bool:
        return self.error is None
