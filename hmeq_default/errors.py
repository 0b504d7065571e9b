"""
Exception hierarchy for the default-prediction core.

Each error carries a human readable message plus a ``details`` dict with
the offending values (column names, shapes, iteration numbers) so a CLI
or notebook wrapper can show exactly what went wrong.
"""

from __future__ import annotations

from typing import Any


class HmeqError(Exception):
    """Base class for every error raised by ``hmeq_default``."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Structured form used when reporting the failure."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class DataError(HmeqError):
    """
    Malformed input data.

    Examples:
    - empty dataset after dropping incomplete rows
    - non-numeric value in a numeric field
    - zero-variance column while fitting the scaler
    """


class ShapeError(HmeqError):
    """Row or column counts that do not line up."""


class NumericalError(HmeqError):
    """
    Undefined numerical result.

    Raised when gradient descent diverges or a metric has a zero denominator.
    """
