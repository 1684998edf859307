"""Chart error taxonomy."""

from __future__ import annotations

__all__ = ["ChartError", "DataShapeError", "ScaleError", "InteractionError"]


class ChartError(Exception):
    """Base class for all chart engine failures."""


class DataShapeError(ChartError, ValueError):
    """Raw data does not match the shape required by the chart kind.

    ``rule`` names the violated rule (``non_empty``, ``numeric``,
    ``uniform_shape``, ``non_negative``, ``positive_total``,
    ``coordinate_pair``).
    """

    def __init__(self, rule: str, message: str) -> None:
        super().__init__(message)
        self.rule = rule


class ScaleError(ChartError, ArithmeticError):
    """A scale would divide by a zero or negative extent."""

    def __init__(self, axis: str, message: str) -> None:
        super().__init__(message)
        self.axis = axis


class InteractionError(ChartError):
    """Unexpected failure while hit-testing or updating selection."""

    def __init__(self, context: str, message: str) -> None:
        super().__init__(message)
        self.context = context
