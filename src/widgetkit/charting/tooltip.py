"""Tooltip text formatting and state."""

from __future__ import annotations

from dataclasses import dataclass

from .types import ChartElement, PointElement, SeriesElement, SliceElement

__all__ = ["TooltipState", "format_number", "format_tooltip"]


@dataclass(frozen=True)
class TooltipState:
    visible: bool = False
    anchor_x: float = 0.0
    anchor_y: float = 0.0
    text: str = ""

    @classmethod
    def hidden(cls) -> "TooltipState":
        return cls()


def format_number(value: float) -> str:
    """Shortest round-trip text; integral values drop the trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_tooltip(element: ChartElement) -> str:
    if isinstance(element, SliceElement):
        return f"{element.label}: {format_number(element.value)} ({element.percentage:.1f}%)"
    if isinstance(element, PointElement):
        return (
            f"{element.label}: ({format_number(element.x_value)}, "
            f"{format_number(element.y_value)})"
        )
    if isinstance(element, SeriesElement):
        return f"{element.label}: {format_number(element.value)}"
    raise TypeError(f"Unsupported element: {type(element).__name__}")
