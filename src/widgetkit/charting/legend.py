"""Legend model: one entry per series, slice or scatter point."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Tuple

from .constants import LEGEND_ITEM_HEIGHT, LEGEND_OFFSET, LEGEND_WIDTH
from .types import ChartSpec, ProcessedData

__all__ = ["LegendEntry", "LegendBox", "LegendModel"]


@dataclass(frozen=True)
class LegendEntry:
    color: str
    label: str
    visible: bool = True


@dataclass(frozen=True)
class LegendBox:
    x: float
    y: float
    width: float
    item_height: float
    item_count: int

    @property
    def height(self) -> float:
        # one spare row of padding below the items
        return (self.item_count + 1) * self.item_height


class LegendModel:
    """Derived view over processed data with a visibility toggle.

    Toggling visibility is a visual hide only: ranges and scales keep their
    values so the axes do not jump when an entry is hidden or restored.
    """

    def __init__(self, payload: ProcessedData) -> None:
        self._entries: List[LegendEntry] = [
            LegendEntry(color=item.color, label=item.label, visible=item.visible)
            for item in payload.items
        ]

    @property
    def entries(self) -> Tuple[LegendEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def is_visible(self, index: int) -> bool:
        return self._entries[index].visible

    def toggle_visibility(self, index: int) -> bool:
        """Flip entry ``index``; returns the new visibility."""
        if not 0 <= index < len(self._entries):
            raise IndexError(f"Legend entry {index} out of range (0..{len(self._entries) - 1})")
        entry = self._entries[index]
        self._entries[index] = replace(entry, visible=not entry.visible)
        return not entry.visible

    def box(self, spec: ChartSpec) -> LegendBox:
        return LegendBox(
            x=spec.width - LEGEND_OFFSET,
            y=spec.margin.top,
            width=LEGEND_WIDTH,
            item_height=LEGEND_ITEM_HEIGHT,
            item_count=len(self._entries),
        )
