"""Hover / selection state keyed by stable element identity.

Hit-tests build a new descriptor object on every call, so membership is
tracked by ``ElementKey`` value rather than by descriptor identity; the same
data point hit twice is recognized as the same element.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from .types import ChartElement, ElementKey

__all__ = ["SelectionModel"]


class SelectionModel:
    def __init__(self) -> None:
        self._hovered: Optional[ElementKey] = None
        # dict preserves selection order for event payloads
        self._selected: Dict[ElementKey, None] = {}

    # Hover ------------------------------------------------------------
    @property
    def hovered_key(self) -> Optional[ElementKey]:
        return self._hovered

    def set_hovered(self, element: Optional[ChartElement]) -> bool:
        """Record the hovered element; returns True when the hovered key changed."""
        key = element.key if element is not None else None
        if key == self._hovered:
            return False
        self._hovered = key
        return True

    # Selection --------------------------------------------------------
    @property
    def selected_keys(self) -> Tuple[ElementKey, ...]:
        return tuple(self._selected)

    def is_selected(self, key: ElementKey) -> bool:
        return key in self._selected

    def toggle_selected(self, element: ChartElement, additive: bool) -> bool:
        """Apply a click on ``element``; returns whether it ends up selected.

        Single-select (``additive=False``) replaces the selection with the
        element. Additive mode (modifier key held) toggles its membership.
        """
        key = element.key
        if not additive:
            self._selected = {key: None}
            return True
        if key in self._selected:
            del self._selected[key]
            return False
        self._selected[key] = None
        return True

    def select_only(self, key: ElementKey) -> None:
        self._selected = {key: None}

    def discard_group(self, group: int) -> None:
        """Drop hover/selection for every element of a legend entry."""
        self._selected = {k: None for k in self._selected if k.group != group}
        if self._hovered is not None and self._hovered.group == group:
            self._hovered = None

    def clear_selection(self) -> None:
        self._selected.clear()

    def reset(self) -> None:
        self._hovered = None
        self._selected.clear()
