"""Qt host widget for ``ChartEngine``.

``ChartWidget`` is a thin shell: it forwards mouse and key events to the
engine as ``PointerEvent`` / key names, repaints through ``QtPainterSurface``
and drives the entrance animation with a ``QVariantAnimation``. All chart
state lives in the engine.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from PyQt6.QtCore import QEasingCurve, Qt, QVariantAnimation, pyqtSignal
from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QWidget

from ..services.event_bus import ChartEvent
from ..services.settings_service import SettingsService
from .backends import QtPainterSurface
from .engine import ChartEngine, SpecLike
from .types import PointerEvent

__all__ = ["ChartWidget"]

log = logging.getLogger(__name__)

_KEY_NAMES = {
    Qt.Key.Key_Escape: "Escape",
    Qt.Key.Key_Return: "Enter",
    Qt.Key.Key_Enter: "Enter",
    Qt.Key.Key_Space: "Space",
}


class ChartWidget(QWidget):  # pragma: no cover - paint logic visually exercised
    elementHovered = pyqtSignal(object)
    elementSelected = pyqtSignal(object)
    selectionCleared = pyqtSignal()

    def __init__(
        self,
        spec: SpecLike | ChartEngine,
        parent: Optional[QWidget] = None,
        *,
        settings: SettingsService | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or SettingsService.instance
        self._engine = spec if isinstance(spec, ChartEngine) else ChartEngine(
            spec, settings=self._settings
        )
        self._progress = 1.0
        self._animation: Optional[QVariantAnimation] = None
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self._subscriptions = [
            self._engine.event_bus.subscribe(
                ChartEvent.DATA_POINT_HOVER, lambda evt: self.elementHovered.emit(evt.payload)
            ),
            self._engine.event_bus.subscribe(
                ChartEvent.DATA_POINT_SELECT, lambda evt: self.elementSelected.emit(evt.payload)
            ),
            self._engine.event_bus.subscribe(
                ChartEvent.SELECTION_CLEARED, lambda evt: self.selectionCleared.emit()
            ),
        ]
        self._apply_size()
        self._start_animation()

    # Data API ---------------------------------------------------------
    @property
    def engine(self) -> ChartEngine:
        return self._engine

    def reconfigure(self, spec: SpecLike) -> None:
        self._engine.reconfigure(spec)
        self._apply_size()
        self._start_animation()
        self.update()

    def set_data(self, data: Any, labels=None) -> None:
        self._engine.set_data(data, labels)
        self._start_animation()
        self.update()

    def toggle_legend_entry(self, index: int) -> bool:
        visible = self._engine.toggle_legend_entry(index)
        self.update()
        return visible

    def _apply_size(self) -> None:
        spec = self._engine.spec
        self.setMinimumSize(int(spec.width), int(spec.height))

    # Animation --------------------------------------------------------
    def _start_animation(self) -> None:
        if self._animation is not None:
            self._animation.stop()
            self._animation = None
        if not self._engine.spec.animated or self._settings.entrance_animation_ms <= 0:
            self._progress = 1.0
            return
        self._progress = 0.0
        anim = QVariantAnimation(self)
        anim.setStartValue(0.0)
        anim.setEndValue(1.0)
        anim.setDuration(int(self._settings.entrance_animation_ms))
        anim.setEasingCurve(QEasingCurve.Type.OutCubic)
        anim.valueChanged.connect(self._on_progress)
        anim.finished.connect(self._on_animation_finished)
        self._animation = anim
        anim.start()

    def _on_progress(self, value) -> None:
        self._progress = float(value)
        self.update()

    def _on_animation_finished(self) -> None:
        self._progress = 1.0
        self._animation = None
        self._engine.event_bus.publish(ChartEvent.ANIMATION_COMPLETE)
        self.update()

    # Painting ---------------------------------------------------------
    def paintEvent(self, event):  # type: ignore[override]
        painter = QPainter(self)
        try:
            self._engine.render(QtPainterSurface(painter), self._progress)
        finally:
            painter.end()

    # Interaction ------------------------------------------------------
    def _pointer(self, kind: str, event) -> PointerEvent:
        pos = event.position()
        mods = event.modifiers()
        additive = bool(
            mods & Qt.KeyboardModifier.ControlModifier or mods & Qt.KeyboardModifier.MetaModifier
        )
        return PointerEvent(kind, pos.x(), pos.y(), ctrl_or_meta=additive)

    def mouseMoveEvent(self, event):  # type: ignore[override]
        self._engine.handle_pointer(self._pointer("move", event))
        self.update()

    def mousePressEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self.setFocus()
            self._engine.handle_pointer(self._pointer("down", event))
            self.update()
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self._engine.handle_pointer(self._pointer("up", event))
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event):  # type: ignore[override]
        # move far outside any mark so hover and tooltip reset
        spec = self._engine.spec
        self._engine.handle_pointer(PointerEvent("move", -spec.width * 10, -spec.height * 10))
        self.update()
        super().leaveEvent(event)

    def keyPressEvent(self, event):  # type: ignore[override]
        name = _KEY_NAMES.get(Qt.Key(event.key()))
        if name is None:
            super().keyPressEvent(event)
            return
        self._engine.handle_key(name)
        self.update()

    def closeEvent(self, event):  # type: ignore[override]
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
        if self._animation is not None:
            self._animation.stop()
        log.debug("ChartWidget closed")
        super().closeEvent(event)
