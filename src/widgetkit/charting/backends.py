"""Draw surface backends.

``QtPainterSurface`` paints onto a live ``QPainter`` (used by ``ChartWidget``)
and ``MatplotlibSurface`` paints onto an off-screen Matplotlib ``Figure``
(used by ``export_chart``). Toolkit imports stay local to each backend so
the engine and the recording surface load without a GUI stack.
"""

from __future__ import annotations

import math
from typing import Any, List, Optional, Sequence, Tuple

from .surface import TextAlign, TextBaseline, parse_color

__all__ = ["QtPainterSurface", "MatplotlibSurface"]

ARC_SEGMENTS_PER_TURN = 96


def _arc_points(
    cx: float, cy: float, radius: float, start: float, end: float
) -> List[Tuple[float, float]]:
    sweep = end - start
    steps = max(2, int(math.ceil(abs(sweep) / math.tau * ARC_SEGMENTS_PER_TURN)) + 1)
    return [
        (cx + math.cos(start + sweep * i / (steps - 1)) * radius,
         cy + math.sin(start + sweep * i / (steps - 1)) * radius)
        for i in range(steps)
    ]


# ----------------------------------------------------------------------
# Qt
# ----------------------------------------------------------------------
class QtPainterSurface:  # pragma: no cover - exercised through the widget
    """Adapter from ``DrawSurface`` calls to an active ``QPainter``."""

    def __init__(self, painter: Any) -> None:
        from PyQt6.QtGui import QPainter, QPainterPath

        self._painter = painter
        self._painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        self._path_type = QPainterPath
        self._path = QPainterPath()

    @staticmethod
    def _color(color: str):
        from PyQt6.QtGui import QColor

        return QColor(*parse_color(color))

    @staticmethod
    def _font(size: float, bold: bool):
        from PyQt6.QtGui import QFont

        font = QFont()
        font.setPixelSize(max(1, int(round(size))))
        font.setBold(bold)
        return font

    def save(self) -> None:
        self._painter.save()

    def restore(self) -> None:
        self._painter.restore()

    def set_alpha(self, alpha: float) -> None:
        self._painter.setOpacity(alpha)

    def clip_rect(self, x: float, y: float, width: float, height: float) -> None:
        from PyQt6.QtCore import QRectF, Qt

        self._painter.setClipRect(QRectF(x, y, width, height), Qt.ClipOperation.IntersectClip)

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        from PyQt6.QtCore import QRectF

        self._painter.fillRect(QRectF(x, y, width, height), self._color(color))

    def stroke_rect(
        self, x: float, y: float, width: float, height: float, color: str, line_width: float
    ) -> None:
        from PyQt6.QtCore import QRectF, Qt
        from PyQt6.QtGui import QPen

        self._painter.save()
        self._painter.setPen(QPen(self._color(color), line_width))
        self._painter.setBrush(Qt.BrushStyle.NoBrush)
        self._painter.drawRect(QRectF(x, y, width, height))
        self._painter.restore()

    def begin_path(self) -> None:
        self._path = self._path_type()

    def move_to(self, x: float, y: float) -> None:
        self._path.moveTo(x, y)

    def line_to(self, x: float, y: float) -> None:
        if self._path.elementCount() == 0:
            self._path.moveTo(x, y)
        else:
            self._path.lineTo(x, y)

    def arc(self, cx: float, cy: float, radius: float, start: float, end: float) -> None:
        from PyQt6.QtCore import QRectF

        if self._path.elementCount() == 0:
            self._path.moveTo(cx + math.cos(start) * radius, cy + math.sin(start) * radius)
        # Qt measures angles counter-clockwise in degrees
        self._path.arcTo(
            QRectF(cx - radius, cy - radius, radius * 2, radius * 2),
            -math.degrees(start),
            -math.degrees(end - start),
        )

    def close_path(self) -> None:
        self._path.closeSubpath()

    def fill(self, color: str) -> None:
        self._painter.fillPath(self._path, self._color(color))

    def stroke(self, color: str, line_width: float, dash: Optional[Sequence[float]] = None) -> None:
        from PyQt6.QtGui import QPen

        pen = QPen(self._color(color), line_width)
        if dash:
            unit = max(line_width, 1.0)
            pen.setDashPattern([d / unit for d in dash])
        self._painter.strokePath(self._path, pen)

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        color: str,
        *,
        size: float = 12,
        bold: bool = False,
        align: TextAlign = "left",
        baseline: TextBaseline = "middle",
    ) -> None:
        from PyQt6.QtCore import QPointF
        from PyQt6.QtGui import QFontMetricsF

        font = self._font(size, bold)
        metrics = QFontMetricsF(font)
        advance = metrics.horizontalAdvance(text)
        if align == "center":
            x -= advance / 2
        elif align == "right":
            x -= advance
        if baseline == "top":
            y += metrics.ascent()
        elif baseline == "middle":
            y += (metrics.ascent() - metrics.descent()) / 2
        else:
            y -= metrics.descent()
        self._painter.save()
        self._painter.setFont(font)
        self._painter.setPen(self._color(color))
        self._painter.drawText(QPointF(x, y), text)
        self._painter.restore()

    def measure_text(self, text: str, *, size: float = 12, bold: bool = False) -> float:
        from PyQt6.QtGui import QFontMetricsF

        return QFontMetricsF(self._font(size, bold)).horizontalAdvance(text)


# ----------------------------------------------------------------------
# Matplotlib
# ----------------------------------------------------------------------
_VERTICAL_ALIGN = {"top": "top", "middle": "center", "bottom": "bottom"}


class MatplotlibSurface:
    """Off-screen surface drawing pixel coordinates onto a Matplotlib figure.

    The single axes spans the whole figure with an inverted y axis so data
    coordinates equal surface pixels. Arcs are flattened to line segments.
    """

    def __init__(self, width: float, height: float, *, dpi: int = 100) -> None:
        from matplotlib.figure import Figure

        self.width = width
        self.height = height
        self.dpi = dpi
        self.figure = Figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        self._ax = self.figure.add_axes((0, 0, 1, 1))
        self._ax.set_xlim(0, width)
        self._ax.set_ylim(height, 0)
        self._ax.set_axis_off()
        self._alpha = 1.0
        self._clip: Any = None
        self._stack: List[Tuple[float, Any]] = []
        self._vertices: List[Tuple[float, float]] = []
        self._codes: List[int] = []
        self._subpath_start: Optional[Tuple[float, float]] = None

    # Pixel lengths -> points (Matplotlib line widths and font sizes)
    def _pt(self, pixels: float) -> float:
        return pixels * 72.0 / self.dpi

    def _rgba(self, color: str) -> Tuple[float, float, float, float]:
        r, g, b, a = parse_color(color)
        return r / 255.0, g / 255.0, b / 255.0, a / 255.0 * self._alpha

    def _add(self, artist: Any) -> Any:
        if self._clip is not None:
            artist.set_clip_path(self._clip)
        return artist

    # State ---------------------------------------------------------------
    def save(self) -> None:
        self._stack.append((self._alpha, self._clip))

    def restore(self) -> None:
        if self._stack:
            self._alpha, self._clip = self._stack.pop()

    def set_alpha(self, alpha: float) -> None:
        self._alpha = alpha

    def clip_rect(self, x: float, y: float, width: float, height: float) -> None:
        from matplotlib.patches import Rectangle

        self._clip = Rectangle((x, y), width, height, transform=self._ax.transData)

    # Rectangles ----------------------------------------------------------
    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        from matplotlib.patches import Rectangle

        patch = Rectangle((x, y), width, height, facecolor=self._rgba(color), edgecolor="none")
        self._add(self._ax.add_patch(patch))

    def stroke_rect(
        self, x: float, y: float, width: float, height: float, color: str, line_width: float
    ) -> None:
        from matplotlib.patches import Rectangle

        patch = Rectangle(
            (x, y), width, height,
            fill=False, edgecolor=self._rgba(color), linewidth=self._pt(line_width),
        )
        self._add(self._ax.add_patch(patch))

    # Paths ---------------------------------------------------------------
    def begin_path(self) -> None:
        self._vertices, self._codes = [], []
        self._subpath_start = None

    def move_to(self, x: float, y: float) -> None:
        from matplotlib.path import Path

        self._vertices.append((x, y))
        self._codes.append(Path.MOVETO)
        self._subpath_start = (x, y)

    def line_to(self, x: float, y: float) -> None:
        from matplotlib.path import Path

        if self._subpath_start is None:
            self.move_to(x, y)
            return
        self._vertices.append((x, y))
        self._codes.append(Path.LINETO)

    def arc(self, cx: float, cy: float, radius: float, start: float, end: float) -> None:
        for x, y in _arc_points(cx, cy, radius, start, end):
            self.line_to(x, y)

    def close_path(self) -> None:
        from matplotlib.path import Path

        if self._subpath_start is None:
            return
        self._vertices.append(self._subpath_start)
        self._codes.append(Path.CLOSEPOLY)
        self._subpath_start = None

    def _current_path(self):
        from matplotlib.path import Path

        return Path(list(self._vertices), list(self._codes))

    def fill(self, color: str) -> None:
        from matplotlib.patches import PathPatch

        if not self._vertices:
            return
        patch = PathPatch(self._current_path(), facecolor=self._rgba(color), edgecolor="none")
        self._add(self._ax.add_patch(patch))

    def stroke(self, color: str, line_width: float, dash: Optional[Sequence[float]] = None) -> None:
        from matplotlib.patches import PathPatch

        if not self._vertices:
            return
        patch = PathPatch(
            self._current_path(),
            fill=False,
            edgecolor=self._rgba(color),
            linewidth=self._pt(line_width),
        )
        if dash:
            patch.set_linestyle((0, tuple(d / max(line_width, 1.0) for d in dash)))
        self._add(self._ax.add_patch(patch))

    # Text ----------------------------------------------------------------
    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        color: str,
        *,
        size: float = 12,
        bold: bool = False,
        align: TextAlign = "left",
        baseline: TextBaseline = "middle",
    ) -> None:
        artist = self._ax.text(
            x,
            y,
            text,
            color=self._rgba(color),
            fontsize=self._pt(size),
            fontweight="bold" if bold else "normal",
            ha=align,
            va=_VERTICAL_ALIGN[baseline],
        )
        self._add(artist)

    def measure_text(self, text: str, *, size: float = 12, bold: bool = False) -> float:
        from matplotlib.font_manager import FontProperties
        from matplotlib.textpath import TextPath

        if not text:
            return 0.0
        prop = FontProperties(weight="bold" if bold else "normal")
        return float(TextPath((0, 0), text, size=size, prop=prop).get_extents().width)

    # Output --------------------------------------------------------------
    def savefig(self, path: Any, *, format: str = "png", dpi: Optional[int] = None) -> None:
        self.figure.savefig(path, format=format, dpi=dpi or self.dpi)
