"""Chart renderer: frame snapshot -> draw calls.

``ChartRenderer.draw`` is a pure function of the ``RenderFrame`` it is given
(processed payload, scale, selection, tooltip, legend, animation progress):
it issues calls on a ``DrawSurface`` and never touches engine state.
``ChartRenderer.render`` wraps ``draw`` with per-frame timing and error
isolation so one failing frame does not break the host's paint loop.

Paint order: background, titles, [clip to drawing box: grid, marks],
axes, legend, tooltip.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from time import perf_counter
from typing import Callable, FrozenSet, Optional, Tuple

from . import constants as C
from .legend import LegendBox, LegendEntry
from .scales import PieScale, Scale, ScatterScale, SeriesScale, scale_mismatch
from .surface import DrawSurface
from .tooltip import TooltipState
from .types import (
    AreaSeries,
    BarSeries,
    ChartKind,
    ChartSpec,
    ElementKey,
    PieSlices,
    ProcessedData,
    ScatterPoints,
    SeriesData,
)

__all__ = ["RenderFrame", "ChartRenderer"]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderFrame:
    """Everything a single paint needs, captured at one instant."""

    spec: ChartSpec
    payload: ProcessedData
    scale: Scale
    legend: Tuple[LegendEntry, ...]
    legend_box: LegendBox
    selected: FrozenSet[ElementKey]
    hovered: Optional[ElementKey]
    tooltip: TooltipState
    progress: float = 1.0

    @property
    def alpha(self) -> float:
        return self.progress if self.spec.animated else 1.0


class ChartRenderer:
    def __init__(
        self,
        *,
        error_handler: Optional[Callable[[BaseException, str], object]] = None,
        slow_frame_ms: float = 16.0,
    ) -> None:
        self._error_handler = error_handler
        self._slow_frame_ms = slow_frame_ms
        self.last_render_ms = 0.0
        self.render_count = 0

    def render(self, surface: DrawSurface, frame: RenderFrame) -> bool:
        """Paint one frame; returns False when the frame failed and was dropped."""
        start = perf_counter()
        try:
            self.draw(surface, frame)
        except Exception as exc:  # noqa: BLE001 - one bad frame must not kill the paint loop
            if self._error_handler is None:
                raise
            self._error_handler(exc, "render")
            return False
        self.last_render_ms = (perf_counter() - start) * 1000.0
        self.render_count += 1
        if self.last_render_ms > self._slow_frame_ms:
            log.warning("Chart render took %.2fms", self.last_render_ms)
        return True

    # ------------------------------------------------------------------
    def draw(self, surface: DrawSurface, frame: RenderFrame) -> None:
        spec = frame.spec
        surface.fill_rect(0, 0, spec.width, spec.height, C.WHITE)
        self._draw_titles(surface, spec)

        is_pie = spec.kind is ChartKind.PIE
        surface.save()
        try:
            surface.clip_rect(
                spec.margin.left, spec.margin.top, spec.draw_width, spec.draw_height
            )
            if spec.show_grid and not is_pie:
                self._draw_grid(surface, frame)
            self._draw_marks(surface, frame)
        finally:
            surface.restore()

        if spec.show_axis and not is_pie:
            self._draw_axes(surface, frame)
        if spec.show_legend:
            self._draw_legend(surface, frame)
        if frame.tooltip.visible:
            self._draw_tooltip(surface, frame.tooltip)

    def _draw_marks(self, surface: DrawSurface, frame: RenderFrame) -> None:
        payload, scale = frame.payload, frame.scale
        try:
            if isinstance(payload, SeriesData) and isinstance(scale, SeriesScale):
                if isinstance(payload, AreaSeries):
                    self._draw_area(surface, frame, payload, scale)
                if isinstance(payload, BarSeries):
                    self._draw_bars(surface, frame, payload, scale)
                else:
                    self._draw_lines(surface, frame, payload, scale)
            elif isinstance(payload, PieSlices) and isinstance(scale, PieScale):
                self._draw_pie(surface, frame, payload, scale)
            elif isinstance(payload, ScatterPoints) and isinstance(scale, ScatterScale):
                self._draw_scatter(surface, frame, payload, scale)
            else:
                raise scale_mismatch(payload, scale)
        finally:
            surface.set_alpha(1.0)

    # Chrome ------------------------------------------------------------
    def _draw_titles(self, surface: DrawSurface, spec: ChartSpec) -> None:
        if spec.title:
            surface.fill_text(
                spec.title, spec.width / 2, 10, C.GRAY_900,
                size=18, bold=True, align="center", baseline="top",
            )
        if spec.subtitle:
            surface.fill_text(
                spec.subtitle, spec.width / 2, C.SUBTITLE_Y, C.GRAY_600,
                size=14, align="center", baseline="top",
            )

    def _draw_grid(self, surface: DrawSurface, frame: RenderFrame) -> None:
        spec = frame.spec
        left, top = spec.margin.left, spec.margin.top
        width, height = spec.draw_width, spec.draw_height
        for i in range(C.GRID_STEPS + 1):
            y = top + i / C.GRID_STEPS * height
            self._segment(surface, left, y, left + width, y, C.GRAY_200, 1, dash=(2, 2))
        payload = frame.payload
        if isinstance(payload, BarSeries):
            columns = payload.axis_length
        elif isinstance(payload, SeriesData):
            columns = min(C.MAX_LINE_GRID_COLUMNS, payload.axis_length)
        else:
            columns = C.GRID_STEPS
        for i in range(columns + 1):
            x = left + i / columns * width
            self._segment(surface, x, top, x, top + height, C.GRAY_200, 1, dash=(2, 2))

    def _draw_axes(self, surface: DrawSurface, frame: RenderFrame) -> None:
        spec, scale, payload = frame.spec, frame.scale, frame.payload
        left, top = spec.margin.left, spec.margin.top
        bottom = top + spec.draw_height
        self._segment(surface, left, top, left, bottom, C.GRAY_400, 2)
        self._segment(surface, left, bottom, left + spec.draw_width, bottom, C.GRAY_400, 2)

        y_range = payload.y_range  # type: ignore[union-attr]
        for i in range(C.GRID_STEPS + 1):
            value = y_range.min + i / C.GRID_STEPS * y_range.span
            y = bottom - i / C.GRID_STEPS * spec.draw_height
            surface.fill_text(f"{value:.1f}", left - 10, y, C.GRAY_700, align="right")

        label_y = bottom + 10
        if isinstance(payload, ScatterPoints):
            x_range = payload.x_range
            for i in range(C.GRID_STEPS + 1):
                value = x_range.min + i / C.GRID_STEPS * x_range.span
                x = left + i / C.GRID_STEPS * spec.draw_width
                surface.fill_text(
                    f"{value:.1f}", x, label_y, C.GRAY_700, align="center", baseline="top"
                )
            return
        if not (isinstance(payload, SeriesData) and isinstance(scale, SeriesScale)):
            raise scale_mismatch(payload, scale)
        is_bar = isinstance(payload, BarSeries)
        for index, label in enumerate(spec.labels[: payload.axis_length]):
            if is_bar:
                x = left + (index + 0.5) * scale.column_width
            else:
                x = left + scale.x_at(index)
            surface.fill_text(label, x, label_y, C.GRAY_700, align="center", baseline="top")

    def _draw_legend(self, surface: DrawSurface, frame: RenderFrame) -> None:
        box = frame.legend_box
        surface.fill_rect(box.x, box.y, box.width, box.height, C.LEGEND_BACKGROUND)
        surface.stroke_rect(box.x, box.y, box.width, box.height, C.GRAY_300, 1)
        swatch_w, swatch_h = C.LEGEND_INDICATOR_SIZE
        for i, entry in enumerate(frame.legend):
            item_y = box.y + 10 + i * box.item_height
            surface.fill_rect(box.x + 8, item_y + 4, swatch_w, swatch_h, entry.color)
            surface.fill_text(
                entry.label,
                box.x + C.LEGEND_TEXT_OFFSET,
                item_y + 8,
                C.GRAY_900 if entry.visible else C.GRAY_400,
            )

    def _draw_tooltip(self, surface: DrawSurface, tooltip: TooltipState) -> None:
        pad = C.TOOLTIP_PADDING
        width = surface.measure_text(tooltip.text) + pad * 2
        height = C.TOOLTIP_HEIGHT + pad * 2
        surface.fill_rect(tooltip.anchor_x, tooltip.anchor_y, width, height, C.TOOLTIP_BACKGROUND)
        surface.fill_text(
            tooltip.text, tooltip.anchor_x + pad, tooltip.anchor_y + height / 2, C.WHITE
        )

    # Marks -------------------------------------------------------------
    def _draw_lines(
        self, surface: DrawSurface, frame: RenderFrame, payload: SeriesData, scale: SeriesScale
    ) -> None:
        spec = frame.spec
        left, top = spec.margin.left, spec.margin.top
        for s_idx, series in enumerate(payload.series):
            if not series.visible or not series.values:
                continue
            surface.set_alpha(frame.alpha)
            points = [
                (left + scale.x_at(i), top + scale.y_at(v)) for i, v in enumerate(series.values)
            ]
            surface.begin_path()
            surface.move_to(*points[0])
            for x, y in points[1:]:
                surface.line_to(x, y)
            surface.stroke(series.color, C.LINE_WIDTH)
            for i, (x, y) in enumerate(points):
                surface.begin_path()
                surface.arc(x, y, C.POINT_RADIUS, 0, math.tau)
                surface.fill(series.color)
                if ElementKey(payload.kind, s_idx, i) in frame.selected:
                    surface.stroke(C.HIGHLIGHT, 2)

    def _draw_area(
        self, surface: DrawSurface, frame: RenderFrame, payload: SeriesData, scale: SeriesScale
    ) -> None:
        spec = frame.spec
        left, top = spec.margin.left, spec.margin.top
        base = top + scale.baseline
        for series in payload.series:
            if not series.visible or not series.values:
                continue
            surface.set_alpha(C.AREA_OPACITY * frame.alpha)
            surface.begin_path()
            surface.move_to(left, base)
            for i, v in enumerate(series.values):
                surface.line_to(left + scale.x_at(i), top + scale.y_at(v))
            surface.line_to(left + scale.x_at(len(series.values) - 1), base)
            surface.close_path()
            surface.fill(series.color)

    def _draw_bars(
        self, surface: DrawSurface, frame: RenderFrame, payload: BarSeries, scale: SeriesScale
    ) -> None:
        spec = frame.spec
        left, top = spec.margin.left, spec.margin.top
        bar_width = scale.column_width / len(payload.series) * C.BAR_WIDTH_RATIO
        for s_idx, series in enumerate(payload.series):
            if not series.visible:
                continue
            surface.set_alpha(frame.alpha)
            for i, value in enumerate(series.values):
                x = left + i * scale.column_width + s_idx * bar_width
                bar_top = scale.y_at(value)
                height = scale.baseline - bar_top
                surface.fill_rect(x, top + bar_top, bar_width, height, series.color)
                if ElementKey(payload.kind, s_idx, i) in frame.selected:
                    surface.stroke_rect(x, top + bar_top, bar_width, height, C.HIGHLIGHT, 3)

    def _draw_pie(
        self, surface: DrawSurface, frame: RenderFrame, payload: PieSlices, scale: PieScale
    ) -> None:
        spec = frame.spec
        cx = spec.margin.left + scale.center_x
        cy = spec.margin.top + scale.center_y
        radius = scale.radius * frame.alpha
        label_radius = radius * C.LABEL_RADIUS_RATIO
        for i, sl in enumerate(payload.slices):
            if not sl.visible or sl.end_angle <= sl.start_angle:
                continue
            surface.begin_path()
            surface.move_to(cx, cy)
            surface.arc(cx, cy, radius, sl.start_angle, sl.end_angle)
            surface.close_path()
            surface.fill(sl.color)
            surface.stroke(C.WHITE, 2)
            if ElementKey(ChartKind.PIE, None, i) in frame.selected:
                surface.stroke(C.HIGHLIGHT, 4)
            surface.fill_text(
                f"{sl.percentage:.1f}%",
                cx + math.cos(sl.mid_angle) * label_radius,
                cy + math.sin(sl.mid_angle) * label_radius,
                C.WHITE,
                bold=True,
                align="center",
            )

    def _draw_scatter(
        self,
        surface: DrawSurface,
        frame: RenderFrame,
        payload: ScatterPoints,
        scale: ScatterScale,
    ) -> None:
        spec = frame.spec
        left, top = spec.margin.left, spec.margin.top
        surface.set_alpha(frame.alpha)
        for i, point in enumerate(payload.points):
            if not point.visible:
                continue
            surface.begin_path()
            surface.arc(
                left + scale.x(point.x), top + scale.y(point.y), C.SCATTER_POINT_RADIUS, 0, math.tau
            )
            surface.fill(point.color)
            if ElementKey(ChartKind.SCATTER, None, i) in frame.selected:
                surface.stroke(C.HIGHLIGHT, 3)

    # Helpers -----------------------------------------------------------
    @staticmethod
    def _segment(surface, x0, y0, x1, y1, color, width, dash=None) -> None:
        surface.begin_path()
        surface.move_to(x0, y0)
        surface.line_to(x1, y1)
        surface.stroke(color, width, dash)
