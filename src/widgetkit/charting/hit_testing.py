"""Hit-testing: drawing-box coordinates -> logical data element.

``HitTestEngine.find_element_at`` is side-effect free and builds a fresh
element descriptor on every call; callers compare results by ``.key``.
``element_for`` resolves a stored ``ElementKey`` back into a descriptor
against the current payload (used for keyboard selection and by hosts that
need the value behind a selection).

Tie-breaks are order based and deliberate:
 - line / area: series order, then index order; the first mark within
   tolerance wins even if a later one is closer
 - bar: the first visible series whose bar spans the pointer in that column
 - scatter: input order
Hidden entries (legend toggled off) are never returned.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from .constants import LABEL_RADIUS_RATIO
from .scales import PieScale, Scale, ScatterScale, SeriesScale, scale_mismatch
from .types import (
    BarSeries,
    ChartElement,
    ElementKey,
    PieSlices,
    PointElement,
    ProcessedData,
    ScatterPoints,
    SeriesData,
    SeriesElement,
    SliceElement,
)

__all__ = ["HitTestEngine", "DEFAULT_TOLERANCE"]

DEFAULT_TOLERANCE = 10.0


def _first_within(xs: np.ndarray, ys: np.ndarray, x: float, y: float, tolerance: float) -> int:
    """Index of the first (x, y) within ``tolerance`` of the pointer, or -1."""
    if xs.size == 0:
        return -1
    hits = np.flatnonzero(np.hypot(xs - x, ys - y) <= tolerance)
    return int(hits[0]) if hits.size else -1


def _matches(payload: ProcessedData, scale: Scale) -> bool:
    if isinstance(payload, SeriesData):
        return isinstance(scale, SeriesScale)
    if isinstance(payload, PieSlices):
        return isinstance(scale, PieScale)
    return isinstance(scale, ScatterScale)


class HitTestEngine:
    def __init__(
        self, payload: ProcessedData, scale: Scale, *, tolerance: float = DEFAULT_TOLERANCE
    ) -> None:
        if not _matches(payload, scale):
            raise scale_mismatch(payload, scale)
        self._payload = payload
        self._scale = scale
        self._tolerance = tolerance

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def find_element_at(self, local_x: float, local_y: float) -> Optional[ChartElement]:
        payload, scale = self._payload, self._scale
        if isinstance(payload, SeriesData) and isinstance(scale, SeriesScale):
            if isinstance(payload, BarSeries):
                return self._find_bar(payload, scale, local_x, local_y)
            return self._find_line(payload, scale, local_x, local_y)
        if isinstance(payload, PieSlices) and isinstance(scale, PieScale):
            return self._find_slice(payload, scale, local_x, local_y)
        if isinstance(payload, ScatterPoints) and isinstance(scale, ScatterScale):
            return self._find_point(payload, scale, local_x, local_y)
        raise scale_mismatch(payload, scale)

    def element_for(self, key: ElementKey) -> Optional[ChartElement]:
        payload, scale = self._payload, self._scale
        if key.kind is not payload.kind:
            return None
        if isinstance(payload, SeriesData) and isinstance(scale, SeriesScale):
            if key.series is None or not 0 <= key.series < len(payload.series):
                return None
            if not 0 <= key.index < len(payload.series[key.series].values):
                return None
            return self._series_element(payload, scale, key.series, key.index)
        if not 0 <= key.index < len(payload.items):
            return None
        if isinstance(payload, PieSlices) and isinstance(scale, PieScale):
            sl = payload.slices[key.index]
            return self._slice_element(payload, scale, key.index, sl.mid_angle)
        if isinstance(payload, ScatterPoints) and isinstance(scale, ScatterScale):
            return self._point_element(payload, scale, key.index)
        raise scale_mismatch(payload, scale)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def _find_line(
        self, payload: SeriesData, scale: SeriesScale, x: float, y: float
    ) -> Optional[SeriesElement]:
        for s_idx, series in enumerate(payload.series):
            if not series.visible or not series.values:
                continue
            xs = np.arange(len(series.values), dtype=float) * scale.x_step
            ys = np.array([scale.y_at(v) for v in series.values], dtype=float)
            i = _first_within(xs, ys, x, y, self._tolerance)
            if i >= 0:
                return self._series_element(payload, scale, s_idx, i)
        return None

    def _find_bar(
        self, payload: BarSeries, scale: SeriesScale, x: float, y: float
    ) -> Optional[SeriesElement]:
        column = math.floor(x / scale.column_width)
        if column < 0 or column >= payload.axis_length:
            return None
        for s_idx, series in enumerate(payload.series):
            if not series.visible or column >= len(series.values):
                continue
            if scale.y_at(series.values[column]) <= y <= scale.baseline:
                return self._series_element(payload, scale, s_idx, column)
        return None

    def _find_slice(
        self, payload: PieSlices, scale: PieScale, x: float, y: float
    ) -> Optional[SliceElement]:
        dx, dy = x - scale.center_x, y - scale.center_y
        if math.hypot(dx, dy) > scale.radius:
            return None
        angle = math.atan2(dy, dx)
        if angle < 0:
            angle += math.tau
        if angle >= math.tau:
            angle -= math.tau
        for i, sl in enumerate(payload.slices):
            if sl.visible and sl.start_angle <= angle < sl.end_angle:
                return self._slice_element(payload, scale, i, angle)
        return None

    def _find_point(
        self, payload: ScatterPoints, scale: ScatterScale, x: float, y: float
    ) -> Optional[PointElement]:
        visible = [i for i, p in enumerate(payload.points) if p.visible]
        xs = np.array([scale.x(payload.points[i].x) for i in visible], dtype=float)
        ys = np.array([scale.y(payload.points[i].y) for i in visible], dtype=float)
        hit = _first_within(xs, ys, x, y, self._tolerance)
        return self._point_element(payload, scale, visible[hit]) if hit >= 0 else None

    # ------------------------------------------------------------------
    # Descriptor builders
    # ------------------------------------------------------------------
    @staticmethod
    def _series_element(
        payload: SeriesData, scale: SeriesScale, s_idx: int, index: int
    ) -> SeriesElement:
        series = payload.series[s_idx]
        value = series.values[index]
        if isinstance(payload, BarSeries):
            x = (index + 0.5) * scale.column_width
            y = (scale.y_at(value) + scale.baseline) / 2
        else:
            x, y = scale.x_at(index), scale.y_at(value)
        return SeriesElement(
            kind=payload.kind,
            series=s_idx,
            index=index,
            value=value,
            label=series.label,
            color=series.color,
            x=x,
            y=y,
        )

    @staticmethod
    def _slice_element(
        payload: PieSlices, scale: PieScale, index: int, angle: float
    ) -> SliceElement:
        sl = payload.slices[index]
        label_radius = scale.radius * LABEL_RADIUS_RATIO
        return SliceElement(
            index=index,
            value=sl.value,
            percentage=sl.percentage,
            label=sl.label,
            color=sl.color,
            angle=angle,
            x=scale.center_x + math.cos(sl.mid_angle) * label_radius,
            y=scale.center_y + math.sin(sl.mid_angle) * label_radius,
        )

    @staticmethod
    def _point_element(payload: ScatterPoints, scale: ScatterScale, index: int) -> PointElement:
        point = payload.points[index]
        return PointElement(
            index=index,
            x_value=point.x,
            y_value=point.y,
            label=point.label,
            color=point.color,
            x=scale.x(point.x),
            y=scale.y(point.y),
        )
