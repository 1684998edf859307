"""Scale computation: processed ranges -> drawing-box pixels.

All pixel coordinates produced here are *drawing-box local*: ``(0, 0)`` is
the top-left corner of the plot area (surface minus margins) and y grows
downwards, so larger data values map to smaller y.

Every denominator is checked. A zero or non-finite extent raises
``ScaleError``, except that a single point may have a flat range: the lone
column sits at ``x = 0`` and a flat value range places marks at the vertical
center.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from .constants import RADIUS_MARGIN
from .errors import ScaleError
from .types import ChartSpec, PieSlices, ProcessedData, Range, ScatterPoints, SeriesData

__all__ = [
    "LinearScale",
    "SeriesScale",
    "ScatterScale",
    "PieScale",
    "Scale",
    "ScaleEngine",
    "scale_mismatch",
]


@dataclass(frozen=True)
class LinearScale:
    """Affine map from ``[domain.min, domain.max]`` to ``[pixel_start, pixel_end]``.

    A flat domain is only constructed for the single-point case; it maps every
    value to the middle of the pixel range.
    """

    domain: Range
    pixel_start: float
    pixel_end: float

    @property
    def factor(self) -> float:
        if self.domain.is_flat:
            return 0.0
        return (self.pixel_end - self.pixel_start) / self.domain.span

    def __call__(self, value: float) -> float:
        if self.domain.is_flat:
            return (self.pixel_start + self.pixel_end) / 2
        return self.pixel_start + (value - self.domain.min) * self.factor

    def invert(self, pixel: float) -> float:
        if self.domain.is_flat:
            return self.domain.min
        return self.domain.min + (pixel - self.pixel_start) / self.factor


@dataclass(frozen=True)
class SeriesScale:
    x_step: float  # px between consecutive indices (0 for a single column)
    column_width: float  # px per category column (bar charts)
    y: LinearScale
    draw_height: float

    def x_at(self, index: int) -> float:
        return index * self.x_step

    def y_at(self, value: float) -> float:
        return self.y(value)

    @property
    def baseline(self) -> float:
        """Pixel y of the range minimum (the bottom of every bar)."""
        return self.draw_height


@dataclass(frozen=True)
class ScatterScale:
    x: LinearScale
    y: LinearScale


@dataclass(frozen=True)
class PieScale:
    center_x: float
    center_y: float
    radius: float


Scale = Union[SeriesScale, ScatterScale, PieScale]


class ScaleEngine:
    """Derive the scale matching a processed payload variant."""

    def __init__(self, radius_margin: float = RADIUS_MARGIN) -> None:
        self._radius_margin = radius_margin

    def compute(self, spec: ChartSpec, payload: ProcessedData) -> Scale:
        width, height = spec.draw_width, spec.draw_height
        if width <= 0 or height <= 0:
            raise ScaleError(
                "box", f"Drawing box is empty ({width}x{height}); margins exceed the surface"
            )
        if isinstance(payload, SeriesData):
            return self._series_scale(payload, width, height)
        if isinstance(payload, ScatterPoints):
            return self._scatter_scale(payload, width, height)
        if isinstance(payload, PieSlices):
            return self._pie_scale(width, height)
        raise TypeError(f"Unsupported payload: {type(payload).__name__}")

    # ------------------------------------------------------------------
    def _series_scale(self, payload: SeriesData, width: float, height: float) -> SeriesScale:
        length = payload.axis_length
        single = length == 1
        _check_range("y", payload.y_range, allow_flat=single)
        return SeriesScale(
            x_step=0.0 if single else width / (length - 1),
            column_width=width / length,
            y=LinearScale(payload.y_range, height, 0.0),
            draw_height=height,
        )

    def _scatter_scale(self, payload: ScatterPoints, width: float, height: float) -> ScatterScale:
        single = len(payload.points) == 1
        _check_range("x", payload.x_range, allow_flat=single)
        _check_range("y", payload.y_range, allow_flat=single)
        return ScatterScale(
            x=LinearScale(payload.x_range, 0.0, width),
            y=LinearScale(payload.y_range, height, 0.0),
        )

    def _pie_scale(self, width: float, height: float) -> PieScale:
        radius = min(width, height) / 2 - self._radius_margin
        if radius <= 0 or not math.isfinite(radius):
            raise ScaleError("radius", f"Pie radius {radius} is not positive")
        return PieScale(center_x=width / 2, center_y=height / 2, radius=radius)


def _check_range(axis: str, rng: Range, *, allow_flat: bool) -> None:
    if not math.isfinite(rng.span):
        raise ScaleError(axis, f"Non-finite {axis} range {rng}")
    if rng.is_flat and not allow_flat:
        raise ScaleError(axis, f"Degenerate {axis} range {rng}")


def scale_mismatch(payload: ProcessedData, scale: Scale) -> TypeError:
    return TypeError(
        f"{type(scale).__name__} does not match payload {type(payload).__name__}"
    )
