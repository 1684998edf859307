"""Data processors: validated raw data -> processed payload variants.

One processor per data shape family:

 - ``SeriesProcessor``       line / area / bar (index axis, one row per series)
 - ``CategoricalProcessor``  pie (slices partitioning the full circle)
 - ``CoordinateProcessor``   scatter (independent x / y ranges)

Processors are stateless; ``process`` recomputes the payload in full from the
spec and the validated data, there is no incremental patching.
"""

from __future__ import annotations

import math
from typing import Dict, Protocol, Sequence, Type

import numpy as np

from .constants import PADDING_RATIO
from .types import (
    AreaSeries,
    BarSeries,
    ChartKind,
    ChartSpec,
    LineSeries,
    PieSlices,
    Point,
    ProcessedData,
    Range,
    ScatterPoints,
    Series,
    SeriesData,
    Slice,
)
from .validation import ValidatedData, pie_total

__all__ = [
    "DataProcessor",
    "SeriesProcessor",
    "CategoricalProcessor",
    "CoordinateProcessor",
    "padded_range",
    "processor_for",
]


class DataProcessor(Protocol):  # pragma: no cover - structural only
    def process(self, spec: ChartSpec, data: ValidatedData) -> ProcessedData: ...


def padded_range(lo: float, hi: float, *, ratio: float = PADDING_RATIO) -> Range:
    """Pad ``[lo, hi]`` by ``ratio`` of its span on both ends."""
    padding = (hi - lo) * ratio
    return Range(lo - padding, hi + padding)


class SeriesProcessor:
    """Normalize one or more numeric rows into ``Series`` objects.

    The y range is anchored at the zero baseline: the raw span always includes
    0 so bars and areas grow from the axis, and the padded lower bound is
    floored at 0. Negative values fall below the bottom edge of the box.
    """

    _VARIANTS: Dict[ChartKind, Type[SeriesData]] = {
        ChartKind.LINE: LineSeries,
        ChartKind.AREA: AreaSeries,
        ChartKind.BAR: BarSeries,
    }

    def process(self, spec: ChartSpec, data: ValidatedData) -> SeriesData:
        variant = self._VARIANTS[spec.kind]
        flat = np.fromiter((v for row in data.rows for v in row), dtype=float)
        y_range = self.value_range(float(flat.min()), float(flat.max()))
        series = tuple(
            Series(values=row, color=spec.color_for(i), label=spec.label_for(i, "Series"))
            for i, row in enumerate(data.rows)
        )
        return variant(
            series=series,
            y_range=y_range,
            axis_length=max(len(row) for row in data.rows),
        )

    @staticmethod
    def value_range(data_min: float, data_max: float) -> Range:
        lo = min(data_min, 0.0)
        hi = max(data_max, 0.0)
        padded = padded_range(lo, hi)
        return Range(max(0.0, padded.min), padded.max)


class CategoricalProcessor:
    """Turn slice values into contiguous angular spans in input order."""

    def process(self, spec: ChartSpec, data: ValidatedData) -> PieSlices:
        values: Sequence[float] = data.rows[0]
        total = pie_total(values)
        slices = []
        running = 0.0
        last = len(values) - 1
        for i, value in enumerate(values):
            start = min(running / total * math.tau, math.tau)
            running += value
            # the final slice closes the circle exactly
            end = math.tau if i == last else running / total * math.tau
            slices.append(
                Slice(
                    value=value,
                    percentage=value / total * 100,
                    start_angle=start,
                    end_angle=max(end, start),
                    color=spec.color_for(i),
                    label=spec.label_for(i, "Slice"),
                )
            )
        return PieSlices(slices=tuple(slices), total=total)


class CoordinateProcessor:
    """Scatter points with independently padded x / y ranges (no zero floor)."""

    def process(self, spec: ChartSpec, data: ValidatedData) -> ScatterPoints:
        coords = np.asarray(data.rows, dtype=float).reshape(-1, 2)
        xs, ys = coords[:, 0], coords[:, 1]
        points = tuple(
            Point(x=x, y=y, color=spec.color_for(i), label=spec.label_for(i, "Point"))
            for i, (x, y) in enumerate(data.rows)
        )
        return ScatterPoints(
            points=points,
            x_range=padded_range(float(xs.min()), float(xs.max())),
            y_range=padded_range(float(ys.min()), float(ys.max())),
        )


_PROCESSORS = {
    "series": SeriesProcessor(),
    "categorical": CategoricalProcessor(),
    "coordinate": CoordinateProcessor(),
}


def processor_for(kind: ChartKind) -> DataProcessor:
    return _PROCESSORS[ChartKind(kind).family]
