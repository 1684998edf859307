"""Raw chart data validation.

``validate`` is the only entry point processors accept input from: it checks
the raw data against the chart kind and returns it in a normalized shape, or
raises ``DataShapeError`` naming the violated rule. Nothing downstream runs
after a failure.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Tuple

from .errors import DataShapeError
from .types import ChartKind

__all__ = ["ValidatedData", "validate", "is_number", "pie_total"]


@dataclass(frozen=True)
class ValidatedData:
    """Normalized raw data.

    ``rows`` holds one tuple of floats per series (line/area/bar), the slice
    values as a single row (pie), or ``(x, y)`` pairs (scatter).
    ``multi_series`` records whether series input arrived as nested rows.
    """

    kind: ChartKind
    rows: Tuple[Tuple[float, ...], ...]
    multi_series: bool = False


def is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _as_sequence(raw: Any) -> Tuple[Any, ...]:
    if hasattr(raw, "tolist") and not isinstance(raw, (str, bytes)):
        raw = raw.tolist()
    if not _is_sequence(raw):
        raise DataShapeError("non_empty", "Chart data must be a sequence")
    if len(raw) == 0:
        raise DataShapeError("non_empty", "Chart data cannot be empty")
    return tuple(raw)


def _finite(value: Any, message: str) -> float:
    if not is_number(value) or not math.isfinite(value):
        raise DataShapeError("numeric", message)
    return float(value)


def _validate_series(data: Tuple[Any, ...]) -> ValidatedData:
    nested = [_is_sequence(row) for row in data]
    if not any(nested):
        values = tuple(_finite(v, "Line/Bar chart data must be numbers") for v in data)
        return ValidatedData(ChartKind.LINE, (values,), multi_series=False)
    if not all(nested):
        raise DataShapeError(
            "uniform_shape", "Series data must be all numbers or all sequences of numbers"
        )
    rows = tuple(
        tuple(_finite(v, "Multi-series data must be sequences of numbers") for v in row)
        for row in data
    )
    if not any(rows):
        raise DataShapeError("non_empty", "Multi-series data contains no values")
    return ValidatedData(ChartKind.LINE, rows, multi_series=True)


def _validate_pie(data: Tuple[Any, ...]) -> ValidatedData:
    values = tuple(_finite(v, "Pie chart data must be numbers") for v in data)
    if any(v < 0 for v in values):
        raise DataShapeError("non_negative", "Pie chart data must be non-negative numbers")
    pie_total(values)
    return ValidatedData(ChartKind.PIE, (values,))


def pie_total(values: Tuple[float, ...]) -> float:
    """Exact sum of non-negative slice values; must be positive and finite."""
    try:
        total = math.fsum(values)
    except OverflowError as exc:
        raise DataShapeError("positive_total", "Pie chart total must be finite") from exc
    if not math.isfinite(total):
        raise DataShapeError("positive_total", "Pie chart total must be finite")
    if total <= 0:
        raise DataShapeError("positive_total", "Pie chart total cannot be zero")
    return total


def _validate_scatter(data: Tuple[Any, ...]) -> ValidatedData:
    pairs = []
    for point in data:
        if not _is_sequence(point) or len(point) != 2:
            raise DataShapeError(
                "coordinate_pair", "Scatter plot data must be [x, y] coordinate pairs"
            )
        x, y = point
        if not (is_number(x) and is_number(y) and math.isfinite(x) and math.isfinite(y)):
            raise DataShapeError(
                "coordinate_pair", "Scatter plot coordinates must be finite numbers"
            )
        pairs.append((float(x), float(y)))
    return ValidatedData(ChartKind.SCATTER, tuple(pairs))


def validate(kind: ChartKind | str, raw_data: Any) -> ValidatedData:
    kind = ChartKind(kind)
    data = _as_sequence(raw_data)
    family = kind.family
    if family == "series":
        result = _validate_series(data)
        return ValidatedData(kind, result.rows, result.multi_series)
    if family == "categorical":
        return _validate_pie(data)
    return _validate_scatter(data)
