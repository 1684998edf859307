"""Core charting types.

Everything here is an immutable value object. A chart's processed state is a
single ``ProcessedData`` variant chosen by ``ChartKind``; variants carry their
own payload so consumers dispatch on the variant type instead of re-checking
the kind string.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Literal, Mapping, Optional, Sequence, Tuple, Union

from .constants import DEFAULT_HEIGHT, DEFAULT_MARGIN, DEFAULT_PALETTE, DEFAULT_WIDTH

__all__ = [
    "ChartKind",
    "Margin",
    "ChartSpec",
    "Range",
    "Series",
    "Slice",
    "Point",
    "SeriesData",
    "LineSeries",
    "AreaSeries",
    "BarSeries",
    "PieSlices",
    "ScatterPoints",
    "ProcessedData",
    "ElementKey",
    "SeriesElement",
    "SliceElement",
    "PointElement",
    "ChartElement",
    "PointerEvent",
]


class ChartKind(str, Enum):
    LINE = "line"
    AREA = "area"
    BAR = "bar"
    PIE = "pie"
    SCATTER = "scatter"

    @property
    def family(self) -> str:
        if self in (ChartKind.LINE, ChartKind.AREA, ChartKind.BAR):
            return "series"
        if self is ChartKind.PIE:
            return "categorical"
        return "coordinate"


@dataclass(frozen=True)
class Margin:
    top: float = DEFAULT_MARGIN[0]
    right: float = DEFAULT_MARGIN[1]
    bottom: float = DEFAULT_MARGIN[2]
    left: float = DEFAULT_MARGIN[3]

    @classmethod
    def coerce(cls, value: Any) -> "Margin":
        """Accept a Margin, a mapping with any of the four sides, or a 4-tuple."""
        if value is None:
            return cls()
        if isinstance(value, Margin):
            return value
        if isinstance(value, Mapping):
            unknown = set(value) - {"top", "right", "bottom", "left"}
            if unknown:
                raise ValueError(f"Unknown margin keys: {sorted(unknown)}")
            return cls(**{k: float(v) for k, v in value.items()})
        top, right, bottom, left = value
        return cls(float(top), float(right), float(bottom), float(left))


def _freeze(value: Any) -> Any:
    if hasattr(value, "tolist") and not isinstance(value, (str, bytes)):
        value = value.tolist()  # numpy arrays / scalars
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


# camelCase configuration option -> ChartSpec field
_OPTION_FIELDS = {
    "kind": "kind",
    "type": "kind",
    "data": "raw_data",
    "labels": "labels",
    "colors": "colors",
    "margin": "margin",
    "width": "width",
    "height": "height",
    "title": "title",
    "subtitle": "subtitle",
    "showLegend": "show_legend",
    "showAxis": "show_axis",
    "showGrid": "show_grid",
    "showTooltips": "show_tooltips",
    "interactive": "interactive",
    "animated": "animated",
}


@dataclass(frozen=True)
class ChartSpec:
    """Immutable chart configuration snapshot.

    Reconfiguration never mutates a spec; build a new one with
    :meth:`replace` (or :meth:`from_options`) and hand it to the engine.
    """

    kind: ChartKind = ChartKind.LINE
    raw_data: Any = ()
    labels: Tuple[str, ...] = ()
    colors: Tuple[str, ...] = DEFAULT_PALETTE
    margin: Margin = field(default_factory=Margin)
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    title: str = ""
    subtitle: str = ""
    show_legend: bool = True
    show_axis: bool = True
    show_grid: bool = True
    show_tooltips: bool = True
    interactive: bool = True
    animated: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ChartKind(self.kind))
        object.__setattr__(self, "raw_data", _freeze(self.raw_data))
        object.__setattr__(
            self, "labels", tuple(str(lbl) if lbl else "" for lbl in (self.labels or ()))
        )
        object.__setattr__(self, "colors", tuple(self.colors or DEFAULT_PALETTE))
        object.__setattr__(self, "margin", Margin.coerce(self.margin))

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "ChartSpec":
        """Build a spec from the widget configuration surface (camelCase keys)."""
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_FIELDS.get(key)
            if name is None:
                raise ValueError(f"Unknown chart option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "ChartSpec":
        return replace(self, **changes)

    @property
    def draw_width(self) -> float:
        return self.width - self.margin.left - self.margin.right

    @property
    def draw_height(self) -> float:
        return self.height - self.margin.top - self.margin.bottom

    def color_for(self, index: int) -> str:
        return self.colors[index % len(self.colors)]

    def label_for(self, index: int, default_prefix: str) -> str:
        if index < len(self.labels) and self.labels[index]:
            return self.labels[index]
        return f"{default_prefix} {index + 1}"


@dataclass(frozen=True)
class Range:
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def is_flat(self) -> bool:
        return self.max == self.min

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


# ----------------------------------------------------------------------
# Processed elements
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class Series:
    values: Tuple[float, ...]
    color: str
    label: str
    visible: bool = True


@dataclass(frozen=True)
class Slice:
    value: float
    percentage: float
    start_angle: float
    end_angle: float
    color: str
    label: str
    visible: bool = True

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    color: str
    label: str
    visible: bool = True


# ----------------------------------------------------------------------
# Processed payload variants
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class SeriesData:
    """Shared payload for the index-axis kinds (line, area, bar)."""

    kind: ClassVar[ChartKind]

    series: Tuple[Series, ...]
    y_range: Range
    axis_length: int  # longest series; the shared label axis

    @property
    def items(self) -> Tuple[Series, ...]:
        return self.series

    def with_visibility(self, index: int, visible: bool):
        items = list(self.series)
        items[index] = replace(items[index], visible=visible)
        return replace(self, series=tuple(items))


@dataclass(frozen=True)
class LineSeries(SeriesData):
    kind: ClassVar[ChartKind] = ChartKind.LINE


@dataclass(frozen=True)
class AreaSeries(SeriesData):
    kind: ClassVar[ChartKind] = ChartKind.AREA


@dataclass(frozen=True)
class BarSeries(SeriesData):
    kind: ClassVar[ChartKind] = ChartKind.BAR


@dataclass(frozen=True)
class PieSlices:
    kind: ClassVar[ChartKind] = ChartKind.PIE

    slices: Tuple[Slice, ...]
    total: float

    @property
    def items(self) -> Tuple[Slice, ...]:
        return self.slices

    def with_visibility(self, index: int, visible: bool) -> "PieSlices":
        items = list(self.slices)
        items[index] = replace(items[index], visible=visible)
        return replace(self, slices=tuple(items))


@dataclass(frozen=True)
class ScatterPoints:
    kind: ClassVar[ChartKind] = ChartKind.SCATTER

    points: Tuple[Point, ...]
    x_range: Range
    y_range: Range

    @property
    def items(self) -> Tuple[Point, ...]:
        return self.points

    def with_visibility(self, index: int, visible: bool) -> "ScatterPoints":
        items = list(self.points)
        items[index] = replace(items[index], visible=visible)
        return replace(self, points=tuple(items))


ProcessedData = Union[LineSeries, AreaSeries, BarSeries, PieSlices, ScatterPoints]


# ----------------------------------------------------------------------
# Hit-test results
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class ElementKey:
    """Stable identity of a data element across hit-tests and renders.

    ``series`` is the series index for line/area/bar and ``None`` for pie and
    scatter; ``index`` is the point, slice or coordinate index.
    """

    kind: ChartKind
    series: Optional[int]
    index: int

    @property
    def group(self) -> int:
        """Legend entry this element belongs to."""
        return self.series if self.series is not None else self.index


@dataclass(frozen=True)
class SeriesElement:
    kind: ChartKind
    series: int
    index: int
    value: float
    label: str
    color: str
    x: float  # drawing-box pixel position of the mark
    y: float

    @property
    def key(self) -> ElementKey:
        return ElementKey(self.kind, self.series, self.index)


@dataclass(frozen=True)
class SliceElement:
    index: int
    value: float
    percentage: float
    label: str
    color: str
    angle: float  # pointer angle in [0, 2π)
    x: float  # label anchor inside the slice
    y: float

    kind: ClassVar[ChartKind] = ChartKind.PIE

    @property
    def key(self) -> ElementKey:
        return ElementKey(ChartKind.PIE, None, self.index)


@dataclass(frozen=True)
class PointElement:
    index: int
    x_value: float
    y_value: float
    label: str
    color: str
    x: float
    y: float

    kind: ClassVar[ChartKind] = ChartKind.SCATTER

    @property
    def key(self) -> ElementKey:
        return ElementKey(ChartKind.SCATTER, None, self.index)


ChartElement = Union[SeriesElement, SliceElement, PointElement]


@dataclass(frozen=True)
class PointerEvent:
    """Pointer input in the chart surface's local coordinate space."""

    type: Literal["move", "down", "up"]
    x: float
    y: float
    ctrl_or_meta: bool = False

    @classmethod
    def from_sequence(cls, events: Sequence[Mapping[str, Any]]) -> Tuple["PointerEvent", ...]:
        """Convert recorded ``{"type", "x", "y", "ctrlOrMeta"}`` dicts (e.g. replay logs)."""
        return tuple(
            cls(
                type=e["type"],
                x=float(e["x"]),
                y=float(e["y"]),
                ctrl_or_meta=bool(e.get("ctrlOrMeta", False)),
            )
            for e in events
        )
