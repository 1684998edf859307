"""Hit-testing: pointer position -> data element."""

from __future__ import annotations

import math

import pytest

from widgetkit.charting import ChartKind, ChartSpec, ElementKey, HitTestEngine, ScaleEngine
from widgetkit.charting import processor_for, validate
from widgetkit.charting.types import PointElement, SeriesElement, SliceElement

ZERO = {"top": 0, "right": 0, "bottom": 0, "left": 0}


def _hit_tester(**spec_kwargs):
    spec = ChartSpec(**spec_kwargs)
    payload = processor_for(spec.kind).process(spec, validate(spec.kind, spec.raw_data))
    scale = ScaleEngine().compute(spec, payload)
    return HitTestEngine(payload, scale), payload, scale


def test_line_hit_returns_series_point():
    tester, _, scale = _hit_tester(kind="line", raw_data=[1, 3, 2])
    element = tester.find_element_at(scale.x_at(1), scale.y_at(3))
    assert isinstance(element, SeriesElement)
    assert (element.series, element.index, element.value) == (0, 1, 3)
    assert element.label == "Series 1"


def test_line_miss_far_from_points():
    tester, _, scale = _hit_tester(kind="line", raw_data=[1, 3, 2])
    assert tester.find_element_at(scale.x_at(1), scale.y_at(3) + 50) is None


def test_line_first_series_wins_on_overlap():
    tester, _, scale = _hit_tester(kind="line", raw_data=[[1, 2], [1, 5]])
    element = tester.find_element_at(scale.x_at(0), scale.y_at(1))
    assert element.key == ElementKey(ChartKind.LINE, 0, 0)


def test_hit_testing_is_idempotent():
    tester, _, scale = _hit_tester(kind="area", raw_data=[[4, 1], [2, 6]])
    first = tester.find_element_at(scale.x_at(1), scale.y_at(6))
    second = tester.find_element_at(scale.x_at(1), scale.y_at(6))
    assert first == second
    assert first is not second


def _all_keys(payload):
    kind = payload.kind
    if kind in (ChartKind.PIE, ChartKind.SCATTER):
        return [ElementKey(kind, None, i) for i in range(len(payload.items))]
    return [
        ElementKey(kind, s_idx, i)
        for s_idx, series in enumerate(payload.series)
        for i in range(len(series.values))
    ]


# multi-series bars are left out: the first series spanning a column wins there
@pytest.mark.parametrize(
    "kind, data",
    [
        ("line", [[2, 8, 5], [7, 1, 3]]),
        ("area", [[4, 1, 3], [2, 6, 5]]),
        ("bar", [3, 5, 2]),
        ("pie", [1, 2, 3]),
        ("scatter", [[0, 0], [10, 10], [4, 7], [8, 2]]),
    ],
)
def test_render_position_round_trip(kind, data):
    tester, payload, _ = _hit_tester(kind=kind, raw_data=data)
    keys = _all_keys(payload)
    assert keys
    for key in keys:
        element = tester.element_for(key)
        hit = tester.find_element_at(element.x, element.y)
        assert hit is not None
        assert hit.key == key


def test_mismatched_scale_rejected():
    _, line_payload, _ = _hit_tester(kind="line", raw_data=[1, 2])
    _, _, pie_scale = _hit_tester(kind="pie", raw_data=[1, 2])
    with pytest.raises(TypeError, match="PieScale does not match payload LineSeries"):
        HitTestEngine(line_payload, pie_scale)


def test_bar_column_and_span():
    tester, _, scale = _hit_tester(kind="bar", raw_data=[[4, 8], [6, 2]], margin=ZERO,
                                   width=200, height=100)
    # column 1: series 0 value 8 spans the pointer first
    element = tester.find_element_at(150, scale.y_at(4))
    assert element.key == ElementKey(ChartKind.BAR, 0, 1)
    # above every bar in column 0
    assert tester.find_element_at(50, scale.y_at(7)) is None
    # series 1 reaches higher than series 0 in column 0
    assert tester.find_element_at(50, scale.y_at(5)).key == ElementKey(ChartKind.BAR, 1, 0)


def test_bar_outside_columns():
    tester, _, _ = _hit_tester(kind="bar", raw_data=[1, 2], margin=ZERO, width=200, height=100)
    assert tester.find_element_at(-1, 99) is None
    assert tester.find_element_at(200, 99) is None


def test_pie_hit_by_angle():
    tester, _, scale = _hit_tester(kind="pie", raw_data=[1, 1, 2])
    cx, cy, r = scale.center_x, scale.center_y, scale.radius

    def at(angle):
        return tester.find_element_at(cx + math.cos(angle) * r / 2, cy + math.sin(angle) * r / 2)

    assert at(math.pi / 4).index == 0
    assert at(3 * math.pi / 4).index == 1
    third = at(3 * math.pi / 2)
    assert isinstance(third, SliceElement)
    assert third.index == 2
    assert third.percentage == pytest.approx(50)
    assert tester.find_element_at(cx + r + 1, cy) is None


def test_pie_boundary_angle_belongs_to_next_slice():
    tester, _, scale = _hit_tester(kind="pie", raw_data=[1, 1])
    element = tester.find_element_at(scale.center_x - scale.radius / 2, scale.center_y)
    assert element.index == 1


def test_scatter_scenario():
    tester, _, _ = _hit_tester(
        kind="scatter", raw_data=[[0, 0], [10, 10]], margin=ZERO, width=120, height=120
    )
    element = tester.find_element_at(110, 10)
    assert isinstance(element, PointElement)
    assert element.index == 1
    assert (element.x_value, element.y_value) == (10, 10)
    assert tester.find_element_at(110, 60) is None


def test_tolerance_boundary_inclusive():
    tester, _, _ = _hit_tester(
        kind="scatter", raw_data=[[0, 0], [10, 10]], margin=ZERO, width=120, height=120
    )
    assert tester.find_element_at(100, 10).index == 1
    assert tester.find_element_at(99.5, 10) is None


def test_hidden_entries_are_skipped():
    tester, payload, scale = _hit_tester(kind="line", raw_data=[[1, 2], [1, 5]])
    hidden = HitTestEngine(payload.with_visibility(0, False), scale)
    element = hidden.find_element_at(scale.x_at(0), scale.y_at(1))
    assert element.key == ElementKey(ChartKind.LINE, 1, 0)


def test_element_for_rejects_foreign_keys():
    tester, _, _ = _hit_tester(kind="line", raw_data=[1, 2])
    assert tester.element_for(ElementKey(ChartKind.PIE, None, 0)) is None
    assert tester.element_for(ElementKey(ChartKind.LINE, 3, 0)) is None
    assert tester.element_for(ElementKey(ChartKind.LINE, 0, 9)) is None
