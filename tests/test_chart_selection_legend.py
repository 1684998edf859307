"""Selection state, legend model and tooltip formatting."""

from __future__ import annotations

import pytest

from widgetkit.charting import ChartKind, ChartSpec, ElementKey, LegendModel, SelectionModel
from widgetkit.charting import processor_for, validate
from widgetkit.charting.tooltip import TooltipState, format_number, format_tooltip
from widgetkit.charting.types import PointElement, SeriesElement, SliceElement


def _series_element(series=0, index=0, value=3.0):
    return SeriesElement(
        kind=ChartKind.LINE, series=series, index=index, value=value,
        label="Series 1", color="#1976D2", x=0.0, y=0.0,
    )


def test_hover_change_detection():
    model = SelectionModel()
    assert model.set_hovered(_series_element()) is True
    # a fresh descriptor for the same point is the same element
    assert model.set_hovered(_series_element()) is False
    assert model.set_hovered(None) is True
    assert model.hovered_key is None


def test_single_select_replaces():
    model = SelectionModel()
    model.toggle_selected(_series_element(index=0), additive=False)
    model.toggle_selected(_series_element(index=1), additive=False)
    assert model.selected_keys == (ElementKey(ChartKind.LINE, 0, 1),)


def test_additive_select_toggles_membership():
    model = SelectionModel()
    a, b = _series_element(index=0), _series_element(index=1)
    assert model.toggle_selected(a, additive=True) is True
    assert model.toggle_selected(b, additive=True) is True
    assert model.toggle_selected(_series_element(index=0), additive=True) is False
    assert model.selected_keys == (b.key,)
    assert model.is_selected(b.key)


def test_discard_group_drops_hover_and_selection():
    model = SelectionModel()
    model.toggle_selected(_series_element(series=0), additive=True)
    model.toggle_selected(_series_element(series=1), additive=True)
    model.set_hovered(_series_element(series=1, index=2))
    model.discard_group(1)
    assert model.selected_keys == (ElementKey(ChartKind.LINE, 0, 0),)
    assert model.hovered_key is None


def test_clear_selection_keeps_hover():
    model = SelectionModel()
    model.set_hovered(_series_element())
    model.toggle_selected(_series_element(), additive=False)
    model.clear_selection()
    assert model.selected_keys == ()
    assert model.hovered_key is not None


def _payload(kind, data, **kwargs):
    spec = ChartSpec(kind=kind, raw_data=data, **kwargs)
    return spec, processor_for(spec.kind).process(spec, validate(spec.kind, spec.raw_data))


def test_legend_one_entry_per_item():
    _, payload = _payload("pie", [1, 2, 3], labels=["A", "B"])
    legend = LegendModel(payload)
    assert len(legend) == 3
    assert [e.label for e in legend.entries] == ["A", "B", "Slice 3"]


def test_legend_toggle_and_bounds():
    _, payload = _payload("line", [[1, 2], [3, 4]])
    legend = LegendModel(payload)
    assert legend.toggle_visibility(1) is False
    assert legend.is_visible(1) is False
    assert legend.toggle_visibility(1) is True
    with pytest.raises(IndexError):
        legend.toggle_visibility(2)


def test_legend_box_geometry():
    spec, payload = _payload("scatter", [[0, 1], [2, 3]], width=500)
    box = LegendModel(payload).box(spec)
    assert (box.x, box.y, box.width) == (350, 50, 140)
    assert box.height == 60


@pytest.mark.parametrize(
    "value,text", [(3.0, "3"), (2.5, "2.5"), (-4, "-4"), (0.1, "0.1")]
)
def test_format_number(value, text):
    assert format_number(value) == text


def test_tooltip_text_per_element():
    assert format_tooltip(_series_element(value=3.0)) == "Series 1: 3"
    pie = SliceElement(
        index=0, value=1.0, percentage=25.0, label="Slice 1", color="#fff",
        angle=0.1, x=0.0, y=0.0,
    )
    assert format_tooltip(pie) == "Slice 1: 1 (25.0%)"
    point = PointElement(index=1, x_value=10.0, y_value=2.5, label="Point 2", color="#fff",
                         x=0.0, y=0.0)
    assert format_tooltip(point) == "Point 2: (10, 2.5)"


def test_tooltip_hidden_state():
    state = TooltipState.hidden()
    assert state.visible is False
    assert state.text == ""
