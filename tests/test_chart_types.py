"""Value types: spec construction, margins, pointer events, settings."""

from __future__ import annotations

import numpy as np
import pytest

from widgetkit.charting import ChartKind, ChartSpec, ElementKey, Margin, PointerEvent
from widgetkit.services import SettingsService


def test_spec_defaults():
    spec = ChartSpec()
    assert spec.kind is ChartKind.LINE
    assert spec.margin == Margin(50, 40, 50, 70)
    assert (spec.width, spec.height) == (400, 300)
    assert (spec.draw_width, spec.draw_height) == (290, 200)
    assert spec.show_legend and spec.interactive and spec.animated


def test_spec_from_options_camel_case():
    spec = ChartSpec.from_options({
        "type": "scatter",
        "data": np.array([[1, 2], [3, 4]]),
        "margin": {"left": 10},
        "showGrid": False,
        "colors": ["#000000"],
    })
    assert spec.kind is ChartKind.SCATTER
    assert spec.raw_data == ((1, 2), (3, 4))
    assert spec.margin == Margin(top=50, right=40, bottom=50, left=10)
    assert spec.show_grid is False
    assert spec.color_for(5) == "#000000"


def test_spec_is_immutable_and_replace_copies():
    spec = ChartSpec(raw_data=[1, 2])
    with pytest.raises(AttributeError):
        spec.width = 10  # type: ignore[misc]
    wider = spec.replace(width=800)
    assert wider.width == 800 and spec.width == 400
    assert wider.raw_data == spec.raw_data


def test_margin_coerce_rejects_unknown_side():
    with pytest.raises(ValueError):
        Margin.coerce({"middle": 3})


def test_label_for_falls_back_to_prefix():
    spec = ChartSpec(labels=["A", ""])
    assert spec.label_for(0, "Series") == "A"
    assert spec.label_for(1, "Series") == "Series 2"
    assert spec.label_for(4, "Point") == "Point 5"


def test_missing_labels_use_default_names():
    spec = ChartSpec(labels=[None, "B", 0])
    assert spec.labels == ("", "B", "")
    assert spec.label_for(0, "Series") == "Series 1"
    assert spec.label_for(1, "Series") == "B"
    assert spec.label_for(2, "Slice") == "Slice 3"


def test_element_key_group():
    assert ElementKey(ChartKind.BAR, 2, 7).group == 2
    assert ElementKey(ChartKind.PIE, None, 3).group == 3


def test_pointer_events_from_recorded_sequence():
    events = PointerEvent.from_sequence([
        {"type": "move", "x": 1, "y": 2},
        {"type": "down", "x": 3.5, "y": 4, "ctrlOrMeta": True},
    ])
    assert events == (
        PointerEvent("move", 1.0, 2.0),
        PointerEvent("down", 3.5, 4.0, ctrl_or_meta=True),
    )


def test_settings_singleton_defaults():
    assert isinstance(SettingsService.instance, SettingsService)
    fresh = SettingsService()
    assert fresh.hit_tolerance_px == 10.0
    assert fresh.tooltip_offset_px == 10.0
    assert fresh.slow_frame_ms == 16.0


def test_custom_tolerance_applies(bus):
    from widgetkit.charting import ChartEngine

    loose = SettingsService(hit_tolerance_px=60.0)
    engine = ChartEngine(
        {"type": "scatter", "data": [[0, 0], [10, 10]], "margin": [0, 0, 0, 0],
         "width": 120, "height": 120},
        event_bus=bus,
        settings=loose,
    )
    assert engine.find_element_at(110, 60).index == 1
