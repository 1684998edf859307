"""Renderer output checked through the recording surface."""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from widgetkit.charting import ChartEngine, ChartRenderer, PointerEvent, RecordingSurface
from widgetkit.charting.constants import HIGHLIGHT, TOOLTIP_BACKGROUND, WHITE
from widgetkit.charting.surface import DrawSurface, parse_color, replay


def _render(engine, progress=1.0):
    surface = RecordingSurface()
    assert engine.render(surface, progress) is True
    return surface


def test_recording_surface_satisfies_protocol():
    assert isinstance(RecordingSurface(), DrawSurface)


def test_parse_color_variants():
    assert parse_color("#FF9800") == (255, 152, 0, 255)
    assert parse_color("#000000CC") == (0, 0, 0, 204)
    assert parse_color("#fff") == (255, 255, 255, 255)
    with pytest.raises(ValueError):
        parse_color("#12345")


def test_paint_order_and_clip(make_engine):
    engine = make_engine(type="line", data=[1, 3, 2], title="Trend", subtitle="weekly")
    surface = _render(engine)
    ops = surface.ops()
    assert surface.commands[0].op == "fill_rect"
    assert surface.commands[0].args == (0, 0, 400, 300, WHITE)
    assert surface.texts()[:2] == ["Trend", "weekly"]
    clip = surface.find("clip_rect")[0]
    assert clip.args == (70, 50, 290, 200)
    # axes are drawn after the clip is released
    first_axis_label = next(
        i for i, c in enumerate(surface.commands) if c.op == "fill_text" and c.args[0] == "0.0"
    )
    assert ops.index("restore") < first_axis_label
    assert "0.0" in surface.texts() and "3.3" in surface.texts()


def test_axis_labels_and_legend(make_engine):
    engine = make_engine(type="bar", data=[[1, 2], [3, 4]], labels=["Jan", "Feb"])
    texts = _render(engine).texts()
    # labels name both the x categories and the series
    assert texts.count("Jan") == 2
    assert texts.count("Feb") == 2


def test_pie_skips_axes_and_grid(make_engine):
    engine = make_engine(type="pie", data=[1, 1, 2], showLegend=False)
    surface = _render(engine)
    texts = surface.texts()
    assert texts == ["25.0%", "25.0%", "50.0%"]
    arcs = surface.find("arc")
    assert len(arcs) == 3
    assert arcs[-1].args[4] == math.tau
    assert all(c.args[2] is None for c in surface.find("stroke"))


def test_grid_toggle(make_engine):
    with_grid = _render(make_engine(type="line", data=[1, 2, 3]))
    without = _render(make_engine(type="line", data=[1, 2, 3], showGrid=False))
    dashed = [c for c in with_grid.find("stroke") if c.args[2] == (2, 2)]
    # 6 horizontal rules plus one vertical rule per column boundary
    assert len(dashed) == 6 + 4
    assert not [c for c in without.find("stroke") if c.args[2] == (2, 2)]


def test_hidden_series_not_drawn(make_engine):
    engine = make_engine(type="line", data=[[1, 2], [3, 4]], showLegend=False)
    before = len(_render(engine).find("arc"))
    engine.toggle_legend_entry(1)
    after = len(_render(engine).find("arc"))
    assert before == 4 and after == 2


def test_selected_element_highlighted(make_engine):
    engine = make_engine(type="scatter", data=[[0, 0], [10, 10]], margin=[0, 0, 0, 0],
                         width=120, height=120, showLegend=False, showAxis=False)
    engine.handle_pointer(PointerEvent("down", 110, 10))
    strokes = [c for c in _render(engine).find("stroke") if c.args[0] == HIGHLIGHT]
    assert len(strokes) == 1


def test_tooltip_drawn_when_visible(make_engine):
    engine = make_engine(type="scatter", data=[[0, 0], [10, 10]], margin=[0, 0, 0, 0],
                         width=120, height=120)
    engine.handle_pointer(PointerEvent("move", 110, 10))
    surface = _render(engine)
    box = [c for c in surface.find("fill_rect") if c.args[4] == TOOLTIP_BACKGROUND]
    assert len(box) == 1
    assert box[0].args[:2] == (120, 0)
    assert surface.texts()[-1] == "Point 2: (10, 10)"


def test_animation_progress_scales_alpha_and_pie_radius(make_engine):
    line = make_engine(type="line", data=[1, 2], animated=True)
    alphas = [c.args[0] for c in _render(line, 0.5).find("set_alpha")]
    assert 0.5 in alphas
    pie = make_engine(type="pie", data=[1], animated=True, showLegend=False)
    arc = _render(pie, 0.5).find("arc")[0]
    assert arc.args[2] == pytest.approx(pie.scale.radius * 0.5)


def test_render_failure_routed_and_frame_dropped(bus):
    seen = []
    engine = ChartEngine(
        {"type": "line", "data": [1, 2]},
        event_bus=bus,
        error_handler=lambda err, ctx: seen.append(ctx),
    )

    class Broken(RecordingSurface):
        def clip_rect(self, x, y, width, height):
            raise RuntimeError("device lost")

    surface = Broken()
    assert engine.render(surface) is False
    assert seen == ["render"]
    assert engine.renderer.render_count == 0
    assert surface.ops().count("save") == surface.ops().count("restore") == 1


def test_failing_mark_restores_clip_and_alpha(bus):
    seen = []
    engine = ChartEngine(
        {"type": "scatter", "data": [[0, 0], [10, 10]], "animated": True},
        event_bus=bus,
        error_handler=lambda err, ctx: seen.append(ctx),
    )

    class FailingArc(RecordingSurface):
        def arc(self, *args):
            raise RuntimeError("arc failed")

    surface = FailingArc()
    assert engine.render(surface, 0.5) is False
    ops = surface.ops()
    assert ops.count("save") == ops.count("restore") == 1
    assert surface.find("set_alpha")[-1].args == (1.0,)
    assert ops.index("restore") > len(ops) - 1 - ops[::-1].index("set_alpha")
    assert seen == ["render"]
    # the next frame on a healthy surface paints normally
    assert engine.render(RecordingSurface()) is True


def test_mismatched_scale_rejected(make_engine):
    line = make_engine(type="line", data=[1, 2])
    pie = make_engine(type="pie", data=[1, 2])
    frame = replace(line.frame(), scale=pie.scale)
    surface = RecordingSurface()
    with pytest.raises(TypeError, match="PieScale does not match payload LineSeries"):
        ChartRenderer().draw(surface, frame)
    assert surface.ops().count("save") == surface.ops().count("restore")


def test_renderer_without_handler_raises(make_engine):
    engine = make_engine(type="line", data=[1, 2])

    class Broken(RecordingSurface):
        def fill_rect(self, *args):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        ChartRenderer().render(Broken(), engine.frame())


def test_slow_frame_logs_warning(make_engine, caplog, settings):
    settings.slow_frame_ms = -1.0
    engine = make_engine(type="line", data=[1, 2])
    with caplog.at_level("WARNING", logger="widgetkit.charting.render"):
        _render(engine)
    assert any("render took" in r.getMessage() for r in caplog.records)


def test_replay_reproduces_commands(make_engine):
    engine = make_engine(type="area", data=[[1, 2], [2, 1]])
    first = _render(engine)
    copy = RecordingSurface()
    replay(first.commands, copy)
    assert copy.commands == first.commands
