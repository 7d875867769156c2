from __future__ import annotations

import pytest

from dash import html

from linked_charts.core.base_chart import BaseChart
from linked_charts.core.chart_registry import ChartRegistry
from linked_charts.core.events import CHART_EVENTS
from linked_charts.core.exceptions import ConfigurationError, InvalidStateError
from linked_charts.core.schedulers import DeferredScheduler


class _StaticGroup:
    def all(self):
        return [{"key": "a", "value": 1}]


class _RecordingChart(BaseChart):
    def __init__(self, *args, **kwargs):
        self.steps = []
        super().__init__(*args, **kwargs)

    def _do_render(self):
        self.steps.append("do_render")
        self.reset_svg()
        return self

    def _do_redraw(self):
        self.steps.append("do_redraw")
        return self


def _make_chart(**config):
    chart = _RecordingChart("#life", registry=ChartRegistry(), **config)
    chart.dimension(object()).group(_StaticGroup())
    for channel in CHART_EVENTS:
        if channel != "filtered":
            chart.on(f"{channel}.trace", lambda c, _ch=channel: c.steps.append(_ch))
    return chart


def test_render_order_without_transition():
    chart = _make_chart(transition_duration=0)

    result = chart.render()

    assert result is chart
    assert chart.steps == ["preRender", "do_render", "pretransition", "renderlet", "postRender"]


def test_redraw_order_without_transition():
    chart = _make_chart(transition_duration=0)
    chart.render()
    chart.steps.clear()

    chart.redraw()

    assert chart.steps == ["preRedraw", "do_redraw", "pretransition", "renderlet", "postRedraw"]


def test_transition_defers_terminal_events():
    scheduler = DeferredScheduler()
    chart = _make_chart(transition_duration=500, transition_delay=250, scheduler=scheduler)

    chart.render()

    assert chart.steps == ["preRender", "do_render", "pretransition"]
    assert scheduler.pending() == 1
    assert chart.svg().layout.transition.duration == 500

    assert scheduler.advance(0.7) == 0
    assert scheduler.advance(0.1) == 1
    assert chart.steps[-2:] == ["renderlet", "postRender"]


def test_overlapping_redraws_each_fire_their_events():
    scheduler = DeferredScheduler()
    chart = _make_chart(transition_duration=100, scheduler=scheduler)
    chart.render()
    scheduler.flush()
    chart.steps.clear()

    chart.redraw()
    chart.redraw()
    scheduler.flush()

    assert chart.steps.count("postRedraw") == 2
    assert chart.steps.count("renderlet") == 2


def test_render_without_surface_fires_immediately():
    class _NoSurfaceChart(_RecordingChart):
        def _do_render(self):
            self.steps.append("do_render")
            return self

    scheduler = DeferredScheduler()
    chart = _NoSurfaceChart("#x", registry=ChartRegistry(), transition_duration=500, scheduler=scheduler)
    chart.dimension(object()).group(_StaticGroup())
    chart.on("postRender.t", lambda c: c.steps.append("postRender"))

    chart.render()

    assert scheduler.pending() == 0
    assert chart.steps == ["do_render", "postRender"]


def test_missing_mandatory_attribute_names_attribute_and_anchor():
    chart = _RecordingChart("#my-chart", registry=ChartRegistry(), transition_duration=0)
    chart.dimension(object())

    with pytest.raises(InvalidStateError) as exc:
        chart.render()

    assert "chart.group" in str(exc.value)
    assert "my-chart" in str(exc.value)
    assert isinstance(exc.value, ConfigurationError)
    assert chart.steps == []


def test_mandatory_attributes_can_be_replaced():
    chart = _RecordingChart("#m", registry=ChartRegistry(), transition_duration=0)
    chart.mandatory_attributes(["dimension"])
    chart.dimension(object())

    chart.render()

    assert chart.mandatory_attributes() == ("dimension",)
    assert chart.steps == ["do_render"]


def test_render_recomputes_size_and_redraw_reuses_it():
    root = html.Div(id="sized", style={"width": "500px", "height": "300px"})
    chart = _RecordingChart(root, registry=ChartRegistry(), transition_duration=0)
    chart.dimension(object()).group(_StaticGroup())

    chart.render()
    assert (chart.width(), chart.height()) == (500, 300)
    assert chart.svg().layout.width == 500

    root.style = {"width": "600px", "height": "300px"}
    chart.redraw()
    assert chart.width() == 500

    chart.render()
    assert chart.width() == 600


def test_view_box_resizing_autosizes_surface():
    chart = _make_chart(transition_duration=0, use_view_box_resizing=True)

    chart.render()

    assert chart.svg().layout.autosize is True
    assert chart.svg().layout.width is None


def test_legend_renders_between_draw_and_transition_events():
    class _Legend:
        def __init__(self):
            self.chart = None

        def parent(self, chart=None):
            self.chart = chart
            return self

        def render(self):
            self.chart.steps.append("legend")

    chart = _make_chart(transition_duration=0)
    chart.legend(_Legend())

    chart.render()

    assert chart.steps == ["preRender", "do_render", "legend", "pretransition", "renderlet", "postRender"]
