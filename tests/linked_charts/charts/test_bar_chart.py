from __future__ import annotations

import pandas as pd
import plotly.graph_objs as go
import pytest

from linked_charts.charts import BarChart
from linked_charts.core.chart_registry import ChartRegistry
from linked_charts.core.exceptions import InvalidStateError
from linked_charts.core.legend import Legend
from linked_charts.data import CrossFrame


def _make_crossframe():
    df = pd.DataFrame(
        {
            "state": ["TX", "MA", "ND", "TX", "MA"],
            "kind": ["a", "b", "a", "b", "a"],
        }
    )
    return CrossFrame(df)


def _make_linked_charts():
    registry = ChartRegistry()
    cf = _make_crossframe()

    state_dim = cf.dimension("state")
    state_chart = BarChart("#states", "g", registry=registry, transition_duration=0)
    state_chart.dimension(state_dim).group(state_dim.group(), "By state")

    kind_dim = cf.dimension("kind")
    kind_chart = BarChart("#kinds", "g", registry=registry, transition_duration=0, color="#ff7f0e")
    kind_chart.dimension(kind_dim).group(kind_dim.group())

    return state_chart, kind_chart


def _bar(chart) -> go.Bar:
    fig = chart.svg()
    assert isinstance(fig, go.Figure)
    (trace,) = [t for t in fig.data if t.uid == chart.trace_uid]
    return trace


def test_render_draws_one_bar_per_key():
    state_chart, _ = _make_linked_charts()

    state_chart.render()

    bar = _bar(state_chart)
    assert list(bar.x) == ["MA", "ND", "TX"]
    assert list(bar.y) == [2, 1, 2]
    assert bar.name == "By state"
    assert list(bar.hovertext) == ["MA: 2", "ND: 1", "TX: 2"]
    assert state_chart.graph() in state_chart.root().children


def test_render_twice_keeps_a_single_surface():
    state_chart, _ = _make_linked_charts()

    state_chart.render()
    state_chart.render()

    graphs = state_chart.select_all("Graph")
    assert len(graphs) == 1
    assert len(state_chart.svg().data) == 1


def test_filter_fades_unselected_bars():
    state_chart, _ = _make_linked_charts()
    state_chart.render()

    state_chart.filter("TX").redraw()

    assert list(_bar(state_chart).marker.opacity) == [0.3, 0.3, 1.0]


def test_redraw_group_updates_linked_chart():
    state_chart, kind_chart = _make_linked_charts()
    state_chart.render_group()
    assert list(_bar(kind_chart).y) == [3, 2]

    state_chart.on_click({"key": "MA", "value": 2})

    assert state_chart.filters() == ["MA"]
    # MA rows: one 'a', one 'b'
    assert list(_bar(kind_chart).y) == [1, 1]
    # a chart does not filter its own bars away
    assert list(_bar(state_chart).y) == [2, 1, 2]


def test_render_label():
    state_chart, _ = _make_linked_charts()
    state_chart.configure(render_label=True, render_title=False)

    state_chart.render()

    bar = _bar(state_chart)
    assert list(bar.text) == ["MA", "ND", "TX"]
    assert bar.hovertext is None


def test_redraw_before_render_renders():
    state_chart, _ = _make_linked_charts()

    state_chart.redraw()

    assert state_chart.svg() is not None


def test_redraw_before_render_checks_mandatory_attributes():
    cf = _make_crossframe()
    chart = BarChart("#no-group", registry=ChartRegistry(), transition_duration=0)
    chart.dimension(cf.dimension("state"))

    with pytest.raises(InvalidStateError) as exc:
        chart.redraw()

    assert "chart.group" in str(exc.value)
    assert "no-group" in str(exc.value)


def test_default_config_fires_post_render_without_driving_a_scheduler():
    cf = _make_crossframe()
    dim = cf.dimension("state")
    chart = BarChart("#defaults", registry=ChartRegistry())
    chart.dimension(dim).group(dim.group())
    seen = []
    chart.on("postRender.t", lambda c: seen.append(c))

    chart.render()

    assert seen == [chart]
    assert chart.svg().layout.transition.duration == 750


def test_legend_lists_the_chart():
    state_chart, _ = _make_linked_charts()

    state_chart.legend(Legend()).render()

    assert state_chart.svg().layout.showlegend is True
    assert state_chart.legend().items[0]["name"] == "By state"
