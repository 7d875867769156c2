from __future__ import annotations

import pytest

from linked_charts.core.base_chart import BaseChart
from linked_charts.core.chart_group import ChartGroup
from linked_charts.core.chart_registry import DEFAULT_CHART_GROUP, ChartRegistry
from linked_charts.core.exceptions import CommitError


class _StaticGroup:
    def all(self):
        return []


class _CountingChart(BaseChart):
    def __init__(self, *args, **kwargs):
        self.renders = 0
        self.redraws = 0
        super().__init__(*args, **kwargs)

    def _do_render(self):
        self.renders += 1
        return self

    def _do_redraw(self):
        self.redraws += 1
        return self


def _make_charts(registry, name="g", n=2, **config):
    charts = []
    for i in range(n):
        chart = _CountingChart(f"#{name}-{i}", name, registry=registry, transition_duration=0, **config)
        chart.dimension(object()).group(_StaticGroup())
        charts.append(chart)
    return charts


def test_group_register_is_idempotent_and_ordered():
    group = ChartGroup("g")
    a, b = object(), object()
    group.register(a)
    group.register(b)
    group.register(a)

    assert group.list() == [a, b]
    assert len(group) == 2
    group.deregister(a)
    assert group.list() == [b]
    assert not group.has(a)


def test_registry_creates_groups_on_lookup():
    registry = ChartRegistry()

    default = registry.chart_group()

    assert default.name == DEFAULT_CHART_GROUP
    assert registry.chart_group("") is default
    assert registry.chart_group("x") is registry.chart_group("x")
    assert registry.group_names() == sorted([DEFAULT_CHART_GROUP, "x"])


def test_anchored_chart_joins_named_group():
    registry = ChartRegistry()
    a, b = _make_charts(registry)

    assert registry.chart_group("g").list() == [a, b]
    assert a.chart_group() is registry.chart_group("g")
    assert registry.has(a)


def test_anchor_without_group_uses_default():
    registry = ChartRegistry()
    chart = _CountingChart("#solo", registry=registry)

    assert registry.chart_group().has(chart)


def test_moving_chart_between_groups():
    registry = ChartRegistry()
    a, b = _make_charts(registry)

    a.chart_group("other")

    assert not registry.chart_group("g").has(a)
    assert registry.chart_group("other").has(a)


def test_redraw_group_redraws_every_member():
    registry = ChartRegistry()
    a, b = _make_charts(registry)
    outsider, = _make_charts(registry, name="h", n=1)

    a.redraw_group()

    assert (a.redraws, b.redraws, outsider.redraws) == (1, 1, 0)


def test_render_group_renders_every_member():
    registry = ChartRegistry()
    a, b = _make_charts(registry)

    b.render_group()

    assert (a.renders, b.renders) == (1, 1)


def test_registry_fan_out_and_filter_all():
    registry = ChartRegistry()
    a, b = _make_charts(registry)
    a.filter("x")
    b.filter("y")

    registry.filter_all("g")
    registry.render_all("g")
    registry.redraw_all("g")

    assert a.filters() == [] and b.filters() == []
    assert (a.renders, b.redraws) == (1, 1)


def test_registry_clear():
    registry = ChartRegistry()
    a, _ = _make_charts(registry)

    registry.clear("g")
    assert len(registry.chart_group("g")) == 0

    registry.clear()
    assert registry.group_names() == []
    assert not registry.has(a)


def test_failing_member_aborts_fan_out():
    registry = ChartRegistry()
    a, b = _make_charts(registry)

    def boom():
        raise RuntimeError("draw failed")

    a._do_redraw = boom
    with pytest.raises(RuntimeError):
        a.redraw_group()
    assert b.redraws == 0


def test_commit_handler_gates_redraw():
    registry = ChartRegistry()
    calls = []
    pending = []

    def commit(render, callback):
        calls.append(render)
        pending.append(callback)

    a, b = _make_charts(registry, commit_handler=commit)

    a.redraw_group()
    assert calls == [False]
    assert (a.redraws, b.redraws) == (0, 0)

    pending[0](None, "ok")
    assert (a.redraws, b.redraws) == (1, 1)


def test_commit_handler_receives_render_flag():
    registry = ChartRegistry()
    calls = []

    def commit(render, callback):
        calls.append(render)
        callback(None, None)

    a, b = _make_charts(registry, commit_handler=commit)

    a.render_group()

    assert calls == [True]
    assert (a.renders, b.renders) == (1, 1)


def test_failed_commit_skips_fan_out(caplog):
    registry = ChartRegistry()

    def commit(render, callback):
        callback(CommitError("backend rejected"), None)

    a, b = _make_charts(registry, commit_handler=commit)

    with caplog.at_level("ERROR"):
        a.redraw_group()

    assert (a.redraws, b.redraws) == (0, 0)
    assert "Commit handler failed" in caplog.text


def test_child_chart_is_not_registered():
    registry = ChartRegistry()
    parent, = _make_charts(registry, n=1)
    child = _CountingChart(registry=registry)

    child.anchor(parent, parent.chart_group())

    assert child.is_child()
    assert child.root() is parent.root()
    assert not registry.has(child)
    assert registry.chart_group("g").list() == [parent]


def test_re_anchoring_moves_chart_to_new_group():
    registry = ChartRegistry()
    a, b = _make_charts(registry)

    a.anchor("#moved", "other")

    assert registry.chart_group("g").list() == [b]
    assert registry.chart_group("other").list() == [a]
    b.redraw_group()
    assert a.redraws == 0


def test_re_anchoring_to_a_parent_chart_leaves_group():
    registry = ChartRegistry()
    a, b = _make_charts(registry)

    b.anchor(a, "g")

    assert b.is_child()
    assert registry.chart_group("g").list() == [a]


def test_falsy_commit_error_counts_as_success():
    registry = ChartRegistry()

    def commit(render, callback):
        callback(False, None)

    a, b = _make_charts(registry, commit_handler=commit)

    a.redraw_group()

    assert (a.redraws, b.redraws) == (1, 1)
