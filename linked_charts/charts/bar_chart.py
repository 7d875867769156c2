from __future__ import annotations

from typing import Any, Dict, List

import plotly.graph_objs as go

from linked_charts.core.base_chart import BaseChart

SELECTED_OPACITY = 1.0
DESELECTED_OPACITY = 0.3


class BarChart(BaseChart):
    """
    One bar per group record.

    - x from the key accessor, y from the value accessor, ordered by 'ordering'
    - while the chart is filtered, bars accepted by a filter stay opaque and the
      rest fade
    - hover text from the title function when 'render_title' is on
    """

    def __init__(self, parent: Any = None, chart_group: Any = None, *, color: str = "#1f77b4", **kwargs: Any):
        super().__init__(parent, chart_group, **kwargs)
        self.color = color

    @property
    def trace_uid(self) -> str:
        return f"bar-{self.chart_id()}"

    def _bar_props(self) -> Dict[str, Any]:
        records = self.compute_ordered_groups(self.data())
        key_of = self.key_accessor()
        value_of = self.value_accessor()
        keys = [key_of(d) for d in records]

        if self.has_filter():
            opacity = [SELECTED_OPACITY if self.filter_accepts(k) else DESELECTED_OPACITY for k in keys]
        else:
            opacity = [SELECTED_OPACITY] * len(keys)

        props: Dict[str, Any] = dict(
            x=keys,
            y=[value_of(d) for d in records],
            name=self.group_name() or self.anchor_name(),
            marker=dict(color=self.color, opacity=opacity),
        )
        if self.conf.render_title:
            props.update(hovertext=[self.title()(d) for d in records], hoverinfo="text")
        if self.conf.render_label:
            label = self.conf.label
            props.update(text=[label(d) for d in records], textposition="outside")
        return props

    def plot(self, fig: go.Figure) -> None:
        """Add this chart's bar trace to the figure, or update it in place."""
        props = self._bar_props()
        existing: List[Any] = [t for t in fig.data if t.uid == self.trace_uid]
        if existing:
            existing[0].update(**props)
        else:
            fig.add_trace(go.Bar(uid=self.trace_uid, **props))

    def _do_render(self) -> BarChart:
        fig = self.reset_svg()
        self.plot(fig)
        fig.update_layout(clickmode="event", bargap=0.15)
        return self

    def _do_redraw(self) -> BarChart:
        if self.svg() is None:
            # first draw: render() was skipped, so its checks were too
            self.check_all_mandatory_attributes()
            return self._do_render()
        self.plot(self.svg())
        return self

    def legendables(self) -> List[Dict[str, Any]]:
        return [{"name": self.group_name() or self.anchor_name(), "color": self.color, "chart": self}]
