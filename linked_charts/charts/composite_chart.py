from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import plotly.graph_objs as go

from linked_charts.core.base_chart import BaseChart


class CompositeChart(BaseChart):
    """
    Several charts drawn into one shared surface.

    Children are anchored to the composite, so they share its root and never
    join a chart group themselves: only the composite is rendered / redrawn by
    group fan-out, and it draws its children. Children must provide
    'plot(fig)'.
    """

    def __init__(self, parent: Any = None, chart_group: Any = None, **kwargs: Any):
        super().__init__(parent, chart_group, **kwargs)
        self._children: List[BaseChart] = []
        self.mandatory_attributes(("dimension",))

    def compose(self, children: Iterable[BaseChart]) -> CompositeChart:
        self._children = list(children)
        for child in self._children:
            child.anchor(self, self.chart_group())
            if child.dimension() is None:
                child.dimension(self.dimension())
            child.configure(transition_duration=self.conf.transition_duration)
        return self

    def children(self) -> List[BaseChart]:
        return list(self._children)

    def _attach_children(self, fig: go.Figure) -> None:
        for child in self._children:
            child.root(self.root())
            child.svg(fig)

    def _do_render(self) -> CompositeChart:
        fig = self.reset_svg()
        self._attach_children(fig)
        for child in self._children:
            child.plot(fig)
        fig.update_layout(clickmode="event", barmode="group")
        return self

    def _do_redraw(self) -> CompositeChart:
        fig: Optional[go.Figure] = self.svg()
        if fig is None:
            self.check_all_mandatory_attributes()
            return self._do_render()
        self._attach_children(fig)
        for child in self._children:
            child.plot(fig)
        return self

    def _activate_renderlets(self, event: Optional[str] = None) -> None:
        super()._activate_renderlets(event)
        for child in self._children:
            child._activate_renderlets(event)

    def legendables(self) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        for child in self._children:
            items.extend(child.legendables())
        return items
