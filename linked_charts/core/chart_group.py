from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .base_chart import BaseChart

logger = logging.getLogger(__name__)


class ChartGroup:
    """
    Charts that view the same data and must be rendered / redrawn together.

    Members are kept in registration order. A failing member aborts the fan-out
    for the members after it; nothing is caught here.
    """

    def __init__(self, name: str):
        self.name = name
        self._charts: List[BaseChart] = []

    def register(self, chart: BaseChart) -> None:
        if not self.has(chart):
            self._charts.append(chart)

    def deregister(self, chart: BaseChart) -> None:
        self._charts = [c for c in self._charts if c is not chart]

    def has(self, chart: BaseChart) -> bool:
        return any(c is chart for c in self._charts)

    def clear(self) -> None:
        self._charts = []

    def list(self) -> List[BaseChart]:
        return list(self._charts)

    def render_all(self) -> None:
        logger.debug("Rendering chart group", extra={"chart_group": self.name, "n_charts": len(self._charts)})
        for chart in list(self._charts):
            chart.render()

    def redraw_all(self) -> None:
        logger.debug("Redrawing chart group", extra={"chart_group": self.name, "n_charts": len(self._charts)})
        for chart in list(self._charts):
            chart.redraw()

    def filter_all(self) -> None:
        """Clear the filters of every member; the caller decides when to redraw."""
        for chart in list(self._charts):
            chart.filter_all()

    def __len__(self) -> int:
        return len(self._charts)

    def __iter__(self):
        return iter(list(self._charts))

    def __repr__(self) -> str:
        return f"ChartGroup({self.name!r}, n_charts={len(self._charts)})"
