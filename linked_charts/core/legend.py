from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .base_chart import BaseChart


class Legend:
    """
    Legend attached to a chart with chart.legend(Legend()).

    The chart describes its entries through 'legendables()'; the legend decides
    where they go. Entries are dicts with at least a 'name', optionally 'color'
    and 'hidden'.
    """

    def __init__(self, x: float = 1.02, y: float = 1.0, horizontal: bool = False):
        self.x = x
        self.y = y
        self.horizontal = horizontal
        self._parent: Optional[BaseChart] = None
        self.items: List[Dict[str, Any]] = []

    def parent(self, chart: Any = None) -> Any:
        if chart is None:
            return self._parent
        self._parent = chart
        return self

    def render(self) -> None:
        chart = self._parent
        if chart is None:
            return
        self.items = [item for item in chart.legendables() if not chart.is_legendable_hidden(item)]
        fig = chart.svg()
        if fig is None:
            return
        fig.update_layout(
            showlegend=bool(self.items),
            legend=dict(
                x=self.x,
                y=self.y,
                orientation="h" if self.horizontal else "v",
            ),
        )
