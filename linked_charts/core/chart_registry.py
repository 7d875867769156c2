from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

from .chart_group import ChartGroup

if TYPE_CHECKING:
    from .base_chart import BaseChart

DEFAULT_CHART_GROUP = "__default_chart_group__"


class ChartRegistry:
    """
    Process-scoped table of chart groups, keyed by name.

    Design Notes:
    - groups are created on first lookup and never torn down implicitly
    - charts take a registry at construction, so tests can use a fresh one
      instead of the module-level default
    """

    def __init__(self) -> None:
        self._groups: Dict[str, ChartGroup] = {}

    def chart_group(self, name: Optional[str] = None) -> ChartGroup:
        """
        Return the group with the given name, creating it if needed.
        :param name: group name; None means the default group
        """
        name = name or DEFAULT_CHART_GROUP
        group = self._groups.get(name)
        if group is None:
            group = ChartGroup(name)
            self._groups[name] = group
        return group

    def has(self, chart: BaseChart) -> bool:
        return any(group.has(chart) for group in self._groups.values())

    def register(self, chart: BaseChart, name: Optional[str] = None) -> None:
        self.chart_group(name).register(chart)

    def deregister(self, chart: BaseChart, name: Optional[str] = None) -> None:
        self.chart_group(name).deregister(chart)

    def clear(self, name: Optional[str] = None) -> None:
        """Empty one group, or every group when no name is given."""
        if name:
            self.chart_group(name).clear()
        else:
            self._groups = {}

    def group_names(self) -> List[str]:
        return sorted(self._groups)

    def render_all(self, name: Optional[str] = None) -> None:
        self.chart_group(name).render_all()

    def redraw_all(self, name: Optional[str] = None) -> None:
        self.chart_group(name).redraw_all()

    def filter_all(self, name: Optional[str] = None) -> None:
        self.chart_group(name).filter_all()


chart_registry = ChartRegistry()
