from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from . import printers
from .filter_handlers import (
    AddFilterHandler,
    FilterHandler,
    HasFilterHandler,
    RemoveFilterHandler,
    ResetFilterHandler,
    default_add_filter_handler,
    default_filter_handler,
    default_has_filter_handler,
    default_remove_filter_handler,
    default_reset_filter_handler,
)
from .schedulers import Scheduler, default_scheduler

# commit_handler(render, callback) where callback(error, result)
CommitCallback = Callable[[Optional[Any], Optional[Any]], None]
CommitHandler = Callable[[bool, CommitCallback], None]


def key_of(d: Any) -> Any:
    """Default accessor for group records of the form {"key": ..., "value": ...}"""
    return d["key"]


def value_of(d: Any) -> Any:
    return d["value"]


@dataclass(frozen=True)
class ChartConfig:
    """
    Per-chart configuration record.

    Never mutated: 'merge' returns a new record where the patched keys win and
    everything else is kept. Nested values are replaced, not merged.

    Fields:

    - min_width / min_height: floor for the automatic size calculation
    - use_view_box_resizing: let the surface autosize instead of fixing width/height
    - ordering: sort key for group records
    - filter_printer: formats the active filters for the '.filter' control
    - controls_use_visibility: hide controls with 'visibility' instead of 'display'
    - transition_duration / transition_delay: milliseconds
    - commit_handler: gate for group-wide render/redraw, see BaseChart.redraw_group
    - *_filter_handler / filter_handler: the filter strategy bundle
    - label / render_label / render_title: text used by drawing code
    - dimension: the data source filters are applied to
    - scheduler: runs lifecycle events deferred until a transition ends
    """

    min_width: int = 200
    min_height: int = 200
    use_view_box_resizing: bool = False
    ordering: Callable[[Any], Any] = key_of
    filter_printer: Callable[[List[Any]], str] = printers.print_filters
    controls_use_visibility: bool = False
    transition_duration: int = 750
    transition_delay: int = 0
    commit_handler: Optional[CommitHandler] = None
    filter_handler: FilterHandler = default_filter_handler
    has_filter_handler: HasFilterHandler = default_has_filter_handler
    remove_filter_handler: RemoveFilterHandler = default_remove_filter_handler
    add_filter_handler: AddFilterHandler = default_add_filter_handler
    reset_filter_handler: ResetFilterHandler = default_reset_filter_handler
    label: Callable[[Any], Any] = key_of
    render_label: bool = False
    render_title: bool = True
    dimension: Any = None
    scheduler: Scheduler = field(default=default_scheduler, compare=False)

    def merge(self, **patch: Any) -> ChartConfig:
        return replace(self, **patch)

    def to_dict(self) -> Dict[str, Any]:
        # shallow: handlers and the dimension are returned by reference
        return {name: getattr(self, name) for name in self.__dataclass_fields__}
