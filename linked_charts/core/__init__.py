"""
Core layer: filter handling, chart lifecycle, events and chart groups
"""

from .base_chart import BaseChart
from .chart_config import ChartConfig
from .chart_group import ChartGroup
from .chart_registry import DEFAULT_CHART_GROUP, ChartRegistry, chart_registry
from .events import CHART_EVENTS, EventDispatcher
from .exceptions import (
    BadArgumentError,
    CommitError,
    ConfigurationError,
    InvalidStateError,
    LinkedChartsError,
)
from .filter_set import FilterSet
from .filters import RangedFilter, RangedTwoDimensionalFilter, TwoDimensionalFilter
from .legend import Legend
from .schedulers import AsyncioScheduler, DeferredScheduler, ImmediateScheduler, Scheduler, default_scheduler

__all__ = [
    "BaseChart",
    "ChartConfig",
    "ChartGroup",
    "ChartRegistry",
    "DEFAULT_CHART_GROUP",
    "chart_registry",
    "CHART_EVENTS",
    "EventDispatcher",
    "LinkedChartsError",
    "ConfigurationError",
    "InvalidStateError",
    "BadArgumentError",
    "CommitError",
    "FilterSet",
    "RangedFilter",
    "TwoDimensionalFilter",
    "RangedTwoDimensionalFilter",
    "Legend",
    "Scheduler",
    "DeferredScheduler",
    "ImmediateScheduler",
    "AsyncioScheduler",
    "default_scheduler",
]
