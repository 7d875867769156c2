from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, List

if TYPE_CHECKING:
    from .chart_config import ChartConfig


def is_batch(value: Any) -> bool:
    """'[[a, b, c]]' toggles a, b and c one by one instead of the list itself."""
    return (
        isinstance(value, list)
        and len(value) > 0
        and isinstance(value[0], (list, tuple))
        and not callable(getattr(value, "is_filtered", None))
    )


class FilterSet:
    """
    Ordered collection of a chart's active filters.

    All membership logic is delegated to the handlers of the current chart
    configuration, which is looked up on every call so that swapping a handler
    takes effect immediately. After each mutation the resulting list is pushed
    into the bound dimension through 'filter_handler'.
    """

    def __init__(self, conf: Callable[[], ChartConfig]):
        self._conf = conf
        self._values: List[Any] = []

    @property
    def values(self) -> List[Any]:
        # live list, not a copy
        return self._values

    def first(self) -> Any:
        return self._values[0] if self._values else None

    def has(self, probe: Any = None) -> bool:
        return self._conf().has_filter_handler(self._values, probe)

    def toggle(self, value: Any) -> List[Any]:
        """
        Toggle a value (or each value of a batch), then apply the result once.
        None resets the set through 'reset_filter_handler'.
        """
        conf = self._conf()
        filters = self._values

        if is_batch(value):
            for v in value[0]:
                filters = self._toggle_one(conf, filters, v)
        elif value is None:
            filters = conf.reset_filter_handler(filters)
        else:
            filters = self._toggle_one(conf, filters, value)

        self._values = self.apply(filters)
        return self._values

    def replace(self, value: Any) -> List[Any]:
        """Reset then toggle, with a single apply to the data source."""
        self._values = self._conf().reset_filter_handler(self._values)
        return self.toggle(value)

    def reset(self) -> List[Any]:
        return self.toggle(None)

    def apply(self, filters: List[Any]) -> List[Any]:
        conf = self._conf()
        dimension = conf.dimension
        if dimension is not None and hasattr(dimension, "filter"):
            applied = conf.filter_handler(dimension, filters)
            if applied is not None:
                filters = applied
        return filters

    @staticmethod
    def _toggle_one(conf: ChartConfig, filters: List[Any], value: Any) -> List[Any]:
        if conf.has_filter_handler(filters, value):
            return conf.remove_filter_handler(filters, value)
        return conf.add_filter_handler(filters, value)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(self._values)
