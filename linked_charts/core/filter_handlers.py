"""
Default filter handler bundle.

A chart keeps its active filters as a plain list and never edits it directly:
every change goes through these five functions, which live in the chart
configuration and can be replaced one by one.

- has_filter_handler(filters, probe) -> bool
- add_filter_handler(filters, value) -> filters
- remove_filter_handler(filters, value) -> filters
- reset_filter_handler(filters) -> filters
- filter_handler(dimension, filters) -> filters   (pushes filters into the data source)
"""
from __future__ import annotations

from typing import Any, Callable, List, Optional

from .filters import closed_range_match, is_predicate

HasFilterHandler = Callable[[List[Any], Any], bool]
AddFilterHandler = Callable[[List[Any], Any], List[Any]]
RemoveFilterHandler = Callable[[List[Any], Any], List[Any]]
ResetFilterHandler = Callable[[List[Any]], List[Any]]
FilterHandler = Callable[[Any, List[Any]], Optional[List[Any]]]


def accepts(filter_value: Any, value: Any) -> bool:
    """
    Does a single filter accept the given value?

    Predicate filters answer through 'is_filtered'; anything else uses the
    closed-range test, which is equality for ordered values.
    """
    if is_predicate(filter_value) and not is_predicate(value):
        return bool(filter_value.is_filtered(value))
    return closed_range_match(filter_value, value)


def default_filter_handler(dimension: Any, filters: List[Any]) -> List[Any]:
    if len(filters) == 0:
        dimension.filter(None)
    elif len(filters) == 1 and not is_predicate(filters[0]):
        # single plain value
        dimension.filter_exact(filters[0])
    elif len(filters) == 1 and getattr(filters[0], "filter_type", None) == "RangedFilter":
        dimension.filter_range(filters[0])
    else:
        # the chart may keep mutating its list; the installed predicate must not see that
        snapshot = list(filters)
        dimension.filter_function(lambda d: any(accepts(f, d) for f in snapshot))
    return filters


def default_has_filter_handler(filters: List[Any], probe: Any = None) -> bool:
    # same test as default_remove_filter_handler, so toggling always adds or removes
    if probe is None:
        return len(filters) > 0
    return any(closed_range_match(f, probe) for f in filters)


def any_accepts(filters: List[Any], value: Any) -> bool:
    """Is the value selected by at least one filter (predicates via 'is_filtered')?"""
    return any(accepts(f, value) for f in filters)


def default_remove_filter_handler(filters: List[Any], value: Any) -> List[Any]:
    for i, f in enumerate(filters):
        if closed_range_match(f, value):
            del filters[i]
            break
    return filters


def default_add_filter_handler(filters: List[Any], value: Any) -> List[Any]:
    filters.append(value)
    return filters


def default_reset_filter_handler(filters: List[Any]) -> List[Any]:
    return []
