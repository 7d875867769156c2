"""Text formatting for filters shown in a chart's '.filter' control."""
from __future__ import annotations

from datetime import date, datetime
from numbers import Integral, Real
from typing import Any, Iterable


def print_single_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, Real) and not isinstance(value, Integral):
        if float(value).is_integer():
            return str(int(value))
        return f"{value:.2f}"
    if isinstance(value, (datetime, date)):
        return value.strftime("%a %b %d %Y")
    return str(value)


def print_filter(filter_value: Any) -> str:
    if filter_value is None:
        return ""
    if isinstance(filter_value, (list, tuple)):
        if len(filter_value) >= 2:
            return f"[{print_filter(filter_value[0])} -> {print_filter(filter_value[1])}]"
        if len(filter_value) == 1:
            return print_single_value(filter_value[0])
        return ""
    return print_single_value(filter_value)


def print_filters(filters: Iterable[Any]) -> str:
    return ", ".join(print_filter(f) for f in filters)
