from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class PredicateFilter(Protocol):
    """
    A filter value that decides for itself which records it accepts.

    Plain filter values (strings, numbers, ...) are matched by equality; anything
    exposing 'is_filtered' is asked directly.
    """

    filter_type: str

    def is_filtered(self, value: Any) -> bool:
        ...


def is_predicate(value: Any) -> bool:
    return callable(getattr(value, "is_filtered", None))


def closed_range_match(a: Any, b: Any) -> bool:
    """
    The closed-range test 'a <= b <= a', i.e. equality for ordered values.
    Values that cannot be ordered against each other never match.
    """
    try:
        return bool(a <= b and a >= b)
    except TypeError:
        return False


class RangedFilter(tuple):
    """
    One-dimensional half-open range [low, high).

    It is also a 2-tuple so that data sources taking '(low, high)' can use it as-is.
    """

    filter_type = "RangedFilter"

    def __new__(cls, low: Any, high: Any) -> RangedFilter:
        return super().__new__(cls, (low, high))

    @property
    def low(self) -> Any:
        return self[0]

    @property
    def high(self) -> Any:
        return self[1]

    def is_filtered(self, value: Any) -> bool:
        try:
            return bool(self[0] <= value < self[1])
        except TypeError:
            return False

    def __repr__(self) -> str:
        return f"RangedFilter({self[0]!r}, {self[1]!r})"


class TwoDimensionalFilter(tuple):
    """Selects a single (x, y) point, e.g. a heat map cell."""

    filter_type = "TwoDimensionalFilter"

    def __new__(cls, point: Sequence[Any]) -> TwoDimensionalFilter:
        return super().__new__(cls, tuple(point))

    def is_filtered(self, value: Any) -> bool:
        try:
            return len(value) == len(self) and all(
                closed_range_match(a, b) for a, b in zip(value, self)
            )
        except TypeError:
            return False

    def __repr__(self) -> str:
        return f"TwoDimensionalFilter({tuple(self)!r})"


class RangedTwoDimensionalFilter(tuple):
    """
    Rectangular selection '((x1, y1), (x2, y2))', half-open on both axes.

    Given '((x1, x2))'-style bounds of scalars it acts as a range on x only, which
    accepts either a scalar or the x coordinate of a point.
    """

    filter_type = "RangedTwoDimensionalFilter"

    def __new__(cls, bounds: Sequence[Any]) -> RangedTwoDimensionalFilter:
        return super().__new__(cls, tuple(bounds))

    def _is_box(self) -> bool:
        return isinstance(self[0], (list, tuple))

    def is_filtered(self, value: Any) -> bool:
        try:
            if self._is_box():
                (x1, y1), (x2, y2) = self[0], self[1]
                x, y = value[0], value[1]
                return bool(x1 <= x < x2 and y1 <= y < y2)
            x = value[0] if isinstance(value, (list, tuple)) else value
            return bool(self[0] <= x < self[1])
        except (TypeError, IndexError):
            return False

    def __repr__(self) -> str:
        return f"RangedTwoDimensionalFilter({tuple(self)!r})"
