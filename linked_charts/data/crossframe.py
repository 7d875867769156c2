from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd


class CrossFrame:
    """
    Small crossfilter-style index over a pandas DataFrame.

    Each dimension carries its own row mask. A group on a dimension aggregates
    the rows passing the filters of every *other* dimension, so a chart never
    filters away its own bars.

    Design Notes:
    - masks are recomputed eagerly on each filter call; aggregation happens on
      'group.all()'
    - this is a reference data source for charts and tests, not a replacement
      for a real multi-key index
    """

    def __init__(self, frame: pd.DataFrame):
        self._frame = frame.reset_index(drop=True)
        self._dimensions: List[FrameDimension] = []

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    def dimension(self, column: str) -> FrameDimension:
        if column not in self._frame.columns:
            raise KeyError(f"Column '{column}' not found. Available columns: {list(self._frame.columns)}")
        dim = FrameDimension(self, column)
        self._dimensions.append(dim)
        return dim

    def remove_dimension(self, dimension: FrameDimension) -> None:
        self._dimensions = [d for d in self._dimensions if d is not dimension]

    def size(self) -> int:
        return len(self._frame)

    def mask(self, exclude: Optional[FrameDimension] = None) -> pd.Series:
        """Rows passing every dimension's filter, optionally ignoring one dimension."""
        combined = pd.Series(True, index=self._frame.index)
        for dim in self._dimensions:
            if dim is not exclude:
                combined &= dim.mask
        return combined

    def all_filtered(self) -> pd.DataFrame:
        return self._frame[self.mask()]


class FrameDimension:
    """
    One column of a CrossFrame that can be filtered.

    Implements the data source surface charts rely on: filter, filter_exact,
    filter_range, filter_function.
    """

    def __init__(self, crossframe: CrossFrame, column: str):
        self._cf = crossframe
        self.column = column
        self.mask = pd.Series(True, index=crossframe.frame.index)
        self._current_filter: Any = None

    @property
    def values(self) -> pd.Series:
        return self._cf.frame[self.column]

    def current_filter(self) -> Any:
        return self._current_filter

    def filter(self, value: Any = None) -> FrameDimension:
        """
        Dispatch like crossfilter's dimension.filter:
        None clears, a callable filters by function, a 2-sequence by range,
        anything else by exact value.
        """
        if value is None:
            return self.filter_all()
        if callable(value):
            return self.filter_function(value)
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return self.filter_range(value)
        return self.filter_exact(value)

    def filter_all(self) -> FrameDimension:
        self.mask = pd.Series(True, index=self.values.index)
        self._current_filter = None
        return self

    def filter_exact(self, value: Any) -> FrameDimension:
        self.mask = self.values == value
        self._current_filter = value
        return self

    def filter_range(self, bounds: Sequence[Any]) -> FrameDimension:
        """Half-open range: low <= v < high."""
        low, high = bounds[0], bounds[1]
        values = self.values
        self.mask = (values >= low) & (values < high)
        self._current_filter = bounds
        return self

    def filter_function(self, predicate: Callable[[Any], bool]) -> FrameDimension:
        self.mask = self.values.map(lambda v: bool(predicate(v))).astype(bool)
        self._current_filter = predicate
        return self

    def group(self) -> FrameGroup:
        return FrameGroup(self)

    def top(self, k: int) -> List[Dict[str, Any]]:
        """The k filtered rows with the largest values on this dimension."""
        rows = self._cf.all_filtered().sort_values(self.column, ascending=False).head(k)
        return rows.to_dict(orient="records")

    def bottom(self, k: int) -> List[Dict[str, Any]]:
        rows = self._cf.all_filtered().sort_values(self.column, ascending=True).head(k)
        return rows.to_dict(orient="records")

    def dispose(self) -> None:
        self._cf.remove_dimension(self)

    def __repr__(self) -> str:
        return f"FrameDimension({self.column!r}, filter={self._current_filter!r})"


class FrameGroup:
    """
    Per-key aggregate of a dimension: record count by default, or the sum of a column.
    Every key present in the data is reported, with 0 when all its rows are filtered out.
    """

    def __init__(self, dimension: FrameDimension):
        self._dimension = dimension
        self._value_column: Optional[str] = None

    def reduce_count(self) -> FrameGroup:
        self._value_column = None
        return self

    def reduce_sum(self, column: str) -> FrameGroup:
        self._value_column = column
        return self

    def _aggregate(self) -> pd.Series:
        dim = self._dimension
        frame = dim._cf.frame
        keys = pd.Index(pd.unique(frame[dim.column])).sort_values()
        rows = frame[dim._cf.mask(exclude=dim)]
        grouped = rows.groupby(dim.column, sort=True)
        if self._value_column is None:
            agg = grouped.size()
        else:
            agg = grouped[self._value_column].sum()
        return agg.reindex(keys, fill_value=0)

    @staticmethod
    def _records(agg: pd.Series) -> List[Dict[str, Any]]:
        return [
            {"key": k.item() if isinstance(k, np.generic) else k, "value": v.item() if isinstance(v, np.generic) else v}
            for k, v in agg.items()
        ]

    def all(self) -> List[Dict[str, Any]]:
        return self._records(self._aggregate())

    def top(self, k: int) -> List[Dict[str, Any]]:
        agg = self._aggregate().sort_values(ascending=False, kind="stable")
        return self._records(agg.head(k))

    def size(self) -> int:
        return int(pd.unique(self._dimension.values).size)
