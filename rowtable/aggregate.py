"""Column aggregates shown in the table footer."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from rowtable.errors import InvalidConfiguration
from rowtable.helpers.numeric import is_blank, safe_float
from rowtable.logutils import log_result
from rowtable.model import ColumnSpec, TotalMethod


def numeric_values(rows: Iterable[Any], column: str) -> pd.Series:
    """Return the column as floats, NaN where a value is not numeric."""
    return pd.Series(
        [safe_float(row.get(column)) for row in rows],
        dtype="float64",
    )


def total_sum(rows: Sequence[Any], column: str) -> float:
    return float(numeric_values(rows, column).fillna(0.0).sum())


def total_mean(rows: Sequence[Any], column: str) -> float:
    """Average over the values that are numeric; blanks do not count."""
    values = numeric_values(rows, column).dropna()
    if values.empty:
        return 0.0
    return float(values.mean())


def total_count(rows: Sequence[Any], column: str) -> int:
    return sum(1 for row in rows if not is_blank(row.get(column)))


def total_trend(rows: Sequence[Any], column: str) -> float:
    """Least squares slope of the numeric values against row position."""
    values = numeric_values(rows, column).dropna()
    if len(values) < 2:
        return 0.0
    positions = values.index.to_numpy(dtype="float64")
    slope = np.polyfit(positions, values.to_numpy(), 1)[0]
    return float(slope)


_METHODS = {
    TotalMethod.SUM: total_sum,
    TotalMethod.MEAN: total_mean,
    TotalMethod.COUNT: total_count,
    TotalMethod.TREND: total_trend,
}


def aggregate(rows: Sequence[Any], column: str, method: TotalMethod | str) -> float | int | None:
    """Aggregate ``column`` over ``rows`` with ``method``.

    ``none`` yields ``None``.
    """
    try:
        resolved = TotalMethod.coerce(method)
    except ValueError as exc:
        raise InvalidConfiguration(f"Unknown total method '{method}'") from exc
    if resolved is TotalMethod.NONE:
        return None
    return _METHODS[resolved](rows, column)


@log_result
def compute_totals(rows: Sequence[Any], columns: Iterable[ColumnSpec]) -> Mapping[str, Any]:
    """Return ``{column: total}`` for every column with a total method."""
    totals: dict[str, Any] = {}
    for column in columns:
        if column.total is TotalMethod.NONE or column.name in totals:
            continue
        totals[column.name] = aggregate(rows, column.name, column.total)
    return totals


__all__ = [
    "aggregate",
    "compute_totals",
    "numeric_values",
    "total_count",
    "total_mean",
    "total_sum",
    "total_trend",
]
