"""pandas adapters: infer a schema from a DataFrame and turn it into rows."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pandas as pd
from pandas.api import types as ptypes

from rowtable.columns import Column, ColumnType
from rowtable.schema import Schema


def _object_column_type(series: pd.Series) -> ColumnType:
    sample = series.dropna()
    if sample.empty:
        return ColumnType.STRING
    first = sample.iloc[0]
    if isinstance(first, datetime):
        return ColumnType.DATETIME
    if isinstance(first, date):
        return ColumnType.DATE
    if isinstance(first, str):
        return ColumnType.STRING
    return ColumnType.OTHER


def column_type_of(series: pd.Series) -> ColumnType:
    """Map a pandas dtype onto a :class:`ColumnType`."""

    dtype = series.dtype
    if ptypes.is_bool_dtype(dtype):
        return ColumnType.BOOLEAN
    if ptypes.is_integer_dtype(dtype):
        return ColumnType.INTEGER
    if ptypes.is_float_dtype(dtype):
        return ColumnType.FLOAT
    if ptypes.is_datetime64_any_dtype(dtype):
        return ColumnType.DATETIME
    if ptypes.is_timedelta64_dtype(dtype):
        return ColumnType.OTHER
    if ptypes.is_object_dtype(dtype) or ptypes.is_string_dtype(dtype):
        return _object_column_type(series)
    return ColumnType.OTHER


def schema_from_frame(frame: pd.DataFrame, name: str = "row", **kwargs: Any) -> Schema:
    """Return a :class:`Schema` whose column types follow the frame's dtypes."""

    columns = [Column(str(col), column_type_of(frame[col])) for col in frame.columns]
    return Schema(name, columns, **kwargs)


def rows_from_frame(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Return the frame as record dicts with missing values as ``None``."""

    cleaned = frame.astype(object).where(frame.notna(), None)
    cleaned.columns = [str(c) for c in cleaned.columns]
    return cleaned.to_dict(orient="records")


__all__ = ["column_type_of", "rows_from_frame", "schema_from_frame"]
