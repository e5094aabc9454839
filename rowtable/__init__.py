"""Render collections of records as tables with formatted columns and totals."""

from .aggregate import aggregate, compute_totals
from .columns import Column, ColumnType
from .errors import (
    InvalidConfiguration,
    InvalidInput,
    MissingBaseColumn,
    NoFormatterConfigured,
    TableError,
)
from .formatting import FORMATTERS
from .frames import rows_from_frame, schema_from_frame
from .messages import Messages
from .registry import ColumnFormat, ColumnFormatRegistry, MergePolicy
from .render import render_html, render_text, to_html, to_text
from .resolver import RenderOptions, ResolvedTable, resolve_table
from .schema import Schema

__version__ = "0.1.0"

__all__ = [
    "Column",
    "ColumnFormat",
    "ColumnFormatRegistry",
    "ColumnType",
    "FORMATTERS",
    "InvalidConfiguration",
    "InvalidInput",
    "MergePolicy",
    "Messages",
    "MissingBaseColumn",
    "NoFormatterConfigured",
    "RenderOptions",
    "ResolvedTable",
    "Schema",
    "TableError",
    "aggregate",
    "compute_totals",
    "render_html",
    "render_text",
    "resolve_table",
    "rows_from_frame",
    "schema_from_frame",
    "to_html",
    "to_text",
]
