"""Resolve rows and render options into a render-ready table model."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Sequence

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rowtable.aggregate import compute_totals
from rowtable.calculated import inject_calculated_columns, parse_calculated_columns
from rowtable.config import get as cfg_get
from rowtable.errors import InvalidConfiguration, InvalidInput
from rowtable.formatting.formatters import fmt_num
from rowtable.frames import rows_from_frame
from rowtable.logutils import logger
from rowtable.messages import Messages
from rowtable.model import CellKind, ColumnSpec, FormatContext
from rowtable.rows import RowView
from rowtable.schema import Schema

Comparator = Callable[[Any, Any], int]

# Render options forwarded to formatters through the context
_FORMATTER_OPTION_KEYS = ("not_set_key", "unknown_key", "total_one_key", "total_many_key")


class RenderOptions(BaseModel):
    """Options recognized by :func:`resolve_table`.

    Keys such as ``percent_of_price=200`` or ``difference_of_price=30`` are
    kept as extra fields and turned into calculated columns.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    include: list[str] | None = None
    exclude: list[str] | None = Field(
        default_factory=lambda: list(cfg_get("EXCLUDE_COLUMNS", []))
    )
    exclude_foreign_keys: bool = Field(
        default_factory=lambda: bool(cfg_get("EXCLUDE_FOREIGN_KEYS", True)),
        alias="excludeForeignKeys",
    )
    sort: Any = None
    heading: str | None = None
    caption: str | None = None
    odd_row_class: str = Field(
        default_factory=lambda: str(cfg_get("ODD_ROW_CLASS", "odd")), alias="oddRowClass"
    )
    even_row_class: str = Field(
        default_factory=lambda: str(cfg_get("EVEN_ROW_CLASS", "even")), alias="evenRowClass"
    )
    totals: bool = Field(default_factory=lambda: bool(cfg_get("TOTALS", True)))
    total_one_key: str = Field("tables.total_one", alias="totalOneKey")
    total_many_key: str = Field("tables.total_many", alias="totalManyKey")
    unknown_key: str = Field("tables.unknown", alias="unknownKey")
    not_set_key: str = Field("tables.not_set", alias="notSetKey")
    messages: dict[str, Any] | None = None

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _column_list(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            return [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise ValueError("must be a list of column names")
        names: list[str] = []
        for item in value:
            if not isinstance(item, str) or not item:
                raise ValueError(f"invalid column name {item!r}")
            if item not in names:
                names.append(item)
        return names

    @property
    def calculated(self) -> Mapping[str, Any]:
        return dict(self.model_extra or {})


def _check_sort(sort: Any) -> None:
    if sort is not None and not callable(sort):
        raise InvalidInput("Sort option must be a callable comparator")


def build_options(options: RenderOptions | Mapping[str, Any] | None = None, **kwargs: Any) -> RenderOptions:
    """Return validated :class:`RenderOptions` from a model, mapping or keywords."""

    if isinstance(options, RenderOptions):
        if not kwargs:
            _check_sort(options.sort)
            return options
        raw: dict[str, Any] = {**options.model_dump(), **kwargs}
    else:
        raw = {**dict(options or {}), **kwargs}

    _check_sort(raw.get("sort"))
    try:
        return RenderOptions(**raw)
    except ValidationError as exc:
        raise InvalidConfiguration(f"Invalid render options: {exc}") from exc


@dataclass(frozen=True)
class ResolvedTable:
    """Columns, rows and totals of one render."""

    schema: Schema
    columns: tuple[ColumnSpec, ...]
    rows: tuple[RowView, ...]
    totals: Mapping[str, Any]
    options: RenderOptions
    messages: Messages

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def has_totals(self) -> bool:
        return bool(self.totals)

    def context(self, cell_kind: CellKind, column: ColumnSpec | None = None, row: Any = None, **extra: Any) -> FormatContext:
        options = {key: getattr(self.options, key) for key in _FORMATTER_OPTION_KEYS}
        options.update(extra)
        return FormatContext(
            cell_kind=cell_kind,
            column=column,
            row=row,
            options=options,
            messages=self.messages,
        )

    def format_cell(self, column: ColumnSpec, row: RowView, **extra: Any) -> str:
        return self.schema.format_value(
            column.name,
            row.get(column.name),
            self.context(CellKind.BODY, column, row, **extra),
        )

    def emits_markup(self, column: ColumnSpec) -> bool:
        """Whether the column's formatter returns HTML rather than text.

        Formatters opt in with a truthy ``markup`` attribute.
        """
        return bool(getattr(self.schema.format_of(column.name).formatter, "markup", False))

    def footer_label(self) -> str:
        """Pluralized row count message for the first footer cell."""
        count = self.row_count
        key = self.options.total_many_key if count > 1 else self.options.total_one_key
        return self.messages.translate(key, count=fmt_num(count, 0))

    def formatted_totals(self, **extra: Any) -> dict[str, str]:
        return {
            column.name: self.schema.format_value(
                column.name,
                self.totals[column.name],
                self.context(CellKind.FOOTER, column, **extra),
            )
            for column in self.columns
            if column.name in self.totals
        }


def _materialize(rows: Any) -> list[Any]:
    if rows is None or isinstance(rows, (str, bytes, Mapping)):
        raise InvalidInput("Rows must be a sequence of records")
    if isinstance(rows, pd.DataFrame):
        return rows_from_frame(rows)
    try:
        return list(rows)
    except TypeError as exc:
        raise InvalidInput("Rows must be a sequence of records") from exc


def wrap_rows(rows: Iterable[Any]) -> list[RowView]:
    """Wrap ``rows`` in views after checking they share one shape."""

    items = _materialize(rows)
    if not items:
        raise InvalidInput("Cannot build a table without rows")
    views = [RowView(item) for item in items]
    first = views[0]
    kind = type(first.raw)
    names = set(first.attribute_names())
    for index, view in enumerate(views[1:], start=1):
        if type(view.raw) is not kind:
            raise InvalidInput(
                f"Row {index} is a {type(view.raw).__name__}, expected {kind.__name__}"
            )
        if set(view.attribute_names()) != names:
            raise InvalidInput(f"Row {index} has different attributes than the first row")
    return views


def _include_column(name: str, options: RenderOptions) -> bool:
    if options.exclude and name in options.exclude:
        return False
    suffix = cfg_get("FOREIGN_KEY_SUFFIX", "_id")
    if options.exclude_foreign_keys and suffix and name.endswith(suffix) and name != suffix:
        return False
    return True


def resolve_columns(rows: Sequence[RowView], schema: Schema, options: RenderOptions) -> list[ColumnSpec]:
    """Discover, filter and order the columns of ``rows``."""

    discovered = list(rows[0].attribute_names())
    if options.include is not None:
        available = set(discovered)
        missing = [name for name in options.include if name not in available]
        if missing:
            logger.debug(f"[resolver] included columns not present in rows: {missing}")
        candidates = [name for name in options.include if name in available]
    else:
        candidates = [name for name in discovered if _include_column(name, options)]

    columns: list[ColumnSpec] = []
    for position, name in enumerate(candidates, start=1):
        fmt = schema.format_of(name)
        columns.append(
            ColumnSpec(
                name=name,
                label=schema.human_attribute_name(name),
                css_class=fmt.css_class,
                order=fmt.order if fmt.order is not None else position,
                total=fmt.total,
            )
        )
    columns.sort(key=lambda column: column.order)
    return columns


def resolve_table(
    rows: Iterable[Any],
    schema: Schema,
    options: RenderOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> ResolvedTable:
    """Resolve ``rows`` into a :class:`ResolvedTable`.

    Either the whole resolution succeeds or an error is raised before any
    state is observable; the caller's row objects are never modified.
    """

    opts = build_options(options, **kwargs)
    calculated = parse_calculated_columns(opts.calculated)
    views = wrap_rows(rows)

    if opts.sort is not None:
        comparator: Comparator = opts.sort
        views.sort(key=cmp_to_key(lambda a, b: comparator(a.raw, b.raw)))

    inject_calculated_columns(views, calculated)
    columns = resolve_columns(views, schema, opts)
    totals = compute_totals(views, columns) if opts.totals and len(views) > 1 else {}

    logger.debug(
        f"[resolver] {schema.name}: {len(views)} rows, "
        f"columns={[c.name for c in columns]}, totals={sorted(totals)}"
    )
    return ResolvedTable(
        schema=schema,
        columns=tuple(columns),
        rows=tuple(views),
        totals=MappingProxyType(dict(totals)),
        options=opts,
        messages=Messages(opts.messages),
    )


__all__ = [
    "RenderOptions",
    "ResolvedTable",
    "build_options",
    "resolve_columns",
    "resolve_table",
    "wrap_rows",
]
