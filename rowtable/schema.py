"""Schema metadata: column types, labels and the column format table."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Union

from rowtable.columns import Column, ColumnType, humanize
from rowtable.formatting.formatters import Formatter
from rowtable.model import FormatContext
from rowtable.registry import ColumnFormat, ColumnFormatRegistry, MergePolicy

ColumnsLike = Union[Iterable[Any], Mapping[str, Any]]


def _as_columns(columns: ColumnsLike) -> tuple[Column, ...]:
    if isinstance(columns, Mapping):
        return tuple(Column(str(name), ColumnType.coerce(kind)) for name, kind in columns.items())
    result: list[Column] = []
    for item in columns:
        if isinstance(item, Column):
            result.append(item)
        elif isinstance(item, str):
            result.append(Column(item))
        else:
            name, kind, *rest = item
            label = rest[0] if rest else None
            result.append(Column(str(name), ColumnType.coerce(kind), label))
    return tuple(result)


def _slug(name: str) -> str:
    text = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", str(name))
    return re.sub(r"[^0-9a-zA-Z]+", "_", text).strip("_").lower()


class Schema:
    """Describes the rows of a table and owns their column formats.

    The schema is created once, configured with :meth:`column_format` during
    setup and then handed to :func:`rowtable.resolver.resolve_table` for
    every render.
    """

    def __init__(
        self,
        name: str,
        columns: ColumnsLike = (),
        *,
        primary_key: str | None = "id",
        strict: bool | None = None,
        merge_policy: MergePolicy | str | None = None,
        formatters: Mapping[str, Formatter] | None = None,
    ) -> None:
        self.name = name
        self.columns = _as_columns(columns)
        self.primary_key = primary_key
        self._by_name = {c.name: c for c in self.columns}
        self.formats = ColumnFormatRegistry(
            self.columns,
            strict=strict,
            merge_policy=merge_policy,
            formatters=formatters,
        )

    def __repr__(self) -> str:
        return f"Schema({self.name!r}, columns={[c.name for c in self.columns]!r})"

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> Column | None:
        return self._by_name.get(name)

    def column_type(self, name: str) -> ColumnType:
        column = self._by_name.get(name)
        return column.type if column is not None else ColumnType.OTHER

    def human_attribute_name(self, name: str) -> str:
        column = self._by_name.get(name)
        if column is not None and column.label:
            return column.label
        return humanize(name)

    def column_format(self, name: str, **options: Any) -> ColumnFormat:
        """Declare display options for a column, see :meth:`ColumnFormatRegistry.declare`."""
        return self.formats.declare(name, **options)

    table_format = column_format

    def format_of(self, name: str) -> ColumnFormat:
        return self.formats.format_of(name)

    def format_value(self, name: str, value: Any, context: FormatContext | None = None) -> str:
        return self.formats.format_value(name, value, context)

    def row_id(self, row: Any) -> str | None:
        """Return a CSS id such as ``product_12`` or ``None`` without a key value."""
        if not self.primary_key:
            return None
        value = row.get(self.primary_key)
        if value is None or value == "":
            return None
        return f"{_slug(self.name)}_{value}"


__all__ = ["Schema"]
