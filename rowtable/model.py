"""Value objects passed between the resolver, registry and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from rowtable.messages import DEFAULT, Messages


class CellKind(str, Enum):
    HEADER = "header"
    BODY = "body"
    FOOTER = "footer"


class TotalMethod(str, Enum):
    """Aggregation applied to a column in the table footer."""

    NONE = "none"
    SUM = "sum"
    MEAN = "mean"
    COUNT = "count"
    TREND = "trend"

    @classmethod
    def coerce(cls, value: "TotalMethod | str | None") -> "TotalMethod":
        """Return the method for ``value`` accepting ``avg``/``average``."""
        if isinstance(value, TotalMethod):
            return value
        if value is None or value is False:
            return cls.NONE
        text = str(value).strip().lower()
        if text in {"avg", "average"}:
            return cls.MEAN
        return cls(text)


@dataclass(frozen=True)
class ColumnSpec:
    """Column materialized for a single render."""

    name: str
    label: str
    css_class: str | None = None
    order: int = 0
    total: TotalMethod = TotalMethod.NONE


@dataclass(frozen=True)
class FormatContext:
    """Information a formatter receives alongside the cell value."""

    cell_kind: CellKind = CellKind.BODY
    column: ColumnSpec | None = None
    row: Any = None
    options: Mapping[str, Any] = field(default_factory=dict)
    messages: Messages = DEFAULT

    def option(self, key: str, default: Any = None) -> Any:
        value = self.options.get(key)
        return default if value is None else value

    def with_options(self, extra: Mapping[str, Any] | None) -> "FormatContext":
        if not extra:
            return self
        return FormatContext(
            cell_kind=self.cell_kind,
            column=self.column,
            row=self.row,
            options={**self.options, **dict(extra)},
            messages=self.messages,
        )


__all__ = ["CellKind", "ColumnSpec", "FormatContext", "TotalMethod"]
