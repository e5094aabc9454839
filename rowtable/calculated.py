"""Calculated columns derived from an existing column and a scalar.

Render options named ``percent_of_<column>`` (or ``percentage_of_``) and
``difference_of_<column>`` (or ``diff_of_``) add a column to every row:

* percent: ``row[column] / value * 100``
* difference: ``row[column] - value``
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from rowtable.errors import InvalidConfiguration, MissingBaseColumn
from rowtable.helpers.numeric import safe_float
from rowtable.logutils import logger
from rowtable.rows import RowView

CALCULATED_COLUMN = re.compile(r"^(?P<operator>[a-z]+)_of_(?P<base>\w+)$")
PERCENT_OPERATORS = frozenset({"percent", "percentage"})
DIFFERENCE_OPERATORS = frozenset({"difference", "diff"})


@dataclass(frozen=True)
class CalculatedColumn:
    name: str
    operator: str
    base: str
    operand: float

    @property
    def is_percent(self) -> bool:
        return self.operator in PERCENT_OPERATORS

    def compute(self, value: Any) -> float:
        number = safe_float(value, fallback=0.0)
        if self.is_percent:
            return number / self.operand * 100
        return number - self.operand


def parse_calculated_column(name: str, value: Any) -> CalculatedColumn:
    """Validate one ``<operator>_of_<column>`` option."""

    match = CALCULATED_COLUMN.match(name)
    if not match:
        raise InvalidConfiguration(f"Unknown render option '{name}'")
    operator = match.group("operator")
    base = match.group("base")
    if operator not in PERCENT_OPERATORS | DIFFERENCE_OPERATORS:
        raise InvalidConfiguration(f"Invalid calculated column '{operator}' for '{base}'")
    operand = safe_float(value, allow_bool=False)
    if operand is None:
        raise InvalidConfiguration(f"Calculated column '{name}' needs a numeric value, got {value!r}")
    if operator in PERCENT_OPERATORS and operand == 0:
        raise InvalidConfiguration(f"Total value must not be 0 for '{name}'")
    return CalculatedColumn(name=name, operator=operator, base=base, operand=operand)


def parse_calculated_columns(options: Mapping[str, Any]) -> list[CalculatedColumn]:
    return [parse_calculated_column(str(k), v) for k, v in options.items()]


def inject_calculated_columns(
    rows: Sequence[RowView],
    columns: Sequence[CalculatedColumn],
) -> None:
    """Add the calculated ``columns`` to every row view.

    Base columns are checked and every value computed before any row is
    touched.
    """
    if not rows or not columns:
        return
    available = set(rows[0].attribute_names())
    for column in columns:
        if column.base not in available:
            raise MissingBaseColumn(column.name, column.base)

    pending = {
        column.name: [column.compute(row.get(column.base)) for row in rows]
        for column in columns
    }
    for name, values in pending.items():
        for row, value in zip(rows, values):
            row.set(name, value)
    logger.debug(f"[calculated] added {sorted(pending)} to {len(rows)} rows")


__all__ = [
    "CALCULATED_COLUMN",
    "CalculatedColumn",
    "inject_calculated_columns",
    "parse_calculated_column",
    "parse_calculated_columns",
]
