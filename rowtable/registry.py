"""Per-schema column format configuration.

A :class:`ColumnFormatRegistry` maps column names to :class:`ColumnFormat`
entries.  Entries are seeded from the column types of the schema the first
time they are needed and refined by :meth:`ColumnFormatRegistry.declare`::

    registry.declare("name", order=1)
    registry.declare("orders", total="sum")
    registry.declare("revenue", total="sum", order=5, css_class="right")
    registry.declare("age", total="avg", formatter="number_with_delimiter")

Declarations are expected during schema setup.  They are serialized by a
lock and publish a fresh read-only snapshot, so renders running at the same
time keep reading a consistent table without locking.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from rowtable.columns import Column
from rowtable.config import get as cfg_get
from rowtable.errors import InvalidConfiguration, NoFormatterConfigured
from rowtable.formatting.formatters import (
    FORMATTERS,
    Formatter,
    db_datetime,
    identity,
    number_with_delimiter,
    to_string,
)
from rowtable.logutils import logger
from rowtable.model import FormatContext, TotalMethod


class MergePolicy(str, Enum):
    """How a repeated declaration for the same column is applied."""

    DEEP = "deep"
    SHALLOW = "shallow"


@dataclass(frozen=True)
class ColumnFormat:
    """Display configuration of a single column."""

    order: int | None = None
    total: TotalMethod = TotalMethod.NONE
    css_class: str | None = None
    formatter: Formatter | None = None
    options: Mapping[str, Any] = field(default_factory=dict)


EMPTY_FORMAT = ColumnFormat()

_OPTION_KEYS = {"order", "total", "css_class", "formatter", "options"}
_OPTION_ALIASES = {"class": "css_class", "cssClass": "css_class", "totalMethod": "total"}


def _deep_merge(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def default_format(column: Column) -> ColumnFormat:
    """Return the type driven format for ``column``."""

    kind = column.type
    if kind.is_numeric:
        return ColumnFormat(css_class="right", formatter=number_with_delimiter)
    if kind.is_textual:
        return ColumnFormat(formatter=identity)
    if kind.is_temporal:
        return ColumnFormat(formatter=db_datetime)
    return ColumnFormat(formatter=to_string)


class ColumnFormatRegistry:
    """Column formats of one schema."""

    def __init__(
        self,
        columns: Iterable[Column] = (),
        *,
        strict: bool | None = None,
        merge_policy: MergePolicy | str | None = None,
        formatters: Mapping[str, Formatter] | None = None,
    ) -> None:
        self._columns: dict[str, Column] = {c.name: c for c in columns}
        self._strict = bool(cfg_get("STRICT_FORMATTERS", False) if strict is None else strict)
        policy = cfg_get("MERGE_POLICY", "deep") if merge_policy is None else merge_policy
        try:
            self._policy = MergePolicy(policy)
        except ValueError as exc:
            raise InvalidConfiguration(f"Unknown merge policy '{policy}'") from exc
        self._formatters: dict[str, Formatter] = dict(FORMATTERS if formatters is None else formatters)
        self._lock = threading.Lock()
        self._formats: Mapping[str, ColumnFormat] | None = None

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def merge_policy(self) -> MergePolicy:
        return self._policy

    def __contains__(self, name: object) -> bool:
        return name in self._snapshot()

    def column_names(self) -> list[str]:
        return list(self._snapshot())

    # Formatter name table ------------------------------------------------

    def register_formatter(self, name: str, formatter: Formatter) -> None:
        """Make ``formatter`` available to declarations under ``name``."""
        if not callable(formatter):
            raise InvalidConfiguration(f"Formatter '{name}' must be callable")
        with self._lock:
            self._formatters[str(name)] = formatter

    def resolve_formatter(self, reference: Formatter | str | None) -> Formatter | None:
        """Return the callable for a formatter reference.

        Callables are returned unchanged; strings are looked up in the
        registry's formatter table.
        """
        if reference is None or callable(reference):
            return reference
        if isinstance(reference, str):
            formatter = self._formatters.get(reference)
            if formatter is None:
                raise InvalidConfiguration(f"Unknown formatter '{reference}'")
            return formatter
        raise InvalidConfiguration(
            f"Formatter must be a callable or a name, got {type(reference).__name__}"
        )

    # Formats ---------------------------------------------------------------

    def default_formats(self) -> dict[str, ColumnFormat]:
        """Default column formats for every column of the schema."""
        return {name: default_format(column) for name, column in self._columns.items()}

    def _snapshot(self) -> Mapping[str, ColumnFormat]:
        formats = self._formats
        if formats is None:
            with self._lock:
                if self._formats is None:
                    self._formats = MappingProxyType(self.default_formats())
                formats = self._formats
        return formats

    def _normalize(self, name: str, options: Mapping[str, Any]) -> dict[str, Any]:
        updates: dict[str, Any] = {}
        for key, value in options.items():
            key = _OPTION_ALIASES.get(key, key)
            if key not in _OPTION_KEYS:
                raise InvalidConfiguration(f"Unknown column format option '{key}' for '{name}'")
            updates[key] = value

        if "order" in updates:
            order = updates["order"]
            if order is not None and (isinstance(order, bool) or not isinstance(order, int)):
                raise InvalidConfiguration(f"Order of '{name}' must be an integer")
        if "total" in updates:
            try:
                updates["total"] = TotalMethod.coerce(updates["total"])
            except ValueError as exc:
                raise InvalidConfiguration(
                    f"Unknown total method '{updates['total']}' for '{name}'"
                ) from exc
        if "css_class" in updates and updates["css_class"] is not None:
            updates["css_class"] = str(updates["css_class"])
        if "formatter" in updates:
            updates["formatter"] = self.resolve_formatter(updates["formatter"])
        if "options" in updates:
            extra = updates["options"]
            if extra is None:
                extra = {}
            if not isinstance(extra, Mapping):
                raise InvalidConfiguration(f"Formatter options of '{name}' must be a mapping")
            updates["options"] = dict(extra)
        return updates

    def declare(self, name: str, **options: Any) -> ColumnFormat:
        """Merge ``options`` into the format of column ``name``.

        Recognized options are ``order``, ``total``, ``css_class`` (alias
        ``class``), ``formatter`` (callable or registered name) and
        ``options`` (passed to the formatter).  Returns the merged format.
        """
        name = str(name)
        updates = self._normalize(name, options)
        self._snapshot()
        with self._lock:
            current = dict(self._formats or {})
            if self._policy is MergePolicy.SHALLOW:
                column = self._columns.get(name)
                base = default_format(column) if column is not None else EMPTY_FORMAT
            else:
                base = current.get(name, EMPTY_FORMAT)
            if "options" in updates and self._policy is MergePolicy.DEEP:
                updates["options"] = _deep_merge(base.options, updates["options"])
            merged = replace(base, **updates)
            current[name] = merged
            self._formats = MappingProxyType(current)
        return merged

    def format_of(self, name: str) -> ColumnFormat:
        """Return the merged format for ``name``; unknown columns get an empty one."""
        return self._snapshot().get(str(name), EMPTY_FORMAT)

    def format_value(
        self,
        name: str,
        value: Any,
        context: FormatContext | None = None,
    ) -> str:
        """Format ``value`` with the formatter configured for ``name``.

        Without a formatter the value's ``str()`` is returned and the gap is
        logged at debug level, unless the registry is strict.
        """
        fmt = self.format_of(name)
        if fmt.formatter is None:
            if self._strict:
                raise NoFormatterConfigured(str(name))
            logger.debug(f"[table_formatter] Column {name} has no configured formatter")
            return "" if value is None else str(value)
        ctx = (context or FormatContext()).with_options(fmt.options)
        result = fmt.formatter(value, ctx)
        return "" if result is None else str(result)


__all__ = [
    "ColumnFormat",
    "ColumnFormatRegistry",
    "EMPTY_FORMAT",
    "MergePolicy",
    "default_format",
]
