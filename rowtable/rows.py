"""Row adapters.

The engine only needs two capabilities from a row: the ordered list of its
attribute names and value lookup by name.  :func:`as_row` adapts mappings,
dataclasses and plain objects; anything else is rejected.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from rowtable.errors import InvalidInput


@runtime_checkable
class Row(Protocol):
    def attribute_names(self) -> Sequence[str]: ...

    def get(self, name: str, default: Any = None) -> Any: ...


class MappingRow:
    """Row backed by a mapping such as a ``dict`` record."""

    __slots__ = ("source",)

    def __init__(self, source: Mapping[str, Any]) -> None:
        self.source = source

    def attribute_names(self) -> tuple[str, ...]:
        return tuple(str(k) for k in self.source.keys())

    def get(self, name: str, default: Any = None) -> Any:
        return self.source.get(name, default)


class ObjectRow:
    """Row backed by attributes of a dataclass or plain object."""

    __slots__ = ("source", "_names")

    def __init__(self, source: Any) -> None:
        self.source = source
        if is_dataclass(source):
            self._names = tuple(f.name for f in fields(source))
        else:
            self._names = tuple(k for k in vars(source) if not k.startswith("_"))

    def attribute_names(self) -> tuple[str, ...]:
        return self._names

    def get(self, name: str, default: Any = None) -> Any:
        return getattr(self.source, name, default)


def as_row(obj: Any) -> Row:
    """Return ``obj`` adapted to the :class:`Row` protocol."""

    if isinstance(obj, Row) and not isinstance(obj, Mapping):
        return obj
    if isinstance(obj, Mapping):
        return MappingRow(obj)
    if (is_dataclass(obj) and not isinstance(obj, type)) or hasattr(obj, "__dict__"):
        return ObjectRow(obj)
    raise InvalidInput(f"Cannot use {type(obj).__name__} as a table row")


class RowView:
    """Per-render view of a row carrying calculated values.

    Calculated columns are stored on the view, never on the wrapped object.
    """

    __slots__ = ("raw", "_row", "_derived")

    def __init__(self, raw: Any) -> None:
        self.raw = raw.raw if isinstance(raw, RowView) else raw
        self._row = as_row(self.raw)
        self._derived: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"RowView({self.raw!r}, derived={self._derived!r})"

    def attribute_names(self) -> tuple[str, ...]:
        names = tuple(self._row.attribute_names())
        extra = tuple(k for k in self._derived if k not in names)
        return names + extra

    def get(self, name: str, default: Any = None) -> Any:
        if name in self._derived:
            return self._derived[name]
        return self._row.get(name, default)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def set(self, name: str, value: Any) -> None:
        self._derived[name] = value

    @property
    def derived(self) -> Mapping[str, Any]:
        return dict(self._derived)


__all__ = ["MappingRow", "ObjectRow", "Row", "RowView", "as_row"]
