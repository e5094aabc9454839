"""Column metadata shared by schemas and format registries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ColumnType(str, Enum):
    """Primitive column types used to seed default formats."""

    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    TEXT = "text"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    BOOLEAN = "boolean"
    OTHER = "other"

    @property
    def is_numeric(self) -> bool:
        return self in (ColumnType.INTEGER, ColumnType.FLOAT, ColumnType.DECIMAL)

    @property
    def is_textual(self) -> bool:
        return self in (ColumnType.STRING, ColumnType.TEXT)

    @property
    def is_temporal(self) -> bool:
        return self in (ColumnType.DATE, ColumnType.DATETIME)

    @classmethod
    def coerce(cls, value: "ColumnType | str | None") -> "ColumnType":
        if isinstance(value, ColumnType):
            return value
        if value is None:
            return cls.OTHER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Column:
    """A named, typed slot of a schema."""

    name: str
    type: ColumnType = ColumnType.OTHER
    label: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ColumnType.coerce(self.type))


def humanize(name: str) -> str:
    """Return ``sales_volume`` as ``Sales volume`` and ``owner_id`` as ``Owner``."""

    text = str(name)
    if text.endswith("_id") and len(text) > 3:
        text = text[:-3]
    text = text.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


__all__ = ["Column", "ColumnType", "humanize"]
