"""Error types raised while resolving and rendering tables."""

from __future__ import annotations


class TableError(Exception):
    """Base error for table resolution issues."""


class InvalidInput(TableError, ValueError):
    """Raised when the row set or a row-level option is unusable."""


class InvalidConfiguration(TableError, ValueError):
    """Raised for malformed render options or column format declarations."""


class MissingBaseColumn(InvalidConfiguration):
    """Raised when a calculated column refers to a column the rows lack."""

    def __init__(self, column: str, base: str) -> None:
        super().__init__(
            f"Calculated column '{column}' refers to unknown column '{base}'"
        )
        self.column = column
        self.base = base


class NoFormatterConfigured(TableError, LookupError):
    """Raised in strict mode when a column has no formatter."""

    def __init__(self, column: str) -> None:
        super().__init__(f"Column '{column}' has no configured formatter")
        self.column = column


__all__ = [
    "InvalidConfiguration",
    "InvalidInput",
    "MissingBaseColumn",
    "NoFormatterConfigured",
    "TableError",
]
