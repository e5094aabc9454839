"""Message catalog used for table captions, footers and blank markers.

Translations are supplied by the caller as a plain mapping; the catalog
only performs the key lookup and ``str.format`` interpolation.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from rowtable.logutils import logger

DEFAULT_MESSAGES: dict[str, Any] = {
    "tables.not_set": "(Not Set)",
    "tables.unknown": "(Unknown)",
    "tables.total_one": "{count} row",
    "tables.total_many": "{count} rows",
    "date.month_names": [
        None,
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ],
    "date.abbr_month_names": [
        None,
        "Jan",
        "Feb",
        "Mar",
        "Apr",
        "May",
        "Jun",
        "Jul",
        "Aug",
        "Sep",
        "Oct",
        "Nov",
        "Dec",
    ],
    "date.day_names": [
        "Sunday",
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
    ],
    "date.abbr_day_names": ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"],
    "date.formats.short": "{day} {abbr_month}",
    "date.formats.long": "{month} {day}, {year}",
}


class Messages:
    """Key based lookup with defaults and per-instance overrides."""

    def __init__(self, overrides: Mapping[str, Any] | None = None) -> None:
        self._catalog: dict[str, Any] = {**DEFAULT_MESSAGES, **dict(overrides or {})}

    def __contains__(self, key: object) -> bool:
        return key in self._catalog

    def lookup(self, key: str) -> Any:
        """Return the raw catalog entry for ``key`` or ``None``."""
        return self._catalog.get(key)

    def translate(self, key: str, **kwargs: Any) -> str:
        """Return the message for ``key`` interpolated with ``kwargs``.

        Missing keys render as the key itself so gaps stay visible.
        """
        template = self._catalog.get(key)
        if template is None:
            logger.debug(f"[messages] missing translation for {key}")
            return key
        if not kwargs:
            return str(template)
        try:
            return str(template).format(**kwargs)
        except (KeyError, IndexError, ValueError):
            logger.debug(f"[messages] could not interpolate {key} with {sorted(kwargs)}")
            return str(template)

    def names(self, key: str) -> Sequence[Any]:
        """Return a name table such as ``date.month_names``."""
        table = self._catalog.get(key)
        if isinstance(table, (list, tuple)):
            return table
        return ()

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> "Messages":
        if not overrides:
            return self
        return Messages({**self._catalog, **dict(overrides)})


DEFAULT = Messages()


def translate(key: str, **kwargs: Any) -> str:
    """Translate ``key`` with the default catalog."""
    return DEFAULT.translate(key, **kwargs)


__all__ = ["DEFAULT", "DEFAULT_MESSAGES", "Messages", "translate"]
