"""Cell formatters.

Every formatter has the signature ``formatter(value, context=None)`` where
``context`` is a :class:`~rowtable.model.FormatContext`.  Formatters are
pure; anything they cannot interpret falls back to a documented value
instead of raising.  :data:`FORMATTERS` is the name table used when a
column format refers to a formatter by name.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Callable, Mapping

from rowtable.helpers.numeric import is_blank, safe_float, safe_int, to_decimal
from rowtable.messages import DEFAULT, Messages
from rowtable.model import CellKind, FormatContext

Formatter = Callable[..., Any]

MIN_PERCENT_BAR_VALUE = 2.0  # Below which no bar is drawn
REDUCTION_FACTOR = 0.80  # Leaves room for the percentage next to the bar


def _kind(context: FormatContext | None) -> CellKind:
    return context.cell_kind if context is not None else CellKind.BODY


def _messages(context: FormatContext | None) -> Messages:
    return context.messages if context is not None else DEFAULT


def _option(context: FormatContext | None, key: str, default: Any = None) -> Any:
    if context is None:
        return default
    return context.option(key, default)


def fmt_num(value: Any, decimals: int | None = 2, *, delimiter: str = ",") -> str | None:
    """Return ``value`` rounded half-up to ``decimals`` with a thousands delimiter.

    ``decimals=None`` keeps the precision of the value itself.  Returns
    ``None`` when ``value`` is not numeric.
    """

    decimal_value = to_decimal(value)
    if decimal_value is None:
        return None
    if decimals is None:
        text = format(decimal_value, ",f")
    else:
        quantize_expr = Decimal(1) if decimals == 0 else Decimal(f"1e-{decimals}")
        with localcontext() as ctx:
            # quantize needs room for every integer digit plus the decimals
            ctx.prec = max(28, decimal_value.adjusted() + decimals + 2)
            rounded = decimal_value.quantize(quantize_expr, rounding=ROUND_HALF_UP)
        text = format(rounded, f",.{decimals}f")
    if delimiter != ",":
        text = text.replace(",", delimiter)
    return text


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        for parser in (date.fromisoformat, datetime.fromisoformat):
            try:
                parsed = parser(text)
            except ValueError:
                continue
            return parsed.date() if isinstance(parsed, datetime) else parsed
    return None


# Blank substitution -------------------------------------------------------


def not_set_on_blank(value: Any, context: FormatContext | None = None) -> Any:
    """Display a localized "(Not Set)" for blank values.

    Header cells are returned unchanged.
    """
    if _kind(context) is CellKind.HEADER:
        return value
    if is_blank(value):
        key = _option(context, "not_set_key", "tables.not_set")
        return _messages(context).translate(key)
    return value


def unknown_on_blank(value: Any, context: FormatContext | None = None) -> Any:
    """Display a localized "(Unknown)" for blank values.

    Header cells are returned unchanged.
    """
    if _kind(context) is CellKind.HEADER:
        return value
    if is_blank(value):
        key = _option(context, "unknown_key", "tables.unknown")
        return _messages(context).translate(key)
    return value


# Time ---------------------------------------------------------------------


def seconds_to_time(value: Any, context: FormatContext | None = None) -> str:
    """Interpret an integer as a duration and output ``hh:mm:ss``.

    ``3661`` renders as ``01:01:01``.  Non-numeric input counts as zero.
    """
    total = safe_int(value)
    hours = total // 3600
    minutes = (total // 60) - (hours * 60)
    seconds = total % 60
    if seconds == 60:
        minutes += 1
        seconds = 0
    if minutes == 60:
        hours += 1
        minutes = 0
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def hours_to_time(value: Any, context: FormatContext | None = None) -> Any:
    """Interpret an integer as an hour of the day, ``11`` renders ``11:00``."""
    number = safe_float(value)
    if number is None:
        return value
    return f"{int(number):02d}:00"


# Numbers ------------------------------------------------------------------


def ordinalize(value: Any, context: FormatContext | None = None) -> Any:
    """Ordinalize a number (1st, 2nd, 3rd, ...).  ``None`` passes through."""
    number = safe_float(value)
    if number is None:
        return value
    n = int(number)
    if abs(n) % 100 in (11, 12, 13):
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(abs(n) % 10, "th")
    return f"{n}{suffix}"


def percentage(value: Any, context: FormatContext | None = None) -> str:
    """Format as a percentage with one decimal; ``48`` renders ``48.0%``.

    ``None`` counts as zero.
    """
    precision = int(_option(context, "precision", 1))
    return f"{fmt_num(safe_float(value, fallback=0.0), precision)}%"


def integer_with_delimiter(value: Any, context: FormatContext | None = None) -> str:
    """Format as a delimited integer, ``1245`` renders ``1,245``."""
    return fmt_num(safe_int(value), 0, delimiter=_option(context, "delimiter", ","))


def float_with_precision(value: Any, context: FormatContext | None = None) -> str:
    """Format as a delimited float with one decimal, ``1245`` renders ``1,245.0``."""
    return fmt_num(
        safe_float(value, fallback=0.0), 1, delimiter=_option(context, "delimiter", ",")
    )


def currency_without_sign(value: Any, context: FormatContext | None = None) -> str:
    """Format as a delimited float with two decimals, ``1245`` renders ``1,245.00``."""
    return fmt_num(
        safe_float(value, fallback=0.0), 2, delimiter=_option(context, "delimiter", ",")
    )


def number_with_delimiter(value: Any, context: FormatContext | None = None) -> Any:
    """Delimit thousands and keep the value's own decimals.

    Non-numeric values pass through unchanged.
    """
    formatted = fmt_num(value, None, delimiter=_option(context, "delimiter", ","))
    return value if formatted is None else formatted


def signed_number(value: Any, context: FormatContext | None = None) -> Any:
    """Format with an explicit sign, ``1.5`` renders ``+1.50``."""
    number = safe_float(value)
    if number is None:
        return value
    decimals = int(_option(context, "precision", 2))
    magnitude = fmt_num(abs(number), decimals)
    if number > 0:
        return f"+{magnitude}"
    if number < 0:
        return f"-{magnitude}"
    return fmt_num(0.0, decimals)


def bar_reduction_factor(value: float) -> float:
    if 0 <= value < 80:
        return REDUCTION_FACTOR
    if 80 <= value < 100:
        return 0.6
    return 0.3


def bar_and_percentage(value: Any, context: FormatContext | None = None) -> str:
    """Render a horizontal CSS bar followed by the value as a percentage.

    Only body cells get the bar; header and footer cells, and contexts
    with the ``markup`` option switched off, show the percentage alone.
    The HTML renderer emits its output unescaped.
    """
    number = safe_float(value, fallback=0.0)
    text = percentage(number, context)
    if _kind(context) is not CellKind.BODY or not _option(context, "markup", True):
        return text
    bar = ""
    if number > MIN_PERCENT_BAR_VALUE:
        width = fmt_num(number * bar_reduction_factor(number), 2, delimiter="")
        css = _option(context, "bar_class", "hbar")
        bar = f'<div class="{css}" style="width:{width}%">&nbsp;</div>'
    return f"{bar}<div>{text}</div>"


bar_and_percentage.markup = True  # type: ignore[attr-defined]


# Dates --------------------------------------------------------------------


def _date_parts(value: date, messages: Messages) -> dict[str, Any]:
    months = messages.names("date.month_names")
    abbr = messages.names("date.abbr_month_names")
    return {
        "day": value.day,
        "year": value.year,
        "month": months[value.month] if len(months) > value.month else value.month,
        "abbr_month": abbr[value.month] if len(abbr) > value.month else value.month,
    }


def short_date(value: Any, context: FormatContext | None = None) -> Any:
    """Display as a short date; 2010-10-01 renders ``1 Oct``."""
    parsed = _as_date(value)
    if parsed is None:
        return value
    messages = _messages(context)
    return messages.translate("date.formats.short", **_date_parts(parsed, messages))


def long_date(value: Any, context: FormatContext | None = None) -> Any:
    """Display as a long date; 2010-10-01 renders ``October 1, 2010``."""
    parsed = _as_date(value)
    if parsed is None:
        return value
    messages = _messages(context)
    return messages.translate("date.formats.long", **_date_parts(parsed, messages))


def _name_lookup(value: Any, context: FormatContext | None, key: str) -> Any:
    number = safe_float(value)
    if number is None:
        return value
    names = _messages(context).names(key)
    index = int(number)
    if 0 <= index < len(names) and names[index] is not None:
        return names[index]
    return value


def long_month_name(value: Any, context: FormatContext | None = None) -> Any:
    """``9`` renders ``September``."""
    return _name_lookup(value, context, "date.month_names")


def short_month_name(value: Any, context: FormatContext | None = None) -> Any:
    """``9`` renders ``Sep``."""
    return _name_lookup(value, context, "date.abbr_month_names")


def long_day_name(value: Any, context: FormatContext | None = None) -> Any:
    """``1`` renders ``Monday``."""
    return _name_lookup(value, context, "date.day_names")


def short_day_name(value: Any, context: FormatContext | None = None) -> Any:
    """``1`` renders ``Mon``."""
    return _name_lookup(value, context, "date.abbr_day_names")


def db_datetime(value: Any, context: FormatContext | None = None) -> str:
    """Canonical ``YYYY-MM-DD`` / ``YYYY-MM-DD HH:MM:SS`` rendering."""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    return "" if value is None else str(value)


# Type defaults ------------------------------------------------------------


def identity(value: Any, context: FormatContext | None = None) -> Any:
    return value


def to_string(value: Any, context: FormatContext | None = None) -> str:
    return "" if value is None else str(value)


FORMATTERS: Mapping[str, Formatter] = {
    "bar_and_percentage": bar_and_percentage,
    "currency_without_sign": currency_without_sign,
    "db_datetime": db_datetime,
    "float_with_precision": float_with_precision,
    "hours_to_time": hours_to_time,
    "identity": identity,
    "integer_with_delimiter": integer_with_delimiter,
    "long_date": long_date,
    "long_day_name": long_day_name,
    "long_month_name": long_month_name,
    "not_set_on_blank": not_set_on_blank,
    "number_with_delimiter": number_with_delimiter,
    "ordinalize": ordinalize,
    "percentage": percentage,
    "seconds_to_time": seconds_to_time,
    "short_date": short_date,
    "short_day_name": short_day_name,
    "short_month_name": short_month_name,
    "signed_number": signed_number,
    "to_string": to_string,
    "unknown_on_blank": unknown_on_blank,
}


__all__ = [
    "FORMATTERS",
    "Formatter",
    "MIN_PERCENT_BAR_VALUE",
    "REDUCTION_FACTOR",
    "bar_and_percentage",
    "bar_reduction_factor",
    "currency_without_sign",
    "db_datetime",
    "float_with_precision",
    "fmt_num",
    "hours_to_time",
    "identity",
    "integer_with_delimiter",
    "long_date",
    "long_day_name",
    "long_month_name",
    "not_set_on_blank",
    "number_with_delimiter",
    "ordinalize",
    "percentage",
    "seconds_to_time",
    "short_date",
    "short_day_name",
    "short_month_name",
    "signed_number",
    "to_string",
    "unknown_on_blank",
]
