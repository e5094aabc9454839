"""Formatting helpers that turn cell values into display strings."""

from .formatters import (
    FORMATTERS,
    Formatter,
    bar_and_percentage,
    currency_without_sign,
    db_datetime,
    float_with_precision,
    fmt_num,
    hours_to_time,
    identity,
    integer_with_delimiter,
    long_date,
    long_day_name,
    long_month_name,
    not_set_on_blank,
    number_with_delimiter,
    ordinalize,
    percentage,
    seconds_to_time,
    short_date,
    short_day_name,
    short_month_name,
    signed_number,
    to_string,
    unknown_on_blank,
)

__all__ = [
    "FORMATTERS",
    "Formatter",
    "bar_and_percentage",
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
