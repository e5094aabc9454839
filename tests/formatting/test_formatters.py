from __future__ import annotations

from datetime import date, datetime

import pytest

from rowtable.formatting import FORMATTERS
from rowtable.formatting.formatters import (
    bar_and_percentage,
    bar_reduction_factor,
    currency_without_sign,
    db_datetime,
    float_with_precision,
    fmt_num,
    hours_to_time,
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
    unknown_on_blank,
)
from rowtable.messages import Messages
from rowtable.model import CellKind, FormatContext


@pytest.mark.parametrize(
    "seconds, expected",
    [(3661, "01:01:01"), (59, "00:00:59"), (3600, "01:00:00"), (0, "00:00:00"), (86399, "23:59:59")],
)
def test_seconds_to_time(seconds, expected):
    assert seconds_to_time(seconds) == expected


def test_seconds_to_time_treats_garbage_as_zero():
    assert seconds_to_time(None) == "00:00:00"
    assert seconds_to_time("abc") == "00:00:00"


def test_hours_to_time():
    assert hours_to_time(11) == "11:00"
    assert hours_to_time(7) == "07:00"
    assert hours_to_time(None) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        (1, "1st"),
        (2, "2nd"),
        (3, "3rd"),
        (4, "4th"),
        (11, "11th"),
        (12, "12th"),
        (13, "13th"),
        (21, "21st"),
        (102, "102nd"),
        (111, "111th"),
    ],
)
def test_ordinalize(value, expected):
    assert ordinalize(value) == expected


def test_ordinalize_passes_non_numbers_through():
    assert ordinalize(None) is None


def test_percentage_defaults_to_one_decimal():
    assert percentage(48) == "48.0%"
    assert percentage(None) == "0.0%"


def test_percentage_precision_option():
    ctx = FormatContext(options={"precision": 2})
    assert percentage(12.345, ctx) == "12.35%"


def test_numeric_delimiting():
    assert integer_with_delimiter(1245) == "1,245"
    assert integer_with_delimiter(1245.7) == "1,245"
    assert float_with_precision(1245) == "1,245.0"
    assert currency_without_sign(1245) == "1,245.00"
    assert currency_without_sign(1234567.891) == "1,234,567.89"


def test_number_with_delimiter_keeps_precision():
    assert number_with_delimiter(1234567) == "1,234,567"
    assert number_with_delimiter(1234.5) == "1,234.5"
    assert number_with_delimiter("abc") == "abc"


def test_custom_delimiter_option():
    ctx = FormatContext(options={"delimiter": " "})
    assert integer_with_delimiter(1234567, ctx) == "1 234 567"


def test_fmt_num_rounds_half_up():
    assert fmt_num(1234.5, 0) == "1,235"
    assert fmt_num(2.675, 2) == "2.68"
    assert fmt_num("x") is None


def test_signed_number():
    assert signed_number(1.5) == "+1.50"
    assert signed_number(-2) == "-2.00"
    assert signed_number(0) == "0.00"
    assert signed_number(None) is None


def test_bar_reduction_factor():
    assert bar_reduction_factor(10) == 0.8
    assert bar_reduction_factor(79.9) == 0.8
    assert bar_reduction_factor(80) == 0.6
    assert bar_reduction_factor(100) == 0.3


def test_bar_and_percentage_body_cell():
    html = bar_and_percentage(50)
    assert html == '<div class="hbar" style="width:40.00%">&nbsp;</div><div>50.0%</div>'


def test_bar_and_percentage_scales_large_values():
    assert 'style="width:54.00%"' in bar_and_percentage(90)
    assert 'style="width:36.00%"' in bar_and_percentage(120)


def test_bar_and_percentage_skips_small_bars():
    assert bar_and_percentage(1.5) == "<div>1.5%</div>"


def test_bar_and_percentage_header_and_footer_show_percentage():
    assert bar_and_percentage(50, FormatContext(cell_kind=CellKind.HEADER)) == "50.0%"
    assert bar_and_percentage(50, FormatContext(cell_kind=CellKind.FOOTER)) == "50.0%"


def test_bar_and_percentage_without_markup():
    assert bar_and_percentage(50, FormatContext(options={"markup": False})) == "50.0%"


def test_bar_class_option():
    html = bar_and_percentage(50, FormatContext(options={"bar_class": "meter"}))
    assert html.startswith('<div class="meter"')


def test_blank_substitution():
    assert not_set_on_blank(None) == "(Not Set)"
    assert not_set_on_blank("  ") == "(Not Set)"
    assert not_set_on_blank("x") == "x"
    assert unknown_on_blank(None) == "(Unknown)"
    assert unknown_on_blank(0) == 0


def test_blank_substitution_leaves_headers_alone():
    ctx = FormatContext(cell_kind=CellKind.HEADER)
    assert not_set_on_blank(None, ctx) is None
    assert unknown_on_blank(None, ctx) is None


def test_blank_substitution_uses_catalog_and_key():
    ctx = FormatContext(messages=Messages({"tables.not_set": "n/a", "custom.unknown": "?"}))
    assert not_set_on_blank(None, ctx) == "n/a"
    keyed = FormatContext(options={"unknown_key": "custom.unknown"}, messages=ctx.messages)
    assert unknown_on_blank(None, keyed) == "?"


def test_dates():
    assert short_date(date(2010, 10, 1)) == "1 Oct"
    assert long_date(date(2010, 10, 1)) == "October 1, 2010"
    assert short_date(datetime(2010, 10, 1, 15, 30)) == "1 Oct"
    assert long_date("2010-10-01") == "October 1, 2010"
    assert short_date("garbage") == "garbage"


def test_dates_follow_catalog():
    messages = Messages({"date.formats.long": "{day}. {month} {year}"})
    assert long_date(date(2010, 10, 1), FormatContext(messages=messages)) == "1. October 2010"


def test_name_lookups():
    assert long_month_name(9) == "September"
    assert short_month_name(9) == "Sep"
    assert long_day_name(1) == "Monday"
    assert short_day_name(0) == "Sun"


def test_name_lookups_out_of_range():
    assert long_month_name(0) == 0
    assert long_month_name(13) == 13
    assert short_day_name("x") == "x"


def test_db_datetime():
    assert db_datetime(datetime(2010, 10, 1, 12, 30)) == "2010-10-01 12:30:00"
    assert db_datetime(date(2010, 10, 1)) == "2010-10-01"
    assert db_datetime(None) == ""


def test_formatter_table_is_complete():
    expected = {
        "bar_and_percentage",
        "currency_without_sign",
        "float_with_precision",
        "hours_to_time",
        "integer_with_delimiter",
        "long_date",
        "long_day_name",
        "long_month_name",
        "not_set_on_blank",
        "ordinalize",
        "percentage",
        "seconds_to_time",
        "short_date",
        "short_day_name",
        "short_month_name",
        "unknown_on_blank",
    }
    assert expected <= set(FORMATTERS)
    assert all(callable(f) for f in FORMATTERS.values())


@pytest.mark.parametrize(
    "formatter, value, expected",
    [
        (percentage, 1e30, "1,000,000,000,000,000,000,000,000,000,000.0%"),
        (currency_without_sign, 1e27, "1,000,000,000,000,000,000,000,000,000.00"),
        (float_with_precision, -2e29, "-200,000,000,000,000,000,000,000,000,000.0"),
    ],
)
def test_huge_numbers_keep_their_digits(formatter, value, expected):
    assert formatter(value) == expected


def test_huge_integers_are_delimited():
    assert integer_with_delimiter(10**30).startswith("1,000,000,000,000,000,0")
    assert fmt_num(10**30, 0) == "1,000,000,000,000,000,000,000,000,000,000"
