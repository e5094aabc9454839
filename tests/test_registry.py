from __future__ import annotations

import threading

import pytest
from loguru import logger

from rowtable import config
from rowtable.columns import Column, ColumnType
from rowtable.errors import InvalidConfiguration, NoFormatterConfigured
from rowtable.formatting.formatters import (
    db_datetime,
    identity,
    number_with_delimiter,
    percentage,
    to_string,
)
from rowtable.model import TotalMethod
from rowtable.registry import ColumnFormatRegistry, MergePolicy, default_format


def _registry(**kwargs):
    return ColumnFormatRegistry(
        [
            Column("name", ColumnType.STRING),
            Column("price", ColumnType.FLOAT),
            Column("launch_date", ColumnType.DATE),
            Column("flag", ColumnType.BOOLEAN),
        ],
        **kwargs,
    )


def test_default_formats_follow_column_type():
    assert default_format(Column("n", ColumnType.INTEGER)).css_class == "right"
    assert default_format(Column("n", ColumnType.DECIMAL)).formatter is number_with_delimiter
    assert default_format(Column("s", ColumnType.TEXT)).formatter is identity
    assert default_format(Column("d", ColumnType.DATETIME)).formatter is db_datetime
    assert default_format(Column("b", ColumnType.BOOLEAN)).formatter is to_string


def test_formats_are_seeded_lazily():
    registry = _registry()
    assert "price" in registry
    assert registry.format_of("price").formatter is number_with_delimiter
    assert registry.format_of("unknown").formatter is None


def test_deep_merge_keeps_earlier_declarations():
    registry = _registry()
    registry.declare("price", order=2)
    merged = registry.declare("price", total="sum")

    assert merged.order == 2
    assert merged.total is TotalMethod.SUM
    assert merged.css_class == "right"
    assert merged.formatter is number_with_delimiter
    assert registry.format_of("price") == merged


def test_deep_merge_of_formatter_options():
    registry = _registry()
    registry.declare("price", options={"a": {"x": 1}, "b": 1})
    merged = registry.declare("price", options={"a": {"y": 2}})
    assert merged.options == {"a": {"x": 1, "y": 2}, "b": 1}


def test_shallow_merge_replaces_entry():
    registry = _registry(merge_policy="shallow")
    registry.declare("price", order=2, css_class="money")
    merged = registry.declare("price", total="sum")

    assert registry.merge_policy is MergePolicy.SHALLOW
    assert merged.order is None
    assert merged.total is TotalMethod.SUM
    assert merged.css_class == "right"


def test_merge_policy_from_config(monkeypatch):
    monkeypatch.setattr(config, "CONFIG", config.AppConfig(MERGE_POLICY="shallow"))
    assert _registry().merge_policy is MergePolicy.SHALLOW


def test_unknown_merge_policy():
    with pytest.raises(InvalidConfiguration):
        _registry(merge_policy="sideways")


def test_declare_aliases():
    registry = _registry()
    fmt = registry.declare("price", **{"class": "money", "totalMethod": "avg"})
    assert fmt.css_class == "money"
    assert fmt.total is TotalMethod.MEAN


def test_declare_unknown_column_starts_empty():
    registry = _registry()
    fmt = registry.declare("percent_of_price", total="sum")
    assert fmt.formatter is None
    assert fmt.total is TotalMethod.SUM


@pytest.mark.parametrize(
    "options",
    [
        {"colour": "red"},
        {"order": "first"},
        {"order": True},
        {"total": "median"},
        {"formatter": "no_such_formatter"},
        {"formatter": 42},
        {"options": ["not", "a", "mapping"]},
    ],
)
def test_declare_rejects_invalid_options(options):
    registry = _registry()
    with pytest.raises(InvalidConfiguration):
        registry.declare("price", **options)
    assert registry.format_of("price").order is None


def test_named_formatter_and_options():
    registry = _registry()
    fmt = registry.declare("price", formatter="percentage", options={"precision": 2})
    assert fmt.formatter is percentage
    assert registry.format_value("price", 12.345) == "12.35%"


def test_register_formatter():
    registry = _registry()
    registry.register_formatter("shout", lambda value, context=None: str(value).upper())
    registry.declare("name", formatter="shout")
    assert registry.format_value("name", "widget") == "WIDGET"

    with pytest.raises(InvalidConfiguration):
        registry.register_formatter("broken", "not callable")


def test_unconfigured_formatter_falls_back_to_string():
    registry = _registry()
    messages = []
    sink = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        assert registry.format_value("mystery", 12.5) == "12.5"
        assert registry.format_value("mystery", None) == ""
    finally:
        logger.remove(sink)
    assert any("Column mystery has no configured formatter" in m for m in messages)


def test_strict_registry_raises():
    registry = _registry(strict=True)
    with pytest.raises(NoFormatterConfigured) as excinfo:
        registry.format_value("mystery", 1)
    assert excinfo.value.column == "mystery"
    assert registry.format_value("price", 1000) == "1,000"


def test_strict_from_config(monkeypatch):
    monkeypatch.setattr(config, "CONFIG", config.AppConfig(STRICT_FORMATTERS=True))
    with pytest.raises(NoFormatterConfigured):
        _registry().format_value("mystery", 1)


def test_formatter_returning_none_renders_empty():
    registry = _registry()
    registry.declare("name", formatter=lambda value, context=None: None)
    assert registry.format_value("name", "x") == ""


def test_snapshots_are_not_changed_by_later_declarations():
    registry = _registry()
    before = registry.format_of("price")
    registry.declare("price", order=7)
    assert before.order is None
    assert registry.format_of("price").order == 7


def test_concurrent_declarations_are_all_kept():
    registry = _registry()
    names = [f"col_{i}" for i in range(16)]

    def declare(position, name):
        registry.declare(name, order=position)

    threads = [threading.Thread(target=declare, args=(i, n)) for i, n in enumerate(names)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert {name: registry.format_of(name).order for name in names} == {
        name: i for i, name in enumerate(names)
    }
