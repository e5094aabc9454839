import logging
import sys

from loguru import logger

import rowtable.logutils as logutils


def _restore_default_sink():
    logger.remove()
    logger.add(sys.stderr)


def test_format_result_truncates():
    text = logutils._format_result("x" * 300, max_length=10)
    assert text == "xxxxxxxxxx... [truncated 300 chars]"


def test_log_result_logs_call_and_value():
    messages = []
    sink = logger.add(messages.append, level="DEBUG", format="{message}")

    @logutils.log_result
    def double(value):
        return value * 2

    try:
        assert double(4) == 8
    finally:
        logger.remove(sink)
    assert any("calling double" in m for m in messages)
    assert any("double -> 8" in m for m in messages)


def test_setup_logging_respects_level(monkeypatch, capsys):
    monkeypatch.setenv("ROWTABLE_LOG_LEVEL", "WARNING")
    monkeypatch.delenv("ROWTABLE_DEBUG", raising=False)
    try:
        logutils.setup_logging(stdout=True)
        logger.info("hidden message")
        logger.warning("shown message")
    finally:
        _restore_default_sink()
    out = capsys.readouterr().out
    assert "shown message" in out
    assert "hidden message" not in out


def test_setup_logging_debug_flag(monkeypatch, capsys):
    monkeypatch.setenv("ROWTABLE_DEBUG", "1")
    try:
        logutils.setup_logging(stdout=True)
        logger.debug("debug message")
    finally:
        _restore_default_sink()
    assert "debug message" in capsys.readouterr().out


def test_standard_logging_is_intercepted(monkeypatch, capsys):
    monkeypatch.setenv("ROWTABLE_LOG_LEVEL", "INFO")
    monkeypatch.delenv("ROWTABLE_DEBUG", raising=False)
    try:
        logutils.setup_logging(stdout=True)
        logging.getLogger("third.party").warning("from stdlib")
    finally:
        _restore_default_sink()
    assert "from stdlib" in capsys.readouterr().out
