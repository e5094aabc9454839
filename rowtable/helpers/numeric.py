"""Numeric parsing and blank detection helpers."""

from __future__ import annotations

import math
import re
from collections.abc import Sized
from decimal import Decimal, InvalidOperation
from typing import Any

import pandas as pd

_CLEAN_RE = re.compile(r"[^0-9\.\-+eE]")


def is_blank(value: Any) -> bool:
    """Return ``True`` for ``None``, NaN, whitespace strings and empty collections."""

    if value is None:
        return True
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    if isinstance(value, (str, bytes)):
        return not value.strip()
    if isinstance(value, Sized) and not hasattr(value, "__float__"):
        return len(value) == 0
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def safe_float(
    value: Any,
    *,
    allow_strings: bool = True,
    allow_bool: bool = True,
    fallback: float | None = None,
) -> float | None:
    """Return ``value`` coerced to ``float`` or ``fallback``.

    Parameters
    ----------
    value:
        Incoming object. ``None``, NaN and empty strings yield ``fallback``.
    allow_strings:
        When ``True`` (default) strings are parsed after stripping thousands
        separators, currency signs and percentage symbols.
    allow_bool:
        When ``False`` booleans are considered invalid.
    fallback:
        Value returned when the input cannot be coerced.
    """

    if value is None:
        return fallback

    if isinstance(value, bool):
        return float(value) if allow_bool else fallback

    if isinstance(value, (int, float)):
        number = float(value)
        if math.isnan(number) or math.isinf(number):
            return fallback
        return number

    if isinstance(value, Decimal):
        if not value.is_finite():
            return fallback
        return float(value)

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="ignore")

    if isinstance(value, str):
        if not allow_strings:
            return fallback
        cleaned = _CLEAN_RE.sub("", value.strip())
        if not cleaned:
            return fallback
        try:
            number = float(cleaned)
        except ValueError:
            return fallback
        if math.isnan(number) or math.isinf(number):
            return fallback
        return number

    if hasattr(value, "__float__"):
        try:
            number = float(value)
        except (TypeError, ValueError):
            return fallback
        if math.isnan(number) or math.isinf(number):
            return fallback
        return number

    return fallback


def safe_int(value: Any, fallback: int = 0) -> int:
    """Return ``value`` truncated to ``int`` or ``fallback``."""

    number = safe_float(value)
    if number is None:
        return fallback
    return int(number)


def to_decimal(value: Any) -> Decimal | None:
    """Return ``value`` as :class:`Decimal` or ``None`` when not numeric."""

    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    number = safe_float(value)
    if number is None:
        return None
    try:
        return Decimal(str(number))
    except InvalidOperation:  # pragma: no cover - str(float) is always valid
        return None


__all__ = ["is_blank", "safe_float", "safe_int", "to_decimal"]
