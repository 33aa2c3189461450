"""Coercion helpers used as sanitizer callbacks"""

import math
import re
from datetime import date, time
from decimal import Decimal
from typing import Any

# Leading numeric prefix of a string, e.g. "12abc" -> "12", " -3.5e2x" -> "-3.5e2"
_NUMERIC_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

SCALAR_TYPES = (str, bytes, bytearray, bool, int, float, Decimal, date, time)


def is_scalar(value: Any) -> bool:
    """Whether prepare() embeds the value as-is rather than collapsing it"""
    return isinstance(value, SCALAR_TYPES)


def to_float(value: Any) -> float:
    """Coerce to float; unparseable input becomes 0.0"""
    if value is None:
        return 0.0
    if isinstance(value, (bool, int, float, Decimal)):
        return float(value)
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        return float(match.group(0)) if match else 0.0
    if isinstance(value, (list, tuple, dict, set)):
        return 1.0 if value else 0.0
    return 0.0


def to_int(value: Any) -> int:
    """Coerce to int, truncating toward zero; unparseable input becomes 0

    Example:
        >>> to_int("12abc")
        12
        >>> to_int(-3.9)
        -3
        >>> to_int("nope")
        0
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    number = to_float(value)
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number)


def to_string(value: Any) -> str:
    """Coerce to str; None and False become ''"""
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def to_scalar(value: Any) -> Any:
    """Default 'esc_sql' callback: keep scalars, collapse everything else to ''

    Literal escaping happens in prepare(); escaping here as well would
    double-escape.
    """
    if value is None or is_scalar(value):
        return value
    return ""
