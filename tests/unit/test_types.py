"""Test value coercion helpers"""

from datetime import date
from decimal import Decimal

import pytest

from sqlclaws.utils import types


@pytest.mark.parametrize("value,expected", [
    (None, 0.0),
    (True, 1.0),
    (3, 3.0),
    (Decimal("2.5"), 2.5),
    ("12abc", 12.0),
    (" -3.5e2x", -350.0),
    (".5", 0.5),
    ("abc", 0.0),
    (b"7", 7.0),
    ([1], 1.0),
    ([], 0.0),
    (object(), 0.0),
])
def test_to_float(value, expected):
    assert types.to_float(value) == expected


@pytest.mark.parametrize("value,expected", [
    (False, 0),
    (7, 7),
    (-3.9, -3),
    ("12abc", 12),
    ("nope", 0),
    (float("nan"), 0),
    (float("inf"), 0),
])
def test_to_int(value, expected):
    assert types.to_int(value) == expected


def test_to_string():
    assert types.to_string(None) == ""
    assert types.to_string(False) == ""
    assert types.to_string(True) == "1"
    assert types.to_string(b"raw") == "raw"
    assert types.to_string(1.5) == "1.5"
    assert types.to_string(date(2024, 1, 2)) == "2024-01-02"


def test_to_scalar():
    assert types.to_scalar("x") == "x"
    assert types.to_scalar(None) is None
    assert types.to_scalar(3) == 3
    assert types.to_scalar(["x"]) == ""
    assert types.to_scalar({"a": 1}) == ""


def test_is_scalar():
    assert types.is_scalar(Decimal("1"))
    assert not types.is_scalar(None)
    assert not types.is_scalar([1])
