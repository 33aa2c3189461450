"""Enumerations shared across the builder, formatter and comparison helpers"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any


_CAST_PATTERN = re.compile(
    r"(?:BINARY|CHAR|DATE|DATETIME|SIGNED|UNSIGNED|TIME|DOUBLE|INTEGER"
    r"|NUMERIC(?:\(\d+(?:,\s?\d+)?\))?"
    r"|DECIMAL(?:\(\d+(?:,\s?\d+)?\))?)"
)


class SqlType(str, Enum):
    """MySQL CAST target types"""

    BINARY = "BINARY"
    CHAR = "CHAR"
    DATE = "DATE"
    DATETIME = "DATETIME"
    SIGNED = "SIGNED"
    UNSIGNED = "UNSIGNED"
    TIME = "TIME"
    DOUBLE = "DOUBLE"
    INTEGER = "INTEGER"
    NUMERIC = "NUMERIC"
    DECIMAL = "DECIMAL"

    @classmethod
    def resolve(cls, type_name: str) -> str:
        """Resolve a type name to a CAST keyword, falling back to CHAR

        INTEGER and NUMERIC normalize to SIGNED, DOUBLE to DECIMAL. DECIMAL
        keeps a precision/scale suffix when one is given.

        Example:
            >>> SqlType.resolve("integer")
            'SIGNED'
            >>> SqlType.resolve("decimal(10,2)")
            'DECIMAL(10,2)'
            >>> SqlType.resolve("varchar")
            'CHAR'
        """
        candidate = str(type_name).upper()

        if not _CAST_PATTERN.fullmatch(candidate):
            return cls.CHAR.value

        if candidate in ("INTEGER", "NUMERIC") or candidate.startswith("NUMERIC("):
            return cls.SIGNED.value

        if candidate == "DOUBLE":
            return cls.DECIMAL.value

        return candidate


class ValueKind(str, Enum):
    """Runtime kind of a value, used as the candidate for SqlType.resolve()

    Python numbers render as bare literals so they resolve to CHAR and are
    never wrapped in a CAST.
    """

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    BINARY = "binary"
    DECIMAL = "decimal"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    NONE = "none"
    OBJECT = "object"

    @classmethod
    def of(cls, value: Any) -> ValueKind:
        """Classify a value"""
        # bool is an int subclass and datetime a date subclass; order matters
        if value is None:
            return cls.NONE
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INT
        if isinstance(value, float):
            return cls.FLOAT
        if isinstance(value, str):
            return cls.STR
        if isinstance(value, (bytes, bytearray)):
            return cls.BINARY
        if isinstance(value, Decimal):
            return cls.DECIMAL
        if isinstance(value, datetime):
            return cls.DATETIME
        if isinstance(value, date):
            return cls.DATE
        if isinstance(value, time):
            return cls.TIME
        return cls.OBJECT

    @property
    def sql_type(self) -> str:
        """CAST keyword for this kind"""
        return SqlType.resolve(self.value)


class Operator(str, Enum):
    """Boolean operator joining values or phrases"""

    OR = "OR"
    AND = "AND"

    @classmethod
    def from_name(cls, name: Any) -> Operator:
        """Coerce 'or'/'and' (any case) or an Operator; anything else is OR"""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().upper())
        except ValueError:
            return cls.OR


class Compare(str, Enum):
    """Comparison tokens accepted by Claws.compare() and Claws.where()"""

    EQUALS = "="
    NOT_EQUALS = "!="
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"
    IN = "IN"
    NOT_IN = "NOT IN"
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "NOT BETWEEN"
    EXISTS = "EXISTS"
    NOT_EXISTS = "NOT EXISTS"

    @classmethod
    def from_token(cls, token: Any) -> Compare:
        """Coerce a token (case-insensitive); unknown tokens become '='"""
        if isinstance(token, cls):
            return token
        normalized = " ".join(str(token).upper().split())
        try:
            return cls(normalized)
        except ValueError:
            return cls.EQUALS


EQUALITY_COMPARES = frozenset(
    c.value for c in (
        Compare.EQUALS, Compare.NOT_EQUALS, Compare.LT,
        Compare.GT, Compare.LTE, Compare.GTE,
    )
)


class Sanitizer(str, Enum):
    """Symbolic sanitizer names understood by the callback resolver"""

    INT = "int"
    FLOAT = "float"
    STRING = "string"
    KEY = "key"
    ESC_LIKE = "esc_like"
    ESC_SQL = "esc_sql"

    @classmethod
    def from_name(cls, name: Any) -> Sanitizer:
        """Resolve a symbolic name, including aliases; unknown names are ESC_SQL"""
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        if key == "integer":
            return cls.INT
        if key == "double":
            return cls.FLOAT
        try:
            return cls(key)
        except ValueError:
            return cls.ESC_SQL
