"""Comparison fragment generators

Each function renders one comparison against a field, e.g. "`status` = 'open'",
escaping values through prepare(). They are pure and return the fragment;
Claws commits the fragments into a clause.

Multiple values are joined with the given Operator and parenthesized:

    >>> comparison_sql("id", [1, 2], "int")
    '( `id` = 1 OR `id` = 2 )'
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlclaws.callbacks import CallbackOrType, SanitizerHook, get_callback
from sqlclaws.enums import EQUALITY_COMPARES, Compare, Operator, Sanitizer, SqlType, ValueKind
from sqlclaws.formatter import prepare
from sqlclaws.utils.identifiers import quote_identifier
from sqlclaws.utils.types import to_string

if TYPE_CHECKING:
    from sqlclaws.builder import Claws

logger = logging.getLogger(__name__)

COLLECTION_TYPES = (list, tuple, set, frozenset)
SEQUENCE_TYPES = (list, tuple)


def is_collection(values: Any) -> bool:
    """Whether values holds several values rather than one"""
    return isinstance(values, COLLECTION_TYPES)


def normalize_values(values: Any) -> list[Any]:
    """Wrap a single value in a list; None means no values"""
    if values is None:
        return []
    if is_collection(values):
        return list(values)
    return [values]


def _token(compare: Union[Compare, str]) -> str:
    if isinstance(compare, Compare):
        return compare.value
    return " ".join(str(compare).upper().split())


def _float_placeholder(value: float) -> str:
    if not math.isfinite(value):
        return "%s"
    exponent = Decimal(repr(value)).as_tuple().exponent
    return f"%.{max(0, -exponent)}F"


def literal(value: Any) -> str:
    """Escape one value: ints and floats bare, everything else quoted

    Example:
        >>> literal(5), literal(1.25), literal("it's")
        ('5', '1.25', "'it\\\\'s'")
    """
    kind = ValueKind.of(value)
    if kind is ValueKind.INT:
        return prepare("%d", [value])
    if kind is ValueKind.FLOAT:
        return prepare(_float_placeholder(value), [value])
    return prepare("%s", [value])


def cast_literal(value: Any) -> str:
    """literal(), wrapped in CAST( ... ) unless the value's type is CHAR"""
    escaped = literal(value)
    sql_type = ValueKind.of(value).sql_type
    if sql_type == SqlType.CHAR.value:
        return escaped
    return f"CAST( {escaped} AS {sql_type} )"


def _join(parts: list[str], operator: Union[Operator, str]) -> str:
    operator = Operator.from_name(operator)
    sql = f" {operator.value} ".join(parts)
    if len(parts) > 1:
        sql = f"( {sql} )"
    return sql


def build_comparison_sql(
    field: str,
    values: list[Any],
    compare: Union[Compare, str] = Compare.EQUALS,
    operator: Union[Operator, str] = Operator.OR,
) -> str:
    """Render already-sanitized values as `field` <compare> value phrases"""
    if not values:
        return ""
    column = quote_identifier(field)
    compare = _token(compare)
    return _join([f"{column} {compare} {cast_literal(value)}" for value in values], operator)


def comparison_sql(
    field: str,
    values: Any,
    callback: CallbackOrType = Sanitizer.ESC_SQL,
    compare: Union[Compare, str] = Compare.EQUALS,
    operator: Union[Operator, str] = Operator.OR,
    builder: Optional[Claws] = None,
    hook: Optional[SanitizerHook] = None,
) -> str:
    """Equality-family comparison ('=', '!=', '<', '>', '<=', '>=')

    Unsupported compare tokens fall back to '='.
    """
    compare = _token(compare)
    if compare not in EQUALITY_COMPARES:
        compare = Compare.EQUALS.value

    sanitize = get_callback(callback, builder, hook)
    values = [sanitize(value) for value in normalize_values(values)]

    return build_comparison_sql(field, values, compare, operator)


def like_sql(
    field: str,
    values: Any,
    callback: CallbackOrType = Sanitizer.ESC_LIKE,
    compare: Union[Compare, str] = Compare.LIKE,
    operator: Union[Operator, str] = Operator.OR,
    builder: Optional[Claws] = None,
    hook: Optional[SanitizerHook] = None,
) -> str:
    """'LIKE' / 'NOT LIKE' comparison; every value is matched as '%value%'"""
    compare = _token(compare)
    if compare not in (Compare.LIKE.value, Compare.NOT_LIKE.value):
        compare = Compare.LIKE.value

    sanitize = get_callback(callback, builder, hook)
    column = quote_identifier(field)

    parts = []
    for value in normalize_values(values):
        escaped = prepare("%1$s", [sanitize(value)])
        parts.append(f"{column} {compare} '%{escaped}%'")

    return _join(parts, operator)


def in_sql(
    field: str,
    values: Any,
    callback: CallbackOrType = Sanitizer.ESC_SQL,
    compare: Union[Compare, str] = Compare.IN,
    builder: Optional[Claws] = None,
    hook: Optional[SanitizerHook] = None,
) -> str:
    """'IN' / 'NOT IN' comparison against a list of values

    An empty list renders nothing, since 'IN()' is not valid SQL.
    """
    compare = _token(compare)
    if compare not in (Compare.IN.value, Compare.NOT_IN.value):
        compare = Compare.IN.value

    sanitize = get_callback(callback, builder, hook)
    items = [cast_literal(sanitize(value)) for value in normalize_values(values)]
    if not items:
        return ""

    return f"{quote_identifier(field)} {compare}( {', '.join(items)} )"


def between_sql(
    field: str,
    values: Any,
    callback: CallbackOrType = Sanitizer.ESC_SQL,
    compare: Union[Compare, str] = Compare.BETWEEN,
    builder: Optional[Claws] = None,
    hook: Optional[SanitizerHook] = None,
) -> str:
    """'BETWEEN' / 'NOT BETWEEN' comparison using the first two values

    Values containing ':' (times, datetimes) are cast to DATE. Fewer than two
    values, or an unordered set of them, render nothing.
    """
    if not isinstance(values, SEQUENCE_TYPES) or len(values) < 2:
        logger.debug("BETWEEN on %r needs a list of at least two values, got %r", field, values)
        return ""

    compare = _token(compare)
    if compare not in (Compare.BETWEEN.value, Compare.NOT_BETWEEN.value):
        compare = Compare.BETWEEN.value

    sanitize = get_callback(callback, builder, hook)

    bounds = []
    for value in list(values)[:2]:
        value = sanitize(value)
        if ":" in to_string(value):
            bounds.append(f"CAST( {prepare('%s', [value])} AS DATE )")
        else:
            bounds.append(cast_literal(value))

    return f"( {quote_identifier(field)} {compare} {bounds[0]} AND {bounds[1]} )"


def not_exists_sql(field: str) -> str:
    """'NOT EXISTS' comparison: the field is NULL"""
    return f"{quote_identifier(field)} IS NULL"
