"""Claws: chained builder for escaped WHERE clauses

    c = claws()
    c.where("status").equals("open").or_().equals("pending")
    c.where("priority").gte(3, "int")
    c.get_sql()
    # "WHERE `status` = 'open' OR `status` = 'pending' AND `priority` >= 3"

Each comparison commits a phrase to the current clause; phrases are joined
with AND. or_() and and_() make the next comparison amend the last phrase
instead of adding a new one.

A Claws instance holds mutable state for one clause being built and must not
be shared between threads.
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Any, Optional, Union

from sqlclaws import comparisons
from sqlclaws.callbacks import (
    CallbackOrType,
    SanitizerHook,
    ValueCallback,
    get_callback,
    get_callback_for_type,
)
from sqlclaws.config import BuilderSettings, load_settings
from sqlclaws.enums import Compare, Operator, Sanitizer, SqlType
from sqlclaws.utils.identifiers import sanitize_field

logger = logging.getLogger(__name__)

OperatorLike = Union[Operator, str]


class Claws:
    """Builds a WHERE clause from chained comparisons"""

    ALLOWED_CLAUSES = ("where",)

    def __init__(
        self,
        settings: Optional[BuilderSettings] = None,
        sanitizer_hook: Optional[SanitizerHook] = None,
    ):
        """Initialize with optional settings and a per-builder sanitizer hook"""
        self.settings = settings or BuilderSettings()
        self.sanitizer_hook = sanitizer_hook
        self._clauses: dict[str, list[str]] = {}
        self._current_clause = ""
        self._current_field = ""
        self._current_operator = self._default_operator()
        self._amending = False
        self._previous_phrase: Optional[str] = None

    @classmethod
    def from_profile(
        cls,
        profile: str = "default",
        path: Optional[Union[str, Path]] = None,
        sanitizer_hook: Optional[SanitizerHook] = None,
    ) -> Claws:
        """Create a builder from a settings.toml profile"""
        return cls(load_settings(profile, path), sanitizer_hook)

    def __repr__(self) -> str:
        return (
            f"Claws(clause={self._current_clause!r}, field={self._current_field!r}, "
            f"phrases={sum(len(p) for p in self._clauses.values())})"
        )

    # Clause and field selection

    def where(
        self,
        field: str,
        compare: Optional[Union[Compare, str]] = None,
        values: Any = None,
        callback_or_type: Optional[CallbackOrType] = None,
    ) -> Claws:
        """Select a field in the WHERE clause, optionally comparing it right away

        Args:
            field: Field to build conditions for
            compare: Comparison token ('=', '!=', '<', '>', '<=', '>=', 'LIKE',
                'NOT LIKE', 'IN', 'NOT IN', 'BETWEEN', 'NOT BETWEEN', 'EXISTS'
                or 'NOT EXISTS')
            values: Single value or list of values for the comparison
            callback_or_type: Sanitizer name or callable; defaults per comparison

        Example:
            >>> claws().where("id", "IN", [1, 2], "int").get_sql()
            'WHERE `id` IN( 1, 2 )'
        """
        self.set_current_clause("where")
        self.set_current_field(field)

        if compare is not None and (
            values is not None or Compare.from_token(compare) is Compare.NOT_EXISTS
        ):
            self.compare(compare, values, callback_or_type)

        return self

    def set_current_clause(self, clause: str) -> Claws:
        """Make clause current; clauses other than 'where' are ignored"""
        clause = str(clause).lower()
        if clause in self.ALLOWED_CLAUSES:
            self._current_clause = clause
        return self

    def get_clause(self, clause: Optional[str] = None) -> str:
        """Return clause if it is allowed, otherwise the current clause"""
        if clause is None or str(clause).lower() not in self.ALLOWED_CLAUSES:
            return self._current_clause
        return str(clause).lower()

    def set_current_field(self, field: str) -> Claws:
        """Make field current, keeping only lowercase letters, digits, '_' and '-'"""
        if field != self._current_field:
            sanitized = sanitize_field(field)
            if self.settings.warn_on_field_rewrite and sanitized != str(field).lower():
                msg = (
                    f"Field name {field!r} was sanitized to {sanitized!r}. "
                    "Only letters, digits, underscores and hyphens are kept."
                )
                warnings.warn(msg, UserWarning, stacklevel=3)
            self._current_field = sanitized
        return self

    @property
    def current_field(self) -> str:
        """Sanitized name of the current field"""
        return self._current_field

    # Boolean operators

    def set_current_operator(self, operator: OperatorLike) -> Claws:
        """Set the operator used when amending the previous phrase"""
        self._current_operator = Operator.from_name(operator)
        return self

    @property
    def current_operator(self) -> Operator:
        """Operator used when amending the previous phrase"""
        return self._current_operator

    @property
    def previous_phrase(self) -> Optional[str]:
        """Most recently committed phrase, or the amendment target after or_()/and_()"""
        return self._previous_phrase

    @property
    def amending(self) -> bool:
        """Whether the next comparison amends the previous phrase"""
        return self._amending

    def or_(self, clause: Optional[str] = None) -> Claws:
        """OR the next comparison into the previous phrase"""
        return self._begin_amendment(Operator.OR, clause)

    def and_(self, clause: Optional[str] = None) -> Claws:
        """AND the next comparison into the previous phrase"""
        return self._begin_amendment(Operator.AND, clause)

    def _begin_amendment(self, operator: Operator, clause: Optional[str]) -> Claws:
        self.set_current_operator(operator)
        self._amending = True

        phrases = self._clauses.get(self.get_clause(clause))
        self._previous_phrase = phrases[-1] if phrases else None

        return self

    # Comparisons

    def compare(
        self,
        compare: Union[Compare, str],
        values: Any = None,
        callback_or_type: Optional[CallbackOrType] = None,
        operator: Optional[OperatorLike] = None,
    ) -> Claws:
        """Dispatch to the method for a comparison token; unknown tokens use equals()"""
        token = Compare.from_token(compare)

        if token is Compare.NOT_EQUALS:
            return self.doesnt_equal(values, callback_or_type, operator)
        if token is Compare.LT:
            return self.lt(values, callback_or_type, operator)
        if token is Compare.GT:
            return self.gt(values, callback_or_type, operator)
        if token is Compare.LTE:
            return self.lte(values, callback_or_type, operator)
        if token is Compare.GTE:
            return self.gte(values, callback_or_type, operator)
        if token is Compare.LIKE:
            return self.like(values, callback_or_type, operator)
        if token is Compare.NOT_LIKE:
            return self.not_like(values, callback_or_type, operator)
        if token is Compare.IN:
            return self.in_(values, callback_or_type, operator)
        if token is Compare.NOT_IN:
            return self.not_in(values, callback_or_type, operator)
        if token is Compare.BETWEEN:
            return self.between(values, callback_or_type)
        if token is Compare.NOT_BETWEEN:
            return self.not_between(values, callback_or_type)
        if token is Compare.EXISTS:
            return self.exists(values, callback_or_type, operator)
        if token is Compare.NOT_EXISTS:
            return self.not_exists(values, callback_or_type, operator)
        return self.equals(values, callback_or_type, operator)

    def equals(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
               operator: Optional[OperatorLike] = None) -> Claws:
        """'=' comparison; several values are joined with operator (default OR)"""
        return self._compare_values(values, callback_or_type, Compare.EQUALS, operator)

    def doesnt_equal(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
                     operator: Optional[OperatorLike] = None) -> Claws:
        """'!=' comparison"""
        return self._compare_values(values, callback_or_type, Compare.NOT_EQUALS, operator)

    def gt(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
           operator: Optional[OperatorLike] = None) -> Claws:
        """'>' comparison"""
        return self._compare_values(values, callback_or_type, Compare.GT, operator)

    def lt(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
           operator: Optional[OperatorLike] = None) -> Claws:
        """'<' comparison"""
        return self._compare_values(values, callback_or_type, Compare.LT, operator)

    def gte(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
            operator: Optional[OperatorLike] = None) -> Claws:
        """'>=' comparison"""
        return self._compare_values(values, callback_or_type, Compare.GTE, operator)

    def lte(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
            operator: Optional[OperatorLike] = None) -> Claws:
        """'<=' comparison"""
        return self._compare_values(values, callback_or_type, Compare.LTE, operator)

    def like(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
             operator: Optional[OperatorLike] = None) -> Claws:
        """'LIKE' comparison matching each value anywhere in the field"""
        return self._like(values, callback_or_type, Compare.LIKE, operator)

    def not_like(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
                 operator: Optional[OperatorLike] = None) -> Claws:
        """'NOT LIKE' comparison"""
        return self._like(values, callback_or_type, Compare.NOT_LIKE, operator)

    def in_(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
            operator: Optional[OperatorLike] = None) -> Claws:
        """'IN' comparison; a single value falls back to equals()"""
        if not comparisons.is_collection(values):
            return self.equals(values, callback_or_type, operator)
        return self._in(values, callback_or_type, Compare.IN)

    def not_in(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
               operator: Optional[OperatorLike] = None) -> Claws:
        """'NOT IN' comparison; a single value falls back to doesnt_equal()"""
        if not comparisons.is_collection(values):
            return self.doesnt_equal(values, callback_or_type, operator)
        return self._in(values, callback_or_type, Compare.NOT_IN)

    def between(self, values: Any, callback_or_type: Optional[CallbackOrType] = None) -> Claws:
        """'BETWEEN' comparison using the first two values

        For date ranges, make sure the bounds cover the whole day, e.g.
        '2024-01-31 23:59:59' rather than '2024-01-31'.
        """
        return self._between(values, callback_or_type, Compare.BETWEEN)

    def not_between(self, values: Any, callback_or_type: Optional[CallbackOrType] = None) -> Claws:
        """'NOT BETWEEN' comparison using the first two values"""
        return self._between(values, callback_or_type, Compare.NOT_BETWEEN)

    def exists(self, values: Any, callback_or_type: Optional[CallbackOrType] = None,
               operator: Optional[OperatorLike] = None) -> Claws:
        """'EXISTS' comparison, same as equals()"""
        return self.equals(values, callback_or_type, operator)

    def not_exists(self, values: Any = None, callback_or_type: Optional[CallbackOrType] = None,
                   operator: Optional[OperatorLike] = None) -> Claws:
        """'NOT EXISTS' comparison: the field IS NULL; values are ignored"""
        self.add_clause_sql(comparisons.not_exists_sql(self._current_field))
        return self

    def _compare_values(self, values, callback_or_type, compare, operator) -> Claws:
        sql = comparisons.comparison_sql(
            self._current_field,
            values,
            self._callback_or_default(callback_or_type),
            compare,
            self._operator_or_default(operator),
            builder=self,
            hook=self.sanitizer_hook,
        )
        self.add_clause_sql(sql)
        return self

    def _like(self, values, callback_or_type, compare, operator) -> Claws:
        if callback_or_type is None:
            callback_or_type = self.settings.like_sanitizer
        sql = comparisons.like_sql(
            self._current_field,
            values,
            callback_or_type,
            compare,
            self._operator_or_default(operator),
            builder=self,
            hook=self.sanitizer_hook,
        )
        self.add_clause_sql(sql)
        return self

    def _in(self, values, callback_or_type, compare) -> Claws:
        sql = comparisons.in_sql(
            self._current_field,
            values,
            self._callback_or_default(callback_or_type),
            compare,
            builder=self,
            hook=self.sanitizer_hook,
        )
        self.add_clause_sql(sql)
        return self

    def _between(self, values, callback_or_type, compare) -> Claws:
        sql = comparisons.between_sql(
            self._current_field,
            values,
            self._callback_or_default(callback_or_type),
            compare,
            builder=self,
            hook=self.sanitizer_hook,
        )
        self.add_clause_sql(sql)
        return self

    def _callback_or_default(self, callback_or_type: Optional[CallbackOrType]) -> CallbackOrType:
        if callback_or_type is None:
            return self.settings.default_sanitizer
        return callback_or_type

    def _operator_or_default(self, operator: Optional[OperatorLike]) -> Operator:
        if operator is None:
            return self._default_operator()
        return Operator.from_name(operator)

    def _default_operator(self) -> Operator:
        return Operator.from_name(self.settings.operator)

    # Callbacks and casts

    def get_callback(self, callback_or_type: CallbackOrType) -> ValueCallback:
        """Resolve a sanitizer name or callable, honoring sanitizer hooks"""
        return get_callback(callback_or_type, self, self.sanitizer_hook)

    def get_callback_for_type(self, type_name: Union[Sanitizer, str]) -> ValueCallback:
        """Resolve a sanitizer name, honoring sanitizer hooks"""
        return get_callback_for_type(type_name, self, self.sanitizer_hook)

    def get_cast_for_type(self, type_name: str) -> str:
        """CAST keyword for a type name (unknown names are CHAR)"""
        return SqlType.resolve(type_name)

    # Phrases and rendering

    def add_clause_sql(self, sql: str, clause: Optional[str] = None) -> Claws:
        """Commit a fragment, amending the previous phrase after or_()/and_()"""
        if not sql:
            logger.debug("Skipping empty fragment for field %r", self._current_field)
            return self

        clause = self.get_clause(clause)
        if not clause:
            msg = f"No clause selected, dropping {sql!r}. Call where() first."
            warnings.warn(msg, UserWarning, stacklevel=3)
            return self

        phrases = self._clauses.setdefault(clause, [])

        if self._amending and self._previous_phrase is not None and phrases:
            sql = f"{self._previous_phrase} {self._current_operator.value} {sql}"
            phrases[-1] = sql
            logger.debug("Amended previous %s phrase: %s", clause, sql)
        else:
            phrases.append(sql)

        self._amending = False
        self._previous_phrase = sql
        return self

    def phrases(self, clause: Optional[str] = None) -> list[str]:
        """Committed phrases of a clause (a copy)"""
        return list(self._clauses.get(self.get_clause(clause), []))

    def get_sql(self, clause: Optional[str] = None, reset_vars: Optional[bool] = None) -> str:
        """Render a clause, e.g. "WHERE `a` = 1 AND `b` = 2"

        Args:
            clause: Clause to render; defaults to the current clause
            reset_vars: Whether to reset the builder afterwards; defaults to
                the reset_after_render setting

        Returns:
            The rendered clause, or '' if it has no phrases
        """
        clause = self.get_clause(clause)
        phrases = self._clauses.get(clause)

        if not phrases:
            return ""

        sql = f"{clause.upper()} " + " AND ".join(phrases)

        if reset_vars is None:
            reset_vars = self.settings.reset_after_render
        if reset_vars:
            self._clauses.pop(clause, None)
            self.reset_vars()

        return sql

    def reset_vars(self) -> None:
        """Reset the current clause, field, operator and pending amendment"""
        self._current_clause = ""
        self._current_field = ""
        self._current_operator = self._default_operator()
        self._amending = False
        self._previous_phrase = None


def claws(
    settings: Optional[BuilderSettings] = None,
    sanitizer_hook: Optional[SanitizerHook] = None,
) -> Claws:
    """Shorthand for a new Claws instance"""
    return Claws(settings, sanitizer_hook)
