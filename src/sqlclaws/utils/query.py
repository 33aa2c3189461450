"""Utilities for assembling SQL from prepared fragments"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlclaws.formatter import prepare

if TYPE_CHECKING:
    from sqlclaws.builder import Claws

logger = logging.getLogger(__name__)


class SafeQuery:
    """Build a SQL statement from conditionally added, escaped fragments"""

    def __init__(self, base: str):
        """Initialize with a base SQL statement, used verbatim"""
        self._parts: list[str] = [base]

    def when(self, condition: Any, template: str, *values: Any) -> 'SafeQuery':
        """Add prepare(template, *values) when condition is truthy

        Templates that prepare() rejects are left out.
        """
        if condition:
            fragment = prepare(template, *values)
            if fragment:
                self._parts.append(fragment)
            else:
                logger.debug("Dropped rejected fragment %r", template)
        return self

    def where(self, builder: Claws) -> 'SafeQuery':
        """Add the rendered WHERE clause of a builder, if it has one"""
        clause = builder.get_sql("where")
        if clause:
            self._parts.append(clause)
        return self

    def sql(self) -> str:
        """Get the SQL string"""
        return " ".join(self._parts)

    def __str__(self) -> str:
        return self.sql()
