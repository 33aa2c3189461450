"""Optional SQLAlchemy integration for rendered sqlclaws SQL"""

import re

from sqlalchemy import TextClause, text

from sqlclaws.builder import Claws

# Same shape SQLAlchemy uses to find :name bind parameters
_BIND_COLON = re.compile(r"(?<![:\w\\]):(?=\w)")


def escape_bind_colons(sql: str) -> str:
    """Backslash-escape colons that text() would read as bind parameters

    Example:
        >>> escape_bind_colons("`note` = 'see :ref'")
        "`note` = 'see \\\\:ref'"
    """
    return _BIND_COLON.sub(r"\\:", sql)


def to_text(sql: str) -> TextClause:
    """Wrap already-escaped SQL in a TextClause without bind parameters"""
    return text(escape_bind_colons(sql))


def where_criteria(builder: Claws) -> TextClause:
    """Render a builder's WHERE clause as criteria for Select.where()

    Example:
        >>> c = Claws().where("id").equals(5)
        >>> select(users).where(where_criteria(c))
    """
    clause = builder.get_sql("where")
    prefix = "WHERE "
    if clause.startswith(prefix):
        clause = clause[len(prefix):]
    return to_text(clause)
