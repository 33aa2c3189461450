"""Utilities for field names used as SQL identifiers"""

from sqlclaws.utils.sanitize import key


def sanitize_field(name: str) -> str:
    """Reduce a field name to lowercase letters, digits, '_' and '-'"""
    return key(name)


def is_valid_field(name: str) -> bool:
    """Check if a field name survives sanitize_field() unchanged"""
    if not name:
        return False
    return sanitize_field(name) == name


def quote_identifier(name: str) -> str:
    """Wrap a name in backticks, doubling any backticks inside it"""
    return "`" + str(name).replace("`", "``") + "`"
