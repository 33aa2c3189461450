"""Escaping helpers for SQL literals and LIKE patterns"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import threading
import uuid
from typing import Any, Optional

from sqlclaws.utils.types import to_string

_ADDSLASHES = str.maketrans({
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\x00": "\\0",
})

_LIKE_SPECIALS = str.maketrans({
    "\\": "\\\\",
    "_": "\\_",
    "%": "\\%",
})

_placeholder: Optional[str] = None
_placeholder_lock = threading.Lock()


def placeholder_escape() -> str:
    """Opaque token standing in for '%' in prepared SQL

    Computed once per process as an HMAC-SHA256 over a random salt and
    wrapped in braces, e.g. '{3f1c...}'.
    """
    global _placeholder

    if _placeholder is None:
        with _placeholder_lock:
            if _placeholder is None:
                salt = secrets.token_bytes(16)
                digest = hmac.new(salt, uuid.uuid4().bytes, hashlib.sha256).hexdigest()
                _placeholder = "{" + digest + "}"

    return _placeholder


def add_placeholder_escape(sql: str) -> str:
    """Replace every '%' with the placeholder escape token"""
    return sql.replace("%", placeholder_escape())


def remove_placeholder_escape(sql: str) -> str:
    """Turn placeholder escape tokens back into '%'

    prepare() never calls this; it is for a render stage that hands SQL to a
    driver which does not re-interpret '%'.
    """
    return sql.replace(placeholder_escape(), "%")


def addslashes(data: str) -> str:
    """Backslash-escape single quotes, double quotes, backslashes and NUL"""
    return data.translate(_ADDSLASHES)


def real_escape(data: Any) -> str:
    """Escape a scalar for use inside a quoted SQL literal

    None becomes an empty string, booleans become '1' or ''.
    """
    if data is None or data is False:
        text = ""
    elif data is True:
        text = "1"
    elif isinstance(data, (bytes, bytearray)):
        text = bytes(data).decode("utf-8", errors="replace")
    else:
        text = str(data)

    return add_placeholder_escape(addslashes(text))


def sql(data: Any) -> Any:
    """Escape a value, or every value of a (nested) list or dict

    Example:
        >>> sql("O'Reilly")
        "O\\\\'Reilly"
        >>> sql({"name": "O'Reilly", "tags": ["a'b"]})
        {'name': "O\\\\'Reilly", 'tags': ["a\\\\'b"]}
    """
    if isinstance(data, dict):
        return {key: sql(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [sql(value) for value in data]
    return real_escape(data)


def like(text: Any) -> str:
    """Escape LIKE wildcards ('_', '%') and backslashes"""
    return to_string(text).translate(_LIKE_SPECIALS)
