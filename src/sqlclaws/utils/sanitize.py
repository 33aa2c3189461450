"""Sanitizers for free text and keys

These are the defaults behind the 'string' and 'key' sanitizer names. Both
can be replaced per name through a sanitizer hook (see sqlclaws.callbacks).
"""

import html
import re

_KEY_DISALLOWED = re.compile(r"[^a-z0-9_\-]")
_SCRIPT_STYLE = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]*>")
_LESS_THAN = re.compile(r"<[^>]*?((?=<)|>|$)")
_WHITESPACE = re.compile(r"[\r\n\t ]+")
_PERCENT_OCTET = re.compile(r"%[a-f0-9]{2}", re.IGNORECASE)
_SPACES = re.compile(r" +")


def key(value: str) -> str:
    """Lowercase a key and strip everything but a-z, 0-9, '_' and '-'

    Example:
        >>> key("User Name;--")
        'username--'
    """
    return _KEY_DISALLOWED.sub("", str(value).lower())


def strip_all_tags(text: str) -> str:
    """Remove script/style blocks and all remaining tags, then trim"""
    text = _SCRIPT_STYLE.sub("", text)
    return _TAG.sub("", text).strip()


def text(value: str) -> str:
    """Sanitize single-line text: no tags, collapsed whitespace, no %XX octets"""
    return _sanitize_text(str(value))


def textarea(value: str) -> str:
    """Like text() but keeps newlines"""
    return _sanitize_text(str(value), keep_newlines=True)


def _escape_stray_less_than(match: re.Match) -> str:
    # A '<' that never closes is not a tag; keep it as an entity
    fragment = match.group(0)
    if fragment.endswith(">"):
        return fragment
    return html.escape(fragment, quote=False)


def _sanitize_text(value: str, keep_newlines: bool = False) -> str:
    if "<" in value:
        value = _LESS_THAN.sub(_escape_stray_less_than, value)
        value = strip_all_tags(value)
        value = value.replace("<\n", "&lt;\n")

    if not keep_newlines:
        value = _WHITESPACE.sub(" ", value)
    value = value.strip()

    found = False
    match = _PERCENT_OCTET.search(value)
    while match:
        value = value.replace(match.group(0), "")
        found = True
        match = _PERCENT_OCTET.search(value)

    if found:
        value = _SPACES.sub(" ", value).strip()

    return value
