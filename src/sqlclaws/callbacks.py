"""Resolution of sanitizer names to value callbacks

A sanitizer hook lets an application swap the callback used for a given
sanitizer name, e.g. to plug in its own free-text sanitizer for 'string':

    >>> def strict_strings(default, name, builder):
    ...     if name == "string":
    ...         return my_sanitizer
    ...     return None
    >>> register_sanitizer_hook(strict_strings)

A hook returning None (or anything that isn't callable) keeps the default.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from sqlclaws.enums import Sanitizer
from sqlclaws.utils import escape, sanitize, types

if TYPE_CHECKING:
    from sqlclaws.builder import Claws

logger = logging.getLogger(__name__)

ValueCallback = Callable[[Any], Any]
SanitizerHook = Callable[[ValueCallback, str, Optional["Claws"]], Optional[ValueCallback]]
CallbackOrType = Union[ValueCallback, Sanitizer, str]

_hooks: list[SanitizerHook] = []


def register_sanitizer_hook(hook: SanitizerHook) -> None:
    """Register a process-wide sanitizer hook; hooks run in registration order"""
    if hook not in _hooks:
        _hooks.append(hook)


def remove_sanitizer_hook(hook: SanitizerHook) -> None:
    """Remove a previously registered hook (no-op if it isn't registered)"""
    if hook in _hooks:
        _hooks.remove(hook)


def clear_sanitizer_hooks() -> None:
    """Remove all process-wide sanitizer hooks"""
    _hooks.clear()


def default_callback(sanitizer: Sanitizer) -> ValueCallback:
    """Built-in callback for a sanitizer"""
    if sanitizer is Sanitizer.INT:
        return types.to_int
    if sanitizer is Sanitizer.FLOAT:
        return types.to_float
    if sanitizer is Sanitizer.STRING:
        return sanitize.text
    if sanitizer is Sanitizer.KEY:
        return sanitize.key
    if sanitizer is Sanitizer.ESC_LIKE:
        return escape.like
    return types.to_scalar


def get_callback_for_type(
    type_name: Union[Sanitizer, str],
    builder: Optional[Claws] = None,
    hook: Optional[SanitizerHook] = None,
) -> ValueCallback:
    """Callback for a sanitizer name, after giving hooks a chance to replace it

    Args:
        type_name: Sanitizer name ('int', 'integer', 'float', 'double',
            'string', 'key', 'esc_like'); anything else uses 'esc_sql'
        builder: Builder instance passed through to hooks
        hook: Extra hook consulted after the process-wide ones

    Returns:
        A callable taking one value
    """
    requested = type_name.value if isinstance(type_name, Sanitizer) else str(type_name)
    callback = default_callback(Sanitizer.from_name(type_name))

    candidates = list(_hooks)
    if hook is not None:
        candidates.append(hook)

    for candidate in candidates:
        override = candidate(callback, requested, builder)
        if override is None:
            continue
        if not callable(override):
            logger.debug(
                "Ignoring non-callable override %r for sanitizer %r", override, requested
            )
            continue
        logger.debug("Sanitizer %r overridden by %r", requested, candidate)
        callback = override

    return callback


def get_callback(
    callback_or_type: CallbackOrType,
    builder: Optional[Claws] = None,
    hook: Optional[SanitizerHook] = None,
) -> ValueCallback:
    """Return callables unchanged, resolve sanitizer names via get_callback_for_type()"""
    if callable(callback_or_type) and not isinstance(callback_or_type, (str, Sanitizer)):
        return callback_or_type
    return get_callback_for_type(callback_or_type, builder, hook)
