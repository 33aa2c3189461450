"""
sqlclaws - escaped WHERE clauses and printf-style SQL templates

Code is organized in layers
- utils/ holds the escaping, sanitizing and coercion helpers
- formatter and callbacks turn templates and values into escaped SQL
- comparisons and builder assemble fragments into a WHERE clause
"""

# Layer 1: Escaping and templating
from sqlclaws.formatter import prepare, prepare_strict, PrepareError
from sqlclaws.utils.escape import placeholder_escape, remove_placeholder_escape
from sqlclaws.enums import SqlType, ValueKind, Operator, Compare, Sanitizer

# Layer 2: Callbacks and configuration
from sqlclaws.callbacks import (
    get_callback,
    get_callback_for_type,
    register_sanitizer_hook,
    remove_sanitizer_hook,
    clear_sanitizer_hooks,
)
from sqlclaws.config import BuilderSettings, load_settings, list_profiles

# Layer 3: Builder
from sqlclaws.builder import Claws, claws
from sqlclaws.utils.query import SafeQuery

__version__ = "2.0.0"
__all__ = [
    # Layer 1: Escaping and templating
    "prepare",
    "prepare_strict",
    "PrepareError",
    "placeholder_escape",
    "remove_placeholder_escape",
    "SqlType",
    "ValueKind",
    "Operator",
    "Compare",
    "Sanitizer",
    # Layer 2: Callbacks and configuration
    "get_callback",
    "get_callback_for_type",
    "register_sanitizer_hook",
    "remove_sanitizer_hook",
    "clear_sanitizer_hooks",
    "BuilderSettings",
    "load_settings",
    "list_profiles",
    # Layer 3: Builder
    "Claws",
    "claws",
    "SafeQuery",
]
