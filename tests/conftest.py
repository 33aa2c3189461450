"""Pytest configuration and shared fixtures."""

import pytest

from sqlclaws import Claws, clear_sanitizer_hooks
from sqlclaws.utils.escape import placeholder_escape


SETTINGS_TOML = """
[default]
default_sanitizer = "esc_sql"
like_sanitizer = "esc_like"
operator = "OR"
reset_after_render = true
warn_on_field_rewrite = true

[strict]
default_sanitizer = "string"
operator = "AND"

[keep]
reset_after_render = false
warn_on_field_rewrite = false
"""


@pytest.fixture(autouse=True)
def isolated_sanitizer_hooks():
    """Sanitizer hooks are process-wide; start and end every test without any."""
    clear_sanitizer_hooks()
    yield
    clear_sanitizer_hooks()


@pytest.fixture
def builder() -> Claws:
    """Fresh builder with default settings."""
    return Claws()


@pytest.fixture(scope="session")
def pct() -> str:
    """The token prepare() substitutes for '%'."""
    return placeholder_escape()


@pytest.fixture
def settings_file(tmp_path):
    """Temporary settings.toml with 'default', 'strict' and 'keep' profiles."""
    path = tmp_path / "settings.toml"
    path.write_text(SETTINGS_TOML)
    return path
