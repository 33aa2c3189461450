"""Configuration module exports."""

from .config import BuilderSettings, load_profile, list_profiles, load_settings
from .paths import resolve_config_path, get_default_config_path, get_config_dir

__all__ = [
    "BuilderSettings",
    "load_profile",
    "list_profiles",
    "load_settings",
    "resolve_config_path",
    "get_default_config_path",
    "get_config_dir",
]
