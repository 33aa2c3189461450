"""Configuration loading for builder settings profiles."""

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Union, Optional, Any

# Use tomllib for Python 3.11+, fallback to tomli for older versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        raise ImportError(
            "Python < 3.11 requires 'tomli' package. " +
            "Install it with: pip install tomli"
        )

from sqlclaws.enums import Operator, Sanitizer
from .paths import resolve_config_path


@dataclass(frozen=True)
class BuilderSettings:
    """Defaults applied by a Claws builder"""

    default_sanitizer: str = Sanitizer.ESC_SQL.value
    like_sanitizer: str = Sanitizer.ESC_LIKE.value
    operator: str = Operator.OR.value
    reset_after_render: bool = True
    warn_on_field_rewrite: bool = True

    def __post_init__(self):
        """Validate values read from TOML"""
        for name in ("default_sanitizer", "like_sanitizer"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Setting '{name}' must be a non-empty string, got {value!r}")

        if str(self.operator).upper() not in (Operator.OR.value, Operator.AND.value):
            raise ValueError(f"Setting 'operator' must be 'OR' or 'AND', got {self.operator!r}")
        object.__setattr__(self, "operator", str(self.operator).upper())

        for name in ("reset_after_render", "warn_on_field_rewrite"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"Setting '{name}' must be true or false")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuilderSettings":
        """Build settings from a profile table, rejecting unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown settings: {', '.join(unknown)}. " +
                f"Supported settings: {', '.join(sorted(known))}"
            )
        return cls(**data)


def _read_profiles(config_file: Path) -> Dict[str, Any]:
    with open(config_file, "rb") as f:
        return tomllib.load(f)


def load_profile(
    profile: str = "default",
    path: Optional[Union[str, Path]] = None
) -> Dict[str, Any]:
    """
    Load a settings profile from settings.toml.

    Args:
        profile: Name of the profile to load
        path: Optional explicit path to settings.toml.
              If None, uses the configuration directory.

    Returns:
        Dictionary containing the profile's settings

    Raises:
        FileNotFoundError: If settings.toml is not found
        KeyError: If the specified profile doesn't exist in the file

    Example:
        >>> load_profile("strict")
        {'default_sanitizer': 'string', 'operator': 'AND'}
    """
    config_file = resolve_config_path(path)

    if not config_file.exists():
        raise FileNotFoundError(
            f"sqlclaws settings file not found at {config_file}. " +
            "Create a settings.toml file or see settings.toml.example for template."
        )

    all_profiles = _read_profiles(config_file)

    if profile not in all_profiles:
        available = ", ".join(all_profiles.keys())
        raise KeyError(
            f"Profile '{profile}' not found in {config_file}. " +
            f"Available profiles: {available}"
        )

    return all_profiles[profile]


def list_profiles(path: Optional[Union[str, Path]] = None) -> list[str]:
    """
    List all available profiles in settings.toml.

    Returns:
        List of profile names, empty if the file doesn't exist
    """
    try:
        config_file = resolve_config_path(path)
    except FileNotFoundError:
        return []

    if not config_file.exists():
        return []

    return list(_read_profiles(config_file).keys())


def load_settings(
    profile: str = "default",
    path: Optional[Union[str, Path]] = None
) -> BuilderSettings:
    """Load and validate a settings profile"""
    return BuilderSettings.from_dict(load_profile(profile, path))
