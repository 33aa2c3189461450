"""Path resolution for sqlclaws configuration files."""

import os
from pathlib import Path
from typing import Optional, Union

from importlib.resources import files as importlib_files

SETTINGS_FILENAME = "settings.toml"


def _get_config_directory() -> Path:
    """
    Get the configuration directory for sqlclaws.

    Priority order:
    1. SQLCLAWS_CONFIG_DIR environment variable (override)
    2. ~/.sqlclaws/ (dotfile directory in user home)

    The directory is not created; sqlclaws only ever reads from it.

    Returns:
        Path: Configuration directory path
    """
    env_config_dir = os.getenv("SQLCLAWS_CONFIG_DIR")
    if env_config_dir:
        return Path(env_config_dir)

    return Path.home() / ".sqlclaws"


def _get_example_files_dir() -> Path:
    """
    Get the directory containing example configuration files from the installed package.

    Returns:
        Path: Directory containing .example files
    """
    package_data = importlib_files("sqlclaws") / "_data"
    return Path(str(package_data))


def get_config_dir() -> Path:
    """Configuration directory, re-read from the environment on every call"""
    return _get_config_directory()


def get_default_config_path() -> Path:
    """
    Get the path to the settings.toml configuration file.

    Returns:
        Path: The path to settings.toml

    Raises:
        FileNotFoundError: If settings.toml doesn't exist in the config directory
    """
    config_path = get_config_dir() / SETTINGS_FILENAME

    if not config_path.exists():
        example_file = _get_example_files_dir() / f"{SETTINGS_FILENAME}.example"

        error_msg = (
            f"Configuration file '{SETTINGS_FILENAME}' not found at: {config_path}\n\n"
            f"To create it:\n"
            f"1. Copy example: {example_file}\n"
            f"2. To: {config_path}\n"
            f"3. Edit the profiles you need\n\n"
            f"Configuration directory priority:\n"
            f"  1. SQLCLAWS_CONFIG_DIR environment variable (if set)\n"
            f"  2. ~/.sqlclaws/ (dotfile directory)\n"
        )

        raise FileNotFoundError(error_msg)

    return config_path


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """
    Resolve the configuration file path.

    Args:
        path: Optional explicit path to settings.toml.
              If None, uses default resolution logic.

    Returns:
        Path: Resolved path object
    """
    if path:
        return Path(path)
    return get_default_config_path()


def get_example_config_path(filename: str = f"{SETTINGS_FILENAME}.example") -> Path:
    """
    Get path to an example configuration file from the package.

    Raises:
        FileNotFoundError: If the example file doesn't exist
    """
    example_path = _get_example_files_dir() / filename
    if not example_path.exists():
        raise FileNotFoundError(f"Example file not found: {example_path}")
    return example_path
