"""XDG-compliant path management for tplsync.

This module provides standardized locations for the configuration file
and the default watched template directory.

XDG defaults:
- Config: ~/.config/tplsync/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "tplsync"

# Environment variable overriding the watched template directory
ROOT_ENV_VAR = "TPLSYNC_ROOT"

# Database file name, relative to the watched root
DEFAULT_DATABASE_NAME = "templates.csv"

# Only files ending in this suffix take part in reconciliation
TEMPLATE_SUFFIX = ".txt"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/tplsync/ (or XDG_CONFIG_HOME/tplsync/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/tplsync/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_default_root() -> Path:
    """Get the default watched template directory.

    Returns:
        Path to ~/Documents/Guild Wars/Templates/Skills.
    """
    return Path.home() / "Documents" / "Guild Wars" / "Templates" / "Skills"


def resolve_root(cli_root: Path | None = None, config_root: Path | None = None) -> Path:
    """Pick the watched template directory.

    Priority:
    1. Explicit command line value
    2. TPLSYNC_ROOT environment variable
    3. ``root`` from the configuration file
    4. The default Guild Wars skill template folder

    Args:
        cli_root: Root passed on the command line, if any.
        config_root: Root from the configuration file, if any.

    Returns:
        Expanded (but not necessarily existing) root path.
    """
    if cli_root is not None:
        return cli_root.expanduser()
    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        return Path(env_root).expanduser()
    if config_root is not None:
        return config_root.expanduser()
    return get_default_root()
