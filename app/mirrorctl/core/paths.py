"""XDG-compliant path management for mirrorctl.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and cache storage.

XDG defaults:
- Config: ~/.config/mirrorctl/  (also the root of the versioned mirror)
- Cache: ~/.cache/mirrorctl/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "mirrorctl"

PROFILE_FILENAME = "profile.toml"
THEME_FILENAME = "theme.toml"


def get_home_dir() -> Path:
    """Get the user's home directory.

    Returns:
        Path from $HOME, falling back to Path.home().
    """
    home = os.environ.get("HOME")
    if home:
        return Path(home)
    return Path.home()


def get_config_home(home: Path | None = None) -> Path:
    """Get the base configuration directory (not application specific).

    Args:
        home: Optional home directory override.

    Returns:
        $XDG_CONFIG_HOME if set, else <home>/.config.
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base)
    return (home or get_home_dir()) / ".config"


def get_cache_home(home: Path | None = None) -> Path:
    """Get the base cache directory (not application specific).

    Args:
        home: Optional home directory override.

    Returns:
        $XDG_CACHE_HOME if set, else <home>/.cache.
    """
    base = os.environ.get("XDG_CACHE_HOME")
    if base:
        return Path(base)
    return (home or get_home_dir()) / ".cache"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    This directory is also the mirror root holding the versioned copies
    of dotfiles and config directories.

    Returns:
        Path to ~/.config/mirrorctl/ (or XDG_CONFIG_HOME/mirrorctl/).
    """
    return get_config_home() / APP_NAME


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/mirrorctl/theme.toml.
    """
    return get_config_dir() / THEME_FILENAME

