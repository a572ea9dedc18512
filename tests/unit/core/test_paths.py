"""Unit tests for XDG path helpers and the environment."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from mirrorctl.core.env import Environment
from mirrorctl.core.errors import PathError
from mirrorctl.core.paths import (
    get_cache_home,
    get_config_dir,
    get_config_home,
    get_theme_path,
)


class TestXdgPaths:
    """Tests for XDG base directory resolution."""

    def test_config_home_default(self, tmp_path: Path) -> None:
        """Without XDG_CONFIG_HOME, config lives under ~/.config."""
        with patch.dict(os.environ, {"HOME": str(tmp_path)}, clear=True):
            assert get_config_home() == tmp_path / ".config"
            assert get_config_dir() == tmp_path / ".config/mirrorctl"

    def test_config_home_override(self, tmp_path: Path) -> None:
        """XDG_CONFIG_HOME overrides the config base."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path / "xdg")}):
            assert get_config_home() == tmp_path / "xdg"
            assert get_theme_path() == tmp_path / "xdg/mirrorctl/theme.toml"

    def test_cache_home_default(self, tmp_path: Path) -> None:
        """Without XDG_CACHE_HOME, the cache lives under ~/.cache."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_cache_home(tmp_path) == tmp_path / ".cache"

    def test_cache_home_override(self, tmp_path: Path) -> None:
        """XDG_CACHE_HOME overrides the cache base."""
        with patch.dict(os.environ, {"XDG_CACHE_HOME": str(tmp_path / "c")}):
            assert get_cache_home() == tmp_path / "c"


class TestEnvironment:
    """Tests for Environment.build."""

    def test_layout(self, env: Environment, home: Path) -> None:
        """Mirror pairs follow the documented layout."""
        assert env.home.path == home
        assert env.config.real.path == home / ".config"
        assert env.config.mirror.path == home / ".config/mirrorctl/config"
        assert env.dotfiles.real.path == home
        assert env.dotfiles.mirror.path == home / ".config/mirrorctl/dotfiles"
        assert env.profile_path.path == home / ".config/mirrorctl/profile.toml"
        assert env.profile_path.anchor == env.mirror_root.anchor
        assert env.cache_root.path == home / ".cache/mirrorctl"

    def test_mirror_root_is_rebased(self, env: Environment) -> None:
        """Joins on the mirror root cannot leave it."""
        with pytest.raises(PathError):
            env.mirror_root.join("../helix")

    def test_from_os(self, tmp_path: Path) -> None:
        """Defaults come from HOME and the XDG variables."""
        with patch.dict(
            os.environ,
            {"HOME": str(tmp_path), "XDG_CONFIG_HOME": str(tmp_path / "cfg")},
            clear=True,
        ):
            env = Environment.build()

        assert env.config.real.path == tmp_path / "cfg"
        assert env.cache_root.path == tmp_path / ".cache/mirrorctl"

    def test_subpair(self, env: Environment, home: Path) -> None:
        """Sub-pairs join the same path on both sides."""
        pair = env.config.subpair("helix")
        assert pair.real.path == home / ".config/helix"
        assert pair.mirror.path == home / ".config/mirrorctl/config/helix"
