"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import errno
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from mirrorctl.core.env import Environment


@pytest.fixture
def mock_cargo_list_output() -> str:
    """Sample ``cargo install --list`` output for testing."""
    return """\
bat v0.24.0:
    bat
helix-term v25.1.0 (https://github.com/helix-editor/helix?branch=master#a1b2c3d4):
    hx
ripgrep v14.1.0:
    rg
scratch v0.1.0 (/home/zeldor/src/scratch):
    scratch
zellij_plugin v0.40.1:
    zellij-plugin
"""


@pytest.fixture
def mock_cargo_search_output() -> str:
    """Sample ``cargo search --limit=1 ripgrep`` output for testing."""
    return """\
ripgrep = "14.1.1"    # ripgrep is a line-oriented search tool that recursively searches...
... and 42 crates more (use --limit N to see more)
"""


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Create an empty home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def env(home: Path) -> Environment:
    """Build an environment rooted in the temporary home directory."""
    return Environment.build(
        home=home,
        config_home=home / ".config",
        cache_home=home / ".cache",
    )


@pytest.fixture
def isolated_home(home: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point $HOME at the temporary home and clear XDG overrides."""
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return home


@pytest.fixture
def write_profile(isolated_home: Path) -> Callable[[str], Path]:
    """Return a helper writing profile.toml into the isolated mirror root."""

    def write(content: str) -> Path:
        path = isolated_home / ".config/mirrorctl/profile.toml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return write


@pytest.fixture
def deny_stat(monkeypatch: pytest.MonkeyPatch) -> Callable[[Path], None]:
    """Return a helper making ``Path.stat`` fail with EACCES for a path.

    Works regardless of the user running the tests, unlike chmod.
    """
    denied: set[Path] = set()
    real_stat = Path.stat

    def stat(self: Path, *args: Any, **kwargs: Any) -> os.stat_result:
        if self in denied:
            raise PermissionError(errno.EACCES, "Permission denied", str(self))
        return real_stat(self, *args, **kwargs)

    monkeypatch.setattr(Path, "stat", stat)
    return denied.add
