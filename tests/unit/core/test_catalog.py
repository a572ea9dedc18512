"""Unit tests for the catalog builder."""

from pathlib import Path

import pytest
from mirrorctl.core.catalog import (
    SSH_AGENT_ENVIRONMENT_CONTENT,
    CatalogBuilder,
)
from mirrorctl.core.env import Environment
from mirrorctl.core.errors import DotfileNameError, PathError
from mirrorctl.models.profile import ConfigDirSpec, Profile
from mirrorctl.models.tracked import MirroredFile, Owner, OwnerKind, VirtualFile


def _touch(path: Path, content: str = "x") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def _profile(**profile: object) -> Profile:
    user = {"username": "zeldor", "name": "Zeldon", "email": "z@example.com"}
    return Profile.model_validate({"profile": user | profile.pop("user", {}), **profile})


class TestDotfiles:
    """Tests for add_dotfile."""

    def test_mirror_name_drops_leading_dot(self, env: Environment, home: Path) -> None:
        """.bashrc is mirrored as dotfiles/bashrc."""
        builder = CatalogBuilder(env)
        builder.add_dotfile(Owner.shell(), ".bashrc")

        [file] = builder.files
        assert isinstance(file, MirroredFile)
        assert file.real.path == home / ".bashrc"
        assert file.mirror.path == home / ".config/mirrorctl/dotfiles/bashrc"

    def test_nested_dotfile(self, env: Environment, home: Path) -> None:
        """Only the file name loses its dot."""
        builder = CatalogBuilder(env)
        builder.add_dotfile(Owner.shell(), ".local/.profile")

        [file] = builder.files
        assert isinstance(file, MirroredFile)
        assert file.mirror.path == home / ".config/mirrorctl/dotfiles/.local/profile"

    def test_name_without_dot_rejected(self, env: Environment) -> None:
        """Dotfile names must start with '.'."""
        with pytest.raises(DotfileNameError):
            CatalogBuilder(env).add_dotfile(Owner.shell(), "bashrc")

    def test_escape_rejected(self, env: Environment) -> None:
        """Dotfiles outside the home directory are rejected."""
        with pytest.raises(PathError):
            CatalogBuilder(env).add_dotfile(Owner.shell(), "../.bashrc")


class TestConfigFiles:
    """Tests for config and virtual files."""

    def test_config_file(self, env: Environment, home: Path) -> None:
        """Config files pair ~/.config with <mirror>/config."""
        builder = CatalogBuilder(env)
        builder.add_config_file(Owner.ssh(), "systemd/user/ssh-agent.service")

        [file] = builder.files
        assert isinstance(file, MirroredFile)
        assert file.real.path == home / ".config/systemd/user/ssh-agent.service"
        mirror_root = home / ".config/mirrorctl"
        assert file.mirror.path == mirror_root / "config/systemd/user/ssh-agent.service"

    def test_virtual_file(self, env: Environment, home: Path) -> None:
        """Virtual files live under ~/.config with a literal content."""
        builder = CatalogBuilder(env)
        builder.add_virtual_file(Owner.ssh(), "environment.d/x.conf", "A=1\n")

        [file] = builder.files
        assert isinstance(file, VirtualFile)
        assert file.real.path == home / ".config/environment.d/x.conf"
        assert file.expected == "A=1\n"


class TestPackageConfig:
    """Tests for add_package_config and add_dir."""

    def test_one_file_per_walk_entry(self, env: Environment, home: Path) -> None:
        """Every file on either side becomes a tracked file."""
        _touch(home / ".config/helix/config.toml")
        _touch(home / ".config/helix/runtime/grammar.so")
        _touch(home / ".config/mirrorctl/config/helix/languages.toml")

        builder = CatalogBuilder(env)
        builder.add_package_config("helix", ConfigDirSpec(exclude=["runtime/"]))

        files = builder.files
        assert [f.real.path for f in files] == [
            home / ".config/helix/config.toml",
            home / ".config/helix/languages.toml",
        ]
        assert all(f.owner == Owner.for_package("helix") for f in files)

    def test_name_override(self, env: Environment, home: Path) -> None:
        """config_dir.name overrides the package name."""
        _touch(home / ".config/hx/config.toml")

        builder = CatalogBuilder(env)
        builder.add_package_config("helix", ConfigDirSpec(name="hx"))

        [file] = builder.files
        assert file.real.path == home / ".config/hx/config.toml"

    def test_escaping_name_rejected(self, env: Environment) -> None:
        """A directory name that escapes ~/.config is rejected."""
        with pytest.raises(PathError):
            CatalogBuilder(env).add_package_config("evil", ConfigDirSpec(name="../../etc"))


class TestBuild:
    """Tests for CatalogBuilder.build."""

    def test_bash_profile(self, env: Environment) -> None:
        """shell = bash tracks .bashrc."""
        files = CatalogBuilder(env).build(_profile(user={"shell": "bash"}))

        [file] = files
        assert file.owner.kind == OwnerKind.SHELL
        assert file.real.relative_part() == ".bashrc"

    def test_zsh_profile(self, env: Environment) -> None:
        """shell = zsh tracks .zshrc."""
        [file] = CatalogBuilder(env).build(_profile(user={"shell": "zsh"}))
        assert file.real.relative_part() == ".zshrc"

    def test_ssh_agent(self, env: Environment) -> None:
        """The systemd agent adds the service file and the environment file."""
        files = CatalogBuilder(env).build(_profile(user={"ssh": {"agent": "systemd"}}))

        service, environment = files
        assert isinstance(service, MirroredFile)
        assert service.real.relative_part() == "systemd/user/ssh-agent.service"
        assert isinstance(environment, VirtualFile)
        assert environment.real.relative_part() == "environment.d/ssh-agent.conf"
        assert environment.expected == SSH_AGENT_ENVIRONMENT_CONTENT

    def test_packages_with_config_dir(self, env: Environment, home: Path) -> None:
        """Only packages with a config_dir contribute files."""
        _touch(home / ".config/helix/config.toml")
        _touch(home / ".config/ripgrep/rc")
        profile = _profile(
            packages={
                "helix": {"type": "crate", "config_dir": {}},
                "ripgrep": {"type": "crate"},
            }
        )

        files = CatalogBuilder(env).build(profile)

        assert [f.real.path for f in files] == [home / ".config/helix/config.toml"]

    def test_empty_profile(self, env: Environment) -> None:
        """A profile with nothing declared tracks nothing."""
        assert CatalogBuilder(env).build(_profile()) == []
