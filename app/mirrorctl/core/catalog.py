"""Catalog builder: the full list of files tracked by a profile.

The builder turns the declared features of a profile (shell dotfile,
built-in service files, per-package config directories) into tracked
files. Files are not deduplicated: overlapping declarations are a
profile error the caller must avoid.
"""

from __future__ import annotations

import logging
from pathlib import PurePath, PurePosixPath

from mirrorctl.core.env import Environment, MirrorPair
from mirrorctl.core.errors import DotfileNameError
from mirrorctl.core.walker import NO_FILTER, PathFilter, walk_pair
from mirrorctl.models.profile import ConfigDirSpec, Profile, SshAgent
from mirrorctl.models.tracked import MirroredFile, Owner, TrackedFile, VirtualFile

logger = logging.getLogger(__name__)

SSH_AGENT_SERVICE = "systemd/user/ssh-agent.service"
SSH_AGENT_ENVIRONMENT = "environment.d/ssh-agent.conf"
SSH_AGENT_ENVIRONMENT_CONTENT = "SSH_AUTH_SOCK=${XDG_RUNTIME_DIR}/ssh-agent.socket\n"


class CatalogBuilder:
    """Collects tracked files for one environment.

    Example:
        >>> env = Environment.build()
        >>> files = CatalogBuilder(env).build(load_profile(env.profile_path))
    """

    def __init__(self, env: Environment) -> None:
        """Initialize an empty builder.

        Args:
            env: Environment providing the mirror pairs.
        """
        self._env = env
        self._files: list[TrackedFile] = []

    @property
    def files(self) -> list[TrackedFile]:
        """Tracked files added so far."""
        return list(self._files)

    def add_file(self, file: TrackedFile) -> None:
        """Add a single tracked file."""
        self._files.append(file)

    def add_mirrored_file(self, owner: Owner, pair: MirrorPair, rel_path: PurePath | str) -> None:
        """Track one file below a mirror pair.

        Raises:
            PathError: If the path escapes either side of the pair.
        """
        real, mirror = pair.file_pair(rel_path)
        self.add_file(MirroredFile(owner=owner, real=real, mirror=mirror))

    def add_config_file(self, owner: Owner, rel_path: PurePath | str) -> None:
        """Track a file directly under ~/.config and its mirror."""
        self.add_mirrored_file(owner, self._env.config, rel_path)

    def add_virtual_file(self, owner: Owner, rel_path: PurePath | str, content: str) -> None:
        """Track a file under ~/.config that must contain a literal content."""
        self.add_file(
            VirtualFile(owner=owner, real=self._env.config.real.join(rel_path), expected=content)
        )

    def add_dotfile(self, owner: Owner, rel_path: PurePath | str) -> None:
        """Track a dotfile in the home directory.

        The mirror copy drops the leading dot, so ``.bashrc`` is stored as
        ``dotfiles/bashrc`` and does not hide itself in the mirror.

        Raises:
            DotfileNameError: If the file name does not start with '.'.
            PathError: If the path escapes either side.
        """
        rel = PurePosixPath(rel_path)
        if not rel.name.startswith(".") or rel.name in (".", ".."):
            raise DotfileNameError(rel_path)

        pair = self._env.dotfiles
        self.add_file(
            MirroredFile(
                owner=owner,
                real=pair.real.join(rel),
                mirror=pair.mirror.join(rel.with_name(rel.name[1:])),
            )
        )

    def add_dir(self, owner: Owner, pair: MirrorPair, real_filter: PathFilter = NO_FILTER) -> None:
        """Track every file found on either side of a directory pair.

        Raises:
            WalkError: If either tree cannot be walked.
            PathError: If a walked path escapes the pair.
        """
        for entry in walk_pair(pair, real_filter):
            self.add_mirrored_file(owner, pair, entry.rel_path)

    def add_package_config(self, name: str, spec: ConfigDirSpec) -> None:
        """Track a package's config directory under ~/.config.

        Args:
            name: Package name, also the default directory name.
            spec: Directory name override and exclusions.
        """
        pair = self._env.config.subpair(spec.name or name)
        logger.debug("Adding config dir for package %s: %s", name, pair.real)
        self.add_dir(Owner.for_package(name), pair, PathFilter(tuple(spec.exclude)))

    def build(self, profile: Profile) -> list[TrackedFile]:
        """Add every file declared by a profile and return the catalog.

        Args:
            profile: Validated profile.

        Returns:
            All tracked files, in declaration then walk order.

        Raises:
            MirrorError: On path, dotfile name or walk failures.
        """
        user = profile.profile

        if user.shell is not None:
            self.add_dotfile(Owner.shell(), user.shell.dotfile)

        if user.ssh is not None and user.ssh.agent == SshAgent.SYSTEMD:
            self.add_config_file(Owner.ssh(), SSH_AGENT_SERVICE)
            self.add_virtual_file(
                Owner.ssh(), SSH_AGENT_ENVIRONMENT, SSH_AGENT_ENVIRONMENT_CONTENT
            )

        for name, package in profile.packages.items():
            if package.config_dir is not None:
                self.add_package_config(name, package.config_dir)

        return self.files
