"""Mirror pairs and the per-run environment.

The environment is computed once per run from the OS (or an explicit
home directory in tests) and is immutable afterwards:

- ``~/.config``  <->  ``~/.config/mirrorctl/config``
- ``~/``         <->  ``~/.config/mirrorctl/dotfiles``
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePath

from mirrorctl.core.anchored import AnchoredPath
from mirrorctl.core.paths import (
    APP_NAME,
    PROFILE_FILENAME,
    get_cache_home,
    get_config_home,
    get_home_dir,
)


@dataclass(frozen=True, slots=True)
class MirrorPair:
    """The same logical location on the real filesystem and in the mirror.

    Attributes:
        real: Location on the live system (e.g. ``~/.config/helix``).
        mirror: Versioned copy (e.g. ``~/.config/mirrorctl/config/helix``).
    """

    real: AnchoredPath
    mirror: AnchoredPath

    def subpair(self, relative: PurePath | str) -> MirrorPair:
        """Join the same relative path onto both sides.

        Raises:
            PathError: If either side would escape its anchor.
        """
        return MirrorPair(real=self.real.join(relative), mirror=self.mirror.join(relative))

    def file_pair(self, relative: PurePath | str) -> tuple[AnchoredPath, AnchoredPath]:
        """Return the (real, mirror) paths of a single file below this pair.

        Raises:
            PathError: If either side would escape its anchor.
        """
        return self.real.join(relative), self.mirror.join(relative)


@dataclass(frozen=True, slots=True)
class Environment:
    """Pre-computed directories for one run.

    Attributes:
        home: The user's home directory.
        config: ``~/.config`` paired with ``<mirror_root>/config``.
        dotfiles: ``~/`` paired with ``<mirror_root>/dotfiles``.
        mirror_root: ``~/.config/mirrorctl`` rebased as its own anchor.
        cache_root: ``~/.cache/mirrorctl``.
    """

    home: AnchoredPath
    config: MirrorPair
    dotfiles: MirrorPair
    mirror_root: AnchoredPath
    cache_root: AnchoredPath

    @property
    def profile_path(self) -> AnchoredPath:
        """The profile file inside the mirror root."""
        return self.mirror_root.join(PROFILE_FILENAME)

    @classmethod
    def build(
        cls,
        home: Path | None = None,
        config_home: Path | None = None,
        cache_home: Path | None = None,
    ) -> Environment:
        """Build the environment, filling missing directories from the OS.

        Args:
            home: Home directory. Defaults to $HOME.
            config_home: Base config directory. Defaults to $XDG_CONFIG_HOME
                or ``<home>/.config``.
            cache_home: Base cache directory. Defaults to $XDG_CACHE_HOME
                or ``<home>/.cache``.

        Returns:
            Environment with all mirror pairs resolved.

        Raises:
            PathError: If any directory is not absolute.
        """
        home_dir = home or get_home_dir()
        user_home = AnchoredPath(home_dir)
        user_config = AnchoredPath(config_home or get_config_home(home_dir))
        user_cache = AnchoredPath(cache_home or get_cache_home(home_dir))

        mirror_root = user_config.join(APP_NAME).rebase()

        return cls(
            home=user_home,
            config=MirrorPair(real=user_config, mirror=mirror_root.join("config")),
            dotfiles=MirrorPair(real=user_home, mirror=mirror_root.join("dotfiles")),
            mirror_root=mirror_root,
            cache_root=user_cache.join(APP_NAME).rebase(),
        )
