"""Anchored paths: absolute paths that can never leave their base directory.

An AnchoredPath is either exactly its anchor or a validated descendant of
it. Every join is normalized lexically (``.`` and ``..`` are resolved
without touching the filesystem) and checked against the anchor, so a
config value such as ``../../etc`` can never redirect a read or a walk
outside the directory it was meant for.

Example:
    >>> home = AnchoredPath(Path("/home/zeldor"))
    >>> home.join(".config/helix").relative_part()
    '.config/helix'
    >>> home.join("../root")
    Traceback (most recent call last):
    ...
    PathError: Path /home/root is not based on /home/zeldor
"""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from pathlib import Path, PurePath

from mirrorctl.core.errors import PathError

_ABSENT_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR, errno.ELOOP})


def _normalize(path: PurePath | str) -> Path:
    return Path(os.path.normpath(path))


def _is_within(path: Path, anchor: Path) -> bool:
    return path == anchor or anchor in path.parents


@dataclass(frozen=True, slots=True)
class AnchoredPath:
    """An absolute path validated against an immutable anchor directory.

    Attributes:
        anchor: Absolute, normalized base directory.
        suffix: Optional relative extension below the anchor.
    """

    anchor: Path
    suffix: PurePath | None = None

    def __post_init__(self) -> None:
        """Validate and normalize the anchor and suffix."""
        if "\x00" in str(self.anchor) or not PurePath(self.anchor).is_absolute():
            raise PathError(self.anchor)
        object.__setattr__(self, "anchor", _normalize(self.anchor))

        if self.suffix is None:
            return
        suffix = PurePath(os.path.normpath(self.suffix))
        if suffix.is_absolute() or suffix.parts[:1] == ("..",):
            raise PathError(self.anchor / self.suffix, self.anchor)
        object.__setattr__(self, "suffix", None if suffix == PurePath(".") else suffix)

    @property
    def path(self) -> Path:
        """Return the effective absolute path."""
        if self.suffix is None:
            return self.anchor
        return self.anchor / self.suffix

    def join(self, relative: PurePath | str) -> AnchoredPath:
        """Join a relative path onto the effective path.

        Args:
            relative: Relative path to append.

        Returns:
            New AnchoredPath sharing this anchor.

        Raises:
            PathError: If ``relative`` is absolute, contains a NUL byte, or
                the joined path resolves outside the anchor.
        """
        rel = PurePath(relative)
        if rel.is_absolute() or "\x00" in str(relative):
            raise PathError(relative, self.anchor)

        joined = _normalize(self.path / rel)
        if not _is_within(joined, self.anchor):
            raise PathError(joined, self.anchor)
        return self._with_path(joined)

    def set_exact(self, absolute: PurePath | str) -> AnchoredPath:
        """Replace the effective path with an exact absolute path.

        Raises:
            PathError: If the path is not absolute or not below the anchor.
        """
        if "\x00" in str(absolute) or not PurePath(absolute).is_absolute():
            raise PathError(absolute)

        target = _normalize(absolute)
        if not _is_within(target, self.anchor):
            raise PathError(target, self.anchor)
        return self._with_path(target)

    def rebase(self) -> AnchoredPath:
        """Make the effective path the anchor of a new AnchoredPath."""
        return AnchoredPath(self.path)

    def relative_part(self) -> str:
        """Return the suffix relative to the anchor, or '' when there is none."""
        if self.suffix is None:
            return ""
        return self.suffix.as_posix()

    def exists(self) -> bool:
        """Check whether the effective path exists (symlinks are followed).

        A missing path or a dangling symlink is reported as absent. Any other
        failure to stat the path, such as an unreadable parent directory, is
        raised.

        Raises:
            OSError: If the path cannot be checked (e.g. EACCES).
        """
        try:
            self.path.stat()
        except OSError as e:
            if e.errno in _ABSENT_ERRNOS:
                return False
            raise
        return True

    def read_bytes(self) -> bytes:
        """Read the file at the effective path."""
        return self.path.read_bytes()

    def _with_path(self, path: Path) -> AnchoredPath:
        if path == self.anchor:
            return AnchoredPath(self.anchor)
        return AnchoredPath(self.anchor, path.relative_to(self.anchor))

    def __fspath__(self) -> str:
        return str(self.path)

    def __str__(self) -> str:
        return str(self.path)
