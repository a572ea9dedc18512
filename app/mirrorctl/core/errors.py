"""Exception hierarchy for mirrorctl.

Every error the core raises derives from MirrorError so the CLI can
render it uniformly. Cache failures have no error type: the cache layer
logs them and recomputes.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath


class MirrorError(Exception):
    """Base exception for all mirrorctl errors."""


class PathError(MirrorError):
    """Raised when a computed path would escape its anchor or is not absolute.

    Attributes:
        path: The offending path.
        anchor: The anchor it was validated against (None for non-absolute input).
    """

    def __init__(self, path: PurePath | str, anchor: PurePath | None = None) -> None:
        self.path = str(path)
        self.anchor = anchor
        if anchor is None:
            msg = f"Path must be absolute: {self.path}"
        else:
            msg = f"Path {self.path} is not based on {anchor}"
        super().__init__(msg)


class DotfileNameError(MirrorError):
    """Raised when a dotfile name does not start with a '.'."""

    def __init__(self, path: PurePath | str) -> None:
        self.path = str(path)
        super().__init__(f"Dotfile name must start with '.': {self.path}")


class Side(str, Enum):
    """Which side of a mirror pair an I/O operation touched."""

    REAL = "real"
    MIRROR = "mirror"


class FileReadError(MirrorError):
    """Raised when reading one side of a tracked file fails.

    Attributes:
        side: Whether the real or the mirror file failed.
        path: Path of the file that could not be read.
    """

    def __init__(self, side: Side, path: PurePath | str, reason: str) -> None:
        self.side = side
        self.path = str(path)
        super().__init__(f"Failed to read {side.value} file {self.path}: {reason}")


class WalkError(MirrorError):
    """Raised when walking a directory tree fails (e.g. permission denied)."""

    def __init__(self, path: PurePath | str, reason: str) -> None:
        self.path = str(path)
        super().__init__(f"Failed to walk {self.path}: {reason}")


class HttpRequestError(MirrorError):
    """Raised on transport failure or a non-success HTTP status."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"Request to {url} failed: {reason}")


class HttpDecodeError(MirrorError):
    """Raised when a response body cannot be decoded into the expected shape."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"Failed to decode response from {url}: {reason}")


class ShellCommandError(MirrorError):
    """Raised when an external command cannot be spawned or exits non-zero.

    Attributes:
        command: Human-readable command name (e.g. "cargo install --list").
        output: Captured output or spawn error text.
    """

    def __init__(self, command: str, output: str) -> None:
        self.command = command
        self.output = output
        super().__init__(f"Command '{command}' failed: {output}")


class UnsupportedFormatError(MirrorError):
    """Raised when external tool output does not match the expected grammar."""

    def __init__(self, what: str, text: str) -> None:
        self.what = what
        self.text = text
        super().__init__(f"Unsupported {what}: {text!r}")


class UnsupportedSourceError(MirrorError):
    """Raised when an operation is not available for a package's source."""
