"""Tracked file models.

A tracked file is one unit of reconciliation between a real location and
its mirror: either another file (MirroredFile) or a literal string the
real file is expected to contain (VirtualFile).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mirrorctl.core.anchored import AnchoredPath


class OwnerKind(str, Enum):
    """Subsystem that declared a tracked file."""

    SHELL = "shell"
    SSH = "ssh"
    PACKAGE = "package"


@dataclass(frozen=True, slots=True)
class Owner:
    """Provenance tag on a tracked file, used only for grouping and display.

    Attributes:
        kind: Built-in subsystem or PACKAGE.
        package: Package name when kind is PACKAGE, else None.
    """

    kind: OwnerKind
    package: str | None = None

    def __post_init__(self) -> None:
        """Validate that only package owners carry a package name."""
        if (self.kind == OwnerKind.PACKAGE) != (self.package is not None):
            msg = f"Owner kind {self.kind.value} and package {self.package!r} do not match"
            raise ValueError(msg)

    @classmethod
    def shell(cls) -> Owner:
        return cls(OwnerKind.SHELL)

    @classmethod
    def ssh(cls) -> Owner:
        return cls(OwnerKind.SSH)

    @classmethod
    def for_package(cls, name: str) -> Owner:
        return cls(OwnerKind.PACKAGE, name)

    def __str__(self) -> str:
        if self.package is not None:
            return self.package
        return self.kind.value


@dataclass(frozen=True, slots=True)
class MirroredFile:
    """A real file paired with its versioned copy in the mirror."""

    owner: Owner
    real: AnchoredPath
    mirror: AnchoredPath


@dataclass(frozen=True, slots=True)
class VirtualFile:
    """A real file whose mirror is a literal expected content."""

    owner: Owner
    real: AnchoredPath
    expected: str


TrackedFile = MirroredFile | VirtualFile
