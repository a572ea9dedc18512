"""Package models for version resolution and update decisions.

This module defines the version union shared by the local probe and the
remote resolver, the status record combining them, and the spec that
identifies a crate and where it comes from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

import semver

from mirrorctl.core.errors import UnsupportedFormatError
from mirrorctl.models.profile import CratePackage, GitHubSource, Package, SourcePackage


class PackageSource(Enum):
    """Enumeration of supported package sources."""

    CARGO = "cargo"


@dataclass(frozen=True, slots=True)
class NoVersion:
    """The package does not exist (not installed, or nothing published)."""

    def __str__(self) -> str:
        return "-"


_SHORT_ID_LEN = 7


@dataclass(frozen=True, slots=True, eq=False)
class CommitVersion:
    """A VCS commit. Equality is by commit id only.

    cargo reports abbreviated hashes, so an abbreviated id equals any
    full id it is a prefix of.

    Attributes:
        id: Full or abbreviated commit hash.
        timestamp: Author date, when known.
    """

    id: str
    timestamp: datetime | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommitVersion):
            return NotImplemented
        a, b = self.id.lower(), other.id.lower()
        if len(a) < _SHORT_ID_LEN or len(b) < _SHORT_ID_LEN:
            return a == b
        return a.startswith(b) or b.startswith(a)

    def __hash__(self) -> int:
        return hash(self.id.lower()[:_SHORT_ID_LEN])

    @property
    def short_id(self) -> str:
        return self.id[:8]

    def __str__(self) -> str:
        if self.timestamp is None:
            return self.short_id
        return f"{self.short_id} ({self.timestamp:%Y-%m-%d})"


@dataclass(frozen=True, slots=True, order=True)
class SemverVersion:
    """A released version, compared by semantic-version rules.

    Attributes:
        version: Parsed version used for equality and ordering.
        raw: Version string as reported, without a leading 'v'.
    """

    version: semver.Version
    raw: str = field(compare=False)

    def __str__(self) -> str:
        return self.raw


PackageVersion = NoVersion | CommitVersion | SemverVersion

NO_VERSION = NoVersion()


def parse_version(text: str) -> SemverVersion:
    """Parse a version string, stripping an optional leading 'v'.

    Args:
        text: Version string such as ``v14.1.0`` or ``0.9.5-alpha.1``.

    Returns:
        SemverVersion for the string.

    Raises:
        UnsupportedFormatError: If the string is not a valid version.
    """
    raw = text.strip()
    raw = raw.removeprefix("v")
    try:
        return SemverVersion(semver.Version.parse(raw), raw)
    except ValueError as e:
        raise UnsupportedFormatError("version string", text) from e


@dataclass(frozen=True, slots=True)
class PackageStatus:
    """Installed, downloaded and latest versions of a package.

    Attributes:
        installed: Version installed locally.
        downloaded: Version of the local sources (not computed yet).
        latest: Latest version available remotely.
    """

    installed: PackageVersion
    downloaded: PackageVersion
    latest: PackageVersion

    @property
    def need_update(self) -> bool:
        """Check whether installing would change anything.

        True when a concrete latest version differs from the installed
        one, which includes the case where nothing is installed yet.
        """
        return not isinstance(self.latest, NoVersion) and self.latest != self.installed


def normalize_name(name: str) -> str:
    """Normalize a crate name so '-' and '_' compare equal."""
    return name.replace("_", "-")


@dataclass(frozen=True, slots=True)
class PackageSpec:
    """A crate to query or install, and where it comes from.

    Attributes:
        name: Normalized crate name.
        source: Optional GitHub source; None means the crates.io registry.
    """

    name: str
    source: GitHubSource | None = None

    def __post_init__(self) -> None:
        """Normalize the crate name."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        object.__setattr__(self, "name", normalize_name(self.name))

    @classmethod
    def from_package(cls, name: str, package: Package) -> PackageSpec:
        """Build a spec from a profile package entry.

        Args:
            name: Package key in the profile.
            package: Crate or source package definition.
        """
        if isinstance(package, SourcePackage):
            return cls(name, package.source)
        return cls(package.crate_name or name, package.source)

    @property
    def cache_name(self) -> str:
        """Cache key namespace unique to the source and crate."""
        source = self.source
        if source is None:
            return f"crates.io/{self.name}"
        base = f"github.com/{source.owner}/{source.repo}"
        if source.branch is not None:
            return f"{base}/branches/{source.branch}/crates/{self.name}"
        if source.tag is not None:
            return f"{base}/tags/{source.tag}/crates/{self.name}"
        if source.rev is not None:
            return f"{base}/revs/{source.rev}/crates/{self.name}"
        return f"{base}/default/crates/{self.name}"


def is_from_source(package: Package) -> bool:
    """Check whether a profile package is built from a source checkout."""
    return not isinstance(package, CratePackage)
