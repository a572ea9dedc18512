"""Abstract base class for local package probes.

This module defines the Scanner interface that every package-manager
probe must implement, so the status aggregator can be driven by a test
double instead of a real package manager.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass

from mirrorctl.models.package import PackageSource, PackageVersion, normalize_name


@dataclass(frozen=True, slots=True)
class InstalledPackage:
    """A package reported as installed by a package manager.

    Attributes:
        name: Normalized package name.
        version: Installed version.
    """

    name: str
    version: PackageVersion


class Scanner(ABC):
    """Abstract base class for all package scanners.

    Scanners query a package manager once and yield every package it
    reports as installed.

    Example:
        >>> scanner = CargoScanner()
        >>> if scanner.is_available():
        ...     snapshot = scanner.snapshot()
        ...     print(snapshot.get("ripgrep"))
    """

    @property
    @abstractmethod
    def source(self) -> PackageSource:
        """Return the package source this scanner handles."""

    @abstractmethod
    def scan(self) -> Iterator[InstalledPackage]:
        """Scan and yield all installed packages from this source.

        Raises:
            ShellCommandError: If the package manager fails.
            UnsupportedFormatError: If its output cannot be parsed.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system."""

    def snapshot(self) -> dict[str, PackageVersion]:
        """Build a fresh name -> version map of installed packages.

        Returns:
            Mapping keyed by normalized package name.
        """
        return {normalize_name(pkg.name): pkg.version for pkg in self.scan()}
