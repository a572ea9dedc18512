"""Package status aggregation and updates.

Combines the local probe snapshot with the remote resolver into a
PackageStatus per declared package, and drives the installer.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from mirrorctl.core.errors import MirrorError, UnsupportedSourceError
from mirrorctl.models.package import (
    NO_VERSION,
    PackageSpec,
    PackageStatus,
    PackageVersion,
    is_from_source,
)
from mirrorctl.models.profile import Package
from mirrorctl.operators.base import Operator
from mirrorctl.remote.resolver import RemoteResolver
from mirrorctl.scanners.base import Scanner

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PackageReport:
    """Outcome of computing one package's status.

    Exactly one of ``status`` and ``error`` is set.

    Attributes:
        name: Package key in the profile.
        status: Computed status, if it succeeded.
        error: The error that prevented computing it.
    """

    name: str
    status: PackageStatus | None = None
    error: MirrorError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class PackageManager:
    """Answers "is this package up to date?" and installs updates.

    The installed-package snapshot is taken lazily on first use and
    rebuilt wholesale after every install.
    """

    def __init__(self, scanner: Scanner, resolver: RemoteResolver, operator: Operator) -> None:
        """Initialize the manager.

        Args:
            scanner: Local probe for installed packages.
            resolver: Remote lookup for the latest versions.
            operator: Installer used by install_update.
        """
        self._scanner = scanner
        self._resolver = resolver
        self._operator = operator
        self._snapshot: dict[str, PackageVersion] | None = None
        self._scan_error: MirrorError | None = None

    def refresh(self) -> dict[str, PackageVersion]:
        """Rebuild the installed-package snapshot.

        A failed scan is kept and re-raised by installed_version until the
        next refresh without running the scanner again.
        """
        logger.debug("Probing installed %s packages", self._scanner.source.value)
        self._snapshot = None
        self._scan_error = None
        try:
            self._snapshot = self._scanner.snapshot()
        except MirrorError as e:
            self._scan_error = e
            raise
        return self._snapshot

    def installed_version(self, spec: PackageSpec) -> PackageVersion:
        """Look up the installed version of a spec in the snapshot."""
        if self._scan_error is not None:
            raise self._scan_error
        snapshot = self._snapshot if self._snapshot is not None else self.refresh()
        return snapshot.get(spec.name, NO_VERSION)

    def status(self, name: str, package: Package) -> PackageStatus:
        """Compute the status of one declared package.

        Args:
            name: Package key in the profile.
            package: Package definition.

        Returns:
            Installed, downloaded and latest versions.

        Raises:
            MirrorError: If probing or resolving fails.
        """
        spec = PackageSpec.from_package(name, package)
        installed = NO_VERSION if is_from_source(package) else self.installed_version(spec)
        latest = self._resolver.latest_version(spec)
        return PackageStatus(installed=installed, downloaded=NO_VERSION, latest=latest)

    def status_all(self, packages: Mapping[str, Package]) -> list[PackageReport]:
        """Compute the status of every package, capturing errors per package.

        Args:
            packages: Declared packages keyed by name.

        Returns:
            One report per package in declaration order.
        """
        reports: list[PackageReport] = []
        for name, package in packages.items():
            try:
                reports.append(PackageReport(name, status=self.status(name, package)))
            except MirrorError as e:
                logger.debug("Failed to get status of %s: %s", name, e)
                reports.append(PackageReport(name, error=e))
        return reports

    def install_update(self, name: str, package: Package) -> PackageVersion:
        """Install or update a package, then re-probe.

        Args:
            name: Package key in the profile.
            package: Package definition.

        Returns:
            The installed version after the operation.

        Raises:
            UnsupportedSourceError: If the package is built from source.
            ShellCommandError: If the installer or probe fails.
        """
        if is_from_source(package):
            msg = f"Package {name!r} is built from source and cannot be installed automatically"
            raise UnsupportedSourceError(msg)

        spec = PackageSpec.from_package(name, package)
        self._operator.install(spec)
        self.refresh()
        return self.installed_version(spec)

    def close(self) -> None:
        """Close the resolver's HTTP client."""
        self._resolver.close()
