"""Abstract base class for package operators.

This module defines the Operator interface that package installers
implement.
"""

from abc import ABC, abstractmethod

from mirrorctl.models.package import PackageSource, PackageSpec


class Operator(ABC):
    """Abstract base class for all package operators.

    Operators install or update a single package at a time and raise on
    failure, so the caller can re-probe only after a successful run.

    Attributes:
        dry_run: If True, only log the command without executing it.

    Example:
        >>> operator = CargoOperator(dry_run=True)
        >>> if operator.is_available():
        ...     operator.install(PackageSpec("ripgrep"))
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only simulate actions without executing them.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @property
    @abstractmethod
    def source(self) -> PackageSource:
        """Return the package source this operator handles."""

    @abstractmethod
    def install(self, spec: PackageSpec) -> None:
        """Install a package or update it to its latest version.

        Args:
            spec: Package to install.

        Raises:
            ShellCommandError: If the installer fails.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system."""
