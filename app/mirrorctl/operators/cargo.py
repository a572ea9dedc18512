"""Cargo package operator implementation.

Installs and updates crates with ``cargo install``, either from the
crates.io registry or from a GitHub repository.
"""

import logging
import subprocess

from mirrorctl.core.errors import ShellCommandError
from mirrorctl.models.package import PackageSource, PackageSpec
from mirrorctl.operators.base import Operator
from mirrorctl.utils.shell import command_exists, run_interactive

logger = logging.getLogger(__name__)


def build_install_args(spec: PackageSpec) -> list[str]:
    """Build the ``cargo install`` command line for a spec.

    Args:
        spec: Package to install.

    Returns:
        Command and arguments, e.g.
        ``["cargo", "install", "--git", URL, "--branch", "master", "helix-term"]``.
    """
    args = ["cargo", "install"]
    source = spec.source
    if source is not None:
        args.extend(["--git", source.git_url])
        if source.branch is not None:
            args.extend(["--branch", source.branch])
        elif source.tag is not None:
            args.extend(["--tag", source.tag])
        elif source.rev is not None:
            args.extend(["--rev", source.rev])
    args.append(spec.name)
    return args


class CargoOperator(Operator):
    """Operator for crates installed with cargo.

    Build output is streamed to the terminal since compiling can take
    several minutes.
    """

    # Timeout for cargo builds (30 minutes)
    _INSTALL_TIMEOUT: float = 1800.0

    @property
    def source(self) -> PackageSource:
        """Return CARGO as the package source."""
        return PackageSource.CARGO

    def is_available(self) -> bool:
        """Check if cargo is available."""
        return command_exists("cargo")

    def install(self, spec: PackageSpec) -> None:
        """Install or update a crate.

        Args:
            spec: Crate to install.

        Raises:
            ShellCommandError: If cargo cannot be run, times out or fails.
        """
        args = build_install_args(spec)

        if self.dry_run:
            logger.info("Dry-run: Would run %s", " ".join(args))
            return

        logger.info("Installing crate: %s", spec.name)
        try:
            returncode = run_interactive(args, timeout=self._INSTALL_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ShellCommandError("cargo install", str(e)) from e

        if returncode != 0:
            raise ShellCommandError("cargo install", f"returned status {returncode}")
