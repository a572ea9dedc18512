"""Cargo package scanner implementation.

Parses ``cargo install --list``, whose output is a header line per
installed crate followed by indented binary names::

    ripgrep v14.1.0:
        rg
    helix-term v25.1.0 (https://github.com/helix-editor/helix?branch=master#a1b2c3d4):
        hx
    scratch v0.1.0 (/home/zeldor/src/scratch):
        scratch

Header grammar: ``<name> <version> [(<source>)]:``. Crates installed from
a local path are left out of the snapshot; crates installed from git are
recorded by commit so they can be compared with the remote head.
"""

import logging
import re
from collections.abc import Iterator

from mirrorctl.core.errors import UnsupportedFormatError
from mirrorctl.models.package import (
    CommitVersion,
    PackageSource,
    PackageVersion,
    normalize_name,
    parse_version,
)
from mirrorctl.scanners.base import InstalledPackage, Scanner
from mirrorctl.utils.shell import command_exists, run_checked

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(r"^(\S+)\s+(\S+)(?:\s+\(([^)]+)\))?:$")


class CargoScanner(Scanner):
    """Scanner for crates installed with ``cargo install``."""

    _LIST_TIMEOUT: float = 60.0

    @property
    def source(self) -> PackageSource:
        """Return CARGO as the package source."""
        return PackageSource.CARGO

    def is_available(self) -> bool:
        """Check if cargo is available."""
        return command_exists("cargo")

    def scan(self) -> Iterator[InstalledPackage]:
        """Scan all crates installed with cargo.

        Yields:
            InstalledPackage for each registry or git install.

        Raises:
            ShellCommandError: If ``cargo install --list`` fails.
            UnsupportedFormatError: If a line does not match the grammar.
        """
        output = run_checked(
            ["cargo", "install", "--list"],
            "cargo install --list",
            timeout=self._LIST_TIMEOUT,
        )
        yield from parse_install_list(output)


def parse_install_list(output: str) -> Iterator[InstalledPackage]:
    """Parse the text printed by ``cargo install --list``.

    Args:
        output: Full command output.

    Yields:
        InstalledPackage per header line, except local-path installs.

    Raises:
        UnsupportedFormatError: If a non-indented line is not a header.
    """
    for line in output.splitlines():
        if not line or line[0].isspace():
            continue

        match = _HEADER_RE.match(line)
        if match is None:
            raise UnsupportedFormatError("cargo install --list line", line)

        name, version, annotation = match.groups()
        if annotation is None:
            yield InstalledPackage(normalize_name(name), parse_version(version))
            continue

        installed = _version_from_annotation(version, annotation)
        if installed is None:
            # TODO: report path installs as "downloaded" once local clones are tracked
            logger.debug("Skipping %s installed from local path %s", name, annotation)
            continue
        yield InstalledPackage(normalize_name(name), installed)


def _version_from_annotation(version: str, annotation: str) -> PackageVersion | None:
    """Interpret the parenthesized source of a header line.

    Returns:
        None for local path installs, CommitVersion for git installs
        that carry a commit, otherwise the parsed version.
    """
    if annotation.startswith(("/", "path+")):
        return None

    _url, sep, commit = annotation.rpartition("#")
    if sep and commit:
        return CommitVersion(commit)
    return parse_version(version)
