"""CLI commands for mirrorctl.

This package contains all subcommand implementations.
"""

from mirrorctl.cli.commands import diff, files, init, packages, show, status, update

__all__ = ["diff", "files", "init", "packages", "show", "status", "update"]
