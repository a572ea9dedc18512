"""Diff command implementation.

Shows a unified diff between a tracked file's mirror and its real
counterpart.
"""

import difflib
import os
from pathlib import Path
from typing import Annotated

import typer
from rich.syntax import Syntax

from mirrorctl.cli.context import (
    build_catalog,
    exit_on_error,
    load_environment,
    load_user_profile,
)
from mirrorctl.core.anchored import AnchoredPath
from mirrorctl.core.errors import FileReadError, Side
from mirrorctl.models.tracked import MirroredFile, TrackedFile
from mirrorctl.utils.formatting import console, print_error, print_success


def _read_side(path: AnchoredPath, side: Side) -> list[str]:
    """Read one side of a tracked file as lines, treating a missing file as empty.

    Raises:
        FileReadError: If the file cannot be checked or read.
    """
    try:
        if not path.exists():
            return []
        data = path.read_bytes()
    except OSError as e:
        raise FileReadError(side, path.path, e.strerror or str(e)) from e
    return data.decode("utf-8", errors="replace").splitlines(keepends=True)


def _find_tracked(files: list[TrackedFile], target: Path) -> TrackedFile | None:
    """Find the tracked file whose real or mirror path is target."""
    for file in files:
        if file.real.path == target:
            return file
        if isinstance(file, MirroredFile) and file.mirror.path == target:
            return file
    return None


def compute_diff(file: TrackedFile) -> list[str]:
    """Compute the unified diff from mirror (old) to real (new).

    Args:
        file: Tracked file to compare.

    Returns:
        Diff lines; empty when both sides match.

    Raises:
        FileReadError: If either side cannot be read.
    """
    if isinstance(file, MirroredFile):
        expected = _read_side(file.mirror, Side.MIRROR)
        expected_name = str(file.mirror.path)
    else:
        expected = file.expected.splitlines(keepends=True)
        expected_name = "(expected)"

    actual = _read_side(file.real, Side.REAL)
    return list(
        difflib.unified_diff(expected, actual, fromfile=expected_name, tofile=str(file.real.path))
    )


def diff_file(
    path: Annotated[
        Path,
        typer.Argument(help="Real or mirror path of a tracked file."),
    ],
) -> None:
    """Show how a tracked file differs from its mirror.

    Examples:
        mirrorctl diff ~/.bashrc
        mirrorctl diff ~/.config/helix/config.toml
    """
    env = load_environment()
    profile = load_user_profile(env)
    files = build_catalog(env, profile)

    target = Path(os.path.abspath(os.path.expanduser(path)))
    file = _find_tracked(files, target)
    if file is None:
        print_error(f"Not a tracked file: {target}")
        raise typer.Exit(code=1)

    with exit_on_error():
        lines = compute_diff(file)

    if not lines:
        print_success("No differences.")
        return

    console.print(Syntax("".join(lines), "diff", theme="ansi_dark", background_color="default"))
