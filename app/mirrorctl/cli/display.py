"""Shared Rich display functions for tracked files and packages.

Provides table builders and summary printers used by the status, files,
packages and update commands.
"""

from pathlib import Path

from rich.markup import escape
from rich.table import Table

from mirrorctl.core.packages import PackageReport
from mirrorctl.core.status import FileStatus, StatusKind, StatusReport
from mirrorctl.models.package import CommitVersion, NoVersion, PackageStatus, PackageVersion
from mirrorctl.models.tracked import MirroredFile, TrackedFile
from mirrorctl.utils.formatting import console, create_table

_STATUS_LABELS: dict[StatusKind, tuple[str, str]] = {
    StatusKind.UP_TO_DATE: ("up to date", "status.ok"),
    StatusKind.MISSING_FROM_BOTH: ("missing", "status.missing"),
    StatusKind.REAL_ONLY: ("real only", "status.pending"),
    StatusKind.MIRROR_ONLY: ("mirror only", "status.pending"),
    StatusKind.MODIFIED: ("modified", "status.modified"),
    StatusKind.ERROR_READING_REAL: ("error reading real", "status.error"),
    StatusKind.ERROR_READING_MIRROR: ("error reading mirror", "status.error"),
}


def display_path(path: Path, home: Path) -> str:
    """Shorten a path below the home directory to ``~/...``."""
    try:
        return f"~/{path.relative_to(home)}"
    except ValueError:
        return str(path)


def format_file_status(status: FileStatus) -> str:
    """Format a file status with color markup."""
    label, style = _STATUS_LABELS[status.kind]
    if status.error is not None:
        label = f"{label} ({status.error})"
    return f"[{style}]{label}[/{style}]"


def format_version(version: PackageVersion) -> str:
    """Format a package version, dimming the absent version."""
    if isinstance(version, NoVersion):
        return "[muted]-[/muted]"
    return f"[version]{escape(str(version))}[/version]"


def format_package_status(status: PackageStatus) -> str:
    """Summarize whether a package needs an update."""
    if not status.need_update:
        return "[status.ok]up to date[/status.ok]"
    if isinstance(status.installed, NoVersion):
        return "[status.missing]not installed[/status.missing]"
    return "[status.pending]update available[/status.pending]"


def create_files_table(report: StatusReport, home: Path, *, show_all: bool = False) -> Table:
    """Create a Rich table listing tracked files and their status.

    Args:
        report: Classified catalog.
        home: Home directory used to shorten paths.
        show_all: Include files that are up to date.

    Returns:
        Rich Table with Owner, File, Mirror and Status columns.
    """
    table = create_table("Tracked Files", "Owner", "File", "Mirror", "Status")
    for file, status in report.entries:
        if not show_all and status.kind == StatusKind.UP_TO_DATE:
            continue
        mirror = display_path(file.mirror.path, home) if isinstance(file, MirroredFile) else "-"
        table.add_row(
            f"[owner]{escape(str(file.owner))}[/owner]",
            f"[path]{escape(display_path(file.real.path, home))}[/path]",
            f"[muted]{escape(mirror)}[/muted]",
            format_file_status(status),
        )
    return table


def create_packages_table(reports: list[PackageReport]) -> Table:
    """Create a Rich table with one row per package report.

    Failed packages show the error message in the Status column.
    """
    table = create_table("Packages", "Package", "Installed", "Latest", "Status")
    for report in reports:
        if report.status is None:
            table.add_row(
                f"[path]{escape(report.name)}[/path]",
                "[muted]?[/muted]",
                "[muted]?[/muted]",
                f"[status.error]{escape(str(report.error))}[/status.error]",
            )
            continue
        table.add_row(
            f"[path]{escape(report.name)}[/path]",
            format_version(report.status.installed),
            format_version(report.status.latest),
            format_package_status(report.status),
        )
    return table


def print_files_summary(report: StatusReport) -> None:
    """Print a one-line count of files per status."""
    total = len(report.entries)
    if report.is_in_sync:
        console.print(f"[success]All {total} tracked files are up to date.[/success]")
        return

    parts: list[str] = []
    for kind, (label, style) in _STATUS_LABELS.items():
        count = len(report.with_kind(kind))
        if count:
            parts.append(f"[{style}]{count} {label}[/{style}]")
    console.print(f"{total} tracked files: " + ", ".join(parts))


def file_to_dict(file: TrackedFile, status: FileStatus) -> dict[str, str | None]:
    """Convert a tracked file and its status to a JSON-friendly dict."""
    return {
        "owner": str(file.owner),
        "real": str(file.real.path),
        "mirror": str(file.mirror.path) if isinstance(file, MirroredFile) else None,
        "status": status.kind.value,
        "error": status.error,
    }


def version_to_json(version: PackageVersion) -> str | None:
    """Convert a version to its JSON form (null when absent)."""
    if isinstance(version, NoVersion):
        return None
    if isinstance(version, CommitVersion):
        return version.id
    return str(version)


def report_to_dict(report: PackageReport) -> dict[str, object]:
    """Convert a package report to a JSON-friendly dict."""
    if report.status is None:
        return {"name": report.name, "error": str(report.error)}
    return {
        "name": report.name,
        "installed": version_to_json(report.status.installed),
        "downloaded": version_to_json(report.status.downloaded),
        "latest": version_to_json(report.status.latest),
        "need_update": report.status.need_update,
    }
