"""Update command implementation.

Installs managed packages that are missing or out of date.
"""

from collections.abc import Mapping
from contextlib import closing
from typing import Annotated

import typer

from mirrorctl.cli.context import create_package_manager, load_environment, load_user_profile
from mirrorctl.cli.display import create_packages_table, format_version
from mirrorctl.core.errors import MirrorError
from mirrorctl.core.packages import PackageManager, PackageReport
from mirrorctl.models.package import is_from_source
from mirrorctl.models.profile import Package
from mirrorctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def _confirm_updates(count: int) -> bool:
    """Prompt user to confirm the installs."""
    return typer.confirm(
        f"\nInstall or update {count} package(s)?",
        default=False,
    )


def _run_updates(
    manager: PackageManager, packages: Mapping[str, Package], *, yes: bool, dry_run: bool
) -> None:
    """Report what is behind, confirm, then install package by package."""
    reports = manager.status_all(packages)
    failed: list[PackageReport] = [r for r in reports if r.failed]

    pending: list[str] = []
    for report in reports:
        if report.status is None or not report.status.need_update:
            continue
        if is_from_source(packages[report.name]):
            print_warning(f"{report.name} is built from source, skipping.")
            continue
        pending.append(report.name)

    if not pending:
        if failed:
            console.print(create_packages_table(failed))
            raise typer.Exit(code=1)
        print_success("All packages are up to date. Nothing to do.")
        return

    console.print(create_packages_table([r for r in reports if r.name in pending or r.failed]))

    if dry_run:
        print_info("\nDry-run mode: No changes were made.")
        return

    if not yes and not _confirm_updates(len(pending)):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    errors = len(failed)
    for name in pending:
        console.print(f"\n[info]Installing {name}...[/info]")
        try:
            version = manager.install_update(name, packages[name])
        except MirrorError as e:
            print_error(str(e))
            errors += 1
            continue
        console.print(f"[success]{name}[/success] is now at {format_version(version)}")

    if errors:
        print_warning(f"{errors} package(s) failed.")
        raise typer.Exit(code=1)
    print_success(f"Updated {len(pending)} package(s).")


def update_packages(
    names: Annotated[
        list[str] | None,
        typer.Argument(help="Packages to update (default: all that need it)."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be installed without running cargo.",
        ),
    ] = False,
) -> None:
    """Install or update packages that are behind their latest version.

    Packages built from source are reported but never installed
    automatically.

    Examples:
        mirrorctl update --dry-run      # Preview
        mirrorctl update helix -y       # Update one package without prompting
    """
    env = load_environment()
    profile = load_user_profile(env)

    packages = profile.packages
    if names:
        unknown = [n for n in names if n not in packages]
        if unknown:
            print_error(f"Package(s) not in profile: {', '.join(unknown)}")
            raise typer.Exit(code=1)
        packages = {n: packages[n] for n in names}

    with closing(create_package_manager(env, dry_run=dry_run)) as manager:
        _run_updates(manager, packages, yes=yes, dry_run=dry_run)
