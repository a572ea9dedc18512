"""Status command implementation.

Gives the full picture of the machine: tracked files first, then
packages.
"""

from contextlib import closing
from typing import Annotated

import typer

from mirrorctl.cli.context import (
    build_catalog,
    create_package_manager,
    load_environment,
    load_user_profile,
)
from mirrorctl.cli.display import create_files_table, create_packages_table, print_files_summary
from mirrorctl.core.status import calculate_status
from mirrorctl.utils.formatting import console, print_success, print_warning


def show_status(
    show_all: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Also list files that are up to date.",
        ),
    ] = False,
) -> None:
    """Show the status of tracked files and managed packages.

    Exits with code 1 if the status of any package could not be determined.

    Examples:
        mirrorctl status            # Files that need attention and packages
        mirrorctl status --all      # Include up-to-date files
    """
    env = load_environment()
    profile = load_user_profile(env)

    report = calculate_status(build_catalog(env, profile))
    if report.entries:
        if show_all or not report.is_in_sync:
            console.print(create_files_table(report, env.home.path, show_all=show_all))
        print_files_summary(report)

    if not profile.packages:
        return

    console.print()
    with closing(create_package_manager(env)) as manager:
        reports = manager.status_all(profile.packages)
    console.print(create_packages_table(reports))

    failed = [r for r in reports if r.failed]
    pending = [r for r in reports if r.status is not None and r.status.need_update]
    if failed:
        print_warning(f"Could not determine the status of {len(failed)} package(s).")
        raise typer.Exit(code=1)
    if pending:
        console.print(
            f"[status.pending]{len(pending)} package(s) can be updated.[/status.pending] "
            "Run 'mirrorctl update' to install them."
        )
    else:
        print_success("All packages are up to date.")
