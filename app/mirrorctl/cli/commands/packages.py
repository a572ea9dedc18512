"""Packages command implementation.

Compares installed versions of managed packages with the latest ones
available.
"""

import json
from contextlib import closing
from typing import Annotated

import typer
from rich.markup import escape

from mirrorctl.cli.context import create_package_manager, load_environment, load_user_profile
from mirrorctl.cli.display import (
    create_packages_table,
    format_package_status,
    format_version,
    report_to_dict,
)
from mirrorctl.core.packages import PackageReport
from mirrorctl.models.package import PackageSpec, is_from_source
from mirrorctl.models.profile import Package
from mirrorctl.utils.formatting import console, print_error, print_info


def _print_package_detail(report: PackageReport, package: Package) -> None:
    """Print everything known about one package."""
    spec = PackageSpec.from_package(report.name, package)

    console.print()
    console.print(f"[bold]{report.name}[/bold]")
    console.print(f"  Crate: [info]{spec.name}[/info]")
    if spec.source is not None:
        console.print(f"  Source: [muted]{spec.source.git_url}[/muted]")
        ref = spec.source.branch or spec.source.tag or spec.source.rev
        if ref is not None:
            console.print(f"  Ref: [muted]{ref}[/muted]")
    else:
        console.print("  Source: [muted]crates.io[/muted]")
    if is_from_source(package):
        console.print("  Install: [muted]built from source[/muted]")

    if report.status is None:
        console.print(f"  Status: [status.error]{escape(str(report.error))}[/status.error]")
        console.print()
        return

    console.print(f"  Installed: {format_version(report.status.installed)}")
    console.print(f"  Latest: {format_version(report.status.latest)}")
    console.print(f"  Status: {format_package_status(report.status)}")
    console.print()


def show_packages(
    package: Annotated[
        str | None,
        typer.Option(
            "--package",
            "-p",
            help="Show details for a single package.",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show installed and latest versions of managed packages.

    Exits with code 1 if the status of any package could not be determined.

    Examples:
        mirrorctl packages                  # All packages
        mirrorctl packages -p helix         # One package in detail
        mirrorctl packages --json           # JSON output for scripting
    """
    env = load_environment()
    profile = load_user_profile(env)

    packages = profile.packages
    if package is not None:
        if package not in packages:
            print_error(f"Package not in profile: {package}")
            raise typer.Exit(code=1)
        packages = {package: packages[package]}

    if not packages:
        print_info("The profile does not manage any packages.")
        return

    with closing(create_package_manager(env)) as manager:
        reports = manager.status_all(packages)

    if json_output:
        console.print_json(json.dumps([report_to_dict(r) for r in reports]))
    elif package is not None:
        _print_package_detail(reports[0], packages[package])
    else:
        console.print(create_packages_table(reports))

    if any(r.failed for r in reports):
        raise typer.Exit(code=1)
