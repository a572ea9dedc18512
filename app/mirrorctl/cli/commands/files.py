"""Files command implementation.

Lists the files tracked by the profile and how each compares with its
mirror.
"""

import json
from typing import Annotated

import typer

from mirrorctl.cli.context import build_catalog, load_environment, load_user_profile
from mirrorctl.cli.display import create_files_table, file_to_dict, print_files_summary
from mirrorctl.core.status import calculate_status
from mirrorctl.utils.formatting import console, print_info


def show_files(
    ctx: typer.Context,
    show_all: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Also list files that are up to date.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show tracked files and their status.

    Status values:
      up to date    Real file and mirror are identical
      modified      Both exist with different content
      real only     The mirror has no copy yet
      mirror only   The file is missing from the system
      missing       Neither side exists

    Examples:
        mirrorctl files             # Files that need attention
        mirrorctl files --all       # Every tracked file
        mirrorctl files --json      # JSON output for scripting
    """
    env = load_environment()
    profile = load_user_profile(env)
    report = calculate_status(build_catalog(env, profile))

    if json_output:
        entries = [file_to_dict(file, status) for file, status in report.entries]
        console.print_json(json.dumps(entries))
        return

    if not report.entries:
        print_info("The profile does not track any files.")
        return

    if show_all or not report.is_in_sync:
        console.print(create_files_table(report, env.home.path, show_all=show_all))

    if not ctx.obj or not ctx.obj.get("quiet"):
        print_files_summary(report)
