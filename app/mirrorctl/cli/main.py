"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from mirrorctl import __version__
from mirrorctl.cli.commands import diff, files, init, packages, show, status, update
from mirrorctl.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="mirrorctl",
    help="Keep your dotfiles, config directories and cargo packages in line with a profile.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"mirrorctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich.

    Args:
        verbose: Log everything from DEBUG up instead of only warnings.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """mirrorctl - Mirror your machine's configuration into a versioned profile.

    Compare dotfiles and config directories with their mirrored copies,
    and keep cargo-installed tools at their latest versions.
    """
    configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command("status")(status.show_status)
app.command("files")(files.show_files)
app.command("diff")(diff.diff_file)
app.command("packages")(packages.show_packages)
app.command("update")(update.update_packages)
app.command("init")(init.init_profile)
app.command("show")(show.show_profile)


if __name__ == "__main__":
    app()
