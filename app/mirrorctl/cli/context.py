"""Shared setup for CLI commands.

Builds the environment, loads the profile and wires the package manager.
Errors are printed and converted to exit code 1 here so commands stay
focused on output.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from mirrorctl.core.cache import TtlCache
from mirrorctl.core.catalog import CatalogBuilder
from mirrorctl.core.env import Environment
from mirrorctl.core.errors import MirrorError
from mirrorctl.core.packages import PackageManager
from mirrorctl.core.profile import ProfileNotFoundError, load_profile
from mirrorctl.models.profile import Profile
from mirrorctl.models.tracked import TrackedFile
from mirrorctl.operators.cargo import CargoOperator
from mirrorctl.remote.resolver import RemoteResolver
from mirrorctl.scanners.cargo import CargoScanner
from mirrorctl.utils.formatting import print_error, print_info


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Print any MirrorError raised in the block and exit with code 1."""
    try:
        yield
    except MirrorError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def load_environment() -> Environment:
    """Build the environment from $HOME and the XDG variables."""
    with exit_on_error():
        return Environment.build()


def load_user_profile(env: Environment) -> Profile:
    """Load the profile from the mirror root, exiting with a hint if absent."""
    try:
        return load_profile(env.profile_path)
    except ProfileNotFoundError as e:
        print_error(str(e))
        print_info("Run 'mirrorctl init' to create one.")
        raise typer.Exit(code=1) from e
    except MirrorError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def build_catalog(env: Environment, profile: Profile) -> list[TrackedFile]:
    """Build the tracked file catalog for a profile."""
    with exit_on_error():
        return CatalogBuilder(env).build(profile)


def create_package_manager(env: Environment, *, dry_run: bool = False) -> PackageManager:
    """Wire the cargo probe, resolver and installer around the disk cache."""
    cache = TtlCache(env.cache_root)
    return PackageManager(
        scanner=CargoScanner(),
        resolver=RemoteResolver(cache),
        operator=CargoOperator(dry_run=dry_run),
    )
