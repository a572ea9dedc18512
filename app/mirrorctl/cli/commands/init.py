"""Init command implementation.

Creates a starter profile.toml in the mirror root.
"""

from typing import Annotated

import typer
from pydantic import ValidationError

from mirrorctl.cli.context import exit_on_error, load_environment
from mirrorctl.core.profile import save_profile
from mirrorctl.models.profile import Profile, Shell, UserProfile
from mirrorctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def init_profile(
    username: Annotated[str, typer.Option("--username", "-u", help="Login name.")],
    name: Annotated[str, typer.Option("--name", help="Full name.")],
    email: Annotated[str, typer.Option("--email", help="Email address.")],
    shell: Annotated[
        Shell | None,
        typer.Option(
            "--shell",
            "-s",
            help="Login shell whose rc file is tracked.",
            case_sensitive=False,
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing profile without prompting.",
        ),
    ] = False,
) -> None:
    """Create a new profile in the mirror root.

    The profile starts with no packages; add [packages.<name>] tables to
    it by hand.

    Examples:
        mirrorctl init --username zeldor --name "Zeldon Kingly" --email z@example.com
        mirrorctl init -u zeldor --name Z --email z@example.com --shell zsh --force
    """
    env = load_environment()
    profile_path = env.profile_path

    try:
        exists = profile_path.exists()
    except OSError as e:
        print_error(f"Cannot access {profile_path}: {e.strerror or e}")
        raise typer.Exit(code=1) from e

    if exists:
        if not force:
            print_error(f"Profile already exists: {profile_path}")
            print_info("Use --force to overwrite.")
            raise typer.Exit(code=1)
        print_warning(f"Overwriting existing profile: {profile_path}")

    try:
        user = UserProfile(username=username, name=name, email=email, shell=shell)
    except ValidationError as e:
        print_error(f"Invalid profile: {e}")
        raise typer.Exit(code=1) from e

    with exit_on_error():
        save_profile(Profile(profile=user), profile_path)

    console.print()
    console.print("[bold]Profile Summary[/bold]")
    console.print(f"  User: [info]{username}[/info] <{email}>")
    console.print(f"  Shell: [muted]{shell.value if shell else '-'}[/muted]")
    console.print(f"  Output: [muted]{profile_path}[/muted]")
    console.print()
    print_success("Profile created.")
