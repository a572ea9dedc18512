"""Show command implementation.

Prints the validated profile, with defaults filled in, as JSON.
"""

import json

from mirrorctl.cli.context import load_environment, load_user_profile
from mirrorctl.core.profile import profile_to_dict
from mirrorctl.utils.formatting import console


def show_profile() -> None:
    """Show the resolved profile as JSON.

    Examples:
        mirrorctl show
    """
    env = load_environment()
    profile = load_user_profile(env)
    console.print_json(json.dumps(profile_to_dict(profile)))
