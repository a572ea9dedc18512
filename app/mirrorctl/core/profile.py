"""Reading and writing the profile in the mirror root.

The profile is ``<mirror_root>/profile.toml``, the single user-edited input
the catalog and the package commands are built from. Its location comes
from the Environment and every profile error carries that path.
"""

import logging
import os
import tomllib
from pathlib import Path, PurePath
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from mirrorctl.core.anchored import AnchoredPath
from mirrorctl.core.errors import MirrorError
from mirrorctl.models.profile import Profile

logger = logging.getLogger(__name__)


class ProfileError(MirrorError):
    """Raised when the profile cannot be read or written.

    Attributes:
        path: Profile file the error refers to.
        reason: What went wrong, without the path.
    """

    def __init__(self, path: PurePath | str, reason: str, detail: str | None = None) -> None:
        self.path = str(path)
        self.reason = reason
        message = f"{reason}: {self.path}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class ProfileNotFoundError(ProfileError):
    """Raised when there is no profile in the mirror root."""

    def __init__(self, path: PurePath | str) -> None:
        super().__init__(path, "Profile not found")


class ProfileParseError(ProfileError):
    """Raised when the profile is not valid UTF-8 TOML."""


class ProfileValidationError(ProfileError):
    """Raised when the TOML does not describe a valid profile.

    Attributes:
        errors: Number of individual schema violations.
    """

    def __init__(self, path: PurePath | str, error: ValidationError) -> None:
        self.errors = error.error_count()
        super().__init__(path, "Invalid profile content", str(error))


def load_profile(path: AnchoredPath) -> Profile:
    """Load and validate the profile at path.

    Args:
        path: Profile file, usually ``Environment.profile_path``.

    Returns:
        Validated Profile.

    Raises:
        ProfileNotFoundError: If the file does not exist.
        ProfileParseError: If the file is not valid UTF-8 TOML.
        ProfileValidationError: If the content does not match the schema.
        ProfileError: If the file cannot be read.
    """
    logger.debug("Loading profile from %s", path)
    try:
        text = path.read_bytes().decode("utf-8")
    except FileNotFoundError as e:
        raise ProfileNotFoundError(path.path) from e
    except UnicodeDecodeError as e:
        raise ProfileParseError(path.path, "Profile is not UTF-8", e.reason) from e
    except OSError as e:
        raise ProfileError(path.path, "Failed to read profile", e.strerror or str(e)) from e

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ProfileParseError(path.path, "Invalid TOML syntax", str(e)) from e

    try:
        return Profile.model_validate(data)
    except ValidationError as e:
        raise ProfileValidationError(path.path, e) from e


def save_profile(profile: Profile, path: AnchoredPath) -> None:
    """Write the profile to path as TOML.

    The file is replaced atomically through a temporary file in the same
    directory.

    Args:
        profile: Profile to save.
        path: Destination file, usually ``Environment.profile_path``.

    Raises:
        ProfileError: If the file cannot be written.
    """
    payload = tomli_w.dumps(profile_to_dict(profile)).encode("utf-8")
    try:
        _replace_file(path.path, payload)
    except OSError as e:
        raise ProfileError(path.path, "Failed to write profile", e.strerror or str(e)) from e
    logger.debug("Saved profile to %s", path)


def _replace_file(target: Path, payload: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile(dir=target.parent, suffix=".tmp", delete=False) as f:
        tmp = Path(f.name)
    try:
        tmp.write_bytes(payload)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def profile_to_dict(profile: Profile) -> dict[str, Any]:
    """Convert a Profile to plain data for TOML or JSON output.

    TOML has no null, so unset optional fields are dropped.
    """
    return profile.model_dump(mode="json", exclude_none=True)
