"""Profile models for the declarative user configuration.

This module defines the Pydantic models representing the profile.toml
structure that describes the user, the dotfiles to track and the
packages to manage.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)


class Shell(str, Enum):
    """Supported login shells and the dotfile each one owns."""

    BASH = "bash"
    ZSH = "zsh"

    @property
    def dotfile(self) -> str:
        """Name of the shell's rc file in the home directory."""
        return f".{self.value}rc"


class SshAgent(str, Enum):
    """Supported SSH agent launchers."""

    SYSTEMD = "systemd"


class SshConfig(BaseModel):
    """SSH section of the user profile.

    Attributes:
        agent: How the SSH agent is started.
        keys: Named private key paths to load into the agent.
    """

    model_config = ConfigDict(extra="forbid")

    agent: Annotated[SshAgent, Field(description="SSH agent launcher")]
    keys: Annotated[
        dict[str, str],
        Field(default_factory=dict, description="Named key paths"),
    ]


class UserProfile(BaseModel):
    """The user the profile describes.

    Attributes:
        username: Login name.
        name: Full name.
        email: Email address.
        shell: Optional login shell whose rc file is tracked.
        ssh: Optional SSH agent configuration.
    """

    model_config = ConfigDict(extra="forbid")

    username: Annotated[str, Field(min_length=1, description="Login name")]
    name: Annotated[str, Field(description="Full name")]
    email: Annotated[str, Field(description="Email address")]
    shell: Annotated[Shell | None, Field(description="Login shell")] = None
    ssh: Annotated[SshConfig | None, Field(description="SSH configuration")] = None


class GitHubSource(BaseModel):
    """A repository hosted on GitHub, optionally pinned to a ref.

    At most one of ``branch``, ``tag`` and ``rev`` may be set. With none
    set the repository's default branch is followed.

    Attributes:
        github: Repository in ``owner/repo`` form.
        branch: Branch to follow.
        tag: Tag to install.
        rev: Commit to install.
    """

    model_config = ConfigDict(extra="forbid")

    github: Annotated[str, Field(description="Repository as owner/repo")]
    branch: str | None = None
    tag: str | None = None
    rev: str | None = None

    @field_validator("github")
    @classmethod
    def validate_repo(cls, v: str) -> str:
        """Validate the owner/repo form."""
        owner, sep, repo = v.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            msg = f"github source must be 'owner/repo', got {v!r}"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_single_ref(self) -> Self:
        """Validate that at most one ref kind is set."""
        refs = [r for r in (self.branch, self.tag, self.rev) if r is not None]
        if len(refs) > 1:
            msg = "Only one of branch, tag and rev may be set"
            raise ValueError(msg)
        return self

    @property
    def owner(self) -> str:
        return self.github.partition("/")[0]

    @property
    def repo(self) -> str:
        return self.github.partition("/")[2]

    @property
    def git_url(self) -> str:
        """HTTPS clone URL of the repository."""
        return f"https://github.com/{self.owner}/{self.repo}.git"


class ConfigDirSpec(BaseModel):
    """A package's config directory under ~/.config managed by the mirror.

    Attributes:
        name: Directory name override (defaults to the package name).
        exclude: Path prefixes below the real directory to ignore.
    """

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str | None, Field(description="Directory name override")] = None
    exclude: Annotated[
        list[str],
        Field(default_factory=list, description="Real-side path prefixes to ignore"),
    ]


class CratePackage(BaseModel):
    """A package installed with ``cargo install``.

    Attributes:
        crate_name: Crate name override (defaults to the package key).
        source: Optional GitHub source instead of the crates.io registry.
        config_dir: Optional managed config directory.
    """

    model_config = ConfigDict(extra="forbid")

    type: Literal["crate"] = "crate"
    crate_name: Annotated[str | None, Field(description="Crate name override")] = None
    source: Annotated[GitHubSource | None, Field(description="Explicit VCS source")] = None
    config_dir: Annotated[ConfigDirSpec | None, Field(description="Managed config dir")] = None


class SourcePackage(BaseModel):
    """A package built from a source checkout.

    Attributes:
        source: GitHub repository the package comes from.
        local_dir: Optional override of the local clone directory.
        config_dir: Managed config directory.
    """

    model_config = ConfigDict(extra="forbid")

    type: Literal["source"]
    source: Annotated[GitHubSource, Field(description="VCS source")]
    local_dir: Annotated[str | None, Field(description="Local clone directory")] = None
    config_dir: Annotated[ConfigDirSpec, Field(description="Managed config dir")]


def _package_type(value: Any) -> str:
    """Tag a package table by its type, treating an untyped table as a crate."""
    if isinstance(value, dict):
        return value.get("type", "crate")
    return getattr(value, "type", "crate")


Package = Annotated[
    Annotated[CratePackage, Tag("crate")] | Annotated[SourcePackage, Tag("source")],
    Discriminator(_package_type),
]


class Profile(BaseModel):
    """Complete profile describing the desired state of the user's machine.

    Attributes:
        profile: The user and their shell/SSH choices.
        packages: Managed packages keyed by name.
    """

    model_config = ConfigDict(extra="forbid")

    profile: Annotated[UserProfile, Field(description="User profile")]
    packages: Annotated[
        dict[str, Package],
        Field(default_factory=dict, description="Managed packages"),
    ]
