"""Latest-version resolution for declared packages.

Registry crates are looked up with ``cargo search``; crates and source
packages hosted on GitHub are resolved to the head commit of their ref.
Every lookup goes through the TTL cache.
"""

import logging
import re
from datetime import timedelta

from mirrorctl.core.cache import TtlCache
from mirrorctl.core.errors import UnsupportedFormatError
from mirrorctl.models.package import (
    NO_VERSION,
    CommitVersion,
    PackageSpec,
    PackageVersion,
    normalize_name,
    parse_version,
)
from mirrorctl.models.profile import GitHubSource
from mirrorctl.remote.github import GitHubCommit, GitHubRepo, github_headers
from mirrorctl.remote.http import JsonFetcher
from mirrorctl.utils.shell import run_checked

logger = logging.getLogger(__name__)

SEARCH_TTL = timedelta(hours=1)

# cargo search prints: name = "version"    # description
_SEARCH_RE = re.compile(r'^(\S+)\s*=\s*"([^"]+)"')


def parse_search_output(name: str, output: str) -> PackageVersion:
    """Extract the version of ``name`` from ``cargo search --limit=1`` output.

    Args:
        name: Normalized crate name that was searched for.
        output: Command output.

    Returns:
        The published version, or NO_VERSION when nothing matched.

    Raises:
        UnsupportedFormatError: If the first line is not ``name = "ver"``
            or names a different crate.
    """
    lines = output.splitlines()
    if not lines or not lines[0].strip():
        return NO_VERSION

    first = lines[0].strip()
    match = _SEARCH_RE.match(first)
    if match is None or normalize_name(match.group(1)) != name:
        raise UnsupportedFormatError("cargo search output", first)
    return parse_version(match.group(2))


class RemoteResolver:
    """Resolves the latest available version of a package spec.

    Attributes:
        cache: Cache shared by all lookups.
    """

    _SEARCH_TIMEOUT: float = 60.0

    def __init__(self, cache: TtlCache, fetcher: JsonFetcher | None = None) -> None:
        """Initialize the resolver.

        Args:
            cache: TTL cache for search results and API responses.
            fetcher: HTTP fetcher for the GitHub API. Defaults to one
                carrying GitHub headers.
        """
        self.cache = cache
        self._fetcher = fetcher if fetcher is not None else JsonFetcher(headers=github_headers())
        self._repos: dict[tuple[str, str], GitHubRepo] = {}

    def latest_version(self, spec: PackageSpec) -> PackageVersion:
        """Look up the newest version of a package.

        Args:
            spec: Package to resolve.

        Returns:
            Semver for registry crates, Commit for GitHub sources, or
            NO_VERSION when the registry has no such crate.

        Raises:
            ShellCommandError: If ``cargo search`` fails.
            HttpRequestError: If a GitHub request fails.
            HttpDecodeError: If a GitHub response cannot be decoded.
            UnsupportedFormatError: If search output or a version is malformed.
        """
        if spec.source is None:
            return self._search_registry(spec)
        return self._resolve_github(spec, spec.source)

    def _search_registry(self, spec: PackageSpec) -> PackageVersion:
        output = self.cache.get_or_insert(
            spec.cache_name,
            SEARCH_TTL,
            lambda: run_checked(
                ["cargo", "search", "--limit=1", spec.name],
                "cargo search",
                timeout=self._SEARCH_TIMEOUT,
            ),
            str,
        )
        return parse_search_output(spec.name, output)

    def _resolve_github(self, spec: PackageSpec, source: GitHubSource) -> PackageVersion:
        repo = self._repo(source)

        if source.tag is not None:
            commit = repo.commit_info(source.tag, spec.cache_name)
        elif source.rev is not None:
            commit = repo.commit_info(source.rev, spec.cache_name)
        else:
            branch = source.branch
            if branch is None:
                branch = repo.info().default_branch
                logger.debug("Default branch of %s is %s", source.github, branch)
            commit = repo.branch_info(branch, spec.cache_name).commit

        return _commit_version(commit)

    def _repo(self, source: GitHubSource) -> GitHubRepo:
        key = (source.owner, source.repo)
        repo = self._repos.get(key)
        if repo is None:
            repo = GitHubRepo(source.owner, source.repo, self.cache, self._fetcher)
            self._repos[key] = repo
        return repo

    def close(self) -> None:
        """Release the HTTP connection pool."""
        self._fetcher.close()


def _commit_version(commit: GitHubCommit) -> CommitVersion:
    return CommitVersion(commit.sha, commit.date)
