"""GitHub REST API client for repository and commit metadata.

Only the fields mirrorctl needs are modelled; everything else in the
responses is ignored. Results go through the TTL cache so repeated runs
within an hour do not hit the API.
"""

import os
from datetime import datetime, timedelta

from pydantic import BaseModel

from mirrorctl.core.cache import TtlCache
from mirrorctl.remote.http import JsonFetcher

API_ROOT = "https://api.github.com"
CACHE_TTL = timedelta(hours=1)


class GitHubRepoInfo(BaseModel):
    """Repository metadata."""

    default_branch: str


class GitHubCommitAuthor(BaseModel):
    """Author block of a commit."""

    date: datetime


class GitHubCommitInfo(BaseModel):
    """Git-level commit data."""

    author: GitHubCommitAuthor


class GitHubCommit(BaseModel):
    """A commit as returned by the commits and branches endpoints."""

    sha: str
    commit: GitHubCommitInfo

    @property
    def date(self) -> datetime:
        return self.commit.author.date


class GitHubBranchInfo(BaseModel):
    """Branch metadata with its head commit."""

    name: str
    commit: GitHubCommit


def github_headers() -> dict[str, str]:
    """Headers for API requests, with a bearer token from $GITHUB_TOKEN if set."""
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class GitHubRepo:
    """Cached read-only access to one GitHub repository.

    Example:
        >>> repo = GitHubRepo("helix-editor", "helix", cache, fetcher)
        >>> repo.branch_info("master", "helix-term").commit.sha
    """

    def __init__(self, owner: str, repo: str, cache: TtlCache, fetcher: JsonFetcher) -> None:
        """Initialize the repository client.

        Args:
            owner: Repository owner.
            repo: Repository name.
            cache: Cache for API responses.
            fetcher: HTTP JSON fetcher.
        """
        self.owner = owner
        self.repo = repo
        self._cache = cache
        self._fetcher = fetcher
        self._base_url = f"{API_ROOT}/repos/{owner}/{repo}"
        self._base_key = f"github.com/{owner}/{repo}"

    def info(self) -> GitHubRepoInfo:
        """Fetch repository metadata (cached for an hour)."""
        return self._cache.get_or_insert(
            f"{self._base_key}/info",
            CACHE_TTL,
            lambda: self._fetcher.get(self._base_url, GitHubRepoInfo),
            GitHubRepoInfo,
        )

    def branch_info(self, branch: str, cache_name: str) -> GitHubBranchInfo:
        """Fetch a branch and its head commit (cached for an hour).

        Args:
            branch: Branch name.
            cache_name: Cache key, unique per branch and package.
        """
        return self._cache.get_or_insert(
            cache_name,
            CACHE_TTL,
            lambda: self._fetcher.get(f"{self._base_url}/branches/{branch}", GitHubBranchInfo),
            GitHubBranchInfo,
        )

    def commit_info(self, ref: str, cache_name: str) -> GitHubCommit:
        """Fetch the commit a tag or revision points at (cached for an hour).

        Args:
            ref: Tag name or commit hash.
            cache_name: Cache key, unique per ref and package.
        """
        return self._cache.get_or_insert(
            cache_name,
            CACHE_TTL,
            lambda: self._fetcher.get(f"{self._base_url}/commits/{ref}", GitHubCommit),
            GitHubCommit,
        )
