"""Two-tier TTL cache for expensive or networked lookups.

Values live in memory for the rest of the run once loaded, and on disk
as ``<root>/<key>.json`` until the file's modification time is older
than the caller's TTL. The cache never fails a lookup on its own: disk
problems fall back to recomputing, and write problems are logged.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar

from pydantic import TypeAdapter

from mirrorctl.core.anchored import AnchoredPath
from mirrorctl.core.errors import PathError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_adapters: dict[Any, TypeAdapter[Any]] = {}


def _adapter(value_type: type[T]) -> TypeAdapter[T]:
    adapter = _adapters.get(value_type)
    if adapter is None:
        adapter = TypeAdapter(value_type)
        _adapters[value_type] = adapter
    return adapter


class TtlCache:
    """Read-through cache persisted under a root directory.

    Keys are used verbatim as relative file stems, so callers namespace
    them (e.g. ``github.com/owner/repo/info``). The memory tier is plain
    per-instance state and is not safe for concurrent use.

    Example:
        >>> cache = TtlCache(env.cache_root)
        >>> info = cache.get_or_insert(
        ...     "github.com/helix-editor/helix/info",
        ...     timedelta(hours=1),
        ...     lambda: client.repo_info(),
        ...     GitHubRepoInfo,
        ... )
    """

    def __init__(self, root: AnchoredPath) -> None:
        """Initialize the cache.

        Args:
            root: Directory holding the disk tier.
        """
        self._root = root
        self._memory: dict[str, bytes] = {}

    @property
    def root(self) -> AnchoredPath:
        return self._root

    def get_or_insert(
        self,
        key: str,
        ttl: timedelta,
        compute: Callable[[], T],
        value_type: type[T],
    ) -> T:
        """Return the cached value for key, computing and storing it if needed.

        Args:
            key: Cache key, used as the stem of the disk file name.
            ttl: How long a disk entry stays fresh after it was written.
            compute: Produces the value on a miss. Its errors propagate.
            value_type: Type used to serialize and deserialize the value.

        Returns:
            The cached or freshly computed value.
        """
        adapter = _adapter(value_type)

        data = self._memory.get(key)
        if data is not None:
            logger.debug("Found %r in memory", key)
            return adapter.validate_json(data)

        try:
            path: AnchoredPath | None = self._root.join(f"{key}.json")
        except PathError as e:
            logger.warning("Cache key %r cannot be stored on disk: %s", key, e)
            path = None

        if path is not None:
            cached = self._load_fresh(key, path, ttl, adapter)
            if cached is not None:
                return cached[0]

        logger.debug("Fetching new entry for %r at %s", key, path)
        value = compute()

        try:
            data = adapter.dump_json(value, indent=2)
        except ValueError as e:
            logger.warning("Failed to serialize cached item %r: %s", key, e)
            return value

        if path is not None:
            self._store(path, data)
        self._memory[key] = data
        return value

    def _load_fresh(
        self,
        key: str,
        path: AnchoredPath,
        ttl: timedelta,
        adapter: TypeAdapter[T],
    ) -> tuple[T] | None:
        """Load a disk entry if it exists and is younger than ttl."""
        try:
            modified = path.path.stat().st_mtime
        except OSError:
            return None

        expires_at = modified + ttl.total_seconds()
        if time.time() >= expires_at:
            logger.debug("Cached entry for %r at %s has expired", key, path)
            return None

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning("Failed to read cached item from %s: %s", path, e)
            return None

        try:
            value = adapter.validate_json(data)
        except ValueError as e:
            logger.warning("Failed to load cached item from %s: %s", path, e)
            return None

        logger.debug("Using cached entry for %r at %s", key, path)
        self._memory[key] = data
        return (value,)

    def _store(self, path: AnchoredPath, data: bytes) -> None:
        """Write serialized data to disk, logging any failure."""
        try:
            path.path.parent.mkdir(parents=True, exist_ok=True)
            path.path.write_bytes(data)
        except OSError as e:
            logger.warning("Failed to store cached item to %s: %s", path, e)
