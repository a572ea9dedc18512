"""Tree diff walker.

Merge-joins the recursive file listings of both sides of a MirrorPair
into a single stream of relative paths, each tagged with the side(s) it
was found on. Both listings are sorted by path components, so the output
order is deterministic and strictly increasing.
"""

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from mirrorctl.core.env import MirrorPair
from mirrorctl.core.errors import WalkError

logger = logging.getLogger(__name__)


class WalkSide(str, Enum):
    """Where a walked file was found.

    Attributes:
        REAL_ONLY: Only on the real filesystem.
        BOTH: On both sides.
        MIRROR_ONLY: Only in the mirror.
    """

    REAL_ONLY = "real_only"
    BOTH = "both"
    MIRROR_ONLY = "mirror_only"


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """A single file emitted by the walker.

    Attributes:
        side: Which side(s) the file exists on.
        rel_path: Path relative to the root of the walked pair.
    """

    side: WalkSide
    rel_path: PurePosixPath


@dataclass(frozen=True, slots=True)
class PathFilter:
    """Ordered path-prefix exclusions, matched on whole path components.

    Excluding ``runtime/`` matches ``runtime/x`` but not ``runtimeX``.

    Attributes:
        exclude: Relative path prefixes to skip on the real side.
    """

    exclude: tuple[str, ...] = ()

    def should_include(self, rel_path: PurePosixPath) -> bool:
        """Check whether a relative path survives every exclusion."""
        parts = rel_path.parts
        for prefix in self.exclude:
            prefix_parts = PurePosixPath(prefix).parts
            if prefix_parts and parts[: len(prefix_parts)] == prefix_parts:
                return False
        return True


NO_FILTER = PathFilter()


def _raise_walk_error(error: OSError) -> None:
    raise WalkError(error.filename or "<unknown>", error.strerror or str(error)) from error


def list_files(root: Path) -> list[PurePosixPath]:
    """List every file below root, relative to it, sorted by components.

    Directories (including symlinks to directories) are not listed and
    symlinks are never followed. A root that does not exist has no files.

    Args:
        root: Directory to list.

    Returns:
        Sorted relative paths.

    Raises:
        WalkError: If any part of the tree cannot be read.
    """
    try:
        root.stat()
    except (FileNotFoundError, NotADirectoryError):
        return []
    except OSError as e:
        _raise_walk_error(e)

    files: list[PurePosixPath] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        base = Path(dirpath)
        for filename in filenames:
            files.append(PurePosixPath((base / filename).relative_to(root).as_posix()))

    files.sort(key=lambda p: p.parts)
    return files


def walk_pair(pair: MirrorPair, real_filter: PathFilter = NO_FILTER) -> Iterator[WalkEntry]:
    """Merge the real and mirror listings of a pair into tagged entries.

    Real-side files excluded by ``real_filter`` are treated as absent.
    Both sides are listed up front, so a walk failure raises before any
    entry is produced.

    Args:
        pair: The mirror pair to compare.
        real_filter: Exclusions applied to the real side only.

    Returns:
        Iterator of WalkEntry in strictly increasing relative-path order.

    Raises:
        WalkError: If either directory tree cannot be walked.
    """
    real_files = [p for p in list_files(pair.real.path) if real_filter.should_include(p)]
    mirror_files = list_files(pair.mirror.path)

    logger.debug(
        "Walking %s (%d files) against %s (%d files)",
        pair.real,
        len(real_files),
        pair.mirror,
        len(mirror_files),
    )
    return _merge(real_files, mirror_files)


def _merge(
    real_files: list[PurePosixPath],
    mirror_files: list[PurePosixPath],
) -> Iterator[WalkEntry]:
    """Two-pointer merge of two sorted listings."""
    i = j = 0
    while i < len(real_files) and j < len(mirror_files):
        real_key = real_files[i].parts
        mirror_key = mirror_files[j].parts
        if real_key < mirror_key:
            yield WalkEntry(WalkSide.REAL_ONLY, real_files[i])
            i += 1
        elif real_key == mirror_key:
            yield WalkEntry(WalkSide.BOTH, real_files[i])
            i += 1
            j += 1
        else:
            yield WalkEntry(WalkSide.MIRROR_ONLY, mirror_files[j])
            j += 1

    for rel_path in real_files[i:]:
        yield WalkEntry(WalkSide.REAL_ONLY, rel_path)
    for rel_path in mirror_files[j:]:
        yield WalkEntry(WalkSide.MIRROR_ONLY, rel_path)
