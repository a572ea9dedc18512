"""File status classifier.

Reduces a tracked file to one of a fixed set of statuses by looking at
the current bytes on disk. Nothing is persisted: every call reads the
filesystem afresh. Read failures become status values so a pass over the
whole catalog keeps going when a single file is unreadable.
"""

from __future__ import annotations

import errno
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from mirrorctl.core.anchored import AnchoredPath
from mirrorctl.models.tracked import MirroredFile, TrackedFile, VirtualFile

logger = logging.getLogger(__name__)


class StatusKind(str, Enum):
    """Classification of a tracked file.

    Attributes:
        UP_TO_DATE: Both sides hold identical bytes.
        MISSING_FROM_BOTH: Neither side exists.
        REAL_ONLY: Only the real file exists.
        MIRROR_ONLY: Only the mirror exists (it would be added to the system).
        MODIFIED: Both sides exist with different bytes.
        ERROR_READING_REAL: The real file exists but could not be read.
        ERROR_READING_MIRROR: The mirror file exists but could not be read.
    """

    UP_TO_DATE = "up_to_date"
    MISSING_FROM_BOTH = "missing"
    REAL_ONLY = "real_only"
    MIRROR_ONLY = "mirror_only"
    MODIFIED = "modified"
    ERROR_READING_REAL = "error_reading_real"
    ERROR_READING_MIRROR = "error_reading_mirror"


@dataclass(frozen=True, slots=True)
class FileStatus:
    """Status of a tracked file.

    Attributes:
        kind: The classification.
        error: Symbolic error kind (e.g. ``EACCES``) for the error statuses.
    """

    kind: StatusKind
    error: str | None = None

    @property
    def is_error(self) -> bool:
        """Check whether reading either side failed."""
        return self.kind in (StatusKind.ERROR_READING_REAL, StatusKind.ERROR_READING_MIRROR)

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.kind.value} ({self.error})"
        return self.kind.value


UP_TO_DATE = FileStatus(StatusKind.UP_TO_DATE)
MISSING_FROM_BOTH = FileStatus(StatusKind.MISSING_FROM_BOTH)
REAL_ONLY = FileStatus(StatusKind.REAL_ONLY)
MIRROR_ONLY = FileStatus(StatusKind.MIRROR_ONLY)
MODIFIED = FileStatus(StatusKind.MODIFIED)


def error_kind(error: OSError) -> str:
    """Map an OSError to a short symbolic kind such as ``EACCES``."""
    if error.errno is not None:
        return errno.errorcode.get(error.errno, type(error).__name__)
    return type(error).__name__


def _read(path: AnchoredPath) -> bytes | OSError:
    try:
        return path.read_bytes()
    except OSError as e:
        logger.debug("Failed to read %s: %s", path, e)
        return e


def _exists(path: AnchoredPath) -> bool | OSError:
    try:
        return path.exists()
    except OSError as e:
        logger.debug("Failed to stat %s: %s", path, e)
        return e


def _check_mirrored(file: MirroredFile) -> FileStatus:
    real_exists = _exists(file.real)
    if isinstance(real_exists, OSError):
        return FileStatus(StatusKind.ERROR_READING_REAL, error_kind(real_exists))
    mirror_exists = _exists(file.mirror)
    if isinstance(mirror_exists, OSError):
        return FileStatus(StatusKind.ERROR_READING_MIRROR, error_kind(mirror_exists))

    if not real_exists and not mirror_exists:
        return MISSING_FROM_BOTH
    if not mirror_exists:
        return REAL_ONLY
    if not real_exists:
        return MIRROR_ONLY

    real = _read(file.real)
    if isinstance(real, OSError):
        return FileStatus(StatusKind.ERROR_READING_REAL, error_kind(real))
    mirror = _read(file.mirror)
    if isinstance(mirror, OSError):
        return FileStatus(StatusKind.ERROR_READING_MIRROR, error_kind(mirror))

    return UP_TO_DATE if real == mirror else MODIFIED


def _check_virtual(file: VirtualFile) -> FileStatus:
    real_exists = _exists(file.real)
    if isinstance(real_exists, OSError):
        return FileStatus(StatusKind.ERROR_READING_REAL, error_kind(real_exists))
    if not real_exists:
        return MIRROR_ONLY

    real = _read(file.real)
    if isinstance(real, OSError):
        return FileStatus(StatusKind.ERROR_READING_REAL, error_kind(real))

    return UP_TO_DATE if real == file.expected.encode("utf-8") else MODIFIED


def check_file(file: TrackedFile) -> FileStatus:
    """Classify a tracked file against the current filesystem.

    Args:
        file: Mirrored or virtual tracked file.

    Returns:
        The file's current status.
    """
    if isinstance(file, VirtualFile):
        return _check_virtual(file)
    return _check_mirrored(file)


@dataclass(slots=True)
class StatusReport:
    """Tracked files grouped by status, each group in catalog order.

    Attributes:
        entries: Every (file, status) pair in catalog order.
    """

    entries: list[tuple[TrackedFile, FileStatus]] = field(default_factory=list)

    def with_kind(self, kind: StatusKind) -> list[TrackedFile]:
        """Return the files with the given status kind, in catalog order."""
        return [file for file, status in self.entries if status.kind == kind]

    @property
    def modified(self) -> list[TrackedFile]:
        return self.with_kind(StatusKind.MODIFIED)

    @property
    def missing(self) -> list[TrackedFile]:
        return self.with_kind(StatusKind.MISSING_FROM_BOTH)

    @property
    def real_only(self) -> list[TrackedFile]:
        return self.with_kind(StatusKind.REAL_ONLY)

    @property
    def mirror_only(self) -> list[TrackedFile]:
        return self.with_kind(StatusKind.MIRROR_ONLY)

    @property
    def up_to_date(self) -> list[TrackedFile]:
        return self.with_kind(StatusKind.UP_TO_DATE)

    @property
    def errors(self) -> list[tuple[TrackedFile, FileStatus]]:
        return [(file, status) for file, status in self.entries if status.is_error]

    @property
    def is_in_sync(self) -> bool:
        """Check whether every tracked file is up to date."""
        return all(status.kind == StatusKind.UP_TO_DATE for _file, status in self.entries)

    def counts(self) -> dict[str, int]:
        """Count files per status kind (only kinds that occur)."""
        result: dict[str, int] = {}
        for _file, status in self.entries:
            result[status.kind.value] = result.get(status.kind.value, 0) + 1
        return result


def calculate_status(files: Iterable[TrackedFile]) -> StatusReport:
    """Classify every tracked file, preserving catalog order.

    Args:
        files: Tracked files, typically from CatalogBuilder.build().

    Returns:
        StatusReport with one entry per file.
    """
    report = StatusReport()
    for file in files:
        report.entries.append((file, check_file(file)))
    return report
