"""
File selection predicates and a directory listing helper.

**Conceptual**: Directory scans in the framework rarely want "everything".
They want "all the .jpg files" or "at most 50 files that are at least a day
old". These filters encode such rules as small predicate objects that plug
into a directory enumeration.

**Two filter styles**:
  - Path filters (FileExtensionFilter): called with one path, return bool.
    They are also plain callables, so they work with filter() and
    comprehensions.
  - Name filters (BoundedAgeFileFilter): called with (directory, name) for
    each entry while a directory is being listed.

list_files() applies either style to a directory.

**Thread safety**: FileExtensionFilter is immutable and can be shared freely.
BoundedAgeFileFilter keeps a running count of accepted entries; create one
per traversal and do not share it between threads.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from src.config.settings import get_settings
from src.utils.errors import PreconditionError
from src.utils.time import NANOS_PER_MILLI, Clock, RealClock, to_epoch_millis

logger = logging.getLogger(__name__)

JPEG_IMAGE_EXTENSION = ".jpg"

PathLike = Union[str, Path]


class FileExtensionFilter:
    """
    Accepts regular files whose name ends with a given extension, ignoring case.

    **Functionally**:
      - Directories are rejected, even when their name matches.
      - The file name is lower-cased before matching. The configured
        extension is expected to be lower-case already and include its dot
        (".jpg", not "jpg" or ".JPG").

    Example:
        >>> jpg_filter = FileExtensionFilter(".jpg")
        >>> jpg_filter.accept("photos/holiday.JPG")  # True when it is a file
        >>> [p for p in Path("photos").iterdir() if jpg_filter(p)]
    """

    def __init__(self, extension: str):
        """
        Args:
            extension: Lower-case extension including the leading dot.

        Raises:
            PreconditionError: If extension is None or not a string.
        """
        if extension is None:
            raise PreconditionError("Extension cannot be None")
        if not isinstance(extension, str):
            raise PreconditionError(
                f"Extension must be a string, got {type(extension).__name__}"
            )
        self._extension = extension

    @property
    def extension(self) -> str:
        return self._extension

    def accept(self, path: PathLike) -> bool:
        path = Path(path)
        return path.is_file() and path.name.lower().endswith(self._extension)

    def __call__(self, path: PathLike) -> bool:
        return self.accept(path)

    def __repr__(self) -> str:
        return f"FileExtensionFilter({self._extension!r})"


JPEG_IMAGE_FILTER = FileExtensionFilter(JPEG_IMAGE_EXTENSION)


def get_image_filter(settings=None) -> FileExtensionFilter:
    """
    Extension filter for the configured image extension.

    Args:
        settings: UtilitySettings to read ``image_extension`` from. Defaults
                  to the global settings.

    Returns:
        JPEG_IMAGE_FILTER when the configured extension is ".jpg", otherwise
        a new FileExtensionFilter.
    """
    if settings is None:
        settings = get_settings()
    if settings.image_extension == JPEG_IMAGE_EXTENSION:
        return JPEG_IMAGE_FILTER
    return FileExtensionFilter(settings.image_extension)


def _modified_millis(path: Path) -> int:
    """Modification time in epoch ms; 0 for a dangling link or a vanished entry."""
    try:
        return path.stat().st_mtime_ns // NANOS_PER_MILLI
    except FileNotFoundError:
        logger.debug("No modification time for %s, treating it as the epoch", path)
        return 0


class BoundedAgeFileFilter:
    """
    Accepts a bounded number of regular files not modified after a cutoff.

    **Conceptual**: Used while listing a directory to pick "up to N files
    that are old enough", e.g. a cleanup job that archives at most 100 files
    older than a week per run.

    **Functionally**, for each (directory, name) entry in turn:
      1. Directories are rejected.
      2. If a cutoff is set, entries last modified strictly after the cutoff
         are rejected. An entry modified exactly at the cutoff is eligible.
         Comparison is at millisecond resolution. An entry with no
         modification time (a dangling symlink, or a file deleted while the
         directory is being listed) counts as modified at the epoch, so it
         stays eligible for any cutoff from 1970 on.
      3. Counting:
           - maximum == 0 means unbounded: every eligible entry is accepted.
           - maximum == N > 0 accepts exactly the first N eligible entries
             and rejects every eligible entry after that.
         ``accepted_count`` reports how many entries were accepted so far.

    **Thread safety**: The counter is plain per-instance state. One filter
    instance serves one single-threaded traversal; it is not reset and must
    not be shared between concurrent traversals.

    Example:
        >>> week_old = BoundedAgeFileFilter.older_than_age(timedelta(days=7), maximum=100)
        >>> to_archive = list_files("/var/spool/outgoing", week_old)
    """

    def __init__(self, maximum: int = 0, older_than: Optional[Any] = None):
        """
        Args:
            maximum: Maximum number of entries to accept; 0 for no limit.
            older_than: Cutoff instant (datetime, pandas.Timestamp,
                        PrecisionTimestamp, numpy.datetime64 or epoch ms),
                        or None for no age limit.

        Raises:
            PreconditionError: If maximum is negative.
        """
        if maximum < 0:
            raise PreconditionError(f"maximum must be >= 0, got {maximum}")
        self._maximum = maximum
        self._older_than = older_than
        self._cutoff_millis = None if older_than is None else to_epoch_millis(older_than)
        self._accepted_count = 0

    @classmethod
    def older_than_age(
        cls,
        age: timedelta,
        maximum: int = 0,
        clock: Optional[Clock] = None,
    ) -> "BoundedAgeFileFilter":
        """
        Build a filter whose cutoff is ``clock.now() - age``.

        Args:
            age: Minimum age of accepted entries.
            maximum: Maximum number of entries to accept; 0 for no limit.
            clock: Time source; RealClock when omitted.
        """
        clock = clock or RealClock()
        cutoff: datetime = clock.now() - age
        return cls(maximum=maximum, older_than=cutoff)

    @property
    def maximum(self) -> int:
        return self._maximum

    @property
    def older_than(self) -> Optional[Any]:
        return self._older_than

    @property
    def accepted_count(self) -> int:
        return self._accepted_count

    def accept(self, directory: PathLike, name: str) -> bool:
        path = Path(directory) / name
        if path.is_dir():
            return False

        if self._cutoff_millis is not None:
            modified_millis = _modified_millis(path)
            if modified_millis > self._cutoff_millis:
                return False

        if self._maximum == 0 or self._accepted_count < self._maximum:
            self._accepted_count += 1
            return True
        return False

    def __call__(self, directory: PathLike, name: str) -> bool:
        return self.accept(directory, name)

    def __repr__(self) -> str:
        return (
            f"BoundedAgeFileFilter(maximum={self._maximum}, "
            f"older_than={self._older_than!r}, accepted={self._accepted_count})"
        )


def list_files(
    directory: PathLike,
    file_filter: Union[BoundedAgeFileFilter, Callable[[Path], bool]],
) -> List[Path]:
    """
    List the entries of a directory that a filter accepts.

    **Functionally**:
      - Entries are visited in name order, so count-bounded filters pick a
        reproducible subset.
      - A BoundedAgeFileFilter is called with (directory, name); any other
        filter is called with the entry's Path.
      - Not recursive.

    Args:
        directory: Directory to enumerate.
        file_filter: Path predicate or BoundedAgeFileFilter.

    Returns:
        Accepted entries as Paths, in name order.

    Raises:
        FileNotFoundError: If directory does not exist.
        NotADirectoryError: If directory is not a directory.
    """
    directory = Path(directory)
    entries = sorted(directory.iterdir(), key=lambda entry: entry.name)

    if isinstance(file_filter, BoundedAgeFileFilter):
        accepted = [entry for entry in entries if file_filter.accept(directory, entry.name)]
    else:
        accepted = [entry for entry in entries if file_filter(entry)]

    logger.debug(
        "Accepted %d of %d entries in %s with %r",
        len(accepted), len(entries), directory, file_filter,
    )
    return accepted
