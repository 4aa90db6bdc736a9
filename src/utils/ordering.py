"""
Comparators for ordering timestamped, identifiable records.

**Conceptual**: Records created by the same store usually come back in
creation order, and "sort by creation time" is the obvious way to restore
that order. Sorting by timestamp alone is not a total order though: two
records created in the same millisecond compare equal, which breaks any
structure that uses the comparator for identity (sorted sets, dedup by
comparison, binary search). The fix is a deterministic tie-break on the id.

**Functionally**:
  - CreationTimestampIdComparator: creation timestamp first (earlier sorts
    first, millisecond resolution), then id (lower sorts first). Returns 0
    only when both are equal.
  - ExplicitOrderComparator: order records by where their id appears in a
    caller-supplied id sequence, falling back to numeric id order when no
    sequence is given.
  - sort_by_creation: bulk sort of a list of records with the same ordering
    as CreationTimestampIdComparator, done with numpy.lexsort.

**Usage**:
    records.sort(key=CREATION_TIMESTAMP_ID_COMPARATOR.key)
    ordered = sort_by_creation(records)
"""

from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from src.utils.time import to_epoch_millis


class Identifiable(Protocol):
    """Anything with a numeric (64-bit) identifier."""

    @property
    def id(self) -> int:
        ...


class TimestampedIdentifiable(Protocol):
    """
    Any record exposing a creation instant and a numeric identifier.

    ``creation_timestamp`` may be a datetime, pandas.Timestamp,
    numpy.datetime64, PrecisionTimestamp or epoch milliseconds (int).
    """

    @property
    def creation_timestamp(self) -> Any:
        ...

    @property
    def id(self) -> int:
        ...


def _sign(left: int, right: int) -> int:
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


class CreationTimestampIdComparator:
    """
    Total order over records by (creation timestamp, id).

    Stateless; use the shared CREATION_TIMESTAMP_ID_COMPARATOR instance
    (also returned by get_instance()).
    """

    @staticmethod
    def get_instance() -> "CreationTimestampIdComparator":
        return CREATION_TIMESTAMP_ID_COMPARATOR

    def compare(self, first: TimestampedIdentifiable, second: TimestampedIdentifiable) -> int:
        """
        Compare two records.

        Returns:
            -1 if first sorts before second, 1 if after, 0 if both the
            creation timestamp (in milliseconds) and the id are equal.
        """
        result = _sign(
            to_epoch_millis(first.creation_timestamp),
            to_epoch_millis(second.creation_timestamp),
        )
        if result == 0:
            result = _sign(first.id, second.id)
        return result

    def __call__(self, first: TimestampedIdentifiable, second: TimestampedIdentifiable) -> int:
        return self.compare(first, second)

    def key(self, record: TimestampedIdentifiable) -> Tuple[int, int]:
        """Sort key equivalent to compare(): ``(epoch millis, id)``."""
        return to_epoch_millis(record.creation_timestamp), record.id

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


CREATION_TIMESTAMP_ID_COMPARATOR = CreationTimestampIdComparator()


def sort_by_creation(records: Iterable[TimestampedIdentifiable]) -> List[TimestampedIdentifiable]:
    """
    Return the records ordered by creation timestamp, then id.

    **Functionally**: Extracts the two sort keys into int64 arrays and lets
    numpy.lexsort (stable, last key is primary) compute the permutation.
    Same order as sorting with CREATION_TIMESTAMP_ID_COMPARATOR.

    Args:
        records: Any iterable of timestamped, identifiable records.

    Returns:
        New list; the input is not modified.
    """
    records = list(records)
    if not records:
        return []
    millis = np.array(
        [to_epoch_millis(record.creation_timestamp) for record in records], dtype=np.int64
    )
    ids = np.array([record.id for record in records], dtype=np.int64)
    order = np.lexsort((ids, millis))
    return [records[index] for index in order]


class ExplicitOrderComparator:
    """
    Orders identifiable records by the position of their id in a given sequence.

    **Functionally**:
      - Equal ids compare 0.
      - With ``ordered_ids``: the record whose id appears first in the
        sequence sorts first. A listed id sorts before an unlisted one, and
        two unlisted ids compare 0.
      - Without ``ordered_ids``: plain numeric id order.

    Example:
        >>> comparator = ExplicitOrderComparator([30, 10, 20])
        >>> sorted(records, key=comparator.sort_key)  # ids 30, 10, 20, then unlisted
    """

    def __init__(self, ordered_ids: Optional[Sequence[int]] = None):
        self._ordered_ids = None if ordered_ids is None else tuple(ordered_ids)
        self._positions: Dict[int, int] = {}
        if self._ordered_ids is not None:
            for position, record_id in enumerate(self._ordered_ids):
                # first occurrence wins
                self._positions.setdefault(record_id, position)

    @property
    def ordered_ids(self) -> Optional[Tuple[int, ...]]:
        return self._ordered_ids

    def compare(self, first: Identifiable, second: Identifiable) -> int:
        first_id, second_id = first.id, second.id
        if first_id == second_id:
            return 0
        if self._ordered_ids is None:
            return _sign(first_id, second_id)
        first_position = self._positions.get(first_id)
        second_position = self._positions.get(second_id)
        if first_position is None and second_position is None:
            return 0
        if second_position is None:
            return -1
        if first_position is None:
            return 1
        return _sign(first_position, second_position)

    def __call__(self, first: Identifiable, second: Identifiable) -> int:
        return self.compare(first, second)

    @property
    def sort_key(self) -> Callable[[Identifiable], Any]:
        """Key function for sorted()/list.sort()."""
        return cmp_to_key(self.compare)
