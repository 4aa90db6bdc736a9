"""
Time and clock abstractions, and a timestamp that keeps its nanoseconds.

**Conceptual**: Two separate concerns live here.

1. Clocks. Code that needs "now" (for example to turn "files older than a
   week" into a concrete cutoff instant) asks a Clock instead of calling
   datetime.now() directly. Production passes a RealClock, tests pass a
   FrozenClock, and the result becomes deterministic.

2. PrecisionTimestamp. Most epoch-based representations carry milliseconds.
   Rebuilding a timestamp from its millisecond epoch silently drops the
   sub-millisecond part: 12:00:00.123456789 comes back as 12:00:00.123.
   PrecisionTimestamp stores the full nanosecond epoch, so copying one
   (from another PrecisionTimestamp, a pandas Timestamp, a numpy datetime64
   or a datetime) reproduces both the millisecond epoch AND the
   nanosecond-of-second field exactly.

**Teaching note**: Python's datetime stops at microseconds. pandas.Timestamp
and numpy.datetime64 go down to nanoseconds, which is why those two types
are converted through pandas. A plain datetime is converted with integer
timedelta arithmetic instead, so instants outside pandas' nanosecond range
(years 1677 to 2262, datetime.max included) still have an epoch.
"""

import numbers
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

import numpy as np
import pandas as pd

from src.utils.errors import PreconditionError

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MILLI = 1_000_000
MILLIS_PER_SECOND = 1_000
MAX_NANOS = NANOS_PER_SECOND - 1
NANOS_PER_MICRO = 1_000

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MICROSECOND = timedelta(microseconds=1)


class Clock(Protocol):
    """
    Abstract time source protocol.

    **Usage**: Consumers accept a Clock (constructor or function parameter)
    and call clock.now() whenever they need the current time.

    **Example**:
        # Cut off everything modified more than a day before "now":
        cutoff = clock.now() - timedelta(days=1)

        # In production:
        RealClock()

        # In tests:
        FrozenClock(datetime(2015, 1, 5, tzinfo=timezone.utc))
    """

    def now(self) -> datetime:
        """
        Return the current time according to this clock.

        Returns:
            datetime object representing "now" (timezone-aware, UTC preferred).
        """
        ...


class RealClock:
    """Clock that returns the actual current system time (UTC)."""

    def now(self) -> datetime:
        # Use timezone.utc to ensure timezone-aware datetime
        return datetime.now(timezone.utc)


class FrozenClock:
    """
    Clock that always returns a fixed timestamp.

    **Usage**:
        clock = FrozenClock(datetime(2015, 1, 5, tzinfo=timezone.utc))
        clock.now()  # Always 2015-01-05T00:00:00+00:00
    """

    def __init__(self, fixed_now: datetime):
        """
        Args:
            fixed_now: The datetime to return on every call to now().
                       Should be timezone-aware (UTC recommended).
        """
        self._fixed_now = fixed_now

    def now(self) -> datetime:
        return self._fixed_now


def get_real_clock() -> Clock:
    """Factory function to create a RealClock instance."""
    return RealClock()


def get_frozen_clock(fixed_now: datetime) -> Clock:
    """Factory function to create a FrozenClock with a given timestamp."""
    return FrozenClock(fixed_now)


def _epoch_nanos_of(value: Any) -> int:
    """
    Nanosecond epoch of any supported timestamp value.

    Naive datetimes are read as UTC wall time (pandas' convention).
    Plain numbers are rejected: their unit is ambiguous.
    """
    if isinstance(value, PrecisionTimestamp):
        return value.epoch_nanos
    if value is None:
        raise PreconditionError("Timestamp value cannot be None")
    if value is pd.NaT:
        raise PreconditionError(f"Cannot take the epoch of a missing timestamp: {value!r}")
    if isinstance(value, (bool, np.bool_, numbers.Number)):
        raise PreconditionError(
            f"A bare {type(value).__name__} is not a timestamp: {value!r}"
        )
    # pd.Timestamp subclasses datetime and carries nanoseconds
    if isinstance(value, datetime) and not isinstance(value, pd.Timestamp):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return ((value - EPOCH) // ONE_MICROSECOND) * NANOS_PER_MICRO
    converted = pd.Timestamp(value)
    if converted is pd.NaT:
        raise PreconditionError(f"Cannot take the epoch of a missing timestamp: {value!r}")
    return int(converted.value)


def to_epoch_millis(value: Any) -> int:
    """
    Convert a timestamp-like value to integer milliseconds since the epoch.

    **Functionally**:
      - Integers (int, numpy.int64 and other integral types): assumed to
        already be epoch milliseconds, returned as a plain int.
      - PrecisionTimestamp: its ``millis``.
      - datetime: exact integer arithmetic over its full range. Naive
        datetimes are treated as UTC.
      - pandas.Timestamp, numpy.datetime64: converted through pandas.
      - float, bool: rejected. A float epoch has no agreed unit.
      - Sub-millisecond parts are floored (toward negative infinity), so
        1969-12-31 23:59:59.9995 maps to -1, not 0.

    Args:
        value: Timestamp-like value.

    Returns:
        Milliseconds since 1970-01-01T00:00:00Z.

    Raises:
        PreconditionError: If value is None, NaT, a float or a bool.
    """
    if isinstance(value, (bool, np.bool_)):
        raise PreconditionError("A bool is not a timestamp")
    if isinstance(value, numbers.Integral):
        return int(value)
    return _epoch_nanos_of(value) // NANOS_PER_MILLI


@dataclass(frozen=True, order=True)
class PrecisionTimestamp:
    """
    Immutable UTC instant with nanosecond precision.

    **Conceptual**: The value is a millisecond epoch offset plus an
    independent nanosecond-of-second field in [0, 999_999_999]. Both are
    derived from one stored integer (nanoseconds since the epoch), so they
    can never drift apart and a copy can never truncate either of them.

    **Construction paths**:
      - ``PrecisionTimestamp.copy_of(original)``: exact copy of another
        timestamp, both components preserved.
      - ``PrecisionTimestamp.from_parts(millis, nanos)``: explicit pair. The
        whole seconds come from ``millis``; the sub-second part is taken from
        ``nanos`` and replaces whatever sub-second part ``millis`` carried.

    Equality and ordering are plain instant semantics.

    Attributes:
        epoch_nanos: Nanoseconds since 1970-01-01T00:00:00Z.
    """
    epoch_nanos: int

    def __post_init__(self):
        if isinstance(self.epoch_nanos, bool) or not isinstance(self.epoch_nanos, int):
            raise PreconditionError(
                f"epoch_nanos must be an int, got {type(self.epoch_nanos).__name__}"
            )

    @classmethod
    def copy_of(cls, original: Any) -> "PrecisionTimestamp":
        """
        Copy another timestamp, keeping its millisecond epoch and its nanos.

        Args:
            original: PrecisionTimestamp, pandas.Timestamp, numpy.datetime64
                      or datetime (naive datetimes are read as UTC).

        Returns:
            PrecisionTimestamp equal to original down to the nanosecond
            (datetime sources only carry microseconds to begin with).

        Raises:
            PreconditionError: If original is None or NaT.
        """
        return cls(_epoch_nanos_of(original))

    @classmethod
    def from_parts(cls, millis: int, nanos: int) -> "PrecisionTimestamp":
        """
        Build a timestamp from a millisecond epoch and a nanosecond-of-second.

        Example:
            >>> ts = PrecisionTimestamp.from_parts(1_700_000_000_123, 123_456_789)
            >>> ts.millis, ts.nanos
            (1700000000123, 123456789)

        Raises:
            PreconditionError: If nanos is outside [0, 999_999_999].
        """
        if not 0 <= nanos <= MAX_NANOS:
            raise PreconditionError(
                f"nanos must be between 0 and {MAX_NANOS}, got {nanos}"
            )
        whole_seconds = millis // MILLIS_PER_SECOND
        return cls(whole_seconds * NANOS_PER_SECOND + nanos)

    @classmethod
    def now(cls) -> "PrecisionTimestamp":
        """Current wall-clock time at the platform's best resolution."""
        return cls(time.time_ns())

    @property
    def millis(self) -> int:
        """Milliseconds since the epoch (sub-millisecond part floored)."""
        return self.epoch_nanos // NANOS_PER_MILLI

    @property
    def nanos(self) -> int:
        """Nanosecond-of-second, in [0, 999_999_999]."""
        return self.epoch_nanos % NANOS_PER_SECOND

    def to_pandas(self) -> pd.Timestamp:
        """
        UTC pandas.Timestamp, exact to the nanosecond.

        Raises:
            pandas.errors.OutOfBoundsDatetime: Outside years 1677 to 2262.
        """
        return pd.Timestamp(self.epoch_nanos, unit="ns").tz_localize("UTC")

    def to_datetime64(self) -> np.datetime64:
        """numpy.datetime64 in nanosecond units, exact."""
        return np.datetime64(self.epoch_nanos, "ns")

    def to_datetime(self) -> datetime:
        """UTC datetime. datetime has no nanoseconds: the last three digits are dropped."""
        return EPOCH + timedelta(microseconds=self.epoch_nanos // NANOS_PER_MICRO)

    def __str__(self) -> str:
        # 2024-01-15T12:00:00.123456789+00:00
        whole_seconds = self.to_datetime().replace(microsecond=0, tzinfo=None)
        return f"{whole_seconds.isoformat()}.{self.nanos:09d}+00:00"
