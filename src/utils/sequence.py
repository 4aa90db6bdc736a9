"""
Process-wide monotonically increasing sequence numbers.

**Conceptual**: Some callers need a number that no other caller in the same
process will ever get: a suffix for a temporary file name, a correlation
number for a log line, an ordering tiebreaker. A SequenceGenerator hands
these out from one counter.

**Guarantees**:
  - Values are unique and increasing within one running process only. They
    are not persisted, restart from the start value after a restart and are
    not coordinated between processes.
  - Each call reads and advances the counter under a lock, so concurrent
    callers never see the same value and no increment is lost.
  - The first value returned is the start value (0 by default).
  - The counter wraps around with signed two's-complement semantics at the
    configured width. 64 bits is the default; 32 bits reproduces the
    behaviour of the original int-based counter (2**31 - 1 is followed by
    -2**31).

**Usage**:
    next_sequence_number()          # process-wide counter
    generator = SequenceGenerator() # injectable instance (tests, isolation)
    generator.next_sequence_number()
"""

from threading import Lock
from typing import Optional

from src.config.settings import get_settings
from src.utils.errors import PreconditionError

SUPPORTED_BITS = (32, 64)


class SequenceGenerator:
    """Thread-safe counter returning consecutive integers."""

    def __init__(self, start: int = 0, bits: int = 64):
        """
        Args:
            start: First value handed out.
            bits: Integer width for wraparound, 32 or 64.

        Raises:
            PreconditionError: If bits is not 32 or 64.
        """
        if bits not in SUPPORTED_BITS:
            raise PreconditionError(f"bits must be one of {SUPPORTED_BITS}, got {bits}")
        self._bits = bits
        self._modulus = 1 << bits
        self._sign_bit = 1 << (bits - 1)
        self._next = self._wrap(start)
        self._lock = Lock()

    @property
    def bits(self) -> int:
        return self._bits

    def _wrap(self, value: int) -> int:
        value &= self._modulus - 1
        return value - self._modulus if value >= self._sign_bit else value

    def next_sequence_number(self) -> int:
        """Return the current value and advance the counter by one."""
        with self._lock:
            value = self._next
            self._next = self._wrap(value + 1)
        return value

    def __repr__(self) -> str:
        return f"SequenceGenerator(next={self._next}, bits={self._bits})"


_global_sequence: Optional[SequenceGenerator] = None
_global_lock = Lock()


def get_global_sequence() -> SequenceGenerator:
    """
    The process-wide generator, created on first use from the settings.

    Starts at 0 and uses ``UtilitySettings.sequence_bits`` for its width.
    """
    global _global_sequence

    if _global_sequence is None:
        with _global_lock:
            if _global_sequence is None:
                _global_sequence = SequenceGenerator(bits=get_settings().sequence_bits)
    return _global_sequence


def next_sequence_number() -> int:
    """Next value from the process-wide generator."""
    return get_global_sequence().next_sequence_number()
