"""
Seed-and-prime hash composition for structural value types.

Each value is folded into a running result as ``ODD_PRIME * result + hash(value)``,
starting from ``SEED``. ``None`` contributes 0. Results are folded back into the
signed 64-bit range so nested composition stays bounded.

Unhashable containers get a structural hash so any slot value can be folded:
lists and other iterables fold their elements in order, sets hash like the
equal frozenset, bytearrays like the equal bytes, and mappings sum
``hash(key) ^ hash(value)`` over their items (order-insensitive, like dict
equality). Equal values therefore always hash equal. The hash of a mutable
container changes when its contents do.
"""

from collections.abc import Iterable, Mapping, Set
from typing import Any

SEED = 23
ODD_PRIME = 37

_MASK_64 = (1 << 64) - 1
_HALF_64 = 1 << 63


def _fold_64(value: int) -> int:
    value &= _MASK_64
    return value - (1 << 64) if value >= _HALF_64 else value


def value_hash(value: Any) -> int:
    """
    Hash of one slot value: 0 for None, hash() when the value supports it,
    otherwise a structural hash of its contents.

    Raises:
        TypeError: If value is unhashable and not a container.
    """
    if value is None:
        return 0
    try:
        return hash(value)
    except TypeError:
        if isinstance(value, Set):
            return hash(frozenset(value))
        if isinstance(value, bytearray):
            return hash(bytes(value))
        if isinstance(value, Mapping):
            return _fold_64(sum(value_hash(key) ^ value_hash(item) for key, item in value.items()))
        if isinstance(value, Iterable):
            return hash_all(*value)
        raise


def combine_hash(seed: int, value: Any) -> int:
    """
    Fold one value's hash into a running result.

    Args:
        seed: Result accumulated so far (start with SEED).
        value: Any value, or None.

    Returns:
        New accumulated result, in the signed 64-bit range.
    """
    return _fold_64(ODD_PRIME * seed + value_hash(value))


def hash_all(*values: Any) -> int:
    """Fold every value, in order, starting from SEED."""
    result = SEED
    for value in values:
        result = combine_hash(result, value)
    return result
