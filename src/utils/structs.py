"""
Fixed-arity structural tuples: Tuple2, Tuple3 and Tuple4.

**Conceptual**: Sometimes a function needs to hand back two, three or four
loosely related values without inventing a named class for them (a key and
its count, a record and the file it came from). These holders give such
groupings a stable shape with value semantics:
  - Immutable after construction (frozen dataclasses).
  - Equal iff they have the same arity and every slot is equal (None-safe).
  - Hashable, so they work as dict keys and set members. Slots may hold
    unhashable containers (lists, dicts, sets): those are hashed by content
    (see src.utils.hashing), so such a tuple only stays a valid key while
    the container is left unchanged.

**Shape composition**: A Tuple3 is "a Tuple2 plus one more slot" and a Tuple4
is "a Tuple3 plus one more slot", but the classes do not inherit from each
other. Each arity is its own product type, and the smaller shape is exposed
through the ``head`` property. The hash is built the same way: the new slot
is folded in first, then the hash of the embedded smaller tuple.

**Usage**:
    pair = Tuple2("QQQ", 42)
    name, count = pair
    copy = Tuple2.copy_of(pair)
    assert copy == pair and hash(copy) == hash(pair)
"""

from dataclasses import dataclass
from typing import Any, Generic, Iterator, TypeVar

from src.utils.errors import PreconditionError
from src.utils.hashing import SEED, combine_hash

X = TypeVar("X")
Y = TypeVar("Y")
Z = TypeVar("Z")
W = TypeVar("W")


def _require_same_shape(cls: type, other: Any) -> None:
    if other is None:
        raise PreconditionError(f"Can't create {cls.__name__} from None")
    if not isinstance(other, cls):
        raise PreconditionError(
            f"Can't create {cls.__name__} from {type(other).__name__}"
        )


@dataclass(frozen=True)
class Tuple2(Generic[X, Y]):
    """
    Immutable pair of heterogeneous values.

    Attributes:
        first: First slot.
        second: Second slot.
    """
    first: X
    second: Y

    @classmethod
    def copy_of(cls, other: "Tuple2[X, Y]") -> "Tuple2[X, Y]":
        """
        Copy-construct from another Tuple2.

        Raises:
            PreconditionError: If other is None or not a Tuple2.
        """
        _require_same_shape(cls, other)
        return cls(other.first, other.second)

    def __iter__(self) -> Iterator[Any]:
        return iter((self.first, self.second))

    def __hash__(self) -> int:
        result = combine_hash(SEED, self.first)
        return combine_hash(result, self.second)


@dataclass(frozen=True)
class Tuple3(Generic[X, Y, Z]):
    """
    Immutable triple: the shape of a Tuple2 plus a third slot.

    Attributes:
        first: First slot.
        second: Second slot.
        third: Third slot.
    """
    first: X
    second: Y
    third: Z

    @classmethod
    def copy_of(cls, other: "Tuple3[X, Y, Z]") -> "Tuple3[X, Y, Z]":
        """
        Copy-construct from another Tuple3.

        Raises:
            PreconditionError: If other is None or not a Tuple3.
        """
        _require_same_shape(cls, other)
        return cls(other.first, other.second, other.third)

    @property
    def head(self) -> Tuple2[X, Y]:
        """The first two slots as a Tuple2."""
        return Tuple2(self.first, self.second)

    def __iter__(self) -> Iterator[Any]:
        return iter((self.first, self.second, self.third))

    def __hash__(self) -> int:
        result = combine_hash(SEED, self.third)
        return combine_hash(result, hash(self.head))


@dataclass(frozen=True)
class Tuple4(Generic[X, Y, Z, W]):
    """
    Immutable quadruple: the shape of a Tuple3 plus a fourth slot.

    Two Tuple4 values are equal iff their Tuple3 portions (``head``) are
    equal and their fourth slots are equal.

    Attributes:
        first: First slot.
        second: Second slot.
        third: Third slot.
        fourth: Fourth slot.
    """
    first: X
    second: Y
    third: Z
    fourth: W

    @classmethod
    def copy_of(cls, other: "Tuple4[X, Y, Z, W]") -> "Tuple4[X, Y, Z, W]":
        """
        Copy-construct from another Tuple4.

        Raises:
            PreconditionError: If other is None or not a Tuple4.
        """
        _require_same_shape(cls, other)
        return cls(other.first, other.second, other.third, other.fourth)

    @property
    def head(self) -> Tuple3[X, Y, Z]:
        """The first three slots as a Tuple3."""
        return Tuple3(self.first, self.second, self.third)

    def __iter__(self) -> Iterator[Any]:
        return iter((self.first, self.second, self.third, self.fourth))

    def __hash__(self) -> int:
        result = combine_hash(SEED, self.fourth)
        return combine_hash(result, hash(self.head))
