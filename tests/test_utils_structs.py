"""
Tests for src/utils/structs.py and src/utils/hashing.py

Structural equality, hashing and copy construction of the fixed-arity tuples.
"""

import dataclasses

import pytest

from src.utils.errors import PreconditionError
from src.utils.hashing import ODD_PRIME, SEED, combine_hash, hash_all, value_hash
from src.utils.structs import Tuple2, Tuple3, Tuple4


# ============================================================================
# Hash composition
# ============================================================================

def test_combine_hash_none_contributes_zero():
    assert combine_hash(SEED, None) == ODD_PRIME * SEED


def test_combine_hash_is_order_sensitive():
    assert hash_all(1, 2) != hash_all(2, 1)
    assert hash_all() == SEED


def test_combine_hash_stays_in_64_bit_range():
    result = SEED
    for value in range(1000):
        result = combine_hash(result, value * 10**12)
        assert -(2**63) <= result < 2**63


# ============================================================================
# Tuples
# ============================================================================

SAMPLES = [
    Tuple2("a", 1),
    Tuple2(None, None),
    Tuple3("a", 1, 1.5),
    Tuple3("a", None, (2, 3)),
    Tuple4("a", 1, 2.5, "d"),
    Tuple4(None, 1, None, "d"),
]


@pytest.mark.parametrize("value", SAMPLES)
def test_copy_equals_original_and_hashes_equal(value):
    """Test that a copy-constructed tuple equals and hashes like its source."""
    copy = type(value).copy_of(value)

    assert copy == value
    assert copy is not value
    assert hash(copy) == hash(value)


@pytest.mark.parametrize("cls,values", [
    (Tuple2, ("a", 1)),
    (Tuple3, ("a", 1, "c")),
    (Tuple4, ("a", 1, "c", 4.0)),
])
def test_changing_any_slot_breaks_equality(cls, values):
    """Test that replacing one slot (others fixed) makes tuples unequal."""
    original = cls(*values)

    for field in dataclasses.fields(cls):
        changed = dataclasses.replace(original, **{field.name: "changed"})
        assert changed != original
        changed_to_none = dataclasses.replace(original, **{field.name: None})
        assert changed_to_none != original


def test_tuple4_equality_is_head_and_fourth():
    """Test that Tuple4 equality is Tuple3 portion equality plus fourth slot."""
    base = Tuple4(1, 2, 3, 4)

    assert base == Tuple4(1, 2, 3, 4)
    assert base.head == Tuple3(1, 2, 3)
    assert base != Tuple4(1, 2, 0, 4)
    assert base != Tuple4(1, 2, 3, 0)


def test_different_arities_are_never_equal():
    assert Tuple2(1, 2) != Tuple3(1, 2, None)
    assert Tuple3(1, 2, 3) != Tuple4(1, 2, 3, None)
    assert Tuple2(1, 2) != (1, 2)


def test_hash_composes_smaller_tuple():
    """Test that Tuple3/Tuple4 hashes fold the new slot then the head's hash."""
    triple = Tuple3("x", "y", "z")
    quad = Tuple4("x", "y", "z", "w")

    assert hash(Tuple2("x", "y")) == hash_all("x", "y")
    assert hash(triple) == hash_all("z", hash(Tuple2("x", "y")))
    assert hash(quad) == hash_all("w", hash(triple))


def test_tuples_are_immutable():
    pair = Tuple2(1, 2)

    with pytest.raises(dataclasses.FrozenInstanceError):
        pair.first = 3


def test_tuples_unpack_in_declared_order():
    first, second, third, fourth = Tuple4("a", "b", "c", "d")

    assert (first, second, third, fourth) == ("a", "b", "c", "d")
    assert list(Tuple3(1, 2, 3)) == [1, 2, 3]


def test_tuples_work_as_dict_keys():
    counts = {Tuple2("QQQ", "2024-01-15"): 1}
    counts[Tuple2("QQQ", "2024-01-15")] += 1

    assert counts == {Tuple2("QQQ", "2024-01-15"): 2}


@pytest.mark.parametrize("cls,other", [
    (Tuple2, None),
    (Tuple3, None),
    (Tuple4, None),
    (Tuple3, Tuple2(1, 2)),
    (Tuple2, Tuple3(1, 2, 3)),
    (Tuple4, (1, 2, 3, 4)),
])
def test_copy_of_rejects_none_and_other_shapes(cls, other):
    with pytest.raises(PreconditionError):
        cls.copy_of(other)


# ============================================================================
# Unhashable slot values
# ============================================================================

@pytest.mark.parametrize("left,right", [
    ([1, [2, 3]], [1, [2, 3]]),
    ({"a": [1], "b": 2}, {"b": 2, "a": [1]}),
    ({1, 2}, frozenset({2, 1})),
    (bytearray(b"ab"), b"ab"),
    ((1, [2]), (1, [2])),
])
def test_equal_containers_hash_equal(left, right):
    assert left == right
    assert value_hash(left) == value_hash(right)


def test_list_hash_is_order_sensitive():
    assert value_hash([1, 2]) == hash_all(1, 2)
    assert value_hash([1, 2]) != value_hash([2, 1])


def test_unhashable_non_container_still_raises():
    class Opaque:
        __hash__ = None

    with pytest.raises(TypeError):
        value_hash(Opaque())


def test_tuples_with_list_slots_are_hashable():
    """Test that tuples holding lists hash by content, like any other slot."""
    pair = Tuple2([1], 2)
    quad = Tuple4([1], {"k": [2]}, {3}, None)

    assert pair == Tuple2([1], 2)
    assert hash(pair) == hash(Tuple2([1], 2))
    assert hash(pair) != hash(Tuple2([2], 2))
    assert hash(quad) == hash(Tuple4.copy_of(quad))
    assert {Tuple2([1], 2): "found"}[Tuple2([1], 2)] == "found"
