"""
List-to-map conversion contract.

A ListToMapConverter turns an ordered list of elements into a dict. The
values of the resulting dict may be the very same objects as the input
elements; callers must not assume they are copies.
"""

from typing import Callable, Dict, Generic, List, Optional, Protocol, TypeVar

K = TypeVar("K")
V = TypeVar("V")
L = TypeVar("L")


class ListToMapConverter(Protocol[K, V, L]):
    """Converts a list of L into a mapping of K to V."""

    def convert(self, values: List[L]) -> Dict[K, V]:
        ...


class KeyedListToMapConverter(Generic[K, V, L]):
    """
    ListToMapConverter driven by a key function and an optional value function.

    Elements are processed in list order; when two elements produce the same
    key the later one wins. Without a value function the elements themselves
    become the values.

    Example:
        >>> by_name = KeyedListToMapConverter(key=lambda user: user.name)
        >>> by_name.convert(users)
        {'alice': <User alice>, 'bob': <User bob>}
    """

    def __init__(self, key: Callable[[L], K], value: Optional[Callable[[L], V]] = None):
        self._key = key
        self._value = value

    @classmethod
    def by_id(cls) -> "KeyedListToMapConverter":
        """Converter keyed on each element's ``id``, elements as values."""
        return cls(key=lambda element: element.id)

    def convert(self, values: List[L]) -> Dict[K, V]:
        if self._value is None:
            return {self._key(element): element for element in values}
        return {self._key(element): self._value(element) for element in values}
