"""A bijective mapping between two sets."""

from collections.abc import Hashable, Iterator
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V", bound=Hashable)


class BiMap(Generic[K, V]):
    """Mapping that can be traversed from left to right and right to left."""

    def __init__(self) -> None:
        self._fwd: dict[K, V] = {}
        self._rev: dict[V, K] = {}

    def forward(self, key: K) -> V:
        """Map a left element to its right element."""
        return self._fwd[key]

    def backward(self, value: V) -> K:
        """Map a right element to its left element."""
        return self._rev[value]

    def insert(self, key: K, value: V) -> None:
        self._fwd[key] = value
        self._rev[value] = key

    def right_contains(self, value: V) -> bool:
        return value in self._rev

    def __iter__(self) -> Iterator[tuple[K, V]]:
        return iter(self._fwd.items())