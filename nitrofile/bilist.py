"""A list that can also be looked up from element to index."""

from collections.abc import Hashable, Iterator
from typing import Generic, Optional, TypeVar

T = TypeVar("T", bound=Hashable)


class BiList(Generic[T]):
    """A list of distinct elements with index lookup in both directions."""

    def __init__(self) -> None:
        self._items: list[T] = []
        self._reverse: dict[T, int] = {}

    def push(self, item: T) -> int:
        """Append ``item`` unless present; return its index either way."""
        idx = self._reverse.get(item)
        if idx is None:
            idx = len(self._items)
            self._items.append(item)
            self._reverse[item] = idx
        return idx

    def get_elem(self, idx: int) -> Optional[T]:
        """Return the element at ``idx``, or None if out of range."""
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    def index(self, item: T) -> int:
        """Return the index of ``item``; raise KeyError if absent."""
        return self._reverse[item]

    def clear(self) -> None:
        self._items.clear()
        self._reverse.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, idx: int) -> T:
        return self._items[idx]

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)