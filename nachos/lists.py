"""A queue of arbitrary items, each carrying an integer sort key."""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Iterator

__all__ = ["KeyedList"]


class KeyedList:
    """A FIFO list whose items can also be kept in increasing key order.

    Items added with :meth:`append` or :meth:`prepend` get key 0; items added
    with :meth:`sorted_insert` are placed after every item whose key is not
    larger. Removal operations return ``None`` when the list is empty.
    """

    def __init__(self) -> None:
        self._entries: deque[tuple[int, Any]] = deque()

    def append(self, item: Any) -> None:
        """Put ``item`` at the end of the list."""
        self._entries.append((0, item))

    def prepend(self, item: Any) -> None:
        """Put ``item`` at the front of the list."""
        self._entries.appendleft((0, item))

    def pop(self) -> Any:
        """Remove and return the first item, or None if the list is empty."""
        popped = self.sorted_pop()
        return None if popped is None else popped[0]

    def for_each(self, func: Callable[[Any], object]) -> None:
        """Call ``func`` on every item, front to back."""
        for item in self:
            func(item)

    def is_empty(self) -> bool:
        """Return True if the list holds no items."""
        return not self._entries

    def get(self, index: int) -> Any:
        """Return the item at ``index``, or None if there is no such position."""
        if 0 <= index < len(self._entries):
            return self._entries[index][1]
        return None

    def discard(self, item: Any) -> None:
        """Remove every occurrence of ``item`` (by identity), keeping the order of the rest."""
        self._entries = deque(entry for entry in self._entries if entry[1] is not item)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return (item for _, item in self._entries)

    def sorted_insert(self, item: Any, key: int) -> None:
        """Insert ``item`` before the first entry whose key is greater than ``key``."""
        position = next(
            (i for i, (existing, _) in enumerate(self._entries) if key < existing),
            len(self._entries),
        )
        self._entries.insert(position, (key, item))

    def sorted_pop(self) -> tuple[Any, int] | None:
        """Remove the first entry and return ``(item, key)``, or None if empty."""
        if not self._entries:
            return None
        key, item = self._entries.popleft()
        return item, key

    def top(self) -> Any:
        """Return the first item without removing it, or None if empty."""
        return self._entries[0][1] if self._entries else None