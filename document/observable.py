"""Observable ordered list that reports each mutation as a ListChange."""
from typing import Any, Generic, Iterator, List, Optional, Sequence, TypeVar

from .signal import ListChange, ListChangeType, Signal

T = TypeVar("T")


class ObservableList(Generic[T]):
    """
    A list which emits ``changed`` after every mutation.

    Mutations that change nothing (moving an item onto itself, removing an
    item that is not present) emit nothing.
    """

    def __init__(self, items: Optional[Sequence[T]] = None):
        self._items: List[T] = list(items or [])
        self.changed = Signal(self)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def get(self, index: int) -> Optional[T]:
        """Get the item at ``index``, or None if out of range."""
        if index < 0 or index >= len(self._items):
            return None
        return self._items[index]

    def index_of(self, item: T) -> int:
        """Get the index of ``item`` by identity, -1 if not found."""
        return next((i for i, x in enumerate(self._items) if x is item), -1)

    def add(self, item: T) -> int:
        """Append an item and return its index."""
        return self.insert(len(self._items), item)

    def insert(self, index: int, item: T) -> int:
        """Insert an item, clamping ``index`` into ``[0, len]``."""
        index = max(0, min(index, len(self._items)))
        self._items.insert(index, item)
        self.changed.emit(ListChange(ListChangeType.INSERT, index, None, item))
        return index

    def set(self, index: int, item: T) -> Optional[T]:
        """Replace the item at ``index`` in place and return the old item."""
        if index < 0 or index >= len(self._items):
            return None
        old = self._items[index]
        self._items[index] = item
        self.changed.emit(ListChange(ListChangeType.REPLACE, index, old, item))
        return old

    def remove(self, item: T) -> int:
        """Remove an item by identity and return its former index."""
        index = self.index_of(item)
        if index >= 0:
            self.remove_at(index)
        return index

    def remove_at(self, index: int) -> Optional[T]:
        """Remove and return the item at ``index``."""
        if index < 0 or index >= len(self._items):
            return None
        item = self._items.pop(index)
        self.changed.emit(ListChange(ListChangeType.REMOVE, index, item, None))
        return item

    def move(self, from_index: int, to_index: int) -> bool:
        """Move the item at ``from_index`` so it ends up at ``to_index``."""
        n = len(self._items)
        if not (0 <= from_index < n and 0 <= to_index < n):
            return False
        if from_index == to_index:
            return False
        item = self._items.pop(from_index)
        self._items.insert(to_index, item)
        self.changed.emit(ListChange(
            ListChangeType.MOVE, from_index, item, item, new_index=to_index
        ))
        return True

    def replace(self, index: int, count: int, items: Sequence[T]) -> List[T]:
        """
        Replace ``count`` items starting at ``index`` with ``items``.

        Args:
            index: First slot to replace (clamped into ``[0, len]``)
            count: Number of existing items to remove
            items: Items inserted at ``index``

        Returns:
            The removed items
        """
        index = max(0, min(index, len(self._items)))
        count = max(0, count)
        removed = self._items[index:index + count]
        added = list(items)
        self._items[index:index + count] = added
        self.changed.emit(ListChange(ListChangeType.REPLACE, index, removed, added))
        return removed

    def clear(self) -> List[T]:
        """Remove every item and return them."""
        removed = self._items
        self._items = []
        self.changed.emit(ListChange(ListChangeType.CLEAR, 0, removed, None))
        return removed
