"""
Change notification primitives.

A Signal is a per-component publish/subscribe channel. Listeners are called
with ``(sender, args)`` in connection order. Components clear their signals
when they are disposed so no listener outlives its sender.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional


class Lifecycle(str, Enum):
    """Disposal state of models and widgets."""
    ACTIVE = "active"
    DISPOSED = "disposed"


class ListChangeType(str, Enum):
    """Kind of structural change on an observable list."""
    INSERT = "insert"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    CLEAR = "clear"


@dataclass(frozen=True)
class ListChange:
    """
    Payload emitted for every list mutation.

    For ``REPLACE`` produced by a single-slot ``set`` the old and new values
    are the items themselves; for a range ``replace`` they are lists of the
    removed and inserted items. ``MOVE`` uses ``index`` as the source and
    ``new_index`` as the destination. ``CLEAR`` carries every removed item
    in ``old_value``.
    """
    kind: ListChangeType
    index: int = -1
    old_value: Any = None
    new_value: Any = None
    new_index: int = -1

    @property
    def old_items(self) -> List[Any]:
        """Items that left the list, always as a list."""
        return _as_items(self.old_value)

    @property
    def new_items(self) -> List[Any]:
        """Items that entered the list, always as a list."""
        return _as_items(self.new_value)


def _as_items(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return list(value)
    return [value]


@dataclass(frozen=True)
class StateChange:
    """Payload for a scalar state change (mode, active index, metadata)."""
    name: str
    old_value: Any
    new_value: Any


Listener = Callable[[Any, Any], None]


class Signal:
    """A typed event channel bound to a single sender."""

    def __init__(self, sender: Any):
        self.sender = sender
        self._listeners: List[Listener] = []

    def connect(self, callback: Listener) -> bool:
        """Connect a listener. Returns False if it was already connected."""
        if callback in self._listeners:
            return False
        self._listeners.append(callback)
        return True

    def disconnect(self, callback: Listener) -> bool:
        """Disconnect a listener. Returns False if it was not connected."""
        try:
            self._listeners.remove(callback)
        except ValueError:
            return False
        return True

    def emit(self, args: Optional[Any] = None):
        """Call every listener with ``(sender, args)``."""
        for callback in list(self._listeners):
            callback(self.sender, args)

    def clear(self):
        """Drop all listeners."""
        self._listeners.clear()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
