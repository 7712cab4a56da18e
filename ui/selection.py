"""
Notebook UI - Selection Controller

Tracks the active cell index and the set of additionally selected widgets
of a notebook mirror. Only active index changes are notified; selection
membership is shown by the next refresh pass.
"""
from typing import Callable, Iterable, List, Optional, Protocol, Set

from document.signal import Signal, StateChange
from .cells import CellWidget


class Mirror(Protocol):
    def child_count(self) -> int: ...
    def child_at(self, index: int) -> Optional[CellWidget]: ...
    def children(self) -> List[CellWidget]: ...
    def index_of(self, widget: CellWidget) -> int: ...


class SelectionController:
    """
    Active index plus selected set over a mirror.

    The active widget is always considered selected; it cannot be selected
    or deselected explicitly.
    """

    def __init__(self, mirror: Mirror, request_refresh: Optional[Callable[[], None]] = None):
        self._mirror = mirror
        self._request_refresh = request_refresh or (lambda: None)
        self._active_index: Optional[int] = 0 if mirror.child_count() else None
        self._selected: Set[CellWidget] = set()
        self.state_changed = Signal(self)

    @property
    def active_index(self) -> Optional[int]:
        return self._active_index

    @property
    def active_widget(self) -> Optional[CellWidget]:
        if self._active_index is None:
            return None
        return self._mirror.child_at(self._active_index)

    def set_active_index(self, index: int):
        """Set the active index, clamped into the mirror's bounds."""
        count = self._mirror.child_count()
        if count == 0:
            self._set_active(None)
            return
        self._set_active(max(0, min(int(index), count - 1)))

    def select(self, widget: CellWidget):
        """Add a widget of the mirror to the selection. Foreign widgets are ignored."""
        if self._mirror.index_of(widget) < 0:
            return
        if widget is self.active_widget or widget in self._selected:
            return
        self._selected.add(widget)
        self._request_refresh()

    def deselect(self, widget: CellWidget):
        if widget is self.active_widget or widget not in self._selected:
            return
        self._selected.discard(widget)
        self._request_refresh()

    def is_selected(self, widget: CellWidget) -> bool:
        return widget is self.active_widget or widget in self._selected

    def selected_widgets(self) -> List[CellWidget]:
        """Effectively selected widgets, in mirror order."""
        return [w for w in self._mirror.children() if self.is_selected(w)]

    def deselect_all(self):
        """Drop every explicit selection; the active widget stays selected."""
        if not self._selected:
            return
        self._selected.clear()
        self._request_refresh()

    def purge(self, widgets: Iterable[CellWidget]):
        """Forget widgets that left the mirror. Emits nothing."""
        for widget in widgets:
            self._selected.discard(widget)

    def clamp(self):
        """Bring the active index back into bounds after a structural change."""
        count = self._mirror.child_count()
        if count == 0:
            self._set_active(None)
        elif self._active_index is None:
            self._set_active(0)
        else:
            self._set_active(min(self._active_index, count - 1))

    def reset(self):
        """Clear the selection and activate the first cell, if any."""
        self._selected.clear()
        self._set_active(0 if self._mirror.child_count() else None)

    def _set_active(self, index: Optional[int]):
        if index == self._active_index:
            return
        old, self._active_index = self._active_index, index
        self.state_changed.emit(StateChange("activeCellIndex", old, index))
        self._request_refresh()
