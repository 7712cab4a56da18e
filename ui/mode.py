"""
Notebook UI - Mode Controller

Command mode is for navigation and bulk operations; edit mode sends
keystrokes to the active cell.
"""
from enum import Enum
from typing import Callable, Optional

from document.signal import Signal, StateChange
from .selection import SelectionController


class NotebookMode(str, Enum):
    """Interaction mode of a notebook."""
    COMMAND = "command"
    EDIT = "edit"


class ModeController:
    """Owns the notebook mode and the side effects of entering edit mode."""

    def __init__(self, selection: SelectionController,
                 request_refresh: Optional[Callable[[], None]] = None):
        self._selection = selection
        self._request_refresh = request_refresh or (lambda: None)
        self._mode = NotebookMode.COMMAND
        self.state_changed = Signal(self)

    @property
    def mode(self) -> NotebookMode:
        return self._mode

    def set_mode(self, mode):
        """
        Switch modes. Setting the current mode is a no-op.

        Entering edit mode deselects everything but the active cell and
        switches a rendered previewable active cell to its editor.
        """
        mode = NotebookMode(mode)
        if mode == self._mode:
            return
        if mode == NotebookMode.EDIT:
            self._selection.deselect_all()
            widget = self._selection.active_widget
            if widget is not None and widget.previewable and widget.rendered:
                widget.rendered = False
        old, self._mode = self._mode, mode
        self.state_changed.emit(StateChange("mode", old, mode))
        self._request_refresh()
