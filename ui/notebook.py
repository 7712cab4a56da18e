"""
Notebook UI - Notebook Widgets

StaticNotebook keeps one widget per cell, index-aligned with
``model.cells`` through every insert, remove, move, replace and clear.
Notebook adds the interactive state on top: active cell, selection, mode,
input handling and a batched refresh pass that applies that state to the
widgets.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Set

from fasthtml.common import *

from document.cell import CellModel, CellType
from document.notebook import NotebookModel
from document.signal import Lifecycle, ListChange, ListChangeType, Signal, StateChange
from services.config import get_config
from .cells import CellWidget
from .mode import ModeController, NotebookMode
from .renderer import CellRenderer, default_renderer
from .scheduler import UpdateScheduler
from .selection import SelectionController

logger = logging.getLogger(__name__)


class StaticNotebook:
    """
    A widget mirror of a notebook model's cell list.

    Subclasses react to structure through the ``on_child_added``,
    ``on_child_removed`` and ``on_children_changed`` hooks.
    """

    def __init__(self, renderer: Optional[CellRenderer] = None):
        self._renderer = renderer or default_renderer
        self._model: Optional[NotebookModel] = None
        self._widgets: List[CellWidget] = []
        self._code_mimetype = get_config().default_code_mimetype
        self.lifecycle = Lifecycle.ACTIVE
        self.classes: Set[str] = set()
        self.model_changed = Signal(self)

    @property
    def renderer(self) -> CellRenderer:
        return self._renderer

    @property
    def model(self) -> Optional[NotebookModel]:
        return self._model

    @model.setter
    def model(self, new_model: Optional[NotebookModel]):
        if new_model is self._model or self.is_disposed:
            return
        old_model, self._model = self._model, new_model
        self.on_model_changed(old_model, new_model)
        self.model_changed.emit(None)

    @property
    def code_mimetype(self) -> str:
        return self._code_mimetype

    @property
    def is_disposed(self) -> bool:
        return self.lifecycle == Lifecycle.DISPOSED

    def child_at(self, index: int) -> Optional[CellWidget]:
        if index < 0 or index >= len(self._widgets):
            return None
        return self._widgets[index]

    def child_count(self) -> int:
        return len(self._widgets)

    def children(self) -> List[CellWidget]:
        return list(self._widgets)

    def index_of(self, widget: CellWidget) -> int:
        return next((i for i, w in enumerate(self._widgets) if w is widget), -1)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def toggle_class(self, name: str, on: bool):
        if on:
            self.classes.add(name)
        else:
            self.classes.discard(name)

    def dispose(self):
        """Dispose the widgets and drop the model. The model is not disposed."""
        if self.is_disposed:
            return
        self.lifecycle = Lifecycle.DISPOSED
        if self._model is not None:
            self._disconnect(self._model)
        for widget in self._widgets:
            widget.dispose()
        self._widgets = []
        self._model = None
        self.model_changed.clear()

    def render(self):
        """Render every cell inside the ``#cells`` container."""
        cls = " ".join(["notebook", *sorted(self.classes)])
        return Div(*[w.render() for w in self._widgets], id="cells", cls=cls)

    # -- hooks ---------------------------------------------------------------

    def on_model_changed(self, old_model: Optional[NotebookModel],
                         new_model: Optional[NotebookModel]):
        """Rebuild the mirror for a new model."""
        if old_model is not None:
            self._disconnect(old_model)
        while self._widgets:
            self._remove_widget(len(self._widgets) - 1)
        if new_model is None:
            return
        new_model.cells.changed.connect(self._on_cells_changed)
        new_model.metadata_changed.connect(self._on_metadata_changed)
        self._code_mimetype = self._renderer.get_code_mimetype(new_model)
        for i, cell in enumerate(new_model.cells):
            self._insert_widget(i, cell)
        self.on_children_changed()

    def on_metadata_changed(self, model: NotebookModel, change: StateChange):
        """Track ``language_info`` changes in the code cell mimetype."""
        if change.name != "language_info":
            return
        self._code_mimetype = self._renderer.get_code_mimetype(model)
        for widget in self._widgets:
            if widget.cell_type == CellType.CODE:
                widget.mimetype = self._code_mimetype

    def on_child_added(self, widget: CellWidget, index: int):
        """Called after a widget joined the mirror."""

    def on_child_removed(self, widget: CellWidget, index: int):
        """Called after a widget left the mirror, before it is disposed."""

    def on_children_changed(self):
        """Called once after every structural change."""

    # -- structure -----------------------------------------------------------

    def _insert_widget(self, index: int, cell: CellModel):
        widget = self._renderer.create_cell(cell, self._code_mimetype)
        self._widgets.insert(index, widget)
        self.on_child_added(widget, index)

    def _remove_widget(self, index: int):
        widget = self._widgets.pop(index)
        self.on_child_removed(widget, index)
        widget.dispose()

    def _on_cells_changed(self, sender, change: ListChange):
        if self.is_disposed:
            return
        kind = change.kind
        if kind == ListChangeType.INSERT:
            self._insert_widget(change.index, change.new_value)
        elif kind == ListChangeType.REMOVE:
            self._remove_widget(change.index)
        elif kind == ListChangeType.MOVE:
            widget = self._widgets.pop(change.index)
            self._widgets.insert(change.new_index, widget)
        elif kind == ListChangeType.REPLACE:
            for _ in change.old_items:
                self._remove_widget(change.index)
            for offset, cell in enumerate(change.new_items):
                self._insert_widget(change.index + offset, cell)
        elif kind == ListChangeType.CLEAR:
            while self._widgets:
                self._remove_widget(len(self._widgets) - 1)
        self.on_children_changed()

    def _on_metadata_changed(self, sender, change: StateChange):
        if not self.is_disposed:
            self.on_metadata_changed(sender, change)

    def _disconnect(self, model: NotebookModel):
        model.cells.changed.disconnect(self._on_cells_changed)
        model.metadata_changed.disconnect(self._on_metadata_changed)


@dataclass
class InputEvent:
    """
    An input event routed to the notebook by the input dispatcher.

    Args:
        type: "click", "dblclick" or "focus"
        target: The cell widget the event landed in, None for the container
        in_editor: Whether the event landed inside the cell's editor
        button: Mouse button for clicks (0 is primary)
    """
    type: str
    target: Optional[CellWidget] = None
    in_editor: bool = False
    button: int = 0


class Notebook(StaticNotebook):
    """
    An interactive notebook.

    Every state change requests a refresh; requests made before the next
    tick collapse into one ``on_update_request`` pass.
    """

    def __init__(self, renderer: Optional[CellRenderer] = None):
        super().__init__(renderer)
        self.scheduler = UpdateScheduler(self.on_update_request)
        self.selection = SelectionController(self, self.update)
        self.modes = ModeController(self.selection, self.update)
        self.state_changed = Signal(self)
        self.is_attached = False
        self.focus_owner = None
        self.selection.state_changed.connect(self._forward_state)
        self.modes.state_changed.connect(self._forward_state)

    @property
    def mode(self) -> NotebookMode:
        return self.modes.mode

    @mode.setter
    def mode(self, value):
        if not self.is_disposed:
            self.modes.set_mode(value)

    @property
    def active_cell_index(self) -> Optional[int]:
        return self.selection.active_index

    @active_cell_index.setter
    def active_cell_index(self, index: int):
        if not self.is_disposed:
            self.selection.set_active_index(index)

    @property
    def active_cell(self) -> Optional[CellWidget]:
        return self.selection.active_widget

    def select(self, widget: CellWidget):
        if not self.is_disposed:
            self.selection.select(widget)

    def deselect(self, widget: CellWidget):
        if not self.is_disposed:
            self.selection.deselect(widget)

    def is_selected(self, widget: CellWidget) -> bool:
        return self.selection.is_selected(widget)

    def update(self):
        """Request a refresh pass on the next tick."""
        if not self.is_disposed:
            self.scheduler.request_refresh()

    def attach(self):
        """Start handling input events and render on the next tick."""
        if self.is_disposed or self.is_attached:
            return
        self.is_attached = True
        for widget in self.children():
            widget.attach()
        self.update()

    def detach(self):
        """Stop handling input events."""
        if not self.is_attached:
            return
        self.is_attached = False
        for widget in self.children():
            widget.detach()

    def handle_event(self, event: InputEvent):
        """Dispatch an input event. Ignored while detached or read-only."""
        if not self.is_attached or self.model is None or self.model.read_only:
            return
        if event.type == "click":
            self._evt_click(event)
        elif event.type == "dblclick":
            self._evt_dblclick(event)
        elif event.type == "focus":
            self._evt_focus(event)

    def dispose(self):
        if self.is_disposed:
            return
        self.scheduler.cancel()
        self.detach()
        widgets = self.children()
        super().dispose()
        self.selection.purge(widgets)
        self.state_changed.clear()
        self.selection.state_changed.clear()
        self.modes.state_changed.clear()
        # Mirror is empty now, so this drops the active index to None
        self.selection.reset()
        self.focus_owner = None

    # -- hooks ---------------------------------------------------------------

    def on_model_changed(self, old_model, new_model):
        super().on_model_changed(old_model, new_model)
        self.selection.reset()
        self.update()

    def on_child_added(self, widget: CellWidget, index: int):
        widget.edge_requested.connect(self._on_edge_requested)
        if self.is_attached:
            widget.attach()
        self.update()

    def on_child_removed(self, widget: CellWidget, index: int):
        self.selection.purge([widget])
        if self.focus_owner is widget:
            self.focus_owner = None
        self.update()

    def on_children_changed(self):
        self.selection.clamp()
        self.update()

    def on_update_request(self):
        """
        Apply mode, active cell and selection to the widgets.

        Also moves focus: the notebook itself in command mode, the active
        cell's editor in edit mode.
        """
        if self.is_disposed or self.model is None:
            return
        edit = self.mode == NotebookMode.EDIT
        self.toggle_class("command-mode", not edit)
        self.toggle_class("edit-mode", edit)

        active = self.active_cell
        selected_count = 0
        for widget in self.children():
            self.renderer.update_cell(widget)
            widget.toggle_class("active", widget is active)
            is_selected = self.is_selected(widget)
            widget.toggle_class("selected", is_selected)
            selected_count += is_selected
        self.toggle_class("multi-selected", selected_count > 1)

        if edit and active is not None:
            if active.previewable and active.rendered:
                active.rendered = False
            self.focus_owner = active
        else:
            self.focus_owner = self
        logger.debug(f"Refreshed notebook: mode={self.mode.value}, "
                     f"active={self.active_cell_index}, selected={selected_count}")

    # -- events --------------------------------------------------------------

    def _evt_click(self, event: InputEvent):
        if event.button != 0:
            return
        index = self._index_of_target(event)
        if index >= 0:
            self.active_cell_index = index

    def _evt_dblclick(self, event: InputEvent):
        widget = event.target
        if self._index_of_target(event) < 0 or not widget.previewable:
            return
        if widget.rendered:
            widget.rendered = False
            self.update()

    def _evt_focus(self, event: InputEvent):
        if event.target is None:
            self.mode = NotebookMode.COMMAND
            return
        index = self._index_of_target(event)
        if index >= 0 and event.in_editor:
            self.active_cell_index = index
            self.mode = NotebookMode.EDIT

    def _index_of_target(self, event: InputEvent) -> int:
        if event.target is None:
            return -1
        return self.index_of(event.target)

    def _on_edge_requested(self, widget: CellWidget, edge: str):
        index = self.index_of(widget)
        if index < 0:
            return
        if edge == "top":
            self.active_cell_index = index - 1
        elif edge == "bottom":
            self.active_cell_index = index + 1

    def _forward_state(self, sender, change: StateChange):
        self.state_changed.emit(change)
