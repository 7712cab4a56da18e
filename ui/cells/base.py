"""
Notebook UI - Cell Widget Base

Shared capability interface of every cell widget variant: lifecycle
(attach/detach/dispose), editor mimetype, visual state classes and
FastHTML rendering.
"""
from typing import Set

from fasthtml.common import *

from document.cell import CellModel, CellType
from document.signal import Lifecycle, Signal


class CellWidget:
    """
    Widget mirroring one cell model.

    Widgets never own their model; the notebook model disposes cells.
    ``edge_requested`` is emitted with ``'top'`` or ``'bottom'`` when the
    cursor tries to leave the editor at an edge.
    """
    cell_type: CellType = CellType.RAW
    previewable: bool = False

    def __init__(self, model: CellModel, mimetype: str = "text/plain"):
        self.model = model
        self.mimetype = mimetype
        self.classes: Set[str] = set()
        self.is_attached = False
        self.edge_requested = Signal(self)
        self.lifecycle = Lifecycle.ACTIVE

    @property
    def is_disposed(self) -> bool:
        return self.lifecycle == Lifecycle.DISPOSED

    @property
    def node_id(self) -> str:
        return f"cell-{self.model.id}"

    def attach(self):
        self.is_attached = True

    def detach(self):
        self.is_attached = False

    def dispose(self):
        """Release the widget. Safe to call more than once."""
        if self.is_disposed:
            return
        self.lifecycle = Lifecycle.DISPOSED
        self.is_attached = False
        self.edge_requested.clear()

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def toggle_class(self, name: str, on: bool):
        if on:
            self.classes.add(name)
        else:
            self.classes.discard(name)

    def render_body(self):
        """Render the editable body; variants override this."""
        return Textarea(self.model.source, name="source", id=f"source-{self.model.id}",
                        data_mimetype=self.mimetype)

    def render(self):
        """Render the whole cell with its current state classes.

        Returns:
            Div with id ``cell-<id>`` and classes ``cell`` plus state classes
        """
        cls = " ".join(["cell", *sorted(self.classes)])
        return Div(self.render_body(), id=self.node_id, cls=cls,
                   data_type=self.cell_type.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.model.id!r})"
