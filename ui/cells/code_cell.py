"""
Notebook UI - Code Cell Widget

Code editor plus the live view of the cell's outputs.
"""
from typing import Any, Callable, Optional

from fasthtml.common import *

from document.cell import CellType, CodeCellModel
from ..output_area import OutputAreaView
from .base import CellWidget


class CodeCellWidget(CellWidget):
    """A code cell widget; observes ``model.outputs`` through an OutputAreaView."""
    cell_type = CellType.CODE

    def __init__(self, model: CodeCellModel, mimetype: str = "text/plain",
                 send: Optional[Callable[[Any], None]] = None):
        super().__init__(model, mimetype)
        self.output_view = OutputAreaView(model.outputs, model.id, send)

    def dispose(self):
        if self.is_disposed:
            return
        self.output_view.dispose()
        super().dispose()

    def render_body(self):
        prompt = self.model.execution_count
        return Div(
            Div(f"[{prompt if prompt is not None else ' '}]", cls="prompt"),
            Textarea(self.model.source, name="source", id=f"source-{self.model.id}",
                     data_mimetype=self.mimetype),
            self.output_view.render(),
            cls="cell-body"
        )
