"""
Notebook UI - Markdown Cell Widget

Markdown cells toggle between a rendered preview and the raw source editor.
Markdown itself is rendered client-side from the ``md-preview`` container.
"""
from fasthtml.common import *

from document.cell import CellType, MarkdownCellModel
from .base import CellWidget


class MarkdownCellWidget(CellWidget):
    """A previewable cell; starts out rendered."""
    cell_type = CellType.MARKDOWN
    previewable = True

    def __init__(self, model: MarkdownCellModel, mimetype: str = "text/x-ipythongfm"):
        super().__init__(model, mimetype)
        self._rendered = True
        self.toggle_class("rendered", True)

    @property
    def rendered(self) -> bool:
        return self._rendered

    @rendered.setter
    def rendered(self, value: bool):
        self._rendered = bool(value)
        self.toggle_class("rendered", self._rendered)

    def render_body(self):
        cid = self.model.id
        if self.rendered:
            return Div(
                Div(self.model.source, id=f"preview-{cid}", cls="md-preview",
                    data_cell_id=cid),
                Div("Double-click to edit", cls="edit-hint"),
                cls="cell-body"
            )
        return Div(
            Textarea(self.model.source, cls="source", name="source", id=f"source-{cid}",
                     placeholder="# Markdown notes...", data_mimetype=self.mimetype),
            cls="cell-body"
        )
