"""
Notebook UI - Cell Renderer

Creation strategy used by the notebook widgets: builds the widget variant
for a cell model, keyed on the cell type.
"""
from typing import Any, Callable, Optional

from document.cell import CellModel, CellType
from document.notebook import NotebookModel
from services.config import get_config
from .cells import CellWidget, CodeCellWidget, MarkdownCellWidget, RawCellWidget


class CellRenderer:
    """
    Creates cell widgets for a notebook.

    Args:
        send: Optional sink for out-of-band output updates, handed to every
              code cell's output view
    """

    def __init__(self, send: Optional[Callable[[Any], None]] = None):
        self.send = send

    def create_cell(self, model: CellModel, code_mimetype: str = "text/plain") -> CellWidget:
        """Dispatch to the factory for the model's cell type."""
        if model.cell_type == CellType.CODE:
            return self.create_code_cell(model, code_mimetype)
        if model.cell_type == CellType.MARKDOWN:
            return self.create_markdown_cell(model)
        return self.create_raw_cell(model)

    def create_code_cell(self, model: CellModel, mimetype: str = "text/plain") -> CodeCellWidget:
        return CodeCellWidget(model, mimetype, send=self.send)

    def create_markdown_cell(self, model: CellModel) -> MarkdownCellWidget:
        return MarkdownCellWidget(model, get_config().markdown_mimetype)

    def create_raw_cell(self, model: CellModel) -> RawCellWidget:
        return RawCellWidget(model, get_config().raw_mimetype)

    def update_cell(self, widget: CellWidget):
        """Hook run on every widget during a refresh pass. No-op by default."""

    def get_code_mimetype(self, model: NotebookModel) -> str:
        """
        Get the preferred mimetype for code cells in the notebook.

        An explicit ``language_info.mimetype`` wins; otherwise the
        ``codemirror_mode`` (or language ``name``) is looked up in the
        configured language map.
        """
        info = model.get_metadata("language_info") or {}
        if info.get("mimetype"):
            return info["mimetype"]
        mode = info.get("codemirror_mode") or info.get("name")
        if isinstance(mode, dict):
            mode = mode.get("name")
        return get_config().mimetype_for_language(mode)


default_renderer = CellRenderer()
