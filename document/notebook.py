"""Notebook data model."""
import copy
from typing import Any, Dict, Optional

from .cell import CellModel, CellType, CodeCellModel, MarkdownCellModel, RawCellModel
from .observable import ObservableList
from .signal import Lifecycle, ListChangeType, Signal, StateChange


class NotebookModel:
    """
    A notebook document containing an ordered list of cells.

    Cells removed from ``cells`` (by remove, replace or clear) are disposed
    by the model. A new model starts with one empty code cell.
    """

    def __init__(self, metadata: Optional[Dict[str, Any]] = None):
        self.cells: ObservableList[CellModel] = ObservableList()
        self.cells.changed.connect(self._on_cells_changed)
        self.metadata_changed = Signal(self)
        self._metadata: Dict[str, Any] = dict(metadata or {})
        self._read_only = False
        self.lifecycle = Lifecycle.ACTIVE
        self.cells.add(self.create_code_cell())

    @property
    def read_only(self) -> bool:
        return self._read_only

    @read_only.setter
    def read_only(self, value: bool):
        self._read_only = bool(value)

    @property
    def is_disposed(self) -> bool:
        return self.lifecycle == Lifecycle.DISPOSED

    def get_metadata(self, name: str, default: Any = None) -> Any:
        return copy.deepcopy(self._metadata.get(name, default))

    def set_metadata(self, name: str, value: Any):
        """Set a metadata key and emit ``metadata_changed`` if it changed."""
        old = self._metadata.get(name)
        if old == value:
            return
        self._metadata[name] = copy.deepcopy(value)
        self.metadata_changed.emit(StateChange(name, old, value))

    def create_cell(self, cell_type: CellType, source: str = "") -> CellModel:
        """Create a detached cell of the given type."""
        factories = {
            CellType.CODE: self.create_code_cell,
            CellType.MARKDOWN: self.create_markdown_cell,
            CellType.RAW: self.create_raw_cell,
        }
        return factories[CellType(cell_type)](source)

    def create_code_cell(self, source: str = "") -> CodeCellModel:
        return CodeCellModel(source)

    def create_markdown_cell(self, source: str = "") -> MarkdownCellModel:
        return MarkdownCellModel(source)

    def create_raw_cell(self, source: str = "") -> RawCellModel:
        return RawCellModel(source)

    def dispose(self):
        if self.is_disposed:
            return
        self.lifecycle = Lifecycle.DISPOSED
        self.cells.changed.disconnect(self._on_cells_changed)
        for cell in self.cells:
            cell.dispose()
        self.cells.changed.clear()
        self.metadata_changed.clear()

    def _on_cells_changed(self, sender, change):
        if change.kind not in (ListChangeType.REMOVE, ListChangeType.REPLACE,
                               ListChangeType.CLEAR):
            return
        added = change.new_items
        for cell in change.old_items:
            if not any(cell is c for c in added):
                cell.dispose()
