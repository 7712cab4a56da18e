"""Cell data models."""
from enum import Enum
from typing import Any, Dict, Optional
import uuid

from .outputs import OutputAreaModel
from .signal import Lifecycle, Signal, StateChange


class CellType(str, Enum):
    """Type of cell content."""
    CODE = "code"
    MARKDOWN = "markdown"
    RAW = "raw"


class CellModel:
    """
    A single cell in a notebook.

    The notebook core only relies on a cell's identity, its ``cell_type``
    and its disposal lifecycle. ``source`` edits are reported through
    ``state_changed``.
    """
    cell_type: CellType = CellType.RAW

    def __init__(self, source: str = "", metadata: Optional[Dict[str, Any]] = None,
                 id: Optional[str] = None):
        self.id = id or f"_{uuid.uuid4().hex[:8]}"
        self._source = source
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self.lifecycle = Lifecycle.ACTIVE
        self.state_changed = Signal(self)

    @property
    def source(self) -> str:
        return self._source

    @source.setter
    def source(self, value: str):
        if value == self._source:
            return
        old, self._source = self._source, value
        self.state_changed.emit(StateChange("source", old, value))

    @property
    def is_disposed(self) -> bool:
        return self.lifecycle == Lifecycle.DISPOSED

    def dispose(self):
        """Release the cell's resources. Safe to call more than once."""
        if self.is_disposed:
            return
        self.lifecycle = Lifecycle.DISPOSED
        self.state_changed.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class CodeCellModel(CellModel):
    """A code cell, which owns the outputs of its last execution."""
    cell_type = CellType.CODE

    def __init__(self, source: str = "", metadata: Optional[Dict[str, Any]] = None,
                 id: Optional[str] = None):
        super().__init__(source, metadata, id)
        self.outputs = OutputAreaModel()
        self.execution_count: Optional[int] = None

    def dispose(self):
        if self.is_disposed:
            return
        self.outputs.dispose()
        super().dispose()


class MarkdownCellModel(CellModel):
    """A markdown cell (previewable in the UI)."""
    cell_type = CellType.MARKDOWN


class RawCellModel(CellModel):
    """A raw cell, passed through untouched."""
    cell_type = CellType.RAW
