"""Document layer - Data models for notebook, cells and outputs."""
from .signal import Lifecycle, Signal, ListChange, ListChangeType, StateChange
from .observable import ObservableList
from .outputs import OutputAreaModel, OutputType, is_stream
from .cell import CellModel, CellType, CodeCellModel, MarkdownCellModel, RawCellModel
from .notebook import NotebookModel

__all__ = [
    'Lifecycle', 'Signal', 'ListChange', 'ListChangeType', 'StateChange',
    'ObservableList',
    'OutputAreaModel', 'OutputType', 'is_stream',
    'CellModel', 'CellType', 'CodeCellModel', 'MarkdownCellModel', 'RawCellModel',
    'NotebookModel',
]
