"""
Notebook UI - Cell Widgets

One widget variant per cell type (code, markdown, raw).
"""

from .base import CellWidget
from .code_cell import CodeCellWidget
from .markdown_cell import MarkdownCellWidget
from .raw_cell import RawCellWidget

__all__ = [
    'CellWidget',
    'CodeCellWidget',
    'MarkdownCellWidget',
    'RawCellWidget',
]
