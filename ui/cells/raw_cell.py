"""
Notebook UI - Raw Cell Widget
"""
from document.cell import CellType
from .base import CellWidget


class RawCellWidget(CellWidget):
    cell_type = CellType.RAW
