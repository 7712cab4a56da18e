"""
Notebook UI Package

Cell widgets, the notebook mirror with its selection/mode state, and
FastHTML rendering of cells and outputs.

Usage:
    from ui import Notebook, InputEvent

    # Or import specific components
    from ui.cells import CodeCellWidget, MarkdownCellWidget, RawCellWidget
    from ui.output_area import OutputAreaView
"""

# Cell widgets
from .cells import CellWidget, CodeCellWidget, MarkdownCellWidget, RawCellWidget

# Rendering
from .mime import render_mime_bundle, ansi_to_html
from .output_area import OutputAreaView, OutputView
from .renderer import CellRenderer, default_renderer

# State
from .scheduler import UpdateScheduler
from .selection import SelectionController
from .mode import ModeController, NotebookMode

# Notebook widgets
from .notebook import StaticNotebook, Notebook, InputEvent

__all__ = [
    # Cells
    'CellWidget',
    'CodeCellWidget',
    'MarkdownCellWidget',
    'RawCellWidget',
    # Rendering
    'render_mime_bundle',
    'ansi_to_html',
    'OutputAreaView',
    'OutputView',
    'CellRenderer',
    'default_renderer',
    # State
    'UpdateScheduler',
    'SelectionController',
    'ModeController',
    'NotebookMode',
    # Notebook
    'StaticNotebook',
    'Notebook',
    'InputEvent',
]
