"""Shared fixtures for the notebook core tests."""
import pytest

from document import CellType, NotebookModel
from services.config import reset_config_cache
from services.kernel import KernelFuture

# Six cells, like a small real notebook
DEFAULT_CELLS = [
    (CellType.CODE, "import math"),
    (CellType.MARKDOWN, "# Heading"),
    (CellType.CODE, "print('hi')"),
    (CellType.RAW, "raw text"),
    (CellType.MARKDOWN, "Some *notes*"),
    (CellType.CODE, "math.pi"),
]


class FakeSession:
    """Kernel session double; the test drives the returned futures."""

    def __init__(self):
        self.requests = []
        self.futures = []

    def execute(self, content):
        future = KernelFuture(content)
        self.requests.append(content)
        self.futures.append(future)
        return future


def make_msg(msg_type, **content):
    return {'channel': 'iopub', 'header': {'msg_type': msg_type}, 'content': content}


def fill_model(model: NotebookModel):
    cells = [model.create_cell(cell_type, source) for cell_type, source in DEFAULT_CELLS]
    model.cells.replace(0, len(model.cells), cells)
    return model


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture
def model():
    """A notebook model holding the six default cells."""
    return fill_model(NotebookModel())


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def msg():
    """Factory for Jupyter-shaped IOPub messages."""
    return make_msg


@pytest.fixture
def filler():
    return fill_model
