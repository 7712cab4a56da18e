"""
Notebook UI - Output Area View

Keeps the rendered outputs of a code cell in step with its OutputAreaModel.
Every model change becomes one minimal out-of-band fragment (hx-swap-oob)
handed to ``send``, so clients patch the DOM instead of re-rendering.
"""
import logging
from typing import Any, Callable, List, Optional

from fasthtml.common import *

from document.outputs import OutputAreaModel, OutputRecord
from document.signal import ListChange, ListChangeType
from .mime import ansi_to_html, render_mime_bundle

logger = logging.getLogger(__name__)


def OutputView(output: OutputRecord, node_id: str, **kwargs):
    """Render a single output record.

    Args:
        output: nbformat-style output dict
        node_id: DOM id for the rendered node

    Returns:
        Pre or Div for the record
    """
    output_type = output.get("output_type")
    if output_type == "stream":
        name = output.get("name", "stdout")
        return Pre(NotStr(ansi_to_html(output.get("text", ""))),
                   id=node_id, cls=f"stream-output {name}", **kwargs)
    if output_type == "error":
        text = "\n".join(output.get("traceback") or []) or \
            f"{output.get('ename', 'Error')}: {output.get('evalue', '')}"
        return Pre(NotStr(ansi_to_html(text)), id=node_id, cls="error-output", **kwargs)
    return Div(NotStr(render_mime_bundle(output.get("data", {}), output.get("metadata"))),
               id=node_id, cls=f"{output_type.replace('_', '-')}-output", **kwargs)


class OutputAreaView:
    """
    Observer that renders an OutputAreaModel.

    ``send`` receives FT components; anything that can ship HTML to a client
    (e.g. a wrapper around a WebSocket send) fits.
    """

    def __init__(self, model: OutputAreaModel, cell_id: str,
                 send: Optional[Callable[[Any], None]] = None):
        self.model = model
        self.cell_id = cell_id
        self.send = send
        model.changed.connect(self._on_changed)

    @property
    def container_id(self) -> str:
        return f"output-{self.cell_id}"

    def node_id(self, index: int) -> str:
        return f"output-{self.cell_id}-{index}"

    def render(self, **kwargs):
        """Render the full output container."""
        nodes = [OutputView(self.model.get(i), self.node_id(i))
                 for i in range(self.model.length)]
        return Div(*nodes, id=self.container_id, cls="cell-output", **kwargs)

    def dispose(self):
        self.model.changed.disconnect(self._on_changed)
        self.send = None

    def fragment_for(self, change: ListChange) -> List[Any]:
        """Build the out-of-band fragments for a model change."""
        last = self.model.length - 1
        if change.kind == ListChangeType.INSERT and change.index == last:
            return [Div(OutputView(change.new_value, self.node_id(change.index)),
                        hx_swap_oob=f"beforeend:#{self.container_id}")]
        if change.kind == ListChangeType.REPLACE and not isinstance(change.new_value, list):
            return [OutputView(change.new_value, self.node_id(change.index),
                               hx_swap_oob="true")]
        if change.kind == ListChangeType.REMOVE and change.index == last + 1:
            return [Div(id=self.node_id(change.index), hx_swap_oob="delete")]
        if change.kind == ListChangeType.CLEAR:
            return [Div(id=self.container_id, cls="cell-output", hx_swap_oob="true")]
        # Anything else shifts node ids; swap the whole container.
        logger.debug(f"Re-rendering outputs of {self.cell_id} after {change.kind.value}")
        return [self.render(hx_swap_oob="true")]

    def _on_changed(self, sender, change: ListChange):
        if self.send is None:
            return
        for fragment in self.fragment_for(change):
            self.send(fragment)
