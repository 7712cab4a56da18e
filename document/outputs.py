"""Output area model: an ordered list of execution outputs with stream merging."""
import copy
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from .observable import ObservableList
from .signal import Lifecycle, Signal

logger = logging.getLogger(__name__)

OutputRecord = Dict[str, Any]


class OutputType(str, Enum):
    """Recognized output kinds."""
    STREAM = "stream"
    EXECUTE_RESULT = "execute_result"
    DISPLAY_DATA = "display_data"
    ERROR = "error"


OUTPUT_TYPES = frozenset(t.value for t in OutputType)


def is_stream(output: Optional[OutputRecord]) -> bool:
    """Check whether an output record is a stream output."""
    return bool(output) and output.get("output_type") == OutputType.STREAM.value


class OutputAreaModel:
    """
    A model that maintains a list of output records.

    Records are deep copies of what callers pass in. Contiguous stream
    outputs with the same ``name`` are combined into a single record.
    A ``clear(wait=True)`` is deferred until the next ``add``, so that a
    clear request does not race ahead of output that is still in flight.
    """

    def __init__(self):
        self._list: Optional[ObservableList[OutputRecord]] = ObservableList()
        self._list.changed.connect(self._on_list_changed)
        self._clear_next = False
        self.lifecycle = Lifecycle.ACTIVE
        self.changed = Signal(self)

    @property
    def length(self) -> int:
        return len(self._list) if self._list is not None else 0

    def __len__(self) -> int:
        return self.length

    @property
    def is_disposed(self) -> bool:
        return self.lifecycle == Lifecycle.DISPOSED

    def dispose(self):
        """Release all records and listeners. Emits nothing."""
        if self.is_disposed:
            return
        self._list.changed.disconnect(self._on_list_changed)
        self._list = None
        self.lifecycle = Lifecycle.DISPOSED
        self.changed.clear()

    def get(self, index: int) -> Optional[OutputRecord]:
        if self._list is None:
            return None
        return self._list.get(index)

    def add(self, output: OutputRecord) -> int:
        """
        Add an output, which may be combined with the previous output.

        Args:
            output: An nbformat-style output dict keyed by ``output_type``

        Returns:
            Index of the stored record, or -1 if it was not added
        """
        if self._list is None:
            logger.warning("Output added to a disposed output area, ignoring")
            return -1

        # A delayed clear happens right before the next output lands.
        if self._clear_next:
            self.clear()
            self._clear_next = False

        output = copy.deepcopy(output)

        if is_stream(output) and isinstance(output.get("text"), list):
            output["text"] = "\n".join(output["text"])

        index = self.length - 1
        last = self.get(index)
        if (is_stream(output) and is_stream(last)
                and output.get("name") == last.get("name")):
            # Metadata of the merged record comes from the newer output.
            output["text"] = last.get("text", "") + output.get("text", "")
            self._list.set(index, output)
            logger.debug(f"Merged {output.get('name')} stream output at {index}")
            return index

        if output.get("output_type") in OUTPUT_TYPES:
            return self._list.add(output)

        logger.debug(f"Dropped output of unrecognized type {output.get('output_type')!r}")
        return -1

    def clear(self, wait: bool = False) -> List[OutputRecord]:
        """
        Clear all of the output.

        Args:
            wait: Delay clearing the output until the next output is added

        Returns:
            The removed records (empty when the clear is deferred)
        """
        if self._list is None:
            return []
        if wait:
            self._clear_next = True
            return []
        return self._list.clear()

    @property
    def pending_clear(self) -> bool:
        return self._clear_next

    def to_list(self) -> List[OutputRecord]:
        """Return a copy of the stored records."""
        if self._list is None:
            return []
        return copy.deepcopy(list(self._list))

    def _on_list_changed(self, sender, change):
        self.changed.emit(change)
