"""
Notebook UI - Update Scheduler

Coalesces refresh requests: any number of ``request_refresh()`` calls
between two ticks produce exactly one refresh pass.
"""
import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class UpdateScheduler:
    """
    Batches refresh requests into one call of ``refresh``.

    With a running asyncio loop the pass runs on the loop's next iteration
    (``call_soon``). Without one, it runs on the next explicit ``flush()``.
    """

    def __init__(self, refresh: Callable[[], None]):
        self._refresh = refresh
        self._pending = False
        self._handle: Optional[asyncio.Handle] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def pending(self) -> bool:
        return self._pending

    def request_refresh(self):
        """
        Mark a refresh as pending and schedule it on the running loop.

        A request made while no loop was running stays pending, and the
        first request made inside a loop schedules it.
        """
        self._pending = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        if self._handle is not None and self._loop is loop:
            return
        self._loop = loop
        self._handle = loop.call_soon(self.flush)

    def flush(self) -> bool:
        """Run the pending refresh now. Returns True if one ran."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if not self._pending:
            return False
        self._pending = False
        logger.debug("Running refresh pass")
        self._refresh()
        return True

    def cancel(self):
        """Drop any pending refresh."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = False
