"""
Subprocess kernel session.

This module manages the kernel subprocess and exposes a callback-style
future per execute request: IOPub messages are delivered to
``KernelFuture.on_iopub`` in arrival order, then the shell reply to
``KernelFuture.on_reply``. Transport failures go to ``on_error``.
"""
import os
import signal
import asyncio
import logging
from collections import deque
from multiprocessing import Process, Queue
from queue import Empty
from typing import Callable, Deque, Optional

from services.config import get_config

logger = logging.getLogger(__name__)

MessageCallback = Callable[[dict], None]
ErrorCallback = Callable[[BaseException], None]


class KernelDiedError(RuntimeError):
    """The kernel subprocess terminated while a request was in flight."""


class KernelFuture:
    """
    Handle for one execute request.

    Callers assign ``on_iopub``, ``on_reply`` and ``on_error``. Once the
    reply or an error has been delivered the future is done and further
    messages are ignored.
    """

    def __init__(self, request: dict):
        self.request = request
        self.on_iopub: Optional[MessageCallback] = None
        self.on_reply: Optional[MessageCallback] = None
        self.on_error: Optional[ErrorCallback] = None
        self.reply: Optional[dict] = None
        self.error: Optional[BaseException] = None

    @property
    def done(self) -> bool:
        return self.reply is not None or self.error is not None

    def handle_iopub(self, msg: dict):
        if self.done:
            return
        if self.on_iopub:
            self.on_iopub(msg)

    def handle_reply(self, msg: dict):
        if self.done:
            return
        self.reply = msg
        if self.on_reply:
            self.on_reply(msg)

    def handle_error(self, error: BaseException):
        if self.done:
            return
        self.error = error
        if self.on_error:
            self.on_error(error)


class KernelSession:
    """
    Kernel running in a subprocess with streaming output.

    Key features:
    - Hard interrupt via SIGINT to subprocess
    - Streaming output via multiprocessing Queue
    - Persistent namespace across requests (until restart)
    """

    def __init__(self, start_immediately: bool = True):
        self.process: Optional[Process] = None
        self.input_queue: Optional[Queue] = None
        self.output_queue: Optional[Queue] = None
        self._execution_count: int = 0
        self._pending: Deque[KernelFuture] = deque()
        self._pump_task: Optional[asyncio.Task] = None

        if start_immediately:
            self._start_process()

    def _start_process(self):
        """Start the kernel subprocess and wait for it to report."""
        from .kernel_worker import kernel_worker_main

        config = get_config()
        self.input_queue = Queue()
        self.output_queue = Queue()

        self.process = Process(
            target=kernel_worker_main,
            args=(self.input_queue, self.output_queue),
            daemon=True
        )
        self.process.start()

        try:
            msg = self.output_queue.get(timeout=config.kernel_startup_timeout)
            if msg['header']['msg_type'] == 'status':
                logger.info(f"Kernel subprocess started (pid {self.process.pid})")
                return True
        except Empty:
            pass

        raise RuntimeError("Kernel subprocess failed to start")

    @property
    def is_alive(self) -> bool:
        return self.process is not None and self.process.is_alive()

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process else None

    @property
    def execution_count(self) -> int:
        return self._execution_count

    def execute(self, content: dict) -> KernelFuture:
        """
        Send an execute request.

        Must be called with a running event loop; messages are pumped from
        the subprocess on that loop.

        Args:
            content: Execute request content (code, silent, store_history, ...)

        Returns:
            KernelFuture receiving the request's messages
        """
        if not self.is_alive:
            self._start_process()

        future = KernelFuture(content)
        self._pending.append(future)
        self.input_queue.put({
            'header': {'msg_type': 'execute_request'},
            'content': content,
        })

        if self._pump_task is None or self._pump_task.done():
            self._pump_task = asyncio.get_running_loop().create_task(self._pump())
        return future

    async def _pump(self):
        """Route subprocess messages to the pending futures, oldest first."""
        loop = asyncio.get_running_loop()
        poll_interval = get_config().kernel_poll_interval

        while self._pending:
            # Re-read each pass; restart() swaps the queues
            output_queue = self.output_queue
            if output_queue is None:
                break
            try:
                msg = await loop.run_in_executor(None, output_queue.get, True, poll_interval)
            except Empty:
                if self._pending and not self.is_alive:
                    self._fail_pending(KernelDiedError("Kernel subprocess died unexpectedly"))
                    break
                continue

            self._dispatch(msg)

    def _dispatch(self, msg: dict):
        msg_type = msg['header']['msg_type']
        content = msg.get('content', {})

        if not self._pending:
            logger.warning(f"Dropping {msg_type} message with no pending request")
            return
        future = self._pending[0]

        if msg_type == 'execute_reply':
            self._pending.popleft()
            self._execution_count = content.get('execution_count', self._execution_count + 1)
            future.handle_reply(msg)
        elif msg.get('channel') == 'iopub':
            future.handle_iopub(msg)

    def _fail_pending(self, error: BaseException):
        logger.error(f"Kernel failure with {len(self._pending)} pending request(s): {error}")
        while self._pending:
            self._pending.popleft().handle_error(error)

    def interrupt(self) -> bool:
        """
        Send SIGINT to kernel subprocess - hard interrupt.

        Returns:
            True if interrupt signal was sent, False if no kernel running
        """
        if self.process and self.process.is_alive():
            try:
                os.kill(self.process.pid, signal.SIGINT)
                return True
            except (ProcessLookupError, PermissionError):
                return False
        return False

    def restart(self) -> bool:
        """
        Kill and restart the kernel subprocess, clearing all namespace state.

        Returns:
            True if restart succeeded
        """
        self.shutdown()
        try:
            self._start_process()
            self._execution_count = 0
            return True
        except RuntimeError:
            logger.exception("Kernel restart failed")
            return False

    def shutdown(self):
        """Shutdown the kernel subprocess; pending requests fail."""
        if self.process is None:
            return

        if self._pending:
            self._fail_pending(KernelDiedError("Kernel shut down"))

        # Graceful first
        if self.input_queue:
            self.input_queue.put({'header': {'msg_type': 'shutdown_request'}, 'content': {}})
            self.process.join(timeout=2)

        if self.process.is_alive():
            self.process.terminate()
            self.process.join(timeout=1)

        if self.process.is_alive():
            self.process.kill()

        self.process = None
        self.input_queue = None
        self.output_queue = None

    def __del__(self):
        self.shutdown()
