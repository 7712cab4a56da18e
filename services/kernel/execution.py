"""
Execute code on a kernel session and send outputs to an output area model.
"""
import asyncio
import logging
from typing import Any, Dict, Protocol

from document.outputs import OutputAreaModel

logger = logging.getLogger(__name__)


class Session(Protocol):
    """What the bridge needs from a kernel session."""

    def execute(self, content: Dict[str, Any]) -> Any:
        """Return a future-like object with on_iopub/on_reply/on_error hooks."""


def execute_code(code: str, session: Session, outputs: OutputAreaModel) -> asyncio.Future:
    """
    Execute code on a session, streaming its outputs into ``outputs``.

    The output area is cleared immediately, before the request is sent.
    Each IOPub message becomes an output record whose ``output_type`` is the
    message type; ``clear_output`` messages clear the area instead. The
    returned future resolves with the reply content after all IOPub messages
    for the request were applied. It fails if the session cannot send the
    request or reports a transport error.

    Args:
        code: Source to execute
        session: Kernel session (see KernelSession)
        outputs: Output area receiving the records

    Returns:
        asyncio.Future resolving to the execute reply content
    """
    request = {
        'code': code,
        'silent': False,
        'store_history': True,
        'stop_on_error': True,
        'allow_stdin': True,
    }
    outputs.clear()
    result: asyncio.Future = asyncio.get_running_loop().create_future()

    try:
        kernel_future = session.execute(request)
    except Exception as e:
        logger.error(f"Execute request failed: {e}")
        result.set_exception(e)
        return result

    def on_iopub(msg):
        if result.done():
            return
        if outputs.is_disposed:
            logger.debug("Output area disposed, ignoring kernel message")
            return
        content = msg.get('content')
        if content is None:
            return
        msg_type = msg['header']['msg_type']
        if msg_type == 'clear_output':
            outputs.clear(wait=bool(content.get('wait', False)))
            return
        outputs.add(dict(content, output_type=msg_type))

    def on_reply(msg):
        if not result.done():
            result.set_result(msg.get('content'))

    def on_error(error):
        if not result.done():
            result.set_exception(error)

    kernel_future.on_iopub = on_iopub
    kernel_future.on_reply = on_reply
    kernel_future.on_error = on_error
    return result
