"""
Kernel worker that runs in a subprocess.

This module streams output by patching execnb's CaptureShell to redirect
stdout/stderr to a multiprocessing Queue instead of using IPython's
capture_output context manager. Everything put on the queue is a
Jupyter-shaped message: ``{"channel", "header": {"msg_type"}, "content"}``.
"""
import sys
import traceback
from multiprocessing import Queue
from typing import Any, Dict, Optional

from execnb.shell import CaptureShell
from fastcore.basics import patch

IOPUB = 'iopub'
SHELL = 'shell'


def make_msg(msg_type: str, content: Dict[str, Any], channel: str = IOPUB) -> dict:
    """Build a message in the shape the execution bridge consumes."""
    return {
        'channel': channel,
        'header': {'msg_type': msg_type},
        'content': content,
    }


def error_content(exc: BaseException) -> dict:
    tb_lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return {'ename': type(exc).__name__, 'evalue': str(exc), 'traceback': tb_lines}


class StreamingStdout:
    """
    Custom stdout/stderr that sends each write to a queue immediately.
    """

    def __init__(self, queue: Queue, stream_name: str = 'stdout'):
        self.queue = queue
        self.stream_name = stream_name
        self._original = sys.stdout if stream_name == 'stdout' else sys.stderr

    def write(self, text: str):
        if text:
            self.queue.put(make_msg('stream', {'name': self.stream_name, 'text': text}))
        return len(text)

    def flush(self):
        pass

    def isatty(self):
        return True  # tqdm

    def fileno(self):
        return self._original.fileno()


class StreamingDisplayPublisher:
    """
    Capture rich outputs (images, plots, HTML) and send them to the queue.

    IPython's _tee checks ``is_publishing`` on the display publisher.
    """

    def __init__(self, queue: Queue, shell: Optional['CaptureShell'] = None):
        self.queue = queue
        self.shell = shell
        self.is_publishing = False

    def publish(self, data: dict, metadata: Optional[dict] = None,
                source: Optional[str] = None, **kwargs):
        self.is_publishing = True
        try:
            self.queue.put(make_msg('display_data', {
                'data': data,
                'metadata': metadata or {},
            }))
        finally:
            self.is_publishing = False

    def clear_output(self, wait: bool = False):
        self.queue.put(make_msg('clear_output', {'wait': wait}))


@patch
def _run_streaming(self: CaptureShell, raw_cell: str, output_queue: Queue,
                   store_history: bool = True, silent: bool = False,
                   shell_futures: bool = True, cell_id: Optional[str] = None):
    """
    Run a cell, streaming its output instead of capturing it.

    Returns:
        IPython's ExecutionResult
    """
    old_stdout, old_stderr = sys.stdout, sys.stderr
    old_display_pub = getattr(self, 'display_pub', None)

    try:
        sys.stdout = StreamingStdout(output_queue, 'stdout')
        sys.stderr = StreamingStdout(output_queue, 'stderr')
        self.display_pub = StreamingDisplayPublisher(output_queue, self)

        # Bypass CaptureShell's capture_output wrapper
        result = super(CaptureShell, self).run_cell(
            raw_cell,
            store_history=store_history,
            silent=silent,
            shell_futures=shell_futures,
            cell_id=cell_id
        )

        if result.result is not None and not silent:
            output_queue.put(make_msg('execute_result', {
                'data': {'text/plain': repr(result.result)},
                'metadata': {},
                'execution_count': self.execution_count - 1,
            }))

        if result.error_in_exec:
            output_queue.put(make_msg('error', error_content(result.error_in_exec)))

        return result

    finally:
        sys.stdout = old_stdout
        sys.stderr = old_stderr
        if old_display_pub is not None:
            self.display_pub = old_display_pub


def _execute(shell: CaptureShell, request: dict, output_queue: Queue):
    output_queue.put(make_msg('status', {'execution_state': 'busy'}))
    status = 'ok'
    try:
        result = shell._run_streaming(
            request['code'], output_queue,
            store_history=request.get('store_history', True),
            silent=request.get('silent', False),
        )
        if not result.success:
            status = 'error'
    except KeyboardInterrupt as e:
        output_queue.put(make_msg('error', {
            'ename': 'KeyboardInterrupt',
            'evalue': str(e) or 'Execution interrupted by user',
            'traceback': ['KeyboardInterrupt: Execution interrupted by user'],
        }))
        status = 'abort'
    except Exception as e:
        output_queue.put(make_msg('error', error_content(e)))
        status = 'error'

    output_queue.put(make_msg('status', {'execution_state': 'idle'}))
    output_queue.put(make_msg('execute_reply', {
        'status': status,
        'execution_count': shell.execution_count - 1,
    }, channel=SHELL))


def _enable_inline_figures():
    """Make ``plt.show()`` publish figures as image/png display_data, if matplotlib is installed."""
    try:
        import matplotlib
        matplotlib.use('Agg')
        import matplotlib.pyplot as plt
        import io
        import base64
        from IPython.display import display
    except ImportError:
        return

    def _inline_show(*args, **kwargs):
        for fig_num in plt.get_fignums():
            fig = plt.figure(fig_num)
            with io.BytesIO() as buf:
                fig.savefig(buf, format='png', bbox_inches='tight', dpi=100)
                data = base64.b64encode(buf.getvalue()).decode('utf-8')
            display({'image/png': data}, raw=True)
            plt.close(fig)

    plt.show = _inline_show


def kernel_worker_main(input_queue: Queue, output_queue: Queue):
    """
    Main loop for the kernel subprocess.

    Waits for requests on input_queue and sends messages to output_queue.
    SIGINT raises KeyboardInterrupt in the running code.
    """
    import signal

    shell = CaptureShell()

    def sigint_handler(signum, frame):
        raise KeyboardInterrupt("Execution interrupted by user")

    signal.signal(signal.SIGINT, sigint_handler)
    _enable_inline_figures()

    output_queue.put(make_msg('status', {'execution_state': 'starting'}))

    while True:
        try:
            msg = input_queue.get()
        except KeyboardInterrupt:
            # SIGINT while idle
            continue

        msg_type = msg['header']['msg_type']

        if msg_type == 'execute_request':
            _execute(shell, msg['content'], output_queue)

        elif msg_type == 'shutdown_request':
            output_queue.put(make_msg('shutdown_reply', {'restart': False}, channel=SHELL))
            break
