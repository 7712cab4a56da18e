"""
Integration tests for the subprocess kernel session with streaming output.

These start a real kernel subprocess; they are skipped when execnb is missing.
"""
import asyncio

import pytest

pytest.importorskip("execnb")

from document import OutputAreaModel
from services.kernel import KernelDiedError, KernelSession, execute_code


@pytest.fixture
def session():
    session = KernelSession()
    yield session
    session.shutdown()


def texts(outputs, name='stdout'):
    return ''.join(o['text'] for o in outputs.to_list()
                   if o['output_type'] == 'stream' and o['name'] == name)


@pytest.mark.asyncio
async def test_basic_streaming(session):
    outputs = OutputAreaModel()
    code = '''
for i in range(3):
    print(f"i = {i}")
'''
    reply = await execute_code(code, session, outputs)
    assert reply['status'] == 'ok'
    # Every print lands in one merged stdout record
    assert outputs.length == 1
    assert texts(outputs) == 'i = 0\ni = 1\ni = 2\n'


@pytest.mark.asyncio
async def test_execute_result(session):
    outputs = OutputAreaModel()
    reply = await execute_code('x = 42\nprint(f"x = {x}")\nx * 2', session, outputs)
    assert reply['status'] == 'ok'
    kinds = [o['output_type'] for o in outputs.to_list()]
    assert kinds == ['stream', 'execute_result']
    assert outputs.get(1)['data']['text/plain'] == '84'
    assert session.execution_count == reply['execution_count']


@pytest.mark.asyncio
async def test_namespace_persistence(session):
    outputs = OutputAreaModel()
    await execute_code('my_var = "Hello from cell 1"', session, outputs)
    await execute_code('print(my_var)', session, outputs)
    assert texts(outputs) == 'Hello from cell 1\n'


@pytest.mark.asyncio
async def test_error_handling(session):
    outputs = OutputAreaModel()
    reply = await execute_code('raise ValueError("This is a test error")', session, outputs)
    assert reply['status'] == 'error'
    errors = [o for o in outputs.to_list() if o['output_type'] == 'error']
    assert errors[-1]['ename'] == 'ValueError'
    assert errors[-1]['evalue'] == 'This is a test error'


@pytest.mark.asyncio
async def test_requests_run_in_order(session):
    first, second = OutputAreaModel(), OutputAreaModel()
    results = await asyncio.gather(
        execute_code('print("one")', session, first),
        execute_code('print("two")', session, second),
    )
    assert [r['status'] for r in results] == ['ok', 'ok']
    assert texts(first) == 'one\n'
    assert texts(second) == 'two\n'


@pytest.mark.asyncio
async def test_interrupt(session):
    outputs = OutputAreaModel()
    code = '''
import time
print("Starting long loop...")
for i in range(100):
    time.sleep(0.1)
print("Should not reach here")
'''
    result = execute_code(code, session, outputs)
    await asyncio.sleep(1.5)
    assert session.interrupt()
    reply = await result
    assert reply['status'] in ('error', 'abort')
    assert 'Should not reach here' not in texts(outputs)
    assert any(o['output_type'] == 'error' and o['ename'] == 'KeyboardInterrupt'
               for o in outputs.to_list())


@pytest.mark.asyncio
async def test_shutdown_fails_pending_request(session):
    outputs = OutputAreaModel()
    result = execute_code('import time; time.sleep(10)', session, outputs)
    await asyncio.sleep(0.5)
    session.shutdown()
    with pytest.raises(KernelDiedError):
        await result
    assert not session.is_alive


@pytest.mark.asyncio
async def test_restart_clears_namespace(session):
    outputs = OutputAreaModel()
    await execute_code('gone = 1', session, outputs)
    assert session.restart()
    reply = await execute_code('gone', session, outputs)
    assert reply['status'] == 'error'
    assert outputs.get(outputs.length - 1)['ename'] == 'NameError'


@pytest.mark.asyncio
async def test_display_data(session):
    outputs = OutputAreaModel()
    code = 'from IPython.display import display\ndisplay({"text/html": "<b>hi</b>"}, raw=True)'
    await execute_code(code, session, outputs)
    [record] = [o for o in outputs.to_list() if o['output_type'] == 'display_data']
    assert record['data'] == {'text/html': '<b>hi</b>'}
