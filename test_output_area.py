"""Tests for output rendering and the out-of-band fragments sent on model changes."""
import pytest
from fasthtml.common import to_xml

from document import CodeCellModel, OutputAreaModel
from ui import OutputAreaView, OutputView, ansi_to_html, render_mime_bundle


def stream(text, name='stdout'):
    return {'output_type': 'stream', 'name': name, 'text': text}


@pytest.fixture
def view():
    sent = []
    model = OutputAreaModel()
    view = OutputAreaView(model, 'c1', sent.append)
    view.sent = sent
    return view


def html_of(fragments):
    return [to_xml(f) for f in fragments]


class TestOutputView:

    def test_stream(self):
        html = to_xml(OutputView(stream('hi <b>'), 'n1'))
        assert 'stream-output stdout' in html
        assert 'hi &lt;b&gt;' in html
        assert 'id="n1"' in html

    def test_error_uses_traceback(self):
        record = {'output_type': 'error', 'ename': 'ValueError', 'evalue': 'bad',
                  'traceback': ['Traceback', 'ValueError: bad']}
        html = to_xml(OutputView(record, 'n2'))
        assert 'error-output' in html
        assert 'ValueError: bad' in html

    def test_execute_result(self):
        record = {'output_type': 'execute_result', 'data': {'text/plain': '42'},
                  'metadata': {}, 'execution_count': 1}
        html = to_xml(OutputView(record, 'n3'))
        assert 'execute-result-output' in html
        assert '42' in html


class TestFragments:

    def test_first_output_is_appended(self, view):
        view.model.add(stream('a'))
        [html] = html_of(view.sent)
        assert 'hx-swap-oob="beforeend:#output-c1"' in html
        assert 'id="output-c1-0"' in html

    def test_stream_merge_swaps_one_node(self, view):
        view.model.add(stream('a'))
        view.model.add(stream('b'))
        html = to_xml(view.sent[-1])
        assert 'id="output-c1-0"' in html
        assert 'hx-swap-oob="true"' in html
        assert 'ab' in html

    def test_clear_empties_container(self, view):
        view.model.add(stream('a'))
        view.model.clear()
        html = to_xml(view.sent[-1])
        assert 'id="output-c1"' in html
        assert 'hx-swap-oob="true"' in html
        assert 'output-c1-0' not in html

    def test_full_render(self, view):
        view.model.add(stream('a'))
        view.model.add({'output_type': 'display_data', 'data': {'text/html': '<i>x</i>'},
                        'metadata': {}})
        html = to_xml(view.render())
        assert 'id="output-c1-0"' in html
        assert 'id="output-c1-1"' in html
        assert '<i>x</i>' in html

    def test_dispose_stops_sending(self, view):
        view.dispose()
        view.model.add(stream('a'))
        assert view.sent == []

    def test_no_sink_is_fine(self):
        model = OutputAreaModel()
        OutputAreaView(model, 'x')
        assert model.add(stream('a')) == 0

    def test_code_cell_outputs_use_cell_id(self):
        cell = CodeCellModel()
        view = OutputAreaView(cell.outputs, cell.id)
        assert view.container_id == f'output-{cell.id}'


class TestMime:

    def test_prefers_richest_type(self):
        html = render_mime_bundle({'text/plain': 'plain', 'text/html': '<b>rich</b>'})
        assert '<b>rich</b>' in html
        assert 'plain' not in html

    def test_image_size_from_metadata(self):
        html = render_mime_bundle({'image/png': 'AAAA'}, {'width': 10})
        assert 'data:image/png;base64,AAAA' in html
        assert 'width:10px' in html

    def test_unknown_bundle_is_escaped(self):
        assert '&lt;' in render_mime_bundle({'application/x-thing': '<'})

    def test_ansi_colors(self):
        html = ansi_to_html('\x1b[31mred\x1b[0m plain')
        assert html == '<span style="color:#c00">red</span> plain'

    def test_ansi_unclosed_span_is_closed(self):
        assert ansi_to_html('\x1b[1mbold').endswith('</span>')
