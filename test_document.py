"""Tests for signals, the observable list and the notebook/cell models."""
import pytest

from document import (
    CellType, CodeCellModel, ListChange, ListChangeType, MarkdownCellModel, NotebookModel,
    ObservableList, RawCellModel, Signal, StateChange,
)


def record(signal):
    events = []
    signal.connect(lambda sender, args: events.append(args))
    return events


class TestSignal:

    def test_listeners_get_sender_and_args(self):
        owner = object()
        signal = Signal(owner)
        calls = []
        signal.connect(lambda sender, args: calls.append((sender, args)))
        signal.emit('x')
        assert calls == [(owner, 'x')]

    def test_connect_twice_is_noop(self):
        signal = Signal(None)
        calls = []

        def listener(sender, args):
            calls.append(args)

        assert signal.connect(listener)
        assert not signal.connect(listener)
        signal.emit(1)
        assert calls == [1]

    def test_disconnect(self):
        signal = Signal(None)
        events = []

        def listener(sender, args):
            events.append(args)

        signal.connect(listener)
        assert signal.disconnect(listener)
        assert not signal.disconnect(listener)
        signal.emit(1)
        assert events == []

    def test_listener_errors_propagate(self):
        signal = Signal(None)

        def boom(sender, args):
            raise ValueError(args)

        signal.connect(boom)
        with pytest.raises(ValueError):
            signal.emit('bad')

    def test_change_items_are_normalized(self):
        assert ListChange(ListChangeType.REPLACE, 0, 'a', 'b').old_items == ['a']
        assert ListChange(ListChangeType.REPLACE, 0, ['a', 'b'], []).old_items == ['a', 'b']
        assert ListChange(ListChangeType.CLEAR, 0, ['a'], None).new_items == []


class TestObservableList:

    def test_add_and_insert(self):
        items = ObservableList()
        events = record(items.changed)
        assert items.add('a') == 0
        assert items.insert(0, 'b') == 0
        assert items.insert(99, 'c') == 2
        assert list(items) == ['b', 'a', 'c']
        assert [(e.kind, e.index, e.new_value) for e in events] == [
            (ListChangeType.INSERT, 0, 'a'),
            (ListChangeType.INSERT, 0, 'b'),
            (ListChangeType.INSERT, 2, 'c'),
        ]

    def test_set_emits_scalar_replace(self):
        items = ObservableList(['a', 'b'])
        events = record(items.changed)
        assert items.set(1, 'z') == 'b'
        assert events == [ListChange(ListChangeType.REPLACE, 1, 'b', 'z')]
        assert items.set(5, 'q') is None

    def test_remove(self):
        items = ObservableList(['a', 'b', 'c'])
        events = record(items.changed)
        assert items.remove('b') == 1
        assert items.remove('missing') == -1
        assert items.remove_at(7) is None
        assert events == [ListChange(ListChangeType.REMOVE, 1, 'b', None)]

    def test_move(self):
        items = ObservableList(['a', 'b', 'c'])
        events = record(items.changed)
        assert items.move(0, 2)
        assert list(items) == ['b', 'c', 'a']
        assert not items.move(1, 1)
        assert not items.move(0, 3)
        assert len(events) == 1
        assert (events[0].index, events[0].new_index) == (0, 2)

    def test_replace_range(self):
        items = ObservableList(['a', 'b', 'c', 'd'])
        events = record(items.changed)
        assert items.replace(1, 2, ['x']) == ['b', 'c']
        assert list(items) == ['a', 'x', 'd']
        assert events[0].old_items == ['b', 'c']
        assert events[0].new_items == ['x']

    def test_clear(self):
        items = ObservableList(['a', 'b'])
        events = record(items.changed)
        assert items.clear() == ['a', 'b']
        assert len(items) == 0
        assert events[0].kind == ListChangeType.CLEAR
        assert events[0].old_items == ['a', 'b']

    def test_get_and_index_of(self):
        a = object()
        items = ObservableList([a])
        assert items.get(0) is a
        assert items.get(1) is None
        assert items.index_of(a) == 0
        assert items.index_of(object()) == -1


class TestCellModel:

    def test_types(self):
        assert CodeCellModel().cell_type == CellType.CODE
        assert MarkdownCellModel().cell_type == CellType.MARKDOWN
        assert RawCellModel().cell_type == CellType.RAW

    def test_ids_are_unique(self):
        assert CodeCellModel().id != CodeCellModel().id

    def test_source_change(self):
        cell = CodeCellModel('a')
        events = record(cell.state_changed)
        cell.source = 'a'
        cell.source = 'b'
        assert events == [StateChange('source', 'a', 'b')]

    def test_code_cell_disposes_outputs(self):
        cell = CodeCellModel()
        cell.dispose()
        cell.dispose()
        assert cell.is_disposed
        assert cell.outputs.is_disposed


class TestNotebookModel:

    def test_starts_with_one_code_cell(self):
        model = NotebookModel()
        assert len(model.cells) == 1
        assert model.cells.get(0).cell_type == CellType.CODE
        assert not model.read_only

    def test_create_cell(self):
        model = NotebookModel()
        assert isinstance(model.create_cell('markdown', '# x'), MarkdownCellModel)
        assert model.create_cell(CellType.RAW).source == ''

    def test_removed_cells_are_disposed(self, model):
        first, second = model.cells.get(0), model.cells.get(1)
        model.cells.remove_at(0)
        assert first.is_disposed
        model.cells.set(0, model.create_code_cell())
        assert second.is_disposed

    def test_moved_cells_survive(self, model):
        cell = model.cells.get(0)
        model.cells.move(0, 3)
        assert not cell.is_disposed

    def test_reinserted_cell_survives_replace(self, model):
        cell = model.cells.get(2)
        model.cells.replace(2, 1, [cell])
        assert not cell.is_disposed

    def test_clear_disposes_all(self, model):
        cells = list(model.cells)
        model.cells.clear()
        assert all(cell.is_disposed for cell in cells)

    def test_metadata(self):
        model = NotebookModel({'kernelspec': {'name': 'python3'}})
        events = record(model.metadata_changed)
        info = model.get_metadata('kernelspec')
        info['name'] = 'mutated'
        assert model.get_metadata('kernelspec') == {'name': 'python3'}
        model.set_metadata('kernelspec', {'name': 'python3'})
        model.set_metadata('language_info', {'name': 'python'})
        assert events == [StateChange('language_info', None, {'name': 'python'})]

    def test_dispose(self, model):
        cells = list(model.cells)
        model.dispose()
        model.dispose()
        assert model.is_disposed
        assert all(cell.is_disposed for cell in cells)
        assert model.cells.changed.listener_count == 0
