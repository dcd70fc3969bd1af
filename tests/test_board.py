import pytest

from pictoboard.app import App
from pictoboard.boards.canvas import CanvasBoard
from pictoboard.boards.canvas.gestures import HitKind, HitTarget
from pictoboard.boards.canvas.persistence import MemoryBackend, SceneStore


@pytest.fixture
def board(qapp, tmp_path):
    app = App(store=SceneStore(MemoryBackend()), catalog_dir=tmp_path)
    return CanvasBoard(app)


def test_drop_payloads(board):
    state = board.state

    assert board.drop_payload("huis.png", 157, 171) is True
    image = state.model.nodes[-1]
    assert (image.type, image.content) == ("image", "huis.png")
    assert (image.x, image.y) == (100, 120)
    assert state.selected_id == image.id

    assert board.drop_payload("::TEXT::", 300, 300) is True
    text = state.model.nodes[-1]
    assert (text.type, text.content, text.pinned) == ("text", "", True)

    assert board.drop_payload("   ", 0, 0) is False
    assert board.drop_payload("", 0, 0) is False
    assert len(state.model.nodes) == 2


def test_drop_subtracts_pan_offset(board):
    board.state.offset.x, board.state.offset.y = 200, -100
    board.drop_payload("kat.png", 350, 50)
    node = board.state.model.nodes[-1]
    assert (node.x, node.y) == (100, 100)


def test_add_node_at_view_center_without_view(board):
    node = board.add_node_at_view_center("appel.png")
    assert (node.x, node.y) == (-40, -40)
    assert board.renderer.node_items[node.id].delete_glyph is not None


def test_clear_all_keeps_offset(board):
    board.drop_payload("a.png", 0, 0)
    board.state.offset.x = 80
    board.clear_all()

    assert board.state.model.nodes == []
    assert board.state.selected_id is None
    assert board.state.offset.x == 80
    assert board.renderer.node_items == {}


def test_collect_and_restore_data(board):
    board.drop_payload("a.png", 50, 50)
    board.drop_payload("b.png", 350, 50)
    a, b = board.state.model.nodes
    board.state.model.connect(a.id, b.id)
    data = board.collect_data()

    board.clear_all()
    board.restore_data(data)

    assert [n.id for n in board.state.model.nodes] == [a.id, b.id]
    assert len(board.state.model.connections) == 1
    assert board.state.selected_id is None
    assert len(board.renderer.connection_items) == 1


def test_restore_data_rejects_bad_payload_without_touching_scene(board):
    board.drop_payload("a.png", 50, 50)
    before = board.state.snapshot()

    with pytest.raises(ValueError):
        board.restore_data({"nodes": [{"id": "x", "x": "?", "y": 0}]})
    assert board.state.snapshot() == before


def test_modified_callback_on_structural_change(board):
    calls = []
    board.on_modified = lambda: calls.append(1)

    board.drop_payload("a.png", 50, 50)
    node = board.state.model.nodes[0]
    board.render(board.controller.press(HitTarget(HitKind.NODE_DELETE, node.id), 0, 0))

    assert len(calls) == 2
    assert board.state.model.nodes == []


def test_print_without_handler_is_harmless(board):
    assert board.start_print() is False
    assert not board.is_printing
