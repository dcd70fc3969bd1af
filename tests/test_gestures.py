import pytest

from pictoboard.boards.canvas.gestures import (
    CLICK, DRAG, HitKind, HitTarget, InteractionController, RenderScope,
    classify_gesture, handle_node_click, is_click, resolve_target,
)
from pictoboard.boards.canvas.persistence import MemoryBackend, SceneStore
from pictoboard.boards.canvas.state import EditorState


def _body(node):
    return HitTarget(HitKind.NODE_BODY, node.id)


def _click(controller, target, x=10, y=10):
    controller.press(target, x, y)
    return controller.release(x, y)


@pytest.fixture
def controller(state):
    return InteractionController(state)


# ── 분류 ─────────────────────────────────────────────────

def test_click_threshold_is_inclusive():
    assert is_click(3, 4)            # 25
    assert is_click(0, -5)
    assert not is_click(3, 4.01)
    assert not is_click(6, 0)
    assert classify_gesture(5, 0) == CLICK
    assert classify_gesture(5, 1) == DRAG


def test_resolve_target_priority():
    hits = [
        HitTarget(HitKind.NODE_BODY, "n1"),
        HitTarget(HitKind.CONNECTION_DELETE, "c1"),
        None,
        HitTarget(HitKind.RESIZE_HANDLE, "n1"),
    ]
    assert resolve_target(hits) == HitTarget(HitKind.RESIZE_HANDLE, "n1")
    assert resolve_target(hits + [HitTarget(HitKind.NODE_DELETE, "n1")]).kind == HitKind.NODE_DELETE
    assert resolve_target([HitTarget(HitKind.NODE_BODY, "n1"),
                           HitTarget(HitKind.CONNECTION_DELETE, "c1")]).kind == HitKind.CONNECTION_DELETE
    assert resolve_target([]).kind == HitKind.BACKGROUND
    assert resolve_target([None]).kind == HitKind.BACKGROUND


# ── 선택 / 연결 ───────────────────────────────────────────

def test_select_connect_chain(state):
    a = state.model.add_node("a.png", 0, 0)
    b = state.model.add_node("b.png", 200, 0)
    c = state.model.add_node("c.png", 400, 0)

    assert handle_node_click(state, a.id) is None
    assert state.selected_id == a.id

    ab = handle_node_click(state, b.id)
    assert ab is not None and (ab.from_id, ab.to_id) == (a.id, b.id)
    assert state.selected_id == b.id

    bc = handle_node_click(state, c.id)
    assert bc is not None
    assert state.selected_id == c.id

    # 이미 연결된 쌍: 새 연결 없이 선택만 이동
    assert handle_node_click(state, b.id) is None
    assert state.selected_id == b.id
    assert len(state.model.connections) == 2

    handle_node_click(state, b.id)
    assert state.selected_id is None


def test_click_on_body_selects_and_drag_does_not(state, controller):
    node = state.model.add_node("a.png", 100, 100)

    controller.press(_body(node), 50, 50)
    controller.move(53, 54)
    scope = controller.release(53, 54)
    assert scope == RenderScope.FULL
    assert state.selected_id == node.id
    assert (node.x, node.y) == (100, 100)

    # 드래그: 위치만 바뀌고 선택은 그대로
    controller.press(_body(node), 50, 50)
    assert controller.move(80, 50) == RenderScope.node(node.id)
    controller.release(80, 50)
    assert (node.x, node.y) == (140, 100)
    assert state.selected_id == node.id


def test_drag_flag_latches_after_threshold(state, controller):
    node = state.model.add_node("a.png", 0, 0)

    controller.press(_body(node), 0, 0)
    controller.move(30, 0)
    controller.move(1, 1)       # 원위치 근처로 돌아와도 드래그
    controller.release(1, 1)

    assert state.selected_id is None
    assert (node.x, node.y) == (0, 0)


def test_drag_keeps_grid_alignment(state, controller):
    node = state.model.add_node("a.png", 20, 40)
    controller.press(_body(node), 0, 0)
    for step in range(1, 40):
        controller.move(step * 3.7, -step * 2.3)
        assert node.x % 20 == 0 and node.y % 20 == 0
    controller.release(39 * 3.7, -39 * 2.3)


def test_resize_never_below_minimum_and_keeps_selection(state, controller):
    node = state.model.add_node("a.png", 0, 0)
    state.select(node.id)
    handle = HitTarget(HitKind.RESIZE_HANDLE, node.id)

    controller.press(handle, 100, 100)
    assert controller.move(135, 90) == RenderScope.node(node.id)
    assert (node.width, node.height) == (135, 90)
    controller.move(-5000, -5000)
    assert (node.width, node.height) == (50, 50)
    assert controller.release(-5000, -5000) == RenderScope.FULL

    assert state.selected_id == node.id
    assert (node.x, node.y) == (0, 0)

    # 클릭만 해도 선택은 바뀌지 않는다
    _click(controller, handle)
    assert state.selected_id == node.id


def test_pan_moves_offset_relative_to_start(state, controller):
    state.offset.x, state.offset.y = 30, -10

    controller.press(HitTarget(HitKind.BACKGROUND), 100, 100)
    assert controller.move(150, 80) == RenderScope.OFFSET
    assert (state.offset.x, state.offset.y) == (80, -30)
    controller.move(90, 110)
    assert (state.offset.x, state.offset.y) == (20, 0)
    assert controller.release(90, 110) == RenderScope.FULL


def test_only_one_gesture_at_a_time(state, controller):
    a = state.model.add_node("a.png", 0, 0)
    b = state.model.add_node("b.png", 200, 0)

    controller.press(_body(a), 0, 0)
    assert controller.busy
    assert controller.press(HitTarget(HitKind.NODE_DELETE, b.id), 0, 0) == RenderScope.NONE
    assert state.model.get_node(b.id) is not None
    controller.release(0, 0)
    assert not controller.busy
    assert controller.release(0, 0) == RenderScope.NONE


# ── 어포던스 ─────────────────────────────────────────────

def test_delete_glyph_removes_node_without_drag(state, controller):
    a = state.model.add_node("a.png", 0, 0)
    b = state.model.add_node("b.png", 200, 0)
    state.model.connect(a.id, b.id)
    state.select(a.id)

    scope = controller.press(HitTarget(HitKind.NODE_DELETE, a.id), 5, 5)
    assert scope == RenderScope.FULL
    assert not controller.busy
    assert state.model.get_node(a.id) is None
    assert state.model.connections == []
    assert state.selected_id is None


def test_connection_delete_glyph_suppresses_pan(state, controller):
    a = state.model.add_node("a.png", 0, 0)
    b = state.model.add_node("b.png", 200, 0)
    conn = state.model.connect(a.id, b.id)

    scope = controller.press(HitTarget(HitKind.CONNECTION_DELETE, conn.id), 150, 50)
    assert scope == RenderScope.FULL
    assert not controller.busy
    assert state.model.connections == []
    assert (state.offset.x, state.offset.y) == (0, 0)


def test_pin_toggle_only_for_text_nodes(state, controller):
    text = state.model.add_node("", 0, 0, "text")
    image = state.model.add_node("a.png", 200, 0)

    assert controller.press(HitTarget(HitKind.PIN, text.id), 0, 0) == RenderScope.FULL
    assert text.pinned is False
    assert not controller.busy
    controller.press(HitTarget(HitKind.PIN, text.id), 0, 0)
    assert text.pinned is True

    assert controller.press(HitTarget(HitKind.PIN, image.id), 0, 0) == RenderScope.NONE
    assert image.pinned is True


def test_pinned_text_press_selects_without_gesture(state, controller):
    text = state.model.add_node("hallo", 0, 0, "text")
    other = state.model.add_node("a.png", 200, 0)
    state.select(other.id)

    scope = controller.press(HitTarget(HitKind.TEXT, text.id), 10, 10)
    assert scope == RenderScope.selection(other.id, text.id)
    assert state.selected_id == text.id
    assert not controller.busy
    assert state.model.connections == []


# ── 키보드 ───────────────────────────────────────────────

def test_keyboard_delete_respects_text_focus(state, controller):
    node = state.model.add_node("a.png", 0, 0)
    state.select(node.id)

    assert controller.delete_selected(in_text_field=True) == RenderScope.NONE
    assert state.model.get_node(node.id) is not None

    assert controller.delete_selected(in_text_field=False) == RenderScope.FULL
    assert state.model.nodes == []
    assert state.selected_id is None
    assert controller.delete_selected(in_text_field=False) == RenderScope.NONE


# ── 시나리오 ─────────────────────────────────────────────

def test_build_connect_delete_save_load_scenario():
    state = EditorState()
    controller = InteractionController(state)
    store = SceneStore(MemoryBackend())

    a = state.model.add_node("a.png", 105, 112)
    assert (a.x, a.y) == (100, 120)
    b = state.model.add_node("b.png", 300, 120)

    _click(controller, _body(a))
    _click(controller, _body(b))
    assert len(state.model.connections) == 1
    assert state.model.has_connection(a.id, b.id)
    assert state.selected_id == b.id

    _click(controller, _body(b))
    assert state.selected_id is None
    assert len(state.model.connections) == 1

    state.delete_node(b.id)
    assert state.model.connections == []
    assert [n.id for n in state.model.nodes] == [a.id]
    assert state.selected_id is None

    state.offset.x, state.offset.y = 40, -60
    before = state.snapshot()
    store.save("x", before)

    state.clear()
    assert state.model.nodes == []
    assert (state.offset.x, state.offset.y) == (40, -60)
    state.offset.x = state.offset.y = 0

    state.restore(store.load("x"))
    assert state.snapshot() == before
