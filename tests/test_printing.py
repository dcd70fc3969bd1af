import pytest

from pictoboard.boards.canvas.geometry import content_bounds, print_fit_transform
from pictoboard.boards.canvas.model import Node
from pictoboard.boards.canvas.printing import PrintComposer, to_qtransform
from pictoboard.boards.canvas.render import SceneRenderer
from pictoboard.boards.canvas.state import EditorState


class _Recorder:
    """인쇄 호출 시점의 레이어 변환과 예약된 콜백을 기록"""

    def __init__(self, renderer):
        self.renderer = renderer
        self.printed = []
        self.scheduled = []
        self.events = []

    def print_fn(self):
        t = self.renderer.layer_transform()
        self.printed.append((t.m11(), t.dx(), t.dy()))
        self.events.append("print")

    def schedule(self, delay, callback):
        self.scheduled.append((delay, callback))

    def run_scheduled(self):
        while self.scheduled:
            _, callback = self.scheduled.pop(0)
            callback()


@pytest.fixture
def setup(qapp):
    from PyQt6.QtWidgets import QGraphicsScene
    state = EditorState()
    renderer = SceneRenderer(QGraphicsScene(), state)
    recorder = _Recorder(renderer)
    composer = PrintComposer(
        state, renderer, recorder.print_fn,
        on_preview=lambda: recorder.events.append("preview"),
        on_restore=lambda: recorder.events.append("restore"),
        schedule=recorder.schedule,
    )
    return state, renderer, recorder, composer


def test_to_qtransform_matches_fit_mapping(qapp):
    fit = print_fit_transform(content_bounds([Node("a", -40, 60, width=300), Node("b", 500, 400)]))
    transform = to_qtransform(fit)
    for x, y in [(-40, 60), (600, 500), (123, 456)]:
        mapped = transform.map(float(x), float(y))
        assert mapped == pytest.approx(fit.map(x, y))


def test_empty_scene_prints_immediately(setup):
    state, renderer, recorder, composer = setup

    assert composer.start() is False
    assert recorder.printed == [(1.0, 0.0, 0.0)]
    assert recorder.scheduled == []
    assert recorder.events == ["print"]


def test_preview_then_print_then_restore(setup):
    state, renderer, recorder, composer = setup
    node = state.model.add_node("a.png", 0, 0)
    state.select(node.id)
    state.offset.x, state.offset.y = 25, 35
    renderer.rebuild()

    assert composer.start() is True
    assert state.selected_id is None
    assert renderer.node_items[node.id].delete_glyph is None
    assert composer.busy
    assert recorder.events == ["preview"]
    assert recorder.scheduled[0][0] == 1000

    fit = print_fit_transform(content_bounds(state.model.nodes))
    t = renderer.layer_transform()
    assert (t.m11(), t.dx(), t.dy()) == pytest.approx((fit.scale, fit.offset_x, fit.offset_y))

    # 두 번째 요청은 무시
    assert composer.start() is False

    recorder.run_scheduled()
    assert recorder.events == ["preview", "print", "restore"]
    assert recorder.printed[0] == pytest.approx((fit.scale, fit.offset_x, fit.offset_y))
    t = renderer.layer_transform()
    assert (t.m11(), t.dx(), t.dy()) == (1.0, 25.0, 35.0)
    assert not composer.busy


def test_restore_runs_even_if_print_fails(setup):
    state, renderer, recorder, composer = setup
    state.model.add_node("a.png", 40, 40)
    renderer.rebuild()

    def broken():
        raise RuntimeError("printer on fire")

    composer.print_fn = broken
    composer.start()
    with pytest.raises(RuntimeError):
        recorder.run_scheduled()

    t = renderer.layer_transform()
    assert (t.m11(), t.dx(), t.dy()) == (1.0, 0.0, 0.0)
    assert not composer.busy
    assert recorder.events == ["preview", "restore"]
