from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from PyQt6.QtCore import QPointF
from PyQt6.QtWidgets import QGraphicsScene

from pictoboard.boards.base import BoardPlugin
from pictoboard.constants import CURVE_ANCHOR_OFFSET, TEXT_DROP_PAYLOAD
from pictoboard.logger import get_logger

from .gestures import HitTarget, InteractionController, RenderScope
from .model import NODE_IMAGE, NODE_TEXT, Node, SceneSnapshot
from .persistence import snapshot_from_dict, snapshot_to_dict
from .printing import PrintComposer
from .render import SceneRenderer
from .view import CanvasView

logger = get_logger("pictoboard.plugin")


class CanvasBoard(BoardPlugin):
    """픽토그램 캔버스 보드

    EditorState 하나를 렌더러, 제스처 컨트롤러, 인쇄 구성기가 공유한다.
    모든 변경은 render(scope) 를 거쳐 화면에 반영된다.
    인쇄 미리보기 동안에는 포인터/키/드롭 입력을 받지 않는다.
    """

    def __init__(self, app, print_handler: Optional[Callable[[QGraphicsScene], None]] = None):
        super().__init__(app)
        self.state = app.state
        self.scene = QGraphicsScene()
        self.renderer = SceneRenderer(self.scene, self.state, app.catalog_dir)
        self.controller = InteractionController(self.state)
        self.view: Optional[CanvasView] = None
        self.print_handler = print_handler
        self.on_print_preview = None   # 인쇄 미리보기 진입 (사이드바 숨김 등)
        self.on_print_restore = None

        self.composer = PrintComposer(
            self.state, self.renderer, self._print,
            on_preview=self._enter_print_preview,
            on_restore=self._leave_print_preview,
        )
        self.renderer.rebuild()

    def create_view(self) -> CanvasView:
        self.view = CanvasView(self.scene, self)
        return self.view

    # ── 렌더 ─────────────────────────────────────────────

    def render(self, scope: RenderScope):
        self.renderer.render(scope)
        if scope.mode == "full":
            self.notify_modified()

    # ── 입력 (뷰 → 컨트롤러) ─────────────────────────────

    def pointer_press(self, target: HitTarget, x: float, y: float) -> bool:
        if self.is_printing:
            return False
        self.render(self.controller.press(target, x, y))
        return True

    def pointer_move(self, x: float, y: float) -> bool:
        if self.is_printing or not self.controller.busy:
            return False
        self.render(self.controller.move(x, y))
        return True

    def pointer_release(self, x: float, y: float) -> bool:
        if self.is_printing or not self.controller.busy:
            return False
        self.render(self.controller.release(x, y))
        return True

    def delete_key(self, in_text_field: bool) -> bool:
        if self.is_printing or in_text_field:
            return False
        self.render(self.controller.delete_selected(in_text_field))
        return True

    # ── 노드 추가 ────────────────────────────────────────

    def view_center(self) -> QPointF:
        if self.view is None:
            return QPointF(0, 0)
        return self.view.view_center()

    def _canvas_point(self, scene_x: float, scene_y: float):
        """씬 좌표 → 노드 좌상단 (팬 오프셋 제외, 노드 중심이 포인터에 오도록)"""
        offset = self.state.offset
        return (scene_x - offset.x - CURVE_ANCHOR_OFFSET,
                scene_y - offset.y - CURVE_ANCHOR_OFFSET)

    def add_node_at(self, content: str, scene_x: float, scene_y: float, type: str = NODE_IMAGE) -> Node:
        x, y = self._canvas_point(scene_x, scene_y)
        node = self.state.add_node(content, x, y, type)
        self.render(RenderScope.FULL)
        if node.is_text:
            self.focus_text(node.id)
        return node

    def add_node_at_view_center(self, content: str, type: str = NODE_IMAGE) -> Node:
        center = self.view_center()
        return self.add_node_at(content, center.x(), center.y(), type)

    def drop_payload(self, payload: str, scene_x: float, scene_y: float) -> bool:
        """사이드바 드롭. 알 수 없는 페이로드는 무시한다."""
        payload = (payload or "").strip()
        if not payload or self.is_printing:
            return False
        if payload == TEXT_DROP_PAYLOAD:
            self.add_node_at("", scene_x, scene_y, NODE_TEXT)
        else:
            self.add_node_at(payload, scene_x, scene_y, NODE_IMAGE)
        return True

    def focus_text(self, node_id: str):
        item = self.renderer.node_items.get(node_id)
        if item is None or item.text_item is None:
            return
        if self.view is not None:
            self.view.setFocus()
        item.text_item.setFocus()

    # ── 장면 전체 ────────────────────────────────────────

    def clear_all(self):
        self.state.clear()
        self.render(RenderScope.FULL)

    def apply_snapshot(self, snapshot: SceneSnapshot):
        self.state.restore(snapshot)
        self.renderer.rebuild()

    def collect_data(self) -> Dict[str, Any]:
        return snapshot_to_dict(self.state.snapshot())

    def restore_data(self, data: Dict[str, Any]) -> None:
        # 디코드가 끝난 뒤에만 상태를 바꾼다
        self.apply_snapshot(snapshot_from_dict(data))

    # ── 인쇄 ─────────────────────────────────────────────

    @property
    def is_printing(self) -> bool:
        return self.composer.busy

    def start_print(self) -> bool:
        return self.composer.start()

    def _print(self):
        if self.print_handler is None:
            logger.info("[PRINT] no print handler configured")
            return
        self.print_handler(self.scene)

    def _enter_print_preview(self):
        if self.view is not None:
            self.view.enter_print_preview()
        if self.on_print_preview:
            self.on_print_preview()

    def _leave_print_preview(self):
        if self.view is not None:
            self.view.leave_print_preview()
        if self.on_print_restore:
            self.on_print_restore()
