"""
포인터 제스처 상태 머신
- HitTarget / resolve_target: 포인터 아래 대상 결정 (우선순위)
- is_click / classify_gesture: 클릭/드래그 판정
- handle_node_click: 선택/연결 머신
- DragNodeGesture, ResizeNodeGesture, PanCanvasGesture: 드래그 계열 머신
- InteractionController: 한 번에 하나의 제스처만 활성
각 핸들러는 RenderScope 를 반환하고, 실제 그리기는 SceneRenderer 가 담당한다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from pictoboard.constants import CLICK_THRESHOLD_SQ

from .geometry import drag_position, resize_box
from .model import Connection
from .state import EditorState


# ============================================================
# 대상 판정
# ============================================================

class HitKind:
    NODE_DELETE = "node_delete"
    RESIZE_HANDLE = "resize_handle"
    PIN = "pin"
    CONNECTION_DELETE = "connection_delete"
    TEXT = "text"              # 고정(pinned) 텍스트 편집 영역
    NODE_BODY = "node_body"
    BACKGROUND = "background"


# 앞에 있을수록 우선
HIT_PRIORITY = (
    HitKind.NODE_DELETE,
    HitKind.RESIZE_HANDLE,
    HitKind.PIN,
    HitKind.CONNECTION_DELETE,
    HitKind.TEXT,
    HitKind.NODE_BODY,
    HitKind.BACKGROUND,
)


@dataclass(frozen=True)
class HitTarget:
    kind: str
    ref_id: Optional[str] = None   # 노드 id 또는 연결 id


BACKGROUND = HitTarget(HitKind.BACKGROUND)


def resolve_target(hits: Iterable[Optional[HitTarget]]) -> HitTarget:
    """포인터 아래 후보들 중 우선순위가 가장 높은 대상. 없으면 배경."""
    best = BACKGROUND
    best_rank = HIT_PRIORITY.index(HitKind.BACKGROUND)
    for hit in hits:
        if hit is None:
            continue
        rank = HIT_PRIORITY.index(hit.kind)
        if rank < best_rank:
            best, best_rank = hit, rank
    return best


# ============================================================
# 클릭/드래그 판정
# ============================================================

CLICK = "click"
DRAG = "drag"


def is_click(dx: float, dy: float, threshold: float = CLICK_THRESHOLD_SQ) -> bool:
    return dx * dx + dy * dy <= threshold


def classify_gesture(dx: float, dy: float, threshold: float = CLICK_THRESHOLD_SQ) -> str:
    return CLICK if is_click(dx, dy, threshold) else DRAG


# ============================================================
# 렌더 범위
# ============================================================

@dataclass(frozen=True)
class RenderScope:
    """핸들러가 요청하는 렌더 범위.

    none: 변경 없음 / full: 전체 재구성 / node: 노드 1개 + 연결선 /
    selection: 선택 표시만 / offset: 레이어 이동 변환만
    """

    mode: str
    node_ids: Tuple[str, ...] = ()

    @classmethod
    def node(cls, node_id: str) -> "RenderScope":
        return cls("node", (node_id,))

    @classmethod
    def selection(cls, *node_ids: Optional[str]) -> "RenderScope":
        return cls("selection", tuple(n for n in node_ids if n))

    @property
    def is_none(self) -> bool:
        return self.mode == "none"


RenderScope.NONE = RenderScope("none")
RenderScope.FULL = RenderScope("full")
RenderScope.OFFSET = RenderScope("offset")


# ============================================================
# 선택/연결 머신
# ============================================================

def handle_node_click(state: EditorState, node_id: str) -> Optional[Connection]:
    """노드 클릭 (드래그 아님).

    - 선택 없음 → 선택
    - 같은 노드 → 선택 해제
    - 다른 노드 → 연결이 없으면 생성, 선택은 클릭한 노드로 이동 (연속 연결)
    새로 만든 연결을 반환한다.
    """
    selected = state.selected_id
    if selected is None or state.model.get_node(selected) is None:
        state.select(node_id)
        return None
    if selected == node_id:
        state.select(None)
        return None

    created = state.model.connect(selected, node_id)
    state.select(node_id)
    return created


# ============================================================
# 드래그 계열 머신
# ============================================================

class Gesture:
    """pointer-down 에서 시작해 pointer-up 에서 끝나는 제스처."""

    def __init__(self, state: EditorState, x: float, y: float):
        self.state = state
        self.start_x = x
        self.start_y = y

    def delta(self, x: float, y: float) -> Tuple[float, float]:
        return x - self.start_x, y - self.start_y

    def move(self, x: float, y: float) -> RenderScope:
        return RenderScope.NONE

    def release(self, x: float, y: float) -> RenderScope:
        return RenderScope.FULL


class DragNodeGesture(Gesture):
    """노드 본체 드래그. 임계값 이내로 끝나면 클릭으로 처리."""

    def __init__(self, state: EditorState, node_id: str, x: float, y: float):
        super().__init__(state, x, y)
        self.node_id = node_id
        node = state.model.get_node(node_id)
        self.node_start = (node.x, node.y)
        self.dragging = False

    def move(self, x: float, y: float) -> RenderScope:
        node = self.state.model.get_node(self.node_id)
        if node is None:
            return RenderScope.NONE
        dx, dy = self.delta(x, y)
        if not is_click(dx, dy):
            self.dragging = True
        node.x, node.y = drag_position(self.node_start[0], self.node_start[1], dx, dy)
        return RenderScope.node(self.node_id)

    def release(self, x: float, y: float) -> RenderScope:
        dx, dy = self.delta(x, y)
        if not is_click(dx, dy):
            self.dragging = True
        if not self.dragging and self.state.model.get_node(self.node_id) is not None:
            handle_node_click(self.state, self.node_id)
        return RenderScope.FULL


class ResizeNodeGesture(Gesture):
    """우하단 핸들 리사이즈. 선택은 건드리지 않는다."""

    def __init__(self, state: EditorState, node_id: str, x: float, y: float):
        super().__init__(state, x, y)
        self.node_id = node_id
        node = state.model.get_node(node_id)
        self.size_start = (node.width, node.height)

    def move(self, x: float, y: float) -> RenderScope:
        node = self.state.model.get_node(self.node_id)
        if node is None:
            return RenderScope.NONE
        dx, dy = self.delta(x, y)
        node.width, node.height = resize_box(self.size_start[0], self.size_start[1], dx, dy)
        return RenderScope.node(self.node_id)


class PanCanvasGesture(Gesture):
    """빈 배경 드래그로 캔버스 이동."""

    def __init__(self, state: EditorState, x: float, y: float):
        super().__init__(state, x, y)
        self.anchor = (x - state.offset.x, y - state.offset.y)

    def move(self, x: float, y: float) -> RenderScope:
        self.state.offset.x = x - self.anchor[0]
        self.state.offset.y = y - self.anchor[1]
        return RenderScope.OFFSET


# ============================================================
# 컨트롤러
# ============================================================

class InteractionController:
    """포인터/키 입력을 제스처 머신으로 분배.

    입력 소스가 여러 개여도 같은 컨트롤러를 거치므로 한 번에 하나의
    제스처만 활성화된다. 활성 제스처가 있는 동안의 pointer-down 은 무시.
    """

    def __init__(self, state: EditorState):
        self.state = state
        self.active: Optional[Gesture] = None

    @property
    def busy(self) -> bool:
        return self.active is not None

    def press(self, target: HitTarget, x: float, y: float) -> RenderScope:
        if self.active is not None:
            return RenderScope.NONE

        state = self.state
        kind = target.kind

        if kind == HitKind.NODE_DELETE:
            state.delete_node(target.ref_id)
            return RenderScope.FULL

        if kind == HitKind.CONNECTION_DELETE:
            state.delete_connection(target.ref_id)
            return RenderScope.FULL

        if kind == HitKind.PIN:
            if state.toggle_pinned(target.ref_id):
                return RenderScope.FULL
            return RenderScope.NONE

        if kind == HitKind.TEXT:
            # 고정 텍스트: 편집기에 포인터를 넘기고 선택만 한다
            previous = state.selected_id
            state.select(target.ref_id)
            if previous == state.selected_id:
                return RenderScope.NONE
            return RenderScope.selection(previous, state.selected_id)

        if kind == HitKind.RESIZE_HANDLE:
            if state.model.get_node(target.ref_id) is not None:
                self.active = ResizeNodeGesture(state, target.ref_id, x, y)
            return RenderScope.NONE

        if kind == HitKind.NODE_BODY:
            if state.model.get_node(target.ref_id) is not None:
                self.active = DragNodeGesture(state, target.ref_id, x, y)
            return RenderScope.NONE

        self.active = PanCanvasGesture(state, x, y)
        return RenderScope.NONE

    def move(self, x: float, y: float) -> RenderScope:
        if self.active is None:
            return RenderScope.NONE
        return self.active.move(x, y)

    def release(self, x: float, y: float) -> RenderScope:
        gesture, self.active = self.active, None
        if gesture is None:
            return RenderScope.NONE
        return gesture.release(x, y)

    def delete_selected(self, in_text_field: bool) -> RenderScope:
        """Delete/Backspace: 텍스트 입력 중이 아니면 선택 노드 삭제."""
        if in_text_field or self.state.selected_id is None:
            return RenderScope.NONE
        self.state.delete_node(self.state.selected_id)
        return RenderScope.FULL
