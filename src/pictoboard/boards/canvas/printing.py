"""
인쇄 구성
콘텐츠를 A4 가로 페이지에 맞춘 변환을 두 레이어에 잠시 적용하고,
미리보기가 그려질 시간을 준 뒤 호스트 인쇄를 호출, 이전 변환을 복원한다.
"""
from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QTransform

from pictoboard.constants import PRINT_DELAY_MS
from pictoboard.logger import get_logger

from .geometry import PrintTransform, content_bounds, print_fit_transform
from .render import SceneRenderer
from .state import EditorState

logger = get_logger("pictoboard.printing")


def to_qtransform(fit: PrintTransform) -> QTransform:
    """translate(-origin) → scale → translate(offset) 를 하나의 QTransform 으로"""
    return (
        QTransform()
        .translate(fit.offset_x, fit.offset_y)
        .scale(fit.scale, fit.scale)
        .translate(-fit.origin_x, -fit.origin_y)
    )


class PrintComposer:
    """인쇄 미리보기 → 인쇄 → 복원

    print_fn: 호스트 인쇄 (QPrintDialog 등). on_preview / on_restore 는 사이드바
    숨김/표시 같은 UI 처리. schedule 은 (지연 ms, 콜백) 을 받는다.
    """

    def __init__(
        self,
        state: EditorState,
        renderer: SceneRenderer,
        print_fn: Callable[[], None],
        on_preview: Optional[Callable[[], None]] = None,
        on_restore: Optional[Callable[[], None]] = None,
        delay_ms: int = PRINT_DELAY_MS,
        schedule: Optional[Callable[[int, Callable[[], None]], None]] = None,
    ):
        self.state = state
        self.renderer = renderer
        self.print_fn = print_fn
        self.on_preview = on_preview
        self.on_restore = on_restore
        self.delay_ms = delay_ms
        self.schedule = schedule or QTimer.singleShot
        self.busy = False
        self._saved_transform: Optional[QTransform] = None

    def start(self) -> bool:
        """인쇄 시작. 미리보기를 예약했으면 True, 바로 인쇄했으면 False."""
        if self.busy:
            return False

        nodes = self.state.model.nodes
        if not nodes:
            logger.info("[PRINT] empty scene, printing without transform")
            self.print_fn()
            return False

        # 어포던스가 인쇄되지 않도록 선택 해제 후 재구성
        self.state.select(None)
        self.renderer.rebuild()

        fit = print_fit_transform(content_bounds(nodes))
        if fit is None:
            logger.info("[PRINT] degenerate bounds, printing without transform")
            self.print_fn()
            return False

        self.busy = True
        self._saved_transform = self.renderer.layer_transform()
        self.renderer.set_layer_transform(to_qtransform(fit))
        logger.info(
            f"[PRINT] preview scale={fit.scale:.3f} "
            f"offset=({fit.offset_x:.1f}, {fit.offset_y:.1f})"
        )
        if self.on_preview:
            self.on_preview()
        self.schedule(self.delay_ms, self._finish)
        return True

    def _finish(self):
        try:
            self.print_fn()
        finally:
            if self._saved_transform is not None:
                self.renderer.set_layer_transform(self._saved_transform)
            self._saved_transform = None
            if self.on_restore:
                self.on_restore()
            self.renderer.rebuild()
            self.busy = False
