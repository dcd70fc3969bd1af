"""
캔버스 뷰
- CanvasView: 도트 그리드 배경, 휠 줌, 포인터/키 입력 → InteractionController
포인터 좌표는 씬 좌표로 넘긴다. 줌은 뷰 변환이므로 제스처는 캔버스 단위로 동작한다.
"""
from PyQt6.QtWidgets import QGraphicsView
from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import (
    QPainter, QBrush, QColor, QPixmap, QTransform,
    QWheelEvent, QMouseEvent, QKeyEvent,
)

from pictoboard.constants import (
    GRID_SIZE, DOT_SIZE, ZOOM_FACTOR, ZOOM_MIN, ZOOM_MAX,
    PRINT_PAGE_WIDTH, PRINT_PAGE_HEIGHT,
)
from pictoboard.theme import Theme

from .gestures import HitKind, resolve_target
from .items import NodeTextItem

# 팬은 레이어 변환으로 처리하므로 씬 영역은 충분히 크게 고정
_SCENE_EXTENT = 100000


def _hit_target_of(item):
    """아이템 또는 가장 가까운 조상의 hit_target()"""
    while item is not None:
        getter = getattr(item, "hit_target", None)
        if getter is not None:
            return getter()
        item = item.parentItem()
    return None


class CanvasView(QGraphicsView):
    """픽토그램 캔버스 뷰"""

    def __init__(self, scene, board):
        super().__init__(scene)
        self.board = board
        self._zoom = 1.0
        self._view_initialized = False
        self._saved_view = None  # 인쇄 미리보기 전 (transform, zoom, center)

        scene.setSceneRect(QRectF(-_SCENE_EXTENT, -_SCENE_EXTENT, 2 * _SCENE_EXTENT, 2 * _SCENE_EXTENT))

        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.BoundingRectViewportUpdate)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMouseTracking(True)
        self.setAcceptDrops(True)

        # 도트 그리드 타일 캐시
        self._dot_tile = None
        self._dot_tile_theme = None

    # ── 뷰 위치 ──

    def reset_view(self):
        """줌 1, 캔버스 원점이 좌상단"""
        self.resetTransform()
        self._zoom = 1.0
        vp = self.viewport().rect()
        self.centerOn(vp.width() / 2, vp.height() / 2)

    def showEvent(self, event):
        super().showEvent(event)
        if not self._view_initialized:
            self._view_initialized = True
            self.reset_view()

    def view_center(self) -> QPointF:
        """보이는 영역 중심 (씬 좌표)"""
        return self.mapToScene(self.viewport().rect().center())

    def enter_print_preview(self):
        self._saved_view = (QTransform(self.transform()), self._zoom, self.view_center())
        self.fitInView(QRectF(0, 0, PRINT_PAGE_WIDTH, PRINT_PAGE_HEIGHT),
                       Qt.AspectRatioMode.KeepAspectRatio)

    def leave_print_preview(self):
        if self._saved_view is None:
            return
        transform, zoom, center = self._saved_view
        self._saved_view = None
        self.setTransform(transform)
        self._zoom = zoom
        self.centerOn(center)

    # ── 줌 ──

    def wheelEvent(self, event: QWheelEvent):
        if self.board.is_printing:
            event.accept()
            return
        factor = ZOOM_FACTOR if event.angleDelta().y() > 0 else 1 / ZOOM_FACTOR

        new_zoom = self._zoom * factor
        if ZOOM_MIN <= new_zoom <= ZOOM_MAX:
            self._zoom = new_zoom
            self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
            self.scale(factor, factor)
        event.accept()

    # ── 배경 ──

    def _get_dot_tile(self) -> QPixmap:
        """도트 그리드 타일 생성/캐싱 (테마 변경 시만 재생성)"""
        theme_key = (Theme.BG_PRIMARY, Theme.GRID_DOT)
        if self._dot_tile is not None and self._dot_tile_theme == theme_key:
            return self._dot_tile
        tile = QPixmap(GRID_SIZE, GRID_SIZE)
        tile.fill(QColor(Theme.BG_PRIMARY))
        p = QPainter(tile)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(QBrush(QColor(Theme.GRID_DOT)))
        p.drawEllipse(QPointF(0, 0), DOT_SIZE, DOT_SIZE)
        p.end()
        self._dot_tile = tile
        self._dot_tile_theme = theme_key
        return tile

    def drawBackground(self, painter: QPainter, rect: QRectF):
        """배경에 도트 그리드 그리기 (타일 기반). 인쇄 미리보기 중에는 단색."""
        if self.board.is_printing:
            painter.fillRect(rect, QColor(Theme.BG_SECONDARY))
            return
        painter.fillRect(rect, QColor(Theme.BG_PRIMARY))

        tile = self._get_dot_tile()

        # 타일 원점을 그리드에 맞춤
        left = int(rect.left()) - (int(rect.left()) % GRID_SIZE)
        top = int(rect.top()) - (int(rect.top()) % GRID_SIZE)
        tile_rect = QRectF(left, top, rect.right() - left, rect.bottom() - top)
        painter.drawTiledPixmap(tile_rect.toAlignedRect(), tile)

    # ── 포인터 ──

    def target_at(self, view_pos):
        """뷰 좌표 아래 모든 아이템 중 우선순위가 가장 높은 대상"""
        return resolve_target(_hit_target_of(item) for item in self.items(view_pos))

    def mousePressEvent(self, event: QMouseEvent):
        if self.board.is_printing:
            event.ignore()
            return
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        view_pos = event.position().toPoint()
        scene_pos = self.mapToScene(view_pos)
        target = self.target_at(view_pos)

        if target.kind == HitKind.TEXT:
            # 고정 텍스트: 선택만 하고 편집기가 포인터를 받는다
            self.board.pointer_press(target, scene_pos.x(), scene_pos.y())
            super().mousePressEvent(event)
            return

        self.scene().setFocusItem(None)
        self.setFocus()
        self.board.pointer_press(target, scene_pos.x(), scene_pos.y())
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        scene_pos = self.mapToScene(event.position().toPoint())
        if self.board.pointer_move(scene_pos.x(), scene_pos.y()):
            event.accept()
        elif not self.board.is_printing:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        scene_pos = self.mapToScene(event.position().toPoint())
        if event.button() == Qt.MouseButton.LeftButton and self.board.pointer_release(scene_pos.x(), scene_pos.y()):
            event.accept()
        elif not self.board.is_printing:
            super().mouseReleaseEvent(event)

    # ── 키보드 ──

    def is_editing_text(self) -> bool:
        focus = self.scene().focusItem()
        return isinstance(focus, NodeTextItem) and focus.is_editing()

    def keyPressEvent(self, event: QKeyEvent):
        if self.board.is_printing:
            event.ignore()
            return
        if event.key() in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            if self.board.delete_key(self.is_editing_text()):
                event.accept()
                return
        super().keyPressEvent(event)

    # ── 드래그 앤 드롭 (사이드바 → 캔버스) ──

    def dragEnterEvent(self, event):
        if self.board.is_printing:
            event.ignore()
        elif event.mimeData().hasText() and event.mimeData().text().strip():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if event.mimeData().hasText():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event):
        if not event.mimeData().hasText():
            event.ignore()
            return
        scene_pos = self.mapToScene(event.position().toPoint())
        if self.board.drop_payload(event.mimeData().text(), scene_pos.x(), scene_pos.y()):
            event.acceptProposedAction()
        else:
            event.ignore()
