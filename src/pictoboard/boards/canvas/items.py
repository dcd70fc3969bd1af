"""
캔버스 그래픽 아이템
- LayerItem: 노드/연결선 레이어 (팬 변환은 레이어에 한 번만 적용)
- NodeItem: 이미지/텍스트 노드 카드
- NodeTextItem: 고정(pinned) 텍스트 편집기
- ResizeHandleItem, DeleteGlyphItem, PinGlyphItem, ConnectionDeleteItem: 어포던스
- ConnectionItem: 연결선 베지어 곡선
아이템은 마우스 이벤트를 직접 처리하지 않는다. hit_target() 으로 자신이 어떤
대상인지 알려주고, 뷰가 InteractionController 로 넘긴다.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional

from PyQt6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsPathItem,
    QGraphicsRectItem, QGraphicsTextItem,
)
from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPainterPath, QPen, QPixmap

from pictoboard.catalog import decode_data_uri, is_data_uri
from pictoboard.constants import GLYPH_SIZE, HANDLE_SIZE
from pictoboard.i18n import t
from pictoboard.logger import get_logger
from pictoboard.theme import Theme

from .geometry import Curve, Point
from .gestures import HitKind, HitTarget
from .model import Node

_logger = get_logger("pictoboard.items")

_TEXT_PADDING = 6
_IMAGE_PADDING = 5


# ============================================================
# 이미지 로딩
# ============================================================

_pixmap_cache: Dict[str, QPixmap] = {}


def load_pixmap(content: str, catalog_dir: Optional[Path]) -> QPixmap:
    """노드 content → QPixmap (캐시). 실패하면 null 픽스맵."""
    if not content:
        return QPixmap()
    key = content if is_data_uri(content) else f"{catalog_dir}/{content}"
    cached = _pixmap_cache.get(key)
    if cached is not None:
        return cached

    pixmap = QPixmap()
    if is_data_uri(content):
        data = decode_data_uri(content)
        if data is not None:
            pixmap.loadFromData(data)
    elif catalog_dir is not None:
        path = Path(catalog_dir) / content
        if path.exists():
            pixmap = QPixmap(str(path))
    if pixmap.isNull():
        _logger.debug(f"[ITEMS] image not available: {content[:60]}")
    _pixmap_cache[key] = pixmap
    return pixmap


# ============================================================
# 레이어
# ============================================================

class LayerItem(QGraphicsItem):
    """자식만 그리는 빈 컨테이너"""

    def __init__(self, z: float):
        super().__init__()
        self.setZValue(z)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemHasNoContents, True)

    def boundingRect(self) -> QRectF:
        return QRectF()

    def paint(self, painter, option, widget=None):
        pass


# ============================================================
# 어포던스
# ============================================================

class GlyphItem(QGraphicsEllipseItem):
    """원형 버튼 글리프. 중심이 pos() 에 오도록 배치."""

    kind = HitKind.NODE_DELETE

    def __init__(self, ref_id: str, symbol: str, color: str, tooltip: str = "", parent=None):
        r = GLYPH_SIZE / 2
        super().__init__(-r, -r, GLYPH_SIZE, GLYPH_SIZE, parent)
        self.ref_id = ref_id
        self.symbol = symbol
        self.setBrush(QBrush(QColor(color)))
        self.setPen(QPen(QColor(Theme.BG_SECONDARY), 1.5))
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        if tooltip:
            self.setToolTip(tooltip)

    def hit_target(self) -> HitTarget:
        return HitTarget(self.kind, self.ref_id)

    def paint(self, painter: QPainter, option, widget=None):
        super().paint(painter, option, widget)
        painter.setPen(QPen(QColor(Theme.BG_SECONDARY)))
        font = painter.font()
        font.setPointSize(10)
        font.setBold(True)
        painter.setFont(font)
        painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, self.symbol)


class DeleteGlyphItem(GlyphItem):
    kind = HitKind.NODE_DELETE

    def __init__(self, node_id: str, parent=None):
        super().__init__(node_id, "×", Theme.ACCENT_DANGER, t("node.delete"), parent)


class PinGlyphItem(GlyphItem):
    kind = HitKind.PIN

    def __init__(self, node_id: str, pinned: bool, parent=None):
        color = Theme.ACCENT_PRIMARY if pinned else Theme.ACCENT_WARNING
        symbol = "📌" if pinned else "✥"
        tooltip = t("node.pin") if pinned else t("node.unpin")
        super().__init__(node_id, symbol, color, tooltip, parent)


class ConnectionDeleteItem(GlyphItem):
    """연결선 중점의 삭제 버튼. 노드 레이어에 올려 팬과 함께 움직인다."""

    kind = HitKind.CONNECTION_DELETE

    def __init__(self, conn_id: str, parent=None):
        super().__init__(conn_id, "×", Theme.CONNECTION, t("node.connection_delete"), parent)
        self.setZValue(1000)

    def set_center(self, point: Point):
        self.setPos(point.x, point.y)


class ResizeHandleItem(QGraphicsRectItem):
    """우하단 리사이즈 핸들"""

    def __init__(self, node_id: str, parent=None):
        super().__init__(0, 0, HANDLE_SIZE, HANDLE_SIZE, parent)
        self.node_id = node_id
        self.setPen(QPen(QColor(Theme.ACCENT_PRIMARY), 1))
        self.setBrush(QBrush(QColor(Theme.BG_SECONDARY)))
        self.setCursor(Qt.CursorShape.SizeFDiagCursor)
        self.setToolTip(t("node.resize"))
        self.setZValue(2)

    def hit_target(self) -> HitTarget:
        return HitTarget(HitKind.RESIZE_HANDLE, self.node_id)


# ============================================================
# 노드
# ============================================================

class NodeTextItem(QGraphicsTextItem):
    """텍스트 노드 본문. 고정 상태에서만 편집 가능."""

    def __init__(self, node: Node, on_changed: Optional[Callable[[str, str], None]] = None, parent=None):
        super().__init__(parent)
        self.node_id = node.id
        self.pinned = node.pinned
        self._on_changed = on_changed

        self.setFont(QFont("Arial", 14))
        self.setDefaultTextColor(QColor(Theme.TEXT_PRIMARY))
        self.setPlainText(node.content)
        self.setPos(_TEXT_PADDING, _TEXT_PADDING)
        self.setZValue(1)
        if self.pinned:
            self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsFocusable, True)
            self.setTextInteractionFlags(Qt.TextInteractionFlag.TextEditorInteraction)
            self.setCursor(Qt.CursorShape.IBeamCursor)
        else:
            self.setTextInteractionFlags(Qt.TextInteractionFlag.NoTextInteraction)
            self.setCursor(Qt.CursorShape.SizeAllCursor)

        self.document().contentsChanged.connect(self._emit_changed)

    def _emit_changed(self):
        if self._on_changed:
            self._on_changed(self.node_id, self.toPlainText())

    def is_editing(self) -> bool:
        return self.pinned and self.hasFocus()

    def hit_target(self) -> HitTarget:
        kind = HitKind.TEXT if self.pinned else HitKind.NODE_BODY
        return HitTarget(kind, self.node_id)

    def fit_to(self, width: float, height: float):
        self.setTextWidth(max(0.0, width - 2 * _TEXT_PADDING))

    def paint(self, painter, option, widget=None):
        super().paint(painter, option, widget)
        if not self.toPlainText() and not self.hasFocus():
            painter.setPen(QPen(QColor(Theme.TEXT_SECONDARY)))
            painter.drawText(QRectF(4, 2, max(0.0, self.textWidth()), 24),
                             Qt.AlignmentFlag.AlignLeft, t("node.text_placeholder"))


class NodeItem(QGraphicsRectItem):
    """노드 카드. 자식: 리사이즈 핸들, 삭제/핀 글리프, 텍스트 편집기."""

    def __init__(self, node: Node, selected: bool, catalog_dir: Optional[Path] = None,
                 on_text_changed: Optional[Callable[[str, str], None]] = None, parent=None):
        super().__init__(parent)
        self.node_id = node.id
        self.node_type = node.type
        self.selected = selected
        self.pinned = node.pinned
        self.setPen(QPen(Qt.PenStyle.NoPen))

        self._pixmap = QPixmap() if node.is_text else load_pixmap(node.content, catalog_dir)
        self._scaled_pixmap = None
        self._scaled_key = None

        self.text_item: Optional[NodeTextItem] = None
        self.pin_glyph: Optional[PinGlyphItem] = None
        self.delete_glyph: Optional[DeleteGlyphItem] = None

        if node.is_text:
            self.text_item = NodeTextItem(node, on_text_changed, self)
            self.pin_glyph = PinGlyphItem(node.id, node.pinned, self)
            self.pin_glyph.setZValue(3)
        self.resize_handle = ResizeHandleItem(node.id, self)
        # 삭제 버튼은 선택된 노드에만
        if selected:
            self.delete_glyph = DeleteGlyphItem(node.id, self)
            self.delete_glyph.setZValue(4)

        self.apply_geometry(node)

    def hit_target(self) -> HitTarget:
        return HitTarget(HitKind.NODE_BODY, self.node_id)

    def apply_geometry(self, node: Node):
        """모델 위치/크기를 아이템과 자식 어포던스에 반영"""
        self.setPos(node.x, node.y)
        w, h = node.width, node.height
        if self.rect().width() != w or self.rect().height() != h:
            self.setRect(0, 0, w, h)
        self.resize_handle.setPos(w - HANDLE_SIZE, h - HANDLE_SIZE)
        if self.delete_glyph is not None:
            self.delete_glyph.setPos(w, 0)
        if self.pin_glyph is not None:
            self.pin_glyph.setPos(0, 0)
        if self.text_item is not None:
            self.text_item.fit_to(w, h)

    def set_selected(self, selected: bool):
        """선택 표시만 갱신 (삭제 글리프 추가/제거 + 테두리)"""
        if selected == self.selected:
            return
        self.selected = selected
        if selected and self.delete_glyph is None:
            self.delete_glyph = DeleteGlyphItem(self.node_id, self)
            self.delete_glyph.setZValue(4)
            self.delete_glyph.setPos(self.rect().width(), 0)
        elif not selected and self.delete_glyph is not None:
            scene = self.delete_glyph.scene()
            if scene is not None:
                scene.removeItem(self.delete_glyph)
            self.delete_glyph.setParentItem(None)
            self.delete_glyph = None
        self.update()

    def paint(self, painter: QPainter, option, widget=None):
        rect = self.rect()
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        if self.node_type == "text":
            painter.setBrush(QBrush(QColor(Theme.BG_TEXT_NODE)))
            style = Qt.PenStyle.SolidLine if self.pinned else Qt.PenStyle.DashLine
            color = Theme.NODE_BORDER if self.pinned else Theme.ACCENT_WARNING
            painter.setPen(QPen(QColor(color), 1.5, style))
            painter.drawRoundedRect(rect, 8, 8)
        else:
            painter.setBrush(QBrush(QColor(Theme.BG_NODE)))
            painter.setPen(QPen(QColor(Theme.NODE_BORDER), 1))
            painter.drawRoundedRect(rect, 8, 8)
            inner = rect.adjusted(_IMAGE_PADDING, _IMAGE_PADDING, -_IMAGE_PADDING, -_IMAGE_PADDING)
            if not self._pixmap.isNull() and inner.width() > 0 and inner.height() > 0:
                key = (int(inner.width()), int(inner.height()), self._pixmap.cacheKey())
                if self._scaled_pixmap is None or self._scaled_key != key:
                    self._scaled_pixmap = self._pixmap.scaled(
                        int(inner.width()), int(inner.height()),
                        Qt.AspectRatioMode.KeepAspectRatio,
                        Qt.TransformationMode.SmoothTransformation
                    )
                    self._scaled_key = key
                sp = self._scaled_pixmap
                painter.drawPixmap(
                    QPointF(inner.x() + (inner.width() - sp.width()) / 2,
                            inner.y() + (inner.height() - sp.height()) / 2),
                    sp,
                )
            else:
                # 이미지 없음 플레이스홀더
                painter.setBrush(QBrush(QColor(Theme.BG_PLACEHOLDER)))
                painter.setPen(QPen(QColor(Theme.TEXT_SECONDARY), 1, Qt.PenStyle.DashLine))
                painter.drawRoundedRect(inner, 6, 6)

        if self.selected:
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.setPen(QPen(QColor(Theme.ACCENT_PRIMARY), 2.5))
            painter.drawRoundedRect(rect, 8, 8)


# ============================================================
# 연결선
# ============================================================

class ConnectionItem(QGraphicsPathItem):
    """두 노드 중심을 잇는 3차 베지어"""

    def __init__(self, conn_id: str, curve: Curve, parent=None):
        super().__init__(parent)
        self.conn_id = conn_id
        self.setPen(QPen(QColor(Theme.CONNECTION), 2))
        self.setBrush(QBrush(Qt.BrushStyle.NoBrush))
        self.set_curve(curve)

    def set_curve(self, curve: Curve):
        p1, c1, c2, p2 = curve.points()
        path = QPainterPath()
        path.moveTo(p1.x, p1.y)
        path.cubicTo(c1.x, c1.y, c2.x, c2.y, p2.x, p2.y)
        self.setPath(path)
