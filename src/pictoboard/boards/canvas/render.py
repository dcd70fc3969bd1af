"""
씬 렌더러
EditorState → QGraphicsScene 아이템 동기화.
- rebuild(): 노드/연결선 아이템 전체 재생성
- patch_node(): 드래그/리사이즈 중 노드 1개 + 닿는 연결선만 갱신
- patch_selection(): 선택 표시만 갱신
- apply_offset(): 두 레이어에 팬 변환 한 번 적용
모든 경로가 geometry 모듈의 같은 함수로 좌표를 계산한다.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

from PyQt6.QtGui import QTransform
from PyQt6.QtWidgets import QGraphicsScene

from pictoboard.logger import get_logger

from .geometry import connection_curve, curve_midpoint
from .gestures import RenderScope
from .items import ConnectionDeleteItem, ConnectionItem, LayerItem, NodeItem
from .model import Connection
from .state import EditorState

logger = get_logger("pictoboard.render")


class SceneRenderer:

    def __init__(self, scene: QGraphicsScene, state: EditorState, catalog_dir: Optional[Path] = None):
        self.scene = scene
        self.state = state
        self.catalog_dir = catalog_dir

        self.connection_layer = LayerItem(0)
        self.node_layer = LayerItem(1)
        scene.addItem(self.connection_layer)
        scene.addItem(self.node_layer)

        self.node_items: Dict[str, NodeItem] = {}
        self.connection_items: Dict[str, ConnectionItem] = {}
        self.connection_glyphs: Dict[str, ConnectionDeleteItem] = {}
        self.rebuild_count = 0

    # ── 진입점 ────────────────────────────────────────────

    def render(self, scope: RenderScope):
        if scope.mode == "none":
            return
        if scope.mode == "full":
            self.rebuild()
        elif scope.mode == "node":
            for node_id in scope.node_ids:
                self.patch_node(node_id)
        elif scope.mode == "selection":
            self.patch_selection()
        elif scope.mode == "offset":
            self.apply_offset()
        else:
            raise ValueError(f"unknown render scope: {scope.mode!r}")

    # ── 전체 재구성 ──────────────────────────────────────

    def _clear_items(self):
        for item in list(self.connection_layer.childItems()) + list(self.node_layer.childItems()):
            self.scene.removeItem(item)
        self.node_items.clear()
        self.connection_items.clear()
        self.connection_glyphs.clear()

    def rebuild(self):
        self._clear_items()
        model = self.state.model

        for conn in model.connections:
            self._add_connection(conn)

        for node in model.nodes:
            item = NodeItem(
                node,
                selected=self.state.is_selected(node.id),
                catalog_dir=self.catalog_dir,
                on_text_changed=self.state.set_text,
                parent=self.node_layer,
            )
            self.node_items[node.id] = item

        self.apply_offset()
        self.rebuild_count += 1

    def _add_connection(self, conn: Connection):
        ends = self.state.model.endpoints(conn)
        if ends is None:
            logger.warning(f"[RENDER] skipping dangling connection {conn.id}")
            return
        curve = connection_curve(*ends)
        self.connection_items[conn.id] = ConnectionItem(conn.id, curve, self.connection_layer)
        glyph = ConnectionDeleteItem(conn.id, self.node_layer)
        glyph.set_center(curve_midpoint(curve))
        self.connection_glyphs[conn.id] = glyph

    # ── 부분 갱신 ────────────────────────────────────────

    def patch_node(self, node_id: str):
        """노드 1개와 그 노드에 닿는 연결선만 갱신 (O(degree))"""
        model = self.state.model
        node = model.get_node(node_id)
        item = self.node_items.get(node_id)
        if node is None or item is None:
            return
        item.apply_geometry(node)

        for conn in model.connections_for(node_id):
            ends = model.endpoints(conn)
            path_item = self.connection_items.get(conn.id)
            glyph = self.connection_glyphs.get(conn.id)
            if ends is None or path_item is None or glyph is None:
                continue
            curve = connection_curve(*ends)
            path_item.set_curve(curve)
            glyph.set_center(curve_midpoint(curve))

    def patch_selection(self):
        for node_id, item in self.node_items.items():
            item.set_selected(self.state.is_selected(node_id))

    # ── 팬 변환 ──────────────────────────────────────────

    def apply_offset(self):
        offset = self.state.offset
        self.set_layer_transform(QTransform.fromTranslate(offset.x, offset.y))

    def layer_transform(self) -> QTransform:
        return self.node_layer.transform()

    def set_layer_transform(self, transform: QTransform):
        self.connection_layer.setTransform(transform)
        self.node_layer.setTransform(transform)

    # ── 비교용 스냅샷 ────────────────────────────────────

    def snapshot(self) -> dict:
        """현재 아이템 상태를 비교 가능한 값으로 추출"""
        def _point(p) -> Tuple[float, float]:
            return round(p.x(), 6), round(p.y(), 6)

        nodes = {}
        for node_id, item in self.node_items.items():
            r = item.rect()
            nodes[node_id] = {
                "pos": _point(item.pos()),
                "size": (r.width(), r.height()),
                "selected": item.selected,
                "handle": _point(item.resize_handle.pos()),
                "delete": _point(item.delete_glyph.pos()) if item.delete_glyph else None,
            }

        connections = {}
        for conn_id, item in self.connection_items.items():
            path = item.path()
            elements = tuple(
                (round(path.elementAt(i).x, 6), round(path.elementAt(i).y, 6))
                for i in range(path.elementCount())
            )
            glyph = self.connection_glyphs[conn_id]
            connections[conn_id] = {"path": elements, "glyph": _point(glyph.pos())}

        t = self.layer_transform()
        return {
            "nodes": nodes,
            "connections": connections,
            "offset": (t.dx(), t.dy()),
        }
