from __future__ import annotations

import copy
from typing import Optional

from pictoboard.logger import get_logger

from .model import CanvasOffset, Connection, Node, NODE_IMAGE, SceneModel, SceneSnapshot

logger = get_logger("pictoboard.state")


class EditorState:
    """Everything an interaction handler reads or mutates.

    Holds the scene model, the single selected node id and the pan offset.
    Handlers receive this object explicitly; there is no module-level state.
    """

    def __init__(self, model: Optional[SceneModel] = None):
        self.model = model if model is not None else SceneModel()
        self.selected_id: Optional[str] = None
        self.offset = CanvasOffset()

    # ── selection ────────────────────────────────────────

    def select(self, node_id: Optional[str]) -> None:
        if node_id is not None and self.model.get_node(node_id) is None:
            return
        self.selected_id = node_id

    def is_selected(self, node_id: str) -> bool:
        return self.selected_id == node_id

    @property
    def selected_node(self) -> Optional[Node]:
        return self.model.get_node(self.selected_id)

    # ── scene edits ──────────────────────────────────────

    def add_node(self, content: str, x: float, y: float, type: str = NODE_IMAGE) -> Node:
        """Add a node through the model and make it the selection."""
        node = self.model.add_node(content, x, y, type)
        self.selected_id = node.id
        return node

    def delete_node(self, node_id: str) -> None:
        self.model.delete_node(node_id)
        if self.selected_id == node_id:
            self.selected_id = None

    def delete_connection(self, conn_id: str) -> bool:
        return self.model.delete_connection(conn_id)

    def toggle_pinned(self, node_id: str) -> bool:
        node = self.model.get_node(node_id)
        if node is None or not node.is_text:
            return False
        node.pinned = not node.pinned
        return True

    def set_text(self, node_id: str, text: str) -> None:
        node = self.model.get_node(node_id)
        if node is not None and node.is_text:
            node.content = text

    def clear(self) -> None:
        """Empty the scene; the pan offset is kept."""
        self.model.clear()
        self.selected_id = None

    # ── snapshot ─────────────────────────────────────────

    def snapshot(self) -> SceneSnapshot:
        return SceneSnapshot(
            nodes=[copy.copy(n) for n in self.model.nodes],
            connections=[copy.copy(c) for c in self.model.connections],
            offset=CanvasOffset(self.offset.x, self.offset.y),
        )

    def restore(self, snapshot: SceneSnapshot) -> None:
        """Replace the whole scene with a fully decoded snapshot."""
        self.model.replace(
            [copy.copy(n) for n in snapshot.nodes],
            [Connection(c.id, c.from_id, c.to_id) for c in snapshot.connections],
        )
        self.offset = CanvasOffset(snapshot.offset.x, snapshot.offset.y)
        self.selected_id = None
        logger.debug(
            f"[STATE] restored {len(self.model.nodes)} node(s), "
            f"{len(self.model.connections)} connection(s)"
        )
