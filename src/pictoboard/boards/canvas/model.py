from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from pictoboard.constants import DEFAULT_NODE_SIZE
from pictoboard.logger import get_logger

from .geometry import snap_to_grid

logger = get_logger("pictoboard.model")

NODE_IMAGE = "image"
NODE_TEXT = "text"
NODE_TYPES = (NODE_IMAGE, NODE_TEXT)


@dataclass
class Node:
    """A placed pictogram, uploaded image or text box.

    ``x``/``y`` are the top-left corner in canvas-local (pre-pan) coordinates.
    ``pinned`` only means something for text nodes: pinned text is edited by
    the pointer, unpinned text is dragged by it.
    """

    id: str
    x: float
    y: float
    width: float = DEFAULT_NODE_SIZE
    height: float = DEFAULT_NODE_SIZE
    type: str = NODE_IMAGE
    content: str = ""
    pinned: bool = True

    @property
    def is_text(self) -> bool:
        return self.type == NODE_TEXT


@dataclass
class Connection:
    id: str
    from_id: str
    to_id: str

    @property
    def pair(self) -> FrozenSet[str]:
        return frozenset((self.from_id, self.to_id))

    def touches(self, node_id: str) -> bool:
        return self.from_id == node_id or self.to_id == node_id


@dataclass
class CanvasOffset:
    x: float = 0.0
    y: float = 0.0


@dataclass
class SceneSnapshot:
    """Everything a saved scene holds: nodes, connections and the pan offset."""

    nodes: List[Node] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    offset: CanvasOffset = field(default_factory=CanvasOffset)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class SceneModel:
    """Node list + connection list with referential integrity.

    Node order is paint order. Connections are undirected for existence checks
    (at most one per unordered pair) but keep the from/to order they were
    created with. Lookups used on the drag path (``get_node``,
    ``connections_for``) are index based so they never scan the whole scene.
    """

    def __init__(self):
        self.nodes: List[Node] = []
        self.connections: List[Connection] = []
        self._node_index: Dict[str, Node] = {}
        self._pairs: Dict[FrozenSet[str], Connection] = {}
        self._edges: Dict[str, Dict[str, Connection]] = {}

    # ── nodes ────────────────────────────────────────────

    def get_node(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        return self._node_index.get(node_id)

    def add_node(self, content: str, x: float, y: float, type: str = NODE_IMAGE) -> Node:
        """Create a node at the grid-snapped position and append it."""
        if type not in NODE_TYPES:
            raise ValueError(f"unknown node type: {type!r}")
        node_id = new_id("node")
        while node_id in self._node_index:
            node_id = new_id("node")
        node = Node(
            id=node_id,
            x=snap_to_grid(x),
            y=snap_to_grid(y),
            type=type,
            content=content,
            pinned=True,
        )
        self._append_node(node)
        logger.debug(f"[MODEL] add node {node.id} type={type} at ({node.x}, {node.y})")
        return node

    def _append_node(self, node: Node) -> None:
        self.nodes.append(node)
        self._node_index[node.id] = node
        self._edges.setdefault(node.id, {})

    def delete_node(self, node_id: str) -> List[Connection]:
        """Remove a node and every connection that references it.

        Returns the cascaded connections. Unknown ids are a no-op.
        """
        node = self._node_index.pop(node_id, None)
        if node is None:
            return []
        self.nodes.remove(node)

        removed = list(self._edges.pop(node_id, {}).values())
        for conn in removed:
            self._forget_connection(conn)
        if removed:
            gone = {c.id for c in removed}
            self.connections = [c for c in self.connections if c.id not in gone]
        logger.debug(f"[MODEL] delete node {node_id}, cascaded {len(removed)} connection(s)")
        return removed

    # ── connections ──────────────────────────────────────

    def find_connection(self, a: str, b: str) -> Optional[Connection]:
        return self._pairs.get(frozenset((a, b)))

    def has_connection(self, a: str, b: str) -> bool:
        return frozenset((a, b)) in self._pairs

    def get_connection(self, conn_id: str) -> Optional[Connection]:
        for conn in self.connections:
            if conn.id == conn_id:
                return conn
        return None

    def connect(self, a: str, b: str) -> Optional[Connection]:
        """Create a connection a→b unless one already exists between the pair.

        Returns the new connection, or None when nothing was created (duplicate
        pair, self-link or unknown endpoint).
        """
        if a == b or a not in self._node_index or b not in self._node_index:
            return None
        if self.has_connection(a, b):
            return None
        conn = Connection(id=new_id("conn"), from_id=a, to_id=b)
        self._append_connection(conn)
        logger.debug(f"[MODEL] connect {a} -> {b} ({conn.id})")
        return conn

    def _append_connection(self, conn: Connection) -> None:
        self.connections.append(conn)
        self._pairs[conn.pair] = conn
        self._edges.setdefault(conn.from_id, {})[conn.id] = conn
        self._edges.setdefault(conn.to_id, {})[conn.id] = conn

    def _forget_connection(self, conn: Connection) -> None:
        self._pairs.pop(conn.pair, None)
        for end in (conn.from_id, conn.to_id):
            edges = self._edges.get(end)
            if edges is not None:
                edges.pop(conn.id, None)

    def delete_connection(self, conn_id: str) -> bool:
        conn = self.get_connection(conn_id)
        if conn is None:
            return False
        self.connections.remove(conn)
        self._forget_connection(conn)
        logger.debug(f"[MODEL] delete connection {conn_id}")
        return True

    def connections_for(self, node_id: str) -> List[Connection]:
        """Connections touching ``node_id`` (O(degree))."""
        return list(self._edges.get(node_id, {}).values())

    def endpoints(self, conn: Connection) -> Optional[Tuple[Node, Node]]:
        a = self._node_index.get(conn.from_id)
        b = self._node_index.get(conn.to_id)
        if a is None or b is None:
            return None
        return a, b

    # ── whole scene ──────────────────────────────────────

    def clear(self) -> None:
        self.nodes.clear()
        self.connections.clear()
        self._node_index.clear()
        self._pairs.clear()
        self._edges.clear()

    def replace(self, nodes: List[Node], connections: List[Connection]) -> None:
        """Swap in a complete node/connection set (used by load).

        Connections with a missing endpoint, a self-link, or a pair that is
        already connected are dropped.
        """
        self.clear()
        for node in nodes:
            if node.id in self._node_index:
                logger.warning(f"[MODEL] duplicate node id {node.id} dropped")
                continue
            self._append_node(node)
        for conn in connections:
            if (conn.from_id == conn.to_id
                    or conn.from_id not in self._node_index
                    or conn.to_id not in self._node_index):
                logger.warning(f"[MODEL] dangling connection {conn.id} dropped")
                continue
            if conn.pair in self._pairs:
                logger.warning(f"[MODEL] duplicate connection {conn.id} dropped")
                continue
            self._append_connection(conn)
