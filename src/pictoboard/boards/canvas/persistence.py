"""
장면 저장/로드
- snapshot_to_dict / snapshot_from_dict: 저장 포맷 (nodes, connections, canvasOffset)
- MemoryBackend / JsonFileBackend: key → JSON 문자열 저장소
- SceneStore: "picto_chain_" 네임스페이스 위의 save / list / load / delete
"""
from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from pictoboard.constants import DEFAULT_NODE_SIZE, SCENE_KEY_PREFIX
from pictoboard.logger import get_logger

from .model import CanvasOffset, Connection, Node, NODE_TYPES, SceneSnapshot

logger = get_logger("pictoboard.persistence")


class SceneLoadError(Exception):
    """저장된 장면이 없거나 손상됨. 현재 장면은 그대로 둔다."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"scene {name!r}: {reason}")
        self.name = name
        self.reason = reason


class StoreUnreadableError(OSError):
    """저장소 파일을 읽을 수 없어 쓰기를 거부함 (기존 장면 보호)"""


# ============================================================
# 직렬화
# ============================================================

def snapshot_to_dict(snapshot: SceneSnapshot) -> dict:
    return {
        "nodes": [
            {
                "id": n.id,
                "x": n.x,
                "y": n.y,
                "width": n.width,
                "height": n.height,
                "type": n.type,
                "content": n.content,
                "pinned": n.pinned,
            }
            for n in snapshot.nodes
        ],
        "connections": [
            {"id": c.id, "from": c.from_id, "to": c.to_id}
            for c in snapshot.connections
        ],
        "canvasOffset": {"x": snapshot.offset.x, "y": snapshot.offset.y},
    }


def _number(value: Any, field: str) -> float:
    # bool 은 int 의 하위 타입이라 따로 거른다
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field} must be a number, got {value!r}")
    return value


def _node_from_dict(raw: Any) -> Node:
    if not isinstance(raw, dict):
        raise ValueError("node entry must be an object")
    node_id = raw.get("id")
    if not isinstance(node_id, str) or not node_id:
        raise ValueError("node id missing")

    node_type = raw.get("type", "image")
    if node_type not in NODE_TYPES:
        raise ValueError(f"unknown node type {node_type!r}")

    # 구버전 저장본은 이미지 파일명을 "src" 에 둔다
    content = raw.get("content", raw.get("src", ""))
    if content is None:
        content = ""
    if not isinstance(content, str):
        raise ValueError("node content must be a string")

    pinned = raw.get("pinned", True)
    if not isinstance(pinned, bool):
        raise ValueError("node pinned must be a boolean")

    return Node(
        id=node_id,
        x=_number(raw.get("x"), "x"),
        y=_number(raw.get("y"), "y"),
        width=_number(raw.get("width", DEFAULT_NODE_SIZE), "width"),
        height=_number(raw.get("height", DEFAULT_NODE_SIZE), "height"),
        type=node_type,
        content=content,
        pinned=pinned,
    )


def snapshot_from_dict(data: Any) -> SceneSnapshot:
    """저장 포맷 → SceneSnapshot. 구조가 틀리면 ValueError.

    양 끝 노드가 없는 연결은 버린다 (손으로 고친 파일 대비).
    """
    if not isinstance(data, dict):
        raise ValueError("scene root must be an object")

    raw_nodes = data.get("nodes", [])
    raw_conns = data.get("connections", [])
    if not isinstance(raw_nodes, list) or not isinstance(raw_conns, list):
        raise ValueError("nodes and connections must be lists")

    nodes = [_node_from_dict(raw) for raw in raw_nodes]
    known = {n.id for n in nodes}

    connections: List[Connection] = []
    for raw in raw_conns:
        if not isinstance(raw, dict):
            raise ValueError("connection entry must be an object")
        conn_id, a, b = raw.get("id"), raw.get("from"), raw.get("to")
        if not all(isinstance(v, str) for v in (conn_id, a, b)):
            raise ValueError("connection id/from/to must be strings")
        if a not in known or b not in known:
            logger.warning(f"[STORE] dangling connection {conn_id} dropped")
            continue
        connections.append(Connection(conn_id, a, b))

    raw_offset = data.get("canvasOffset") or {}
    if not isinstance(raw_offset, dict):
        raise ValueError("canvasOffset must be an object")
    offset = CanvasOffset(
        _number(raw_offset.get("x", 0), "canvasOffset.x"),
        _number(raw_offset.get("y", 0), "canvasOffset.y"),
    )
    return SceneSnapshot(nodes=nodes, connections=connections, offset=offset)


# ============================================================
# Key-value 백엔드
# ============================================================

class MemoryBackend:
    """dict 기반 저장소 (테스트, 임시 세션)"""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data.keys()))


class JsonFileBackend:
    """JSON 파일 하나에 key → 문자열을 보관 (원자적 쓰기, mtime 캐시)"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._cache: Optional[Dict[str, str]] = None
        self._cache_mtime: Optional[float] = None
        self._lock = threading.Lock()

    def _read(self, for_write: bool = False) -> Dict[str, str]:
        """파일 → dict. 손상된 파일은 읽기에서는 빈 저장소, 쓰기 전에는 StoreUnreadableError."""
        if not self.path.exists():
            self._cache, self._cache_mtime = {}, None
            return {}
        mtime = self.path.stat().st_mtime
        if self._cache is not None and self._cache_mtime == mtime:
            return self._cache
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("store root is not an object")
        except (ValueError, OSError) as e:
            logger.warning(f"[STORE] unreadable store {self.path}: {e}")
            if for_write:
                raise StoreUnreadableError(f"unreadable scene store {self.path}: {e}") from e
            return {}
        self._cache, self._cache_mtime = data, mtime
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(str(tmp_path), str(self.path))
        self._cache = data
        self._cache_mtime = self.path.stat().st_mtime

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = dict(self._read(for_write=True))
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = dict(self._read(for_write=True))
            if data.pop(key, None) is not None:
                self._write(data)

    def keys(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._read().keys()))


# ============================================================
# 장면 저장소
# ============================================================

class SceneStore:
    """네임스페이스가 붙은 key 로 장면을 저장. 다른 key 는 무시한다."""

    def __init__(self, backend, prefix: str = SCENE_KEY_PREFIX):
        self.backend = backend
        self.prefix = prefix

    def _key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def save(self, name: str, snapshot: SceneSnapshot) -> None:
        name = name.strip()
        if not name:
            raise ValueError("scene name must not be empty")
        payload = json.dumps(snapshot_to_dict(snapshot), ensure_ascii=False)
        self.backend.set(self._key(name), payload)
        logger.info(
            f"[STORE] saved {name!r}: {len(snapshot.nodes)} node(s), "
            f"{len(snapshot.connections)} connection(s)"
        )

    def list_names(self) -> List[str]:
        names = [
            key[len(self.prefix):]
            for key in self.backend.keys()
            if key.startswith(self.prefix) and len(key) > len(self.prefix)
        ]
        return sorted(names)

    def load(self, name: str) -> SceneSnapshot:
        """장면 전체를 디코드해서 반환. 실패하면 SceneLoadError (부분 결과 없음)."""
        raw = self.backend.get(self._key(name))
        if raw is None:
            logger.warning(f"[STORE] scene {name!r} missing")
            raise SceneLoadError(name, "missing")
        try:
            snapshot = snapshot_from_dict(json.loads(raw))
        except json.JSONDecodeError as e:
            logger.warning(f"[STORE] scene {name!r} corrupt: {e}")
            raise SceneLoadError(name, f"invalid JSON: {e}") from e
        except ValueError as e:
            logger.warning(f"[STORE] scene {name!r} corrupt: {e}")
            raise SceneLoadError(name, str(e)) from e
        logger.info(f"[STORE] loaded {name!r}")
        return snapshot

    def delete(self, name: str) -> None:
        self.backend.remove(self._key(name))
        logger.info(f"[STORE] deleted {name!r}")
