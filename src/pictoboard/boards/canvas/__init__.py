"""
Picto Canvas - 픽토그램 노드/연결 캔버스 엔진
모델, 제스처 머신, 렌더러, 저장소, 인쇄 구성
"""

from .model import Node, Connection, SceneModel
from .state import EditorState
from .persistence import SceneStore, SceneLoadError
from .plugin import CanvasBoard

__all__ = [
    "Node", "Connection", "SceneModel", "EditorState",
    "SceneStore", "SceneLoadError", "CanvasBoard",
]
