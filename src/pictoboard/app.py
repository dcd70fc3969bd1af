from pathlib import Path
from typing import List, Optional

from pictoboard.boards.canvas.persistence import JsonFileBackend, SceneStore
from pictoboard.boards.canvas.state import EditorState
from pictoboard.settings import get_catalog_dir, get_scene_store_path


class App():
    def __init__(self, store: Optional[SceneStore] = None, catalog_dir: Optional[Path] = None):
        self.title = "PictoBoard"

        # 편집 상태 (장면 + 선택 + 팬 오프셋)
        self.state = EditorState()
        self.store = store if store is not None else SceneStore(JsonFileBackend(get_scene_store_path()))
        self.catalog_dir = Path(catalog_dir) if catalog_dir is not None else get_catalog_dir()

    def list_scenes(self) -> List[str]:
        return self.store.list_names()

    def save_scene(self, name: str) -> str:
        """현재 장면을 이름으로 저장 (OSError 는 호출자에게)"""
        name = name.strip()
        self.store.save(name, self.state.snapshot())
        return name

    def delete_scene(self, name: str):
        self.store.delete(name)
