import os
import sys
from pathlib import Path

import pytest

# Ensure src is importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(autouse=True)
def _isolated_app_data(tmp_path, monkeypatch):
    """설정/로그/저장소가 사용자 폴더를 건드리지 않도록"""
    monkeypatch.setenv("PICTOBOARD_DATA_DIR", str(tmp_path / "appdata"))
    from pictoboard import settings
    monkeypatch.setattr(settings, "_settings_cache", None)
    monkeypatch.setattr(settings, "_cache_mtime", None)


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def state():
    from pictoboard.boards.canvas.state import EditorState
    return EditorState()
