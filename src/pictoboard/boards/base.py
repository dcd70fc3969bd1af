"""
보드 기본 인터페이스
MainWindow 는 이 메서드들만 사용한다 (뷰 생성, 저장 포맷 수집/복원, 변경 알림).
"""
from abc import ABC, abstractmethod
from typing import Any, Dict

from PyQt6.QtWidgets import QWidget


class BoardPlugin(ABC):
    """보드 기본 클래스. app 은 EditorState 와 저장소를 가진 pictoboard.app.App."""

    def __init__(self, app):
        self.app = app
        self.on_modified = None  # 구조 변경 시 콜백 (MainWindow 가 연결)

    @abstractmethod
    def create_view(self) -> QWidget:
        """메인 뷰 위젯 (QGraphicsView)"""

    @abstractmethod
    def collect_data(self) -> Dict[str, Any]:
        """현재 장면 → 저장 포맷 dict"""

    @abstractmethod
    def restore_data(self, data: Dict[str, Any]) -> None:
        """저장 포맷 dict → 장면. 구조가 틀리면 ValueError 이고 현재 장면은 그대로."""

    def notify_modified(self):
        if self.on_modified:
            self.on_modified()
