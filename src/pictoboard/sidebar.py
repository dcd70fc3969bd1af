"""
사이드바
- 픽토그램 검색 + 목록 (클릭: 캔버스 중앙에 추가, 드래그: 드롭 위치에 추가)
- 텍스트 도구 / 이미지 업로드 버튼
- 저장된 장면 선택 + 삭제
"""
from pathlib import Path
from typing import List, Sequence

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QListWidget, QListWidgetItem,
    QPushButton, QComboBox, QApplication, QListView,
)
from PyQt6.QtCore import Qt, QMimeData, QSize, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QDrag, QIcon, QPixmap

from pictoboard.catalog import filter_catalog, visible_slice
from pictoboard.constants import CATALOG_THUMB_SIZE, TEXT_DROP_PAYLOAD
from pictoboard.i18n import t
from pictoboard.theme import Theme

_FILENAME_ROLE = Qt.ItemDataRole.UserRole


class CatalogList(QListWidget):
    """픽토그램 썸네일 목록. 드래그 페이로드는 파일명 텍스트."""

    def __init__(self, catalog_dir: Path, parent=None):
        super().__init__(parent)
        self.catalog_dir = Path(catalog_dir)
        self._thumb_cache = {}
        self.setViewMode(QListView.ViewMode.IconMode)
        self.setIconSize(QSize(CATALOG_THUMB_SIZE, CATALOG_THUMB_SIZE))
        self.setResizeMode(QListView.ResizeMode.Adjust)
        self.setMovement(QListView.Movement.Static)
        self.setDragEnabled(True)
        self.setDragDropMode(QListView.DragDropMode.DragOnly)
        self.setSpacing(4)

    def _thumbnail(self, filename: str) -> QIcon:
        icon = self._thumb_cache.get(filename)
        if icon is None:
            pixmap = QPixmap(str(self.catalog_dir / filename))
            if not pixmap.isNull():
                pixmap = pixmap.scaled(
                    CATALOG_THUMB_SIZE, CATALOG_THUMB_SIZE,
                    Qt.AspectRatioMode.KeepAspectRatio,
                    Qt.TransformationMode.SmoothTransformation,
                )
            icon = QIcon(pixmap)
            self._thumb_cache[filename] = icon
        return icon

    def show_names(self, names: Sequence[str]):
        """최대 표시 개수까지만 그리고, 나머지는 안내 행으로"""
        self.clear()
        shown, hidden = visible_slice(names)
        for filename in shown:
            item = QListWidgetItem(self._thumbnail(filename), "")
            item.setData(_FILENAME_ROLE, filename)
            item.setToolTip(filename)
            self.addItem(item)

        if hidden > 0:
            self._add_info_row(t("sidebar.more", count=hidden))
        elif not shown:
            self._add_info_row(t("sidebar.empty"))

    def _add_info_row(self, text: str):
        item = QListWidgetItem(text)
        item.setFlags(Qt.ItemFlag.NoItemFlags)
        item.setForeground(QBrush(QColor(Theme.TEXT_SECONDARY)))
        self.addItem(item)

    def mimeData(self, items):
        names = [it.data(_FILENAME_ROLE) for it in items if it.data(_FILENAME_ROLE)]
        data = QMimeData()
        if names:
            data.setText(names[0])
        return data


class TextToolButton(QPushButton):
    """클릭: 텍스트 노드 추가 / 드래그: 드롭 위치에 텍스트 노드"""

    def __init__(self, text: str, parent=None):
        super().__init__(text, parent)
        self._press_pos = None

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._press_pos = event.position().toPoint()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self._press_pos is not None and event.buttons() & Qt.MouseButton.LeftButton:
            distance = (event.position().toPoint() - self._press_pos).manhattanLength()
            if distance >= QApplication.startDragDistance():
                self._press_pos = None
                self.setDown(False)
                drag = QDrag(self)
                data = QMimeData()
                data.setText(TEXT_DROP_PAYLOAD)
                drag.setMimeData(data)
                drag.exec(Qt.DropAction.CopyAction)
                return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        self._press_pos = None
        super().mouseReleaseEvent(event)


class Sidebar(QWidget):
    """카탈로그 + 도구 + 저장된 장면"""

    picto_clicked = pyqtSignal(str)
    text_requested = pyqtSignal()
    upload_requested = pyqtSignal()
    scene_chosen = pyqtSignal(str)
    delete_requested = pyqtSignal(str)

    def __init__(self, catalog: List[str], catalog_dir: Path, parent=None):
        super().__init__(parent)
        self.catalog = list(catalog)
        self.setFixedWidth(260)
        self.setStyleSheet(f"""
            QWidget {{ background-color: {Theme.BG_SECONDARY}; color: {Theme.TEXT_PRIMARY}; }}
            QLineEdit, QComboBox {{
                border: 1px solid {Theme.NODE_BORDER};
                border-radius: 4px;
                padding: 6px;
            }}
            QPushButton {{
                border: 1px solid {Theme.NODE_BORDER};
                border-radius: 4px;
                padding: 6px 10px;
            }}
            QPushButton:hover {{ border-color: {Theme.ACCENT_PRIMARY}; }}
        """)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        # 검색
        self.search = QLineEdit()
        self.search.setPlaceholderText(t("sidebar.search"))
        self.search.textChanged.connect(self.apply_filter)
        layout.addWidget(self.search)

        # 도구
        tools = QHBoxLayout()
        self.text_button = TextToolButton(t("sidebar.add_text"))
        self.text_button.clicked.connect(self.text_requested.emit)
        tools.addWidget(self.text_button)
        self.upload_button = QPushButton(t("sidebar.upload"))
        self.upload_button.clicked.connect(self.upload_requested.emit)
        tools.addWidget(self.upload_button)
        layout.addLayout(tools)

        # 목록
        self.list = CatalogList(catalog_dir)
        self.list.itemClicked.connect(self._on_item_clicked)
        layout.addWidget(self.list, 1)

        # 저장된 장면
        saved = QHBoxLayout()
        self.saved_combo = QComboBox()
        self.saved_combo.activated.connect(self._on_saved_activated)
        saved.addWidget(self.saved_combo, 1)
        self.delete_button = QPushButton(t("sidebar.delete_saved"))
        self.delete_button.clicked.connect(self._on_delete_clicked)
        saved.addWidget(self.delete_button)
        layout.addLayout(saved)

        self.apply_filter("")

    def apply_filter(self, term: str):
        self.list.show_names(filter_catalog(self.catalog, term))

    def _on_item_clicked(self, item: QListWidgetItem):
        filename = item.data(_FILENAME_ROLE)
        if filename:
            self.picto_clicked.emit(filename)

    # ── 저장된 장면 ──

    def set_saved_names(self, names: Sequence[str]):
        self.saved_combo.blockSignals(True)
        self.saved_combo.clear()
        self.saved_combo.addItem(t("sidebar.saved_placeholder"), None)
        for name in names:
            self.saved_combo.addItem(name, name)
        self.saved_combo.setCurrentIndex(0)
        self.saved_combo.blockSignals(False)

    def current_saved_name(self):
        return self.saved_combo.currentData()

    def _on_saved_activated(self, index: int):
        name = self.saved_combo.itemData(index)
        if name:
            self.scene_chosen.emit(name)

    def _on_delete_clicked(self):
        name = self.current_saved_name()
        if name:
            self.delete_requested.emit(name)
