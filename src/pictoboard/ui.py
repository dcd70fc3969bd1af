"""
PyQt6 기반 메인 UI
- 사이드바 + 캔버스 뷰
- 저장 / 불러오기 / 전체 삭제 / 인쇄
"""
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QHBoxLayout,
    QFileDialog, QInputDialog, QMessageBox,
)
from PyQt6.QtCore import QMarginsF, QRectF
from PyQt6.QtGui import QPainter, QPageLayout, QPageSize
from PyQt6.QtPrintSupport import QPrinter, QPrintDialog

import sys

from pictoboard.i18n import t
from pictoboard.app import App
from pictoboard.theme import Theme
from pictoboard.boards.canvas import CanvasBoard, SceneLoadError
from pictoboard.boards.canvas.model import NODE_IMAGE, NODE_TEXT
from pictoboard.catalog import file_to_data_uri, load_manifest
from pictoboard.constants import PRINT_PAGE_WIDTH, PRINT_PAGE_HEIGHT
from pictoboard.logger import get_logger
from pictoboard.sidebar import Sidebar

logger = get_logger("pictoboard.ui")


class MainWindow(QMainWindow):
    """메인 윈도우"""

    def __init__(self, app: App):
        super().__init__()

        self.app = app
        self._current_name: str | None = None
        self._modified = False

        self.setGeometry(100, 100, 1200, 800)
        self.setStyleSheet(f"""
            QMainWindow {{ background-color: {Theme.BG_PRIMARY}; }}
            QMenuBar {{
                background-color: {Theme.BG_SECONDARY};
                color: {Theme.TEXT_PRIMARY};
                padding: 4px;
                font-size: 12px;
            }}
            QMenuBar::item {{
                padding: 6px 12px;
                border-radius: 4px;
            }}
            QMenuBar::item:selected {{
                background-color: {Theme.BG_PLACEHOLDER};
            }}
            QMenu {{
                background-color: {Theme.BG_SECONDARY};
                color: {Theme.TEXT_PRIMARY};
                border: 1px solid {Theme.NODE_BORDER};
                padding: 4px;
            }}
            QMenu::item {{
                padding: 8px 30px;
            }}
            QMenu::item:selected {{
                background-color: {Theme.ACCENT_PRIMARY};
                color: {Theme.BG_SECONDARY};
            }}
        """)

        # 캔버스
        self.board = CanvasBoard(app, print_handler=self._print_scene)
        self.board.on_modified = self.mark_modified
        self.board.on_print_preview = self._enter_print_preview
        self.board.on_print_restore = self._leave_print_preview
        self.view = self.board.create_view()

        # 사이드바
        self.sidebar = Sidebar(load_manifest(app.catalog_dir), app.catalog_dir)
        self.sidebar.picto_clicked.connect(self._add_picto)
        self.sidebar.text_requested.connect(self._add_text)
        self.sidebar.upload_requested.connect(self._upload_image)
        self.sidebar.scene_chosen.connect(self._load_scene)
        self.sidebar.delete_requested.connect(self._delete_scene)

        central = QWidget()
        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self.sidebar)
        layout.addWidget(self.view, 1)
        self.setCentralWidget(central)

        self._setup_menubar()
        self._refresh_saved()
        self._update_title()

    def _setup_menubar(self):
        """메뉴바 설정"""
        menubar = self.menuBar()

        # 파일 메뉴
        file_menu = menubar.addMenu(t("menu.file"))

        action_save = file_menu.addAction(t("menu.save"))
        action_save.setShortcut("Ctrl+S")
        action_save.triggered.connect(self._save_scene)

        action_clear = file_menu.addAction(t("menu.clear"))
        action_clear.triggered.connect(self._clear_all)

        action_print = file_menu.addAction(t("menu.print"))
        action_print.setShortcut("Ctrl+P")
        action_print.triggered.connect(self.board.start_print)

        file_menu.addSeparator()

        action_exit = file_menu.addAction(t("menu.exit"))
        action_exit.setShortcut("Alt+F4")
        action_exit.triggered.connect(self.close)

        # 보기 메뉴
        view_menu = menubar.addMenu(t("menu.view"))

        action_reset_view = view_menu.addAction(t("menu.reset_view"))
        action_reset_view.setShortcut("Home")
        action_reset_view.triggered.connect(self.view.reset_view)

    # ── 노드 추가 ──

    def _add_picto(self, filename: str):
        self.board.add_node_at_view_center(filename, NODE_IMAGE)

    def _add_text(self):
        self.board.add_node_at_view_center("", NODE_TEXT)

    def _upload_image(self):
        filepath, _ = QFileDialog.getOpenFileName(
            self, t("dialog.upload_title"), "", t("dialog.image_filter")
        )
        if not filepath:
            return
        try:
            content = file_to_data_uri(filepath)
        except OSError as e:
            logger.warning(f"[UI] upload failed {filepath}: {e}")
            QMessageBox.warning(self, t("app.title"), t("error.upload_failed", error=str(e)))
            return
        self.board.add_node_at_view_center(content, NODE_IMAGE)

    # ── 저장 / 불러오기 ──

    def _refresh_saved(self):
        self.sidebar.set_saved_names(self.app.list_scenes())

    def _save_scene(self):
        name, ok = QInputDialog.getText(
            self, t("dialog.save_title"), t("dialog.save_prompt"),
            text=self._current_name or ""
        )
        if not ok or not name.strip():
            return
        try:
            self._current_name = self.app.save_scene(name)
        except OSError as e:
            logger.error(f"[UI] save failed: {e}")
            QMessageBox.critical(self, t("error.save_failed"), str(e))
            return
        self._modified = False
        self._update_title()
        self._refresh_saved()
        self.statusBar().showMessage(t("dialog.saved"), 2000)

    def _load_scene(self, name: str):
        try:
            snapshot = self.app.store.load(name)
        except SceneLoadError as e:
            logger.warning(f"[UI] load failed: {e}")
            QMessageBox.warning(self, t("error.load_failed"), t("error.load_corrupt", name=name))
            self._refresh_saved()
            return
        self.board.apply_snapshot(snapshot)
        self._current_name = name
        self._modified = False
        self._update_title()

    def _delete_scene(self, name: str):
        reply = QMessageBox.question(
            self, t("app.title"), t("dialog.delete_confirm", name=name),
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        if reply != QMessageBox.StandardButton.Yes:
            return
        try:
            self.app.delete_scene(name)
        except OSError as e:
            logger.error(f"[UI] delete failed: {e}")
            QMessageBox.critical(self, t("error.save_failed"), str(e))
            return
        if self._current_name == name:
            self._current_name = None
            self._update_title()
        self._refresh_saved()

    def _clear_all(self):
        reply = QMessageBox.question(
            self, t("app.title"), t("dialog.clear_confirm"),
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.board.clear_all()

    # ── 인쇄 ──

    def _enter_print_preview(self):
        self.sidebar.hide()
        self.menuBar().setEnabled(False)

    def _leave_print_preview(self):
        self.menuBar().setEnabled(True)
        self.sidebar.show()

    def _print_scene(self, scene):
        """페이지 영역 (A4 가로 96dpi 좌표) 을 프린터 페이지에 그린다"""
        printer = QPrinter(QPrinter.PrinterMode.HighResolution)
        printer.setPageLayout(QPageLayout(
            QPageSize(QPageSize.PageSizeId.A4),
            QPageLayout.Orientation.Landscape,
            QMarginsF(0, 0, 0, 0),
        ))
        dialog = QPrintDialog(printer, self)
        if dialog.exec() != QPrintDialog.DialogCode.Accepted:
            logger.info("[PRINT] cancelled")
            return
        painter = QPainter(printer)
        try:
            page = printer.pageLayout().paintRectPixels(printer.resolution())
            scene.render(
                painter,
                QRectF(0, 0, page.width(), page.height()),
                QRectF(0, 0, PRINT_PAGE_WIDTH, PRINT_PAGE_HEIGHT),
            )
        finally:
            painter.end()
        logger.info("[PRINT] sent to printer")

    # ── 제목 ──

    def _update_title(self):
        parts = [t("app.title")]
        if self._current_name:
            parts.append(self._current_name)
        title = " - ".join(parts)
        if self._modified:
            title = "● " + title
        self.setWindowTitle(title)

    def mark_modified(self):
        if not self._modified:
            self._modified = True
            self._update_title()


def run_app(app: App = None):
    """앱 실행"""
    from pictoboard import i18n
    from pictoboard.logger import setup_logger
    from pictoboard.settings import get_language

    setup_logger()
    i18n.load(get_language())

    qapp = QApplication(sys.argv)
    qapp.setStyle("Fusion")

    if app is None:
        app = App()
    logger.info(f"[UI] starting, catalog={app.catalog_dir}")

    window = MainWindow(app)
    window.show()
    sys.exit(qapp.exec())


if __name__ == "__main__":
    run_app()
