"""Main application class - creates the window, wires up UI components."""

import logging
import os

from PySide6.QtWidgets import (QMainWindow, QWidget, QFrame, QVBoxLayout,
                               QFileDialog)
from PySide6.QtGui import QKeySequence, QAction, QShortcut
from PySide6.QtCore import Qt

from .state import BoardState
from .core.settings import Settings
from .ops import board_io
from .ops import edges as edge_ops
from .ui.canvas import BoardCanvas
from .ui.topbar import TopBar
from .ui.dialogs import confirm_discard, show_load_error, show_save_error

log = logging.getLogger(__name__)

FILE_FILTER = 'Domino boards (*.json);;All files (*.*)'


class App(QMainWindow):
    """Main application - owns the state, creates the window, coordinates UI."""

    def __init__(self, settings: Settings = None, initial_path: str = None):
        super().__init__()
        self.settings = settings or Settings()
        self.state = BoardState.from_settings(self.settings)

        self._setup_theme()
        self._build_ui()
        self._build_menus()
        self._bind_keys()

        self.state.on_change(self._on_state_change)

        if initial_path:
            self._open_path(initial_path)
        self._refresh_all()

    def _setup_theme(self):
        """Configure Qt stylesheet for dark mode."""
        self.setStyleSheet("""
            QMainWindow, QWidget {
                background-color: #16213e;
                color: #eeeeee;
            }
            QPushButton {
                background-color: #1a1a2e;
                color: #eeeeee;
                border: 1px solid #2a3a5c;
                padding: 4px 8px;
                border-radius: 2px;
            }
            QPushButton:hover {
                background-color: #2a3a5c;
            }
            QPushButton:disabled {
                color: #555555;
                border-color: #333333;
            }
            QMenu { background: #1a2236; color: #eee; border: 1px solid #2a3a5c; }
            QMenu::item:selected { background: #3a7bd5; }
            QMenu::item:disabled { color: #555; }
        """)

    def _build_ui(self):
        """Build the main UI layout."""
        self.resize(1200, 800)
        self.setMinimumSize(640, 420)

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.topbar = TopBar(central, self)
        layout.addWidget(self.topbar)

        sep = QFrame()
        sep.setFrameShape(QFrame.HLine)
        sep.setStyleSheet("background-color: #2a3a5c;")
        sep.setFixedHeight(1)
        layout.addWidget(sep)

        self.canvas = BoardCanvas(self.state, central)
        self.canvas.status_message.connect(
            lambda msg: self.statusBar().showMessage(msg, 2000))
        layout.addWidget(self.canvas, 1)

        self.statusBar().showMessage(
            "Double-click to add a node; drag a + handle to connect.")

    def _build_menus(self):
        bar = self.menuBar()

        file_menu = bar.addMenu('&File')
        self._add_action(file_menu, 'New', QKeySequence.New, self.new_board)
        self._add_action(file_menu, 'Open...', QKeySequence.Open, self.open_board)
        file_menu.addSeparator()
        self._add_action(file_menu, 'Save', QKeySequence.Save, self.save_board)
        self._add_action(file_menu, 'Save As...', QKeySequence('Ctrl+Shift+S'), self.save_board_as)
        file_menu.addSeparator()
        self._add_action(file_menu, 'Quit', QKeySequence.Quit, self.close)

        edit_menu = bar.addMenu('&Edit')
        self.undo_action = self._add_action(edit_menu, 'Undo', QKeySequence.Undo, self.undo)
        self.redo_action = self._add_action(edit_menu, 'Redo', QKeySequence('Ctrl+Shift+Z'), self.redo)
        edit_menu.addSeparator()
        self.delete_action = self._add_action(edit_menu, 'Delete', QKeySequence.Delete,
                                              self.delete_selection)

        view_menu = bar.addMenu('&View')
        self._add_action(view_menu, 'Zoom In', QKeySequence.ZoomIn,
                         lambda: self.canvas.zoom_by(1.25))
        self._add_action(view_menu, 'Zoom Out', QKeySequence.ZoomOut,
                         lambda: self.canvas.zoom_by(0.8))
        self._add_action(view_menu, 'Center on Nodes', QKeySequence('Ctrl+0'),
                         self.canvas.center_on_nodes)

    def _add_action(self, menu, text, shortcut, slot) -> QAction:
        act = QAction(text, self)
        act.setShortcut(shortcut)
        act.triggered.connect(slot)
        menu.addAction(act)
        return act

    def _bind_keys(self):
        """Bind keyboard shortcuts not covered by the menus."""
        QShortcut(Qt.Key_Backspace, self.canvas, self.delete_selection)
        QShortcut(Qt.Key_Escape, self.canvas, self._on_escape)

    def _on_escape(self):
        s = self.state
        if s.edge_drag is not None:
            edge_ops.cancel_edge_drag(s)
        elif s.selected_id or s.selected_edge_id:
            s.selected_id = None
            s.selected_edge_id = None
            s.notify('select')

    def _on_state_change(self, source=None):
        """Called whenever state changes. Refreshes chrome around the canvas."""
        if source == 'transient':
            return
        self._refresh_all()

    def _refresh_all(self):
        s = self.state
        self.topbar.refresh()
        self.undo_action.setEnabled(s.can_undo())
        self.redo_action.setEnabled(s.can_redo())
        self.delete_action.setEnabled(
            s.editing_id is None and (s.selected_id is not None or
                                      s.selected_edge_id is not None))
        name = os.path.basename(s.file_path) if s.file_path else 'Untitled'
        self.setWindowTitle(f"{name}{' *' if s.dirty else ''} - Domino")

    # ---- Edit ----

    def undo(self):
        self.state.undo()

    def redo(self):
        self.state.redo()

    def delete_selection(self):
        edge_ops.delete_selection(self.state)

    # ---- New / Save / Open ----

    def _may_discard(self) -> bool:
        if not self.state.dirty or not self.settings.confirm_discard:
            return True
        return confirm_discard(self)

    def _dialog_dir(self) -> str:
        if self.state.file_path:
            return os.path.dirname(self.state.file_path)
        return self.settings.last_directory

    def _remember_dir(self, path: str):
        self.settings.last_directory = os.path.dirname(path)
        self.settings.save()

    def new_board(self):
        if self._may_discard():
            board_io.new_board(self.state)

    def open_board(self):
        if not self._may_discard():
            return
        path, _ = QFileDialog.getOpenFileName(self, 'Open Board', self._dialog_dir(), FILE_FILTER)
        if path:
            self._open_path(path)

    def _open_path(self, path: str):
        if board_io.load_board(self.state, path):
            self._remember_dir(path)
        else:
            show_load_error(self, path)

    def save_board(self):
        if self.state.file_path:
            self._save_to(self.state.file_path)
        else:
            self.save_board_as()

    def save_board_as(self):
        start = self.state.file_path or os.path.join(self._dialog_dir(), 'Domino.json')
        path, _ = QFileDialog.getSaveFileName(self, 'Save Board', start, FILE_FILTER)
        if path:
            self._save_to(path)

    def _save_to(self, path: str):
        if board_io.save_board(self.state, path):
            self._remember_dir(path)
            self.statusBar().showMessage(f"Saved {os.path.basename(path)}", 2000)
        else:
            show_save_error(self, path)

    def closeEvent(self, event):
        """Offer to keep unsaved work before the window goes away."""
        if self._may_discard():
            event.accept()
        else:
            event.ignore()
