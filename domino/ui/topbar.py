"""Top control bar - board actions and a short summary of the board."""

from PySide6.QtWidgets import QFrame, QLabel, QPushButton, QHBoxLayout
from PySide6.QtGui import QFont


class TopBar(QFrame):
    """Top bar with file / history buttons and a node and edge count."""

    def __init__(self, parent, app):
        super().__init__(parent)
        self.app = app
        self.state = app.state
        self._build()

    def _build(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(6, 3, 6, 3)
        layout.setSpacing(6)

        # Title
        title_label = QLabel("Domino")
        font = QFont()
        font.setPointSize(11)
        font.setBold(True)
        title_label.setFont(font)
        title_label.setStyleSheet('color: #3a7bd5;')
        layout.addWidget(title_label)
        layout.addSpacing(12)

        for text, slot in (('New', self.app.new_board),
                           ('Open', self.app.open_board),
                           ('Save', self.app.save_board)):
            btn = QPushButton(text)
            btn.setMaximumWidth(60)
            btn.clicked.connect(slot)
            layout.addWidget(btn)

        layout.addSpacing(8)

        self.undo_btn = QPushButton('Undo')
        self.undo_btn.setMaximumWidth(60)
        self.undo_btn.clicked.connect(self.app.undo)
        layout.addWidget(self.undo_btn)

        self.redo_btn = QPushButton('Redo')
        self.redo_btn.setMaximumWidth(60)
        self.redo_btn.clicked.connect(self.app.redo)
        layout.addWidget(self.redo_btn)

        layout.addStretch()

        self.summary_label = QLabel()
        self.summary_label.setStyleSheet('color: #888888;')
        layout.addWidget(self.summary_label)

        self.refresh()

    def refresh(self):
        s = self.state
        self.undo_btn.setEnabled(s.can_undo())
        self.redo_btn.setEnabled(s.can_redo())
        n_nodes = len(s.nodes)
        n_edges = len(s.edges())
        self.summary_label.setText(
            f"{n_nodes} node{'s' if n_nodes != 1 else ''}, "
            f"{n_edges} edge{'s' if n_edges != 1 else ''}")
