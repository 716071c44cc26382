"""
Logic Brickyard (Native Launcher)
Pure PySide6 editor for assembling boolean expressions out of operator bricks.

What this provides:
- A window hosting the BrickCanvas
- A palette to spawn AND / OR / NOT bricks and plain draggables
- A status line with the current root and free-socket counts
- A demo forest wired through every attachment entry point
- Optional CLI: python brickyard_native.py [--empty]
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from Canvas.brick_canvas import BrickCanvas
from Canvas.brick_style import DARK_THEME, OPERATOR_COLORS
from Canvas.settings_manager import SettingsManager
from Forest import keywords
from Forest.errors import ForestError
from Forest.registry import Forest

logger = logging.getLogger(__name__)


def build_demo_forest(forest: Forest) -> None:
    """Seed four sample trees, each wired through a different entry point, plus one loose brick."""
    def brick(kind, col, row):
        return forest.create_operator(kind, (80 + col * 260, 60 + row * 170))

    brick_a = brick(keywords.OR, 0, 0)
    brick_b = brick(keywords.AND, 0, 1)
    brick_c = brick(keywords.NOT, 1, 1)

    brick_d = brick(keywords.OR, 1, 0)
    brick_e = brick(keywords.AND, 2, 1)
    brick_f = brick(keywords.NOT, 3, 1)

    brick_g = brick(keywords.OR, 2, 0)
    brick_h = brick(keywords.AND, 0, 2)
    brick_i = brick(keywords.NOT, 1, 2)

    brick_j = brick(keywords.OR, 3, 0)
    brick_k = brick(keywords.AND, 2, 2)
    brick_l = brick(keywords.NOT, 3, 2)
    brick_m = brick(keywords.OR, 4, 2)

    brick(keywords.NOT, 4, 0)

    # Attaching children directly
    brick_a.attach_child(brick_b, keywords.LEFT)
    brick_a.attach_child(brick_c, keywords.RIGHT)

    # Attaching parents directly
    brick_e.attach_parent(brick_d, keywords.LEFT)
    brick_f.attach_parent(brick_d, keywords.RIGHT)

    # Attaching through the forest
    forest.attach(brick_g, brick_h, keywords.LEFT)
    forest.attach(brick_g, brick_i, keywords.RIGHT)

    # Mixing attachment entry points
    brick_j.attach_child(brick_k, keywords.LEFT)
    brick_l.attach_parent(brick_j, keywords.RIGHT)
    forest.attach(brick_l, brick_m, keywords.LEFT)

    forest.describe_nodes()
    forest.describe_roots()


class BrickyardWindow(QMainWindow):
    """Top-level window that hosts the BrickCanvas and its operator palette."""

    def __init__(self, settings_manager: Optional[SettingsManager] = None, demo: bool = True, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Logic Brickyard")
        self.settings_manager = settings_manager or SettingsManager()

        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        palette = QHBoxLayout()
        palette.setSpacing(6)
        for kind in keywords.OPERATORS:
            button = self._palette_button(kind.upper(), OPERATOR_COLORS[kind])
            button.clicked.connect(lambda checked=False, k=kind: self.spawn_operator(k))
            palette.addWidget(button)
        draggable_button = self._palette_button("DRAG ME", DARK_THEME['text_secondary'])
        draggable_button.clicked.connect(self.spawn_draggable)
        palette.addWidget(draggable_button)
        palette.addStretch(1)
        list_button = self._palette_button("List IDs", DARK_THEME['border'])
        list_button.clicked.connect(self.log_listings)
        palette.addWidget(list_button)
        layout.addLayout(palette)

        self.canvas = BrickCanvas(self.settings_manager, central)
        layout.addWidget(self.canvas, 1)

        self.status_label = QLabel(central)
        self.status_label.setStyleSheet(f"color: {DARK_THEME['text_secondary']}; padding: 2px 4px;")
        layout.addWidget(self.status_label)
        self.setCentralWidget(central)
        self.setStyleSheet(f"QMainWindow {{ background-color: {DARK_THEME['bg_secondary']}; }}")

        self.canvas.structure_changed.connect(self._on_structure_changed)
        self.canvas.node_dropped.connect(self._on_node_dropped)
        QShortcut(QKeySequence("Ctrl+L"), self, activated=self.log_listings)

        if demo:
            build_demo_forest(self.canvas.forest)
        self._on_structure_changed(self.canvas.forest.snapshot())

    @property
    def forest(self) -> Forest:
        return self.canvas.forest

    def _palette_button(self, text: str, color: str) -> QPushButton:
        button = QPushButton(text)
        button.setCursor(Qt.PointingHandCursor)
        button.setStyleSheet(f"""
            QPushButton {{
                color: {DARK_THEME['text_primary']};
                background-color: {DARK_THEME['bg_tertiary']};
                border: 1px solid {color};
                border-radius: 6px;
                padding: 6px 14px;
                font-weight: bold;
            }}
            QPushButton:hover {{ background-color: #4a4d51; }}
        """)
        return button

    def spawn_operator(self, kind: str):
        try:
            return self.forest.create_operator(kind, self.canvas.spawn_point())
        except ForestError as e:
            logger.warning("Could not create operator: %s", e)
            return None

    def spawn_draggable(self):
        return self.forest.create_draggable(self.canvas.spawn_point())

    def log_listings(self):
        for line in self.forest.describe_nodes() + self.forest.describe_roots():
            logger.info(line)

    def _on_structure_changed(self, snapshot):
        self.status_label.setText(
            f"{len(snapshot.nodes)} objects  |  {len(snapshot.roots)} roots  |  "
            f"{len(snapshot.free_sockets)} free sockets  |  drag a brick into a socket to nest it"
        )

    def _on_node_dropped(self, node, socket):
        if socket is None:
            self.statusBar().showMessage(f"{node.id} left as a root", 2000)
        else:
            self.statusBar().showMessage(f"{node.id} attached to {socket.owner.id} ({socket.side.value})", 2000)

    def closeEvent(self, event):
        self.settings_manager.settings['window_width'] = self.width()
        self.settings_manager.settings['window_height'] = self.height()
        self.settings_manager.save_settings()
        event.accept()


def main():
    settings_manager = SettingsManager()
    settings_manager.load_settings()
    logging.basicConfig(level=settings_manager.log_level(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Build QApplication once
    app = QApplication.instance() or QApplication(sys.argv)

    demo = "--empty" not in sys.argv[1:]
    window = BrickyardWindow(settings_manager, demo=demo)
    window.resize(int(settings_manager['window_width']), int(settings_manager['window_height']))
    window.show()

    # Start event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
