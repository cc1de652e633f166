"""
Main window — hosts the metaball canvas with a menu bar and status bar.
"""

from __future__ import annotations

import logging

from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import QAction, QActionGroup, QFileDialog, QMainWindow, QMessageBox

from . import __version__
from .canvas import MetaballCanvas
from .palettes import SCHEMES, get_scheme, list_schemes

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Top-level window for the metaball viewer."""

    def __init__(self, canvas: MetaballCanvas) -> None:
        super().__init__()
        self.setWindowTitle(f"Metaballs  v{__version__}")
        self.canvas = canvas
        self.setCentralWidget(canvas)

        self._build_menu()
        self._fps = 0.0
        self._show_status()

        canvas.fps_changed.connect(self._on_fps)
        canvas.mode_changed.connect(lambda _title: self._show_status())

    def _build_menu(self) -> None:
        menu = self.menuBar()

        file_menu = menu.addMenu("&File")
        save_act = QAction("&Save Frame…", self)
        save_act.setShortcut(QKeySequence.Save)
        save_act.triggered.connect(self._save)
        file_menu.addAction(save_act)
        file_menu.addSeparator()
        quit_act = QAction("&Quit", self)
        quit_act.setShortcut(QKeySequence.Quit)
        quit_act.triggered.connect(self.close)
        file_menu.addAction(quit_act)

        view_menu = menu.addMenu("&View")
        pause_act = QAction("&Pause / Resume", self)
        pause_act.setShortcut(QKeySequence("Space"))
        pause_act.triggered.connect(self._toggle_pause)
        view_menu.addAction(pause_act)
        mode_act = QAction("&Next Mode", self)
        mode_act.setShortcut(QKeySequence("M"))
        mode_act.triggered.connect(self.canvas.next_mode)
        view_menu.addAction(mode_act)
        reset_act = QAction("&Reset Scene", self)
        reset_act.setShortcut(QKeySequence("Ctrl+R"))
        reset_act.triggered.connect(self._reset)
        view_menu.addAction(reset_act)
        self._reset_act = reset_act

        scheme_menu = menu.addMenu("&Scheme")
        group = QActionGroup(self)
        self._scheme_actions = {}
        for key in list_schemes():
            act = QAction(SCHEMES[key].name, self, checkable=True)
            act.setChecked(SCHEMES[key] == self.canvas.scheme)
            act.triggered.connect(lambda _checked=False, key=key: self._set_scheme(key))
            group.addAction(act)
            scheme_menu.addAction(act)
            self._scheme_actions[key] = act

    def _show_status(self) -> None:
        self.statusBar().showMessage(
            f"Metaballs [{self.canvas.cycler.mode.title}] | FPS: {self._fps:.1f}"
        )

    def _on_fps(self, fps: float) -> None:
        self._fps = fps
        self._show_status()

    def _save(self) -> None:
        text = self.canvas.frame_text()
        if text is None:
            QMessageBox.warning(self, "Save Error", "No frame to save yet.")
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Frame", "metaballs.txt", "Text (*.txt);;All (*)",
        )
        if not path:
            return
        try:
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(text + "\n")
        except OSError as exc:
            logger.error("Failed to save %s: %s", path, exc)
            QMessageBox.critical(self, "Save Error", f"Failed to save:\n{path}")
            return
        self.statusBar().showMessage(f"Saved to {path}")

    def _reset(self) -> None:
        self.canvas.scene.reset()
        self._show_status()

    def _set_scheme(self, key: str) -> None:
        self.canvas.set_scheme(get_scheme(key))
        logger.debug("Colour scheme: %s", key)

    def _toggle_pause(self) -> None:
        self.canvas.paused = not self.canvas.paused
