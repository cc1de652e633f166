"""
Metaball canvas widget — paints character frames with QTimer-driven updates.

Rendering happens in the main thread at ~30 fps.  Each cell is drawn as
a glyph in a monospace font, coloured from the frame's intensity hint.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from PyQt5.QtCore import QTimer, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QFont, QFontMetrics, QPainter
from PyQt5.QtWidgets import QWidget

from .engine import MetaballScene
from .palettes import ColorScheme
from .renderer import Frame, ModeCycler, render_frame

logger = logging.getLogger(__name__)


class MetaballCanvas(QWidget):
    """Animated character-grid display.

    Signals:
        fps_changed(float):   current rendering FPS
        mode_changed(str):    title of the active render mode
    """

    fps_changed = pyqtSignal(float)
    mode_changed = pyqtSignal(str)

    def __init__(
        self,
        scene: MetaballScene,
        cycler: ModeCycler,
        scheme: ColorScheme,
        rows: int = 35,
        cols: int = 80,
        dt: Optional[float] = 0.05,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.scene = scene
        self.cycler = cycler
        self.scheme = scheme
        self.rows = rows
        self.cols = cols
        self.dt = dt
        self.frame: Optional[Frame] = None
        self._paused = False

        # Timing
        self._last_time = time.perf_counter()
        self._frame_count = 0
        self._fps_accum = 0.0

        self._font = QFont("Monospace")
        self._font.setStyleHint(QFont.TypeWriter)
        self._font.setPointSize(10)
        metrics = QFontMetrics(self._font)
        self._cell_w = max(1, metrics.horizontalAdvance("M"))
        self._cell_h = max(1, metrics.height())
        self._ascent = metrics.ascent()
        self.setMinimumSize(self._cell_w * cols, self._cell_h * rows)

        # Animation timer (~30 fps)
        self._timer = QTimer(self)
        self._timer.setInterval(33)
        self._timer.timeout.connect(self._tick)
        self._timer.start()

    # ── properties ────────────────────────────────────────────────────────

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, val: bool) -> None:
        self._paused = val
        if not val:
            self._last_time = time.perf_counter()

    def set_scheme(self, scheme: ColorScheme) -> None:
        self.scheme = scheme

    def next_mode(self) -> None:
        self.cycler.set_mode(self.cycler.mode.next())
        self.mode_changed.emit(self.cycler.mode.title)

    # ── animation loop ────────────────────────────────────────────────────

    def _tick(self) -> None:
        now = time.perf_counter()
        elapsed = now - self._last_time
        self._last_time = now

        if not self._paused:
            dt = self.dt if self.dt is not None else elapsed
            self.scene.advance(dt)
            if self.cycler.advance(dt):
                self.mode_changed.emit(self.cycler.mode.title)

        self.frame = render_frame(self.scene, self.cycler.renderer, self.rows, self.cols)
        self.update()

        # FPS tracking
        self._frame_count += 1
        self._fps_accum += elapsed
        if self._fps_accum >= 1.0:
            self.fps_changed.emit(self._frame_count / self._fps_accum)
            self._frame_count = 0
            self._fps_accum = 0.0

    # ── painting ──────────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(10, 10, 12))
        painter.setFont(self._font)

        if self.frame is not None:
            rgb = self.frame.colors(self.scheme)
            for r in range(self.frame.rows):
                y = r * self._cell_h + self._ascent
                for c in range(self.frame.cols):
                    ch = self.frame.chars[r, c]
                    if ch == " ":
                        continue
                    painter.setPen(QColor(*(int(v) for v in rgb[r, c])))
                    painter.drawText(c * self._cell_w, y, ch)

        if self._paused:
            painter.setPen(QColor(200, 200, 200, 180))
            painter.drawText(self.rect(), Qt.AlignCenter, "⏸ PAUSED")

        painter.end()

    def frame_text(self) -> Optional[str]:
        if self.frame is not None:
            return self.frame.to_text()
        return None
