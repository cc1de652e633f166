"""
ANSI terminal frame driver.

Owns the timing loop: advance the scene, render a frame, write it at the
cursor home position, then sleep out the rest of the frame budget.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Callable, Optional, TextIO

from .engine import MetaballScene
from .palettes import ColorScheme
from .renderer import Frame, ModeCycler, render_frame

logger = logging.getLogger(__name__)

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR = "\x1b[2J"
HOME = "\x1b[H"
CLEAR_EOL = "\x1b[K"
RESET = "\x1b[0m"


def colorize(frame: Frame, scheme: ColorScheme) -> str:
    """Frame text with 24-bit foreground colour codes per cell."""
    rgb = frame.colors(scheme)
    out = []
    for r in range(frame.rows):
        parts = []
        last = None
        for c in range(frame.cols):
            ch = frame.chars[r, c]
            color = tuple(int(v) for v in rgb[r, c])
            if ch != " " and color != last:
                parts.append("\x1b[38;2;%d;%d;%dm" % color)
                last = color
            parts.append(ch)
        parts.append(RESET)
        out.append("".join(parts))
    return "\n".join(out)


class TerminalDriver:
    """Render loop writing frames to a terminal stream.

    Parameters:
        scene:   Scene to animate.
        cycler:  Holds the active renderer and handles mode cycling.
        rows:    Character rows.
        cols:    Character columns.
        fps:     Target frame rate.
        dt:      Fixed simulation step per frame (None = wall-clock time).
        scheme:  Colour scheme for ANSI colour, or None for plain text.
        stream:  Output stream (defaults to stdout).
    """

    def __init__(
        self,
        scene: MetaballScene,
        cycler: ModeCycler,
        rows: int = 35,
        cols: int = 80,
        fps: float = 30.0,
        dt: Optional[float] = 0.05,
        scheme: Optional[ColorScheme] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.scene = scene
        self.cycler = cycler
        self.rows = rows
        self.cols = cols
        self.frame_duration = 1.0 / fps if fps > 0 else 0.0
        self.dt = dt
        self.scheme = scheme
        self.stream = stream or sys.stdout
        self.frame_count = 0

    def tick(self, dt: float) -> Frame:
        """Advance simulation and mode timer, return the next frame."""
        self.scene.advance(dt)
        if self.cycler.advance(dt):
            logger.debug("Cycled to %s", self.cycler.mode.title)
        self.frame_count += 1
        return render_frame(self.scene, self.cycler.renderer, self.rows, self.cols)

    def status_line(self, elapsed: float) -> str:
        fps = self.frame_count / elapsed if elapsed > 0 else 0.0
        return "Metaballs [%s] | Frame: %d | FPS: %.1f" % (
            self.cycler.mode.title, self.frame_count, fps,
        )

    def run(
        self,
        max_frames: Optional[int] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> int:
        """Run until *max_frames* or Ctrl-C; returns frames drawn."""
        out = self.stream
        out.write(HIDE_CURSOR + CLEAR)
        start = last = clock()
        try:
            while max_frames is None or self.frame_count < max_frames:
                frame_start = clock()
                dt = self.dt if self.dt is not None else frame_start - last
                last = frame_start

                frame = self.tick(dt)
                text = colorize(frame, self.scheme) if self.scheme else frame.to_text()
                out.write(HOME + text + "\n")
                out.write(self.status_line(clock() - start) + CLEAR_EOL)
                out.flush()

                spent = clock() - frame_start
                if spent < self.frame_duration:
                    sleep(self.frame_duration - spent)
        except KeyboardInterrupt:
            logger.info("Interrupted after %d frames", self.frame_count)
        finally:
            out.write(RESET + SHOW_CURSOR + "\n")
            out.flush()
        return self.frame_count
