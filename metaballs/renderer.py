"""
Character renderers — turn a sampled field grid into a glyph frame.

Each render mode is one :class:`Renderer` subclass, chosen once through
:func:`get_renderer`.  All of them are numpy-vectorised, pure functions of
``(SampledGrid, τ, palette)`` and return a :class:`Frame` holding a
``(rows, cols)`` glyph array plus a 0–1 intensity hint per cell.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Type

import numpy as np

from .palettes import (
    BLOCK_GLYPHS,
    CONTOUR_GLYPHS,
    GOOEY_GLYPHS,
    GRADIENT_GLYPHS,
    SOLID_GLYPHS,
    ColorScheme,
)
from .sampler import GridMapping, SampledGrid, sample

if TYPE_CHECKING:
    from .engine import MetaballScene

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------

class RenderMode(enum.Enum):
    GRADIENT = "gradient"
    CONTOUR = "contour"
    SOLID = "solid"
    BLOCKS = "blocks"
    GOOEY = "gooey"

    @property
    def title(self) -> str:
        return self.value.capitalize()

    def next(self) -> "RenderMode":
        """Following mode in cycling order (wraps around)."""
        modes = list(RenderMode)
        return modes[(modes.index(self) + 1) % len(modes)]

    @classmethod
    def from_name(cls, name: str) -> "RenderMode":
        try:
            return cls(name.lower())
        except ValueError:
            available = ", ".join(m.value for m in cls)
            raise KeyError(f"Unknown render mode '{name}'. Available: {available}") from None


EDGE_POLICIES = ("ignore", "outside")


# ---------------------------------------------------------------------------
# Frame
# ---------------------------------------------------------------------------

@dataclass
class Frame:
    """Rendered output for one tick.

    Attributes:
        chars:     (rows, cols) array of single-character strings.
        intensity: (rows, cols) float array in 0–1 (colour hint).
        mode:      Mode that produced the frame.
    """
    chars: np.ndarray
    intensity: np.ndarray
    mode: RenderMode

    @property
    def rows(self) -> int:
        return self.chars.shape[0]

    @property
    def cols(self) -> int:
        return self.chars.shape[1]

    def lines(self) -> List[str]:
        return ["".join(row) for row in self.chars]

    def to_text(self) -> str:
        return "\n".join(self.lines())

    def colors(self, scheme: ColorScheme) -> np.ndarray:
        """(rows, cols, 3) uint8 RGB from the intensity hint."""
        return scheme.shade(self.intensity)


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

class Renderer:
    """Base class: ``render()`` = ``glyph_indices()`` looked up in ``glyphs``.

    Parameters:
        glyphs:     Override the mode's palette (same length).
        saturation: Field level, in multiples of τ, that maps to intensity 1.
    """

    mode: RenderMode
    default_glyphs: Sequence[str] = ()
    needs_coverage = False

    def __init__(self, glyphs: Optional[Sequence[str]] = None, saturation: float = 4.0) -> None:
        glyphs = self.default_glyphs if glyphs is None else glyphs
        if len(glyphs) != len(self.default_glyphs):
            raise ValueError(
                f"{self.mode.title} palette needs {len(self.default_glyphs)} glyphs, got {len(glyphs)}"
            )
        self.glyphs = np.array(list(glyphs), dtype="<U1")
        self.saturation = saturation

    def glyph_indices(self, grid: SampledGrid) -> np.ndarray:
        raise NotImplementedError

    def intensity(self, grid: SampledGrid) -> np.ndarray:
        ratio = grid.field / (grid.threshold * self.saturation)
        return np.clip(np.nan_to_num(ratio, nan=0.0, posinf=1.0), 0.0, 1.0)

    def render(self, grid: SampledGrid) -> Frame:
        idx = self.glyph_indices(grid)
        return Frame(self.glyphs[idx], self.intensity(grid), self.mode)


class GradientRenderer(Renderer):
    """Ten-step density ramp; the upper five glyphs are inside the surface."""

    mode = RenderMode.GRADIENT
    default_glyphs = GRADIENT_GLYPHS

    def glyph_indices(self, grid: SampledGrid) -> np.ndarray:
        tau = grid.threshold
        ratio = np.nan_to_num(grid.field / tau, nan=0.0)
        below = np.minimum(np.floor(np.clip(ratio, 0.0, 1.0) * 5), 4)
        excess = np.clip(ratio - 1.0, 0.0, 3.0) / 3.0
        above = np.minimum(5 + np.floor(excess * 4), 9)
        idx = np.where(ratio >= 1.0, above, below)
        idx[ratio < 0.1] = 0
        return idx.astype(np.int64)


class SolidRenderer(Renderer):
    """Binary fill with three interior shading bands."""

    mode = RenderMode.SOLID
    default_glyphs = SOLID_GLYPHS

    def glyph_indices(self, grid: SampledGrid) -> np.ndarray:
        f, tau = grid.field, grid.threshold
        return np.select(
            [f > tau * 3.0, f > tau * 2.0, f >= tau],
            [3, 2, 1],
            default=0,
        )


class ContourRenderer(Renderer):
    """Outline cells whose inside/outside status differs from a 4-neighbour.

    Parameters:
        edge_policy: ``"ignore"`` skips neighbours beyond the grid border;
                     ``"outside"`` treats them as outside the surface.
    """

    mode = RenderMode.CONTOUR
    default_glyphs = CONTOUR_GLYPHS

    def __init__(self, glyphs=None, saturation=4.0, edge_policy: str = "ignore") -> None:
        super().__init__(glyphs, saturation)
        if edge_policy not in EDGE_POLICIES:
            raise ValueError(f"Unknown edge policy '{edge_policy}'. Available: {', '.join(EDGE_POLICIES)}")
        self.edge_policy = edge_policy

    def edges(self, grid: SampledGrid) -> np.ndarray:
        """Boolean (rows, cols) edge mask."""
        inside = grid.inside
        edge = np.zeros_like(inside)
        vertical = inside[1:, :] != inside[:-1, :]
        horizontal = inside[:, 1:] != inside[:, :-1]
        edge[1:, :] |= vertical
        edge[:-1, :] |= vertical
        edge[:, 1:] |= horizontal
        edge[:, :-1] |= horizontal
        if self.edge_policy == "outside":
            edge[0, :] |= inside[0, :]
            edge[-1, :] |= inside[-1, :]
            edge[:, 0] |= inside[:, 0]
            edge[:, -1] |= inside[:, -1]
        return edge

    def glyph_indices(self, grid: SampledGrid) -> np.ndarray:
        f, tau = grid.field, grid.threshold
        edge = self.edges(grid)
        # thicker outline where blobs merge
        edge_idx = np.select([f > tau * 1.5, f > tau * 1.2], [4, 3], default=2)
        return np.where(edge, edge_idx, np.where(grid.inside, 1, 0))


class BlocksRenderer(Renderer):
    """Shade blocks by 2x2 sub-cell coverage."""

    mode = RenderMode.BLOCKS
    default_glyphs = BLOCK_GLYPHS
    needs_coverage = True

    def _coverage(self, grid: SampledGrid) -> np.ndarray:
        if grid.coverage is None:
            return np.where(grid.inside, 4, 0)
        return np.clip(grid.coverage, 0, 4)

    def glyph_indices(self, grid: SampledGrid) -> np.ndarray:
        return self._coverage(grid).astype(np.int64)

    def intensity(self, grid: SampledGrid) -> np.ndarray:
        return self._coverage(grid) / 4.0


class GooeyRenderer(Renderer):
    """Rings outside the skin, filled discs inside, a merge glyph at the core."""

    mode = RenderMode.GOOEY
    default_glyphs = GOOEY_GLYPHS
    bands = (0.3, 0.6, 0.9, 1.0, 1.3, 2.0)

    def glyph_indices(self, grid: SampledGrid) -> np.ndarray:
        ratio = np.nan_to_num(grid.field / grid.threshold, nan=0.0)
        return np.digitize(ratio, self.bands)


RENDERERS: Dict[RenderMode, Type[Renderer]] = {
    cls.mode: cls
    for cls in (GradientRenderer, ContourRenderer, SolidRenderer, BlocksRenderer, GooeyRenderer)
}


def get_renderer(mode, **options) -> Renderer:
    """Build the renderer for *mode* (a RenderMode or its name).

    Options not understood by that renderer are ignored, so one option set
    can be reused while cycling modes.
    """
    if not isinstance(mode, RenderMode):
        mode = RenderMode.from_name(mode)
    cls = RENDERERS[mode]
    if cls is not ContourRenderer:
        options.pop("edge_policy", None)
    return cls(**options)


# ---------------------------------------------------------------------------
# Frame helpers
# ---------------------------------------------------------------------------

def render_frame(
    scene: "MetaballScene",
    renderer: Renderer,
    rows: int,
    cols: int,
    mapping: Optional[GridMapping] = None,
) -> Frame:
    """Sample *scene* on a rows x cols grid and render it."""
    if mapping is None:
        mapping = GridMapping.for_scene(scene, rows, cols)
    grid = sample(scene, mapping, coverage=renderer.needs_coverage)
    return renderer.render(grid)


class ModeCycler:
    """Switches render mode every *period* seconds (0 = never).

    Parameters:
        mode:    Starting mode.
        period:  Seconds per mode.
        options: Renderer options passed to :func:`get_renderer`.
    """

    def __init__(self, mode: RenderMode = RenderMode.GRADIENT, period: float = 5.0, **options) -> None:
        self.period = period
        self.options = options
        self.timer = 0.0
        self.set_mode(mode)

    def set_mode(self, mode: RenderMode) -> None:
        self.mode = mode
        self.renderer = get_renderer(mode, **dict(self.options))
        self.timer = 0.0
        logger.debug("Render mode: %s", mode.title)

    def advance(self, dt: float) -> bool:
        """Accumulate *dt*; returns True when the mode changed."""
        if self.period <= 0:
            return False
        self.timer += dt
        if self.timer > self.period:
            self.set_mode(self.mode.next())
            return True
        return False
