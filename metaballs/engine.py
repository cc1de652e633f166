"""
Metaball scene engine.

Holds blob state, integrates motion and keeps every blob inside the
logical plane.  The scalar field lives in :mod:`metaballs.field`; the
scene only delegates to it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .field import ASPECT_RATIO, EPSILON, field_at, field_grid

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Orbit
# ---------------------------------------------------------------------------

@dataclass
class Orbit:
    """Parametric elliptical path: ``x = cx + ax·cos(fx·t + px)``."""
    cx: float
    cy: float
    ax: float
    ay: float
    fx: float
    fy: float
    px: float = 0.0
    py: float = 0.0

    def position(self, t: float) -> tuple:
        return (
            self.cx + self.ax * math.cos(self.fx * t + self.px),
            self.cy + self.ay * math.cos(self.fy * t + self.py),
        )

    def velocity(self, t: float) -> tuple:
        return (
            -self.ax * self.fx * math.sin(self.fx * t + self.px),
            -self.ay * self.fy * math.sin(self.fy * t + self.py),
        )


# ---------------------------------------------------------------------------
# Blob
# ---------------------------------------------------------------------------

@dataclass
class Blob:
    """A single circular field source in the logical plane."""
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 3.0
    orbit: Optional[Orbit] = None
    time: float = 0.0   # path time, only used with an orbit

    def __post_init__(self):
        if self.radius <= 0:
            logger.debug("Non-positive radius %r clamped", self.radius)
            self.radius = EPSILON
        if self.orbit is not None:
            self._follow_orbit()

    def _follow_orbit(self) -> None:
        self.x, self.y = self.orbit.position(self.time)
        self.vx, self.vy = self.orbit.velocity(self.time)

    def advance(self, dt: float) -> None:
        """Move by ``velocity · dt`` (or along the orbit by *dt* seconds)."""
        if self.orbit is not None:
            self.time += dt
            self._follow_orbit()
            return
        self.x += self.vx * dt
        self.y += self.vy * dt

    def reflect(self, width: float, height: float) -> None:
        """Bounce off the plane edges, clamping position to the wall."""
        if self.x < 0.0:
            self.x = 0.0
            self.vx = abs(self.vx)
        elif self.x > width:
            self.x = width
            self.vx = -abs(self.vx)
        if self.y < 0.0:
            self.y = 0.0
            self.vy = abs(self.vy)
        elif self.y > height:
            self.y = height
            self.vy = -abs(self.vy)

    def field_at(
        self,
        x: float,
        y: float,
        aspect_ratio: float = ASPECT_RATIO,
        epsilon: float = EPSILON,
    ) -> float:
        """Contribution ``r² / d²`` at (x, y)."""
        dx = (x - self.x) * aspect_ratio
        dy = y - self.y
        return (self.radius * self.radius) / max(dx * dx + dy * dy, epsilon)


# ---------------------------------------------------------------------------
# Scene parameters
# ---------------------------------------------------------------------------

@dataclass
class SceneParams:
    """Plane geometry, threshold and blob generation limits.

    The plane defaults to an 80x35 terminal so one
    logical unit equals one cell.
    """
    # Plane
    width: float = 80.0
    height: float = 35.0

    # Field
    threshold: float = 1.0
    aspect_ratio: float = ASPECT_RATIO
    epsilon: float = EPSILON

    # Random blobs
    min_radius: float = 2.5
    max_radius: float = 4.0
    max_speed: float = 12.0   # plane units per second

    # Stepping
    max_step: float = 0.1     # seconds


PRESETS = ("bounce", "orbit")


# ---------------------------------------------------------------------------
# Scene
# ---------------------------------------------------------------------------

class MetaballScene:
    """Owns the blobs, advances them and evaluates the summed field.

    Parameters:
        blob_count: Number of blobs for the ``bounce`` preset.
        params:     Scene parameters (or defaults).
        seed:       RNG seed for reproducibility (None = random).
        preset:     ``"bounce"`` (random, reflecting) or ``"orbit"``.
        blobs:      Explicit blob list; overrides *preset*.
    """

    def __init__(
        self,
        blob_count: int = 5,
        params: Optional[SceneParams] = None,
        seed: Optional[int] = None,
        preset: str = "bounce",
        blobs: Optional[Sequence[Blob]] = None,
    ) -> None:
        if preset not in PRESETS:
            raise KeyError(f"Unknown preset '{preset}'. Available: {', '.join(PRESETS)}")
        self.params = params or SceneParams()
        self.rng = np.random.default_rng(seed)
        self.preset = preset
        self.time: float = 0.0
        self._blob_count = blob_count
        if blobs is not None:
            self.blobs: List[Blob] = list(blobs)
            self._blob_count = len(self.blobs)
            self._contain()
        else:
            self.reset()

    # ── blob management ───────────────────────────────────────────────────

    def reset(self, blob_count: Optional[int] = None) -> None:
        """Recreate the blobs from the preset."""
        if blob_count is not None:
            self._blob_count = blob_count
        self.time = 0.0
        if self.preset == "orbit":
            self.blobs = self._orbit_blobs()
        else:
            self.blobs = self._random_blobs(self._blob_count)
        self._contain()
        logger.info("Scene reset: %d blobs (%s)", len(self.blobs), self.preset)

    def _random_blobs(self, count: int) -> List[Blob]:
        p = self.params
        blobs: List[Blob] = []
        for _ in range(max(count, 0)):
            angle = self.rng.uniform(0.0, math.pi * 2)
            speed = self.rng.uniform(0.3, 1.0) * p.max_speed
            blobs.append(Blob(
                x=self.rng.uniform(0.0, p.width),
                y=self.rng.uniform(0.0, p.height),
                # cells are half as wide as tall, so cover twice the columns
                vx=math.cos(angle) * speed / p.aspect_ratio,
                vy=math.sin(angle) * speed,
                radius=self.rng.uniform(p.min_radius, p.max_radius),
            ))
        return blobs

    def _orbit_blobs(self) -> List[Blob]:
        p = self.params
        cx, cy = p.width / 2.0, p.height / 2.0
        sx, sy = p.width / 80.0, p.height / 35.0
        half_pi = math.pi * 0.5
        # (radius, ax, ay, fx, fy, px, py) on the 80x35 screen
        paths = [
            (4.0, 8.0, 4.0, 0.5, 0.7, -half_pi, 0.0),
            (3.0, 20.0, 10.0, 1.2, 1.2, 0.0, -half_pi),
            (3.5, 25.0, 11.0, 0.8, 0.8, half_pi, 0.0),
            (2.5, 18.0, 8.0, 1.5, 1.5, math.pi, half_pi),
            (3.2, 28.0, 12.0, 0.6, 0.6, math.pi * 1.5, math.pi),
        ]
        return [
            Blob(radius=r, orbit=Orbit(cx, cy, ax * sx, ay * sy, fx, fy, px, py))
            for r, ax, ay, fx, fy, px, py in paths
        ]

    def _contain(self) -> None:
        for b in self.blobs:
            b.reflect(self.params.width, self.params.height)

    @property
    def blob_count(self) -> int:
        return len(self.blobs)

    @property
    def threshold(self) -> float:
        return self.params.threshold

    # ── simulation step ───────────────────────────────────────────────────

    def advance(self, dt: float) -> None:
        """Advance every blob by *dt* seconds and reflect it into bounds."""
        if not math.isfinite(dt) or dt < 0.0:
            logger.debug("Ignoring invalid dt %r", dt)
            dt = 0.0
        self.time += dt
        # split long steps so no blob jumps more than max_step at once
        max_step = self.params.max_step
        n = max(1, math.ceil(dt / max_step)) if max_step > 0 else 1
        step = dt / n
        w, h = self.params.width, self.params.height
        for _ in range(n):
            for b in self.blobs:
                b.advance(step)
                b.reflect(w, h)

    # ── field ─────────────────────────────────────────────────────────────

    def field_at(self, x: float, y: float) -> float:
        """Summed field at a single point."""
        p = self.params
        return field_at(self.blobs, x, y, p.aspect_ratio, p.epsilon)

    def field_grid(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Summed field over broadcastable coordinate arrays."""
        p = self.params
        return field_grid(self.blobs, xs, ys, p.aspect_ratio, p.epsilon)
