"""
Grid sampler — evaluates the scene field over every cell of a character grid.

Cell (row, col) maps to plane point ``(col · sx, row · sy)``.  One
:class:`GridMapping` is used for a whole frame so that neighbouring cells
are comparable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

if TYPE_CHECKING:
    from .engine import MetaballScene

logger = logging.getLogger(__name__)

# 2x2 supersampling offsets (dx, dy) in cell units
SUBSAMPLE_OFFSETS: Tuple[Tuple[float, float], ...] = (
    (0.0, 0.0), (0.5, 0.0), (0.0, 0.5), (0.5, 0.5),
)


@dataclass(frozen=True)
class GridMapping:
    """Character grid dimensions and their scale onto the logical plane."""
    rows: int
    cols: int
    width: float
    height: float

    def __post_init__(self):
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Grid must be at least 1x1, got {self.cols}x{self.rows}")

    @classmethod
    def for_scene(cls, scene: "MetaballScene", rows: int, cols: int) -> "GridMapping":
        return cls(rows, cols, scene.params.width, scene.params.height)

    @property
    def sx(self) -> float:
        return self.width / self.cols

    @property
    def sy(self) -> float:
        return self.height / self.rows

    def coordinates(self, dx: float = 0.0, dy: float = 0.0) -> Tuple[np.ndarray, np.ndarray]:
        """Plane coordinates of every cell, shifted by (dx, dy) cells."""
        row_idx = np.arange(self.rows, dtype=np.float64)
        col_idx = np.arange(self.cols, dtype=np.float64)
        row_grid, col_grid = np.meshgrid(row_idx, col_idx, indexing="ij")
        return (col_grid + dx) * self.sx, (row_grid + dy) * self.sy


@dataclass
class SampledGrid:
    """One frame's samples.

    Attributes:
        field:     (rows, cols) field value per cell.
        threshold: Isosurface level τ the samples are judged against.
        coverage:  (rows, cols) 2x2 coverage counts 0–4, if sampled.
    """
    field: np.ndarray
    threshold: float
    coverage: Optional[np.ndarray] = None

    @property
    def inside(self) -> np.ndarray:
        return self.field >= self.threshold


def sample_field(scene: "MetaballScene", mapping: GridMapping) -> np.ndarray:
    """Field value at every cell origin → (rows, cols) float64."""
    xs, ys = mapping.coordinates()
    return scene.field_grid(xs, ys)


def sample_coverage(
    scene: "MetaballScene",
    mapping: GridMapping,
    threshold: Optional[float] = None,
) -> np.ndarray:
    """Count of the four sub-cell samples at or above *threshold* → (rows, cols) int."""
    if threshold is None:
        threshold = scene.threshold
    count = np.zeros((mapping.rows, mapping.cols), dtype=np.int64)
    for dx, dy in SUBSAMPLE_OFFSETS:
        xs, ys = mapping.coordinates(dx, dy)
        count += scene.field_grid(xs, ys) >= threshold
    return count


def sample(
    scene: "MetaballScene",
    mapping: GridMapping,
    coverage: bool = False,
    threshold: Optional[float] = None,
) -> SampledGrid:
    """Sample one frame; add coverage counts when *coverage* is set."""
    if threshold is None:
        threshold = scene.threshold
    grid = SampledGrid(sample_field(scene, mapping), threshold)
    if coverage:
        grid.coverage = sample_coverage(scene, mapping, threshold)
    return grid
