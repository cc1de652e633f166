"""
Metaball field evaluation.

The field is the linear superposition Σ(rᵢ² / dᵢ²) over all blobs, with
the horizontal distance scaled by ``ASPECT_RATIO`` so that a blob looks
round on a terminal whose cells are about twice as tall as they are wide.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

import numpy as np

if TYPE_CHECKING:
    from .engine import Blob

# Cell width / cell height.  A horizontal offset of two cells counts the
# same as a vertical offset of one.
ASPECT_RATIO = 0.5

# Floor for the squared distance, in squared plane units.  A query at a
# blob centre yields r² / EPSILON instead of infinity.
EPSILON = 1e-4


def field_at(
    blobs: Iterable["Blob"],
    x: float,
    y: float,
    aspect_ratio: float = ASPECT_RATIO,
    epsilon: float = EPSILON,
) -> float:
    """Summed field of *blobs* at a single point."""
    return sum(b.field_at(x, y, aspect_ratio, epsilon) for b in blobs)


def field_grid(
    blobs: Iterable["Blob"],
    xs: np.ndarray,
    ys: np.ndarray,
    aspect_ratio: float = ASPECT_RATIO,
    epsilon: float = EPSILON,
) -> np.ndarray:
    """Vectorised :func:`field_at` over broadcastable coordinate arrays."""
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    field = np.zeros(np.broadcast(xs, ys).shape, dtype=np.float64)
    for b in blobs:
        dx = (xs - b.x) * aspect_ratio
        dy = ys - b.y
        dist2 = np.maximum(dx * dx + dy * dy, epsilon)
        field += (b.radius * b.radius) / dist2
    return field
