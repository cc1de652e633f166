"""
Metaballs
=========

Animated implicit-surface ("metaball") scenes rendered to a character grid.

Circular blobs drift around a logical plane and bounce off its edges.
Their fields sum as Σ(rᵢ² / dᵢ²); wherever the sum reaches the threshold
τ a point counts as inside the merged shape.  Each frame the field is
sampled once per character cell and drawn in one of five modes:

  - Gradient — density ramp from faint halo to dense core
  - Contour  — outlines only, thicker where blobs merge
  - Solid    — filled shapes with coarse interior shading
  - Blocks   — 2x2 supersampled block glyphs for smoother edges
  - Gooey    — ring and disc glyphs that highlight merge necks
"""

__version__ = "1.0.0"
__author__ = "Metaballs"

from .engine import Blob, MetaballScene, Orbit, SceneParams
from .renderer import Frame, ModeCycler, RenderMode, get_renderer, render_frame
from .sampler import GridMapping, SampledGrid, sample

__all__ = [
    "Blob",
    "Frame",
    "GridMapping",
    "MetaballScene",
    "ModeCycler",
    "Orbit",
    "RenderMode",
    "SampledGrid",
    "SceneParams",
    "get_renderer",
    "render_frame",
    "sample",
]
