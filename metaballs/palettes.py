"""
Glyph palettes and colour schemes.

Glyph palettes are the fixed character sets each render mode draws from.
Colour schemes turn a per-cell intensity (0–1) into an RGB hint by
interpolating between a cold *base* colour and a *hot* colour:

  - base:  colour at intensity 0 (faint field / skin)
  - hot:   colour at intensity 1 (blob cores and merges)
"""

from __future__ import annotations

import colorsys
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

RGB = Tuple[int, int, int]


# ── Glyph palettes ───────────────────────────────────────────────────────

GRADIENT_GLYPHS = " .:-=+*#%@"          # sparse → dense
SOLID_GLYPHS = (" ", "*", "#", "@")     # outside, skin, body, core
CONTOUR_GLYPHS = (" ", ".", "O", "#", "@")  # outside, fill, edge, thick, merge
BLOCK_GLYPHS = " ░▒▓█"                  # 0 %, 25 %, 50 %, 75 %, 100 %
GOOEY_GLYPHS = (" ", "·", "○", "◯", "●", "◉", "◈")


# ── Colour schemes ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class ColorScheme:
    """Immutable two-stop colour ramp."""
    name: str
    base: RGB
    hot: RGB

    def shade(self, intensity: np.ndarray) -> np.ndarray:
        """Map intensities → (..., 3) uint8 RGB."""
        t = np.clip(np.asarray(intensity, dtype=np.float64), 0.0, 1.0)[..., np.newaxis]
        base = np.array(self.base, dtype=np.float64)
        hot = np.array(self.hot, dtype=np.float64)
        return np.clip(base + (hot - base) * t, 0, 255).astype(np.uint8)


SCHEMES: Dict[str, ColorScheme] = {
    "mono": ColorScheme(name="Monochrome", base=(110, 110, 110), hot=(255, 255, 255)),
    "lava": ColorScheme(name="Lava", base=(180, 30, 10), hot=(255, 180, 40)),
    "ocean": ColorScheme(name="Cosmic Blue", base=(20, 40, 180), hot=(80, 180, 255)),
    "acid": ColorScheme(name="Acid Green", base=(30, 160, 20), hot=(180, 255, 60)),
    "nebula": ColorScheme(name="Nebula", base=(120, 20, 160), hot=(220, 100, 255)),
    "gold": ColorScheme(name="Molten Gold", base=(180, 120, 10), hot=(255, 220, 80)),
}

DEFAULT_SCHEME = "mono"


def _clamp_rgb(r: float, g: float, b: float) -> RGB:
    return (
        max(0, min(255, int(r * 255))),
        max(0, min(255, int(g * 255))),
        max(0, min(255, int(b * 255))),
    )


def make_hot_from_base(base: RGB) -> RGB:
    """Generate a 'hot' version — brighter, shifted towards white."""
    h, s, v = colorsys.rgb_to_hsv(base[0]/255, base[1]/255, base[2]/255)
    v2 = min(1.0, v + 0.35)
    s2 = max(0.0, s - 0.2)
    r, g, b = colorsys.hsv_to_rgb(h, s2, v2)
    return _clamp_rgb(r, g, b)


def create_custom_scheme(name: str, base: RGB) -> ColorScheme:
    """Build a scheme from just a base colour."""
    return ColorScheme(name=name, base=base, hot=make_hot_from_base(base))


def parse_rgb(text: str) -> RGB:
    """Parse ``"R,G,B"`` or ``"#rrggbb"``; raises ValueError."""
    text = text.strip()
    if text.startswith("#") and len(text) == 7:
        return tuple(int(text[i:i + 2], 16) for i in (1, 3, 5))
    parts = [int(p) for p in text.split(",")]
    if len(parts) != 3 or not all(0 <= p <= 255 for p in parts):
        raise ValueError(f"Expected R,G,B with components 0-255, got '{text}'")
    return tuple(parts)


# ── Accessors ─────────────────────────────────────────────────────────────

def get_scheme(name: str) -> ColorScheme:
    if name not in SCHEMES:
        available = ", ".join(sorted(SCHEMES.keys()))
        raise KeyError(f"Unknown scheme '{name}'. Available: {available}")
    return SCHEMES[name]


def list_schemes() -> List[str]:
    return sorted(SCHEMES.keys())
