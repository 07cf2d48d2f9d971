"""
Utility functions for color parsing and small math helpers
"""

import colorsys
import math
import re
from typing import Tuple

import numpy as np
from PIL import ImageColor


RGBA = Tuple[int, int, int, float]

_RGBA_RE = re.compile(r'^rgba?\(\s*([^)]*)\)$', re.IGNORECASE)
_HSLA_RE = re.compile(r'^hsla?\(\s*([^)]*)\)$', re.IGNORECASE)


class ColorUtils:
    """CSS color parsing and manipulation"""

    @staticmethod
    def parse(color: str) -> RGBA:
        """
        Parse a CSS color string into (r, g, b, alpha).

        Channels are 0-255 ints, alpha is a 0-1 float. Accepts everything
        Pillow's ImageColor understands plus rgba()/hsla() with a fractional
        alpha component, which ImageColor rejects.
        """
        text = color.strip()

        match = _RGBA_RE.match(text)
        if match:
            parts = [p.strip() for p in match.group(1).split(',')]
            if len(parts) not in (3, 4):
                raise ValueError(f"Bad rgb color: {color}")
            r, g, b = (int(round(float(p.rstrip('%')))) for p in parts[:3])
            a = float(parts[3]) if len(parts) == 4 else 1.0
            return (
                int(np.clip(r, 0, 255)),
                int(np.clip(g, 0, 255)),
                int(np.clip(b, 0, 255)),
                float(np.clip(a, 0.0, 1.0)),
            )

        match = _HSLA_RE.match(text)
        if match:
            parts = [p.strip() for p in match.group(1).split(',')]
            if len(parts) not in (3, 4):
                raise ValueError(f"Bad hsl color: {color}")
            h = float(parts[0].rstrip('deg')) % 360
            s = float(parts[1].rstrip('%')) / 100
            l = float(parts[2].rstrip('%')) / 100
            a = float(parts[3]) if len(parts) == 4 else 1.0
            r, g, b = ColorUtils.hsl_to_rgb(h, s, l)
            return (r, g, b, float(np.clip(a, 0.0, 1.0)))

        rgb = ImageColor.getrgb(text)
        if len(rgb) == 4:
            return (rgb[0], rgb[1], rgb[2], rgb[3] / 255)
        return (rgb[0], rgb[1], rgb[2], 1.0)

    @staticmethod
    def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
        """Convert HSL (0-360, 0-1, 0-1) to RGB (0-255)"""
        r, g, b = colorsys.hls_to_rgb((h % 360) / 360, np.clip(l, 0, 1), np.clip(s, 0, 1))
        return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))

    @staticmethod
    def hsl(h: float, s: float, l: float, alpha: float = None) -> str:
        """Build an hsl()/hsla() string; s and l are percentages"""
        if alpha is None:
            return f"hsl({h:.0f}, {s:.0f}%, {l:.0f}%)"
        return f"hsla({h:.0f}, {s:.0f}%, {l:.0f}%, {alpha:.3f})"

    @classmethod
    def with_alpha(cls, color: str, alpha: float) -> str:
        """Return color as an rgba() string with its alpha multiplied by alpha"""
        r, g, b, a = cls.parse(color)
        a = float(np.clip(a * alpha, 0.0, 1.0))
        return f"rgba({r}, {g}, {b}, {a:.3f})"

    @classmethod
    def lerp_color(cls, c1: str, c2: str, t: float) -> str:
        """Blend two colors in RGB space, t clamped to 0-1"""
        t = MathUtils.clamp(t, 0.0, 1.0)
        r1, g1, b1, a1 = cls.parse(c1)
        r2, g2, b2, a2 = cls.parse(c2)
        r = int(round(r1 + (r2 - r1) * t))
        g = int(round(g1 + (g2 - g1) * t))
        b = int(round(b1 + (b2 - b1) * t))
        a = a1 + (a2 - a1) * t
        if a >= 1.0:
            return f"#{r:02X}{g:02X}{b:02X}"
        return f"rgba({r}, {g}, {b}, {a:.3f})"


class MathUtils:
    """Small scalar helpers shared by the stage animations"""

    @staticmethod
    def clamp(value: float, min_val: float, max_val: float) -> float:
        if math.isnan(value):
            return min_val
        return max(min_val, min(max_val, value))

    @staticmethod
    def lerp(a: float, b: float, t: float) -> float:
        return a + (b - a) * t
