"""
Canvas - Immediate-mode 2D drawing context

A small raster drawing surface with the state model of an HTML canvas:
a save/restore stack holding the transform, alpha, blend mode and styles,
path building with transforms applied as points are added, and linear or
radial gradients evaluated in user space at paint time.

Shapes are rasterised into a coverage mask with Pillow's ImageDraw and then
composited onto a premultiplied float RGBA buffer with numpy.

Supported composite modes:
- source-over: normal alpha blending (default)
- screen: brightening blend used for glows
- lighter: additive, clamped to 1
"""

import math
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .utils import ColorUtils


Point = Tuple[float, float]

COMPOSITE_MODES = ('source-over', 'screen', 'lighter')

_TEXT_ANCHORS = {
    'left': 'ls',
    'start': 'ls',
    'center': 'ms',
    'right': 'rs',
    'end': 'rs',
}


# =============================================================================
# Gradients
# =============================================================================

class Gradient:
    """Color ramp with CSS-style color stops"""

    def __init__(self):
        self._offsets: List[float] = []
        self._colors: List[Tuple[float, float, float, float]] = []

    def add_color_stop(self, offset: float, color: str):
        offset = float(np.clip(offset, 0.0, 1.0))
        r, g, b, a = ColorUtils.parse(color)
        # Stops with equal offsets keep insertion order
        index = len([o for o in self._offsets if o <= offset])
        self._offsets.insert(index, offset)
        self._colors.insert(index, (r / 255, g / 255, b / 255, a))

    def sample(self, t: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Sample the ramp.

        Returns:
            (rgb, alpha) - rgb has shape t.shape + (3,), alpha has t.shape
        """
        t = np.clip(t, 0.0, 1.0)
        if not self._offsets:
            return np.zeros(t.shape + (3,), dtype=np.float32), np.zeros(t.shape, dtype=np.float32)

        offsets = np.array(self._offsets, dtype=np.float32)
        colors = np.array(self._colors, dtype=np.float32)
        channels = [np.interp(t, offsets, colors[:, c]) for c in range(4)]
        rgb = np.stack(channels[:3], axis=-1).astype(np.float32)
        return rgb, channels[3].astype(np.float32)

    def parameter(self, ux: np.ndarray, uy: np.ndarray) -> np.ndarray:
        raise NotImplementedError


class LinearGradient(Gradient):
    def __init__(self, x0: float, y0: float, x1: float, y1: float):
        super().__init__()
        self.start = (x0, y0)
        self.end = (x1, y1)

    def parameter(self, ux: np.ndarray, uy: np.ndarray) -> np.ndarray:
        dx = self.end[0] - self.start[0]
        dy = self.end[1] - self.start[1]
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            return np.zeros_like(ux)
        return ((ux - self.start[0]) * dx + (uy - self.start[1]) * dy) / length_sq


class RadialGradient(Gradient):
    """
    Radial ramp between two circles.

    Evaluated as concentric rings around the outer circle's center, which is
    exact whenever both circles share a center (the only way the engine
    builds them).
    """

    def __init__(self, x0: float, y0: float, r0: float, x1: float, y1: float, r1: float):
        super().__init__()
        self.inner = (x0, y0, max(0.0, r0))
        self.outer = (x1, y1, max(0.0, r1))

    def parameter(self, ux: np.ndarray, uy: np.ndarray) -> np.ndarray:
        cx, cy, r1 = self.outer
        r0 = self.inner[2]
        dist = np.hypot(ux - cx, uy - cy)
        span = r1 - r0
        if span <= 0:
            return np.where(dist <= r1, 0.0, 1.0)
        return (dist - r0) / span


Style = Union[str, Gradient]


# =============================================================================
# Canvas
# =============================================================================

class Canvas:
    """
    Raster drawing context.

    Example:
        canvas = Canvas(800, 600, background='#FFFFFF')
        canvas.save()
        canvas.translate(400, 300)
        canvas.fill_style = '#FFB6C1'
        canvas.begin_path()
        canvas.arc(0, 0, 20, 0, 2 * math.pi)
        canvas.fill()
        canvas.restore()
        canvas.to_image().save('frame.png')
    """

    _STATE_FIELDS = (
        'global_alpha', 'composite', 'fill_style', 'stroke_style',
        'line_width', 'line_cap', 'font_size', 'text_align',
    )

    def __init__(self, width: int, height: int, background: Optional[str] = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)

        # Premultiplied RGBA, 0-1
        self._buffer = np.zeros((self.height, self.width, 4), dtype=np.float32)

        self._matrix = np.eye(3, dtype=np.float64)
        self.global_alpha = 1.0
        self.composite = 'source-over'
        self.fill_style: Style = '#000000'
        self.stroke_style: Style = '#000000'
        self.line_width = 1.0
        self.line_cap = 'butt'
        self.font_size = 12.0
        self.text_align = 'left'

        self._stack: List[Tuple[np.ndarray, dict]] = []
        self._subpaths: List[List[Point]] = []
        self._closed: List[bool] = []

        if background is not None:
            self.fill_style = background
            self.fill_rect(0, 0, self.width, self.height)
            self.fill_style = '#000000'

    # -------------------------------------------------------------------------
    # State stack
    # -------------------------------------------------------------------------

    def save(self):
        state = {name: getattr(self, name) for name in self._STATE_FIELDS}
        self._stack.append((self._matrix.copy(), state))

    def restore(self):
        if not self._stack:
            return
        matrix, state = self._stack.pop()
        self._matrix = matrix
        for name, value in state.items():
            setattr(self, name, value)

    @property
    def depth(self) -> int:
        """Number of saved states currently on the stack"""
        return len(self._stack)

    # -------------------------------------------------------------------------
    # Transforms
    # -------------------------------------------------------------------------

    def translate(self, x: float, y: float):
        m = np.array([[1, 0, x], [0, 1, y], [0, 0, 1]], dtype=np.float64)
        self._matrix = self._matrix @ m

    def rotate(self, angle: float):
        c, s = math.cos(angle), math.sin(angle)
        m = np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]], dtype=np.float64)
        self._matrix = self._matrix @ m

    def scale(self, sx: float, sy: float):
        m = np.array([[sx, 0, 0], [0, sy, 0], [0, 0, 1]], dtype=np.float64)
        self._matrix = self._matrix @ m

    def reset_transform(self):
        self._matrix = np.eye(3, dtype=np.float64)

    def _apply(self, x: float, y: float) -> Point:
        m = self._matrix
        return (
            m[0, 0] * x + m[0, 1] * y + m[0, 2],
            m[1, 0] * x + m[1, 1] * y + m[1, 2],
        )

    @property
    def _scale_factor(self) -> float:
        return math.sqrt(abs(np.linalg.det(self._matrix[:2, :2])))

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def begin_path(self):
        self._subpaths = []
        self._closed = []

    def move_to(self, x: float, y: float):
        self._subpaths.append([self._apply(x, y)])
        self._closed.append(False)

    def line_to(self, x: float, y: float):
        if not self._subpaths:
            self.move_to(x, y)
            return
        self._subpaths[-1].append(self._apply(x, y))

    def close_path(self):
        if self._subpaths:
            self._closed[-1] = True

    def _extend(self, points: List[Point]):
        if not points:
            return
        if not self._subpaths or self._closed[-1]:
            self._subpaths.append([])
            self._closed.append(False)
        self._subpaths[-1].extend(points)

    def _segments(self, sweep: float, radius: float) -> int:
        device_radius = radius * self._scale_factor
        return int(np.clip(abs(sweep) * device_radius / 3, 8, 128))

    def arc(
        self,
        x: float,
        y: float,
        radius: float,
        start: float,
        end: float,
        anticlockwise: bool = False
    ):
        self.ellipse(x, y, radius, radius, 0.0, start, end, anticlockwise)

    def ellipse(
        self,
        x: float,
        y: float,
        rx: float,
        ry: float,
        rotation: float,
        start: float,
        end: float,
        anticlockwise: bool = False
    ):
        rx, ry = abs(rx), abs(ry)
        sweep = end - start
        full = 2 * math.pi
        if not anticlockwise:
            sweep = full if sweep >= full else sweep % full
        else:
            sweep = -full if sweep <= -full else -((-sweep) % full)

        n = self._segments(sweep, max(rx, ry))
        cos_r, sin_r = math.cos(rotation), math.sin(rotation)
        points = []
        for i in range(n + 1):
            a = start + sweep * i / n
            ex = rx * math.cos(a)
            ey = ry * math.sin(a)
            points.append(self._apply(x + ex * cos_r - ey * sin_r, y + ex * sin_r + ey * cos_r))
        self._extend(points)

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float):
        if not self._subpaths:
            self.move_to(cpx, cpy)
        p0 = self._subpaths[-1][-1]
        p1 = self._apply(cpx, cpy)
        p2 = self._apply(x, y)
        points = []
        for i in range(1, 17):
            t = i / 16
            u = 1 - t
            points.append((
                u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
                u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1],
            ))
        self._subpaths[-1].extend(points)

    def bezier_curve_to(
        self,
        cp1x: float,
        cp1y: float,
        cp2x: float,
        cp2y: float,
        x: float,
        y: float
    ):
        if not self._subpaths:
            self.move_to(cp1x, cp1y)
        p0 = self._subpaths[-1][-1]
        p1 = self._apply(cp1x, cp1y)
        p2 = self._apply(cp2x, cp2y)
        p3 = self._apply(x, y)
        points = []
        for i in range(1, 21):
            t = i / 20
            u = 1 - t
            points.append((
                u ** 3 * p0[0] + 3 * u * u * t * p1[0] + 3 * u * t * t * p2[0] + t ** 3 * p3[0],
                u ** 3 * p0[1] + 3 * u * u * t * p1[1] + 3 * u * t * t * p2[1] + t ** 3 * p3[1],
            ))
        self._subpaths[-1].extend(points)

    def rect(self, x: float, y: float, w: float, h: float):
        self.move_to(x, y)
        self.line_to(x + w, y)
        self.line_to(x + w, y + h)
        self.line_to(x, y + h)
        self.close_path()

    # -------------------------------------------------------------------------
    # Painting
    # -------------------------------------------------------------------------

    def _new_mask(self) -> Tuple[Image.Image, ImageDraw.ImageDraw]:
        mask = Image.new('L', (self.width, self.height), 0)
        return mask, ImageDraw.Draw(mask)

    def fill(self):
        mask, draw = self._new_mask()
        for points in self._subpaths:
            if len(points) >= 3:
                draw.polygon(points, fill=255)
        self._paint(mask, self.fill_style)

    def stroke(self):
        mask, draw = self._new_mask()
        width = max(1, int(round(self.line_width * self._scale_factor)))
        for points, closed in zip(self._subpaths, self._closed):
            if len(points) < 2:
                continue
            line = list(points) + ([points[0]] if closed else [])
            draw.line(line, fill=255, width=width, joint='curve')
            if self.line_cap == 'round' and not closed and width > 2:
                r = width / 2
                for px, py in (line[0], line[-1]):
                    draw.ellipse([px - r, py - r, px + r, py + r], fill=255)
        self._paint(mask, self.stroke_style)

    def fill_rect(self, x: float, y: float, w: float, h: float):
        mask, draw = self._new_mask()
        corners = [self._apply(x, y), self._apply(x + w, y),
                   self._apply(x + w, y + h), self._apply(x, y + h)]
        draw.polygon(corners, fill=255)
        self._paint(mask, self.fill_style)

    def stroke_rect(self, x: float, y: float, w: float, h: float):
        saved = (self._subpaths, self._closed)
        self.begin_path()
        self.rect(x, y, w, h)
        self.stroke()
        self._subpaths, self._closed = saved

    def clear_rect(self, x: float, y: float, w: float, h: float):
        mask, draw = self._new_mask()
        corners = [self._apply(x, y), self._apply(x + w, y),
                   self._apply(x + w, y + h), self._apply(x, y + h)]
        draw.polygon(corners, fill=255)
        cleared = np.asarray(mask) > 0
        self._buffer[cleared] = 0.0

    def fill_text(self, text: str, x: float, y: float):
        """Draw text anchored at (x, y); text is positioned, not rotated"""
        mask, draw = self._new_mask()
        size = max(1.0, self.font_size * self._scale_factor)
        font = ImageFont.load_default(size=size)
        anchor = _TEXT_ANCHORS.get(self.text_align, 'ls')
        draw.text(self._apply(x, y), str(text), fill=255, font=font, anchor=anchor)
        self._paint(mask, self.fill_style)

    def create_linear_gradient(self, x0: float, y0: float, x1: float, y1: float) -> LinearGradient:
        return LinearGradient(x0, y0, x1, y1)

    def create_radial_gradient(
        self,
        x0: float,
        y0: float,
        r0: float,
        x1: float,
        y1: float,
        r1: float
    ) -> RadialGradient:
        return RadialGradient(x0, y0, r0, x1, y1, r1)

    def _paint(self, mask_img: Image.Image, style: Style):
        bbox = mask_img.getbbox()
        if bbox is None or self.global_alpha <= 0:
            return
        x0, y0, x1, y1 = bbox
        coverage = np.asarray(mask_img, dtype=np.float32)[y0:y1, x0:x1] / 255.0

        if isinstance(style, Gradient):
            ux, uy = self._user_coords(x0, y0, x1, y1)
            rgb, alpha = style.sample(style.parameter(ux, uy))
        else:
            r, g, b, a = ColorUtils.parse(style)
            rgb = np.array([r / 255, g / 255, b / 255], dtype=np.float32)
            alpha = a

        a = coverage * alpha * float(np.clip(self.global_alpha, 0.0, 1.0))
        src = rgb * a[..., None]
        dst = self._buffer[y0:y1, x0:x1]

        if self.composite == 'screen':
            dst[..., :3] = src + dst[..., :3] - src * dst[..., :3]
            dst[..., 3] = a + dst[..., 3] - a * dst[..., 3]
        elif self.composite == 'lighter':
            dst[..., :3] = np.minimum(1.0, src + dst[..., :3])
            dst[..., 3] = np.minimum(1.0, a + dst[..., 3])
        else:
            inv = 1.0 - a
            dst[..., :3] = src + dst[..., :3] * inv[..., None]
            dst[..., 3] = a + dst[..., 3] * inv

    def _user_coords(self, x0: int, y0: int, x1: int, y1: int) -> Tuple[np.ndarray, np.ndarray]:
        """Map device pixel centers in a box back into current user space"""
        ys, xs = np.mgrid[y0:y1, x0:x1]
        dx = xs.astype(np.float64) + 0.5
        dy = ys.astype(np.float64) + 0.5
        inv = np.linalg.inv(self._matrix)
        ux = inv[0, 0] * dx + inv[0, 1] * dy + inv[0, 2]
        uy = inv[1, 0] * dx + inv[1, 1] * dy + inv[1, 2]
        return ux, uy

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def clear(self):
        self._buffer[:] = 0.0

    def to_array(self) -> np.ndarray:
        """Straight-alpha uint8 RGBA array of shape (height, width, 4)"""
        alpha = self._buffer[..., 3:4]
        rgb = np.where(alpha > 1e-6, self._buffer[..., :3] / np.maximum(alpha, 1e-6), 0.0)
        out = np.concatenate([rgb, alpha], axis=-1)
        return (np.clip(out, 0.0, 1.0) * 255 + 0.5).astype(np.uint8)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.to_array(), 'RGBA')

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        r, g, b, a = self.to_array()[int(y), int(x)]
        return (int(r), int(g), int(b), int(a))
