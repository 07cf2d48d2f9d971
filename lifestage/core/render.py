"""
Render Pipeline & shared drawing helpers

Every animation draws its frame in the same four layers:

    environment -> particles -> character -> overlays

Each layer runs between a ctx.save() / ctx.restore() pair, so transforms,
alpha and blend modes set by one layer never reach the next one, or the
next frame. A layer has nothing to draw when its backing state is absent.
"""

import math
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Dict, Sequence

from .effects import Drops, EffectSlots, Glow, Pages, Rays, Rings, Wash
from .particles import Particle, ParticleField, ParticleShape
from .utils import ColorUtils


# =============================================================================
# Pipeline
# =============================================================================

class Layer(Enum):
    ENVIRONMENT = "environment"
    PARTICLES = "particles"
    CHARACTER = "character"
    OVERLAYS = "overlays"


RENDER_ORDER = (Layer.ENVIRONMENT, Layer.PARTICLES, Layer.CHARACTER, Layer.OVERLAYS)


@contextmanager
def saved(ctx):
    """Bracket drawing in ctx.save() / ctx.restore(), restoring even if drawing raises"""
    ctx.save()
    try:
        yield ctx
    finally:
        ctx.restore()


class RenderPipeline:
    """
    Fixed-order layer renderer.

    The target provides one method per layer: render_environment,
    render_particles, render_character and render_overlays, each taking ctx.
    """

    def __init__(self, order: Sequence[Layer] = RENDER_ORDER):
        self.order = tuple(order)

    def render(self, ctx, target):
        for layer in self.order:
            draw = getattr(target, f"render_{layer.value}")
            with saved(ctx):
                draw(ctx)


# =============================================================================
# Shapes
# =============================================================================

def fill_circle(ctx, x: float, y: float, radius: float, color: str):
    ctx.fill_style = color
    ctx.begin_path()
    ctx.arc(x, y, max(0.0, radius), 0, 2 * math.pi)
    ctx.fill()


def draw_heart(ctx, x: float, y: float, size: float, color: str):
    """Heart whose top notch sits at (x, y + size / 4)"""
    half = size / 2
    ctx.fill_style = color
    ctx.begin_path()
    ctx.move_to(x, y + size / 4)
    ctx.bezier_curve_to(x, y, x - half, y, x - half, y + size / 4)
    ctx.bezier_curve_to(x - half, y + half, x, y + size * 0.75, x, y + size)
    ctx.bezier_curve_to(x, y + size * 0.75, x + half, y + half, x + half, y + size / 4)
    ctx.bezier_curve_to(x + half, y, x, y, x, y + size / 4)
    ctx.fill()


def draw_star(
    ctx,
    x: float,
    y: float,
    radius: float,
    points: int = 5,
    color: str = '#FFD700',
    inner_ratio: float = 0.5
):
    ctx.fill_style = color
    ctx.begin_path()
    for i in range(points * 2):
        r = radius if i % 2 == 0 else radius * inner_ratio
        angle = i * math.pi / points - math.pi / 2
        px = x + math.cos(angle) * r
        py = y + math.sin(angle) * r
        if i == 0:
            ctx.move_to(px, py)
        else:
            ctx.line_to(px, py)
    ctx.close_path()
    ctx.fill()


def draw_cloud(ctx, x: float, y: float, scale: float = 1.0, color: str = '#FFFFFF'):
    ctx.fill_style = color
    ctx.begin_path()
    for dx, dy, r in ((0, 0, 20), (25, -10, 25), (50, 0, 20), (25, 8, 18)):
        ctx.move_to(x + (dx + r) * scale, y + dy * scale)
        ctx.arc(x + dx * scale, y + dy * scale, r * scale, 0, 2 * math.pi)
    ctx.fill()


def draw_sun(ctx, x: float, y: float, radius: float, color: str = '#FFD700'):
    fill_circle(ctx, x, y, radius, color)
    ctx.stroke_style = color
    ctx.line_width = 3
    for i in range(8):
        angle = i * math.pi / 4
        ctx.begin_path()
        ctx.move_to(x + math.cos(angle) * (radius + 5), y + math.sin(angle) * (radius + 5))
        ctx.line_to(x + math.cos(angle) * (radius + 15), y + math.sin(angle) * (radius + 15))
        ctx.stroke()


def draw_background(ctx, width: float, height: float, top: str, bottom: str):
    """Vertical two-stop gradient over the whole canvas"""
    gradient = ctx.create_linear_gradient(0, 0, 0, height)
    gradient.add_color_stop(0, top)
    gradient.add_color_stop(1, bottom)
    ctx.fill_style = gradient
    ctx.fill_rect(0, 0, width, height)


# =============================================================================
# Particles
# =============================================================================

ParticleDrawer = Callable[[object, Particle], None]


def _draw_particle_shape(ctx, p: Particle):
    if p.shape is ParticleShape.HEART:
        draw_heart(ctx, 0, -p.size / 2, p.size, p.color)
    elif p.shape is ParticleShape.STAR:
        draw_star(ctx, 0, 0, p.size, color=p.color)
    else:
        fill_circle(ctx, 0, 0, p.size, p.color)


def draw_field(ctx, particle_field: ParticleField, drawer: ParticleDrawer = None):
    """
    Draw every visible particle of a field.

    Each particle is drawn in its own save/restore with the origin moved to
    the particle and rotated by its rotation. Custom-shaped particles need a
    drawer; without one they fall back to a circle.
    """
    for p in particle_field:
        if p.opacity <= 0:
            continue
        with saved(ctx):
            ctx.global_alpha = p.opacity
            ctx.translate(p.x, p.y)
            if p.rotation:
                ctx.rotate(p.rotation)
            if drawer is not None:
                drawer(ctx, p)
            else:
                _draw_particle_shape(ctx, p)


# =============================================================================
# Overlays
# =============================================================================

def draw_glow(ctx, glow: Glow):
    if glow.radius <= 0 or glow.intensity <= 0:
        return
    gradient = ctx.create_radial_gradient(glow.x, glow.y, 0, glow.x, glow.y, glow.radius)
    gradient.add_color_stop(0, ColorUtils.with_alpha(glow.color, min(1.0, glow.intensity)))
    gradient.add_color_stop(1, ColorUtils.with_alpha(glow.color, 0.0))
    ctx.fill_style = gradient
    ctx.begin_path()
    ctx.arc(glow.x, glow.y, glow.radius, 0, 2 * math.pi)
    ctx.fill()


def draw_rings(ctx, rings: Rings):
    if rings.opacity <= 0:
        return
    ctx.stroke_style = rings.color
    ctx.line_width = 2
    for i in range(rings.count):
        radius = rings.radius + i * rings.spacing
        ctx.global_alpha = max(0.0, rings.opacity * (1 - i / max(1, rings.count)))
        ctx.begin_path()
        ctx.arc(rings.x, rings.y, radius, 0, 2 * math.pi)
        ctx.stroke()


def draw_rays(ctx, rays: Rays):
    if rays.opacity <= 0 or not rays.lengths:
        return
    ctx.global_alpha = min(1.0, rays.opacity)
    ctx.stroke_style = rays.color
    ctx.line_width = rays.width
    ctx.line_cap = 'round'
    count = len(rays.lengths)
    for i, length in enumerate(rays.lengths):
        if length <= 0:
            continue
        # Fan upwards, centered on straight up
        angle = -math.pi / 2 + (i - (count - 1) / 2) * (rays.spread / max(1, count))
        ctx.begin_path()
        ctx.move_to(rays.x, rays.y)
        ctx.line_to(rays.x + math.cos(angle) * length, rays.y + math.sin(angle) * length)
        ctx.stroke()


def draw_drops(ctx, drops: Drops):
    if drops.opacity <= 0:
        return
    ctx.global_alpha = min(1.0, drops.opacity)
    for i in range(drops.count):
        dx = (i - (drops.count - 1) / 2) * 12
        dy = drops.offset + (i % 2) * 6
        ctx.fill_style = drops.color
        ctx.begin_path()
        ctx.move_to(drops.x + dx, drops.y + dy - 5)
        ctx.quadratic_curve_to(drops.x + dx + 4, drops.y + dy + 2, drops.x + dx, drops.y + dy + 3)
        ctx.quadratic_curve_to(drops.x + dx - 4, drops.y + dy + 2, drops.x + dx, drops.y + dy - 5)
        ctx.fill()


def draw_pages(ctx, pages: Pages):
    if pages.opacity <= 0:
        return
    ctx.global_alpha = min(1.0, pages.opacity)
    ctx.stroke_style = '#8B7355'
    ctx.line_width = 1
    for i in range(pages.count):
        ctx.fill_style = pages.color
        ctx.fill_rect(pages.x - 20 + i * 2, pages.y - 25 - i * 2, 40, 50)
        ctx.stroke_rect(pages.x - 20 + i * 2, pages.y - 25 - i * 2, 40, 50)
    # Turning page narrows as it flips over the spine
    width = 40 * math.cos(max(0.0, min(1.0, pages.turn)) * math.pi)
    ctx.fill_style = '#FFFFFF'
    ctx.fill_rect(pages.x, pages.y - 25 - pages.count * 2, width, 50)


def draw_wash(ctx, wash: Wash, width: float = 800, height: float = 600):
    if wash.opacity <= 0:
        return
    ctx.global_alpha = min(1.0, wash.opacity)
    ctx.fill_style = wash.color
    ctx.fill_rect(0, 0, width, height)


_OVERLAY_DRAWERS: Dict[type, Callable] = {
    Glow: draw_glow,
    Rings: draw_rings,
    Rays: draw_rays,
    Drops: draw_drops,
    Pages: draw_pages,
}


def draw_overlays(ctx, slots: EffectSlots, width: float = 800, height: float = 600):
    """Draw every filled effect slot; empty slots are skipped"""
    for _, record in slots.active():
        with saved(ctx):
            if isinstance(record, Wash):
                draw_wash(ctx, record, width, height)
            else:
                _OVERLAY_DRAWERS[type(record)](ctx, record)
