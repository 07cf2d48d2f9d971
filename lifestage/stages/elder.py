"""
Elder - retirement, family and looking back

Balloons rise for the retirement party, keepsakes drift around the canvas
while reminiscing, and small points of light pulse around the character
when passing wisdom on. Writing a memoir stacks up pages that keep turning.
"""

import math

from ..core.easing import bell, ramp_after
from ..core.effects import Glow, Pages, Wash
from ..core.particles import Particle, ParticleShape, scatter_position
from ..core.quality import QualityCaps
from ..core.render import fill_circle, saved
from ..core.utils import ColorUtils
from .base import AnimationInstance, EventBehavior, EventBehaviorTable, orbit


BALLOON_COLORS = ('#FF69B4', '#87CEEB', '#FFD700', '#98FB98')
KEEPSAKES = ('photo', 'letter', 'medal', 'flower')
SEPIA = '#704214'
MEMOIR_PAGES = 8

LIVING_ROOM = (200, 250, 400, 200)
BENCH = (400, 380, 100, 40)
DESK = (350, 350, 150, 80)

# (x, y, color)
FLOWERS = (
    (150, 420, '#FF69B4'),
    (250, 430, '#FFD700'),
    (550, 425, '#FF6347'),
    (650, 415, '#DA70D6'),
)

PARK_PATH = ((100, 400), (250, 380), (400, 410), (550, 385), (700, 390))

# (x, y, size, kind)
PARK_TREES = (
    (120, 300, 40, 'oak'),
    (280, 290, 30, 'pine'),
    (520, 295, 35, 'oak'),
    (680, 285, 30, 'pine'),
)


class ElderStageAnimation(AnimationInstance):
    """Retirement, grandchildren, memories, teaching and a quiet life"""

    name = "elder"
    description = "Golden years with balloons, keepsakes and wisdom lights"

    BACKGROUND = ('#FFF8DC', '#F5DEB3')

    QUALITY_CAPS = {
        'retirement_balloons': QualityCaps(low=6, medium=9),
        'memory_fragments': QualityCaps(low=10, medium=15),
        'wisdom_light': QualityCaps(low=8, medium=12),
    }

    EFFECT_SLOTS = (
        'celebration_glow', 'family_warmth', 'nostalgia_fade',
        'teaching_glow', 'peaceful_glow', 'memoir_pages',
    )

    @classmethod
    def build_table(cls) -> EventBehaviorTable:
        return EventBehaviorTable([
            EventBehavior('retirement', 'celebratory', update=_retirement),
            EventBehavior('grandchildren', 'loving', frozenset({'home'}), update=_grandchildren),
            EventBehavior('reminisce', 'nostalgic', frozenset({'garden'}), update=_reminisce),
            EventBehavior('teach_wisdom', 'wise', frozenset({'library'}), update=_teach_wisdom),
            EventBehavior('peaceful_life', 'peaceful', frozenset({'park'}), update=_peaceful_life),
            EventBehavior('write_memoir', 'reflective', frozenset({'library'}), update=_write_memoir),
        ], fallback_emotion='serene')

    def init_fields(self):
        home = self.home

        def balloon(rng, i):
            x, _ = scatter_position(rng, home, 100)
            return Particle(
                x=x,
                y=home[1] + rng.random() * 100,
                vx=(rng.random() - 0.5),
                vy=-rng.random() * 2 - 0.5,
                size=rng.random() * 15 + 10,
                color=BALLOON_COLORS[i % len(BALLOON_COLORS)],
                max_opacity=rng.random() * 0.8 + 0.2,
                shape=ParticleShape.CUSTOM,
                extra={
                    'string_length': rng.random() * 30 + 20,
                    'sway': rng.random() * 2 * math.pi,
                },
            )

        def keepsake(rng, i):
            return Particle(
                x=rng.random() * self.width,
                y=rng.random() * self.height,
                vx=(rng.random() - 0.5) * 1.5,
                vy=(rng.random() - 0.5) * 1.5,
                size=rng.random() * 25 + 15,
                color='#F5F5DC',
                max_opacity=rng.random() * 0.7 + 0.3,
                rotation=rng.random() * 2 * math.pi,
                rotation_speed=(rng.random() - 0.5) * 0.02,
                shape=ParticleShape.CUSTOM,
                extra={
                    'kind': KEEPSAKES[int(rng.integers(len(KEEPSAKES)))],
                    'fade': rng.random() * 2 * math.pi,
                },
            )

        def light(rng, i):
            x, y = orbit(home, rng.random() * 75, rng.random() * 2 * math.pi)
            return Particle(
                x=x, y=y,
                size=rng.random() * 10 + 5,
                color=ColorUtils.hsl(rng.random() * 60 + 40, 80, 80),
                max_opacity=rng.random() * 0.9 + 0.1,
                extra={
                    'pulse': rng.random() * 2 * math.pi,
                    'pulse_speed': rng.random() * 0.02 + 0.01,
                },
            )

        self.fields.add('retirement_balloons').spawn(12, balloon)
        self.fields.add('memory_fragments', bounce=True,
                        bounds=(0.0, 0.0, float(self.width), float(self.height))).spawn(20, keepsake)
        self.fields.add('wisdom_light').spawn(15, light)

    # -------------------------------------------------------------------------

    def update_particles(self, delta_time: float):
        balloons = self.fields['retirement_balloons']
        for b in balloons:
            b.extra['sway'] += delta_time * 0.003
            b.x += math.sin(b.extra['sway']) * 0.5
        balloons.tick(delta_time)

        fragments = self.fields['memory_fragments']
        for f in fragments:
            f.extra['fade'] += delta_time * 0.005
        fragments.tick(delta_time)

        lights = self.fields['wisdom_light']
        for light in lights:
            light.extra['pulse'] += light.extra['pulse_speed'] * delta_time
        lights.tick(delta_time, move=False)

    # -------------------------------------------------------------------------

    def draw_environment(self, ctx):
        t = self.current_time
        if 'home' in self.environment:
            _draw_living_room(ctx)
        if 'garden' in self.environment:
            _draw_garden(ctx, t)
        if 'library' in self.environment:
            _draw_library(ctx)
        if 'park' in self.environment:
            _draw_park(ctx, t)

    def particle_drawer(self, field_name: str):
        return _DRAWERS.get(field_name)


# =============================================================================
# Set pieces
# =============================================================================

def _draw_living_room(ctx):
    x, y, w, h = LIVING_ROOM
    ctx.fill_style = '#FAEBD7'
    ctx.fill_rect(x, y, w, h)
    ctx.stroke_style = '#8B7355'
    ctx.line_width = 2
    ctx.stroke_rect(x, y, w, h)

    # Sofa and coffee table
    ctx.fill_style = '#A0522D'
    ctx.fill_rect(x + 20, y + h - 70, 140, 50)
    ctx.fill_rect(x + 20, y + h - 90, 140, 20)
    ctx.fill_style = '#DEB887'
    ctx.fill_rect(x + 200, y + h - 50, 80, 30)

    # Grandchildren next to the sofa
    for i, color in enumerate(('#FFB6C1', '#87CEEB')):
        cx = x + 300 + i * 40
        fill_circle(ctx, cx, y + h - 80, 10, '#FFE4C4')
        ctx.fill_style = color
        ctx.fill_rect(cx - 8, y + h - 70, 16, 30)


def _draw_garden(ctx, t: float):
    x, y, w, h = BENCH
    ctx.fill_style = '#8B4513'
    ctx.fill_rect(x, y, w, h / 4)
    ctx.fill_rect(x, y - h / 2, w, h / 6)
    ctx.fill_rect(x + 5, y, 8, h)
    ctx.fill_rect(x + w - 13, y, 8, h)

    for fx, fy, color in FLOWERS:
        sway = math.sin(t * 0.002 + fx * 0.01) * 0.02
        with saved(ctx):
            ctx.translate(fx, fy)
            ctx.rotate(sway)
            ctx.stroke_style = '#228B22'
            ctx.line_width = 2
            ctx.begin_path()
            ctx.move_to(0, 0)
            ctx.line_to(0, -25)
            ctx.stroke()
            for i in range(5):
                angle = i / 5 * 2 * math.pi
                fill_circle(ctx, math.cos(angle) * 5, -25 + math.sin(angle) * 5, 4, color)
            fill_circle(ctx, 0, -25, 3, '#FFD700')


def _draw_library(ctx):
    for shelf in range(3):
        shelf_y = 120 + shelf * 70
        ctx.fill_style = '#8B4513'
        ctx.fill_rect(50, shelf_y + 50, 200, 8)
        for i in range(10):
            ctx.fill_style = ColorUtils.hsl((shelf * 10 + i) * 30 % 360, 60, 50)
            ctx.fill_rect(55 + i * 19, shelf_y + 10, 15, 40)

    x, y, w, h = DESK
    ctx.fill_style = '#8B4513'
    ctx.fill_rect(x, y, w, h / 6)
    ctx.fill_rect(x + 10, y, 10, h)
    ctx.fill_rect(x + w - 20, y, 10, h)

    # Paper, pen, glasses and a closed book on the desk
    ctx.fill_style = '#FFFFFF'
    ctx.fill_rect(x + 20, y - 4, 40, 4)
    ctx.stroke_style = '#000080'
    ctx.line_width = 2
    ctx.begin_path()
    ctx.move_to(x + 65, y - 2)
    ctx.line_to(x + 85, y - 8)
    ctx.stroke()
    ctx.stroke_style = '#333333'
    ctx.begin_path()
    ctx.arc(x + 100, y - 5, 4, 0, 2 * math.pi)
    ctx.stroke()
    ctx.begin_path()
    ctx.arc(x + 110, y - 5, 4, 0, 2 * math.pi)
    ctx.stroke()
    ctx.fill_style = '#800000'
    ctx.fill_rect(x + 120, y - 8, 22, 8)


def _draw_park(ctx, t: float):
    ctx.stroke_style = '#D2B48C'
    ctx.line_width = 20
    ctx.line_cap = 'round'
    ctx.begin_path()
    for i, (px, py) in enumerate(PARK_PATH):
        if i == 0:
            ctx.move_to(px, py)
        else:
            ctx.line_to(px, py)
    ctx.stroke()

    for x, y, size, kind in PARK_TREES:
        with saved(ctx):
            ctx.translate(x, y)
            ctx.rotate(math.sin(t * 0.001 + x * 0.01) * 0.05)
            ctx.fill_style = '#8B4513'
            ctx.fill_rect(-8, 0, 16, 50)
            if kind == 'pine':
                ctx.fill_style = '#006400'
                ctx.begin_path()
                ctx.move_to(0, -30)
                ctx.line_to(-size / 2, 10)
                ctx.line_to(size / 2, 10)
                ctx.close_path()
                ctx.fill()
            else:
                fill_circle(ctx, 0, -10, size, '#228B22')


# =============================================================================
# Drawers (origin is at the particle)
# =============================================================================

def _draw_balloon(ctx, balloon: Particle):
    fill_circle(ctx, 0, 0, balloon.size, balloon.color)
    ctx.stroke_style = '#8B4513'
    ctx.line_width = 1
    ctx.begin_path()
    ctx.move_to(0, balloon.size)
    ctx.line_to(0, balloon.size + balloon.extra['string_length'])
    ctx.stroke()


def _draw_keepsake(ctx, keepsake: Particle):
    ctx.global_alpha = ctx.global_alpha * (math.sin(keepsake.extra['fade']) * 0.3 + 0.7)
    size = keepsake.size
    kind = keepsake.extra['kind']
    if kind == 'photo':
        ctx.fill_style = '#F5F5DC'
        ctx.fill_rect(-size / 2, -size / 3, size, size * 2 / 3)
        ctx.stroke_style = '#8B4513'
        ctx.line_width = 2
        ctx.stroke_rect(-size / 2, -size / 3, size, size * 2 / 3)
    elif kind == 'letter':
        ctx.fill_style = '#FFFFFF'
        ctx.fill_rect(-size / 2, -size / 3, size, size * 2 / 3)
        ctx.stroke_style = '#2F2F2F'
        ctx.line_width = 1
        for i in range(3):
            ctx.begin_path()
            ctx.move_to(-size / 3, -size / 6 + i * 5)
            ctx.line_to(size / 3, -size / 6 + i * 5)
            ctx.stroke()
    elif kind == 'medal':
        fill_circle(ctx, 0, 0, size / 3, '#FFD700')
        ctx.fill_style = '#8B0000'
        ctx.fill_rect(-2, -size / 2, 4, size / 2)
    else:
        for i in range(5):
            angle = i / 5 * 2 * math.pi
            fill_circle(ctx, math.cos(angle) * size / 6, math.sin(angle) * size / 6, size / 8, '#FF69B4')
        fill_circle(ctx, 0, 0, size / 4, '#FF69B4')


def _draw_wisdom_light(ctx, light: Particle):
    intensity = math.sin(light.extra['pulse']) * 0.5 + 0.5
    ctx.global_alpha = ctx.global_alpha * intensity
    halo = ctx.create_radial_gradient(0, 0, 0, 0, 0, light.size * 3)
    halo.add_color_stop(0, ColorUtils.with_alpha(light.color, 0.6))
    halo.add_color_stop(1, ColorUtils.with_alpha(light.color, 0.0))
    ctx.fill_style = halo
    ctx.begin_path()
    ctx.arc(0, 0, light.size * 3, 0, 2 * math.pi)
    ctx.fill()
    fill_circle(ctx, 0, 0, light.size, light.color)


_DRAWERS = {
    'retirement_balloons': _draw_balloon,
    'memory_fragments': _draw_keepsake,
    'wisdom_light': _draw_wisdom_light,
}


# =============================================================================
# Event handlers
# =============================================================================

def _retirement(anim: ElderStageAnimation, delta_time: float):
    p = anim.progress
    anim.fields['retirement_balloons'].apply_opacity(lambda b: b.max_opacity * bell(p))
    x, y = anim.character_position
    anim.effects.set('celebration_glow', Glow(x, y, 100 * p, 0.7 * bell(p), 'rgba(255, 215, 0, 0.6)'))


def _grandchildren(anim: ElderStageAnimation, delta_time: float):
    p = anim.progress
    x, y = anim.character_position
    anim.effects.set('family_warmth', Glow(x, y, 120 * p, 0.5 * p, 'rgba(255, 182, 193, 0.5)'))
    anim.character.sway = math.sin(anim.current_time * 0.002) * 3 * p


def _reminisce(anim: ElderStageAnimation, delta_time: float):
    p = anim.progress
    anim.fields['memory_fragments'].apply_opacity(lambda f: f.max_opacity * bell(p))
    # Sepia tint swells and settles twice over the memory
    intensity = 0.4 * abs(math.sin(2 * math.pi * p))
    anim.effects.set('nostalgia_fade', Wash(SEPIA, p * 0.3 * intensity))


def _teach_wisdom(anim: ElderStageAnimation, delta_time: float):
    p = anim.progress
    anim.fields['wisdom_light'].apply_opacity(lambda light: light.max_opacity * bell(p))
    x, y = anim.character_position
    anim.effects.set('teaching_glow', Glow(x, y, 90 * p, 0.8 * bell(p), 'rgba(255, 255, 0, 0.6)'))


def _peaceful_life(anim: ElderStageAnimation, delta_time: float):
    p = anim.progress
    x, y = anim.character_position
    anim.effects.set('peaceful_glow', Glow(x, y, 80 * p, 0.4 * p, 'rgba(135, 206, 235, 0.4)'))
    anim.character.scale = math.sin(anim.current_time * 0.001) * 0.1 + 0.9


def _write_memoir(anim: ElderStageAnimation, delta_time: float):
    p = anim.progress
    if p <= 0.2:
        return
    written = ramp_after(p, 0.2, 1.25)
    x, y = anim.character_position
    anim.effects.set('memoir_pages', Pages(
        x, y - 50,
        count=max(1, int(written * MEMOIR_PAGES)),
        turn=(written * MEMOIR_PAGES) % 1.0,
        opacity=0.7 * written,
    ))
