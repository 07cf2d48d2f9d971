"""
Birth - the newborn's arrival

Three phases over seven seconds:
- prebirth: soft lights pulse in, sparkles start to twinkle
- birth: sparkles converge on the center, hearts float, a warm aura forms
- appear: the baby bounces into view while everything settles down

Glows and light orbs are drawn with the screen blend.
"""

import math
from typing import Tuple

from ..core.easing import bounce_in, pulse, ramp
from ..core.effects import Glow
from ..core.particles import Particle, ParticleShape
from ..core.phase import PhaseClock
from ..core.quality import QualityCaps
from ..core.render import draw_heart, draw_star
from ..core.utils import ColorUtils
from .base import AnimationInstance, EventBehavior, EventBehaviorTable, scaled_phases


CUTE_COLORS = {
    'warm': '#FFE4E1',
    'gentle': '#F0F8FF',
    'magical': '#FFE4B5',
    'love': '#FFB6C1',
    'pure': '#FFFAF0',
}

SPARKLE_PALETTE = (
    '#FFB6C1', '#FFE4E1', '#F0F8FF', '#FFE4B5',
    '#E6E6FA', '#FFF0F5', '#F5FFFA', '#FFFACD',
)

# prebirth 2s, birth 3s, appear 2s at the default duration
PHASE_WEIGHTS = (('prebirth', 2.0), ('birth', 3.0), ('appear', 2.0))


class BirthAnimation(AnimationInstance):
    """Newborn arrival with converging sparkles and a bouncing entrance"""

    name = "birth"
    description = "Magical arrival of the newborn"

    DEFAULT_DURATION = 7000.0
    BACKGROUND = ('#2C2A4A', '#F4C7D6')

    QUALITY_CAPS = {
        'magical_sparkles': QualityCaps(low=15, medium=20),
        'gentle_lights': QualityCaps(low=3, medium=4),
        'love_hearts': QualityCaps(low=6, medium=8),
    }

    EFFECT_SLOTS = ('soft_glow', 'warmth_aura')

    def build_clock(self, duration: float) -> PhaseClock:
        return PhaseClock(duration, scaled_phases(duration, PHASE_WEIGHTS))

    @classmethod
    def build_table(cls) -> EventBehaviorTable:
        return EventBehaviorTable([
            EventBehavior('birth', 'happy', update=_update_birth),
        ])

    # -------------------------------------------------------------------------

    def init_fields(self):
        center = self.home

        def sparkle(rng, i):
            # Evenly spaced angles, random distance
            angle = i / 30 * 2 * math.pi
            distance = 200 + rng.random() * 100
            return Particle(
                x=center[0] + math.cos(angle) * distance,
                y=center[1] + math.sin(angle) * distance,
                size=rng.random() * 4 + 2,
                color=SPARKLE_PALETTE[int(rng.integers(len(SPARKLE_PALETTE)))],
                max_opacity=rng.random() * 0.8 + 0.4,
                shape=ParticleShape.STAR,
                extra={
                    'speed': rng.random() * 1.5 + 0.5,
                    'twinkle': rng.random() * 2 * math.pi,
                },
            )

        def light(rng, i):
            return Particle(
                x=center[0],
                y=center[1],
                size=0.0,
                color=CUTE_COLORS['warm'] if i % 2 == 0 else CUTE_COLORS['gentle'],
                max_opacity=0.4 - i * 0.05,
                shape=ParticleShape.CUSTOM,
                extra={
                    'max_radius': 80 + i * 20,
                    'angle': i / 6 * 2 * math.pi,
                    'rotation_speed': 0.02 + i * 0.005,
                    'pulse_phase': i * math.pi / 3,
                },
            )

        def heart(rng, i):
            angle = i / 12 * 2 * math.pi
            return Particle(
                x=center[0] + math.cos(angle) * 150,
                y=center[1] + math.sin(angle) * 150,
                size=rng.random() * 6 + 4,
                color=CUTE_COLORS['love'],
                max_opacity=0.7,
                shape=ParticleShape.HEART,
                extra={
                    'float_speed': rng.random() * 0.5 + 0.3,
                    'float_phase': rng.random() * 2 * math.pi,
                },
            )

        self.fields.add('gentle_lights').spawn(6, light)
        self.fields.add('magical_sparkles').spawn(30, sparkle)
        self.fields.add('love_hearts').spawn(12, heart)
        self.character.visible = False

    def get_final_character_position(self) -> Tuple[float, float]:
        return self.home

    # -------------------------------------------------------------------------

    def update_particles(self, delta_time: float):
        for s in self.fields['magical_sparkles']:
            s.x += (self.rng.random() - 0.5) * 0.3
            s.y += (self.rng.random() - 0.5) * 0.3
            s.extra['draw_size'] = s.size * (math.sin(s.extra['twinkle']) * 0.3 + 0.7)

        t = self.current_time
        for light in self.fields['gentle_lights']:
            light.extra['sway'] = (
                math.sin(t * 0.0008 + light.extra['angle']) * 8,
                math.cos(t * 0.0008 + light.extra['angle']) * 8,
            )

        for particle_field in self.fields:
            particle_field.tick(delta_time, move=False)

    def particle_drawer(self, field_name: str):
        return {
            'gentle_lights': _draw_light,
            'magical_sparkles': _draw_sparkle,
            'love_hearts': _draw_floating_heart,
        }.get(field_name)

    def render_environment(self, ctx):
        gradient = ctx.create_radial_gradient(
            self.home[0], self.home[1], 0, self.home[0], self.home[1], max(self.width, self.height)
        )
        gradient.add_color_stop(0, self.BACKGROUND[1])
        gradient.add_color_stop(1, self.BACKGROUND[0])
        ctx.fill_style = gradient
        ctx.fill_rect(0, 0, self.width, self.height)

    def render_particles(self, ctx):
        ctx.composite = 'screen'
        super().render_particles(ctx)

    def render_character(self, ctx):
        if self.current_phase != 'appear':
            return
        super().render_character(ctx)

    def render_overlays(self, ctx):
        ctx.composite = 'screen'
        super().render_overlays(ctx)


# =============================================================================
# Phase handlers
# =============================================================================

def _update_birth(anim: BirthAnimation, delta_time: float):
    handler = _PHASE_HANDLERS[anim.current_phase]
    handler(anim, anim.clock.phase_progress, delta_time)


def _prebirth(anim: BirthAnimation, p: float, delta_time: float):
    t = anim.current_time
    for light in anim.fields['gentle_lights']:
        beat = pulse(t, 1000, light.extra['pulse_phase'])
        light.size = light.extra['max_radius'] * p * (0.3 + beat * 0.7)
        light.opacity = light.max_opacity * p * (0.5 + beat * 0.5)
        light.extra['angle'] += light.extra['rotation_speed']

    for s in anim.fields['magical_sparkles']:
        s.extra['twinkle'] += 0.1
        s.opacity = s.max_opacity * p * 0.5 * (math.sin(s.extra['twinkle']) * 0.5 + 0.5)

    cx, cy = anim.home
    anim.effects.set('soft_glow', Glow(cx, cy, 60 * p, 0.3 * p, CUTE_COLORS['pure']))


def _birth(anim: BirthAnimation, p: float, delta_time: float):
    t = anim.current_time
    cx, cy = anim.home
    for light in anim.fields['gentle_lights']:
        beat = pulse(t, 800, light.extra['pulse_phase'])
        light.size = light.extra['max_radius'] * (0.8 + beat * 0.2)
        light.opacity = light.max_opacity * (0.9 + beat * 0.1)
        light.extra['angle'] += light.extra['rotation_speed']

    for s in anim.fields['magical_sparkles']:
        dx, dy = cx - s.x, cy - s.y
        distance = math.hypot(dx, dy)
        if distance > 3:
            step = s.extra['speed'] * delta_time * 0.01
            s.x += dx / distance * step
            s.y += dy / distance * step
        s.extra['twinkle'] += 0.15
        s.opacity = s.max_opacity * ramp(p, 2) * (math.sin(s.extra['twinkle']) * 0.3 + 0.7)

    for h in anim.fields['love_hearts']:
        h.extra['float_phase'] += h.extra['float_speed'] * delta_time * 0.01
        h.y += math.sin(h.extra['float_phase']) * 0.5
        h.opacity = h.max_opacity * ramp(p, 1.5)

    anim.effects.set('warmth_aura', Glow(cx, cy, 120 * p, 0.5 * p, CUTE_COLORS['warm']))
    anim.effects.set('soft_glow', Glow(cx, cy, 60 + 40 * p, 0.3 + 0.4 * p, CUTE_COLORS['pure']))


def _appear(anim: BirthAnimation, p: float, delta_time: float):
    t = anim.current_time
    cx, cy = anim.home

    anim.character.visible = True
    anim.character.opacity = ramp(p, 2)
    anim.character.scale = bounce_in(ramp(p, 2))

    for light in anim.fields['gentle_lights']:
        beat = pulse(t, 1200, light.extra['pulse_phase'])
        light.opacity = light.max_opacity * (1 - p * 0.6) * (0.7 + beat * 0.3)
        light.size = light.extra['max_radius'] * (1 - p * 0.3)
        light.extra['angle'] += light.extra['rotation_speed'] * 0.5

    for s in anim.fields['magical_sparkles']:
        s.extra['twinkle'] += 0.08
        s.opacity = s.max_opacity * (1 - p * 0.7) * (math.sin(s.extra['twinkle']) * 0.4 + 0.6)

    for h in anim.fields['love_hearts']:
        h.extra['float_phase'] += h.extra['float_speed'] * delta_time * 0.008
        h.y += math.sin(h.extra['float_phase']) * 0.3
        h.opacity = h.max_opacity * (1 - p * 0.8)

    anim.effects.set('warmth_aura', Glow(cx, cy, 120 * (1 - p * 0.3), 0.5 * (1 - p * 0.4), CUTE_COLORS['warm']))
    anim.effects.set('soft_glow', Glow(cx, cy, 100 * (1 - p * 0.2), 0.7 * (1 - p * 0.3), CUTE_COLORS['pure']))


_PHASE_HANDLERS = {
    'prebirth': _prebirth,
    'birth': _birth,
    'appear': _appear,
}


# =============================================================================
# Drawers (origin is at the particle)
# =============================================================================

def _draw_light(ctx, light: Particle):
    if light.size <= 0:
        return
    sx, sy = light.extra.get('sway', (0.0, 0.0))
    gradient = ctx.create_radial_gradient(sx, sy, 0, sx, sy, light.size)
    gradient.add_color_stop(0, light.color)
    gradient.add_color_stop(0.5, ColorUtils.with_alpha(light.color, 0.6))
    gradient.add_color_stop(1, ColorUtils.with_alpha(light.color, 0.0))
    ctx.fill_style = gradient
    ctx.begin_path()
    ctx.arc(sx, sy, light.size, 0, 2 * math.pi)
    ctx.fill()


def _draw_sparkle(ctx, sparkle: Particle):
    size = sparkle.extra.get('draw_size', sparkle.size)
    if size > 0:
        draw_star(ctx, 0, 0, size, points=4, color=sparkle.color, inner_ratio=0.4)


def _draw_floating_heart(ctx, heart: Particle):
    phase = heart.extra['float_phase']
    draw_heart(ctx, math.cos(phase * 0.7) * 3, math.sin(phase) * 8 - heart.size / 2, heart.size, heart.color)
