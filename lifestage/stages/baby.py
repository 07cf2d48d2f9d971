"""
Baby - six first milestones in the nursery

Hearts drift up around the baby and respawn next to it when they run out of
life; golden sparkles twinkle in place and are lit up by the events that
call for a bit of celebration.
"""

import math
from typing import List

from ..core.easing import bell, ramp
from ..core.effects import Glow, Rings
from ..core.particles import FieldPolicy, Particle, ParticleShape, scatter_position
from ..core.quality import QualityCaps
from ..core.render import draw_cloud, draw_star, draw_sun, fill_circle, saved
from ..core.utils import ColorUtils
from .base import AnimationInstance, EventBehavior, EventBehaviorTable


# Toys wobble in place; (kind, x, y, color)
TOYS = (
    ('teddy', 200, 380, '#8B4513'),
    ('ball', 600, 370, '#FF6B6B'),
    ('blocks', 150, 390, '#4ECDC4'),
)

# (kind, x, y, size)
WALL_DECORATIONS = (
    ('cloud', 100, 100, 30),
    ('cloud', 700, 120, 25),
    ('sun', 400, 80, 40),
)

CRIB_POSITION = (300, 350)
MOBILE_ANCHOR = (400, 150)


class BabyStageAnimation(AnimationInstance):
    """Smiles, rolling over, crawling, standing and the first word"""

    name = "baby"
    description = "Nursery milestones with floating hearts"

    BACKGROUND = ('#FFE4E1', '#FFF8DC')

    QUALITY_CAPS = {
        'heart_particles': QualityCaps(low=10, medium=15),
        'sparkles': QualityCaps(low=15, medium=20),
    }

    EFFECT_SLOTS = ('recognition_glow', 'sound_waves', 'speech_glow')

    @classmethod
    def build_table(cls) -> EventBehaviorTable:
        return EventBehaviorTable([
            EventBehavior('first_smile', 'happy', frozenset({'crib'}), update=_first_smile),
            EventBehavior('learn_rollover', 'focused', update=_learn_rollover),
            EventBehavior('first_crawl', 'curious', update=_first_crawl),
            EventBehavior('recognize_mom', 'loving', update=_recognize_mom),
            EventBehavior('first_stand', 'determined', update=_first_stand),
            EventBehavior('first_mama', 'excited', update=_first_mama),
        ], fallback_emotion='neutral')

    def init_fields(self):
        character = self.character

        def heart(rng, i):
            # Respawns gather around wherever the baby is now
            x, y = scatter_position(rng, character.position, 100)
            return Particle(
                x=x, y=y,
                vx=(rng.random() - 0.5) * 2,
                vy=-rng.random() * 3 - 1,
                size=rng.random() * 8 + 4,
                color=ColorUtils.hsl(rng.random() * 60 + 300, 80, 70),
                max_opacity=rng.random() * 0.8 + 0.2,
                max_life=rng.random() * 2000 + 2000,
                shape=ParticleShape.HEART,
            )

        def sparkle(rng, i):
            x, y = scatter_position(rng, self.home, 150)
            return Particle(
                x=x, y=y,
                size=rng.random() * 4 + 2,
                color=ColorUtils.hsl(rng.random() * 60 + 40, 90, 80),
                max_opacity=rng.random() * 0.9 + 0.1,
                extra={
                    'twinkle': rng.random() * 2 * math.pi,
                    'twinkle_speed': rng.random() * 0.02 + 0.01,
                },
            )

        self.fields.add('heart_particles', policy=FieldPolicy.RESPAWN).spawn(20, heart)
        self.fields.add('sparkles').spawn(30, sparkle)

    def init_environment(self):
        self.mobile_rotation = 0.0
        self.toy_bounce: List[float] = [0.0] * len(TOYS)

    # -------------------------------------------------------------------------

    def update_particles(self, delta_time: float):
        self.fields['heart_particles'].tick(delta_time)
        sparkles = self.fields['sparkles']
        for s in sparkles:
            s.extra['twinkle'] += s.extra['twinkle_speed'] * delta_time
        sparkles.tick(delta_time, move=False)

    def update_environment(self, delta_time: float):
        self.mobile_rotation += delta_time * 0.001
        t = self.current_time
        self.toy_bounce = [math.sin(t * 0.003 + x * 0.01) * 2 for _, x, _, _ in TOYS]

    def clear_environment(self):
        self.mobile_rotation = 0.0
        self.toy_bounce = [0.0] * len(TOYS)

    # -------------------------------------------------------------------------

    def draw_environment(self, ctx):
        for kind, x, y, size in WALL_DECORATIONS:
            if kind == 'cloud':
                draw_cloud(ctx, x - size, y, size / 30)
            else:
                draw_sun(ctx, x, y, size * 0.5)

        if 'crib' in self.environment:
            _draw_crib(ctx, *CRIB_POSITION)

        for (kind, x, y, color), bounce in zip(TOYS, self.toy_bounce):
            with saved(ctx):
                ctx.translate(x, y + bounce)
                if kind == 'teddy':
                    fill_circle(ctx, 0, 0, 15, color)
                    fill_circle(ctx, 0, -20, 10, color)
                elif kind == 'ball':
                    fill_circle(ctx, 0, 0, 12, color)
                else:
                    ctx.fill_style = color
                    ctx.fill_rect(-8, -8, 16, 16)

        self._draw_mobile(ctx)

    def _draw_mobile(self, ctx):
        with saved(ctx):
            ctx.translate(*MOBILE_ANCHOR)
            ctx.rotate(self.mobile_rotation)
            ctx.stroke_style = '#8B7355'
            ctx.line_width = 2
            ctx.begin_path()
            ctx.move_to(0, 0)
            ctx.line_to(0, -30)
            ctx.stroke()
            for i in range(4):
                angle = i / 4 * 2 * math.pi
                x, y = 50 * math.cos(angle), 30 * math.sin(angle)
                if i % 2 == 0:
                    draw_star(ctx, x, y, 8, color='#FFD700')
                else:
                    fill_circle(ctx, x, y, 6, '#87CEEB')

    def particle_drawer(self, field_name: str):
        if field_name == 'sparkles':
            return _draw_twinkle
        return None


def _draw_crib(ctx, x: float, y: float):
    ctx.fill_style = '#DEB887'
    ctx.stroke_style = '#8B7355'
    ctx.line_width = 2
    ctx.fill_rect(x - 60, y - 20, 120, 40)
    ctx.stroke_rect(x - 60, y - 20, 120, 40)
    for i in range(8):
        bar_x = x - 50 + i * 12
        ctx.begin_path()
        ctx.move_to(bar_x, y - 20)
        ctx.line_to(bar_x, y - 60)
        ctx.stroke()


def _draw_twinkle(ctx, sparkle: Particle):
    ctx.global_alpha = ctx.global_alpha * (math.sin(sparkle.extra['twinkle']) * 0.5 + 0.5)
    fill_circle(ctx, 0, 0, sparkle.size, sparkle.color)


# =============================================================================
# Event handlers
# =============================================================================

def _first_smile(anim: BabyStageAnimation, delta_time: float):
    p = anim.progress
    anim.character.scale = 1 + math.sin(p * math.pi) * 0.1
    anim.fields['heart_particles'].apply_opacity(lambda h: h.max_opacity * ramp(p, 2))


def _learn_rollover(anim: BabyStageAnimation, delta_time: float):
    rp = ramp(anim.progress, 1.5)
    anim.character.rotation = rp * math.pi
    # Sparkles burst once the roll is nearly done
    if rp > 0.8:
        anim.fields['sparkles'].apply_opacity(lambda s: s.max_opacity * (rp - 0.8) * 5)


def _first_crawl(anim: BabyStageAnimation, delta_time: float):
    p = anim.progress
    start_x = anim.home[0] - 50
    anim.character.x = start_x + 100 * p

    # The first ten sparkles mark the trail behind the baby
    if p > 0.2:
        for i, s in enumerate(anim.fields['sparkles'].particles[:10]):
            s.x = start_x + (anim.character.x - start_x) * (i / 10)
            s.opacity = s.max_opacity * 0.5


def _recognize_mom(anim: BabyStageAnimation, delta_time: float):
    p = anim.progress
    t = anim.current_time
    for h in anim.fields['heart_particles']:
        h.opacity = h.max_opacity * bell(p)
        h.size = 4 + math.sin(t * 0.01 + h.x) * 2

    x, y = anim.character_position
    anim.effects.set('recognition_glow', Glow(x, y, 80 * p, 0.6 * bell(p), 'rgba(255, 182, 193, 0.8)'))


def _first_stand(anim: BabyStageAnimation, delta_time: float):
    sp = ramp(anim.progress, 1.2)
    anim.character.y = anim.home[1] - sp * 20

    if sp > 0.5:
        for s in anim.fields['sparkles']:
            s.opacity = s.max_opacity * (sp - 0.5) * 2
            s.extra['twinkle'] += s.extra['twinkle_speed'] * delta_time

    anim.character.sway = math.sin(anim.current_time * 0.005) * 5 * sp


def _first_mama(anim: BabyStageAnimation, delta_time: float):
    p = anim.progress
    waves = math.sin(p * math.pi * 4) * 0.5 + 0.5
    x, y = anim.character_position
    anim.effects.set('sound_waves', Rings(x, y - 15, 50 + waves * 30, 0.4 * bell(p),
                                          count=3, spacing=20, color='#87CEEB'))
    anim.effects.set('speech_glow', Glow(x, y - 15, 60 * p, 0.8 * waves, 'rgba(135, 206, 235, 0.8)'))

