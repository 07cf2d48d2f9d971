"""
Child - eight firsts from walking to the first award

Backdrop pieces (school, playground, pool, stage) are switched on by the
event; everything else is shared particle work: footprints that fade as they
age, books bouncing around the canvas, friendship hearts, pool splashes that
fall under gravity and vanish after a second.
"""

import math
from typing import List

from ..core.easing import bell, ramp, ramp_after
from ..core.effects import Drops, Glow
from ..core.particles import FieldPolicy, Particle, ParticleShape, scatter_position
from ..core.quality import QualityCaps
from ..core.render import saved
from ..core.utils import ColorUtils
from .base import AnimationInstance, EventBehavior, EventBehaviorTable


STEP_INTERVAL = 400.0   # ms between footprints
SPLASH_LIFE = 1000.0

POOL = (150, 350, 500, 200)     # x, y, width, height
SCHOOL = (100, 200, 200, 150)
STAGE_LIGHT_COUNT = 6


class ChildStageAnimation(AnimationInstance):
    """Walking, school, bicycles, friends, swimming, the stage, writing, awards"""

    name = "child"
    description = "Childhood firsts with footprints and flying books"

    BACKGROUND = ('#87CEEB', '#98FB98')

    QUALITY_CAPS = {
        'book_particles': QualityCaps(low=10, medium=15),
        'friendship_hearts': QualityCaps(low=8, medium=12),
    }

    EFFECT_SLOTS = ('handshake_glow', 'trophy_glow', 'stage_lights', 'writing_trail')

    @classmethod
    def build_table(cls) -> EventBehaviorTable:
        return EventBehaviorTable([
            EventBehavior('learn_walk', 'determined', update=_learn_walk),
            EventBehavior('first_kindergarten', 'nervous', frozenset({'school'}), update=_first_kindergarten),
            EventBehavior('learn_bicycle', 'focused', frozenset({'playground'}), update=_learn_bicycle),
            EventBehavior('make_friend', 'joyful', update=_make_friend),
            EventBehavior('learn_swim', 'brave', frozenset({'pool'}), update=_learn_swim),
            EventBehavior('first_performance', 'excited', frozenset({'stage'}), update=_first_performance),
            EventBehavior('learn_write', 'concentrated', update=_learn_write),
            EventBehavior('first_award', 'proud', update=_first_award),
        ], fallback_emotion='happy')

    def init_fields(self):
        home = self.home

        def footstep(rng, i):
            # Parked and invisible until the walk places it
            return Particle(x=0.0, y=0.0, size=15, color='#8B4513', max_opacity=0.8,
                            max_life=2000, shape=ParticleShape.CUSTOM)

        def book(rng, i):
            return Particle(
                x=rng.random() * self.width,
                y=rng.random() * self.height,
                vx=(rng.random() - 0.5) * 3,
                vy=(rng.random() - 0.5) * 3,
                size=rng.random() * 15 + 8,
                color=ColorUtils.hsl(rng.random() * 60 + 200, 70, 60),
                max_opacity=rng.random() * 0.8 + 0.2,
                rotation=rng.random() * 2 * math.pi,
                rotation_speed=(rng.random() - 0.5) * 0.02,
                shape=ParticleShape.CUSTOM,
            )

        def heart(rng, i):
            x, y = scatter_position(rng, home, 100)
            return Particle(
                x=x, y=y,
                vx=(rng.random() - 0.5) * 2,
                vy=-rng.random() * 2 - 1,
                size=rng.random() * 12 + 6,
                color=ColorUtils.hsl(rng.random() * 60 + 300, 80, 70),
                max_opacity=rng.random() * 0.9 + 0.1,
                shape=ParticleShape.HEART,
                extra={'pulse': rng.random() * 2 * math.pi},
            )

        def confetti(rng, i):
            x, _ = scatter_position(rng, home, 100)
            return Particle(
                x=x,
                y=home[1] - rng.random() * 100,
                vx=(rng.random() - 0.5) * 4,
                vy=rng.random() * 3 + 1,
                size=rng.random() * 8 + 3,
                color=ColorUtils.hsl(rng.random() * 360, 80, 60),
                rotation=rng.random() * 2 * math.pi,
                rotation_speed=(rng.random() - 0.5) * 0.01,
                shape=ParticleShape.CUSTOM,
            )

        self.fields.add('footsteps').spawn(10, footstep)
        self.fields.add('book_particles', bounce=True,
                        bounds=(0.0, 0.0, float(self.width), float(self.height))).spawn(20, book)
        self.fields.add('friendship_hearts').spawn(15, heart)
        self.fields.add('splashes', gravity=0.5, policy=FieldPolicy.REMOVE)

        victory = self.fields.add('victory_confetti', policy=FieldPolicy.WRAP,
                                  bounds=(0.0, 0.0, float(self.width), float(self.height)))
        victory.spawn(20 if self.event_key == 'first_award' else 0, confetti)

    def init_environment(self):
        self.swing_angle = 0.0
        self.seesaw_tilt = 0.0
        self.wave_offset = 0.0
        self.light_intensity: List[float] = [0.0] * STAGE_LIGHT_COUNT

    # -------------------------------------------------------------------------

    def update_particles(self, delta_time: float):
        for step in self.fields['footsteps']:
            if step.opacity > 0:
                step.life -= delta_time
                step.opacity = step.max_opacity * step.life_ratio

        self.fields['book_particles'].tick(delta_time)
        self.fields['friendship_hearts'].tick(delta_time)
        self.fields['splashes'].tick(delta_time, opacity=lambda s: s.max_opacity * s.life_ratio)
        self.fields['victory_confetti'].tick(delta_time)

    def update_environment(self, delta_time: float):
        t = self.current_time
        self.swing_angle = math.sin(t * 0.003) * 0.3
        self.seesaw_tilt = math.sin(t * 0.002) * 0.2
        self.wave_offset += delta_time * 0.005

    def clear_environment(self):
        self.init_environment()

    # -------------------------------------------------------------------------

    def draw_environment(self, ctx):
        if 'school' in self.environment:
            _draw_school(ctx)
        if 'playground' in self.environment:
            self._draw_playground(ctx)
        if 'pool' in self.environment:
            self._draw_pool(ctx)
        if 'stage' in self.environment:
            self._draw_stage(ctx)

    def _draw_playground(self, ctx):
        with saved(ctx):
            ctx.translate(200, 350)
            ctx.rotate(self.swing_angle)
            ctx.stroke_style = '#8B4513'
            ctx.line_width = 4
            ctx.begin_path()
            ctx.move_to(-30, -50)
            ctx.line_to(30, -50)
            ctx.move_to(-30, -50)
            ctx.line_to(-30, 0)
            ctx.move_to(30, -50)
            ctx.line_to(30, 0)
            ctx.stroke()
            ctx.fill_style = '#DEB887'
            ctx.fill_rect(-15, -10, 30, 8)

        # Slide
        x, y = 600, 320
        ctx.fill_style = '#FF6B6B'
        ctx.fill_rect(x - 20, y, 40, 80)
        ctx.fill_style = '#FFB6C1'
        ctx.begin_path()
        ctx.move_to(x + 20, y)
        ctx.quadratic_curve_to(x + 60, y + 40, x + 80, y + 80)
        ctx.line_to(x + 70, y + 85)
        ctx.quadratic_curve_to(x + 50, y + 45, x + 10, y + 5)
        ctx.close_path()
        ctx.fill()

        # Seesaw
        with saved(ctx):
            ctx.translate(400, 380)
            ctx.fill_style = '#696969'
            ctx.fill_rect(-6, 0, 12, 20)
            ctx.rotate(self.seesaw_tilt)
            ctx.fill_style = '#4ECDC4'
            ctx.fill_rect(-70, -4, 140, 8)

    def _draw_pool(self, ctx):
        x, y, w, h = POOL
        ctx.fill_style = '#D2B48C'
        ctx.fill_rect(x - 10, y - 10, w + 20, h + 20)
        ctx.fill_style = '#4169E1'
        ctx.fill_rect(x, y, w, h)

        ctx.stroke_style = '#87CEEB'
        ctx.line_width = 2
        for i in range(5):
            row = y + 50 + i * 30
            ctx.begin_path()
            ctx.move_to(x, row)
            for wx in range(x, x + w, 20):
                ctx.line_to(wx, row + math.sin((wx - x) * 0.1 + self.wave_offset + i) * 5)
            ctx.stroke()

    def _draw_stage(self, ctx):
        ctx.fill_style = '#8B4513'
        ctx.fill_rect(100, 400, 600, 100)
        ctx.fill_style = '#8B0000'
        ctx.fill_rect(80, 100, 20, 300)
        ctx.fill_rect(700, 100, 20, 300)
        ctx.fill_rect(100, 100, 600, 20)

        for i, intensity in enumerate(self.light_intensity):
            if intensity <= 0:
                continue
            lx, ly = 100 + i * 120, 100
            color = ColorUtils.hsl(i * 60, 80, 70)
            with saved(ctx):
                ctx.global_alpha = intensity
                beam = ctx.create_linear_gradient(lx, ly, lx, ly + 400)
                beam.add_color_stop(0, color)
                beam.add_color_stop(1, ColorUtils.with_alpha(color, 0.0))
                ctx.fill_style = beam
                ctx.fill_rect(lx - 30, ly, 60, 400)
                ctx.global_alpha = 1.0
                ctx.fill_style = '#2F2F2F'
                ctx.fill_rect(lx - 10, ly - 20, 20, 20)

    def particle_drawer(self, field_name: str):
        return _DRAWERS.get(field_name)


def _draw_school(ctx):
    x, y, w, h = SCHOOL
    ctx.fill_style = '#DEB887'
    ctx.fill_rect(x, y, w, h)
    ctx.fill_style = '#8B4513'
    ctx.begin_path()
    ctx.move_to(x - 20, y)
    ctx.line_to(x + w / 2, y - 40)
    ctx.line_to(x + w + 20, y)
    ctx.close_path()
    ctx.fill()
    ctx.fill_style = '#87CEEB'
    for row in (220, 260):
        for col in (120, 160, 200):
            ctx.fill_rect(col, row, 30, 25)
    ctx.fill_style = '#8B4513'
    ctx.fill_rect(x + w / 2 - 15, y + h - 50, 30, 50)


# =============================================================================
# Drawers
# =============================================================================

def _draw_footstep(ctx, step: Particle):
    ctx.fill_style = step.color
    ctx.fill_rect(-8, -12, 16, 24)
    ctx.fill_rect(-6, -16, 12, 8)


def _draw_book(ctx, book: Particle):
    s = book.size
    ctx.fill_style = book.color
    ctx.fill_rect(-s / 2, -s / 3, s, s * 2 / 3)
    ctx.fill_style = '#FFFFFF'
    ctx.fill_rect(-s / 2 + 2, -s / 3 + 2, s - 4, s * 2 / 3 - 4)


def _draw_confetti(ctx, piece: Particle):
    ctx.fill_style = piece.color
    ctx.fill_rect(-piece.size / 2, -piece.size / 4, piece.size, piece.size / 2)


_DRAWERS = {
    'footsteps': _draw_footstep,
    'book_particles': _draw_book,
    'victory_confetti': _draw_confetti,
}


# =============================================================================
# Event handlers
# =============================================================================

def _learn_walk(anim: ChildStageAnimation, delta_time: float):
    p = anim.progress
    c = anim.character
    c.sway = math.sin(p * math.pi * 2) * 5
    c.y = anim.home[1] + math.sin(p * math.pi * 8) * 2

    if p > 0.1:
        steps = anim.fields['footsteps']
        if len(steps):
            step = steps[int(anim.current_time // STEP_INTERVAL) % len(steps)]
            step.x = c.x + c.sway
            step.y = anim.home[1] + 40
            step.life = step.max_life
            step.opacity = step.max_opacity


def _first_kindergarten(anim: ChildStageAnimation, delta_time: float):
    p = anim.progress
    mp = ramp(p, 1.2)
    anim.character.x = anim.home[0] - 200 * mp
    if mp > 0.3:
        anim.fields['book_particles'].apply_opacity(lambda b: b.max_opacity * (mp - 0.3) * 1.43)
    # Nervous jitter
    anim.character.scale = 1 + math.sin(p * math.pi * 6) * 0.05


def _learn_bicycle(anim: ChildStageAnimation, delta_time: float):
    rp = ramp(anim.progress, 1.5)
    anim.character.x = anim.home[0] - 50 + math.sin(rp * math.pi) * 100
    anim.character.sway = math.sin(anim.current_time * 0.01) * 3 * rp


def _make_friend(anim: ChildStageAnimation, delta_time: float):
    p = anim.progress
    for heart in anim.fields['friendship_hearts']:
        heart.opacity = heart.max_opacity * bell(p)
        heart.extra['pulse'] += delta_time * 0.005
        heart.size = 6 + math.sin(heart.extra['pulse']) * 3

    x, y = anim.character_position
    anim.effects.set('handshake_glow', Glow(x + 30, y, 60 * p, 0.7 * bell(p), 'rgba(255, 182, 193, 0.8)'))


def _learn_swim(anim: ChildStageAnimation, delta_time: float):
    p = anim.progress
    c = anim.character
    c.sway = math.sin(p * math.pi * 6) * 8
    c.y = anim.home[1] + math.sin(p * math.pi * 3) * 5

    if p > 0.2:
        x, y = c.position
        anim.fields['splashes'].emit(_splash(anim.rng, x, y))


def _splash(rng, x: float, y: float) -> Particle:
    splash = Particle(
        x=x + (rng.random() - 0.5) * 50,
        y=y + 20,
        vx=(rng.random() - 0.5) * 4,
        vy=-rng.random() * 6 - 2,
        size=rng.random() * 15 + 5,
        color='#87CEEB',
        max_opacity=0.8,
        max_life=SPLASH_LIFE,
    )
    splash.opacity = splash.max_opacity
    return splash


def _first_performance(anim: ChildStageAnimation, delta_time: float):
    p = anim.progress
    t = anim.current_time
    anim.light_intensity = [
        ramp(max(0.0, t - i * 200) / 1000) * (0.5 + math.sin(t * 0.01 + i) * 0.5)
        for i in range(STAGE_LIGHT_COUNT)
    ]
    anim.character.scale = 1 + math.sin(p * math.pi * 4) * 0.1
    anim.character.y = anim.home[1] + math.sin(p * math.pi * 8) * 10

    x, y = anim.character_position
    spotlight = sum(anim.light_intensity) / STAGE_LIGHT_COUNT
    anim.effects.set('stage_lights', Glow(x, y, 110, 0.5 * spotlight, '#FFFACD'))


def _learn_write(anim: ChildStageAnimation, delta_time: float):
    p = anim.progress
    if p > 0.3:
        x, y = anim.character_position
        anim.effects.set('writing_trail', Drops(x, y - 10, 5, 0.8, offset=ramp_after(p, 0.3) * 40,
                                                color='#2F4F4F'))


def _first_award(anim: ChildStageAnimation, delta_time: float):
    p = anim.progress
    anim.fields['victory_confetti'].apply_opacity(lambda piece: piece.max_opacity * ramp(p, 4))
    x, y = anim.character_position
    anim.effects.set('trophy_glow', Glow(x, y - 30, 80 * p, 0.9 * bell(p), 'rgba(255, 215, 0, 0.9)'))
