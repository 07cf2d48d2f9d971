"""
Adult - career, family, home and money

Ten events share three particle fields: a career ladder that lights up step
by step, wedding confetti drifting down, and a money rain that loops from the
bottom of the canvas back to the top. Most events add one glow centered on
the character; a few also draw a small prop (house keys, exhaust puffs, a
caring heart) through their render handler.
"""

import math

from ..core.easing import bell
from ..core.effects import Glow
from ..core.particles import FieldPolicy, Particle, ParticleShape, scatter_position
from ..core.quality import QualityCaps
from ..core.render import draw_heart, fill_circle, saved
from .base import AnimationInstance, EventBehavior, EventBehaviorTable


CONFETTI_COLORS = ('#FFB6C1', '#FFC0CB', '#FF69B4', '#FF1493')
MONEY_SYMBOLS = ('$', '¥', '€', '£')
LADDER_STEPS = 8

GARDEN_TREE = (200, 420, 30)


class AdultStageAnimation(AnimationInstance):
    """Jobs, weddings, houses, children and investments"""

    name = "adult"
    description = "Adult milestones with career ladders and money rain"

    BACKGROUND = ('#F0F8FF', '#E6E6FA')

    QUALITY_CAPS = {
        'wedding_confetti': QualityCaps(low=15, medium=20),
        'money_rain': QualityCaps(low=12, medium=18),
    }

    EFFECT_SLOTS = (
        'professional_glow', 'love_glow', 'home_glow', 'new_life_glow', 'success_glow',
        'triumph_glow', 'pride_glow', 'satisfaction_glow', 'wealth_glow', 'caring_glow',
    )

    @classmethod
    def build_table(cls) -> EventBehaviorTable:
        return EventBehaviorTable([
            EventBehavior('first_job', 'professional', frozenset({'office'}), update=_first_job),
            EventBehavior('wedding', 'joyful', frozenset({'church'}), update=_wedding),
            EventBehavior('buy_house', 'proud', frozenset({'house'}), update=_buy_house,
                          render=_render_house_keys),
            EventBehavior('child_birth', 'tender', frozenset({'hospital'}), update=_child_birth),
            EventBehavior('promotion', 'successful', frozenset({'office'}), update=_promotion),
            EventBehavior('startup_success', 'triumphant', update=_startup_success),
            EventBehavior('child_graduation', 'proud_parent', update=_child_graduation),
            EventBehavior('buy_car', 'satisfied', update=_buy_car, render=_render_exhaust),
            EventBehavior('investment_success', 'wealthy', update=_investment_success),
            EventBehavior('care_parents', 'caring', frozenset({'hospital'}), update=_care_parents,
                          render=_render_care_heart),
        ])

    def init_fields(self):
        home = self.home

        def step(rng, i):
            return Particle(
                x=home[0] - 100 + i * 25,
                y=home[1] + 50 - i * 15,
                size=20,
                color='#DEB887',
                max_opacity=0.8,
                shape=ParticleShape.CUSTOM,
            )

        def confetti(rng, i):
            x, _ = scatter_position(rng, home, 200)
            return Particle(
                x=x,
                y=home[1] - rng.random() * 200,
                vx=(rng.random() - 0.5) * 4,
                vy=rng.random() * 3 + 1,
                size=rng.random() * 12 + 6,
                color=CONFETTI_COLORS[int(rng.integers(len(CONFETTI_COLORS)))],
                max_opacity=rng.random() * 0.9 + 0.1,
                rotation=rng.random() * 2 * math.pi,
                rotation_speed=(rng.random() - 0.5) * 0.01,
                shape=ParticleShape.CUSTOM,
            )

        def money(rng, i):
            return Particle(
                x=rng.random() * self.width,
                y=-rng.random() * 200,
                vx=(rng.random() - 0.5) * 2,
                vy=rng.random() * 4 + 2,
                size=rng.random() * 20 + 15,
                color='#FFD700',
                max_opacity=rng.random() * 0.8 + 0.2,
                rotation=rng.random() * 2 * math.pi,
                rotation_speed=(rng.random() - 0.5) * 0.005,
                shape=ParticleShape.CUSTOM,
                extra={
                    'symbol': MONEY_SYMBOLS[int(rng.integers(len(MONEY_SYMBOLS)))],
                    'sparkle': rng.random() * 2 * math.pi,
                },
            )

        self.fields.add('career_ladder').spawn(LADDER_STEPS, step)
        self.fields.add('wedding_confetti', gravity=0.02).spawn(30, confetti)
        self.fields.add('money_rain', policy=FieldPolicy.WRAP,
                        bounds=(0.0, 0.0, float(self.width), float(self.height))).spawn(25, money)

    def init_environment(self):
        self.tree_sway = 0.0

    # -------------------------------------------------------------------------

    def update_particles(self, delta_time: float):
        self.fields['wedding_confetti'].tick(delta_time)
        rain = self.fields['money_rain']
        for coin in rain:
            coin.extra['sparkle'] += delta_time * 0.01
        rain.tick(delta_time)

    def update_environment(self, delta_time: float):
        self.tree_sway = math.sin(self.current_time * 0.002 + GARDEN_TREE[0] * 0.01) * 0.1

    def clear_environment(self):
        self.tree_sway = 0.0

    # -------------------------------------------------------------------------

    def draw_environment(self, ctx):
        if 'office' in self.environment:
            _draw_office(ctx)
        if 'church' in self.environment:
            _draw_church(ctx)
        if 'house' in self.environment:
            self._draw_house(ctx)
        if 'hospital' in self.environment:
            _draw_hospital(ctx)

    def _draw_house(self, ctx):
        x, y, w, h = 250, 200, 300, 200
        ctx.fill_style = '#DEB887'
        ctx.fill_rect(x, y, w, h)
        ctx.fill_style = '#8B4513'
        ctx.begin_path()
        ctx.move_to(x - 20, y)
        ctx.line_to(x + w / 2, y - 50)
        ctx.line_to(x + w + 20, y)
        ctx.close_path()
        ctx.fill()
        ctx.fill_style = '#87CEEB'
        ctx.fill_rect(x + 50, y + 50, 40, 30)
        ctx.fill_rect(x + 210, y + 50, 40, 30)
        ctx.fill_style = '#8B4513'
        ctx.fill_rect(x + 135, y + 150, 30, 50)

        tx, ty, size = GARDEN_TREE
        with saved(ctx):
            ctx.translate(tx, ty)
            ctx.rotate(self.tree_sway)
            ctx.fill_style = '#8B4513'
            ctx.fill_rect(-5, 0, 10, 30)
            fill_circle(ctx, 0, -10, size, '#228B22')

        fill_circle(ctx, 580, 430, 8, '#FF69B4')
        ctx.fill_style = '#90EE90'
        ctx.fill_rect(300, 450, 200, 10)

    def particle_drawer(self, field_name: str):
        return _DRAWERS.get(field_name)


def _draw_office(ctx):
    ctx.fill_style = '#DEB887'
    ctx.fill_rect(300, 350, 200, 80)
    ctx.fill_style = '#2F2F2F'
    ctx.fill_rect(350, 320, 40, 30)
    ctx.fill_style = '#000080'
    ctx.fill_rect(352, 322, 36, 20)
    ctx.fill_style = '#FFFFFF'
    for x, y in ((280, 340), (320, 345), (450, 340)):
        ctx.fill_rect(x, y, 15, 20)


def _draw_church(ctx):
    ctx.fill_style = '#DEB887'
    ctx.fill_rect(400, 200, 100, 50)
    for x in (200, 600):
        fill_circle(ctx, x, 250, 15, '#FFB6C1')
    for x in (350, 450):
        ctx.fill_style = '#FFFACD'
        ctx.fill_rect(x, 180, 8, 25)
        fill_circle(ctx, x + 4, 175, 3, '#FF4500')


def _draw_hospital(ctx):
    ctx.fill_style = '#F0F8FF'
    ctx.fill_rect(200, 250, 400, 200)
    ctx.fill_style = '#FFFFFF'
    ctx.fill_rect(300, 350, 80, 40)
    ctx.fill_style = '#2F2F2F'
    ctx.fill_rect(450, 300, 30, 25)
    ctx.fill_style = '#8B4513'
    ctx.fill_rect(250, 380, 25, 30)


# =============================================================================
# Drawers
# =============================================================================

def _draw_step(ctx, step: Particle):
    lit = step.extra.get('lit', False)
    ctx.fill_style = '#FFD700' if lit else step.color
    ctx.fill_rect(0, 0, step.size, 8)


def _draw_confetti(ctx, piece: Particle):
    ctx.fill_style = piece.color
    ctx.fill_rect(-piece.size / 2, -piece.size / 4, piece.size, piece.size / 2)


def _draw_money(ctx, coin: Particle):
    ctx.global_alpha = ctx.global_alpha * (math.sin(coin.extra['sparkle']) * 0.5 + 0.5)
    ctx.fill_style = coin.color
    ctx.font_size = int(coin.size)
    ctx.text_align = 'center'
    ctx.fill_text(coin.extra['symbol'], 0, 0)


_DRAWERS = {
    'career_ladder': _draw_step,
    'wedding_confetti': _draw_confetti,
    'money_rain': _draw_money,
}


# =============================================================================
# Event handlers
# =============================================================================

def _first_job(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    ladder = anim.fields['career_ladder']
    climbed = p * len(ladder)
    for i, step in enumerate(ladder):
        if climbed > i:
            step.opacity = step.max_opacity
            step.extra['lit'] = True

    x, y = anim.character_position
    anim.effects.set('professional_glow', Glow(x, y, 70 * p, 0.6 * bell(p), 'rgba(0, 100, 200, 0.6)'))


def _wedding(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    anim.fields['wedding_confetti'].apply_opacity(lambda c: c.max_opacity * bell(p))

    # Bells ring three times over the ceremony
    rings = int(p * 6)
    x, y = anim.character_position
    anim.effects.set('love_glow', Glow(x, y, 40 + rings * 15, 0.8 * abs(math.sin(p * math.pi * 3)),
                                       'rgba(255, 105, 180, 0.6)'))


def _buy_house(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    x, y = anim.character_position
    anim.effects.set('home_glow', Glow(x, y, 90 * p, 0.5 * p, 'rgba(255, 200, 120, 0.7)'))


def _render_house_keys(anim: AdultStageAnimation, ctx):
    p = anim.progress
    glow = 0.7 * abs(math.sin(p * math.pi * 4))
    x, y = anim.character_position
    with saved(ctx):
        ctx.global_alpha = 0.5 + glow * 0.5
        ctx.translate(x + 30, y - 20)
        ctx.rotate(p * math.pi * 2)
        ctx.stroke_style = '#DAA520'
        ctx.line_width = 3
        ctx.begin_path()
        ctx.arc(0, 0, 6, 0, 2 * math.pi)
        ctx.stroke()
        ctx.fill_style = '#DAA520'
        ctx.fill_rect(5, -1.5, 16, 3)
        ctx.fill_rect(16, 1.5, 3, 4)


def _child_birth(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    anim.character.sway = math.sin(anim.current_time * 0.003) * 5 * p
    x, y = anim.character_position
    anim.effects.set('new_life_glow', Glow(x, y, 100 * p, 0.9 * bell(p), 'rgba(255, 220, 150, 0.8)'))


def _promotion(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    anim.fields['money_rain'].apply_opacity(lambda coin: coin.max_opacity * p)
    anim.character.y = anim.home[1] - 30 * p
    x, y = anim.character_position
    anim.effects.set('success_glow', Glow(x, y, 80 * p, 0.8 * bell(p), 'rgba(255, 215, 0, 0.6)'))


def _startup_success(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    x, y = anim.character_position
    anim.effects.set('triumph_glow', Glow(x, y - p * 150, 40 + 40 * p, 0.8 * p, 'rgba(255, 140, 0, 0.7)'))


def _child_graduation(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    x, y = anim.character_position
    anim.effects.set('pride_glow', Glow(x, y - 40 * p, 70, 0.7 * bell(p), 'rgba(255, 215, 0, 0.6)'))


def _buy_car(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    anim.character.sway = math.sin(anim.current_time * 0.02) * 2 * p
    x, y = anim.character_position
    anim.effects.set('satisfaction_glow', Glow(x, y, 60 * p, 0.5 * bell(p), 'rgba(135, 206, 250, 0.6)'))


def _render_exhaust(anim: AdultStageAnimation, ctx):
    if anim.progress <= 0.3:
        return
    x, y = anim.character_position
    for i in range(5):
        with saved(ctx):
            ctx.global_alpha = 0.5 - i * 0.1
            fill_circle(ctx, x - 50 - i * 10, y + 20, 8 + i * 2, '#A9A9A9')


def _investment_success(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    anim.fields['money_rain'].apply_opacity(lambda coin: coin.max_opacity * p)
    x, y = anim.character_position
    anim.effects.set('wealth_glow', Glow(x, y, 120 * p, 0.8 * bell(p), 'rgba(255, 215, 0, 0.7)'))


def _care_parents(anim: AdultStageAnimation, delta_time: float):
    p = anim.progress
    x, y = anim.character_position
    anim.effects.set('caring_glow', Glow(x, y, 80 * p, 0.5 * p, 'rgba(255, 182, 193, 0.7)'))


def _render_care_heart(anim: AdultStageAnimation, ctx):
    p = anim.progress
    size = 20 + math.sin(p * math.pi * 4) * 5
    alpha = 0.6 * bell(p) + 0.4 * p
    if alpha <= 0:
        return
    x, y = anim.character_position
    with saved(ctx):
        ctx.global_alpha = min(1.0, alpha)
        draw_heart(ctx, x, y - 90, size, '#FF69B4')
