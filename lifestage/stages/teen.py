"""
Teen - exams, first love, clubs and graduation
"""

import math

from ..core.easing import bell, ramp
from ..core.effects import Drops, Glow, Rays, Rings
from ..core.particles import Particle, ParticleShape, scatter_position
from ..core.quality import QualityCaps
from ..core.render import draw_star, fill_circle, saved
from ..core.utils import ColorUtils
from .base import AnimationInstance, EventBehavior, EventBehaviorTable


NOTE_LABELS = ('A+', 'f(x)', 'Notes', 'Key')
BLACKBOARD_TEXT = 'f(x) = ax^2 + bx + c'

DESKS = ((200, 350, True), (300, 350, False), (500, 350, False), (600, 350, False))

# (x, y, width, height, kind)
CAMPUS_BUILDINGS = (
    (50, 150, 150, 200, 'main'),
    (250, 180, 120, 170, 'library'),
    (600, 160, 140, 190, 'lab'),
)

# (x, y, crown radius)
CAMPUS_TREES = ((400, 380, 40), (500, 390, 35), (150, 400, 45))

CUSTOMERS = ((250, 400, '#FFB6C1'), (550, 410, '#D3D3D3'))


class TeenStageAnimation(AnimationInstance):
    """School years: exams, first love, clubs, choices and a first job"""

    name = "teen"
    description = "Teenage milestones with notes, petals and sparks"

    BACKGROUND = ('#E6E6FA', '#F0F8FF')

    QUALITY_CAPS = {
        'study_notes': QualityCaps(low=12, medium=18),
        'love_petals': QualityCaps(low=15, medium=20),
        'creative_sparks': QualityCaps(low=10, medium=15),
    }

    EFFECT_SLOTS = (
        'focus_intensity', 'blush', 'art_flow', 'decision_rays', 'choice_glow',
        'study_glow', 'trophy_shine', 'work_sweat', 'effort_aura', 'ceremony_glow',
    )

    @classmethod
    def build_table(cls) -> EventBehaviorTable:
        return EventBehaviorTable([
            EventBehavior('entrance_exam', 'concentrated', frozenset({'classroom'}), update=_entrance_exam),
            EventBehavior('first_love', 'shy', frozenset({'campus'}), update=_first_love),
            EventBehavior('club_activity', 'creative', frozenset({'club'}), update=_club_activity),
            EventBehavior('choose_major', 'thoughtful', update=_choose_major),
            EventBehavior('exam_sprint', 'intense', frozenset({'classroom'}), update=_exam_sprint),
            EventBehavior('scholarship', 'proud', update=_scholarship),
            EventBehavior('part_time_job', 'hardworking', frozenset({'workplace'}), update=_part_time_job),
            EventBehavior('graduation', 'nostalgic', frozenset({'campus'}), update=_graduation),
        ])

    def init_fields(self):
        home = self.home
        canvas = (0.0, 0.0, float(self.width), float(self.height))

        def note(rng, i):
            return Particle(
                x=rng.random() * self.width,
                y=rng.random() * self.height,
                vx=(rng.random() - 0.5) * 2,
                vy=(rng.random() - 0.5) * 2,
                size=rng.random() * 20 + 15,
                color=ColorUtils.hsl(rng.random() * 60 + 40, 70, 80),
                max_opacity=rng.random() * 0.8 + 0.2,
                rotation=rng.random() * 2 * math.pi,
                rotation_speed=(rng.random() - 0.5) * 0.02,
                shape=ParticleShape.CUSTOM,
                extra={'label': NOTE_LABELS[int(rng.integers(len(NOTE_LABELS)))]},
            )

        def petal(rng, i):
            x, y = scatter_position(rng, home, 150)
            return Particle(
                x=x, y=y,
                vx=(rng.random() - 0.5) * 3,
                vy=-rng.random() * 4 - 1,
                size=rng.random() * 12 + 6,
                color=ColorUtils.hsl(rng.random() * 60 + 300, 90, 80),
                max_opacity=rng.random() * 0.9 + 0.1,
                rotation=rng.random() * 2 * math.pi,
                rotation_speed=(rng.random() - 0.5) * 0.05,
                shape=ParticleShape.CUSTOM,
                extra={'flutter': rng.random() * 2 * math.pi},
            )

        def spark(rng, i):
            x, y = scatter_position(rng, home, 100)
            return Particle(
                x=x, y=y,
                vx=(rng.random() - 0.5) * 4,
                vy=(rng.random() - 0.5) * 4,
                size=rng.random() * 8 + 4,
                color=ColorUtils.hsl(rng.random() * 120 + 180, 80, 70),
                max_opacity=rng.random() * 0.8 + 0.2,
                shape=ParticleShape.CUSTOM,
                extra={'energy': rng.random(), 'sparkle': rng.random() * 2 * math.pi},
            )

        def star(rng, i):
            return Particle(x=home[0], y=home[1], size=8, color='#FFD700', max_opacity=0.8,
                            shape=ParticleShape.CUSTOM, extra={'twinkle': float(i)})

        def cap(rng, i):
            x, _ = scatter_position(rng, home, 150)
            return Particle(
                x=x,
                y=home[1] - rng.random() * 200,
                vx=(rng.random() - 0.5) * 3,
                vy=-rng.random() * 4 - 2,
                size=rng.random() * 20 + 15,
                color='#2F2F2F',
                rotation=rng.random() * 2 * math.pi,
                rotation_speed=(rng.random() - 0.5) * 0.01,
                shape=ParticleShape.CUSTOM,
            )

        self.fields.add('study_notes', bounce=True, bounds=canvas).spawn(25, note)
        self.fields.add('love_petals', gravity=0.02).spawn(30, petal)
        self.fields.add('creative_sparks').spawn(20, spark)
        self.fields.add('golden_stars').spawn(15 if self.event_key == 'scholarship' else 0, star)
        self.fields.add('graduation_caps').spawn(10 if self.event_key == 'graduation' else 0, cap)

    def init_environment(self):
        self.tree_sway = [0.0] * len(CAMPUS_TREES)

    # -------------------------------------------------------------------------

    def update_particles(self, delta_time: float):
        self.fields['study_notes'].tick(delta_time)

        petals = self.fields['love_petals']
        for p in petals:
            p.vx += math.sin(p.extra['flutter']) * 0.01
        petals.tick(delta_time)

        sparks = self.fields['creative_sparks']
        for s in sparks:
            s.extra['sparkle'] += delta_time * 0.01
            s.size = (4 + math.sin(s.extra['sparkle']) * 2) * s.extra['energy']
        sparks.tick(delta_time)

        self.fields['golden_stars'].tick(delta_time, move=False)
        self.fields['graduation_caps'].tick(delta_time)

    def update_environment(self, delta_time: float):
        t = self.current_time
        self.tree_sway = [math.sin(t * 0.002 + x * 0.01) * 0.1 for x, _, _ in CAMPUS_TREES]

    def clear_environment(self):
        self.init_environment()

    # -------------------------------------------------------------------------

    def draw_environment(self, ctx):
        if 'classroom' in self.environment:
            _draw_classroom(ctx)
        if 'campus' in self.environment:
            self._draw_campus(ctx)
        if 'club' in self.environment:
            _draw_club(ctx)
        if 'workplace' in self.environment:
            _draw_workplace(ctx)

    def _draw_campus(self, ctx):
        for x, y, w, h, kind in CAMPUS_BUILDINGS:
            ctx.fill_style = '#DEB887' if kind == 'main' else '#D2B48C'
            ctx.fill_rect(x, y, w, h)
            ctx.fill_style = '#8B4513'
            ctx.begin_path()
            ctx.move_to(x - 10, y)
            ctx.line_to(x + w / 2, y - 30)
            ctx.line_to(x + w + 10, y)
            ctx.close_path()
            ctx.fill()
            ctx.fill_style = '#87CEEB'
            for i in range(3):
                for j in range(2):
                    ctx.fill_rect(x + 20 + i * 40, y + 30 + j * 50, 25, 30)

        for (x, y, size), sway in zip(CAMPUS_TREES, self.tree_sway):
            with saved(ctx):
                ctx.translate(x, y)
                ctx.rotate(sway)
                ctx.fill_style = '#8B4513'
                ctx.fill_rect(-5, 0, 10, 40)
                fill_circle(ctx, 0, -10, size, '#228B22')

    def particle_drawer(self, field_name: str):
        return _DRAWERS.get(field_name)


def _draw_classroom(ctx):
    ctx.fill_style = '#2F4F4F'
    ctx.fill_rect(100, 200, 600, 100)
    ctx.fill_style = '#FFFFFF'
    ctx.font_size = 16
    ctx.text_align = 'left'
    ctx.fill_text(BLACKBOARD_TEXT, 120, 250)
    for x, y, occupied in DESKS:
        ctx.fill_style = '#DEB887' if occupied else '#F5DEB3'
        ctx.fill_rect(x - 25, y - 15, 50, 30)
        ctx.fill_style = '#8B4513'
        ctx.fill_rect(x - 20, y + 20, 40, 8)


def _draw_club(ctx):
    ctx.fill_style = '#F5F5DC'
    ctx.fill_rect(100, 200, 600, 300)

    # Easel
    ctx.stroke_style = '#8B4513'
    ctx.line_width = 4
    ctx.begin_path()
    ctx.move_to(180, 350)
    ctx.line_to(200, 270)
    ctx.line_to(220, 350)
    ctx.stroke()
    ctx.fill_style = '#FFFFFF'
    ctx.fill_rect(175, 280, 50, 40)

    # Piano
    ctx.fill_style = '#2F2F2F'
    ctx.fill_rect(460, 300, 80, 40)
    ctx.fill_style = '#FFFFFF'
    for i in range(7):
        ctx.fill_rect(465 + i * 10, 335, 8, 15)

    # Computer
    ctx.fill_style = '#C0C0C0'
    ctx.fill_rect(330, 265, 40, 30)
    ctx.fill_style = '#000080'
    ctx.fill_rect(332, 267, 36, 20)


def _draw_workplace(ctx):
    ctx.fill_style = '#DEB887'
    ctx.fill_rect(300, 350, 200, 50)
    ctx.fill_style = '#2F2F2F'
    ctx.fill_rect(350, 330, 40, 20)
    for x, y, color in CUSTOMERS:
        fill_circle(ctx, x, y - 10, 15, color)
        ctx.fill_style = '#4169E1'
        ctx.fill_rect(x - 10, y, 20, 30)


# =============================================================================
# Drawers
# =============================================================================

def _draw_note(ctx, note: Particle):
    s = note.size
    ctx.fill_style = note.color
    ctx.fill_rect(-s / 2, -s / 3, s, s * 2 / 3)
    ctx.fill_style = '#2F2F2F'
    ctx.font_size = max(6, int(s / 3))
    ctx.text_align = 'center'
    ctx.fill_text(note.extra['label'], 0, 0)


def _draw_petal(ctx, petal: Particle):
    ctx.fill_style = petal.color
    ctx.begin_path()
    ctx.ellipse(0, 0, petal.size, petal.size / 2, 0, 0, 2 * math.pi)
    ctx.fill()


def _draw_spark(ctx, spark: Particle):
    if spark.size <= 0:
        return
    ctx.global_alpha = ctx.global_alpha * (math.sin(spark.extra['sparkle']) * 0.5 + 0.5)
    draw_star(ctx, 0, 0, spark.size, points=6, color=spark.color)


def _draw_golden_star(ctx, star: Particle):
    ctx.global_alpha = ctx.global_alpha * (math.sin(star.extra['twinkle']) * 0.5 + 0.5)
    draw_star(ctx, 0, 0, star.size, color=star.color)


def _draw_cap(ctx, cap: Particle):
    s = cap.size
    ctx.fill_style = cap.color
    ctx.fill_rect(-s / 2, -s / 4, s, s / 2)
    ctx.fill_rect(-s / 1.5, 0, s * 1.33, s / 8)


_DRAWERS = {
    'study_notes': _draw_note,
    'love_petals': _draw_petal,
    'creative_sparks': _draw_spark,
    'golden_stars': _draw_golden_star,
    'graduation_caps': _draw_cap,
}


# =============================================================================
# Event handlers
# =============================================================================

def _rhythm(p: float, cycles: float) -> float:
    """0-1 oscillation completing `cycles` half-turns over the animation"""
    return math.sin(p * math.pi * cycles) * 0.5 + 0.5


def _entrance_exam(anim: TeenStageAnimation, delta_time: float):
    p = anim.progress
    writing = _rhythm(p, 8)
    anim.character.sway = math.sin(anim.current_time * 0.02) * 3 * writing
    anim.fields['study_notes'].apply_opacity(lambda n: n.max_opacity * ramp(p, 2))

    x, y = anim.character_position
    anim.effects.set('focus_intensity', Glow(x, y - 20, 60 * p, 0.7 * writing, 'rgba(255, 255, 0, 0.6)'))


def _first_love(anim: TeenStageAnimation, delta_time: float):
    p = anim.progress
    heartbeat = _rhythm(p, 12)
    anim.character.scale = 1 + heartbeat * 0.05

    for petal in anim.fields['love_petals']:
        petal.opacity = petal.max_opacity * bell(p)
        petal.extra['flutter'] += delta_time * 0.01
        petal.size = 6 + math.sin(petal.extra['flutter']) * 2

    x, y = anim.character_position
    head_y = y - anim.shape.head_radius
    anim.effects.set('blush', Glow(x, head_y, anim.shape.head_radius * 1.5, 0.6 * heartbeat,
                                   'rgba(255, 182, 193, 0.6)'))


def _club_activity(anim: TeenStageAnimation, delta_time: float):
    p = anim.progress
    t = anim.current_time
    for spark in anim.fields['creative_sparks']:
        spark.opacity = spark.max_opacity * bell(p)
        spark.extra['energy'] = math.sin(t * 0.01 + spark.x * 0.01) * 0.5 + 0.5
        spark.extra['sparkle'] += delta_time * 0.008

    x, y = anim.character_position
    hue = (t * 0.1) % 360
    anim.effects.set('art_flow', Rings(
        x + math.sin(t * 0.005) * 100, y + math.cos(t * 0.005) * 50,
        30, 0.6 * p, count=5, spacing=10, color=ColorUtils.hsl(hue, 70, 60),
    ))


def _choose_major(anim: TeenStageAnimation, delta_time: float):
    p = anim.progress
    x, y = anim.character_position
    # Rays start one after another, a tenth of the animation apart
    lengths = tuple(80 * max(0.0, p - i * 0.1) for i in range(6))
    anim.effects.set('decision_rays', Rays(x, y - 20, lengths, 0.8 * p, color='#FFD700',
                                           width=4, spread=2 * math.pi))
    anim.effects.set('choice_glow', Glow(x, y, 100 * p, 0.6 * bell(p), 'rgba(255, 215, 0, 0.8)'))


def _exam_sprint(anim: TeenStageAnimation, delta_time: float):
    p = anim.progress
    t = anim.current_time
    intensity = _rhythm(p, 10)
    anim.character.sway = math.sin(t * 0.05) * 2 * intensity
    anim.character.y = anim.home[1] + math.sin(t * 0.03) * intensity

    x, y = anim.character_position
    anim.effects.set('study_glow', Glow(x, y - 20, 70 * p, 0.9 * intensity, 'rgba(255, 255, 0, 0.6)'))

    rng = anim.rng
    for note in anim.fields['study_notes']:
        note.opacity = note.max_opacity * intensity
        note.vx += (rng.random() - 0.5) * 0.5
        note.vy += (rng.random() - 0.5) * 0.5


def _scholarship(anim: TeenStageAnimation, delta_time: float):
    p = anim.progress
    t = anim.current_time
    x, y = anim.character_position
    stars = anim.fields['golden_stars']
    count = len(stars)
    for i, star in enumerate(stars):
        angle = i / max(1, count) * 2 * math.pi
        distance = 60 + math.sin(t * 0.01 + i) * 20
        star.x = x + math.cos(angle) * distance
        star.y = y + math.sin(angle) * distance
        star.size = 8 + math.sin(t * 0.02 + i) * 3
        star.extra['twinkle'] = t * 0.01 + i
        star.opacity = star.max_opacity * bell(p)

    anim.effects.set('trophy_shine', Glow(x, y - 40, 90 * p, 0.9 * bell(p), 'rgba(255, 215, 0, 0.8)'))


def _part_time_job(anim: TeenStageAnimation, delta_time: float):
    p = anim.progress
    rhythm = _rhythm(p, 6)
    anim.character.y = anim.home[1] + math.sin(anim.current_time * 0.01) * 3 * rhythm

    x, y = anim.character_position
    if p > 0.3:
        anim.effects.set('work_sweat', Drops(x, y - 25, 4, 0.6, offset=(p - 0.3) * 30,
                                             color='rgba(135, 206, 235, 0.8)'))
    anim.effects.set('effort_aura', Glow(x, y, 50 * p, 0.5 * rhythm, 'rgba(255, 140, 0, 0.6)'))


def _graduation(anim: TeenStageAnimation, delta_time: float):
    p = anim.progress
    anim.fields['graduation_caps'].apply_opacity(lambda c: c.max_opacity * ramp(p, 5))

    nostalgia = math.sin(p * math.pi * 3) * 0.3 + 0.7
    x, y = anim.character_position
    anim.effects.set('ceremony_glow', Glow(x, y, 120 * p, 0.7 * bell(p) * nostalgia,
                                           'rgba(255, 215, 0, 0.6)'))
