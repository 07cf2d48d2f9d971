"""
Host contract tests for every stage animation.
"""

import logging
import math

import pytest

from conftest import RecordingContext, run_frames
from lifestage.core.canvas import Canvas
from lifestage.stages import (
    STAGES,
    AdultStageAnimation,
    BabyStageAnimation,
    BirthAnimation,
    ChildStageAnimation,
    ElderStageAnimation,
    TeenStageAnimation,
    create_animation,
    get_stage,
    list_stages,
)

STAGE_NAMES = ['birth', 'baby', 'child', 'teen', 'adult', 'elder']

ALL_EVENTS = [
    (cls.name, event)
    for cls in (BirthAnimation, BabyStageAnimation, ChildStageAnimation,
                TeenStageAnimation, AdultStageAnimation, ElderStageAnimation)
    for event in cls.event_types()
]


# =============================================================================
# Registry
# =============================================================================

class TestRegistry:

    def test_list_stages_in_life_order(self):
        assert list_stages() == STAGE_NAMES

    def test_aliases(self):
        assert get_stage('Newborn') is BirthAnimation
        assert get_stage('senior') is ElderStageAnimation
        assert STAGES['kid'] is ChildStageAnimation

    def test_unknown_stage_lists_available(self):
        with pytest.raises(ValueError, match="baby"):
            get_stage('toddler')

    def test_create_animation_passes_config(self):
        anim = create_animation('child', event_type='learn_swim', seed=7, width=640)
        assert isinstance(anim, ChildStageAnimation)
        assert anim.event_key == 'learn_swim'
        assert anim.width == 640

    def test_character_centered_on_custom_canvas(self):
        anim = create_animation('elder', seed=7, width=640, height=480)
        assert anim.character_position == (320, 240)
        anim.update(2000, 16)
        glow = anim.effects.get('celebration_glow')
        assert (glow.x, glow.y) == (320, 240)


# =============================================================================
# Host contract
# =============================================================================

class TestContract:

    @pytest.mark.parametrize("stage, event", ALL_EVENTS)
    def test_every_event_updates_and_renders(self, make_animation, stage, event):
        anim = make_animation(stage, event_type=event)
        ctx = RecordingContext()
        run_frames(anim, ctx, frames=3, step=500)
        anim.update(anim.duration / 2, 16)
        anim.render(ctx)
        assert ctx.depth == 0
        assert ctx.unbalanced_restores == 0
        assert ctx.count('save') == ctx.count('restore')

    @pytest.mark.parametrize("stage", STAGE_NAMES)
    def test_not_complete_until_duration(self, make_animation, stage):
        anim = make_animation(stage)
        anim.update(anim.duration - 1, 16)
        assert not anim.is_animation_complete()
        anim.update(anim.duration, 16)
        assert anim.is_animation_complete()
        assert anim.progress == 1.0

    @pytest.mark.parametrize("stage", STAGE_NAMES)
    def test_completion_latches(self, make_animation, stage):
        anim = make_animation(stage)
        anim.update(anim.duration + 100, 16)
        anim.update(10, 16)
        assert anim.is_animation_complete()

    @pytest.mark.parametrize("stage", STAGE_NAMES)
    def test_unknown_event_falls_back(self, make_animation, stage, caplog):
        with caplog.at_level(logging.WARNING):
            anim = make_animation(stage, event_type='xyz')
        default = type(anim).event_types()[0]
        assert anim.event_key == default
        assert anim.config.event_type == 'xyz'
        ctx = RecordingContext()
        anim.update(16, 16)
        anim.render(ctx)
        assert ctx.depth == 0
        assert "xyz" in caplog.text

    @pytest.mark.parametrize("stage, emotion", [
        ('baby', 'neutral'),
        ('child', 'happy'),
        ('teen', 'concentrated'),
        ('adult', 'professional'),
        ('elder', 'serene'),
    ])
    def test_unknown_event_emotion(self, make_animation, stage, emotion):
        assert make_animation(stage, event_type='xyz').emotion == emotion

    @pytest.mark.parametrize("stage", STAGE_NAMES)
    def test_cleanup_empties_everything(self, make_animation, stage):
        anim = make_animation(stage)
        run_frames(anim, RecordingContext(), frames=3, step=400)
        anim.cleanup()
        assert anim.fields.total_particles == 0
        assert len(anim.effects) == 0
        # Rendering after cleanup still works
        ctx = RecordingContext()
        anim.render(ctx)
        assert ctx.depth == 0

    @pytest.mark.parametrize("stage", STAGE_NAMES)
    def test_set_quality_low_respects_caps(self, make_animation, stage):
        anim = make_animation(stage)
        counts = anim.set_quality('low')
        for name, caps in anim.QUALITY_CAPS.items():
            assert counts[name] <= caps.low
            assert len(anim.get_field(name)) <= caps.low

    @pytest.mark.parametrize("stage", STAGE_NAMES)
    def test_set_quality_is_lossy(self, make_animation, stage):
        anim = make_animation(stage)
        low = anim.set_quality('low')
        high = anim.set_quality('high')
        assert low == high

    def test_unknown_quality_ignored(self, make_animation, caplog):
        anim = make_animation('baby')
        before = {f.name: len(f) for f in anim.fields}
        with caplog.at_level(logging.WARNING):
            counts = anim.set_quality('ultra')
        assert counts == before
        assert "ultra" in caplog.text

    def test_cap_overrides(self, make_animation):
        anim = make_animation('baby', overrides={'caps': {'sparkles': {'low': 3, 'medium': 5}}})
        assert anim.set_quality('low')['sparkles'] == 3

    @pytest.mark.parametrize("stage", STAGE_NAMES)
    def test_same_seed_same_fields(self, stage):
        a = create_animation(stage, seed=99)
        b = create_animation(stage, seed=99)
        for fa, fb in zip(a.fields, b.fields):
            assert [(p.x, p.y, p.size) for p in fa] == [(p.x, p.y, p.size) for p in fb]

    @pytest.mark.parametrize("stage", STAGE_NAMES)
    def test_single_progress_or_named_phase(self, make_animation, stage):
        anim = make_animation(stage)
        anim.update(100, 16)
        if stage == 'birth':
            assert anim.current_phase == 'prebirth'
        else:
            assert anim.current_phase == 'progress'
            assert anim.duration == 4000

    def test_render_without_ctx_raises(self, make_animation):
        anim = make_animation('teen')
        with pytest.raises(ValueError):
            anim.render()

    def test_default_ctx_used(self):
        ctx = RecordingContext()
        anim = create_animation('adult', ctx=ctx, seed=1)
        anim.update(16, 16)
        anim.render()
        assert ctx.count('save') > 0

    def test_renders_onto_canvas(self, make_animation):
        anim = make_animation('elder', event_type='reminisce', width=200, height=150,
                              position=(100, 75))
        canvas = Canvas(200, 150)
        anim.update(1000, 16)
        anim.render(canvas)
        assert canvas.get_pixel(5, 5)[3] == 255
        assert canvas.depth == 0


# =============================================================================
# Birth
# =============================================================================

class TestBirth:

    def test_phases(self, make_animation):
        anim = make_animation('birth')
        assert anim.duration == 7000
        spans = [(p.name, p.start, p.end) for p in anim.clock.phases]
        assert spans == [('prebirth', 0, 2000), ('birth', 2000, 5000), ('appear', 5000, 7000)]

    def test_appear_at_6000(self, make_animation):
        anim = make_animation('birth')
        anim.update(6000, 16)
        assert anim.current_phase == 'appear'
        assert anim.clock.phase_progress == pytest.approx(0.5)

    def test_duration_override_scales_phases(self, make_animation):
        anim = make_animation('birth', duration=3500)
        anim.update(3000, 16)
        assert anim.current_phase == 'appear'
        assert anim.clock.phases[-1].end == 3500

    def test_character_only_drawn_when_appearing(self, make_animation):
        anim = make_animation('birth')
        ctx = RecordingContext()
        anim.update(1000, 16)
        anim.render_character(ctx)
        assert ctx.calls == []

        anim.update(6000, 16)
        anim.render_character(ctx)
        assert ctx.calls

    def test_bounce_in_scale(self, make_animation):
        anim = make_animation('birth')
        anim.update(5250, 16)    # phase progress 0.125 -> bp 0.25
        bp = 0.25
        assert anim.character.scale == pytest.approx(math.sin(bp * math.pi) * 0.2 + bp)
        assert anim.character.opacity == pytest.approx(bp)

    def test_sparkles_converge_during_birth(self, make_animation):
        anim = make_animation('birth')
        cx, cy = anim.home
        before = sum(math.hypot(s.x - cx, s.y - cy) for s in anim.get_field('magical_sparkles'))
        t = 2000.0
        while t < 4000:
            t += 50
            anim.update(t, 50)
        after = sum(math.hypot(s.x - cx, s.y - cy) for s in anim.get_field('magical_sparkles'))
        assert after < before

    def test_final_character_position(self, make_animation):
        anim = make_animation('birth', position=(120, 80))
        assert anim.get_final_character_position() == (120, 80)

    def test_default_position_is_canvas_center(self, make_animation):
        anim = make_animation('birth', width=200, height=100)
        assert anim.get_final_character_position() == (100, 50)

    def test_field_sizes(self, make_animation):
        anim = make_animation('birth')
        assert len(anim.get_field('magical_sparkles')) == 30
        assert len(anim.get_field('gentle_lights')) == 6
        assert len(anim.get_field('love_hearts')) == 12


# =============================================================================
# Per-stage behavior
# =============================================================================

class TestBaby:

    def test_crib_only_for_first_smile(self, make_animation):
        assert 'crib' in make_animation('baby', event_type='first_smile').environment
        assert 'crib' not in make_animation('baby', event_type='first_crawl').environment

    def test_crawl_moves_character(self, make_animation):
        anim = make_animation('baby', event_type='first_crawl')
        anim.update(2000, 16)
        assert anim.character.x == pytest.approx(anim.home[0])
        anim.update(4000, 16)
        assert anim.character.x == pytest.approx(anim.home[0] + 50)

    def test_first_mama_fills_sound_slots(self, make_animation):
        anim = make_animation('baby', event_type='first_mama')
        anim.update(1000, 16)
        assert anim.effects['sound_waves'] is not None
        assert anim.effects['speech_glow'] is not None
        assert anim.effects['recognition_glow'] is None

    def test_hearts_respawn_when_expired(self, make_animation):
        anim = make_animation('baby')
        for i in range(1, 60):
            anim.update(i * 100, 100)
        assert len(anim.get_field('heart_particles')) == 20


class TestChild:

    def test_splashes_only_while_swimming(self, make_animation):
        swim = make_animation('child', event_type='learn_swim')
        run_frames(swim, RecordingContext(), frames=5, step=300)
        assert len(swim.get_field('splashes')) > 0

        walk = make_animation('child', event_type='learn_walk')
        run_frames(walk, RecordingContext(), frames=5, step=300)
        assert len(walk.get_field('splashes')) == 0

    def test_victory_confetti_only_for_award(self, make_animation):
        assert len(make_animation('child', event_type='first_award').get_field('victory_confetti')) == 20
        assert len(make_animation('child', event_type='make_friend').get_field('victory_confetti')) == 0

    def test_books_stay_on_canvas(self, make_animation):
        anim = make_animation('child', event_type='first_kindergarten')
        for i in range(1, 40):
            anim.update(i * 100, 100)
        for book in anim.get_field('book_particles'):
            assert 0 <= book.x <= anim.width
            assert 0 <= book.y <= anim.height


class TestTeen:

    def test_one_off_fields(self, make_animation):
        scholarship = make_animation('teen', event_type='scholarship')
        assert len(scholarship.get_field('golden_stars')) == 15
        assert len(scholarship.get_field('graduation_caps')) == 0
        graduation = make_animation('teen', event_type='graduation')
        assert len(graduation.get_field('graduation_caps')) == 10

    def test_petals_fall(self, make_animation):
        anim = make_animation('teen', event_type='first_love')
        start = [p.vy for p in anim.get_field('love_petals')]
        run_frames(anim, RecordingContext(), frames=4, step=100)
        end = [p.vy for p in anim.get_field('love_petals')]
        assert all(b >= a for a, b in zip(start, end))

    def test_choose_major_rays(self, make_animation):
        anim = make_animation('teen', event_type='choose_major')
        anim.update(2000, 16)
        assert anim.effects['decision_rays'] is not None


class TestAdult:

    def test_money_rain_wraps(self, make_animation):
        anim = make_animation('adult', event_type='investment_success')
        for i in range(1, 200):
            anim.update(i * 50, 50)
        assert len(anim.get_field('money_rain')) == 25
        for coin in anim.get_field('money_rain'):
            assert coin.y <= anim.height + 50 + 20

    def test_render_handler_runs(self, make_animation):
        anim = make_animation('adult', event_type='buy_house')
        ctx = RecordingContext()
        anim.update(3000, 16)
        anim.render(ctx)
        assert ctx.depth == 0
        assert anim.behavior.render is not None

    def test_ladder_steps(self, make_animation):
        assert len(make_animation('adult').get_field('career_ladder')) == 8


class TestElder:

    def test_reminisce_sepia_wash(self, make_animation):
        anim = make_animation('elder', event_type='reminisce')
        anim.update(1000, 16)
        wash = anim.effects['nostalgia_fade']
        assert wash is not None
        assert wash.opacity > 0

    def test_memoir_pages_after_start(self, make_animation):
        anim = make_animation('elder', event_type='write_memoir')
        anim.update(400, 16)
        assert anim.effects['memoir_pages'] is None
        anim.update(3000, 16)
        pages = anim.effects['memoir_pages']
        assert pages is not None
        assert 1 <= pages.count <= 8

    def test_wisdom_light_pulses(self, make_animation):
        anim = make_animation('elder', event_type='teach_wisdom')
        before = [light.extra['pulse'] for light in anim.get_field('wisdom_light')]
        anim.update(100, 100)
        after = [light.extra['pulse'] for light in anim.get_field('wisdom_light')]
        assert all(b > a for a, b in zip(before, after))

    def test_peaceful_scale(self, make_animation):
        anim = make_animation('elder', event_type='peaceful_life')
        anim.update(1000, 16)
        assert anim.character.scale == pytest.approx(math.sin(1.0) * 0.1 + 0.9)
