"""
Tests for character shapes, faces, colors and timing helpers.
"""

import math

import pytest

from lifestage.core.character import draw_character, face_for, get_shape, interpolate_shapes
from lifestage.core.easing import bell, bounce_in, clamp01, pulse, ramp, ramp_after
from lifestage.core.utils import ColorUtils


class TestShapes:

    def test_elder_wears_glasses(self):
        assert 'glasses' in get_shape('elder').accessories
        assert get_shape('elder').hair == '#C0C0C0'

    def test_birth_uses_baby_body(self):
        assert get_shape('birth').head_radius == get_shape('baby').head_radius

    def test_unknown_stage(self):
        with pytest.raises(ValueError, match="elder"):
            get_shape('toddler')

    def test_interpolate_endpoints(self):
        baby, adult = get_shape('baby'), get_shape('adult')
        assert interpolate_shapes(baby, adult, 0).head_radius == baby.head_radius
        assert interpolate_shapes(baby, adult, 5).body_height == adult.body_height
        assert interpolate_shapes(baby, adult, 1).accessories == ('tie',)

    def test_interpolate_midpoint(self):
        mid = interpolate_shapes(get_shape('baby'), get_shape('adult'), 0.5)
        assert mid.leg_length == pytest.approx(20)


class TestFaces:

    def test_unknown_emotion_is_neutral(self):
        assert face_for('bewildered') == face_for('neutral')

    def test_draw_balanced(self, ctx):
        draw_character(ctx, get_shape('adult'), 'shy')
        assert 'fill' in ctx.names()
        assert ctx.count('save') == ctx.count('restore')


class TestColorUtils:

    @pytest.mark.parametrize("text, rgba", [
        ('#FF0000', (255, 0, 0, 1.0)),
        ('rgba(255, 182, 193, 0.5)', (255, 182, 193, 0.5)),
        ('rgb(1, 2, 3)', (1, 2, 3, 1.0)),
        ('hsl(120, 100%, 50%)', (0, 255, 0, 1.0)),
        ('hsl(210, 50%, 40%)', (51, 102, 153, 1.0)),
        ('hsla(0, 100%, 50%, 0.25)', (255, 0, 0, 0.25)),
        ('white', (255, 255, 255, 1.0)),
    ])
    def test_parse(self, text, rgba):
        assert ColorUtils.parse(text) == rgba

    def test_hsl_to_rgb_wraps_hue(self):
        assert ColorUtils.hsl_to_rgb(480, 1.0, 0.5) == ColorUtils.hsl_to_rgb(120, 1.0, 0.5)

    def test_with_alpha_multiplies(self):
        assert ColorUtils.with_alpha('rgba(0, 0, 0, 0.5)', 0.5) == 'rgba(0, 0, 0, 0.250)'

    def test_lerp_color(self):
        assert ColorUtils.lerp_color('#000000', '#FFFFFF', 0.5) == '#808080'


class TestEasing:

    def test_clamp01_nan(self):
        assert clamp01(float('nan')) == 0.0

    def test_ramp_saturates(self):
        assert ramp(0.25, 2) == pytest.approx(0.5)
        assert ramp(0.8, 2) == 1.0

    def test_ramp_after(self):
        assert ramp_after(0.1, 0.2) == 0.0
        assert ramp_after(0.6, 0.2, 2) == pytest.approx(0.8)

    def test_bell(self):
        assert bell(0) == pytest.approx(0)
        assert bell(0.5) == pytest.approx(1)

    def test_pulse_range(self):
        assert all(0 <= pulse(t, 800) <= 1 for t in range(0, 2000, 37))

    def test_bounce_in(self):
        assert bounce_in(0.5) == pytest.approx(math.sin(0.5 * math.pi) * 0.2 + 0.5)
        assert bounce_in(1.0) == 1.0
