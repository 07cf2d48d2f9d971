"""
Shared fixtures: a recording drawing context and stage factories.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lifestage.stages import create_animation  # noqa: E402


class RecordingGradient:
    def __init__(self, kind, args):
        self.kind = kind
        self.args = args
        self.stops = []

    def add_color_stop(self, offset, color):
        self.stops.append((offset, color))


class RecordingContext:
    """
    Stand-in drawing context that records every call.

    Style attributes are plain attributes saved and restored with the
    transform depth; depth never goes negative.
    """

    _STATE = ('global_alpha', 'composite', 'fill_style', 'stroke_style',
              'line_width', 'line_cap', 'font_size', 'text_align')

    def __init__(self):
        self.calls = []
        self.stack = []
        self.max_depth = 0
        self.unbalanced_restores = 0
        self.global_alpha = 1.0
        self.composite = 'source-over'
        self.fill_style = '#000000'
        self.stroke_style = '#000000'
        self.line_width = 1.0
        self.line_cap = 'butt'
        self.font_size = 12.0
        self.text_align = 'left'

    @property
    def depth(self):
        return len(self.stack)

    def save(self):
        self.calls.append(('save',))
        self.stack.append({name: getattr(self, name) for name in self._STATE})
        self.max_depth = max(self.max_depth, len(self.stack))

    def restore(self):
        self.calls.append(('restore',))
        if not self.stack:
            self.unbalanced_restores += 1
            return
        for name, value in self.stack.pop().items():
            setattr(self, name, value)

    def create_linear_gradient(self, *args):
        return RecordingGradient('linear', args)

    def create_radial_gradient(self, *args):
        return RecordingGradient('radial', args)

    def names(self):
        return [call[0] for call in self.calls]

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)

    def __getattr__(self, name):
        # Any other drawing call is recorded with its arguments
        if name.startswith('_'):
            raise AttributeError(name)

        def record(*args):
            self.calls.append((name,) + args)
        return record


@pytest.fixture
def ctx():
    return RecordingContext()


@pytest.fixture
def make_animation():
    """Build a seeded stage animation; cleaned up after the test"""
    created = []

    def factory(stage, **config):
        config.setdefault('seed', 1234)
        anim = create_animation(stage, **config)
        created.append(anim)
        return anim

    yield factory
    for anim in created:
        anim.cleanup()


def run_frames(anim, ctx, frames=5, step=16.0, start=0.0):
    """Drive an animation through a few update/render cycles"""
    time = start
    for _ in range(frames):
        time += step
        anim.update(time, step)
        anim.render(ctx)
    return time
