"""
Tests for event tables and effect slots.
"""

import logging

import pytest

from lifestage.core.effects import EffectSlots, Glow, Wash
from lifestage.stages.base import AnimationConfig, EventBehavior, EventBehaviorTable


def table(fallback_emotion=None):
    return EventBehaviorTable([
        EventBehavior('first', 'happy', frozenset({'crib'})),
        EventBehavior('second', 'curious'),
    ], fallback_emotion=fallback_emotion)


class TestEventBehaviorTable:

    def test_resolve_known(self):
        assert table().resolve('second').emotion == 'curious'

    def test_none_resolves_to_default(self):
        assert table().resolve(None).key == 'first'

    def test_unknown_falls_back_to_default(self, caplog):
        with caplog.at_level(logging.WARNING):
            behavior = table().resolve('xyz')
        assert behavior.key == 'first'
        assert behavior.emotion == 'happy'
        assert behavior.environment == frozenset({'crib'})
        assert "xyz" in caplog.text

    def test_unknown_uses_fallback_emotion(self):
        behavior = table(fallback_emotion='neutral').resolve('xyz')
        assert behavior.key == 'first'
        assert behavior.emotion == 'neutral'

    def test_known_ignores_fallback_emotion(self):
        assert table(fallback_emotion='neutral').resolve('first').emotion == 'happy'

    def test_keys_and_membership(self):
        t = table()
        assert t.keys() == ['first', 'second']
        assert 'second' in t
        assert 'xyz' not in t
        assert len(t) == 2

    def test_empty_table_rejected(self):
        with pytest.raises(ValueError):
            EventBehaviorTable([])

    def test_duplicate_key_rejected(self):
        with pytest.raises(ValueError):
            EventBehaviorTable([EventBehavior('a', 'happy'), EventBehavior('a', 'sad')])


class TestEffectSlots:

    def test_slots_start_empty(self):
        slots = EffectSlots(('glow', 'wash'))
        assert slots.get('glow') is None
        assert len(slots) == 0
        assert list(slots.active()) == []

    def test_set_and_active_order(self):
        slots = EffectSlots(('glow', 'wash'))
        wash = Wash('#704214', 0.2)
        glow = Glow(0, 0, 10, 0.5)
        slots.set('wash', wash)
        slots.set('glow', glow)
        assert list(slots.active()) == [('glow', glow), ('wash', wash)]
        assert 'glow' in slots

    def test_undeclared_slot_raises(self):
        slots = EffectSlots(('glow',))
        with pytest.raises(KeyError):
            slots.set('glwo', Glow(0, 0, 1, 1))
        with pytest.raises(KeyError):
            slots['nope']

    def test_clear(self):
        slots = EffectSlots(('glow',))
        slots.set('glow', Glow(0, 0, 1, 1))
        slots.clear()
        assert slots['glow'] is None
        assert slots.names == ('glow',)


class TestAnimationConfig:

    def test_from_dict_ignores_unknown_keys(self):
        config = AnimationConfig.from_dict({'event_type': 'wedding', 'colour': 'red', 'position': [10, 20]})
        assert config.event_type == 'wedding'
        assert config.position == (10, 20)

    def test_defaults(self):
        config = AnimationConfig()
        assert (config.width, config.height) == (800, 600)
        assert config.duration is None
        assert config.overrides == {}
