"""
Tests for YAML presets and config files.
"""

import logging

import pytest
import yaml

from lifestage.core.presets import (
    BUILTIN_PRESETS,
    AnimationPreset,
    PresetManager,
    apply_preset_to_args,
    load_config,
)
from lifestage.stages import get_stage


@pytest.fixture
def manager(tmp_path):
    return PresetManager(user_presets_dir=tmp_path)


class TestAnimationPreset:

    def test_from_dict_filters_unknown_keys(self):
        preset = AnimationPreset.from_dict({'name': 'x', 'stage': 'teen', 'sparkle': True})
        assert preset.stage == 'teen'

    def test_event_shorthand(self):
        preset = AnimationPreset.from_dict({'name': 'x', 'event': 'wedding'})
        assert preset.event_type == 'wedding'

    def test_render_kwargs(self):
        preset = AnimationPreset(name='x', stage='elder', event_type='reminisce', fps=12, seed=3)
        kwargs = preset.render_kwargs()
        assert kwargs['stage'] == 'elder'
        assert kwargs['fps'] == 12
        assert kwargs['seed'] == 3

    def test_builtins_name_real_stages_and_events(self):
        for data in BUILTIN_PRESETS.values():
            preset = AnimationPreset.from_dict(data)
            cls = get_stage(preset.stage)
            if preset.event_type is not None:
                assert preset.event_type in cls.event_types()


class TestPresetManager:

    def test_builtins_loaded(self, manager):
        assert manager.exists('wedding_day')
        assert manager.get('wedding_day').stage == 'adult'
        assert 'memories' in manager.list_by_stage('elder')

    def test_save_and_reload(self, manager, tmp_path):
        preset = AnimationPreset(name='my_swim', stage='child', event_type='learn_swim',
                                 quality='medium', tags=['water'])
        path = manager.save_preset(preset)
        assert path == tmp_path / 'my_swim.yaml'

        reloaded = PresetManager(user_presets_dir=tmp_path).get('my_swim')
        assert reloaded.event_type == 'learn_swim'
        assert reloaded.quality == 'medium'
        assert reloaded.tags == ['water']

    def test_multi_preset_file(self, tmp_path):
        (tmp_path / 'bundle.yaml').write_text(yaml.safe_dump({
            'presets': {
                'a': {'stage': 'baby', 'event_type': 'first_crawl'},
                'b': {'stage': 'teen'},
            }
        }))
        manager = PresetManager(user_presets_dir=tmp_path)
        assert manager.get('a').event_type == 'first_crawl'
        assert manager.get('b').stage == 'teen'

    def test_user_overrides_builtin(self, tmp_path):
        (tmp_path / 'wedding_day.yaml').write_text("stage: adult\nevent_type: wedding\nfps: 10\n")
        assert PresetManager(user_presets_dir=tmp_path).get('wedding_day').fps == 10

    def test_bad_file_skipped_with_warning(self, tmp_path, caplog):
        (tmp_path / 'broken.yaml').write_text("stage: [unclosed\n")
        (tmp_path / 'list.yaml').write_text("- a\n- b\n")
        with caplog.at_level(logging.WARNING):
            manager = PresetManager(user_presets_dir=tmp_path)
        assert not manager.exists('broken')
        assert not manager.exists('list')
        assert 'broken.yaml' in caplog.text

    def test_search_and_tags(self, manager):
        assert 'retirement_party' in manager.search('balloons')
        assert 'wedding_day' in manager.list_by_tag('Romance')
        assert manager.list_all() == sorted(manager.list_all())

    def test_missing_preset(self, manager):
        assert manager.get('nope') is None


class TestLoadConfig:

    def test_load(self, tmp_path):
        path = tmp_path / 'render.yaml'
        path.write_text(
            "stage: child\n"
            "event_type: first_award\n"
            "quality: low\n"
            "overrides:\n"
            "  caps:\n"
            "    book_particles: {low: 2, medium: 4}\n"
        )
        preset = load_config(path)
        assert preset.name == 'render'
        assert preset.overrides['caps']['book_particles'] == {'low': 2, 'medium': 4}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'missing.yaml')

    def test_non_mapping(self, tmp_path):
        path = tmp_path / 'list.yaml'
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(path)


class TestApplyPreset:

    class Args:
        stage = None
        event = None
        fps = None
        quality = 'low'
        duration = None
        seed = None

    def test_fills_unset_arguments_only(self):
        args = apply_preset_to_args(AnimationPreset(name='x', stage='teen', event_type='graduation', fps=12),
                                    self.Args())
        assert args.stage == 'teen'
        assert args.event == 'graduation'
        assert args.fps == 12
        assert args.quality == 'low'
        assert args._preset.name == 'x'

    def test_canvas_size_forwarded(self):
        preset = AnimationPreset(name='x', stage='baby', width=320, height=240)
        args = self.Args()
        args.width = None
        args.height = 100
        apply_preset_to_args(preset, args)
        assert args.width == 320
        assert args.height == 100
