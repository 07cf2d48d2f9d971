"""
Tests for offline rendering, frame export and the CLI.
"""

import json

import pytest
from PIL import Image

from lifestage import render_animation
from lifestage.core.exporter import FrameExporter
from lifestage.main import main


def solid_frames(count=3, size=(8, 6)):
    return [Image.new('RGBA', size, (i * 40, 0, 0, 255)) for i in range(count)]


class TestRenderAnimation:

    def test_frame_count_includes_completing_frame(self):
        frames = render_animation('baby', fps=10, duration=300, seed=1, width=80, height=60)
        # t = 0, 100, 200, 300
        assert len(frames) == 4
        assert frames[0].size == (80, 60)
        assert frames[0].mode == 'RGBA'

    def test_deterministic_with_seed(self):
        a = render_animation('child', event_type='make_friend', fps=5, duration=400, seed=5,
                             width=60, height=40)
        b = render_animation('child', event_type='make_friend', fps=5, duration=400, seed=5,
                             width=60, height=40)
        assert [f.tobytes() for f in a] == [f.tobytes() for f in b]

    def test_birth_renders(self):
        frames = render_animation('birth', fps=2, duration=1000, width=60, height=40)
        assert len(frames) == 3

    def test_invalid_fps(self):
        with pytest.raises(ValueError):
            render_animation('baby', fps=0)

    def test_unknown_stage(self):
        with pytest.raises(ValueError):
            render_animation('toddler')


class TestFrameExporter:

    def test_gif(self, tmp_path):
        path = FrameExporter.to_gif(solid_frames(), tmp_path / 'out' / 'anim.gif', duration=50)
        assert path.exists()
        with Image.open(path) as img:
            assert img.n_frames == 3

    def test_spritesheet(self, tmp_path):
        path, meta = FrameExporter.to_spritesheet(solid_frames(5), tmp_path / 'sheet.png',
                                                  columns=2, padding=1)
        assert meta['rows'] == 3
        assert meta['sheet_width'] == 2 * 9 - 1
        with Image.open(path) as img:
            assert img.size == (17, 6 * 3 + 2)
        assert json.loads(path.with_suffix('.json').read_text())['frames'] == 5

    def test_frames(self, tmp_path):
        paths = FrameExporter.to_frames(solid_frames(2), tmp_path / 'frames', prefix='teen')
        assert [p.name for p in paths] == ['teen_0000.png', 'teen_0001.png']

    @pytest.mark.parametrize("export", [
        lambda p: FrameExporter.to_gif([], p / 'a.gif'),
        lambda p: FrameExporter.to_spritesheet([], p / 'a.png'),
        lambda p: FrameExporter.to_frames([], p / 'frames'),
    ])
    def test_empty_input_rejected(self, tmp_path, export):
        with pytest.raises(ValueError):
            export(tmp_path)


class TestCli:

    def test_list_stages(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['--list-stages'])
        assert exc.value.code == 0
        assert 'elder' in capsys.readouterr().out

    def test_list_events(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['--list-events', 'child'])
        assert exc.value.code == 0
        out = capsys.readouterr().out
        assert 'learn_walk (default)' in out
        assert 'first_award' in out

    def test_list_presets(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['--list-presets'])
        assert exc.value.code == 0
        assert 'wedding_day' in capsys.readouterr().out

    def test_unknown_stage_exits_1(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['toddler'])
        assert exc.value.code == 1
        assert 'Unknown stage' in capsys.readouterr().out

    def test_unknown_preset_exits_1(self):
        with pytest.raises(SystemExit) as exc:
            main(['--preset', 'nope'])
        assert exc.value.code == 1

    def test_missing_stage_exits_1(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1

    def test_render_gif(self, tmp_path, capsys):
        out = tmp_path / 'baby.gif'
        main(['baby', '--event', 'first_mama', '--fps', '5', '--duration', '400',
              '--seed', '2', '-o', str(out)])
        assert out.exists()
        assert 'Done!' in capsys.readouterr().out

    def test_render_from_config(self, tmp_path):
        config = tmp_path / 'render.yaml'
        config.write_text("stage: elder\nevent_type: reminisce\nfps: 4\nduration: 250\n")
        out = tmp_path / 'frames'
        main(['--config', str(config), '--format', 'frames', '-o', str(out)])
        assert len(list(out.glob('elder_*.png'))) == 2

    def test_config_canvas_size(self, tmp_path):
        config = tmp_path / 'small.yaml'
        config.write_text("stage: teen\nwidth: 200\nheight: 150\nfps: 4\nduration: 250\n")
        out = tmp_path / 'small.gif'
        main(['--config', str(config), '-o', str(out)])
        with Image.open(out) as img:
            assert img.size == (200, 150)

    def test_size_flags_override_config(self, tmp_path):
        config = tmp_path / 'small.yaml'
        config.write_text("stage: adult\nwidth: 200\nheight: 150\nfps: 4\nduration: 250\n")
        out = tmp_path / 'sized.png'
        main(['--config', str(config), '--width', '120', '--format', 'spritesheet', '-o', str(out)])
        meta = json.loads(out.with_suffix('.json').read_text())
        assert (meta['frame_width'], meta['frame_height']) == (120, 150)
