"""Tests for the opticalab command line."""

import json

import pytest

from opticalab.cli import main, parse_args
from opticalab.color import wavelength_to_color


@pytest.fixture
def scene_file(tmp_path):
    path = tmp_path / 'scene.json'
    path.write_text(json.dumps({
        'laser': {'angle': 0, 'wavelength': 550},
        'elements': [{'id': 'm1', 'type': 'plane-mirror', 'x': 400}],
    }))
    return path


class TestCLI:

    def test_parse_args(self):
        args = parse_args(['scene.json', '--angle', '15', '--svg', 'out.svg', '-v'])
        assert args.scene == 'scene.json'
        assert args.angle == 15.0
        assert args.wavelength is None
        assert args.svg == 'out.svg'
        assert args.verbose

    def test_prints_segments(self, scene_file, capsys):
        assert main([str(scene_file)]) == 0
        lines = capsys.readouterr().out.splitlines()
        color = wavelength_to_color(550).css
        assert lines == [
            f'50.00,200.00 -> 400.00,200.00 {color}',
            f'400.00,200.00 -> 0.00,200.00 {color}',
        ]

    def test_overrides(self, scene_file, capsys):
        assert main([str(scene_file), '--angle', '90', '--wavelength', '650']) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == ['50.00,200.00 -> 50.00,400.00 rgb(255, 0, 0)']

    def test_json_output(self, scene_file, capsys):
        assert main([str(scene_file), '--json']) == 0
        segments = json.loads(capsys.readouterr().out)
        assert len(segments) == 2
        assert segments[0]['start'] == {'x': 50, 'y': 200.0}
        assert segments[0]['end'] == {'x': 400, 'y': 200.0}
        assert segments[1]['end']['x'] == 0
        assert segments[0]['color'] == wavelength_to_color(550).css
        assert segments[0]['wavelength'] == 550

    def test_writes_svg(self, scene_file, tmp_path, capsys):
        out = tmp_path / 'bench.svg'
        assert main([str(scene_file), '--svg', str(out)]) == 0
        assert capsys.readouterr().out == ''
        assert 'plane-mirror' in out.read_text()

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / 'nope.json')]) == 1
        assert 'error:' in capsys.readouterr().err

    def test_bad_element_type(self, tmp_path, capsys):
        path = tmp_path / 'bad.json'
        path.write_text(json.dumps({'elements': [{'type': 'prism'}]}))
        assert main([str(path)]) == 1
        assert 'prism' in capsys.readouterr().err

    @pytest.mark.parametrize("content, extra", [
        ({'elements': [{'type': 'convex-lens', 'x': None}]}, []),
        ({'elements': [{'type': 'convex-lens', 'focalLength': 'long'}]}, []),
        ({'elements': ['convex-lens']}, []),
        ({'elements': {'type': 'convex-lens'}}, []),
        ({'laser': {'angle': None}}, []),
        ({'laser': 45}, []),
        ({'bench': {'width': 'wide'}}, []),
        ([], []),
        ({}, ['--wavelength', 'inf']),
        ({}, ['--angle', 'nan']),
    ])
    def test_malformed_scene_reports_error(self, tmp_path, capsys, content, extra):
        path = tmp_path / 'malformed.json'
        path.write_text(json.dumps(content))
        assert main([str(path)] + extra) == 1
        err = capsys.readouterr().err
        assert 'error:' in err
        assert 'Traceback' not in err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / 'broken.json'
        path.write_text('{not json')
        assert main([str(path)]) == 1
        assert 'error:' in capsys.readouterr().err
