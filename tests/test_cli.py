import argparse

import pytest
from PIL import Image

from termscheme.cli import build_parser, config_from_args, format_color, main, paint, validate_color_delta
from termscheme.color import Color
from termscheme.config import Backend


@pytest.fixture
def red_blue_png(tmp_path):
    path = tmp_path / 'red_blue.png'
    img = Image.new('RGB', (2, 2), (255, 0, 0))
    img.putpixel((0, 1), (0, 0, 255))
    img.putpixel((1, 1), (0, 0, 255))
    img.save(path)
    return str(path)


def test_validate_color_delta():
    assert validate_color_delta('0.5') == 0.5
    assert validate_color_delta('-1') == -1.0
    with pytest.raises(argparse.ArgumentTypeError, match='not in range'):
        validate_color_delta('2')
    with pytest.raises(argparse.ArgumentTypeError, match='not a valid floating point number'):
        validate_color_delta('abc')


def test_parser_rejects_bad_delta():
    with pytest.raises(SystemExit):
        build_parser().parse_args(['img.png', '--bold-delta', '3'])


def test_config_from_args():
    args = build_parser().parse_args(['img.png', '-c', '4', '-b', '--backend', 'kmeans', '--light', '--no-adjust'])
    config = config_from_args(args)
    assert config.colors == 4
    assert config.backend is Backend.KMEANS
    assert not config.bold and not config.anchor and config.light


def test_paint_uses_truecolor_background():
    text = paint(Color.from_rgb(255, 0, 0), '#FF0000')
    assert '\033[48;2;255;0;0m' in text
    assert text.endswith('\033[0m')


def test_format_color_plain():
    assert format_color(Color.from_rgb(0, 0, 255)) == '#0000FF'
    assert format_color(Color.from_rgb(0, 0, 255), names=True) == '#0000FF blue'


def test_main_prints_hex_lines(red_blue_png, capsys):
    assert main(['-c', '2', '-b', '--no-adjust', red_blue_png]) == 0
    assert capsys.readouterr().out.splitlines() == ['#0000FF', '#FF0000']


def test_main_with_bold(red_blue_png, capsys):
    assert main(['-c', '2', '--no-adjust', red_blue_png]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 4


def test_main_missing_image(tmp_path, capsys):
    assert main([str(tmp_path / 'nope.png')]) == 1
    assert 'Image not found.' in capsys.readouterr().err


def test_main_undecodable_image(tmp_path, capsys):
    junk = tmp_path / 'junk.png'
    junk.write_bytes(b'garbage')
    assert main([str(junk)]) == 1
    assert capsys.readouterr().err.startswith('Error:')
