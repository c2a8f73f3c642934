import pytest
from PIL import Image

from termscheme import (
    Backend,
    InvalidInputError,
    PaletteConfig,
    PixelBuffer,
    generate,
    generate_from_image,
    generate_from_path,
)
from termscheme.palette import make_quantizer
from termscheme.quantizers import KMeansQuantizer, MedianCutQuantizer

BACKENDS = [Backend.MEDIAN_CUT, Backend.KMEANS]


def hexes(colors):
    return [c.to_hex() for c in colors]


@pytest.mark.parametrize('backend', BACKENDS)
def test_red_blue_scenario(red_blue_buffer, backend):
    config = PaletteConfig(colors=2, backend=backend, bold=False, anchor=False)
    assert hexes(generate(red_blue_buffer, config)) == ['#0000FF', '#FF0000']


@pytest.mark.parametrize('backend', BACKENDS)
def test_solid_grey_gives_single_color(grey_buffer, backend):
    plain = PaletteConfig(colors=8, backend=backend, bold=False, anchor=False)
    assert hexes(generate(grey_buffer, plain)) == ['#808080']
    bold = PaletteConfig(colors=8, backend=backend, bold=True, anchor=False)
    assert len(generate(grey_buffer, bold)) == 2


@pytest.mark.parametrize('backend', BACKENDS)
def test_deterministic(pattern_buffer, backend):
    config = PaletteConfig(colors=6, backend=backend, rotate=45, saturate=0.3)
    assert generate(pattern_buffer, config) == generate(pattern_buffer, config)


@pytest.mark.parametrize('backend', BACKENDS)
def test_bold_doubles_output(pattern_buffer, backend):
    base = generate(pattern_buffer, PaletteConfig(colors=6, backend=backend, bold=False))
    bold = generate(pattern_buffer, PaletteConfig(colors=6, backend=backend, bold=True))
    assert len(bold) == 2 * len(base)
    assert bold[:len(base)] == base


def test_default_config(pattern_buffer):
    assert len(generate(pattern_buffer)) == 16


def test_zero_size_buffer_rejected():
    with pytest.raises(InvalidInputError):
        generate(PixelBuffer(0, 0, b''))


def test_sample_count_mismatch_rejected():
    with pytest.raises(InvalidInputError):
        generate(PixelBuffer(2, 2, bytes(5)))


def test_from_image_drops_alpha():
    img = Image.new('RGBA', (3, 2), (10, 20, 30, 0))
    buffer = PixelBuffer.from_image(img)
    assert (buffer.width, buffer.height, len(buffer.data)) == (3, 2, 18)
    config = PaletteConfig(bold=False, anchor=False)
    assert hexes(generate_from_image(img, config)) == ['#0A141E']


def test_generate_from_path(tmp_path):
    path = tmp_path / 'img.png'
    img = Image.new('RGB', (2, 2), (255, 0, 0))
    img.putpixel((0, 1), (0, 0, 255))
    img.putpixel((1, 1), (0, 0, 255))
    img.save(path)
    config = PaletteConfig(colors=2, bold=False, anchor=False)
    assert hexes(generate_from_path(path, config)) == ['#0000FF', '#FF0000']


def test_generate_from_path_errors(tmp_path):
    with pytest.raises(InvalidInputError):
        generate_from_path(tmp_path / 'missing.png')
    junk = tmp_path / 'junk.png'
    junk.write_bytes(b'not an image')
    with pytest.raises(InvalidInputError):
        generate_from_path(junk)


def test_make_quantizer_dispatch():
    assert isinstance(make_quantizer(PaletteConfig()), MedianCutQuantizer)
    kmeans = make_quantizer(PaletteConfig(backend='kmeans', max_iterations=7))
    assert isinstance(kmeans, KMeansQuantizer)
    assert kmeans.max_iterations == 7
