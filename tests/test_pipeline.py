from termscheme.color import Color
from termscheme.config import PaletteConfig
from termscheme.pipeline import (
    add_bold_variants,
    adjust_colors,
    anchor_contrast,
    invert_for_light_theme,
    sort_by_luminance,
    transform_colors,
)

RED = Color.from_rgb(255, 0, 0)
BLUE = Color.from_rgb(0, 0, 255)
MUTED = Color.from_rgb(150, 100, 100)
PALETTE = [Color.white(), MUTED, Color.black(), RED, BLUE]

PLAIN = PaletteConfig(bold=False, anchor=False)


def test_sort_by_luminance_does_not_mutate():
    colors = list(PALETTE)
    result = sort_by_luminance(colors)
    assert colors == PALETTE
    assert result == [Color.black(), BLUE, MUTED, RED, Color.white()]


def test_anchor_contrast():
    assert anchor_contrast([]) == []
    colors = [BLUE, MUTED, RED]
    result = anchor_contrast(colors)
    assert result[0] == BLUE.mix(Color.black(), 0.9)
    assert result[1] == MUTED
    assert result[2] == RED.mix(Color.white(), 0.9)
    assert result[0].luminance() < BLUE.luminance()
    assert result[2].luminance() > RED.luminance()


def test_anchor_single_color_darkens_then_lightens():
    (result,) = anchor_contrast([MUTED])
    assert result == MUTED.mix(Color.black(), 0.9).mix(Color.white(), 0.9)
    assert result.luminance() > MUTED.luminance()


def test_bold_variants_follow_base_colors():
    base = [BLUE, MUTED, RED]
    result = add_bold_variants(base, 0.2)
    assert len(result) == 6
    assert result[:3] == base
    for i in range(3):
        assert result[i + 3] == result[i].lighten(0.2)


def test_adjust_applies_hue_then_lightness_then_saturation():
    (result,) = adjust_colors([MUTED], rotate=30, lighten=0.1, saturate=0.2)
    assert result == MUTED.rotate_hue(30).lighten(0.1).saturate(0.2)
    assert adjust_colors(PALETTE) == PALETTE


def test_inversion_twice_restores_order():
    assert invert_for_light_theme(invert_for_light_theme(PALETTE)) == PALETTE
    assert invert_for_light_theme(PALETTE)[0] == BLUE


def test_transform_with_everything_off_only_sorts():
    assert transform_colors(PALETTE, PLAIN) == sort_by_luminance(PALETTE)


def test_transform_keeps_darkest_first_and_lightest_last():
    colors = [RED, MUTED, BLUE, Color.from_rgb(40, 200, 90)]
    result = transform_colors(colors, PaletteConfig(bold=False))
    lum = [c.luminance() for c in result]
    assert lum[0] == min(lum)
    assert lum[-1] == max(lum)


def test_transform_bold_doubles_length():
    colors = [RED, MUTED, BLUE]
    result = transform_colors(colors, PaletteConfig(anchor=False, bold_delta=0.3))
    assert len(result) == 6
    for i in range(3):
        assert result[i + 3] == result[i].lighten(0.3)


def test_light_theme_reverses_final_sequence():
    dark = transform_colors(PALETTE, PaletteConfig())
    light = transform_colors(PALETTE, PaletteConfig(light=True))
    assert light == list(reversed(dark))
