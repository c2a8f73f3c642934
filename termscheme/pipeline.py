"""
Transformations applied to quantized colors to turn them into a scheme.

Every stage takes a sequence of colors and returns a new list, leaving its
input untouched. ``transform_colors`` chains them in a fixed order:

1. sort by luminance
2. contrast anchoring (optional)
3. bold-variant synthesis (optional)
4. hue rotation, lightness delta, saturation delta
5. light-theme inversion (optional)
"""
from __future__ import annotations

import logging
from typing import Sequence

from .color import Color
from .config import PaletteConfig

logger = logging.getLogger(__name__)

ANCHOR_FRACTION = 0.9


def sort_by_luminance(colors: Sequence[Color]) -> list[Color]:
    """Darkest first. Equal luminance keeps the incoming order."""
    return sorted(colors, key=lambda c: c.luminance())


def anchor_contrast(colors: Sequence[Color], fraction: float = ANCHOR_FRACTION) -> list[Color]:
    """
    Pull the first color toward black and the last toward white.

    A single color gets both, darkened first and then lightened.
    """
    result = list(colors)
    if not result:
        return result
    result[0] = result[0].mix(Color.black(), fraction)
    result[-1] = result[-1].mix(Color.white(), fraction)
    return result


def add_bold_variants(colors: Sequence[Color], delta: float) -> list[Color]:
    """Append a lightened copy of every color, keeping the order of both halves."""
    base = list(colors)
    return base + [c.lighten(delta) for c in base]


def adjust_colors(
    colors: Sequence[Color],
    rotate: float = 0.0,
    lighten: float = 0.0,
    saturate: float = 0.0,
) -> list[Color]:
    return [c.rotate_hue(rotate).lighten(lighten).saturate(saturate) for c in colors]


def invert_for_light_theme(colors: Sequence[Color]) -> list[Color]:
    return list(reversed(colors))


def transform_colors(colors: Sequence[Color], config: PaletteConfig) -> list[Color]:
    result = sort_by_luminance(colors)
    if config.anchor:
        result = anchor_contrast(result)
    if config.bold:
        result = add_bold_variants(result, config.bold_delta)
    result = adjust_colors(result, config.rotate, config.lighten, config.saturate)
    if config.light:
        result = invert_for_light_theme(result)
    logger.debug('pipeline produced %d colors', len(result))
    return result
