from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..color import Color
from ..errors import ConfigurationError
from .histogram import color_histogram

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ColorBox:
    indices: np.ndarray  # rows of the histogram inside this box
    population: int
    r_min: int
    r_max: int
    g_min: int
    g_max: int
    b_min: int
    b_max: int

    def range(self) -> tuple[int, int, int]:
        return (self.r_max - self.r_min, self.g_max - self.g_min, self.b_max - self.b_min)

    def splittable(self) -> bool:
        return len(self.indices) > 1

    def score(self) -> int:
        return self.population * max(self.range())


def _compute_bounds(colors: np.ndarray, counts: np.ndarray, indices: np.ndarray) -> ColorBox:
    members = colors[indices]
    lows = members.min(axis=0)
    highs = members.max(axis=0)
    return ColorBox(
        indices=indices,
        population=int(counts[indices].sum()),
        r_min=int(lows[0]),
        r_max=int(highs[0]),
        g_min=int(lows[1]),
        g_max=int(highs[1]),
        b_min=int(lows[2]),
        b_max=int(highs[2]),
    )


def _split_box(colors: np.ndarray, counts: np.ndarray, box: ColorBox) -> list[ColorBox]:
    """Split ``box`` at the weighted median of its longest axis."""
    ranges = box.range()
    axis = ranges.index(max(ranges))
    first, second = (c for c in range(3) if c != axis)
    members = colors[box.indices]
    # lexsort treats the last key as primary
    order = np.lexsort((members[:, second], members[:, first], members[:, axis]))
    sorted_indices = box.indices[order]

    cumulative = np.cumsum(counts[sorted_indices])
    half = cumulative[-1] / 2
    mid = int(np.searchsorted(cumulative, half)) + 1
    mid = min(max(mid, 1), len(sorted_indices) - 1)
    return [
        _compute_bounds(colors, counts, sorted_indices[:mid]),
        _compute_bounds(colors, counts, sorted_indices[mid:]),
    ]


def _average_color(colors: np.ndarray, counts: np.ndarray, indices: np.ndarray) -> Color:
    weights = counts[indices].astype(np.float64)
    mean = (colors[indices].astype(np.float64) * weights[:, None]).sum(axis=0) / weights.sum()
    return Color.from_rgb(*mean)


class MedianCutQuantizer:
    """Median-cut quantizer over the RGB histogram of an image."""

    def quantize(self, pixels, max_colors: int = 16) -> list[Color]:
        """
        Reduce ``pixels`` to at most ``max_colors`` representative colors.

        The box with the largest population-weighted extent is split at the
        weighted median of its longest axis until ``max_colors`` boxes exist
        or every box holds a single distinct color. Colors are returned in
        box creation order, one population-weighted mean per box.
        """
        if max_colors < 1:
            raise ConfigurationError(f'max_colors must be >= 1, got {max_colors}')
        colors, counts = color_histogram(pixels)
        logger.debug('median-cut: %d pixels, %d distinct colors', int(counts.sum()), len(colors))

        boxes: list[ColorBox] = [_compute_bounds(colors, counts, np.arange(len(colors)))]
        while len(boxes) < max_colors:
            candidates = [idx for idx, box in enumerate(boxes) if box.splittable()]
            if not candidates:
                logger.debug('median-cut: no splittable boxes left at %d colors', len(boxes))
                break
            # max() keeps the earliest box on ties
            target = max(candidates, key=lambda idx: boxes[idx].score())
            box = boxes.pop(target)
            boxes.extend(_split_box(colors, counts, box))

        return [_average_color(colors, counts, box.indices) for box in boxes]
