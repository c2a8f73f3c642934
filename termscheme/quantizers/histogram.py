"""Pixel deduplication shared by the quantizers."""
from __future__ import annotations

import numpy as np

from ..errors import InvalidInputError


def color_histogram(pixels) -> tuple[np.ndarray, np.ndarray]:
    """
    Collapse pixels into their distinct colors and pixel counts.

    Args:
        pixels: anything numpy can read as RGB8 triples, e.g. an (N, 3) uint8
            array or a list of ``(r, g, b)`` tuples

    Returns:
        ``(colors, counts)``: an (M, 3) uint8 array of distinct colors in
        lexicographic order and an (M,) array of how often each occurs
    """
    arr = np.asarray(pixels, dtype=np.uint8).reshape(-1, 3)
    if arr.shape[0] == 0:
        raise InvalidInputError('no pixels to quantize')
    colors, counts = np.unique(arr, axis=0, return_counts=True)
    return colors, counts
