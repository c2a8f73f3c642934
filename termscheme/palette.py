"""
Palette generation entry points.

``generate`` takes an already decoded RGB8 pixel buffer and a
``PaletteConfig``, runs the configured quantizer and feeds its colors
through the transformation pipeline.

Usage:
    from termscheme import PaletteConfig, generate_from_path
    colors = generate_from_path('wallpaper.png', PaletteConfig(colors=8))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from .color import Color
from .config import Backend, PaletteConfig
from .errors import InvalidInputError
from .pipeline import transform_colors
from .quantizers import KMeansQuantizer, MedianCutQuantizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PixelBuffer:
    """Row-major RGB8 samples of a ``width`` x ``height`` image."""

    width: int
    height: int
    data: bytes

    @classmethod
    def from_image(cls, img: Image.Image) -> PixelBuffer:
        """Flatten a Pillow image to RGB; any alpha channel is discarded."""
        rgb = img.convert('RGB')
        width, height = rgb.size
        return cls(width, height, rgb.tobytes())

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(f'image has zero size ({self.width}x{self.height})')
        expected = self.width * self.height * 3
        if len(self.data) != expected:
            raise InvalidInputError(
                f'expected {expected} RGB8 samples for {self.width}x{self.height}, got {len(self.data)}'
            )

    def as_array(self) -> np.ndarray:
        """The pixels as a read-only (width * height, 3) uint8 array."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(-1, 3)


def make_quantizer(config: PaletteConfig) -> MedianCutQuantizer | KMeansQuantizer:
    if config.backend is Backend.KMEANS:
        return KMeansQuantizer(config.convergence_threshold, config.max_iterations)
    return MedianCutQuantizer()


def generate(pixels: PixelBuffer, config: PaletteConfig | None = None) -> list[Color]:
    """
    Build a terminal color scheme from ``pixels``.

    Raises:
        InvalidInputError: the buffer is zero-sized or its sample count does
            not match its dimensions
    """
    config = config or PaletteConfig()
    pixels.validate()
    quantizer = make_quantizer(config)
    logger.debug('quantizing %dx%d image with %s', pixels.width, pixels.height, config.backend.value)
    colors = quantizer.quantize(pixels.as_array(), max_colors=config.colors)
    return transform_colors(colors, config)


def generate_from_image(img: Image.Image, config: PaletteConfig | None = None) -> list[Color]:
    return generate(PixelBuffer.from_image(img), config)


def generate_from_path(path: str | Path, config: PaletteConfig | None = None) -> list[Color]:
    """Decode the image at ``path`` with Pillow and generate its scheme."""
    try:
        with Image.open(path) as img:
            buffer = PixelBuffer.from_image(img)
    except OSError as exc:
        raise InvalidInputError(f'cannot read image {path}: {exc}') from exc
    return generate(buffer, config)
