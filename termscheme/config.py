"""Palette generation settings."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .errors import ConfigurationError


class Backend(str, Enum):
    """Quantization strategy used to pick the initial colors."""

    MEDIAN_CUT = 'median-cut'
    KMEANS = 'kmeans'


DELTA_RANGE = (-1.0, 1.0)


def _check_delta(name: str, value: float) -> None:
    low, high = DELTA_RANGE
    if not (math.isfinite(value) and low <= value <= high):
        raise ConfigurationError(f'{name}={value} is not in range [{low},{high}]')


@dataclass(frozen=True, slots=True)
class PaletteConfig:
    """Configuration bundle for a single palette generation."""

    colors: int = 8
    backend: Backend = Backend.MEDIAN_CUT
    bold: bool = True
    bold_delta: float = 0.2
    rotate: float = 0.0  # degrees, wraps modulo 360
    lighten: float = 0.0
    saturate: float = 0.0
    light: bool = False
    anchor: bool = True  # push darkest/lightest entries toward black/white
    convergence_threshold: float = 1e-3
    max_iterations: int = 128

    def __post_init__(self) -> None:
        # Out-of-range values are rejected, never clamped
        if isinstance(self.colors, bool) or not isinstance(self.colors, int) or self.colors < 1:
            raise ConfigurationError(f'colors must be an integer >= 1, got {self.colors!r}')
        try:
            object.__setattr__(self, 'backend', Backend(self.backend))
        except ValueError:
            choices = ', '.join(b.value for b in Backend)
            raise ConfigurationError(f'unknown backend {self.backend!r} (choose from {choices})') from None
        _check_delta('bold_delta', self.bold_delta)
        _check_delta('lighten', self.lighten)
        _check_delta('saturate', self.saturate)
        if not math.isfinite(self.rotate):
            raise ConfigurationError(f'rotate must be a finite number of degrees, got {self.rotate}')
        if not (math.isfinite(self.convergence_threshold) and self.convergence_threshold > 0):
            raise ConfigurationError(
                f'convergence_threshold must be > 0, got {self.convergence_threshold}'
            )
        if (isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int)
                or self.max_iterations < 1):
            raise ConfigurationError(f'max_iterations must be an integer >= 1, got {self.max_iterations!r}')
