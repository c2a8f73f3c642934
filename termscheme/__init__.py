"""Terminal color schemes extracted from images."""
from .color import Color
from .config import Backend, PaletteConfig
from .errors import ConfigurationError, InvalidInputError, PaletteError
from .palette import PixelBuffer, generate, generate_from_image, generate_from_path
from .pipeline import transform_colors

__all__ = [
    'Backend',
    'Color',
    'ConfigurationError',
    'InvalidInputError',
    'PaletteConfig',
    'PaletteError',
    'PixelBuffer',
    'generate',
    'generate_from_image',
    'generate_from_path',
    'transform_colors',
]
