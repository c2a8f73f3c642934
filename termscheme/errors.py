"""Exceptions raised by palette generation."""
from __future__ import annotations


class PaletteError(Exception):
    """Base class for every error raised while generating a palette."""


class InvalidInputError(PaletteError, ValueError):
    """The pixel buffer is empty, zero-sized or could not be decoded."""


class ConfigurationError(PaletteError, ValueError):
    """A configuration value lies outside its documented range."""
