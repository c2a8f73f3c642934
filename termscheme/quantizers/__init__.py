"""Quantizers reducing an image to a handful of representative colors."""
from .histogram import color_histogram
from .k_means import KMeansQuantizer
from .median_cut import MedianCutQuantizer

__all__ = ['KMeansQuantizer', 'MedianCutQuantizer', 'color_histogram']
