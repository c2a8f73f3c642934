from __future__ import annotations

import logging

import numpy as np

from ..color import Color, oklab_array_to_srgb, srgb_array_to_oklab
from ..errors import ConfigurationError
from .histogram import color_histogram

logger = logging.getLogger(__name__)

# Rows per distance block, bounds memory on images with many distinct colors
_CHUNK = 65536


def _initialize_centroids(points: np.ndarray, weights: np.ndarray, k: int) -> np.ndarray:
    """
    Pick ``k`` distinct seeds without randomness.

    Seeds sit at evenly spaced weighted quantiles of Oklab lightness; any
    duplicate picks are replaced by farthest-point selection.
    """
    order = np.argsort(points[:, 0], kind='stable')
    cumulative = np.cumsum(weights[order])
    targets = (np.arange(k) + 0.5) / k * cumulative[-1]
    positions = np.minimum(np.searchsorted(cumulative, targets), len(order) - 1)

    chosen: list[int] = []
    for idx in order[positions]:
        if int(idx) not in chosen:
            chosen.append(int(idx))

    # squared distance from each point to its nearest seed so far
    min_dist = np.full(len(points), np.inf)
    for idx in chosen:
        min_dist = np.minimum(min_dist, ((points - points[idx]) ** 2).sum(axis=1))

    while len(chosen) < k:
        candidates = min_dist.copy()
        candidates[chosen] = -1.0
        best = int(np.argmax(candidates))
        if candidates[best] <= 0:
            break
        chosen.append(best)
        min_dist = np.minimum(min_dist, ((points - points[best]) ** 2).sum(axis=1))
    return points[chosen].copy()


def _assign_points(points: np.ndarray, centroids: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Nearest centroid per point (lowest index on ties) and its squared distance."""
    labels = np.empty(len(points), dtype=np.intp)
    distances = np.empty(len(points), dtype=np.float64)
    for start in range(0, len(points), _CHUNK):
        block = points[start:start + _CHUNK]
        d = ((block[:, None, :] - centroids[None, :, :]) ** 2).sum(axis=2)
        best = np.argmin(d, axis=1)
        labels[start:start + _CHUNK] = best
        distances[start:start + _CHUNK] = d[np.arange(len(block)), best]
    return labels, distances


def _update_centroids(
    points: np.ndarray,
    weights: np.ndarray,
    labels: np.ndarray,
    centroids: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    k = len(centroids)
    totals = np.bincount(labels, weights=weights, minlength=k)
    updated = centroids.copy()
    filled = totals > 0
    for channel in range(3):
        sums = np.bincount(labels, weights=weights * points[:, channel], minlength=k)
        updated[filled, channel] = sums[filled] / totals[filled]
    return updated, totals


def _reseed_empty(
    points: np.ndarray,
    distances: np.ndarray,
    centroids: np.ndarray,
    totals: np.ndarray,
) -> np.ndarray:
    """
    Move every empty centroid onto the point farthest from its own centroid.

    Returns a keep-mask; an empty cluster is dropped when no point lies away
    from the existing centroids.
    """
    keep = np.ones(len(centroids), dtype=bool)
    empty = np.flatnonzero(totals == 0)
    if empty.size == 0:
        return keep
    distances = distances.copy()
    for j in empty:
        p = int(np.argmax(distances))
        if distances[p] <= 0:
            keep[j] = False
            continue
        centroids[j] = points[p]
        distances[p] = 0.0
    return keep


class KMeansQuantizer:
    """Weighted k-means in Oklab with deterministic seeding."""

    def __init__(self, convergence_threshold: float = 1e-3, max_iterations: int = 128) -> None:
        if not convergence_threshold > 0:
            raise ConfigurationError(
                f'convergence_threshold must be > 0, got {convergence_threshold}'
            )
        if isinstance(max_iterations, bool) or not isinstance(max_iterations, int) or max_iterations < 1:
            raise ConfigurationError(f'max_iterations must be an integer >= 1, got {max_iterations!r}')
        self.convergence_threshold = convergence_threshold
        self.max_iterations = max_iterations

    def quantize(self, pixels, max_colors: int = 16) -> list[Color]:
        """
        Cluster ``pixels`` into at most ``max_colors`` Oklab centroids.

        Iteration stops once no centroid moves by ``convergence_threshold``
        or more, or after ``max_iterations`` rounds; the latter is accepted
        silently. Fewer colors come back when the image has fewer distinct
        colors than requested or a cluster empties out for good.
        """
        if max_colors < 1:
            raise ConfigurationError(f'max_colors must be >= 1, got {max_colors}')
        colors, counts = color_histogram(pixels)
        points = srgb_array_to_oklab(colors)
        weights = counts.astype(np.float64)

        if len(points) <= max_colors:
            logger.debug('k-means: %d distinct colors <= %d, skipping iteration', len(points), max_colors)
            order = np.argsort(points[:, 0], kind='stable')
            return [Color.from_rgb(*colors[idx]) for idx in order]

        centroids = _initialize_centroids(points, weights, max_colors)
        for iteration in range(1, self.max_iterations + 1):
            labels, distances = _assign_points(points, centroids)
            updated, totals = _update_centroids(points, weights, labels, centroids)
            keep = _reseed_empty(points, distances, updated, totals)
            if not keep.all():
                logger.debug('k-means: dropping %d empty clusters', int((~keep).sum()))
                centroids = centroids[keep]
                updated = updated[keep]
            shift = float(np.sqrt(((updated - centroids) ** 2).sum(axis=1)).max())
            centroids = updated
            if shift < self.convergence_threshold:
                logger.debug('k-means: converged after %d iterations (shift %.2e)', iteration, shift)
                break
        else:
            logger.debug('k-means: stopped at max_iterations=%d', self.max_iterations)

        labels, _ = _assign_points(points, centroids)
        totals = np.bincount(labels, weights=weights, minlength=len(centroids))
        centroids = centroids[totals > 0]
        return [Color(*rgb) for rgb in oklab_array_to_srgb(centroids)]
