"""Concrete distance metrics."""

import numpy as np

from .base import BaseDistance


class ManhattanDistance(BaseDistance):
    """L1 distance: sum |a - b|."""

    name = 'manhattan'

    def _compute(self, vector, vectors):
        return np.abs(vectors - vector).sum(axis=1)


class EuclideanDistance(BaseDistance):
    """L2 distance: sqrt(sum (a - b)²)."""

    name = 'euclidean'

    def _compute(self, vector, vectors):
        diff = vectors - vector
        return np.sqrt((diff * diff).sum(axis=1))


class SquaredEuclideanDistance(BaseDistance):
    """Squared L2 distance: sum (a - b)².

    This is the distortion measure used for codebook design.
    """

    name = 'squared_euclidean'

    def _compute(self, vector, vectors):
        diff = vectors - vector
        return (diff * diff).sum(axis=1)


class SymmetricKullbackLeiblerDistance(BaseDistance):
    """Symmetric Kullback-Leibler divergence between positive vectors.

        D(a, b) = sum (a - b)(log a - log b)

    Typically used on normalized spectra. All components must be positive.
    """

    name = 'symmetric_kullback_leibler'

    def _compute(self, vector, vectors):
        if np.any(vector <= 0.0) or np.any(vectors <= 0.0):
            raise ValueError("Symmetric Kullback-Leibler distance requires positive values")
        return ((vectors - vector) * (np.log(vectors) - np.log(vector))).sum(axis=1)


DISTANCES = {
    cls.name: cls
    for cls in (
        ManhattanDistance,
        EuclideanDistance,
        SquaredEuclideanDistance,
        SymmetricKullbackLeiblerDistance,
    )
}


def get_distance(name: str, num_order: int) -> BaseDistance:
    """Create a distance metric by name.

    Args:
        name: One of 'manhattan', 'euclidean', 'squared_euclidean',
            'symmetric_kullback_leibler'
        num_order: Order of vector (M)

    Returns:
        Distance instance
    """
    try:
        cls = DISTANCES[name]
    except KeyError:
        raise ValueError(
            f"Unknown distance: {name}. Choose from {sorted(DISTANCES)}") from None
    return cls(num_order)
