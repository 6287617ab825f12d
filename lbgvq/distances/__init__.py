"""Distance metrics between real vectors."""

from .base import BaseDistance
from .metrics import (
    ManhattanDistance,
    EuclideanDistance,
    SquaredEuclideanDistance,
    SymmetricKullbackLeiblerDistance,
    DISTANCES,
    get_distance,
)

__all__ = [
    'BaseDistance',
    'ManhattanDistance',
    'EuclideanDistance',
    'SquaredEuclideanDistance',
    'SymmetricKullbackLeiblerDistance',
    'DISTANCES',
    'get_distance',
]
