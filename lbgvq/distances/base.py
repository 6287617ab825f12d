"""Base interface for distance metrics."""

import numpy as np
from abc import ABC, abstractmethod


class BaseDistance(ABC):
    """Abstract base class for distances between real vectors.

    Implementations only provide `pairwise`; the single pair form is derived
    from it so that both paths produce identical floating point results.

    Args:
        num_order: Order of vector (M). Vectors have M + 1 components.
    """

    name = 'base'

    def __init__(self, num_order: int):
        self.num_order = num_order
        self.is_valid = num_order >= 0

    @property
    def length(self) -> int:
        """Vector length (M + 1)."""
        return self.num_order + 1

    @abstractmethod
    def _compute(self, vector: np.ndarray, vectors: np.ndarray) -> np.ndarray:
        """Compute distances from vector (L,) to every row of vectors (K, L)."""
        raise NotImplementedError

    def pairwise(self, vector, vectors) -> np.ndarray:
        """Distance between one vector and each row of a matrix.

        Args:
            vector: (M+1,) vector
            vectors: (K, M+1) vectors

        Returns:
            distances: (K,) float64 array

        Raises:
            ValueError: If the object is invalid or shapes mismatch
        """
        if not self.is_valid:
            raise ValueError(f"{self.__class__.__name__} is not valid")
        vector = np.asarray(vector, dtype=np.float64)
        vectors = np.asarray(vectors, dtype=np.float64)
        if vector.shape != (self.length,):
            raise ValueError(
                f"Expected vector of length {self.length}, got shape {vector.shape}")
        if vectors.ndim != 2 or vectors.shape[1] != self.length:
            raise ValueError(
                f"Expected vectors of shape (K, {self.length}), got {vectors.shape}")
        return self._compute(vector, vectors)

    def run(self, vector1, vector2) -> float:
        """Distance between two vectors of length M + 1."""
        vector2 = np.asarray(vector2, dtype=np.float64)
        return float(self.pairwise(vector1, vector2[np.newaxis])[0])

    def __call__(self, vector1, vector2) -> float:
        return self.run(vector1, vector2)

    def __repr__(self) -> str:
        """String representation."""
        return (f"{self.__class__.__name__}("
                f"num_order={self.num_order}, "
                f"is_valid={self.is_valid})")
