"""Base interface for codebook search."""

import numpy as np
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from ..distances import BaseDistance, SquaredEuclideanDistance


class BaseQuantizer(ABC):
    """Abstract base class for nearest-codeword search.

    All quantizer implementations should inherit from this class and implement
    `run_with_distance`.

    Args:
        num_order: Order of vector (M)
        distance: Distance metric (defaults to squared Euclidean)
    """

    def __init__(
        self,
        num_order: int,
        distance: Optional[BaseDistance] = None
    ):
        self.num_order = num_order
        self.distance = distance if distance is not None else SquaredEuclideanDistance(num_order)
        self.is_valid = (
            num_order >= 0
            and self.distance.is_valid
            and self.distance.num_order == num_order
        )

    @property
    def length(self) -> int:
        """Vector length (M + 1)."""
        return self.num_order + 1

    @abstractmethod
    def run_with_distance(self, vector, codebook) -> Tuple[int, float]:
        """Find the nearest codeword.

        Args:
            vector: (M+1,) input vector
            codebook: (I, M+1) codebook vectors

        Returns:
            index: Index of the nearest codeword
            distance: Distance to that codeword
        """
        raise NotImplementedError

    def run(self, vector, codebook) -> int:
        """Index of the nearest codeword."""
        index, _ = self.run_with_distance(vector, codebook)
        return index

    def quantize(self, vectors, codebook) -> np.ndarray:
        """Nearest codeword index for every row of vectors, in order.

        Args:
            vectors: (T, M+1) input vectors
            codebook: (I, M+1) codebook vectors

        Returns:
            indices: (T,) int64 array
        """
        vectors = np.asarray(vectors, dtype=np.float64)
        if vectors.ndim != 2:
            raise ValueError(f"Expected (T, {self.length}) vectors, got {vectors.shape}")
        codebook = np.asarray(codebook, dtype=np.float64)
        indices = np.empty(len(vectors), dtype=np.int64)
        for t, vector in enumerate(vectors):
            indices[t] = self.run(vector, codebook)
        return indices

    def __repr__(self) -> str:
        """String representation."""
        return (f"{self.__class__.__name__}("
                f"num_order={self.num_order}, "
                f"distance={self.distance.name})")
