"""Vector quantization by exhaustive codebook search."""

import numpy as np
from typing import Tuple

from .base import BaseQuantizer


class VectorQuantization(BaseQuantizer):
    """Nearest-codeword search.

    Scans the codebook in index order and keeps a candidate only on strict
    improvement, so ties resolve to the lowest index. Assignment tables are
    reproducible bit for bit as long as the codebook is.

    Args:
        num_order: Order of vector (M)
        distance: Distance metric (defaults to squared Euclidean)
    """

    def run_with_distance(self, vector, codebook) -> Tuple[int, float]:
        """Find the nearest codeword.

        Args:
            vector: (M+1,) input vector
            codebook: (I, M+1) codebook vectors, I >= 1

        Returns:
            index: Index of the nearest codeword (lowest index on ties)
            distance: Distance to that codeword

        Raises:
            ValueError: If the quantizer is invalid, the codebook is empty or
                shapes mismatch
        """
        if not self.is_valid:
            raise ValueError("VectorQuantization is not valid")
        codebook = np.asarray(codebook, dtype=np.float64)
        if codebook.ndim != 2 or len(codebook) == 0:
            raise ValueError(f"Codebook must be a non-empty (I, {self.length}) array")

        distances = self.distance.pairwise(vector, codebook)  # (I,)

        # argmin returns the first occurrence of the minimum
        index = int(np.argmin(distances))
        return index, float(distances[index])


class InverseVectorQuantization:
    """Decode codebook indices back to codewords.

    Args:
        num_order: Order of vector (M)
    """

    def __init__(self, num_order: int):
        self.num_order = num_order
        self.is_valid = num_order >= 0

    def run(self, indices, codebook) -> np.ndarray:
        """Look up codewords.

        Args:
            indices: (T,) integer indices
            codebook: (I, M+1) codebook vectors

        Returns:
            vectors: (T, M+1) decoded vectors
        """
        if not self.is_valid:
            raise ValueError("InverseVectorQuantization is not valid")
        codebook = np.asarray(codebook, dtype=np.float64)
        indices = np.asarray(indices, dtype=np.int64)
        if codebook.ndim != 2 or codebook.shape[1] != self.num_order + 1:
            raise ValueError(f"Codebook must have shape (I, {self.num_order + 1})")
        if indices.size and (indices.min() < 0 or indices.max() >= len(codebook)):
            raise ValueError(f"Codebook index out of range [0, {len(codebook)})")
        return codebook[indices]
