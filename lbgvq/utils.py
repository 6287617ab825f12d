"""Utility functions for the codebook design package."""

import numpy as np


def as_vector_array(data, length: int) -> np.ndarray:
    """Convert a sequence of vectors to a contiguous (N, length) float64 array.

    Args:
        data: Array-like of shape (N, length). A flat sequence is accepted
            only for length 1, where every scalar is one vector.
        length: Vector length (M + 1)

    Returns:
        vectors: (N, length) float64 array (a copy; the input is never shared)

    Raises:
        ValueError: If the data cannot be viewed as vectors of this length
    """
    vectors = np.array(data, dtype=np.float64)
    if vectors.ndim == 1 and length == 1:
        vectors = vectors.reshape(-1, 1)
    if vectors.ndim != 2 or vectors.shape[1] != length:
        raise ValueError(
            f"Expected vectors of shape (N, {length}), got {vectors.shape}")
    return np.ascontiguousarray(vectors)
