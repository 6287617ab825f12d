"""Seed codebooks for LBG training."""

import numpy as np

from ..statistics import Buffer, StatisticsAccumulation
from ..utils import as_vector_array


def global_mean_init(vectors, num_order: int) -> np.ndarray:
    """Size-one codebook holding the centroid of all training vectors.

        c_0 = (1/T) sum_t x(t)

    This is the default seed when no initial codebook is given.

    Args:
        vectors: (T, M+1) training vectors, T >= 1
        num_order: Order of vector (M)

    Returns:
        codebook: (1, M+1) array
    """
    vectors = as_vector_array(vectors, num_order + 1)
    accumulation = StatisticsAccumulation(num_order, 1)
    buffer = Buffer()
    for vector in vectors:
        accumulation.run(vector, buffer)
    return accumulation.mean(buffer)[np.newaxis]
