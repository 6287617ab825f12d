"""Multistage (residual) vector quantization."""

import numpy as np
from typing import Optional, Sequence, Tuple

from ..distances import BaseDistance
from .vq import VectorQuantization


class MultistageVectorQuantization:
    """Quantize a vector through a chain of codebooks.

    Stage s quantizes the residual left by stages 0..s-1:

        e_0 = x
        i_s = argmin_j d(e_s, c_s[j])
        e_{s+1} = e_s - c_s[i_s]

    Args:
        num_order: Order of vector (M)
        num_stage: Number of stages (codebooks)
        distance: Distance metric for every stage
    """

    def __init__(
        self,
        num_order: int,
        num_stage: int,
        distance: Optional[BaseDistance] = None
    ):
        self.num_order = num_order
        self.num_stage = num_stage
        self.vector_quantization = VectorQuantization(num_order, distance)
        self.is_valid = num_stage >= 1 and self.vector_quantization.is_valid

    def run(self, vector, codebooks: Sequence) -> Tuple[np.ndarray, np.ndarray]:
        """Quantize one vector.

        Args:
            vector: (M+1,) input vector
            codebooks: num_stage codebooks, each (I_s, M+1)

        Returns:
            indices: (num_stage,) index per stage
            residual: (M+1,) quantization error after the last stage
        """
        if not self.is_valid:
            raise ValueError("MultistageVectorQuantization is not valid")
        if len(codebooks) != self.num_stage:
            raise ValueError(f"Expected {self.num_stage} codebooks, got {len(codebooks)}")

        residual = np.array(vector, dtype=np.float64)
        indices = np.empty(self.num_stage, dtype=np.int64)
        for s, codebook in enumerate(codebooks):
            codebook = np.asarray(codebook, dtype=np.float64)
            indices[s] = self.vector_quantization.run(residual, codebook)
            residual -= codebook[indices[s]]
        return indices, residual

    def quantize(self, vectors, codebooks: Sequence) -> np.ndarray:
        """Quantize every row; returns (T, num_stage) indices."""
        vectors = np.asarray(vectors, dtype=np.float64)
        indices = np.empty((len(vectors), self.num_stage), dtype=np.int64)
        for t, vector in enumerate(vectors):
            indices[t], _ = self.run(vector, codebooks)
        return indices


class InverseMultistageVectorQuantization:
    """Reconstruct vectors as the sum of the codewords chosen at each stage.

    Args:
        num_order: Order of vector (M)
        num_stage: Number of stages
    """

    def __init__(self, num_order: int, num_stage: int):
        self.num_order = num_order
        self.num_stage = num_stage
        self.is_valid = num_order >= 0 and num_stage >= 1

    def run(self, indices, codebooks: Sequence) -> np.ndarray:
        """Decode one (num_stage,) index tuple to an (M+1,) vector."""
        if not self.is_valid:
            raise ValueError("InverseMultistageVectorQuantization is not valid")
        if len(indices) != self.num_stage or len(codebooks) != self.num_stage:
            raise ValueError(f"Expected {self.num_stage} indices and codebooks")

        vector = np.zeros(self.num_order + 1)
        for index, codebook in zip(indices, codebooks):
            codebook = np.asarray(codebook, dtype=np.float64)
            if not 0 <= index < len(codebook):
                raise ValueError(f"Codebook index {index} out of range [0, {len(codebook)})")
            vector += codebook[index]
        return vector
