"""Batched torch quantizer built from a designed codebook."""

import numpy as np
import torch
import torch.nn as nn
from typing import Tuple, Dict, Any


class CodebookQuantizer(nn.Module):
    """Nearest-neighbor quantization of tensors with a fixed codebook.

    Uses squared Euclidean distance and resolves ties to the lowest index,
    matching the codebook design engine. The codebook is stored as a buffer,
    so it follows `.to(device)` but is not trained.

    Args:
        codebook: (codebook_size, dim) codebook, e.g. `LBGResult.codebook`
        straight_through: If True, gradients flow from z_q to z (STE)
    """

    def __init__(self, codebook, straight_through: bool = False):
        super().__init__()
        codebook = torch.as_tensor(np.asarray(codebook), dtype=torch.float64)
        assert codebook.dim() == 2 and codebook.shape[0] > 0, \
            f"codebook must be a non-empty 2-D array, got shape {tuple(codebook.shape)}"
        self.register_buffer('codebook', codebook.clone())
        self.straight_through = straight_through

    @property
    def codebook_size(self) -> int:
        return self.codebook.shape[0]

    @property
    def dim(self) -> int:
        return self.codebook.shape[1]

    @classmethod
    def from_result(cls, result, **kwargs) -> 'CodebookQuantizer':
        """Build from an `LBGResult`."""
        return cls(result.codebook, **kwargs)

    def forward(
        self,
        z: torch.Tensor
    ) -> Tuple[torch.Tensor, torch.Tensor, Dict[str, Any]]:
        """Quantize a batch.

        Args:
            z: (B, dim) vectors

        Returns:
            z_q: (B, dim) quantized vectors
            indices: (B,) nearest codeword indices
            info: Dictionary with 'distances' (B,) squared distance to the
                chosen codeword
        """
        codebook = self.codebook.to(z.dtype)

        # ||z - c_i||² for all codebook entries
        diff = z.unsqueeze(1) - codebook.unsqueeze(0)  # (B, codebook_size, dim)
        distances = diff.pow(2).sum(dim=-1)  # (B, codebook_size)

        # argmin returns the first minimal index on ties
        indices = distances.argmin(dim=1)  # (B,)
        z_q_hard = codebook[indices]  # (B, dim)

        if self.straight_through:
            z_q = z + (z_q_hard - z).detach()
        else:
            z_q = z_q_hard

        min_distances = distances.gather(1, indices.unsqueeze(1)).squeeze(1)
        return z_q, indices, {'distances': min_distances.detach()}

    def decode(self, indices: torch.Tensor) -> torch.Tensor:
        """Look up codewords for (B,) indices."""
        return self.codebook[indices]

    def __repr__(self) -> str:
        """String representation."""
        return (f"{self.__class__.__name__}("
                f"dim={self.dim}, "
                f"codebook_size={self.codebook_size}, "
                f"straight_through={self.straight_through})")
