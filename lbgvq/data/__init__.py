"""Vector file formats and synthetic training data."""

from .binary import (
    read_vectors,
    write_vectors,
    read_indices,
    write_indices,
    vectors_to_bytes,
)
from .synthetic import GaussianClusterDataset

__all__ = [
    'read_vectors',
    'write_vectors',
    'read_indices',
    'write_indices',
    'vectors_to_bytes',
    'GaussianClusterDataset',
]
