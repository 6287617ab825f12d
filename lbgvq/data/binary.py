"""Raw binary vector and index streams.

Vectors are stored as consecutive native-endian float64 values, M+1 per
vector, with no header; the order M has to be known by the reader. Codebook
indices are native-endian int32 values, one per vector.
"""

import io
import logging

import numpy as np
from pathlib import Path
from typing import BinaryIO, Union

logger = logging.getLogger(__name__)

Source = Union[str, Path, BinaryIO]

VECTOR_DTYPE = np.dtype(np.float64)
INDEX_DTYPE = np.dtype(np.int32)


def _read_bytes(source: Source) -> bytes:
    if isinstance(source, (str, Path)):
        return Path(source).read_bytes()
    return source.read()


def _write_bytes(data: bytes, sink: Source):
    if isinstance(sink, (str, Path)):
        Path(sink).write_bytes(data)
    else:
        sink.write(data)


def read_vectors(source: Source, num_order: int) -> np.ndarray:
    """Read float64 vectors of length M + 1.

    A trailing partial vector is ignored.

    Args:
        source: File path or binary stream
        num_order: Order of vector (M)

    Returns:
        vectors: (T, M+1) float64 array
    """
    if num_order < 0:
        raise ValueError(f"num_order must be non-negative, got {num_order}")
    length = num_order + 1
    raw = _read_bytes(source)

    values = np.frombuffer(raw, dtype=VECTOR_DTYPE, count=len(raw) // VECTOR_DTYPE.itemsize)
    num_vector = len(values) // length
    if num_vector * length != len(values) or len(raw) % VECTOR_DTYPE.itemsize:
        logger.warning(f"Ignoring trailing data after {num_vector} complete vectors")
    return values[:num_vector * length].reshape(num_vector, length).copy()


def write_vectors(vectors, sink: Source):
    """Write (T, M+1) vectors as raw float64 values."""
    vectors = np.atleast_2d(np.asarray(vectors, dtype=VECTOR_DTYPE))
    if vectors.ndim != 2:
        raise ValueError(f"Expected (T, M+1) vectors, got shape {vectors.shape}")
    _write_bytes(np.ascontiguousarray(vectors).tobytes(), sink)


def read_indices(source: Source) -> np.ndarray:
    """Read int32 codebook indices."""
    raw = _read_bytes(source)
    if len(raw) % INDEX_DTYPE.itemsize:
        logger.warning("Ignoring trailing partial index")
    return np.frombuffer(raw, dtype=INDEX_DTYPE, count=len(raw) // INDEX_DTYPE.itemsize).copy()


def write_indices(indices, sink: Source):
    """Write codebook indices as raw int32 values."""
    indices = np.asarray(indices)
    if indices.size and (indices.min() < np.iinfo(INDEX_DTYPE).min
                         or indices.max() > np.iinfo(INDEX_DTYPE).max):
        raise ValueError("Codebook index does not fit in int32")
    _write_bytes(np.ascontiguousarray(indices, dtype=INDEX_DTYPE).tobytes(), sink)


def vectors_to_bytes(vectors) -> bytes:
    """Serialize vectors to the raw float64 format."""
    buffer = io.BytesIO()
    write_vectors(vectors, buffer)
    return buffer.getvalue()
