"""Streaming accumulation of zeroth, first and second order statistics.

A `Buffer` holds the running sums for one stream of vectors (for example the
training vectors assigned to one codeword). `StatisticsAccumulation` carries
the shape configuration and turns buffers into means and covariances:

    N      = number of accumulated vectors
    s      = sum_t x(t)
    S      = sum_t x(t) x(t)^T          (lower triangle, order 2 only)
    mean   = s / N
    cov    = S / N - mean mean^T
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Buffer:
    """Running statistics of one vector stream.

    Arrays are allocated lazily on the first accumulation and then reused.
    """
    num_data: int = 0
    first_order: Optional[np.ndarray] = None
    second_order: Optional[np.ndarray] = None

    def clear(self):
        """Reset counts and sums in place, keeping allocated storage."""
        self.num_data = 0
        if self.first_order is not None:
            self.first_order.fill(0.0)
        if self.second_order is not None:
            self.second_order.fill(0.0)


def make_buffers(capacity: int) -> List[Buffer]:
    """Allocate a fixed set of statistics slots, one per cluster."""
    return [Buffer() for _ in range(capacity)]


class StatisticsAccumulation:
    """Accumulate statistics of (M+1)-dimensional vectors.

    Args:
        num_order: Order of vector (M)
        num_statistics_order: Highest order of statistics to keep (0, 1 or 2)
    """

    def __init__(self, num_order: int, num_statistics_order: int = 1):
        self.num_order = num_order
        self.num_statistics_order = num_statistics_order
        self.is_valid = num_order >= 0 and 0 <= num_statistics_order <= 2

    @property
    def length(self) -> int:
        """Vector length (M + 1)."""
        return self.num_order + 1

    def _check(self, min_statistics_order: int = 0):
        if not self.is_valid:
            raise ValueError("StatisticsAccumulation is not valid")
        if self.num_statistics_order < min_statistics_order:
            raise ValueError(
                f"Statistics of order {min_statistics_order} are not accumulated "
                f"(num_statistics_order={self.num_statistics_order})")

    def clear(self, buffer: Buffer):
        """Reset a buffer to zero count and zero sums."""
        buffer.clear()

    def run(self, data, buffer: Buffer):
        """Accumulate one vector into a buffer.

        Args:
            data: (M+1,) vector
            buffer: Buffer to update in place

        Raises:
            ValueError: If the vector length is not M + 1
        """
        self._check()
        data = np.asarray(data, dtype=np.float64)
        if data.shape != (self.length,):
            raise ValueError(
                f"Expected vector of length {self.length}, got shape {data.shape}")

        if self.num_statistics_order >= 1 and (
                buffer.first_order is None or buffer.first_order.shape != (self.length,)):
            buffer.first_order = np.zeros(self.length)
        if self.num_statistics_order >= 2 and (
                buffer.second_order is None
                or buffer.second_order.shape != (self.length, self.length)):
            buffer.second_order = np.zeros((self.length, self.length))

        buffer.num_data += 1
        if self.num_statistics_order >= 1:
            buffer.first_order += data
        if self.num_statistics_order >= 2:
            buffer.second_order += np.tril(np.outer(data, data))

    def num_data(self, buffer: Buffer) -> int:
        """Number of accumulated vectors (0 for a fresh buffer)."""
        return buffer.num_data

    def sum(self, buffer: Buffer) -> np.ndarray:
        """First order statistics, sum_t x(t)."""
        self._check(1)
        if buffer.first_order is None:
            return np.zeros(self.length)
        return buffer.first_order.copy()

    def mean(self, buffer: Buffer) -> np.ndarray:
        """Component-wise mean of the accumulated vectors.

        Raises:
            ValueError: If no data has been accumulated
        """
        self._check(1)
        if buffer.num_data <= 0:
            raise ValueError("Mean is undefined for an empty buffer")
        return buffer.first_order * (1.0 / buffer.num_data)

    def diagonal_covariance(self, buffer: Buffer) -> np.ndarray:
        """Per-component variance (biased, 1/N)."""
        self._check(2)
        mu = self.mean(buffer)
        z = 1.0 / buffer.num_data
        return z * np.diag(buffer.second_order) - mu * mu

    def standard_deviation(self, buffer: Buffer) -> np.ndarray:
        """Per-component standard deviation."""
        return np.sqrt(self.diagonal_covariance(buffer))

    def full_covariance(self, buffer: Buffer) -> np.ndarray:
        """Full (M+1, M+1) covariance matrix (biased, 1/N)."""
        self._check(2)
        mu = self.mean(buffer)
        z = 1.0 / buffer.num_data
        lower = z * buffer.second_order - np.tril(np.outer(mu, mu))
        return lower + np.tril(lower, -1).T

    def correlation(self, buffer: Buffer) -> np.ndarray:
        """Correlation coefficient matrix."""
        sigma = self.standard_deviation(buffer)
        return self.full_covariance(buffer) / np.outer(sigma, sigma)

    def __repr__(self) -> str:
        """String representation."""
        return (f"{self.__class__.__name__}("
                f"num_order={self.num_order}, "
                f"num_statistics_order={self.num_statistics_order})")
