"""Sequential Gaussian draw services used for codebook perturbation."""

import numpy as np
from abc import ABC, abstractmethod
from typing import Sequence


class BaseRandomSource(ABC):
    """A stream of standard normal values consumed in order.

    Drawing `size` values at once must give the same values as `size`
    consecutive single draws.
    """

    @abstractmethod
    def draw(self, size: int) -> np.ndarray:
        """Return the next `size` values of the stream as a float64 array."""
        raise NotImplementedError


class NormalRandomSource(BaseRandomSource):
    """Standard normal values from a seeded NumPy generator.

    Args:
        seed: Random seed
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self.num_drawn = 0

    def draw(self, size: int) -> np.ndarray:
        self.num_drawn += size
        return self._rng.standard_normal(size)

    def __repr__(self) -> str:
        return f"NormalRandomSource(seed={self.seed}, num_drawn={self.num_drawn})"


class ReplayRandomSource(BaseRandomSource):
    """Replay a fixed sequence of values.

    Args:
        values: Values returned in order

    Raises:
        ValueError: From `draw`, once the sequence is exhausted
    """

    def __init__(self, values: Sequence[float]):
        self._values = np.asarray(values, dtype=np.float64).ravel()
        self.num_drawn = 0

    def draw(self, size: int) -> np.ndarray:
        end = self.num_drawn + size
        if end > len(self._values):
            raise ValueError(
                f"Random sequence exhausted: requested {end} values, have {len(self._values)}")
        values = self._values[self.num_drawn:end].copy()
        self.num_drawn = end
        return values
