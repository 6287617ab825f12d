"""Linde-Buzo-Gray codebook design.

Starting from I_0 seed codewords, the codebook is grown by doubling until its
size reaches the target I_E:

- Split: for 0 <= i < I, with a fresh Gaussian vector eps,
      c_{i+I} = c_i - r eps,    c_i = c_i + r eps
- Refine (at most N rounds per size), with D_{-1} = +inf:
    E-step: assign every training vector to its nearest codeword and
            accumulate per-cluster count and sum; D_n = mean squared distance
            to the assigned codewords.
    Stop if D_n == 0 or |D_{n-1} - D_n| / D_n < threshold.
    M-step: c_i = mean of cluster i when it holds at least V vectors.
    Clusters with fewer than V vectors are reseeded from the largest
    cluster: c_j = c_max - r eps', c_max = c_max + r eps'.
- After the last size, the assignment table is recomputed once more so it
  matches the returned codebook.

The codebook size is always doubled, so the final size is the smallest
I_0 * 2^k >= I_E and usually not I_E itself.
"""

import logging
import math

import numpy as np
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..config import LBGConfig
from ..distances import BaseDistance, SquaredEuclideanDistance, get_distance
from ..initialization import BaseRandomSource, NormalRandomSource
from ..quantizers import VectorQuantization
from ..statistics import Buffer, StatisticsAccumulation, make_buffers
from ..utils import as_vector_array

logger = logging.getLogger(__name__)


class CodebookDesignError(ValueError):
    """Raised when a codebook cannot be designed with the given inputs."""


@dataclass
class LBGResult:
    """Output of `LindeBuzoGrayAlgorithm.run`.

    Attributes:
        codebook: (I, M+1) designed codebook
        indices: (T,) nearest codeword index of every training vector
        history: One record per refinement round with keys 'codebook_size',
            'iteration', 'distortion', 'converged', 'num_degenerate'
    """
    codebook: np.ndarray
    indices: np.ndarray
    history: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def codebook_size(self) -> int:
        return len(self.codebook)


class LindeBuzoGrayAlgorithm:
    """Design a vector quantization codebook with the LBG algorithm.

    Invalid parameters do not raise; they leave `is_valid` False and every
    call to `run` fails with `CodebookDesignError`.

    Args:
        num_order: Order of vector (M)
        initial_codebook_size: Size of the seed codebook (I_0)
        target_codebook_size: Target codebook size (I_E > I_0)
        min_num_vector_in_cluster: Minimum cluster occupancy (V)
        num_iteration: Maximum refinement rounds per codebook size (N)
        convergence_threshold: Relative distortion change threshold
        splitting_factor: Perturbation scale (r)
        seed: Seed of the perturbation stream, reset at every run
        distance: Distance used for the nearest-codeword search (defaults to
            squared Euclidean). The distortion driving the convergence test is
            always the mean squared Euclidean distance.
        random_source_factory: Callable seed -> BaseRandomSource
            (defaults to NormalRandomSource)
    """

    def __init__(
        self,
        num_order: int,
        initial_codebook_size: int,
        target_codebook_size: int,
        min_num_vector_in_cluster: int = 1,
        num_iteration: int = 1000,
        convergence_threshold: float = 1e-5,
        splitting_factor: float = 1e-5,
        seed: int = 1,
        distance: Optional[BaseDistance] = None,
        random_source_factory: Optional[Callable[[int], BaseRandomSource]] = None
    ):
        self.num_order = num_order
        self.initial_codebook_size = initial_codebook_size
        self.target_codebook_size = target_codebook_size
        self.min_num_vector_in_cluster = min_num_vector_in_cluster
        self.num_iteration = num_iteration
        self.convergence_threshold = convergence_threshold
        self.splitting_factor = splitting_factor
        self.seed = seed
        self.random_source_factory = random_source_factory or NormalRandomSource

        self.distance = distance if distance is not None else SquaredEuclideanDistance(num_order)
        self.statistics_accumulation = StatisticsAccumulation(num_order, 1)
        self.vector_quantization = VectorQuantization(num_order, self.distance)
        if isinstance(self.distance, SquaredEuclideanDistance):
            self.distortion = self.distance
        else:
            self.distortion = SquaredEuclideanDistance(num_order)

        self.is_valid = (
            num_order >= 0
            and initial_codebook_size >= 1
            and target_codebook_size > initial_codebook_size
            and min_num_vector_in_cluster >= 1
            and num_iteration >= 1
            and convergence_threshold >= 0.0
            and splitting_factor > 0.0
            and self.distance.is_valid
            and self.distortion.is_valid
            and self.statistics_accumulation.is_valid
            and self.vector_quantization.is_valid
        )

    @classmethod
    def from_config(cls, config: LBGConfig, **kwargs) -> 'LindeBuzoGrayAlgorithm':
        """Create an engine from an `LBGConfig`.

        Keyword arguments (e.g. `random_source_factory`) are passed through.
        """
        kwargs.setdefault('distance', get_distance(config.distance, config.num_order))
        return cls(
            num_order=config.num_order,
            initial_codebook_size=config.initial_codebook_size,
            target_codebook_size=config.target_codebook_size,
            min_num_vector_in_cluster=config.min_num_vector_in_cluster,
            num_iteration=config.num_iteration,
            convergence_threshold=config.convergence_threshold,
            splitting_factor=config.splitting_factor,
            seed=config.seed,
            **kwargs
        )

    @property
    def length(self) -> int:
        """Vector length (M + 1)."""
        return self.num_order + 1

    @property
    def min_num_training_vector(self) -> int:
        """Smallest training set accepted by `run`."""
        return self.min_num_vector_in_cluster * self.target_codebook_size

    @property
    def final_codebook_size(self) -> int:
        """Codebook size after training: smallest I_0 * 2^k >= I_E."""
        size = self.initial_codebook_size
        while 0 < size < self.target_codebook_size:
            size *= 2
        return size

    def run(self, training_vectors, initial_codebook) -> LBGResult:
        """Design a codebook.

        Args:
            training_vectors: (T, M+1) training vectors,
                T >= min_num_vector_in_cluster * target_codebook_size
            initial_codebook: (initial_codebook_size, M+1) seed codebook,
                e.g. from `global_mean_init`. Not modified.

        Returns:
            LBGResult with the final codebook and assignment table

        Raises:
            CodebookDesignError: If the engine is invalid, an input is
                missing or malformed, or a primitive fails
        """
        if not self.is_valid:
            raise CodebookDesignError(f"{self!r} is not valid")
        if training_vectors is None or initial_codebook is None:
            raise CodebookDesignError("Training vectors and an initial codebook are required")

        try:
            vectors = as_vector_array(training_vectors, self.length)
            codebook = as_vector_array(initial_codebook, self.length)
        except ValueError as e:
            raise CodebookDesignError(str(e)) from e

        if len(vectors) < self.min_num_training_vector:
            raise CodebookDesignError(
                f"Need at least {self.min_num_training_vector} training vectors "
                f"({self.min_num_vector_in_cluster} x {self.target_codebook_size}), "
                f"got {len(vectors)}")
        if len(codebook) != self.initial_codebook_size:
            raise CodebookDesignError(
                f"Initial codebook has {len(codebook)} vectors, "
                f"expected {self.initial_codebook_size}")

        try:
            return self._design(vectors, codebook)
        except CodebookDesignError:
            raise
        except ValueError as e:
            raise CodebookDesignError(f"Failed to design codebook: {e}") from e

    def _design(self, vectors: np.ndarray, codebook: np.ndarray) -> LBGResult:
        random_source = self.random_source_factory(self.seed)
        buffers = make_buffers(self.final_codebook_size)
        indices = np.zeros(len(vectors), dtype=np.int64)
        history = []

        while len(codebook) < self.target_codebook_size:
            codebook = self._split(codebook, random_source)
            self._refine(vectors, codebook, indices, buffers, random_source, history)
            rounds = [r for r in history if r['codebook_size'] == len(codebook)]
            logger.info(
                f"Codebook size {len(codebook)}: {len(rounds)} round(s), "
                f"distortion {rounds[-1]['distortion']:.6g}")

        # The last round may have ended on an M-step; reassign with the final codebook
        for t, vector in enumerate(vectors):
            indices[t] = self.vector_quantization.run(vector, codebook)

        return LBGResult(codebook=codebook, indices=indices, history=history)

    def _split(self, codebook: np.ndarray, random_source: BaseRandomSource) -> np.ndarray:
        """Double the codebook by perturbing every codeword in two directions."""
        size = len(codebook)

        # Grow, then fill the new half
        grown = np.empty((2 * size, self.length))
        grown[:size] = codebook
        for i in range(size):
            perturbation = self.splitting_factor * random_source.draw(self.length)
            grown[i + size] = grown[i] - perturbation
            grown[i] = grown[i] + perturbation
        return grown

    def _refine(
        self,
        vectors: np.ndarray,
        codebook: np.ndarray,
        indices: np.ndarray,
        buffers: List[Buffer],
        random_source: BaseRandomSource,
        history: List[Dict[str, Any]]
    ):
        """Run E/M rounds at a fixed codebook size, updating codebook in place."""
        accumulation = self.statistics_accumulation
        num_vector = len(vectors)
        size = len(codebook)

        previous_total_distance = math.inf
        for n in range(self.num_iteration):
            for i in range(size):
                accumulation.clear(buffers[i])

            # E-step
            total_distance = 0.0
            for t, vector in enumerate(vectors):
                index, distance = self.vector_quantization.run_with_distance(vector, codebook)
                if self.distortion is not self.distance:
                    distance = self.distortion.run(vector, codebook[index])
                indices[t] = index
                accumulation.run(vector, buffers[index])
                total_distance += distance
            total_distance /= num_vector

            converged = (
                total_distance == 0.0
                or abs(previous_total_distance - total_distance) / total_distance
                < self.convergence_threshold
            )
            record = {
                'codebook_size': size,
                'iteration': n,
                'distortion': total_distance,
                'converged': converged,
                'num_degenerate': 0,
            }
            history.append(record)
            logger.debug(f"size={size} iter={n} distortion={total_distance:.6g}")
            if converged:
                break
            previous_total_distance = total_distance

            # M-step; the majority cluster is the first one with the largest count
            majority_index = -1
            max_num_vector_in_cluster = 0
            for i in range(size):
                num_vector_in_cluster = accumulation.num_data(buffers[i])
                if max_num_vector_in_cluster < num_vector_in_cluster:
                    majority_index = i
                    max_num_vector_in_cluster = num_vector_in_cluster
                if self.min_num_vector_in_cluster <= num_vector_in_cluster:
                    codebook[i] = accumulation.mean(buffers[i])

            # Reseed starved clusters next to the majority codeword
            for i in range(size):
                if accumulation.num_data(buffers[i]) < self.min_num_vector_in_cluster:
                    perturbation = self.splitting_factor * random_source.draw(self.length)
                    codebook[i] = codebook[majority_index] - perturbation
                    codebook[majority_index] = codebook[majority_index] + perturbation
                    record['num_degenerate'] += 1

    def __repr__(self) -> str:
        """String representation."""
        return (f"{self.__class__.__name__}("
                f"num_order={self.num_order}, "
                f"initial_codebook_size={self.initial_codebook_size}, "
                f"target_codebook_size={self.target_codebook_size}, "
                f"min_num_vector_in_cluster={self.min_num_vector_in_cluster}, "
                f"num_iteration={self.num_iteration}, "
                f"convergence_threshold={self.convergence_threshold}, "
                f"splitting_factor={self.splitting_factor}, "
                f"seed={self.seed})")
