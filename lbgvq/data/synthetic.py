"""Gaussian cluster data for codebook design experiments.

This module generates the mixture
    X = C[y] + W
where:
    - y is uniform over K clusters (exactly n_per_cluster samples each)
    - C ∈ R^(K×d) are cluster centers placed `scale` apart on a grid
    - W ~ N(0, σ²I_d) is within-cluster noise

With σ much smaller than `scale`, the optimal K-codeword quantizer is close
to the cluster centers and every codeword should own n_per_cluster vectors.
"""

import numpy as np


class GaussianClusterDataset:
    """Generate well-separated Gaussian clusters.

    Args:
        num_clusters: Number of clusters (K)
        dim: Vector dimension (d = M + 1)
        n_per_cluster: Samples drawn from each cluster
        spread: Within-cluster standard deviation (σ)
        scale: Distance between neighboring centers
        seed: Random seed for reproducibility
    """

    def __init__(
        self,
        num_clusters: int = 4,
        dim: int = 2,
        n_per_cluster: int = 100,
        spread: float = 0.1,
        scale: float = 10.0,
        seed: int = 42
    ):
        self.num_clusters = num_clusters
        self.dim = dim
        self.n_per_cluster = n_per_cluster
        self.spread = spread
        self.scale = scale
        self.seed = seed

        rng = np.random.default_rng(seed)
        self.centers = self._generate_centers()
        self.X, self.labels = self._generate_data(rng)

    def _generate_centers(self) -> np.ndarray:
        """Place centers on the corners of a grid with `scale` spacing.

        Returns:
            centers: (num_clusters, dim) array
        """
        side = int(np.ceil(self.num_clusters ** (1.0 / self.dim)))
        centers = np.zeros((self.num_clusters, self.dim))
        for k in range(self.num_clusters):
            # k written in base `side`, one digit per dimension
            digits = np.unravel_index(k, (side,) * self.dim)
            centers[k] = np.asarray(digits, dtype=np.float64) * self.scale
        return centers

    def _generate_data(self, rng: np.random.Generator):
        """Sample n_per_cluster points around every center, shuffled.

        Returns:
            X: (num_clusters * n_per_cluster, dim) samples
            labels: (num_clusters * n_per_cluster,) cluster of each sample
        """
        labels = np.repeat(np.arange(self.num_clusters), self.n_per_cluster)
        rng.shuffle(labels)
        noise = rng.normal(scale=self.spread, size=(len(labels), self.dim))
        X = self.centers[labels] + noise
        return X, labels

    @property
    def num_order(self) -> int:
        """Order of vector (M = d - 1)."""
        return self.dim - 1

    def __len__(self) -> int:
        """Number of samples in dataset."""
        return len(self.X)

    def __repr__(self) -> str:
        """String representation."""
        return (f"GaussianClusterDataset(K={self.num_clusters}, d={self.dim}, "
                f"n={len(self)}, σ={self.spread:.3f}, scale={self.scale:.1f})")
