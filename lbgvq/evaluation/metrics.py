"""Metrics tracking for codebook design runs."""

import numpy as np
import pandas as pd
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List


def compute_utilization_metrics(indices, codebook_size: int) -> Dict[str, float]:
    """Compute codebook utilization metrics.

    Args:
        indices: (T,) assigned codeword indices
        codebook_size: Number of codewords

    Returns:
        Dictionary containing:
            - perplexity: exp(entropy) of usage distribution
            - dead_codes: number of unused codes
            - min_usage: minimum non-zero usage probability
            - max_usage: maximum usage probability
            - usage_entropy: entropy in nats
    """
    counts = np.bincount(np.asarray(indices, dtype=np.int64), minlength=codebook_size)
    usage = counts / max(counts.sum(), 1)

    used = usage[usage > 0]
    entropy = float(-(used * np.log(used)).sum())

    return {
        'perplexity': float(np.exp(entropy)),
        'dead_codes': int((counts == 0).sum()),
        'min_usage': float(used.min()) if used.size else 0.0,
        'max_usage': float(usage.max()) if usage.size else 0.0,
        'usage_entropy': entropy,
    }


def compute_distortion_metrics(vectors, codebook, indices) -> Dict[str, float]:
    """Compute quantization distortion.

    Args:
        vectors: (T, M+1) input vectors
        codebook: (I, M+1) codebook
        indices: (T,) assigned codeword indices

    Returns:
        Dictionary containing:
            - distortion: mean over vectors of ||x - c||²
            - distortion_per_dim: distortion divided by M+1
    """
    vectors = np.asarray(vectors, dtype=np.float64)
    codebook = np.asarray(codebook, dtype=np.float64)
    squared_error = (vectors - codebook[np.asarray(indices)]) ** 2
    distortion = float(squared_error.sum(axis=1).mean())

    return {
        'distortion': distortion,
        'distortion_per_dim': distortion / vectors.shape[1],
    }


class MetricsTracker:
    """Track per-round metrics of a design run and export them as CSV.

    Args:
        codebook_size: Final number of codebook entries
    """

    def __init__(self, codebook_size: int):
        self.codebook_size = codebook_size
        self.metrics = defaultdict(list)

    def update(self, step: int, **kwargs):
        """Add metrics for a given step.

        Args:
            step: Global round number
            **kwargs: Metric name-value pairs
        """
        self.metrics['step'].append(step)
        for key, value in kwargs.items():
            self.metrics[key].append(value)

    def update_from_history(self, history: List[Dict[str, Any]]):
        """Append every record of `LBGResult.history`."""
        start = len(self.metrics['step'])
        for step, record in enumerate(history, start=start):
            self.update(step, **record)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.metrics)

    def save(self, path: str):
        """Save metrics to CSV file.

        Args:
            path: Path to save CSV
        """
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        self.to_dataframe().to_csv(path, index=False)

    def load(self, path: str):
        """Load metrics from CSV file.

        Args:
            path: Path to CSV file
        """
        df = pd.read_csv(path)
        self.metrics = defaultdict(list, df.to_dict('list'))

    def get_final_metrics(self) -> Dict[str, Any]:
        """Get metrics from final step.

        Returns:
            Dictionary with final metric values
        """
        if len(self.metrics['step']) == 0:
            return {}

        final_metrics = {}
        for key, values in self.metrics.items():
            if key != 'step' and len(values) > 0:
                final_metrics[key] = values[-1]

        return final_metrics

    def __repr__(self) -> str:
        """String representation."""
        n_steps = len(self.metrics.get('step', []))
        n_metrics = max(len(self.metrics) - 1, 0)  # Exclude 'step'
        return f"MetricsTracker(steps={n_steps}, metrics={n_metrics})"
