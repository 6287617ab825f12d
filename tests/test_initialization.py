"""Tests for seed codebooks and perturbation sources."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest
from lbgvq.initialization import NormalRandomSource, ReplayRandomSource, global_mean_init


def test_normal_source_stream_is_sequential():
    """Test that block draws equal consecutive single draws."""
    block = NormalRandomSource(seed=5).draw(6)

    single = NormalRandomSource(seed=5)
    values = np.concatenate([single.draw(1) for _ in range(6)])

    assert np.array_equal(block, values), "block and single draws differ"
    assert single.num_drawn == 6


def test_normal_source_statistics():
    """Test that draws look standard normal."""
    values = NormalRandomSource(seed=0).draw(20000)
    assert abs(values.mean()) < 0.05, f"mean {values.mean():.3f} too far from 0"
    assert abs(values.std() - 1.0) < 0.05, f"std {values.std():.3f} too far from 1"


def test_replay_source():
    """Test replay order and exhaustion."""
    source = ReplayRandomSource([0.5, -1.0, 2.0])
    assert source.draw(2).tolist() == [0.5, -1.0]
    assert source.draw(1).tolist() == [2.0]
    with pytest.raises(ValueError):
        source.draw(1)


def test_global_mean_init():
    """Test the centroid seed codebook."""
    vectors = np.array([[1.0, 2.0], [3.0, 6.0], [5.0, 1.0]])
    codebook = global_mean_init(vectors, num_order=1)

    assert codebook.shape == (1, 2), f"expected (1, 2), got {codebook.shape}"
    assert np.allclose(codebook[0], [3.0, 3.0])

    with pytest.raises(ValueError):
        global_mean_init(np.empty((0, 2)), num_order=1)


if __name__ == "__main__":
    print("Running initialization tests...\n")
    test_normal_source_stream_is_sequential()
    test_normal_source_statistics()
    test_replay_source()
    test_global_mean_init()
    print("\n✓ All initialization tests passed!")
