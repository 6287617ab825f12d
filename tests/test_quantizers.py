"""Tests for codebook search and decoding."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest
import torch
from lbgvq.design import LindeBuzoGrayAlgorithm
from lbgvq.distances import ManhattanDistance
from lbgvq.initialization import global_mean_init
from lbgvq.quantizers import (
    VectorQuantization,
    InverseVectorQuantization,
    MultistageVectorQuantization,
    InverseMultistageVectorQuantization,
    CodebookQuantizer,
)


def test_nearest_codeword():
    """Test exhaustive search returns the closest codeword."""
    codebook = np.array([[0.0, 0.0], [5.0, 5.0], [10.0, 0.0]])
    quantization = VectorQuantization(num_order=1)

    index, distance = quantization.run_with_distance([4.0, 4.5], codebook)
    assert index == 1, f"expected index 1, got {index}"
    assert np.isclose(distance, 1.0 + 0.25)
    assert quantization.run([9.0, -1.0], codebook) == 2

    print("✓ Nearest codeword test passed")


def test_ties_resolve_to_lowest_index():
    """Test that equidistant codewords resolve to the first one."""
    codebook = np.array([[3.0], [-1.0], [1.0], [-1.0]])
    quantization = VectorQuantization(num_order=0)

    # 0 is at distance 1 from codewords 1, 2 and 3
    assert quantization.run([0.0], codebook) == 1
    # duplicate codewords: first copy wins
    assert quantization.run([-1.0], codebook) == 1

    print("✓ Tie-break test passed")


def test_quantize_all_rows():
    """Test batched quantization against brute force."""
    rng = np.random.default_rng(1)
    vectors = rng.normal(size=(50, 3))
    codebook = rng.normal(size=(6, 3))

    indices = VectorQuantization(2).quantize(vectors, codebook)
    expected = np.argmin(((vectors[:, None, :] - codebook[None]) ** 2).sum(-1), axis=1)

    assert indices.shape == (50,)
    assert np.array_equal(indices, expected), "quantize disagrees with brute force"


def test_custom_distance():
    """Test that the search uses the injected metric."""
    codebook = np.array([[0.0, 3.0], [2.0, 2.0]])
    vector = [0.0, 0.0]

    # Squared Euclidean: 9 vs 8; Manhattan: 3 vs 4
    assert VectorQuantization(1).run(vector, codebook) == 1
    assert VectorQuantization(1, ManhattanDistance(1)).run(vector, codebook) == 0


def test_invalid_search():
    """Test failure conditions of the search."""
    with pytest.raises(ValueError):
        VectorQuantization(1).run([0.0, 0.0], np.empty((0, 2)))
    with pytest.raises(ValueError):
        VectorQuantization(1).run([0.0, 0.0, 0.0], np.zeros((2, 2)))

    mismatched = VectorQuantization(2, ManhattanDistance(1))
    assert not mismatched.is_valid, "metric order must match the quantizer order"


def test_inverse_vector_quantization():
    """Test codeword lookup."""
    codebook = np.array([[1.0, 2.0], [3.0, 4.0]])
    inverse = InverseVectorQuantization(1)

    assert np.array_equal(inverse.run([1, 0, 1], codebook), codebook[[1, 0, 1]])
    with pytest.raises(ValueError):
        inverse.run([2], codebook)


def test_multistage_quantization():
    """Test residual quantization through two stages and its inverse."""
    coarse = np.array([[0.0, 0.0], [10.0, 10.0]])
    fine = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    codebooks = [coarse, fine]

    msvq = MultistageVectorQuantization(num_order=1, num_stage=2)
    indices, residual = msvq.run([10.9, 10.1], codebooks)

    assert list(indices) == [1, 1], f"expected [1, 1], got {list(indices)}"
    assert np.allclose(residual, [-0.1, 0.1])

    imsvq = InverseMultistageVectorQuantization(num_order=1, num_stage=2)
    assert np.allclose(imsvq.run(indices, codebooks), [11.0, 10.0])

    batch = msvq.quantize([[10.9, 10.1], [0.2, 0.9]], codebooks)
    assert batch.tolist() == [[1, 1], [0, 2]]

    with pytest.raises(ValueError):
        msvq.run([0.0, 0.0], [coarse])

    print("✓ Multistage quantization test passed")


def test_codebook_quantizer_matches_search():
    """Test the torch quantizer against the exhaustive search."""
    rng = np.random.default_rng(2)
    codebook = rng.normal(size=(8, 4))
    vectors = rng.normal(size=(64, 4))

    quantizer = CodebookQuantizer(codebook)
    z_q, indices, info = quantizer(torch.from_numpy(vectors))

    expected = VectorQuantization(3).quantize(vectors, codebook)
    assert indices.shape == (64,), f"indices shape: expected (64,), got {indices.shape}"
    assert np.array_equal(indices.numpy(), expected)
    assert torch.allclose(z_q, torch.from_numpy(codebook[expected]))
    assert torch.allclose(quantizer.decode(indices), z_q)
    assert info['distances'].shape == (64,)

    print("✓ Codebook quantizer test passed")


def test_codebook_quantizer_ties_and_gradients():
    """Test first-index ties and the straight-through option."""
    quantizer = CodebookQuantizer([[1.0], [-1.0]], straight_through=True)
    z = torch.tensor([[0.0], [0.5]], dtype=torch.float64, requires_grad=True)

    z_q, indices, _ = quantizer(z)
    assert indices.tolist() == [0, 0]

    z_q.sum().backward()
    assert z.grad is not None, "No gradient for z (STE failed)"
    assert torch.allclose(z.grad, torch.ones_like(z))

    params = list(quantizer.parameters())
    assert params == [], "codebook should be a buffer, not a parameter"


def test_codebook_quantizer_from_design_result():
    """Test building the torch quantizer from an LBG run."""
    training = np.array([[-10.0], [-9.0], [9.0], [10.0]])
    result = LindeBuzoGrayAlgorithm(0, 1, 2).run(training, global_mean_init(training, 0))

    quantizer = CodebookQuantizer.from_result(result)
    assert quantizer.codebook_size == 2 and quantizer.dim == 1

    _, indices, _ = quantizer(torch.from_numpy(training))
    assert np.array_equal(indices.numpy(), result.indices)


if __name__ == "__main__":
    print("Running quantizer tests...\n")
    test_nearest_codeword()
    test_ties_resolve_to_lowest_index()
    test_quantize_all_rows()
    test_custom_distance()
    test_invalid_search()
    test_inverse_vector_quantization()
    test_multistage_quantization()
    test_codebook_quantizer_matches_search()
    test_codebook_quantizer_ties_and_gradients()
    test_codebook_quantizer_from_design_result()
    print("\n✓ All quantizer tests passed!")
