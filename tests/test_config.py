"""Tests for LBG configuration."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
import yaml
from lbgvq.config import LBGConfig
from lbgvq.design import LindeBuzoGrayAlgorithm
from lbgvq.distances import EuclideanDistance, SquaredEuclideanDistance


def test_defaults():
    """Test the default design parameters."""
    config = LBGConfig()
    assert config.num_order == 25
    assert config.target_codebook_size == 256
    assert config.num_iteration == 1000
    assert config.convergence_threshold == 1e-5
    assert config.splitting_factor == 1e-5
    assert config.seed == 1
    assert config.distance == 'squared_euclidean'


def test_yaml_round_trip(tmp_path):
    """Test writing and reading a YAML config."""
    config = LBGConfig(num_order=3, target_codebook_size=16, seed=9)
    path = tmp_path / 'configs' / 'lbg.yaml'
    config.to_yaml(path)

    loaded = LBGConfig.from_yaml(path)
    assert loaded == config, f"round trip changed config: {loaded}"


def test_partial_yaml_keeps_defaults(tmp_path):
    path = tmp_path / 'lbg.yaml'
    path.write_text(yaml.safe_dump({'num_order': 1, 'target_codebook_size': 8}))

    config = LBGConfig.from_yaml(path)
    assert config.num_order == 1
    assert config.target_codebook_size == 8
    assert config.min_num_vector_in_cluster == 1


def test_unknown_keys_rejected(tmp_path):
    with pytest.raises(ValueError):
        LBGConfig.from_dict({'order': 3})

    path = tmp_path / 'bad.yaml'
    path.write_text('- 1\n- 2\n')
    with pytest.raises(ValueError):
        LBGConfig.from_yaml(path)


def test_engine_from_config():
    """Test that the engine takes its parameters from the config."""
    config = LBGConfig(num_order=2, target_codebook_size=4, num_iteration=7)
    engine = LindeBuzoGrayAlgorithm.from_config(config)

    assert engine.is_valid
    assert engine.num_order == 2
    assert engine.num_iteration == 7
    assert isinstance(engine.distance, SquaredEuclideanDistance)

    euclidean = LindeBuzoGrayAlgorithm.from_config(
        LBGConfig(num_order=2, target_codebook_size=4, distance='euclidean'))
    assert isinstance(euclidean.distance, EuclideanDistance)

    with pytest.raises(ValueError):
        LindeBuzoGrayAlgorithm.from_config(LBGConfig(distance='cosine'))


if __name__ == "__main__":
    print("Running config tests...\n")
    test_defaults()
    test_engine_from_config()
    print("\n✓ All config tests passed!")
