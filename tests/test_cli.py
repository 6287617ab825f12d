"""Tests for the command-line front end."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pandas as pd
import pytest
import yaml
from lbgvq.cli import main
from lbgvq.data import read_indices, write_indices, write_vectors


@pytest.fixture
def training_file(tmp_path):
    path = tmp_path / 'train.d'
    write_vectors(np.array([[-10.0], [-9.0], [9.0], [10.0]]), path)
    return path


def test_lbg_writes_codebook_and_indices(tmp_path, training_file, capsysbinary):
    """Test codebook design from a file with index output."""
    index_file = tmp_path / 'train.idx'
    status = main(['lbg', '-m', '0', '-e', '2', '-I', str(index_file), str(training_file)])
    assert status == 0

    codebook = np.frombuffer(capsysbinary.readouterr().out, dtype=np.float64)
    assert codebook.shape == (2,), f"expected 2 codewords, got {codebook.shape}"
    assert np.allclose(np.sort(codebook), [-9.5, 9.5], atol=1e-6)

    indices = read_indices(index_file)
    assert indices.tolist()[0] == indices.tolist()[1]
    assert indices.tolist()[2] == indices.tolist()[3]
    assert np.isclose(codebook[indices[0]], -9.5)


def test_lbg_length_option_and_initial_codebook(tmp_path, capsysbinary):
    """Test -l and -C with a two-vector seed codebook."""
    training = np.array([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0],
                         [0.0, 10.0], [1.0, 10.0], [10.0, 10.0], [11.0, 10.0]])
    training_path = tmp_path / 'train.d'
    seed_path = tmp_path / 'seed.d'
    write_vectors(training, training_path)
    write_vectors([[5.0, 0.0], [5.0, 10.0]], seed_path)

    status = main(['lbg', '-l', '2', '-e', '4', '-C', str(seed_path), str(training_path)])
    assert status == 0

    codebook = np.frombuffer(capsysbinary.readouterr().out, dtype=np.float64).reshape(-1, 2)
    assert codebook.shape == (4, 2)


def test_lbg_config_and_history(tmp_path, training_file, capsysbinary):
    """Test YAML parameters and the CSV history output."""
    config_path = tmp_path / 'lbg.yaml'
    config_path.write_text(yaml.safe_dump({'num_order': 0, 'target_codebook_size': 4,
                                           'num_iteration': 10}))
    history_path = tmp_path / 'history.csv'

    status = main(['lbg', '--config', str(config_path), '--history', str(history_path),
                   str(training_file)])
    assert status == 0

    codebook = np.frombuffer(capsysbinary.readouterr().out, dtype=np.float64)
    assert codebook.shape == (4,)

    history = pd.read_csv(history_path)
    assert {'step', 'codebook_size', 'iteration', 'distortion', 'converged'} <= set(history)
    assert history['codebook_size'].max() == 4


def test_lbg_too_few_vectors_fails(training_file, capsysbinary):
    """Test failure when the training set cannot fill the codebook."""
    status = main(['lbg', '-m', '0', '-e', '8', str(training_file)])
    assert status == 1
    assert capsysbinary.readouterr().out == b''


def test_lbg_unwritable_index_file_writes_nothing(tmp_path, training_file, capsysbinary):
    """Test that no codebook is printed when the index file cannot be opened."""
    index_file = tmp_path / 'missing' / 'train.idx'
    status = main(['lbg', '-m', '0', '-e', '2', '-I', str(index_file), str(training_file)])

    assert status == 1
    assert capsysbinary.readouterr().out == b'', "codebook written despite the failure"
    assert not index_file.exists()


def test_lbg_empty_input(tmp_path, capsysbinary):
    empty = tmp_path / 'empty.d'
    empty.write_bytes(b'')
    assert main(['lbg', '-m', '0', '-e', '2', str(empty)]) == 0
    assert capsysbinary.readouterr().out == b''


def test_lbg_missing_file():
    assert main(['lbg', '-m', '0', '/nonexistent/train.d']) == 1


def test_lbg_rejects_bad_options():
    """Test argument validation."""
    for argv in (['lbg', '-e', '1'], ['lbg', '-r', '0'], ['lbg', '-n', '0'],
                 ['lbg', '-l', '2', '-m', '1'], ['lbg', '-d', '-1']):
        with pytest.raises(SystemExit):
            main(argv)


def test_msvq_round_trip(tmp_path, capsysbinary):
    """Test multistage quantization and its inverse."""
    coarse, fine = tmp_path / 'cb1.d', tmp_path / 'cb2.d'
    write_vectors([[0.0, 0.0], [10.0, 10.0]], coarse)
    write_vectors([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]], fine)
    vectors = tmp_path / 'x.d'
    write_vectors([[10.9, 10.1], [0.2, 0.9]], vectors)

    assert main(['msvq', '-m', '1', '-s', str(coarse), '-s', str(fine), str(vectors)]) == 0
    indices = np.frombuffer(capsysbinary.readouterr().out, dtype=np.int32)
    assert indices.tolist() == [1, 1, 0, 2]

    index_file = tmp_path / 'x.idx'
    write_indices(indices, index_file)
    assert main(['imsvq', '-m', '1', '-s', str(coarse), '-s', str(fine), str(index_file)]) == 0
    decoded = np.frombuffer(capsysbinary.readouterr().out, dtype=np.float64).reshape(-1, 2)
    assert np.allclose(decoded, [[11.0, 10.0], [0.0, 1.0]])
