#!/usr/bin/env python3
"""
Command-line front end for codebook design and vector quantization.

    lbgvq lbg [options] [infile] > codebook
    lbgvq msvq -s cbfile1 [-s cbfile2 ...] [infile] > indices
    lbgvq imsvq -s cbfile1 [-s cbfile2 ...] [infile] > vectors

Vectors are raw float64 values, indices raw int32 values (native byte order).
"""

import argparse
import logging
import sys
from contextlib import ExitStack
from dataclasses import replace

import numpy as np

from .config import LBGConfig
from .data import read_vectors, write_vectors, read_indices, write_indices
from .design import CodebookDesignError, LindeBuzoGrayAlgorithm
from .distances import DISTANCES
from .evaluation import MetricsTracker, compute_utilization_metrics
from .initialization import global_mean_init
from .quantizers import MultistageVectorQuantization, InverseMultistageVectorQuantization

DEFAULT_NUM_ORDER = LBGConfig.num_order

ENGINE_ARGUMENTS = (
    'seed',
    'target_codebook_size',
    'min_num_vector_in_cluster',
    'num_iteration',
    'convergence_threshold',
    'splitting_factor',
    'distance',
)


def _checked(convert, check, message):
    def parse(text):
        try:
            value = convert(text)
        except ValueError:
            raise argparse.ArgumentTypeError(message) from None
        if not check(value):
            raise argparse.ArgumentTypeError(message)
        return value
    return parse


positive_int = _checked(int, lambda v: v > 0, "must be a positive integer")
non_negative_int = _checked(int, lambda v: v >= 0, "must be a non-negative integer")
greater_than_one = _checked(int, lambda v: v > 1, "must be greater than 1")
non_negative_float = _checked(float, lambda v: v >= 0.0, "must be a non-negative number")
positive_float = _checked(float, lambda v: v > 0.0, "must be a positive number")


def add_order_arguments(parser: argparse.ArgumentParser):
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-l', dest='length', type=positive_int,
                       help=f'length of vector (default: {DEFAULT_NUM_ORDER + 1})')
    group.add_argument('-m', dest='num_order', type=non_negative_int,
                       help='order of vector (default: l-1)')


def resolve_num_order(args, default: int = DEFAULT_NUM_ORDER) -> int:
    if args.length is not None:
        return args.length - 1
    if args.num_order is not None:
        return args.num_order
    return default


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lbgvq',
        description='Linde-Buzo-Gray codebook design and vector quantization')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log every refinement round')
    subparsers = parser.add_subparsers(dest='command', required=True)

    lbg = subparsers.add_parser(
        'lbg', help='design a codebook',
        epilog='The number of input vectors must be at least n * e. The final '
               'codebook size may not be e because the codebook size is always doubled.')
    add_order_arguments(lbg)
    lbg.add_argument('-s', dest='seed', type=int, help='seed (default: 1)')
    lbg.add_argument('-e', dest='target_codebook_size', type=greater_than_one,
                     help='target codebook size (default: 256)')
    lbg.add_argument('-C', dest='initial_codebook_file',
                     help='initial codebook (default: mean of the input vectors)')
    lbg.add_argument('-I', dest='codebook_index_file', help='output file of codebook indices')
    lbg.add_argument('-n', dest='min_num_vector_in_cluster', type=positive_int,
                     help='minimum number of vectors in a cluster (default: 1)')
    lbg.add_argument('-i', dest='num_iteration', type=positive_int,
                     help='maximum number of iterations (default: 1000)')
    lbg.add_argument('-d', dest='convergence_threshold', type=non_negative_float,
                     help='convergence threshold (default: 1e-5)')
    lbg.add_argument('-r', dest='splitting_factor', type=positive_float,
                     help='splitting factor (default: 1e-5)')
    lbg.add_argument('--distance', choices=sorted(DISTANCES),
                     help='distance metric (default: squared_euclidean)')
    lbg.add_argument('--config', help='YAML file with LBG parameters')
    lbg.add_argument('--history', help='write per-round distortion to this CSV file')
    lbg.add_argument('infile', nargs='?', help='training vectors (default: stdin)')
    lbg.set_defaults(func=run_lbg)

    for name, func, help_text in (
        ('msvq', run_msvq, 'multistage vector quantization'),
        ('imsvq', run_imsvq, 'inverse multistage vector quantization'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        add_order_arguments(sub)
        sub.add_argument('-s', dest='codebook_files', action='append', required=True,
                         help='codebook file (repeat once per stage)')
        sub.add_argument('infile', nargs='?', help='input (default: stdin)')
        sub.set_defaults(func=func)

    return parser


def _input(args):
    return args.infile if args.infile is not None else sys.stdin.buffer


def run_lbg(args, log: logging.Logger) -> int:
    config = LBGConfig.from_yaml(args.config) if args.config else LBGConfig()
    overrides = {
        name: getattr(args, name)
        for name in ENGINE_ARGUMENTS
        if getattr(args, name) is not None
    }
    overrides['num_order'] = resolve_num_order(args, config.num_order)

    vectors = read_vectors(_input(args), overrides['num_order'])
    if len(vectors) == 0:
        return 0

    if args.initial_codebook_file is None:
        codebook = global_mean_init(vectors, overrides['num_order'])
    else:
        codebook = read_vectors(args.initial_codebook_file, overrides['num_order'])

    config = replace(config, initial_codebook_size=len(codebook), **overrides)
    engine = LindeBuzoGrayAlgorithm.from_config(config)
    if not engine.is_valid:
        log.error("Failed to initialize LindeBuzoGrayAlgorithm")
        return 1

    with ExitStack() as stack:
        # Nothing reaches stdout unless the index file can be written
        index_sink = None
        if args.codebook_index_file is not None:
            index_sink = stack.enter_context(open(args.codebook_index_file, 'wb'))

        try:
            result = engine.run(vectors, codebook)
        except CodebookDesignError as e:
            log.error(f"Failed to design codebook: {e}")
            return 1

        usage = compute_utilization_metrics(result.indices, result.codebook_size)
        log.info(f"Designed {result.codebook_size} codewords from {len(vectors)} vectors "
                 f"(perplexity {usage['perplexity']:.2f}, dead codes {usage['dead_codes']})")

        write_vectors(result.codebook, sys.stdout.buffer)
        if index_sink is not None:
            write_indices(result.indices, index_sink)

    if args.history is not None:
        tracker = MetricsTracker(result.codebook_size)
        tracker.update_from_history(result.history)
        tracker.save(args.history)
    return 0


def _read_codebooks(args, num_order: int):
    codebooks = [read_vectors(path, num_order) for path in args.codebook_files]
    for path, codebook in zip(args.codebook_files, codebooks):
        if len(codebook) == 0:
            raise ValueError(f"Codebook {path} is empty")
    return codebooks


def run_msvq(args, log: logging.Logger) -> int:
    num_order = resolve_num_order(args)
    codebooks = _read_codebooks(args, num_order)
    quantization = MultistageVectorQuantization(num_order, len(codebooks))
    if not quantization.is_valid:
        log.error("Failed to initialize MultistageVectorQuantization")
        return 1

    vectors = read_vectors(_input(args), num_order)
    indices = quantization.quantize(vectors, codebooks)
    write_indices(indices.ravel(), sys.stdout.buffer)
    return 0


def run_imsvq(args, log: logging.Logger) -> int:
    num_order = resolve_num_order(args)
    codebooks = _read_codebooks(args, num_order)
    inverse = InverseMultistageVectorQuantization(num_order, len(codebooks))
    if not inverse.is_valid:
        log.error("Failed to initialize InverseMultistageVectorQuantization")
        return 1

    indices = read_indices(_input(args))
    num_vector = len(indices) // len(codebooks)
    indices = indices[:num_vector * len(codebooks)].reshape(num_vector, len(codebooks))
    vectors = np.empty((num_vector, num_order + 1))
    for t, stage_indices in enumerate(indices):
        vectors[t] = inverse.run(stage_indices, codebooks)
    write_vectors(vectors, sys.stdout.buffer)
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(name)s: %(levelname)s: %(message)s')
    log = logging.getLogger(f'lbgvq.{args.command}')

    try:
        return args.func(args, log)
    except OSError as e:
        log.error(f"Cannot open file: {e}")
        return 1
    except ValueError as e:
        log.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
