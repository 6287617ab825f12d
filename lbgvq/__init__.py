"""Linde-Buzo-Gray codebook design and vector quantization primitives."""

from .config import LBGConfig
from .design import CodebookDesignError, LBGResult, LindeBuzoGrayAlgorithm
from .distances import get_distance
from .initialization import global_mean_init
from .quantizers import VectorQuantization
from .statistics import StatisticsAccumulation

__version__ = '0.1.0'

__all__ = [
    'LBGConfig',
    'CodebookDesignError',
    'LBGResult',
    'LindeBuzoGrayAlgorithm',
    'get_distance',
    'global_mean_init',
    'VectorQuantization',
    'StatisticsAccumulation',
]
