"""Codebook initialization and perturbation sources."""

from .random_source import BaseRandomSource, NormalRandomSource, ReplayRandomSource
from .standard import global_mean_init

__all__ = [
    'BaseRandomSource',
    'NormalRandomSource',
    'ReplayRandomSource',
    'global_mean_init',
]
