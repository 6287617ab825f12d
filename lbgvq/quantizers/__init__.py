"""Codebook search and decoding."""

from .base import BaseQuantizer
from .vq import VectorQuantization, InverseVectorQuantization
from .multistage import MultistageVectorQuantization, InverseMultistageVectorQuantization
from .module import CodebookQuantizer

__all__ = [
    'BaseQuantizer',
    'VectorQuantization',
    'InverseVectorQuantization',
    'MultistageVectorQuantization',
    'InverseMultistageVectorQuantization',
    'CodebookQuantizer',
]
