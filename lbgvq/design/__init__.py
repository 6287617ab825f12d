"""Codebook design algorithms."""

from .lbg import CodebookDesignError, LBGResult, LindeBuzoGrayAlgorithm

__all__ = ['CodebookDesignError', 'LBGResult', 'LindeBuzoGrayAlgorithm']
