"""Streaming statistics of vector sequences."""

from .accumulation import Buffer, StatisticsAccumulation, make_buffers

__all__ = ['Buffer', 'StatisticsAccumulation', 'make_buffers']
