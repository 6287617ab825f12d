"""Evaluation of designed codebooks."""

from .metrics import MetricsTracker, compute_utilization_metrics, compute_distortion_metrics

__all__ = ['MetricsTracker', 'compute_utilization_metrics', 'compute_distortion_metrics']
