"""Shared helpers for the test suite."""

from .metric_delta import counter_value, histogram_observes, metric_delta, metric_increases

__all__ = ["counter_value", "histogram_observes", "metric_delta", "metric_increases"]
