"""Metrics collection and export abstractions."""

from harness_credentials.core.metrics.exporters import PrometheusRegistry
from harness_credentials.core.metrics.registry import InMemoryRegistry, MeterRegistry

__all__ = [
    "InMemoryRegistry",
    "MeterRegistry",
    "PrometheusRegistry",
]
