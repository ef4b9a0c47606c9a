"""Prometheus adapter for the :class:`MeterRegistry` protocol.

The import is guarded so ``prometheus_client`` is only required when the
adapter is actually instantiated::

    pip install harness-credentials[metrics]
"""

from __future__ import annotations

import threading
from typing import Any


class PrometheusRegistry:
    """Adapter that forwards metrics to ``prometheus_client``.

    Counters map to :class:`~prometheus_client.Counter` and timers to
    :class:`~prometheus_client.Summary` (observed in milliseconds).
    Metrics are created lazily; label names come from the tag keys of the
    first call for a given metric name.

    Args:
        registry: Optional ``prometheus_client.CollectorRegistry``. Defaults
            to the global ``REGISTRY``.

    Raises:
        ImportError: If ``prometheus_client`` is not installed.
    """

    def __init__(self, registry: Any = None) -> None:
        try:
            import prometheus_client
        except ImportError:
            raise ImportError(
                "prometheus_client is required for PrometheusRegistry. Install it with: pip install prometheus-client"
            ) from None

        self._registry = registry if registry is not None else prometheus_client.REGISTRY
        self._lock = threading.Lock()
        self._counters: dict[str, Any] = {}
        self._summaries: dict[str, Any] = {}

    def counter(
        self,
        name: str,
        value: float = 1.0,
        tags: dict[str, str] | None = None,
    ) -> None:
        metric = self._get_or_create_counter(name, tags)
        if tags:
            metric.labels(**tags).inc(value)
        else:
            metric.inc(value)

    def timer(
        self,
        name: str,
        duration_ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        metric = self._get_or_create_summary(name, tags)
        if tags:
            metric.labels(**tags).observe(duration_ms)
        else:
            metric.observe(duration_ms)

    def get_metrics(self) -> dict[str, Any]:
        """Return registered metric names grouped by kind."""
        with self._lock:
            return {
                "counters": list(self._counters.keys()),
                "timers": list(self._summaries.keys()),
            }

    # -- internal helpers ---------------------------------------------------

    def _get_or_create_counter(self, name: str, tags: dict[str, str] | None) -> Any:
        with self._lock:
            if name not in self._counters:
                from prometheus_client import Counter

                label_names = sorted(tags.keys()) if tags else []
                self._counters[name] = Counter(name, f"Counter {name}", label_names, registry=self._registry)
            return self._counters[name]

    def _get_or_create_summary(self, name: str, tags: dict[str, str] | None) -> Any:
        with self._lock:
            if name not in self._summaries:
                from prometheus_client import Summary

                label_names = sorted(tags.keys()) if tags else []
                self._summaries[name] = Summary(name, f"Timer {name}", label_names, registry=self._registry)
            return self._summaries[name]
