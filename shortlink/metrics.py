"""Prometheus metrics for the link service."""

from typing import Dict, Union

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

Metric = Union[Counter, Histogram]


class MetricsSink:
    """Per-instance Prometheus registry.

    Components only ever call ``increment`` and ``observe``; nothing in the
    request path reads the values back. Metrics are created on first use with
    the label names of that first call.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, namespace: str = ""):
        self.namespace = namespace
        self.registry = CollectorRegistry()
        self._metrics: Dict[str, Metric] = {}

    def increment(self, name: str, amount: int = 1, **labels: str) -> None:
        """Increment a counter.

        Args:
            name: Metric name; dots and dashes are normalized to underscores
            amount: Increment amount
            **labels: Label values for this sample
        """
        counter = self._get_metric(Counter, name, labels)
        self._child(counter, labels).inc(amount)

    def observe(self, name: str, value: float, **labels: str) -> None:
        """Record a histogram observation, e.g. a duration in seconds."""
        histogram = self._get_metric(Histogram, name, labels)
        self._child(histogram, labels).observe(value)

    def render(self) -> str:
        """Render all metrics in the Prometheus exposition format."""
        return generate_latest(self.registry).decode("utf-8")

    def _get_metric(self, metric_type, name: str, labels: Dict[str, str]) -> Metric:
        key = self._metric_name(name)
        metric = self._metrics.get(key)
        if metric is None:
            metric = metric_type(
                key,
                name,
                labelnames=sorted(labels),
                namespace=self.namespace,
                registry=self.registry,
            )
            self._metrics[key] = metric
        return metric

    @staticmethod
    def _child(metric: Metric, labels: Dict[str, str]):
        if not labels:
            return metric
        return metric.labels(**{k: str(v) for k, v in labels.items()})

    @staticmethod
    def _metric_name(name: str) -> str:
        name = name.replace(".", "_").replace("-", "_")
        # prometheus_client appends the suffix for counters
        if name.endswith("_total"):
            name = name[: -len("_total")]
        return name
