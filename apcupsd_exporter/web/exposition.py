"""Render a MetricSet in the Prometheus text exposition format."""

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily

from apcupsd_exporter.core.metrics import METRICS, MetricSet


class MetricSetCollector:
    """prometheus_client collector serving one scrape's MetricSet."""

    def __init__(self, metric_set: MetricSet):
        self._metric_set = metric_set

    def collect(self):
        for definition in METRICS:
            observations = self._metric_set.family(definition.name)
            if not observations:
                continue
            family = GaugeMetricFamily(definition.name, definition.help,
                                       labels=list(definition.labels))
            for obs in observations:
                family.add_metric(list(obs.labels), obs.value)
            yield family


def render_metric_set(metric_set: MetricSet) -> bytes:
    """Return the exposition text for `metric_set`.

    Uses a throwaway registry so concurrent scrapes never share state.
    """
    registry = CollectorRegistry()
    registry.register(MetricSetCollector(metric_set))
    return generate_latest(registry)
