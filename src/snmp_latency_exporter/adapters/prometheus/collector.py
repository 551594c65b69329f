"""Custom prometheus_client collector for the latest probe outcome.

The latency gauge and the info gauge change shape at runtime: the gauge
carries the time its value was measured and the info gauge's label names
depend on what the last response contained. Both are rebuilt from the
SampleStore snapshot on every scrape. The histogram is an ordinary
prometheus_client Histogram registered alongside.
"""

import platform
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from importlib import metadata

from prometheus_client import (
    CollectorRegistry,
    Histogram,
    Info,
    disable_created_metrics,
)
from prometheus_client.core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from snmp_latency_exporter.core.metrics import (
    BUILD_HELP,
    BUILD_METRIC,
    DURATION_HELP,
    DURATION_METRIC,
    INFO_HELP,
    INFO_METRIC,
    LATENCY_BUCKETS,
    LATENCY_HELP,
    LATENCY_METRIC,
)
from snmp_latency_exporter.core.models import InfoLabels, Sample
from snmp_latency_exporter.core.state import SampleStore

# Process-wide prometheus_client switch: no *_created series on any registry.
disable_created_metrics()


class SnmpCollector(Collector):
    """Exposes snmp_response_latency_seconds and snmp_about_info.

    Nothing is emitted for a family until the poll loop has populated it.
    """

    def __init__(
        self,
        store: SampleStore,
        static_labels: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the collector.

        Args:
            store: Shared store written by the poll loop.
            static_labels: Labels added to every snmp_about_info sample
                (e.g., {"site": "dc1"}). Labels read from the device win
                on a name clash.
        """
        self._store = store
        self._static_labels = dict(static_labels or {})

    def _latency_family(self, sample: Sample | None) -> GaugeMetricFamily:
        family = GaugeMetricFamily(LATENCY_METRIC, LATENCY_HELP)
        if sample is not None:
            family.add_metric([], sample.latency_seconds, timestamp=sample.observed_at)
        return family

    def _info_family(self, labels: InfoLabels | None) -> GaugeMetricFamily:
        merged = {**self._static_labels, **(labels or {})}
        names = sorted(merged)
        family = GaugeMetricFamily(INFO_METRIC, INFO_HELP, labels=names)
        if labels is not None:
            family.add_metric([merged[name] for name in names], 1)
        return family

    def describe(self) -> Iterable[Metric]:
        sample, labels = self._store.snapshot()
        if sample is not None:
            yield GaugeMetricFamily(LATENCY_METRIC, LATENCY_HELP)
        if labels is not None:
            yield GaugeMetricFamily(INFO_METRIC, INFO_HELP)

    def collect(self) -> Iterable[Metric]:
        sample, labels = self._store.snapshot()
        if sample is not None:
            yield self._latency_family(sample)
        if labels is not None:
            yield self._info_family(labels)


@dataclass
class ExporterMetrics:
    """Everything registered on the exporter's registry."""

    registry: CollectorRegistry
    collector: SnmpCollector
    histogram: Histogram
    build_info: Info


def package_version() -> str:
    try:
        return metadata.version("snmp-latency-exporter")
    except metadata.PackageNotFoundError:
        return ""


def create_registry(
    store: SampleStore,
    static_labels: Mapping[str, str] | None = None,
    buckets: Sequence[float] = LATENCY_BUCKETS,
) -> ExporterMetrics:
    """Build a fresh registry with all exporter metric families.

    Args:
        store: Shared store read by the custom collector.
        static_labels: Extra labels for snmp_about_info.
        buckets: Upper bounds for snmp_response_duration_seconds.

    Returns:
        ExporterMetrics holding the registry and its members.
    """
    registry = CollectorRegistry(auto_describe=True)
    collector = SnmpCollector(store, static_labels)
    registry.register(collector)

    histogram = Histogram(
        DURATION_METRIC,
        DURATION_HELP,
        buckets=buckets,
        registry=registry,
    )

    build_info = Info(BUILD_METRIC, BUILD_HELP, registry=registry)
    build_info.info(
        {
            "version": package_version(),
            "revision": "",
            "branch": "",
            "pythonversion": platform.python_version(),
        }
    )
    return ExporterMetrics(
        registry=registry,
        collector=collector,
        histogram=histogram,
        build_info=build_info,
    )
