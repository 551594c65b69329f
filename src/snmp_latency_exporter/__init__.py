"""Aligned SNMP latency probing exported to Prometheus."""

__version__ = "0.1.0"

from snmp_latency_exporter.core.errors import (
    ConfigurationError,
    ExporterError,
    ListenerBindError,
    TransportError,
)
from snmp_latency_exporter.core.labels import LabelExtractor, LabelRule
from snmp_latency_exporter.core.models import ProbeResult, Sample, VarBind
from snmp_latency_exporter.core.poller import Poller
from snmp_latency_exporter.core.probe import LatencyProbe
from snmp_latency_exporter.core.scheduler import (
    AlignedScheduler,
    parse_interval,
    parse_interval_ns,
    wait_until_next_boundary,
)
from snmp_latency_exporter.core.state import SampleStore

__all__ = [
    "AlignedScheduler",
    "ConfigurationError",
    "ExporterError",
    "LabelExtractor",
    "LabelRule",
    "LatencyProbe",
    "ListenerBindError",
    "Poller",
    "ProbeResult",
    "Sample",
    "SampleStore",
    "TransportError",
    "VarBind",
    "parse_interval",
    "parse_interval_ns",
    "wait_until_next_boundary",
]
