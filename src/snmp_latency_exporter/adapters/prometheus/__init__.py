"""prometheus_client adapters."""

from snmp_latency_exporter.adapters.prometheus.collector import (
    ExporterMetrics,
    SnmpCollector,
    create_registry,
)

__all__ = ["ExporterMetrics", "SnmpCollector", "create_registry"]
