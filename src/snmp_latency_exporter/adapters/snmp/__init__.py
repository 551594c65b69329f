"""SNMP protocol client adapters."""

from snmp_latency_exporter.adapters.snmp.pysnmp_client import PySnmpClient

__all__ = ["PySnmpClient"]
