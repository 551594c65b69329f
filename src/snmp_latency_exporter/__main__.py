from snmp_latency_exporter.cli import app

app()
