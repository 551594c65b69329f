"""Metric family names, help texts and histogram buckets."""

INFO_METRIC = "snmp_about_info"
INFO_HELP = "SNMP narrative metric with a default value of 1"

LATENCY_METRIC = "snmp_response_latency_seconds"
LATENCY_HELP = "SNMP packet response latency"

DURATION_METRIC = "snmp_response_duration_seconds"
DURATION_HELP = "SNMP packet response latency"

BUILD_METRIC = "snmp_build"
BUILD_HELP = (
    "A metric with a constant '1' value labeled by version, revision, branch, "
    "and pythonversion from which snmp was built."
)

# Sub-millisecond LAN round trips up to one second over slow links; +Inf is implicit.
LATENCY_BUCKETS = (0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1)
