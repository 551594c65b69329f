"""Core domain models for SNMP probe telemetry."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

# Label name -> label value for the snmp_about_info metric.
InfoLabels = Mapping[str, str]


@dataclass(frozen=True)
class VarBind:
    """A single variable binding returned by the SNMP client.

    Attributes:
        identifier: Dotted OID, with or without a leading dot.
        value: Decoded payload. None when the agent reported that the
            object does not exist.
    """

    identifier: str
    value: bytes | int | str | None


@dataclass(frozen=True)
class Sample:
    """A latency measurement and the wall-clock time it was observed.

    Attributes:
        latency_seconds: Round-trip time of the probe in seconds.
        observed_at: Unix timestamp in seconds when the response arrived.
    """

    latency_seconds: float
    observed_at: float


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one successful probe."""

    latency_seconds: float
    received_at: float
    var_binds: Sequence[VarBind] = field(default_factory=tuple)

    def to_sample(self) -> Sample:
        return Sample(latency_seconds=self.latency_seconds, observed_at=self.received_at)
