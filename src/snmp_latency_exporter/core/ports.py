"""Port interfaces for the exporter's collaborators.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from snmp_latency_exporter.core.models import VarBind


@runtime_checkable
class SnmpClientPort(Protocol):
    """Port for the request/response protocol client.

    Adapters implementing this protocol talk to one SNMP agent.
    Examples: PySnmpClient, or a fake client in tests.
    """

    max_oids: int

    async def connect(self) -> None:
        """Prepare the transport to the device.

        Raises:
            ConfigurationError: If the target address cannot be used.
            TransportError: If the transport cannot be opened.
        """
        ...

    async def get(self, oids: Sequence[str]) -> list[VarBind]:
        """Issue one GET request for the given OIDs.

        Args:
            oids: Dotted object identifiers, at most max_oids of them.

        Returns:
            Variable bindings in response order.

        Raises:
            TransportError: On timeout, error status or malformed reply.
        """
        ...

    def close(self) -> None:
        """Release the transport."""
        ...


@runtime_checkable
class LatencyObserverPort(Protocol):
    """Port for the cumulative latency distribution.

    A prometheus_client Histogram satisfies this protocol.
    """

    def observe(self, amount: float) -> None:
        """Record one latency observation in seconds."""
        ...
