"""Latency measurement around a single SNMP exchange."""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence

from snmp_latency_exporter.core.errors import ConfigurationError, TransportError
from snmp_latency_exporter.core.models import ProbeResult
from snmp_latency_exporter.core.ports import SnmpClientPort

logger = logging.getLogger(__name__)


class LatencyProbe:
    """Times one GET request against the device.

    The timing brackets only the client call: the "sent" reading is taken
    right before dispatch and the "received" reading right after the client
    returns, before any decoding done by the caller.
    """

    def __init__(
        self,
        client: SnmpClientPort,
        perf_counter: Callable[[], float] = time.perf_counter,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the probe with a protocol client.

        Args:
            client: Adapter implementing SnmpClientPort.
            perf_counter: Monotonic clock used for the elapsed time.
            clock: Wall clock used to timestamp the response.
        """
        self._client = client
        self._perf_counter = perf_counter
        self._clock = clock

    def validate(self, oids: Sequence[str]) -> None:
        """Check that oids fit in a single request.

        Raises:
            ConfigurationError: If oids is empty or exceeds client.max_oids.
        """
        if not oids:
            raise ConfigurationError("at least one OID must be probed")
        if len(oids) > self._client.max_oids:
            raise ConfigurationError(
                f"{len(oids)} OIDs requested, client accepts at most "
                f"{self._client.max_oids} per request"
            )

    async def probe(self, oids: Sequence[str]) -> ProbeResult:
        """Send one GET for oids and measure the round trip.

        Args:
            oids: Dotted object identifiers to request.

        Returns:
            ProbeResult with the variable bindings, the latency in seconds
            and the wall-clock receive time.

        Raises:
            ConfigurationError: If oids cannot be sent in one request.
            TransportError: If the exchange fails.
        """
        self.validate(oids)
        sent = self._perf_counter()
        try:
            var_binds = await self._client.get(oids)
        except TransportError:
            raise
        except (OSError, asyncio.TimeoutError) as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc
        received = self._perf_counter()
        received_at = self._clock()

        latency = received - sent
        logger.debug("Probe of %d OIDs took %.6fs", len(oids), latency)
        return ProbeResult(
            latency_seconds=latency,
            received_at=received_at,
            var_binds=tuple(var_binds),
        )
