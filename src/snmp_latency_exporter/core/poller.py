"""The sampling loop: wait, probe, extract, publish."""

import logging
from collections.abc import Sequence

from snmp_latency_exporter.core.errors import TransportError
from snmp_latency_exporter.core.labels import LabelExtractor
from snmp_latency_exporter.core.ports import LatencyObserverPort
from snmp_latency_exporter.core.probe import LatencyProbe
from snmp_latency_exporter.core.scheduler import AlignedScheduler
from snmp_latency_exporter.core.state import SampleStore

logger = logging.getLogger(__name__)


class Poller:
    """Runs probe cycles on aligned boundaries and publishes the results.

    A failed probe is logged and skipped: the store and the histogram keep
    their previous state, and the next attempt happens at the next boundary.
    """

    def __init__(
        self,
        scheduler: AlignedScheduler,
        probe: LatencyProbe,
        extractor: LabelExtractor,
        store: SampleStore,
        histogram: LatencyObserverPort,
        oids: Sequence[str],
    ) -> None:
        probe.validate(oids)
        self.scheduler = scheduler
        self.probe = probe
        self.extractor = extractor
        self.store = store
        self.histogram = histogram
        self.oids = tuple(oids)
        self.consecutive_failures = 0

    async def run_cycle(self) -> bool:
        """Wait for the next boundary and run one probe.

        Returns:
            True if the probe succeeded and the results were published.
        """
        await self.scheduler.wait_until_next_boundary()
        try:
            result = await self.probe.probe(self.oids)
        except TransportError as exc:
            self.consecutive_failures += 1
            logger.warning(
                "Probe failed, keeping previous sample (%d consecutive failures): %s",
                self.consecutive_failures,
                exc,
            )
            return False

        labels = self.extractor.extract(result.var_binds)
        self.histogram.observe(result.latency_seconds)
        self.store.record(result.to_sample(), labels)

        if self.consecutive_failures:
            logger.info(
                "Probe recovered after %d failed cycles", self.consecutive_failures
            )
            self.consecutive_failures = 0
        return True

    async def run_forever(self) -> None:
        """Run cycles until the task is cancelled."""
        logger.info(
            "Polling %d OIDs every %ss", len(self.oids), self.scheduler.interval_ns / 1e9
        )
        while True:
            await self.run_cycle()
