"""Thread-safe holder for the latest probe outcome.

The poll loop writes, scrape handlers read. Each slot is replaced wholesale
under a lock, so a reader sees either the old or the new value, never a mix.
"""

import threading
from collections.abc import Mapping
from types import MappingProxyType

from snmp_latency_exporter.core.models import InfoLabels, Sample


class SampleStore:
    """Latest latency Sample and latest InfoLabels.

    Both slots are empty until the first successful probe and are never
    cleared afterwards.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sample: Sample | None = None
        self._labels: InfoLabels | None = None

    def update_sample(self, sample: Sample) -> None:
        """Replace the latency sample."""
        with self._lock:
            self._sample = sample

    def update_labels(self, labels: Mapping[str, str]) -> None:
        """Replace the info labels with a read-only copy of labels."""
        frozen = MappingProxyType(dict(labels))
        with self._lock:
            self._labels = frozen

    def record(self, sample: Sample, labels: Mapping[str, str]) -> None:
        """Replace both slots in one critical section."""
        frozen = MappingProxyType(dict(labels))
        with self._lock:
            self._sample = sample
            self._labels = frozen

    def current_sample(self) -> Sample | None:
        with self._lock:
            return self._sample

    def current_labels(self) -> InfoLabels | None:
        with self._lock:
            return self._labels

    def snapshot(self) -> tuple[Sample | None, InfoLabels | None]:
        """Read both slots consistently."""
        with self._lock:
            return self._sample, self._labels
