"""Wall-clock aligned scheduling for probe cycles.

Probes fire on exact multiples of the poll interval measured from the Unix
epoch, so exporters sharing an interval sample on the same instants.
"""

import asyncio
import logging
import re
import time
from collections.abc import Awaitable, Callable
from datetime import timedelta

from snmp_latency_exporter.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_UNIT_NS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_TERM = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_BARE_SECONDS = re.compile(r"\d+(?:\.\d*)?|\.\d+")

Clock = Callable[[], int]
Sleep = Callable[[float], Awaitable[object]]


def _parse_duration_string(text: str) -> int:
    """Parse a duration such as "120s" or "1m30s" into nanoseconds."""
    stripped = text.strip()
    if stripped.startswith("+"):
        stripped = stripped[1:]
    if not stripped:
        raise ConfigurationError(f"invalid interval: {text!r}")
    if _BARE_SECONDS.fullmatch(stripped):
        return round(float(stripped) * _UNIT_NS["s"])
    pos = 0
    total = 0.0
    while pos < len(stripped):
        match = _DURATION_TERM.match(stripped, pos)
        if match is None:
            raise ConfigurationError(f"invalid interval: {text!r}")
        total += float(match.group(1)) * _UNIT_NS[match.group(2)]
        pos = match.end()
    return round(total)


def parse_interval_ns(value: timedelta | float | int | str) -> int:
    """Normalize a poll interval into positive integer nanoseconds.

    Args:
        value: A timedelta, a number of seconds, or a duration string
            using the units ns, us, ms, s, m and h (e.g., "120s", "1m30s").
            A bare number string is read as seconds.

    Returns:
        The interval in nanoseconds

    Raises:
        ConfigurationError: If the value is not a positive duration
    """
    try:
        if isinstance(value, timedelta):
            interval_ns = (value // timedelta(microseconds=1)) * 1_000
        elif isinstance(value, bool):
            raise ConfigurationError(f"invalid interval: {value!r}")
        elif isinstance(value, (int, float)):
            interval_ns = round(value * 1_000_000_000)
        elif isinstance(value, str):
            interval_ns = _parse_duration_string(value)
        else:
            raise ConfigurationError(f"invalid interval: {value!r}")
    except (ValueError, OverflowError) as exc:
        raise ConfigurationError(f"invalid interval: {value!r}") from exc

    if interval_ns <= 0:
        raise ConfigurationError(f"interval must be positive, got {value!r}")
    return interval_ns


def parse_interval(value: timedelta | float | int | str) -> timedelta:
    """Normalize a poll interval into a positive timedelta.

    Accepts the same inputs as parse_interval_ns. timedelta stops at
    microseconds, so a value with a sub-microsecond remainder is rejected
    rather than rounded.

    Raises:
        ConfigurationError: If the value is not a positive duration or is
            not a whole number of microseconds
    """
    interval_ns = parse_interval_ns(value)
    micros, remainder = divmod(interval_ns, 1_000)
    if remainder:
        raise ConfigurationError(
            f"interval {value!r} is not a whole number of microseconds"
        )
    try:
        return timedelta(microseconds=micros)
    except OverflowError as exc:
        raise ConfigurationError(f"invalid interval: {value!r}") from exc


def next_boundary(interval_ns: int, now_ns: int) -> int:
    """Return the first multiple of interval_ns strictly after now_ns."""
    return now_ns + (interval_ns - now_ns % interval_ns)


class AlignedScheduler:
    """Suspends the caller until the next interval boundary.

    Args:
        interval: Poll interval, anything accepted by parse_interval_ns.
        clock: Wall clock returning nanoseconds since the epoch.
        sleep: Coroutine function used to wait.
    """

    def __init__(
        self,
        interval: timedelta | float | int | str,
        clock: Clock = time.time_ns,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._interval_ns = parse_interval_ns(interval)
        self._clock = clock
        self._sleep = sleep

    @property
    def interval(self) -> timedelta:
        """The interval as a timedelta, truncated to microseconds."""
        return timedelta(microseconds=self._interval_ns // 1_000)

    @property
    def interval_ns(self) -> int:
        return self._interval_ns

    def next_boundary(self, now_ns: int | None = None) -> int:
        """Compute the next boundary after now_ns (default: current time)."""
        if now_ns is None:
            now_ns = self._clock()
        return next_boundary(self._interval_ns, now_ns)

    async def wait_until_next_boundary(self) -> float:
        """Sleep until the next boundary.

        Returns:
            The boundary reached, as a Unix timestamp in seconds.
        """
        boundary = self.next_boundary()
        logger.debug("Sleeping until %.3f", boundary / 1e9)
        while True:
            remaining = boundary - self._clock()
            if remaining <= 0:
                break
            # Event loop timers can fire marginally early against the wall clock.
            await self._sleep(remaining / 1e9)
        return boundary / 1e9


async def wait_until_next_boundary(interval: timedelta | float | int | str) -> float:
    """Sleep until the next multiple of interval since the epoch."""
    return await AlignedScheduler(interval).wait_until_next_boundary()
