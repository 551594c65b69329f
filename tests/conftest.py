"""Shared test fixtures for all test modules."""

import asyncio
from collections.abc import Sequence

import httpx
import pytest

from snmp_latency_exporter.core.errors import TransportError
from snmp_latency_exporter.core.labels import SYS_CONTACT_OID, SYS_SERVICES_OID
from snmp_latency_exporter.core.models import VarBind
from snmp_latency_exporter.core.scheduler import AlignedScheduler
from snmp_latency_exporter.core.state import SampleStore

# 2021-01-03T18:18:00Z, a multiple of 60s
BASE_NS = 1_609_697_880 * 1_000_000_000


class FakeSnmpClient:
    """In-memory SnmpClientPort returning scripted responses.

    Each get() consumes the next scripted item; the last item repeats.
    An item that is an exception is raised instead of returned.
    """

    def __init__(
        self,
        responses: Sequence[Sequence[VarBind] | Exception] | None = None,
        max_oids: int = 60,
    ) -> None:
        self.responses = list(responses or [[]])
        self.max_oids = max_oids
        self.calls: list[tuple[str, ...]] = []
        self.connected = False
        self.closed = False

    async def connect(self) -> None:
        self.connected = True

    async def get(self, oids: Sequence[str]) -> list[VarBind]:
        self.calls.append(tuple(oids))
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return list(item)

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Nanosecond wall clock whose sleep() advances time instantly."""

    def __init__(self, now_ns: int = BASE_NS) -> None:
        self.now_ns = now_ns
        self.sleeps: list[float] = []

    def __call__(self) -> int:
        return self.now_ns

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now_ns += max(1, round(seconds * 1e9))
        await asyncio.sleep(0)


@pytest.fixture
def device_var_binds() -> list[VarBind]:
    """Response of a device with a contact and sysServices = 78."""
    return [
        VarBind(identifier=SYS_CONTACT_OID, value=b"ops@example.com"),
        VarBind(identifier=SYS_SERVICES_OID, value=78),
    ]


@pytest.fixture
def fake_client(device_var_binds: list[VarBind]) -> FakeSnmpClient:
    """Client that always answers with device_var_binds."""
    return FakeSnmpClient([device_var_binds])


@pytest.fixture
def failing_client() -> FakeSnmpClient:
    """Client whose every request times out."""
    return FakeSnmpClient([TransportError("No SNMP response received before timeout")])


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock starting 7.5s past a minute boundary."""
    return FakeClock(BASE_NS + 7_500_000_000)


@pytest.fixture
def scheduler(fake_clock: FakeClock) -> AlignedScheduler:
    """60s scheduler driven by fake_clock."""
    return AlignedScheduler(60, clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture
def store() -> SampleStore:
    """Fresh, empty sample store."""
    return SampleStore()


# === ASGI Test Fixtures ===


@pytest.fixture
def asgi_scope():
    """Factory fixture for creating ASGI scope dicts.

    Used in tests to create scope dicts with customizable method/path.
    """
    from snmp_latency_exporter.adapters.frameworks.asgi import Scope

    def _scope(method: str = "GET", path: str = "/metrics") -> Scope:
        return {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [],
        }

    return _scope


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture.

    Returns a tuple of (send_func, responses_list) for recording ASGI messages.
    """

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Returns a callable that accepts an ASGI app and yields a client
    with ASGITransport configured.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(registry)
            async with asgi_test_client(app) as client:
                response = await client.get("/metrics")
    """
    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client


@pytest.fixture
def make_client():
    """Factory for FakeSnmpClient with scripted responses."""
    return FakeSnmpClient


@pytest.fixture
def make_clock():
    """Factory for FakeClock starting at a given nanosecond timestamp."""
    return FakeClock
