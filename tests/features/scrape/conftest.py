"""BDD step definitions for scrape scenarios."""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
from pytest_bdd import given, parsers, then, when

from snmp_latency_exporter.adapters.frameworks.asgi import create_asgi_app
from snmp_latency_exporter.adapters.prometheus import ExporterMetrics, create_registry
from snmp_latency_exporter.core.errors import TransportError
from snmp_latency_exporter.core.labels import (
    DEFAULT_OIDS,
    SYS_CONTACT_OID,
    SYS_SERVICES_OID,
    LabelExtractor,
)
from snmp_latency_exporter.core.models import VarBind
from snmp_latency_exporter.core.poller import Poller
from snmp_latency_exporter.core.probe import LatencyProbe
from snmp_latency_exporter.core.scheduler import AlignedScheduler
from snmp_latency_exporter.core.state import SampleStore

BASE_NS = 1_609_697_880 * 1_000_000_000


@dataclass
class ScrapeScenarioContext:
    """State shared between the steps of one scenario."""

    var_binds: list[VarBind] = field(default_factory=list)
    responses: list[Any] = field(default_factory=list)
    latency: float = 0.001
    now_ns: int = BASE_NS
    store: SampleStore = field(default_factory=SampleStore)
    metrics: ExporterMetrics | None = None
    status_code: int = 0
    body: str = ""


class ScriptedClient:
    """SnmpClientPort answering from the scenario's scripted responses."""

    max_oids = 60

    def __init__(self, ctx: ScrapeScenarioContext) -> None:
        self.ctx = ctx

    async def connect(self) -> None:
        pass

    async def get(self, oids):
        item = self.ctx.responses[-1]
        if isinstance(item, Exception):
            raise item
        return list(item)

    def close(self) -> None:
        pass


def run_async(coro: Any) -> Any:
    """Run a coroutine synchronously."""
    return asyncio.run(coro)


def _poller(ctx: ScrapeScenarioContext) -> Poller:
    async def sleep(seconds: float) -> None:
        ctx.now_ns += max(1, round(seconds * 1e9))

    ticks = iter([0.0, ctx.latency])
    return Poller(
        scheduler=AlignedScheduler(60, clock=lambda: ctx.now_ns, sleep=sleep),
        probe=LatencyProbe(
            ScriptedClient(ctx),
            perf_counter=lambda: next(ticks),
            clock=lambda: ctx.now_ns / 1e9,
        ),
        extractor=LabelExtractor(),
        store=ctx.store,
        histogram=ctx.metrics.histogram,
        oids=DEFAULT_OIDS,
    )


async def _get(ctx: ScrapeScenarioContext, path: str) -> httpx.Response:
    app = create_asgi_app(ctx.metrics.registry)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


@pytest.fixture
def ctx() -> ScrapeScenarioContext:
    """Fresh scenario context for each test."""
    return ScrapeScenarioContext()


@given(
    parsers.parse(
        'an exporter for a device with contact "{contact}" and sysServices {services:d}'
    )
)
def given_exporter(ctx: ScrapeScenarioContext, contact: str, services: int) -> None:
    """Wire a registry over an empty store for the described device."""
    ctx.var_binds = [
        VarBind(identifier=SYS_CONTACT_OID, value=contact.encode()),
        VarBind(identifier=SYS_SERVICES_OID, value=services),
    ]
    ctx.metrics = create_registry(ctx.store)


@given(parsers.parse("the device answers in {ms:f} ms"))
def given_device_answers(ctx: ScrapeScenarioContext, ms: float) -> None:
    """Script a successful response with the given round trip."""
    ctx.latency = ms / 1000
    ctx.responses.append(ctx.var_binds)


@when("the device stops answering")
def when_device_stops(ctx: ScrapeScenarioContext) -> None:
    """Script a timeout for every following request."""
    ctx.responses.append(TransportError("No SNMP response received before timeout"))


@when("one poll cycle runs")
def when_cycle_runs(ctx: ScrapeScenarioContext) -> None:
    """Run a single aligned poll cycle."""
    run_async(_poller(ctx).run_cycle())


@when("the metrics endpoint is scraped")
def when_scraped(ctx: ScrapeScenarioContext) -> None:
    """GET /metrics."""
    response = run_async(_get(ctx, "/metrics"))
    ctx.status_code = response.status_code
    ctx.body = response.text


@when(parsers.parse('"{path}" is requested'))
def when_path_requested(ctx: ScrapeScenarioContext, path: str) -> None:
    """GET an arbitrary path."""
    response = run_async(_get(ctx, path))
    ctx.status_code = response.status_code
    ctx.body = response.text


@then(parsers.parse("the response status should be {code:d}"))
def then_status(ctx: ScrapeScenarioContext, code: int) -> None:
    """Assert the HTTP status."""
    assert ctx.status_code == code


@then(parsers.re(r"the exposition should contain [\"'](?P<text>.+)[\"']$"))
def then_contains(ctx: ScrapeScenarioContext, text: str) -> None:
    """Assert a line fragment is present."""
    assert text in ctx.body, f"{text!r} not in:\n{ctx.body}"


@then(parsers.re(r"the exposition should not contain [\"'](?P<text>.+)[\"']$"))
def then_not_contains(ctx: ScrapeScenarioContext, text: str) -> None:
    """Assert a line fragment is absent."""
    assert text not in ctx.body, f"{text!r} unexpectedly in:\n{ctx.body}"
