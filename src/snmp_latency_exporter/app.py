"""Process wiring: poll loop and scrape server running side by side."""

import asyncio
import logging
import socket
from dataclasses import dataclass

import uvicorn

from snmp_latency_exporter.adapters.frameworks.asgi import ASGIApp, create_asgi_app
from snmp_latency_exporter.adapters.prometheus import ExporterMetrics, create_registry
from snmp_latency_exporter.adapters.snmp import PySnmpClient
from snmp_latency_exporter.config import ExporterSettings
from snmp_latency_exporter.core.errors import ListenerBindError
from snmp_latency_exporter.core.labels import LabelExtractor
from snmp_latency_exporter.core.ports import SnmpClientPort
from snmp_latency_exporter.core.poller import Poller
from snmp_latency_exporter.core.probe import LatencyProbe
from snmp_latency_exporter.core.scheduler import AlignedScheduler
from snmp_latency_exporter.core.state import SampleStore

logger = logging.getLogger(__name__)


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind the scrape listener before anything else starts.

    Raises:
        ListenerBindError: If the address cannot be bound.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        raise ListenerBindError(host, port, exc.strerror or str(exc)) from exc
    sock.set_inheritable(True)
    return sock


@dataclass
class Exporter:
    """A fully wired exporter for one device."""

    settings: ExporterSettings
    client: SnmpClientPort
    store: SampleStore
    metrics: ExporterMetrics
    poller: Poller
    app: ASGIApp

    async def run(self, sock: socket.socket | None = None) -> None:
        """Connect, bind, then serve scrapes and poll until stopped.

        Args:
            sock: Pre-bound listening socket (default: bind from settings).

        Raises:
            ConfigurationError: If the device address is unusable.
            ListenerBindError: If the scrape listener cannot bind.
        """
        await self.client.connect()
        try:
            if sock is None:
                sock = bind_socket(self.settings.listen_host, self.settings.listen_port)
            host, port = sock.getsockname()[:2]
            logger.info("Serving metrics on http://%s:%d%s", host, port, self.settings.metrics_path)

            server = uvicorn.Server(
                uvicorn.Config(self.app, lifespan="off", access_log=False, log_config=None)
            )
            server_task = asyncio.create_task(server.serve(sockets=[sock]), name="scrape-server")
            poller_task = asyncio.create_task(self.poller.run_forever(), name="poller")
            try:
                done, _ = await asyncio.wait(
                    {server_task, poller_task}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                server.should_exit = True
                poller_task.cancel()
                await asyncio.gather(server_task, poller_task, return_exceptions=True)
            for task in done:
                task.result()
        finally:
            self.client.close()


def build_exporter(
    settings: ExporterSettings,
    client: SnmpClientPort | None = None,
    scheduler: AlignedScheduler | None = None,
) -> Exporter:
    """Wire every component for settings.

    Args:
        settings: Validated exporter settings.
        client: Protocol client (default: PySnmpClient for settings.target).
        scheduler: Scheduler (default: aligned on settings.interval).

    Raises:
        ConfigurationError: If the OID list cannot be probed.
    """
    if client is None:
        client = PySnmpClient(
            settings.target,
            port=settings.snmp_port,
            community=settings.community.get_secret_value(),
            version=settings.snmp_version,
            timeout=settings.timeout,
            retries=settings.retries,
        )
    store = SampleStore()
    metrics = create_registry(store, static_labels=settings.static_labels)
    poller = Poller(
        scheduler=scheduler or AlignedScheduler(settings.interval),
        probe=LatencyProbe(client),
        extractor=LabelExtractor(),
        store=store,
        histogram=metrics.histogram,
        oids=settings.oids,
    )
    return Exporter(
        settings=settings,
        client=client,
        store=store,
        metrics=metrics,
        poller=poller,
        app=create_asgi_app(metrics.registry, settings.metrics_path),
    )
