"""Command-line entry point."""

import asyncio

import typer

from snmp_latency_exporter import __version__
from snmp_latency_exporter.app import build_exporter
from snmp_latency_exporter.config import load_settings
from snmp_latency_exporter.core.errors import ConfigurationError, ListenerBindError
from snmp_latency_exporter.core.logs import configure_logging

app = typer.Typer(
    name="snmp-latency-exporter",
    help="Probe an SNMP device on aligned intervals and export latency to Prometheus.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.command()
def main(
    target: str | None = typer.Option(None, "--target", "-t", help="Device hostname or IP"),
    snmp_port: int | None = typer.Option(None, "--snmp-port", help="Device UDP port"),
    community: str | None = typer.Option(None, "--community", "-c", help="Community string"),
    snmp_version: str | None = typer.Option(None, "--snmp-version", help="1 or 2c"),
    timeout: float | None = typer.Option(None, "--timeout", help="Seconds per request"),
    retries: int | None = typer.Option(None, "--retries", help="Retransmissions per probe"),
    interval: str | None = typer.Option(
        None, "--interval", "-i", help="Poll interval, e.g. 120s or 1m30s"
    ),
    oids: list[str] | None = typer.Option(None, "--oid", help="OID to probe (repeatable)"),
    listen_host: str | None = typer.Option(None, "--listen-host", help="Scrape bind address"),
    listen_port: int | None = typer.Option(None, "--listen-port", "-p", help="Scrape port"),
    metrics_path: str | None = typer.Option(None, "--metrics-path", help="Scrape path"),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, ..."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
) -> None:
    """Run the exporter until interrupted.

    Unset options fall back to SNMP_EXPORTER_* environment variables.
    """
    try:
        settings = load_settings(
            target=target,
            snmp_port=snmp_port,
            community=community,
            snmp_version=snmp_version,
            timeout=timeout,
            retries=retries,
            interval=interval,
            oids=oids or None,
            listen_host=listen_host,
            listen_port=listen_port,
            metrics_path=metrics_path,
            log_level=log_level,
        )
        configure_logging(settings.log_level)
        exporter = build_exporter(settings)
        asyncio.run(exporter.run())
    except ConfigurationError as exc:
        typer.echo(f"configuration error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    except ListenerBindError as exc:
        typer.echo(f"error starting HTTP server: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except KeyboardInterrupt:
        pass
