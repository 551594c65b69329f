"""Exception hierarchy for the exporter."""


class ExporterError(Exception):
    """Base class for all exporter errors."""


class ConfigurationError(ExporterError):
    """Invalid configuration detected at startup."""


class TransportError(ExporterError):
    """The SNMP exchange with the device failed."""


class ListenerBindError(ExporterError):
    """The scrape endpoint could not bind its listening socket."""

    def __init__(self, host: str, port: int, reason: str) -> None:
        super().__init__(f"cannot listen on {host}:{port}: {reason}")
        self.host = host
        self.port = port
        self.reason = reason
