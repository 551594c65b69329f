"""Logging helpers shared by the exporter modules."""

import logging
import sys

PACKAGE_LOGGER = "snmp_latency_exporter"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Calling this more than once replaces the handler rather than stacking
    duplicates.

    Args:
        level: Log level name or number (e.g., "INFO", logging.DEBUG)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_snmp_exporter_handler", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._snmp_exporter_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


def log_exception(message: str, logger: logging.Logger | None = None) -> None:
    """Log the exception currently being handled, with traceback.

    Args:
        message: Context describing what failed
        logger: Logger to use (default: package logger)
    """
    (logger or logging.getLogger(PACKAGE_LOGGER)).exception(message)
