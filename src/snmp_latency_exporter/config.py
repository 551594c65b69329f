"""Exporter settings loaded from the environment, a .env file or the CLI."""

import re
from datetime import timedelta
from typing import Any, Literal

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from snmp_latency_exporter.core.errors import ConfigurationError
from snmp_latency_exporter.core.labels import DEFAULT_OIDS
from snmp_latency_exporter.core.scheduler import parse_interval

_LABEL_NAME = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


class ExporterSettings(BaseSettings):
    """Settings for one exporter process probing one device.

    Every field can be set through an SNMP_EXPORTER_<FIELD> environment
    variable; lists and dicts are given as JSON.
    """

    model_config = SettingsConfigDict(
        env_prefix="SNMP_EXPORTER_",
        env_file=".env",
        extra="ignore",
    )

    target: str = Field(default="127.0.0.1", min_length=1)
    snmp_port: int = Field(default=161, ge=1, le=65535)
    community: SecretStr = SecretStr("public")
    snmp_version: Literal["1", "2c"] = "2c"
    timeout: float = Field(default=1.0, gt=0)
    retries: int = Field(default=0, ge=0)
    interval: timedelta = timedelta(seconds=120)
    oids: list[str] = Field(default_factory=lambda: list(DEFAULT_OIDS), min_length=1)
    listen_host: str = "0.0.0.0"
    listen_port: int = Field(default=8436, ge=0, le=65535)
    metrics_path: str = "/metrics"
    static_labels: dict[str, str] = Field(default_factory=dict)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("interval", mode="before")
    @classmethod
    def _parse_interval(cls, value: Any) -> timedelta:
        try:
            return parse_interval(value)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("metrics_path")
    @classmethod
    def _check_metrics_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("metrics_path must start with '/'")
        return value

    @field_validator("static_labels")
    @classmethod
    def _check_label_names(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if not _LABEL_NAME.fullmatch(name) or name.startswith("__"):
                raise ValueError(f"invalid label name: {name!r}")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def load_settings(**overrides: Any) -> ExporterSettings:
    """Load settings, letting non-None overrides win over the environment.

    Raises:
        ConfigurationError: If any setting is invalid.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return ExporterSettings(**values)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
