"""pysnmp implementation of SnmpClientPort.

Uses the asyncio high-level API. Timeouts and retries are enforced by the
pysnmp transport, so a dead device costs at most timeout * (retries + 1)
seconds per probe.
"""

import logging
from collections.abc import Sequence
from typing import Any

from pyasn1.type import univ
from pysnmp.error import PySnmpError
from pysnmp.hlapi.v3arch.asyncio import (
    CommunityData,
    ContextData,
    ObjectIdentity,
    ObjectType,
    SnmpEngine,
    UdpTransportTarget,
    get_cmd,
)
from pysnmp.proto.rfc1905 import EndOfMibView, NoSuchInstance, NoSuchObject

from snmp_latency_exporter.core.errors import ConfigurationError, TransportError
from snmp_latency_exporter.core.models import VarBind

logger = logging.getLogger(__name__)

# Largest number of variable bindings requested in one GET PDU.
DEFAULT_MAX_OIDS = 60

_MP_MODELS = {"1": 0, "2c": 1}
_ABSENT = (NoSuchObject, NoSuchInstance, EndOfMibView)


def convert_value(value: Any) -> bytes | int | str | None:
    """Turn a pysnmp value object into a plain Python value."""
    if isinstance(value, _ABSENT):
        return None
    if isinstance(value, univ.OctetString):
        return value.asOctets()
    if isinstance(value, univ.Integer):
        return int(value)
    return value.prettyPrint()


def convert_name(name: Any) -> str:
    """Render an ObjectIdentity or ObjectName as a dotted OID."""
    if hasattr(name, "getOid"):
        name = name.getOid()
    return str(name)


class PySnmpClient:
    """SNMP v1/v2c GET client for one agent."""

    def __init__(
        self,
        target: str,
        port: int = 161,
        community: str = "public",
        version: str = "2c",
        timeout: float = 1.0,
        retries: int = 0,
        max_oids: int = DEFAULT_MAX_OIDS,
    ) -> None:
        """Initialize the client. No network activity happens here.

        Args:
            target: Hostname or IP address of the agent.
            port: UDP port of the agent.
            community: Community string.
            version: "1" or "2c".
            timeout: Seconds to wait for each response.
            retries: Retransmissions before giving up.
            max_oids: Largest number of OIDs sent in one GET.
        """
        if version not in _MP_MODELS:
            raise ConfigurationError(f"unsupported SNMP version: {version!r}")
        self.target = target
        self.port = port
        self.timeout = timeout
        self.retries = retries
        self.max_oids = max_oids
        self._auth = CommunityData(community, mpModel=_MP_MODELS[version])
        self._engine: SnmpEngine | None = None
        self._transport: UdpTransportTarget | None = None

    async def connect(self) -> None:
        """Resolve the agent address and set up the UDP transport."""
        try:
            self._transport = await UdpTransportTarget.create(
                (self.target, self.port),
                timeout=self.timeout,
                retries=self.retries,
            )
        except PySnmpError as exc:
            raise ConfigurationError(
                f"invalid target address {self.target}:{self.port}: {exc}"
            ) from exc
        self._engine = SnmpEngine()
        logger.info("SNMP transport ready for %s:%d", self.target, self.port)

    async def get(self, oids: Sequence[str]) -> list[VarBind]:
        if self._engine is None or self._transport is None:
            raise TransportError("client is not connected")
        if len(oids) > self.max_oids:
            raise TransportError(f"too many OIDs in one request: {len(oids)}")

        try:
            error_indication, error_status, error_index, var_binds = await get_cmd(
                self._engine,
                self._auth,
                self._transport,
                ContextData(),
                *(ObjectType(ObjectIdentity(oid)) for oid in oids),
            )
        except PySnmpError as exc:
            raise TransportError(f"malformed exchange: {exc}") from exc

        if error_indication:
            raise TransportError(str(error_indication))
        if error_status:
            position = int(error_index)
            culprit = oids[position - 1] if 0 < position <= len(oids) else "?"
            raise TransportError(f"{error_status.prettyPrint()} at {culprit}")

        return [
            VarBind(identifier=convert_name(var_bind[0]), value=convert_value(var_bind[1]))
            for var_bind in var_binds
        ]

    def close(self) -> None:
        if self._engine is not None:
            self._engine.close_dispatcher()
            self._engine = None
        self._transport = None
