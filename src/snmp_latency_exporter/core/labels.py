"""Dynamic label extraction from SNMP response variables.

The dispatch table maps an OID to the label it fills and the function that
renders the raw value.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from snmp_latency_exporter.core.models import VarBind

logger = logging.getLogger(__name__)

SYS_CONTACT_OID = "1.3.6.1.2.1.1.4.0"
SYS_SERVICES_OID = "1.3.6.1.2.1.1.7.0"

Renderer = Callable[[bytes | int | str], str]


def render_text(value: bytes | int | str) -> str:
    """Render an OCTET STRING payload as text."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def render_bits(value: bytes | int | str) -> str:
    """Render an integer payload as binary digits at natural width.

    78 renders as "1001110": no zero padding, no trailing newline.
    """
    if isinstance(value, bytes):
        number = int.from_bytes(value, "big")
    else:
        number = int(value)
    return format(number, "b")


@dataclass(frozen=True)
class LabelRule:
    """Where a recognized OID goes: the label name and its renderer."""

    label: str
    render: Renderer


DEFAULT_RULES: Mapping[str, LabelRule] = {
    SYS_CONTACT_OID: LabelRule("contact", render_text),
    SYS_SERVICES_OID: LabelRule("sysServices", render_bits),
}

DEFAULT_OIDS = (SYS_CONTACT_OID, SYS_SERVICES_OID)


def normalize_oid(identifier: str) -> str:
    """Strip the leading dot some clients put on numeric OIDs."""
    return identifier.lstrip(".")


class LabelExtractor:
    """Builds the snmp_about_info label set from a probe response."""

    def __init__(
        self,
        rules: Mapping[str, LabelRule] | None = None,
        extra: Mapping[str, LabelRule] | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            rules: Dispatch table keyed by OID (default: DEFAULT_RULES).
            extra: Additional entries merged on top of rules.
        """
        table = dict(DEFAULT_RULES if rules is None else rules)
        table.update(extra or {})
        self._rules = {normalize_oid(oid): rule for oid, rule in table.items()}

    @property
    def rules(self) -> Mapping[str, LabelRule]:
        return dict(self._rules)

    def extract(self, var_binds: Iterable[VarBind]) -> dict[str, str]:
        """Map recognized variable bindings to label values.

        A new dict is built on every call, so labels from an earlier
        response never leak into this one. Unrecognized OIDs are logged
        and skipped; recognized OIDs without a value, or with a value their
        renderer rejects, are left out.

        Args:
            var_binds: Variable bindings from one probe response.

        Returns:
            Label name to label value.
        """
        labels: dict[str, str] = {}
        for index, var_bind in enumerate(var_binds):
            rule = self._rules.get(normalize_oid(var_bind.identifier))
            if rule is None:
                logger.info(
                    "%d: unmatched oid: %s value: %r",
                    index,
                    var_bind.identifier,
                    var_bind.value,
                )
                continue
            if var_bind.value is None:
                logger.debug("%d: no value for oid %s", index, var_bind.identifier)
                continue
            try:
                labels[rule.label] = rule.render(var_bind.value)
            except (TypeError, ValueError) as exc:
                logger.warning(
                    "%d: cannot render oid %s value %r as %s: %s",
                    index,
                    var_bind.identifier,
                    var_bind.value,
                    rule.label,
                    exc,
                )
        return labels
