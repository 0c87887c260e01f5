"""Value types for the ARI client.

Every type here is a frozen dataclass: identifiers and results are built
once per certificate, handed to the caller, and never mutated.
Timestamps in :class:`SuggestedWindow` are kept as the opaque strings the
server sent; nothing in this package does date arithmetic on them.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class AriErrorKind(StrEnum):
    TRANSPORT = "transport"
    DECODE = "decode"
    MISSING_EXTENSION = "missing_extension"
    INPUT = "input"


# ---------------------------------------------------------------------------
# Certificate identifier
# ---------------------------------------------------------------------------


def b64url(data: bytes) -> str:
    """Base64url without padding (RFC 4648 §5)."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


@dataclass(frozen=True)
class CertificateIdentifier:
    """The two byte strings an ARI certID is built from.

    Attributes
    ----------
    authority_key_id:
        Content octets of the AKI ``keyIdentifier`` field.
    serial_number:
        Content octets of the DER INTEGER encoding of the serial,
        including any leading sign octet.

    """

    authority_key_id: bytes
    serial_number: bytes

    @property
    def cert_id(self) -> str:
        return f"{b64url(self.authority_key_id)}.{b64url(self.serial_number)}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "authorityKeyIdentifier": {
                "hex": self.authority_key_id.hex(),
                "base64url": b64url(self.authority_key_id),
            },
            "serialNumber": {
                "hex": self.serial_number.hex(),
                "base64url": b64url(self.serial_number),
            },
            "certID": self.cert_id,
        }

    def __str__(self) -> str:
        return self.cert_id


# ---------------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiscoveryDirectory:
    """ACME directory as far as ARI is concerned.

    Only :attr:`renewal_info` is used; the remaining resources are kept
    in :attr:`resources` for logging.
    """

    renewal_info: str
    resources: dict[str, Any] = field(default_factory=dict, compare=False)


# ---------------------------------------------------------------------------
# Renewal info
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SuggestedWindow:
    start: str
    end: str


@dataclass(frozen=True)
class RenewalInfoResult:
    """Decoded renewal-info response."""

    suggested_window: SuggestedWindow
    explanation_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Wire-shaped representation used for display."""
        return {
            "explanationURL": self.explanation_url,
            "suggestedWindow": {
                "start": self.suggested_window.start,
                "end": self.suggested_window.end,
            },
        }
