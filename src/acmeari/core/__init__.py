"""Core value types and errors."""

from acmeari.core.errors import (
    AriError,
    DecodeError,
    InputError,
    MissingExtensionError,
    TransportError,
)
from acmeari.core.types import (
    AriErrorKind,
    CertificateIdentifier,
    DiscoveryDirectory,
    RenewalInfoResult,
    SuggestedWindow,
)

__all__ = [
    "AriError",
    "AriErrorKind",
    "CertificateIdentifier",
    "DecodeError",
    "DiscoveryDirectory",
    "InputError",
    "MissingExtensionError",
    "RenewalInfoResult",
    "SuggestedWindow",
    "TransportError",
]
