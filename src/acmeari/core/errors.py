"""Exception taxonomy for the ARI client.

Every failure raised by this package is an :class:`AriError` whose
:attr:`~AriError.kind` tells callers what went wrong without parsing the
message.  The structured fields (``url``, ``oid``, ``path``, ``status``,
``data``) are set where they apply and ``None`` otherwise.

Usage::

    try:
        cert_id = derive(cert)
    except AriError as exc:
        if exc.kind is AriErrorKind.MISSING_EXTENSION:
            ...
"""

from __future__ import annotations

from acmeari.core.types import AriErrorKind


class AriError(Exception):
    """Base class for all ARI client failures.

    Parameters
    ----------
    detail:
        Human-readable description of the failure.
    url:
        Request URL involved, for transport and response-decoding errors.
    oid:
        Dotted OID of the certificate extension involved.
    path:
        Local file the input came from.
    status:
        HTTP status code of the response being decoded, if any.
    data:
        Offending bytes (truncated by the caller if large).

    """

    kind: AriErrorKind

    def __init__(
        self,
        detail: str,
        *,
        url: str | None = None,
        oid: str | None = None,
        path: str | None = None,
        status: int | None = None,
        data: bytes | None = None,
    ) -> None:
        self.detail = detail
        self.url = url
        self.oid = oid
        self.path = path
        self.status = status
        self.data = data
        super().__init__(detail)

    def to_dict(self) -> dict:
        """Structured form for JSON logging."""
        out: dict = {"kind": self.kind.value, "detail": self.detail}
        for key in ("url", "oid", "path", "status"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.data is not None:
            out["data"] = self.data.hex()
        return out


class TransportError(AriError):
    """Network or connection failure on an HTTP call."""

    kind = AriErrorKind.TRANSPORT


class DecodeError(AriError):
    """Malformed JSON response, or malformed DER in the certificate."""

    kind = AriErrorKind.DECODE


class MissingExtensionError(AriError):
    """Certificate carries no Authority Key Identifier extension."""

    kind = AriErrorKind.MISSING_EXTENSION


class InputError(AriError):
    """Unreadable file, missing PEM block, or unparsable certificate."""

    kind = AriErrorKind.INPUT
