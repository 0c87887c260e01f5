"""Load end-entity certificates from local PEM files.

Only the first ``CERTIFICATE`` block of a file is used; any chain
certificates that follow it are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cryptography import x509

from acmeari.core.errors import InputError

log = logging.getLogger(__name__)

_PEM_MARKER = b"-----BEGIN CERTIFICATE-----"


def load_certificate_bytes(data: bytes, *, source: str | None = None) -> x509.Certificate:
    """Parse the first PEM certificate in *data*.

    Raises :class:`InputError` when *data* holds no PEM certificate block
    or the block does not contain a parsable X.509 certificate.
    """
    if _PEM_MARKER not in data:
        raise InputError("failed to parse certificate PEM", path=source)

    try:
        return x509.load_pem_x509_certificate(data)
    except ValueError as exc:
        raise InputError(f"failed to parse certificate: {exc}", path=source) from exc


def load_certificate(path: str | Path) -> x509.Certificate:
    """Read *path* and parse the first PEM certificate in it."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise InputError(f"error reading file: {exc}", path=str(path)) from exc

    cert = load_certificate_bytes(data, source=str(path))
    log.debug("Loaded certificate %s subject=%s", path, cert.subject.rfc4514_string())
    return cert
