"""Root conftest for the acmeari test suite."""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtensionOID, NameOID

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


# ---------------------------------------------------------------------------
# Test certificates
# ---------------------------------------------------------------------------


def build_certificate(
    *,
    serial: int = 0x0405,
    key_id: bytes | None = b"\x01\x02\x03",
    raw_extensions: list[tuple[x509.ObjectIdentifier, bytes]] | None = None,
) -> x509.Certificate:
    """Self-signed EC certificate with a chosen serial and AKI.

    *key_id* adds a regular AKI extension (``None`` omits it).
    *raw_extensions* are added first, verbatim, as unrecognised
    extensions so malformed values can be planted.
    """
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "ari.example.test")])
    now = datetime.now(UTC)
    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(serial)
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=89))
    )
    for oid, value in raw_extensions or []:
        builder = builder.add_extension(x509.UnrecognizedExtension(oid, value), critical=False)
    if key_id is not None:
        builder = builder.add_extension(
            x509.AuthorityKeyIdentifier(
                key_identifier=key_id,
                authority_cert_issuer=None,
                authority_cert_serial_number=None,
            ),
            critical=False,
        )
    return builder.sign(key, hashes.SHA256())


def write_pem(path: Path, cert: x509.Certificate) -> Path:
    path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    return path


@pytest.fixture()
def cert_factory():
    """Return :func:`build_certificate`."""
    return build_certificate


@pytest.fixture()
def cert() -> x509.Certificate:
    """Certificate with AKI ``010203`` and serial ``0x0405`` (certID ``AQID.BAU``)."""
    return build_certificate()


@pytest.fixture()
def cert_pem(tmp_path: Path, cert: x509.Certificate) -> Path:
    return write_pem(tmp_path / "cert.pem", cert)


@pytest.fixture()
def no_aki_pem(tmp_path: Path) -> Path:
    return write_pem(tmp_path / "no-aki.pem", build_certificate(key_id=None))


@pytest.fixture()
def bad_aki_pem(tmp_path: Path) -> Path:
    cert = build_certificate(
        key_id=None,
        raw_extensions=[(ExtensionOID.AUTHORITY_KEY_IDENTIFIER, b"\x04\x03\x01\x02\x03")],
    )
    return write_pem(tmp_path / "bad-aki.pem", cert)


# ---------------------------------------------------------------------------
# Logger cleanup: configure_logging() detaches ``acmeari`` from the root
# logger, which would hide records from caplog in later tests.
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_acmeari_logger():
    yield
    root = logging.getLogger("acmeari")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
