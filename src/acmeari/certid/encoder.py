"""ARI certificate identifier derivation (draft-ietf-acme-ari §4.1).

The certID is ``base64url(AKI.keyIdentifier) || '.' || base64url(serial)``
where *serial* is the content octets of the DER INTEGER encoding of the
certificate serial number, leading sign octet included.  Both parts are
encoded without padding.

The AKI extension is read from the raw DER ``TBSCertificate`` rather than
from the parsed extension objects, so a malformed extension value is
reported as :class:`DecodeError` and carries the offending bytes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pyasn1.codec.der import decoder as der_decoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import tag, univ
from pyasn1_modules import rfc5280

from acmeari.core.errors import DecodeError, MissingExtensionError
from acmeari.core.types import CertificateIdentifier, b64url

if TYPE_CHECKING:
    from cryptography import x509

log = logging.getLogger(__name__)

AUTHORITY_KEY_IDENTIFIER_OID = "2.5.29.35"

# SEQUENCE whose elements are kept as raw TLVs, so fields after the
# first are never decoded.
_AKI_FIELDS = univ.SequenceOf(componentType=univ.Any())

_KEY_IDENTIFIER = rfc5280.KeyIdentifier().subtype(
    implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 0),
)


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def extract_authority_key_id(extension_value: bytes) -> bytes:
    """Return the ``keyIdentifier`` octets from a DER AKI extension value.

    Only the outer SEQUENCE and its first element are decoded; the
    optional ``authorityCertIssuer`` and ``authorityCertSerialNumber``
    fields that may follow are not inspected.

    Parameters
    ----------
    extension_value:
        The ``extnValue`` OCTET STRING contents of extension 2.5.29.35:
        a SEQUENCE whose first element is ``[0] IMPLICIT KeyIdentifier``.

    Raises
    ------
    DecodeError
        If the value is not a well-formed SEQUENCE, has trailing bytes
        after it, or does not start with a ``keyIdentifier``.

    """
    if not extension_value:
        raise DecodeError(
            "empty Authority Key Identifier extension",
            oid=AUTHORITY_KEY_IDENTIFIER_OID,
            data=extension_value,
        )

    try:
        fields, rest = der_decoder.decode(extension_value, asn1Spec=_AKI_FIELDS)
    except PyAsn1Error as exc:
        log.debug("Authority Key Identifier decode failed: %s", exc)
        raise DecodeError(
            "bad Authority Key Identifier sequence",
            oid=AUTHORITY_KEY_IDENTIFIER_OID,
            data=extension_value,
        ) from exc

    if rest:
        raise DecodeError(
            "trailing data after Authority Key Identifier extension",
            oid=AUTHORITY_KEY_IDENTIFIER_OID,
            data=bytes(rest),
        )

    if not len(fields):
        raise DecodeError(
            "Authority Key Identifier has no keyIdentifier field",
            oid=AUTHORITY_KEY_IDENTIFIER_OID,
            data=extension_value,
        )

    # Each element decodes as its full TLV; the first must be [0].
    try:
        key_id, _ = der_decoder.decode(bytes(fields[0]), asn1Spec=_KEY_IDENTIFIER)
    except PyAsn1Error as exc:
        log.debug("Authority Key Identifier first element rejected: %s", exc)
        raise DecodeError(
            "Authority Key Identifier has no keyIdentifier field",
            oid=AUTHORITY_KEY_IDENTIFIER_OID,
            data=extension_value,
        ) from exc

    key_id_bytes = bytes(key_id)
    log.debug(
        "Authority Key Identifier hex=%s base64url=%s",
        key_id_bytes.hex(),
        b64url(key_id_bytes),
    )
    return key_id_bytes


def encode_serial(serial_number: int) -> bytes:
    """Return the content octets of the DER INTEGER encoding of *serial_number*.

    Positive serials whose top bit is set keep the leading ``0x00`` the
    DER encoding adds; that octet is part of the certID.
    """
    if isinstance(serial_number, bool) or not isinstance(serial_number, int):
        raise DecodeError(
            f"cannot DER-encode serial number of type {type(serial_number).__name__}",
        )

    # DER INTEGER contents are the minimal two's-complement form.
    length = (serial_number + (serial_number < 0)).bit_length() // 8 + 1
    content = serial_number.to_bytes(length, "big", signed=True)
    log.debug("Serial Number hex=%s base64url=%s", content.hex(), b64url(content))
    return content


# ---------------------------------------------------------------------------
# Extension lookup
# ---------------------------------------------------------------------------


def find_authority_key_id_extension(tbs_der: bytes) -> bytes | None:
    """Return the raw AKI ``extnValue`` from a DER TBSCertificate.

    If the certificate carries the extension more than once the first
    occurrence wins.  draft-ietf-acme-ari does not define this case, so a
    warning is logged.
    """
    try:
        tbs, _ = der_decoder.decode(tbs_der, asn1Spec=rfc5280.TBSCertificate())
    except PyAsn1Error as exc:
        log.debug("TBSCertificate decode failed: %s", exc)
        raise DecodeError("cannot decode TBSCertificate") from exc

    extensions = tbs.getComponentByName("extensions", default=None, instantiate=False)
    if extensions is None:
        return None

    matches = [
        bytes(ext["extnValue"])
        for ext in extensions
        if ext["extnID"] == rfc5280.id_ce_authorityKeyIdentifier
    ]
    if not matches:
        return None
    if len(matches) > 1:
        log.warning(
            "Certificate has %d Authority Key Identifier extensions; using the first",
            len(matches),
        )
    return matches[0]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def derive_identifier(cert: x509.Certificate) -> CertificateIdentifier:
    """Build the :class:`CertificateIdentifier` for *cert*.

    Raises
    ------
    MissingExtensionError
        If *cert* has no Authority Key Identifier extension.  There is no
        fallback to hashing the issuer key.
    DecodeError
        If the extension value or the serial cannot be encoded.

    """
    ext_value = find_authority_key_id_extension(cert.tbs_certificate_bytes)
    if ext_value is None:
        raise MissingExtensionError(
            "certificate has no Authority Key Identifier extension",
            oid=AUTHORITY_KEY_IDENTIFIER_OID,
        )

    return CertificateIdentifier(
        authority_key_id=extract_authority_key_id(ext_value),
        serial_number=encode_serial(cert.serial_number),
    )


def derive(cert: x509.Certificate) -> str:
    """Return the ARI certID string for *cert*."""
    return derive_identifier(cert).cert_id
