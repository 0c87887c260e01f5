"""ARI certificate identifiers.

Public API::

    from acmeari.certid import derive, load_certificate

    cert_id = derive(load_certificate("cert.pem"))
"""

from acmeari.certid.encoder import (
    AUTHORITY_KEY_IDENTIFIER_OID,
    derive,
    derive_identifier,
    encode_serial,
    extract_authority_key_id,
)
from acmeari.certid.loader import load_certificate, load_certificate_bytes

__all__ = [
    "AUTHORITY_KEY_IDENTIFIER_OID",
    "derive",
    "derive_identifier",
    "encode_serial",
    "extract_authority_key_id",
    "load_certificate",
    "load_certificate_bytes",
]
