"""Print ARI identifier components for certificates, offline.

Output per certificate::

    {
        "path": "cert.pem",
        "authorityKeyIdentifier": {"hex": "...", "base64url": "..."},
        "serialNumber": {"hex": "...", "base64url": "..."},
        "certID": "..."
    }
"""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

from acmeari.certid.encoder import derive_identifier
from acmeari.certid.loader import load_certificate
from acmeari.core.errors import AriError

if TYPE_CHECKING:
    from collections.abc import Sequence

log = logging.getLogger(__name__)


def run_inspect(paths: Sequence[str]) -> int:
    """Print the identifier of each certificate; stop at the first failure."""
    for path in paths:
        try:
            ident = derive_identifier(load_certificate(path))
        except AriError as exc:
            log.error(
                "Error processing file %s: %s",
                path,
                exc,
                extra={"error": exc.to_dict()},
            )
            return 1

        sys.stdout.write(json.dumps({"path": path, **ident.to_dict()}, indent=4) + "\n")
        sys.stdout.flush()

    return 0
