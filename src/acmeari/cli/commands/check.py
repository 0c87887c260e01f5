"""Fetch renewal info for each certificate and print it.

Processing is sequential and fail-fast: the first certificate that
cannot be loaded, identified or queried stops the run.  Results printed
before the failure stay printed.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

from acmeari.certid.loader import load_certificate
from acmeari.core.errors import AriError
from acmeari.services.renewal_info import RenewalInfoResolver

if TYPE_CHECKING:
    from collections.abc import Sequence

    from acmeari.config.settings import AriSettings

log = logging.getLogger(__name__)


def run_check(
    settings: AriSettings,
    paths: Sequence[str],
    *,
    resolver: RenewalInfoResolver | None = None,
) -> int:
    """Discover the endpoint once, then query every certificate in order.

    Returns the process exit code.
    """
    resolver = resolver or RenewalInfoResolver(settings)

    try:
        endpoint = resolver.discover_endpoint()
    except AriError as exc:
        log.error(
            "Couldn't find ARI endpoint url=%s error=%s",
            settings.acme.directory_url,
            exc,
            extra={"error": exc.to_dict()},
        )
        return 1

    for path in paths:
        try:
            cert = load_certificate(path)
            result = resolver.check_certificate(endpoint, cert, source=path)
        except AriError as exc:
            log.error(
                "Error processing file %s: %s",
                path,
                exc,
                extra={"error": exc.to_dict()},
            )
            return 1

        sys.stdout.write(json.dumps(result.to_dict(), indent=4) + "\n")
        sys.stdout.flush()

    return 0
