"""Blocking HTTP GET used for directory discovery and renewal-info lookups.

Only connection-level failures are errors here.  A response with a
non-2xx status is returned like any other so that callers can still try
to decode its body.
"""

from __future__ import annotations

import contextlib
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass

from acmeari import __version__
from acmeari.core.errors import TransportError

log = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"acmeari/{__version__}"


@dataclass(frozen=True)
class HttpResponse:
    url: str
    status: int
    body: bytes


def http_get(
    url: str,
    *,
    timeout: float | None = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> HttpResponse:
    """GET *url* and return the status and full body.

    Parameters
    ----------
    url:
        Absolute http(s) URL.
    timeout:
        Socket timeout in seconds.  ``None`` leaves urllib's default in
        place.
    user_agent:
        Value of the ``User-Agent`` header.

    Raises
    ------
    TransportError
        On DNS, connection, TLS or read failures.

    """
    kwargs = {} if timeout is None else {"timeout": timeout}

    try:
        req = urllib.request.Request(
            url,
            method="GET",
            headers={
                "Accept": "application/json",
                "User-Agent": user_agent,
            },
        )
        resp = urllib.request.urlopen(req, **kwargs)
    except urllib.error.HTTPError as exc:
        body = b""
        with contextlib.suppress(OSError):
            body = exc.read()
        log.debug("HTTP GET %s returned HTTP %d", url, exc.code)
        return HttpResponse(url=url, status=exc.code, body=body)
    except urllib.error.URLError as exc:
        raise TransportError(f"GET {url} failed: {exc.reason}", url=url) from exc
    except (OSError, ValueError) as exc:
        raise TransportError(f"GET {url} failed: {exc}", url=url) from exc

    try:
        body = resp.read()
    except OSError as exc:
        raise TransportError(f"error reading response from {url}: {exc}", url=url) from exc
    finally:
        resp.close()

    status = resp.status
    log.debug("HTTP GET %s completed status=%s bytes=%d", url, status, len(body))
    return HttpResponse(url=url, status=status, body=body)
