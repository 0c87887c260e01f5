"""ACME Renewal Information client (draft-ietf-acme-ari).

Two round trips per run::

    resolver = RenewalInfoResolver(settings)
    endpoint = resolver.discover_endpoint()              # GET directory
    result = resolver.fetch_renewal_info(endpoint, cid)  # GET <endpoint>/<cid>

Discovery must succeed before any lookup, since the lookup URL is built
from its result.  Nothing is cached or retried.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from acmeari.certid.encoder import derive_identifier
from acmeari.core.errors import DecodeError
from acmeari.core.types import DiscoveryDirectory, RenewalInfoResult, SuggestedWindow
from acmeari.services.http import HttpResponse, http_get

if TYPE_CHECKING:
    from cryptography import x509

    from acmeari.config.settings import AriSettings

log = logging.getLogger(__name__)

Fetcher = Callable[..., HttpResponse]

# Upper bound on how much of an undecodable body is kept on the error.
_MAX_ERROR_BODY = 512


def build_request_url(renewal_info_url: str, cert_id: str) -> str:
    """Join the renewalInfo base URL and a certID.

    Plain concatenation: no escaping and no trailing-slash handling.
    """
    return f"{renewal_info_url}/{cert_id}"


def _decode_json_object(resp: HttpResponse, what: str) -> dict[str, Any]:
    try:
        doc = json.loads(resp.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(
            f"{what} response is not valid JSON: {exc}",
            url=resp.url,
            status=resp.status,
            data=resp.body[:_MAX_ERROR_BODY],
        ) from exc

    if not isinstance(doc, dict):
        raise DecodeError(
            f"{what} response is not a JSON object",
            url=resp.url,
            status=resp.status,
            data=resp.body[:_MAX_ERROR_BODY],
        )
    return doc


def _require_str(doc: dict, key: str, resp: HttpResponse, what: str) -> str:
    value = doc.get(key)
    if not isinstance(value, str):
        problem = "missing" if value is None else f"not a string ({type(value).__name__})"
        raise DecodeError(
            f"{what} field '{key}' is {problem}",
            url=resp.url,
            status=resp.status,
            data=resp.body[:_MAX_ERROR_BODY],
        )
    return value


class RenewalInfoResolver:
    """Discovers the renewalInfo endpoint and queries it per certificate.

    Parameters
    ----------
    settings:
        Client settings; supplies the default directory URL, timeout and
        User-Agent.
    fetch:
        HTTP GET callable with the signature of
        :func:`acmeari.services.http.http_get`.  Injected in tests.

    """

    def __init__(
        self,
        settings: AriSettings,
        *,
        fetch: Fetcher | None = None,
    ) -> None:
        self._settings = settings
        self._fetch = fetch or http_get

    def _get(self, url: str, timeout: float | None) -> HttpResponse:
        if timeout is None:
            timeout = self._settings.http.timeout_seconds
        resp = self._fetch(
            url,
            timeout=timeout,
            user_agent=self._settings.http.user_agent,
        )
        if not 200 <= resp.status < 300:  # noqa: PLR2004
            log.warning("GET %s returned HTTP %d; decoding body anyway", url, resp.status)
        return resp

    # -- discovery ----------------------------------------------------------

    def discover(
        self,
        directory_url: str | None = None,
        *,
        timeout: float | None = None,
    ) -> DiscoveryDirectory:
        """Fetch the ACME directory and return its ``renewalInfo`` URL.

        Raises
        ------
        TransportError
            If the directory cannot be fetched.
        DecodeError
            If the body is not a JSON object with a string ``renewalInfo``.

        """
        url = directory_url or self._settings.acme.directory_url
        resp = self._get(url, timeout)
        doc = _decode_json_object(resp, "ACME directory")
        renewal_info = _require_str(doc, "renewalInfo", resp, "ACME directory")

        log.debug(
            "HTTP ACME Directory GET completed url=%s status=%d renewalInfo=%s",
            url,
            resp.status,
            renewal_info,
        )
        return DiscoveryDirectory(renewal_info=renewal_info, resources=doc)

    def discover_endpoint(
        self,
        directory_url: str | None = None,
        *,
        timeout: float | None = None,
    ) -> str:
        return self.discover(directory_url, timeout=timeout).renewal_info

    # -- lookup -------------------------------------------------------------

    def fetch_renewal_info(
        self,
        renewal_info_url: str,
        cert_id: str,
        *,
        timeout: float | None = None,
    ) -> RenewalInfoResult:
        """GET ``<renewal_info_url>/<cert_id>`` and decode the window.

        ``suggestedWindow.start`` and ``.end`` are returned exactly as
        sent; they are not parsed as timestamps.
        """
        url = build_request_url(renewal_info_url, cert_id)
        resp = self._get(url, timeout)
        doc = _decode_json_object(resp, "renewalInfo")

        window = doc.get("suggestedWindow")
        if not isinstance(window, dict):
            raise DecodeError(
                "renewalInfo field 'suggestedWindow' is missing or not an object",
                url=url,
                status=resp.status,
                data=resp.body[:_MAX_ERROR_BODY],
            )

        explanation_url = doc.get("explanationURL")
        if explanation_url is None:
            explanation_url = ""
        elif not isinstance(explanation_url, str):
            raise DecodeError(
                "renewalInfo field 'explanationURL' is not a string",
                url=url,
                status=resp.status,
                data=resp.body[:_MAX_ERROR_BODY],
            )

        return RenewalInfoResult(
            suggested_window=SuggestedWindow(
                start=_require_str(window, "start", resp, "suggestedWindow"),
                end=_require_str(window, "end", resp, "suggestedWindow"),
            ),
            explanation_url=explanation_url,
        )

    def check_certificate(
        self,
        renewal_info_url: str,
        cert: x509.Certificate,
        *,
        source: str | None = None,
        timeout: float | None = None,
    ) -> RenewalInfoResult:
        """Derive the certID of *cert* and fetch its renewal info."""
        cert_id = derive_identifier(cert).cert_id
        log.info(
            "ARI Request input=%s renewalInfoURL=%s",
            source or "-",
            build_request_url(renewal_info_url, cert_id),
        )
        return self.fetch_renewal_info(renewal_info_url, cert_id, timeout=timeout)
