"""Typed, frozen dataclasses for every configuration section.

This module is the **single source of truth** for default values.
JSON Schema defaults exist only for documentation; these builders are
what the client actually reads.

Access pattern::

    settings = AriConfig(config_file="ari.yaml").settings
    print(settings.acme.directory_url)
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from acmeari.services.http import DEFAULT_USER_AGENT

DEFAULT_DIRECTORY_URL = "https://acme-v02.api.letsencrypt.org/directory"

# ---------------------------------------------------------------------------
# ACME
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AcmeSettings:
    """ACME server to discover the renewal-info endpoint from."""

    directory_url: str


def _build_acme(data: dict | None) -> AcmeSettings:
    d = data or {}
    return AcmeSettings(
        directory_url=d.get("directory_url", DEFAULT_DIRECTORY_URL),
    )


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HttpSettings:
    """Outbound HTTP behaviour.  ``timeout_seconds=None`` keeps urllib's default."""

    timeout_seconds: float | None
    user_agent: str


def _build_http(data: dict | None) -> HttpSettings:
    d = data or {}
    return HttpSettings(
        timeout_seconds=d.get("timeout_seconds"),
        user_agent=d.get("user_agent", DEFAULT_USER_AGENT),
    )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingSettings:
    """Diagnostic logging on stderr (level, format)."""

    level: str
    format: str


def _build_logging(data: dict | None) -> LoggingSettings:
    d = data or {}
    return LoggingSettings(
        level=d.get("level", "WARNING"),
        format=d.get("format", "text"),
    )


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AriSettings:
    acme: AcmeSettings
    http: HttpSettings
    logging: LoggingSettings

    def with_overrides(
        self,
        *,
        directory_url: str | None = None,
        timeout_seconds: float | None = None,
        log_format: str | None = None,
    ) -> AriSettings:
        """Return a copy with command-line overrides applied.

        ``None`` means "not given on the command line" and keeps the
        configured value.
        """
        acme = self.acme
        http = self.http
        log_settings = self.logging
        if directory_url is not None:
            acme = replace(acme, directory_url=directory_url)
        if timeout_seconds is not None:
            http = replace(http, timeout_seconds=timeout_seconds)
        if log_format is not None:
            log_settings = replace(log_settings, format=log_format)
        return AriSettings(acme=acme, http=http, logging=log_settings)


def build_settings(data: dict) -> AriSettings:
    """Build the full typed settings tree from raw config data.

    Called once during :class:`AriConfig` initialisation after
    schema validation and environment-variable resolution.
    """
    return AriSettings(
        acme=_build_acme(data.get("acme")),
        http=_build_http(data.get("http")),
        logging=_build_logging(data.get("logging")),
    )
