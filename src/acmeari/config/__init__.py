"""Configuration subsystem for acmeari.

Public API::

    from acmeari.config import AriConfig

    config = AriConfig(config_file="ari.yaml")   # or AriConfig.from_defaults()
    url = config.settings.acme.directory_url    # typed access
    raw = config.get("http.timeout_seconds")     # dynamic dot-path
"""

from acmeari.config.ari_config import AriConfig, ConfigValidationError
from acmeari.config.settings import (
    DEFAULT_DIRECTORY_URL,
    AcmeSettings,
    AriSettings,
    HttpSettings,
    LoggingSettings,
)

__all__ = [
    "DEFAULT_DIRECTORY_URL",
    "AcmeSettings",
    "AriConfig",
    "AriSettings",
    "ConfigValidationError",
    "HttpSettings",
    "LoggingSettings",
]
