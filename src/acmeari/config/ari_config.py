"""ARI client configuration loader.

Lifecycle::

    # 1. CLI loads the file once at startup
    config = AriConfig(config_file="/etc/acmeari/config.yaml")

    # 2. The typed settings value is passed explicitly to whoever needs it
    resolver = RenewalInfoResolver(config.settings)

    # 3. Dynamic access to the raw data
    config.get("acme.directory_url")

There is no module-level singleton; nothing in the client reads
configuration from ambient state.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import yaml
from jsonschema import Draft202012Validator

from acmeari.config.settings import AriSettings, build_settings

_SCHEMA_PATH = Path(__file__).parent / "schema.json"

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation error collector
# ---------------------------------------------------------------------------


class ConfigValidationError(Exception):
    """Raised when schema or cross-field validation finds problems."""

    def __init__(self, errors: list[str]) -> None:
        """Store *errors* and build a human-readable message."""
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _coerce_scalar(value: str) -> Any:  # noqa: ANN401
    """Return *value* as a number if it reads as one, else unchanged."""
    try:
        loaded = yaml.safe_load(value)
    except yaml.YAMLError:
        return value
    if isinstance(loaded, (int, float)) and not isinstance(loaded, bool):
        return loaded
    return value


def _resolve_value(value: str, path: str) -> Any:  # noqa: ANN401
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value.

    Substituted numbers are coerced so numeric keys such as
    ``http.timeout_seconds`` pass schema validation.
    """
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return _coerce_scalar(resolved)
    if fallback is not None:
        return _coerce_scalar(fallback)
    raise ConfigValidationError(
        [
            f"Environment variable '${{{var_name}}}' referenced "
            f"at '{path}' is not set and has no default",
        ],
    )


def _resolve_env_vars(data: Any, path: str = "") -> None:  # noqa: ANN401
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        for key in data:
            child_path = f"{path}.{key}" if path else key
            if isinstance(data[key], str):
                data[key] = _resolve_value(data[key], child_path)
            elif isinstance(data[key], (dict, list)):
                _resolve_env_vars(data[key], child_path)
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            child_path = f"{path}[{idx}]"
            if isinstance(item, str):
                data[idx] = _resolve_value(item, child_path)
            elif isinstance(item, (dict, list)):
                _resolve_env_vars(item, child_path)


# ---------------------------------------------------------------------------
# Config class
# ---------------------------------------------------------------------------


class AriConfig:
    """Configuration for the ARI client.

    Loads a YAML or JSON file, substitutes environment variables,
    validates against the bundled JSON schema, runs cross-field checks
    and builds the typed :pyattr:`settings` tree.

    Parameters
    ----------
    config_file:
        Path to the YAML/JSON configuration file, or ``None`` to use
        built-in defaults only.

    """

    def __init__(self, *, config_file: str | Path | None = None) -> None:
        self._source = str(config_file) if config_file is not None else None
        self._data: dict = self._load() if config_file is not None else {}
        _resolve_env_vars(self._data)
        self._validate_schema()
        self.additional_checks()
        self._settings: AriSettings = build_settings(self._data)

    @classmethod
    def from_defaults(cls) -> AriConfig:
        """Configuration with every value at its default."""
        return cls(config_file=None)

    # -- loading ------------------------------------------------------------

    def _load(self) -> dict:
        path = Path(self._source)
        try:
            with path.open(encoding="utf-8") as f:
                if path.suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except OSError as exc:
            raise ConfigValidationError([f"cannot read {path}: {exc}"]) from exc
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigValidationError([f"cannot parse {path}: {exc}"]) from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigValidationError(
                [f"{path}: top level must be a mapping, got {type(data).__name__}"],
            )
        return data

    def _validate_schema(self) -> None:
        schema = json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))
        validator = Draft202012Validator(schema)
        errors = [
            f"{'.'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
            for err in sorted(validator.iter_errors(self._data), key=lambda e: list(e.path))
        ]
        if errors:
            raise ConfigValidationError(errors)

    # -- typed access -------------------------------------------------------

    @property
    def settings(self) -> AriSettings:
        """Fully-typed, frozen settings tree."""
        return self._settings

    @property
    def data(self) -> dict:
        return self._data

    def get(self, dotted: str, default: Any = None) -> Any:  # noqa: ANN401
        """Look up a raw value by dot-path, e.g. ``"http.timeout_seconds"``."""
        node: Any = self._data
        for part in dotted.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    # -- cross-field validation ---------------------------------------------

    def additional_checks(self) -> None:
        """Semantic validation that the JSON schema cannot express."""
        errors: list[str] = []

        acme = self._data.get("acme") or {}
        http = self._data.get("http") or {}

        directory_url = acme.get("directory_url")
        if directory_url is not None:
            parts = urlsplit(directory_url)
            if parts.scheme not in ("http", "https") or not parts.netloc:
                errors.append(
                    f"acme.directory_url must be an absolute http(s) URL (got '{directory_url}')",
                )
            elif parts.scheme == "http":
                log.warning(
                    "Config warning: acme.directory_url uses plain http (%s)",
                    directory_url,
                )

        timeout = http.get("timeout_seconds")
        if timeout is not None and timeout <= 0:
            errors.append(
                f"http.timeout_seconds must be positive when set (got {timeout})",
            )

        if errors:
            raise ConfigValidationError(errors)

    def __repr__(self) -> str:
        """Return a developer-friendly representation."""
        return f"<AriConfig config_file={self._source or '-'}>"
