"""Tests for acmeari.config (file loading, validation, typed settings)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import yaml

from acmeari.config import DEFAULT_DIRECTORY_URL, AriConfig, ConfigValidationError
from acmeari.services.http import DEFAULT_USER_AGENT


def _write_config(tmp_path: Path, cfg: dict, name: str = "ari.yaml") -> Path:
    path = tmp_path / name
    if name.endswith(".json"):
        path.write_text(json.dumps(cfg), encoding="utf-8")
    else:
        path.write_text(
            yaml.safe_dump(cfg, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
    return path


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_from_defaults(self):
        settings = AriConfig.from_defaults().settings
        assert settings.acme.directory_url == DEFAULT_DIRECTORY_URL
        assert settings.http.timeout_seconds is None
        assert settings.http.user_agent == DEFAULT_USER_AGENT
        assert settings.logging.level == "WARNING"
        assert settings.logging.format == "text"

    def test_default_directory_is_letsencrypt(self):
        assert DEFAULT_DIRECTORY_URL == "https://acme-v02.api.letsencrypt.org/directory"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert AriConfig(config_file=path).settings.acme.directory_url == DEFAULT_DIRECTORY_URL

    def test_settings_are_frozen(self):
        settings = AriConfig.from_defaults().settings
        with pytest.raises(AttributeError):
            settings.acme.directory_url = "https://elsewhere.test/dir"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoading:
    def test_yaml(self, tmp_path):
        path = _write_config(
            tmp_path,
            {
                "acme": {"directory_url": "https://acme.example.test/directory"},
                "http": {"timeout_seconds": 10, "user_agent": "ari-test/2"},
                "logging": {"level": "debug", "format": "json"},
            },
        )
        config = AriConfig(config_file=path)
        assert config.settings.acme.directory_url == "https://acme.example.test/directory"
        assert config.settings.http.timeout_seconds == 10
        assert config.settings.http.user_agent == "ari-test/2"
        assert config.settings.logging.format == "json"
        assert config.get("logging.level") == "debug"
        assert config.get("acme.missing", "fallback") == "fallback"

    def test_json(self, tmp_path):
        path = _write_config(
            tmp_path,
            {"acme": {"directory_url": "https://acme.example.test/dir"}},
            name="ari.json",
        )
        assert AriConfig(config_file=path).settings.acme.directory_url == (
            "https://acme.example.test/dir"
        )

    def test_env_var_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ARI_DIRECTORY", "https://staging.example.test/directory")
        path = _write_config(tmp_path, {"acme": {"directory_url": "${ARI_DIRECTORY}"}})
        assert AriConfig(config_file=path).settings.acme.directory_url == (
            "https://staging.example.test/directory"
        )

    def test_env_var_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("ARI_LOG_FORMAT", raising=False)
        path = _write_config(tmp_path, {"logging": {"format": "${ARI_LOG_FORMAT:-json}"}})
        assert AriConfig(config_file=path).settings.logging.format == "json"

    def test_env_var_numeric_timeout(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ARI_TIMEOUT", "7.5")
        path = _write_config(tmp_path, {"http": {"timeout_seconds": "${ARI_TIMEOUT}"}})
        assert AriConfig(config_file=path).settings.http.timeout_seconds == 7.5

    def test_env_var_numeric_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("ARI_TIMEOUT", raising=False)
        path = _write_config(tmp_path, {"http": {"timeout_seconds": "${ARI_TIMEOUT:-10}"}})
        assert AriConfig(config_file=path).settings.http.timeout_seconds == 10

    def test_env_var_non_numeric_stays_string(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ARI_USER_AGENT", "on")
        path = _write_config(tmp_path, {"http": {"user_agent": "${ARI_USER_AGENT}"}})
        assert AriConfig(config_file=path).settings.http.user_agent == "on"

    def test_env_var_unset_without_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("ARI_NOT_SET", raising=False)
        path = _write_config(tmp_path, {"acme": {"directory_url": "${ARI_NOT_SET}"}})
        with pytest.raises(ConfigValidationError, match="ARI_NOT_SET"):
            AriConfig(config_file=path)

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ConfigValidationError, match="cannot read"):
            AriConfig(config_file=tmp_path / "missing.yaml")

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("acme: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="cannot parse"):
            AriConfig(config_file=path)

    def test_top_level_list(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="mapping"):
            AriConfig(config_file=path)

    def test_repr(self, tmp_path):
        path = _write_config(tmp_path, {})
        assert str(path) in repr(AriConfig(config_file=path))


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_unknown_key_rejected(self, tmp_path):
        path = _write_config(tmp_path, {"acme": {"directry_url": "https://x.test/d"}})
        with pytest.raises(ConfigValidationError, match="directry_url"):
            AriConfig(config_file=path)

    def test_bad_log_format_rejected(self, tmp_path):
        path = _write_config(tmp_path, {"logging": {"format": "xml"}})
        with pytest.raises(ConfigValidationError, match="logging.format"):
            AriConfig(config_file=path)

    def test_timeout_type_rejected(self, tmp_path):
        path = _write_config(tmp_path, {"http": {"timeout_seconds": "ten"}})
        with pytest.raises(ConfigValidationError, match="http.timeout_seconds"):
            AriConfig(config_file=path)

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_non_positive_timeout_rejected(self, tmp_path, timeout):
        path = _write_config(tmp_path, {"http": {"timeout_seconds": timeout}})
        with pytest.raises(ConfigValidationError, match="must be positive"):
            AriConfig(config_file=path)

    def test_null_timeout_accepted(self, tmp_path):
        path = _write_config(tmp_path, {"http": {"timeout_seconds": None}})
        assert AriConfig(config_file=path).settings.http.timeout_seconds is None

    @pytest.mark.parametrize("url", ["acme.example.test/directory", "ftp://acme.example.test/d"])
    def test_directory_url_must_be_http(self, tmp_path, url):
        path = _write_config(tmp_path, {"acme": {"directory_url": url}})
        with pytest.raises(ConfigValidationError, match="absolute http"):
            AriConfig(config_file=path)

    def test_plain_http_warns(self, tmp_path, caplog):
        path = _write_config(tmp_path, {"acme": {"directory_url": "http://localhost:14000/dir"}})
        with caplog.at_level(logging.WARNING, logger="acmeari.config.ari_config"):
            AriConfig(config_file=path)
        assert "plain http" in caplog.text

    def test_errors_collected(self, tmp_path):
        path = _write_config(
            tmp_path,
            {"acme": {"directory_url": "nope"}, "http": {"timeout_seconds": 0}},
        )
        with pytest.raises(ConfigValidationError) as exc_info:
            AriConfig(config_file=path)
        assert len(exc_info.value.errors) == 2


# ---------------------------------------------------------------------------
# Command-line overrides
# ---------------------------------------------------------------------------


class TestOverrides:
    def test_overrides_applied(self):
        base = AriConfig.from_defaults().settings
        settings = base.with_overrides(
            directory_url="https://override.test/dir",
            timeout_seconds=3,
            log_format="json",
        )
        assert settings.acme.directory_url == "https://override.test/dir"
        assert settings.http.timeout_seconds == 3
        assert settings.logging.format == "json"
        assert base.acme.directory_url == DEFAULT_DIRECTORY_URL

    def test_none_keeps_configured(self, tmp_path):
        path = _write_config(tmp_path, {"http": {"timeout_seconds": 12}})
        settings = AriConfig(config_file=path).settings.with_overrides()
        assert settings.http.timeout_seconds == 12
