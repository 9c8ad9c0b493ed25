"""
Unit tests for configuration resolution and the runtime environment.
"""

import logging

import pytest

from oprf_gateway.config import (
    CONFIG_PATH_ENV,
    Environment,
    ServiceConfig,
    is_production,
    resolve_environment,
)
from oprf_gateway.primitives import Suite


class TestServiceConfigDefaults:
    """Defaults with no file and no environment."""

    def test_defaults(self):
        config = ServiceConfig.load()
        assert config.key_path == "./secrets/key.priv"
        assert config.suite is Suite.P384_SHA384
        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.max_body_bytes == 10 * 1024 * 1024
        assert config.max_batch_size == 256
        assert config.request_timeout is None
        assert config.log_level == "info"

    def test_defaults_validate(self):
        assert ServiceConfig().validate() is not None


class TestServiceConfigSources:
    """Precedence: defaults < YAML < environment < overrides."""

    def test_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("OPRF_SUITE", "p256-sha256")
        monkeypatch.setenv("OPRF_REQUEST_TIMEOUT", "2.5")
        config = ServiceConfig.from_env()
        assert config.port == 8080
        assert config.suite is Suite.P256_SHA256
        assert config.request_timeout == 2.5

    def test_blank_env_ignored(self, monkeypatch):
        monkeypatch.setenv("PORT", "  ")
        assert ServiceConfig.from_env().port == 3000

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "gateway.yaml"
        path.write_text("key_path: /etc/oprf/key.priv\nport: 4000\nmax_batch_size: 32\n")
        config = ServiceConfig.load(str(path))
        assert config.key_path == "/etc/oprf/key.priv"
        assert config.port == 4000
        assert config.max_batch_size == 32

    def test_yaml_section(self, tmp_path):
        path = tmp_path / "gateway.yaml"
        path.write_text("oprf:\n  suite: P521-SHA512\n")
        assert ServiceConfig.load(str(path)).suite is Suite.P521_SHA512

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "gateway.yaml"
        path.write_text("port: 4001\n")
        monkeypatch.setenv(CONFIG_PATH_ENV, str(path))
        assert ServiceConfig.load().port == 4001

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "gateway.yaml"
        path.write_text("port: 4000\n")
        monkeypatch.setenv("PORT", "5000")
        assert ServiceConfig.load(str(path)).port == 5000

    def test_overrides_win(self, tmp_path, monkeypatch):
        path = tmp_path / "gateway.yaml"
        path.write_text("port: 4000\n")
        monkeypatch.setenv("PORT", "5000")
        config = ServiceConfig.load(str(path), port=6000, host=None)
        assert config.port == 6000
        assert config.host == "0.0.0.0"

    def test_unknown_override(self):
        with pytest.raises(ValueError, match="Unknown configuration fields"):
            ServiceConfig().with_overrides(colour="blue")

    def test_unknown_yaml_keys_warn(self, tmp_path, caplog):
        path = tmp_path / "gateway.yaml"
        path.write_text("port: 4000\nworkers: 8\n")
        with caplog.at_level(logging.WARNING, logger="oprf_gateway.config.settings"):
            config = ServiceConfig.load(str(path))
        assert config.port == 4000
        assert "workers" in caplog.text

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "gateway.yaml"
        path.write_text("port: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            ServiceConfig.load(str(path))

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "gateway.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            ServiceConfig.load(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="Cannot read"):
            ServiceConfig.load(str(tmp_path / "missing.yaml"))

    def test_empty_section(self, tmp_path):
        path = tmp_path / "gateway.yaml"
        path.write_text("oprf:\n")
        assert ServiceConfig.load(str(path)) == ServiceConfig()

    def test_non_mapping_section(self, tmp_path):
        path = tmp_path / "gateway.yaml"
        path.write_text("oprf: [1, 2]\n")
        with pytest.raises(ValueError, match="must be a mapping"):
            ServiceConfig.load(str(path))


class TestServiceConfigValidation:
    """Tests for coercion and validate()."""

    def test_invalid_port_type(self):
        with pytest.raises(ValueError, match="port"):
            ServiceConfig(port="http")

    def test_invalid_suite(self):
        with pytest.raises(ValueError):
            ServiceConfig(suite="curve25519")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"port": 0},
            {"port": 70000},
            {"max_body_bytes": 0},
            {"max_batch_size": 0},
            {"max_batch_size": 0x10000},
            {"request_timeout": -1},
            {"key_path": ""},
        ],
    )
    def test_rejects_bad_limits(self, overrides):
        with pytest.raises(ValueError):
            ServiceConfig(**overrides).validate()

    def test_to_dict(self):
        data = ServiceConfig(port=3001).to_dict()
        assert data["port"] == 3001
        assert data["suite"] == "P384-SHA384"


class TestRuntimeEnvironment:
    """Tests for the OPRF_ENV resolver."""

    def test_aliases(self, monkeypatch):
        monkeypatch.setenv("OPRF_ENV", "development")
        assert resolve_environment() is Environment.DEV
        assert not is_production()

    def test_unset_is_production(self, monkeypatch):
        monkeypatch.delenv("OPRF_ENV", raising=False)
        assert resolve_environment() is Environment.PRODUCTION

    def test_staging_counts_as_production(self, monkeypatch):
        monkeypatch.setenv("OPRF_ENV", "staging")
        assert is_production()

    def test_unknown_value_warns(self, monkeypatch, caplog):
        monkeypatch.setenv("OPRF_ENV", "qa-cluster")
        with caplog.at_level(logging.WARNING, logger="oprf_gateway.config.runtime"):
            assert resolve_environment() is Environment.PRODUCTION
        assert "not a recognized value" in caplog.text
