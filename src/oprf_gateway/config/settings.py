"""
Service configuration.

Sources, lowest to highest precedence:
    1. Field defaults
    2. YAML file (--config or OPRF_CONFIG)
    3. Environment variables
    4. Explicit overrides (CLI flags)
"""

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..primitives import DEFAULT_SUITE, Suite

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "OPRF_CONFIG"

# field name -> environment variable
_ENV_VARS = {
    "key_path": "OPRF_KEY_PATH",
    "suite": "OPRF_SUITE",
    "host": "OPRF_HOST",
    "port": "PORT",
    "max_body_bytes": "OPRF_MAX_BODY_BYTES",
    "max_batch_size": "OPRF_MAX_BATCH_SIZE",
    "request_timeout": "OPRF_REQUEST_TIMEOUT",
    "log_level": "OPRF_LOG_LEVEL",
}


@dataclass(frozen=True)
class ServiceConfig:
    """Configuration for the OPRF gateway process."""

    key_path: str = "./secrets/key.priv"
    suite: Suite = DEFAULT_SUITE
    host: str = "0.0.0.0"
    port: int = 3000
    max_body_bytes: int = 10 * 1024 * 1024
    max_batch_size: int = 256
    request_timeout: Optional[float] = None  # seconds; None disables the deadline
    log_level: str = "info"

    def __post_init__(self):
        # Accept raw values from YAML/env and normalize types
        object.__setattr__(self, "suite", _coerce("suite", self.suite))
        for name in ("port", "max_body_bytes", "max_batch_size", "request_timeout"):
            object.__setattr__(self, name, _coerce(name, getattr(self, name)))

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Create config from defaults and environment variables."""
        return cls(**_env_values())

    @classmethod
    def from_file(cls, path: str) -> "ServiceConfig":
        """Create config from a YAML file, then environment variables."""
        values = _file_values(path)
        values.update(_env_values())
        return cls(**values)

    @classmethod
    def load(cls, path: Optional[str] = None, **overrides: Any) -> "ServiceConfig":
        """
        Resolve the full configuration.

        Args:
            path: Optional YAML file. Falls back to OPRF_CONFIG.
            overrides: Field values that win over every other source;
                None values are ignored.
        """
        path = path or os.getenv(CONFIG_PATH_ENV)
        config = cls.from_file(path) if path else cls.from_env()
        return config.with_overrides(**overrides)

    def with_overrides(self, **overrides: Any) -> "ServiceConfig":
        unknown = set(overrides) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values) if values else self

    def validate(self) -> "ServiceConfig":
        """
        Check limits.

        Raises:
            ValueError: On non-positive limits or an out-of-range port
        """
        if not self.key_path:
            raise ValueError("key_path must be set")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be in 1..65535, got {self.port}")
        if self.max_body_bytes <= 0:
            raise ValueError("max_body_bytes must be positive")
        if not 0 < self.max_batch_size <= 0xFFFF:
            raise ValueError("max_batch_size must be in 1..65535")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive when set")
        return self

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["suite"] = self.suite.value
        return data


def _coerce(name: str, value: Any) -> Any:
    if value is None or value == "":
        if name == "request_timeout":
            return None
        raise ValueError(f"{name} must not be empty")
    try:
        if name == "suite":
            return value if isinstance(value, Suite) else Suite.parse(str(value))
        if name in ("port", "max_body_bytes", "max_batch_size"):
            return int(value)
        if name == "request_timeout":
            return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid value for {name}: {value!r}") from e
    return value


def _env_values() -> Dict[str, Any]:
    values = {}
    for name, env_var in _ENV_VARS.items():
        raw = os.getenv(env_var)
        if raw is not None and raw.strip():
            values[name] = raw.strip()
    return values


def _file_values(path: str) -> Dict[str, Any]:
    config_path = Path(path)
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ValueError(f"Cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    # Allow the settings to live under a top-level "oprf" section
    section = data.get("oprf", data) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Section 'oprf' in config file {config_path} must be a mapping")
    known = {f.name for f in fields(ServiceConfig)}
    unknown = set(section) - known
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", config_path, ", ".join(sorted(unknown)))
    return {k: v for k, v in section.items() if k in known}
