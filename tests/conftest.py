"""
Shared fixtures for the OPRF gateway test suite.

Keys are generated per test under tmp_path so no test depends on a key
file checked into the repository.
"""

import pytest

from oprf_gateway.config import ServiceConfig
from oprf_gateway.keys import KeyStore
from oprf_gateway.lifecycle import ServiceLifecycle
from oprf_gateway.primitives import DEFAULT_SUITE

_CONFIG_ENV_VARS = [
    "OPRF_CONFIG",
    "OPRF_ENV",
    "OPRF_KEY_PATH",
    "OPRF_SUITE",
    "OPRF_HOST",
    "PORT",
    "OPRF_MAX_BODY_BYTES",
    "OPRF_MAX_BATCH_SIZE",
    "OPRF_REQUEST_TIMEOUT",
    "OPRF_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the host environment out of configuration resolution."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPRF_ENV", "test")


@pytest.fixture
def key_store():
    return KeyStore(DEFAULT_SUITE)


@pytest.fixture
def secret_key(key_store):
    return key_store.generate()


@pytest.fixture
def key_path(tmp_path, key_store, secret_key):
    return key_store.save(secret_key, tmp_path / "secrets" / "key.priv")


@pytest.fixture
def config(key_path):
    return ServiceConfig(key_path=str(key_path), max_body_bytes=4096, max_batch_size=8)


@pytest.fixture
def lifecycle(config):
    return ServiceLifecycle(config)
