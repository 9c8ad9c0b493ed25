"""
Unified runtime environment resolver.

Single source of truth for determining the deployment environment.
Environment-sensitive code should use this module instead of reading
OPRF_ENV directly.

Accepted values for OPRF_ENV: local, dev, staging, production.
Unknown or missing values are treated as production (fail-closed).
"""

import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)

_VALID_ENVS = {"local", "dev", "staging", "production"}

_ALIASES = {
    "development": "dev",
    "test": "dev",
    "testing": "dev",
}


class Environment(str, Enum):
    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


def resolve_environment() -> Environment:
    """Resolve environment from OPRF_ENV."""
    raw = (os.getenv("OPRF_ENV") or "").strip().lower()
    raw = _ALIASES.get(raw, raw)

    if raw in _VALID_ENVS:
        return Environment(raw)

    if raw:
        logger.warning(
            "OPRF_ENV=%r is not a recognized value (%s). "
            "Defaulting to production (fail-closed).",
            raw,
            ", ".join(sorted(_VALID_ENVS)),
        )
    return Environment.PRODUCTION


def is_production() -> bool:
    """Return True if running in production or staging."""
    return resolve_environment() in (Environment.PRODUCTION, Environment.STAGING)
