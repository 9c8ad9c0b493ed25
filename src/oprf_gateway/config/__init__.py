"""
OPRF Gateway Configuration Module.

Usage:
    from oprf_gateway.config import ServiceConfig, is_production

    config = ServiceConfig.load("gateway.yaml", port=8080).validate()
"""

from .runtime import Environment, is_production, resolve_environment
from .settings import CONFIG_PATH_ENV, ServiceConfig

__all__ = [
    "CONFIG_PATH_ENV",
    "Environment",
    "ServiceConfig",
    "is_production",
    "resolve_environment",
]
