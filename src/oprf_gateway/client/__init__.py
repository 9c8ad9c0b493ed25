"""
Remote client for the OPRF gateway.
"""

from .http import GatewayError, OPRFHttpClient

__all__ = ["GatewayError", "OPRFHttpClient"]
