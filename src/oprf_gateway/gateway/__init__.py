"""
HTTP transport gateway for the OPRF service.
"""

from .app import create_app
from .routes import create_oprf_router

__all__ = ["create_app", "create_oprf_router"]
