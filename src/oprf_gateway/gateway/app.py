"""
OPRF Gateway Server.

Binary OPRF evaluation API built on FastAPI. The application is assembled
around an explicit ServiceLifecycle; no module-level engine exists.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import ServiceConfig
from ..lifecycle import ServiceLifecycle
from ..version import gateway_version
from .middleware import RequestLoggingMiddleware
from .routes import create_oprf_router
from .schemas import NotFoundResponse

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[ServiceConfig] = None,
    lifecycle: Optional[ServiceLifecycle] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Service configuration. If None, resolved from the
            environment.
        lifecycle: Lifecycle to serve from. If None, one is created from
            config. It is initialized during application startup unless it
            is already ready; startup errors propagate so the server never
            begins accepting connections without a key.

    Returns:
        FastAPI application instance
    """
    if config is None:
        config = lifecycle.config if lifecycle is not None else ServiceConfig.load()
    config.validate()
    if lifecycle is None:
        lifecycle = ServiceLifecycle(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        if not lifecycle.is_ready:
            lifecycle.initialize()
        logger.info("OPRF gateway started (suite=%s)", config.suite.value)

        yield

        lifecycle.shutdown()
        logger.info("OPRF gateway shutdown")

    app = FastAPI(
        title="OPRF Gateway",
        description="Oblivious pseudorandom function evaluation service",
        version=gateway_version(),
        lifespan=lifespan,
    )
    app.state.lifecycle = lifecycle
    app.state.config = config

    app.add_middleware(RequestLoggingMiddleware, exclude_paths=["/api/status"])

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            body = NotFoundResponse(path=request.url.path, method=request.method)
            return JSONResponse(content=body.model_dump(), status_code=404)
        return JSONResponse(
            content={"detail": exc.detail},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    app.include_router(create_oprf_router(lifecycle, config))

    return app
