"""
OPRF Gateway API Endpoints.

- POST /upload-binary - Blind evaluation of an encoded EvaluationRequest
- GET  /api/status    - Service status and readiness
- GET  /              - Service banner

The request body of /upload-binary is the wire-encoded request with no
envelope; the response body is the wire-encoded response.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from ..config import ServiceConfig
from ..errors import (
    BatchTooLargeError,
    EmptyInputError,
    NotReadyError,
    PayloadTooLargeError,
    ProtocolError,
)
from ..lifecycle import ServiceLifecycle
from ..protocol import OPRFServer
from ..version import gateway_version
from .schemas import ErrorResponse, OPRFStatus, RootResponse, StatusResponse

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        content=ErrorResponse(error=message, code=code).model_dump(),
        status_code=status_code,
    )


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


async def read_limited_body(request: Request, limit: int) -> bytes:
    """
    Read the request body, refusing anything larger than limit bytes.

    The declared Content-Length is checked first; the streamed size is
    enforced as chunks arrive, before any decoding.

    Raises:
        PayloadTooLargeError: If the body exceeds limit
    """
    declared = request.headers.get("content-length")
    if declared is not None:
        try:
            if int(declared) > limit:
                raise PayloadTooLargeError(limit)
        except ValueError:
            pass

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError(limit)
    return bytes(body)


async def run_evaluation(server: OPRFServer, body: bytes, timeout: Optional[float]) -> bytes:
    """
    Evaluate off the event loop, optionally under a deadline.

    On timeout the worker result is abandoned; evaluation holds no state so
    nothing needs cleaning up.
    """
    task = run_in_threadpool(server.evaluate_bytes, body)
    if timeout is None:
        return await task
    return await asyncio.wait_for(task, timeout=timeout)


def create_oprf_router(lifecycle: ServiceLifecycle, config: ServiceConfig) -> APIRouter:
    """
    Create the router for the OPRF endpoints.

    Args:
        lifecycle: Lifecycle owning the engine; handlers are gated on it
        config: Service configuration (body and batch limits, deadline)

    Returns:
        Configured APIRouter
    """
    router = APIRouter(tags=["OPRF"])

    @router.post(
        "/upload-binary",
        response_class=Response,
        responses={
            200: {"content": {OCTET_STREAM: {}}, "description": "Encoded EvaluationResponse"},
            400: {"model": ErrorResponse},
            413: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            503: {"model": ErrorResponse},
        },
    )
    async def upload_binary(request: Request):
        """Evaluate a wire-encoded batch of blinded elements."""
        try:
            server = lifecycle.server
        except NotReadyError:
            return error_response(503, "OPRF service is not ready.", "NOT_READY")

        try:
            body = await read_limited_body(request, config.max_body_bytes)
        except PayloadTooLargeError as e:
            return error_response(
                413, f"Request body exceeds {e.limit} bytes.", "PAYLOAD_TOO_LARGE"
            )

        if not body:
            return error_response(400, "Binary data is missing or empty.", "MISSING_DATA")

        try:
            result = await run_evaluation(server, body, config.request_timeout)
        except EmptyInputError:
            return error_response(
                400, "Evaluation request contains no elements.", "MISSING_DATA"
            )
        except BatchTooLargeError as e:
            return error_response(
                413, f"Batch exceeds the limit of {e.limit} elements.", "BATCH_TOO_LARGE"
            )
        except asyncio.TimeoutError:
            logger.warning("OPRF evaluation exceeded %.2fs deadline", config.request_timeout)
            return error_response(
                503, "OPRF processing timed out.", "OPRF_TIMEOUT"
            )
        except ProtocolError as e:
            logger.warning("OPRF processing error: %s", e)
            return error_response(
                500, "Internal server error during OPRF processing.", "OPRF_ERROR"
            )
        except Exception:
            logger.exception("Unexpected OPRF processing failure")
            return error_response(
                500, "Internal server error during OPRF processing.", "OPRF_ERROR"
            )

        return Response(content=result, media_type=OCTET_STREAM)

    @router.get("/api/status", response_model=StatusResponse)
    async def status():
        """Read-only service status."""
        suite = lifecycle.suite
        return StatusResponse(
            status="OK",
            runtime="python",
            version=gateway_version(),
            timestamp=_timestamp(),
            oprf=OPRFStatus(
                initialized=lifecycle.is_ready,
                suite=suite.value if suite is not None and lifecycle.is_ready else None,
            ),
        )

    @router.get("/", response_model=RootResponse)
    async def root():
        """Service banner."""
        return RootResponse(
            message="OPRF Server is running!",
            timestamp=_timestamp(),
            version=gateway_version(),
        )

    return router
