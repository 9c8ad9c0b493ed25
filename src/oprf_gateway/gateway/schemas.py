"""
Pydantic models for gateway JSON bodies.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Structured error body. Never carries key material or request bytes."""

    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Stable machine-readable error code")


class OPRFStatus(BaseModel):
    initialized: bool
    suite: Optional[str] = None


class StatusResponse(BaseModel):
    """Response from the status endpoint."""

    status: str
    runtime: str
    version: str
    timestamp: str
    oprf: OPRFStatus


class RootResponse(BaseModel):
    message: str
    timestamp: str
    version: str


class NotFoundResponse(BaseModel):
    error: str = "Endpoint not found"
    path: str
    method: str
