"""
HTTP client for a remote OPRF gateway.

Blinding and finalization happen locally; only blinded elements cross the
network.

Example:
    with OPRFHttpClient("http://localhost:3000") as client:
        outputs = client.oprf([b"alice@example.com", b"bob@example.com"])
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..errors import OPRFError
from ..primitives import DEFAULT_SUITE, Suite
from ..protocol import OPRFClient, codec
from ..protocol.messages import EvaluationRequest, EvaluationResponse

logger = logging.getLogger(__name__)


class GatewayError(OPRFError):
    """The gateway answered with an error status."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(f"{status_code} {code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


class OPRFHttpClient:
    """Client for the /upload-binary and /api/status endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        suite: Suite = DEFAULT_SUITE,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            base_url: Gateway root URL
            suite: Suite the gateway is configured for
            timeout: Request timeout in seconds
            http_client: Pre-built httpx client (its base URL is used as-is)
        """
        self.suite = suite
        self._protocol = OPRFClient(suite)
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> "OPRFHttpClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def status(self) -> Dict[str, Any]:
        response = self._http.get("/api/status")
        self._raise_for_error(response)
        return response.json()

    def evaluate(self, request: EvaluationRequest) -> EvaluationResponse:
        """Send an encoded request and decode the evaluated response."""
        response = self._http.post(
            "/upload-binary",
            content=codec.encode(request),
            headers={"Content-Type": "application/octet-stream"},
        )
        self._raise_for_error(response)
        return codec.decode_response(response.content, self.suite)

    def oprf(self, inputs: Sequence[bytes]) -> List[Optional[bytes]]:
        """
        Full round against the gateway.

        Returns one entry per input; None marks a position that could not
        be finalized. An empty batch returns [] without a request.
        """
        if not inputs:
            return []
        finalize_data, request = self._protocol.blind(inputs)
        evaluation = self.evaluate(request)
        return self._protocol.finalize(finalize_data, evaluation)

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.is_success:
            return
        code = "HTTP_ERROR"
        message = response.reason_phrase
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            code = body.get("code", code)
            message = body.get("error", message)
        logger.debug("Gateway returned %d %s", response.status_code, code)
        raise GatewayError(response.status_code, code, message)
