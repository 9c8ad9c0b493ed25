"""
In-process OPRF service.

Pairs a client and a server for the same suite so a full round can run
locally: blind, evaluate, finalize. Used by the CLI and as the engine
handle exposed by the lifecycle manager.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..errors import ProtocolError
from ..keys.secret import SecretKey
from ..primitives import Suite
from .client import OPRFClient
from .messages import EvaluationRequest, EvaluationResponse, FinalizeData
from .server import OPRFServer

logger = logging.getLogger(__name__)


class OPRFService:
    """
    OPRF service bound to one secret key.

    Example:
        service = OPRFService(key)
        output = service.process(b"user@example.com")
    """

    def __init__(self, key: SecretKey, max_batch_size: Optional[int] = None):
        self.server = OPRFServer(key, max_batch_size=max_batch_size)
        self.client = OPRFClient(key.suite)

    @property
    def suite(self) -> Suite:
        return self.server.suite

    def process(self, private_input: bytes) -> bytes:
        """
        Run one input through a full round.

        Raises:
            ProtocolError: If the round yields no output
        """
        finalize_data, request = self.client.blind([private_input])
        response = self.server.blind_evaluate(request)
        (output,) = self.client.finalize(finalize_data, response)
        if output is None:
            raise ProtocolError("OPRF round produced no output")
        return output

    def process_batch(self, inputs: Sequence[bytes]) -> List[bytes]:
        """
        Run a batch through a full round, dropping missing slots.

        An empty batch returns an empty list without contacting the server.
        """
        if not inputs:
            return []
        finalize_data, request = self.client.blind(inputs)
        response = self.server.blind_evaluate(request)
        outputs = self.client.finalize(finalize_data, response)
        missing = sum(1 for output in outputs if output is None)
        if missing:
            logger.warning("%d of %d batch outputs could not be finalized", missing, len(outputs))
        return [output for output in outputs if output is not None]

    def blind(self, inputs: Sequence[bytes]) -> Tuple[FinalizeData, EvaluationRequest]:
        return self.client.blind(inputs)

    def evaluate(self, request: EvaluationRequest) -> EvaluationResponse:
        return self.server.blind_evaluate(request)

    def finalize(self, finalize_data: FinalizeData, response: EvaluationResponse) -> List[bytes]:
        return [
            output
            for output in self.client.finalize(finalize_data, response)
            if output is not None
        ]
