"""
OPRF server role: blind evaluation under the secret key.

Evaluation is a pure function of (request, key). Nothing is retained between
calls and element contents are never logged, so the server cannot correlate
blinded elements across requests.
"""

import logging
from typing import Optional

from ..errors import BatchTooLargeError, EmptyInputError, ProtocolError
from ..keys.secret import SecretKey
from ..primitives import Suite
from . import codec
from .context import finalize_output, hash_to_group_dst
from .messages import EvaluationRequest, EvaluationResponse

logger = logging.getLogger(__name__)


def evaluate(
    request: EvaluationRequest,
    key: SecretKey,
    max_batch_size: Optional[int] = None,
) -> EvaluationResponse:
    """
    Evaluate every blinded element of a request under key.

    Args:
        request: Decoded evaluation request
        key: Server secret key
        max_batch_size: Optional arity limit

    Returns:
        EvaluationResponse aligned with the request

    Raises:
        EmptyInputError: If the request holds no elements
        BatchTooLargeError: If the request exceeds max_batch_size
        ProtocolError: On suite mismatch or an element that is not a valid
            group element
    """
    if request.suite != key.suite:
        raise ProtocolError(
            f"Suite mismatch: request is {request.suite.value}, key is {key.suite.value}"
        )
    if request.is_empty:
        raise EmptyInputError("Evaluation request contains no elements")
    if max_batch_size is not None and len(request) > max_batch_size:
        raise BatchTooLargeError(len(request), max_batch_size)

    group = key.suite.group
    scalar = key.scalar
    evaluated = []
    for position, blinded in enumerate(request.elements):
        try:
            element = group.deserialize(blinded)
        except ValueError as e:
            raise ProtocolError(f"Invalid blinded element at position {position}: {e}") from e
        evaluated.append(group.serialize(group.evaluate(scalar, element)))

    return EvaluationResponse(suite=key.suite, elements=tuple(evaluated))


class OPRFServer:
    """Server side of the OPRF protocol, bound to one secret key."""

    def __init__(self, key: SecretKey, max_batch_size: Optional[int] = None):
        self._key = key
        self.max_batch_size = max_batch_size

    @property
    def suite(self) -> Suite:
        return self._key.suite

    @property
    def key_fingerprint(self) -> str:
        return self._key.fingerprint()

    def blind_evaluate(self, request: EvaluationRequest) -> EvaluationResponse:
        return evaluate(request, self._key, self.max_batch_size)

    def evaluate_bytes(self, body: bytes) -> bytes:
        """Decode a wire request, evaluate it and encode the response."""
        request = codec.decode_request(body, self.suite)
        response = self.blind_evaluate(request)
        logger.debug("Evaluated batch of %d elements", len(response))
        return codec.encode(response)

    def direct_evaluate(self, private_input: bytes) -> bytes:
        """
        Compute the PRF output for an input the server already knows.

        Matches what a client obtains through blind/evaluate/finalize.
        """
        group = self.suite.group
        element = group.hash_to_group(bytes(private_input), hash_to_group_dst(self.suite))
        if group.is_identity(element):
            raise ProtocolError("Input maps to the identity element")
        issued = group.serialize(group.evaluate(self._key.scalar, element))
        return finalize_output(self.suite, bytes(private_input), issued)
