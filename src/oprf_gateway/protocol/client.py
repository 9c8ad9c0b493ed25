"""
OPRF client role: blind and finalize.

The client never sees the server key. Each call to blind() samples a fresh
scalar per input, so two rounds over the same input produce unlinkable
requests that still finalize to the same output.
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

from ..errors import ProtocolError
from ..primitives import DEFAULT_SUITE, Suite
from . import codec
from .context import finalize_output, hash_to_group_dst
from .messages import EvaluationRequest, EvaluationResponse, FinalizeData

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 0xFFFF


def _as_input_bytes(value) -> bytes:
    if isinstance(value, str):
        raise TypeError("OPRF inputs must be bytes; encode text explicitly")
    data = bytes(value)
    if len(data) > MAX_INPUT_LENGTH:
        raise ProtocolError(f"Input of {len(data)} bytes exceeds {MAX_INPUT_LENGTH} bytes")
    return data


class OPRFClient:
    """Client side of the OPRF protocol for a single suite."""

    def __init__(self, suite: Suite = DEFAULT_SUITE):
        self.suite = suite
        self._group = suite.group
        self._dst = hash_to_group_dst(suite)

    def blind(self, inputs: Sequence[bytes]) -> Tuple[FinalizeData, EvaluationRequest]:
        """
        Blind a batch of private inputs.

        An empty batch yields an empty FinalizeData and an empty
        EvaluationRequest; the codec encodes the latter as an explicit
        empty batch.

        Args:
            inputs: Ordered private inputs

        Returns:
            (finalize_data, request) for a single evaluation round

        Raises:
            ProtocolError: If an input maps to the identity element or is
                too long to be framed
        """
        private_inputs = tuple(_as_input_bytes(value) for value in inputs)

        blinds = []
        blinded_elements = []
        for position, private_input in enumerate(private_inputs):
            input_element = self._group.hash_to_group(private_input, self._dst)
            if self._group.is_identity(input_element):
                raise ProtocolError(f"Input at position {position} maps to the identity element")
            blind = self._group.sample_scalar()
            blinds.append(blind)
            blinded_elements.append(self._group.serialize(self._group.blind(input_element, blind)))

        finalize_data = FinalizeData(
            suite=self.suite,
            inputs=private_inputs,
            blinds=tuple(blinds),
            blinded_elements=tuple(blinded_elements),
        )
        request = EvaluationRequest(suite=self.suite, elements=tuple(blinded_elements))
        return finalize_data, request

    def finalize(
        self,
        finalize_data: FinalizeData,
        response: Union[EvaluationResponse, bytes],
    ) -> List[Optional[bytes]]:
        """
        Remove the blinding and derive one output per input.

        Positions whose evaluated element cannot be decoded come back as
        None; callers processing batches must filter them.

        Raises:
            ProtocolError: On undecodable response bytes, suite mismatch,
                arity mismatch or reuse of consumed finalize data
        """
        if isinstance(response, (bytes, bytearray, memoryview)):
            response = codec.decode_response(bytes(response), self.suite)

        if finalize_data.consumed:
            raise ProtocolError("Finalize data has already been consumed")
        if finalize_data.suite != self.suite or response.suite != self.suite:
            raise ProtocolError(
                f"Suite mismatch: client {self.suite.value}, "
                f"finalize data {finalize_data.suite.value}, response {response.suite.value}"
            )
        if len(response) != len(finalize_data):
            raise ProtocolError(
                f"Arity mismatch: {len(finalize_data)} inputs, {len(response)} evaluated elements"
            )

        blinds = finalize_data.consume()
        outputs: List[Optional[bytes]] = []
        for index, private_input, blind, evaluated in zip(
            finalize_data.indices, finalize_data.inputs, blinds, response.elements
        ):
            try:
                element = self._group.deserialize(evaluated)
            except ValueError:
                logger.debug("Discarding undecodable evaluated element at position %d", index)
                outputs.append(None)
                continue

            unblinded = self._group.unblind(element, blind)
            if self._group.is_identity(unblinded):
                outputs.append(None)
                continue
            outputs.append(
                finalize_output(self.suite, private_input, self._group.serialize(unblinded))
            )

        return outputs
