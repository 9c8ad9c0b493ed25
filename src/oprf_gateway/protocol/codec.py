"""
Binary wire codec for evaluation requests and responses.

Layout (big-endian):

    offset  size   field
    0       1      message kind (0x01 request, 0x02 response)
    1       1      suite id (see Suite.wire_id)
    2       2      element count n
    4       n*Ne   elements, each exactly Ne bytes for the suite

The per-element size Ne is fixed by the suite, so element boundaries need
no length prefixes. A batch with n == 0 is encoded as the bare 4-byte
header, which is distinct from every non-empty encoding.
"""

import struct
from typing import Union

from ..errors import ProtocolError
from ..primitives import Suite
from .messages import EvaluationRequest, EvaluationResponse

REQUEST_KIND = 0x01
RESPONSE_KIND = 0x02

HEADER = struct.Struct(">BBH")
MAX_ELEMENTS = 0xFFFF

Message = Union[EvaluationRequest, EvaluationResponse]

_KINDS = {
    EvaluationRequest: REQUEST_KIND,
    EvaluationResponse: RESPONSE_KIND,
}


def encoded_size(suite: Suite, count: int) -> int:
    """Exact encoded length of a message holding count elements."""
    return HEADER.size + count * suite.group.element_size


def encode(message: Message) -> bytes:
    """
    Serialize a request or response.

    Raises:
        ProtocolError: If the batch is too large or an element has the
            wrong size for the suite
    """
    kind = _KINDS.get(type(message))
    if kind is None:
        raise TypeError(f"Cannot encode {type(message).__name__}")

    count = len(message.elements)
    if count > MAX_ELEMENTS:
        raise ProtocolError(f"Batch of {count} elements cannot be encoded (max {MAX_ELEMENTS})")

    element_size = message.suite.group.element_size
    for position, element in enumerate(message.elements):
        if len(element) != element_size:
            raise ProtocolError(
                f"Element {position} is {len(element)} bytes, expected {element_size}"
            )

    return HEADER.pack(kind, message.suite.wire_id, count) + b"".join(message.elements)


def decode(data: bytes, suite: Suite) -> Message:
    """
    Parse a request or response encoded for the given suite.

    Only the framing is checked here; elements stay opaque bytes.

    Raises:
        ProtocolError: On truncated input, unknown kind, suite mismatch or a
            body length inconsistent with the element count
    """
    data = bytes(data)
    if len(data) < HEADER.size:
        raise ProtocolError(f"Message too short: {len(data)} bytes")

    kind, wire_id, count = HEADER.unpack_from(data)
    if kind not in (REQUEST_KIND, RESPONSE_KIND):
        raise ProtocolError(f"Unknown message kind 0x{kind:02x}")

    try:
        message_suite = Suite.from_wire_id(wire_id)
    except ValueError as e:
        raise ProtocolError(str(e)) from e
    if message_suite != suite:
        raise ProtocolError(
            f"Suite mismatch: message is {message_suite.value}, expected {suite.value}"
        )

    expected = encoded_size(suite, count)
    if len(data) != expected:
        raise ProtocolError(
            f"Message length {len(data)} does not match {count} elements (expected {expected})"
        )

    element_size = suite.group.element_size
    elements = tuple(
        data[HEADER.size + i * element_size : HEADER.size + (i + 1) * element_size]
        for i in range(count)
    )

    if kind == REQUEST_KIND:
        return EvaluationRequest(suite=suite, elements=elements)
    return EvaluationResponse(suite=suite, elements=elements)


def decode_request(data: bytes, suite: Suite) -> EvaluationRequest:
    message = decode(data, suite)
    if not isinstance(message, EvaluationRequest):
        raise ProtocolError("Expected an evaluation request, got a response")
    return message


def decode_response(data: bytes, suite: Suite) -> EvaluationResponse:
    message = decode(data, suite)
    if not isinstance(message, EvaluationResponse):
        raise ProtocolError("Expected an evaluation response, got a request")
    return message
