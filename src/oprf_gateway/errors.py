"""
OPRF Gateway exception hierarchy.

Startup errors (KeyLoadError, InitializationError) are fatal and must stop
the process before it accepts connections. Request errors (ProtocolError and
its subclasses, NotReadyError, PayloadTooLargeError) are caught at the
gateway boundary and turned into coded JSON responses.
"""


class OPRFError(Exception):
    """Base exception for OPRF gateway operations."""

    pass


class KeyLoadError(OPRFError):
    """Key file missing, unreadable, undecodable or invalid for the suite."""

    pass


class InitializationError(OPRFError):
    """Engine or key wiring failed, or initialization was attempted twice."""

    pass


class NotReadyError(OPRFError):
    """A request arrived before the one-time initialization completed."""

    pass


class ProtocolError(OPRFError):
    """Malformed wire bytes, arity mismatch or suite mismatch."""

    pass


class EmptyInputError(ProtocolError):
    """Empty body or zero-arity evaluation request."""

    pass


class BatchTooLargeError(ProtocolError):
    """Evaluation request exceeds the configured maximum batch arity."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Batch of {size} elements exceeds the limit of {limit}")
        self.size = size
        self.limit = limit


class PayloadTooLargeError(OPRFError):
    """Request body exceeds the configured maximum size."""

    def __init__(self, limit: int):
        super().__init__(f"Request body exceeds {limit} bytes")
        self.limit = limit
