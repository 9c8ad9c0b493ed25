"""
OPRF Gateway - Oblivious Pseudorandom Function Evaluation Service

A server holds a long-term secret key and evaluates blinded group elements
submitted by clients. Clients learn F(key, input) for their private inputs;
the server learns neither the inputs nor the outputs.

Components:
- primitives: prime-order groups (NIST P-256/P-384/P-521) and hash-to-curve
- protocol: client/server roles, wire codec, in-process service
- keys: key file loading, generation and derivation
- gateway: FastAPI transport exposing POST /upload-binary
- client: httpx client for a remote gateway
"""

from .config import ServiceConfig
from .errors import (
    BatchTooLargeError,
    EmptyInputError,
    InitializationError,
    KeyLoadError,
    NotReadyError,
    OPRFError,
    PayloadTooLargeError,
    ProtocolError,
)
from .keys import KeyStore, SecretKey, load_secret_key
from .lifecycle import ServiceLifecycle
from .primitives import DEFAULT_SUITE, Suite
from .protocol import OPRFClient, OPRFServer, OPRFService
from .version import gateway_version

__version__ = gateway_version()

__all__ = [
    "__version__",
    "DEFAULT_SUITE",
    "Suite",
    "SecretKey",
    "KeyStore",
    "load_secret_key",
    "OPRFClient",
    "OPRFServer",
    "OPRFService",
    "ServiceConfig",
    "ServiceLifecycle",
    "OPRFError",
    "KeyLoadError",
    "InitializationError",
    "NotReadyError",
    "ProtocolError",
    "EmptyInputError",
    "BatchTooLargeError",
    "PayloadTooLargeError",
]
