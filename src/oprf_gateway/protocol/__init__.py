"""
OPRF protocol engine.

Client role (blind, finalize), server role (evaluate), message types and
the binary wire codec.
"""

from . import codec
from .client import OPRFClient
from .messages import EvaluationRequest, EvaluationResponse, FinalizeData
from .server import OPRFServer, evaluate
from .service import OPRFService

__all__ = [
    "codec",
    "OPRFClient",
    "OPRFServer",
    "OPRFService",
    "EvaluationRequest",
    "EvaluationResponse",
    "FinalizeData",
    "evaluate",
]
