"""
OPRF Gateway Keys Module

Loading, generation and storage of the server evaluation key.
"""

from .secret import SecretKey
from .store import KeyStore, load_secret_key

__all__ = ["SecretKey", "KeyStore", "load_secret_key"]
