"""
Cryptographic primitives for the OPRF suites.

Wraps the ``ecdsa`` curve arithmetic with RFC 9380 hash-to-curve so every
suite exposes the same group interface.
"""

from .group import DEFAULT_SUITE, Element, Group, Suite, get_group
from .hash_to_curve import expand_message_xmd, hash_to_field, i2osp, os2ip

__all__ = [
    "DEFAULT_SUITE",
    "Element",
    "Group",
    "Suite",
    "get_group",
    "expand_message_xmd",
    "hash_to_field",
    "i2osp",
    "os2ip",
]
