"""
Domain separation and output derivation shared by the client and server roles.

Follows RFC 9497 base mode (modeOPRF = 0x00).
"""

from ..primitives import Suite, i2osp

MODE_OPRF = 0x00
VERSION_LABEL = b"OPRFV1-"


def context_string(suite: Suite, mode: int = MODE_OPRF) -> bytes:
    return VERSION_LABEL + i2osp(mode, 1) + b"-" + suite.value.encode("ascii")


def hash_to_group_dst(suite: Suite) -> bytes:
    return b"HashToGroup-" + context_string(suite)


def hash_to_scalar_dst(suite: Suite) -> bytes:
    return b"HashToScalar-" + context_string(suite)


def derive_key_pair_dst(suite: Suite) -> bytes:
    return b"DeriveKeyPair" + context_string(suite)


def finalize_output(suite: Suite, private_input: bytes, unblinded_element: bytes) -> bytes:
    """Hash(len(input) || input || len(element) || element || "Finalize")."""
    return suite.group.hash(
        i2osp(len(private_input), 2)
        + private_input
        + i2osp(len(unblinded_element), 2)
        + unblinded_element
        + b"Finalize"
    )
