"""
Secret key handle.
"""

import hashlib
from dataclasses import dataclass, field

from ..primitives import Suite


@dataclass(frozen=True)
class SecretKey:
    """
    Immutable server evaluation key.

    The key bytes never appear in repr() or str(); use fingerprint() to
    identify a key in logs.
    """

    suite: Suite
    material: bytes = field(repr=False)

    def __post_init__(self):
        group = self.suite.group
        scalar = group.deserialize_scalar(self.material)
        if scalar == 0:
            raise ValueError("Secret key scalar must be non-zero")

    def __repr__(self) -> str:
        return f"SecretKey(suite={self.suite.value}, fingerprint={self.fingerprint()})"

    __str__ = __repr__

    @property
    def scalar(self) -> int:
        return int.from_bytes(self.material, "big")

    def public_key(self) -> bytes:
        """Serialized pkS = skS * G."""
        group = self.suite.group
        return group.serialize(group.generator * self.scalar)

    def fingerprint(self) -> str:
        """Short hex digest of the public key."""
        return hashlib.sha256(self.public_key()).hexdigest()[:16]
