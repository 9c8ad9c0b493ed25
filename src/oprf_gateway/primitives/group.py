"""
Prime-order group backends for the supported OPRF suites.

Each suite pairs a NIST curve from ``ecdsa`` with a SHA-2 hash. The Group
class exposes the primitive capability set the protocol engine relies on:

- sample_scalar / hash_to_scalar
- hash_to_group
- blind / unblind / evaluate (scalar multiplication variants)
- serialize / deserialize for elements (SEC1 compressed) and scalars

All suites expose the identical interface, so the protocol engine never
branches on the curve.
"""

import hashlib
import secrets
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Callable

from ecdsa.curves import NIST256p, NIST384p, NIST521p
from ecdsa.ellipticcurve import INFINITY, PointJacobi

from .hash_to_curve import hash_to_field, is_square, map_to_curve_sswu, sqrt_mod


Element = PointJacobi


class Suite(str, Enum):
    """Supported curve + hash configurations."""

    P256_SHA256 = "P256-SHA256"
    P384_SHA384 = "P384-SHA384"
    P521_SHA512 = "P521-SHA512"

    @property
    def wire_id(self) -> int:
        """One-byte identifier used in the wire header."""
        return _WIRE_IDS[self]

    @property
    def group(self) -> "Group":
        return get_group(self)

    @classmethod
    def from_wire_id(cls, wire_id: int) -> "Suite":
        for suite, value in _WIRE_IDS.items():
            if value == wire_id:
                return suite
        raise ValueError(f"Unknown suite id: 0x{wire_id:02x}")

    @classmethod
    def parse(cls, name: str) -> "Suite":
        """Resolve a suite from its identifier, case-insensitively."""
        normalized = name.strip().upper().replace("_", "-")
        for suite in cls:
            if suite.value.upper() == normalized:
                return suite
        raise ValueError(
            f"Unknown suite {name!r}. Supported: {', '.join(s.value for s in cls)}"
        )


_WIRE_IDS = {
    Suite.P256_SHA256: 0x03,
    Suite.P384_SHA384: 0x04,
    Suite.P521_SHA512: 0x05,
}

DEFAULT_SUITE = Suite.P384_SHA384


@dataclass(frozen=True)
class CurveParams:
    """Static parameters for one suite."""

    curve: Any  # ecdsa.curves.Curve
    hash_fn: Callable[..., Any]
    sswu_z: int
    security_bits: int


_CURVE_PARAMS = {
    Suite.P256_SHA256: CurveParams(NIST256p, hashlib.sha256, -10, 128),
    Suite.P384_SHA384: CurveParams(NIST384p, hashlib.sha384, -12, 192),
    Suite.P521_SHA512: CurveParams(NIST521p, hashlib.sha512, -4, 256),
}


class Group:
    """
    Group operations for one suite.

    Scalars are plain ints in [0, order). Elements are ecdsa PointJacobi
    instances; the identity is never produced by deserialize().
    """

    def __init__(self, suite: Suite):
        params = _CURVE_PARAMS[suite]
        self.suite = suite
        self._curve = params.curve
        self._fp = params.curve.curve
        self._hash_fn = params.hash_fn
        self._z = params.sswu_z

        self.order: int = params.curve.order
        self.p: int = self._fp.p()
        self.field_size = (self.p.bit_length() + 7) // 8
        self.scalar_size = (self.order.bit_length() + 7) // 8
        self.element_size = 1 + self.field_size
        self.hash_size = params.hash_fn().digest_size
        # L = ceil((ceil(log2(p)) + k) / 8)
        self._expand_len = (self.p.bit_length() + params.security_bits + 7) // 8

    def __repr__(self) -> str:
        return f"Group({self.suite.value})"

    @property
    def generator(self) -> Element:
        return self._curve.generator

    def hash(self, data: bytes) -> bytes:
        return self._hash_fn(data).digest()

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def sample_scalar(self) -> int:
        """Uniformly random non-zero scalar."""
        return secrets.randbelow(self.order - 1) + 1

    def hash_to_scalar(self, msg: bytes, dst: bytes) -> int:
        (scalar,) = hash_to_field(msg, 1, dst, self.order, self._expand_len, self._hash_fn)
        return scalar

    def scalar_inverse(self, scalar: int) -> int:
        if scalar % self.order == 0:
            raise ValueError("Zero scalar has no inverse")
        return pow(scalar, -1, self.order)

    def serialize_scalar(self, scalar: int) -> bytes:
        return (scalar % self.order).to_bytes(self.scalar_size, "big")

    def deserialize_scalar(self, data: bytes) -> int:
        if len(data) != self.scalar_size:
            raise ValueError(
                f"Scalar must be {self.scalar_size} bytes for {self.suite.value}, got {len(data)}"
            )
        scalar = int.from_bytes(data, "big")
        if scalar >= self.order:
            raise ValueError("Scalar is not reduced modulo the group order")
        return scalar

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def is_identity(self, element: Element) -> bool:
        return element is INFINITY or element == INFINITY

    def hash_to_group(self, msg: bytes, dst: bytes) -> Element:
        """Random-oracle encoding of msg into the group (hash_to_curve)."""
        u0, u1 = hash_to_field(msg, 2, dst, self.p, self._expand_len, self._hash_fn)
        q0 = self._point(*map_to_curve_sswu(u0, self.p, self._fp.a(), self._fp.b(), self._z))
        q1 = self._point(*map_to_curve_sswu(u1, self.p, self._fp.a(), self._fp.b(), self._z))
        return q0 + q1

    def blind(self, element: Element, scalar: int) -> Element:
        return element * scalar

    def unblind(self, element: Element, scalar: int) -> Element:
        return element * self.scalar_inverse(scalar)

    def evaluate(self, scalar: int, element: Element) -> Element:
        return element * scalar

    def serialize(self, element: Element) -> bytes:
        """SEC1 compressed encoding. The identity has no encoding."""
        if self.is_identity(element):
            raise ValueError("Cannot serialize the identity element")
        x, y = element.x(), element.y()
        return bytes([0x02 | (y & 1)]) + x.to_bytes(self.field_size, "big")

    def deserialize(self, data: bytes) -> Element:
        """
        Decode a compressed point.

        Raises:
            ValueError: On wrong length, bad prefix, x out of range or an
                x coordinate with no point on the curve
        """
        if len(data) != self.element_size:
            raise ValueError(
                f"Element must be {self.element_size} bytes for {self.suite.value}, got {len(data)}"
            )
        prefix = data[0]
        if prefix not in (0x02, 0x03):
            raise ValueError(f"Invalid point prefix 0x{prefix:02x}")
        x = int.from_bytes(data[1:], "big")
        if x >= self.p:
            raise ValueError("Point x coordinate out of range")

        rhs = (pow(x, 3, self.p) + self._fp.a() * x + self._fp.b()) % self.p
        if not is_square(rhs, self.p):
            raise ValueError("Point is not on the curve")
        y = sqrt_mod(rhs, self.p)
        if (y & 1) != (prefix & 1):
            y = self.p - y
        return self._point(x, y)

    def _point(self, x: int, y: int) -> Element:
        if not self._fp.contains_point(x, y):
            raise ValueError("Point is not on the curve")
        return PointJacobi(self._fp, x, y, 1, self.order)


@lru_cache(maxsize=None)
def get_group(suite: Suite) -> Group:
    """Return the shared Group instance for a suite."""
    return Group(suite)
