"""
Unit tests for the RFC 9380 hashing primitives.

Tests cover:
- expand_message_xmd against published vectors
- Input limits of expand_message_xmd
- hash_to_field range and determinism
- The simplified SWU map landing on the curve
"""

import hashlib

import pytest

from oprf_gateway.primitives import Suite, expand_message_xmd, hash_to_field, i2osp, os2ip
from oprf_gateway.primitives.hash_to_curve import is_square, map_to_curve_sswu, sqrt_mod

XMD_SHA256_DST = b"QUUX-V01-CS02-with-expander-SHA256-128"
P256_RO_DST = b"QUUX-V01-CS02-with-P256_XMD:SHA-256_SSWU_RO_"


class TestOctetConversion:
    """Tests for i2osp / os2ip."""

    def test_i2osp_fixed_width(self):
        assert i2osp(1, 2) == b"\x00\x01"
        assert i2osp(0, 1) == b"\x00"

    def test_i2osp_overflow(self):
        with pytest.raises(ValueError):
            i2osp(256, 1)

    def test_i2osp_negative(self):
        with pytest.raises(ValueError):
            i2osp(-1, 4)

    def test_os2ip_inverts_i2osp(self):
        assert os2ip(i2osp(0xABCDEF, 3)) == 0xABCDEF


class TestExpandMessageXmd:
    """Tests for expand_message_xmd."""

    def test_empty_message_vector(self):
        """RFC 9380 K.1, msg = ""."""
        out = expand_message_xmd(b"", XMD_SHA256_DST, 0x20, hashlib.sha256)
        assert out.hex() == "68a985b87eb6b46952128911f2a4412bbc302a9d759667f87f7a21d803f07235"

    def test_abc_vector(self):
        """RFC 9380 K.1, msg = "abc"."""
        out = expand_message_xmd(b"abc", XMD_SHA256_DST, 0x20, hashlib.sha256)
        assert out.hex() == "d8ccab23b5985ccea865c6c97b6e5b8350e794e603b4b97902f53a8a0d605615"

    def test_output_length(self):
        for length in (1, 32, 33, 96, 200):
            assert len(expand_message_xmd(b"msg", b"DST", length, hashlib.sha384)) == length

    def test_prefix_property_does_not_hold(self):
        """Output length is bound into the expansion."""
        short = expand_message_xmd(b"msg", b"DST", 32, hashlib.sha256)
        long = expand_message_xmd(b"msg", b"DST", 64, hashlib.sha256)
        assert long[:32] != short

    def test_dst_too_long(self):
        with pytest.raises(ValueError):
            expand_message_xmd(b"", b"x" * 256, 32, hashlib.sha256)

    def test_output_too_long(self):
        with pytest.raises(ValueError):
            expand_message_xmd(b"", b"DST", 255 * 32 + 1, hashlib.sha256)


class TestHashToField:
    """Tests for hash_to_field."""

    def test_elements_reduced(self):
        p = Suite.P256_SHA256.group.p
        elements = hash_to_field(b"input", 2, b"DST", p, 48, hashlib.sha256)
        assert len(elements) == 2
        assert all(0 <= e < p for e in elements)

    def test_deterministic(self):
        p = Suite.P384_SHA384.group.p
        first = hash_to_field(b"input", 2, b"DST", p, 72, hashlib.sha384)
        second = hash_to_field(b"input", 2, b"DST", p, 72, hashlib.sha384)
        assert first == second

    def test_dst_separates(self):
        p = Suite.P384_SHA384.group.p
        first = hash_to_field(b"input", 1, b"DST-A", p, 72, hashlib.sha384)
        second = hash_to_field(b"input", 1, b"DST-B", p, 72, hashlib.sha384)
        assert first != second


class TestSSWU:
    """Tests for the simplified SWU map."""

    @pytest.mark.parametrize("suite", list(Suite))
    def test_map_lands_on_curve(self, suite):
        group = suite.group
        fp = group._fp
        for u in (0, 1, 2, 12345, group.p - 1):
            x, y = map_to_curve_sswu(u, group.p, fp.a(), fp.b(), group._z)
            assert fp.contains_point(x, y)

    def test_sign_follows_u(self):
        group = Suite.P256_SHA256.group
        fp = group._fp
        x, y = map_to_curve_sswu(7, group.p, fp.a(), fp.b(), group._z)
        assert y % 2 == 7 % 2

    def test_sqrt_mod(self):
        p = Suite.P256_SHA256.group.p
        assert is_square(16, p)
        assert sqrt_mod(16, p) in (4, p - 4)

    def test_p256_hash_to_curve_vector(self):
        """RFC 9380 J.1.1 P256_XMD:SHA-256_SSWU_RO_, msg = ""."""
        point = Suite.P256_SHA256.group.hash_to_group(b"", P256_RO_DST)
        assert point.x() == int(
            "2c15230b26dbc6fc9a37051158c95b79656e17a1a920b11394ca91c44247d3e4", 16
        )
        assert point.y() == int(
            "8a7a74985cc5c776cdfe4b1f19884970453912e9d31528c060be9ab5c43e8415", 16
        )
