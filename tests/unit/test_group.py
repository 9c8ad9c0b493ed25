"""
Unit tests for the prime-order group backends.
"""

import pytest

from oprf_gateway.primitives import DEFAULT_SUITE, Suite, get_group

ALL_SUITES = list(Suite)


class TestSuite:
    """Tests for the Suite enum."""

    def test_default_suite(self):
        assert DEFAULT_SUITE is Suite.P384_SHA384

    def test_wire_ids_round_trip(self):
        for suite in Suite:
            assert Suite.from_wire_id(suite.wire_id) is suite

    def test_unknown_wire_id(self):
        with pytest.raises(ValueError):
            Suite.from_wire_id(0x7F)

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("P384-SHA384", Suite.P384_SHA384),
            ("p256-sha256", Suite.P256_SHA256),
            ("P521_SHA512", Suite.P521_SHA512),
            (" P384-SHA384 ", Suite.P384_SHA384),
        ],
    )
    def test_parse(self, name, expected):
        assert Suite.parse(name) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown suite"):
            Suite.parse("ristretto255-SHA512")


class TestGroupSizes:
    """Element and scalar sizes per suite."""

    @pytest.mark.parametrize(
        "suite,element_size,scalar_size,hash_size",
        [
            (Suite.P256_SHA256, 33, 32, 32),
            (Suite.P384_SHA384, 49, 48, 48),
            (Suite.P521_SHA512, 67, 66, 64),
        ],
    )
    def test_sizes(self, suite, element_size, scalar_size, hash_size):
        group = suite.group
        assert group.element_size == element_size
        assert group.scalar_size == scalar_size
        assert group.hash_size == hash_size

    def test_group_is_shared(self):
        assert get_group(Suite.P384_SHA384) is Suite.P384_SHA384.group


@pytest.mark.parametrize("suite", ALL_SUITES)
class TestGroupOperations:
    """Operations every suite must support identically."""

    def test_hash_to_group_deterministic(self, suite):
        group = suite.group
        a = group.serialize(group.hash_to_group(b"input", b"DST"))
        b = group.serialize(group.hash_to_group(b"input", b"DST"))
        assert a == b

    def test_hash_to_group_distinct_inputs(self, suite):
        group = suite.group
        a = group.serialize(group.hash_to_group(b"first", b"DST"))
        b = group.serialize(group.hash_to_group(b"second", b"DST"))
        assert a != b

    def test_serialize_round_trip(self, suite):
        group = suite.group
        element = group.hash_to_group(b"input", b"DST")
        encoded = group.serialize(element)
        assert len(encoded) == group.element_size
        assert encoded[0] in (0x02, 0x03)
        assert group.serialize(group.deserialize(encoded)) == encoded

    def test_blind_unblind(self, suite):
        group = suite.group
        element = group.hash_to_group(b"input", b"DST")
        blind = group.sample_scalar()
        blinded = group.blind(element, blind)
        assert group.serialize(blinded) != group.serialize(element)
        assert group.serialize(group.unblind(blinded, blind)) == group.serialize(element)

    def test_evaluation_commutes_with_blinding(self, suite):
        group = suite.group
        element = group.hash_to_group(b"input", b"DST")
        key = group.sample_scalar()
        blind = group.sample_scalar()
        evaluated = group.evaluate(key, group.blind(element, blind))
        direct = group.evaluate(key, element)
        assert group.serialize(group.unblind(evaluated, blind)) == group.serialize(direct)

    def test_sample_scalar_in_range(self, suite):
        group = suite.group
        for _ in range(10):
            assert 0 < group.sample_scalar() < group.order

    def test_scalar_round_trip(self, suite):
        group = suite.group
        scalar = group.sample_scalar()
        encoded = group.serialize_scalar(scalar)
        assert len(encoded) == group.scalar_size
        assert group.deserialize_scalar(encoded) == scalar

    def test_unreduced_scalar_rejected(self, suite):
        group = suite.group
        with pytest.raises(ValueError, match="not reduced"):
            group.deserialize_scalar(group.order.to_bytes(group.scalar_size, "big"))

    def test_scalar_wrong_length(self, suite):
        group = suite.group
        with pytest.raises(ValueError):
            group.deserialize_scalar(b"\x01" * (group.scalar_size - 1))

    def test_deserialize_wrong_length(self, suite):
        group = suite.group
        with pytest.raises(ValueError):
            group.deserialize(b"\x02" * (group.element_size + 1))

    def test_deserialize_bad_prefix(self, suite):
        group = suite.group
        encoded = bytearray(group.serialize(group.generator))
        encoded[0] = 0x04
        with pytest.raises(ValueError, match="prefix"):
            group.deserialize(bytes(encoded))

    def test_deserialize_x_out_of_range(self, suite):
        group = suite.group
        with pytest.raises(ValueError):
            group.deserialize(b"\x02" + b"\xff" * group.field_size)

    def test_identity_has_no_encoding(self, suite):
        group = suite.group
        identity = group.generator * group.order
        assert group.is_identity(identity)
        with pytest.raises(ValueError):
            group.serialize(identity)

    def test_zero_scalar_has_no_inverse(self, suite):
        with pytest.raises(ValueError):
            suite.group.scalar_inverse(0)
