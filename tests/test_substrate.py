"""
Substrate tests: group arithmetic, encodings and entropy sources
"""

import os

import pytest

from tcr.substrate import (
    CURVE_ORDER,
    FIELD_MODULUS,
    EntropyError,
    Fr,
    G1Point,
    InvalidEncodingError,
    RandomSource,
    SeededRandomSource,
    SystemRandomSource,
    hash_to_point,
    scalar_from_bytes,
    scalar_to_bytes,
    to_scalar,
)


class TestScalars:

    def test_negative_integers_reduce_into_field(self):
        assert to_scalar(-1) == Fr(CURVE_ORDER - 1)
        assert to_scalar(CURVE_ORDER + 5) == Fr(5)

    def test_scalar_encoding_rejects_unreduced_values(self):
        assert scalar_from_bytes(scalar_to_bytes(7)) == Fr(7)

        with pytest.raises(InvalidEncodingError):
            scalar_from_bytes(CURVE_ORDER.to_bytes(32, 'big'))
        with pytest.raises(InvalidEncodingError):
            scalar_from_bytes(b"\x01" * 31)


class TestGroup:

    def test_scalar_multiplication_is_linear(self):
        g = G1Point.generator()
        a, b = Fr(123456789), Fr(987654321)

        assert g * a + g * b == g * (a + b)
        assert (g * a) * b == g * (a * b)

    def test_scalar_on_either_side(self):
        g = G1Point.generator()
        k = Fr(42)

        assert k * g == g * k
        assert 3 * g == g + g + g

    def test_negation_and_identity(self):
        p = G1Point.generator() * 99

        assert (p - p).is_identity()
        assert p + G1Point.identity() == p
        assert -(-p) == p
        assert (p * CURVE_ORDER).is_identity()

    def test_encoding_validates_points(self):
        p = G1Point.generator() * 31337
        assert G1Point.from_bytes(p.to_bytes()) == p
        assert G1Point.from_bytes(bytes(64)).is_identity()

        with pytest.raises(InvalidEncodingError, match="not on the curve"):
            G1Point.from_bytes((1).to_bytes(32, 'big') + (1).to_bytes(32, 'big'))
        with pytest.raises(InvalidEncodingError, match="exceeds field modulus"):
            G1Point.from_bytes(FIELD_MODULUS.to_bytes(32, 'big') + (2).to_bytes(32, 'big'))
        with pytest.raises(InvalidEncodingError):
            G1Point.from_bytes(p.to_bytes()[:-1])
        with pytest.raises(InvalidEncodingError):
            G1Point.from_hex("zz")

    def test_points_are_hashable(self):
        p = G1Point.generator() * 5
        assert len({p, G1Point.generator() * 5, p + p}) == 2


class TestHashToPoint:

    def test_deterministic_and_label_separated(self):
        p = hash_to_point(b"seed", b"g0")

        assert p == hash_to_point(b"seed", b"g0")
        assert p != hash_to_point(b"seed", b"g1")
        assert p != hash_to_point(b"other", b"g0")
        assert not p.is_identity()
        assert G1Point.from_bytes(p.to_bytes()) == p

    def test_canonical_even_y(self):
        _, y = hash_to_point(b"seed", b"parity").affine()
        assert y % 2 == 0


class ShortSource(RandomSource):
    def random_bytes(self, num_bytes):
        return b"\x00" * (num_bytes - 1)


class TestEntropy:

    def test_seeded_source_is_reproducible(self):
        a = SeededRandomSource(7)
        b = SeededRandomSource(7)
        c = SeededRandomSource(8)

        draws = [a.random_scalar() for _ in range(3)]
        assert draws == [b.random_scalar() for _ in range(3)]
        assert draws[0] != c.random_scalar()
        assert draws[0] != draws[1]

    def test_random_point_is_never_identity(self, rng):
        assert not rng.random_point().is_identity()

    def test_short_read_is_fatal(self):
        with pytest.raises(EntropyError):
            ShortSource().random_scalar()

    def test_os_failure_propagates(self, monkeypatch):
        def broken(num_bytes):
            raise OSError("no entropy")

        monkeypatch.setattr(os, "urandom", broken)
        with pytest.raises(EntropyError, match="no entropy"):
            SystemRandomSource().random_scalar()
