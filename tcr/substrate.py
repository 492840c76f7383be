"""
Algebraic Substrate for Two-Round Vote Commitments
===================================================
Scalar field, G1 group elements and entropy sources over BN254 (alt_bn128).

The scalar field is galois GF(r); group arithmetic is delegated to
py_ecc's optimized (projective) BN254 implementation.
"""

import hashlib
import logging
import os
import threading
from typing import Tuple, Union

import galois
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms
from py_ecc import optimized_bn128 as bn128

logger = logging.getLogger(__name__)

# ============================================================================
# CONSTANTS
# ============================================================================

# Prime order r of G1 (and of the scalar field)
CURVE_ORDER = bn128.curve_order

# Base field prime p; p = 3 mod 4 so square roots are a single exponentiation
FIELD_MODULUS = bn128.field_modulus

# Smallest primitive root of r, saves galois from factoring r - 1
FR_PRIMITIVE_ELEMENT = 5

SCALAR_BYTES = 32
POINT_BYTES = 64

# Wide reduction keeps the modular bias of sampled scalars below 2^-256
WIDE_SAMPLE_BYTES = 64

HASH_TO_CURVE_DOMAIN = b"direct-tcr/hash-to-curve/v1"

Fr = galois.GF(CURVE_ORDER, primitive_element=FR_PRIMITIVE_ELEMENT, verify=False)

ScalarLike = Union[int, "galois.FieldArray"]

# ============================================================================
# EXCEPTIONS
# ============================================================================


class TCRError(Exception):
    """Base exception for commitment and proof operations"""
    pass


class InvalidEncodingError(TCRError):
    """Externally supplied bytes do not decode to a valid element"""
    pass


class EntropyError(TCRError):
    """The entropy source failed or returned too little data"""
    pass


class ConfigurationError(TCRError):
    """Invalid protocol or system configuration"""
    pass


# ============================================================================
# SCALAR FIELD
# ============================================================================


def to_scalar(value: ScalarLike) -> "galois.FieldArray":
    """Reduce an integer (or an existing scalar) into Fr"""
    if isinstance(value, Fr):
        return value
    return Fr(int(value) % CURVE_ORDER)


def scalar_to_bytes(value: ScalarLike) -> bytes:
    """Fixed-width big-endian encoding of a scalar"""
    return int(to_scalar(value)).to_bytes(SCALAR_BYTES, 'big')


def scalar_from_bytes(data: bytes) -> "galois.FieldArray":
    """Decode a scalar, rejecting non-canonical encodings"""
    if len(data) != SCALAR_BYTES:
        raise InvalidEncodingError(
            f"Scalar encoding must be {SCALAR_BYTES} bytes, got {len(data)}")

    value = int.from_bytes(data, 'big')
    if value >= CURVE_ORDER:
        raise InvalidEncodingError("Scalar encoding is not reduced mod r")

    return Fr(value)


# ============================================================================
# GROUP ELEMENTS
# ============================================================================


class G1Point:
    """Immutable element of the BN254 G1 group, written additively"""

    __slots__ = ('_pt',)

    # Keep numpy from broadcasting FieldArray * G1Point into an object array
    __array_ufunc__ = None

    def __init__(self, pt: Tuple):
        self._pt = pt

    @classmethod
    def generator(cls) -> 'G1Point':
        return cls(bn128.G1)

    @classmethod
    def identity(cls) -> 'G1Point':
        return cls(bn128.Z1)

    def is_identity(self) -> bool:
        return bn128.is_inf(self._pt)

    def __add__(self, other: 'G1Point') -> 'G1Point':
        if not isinstance(other, G1Point):
            return NotImplemented
        return G1Point(bn128.add(self._pt, other._pt))

    def __neg__(self) -> 'G1Point':
        return G1Point(bn128.neg(self._pt))

    def __sub__(self, other: 'G1Point') -> 'G1Point':
        if not isinstance(other, G1Point):
            return NotImplemented
        return self + (-other)

    def __mul__(self, scalar: ScalarLike) -> 'G1Point':
        if isinstance(scalar, G1Point):
            return NotImplemented
        return G1Point(bn128.multiply(self._pt, int(scalar) % CURVE_ORDER))

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        if not isinstance(other, G1Point):
            return NotImplemented
        return bn128.eq(self._pt, other._pt)

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def affine(self) -> Tuple[int, int]:
        """Affine (x, y) coordinates; the identity maps to (0, 0)"""
        if self.is_identity():
            return (0, 0)
        x, y = bn128.normalize(self._pt)
        return (x.n, y.n)

    def to_bytes(self) -> bytes:
        x, y = self.affine()
        return x.to_bytes(32, 'big') + y.to_bytes(32, 'big')

    def hex(self) -> str:
        return self.to_bytes().hex()

    @classmethod
    def from_bytes(cls, data: bytes) -> 'G1Point':
        """Decode and validate an uncompressed affine point"""
        if len(data) != POINT_BYTES:
            raise InvalidEncodingError(
                f"Point encoding must be {POINT_BYTES} bytes, got {len(data)}")

        x = int.from_bytes(data[:32], 'big')
        y = int.from_bytes(data[32:], 'big')

        if x == 0 and y == 0:
            return cls.identity()
        if x >= FIELD_MODULUS or y >= FIELD_MODULUS:
            raise InvalidEncodingError("Point coordinate exceeds field modulus")

        pt = (bn128.FQ(x), bn128.FQ(y), bn128.FQ.one())
        if not bn128.is_on_curve(pt, bn128.b):
            raise InvalidEncodingError("Point is not on the curve")

        # G1 has cofactor 1, so every curve point is in the prime-order group
        return cls(pt)

    @classmethod
    def from_hex(cls, text: str) -> 'G1Point':
        try:
            data = bytes.fromhex(text)
        except (ValueError, TypeError) as e:
            raise InvalidEncodingError(f"Invalid hex point encoding: {e}") from e
        return cls.from_bytes(data)

    def __repr__(self) -> str:
        if self.is_identity():
            return "G1Point(identity)"
        x, y = self.affine()
        return f"G1Point(x=0x{x:064x}, y=0x{y:064x})"


def hash_to_point(seed: bytes, label: bytes = b"") -> G1Point:
    """Map seed and label to a G1 point with unknown discrete log (try-and-increment)"""
    counter = 0
    while True:
        digest = hashlib.sha512(
            HASH_TO_CURVE_DOMAIN
            + len(seed).to_bytes(4, 'big') + seed
            + len(label).to_bytes(4, 'big') + label
            + counter.to_bytes(4, 'big')
        ).digest()
        x = int.from_bytes(digest, 'big') % FIELD_MODULUS

        rhs = (pow(x, 3, FIELD_MODULUS) + 3) % FIELD_MODULUS
        y = pow(rhs, (FIELD_MODULUS + 1) // 4, FIELD_MODULUS)

        if (y * y) % FIELD_MODULUS == rhs:
            if y & 1:
                y = FIELD_MODULUS - y
            return G1Point((bn128.FQ(x), bn128.FQ(y), bn128.FQ.one()))

        counter += 1


# ============================================================================
# ENTROPY SOURCES
# ============================================================================


class RandomSource:
    """Source of uniformly random scalars and group elements"""

    def random_bytes(self, num_bytes: int) -> bytes:
        raise NotImplementedError

    def _checked_bytes(self, num_bytes: int) -> bytes:
        data = self.random_bytes(num_bytes)
        if len(data) != num_bytes:
            raise EntropyError(
                f"Entropy source returned {len(data)} of {num_bytes} requested bytes")
        return data

    def random_scalar(self) -> "galois.FieldArray":
        """Uniform element of Fr"""
        data = self._checked_bytes(WIDE_SAMPLE_BYTES)
        return Fr(int.from_bytes(data, 'big') % CURVE_ORDER)

    def random_nonzero_scalar(self) -> "galois.FieldArray":
        while True:
            k = self.random_scalar()
            if int(k) != 0:
                return k

    def random_point(self) -> G1Point:
        """Uniform non-identity element of G1"""
        return G1Point.generator() * self.random_nonzero_scalar()


class SystemRandomSource(RandomSource):
    """Operating system CSPRNG; safe to share between threads"""

    def random_bytes(self, num_bytes: int) -> bytes:
        try:
            return os.urandom(num_bytes)
        except (OSError, NotImplementedError) as e:
            raise EntropyError(f"System entropy source failed: {e}") from e

    def __repr__(self) -> str:
        return "SystemRandomSource()"


class SeededRandomSource(RandomSource):
    """Deterministic ChaCha20 keystream for tests and reproducible benchmarks.

    Not suitable for real commitments: anyone holding the seed recovers
    every blinding scalar.
    """

    def __init__(self, seed: Union[int, str, bytes]):
        if isinstance(seed, int):
            seed = seed.to_bytes((seed.bit_length() + 8) // 8, 'big', signed=True)
        elif isinstance(seed, str):
            seed = seed.encode('utf-8')

        self.seed = seed
        key = hashlib.sha256(b"direct-tcr/seeded-rng/v1" + seed).digest()
        cipher = Cipher(algorithms.ChaCha20(key, b"\x00" * 16), mode=None)
        self._stream = cipher.encryptor()
        self._lock = threading.Lock()

    def random_bytes(self, num_bytes: int) -> bytes:
        with self._lock:
            return self._stream.update(b"\x00" * num_bytes)

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self.seed!r})"
