"""
Sigma-Protocol Prover
=====================
Compound proof over the witness (x0, x1, x2, b) against a Statement.

The three moves are exposed separately (blinds, first message, responses)
so the algebra can be checked move by move; genproof runs them in order.

Any external verifier must recompute R0..R3, S0, S1 and T from d0, d1, u,
v, w and the same challenges, so the relations below are fixed:

    R0 = g0*r0              d0 = r0 + a0*x0
    R1 = (h0 - y)*r0        d1 = r1 + a1*x2
    R2 = h1*r1              u  = s0 + a2*b
    R3 = g0*r1              v  = s1 + a2*x1
    S0 = g1*s0 + h0*s1      w  = s2 + x1*(a2 - u)
    S1 = g1*s0 + y*s1
    T  = g1*(s0*b) + h0*s2
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .challenges import DEFAULT_TRANSCRIPT_LABEL, ChallengeStrategy, default_challenge_strategy
from .commitments import Statement, Witness, genwitness, statement_transcript
from .substrate import (
    G1Point,
    InvalidEncodingError,
    RandomSource,
    scalar_from_bytes,
    scalar_to_bytes,
)

logger = logging.getLogger(__name__)

FIRST_MESSAGE_FIELDS = ('R0', 'R1', 'R2', 'R3', 'S0', 'S1', 'T')
RESPONSE_FIELDS = ('d0', 'd1', 'u', 'v', 'w')


@dataclass(frozen=True)
class ProofBlinds:
    """Prover randomizers; single use, never transmitted"""
    r0: Any
    r1: Any
    s0: Any
    s1: Any
    s2: Any

    # galois scalars are numpy arrays and cannot be hashed
    __hash__ = None

    def __repr__(self) -> str:
        return "ProofBlinds(<secret>)"


@dataclass(frozen=True)
class FirstMessage:
    R0: G1Point
    R1: G1Point
    R2: G1Point
    R3: G1Point
    S0: G1Point
    S1: G1Point
    T: G1Point

    def elements(self) -> Tuple[G1Point, ...]:
        return tuple(getattr(self, name) for name in FIRST_MESSAGE_FIELDS)


@dataclass(frozen=True)
class Responses:
    d0: Any
    d1: Any
    u: Any
    v: Any
    w: Any

    # galois scalars are numpy arrays and cannot be hashed
    __hash__ = None


@dataclass(frozen=True)
class Proof:
    """First message (R0..R3, S0, S1, T) and responses (d0, d1, u, v, w)"""
    R0: G1Point
    R1: G1Point
    R2: G1Point
    R3: G1Point
    S0: G1Point
    S1: G1Point
    T: G1Point
    d0: Any
    d1: Any
    u: Any
    v: Any
    w: Any

    # galois scalars are numpy arrays and cannot be hashed
    __hash__ = None

    @classmethod
    def assemble(cls, first: FirstMessage, resp: Responses) -> 'Proof':
        return cls(
            R0=first.R0, R1=first.R1, R2=first.R2, R3=first.R3,
            S0=first.S0, S1=first.S1, T=first.T,
            d0=resp.d0, d1=resp.d1, u=resp.u, v=resp.v, w=resp.w,
        )

    def first_message(self) -> FirstMessage:
        return FirstMessage(**{name: getattr(self, name) for name in FIRST_MESSAGE_FIELDS})

    def responses(self) -> Responses:
        return Responses(**{name: getattr(self, name) for name in RESPONSE_FIELDS})

    def to_dict(self) -> Dict[str, str]:
        """Hex encoding suitable for JSON transport"""
        data = {name: getattr(self, name).hex() for name in FIRST_MESSAGE_FIELDS}
        data.update({name: scalar_to_bytes(getattr(self, name)).hex()
                     for name in RESPONSE_FIELDS})
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> 'Proof':
        """Decode a proof received from outside, validating every element"""
        missing = [name for name in FIRST_MESSAGE_FIELDS + RESPONSE_FIELDS if name not in data]
        if missing:
            raise InvalidEncodingError(f"Proof is missing fields: {missing}")

        values = {name: G1Point.from_hex(data[name]) for name in FIRST_MESSAGE_FIELDS}
        for name in RESPONSE_FIELDS:
            try:
                raw = bytes.fromhex(data[name])
            except (ValueError, TypeError) as e:
                raise InvalidEncodingError(f"Invalid hex for {name}: {e}") from e
            values[name] = scalar_from_bytes(raw)

        return cls(**values)


# ============================================================================
# PROVER MOVES
# ============================================================================


def sample_blinds(rng: RandomSource) -> ProofBlinds:
    r0 = rng.random_scalar()
    r1 = rng.random_scalar()
    s0 = rng.random_scalar()
    s1 = rng.random_scalar()
    s2 = rng.random_scalar()
    return ProofBlinds(r0=r0, r1=r1, s0=s0, s1=s1, s2=s2)


def first_message(witness: Witness, statement: Statement, blinds: ProofBlinds) -> FirstMessage:
    """Commitments to the prover's randomness"""
    ps = statement
    return FirstMessage(
        R0=ps.g0 * blinds.r0,
        R1=(ps.h0 - ps.y) * blinds.r0,
        R2=ps.h1 * blinds.r1,
        R3=ps.g0 * blinds.r1,
        S0=ps.g1 * blinds.s0 + ps.h0 * blinds.s1,
        S1=ps.g1 * blinds.s0 + ps.y * blinds.s1,
        T=ps.g1 * (blinds.s0 * witness.b) + ps.h0 * blinds.s2,
    )


def responses(witness: Witness, blinds: ProofBlinds, challenges: Tuple) -> Responses:
    a0, a1, a2 = challenges
    d0 = blinds.r0 + a0 * witness.x0
    d1 = blinds.r1 + a1 * witness.x2
    u = blinds.s0 + a2 * witness.b
    v = blinds.s1 + a2 * witness.x1
    # w uses the response u, not the blind s0
    w = blinds.s2 + witness.x1 * (a2 - u)
    return Responses(d0=d0, d1=d1, u=u, v=v, w=w)


def sigma_transcript(statement: Statement, first: FirstMessage,
                     label: str = DEFAULT_TRANSCRIPT_LABEL):
    transcript = statement_transcript("sigma", statement, label)
    transcript.append_points(FIRST_MESSAGE_FIELDS, first.elements())
    return transcript


def genproof(witness: Witness, statement: Statement, rng: RandomSource,
             challenges: Optional[ChallengeStrategy] = None,
             label: str = DEFAULT_TRANSCRIPT_LABEL) -> Proof:
    """Generate the compound proof; never fails and never checks b"""
    challenges = challenges or default_challenge_strategy()

    if not witness.is_bit():
        logger.debug("Proving for a witness whose b is outside {0, 1}")

    blinds = sample_blinds(rng)
    first = first_message(witness, statement, blinds)
    a = challenges.sigma_challenges(sigma_transcript(statement, first, label), rng)
    return Proof.assemble(first, responses(witness, blinds, a))


def proof_instrumentation(statement: Statement, rng: RandomSource,
                          challenges: Optional[ChallengeStrategy] = None,
                          label: str = DEFAULT_TRANSCRIPT_LABEL) -> Proof:
    """Round-2 hook: prove for a throwaway witness, mirroring the prototype's timing"""
    witness = genwitness(rng)
    return genproof(witness, statement, rng, challenges, label)
