"""
Deposit and Two-Round Vote Commitments
======================================
Public parameters, witnesses, the deposit / round-1 / round-2 commitment
builders and the commitment-relation evaluator.

Every builder takes its entropy source explicitly. Round 2 must be built
after round 1 for the same participant: it consumes round 1's blinding x.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from .challenges import (
    DEFAULT_TRANSCRIPT_LABEL,
    ChallengeStrategy,
    Transcript,
    default_challenge_strategy,
)
from .substrate import (
    G1Point,
    InvalidEncodingError,
    RandomSource,
    ScalarLike,
    hash_to_point,
    to_scalar,
)

logger = logging.getLogger(__name__)

STATEMENT_FIELDS = ('g0', 'g1', 'h0', 'h1', 'y')

# ============================================================================
# PUBLIC PARAMETERS AND WITNESS
# ============================================================================


@dataclass(frozen=True)
class Statement:
    """Five independent generators shared by every role in one protocol run"""
    g0: G1Point
    g1: G1Point
    h0: G1Point
    h1: G1Point
    y: G1Point

    def elements(self) -> Tuple[G1Point, ...]:
        return tuple(getattr(self, name) for name in STATEMENT_FIELDS)

    def to_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name).hex() for name in STATEMENT_FIELDS}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> 'Statement':
        missing = [name for name in STATEMENT_FIELDS if name not in data]
        if missing:
            raise InvalidEncodingError(f"Statement is missing generators: {missing}")
        return cls(**{name: G1Point.from_hex(data[name]) for name in STATEMENT_FIELDS})


@dataclass(frozen=True)
class Witness:
    """Secret prover input; b should be 0 or 1 but nothing here enforces it"""
    x0: Any = field(repr=False)
    x1: Any = field(repr=False)
    x2: Any = field(repr=False)
    b: Any = field(repr=False)

    # galois scalars are numpy arrays and cannot be hashed
    __hash__ = None

    def __post_init__(self):
        for name in ('x0', 'x1', 'x2', 'b'):
            object.__setattr__(self, name, to_scalar(getattr(self, name)))

    def is_bit(self) -> bool:
        return int(self.b) in (0, 1)


def genstatement(rng: RandomSource) -> Statement:
    """Sample fresh public parameters"""
    g0 = rng.random_point()
    g1 = rng.random_point()
    h0 = rng.random_point()
    h1 = rng.random_point()
    y = rng.random_point()
    return Statement(g0=g0, g1=g1, h0=h0, h1=h1, y=y)


def derive_statement(seed: bytes, label: str = DEFAULT_TRANSCRIPT_LABEL) -> Statement:
    """Nothing-up-my-sleeve public parameters anyone can recompute from the seed"""
    if isinstance(seed, str):
        seed = seed.encode('utf-8')

    points = {
        name: hash_to_point(seed, f"{label}/statement/{name}".encode('utf-8'))
        for name in STATEMENT_FIELDS
    }
    return Statement(**points)


def genwitness(rng: RandomSource, b: Optional[ScalarLike] = None) -> Witness:
    """Sample a witness; without an explicit b the bit is a uniform scalar"""
    x0 = rng.random_scalar()
    x1 = rng.random_scalar()
    x2 = rng.random_scalar()
    if b is None:
        b = rng.random_scalar()
    return Witness(x0=x0, x1=x1, x2=x2, b=b)


def statement_transcript(operation: str, statement: Statement,
                         label: str = DEFAULT_TRANSCRIPT_LABEL) -> Transcript:
    """Transcript already bound to the operation name and the public parameters"""
    transcript = Transcript(label)
    transcript.append_bytes("operation", operation.encode('utf-8'))
    transcript.append_points(STATEMENT_FIELDS, statement.elements())
    return transcript


# ============================================================================
# DEPOSIT
# ============================================================================


@dataclass(frozen=True)
class DepositCommitment:
    """C = g1*amount + h0*r with knowledge-proof component (A, z)"""
    C: G1Point
    A: G1Point
    z: Any

    # galois scalars are numpy arrays and cannot be hashed
    __hash__ = None


def commit_amount(amount: ScalarLike, blinding: ScalarLike, statement: Statement) -> G1Point:
    """Pedersen commitment of an amount under g1 with blinding under h0"""
    return statement.g1 * to_scalar(amount) + statement.h0 * to_scalar(blinding)


def deposit(amount: ScalarLike, statement: Statement, rng: RandomSource,
            challenges: Optional[ChallengeStrategy] = None,
            label: str = DEFAULT_TRANSCRIPT_LABEL) -> DepositCommitment:
    """Commit to a deposit amount"""
    challenges = challenges or default_challenge_strategy()
    amount = to_scalar(amount)

    r = rng.random_scalar()
    C = commit_amount(amount, r, statement)

    a = rng.random_scalar()
    A = statement.h0 * a

    transcript = statement_transcript("deposit", statement, label)
    transcript.append_point("C", C)
    transcript.append_point("A", A)
    c = challenges.schnorr_challenge(transcript, rng)

    # The response binds amount rather than r; see DESIGN.md
    z = c * amount + r

    return DepositCommitment(C=C, A=A, z=z)


# ============================================================================
# TWO-ROUND VOTE COMMITMENTS
# ============================================================================


@dataclass(frozen=True)
class Round1Commitment:
    """(c0, c1) = (g0*x, g1*vote + h0*x) with knowledge proof (A, z) of x"""
    c0: G1Point
    c1: G1Point
    A: G1Point
    z: Any

    # galois scalars are numpy arrays and cannot be hashed
    __hash__ = None


@dataclass(frozen=True)
class Round2Commitment:
    """Second-round commitment re-using x against the ephemeral generator Y"""
    c2: G1Point
    c3: G1Point
    c4: G1Point
    Y: G1Point


def vote1(vote: ScalarLike, weight: ScalarLike, statement: Statement, rng: RandomSource,
          challenges: Optional[ChallengeStrategy] = None,
          label: str = DEFAULT_TRANSCRIPT_LABEL) -> Tuple[Round1Commitment, Any]:
    """First-round vote commitment; returns the commitment and the linking secret x"""
    challenges = challenges or default_challenge_strategy()
    vote = to_scalar(vote)

    # weight does not enter the algebra yet
    logger.debug("Round-1 commitment built without a weight relation")

    x = rng.random_scalar()
    c0 = statement.g0 * x
    c1 = statement.g1 * vote + statement.h0 * x

    a = rng.random_scalar()
    A = statement.g0 * a

    transcript = statement_transcript("vote1", statement, label)
    transcript.append_points(("c0", "c1", "A"), (c0, c1, A))
    c = challenges.schnorr_challenge(transcript, rng)

    z = c * x + a

    return Round1Commitment(c0=c0, c1=c1, A=A, z=z), x


Instrumentation = Callable[[Statement, RandomSource], Any]


def vote2(vote: ScalarLike, x: ScalarLike, statement: Statement, rng: RandomSource,
          instrumentation: Optional[Instrumentation] = None) -> Round2Commitment:
    """Second-round vote commitment linked to round 1 through x"""
    vote = to_scalar(vote)
    x = to_scalar(x)

    s = rng.random_scalar()
    Y = rng.random_point()

    c2 = statement.g1 * vote + Y * x
    c3 = statement.g0 * s
    c4 = (Y - statement.h0) * x + statement.h1 * s

    if instrumentation is not None:
        instrumentation(statement, rng)

    return Round2Commitment(c2=c2, c3=c3, c4=c4, Y=Y)


# ============================================================================
# COMMITMENT-RELATION EVALUATOR
# ============================================================================


@dataclass(frozen=True)
class CommitmentBundle:
    """Five commitments received by a verifier"""
    c0: G1Point
    c1: G1Point
    c2: G1Point
    c3: G1Point
    c4: G1Point

    @classmethod
    def from_rounds(cls, round1: Round1Commitment, round2: Round2Commitment) -> 'CommitmentBundle':
        return cls(c0=round1.c0, c1=round1.c1, c2=round2.c2, c3=round2.c3, c4=round2.c4)


@dataclass(frozen=True)
class RelationValues:
    """Left-hand operands of the verification equations"""
    A0: G1Point
    A1: G1Point
    A2: G1Point
    A3: G1Point
    A4: G1Point
    A5: G1Point

    def as_tuple(self) -> Tuple[G1Point, ...]:
        return (self.A0, self.A1, self.A2, self.A3, self.A4, self.A5)


def evaluate_relations(bundle: CommitmentBundle) -> RelationValues:
    """Fixed linear combinations of the bundle; performs no comparison"""
    difference = bundle.c1 - bundle.c2
    return RelationValues(
        A0=bundle.c0,
        A1=bundle.c1,
        A2=bundle.c2,
        A3=difference,
        A4=difference + bundle.c4,
        A5=bundle.c3,
    )
