"""
Two-Round Confidential Vote Commitments
Pedersen-style deposit and vote commitments with a Sigma-protocol prover over BN254
"""

from .substrate import (
    # Substrate
    Fr,
    G1Point,
    CURVE_ORDER,
    RandomSource,
    SystemRandomSource,
    SeededRandomSource,
    hash_to_point,
    to_scalar,

    # Exceptions
    TCRError,
    InvalidEncodingError,
    EntropyError,
    ConfigurationError,
)
from .challenges import (
    Transcript,
    ChallengeStrategy,
    FiatShamirChallenges,
    SampledChallenges,
    get_challenge_strategy,
)
from .commitments import (
    Statement,
    Witness,
    DepositCommitment,
    Round1Commitment,
    Round2Commitment,
    CommitmentBundle,
    RelationValues,
    genstatement,
    derive_statement,
    genwitness,
    commit_amount,
    deposit,
    vote1,
    vote2,
    evaluate_relations,
)
from .proofs import Proof, genproof, proof_instrumentation
from .engine import CommitmentEngine, ParticipantRecord

__version__ = "0.1.0"

__all__ = [
    'Fr',
    'G1Point',
    'CURVE_ORDER',
    'RandomSource',
    'SystemRandomSource',
    'SeededRandomSource',
    'hash_to_point',
    'to_scalar',

    'TCRError',
    'InvalidEncodingError',
    'EntropyError',
    'ConfigurationError',

    'Transcript',
    'ChallengeStrategy',
    'FiatShamirChallenges',
    'SampledChallenges',
    'get_challenge_strategy',

    'Statement',
    'Witness',
    'DepositCommitment',
    'Round1Commitment',
    'Round2Commitment',
    'CommitmentBundle',
    'RelationValues',
    'genstatement',
    'derive_statement',
    'genwitness',
    'commit_amount',
    'deposit',
    'vote1',
    'vote2',
    'evaluate_relations',

    'Proof',
    'genproof',
    'proof_instrumentation',

    'CommitmentEngine',
    'ParticipantRecord',
]
