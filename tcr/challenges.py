"""
Challenge Derivation for the Commitment Proofs
===============================================
Fiat-Shamir transcripts and the pluggable strategies that turn a transcript
into Sigma-protocol challenges.

No verifier in this repository consumes these challenges, so the transcript
layout below is a convention of this codebase only; a verifier must be built
against exactly the same encoding.
"""

import hashlib
import logging
from functools import lru_cache
from typing import Iterable, Tuple

from .substrate import (
    CURVE_ORDER,
    ConfigurationError,
    Fr,
    G1Point,
    RandomSource,
    ScalarLike,
    scalar_to_bytes,
)

logger = logging.getLogger(__name__)

DEFAULT_TRANSCRIPT_LABEL = "direct-tcr"


class Transcript:
    """Append-only SHA-512 transcript with length-prefixed, labelled entries"""

    def __init__(self, label: str = DEFAULT_TRANSCRIPT_LABEL):
        self._hash = hashlib.sha512()
        self._challenges = 0
        self.append_bytes("domain", label.encode('utf-8'))

    def append_bytes(self, name: str, data: bytes):
        tag = name.encode('utf-8')
        self._hash.update(len(tag).to_bytes(4, 'big') + tag)
        self._hash.update(len(data).to_bytes(4, 'big') + data)

    def append_point(self, name: str, point: G1Point):
        self.append_bytes(name, point.to_bytes())

    def append_points(self, names: Iterable[str], points: Iterable[G1Point]):
        for name, point in zip(names, points):
            self.append_point(name, point)

    def append_scalar(self, name: str, value: ScalarLike):
        self.append_bytes(name, scalar_to_bytes(value))

    def challenge_scalar(self, name: str = "challenge"):
        """Derive the next challenge; repeated calls yield independent values"""
        state = self._hash.copy()
        tag = name.encode('utf-8')
        state.update(b"challenge" + len(tag).to_bytes(4, 'big') + tag)
        state.update(self._challenges.to_bytes(4, 'big'))
        self._challenges += 1
        return Fr(int.from_bytes(state.digest(), 'big') % CURVE_ORDER)


class ChallengeStrategy:
    """How a prover obtains its challenges from the transcript so far"""

    name = "abstract"

    def schnorr_challenge(self, transcript: Transcript, rng: RandomSource):
        """Challenge for a single knowledge-proof component (A, z)"""
        raise NotImplementedError

    def sigma_challenges(self, transcript: Transcript, rng: RandomSource) -> Tuple:
        """Challenges (a0, a1, a2) for the compound Sigma proof"""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class FiatShamirChallenges(ChallengeStrategy):
    """Single challenge hashed from the statement and first-message elements"""

    name = "fiat_shamir"

    def __init__(self):
        logger.warning(
            "Fiat-Shamir transcript convention has not been validated against a verifier")

    def schnorr_challenge(self, transcript: Transcript, rng: RandomSource):
        return transcript.challenge_scalar("schnorr")

    def sigma_challenges(self, transcript: Transcript, rng: RandomSource) -> Tuple:
        c = transcript.challenge_scalar("sigma")
        return (c, c, c)


class SampledChallenges(ChallengeStrategy):
    """Independent random challenges drawn from the prover's own entropy.

    Reproduces the prototype behaviour. The resulting proofs are not
    non-interactive: nothing binds the challenges to the transcript.
    """

    name = "sampled"

    def __init__(self):
        logger.warning(
            "Sampled challenges are not bound to the transcript; proofs are not sound")

    def schnorr_challenge(self, transcript: Transcript, rng: RandomSource):
        return rng.random_scalar()

    def sigma_challenges(self, transcript: Transcript, rng: RandomSource) -> Tuple:
        a0 = rng.random_scalar()
        a1 = rng.random_scalar()
        a2 = rng.random_scalar()
        return (a0, a1, a2)


CHALLENGE_STRATEGIES = {
    FiatShamirChallenges.name: FiatShamirChallenges,
    SampledChallenges.name: SampledChallenges,
}


def get_challenge_strategy(mode: str) -> ChallengeStrategy:
    """Instantiate the strategy registered under a config name"""
    try:
        strategy_cls = CHALLENGE_STRATEGIES[mode]
    except KeyError:
        raise ConfigurationError(
            f"Unknown challenge mode '{mode}', expected one of {sorted(CHALLENGE_STRATEGIES)}") from None
    return strategy_cls()


@lru_cache(maxsize=None)
def default_challenge_strategy() -> ChallengeStrategy:
    """Process-wide Fiat-Shamir strategy used when a caller passes none"""
    return FiatShamirChallenges()
