"""
Commitment Engine
=================
Facade binding one protocol instance together: configuration, entropy
source, challenge strategy and public parameters. Drivers (the CLI, the
benchmark suite) sequence deposit -> round 1 -> round 2 -> proof through it.
"""

import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Optional

from config.config import ProtocolConfig

from .challenges import get_challenge_strategy
from .commitments import (
    CommitmentBundle,
    DepositCommitment,
    RelationValues,
    Round1Commitment,
    Round2Commitment,
    Statement,
    Witness,
    deposit,
    derive_statement,
    evaluate_relations,
    genstatement,
    genwitness,
    vote1,
    vote2,
)
from .proofs import Proof, genproof, proof_instrumentation
from .substrate import (
    ConfigurationError,
    RandomSource,
    ScalarLike,
    SeededRandomSource,
    SystemRandomSource,
)

logger = logging.getLogger(__name__)


@dataclass
class ParticipantRecord:
    """Everything one participant publishes in a run"""
    participant_id: str
    deposit: DepositCommitment
    round1: Round1Commitment
    round2: Round2Commitment
    proof: Proof
    relations: RelationValues
    timings: dict = field(default_factory=dict)


class CommitmentEngine:
    """One protocol instance: shared statement, injected entropy, configured challenges"""

    def __init__(self, config: Optional[ProtocolConfig] = None,
                 rng: Optional[RandomSource] = None,
                 statement: Optional[Statement] = None,
                 monitor: Optional[Any] = None):
        self.config = config or ProtocolConfig()

        if rng is None:
            if self.config.seed is not None:
                logger.warning(
                    "Using a seeded entropy source; commitments are reproducible by anyone with the seed")
                rng = SeededRandomSource(self.config.seed)
            else:
                rng = SystemRandomSource()
        self.rng = rng

        self.challenges = get_challenge_strategy(self.config.challenge_mode)
        self.instrumentation = (
            self.bound_instrumentation() if self.config.round2_proof_instrumentation else None)
        self.monitor = monitor
        self.statement = statement or self._setup_statement()

        logger.info(
            f"Commitment engine ready: challenges={self.challenges.name}, "
            f"setup={self.config.setup_mode}, rng={self.rng!r}")

    def _setup_statement(self) -> Statement:
        if self.config.setup_mode == "derived":
            if not self.config.setup_seed:
                raise ConfigurationError("Derived setup requires a setup_seed")
            logger.info(f"Deriving statement from setup seed '{self.config.setup_seed}'")
            return derive_statement(self.config.setup_seed, self.config.transcript_label)

        return genstatement(self.rng)

    def bound_instrumentation(self):
        """Round-2 proof hook running under this engine's challenges and label"""
        return partial(proof_instrumentation, challenges=self.challenges,
                       label=self.config.transcript_label)

    def _operation(self, name: str):
        if self.monitor is None:
            return nullcontext()
        return self.monitor.start_operation(name)

    def new_witness(self, b: Optional[ScalarLike] = None) -> Witness:
        with self._operation("genwitness"):
            return genwitness(self.rng, b)

    def deposit(self, amount: ScalarLike) -> DepositCommitment:
        with self._operation("deposit"):
            result = deposit(amount, self.statement, self.rng, self.challenges,
                             self.config.transcript_label)
        logger.debug("Deposit commitment created")
        return result

    def update(self, amount: ScalarLike) -> DepositCommitment:
        """Balance update; same construction as a deposit"""
        with self._operation("update"):
            result = deposit(amount, self.statement, self.rng, self.challenges,
                             self.config.transcript_label)
        logger.debug("Balance update commitment created")
        return result

    def vote1(self, vote: ScalarLike, weight: ScalarLike):
        with self._operation("vote1"):
            result = vote1(vote, weight, self.statement, self.rng, self.challenges,
                           self.config.transcript_label)
        logger.debug("Round-1 vote commitment created")
        return result

    def vote2(self, vote: ScalarLike, x: ScalarLike) -> Round2Commitment:
        with self._operation("vote2"):
            result = vote2(vote, x, self.statement, self.rng, self.instrumentation)
        logger.debug("Round-2 vote commitment created")
        return result

    def vote2_instrumented(self, vote: ScalarLike, x: ScalarLike) -> Round2Commitment:
        """Round 2 with the throwaway proof hook, whatever the config says"""
        with self._operation("vote2_instrumented"):
            return vote2(vote, x, self.statement, self.rng, self.bound_instrumentation())

    def prove(self, witness: Witness) -> Proof:
        with self._operation("genproof"):
            result = genproof(witness, self.statement, self.rng, self.challenges,
                              self.config.transcript_label)
        logger.debug("Sigma proof generated")
        return result

    def evaluate(self, bundle: CommitmentBundle) -> RelationValues:
        with self._operation("evaluate_relations"):
            return evaluate_relations(bundle)

    def run_participant(self, participant_id: str, vote: int, weight: ScalarLike,
                        amount: ScalarLike) -> ParticipantRecord:
        """Deposit, both vote rounds, the proof and the relation values for one participant"""
        logger.info(f"Running commitment flow for participant {participant_id}")

        deposit_commitment = self.deposit(amount)
        round1, x = self.vote1(vote, weight)
        round2 = self.vote2(vote, x)
        proof = self.prove(self.new_witness(b=vote))
        relations = self.evaluate(CommitmentBundle.from_rounds(round1, round2))

        return ParticipantRecord(
            participant_id=participant_id,
            deposit=deposit_commitment,
            round1=round1,
            round2=round2,
            proof=proof,
            relations=relations,
        )
