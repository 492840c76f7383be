"""
Deposit, two-round vote and relation-evaluator tests
"""

import pytest

from tcr import (
    CommitmentBundle,
    Fr,
    InvalidEncodingError,
    SeededRandomSource,
    Statement,
    Witness,
    commit_amount,
    deposit,
    derive_statement,
    evaluate_relations,
    genstatement,
    genwitness,
    to_scalar,
    vote1,
    vote2,
)
from tcr.commitments import statement_transcript
from tcr.proofs import Proof, proof_instrumentation


class TestStatementAndWitness:

    def test_generators_are_independent_draws(self, rng):
        statement = genstatement(rng)
        assert len(set(statement.elements())) == 5

    def test_derived_statement_is_reproducible(self):
        a = derive_statement(b"election-2017")
        assert a == derive_statement("election-2017")
        assert a != derive_statement(b"election-2018")
        assert len(set(a.elements())) == 5

    def test_statement_dict_round_trip(self, statement):
        assert Statement.from_dict(statement.to_dict()) == statement

    def test_statement_dict_rejects_non_string_generator(self, statement):
        data = dict(statement.to_dict(), g0=None)
        with pytest.raises(InvalidEncodingError):
            Statement.from_dict(data)

    def test_secret_bearing_values_are_unhashable(self, statement, rng):
        round1, _ = vote1(1, 1, statement, rng)
        for value in (Witness(x0=1, x1=2, x2=3, b=0), deposit(5, statement, rng), round1):
            with pytest.raises(TypeError, match="unhashable"):
                hash(value)

    def test_witness_repr_hides_secrets(self):
        witness = Witness(x0=11, x1=22, x2=33, b=1)
        assert "11" not in repr(witness)
        assert witness.x0 == Fr(11)
        assert witness.is_bit()

    def test_genwitness_samples_bit_unless_given(self, rng):
        assert genwitness(rng, b=0).b == Fr(0)
        assert not genwitness(SeededRandomSource(3)).is_bit()


class TestDeposit:

    def test_commitment_matches_closed_form(self, statement, sampled):
        amount = 250
        result = deposit(amount, statement, SeededRandomSource(1), challenges=sampled)

        replay = SeededRandomSource(1)
        r = replay.random_scalar()
        a = replay.random_scalar()
        c = replay.random_scalar()

        assert result.C == statement.g1 * amount + statement.h0 * r
        assert result.A == statement.h0 * a
        assert result.z == c * to_scalar(amount) + r

    def test_fiat_shamir_challenge_binds_transcript(self, statement):
        amount = 250
        result = deposit(amount, statement, SeededRandomSource(1))

        replay = SeededRandomSource(1)
        r = replay.random_scalar()

        transcript = statement_transcript("deposit", statement)
        transcript.append_point("C", result.C)
        transcript.append_point("A", result.A)
        c = transcript.challenge_scalar("schnorr")

        assert result.z == c * to_scalar(amount) + r

    def test_same_amount_commitments_differ(self, statement, rng):
        first = deposit(500, statement, rng)
        second = deposit(500, statement, rng)
        assert first.C != second.C

    def test_commitments_are_additively_homomorphic(self, statement, rng):
        r1, r2 = rng.random_scalar(), rng.random_scalar()

        combined = commit_amount(30, r1, statement) + commit_amount(12, r2, statement)
        assert combined == commit_amount(42, r1 + r2, statement)


class TestVoteRounds:

    def test_round1_matches_closed_form(self, statement, sampled):
        round1, x = vote1(1, 7, statement, SeededRandomSource(2), challenges=sampled)

        replay = SeededRandomSource(2)
        expected_x = replay.random_scalar()
        a = replay.random_scalar()
        c = replay.random_scalar()

        assert x == expected_x
        assert round1.c0 == statement.g0 * x
        assert round1.c1 == statement.g1 * 1 + statement.h0 * x
        assert round1.A == statement.g0 * a
        assert round1.z == c * x + a

    def test_round1_weight_does_not_enter_commitment(self, statement):
        light, _ = vote1(1, 1, statement, SeededRandomSource(5))
        heavy, _ = vote1(1, 1000, statement, SeededRandomSource(5))
        assert light == heavy

    def test_round2_links_to_round1_blinding(self, statement, rng):
        _, x = vote1(1, 1, statement, rng)
        round2 = vote2(1, x, statement, SeededRandomSource(9))

        replay = SeededRandomSource(9)
        s = replay.random_scalar()
        Y = replay.random_point()

        assert round2.Y == Y
        assert round2.c2 == statement.g1 * 1 + Y * x
        assert round2.c3 == statement.g0 * s
        assert round2.c4 == (Y - statement.h0) * x + statement.h1 * s

    def test_vote_difference_shifts_c2_by_g1_multiple(self, statement, rng):
        _, x = vote1(0, 1, statement, rng)
        vote_a, vote_b = 1, 0

        round2_a = vote2(vote_a, x, statement, SeededRandomSource(11))
        round2_b = vote2(vote_b, x, statement, SeededRandomSource(11))

        assert round2_a.Y == round2_b.Y
        assert round2_a.c2 - round2_b.c2 == statement.g1 * (vote_a - vote_b)

    def test_ephemeral_generator_is_fresh_per_call(self, statement, rng):
        _, x = vote1(1, 1, statement, rng)
        first = vote2(1, x, statement, rng)
        second = vote2(1, x, statement, rng)
        assert first.Y != second.Y

    def test_instrumentation_is_opt_in(self, statement, rng):
        calls = []

        vote2(1, 5, statement, rng)
        assert calls == []

        vote2(1, 5, statement, rng,
              instrumentation=lambda ps, source: calls.append((ps, source)))
        assert calls == [(statement, rng)]

    def test_proof_instrumentation_returns_proof(self, statement, rng):
        assert isinstance(proof_instrumentation(statement, rng), Proof)


class TestRelationEvaluator:

    def test_relation_identities_hold_for_random_bundles(self, rng):
        for _ in range(3):
            c0, c1, c2, c3, c4 = (rng.random_point() for _ in range(5))
            values = evaluate_relations(CommitmentBundle(c0, c1, c2, c3, c4))

            assert values.A0 == c0
            assert values.A1 == c1
            assert values.A2 == c2
            assert values.A3 == values.A1 - values.A2
            assert values.A4 == values.A1 - values.A2 + c4
            assert values.A5 == c3

    def test_bundle_from_rounds(self, statement, rng):
        round1, x = vote1(1, 1, statement, rng)
        round2 = vote2(1, x, statement, rng)
        bundle = CommitmentBundle.from_rounds(round1, round2)

        assert (bundle.c0, bundle.c1) == (round1.c0, round1.c1)
        assert (bundle.c2, bundle.c3, bundle.c4) == (round2.c2, round2.c3, round2.c4)

    def test_honest_rounds_cancel_vote_in_a3(self, statement, rng):
        round1, x = vote1(1, 1, statement, rng)
        round2 = vote2(1, x, statement, rng)
        values = evaluate_relations(CommitmentBundle.from_rounds(round1, round2))

        # c1 - c2 = (h0 - Y)*x once the g1*vote terms cancel
        assert values.A3 == (statement.h0 - round2.Y) * x


@pytest.mark.parametrize("vote", [0, 1])
def test_full_participant_flow(statement, vote):
    rng = SeededRandomSource(vote)
    deposit(100, statement, rng)
    round1, x = vote1(vote, 1, statement, rng)
    round2 = vote2(vote, x, statement, rng)
    values = evaluate_relations(CommitmentBundle.from_rounds(round1, round2))

    assert values.A4 == values.A3 + round2.c4
