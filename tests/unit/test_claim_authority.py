"""
Module 04 - Claim Authority Tests
Tests for core/airdrop/authority.py

Tests:
- Four-recipient 25e18 scenario end to end
- One-shot claims and guard order
- Signature binding (claimer, amount, domain)
- Proof binding (another recipient's proof, wrong amount, unlisted address)
- Payout failure rollback (declined and raising transfers)
- Re-entrancy and concurrent claims
- Claim events and listeners
"""
import logging
import threading

import pytest

from core.airdrop.models import ClaimRequest
from core.crypto.hashing import keccak256, to_hex
from core.crypto.signatures import Signature, claim_digest
from core.schemas.errors import (
    AlreadyClaimedException,
    ErrorCodes,
    InputException,
    InvalidProofException,
    InvalidSignatureException,
    PayoutFailureException,
    ReentrantClaimException,
)

from fixtures import (
    SCENARIO_AMOUNT,
    VERIFYING_CONTRACT,
    DecliningToken,
    RaisingToken,
    ReentrantToken,
    make_account,
    make_airdrop,
    make_claim_request,
    make_domain,
)


def claim_args(setup, index, **overrides):
    args = {
        "claimer": setup.addresses[index],
        "amount": setup.tree.records[index].amount,
        "merkle_proof": setup.tree.proof_for(index),
        "signature": setup.sign(index),
    }
    args.update(overrides)
    return args


class TestScenario:
    """Four recipients of 25e18 each claim once."""

    def test_all_recipients_claim(self, airdrop):
        for i in range(4):
            receipt = airdrop.authority.claim(**claim_args(airdrop, i))
            assert receipt.ok
            assert receipt.claimer == airdrop.addresses[i]
            assert receipt.amount == SCENARIO_AMOUNT

        for address in airdrop.addresses:
            assert airdrop.authority.has_claimed(address)
            assert airdrop.token.balance_of(address) == SCENARIO_AMOUNT
        assert airdrop.token.balance_of(VERIFYING_CONTRACT) == 0

    def test_unclaimed_by_default(self, airdrop):
        assert not any(airdrop.authority.has_claimed(a) for a in airdrop.addresses)

    def test_has_claimed_is_case_insensitive(self, airdrop):
        airdrop.authority.claim(**claim_args(airdrop, 0))
        assert airdrop.authority.has_claimed(airdrop.addresses[0].lower())

    def test_claim_request_bundle(self, airdrop):
        receipt = airdrop.authority.claim_request(make_claim_request(airdrop, 3))
        assert receipt.claimer == airdrop.addresses[3]

    def test_message_hash(self, airdrop):
        account = airdrop.addresses[0]
        assert airdrop.authority.get_message_hash(account, SCENARIO_AMOUNT) == claim_digest(
            make_domain(), account, SCENARIO_AMOUNT
        )

    def test_root_and_separator_exposed(self, airdrop):
        assert airdrop.authority.merkle_root == airdrop.tree.root
        assert airdrop.authority.domain_separator == make_domain().separator


class TestOneShot:

    def test_second_claim_rejected(self, airdrop):
        airdrop.authority.claim(**claim_args(airdrop, 0))
        with pytest.raises(AlreadyClaimedException) as exc_info:
            airdrop.authority.claim(**claim_args(airdrop, 0))
        assert exc_info.value.code == ErrorCodes.ALREADY_CLAIMED
        assert exc_info.value.claimer == airdrop.addresses[0]
        assert airdrop.token.balance_of(airdrop.addresses[0]) == SCENARIO_AMOUNT

    def test_other_recipients_unaffected(self, airdrop):
        airdrop.authority.claim(**claim_args(airdrop, 0))
        airdrop.authority.claim(**claim_args(airdrop, 1))
        assert not airdrop.authority.has_claimed(airdrop.addresses[2])


class TestGuardOrder:

    def test_already_claimed_reported_before_signature(self, airdrop):
        airdrop.authority.claim(**claim_args(airdrop, 0))
        garbage = Signature(v=27, r=1, s=1)
        with pytest.raises(AlreadyClaimedException):
            airdrop.authority.claim(**claim_args(airdrop, 0, signature=garbage))

    def test_signature_reported_before_proof(self, airdrop):
        garbage = Signature(v=27, r=1, s=1)
        bad_proof = [keccak256(b"x"), keccak256(b"y")]
        with pytest.raises(InvalidSignatureException):
            airdrop.authority.claim(
                **claim_args(airdrop, 0, signature=garbage, merkle_proof=bad_proof)
            )


class TestSignatureBinding:

    def test_signature_by_other_key(self, airdrop):
        mallory_key, _ = make_account("mallory")
        forged = airdrop.sign(0, key=mallory_key)
        with pytest.raises(InvalidSignatureException) as exc_info:
            airdrop.authority.claim(**claim_args(airdrop, 0, signature=forged))
        assert exc_info.value.details["recovered"] != airdrop.addresses[0]
        assert not airdrop.authority.has_claimed(airdrop.addresses[0])

    def test_signature_of_one_recipient_cannot_claim_for_another(self, airdrop):
        with pytest.raises(InvalidSignatureException):
            airdrop.authority.claim(**claim_args(airdrop, 1, signature=airdrop.sign(0)))

    def test_signature_for_other_amount(self, airdrop):
        wrong = airdrop.sign(0, amount=SCENARIO_AMOUNT * 2)
        with pytest.raises(InvalidSignatureException):
            airdrop.authority.claim(**claim_args(airdrop, 0, signature=wrong))

    def test_malformed_signature(self, airdrop):
        with pytest.raises(InvalidSignatureException) as exc_info:
            airdrop.authority.claim(**claim_args(airdrop, 0, signature=Signature(v=5, r=0, s=0)))
        assert exc_info.value.details["recovered"] is None


class TestProofBinding:

    def test_another_recipients_proof(self, airdrop):
        with pytest.raises(InvalidProofException) as exc_info:
            airdrop.authority.claim(
                **claim_args(airdrop, 0, merkle_proof=airdrop.tree.proof_for(1))
            )
        assert exc_info.value.code == ErrorCodes.INVALID_PROOF

    def test_inflated_amount_with_matching_signature(self, airdrop):
        amount = SCENARIO_AMOUNT * 10
        with pytest.raises(InvalidProofException):
            airdrop.authority.claim(
                **claim_args(airdrop, 0, amount=amount, signature=airdrop.sign(0, amount=amount))
            )
        assert not airdrop.authority.has_claimed(airdrop.addresses[0])

    def test_unlisted_address(self, airdrop):
        key, outsider = make_account("outsider")
        signature = airdrop.sign(0, key=key, account=outsider)
        with pytest.raises(InvalidProofException):
            airdrop.authority.claim(
                outsider, SCENARIO_AMOUNT, airdrop.tree.proof_for(0), signature
            )

    def test_empty_proof(self, airdrop):
        with pytest.raises(InvalidProofException):
            airdrop.authority.claim(**claim_args(airdrop, 0, merkle_proof=[]))

    def test_depth_enforced(self):
        setup = make_airdrop(enforce_depth=True)
        padded = setup.tree.proof_for(0) + [keccak256(b"pad")]
        with pytest.raises(InvalidProofException):
            setup.authority.claim(**claim_args(setup, 0, merkle_proof=padded))
        setup.authority.claim(**claim_args(setup, 0))


class TestInputValidation:

    def test_malformed_claimer(self, airdrop):
        with pytest.raises(InputException):
            airdrop.authority.claim(**claim_args(airdrop, 0, claimer="0x1234"))

    def test_negative_amount(self, airdrop):
        with pytest.raises(InputException):
            airdrop.authority.claim(**claim_args(airdrop, 0, amount=-1))


class TestPayoutFailure:

    def test_declined_transfer_rolls_back(self):
        setup = make_airdrop(token_factory=DecliningToken)
        with pytest.raises(PayoutFailureException) as exc_info:
            setup.authority.claim(**claim_args(setup, 0))
        assert exc_info.value.retryable
        assert exc_info.value.code == ErrorCodes.PAYOUT_FAILURE
        assert not setup.authority.has_claimed(setup.addresses[0])
        assert setup.authority.events == ()
        assert len(setup.token.calls) == 1

    def test_raising_transfer_rolls_back(self):
        setup = make_airdrop(token_factory=RaisingToken)
        with pytest.raises(PayoutFailureException) as exc_info:
            setup.authority.claim(**claim_args(setup, 0))
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "token paused" in exc_info.value.details["error"]
        assert not setup.authority.has_claimed(setup.addresses[0])

    def test_retry_after_funding_succeeds(self):
        setup = make_airdrop(fund=False)
        with pytest.raises(PayoutFailureException):
            setup.authority.claim(**claim_args(setup, 0))
        setup.token.mint(VERIFYING_CONTRACT, SCENARIO_AMOUNT)
        receipt = setup.authority.claim(**claim_args(setup, 0))
        assert receipt.event.sequence == 0
        assert setup.token.balance_of(setup.addresses[0]) == SCENARIO_AMOUNT

    def test_rollback_logged(self, caplog):
        setup = make_airdrop(token_factory=DecliningToken)
        with caplog.at_level(logging.ERROR, logger="core.airdrop.authority"):
            with pytest.raises(PayoutFailureException):
                setup.authority.claim(**claim_args(setup, 0))
        assert "claim reverted" in caplog.text


class TestReentrancy:

    def test_reentrant_claim_sees_flag_set(self):
        setup = make_airdrop(token_factory=ReentrantToken)
        args = claim_args(setup, 0)
        setup.token.on_transfer = lambda recipient, amount: setup.authority.claim(**args)

        setup.authority.claim(**args)

        assert len(setup.token.reentry_errors) == 1
        assert isinstance(setup.token.reentry_errors[0], AlreadyClaimedException)
        assert setup.token.delivered == [(setup.addresses[0], SCENARIO_AMOUNT)]
        assert len(setup.authority.events) == 1

    def test_reentrant_claim_for_other_recipient_rejected(self):
        setup = make_airdrop(token_factory=ReentrantToken)
        other = claim_args(setup, 1)
        setup.token.on_transfer = lambda recipient, amount: setup.authority.claim(**other)

        setup.authority.claim(**claim_args(setup, 0))

        assert len(setup.token.reentry_errors) == 1
        error = setup.token.reentry_errors[0]
        assert isinstance(error, ReentrantClaimException)
        assert error.code == ErrorCodes.REENTRANT_CLAIM
        assert setup.authority.has_claimed(setup.addresses[0])
        assert not setup.authority.has_claimed(setup.addresses[1])
        assert len(setup.authority.events) == 1

    def test_declined_payout_leaves_no_nested_claim(self):
        setup = make_airdrop(token_factory=ReentrantToken)
        other = claim_args(setup, 1)
        setup.token.on_transfer = lambda recipient, amount: setup.authority.claim(**other)
        setup.token.accept = False

        with pytest.raises(PayoutFailureException):
            setup.authority.claim(**claim_args(setup, 0))

        assert isinstance(setup.token.reentry_errors[0], ReentrantClaimException)
        assert not setup.authority.has_claimed(setup.addresses[0])
        assert not setup.authority.has_claimed(setup.addresses[1])
        assert setup.token.delivered == []
        assert setup.authority.events == ()

    def test_other_recipient_can_claim_after_payout(self):
        setup = make_airdrop(token_factory=ReentrantToken)
        other = claim_args(setup, 1)
        setup.token.on_transfer = lambda recipient, amount: setup.authority.claim(**other)

        setup.authority.claim(**claim_args(setup, 0))
        setup.authority.claim(**other)

        assert setup.authority.has_claimed(setup.addresses[1])
        assert [e.claimer for e in setup.authority.events] == setup.addresses[:2]


class TestConcurrency:

    def test_parallel_claims_for_one_address(self, airdrop):
        args = claim_args(airdrop, 2)
        results: list[object] = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            try:
                results.append(airdrop.authority.claim(**args))
            except AlreadyClaimedException as e:
                results.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        successes = [r for r in results if not isinstance(r, Exception)]
        assert len(successes) == 1
        assert airdrop.token.balance_of(airdrop.addresses[2]) == SCENARIO_AMOUNT


class TestEvents:

    def test_event_contents(self, airdrop):
        receipt = airdrop.authority.claim(**claim_args(airdrop, 1))
        event = receipt.event
        assert event.claimer == airdrop.addresses[1]
        assert event.amount == SCENARIO_AMOUNT
        assert event.merkle_root == to_hex(airdrop.tree.root)
        assert airdrop.authority.events == (event,)

    def test_sequence_increments(self, airdrop):
        sequences = [airdrop.authority.claim(**claim_args(airdrop, i)).event.sequence for i in range(3)]
        assert sequences == [0, 1, 2]

    def test_no_event_on_failure(self, airdrop):
        with pytest.raises(InvalidProofException):
            airdrop.authority.claim(**claim_args(airdrop, 0, merkle_proof=[]))
        assert airdrop.authority.events == ()

    def test_listener_receives_event(self, airdrop):
        seen = []
        airdrop.authority.subscribe(seen.append)
        receipt = airdrop.authority.claim(**claim_args(airdrop, 0))
        assert seen == [receipt.event]

    def test_failing_listener_does_not_undo_claim(self, airdrop, caplog):
        def broken(event):
            raise RuntimeError("listener down")

        airdrop.authority.subscribe(broken)
        with caplog.at_level(logging.ERROR, logger="core.airdrop.authority"):
            receipt = airdrop.authority.claim(**claim_args(airdrop, 0))
        assert receipt.ok
        assert airdrop.authority.has_claimed(airdrop.addresses[0])
        assert "Claim listener failed" in caplog.text


class TestClaimRequestModel:

    def test_accepts_hex_and_decimal_components(self, airdrop):
        request = make_claim_request(airdrop, 0)
        signature = airdrop.sign(0)
        assert request.signature == signature
        as_decimal = make_claim_request(airdrop, 0, r=str(signature.r), s=signature.s)
        assert as_decimal.signature == signature

    def test_populate_by_field_name(self, airdrop):
        request = make_claim_request(airdrop, 0)
        data = request.model_dump()
        assert "merkle_proof" in data
        assert ClaimRequest.model_validate(data) == request

    def test_amount_string_parsed(self, airdrop):
        assert make_claim_request(airdrop, 0).amount == SCENARIO_AMOUNT

    @pytest.mark.parametrize("field,value", [
        ("amount", "1.5"),
        ("claimer", "0x1234"),
        ("r", "not-a-number"),
        ("merkleProof", ["0x1234"]),
    ])
    def test_invalid_fields(self, airdrop, field, value):
        with pytest.raises(ValueError):
            make_claim_request(airdrop, 0, **{field: value})
