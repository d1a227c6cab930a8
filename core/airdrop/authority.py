"""
Module 04 - Claim Authority
One-time payout gate: replay protection, signature check, proof check,
then state mutation, then payout.

Owner: Protocol Engineer
Module ID: M04

State machine (per address):
    Unclaimed --claim ok--> Claimed (terminal)

Guard order (first failure is the reported error):
    1. not already claimed     -> AlreadyClaimedException
    2. signature by claimer    -> InvalidSignatureException
    3. proof against the root  -> InvalidProofException

Effects before interaction: the claimed flag is written before
token.transfer is called. If the transfer returns False or raises, the
flag is cleared again and PayoutFailureException is raised, so a claim
is all-or-nothing.

All claims run under one re-entrant lock. A payout target that calls
back into claim() from inside transfer() is rejected: for the address
being paid with AlreadyClaimedException, for any other address with
ReentrantClaimException. A nested claim therefore never commits state
that an outer rollback would leave behind.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from core.airdrop.ledger import ClaimLedger
from core.airdrop.models import AirdropConfig, ClaimEvent, ClaimReceipt, ClaimRequest
from core.airdrop.token import TokenLike
from core.crypto.codec import normalize_address, validate_amount
from core.crypto.hashing import to_hex
from core.crypto.signatures import Signature, SignatureValidator
from core.merkle.merkle_proofs import MerkleVerifier
from core.schemas.errors import (
    AlreadyClaimedException,
    ClaimException,
    InvalidProofException,
    InvalidSignatureException,
    PayoutFailureException,
    ReentrantClaimException,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimContext:
    """Normalised arguments of one claim invocation, shared by all guards."""
    claimer: str
    amount: int
    proof: tuple[bytes, ...]
    signature: Signature


ClaimGuard = Callable[[ClaimContext], Optional[ClaimException]]
ClaimListener = Callable[[ClaimEvent], None]


class ClaimAuthority:
    """
    Holds the published root, the token collaborator and the claimed set.

    Usage:
        authority = ClaimAuthority(config, token)
        receipt = authority.claim(claimer, amount, proof, signature)
        authority.has_claimed(claimer)  # True
    """

    def __init__(
        self,
        config: AirdropConfig,
        token: TokenLike,
        *,
        ledger: ClaimLedger | None = None,
    ):
        self._config = config
        self._token = token
        self._ledger = ledger if ledger is not None else ClaimLedger()
        self._root = config.root_bytes
        self._validator = SignatureValidator(config.domain.to_eip712())
        self._lock = threading.RLock()
        # Set while token.transfer runs for the claim holding the lock
        self._payout_in_progress = False
        self._events: list[ClaimEvent] = []
        self._listeners: list[ClaimListener] = []
        self._guards: tuple[ClaimGuard, ...] = (
            self._guard_not_claimed,
            self._guard_no_payout_in_progress,
            self._guard_signature,
            self._guard_proof,
        )

    # -------------------------------------------------------------------------
    # Read-only accessors
    # -------------------------------------------------------------------------

    @property
    def config(self) -> AirdropConfig:
        return self._config

    @property
    def merkle_root(self) -> bytes:
        return self._root

    @property
    def token(self) -> TokenLike:
        return self._token

    @property
    def domain_separator(self) -> bytes:
        return self._validator.domain_separator

    @property
    def events(self) -> tuple[ClaimEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def has_claimed(self, address: str) -> bool:
        return self._ledger.is_claimed(address)

    def get_message_hash(self, account: str, amount: int) -> bytes:
        """The digest a claimer must sign for (account, amount)."""
        return self._validator.message_hash(account, amount)

    def subscribe(self, listener: ClaimListener) -> None:
        """Register a callback invoked with every ClaimEvent."""
        self._listeners.append(listener)

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    def _guard_not_claimed(self, ctx: ClaimContext) -> Optional[ClaimException]:
        if self._ledger.is_claimed(ctx.claimer):
            return AlreadyClaimedException(ctx.claimer)
        return None

    def _guard_no_payout_in_progress(self, ctx: ClaimContext) -> Optional[ClaimException]:
        if self._payout_in_progress:
            return ReentrantClaimException(ctx.claimer)
        return None

    def _guard_signature(self, ctx: ClaimContext) -> Optional[ClaimException]:
        recovered = self._validator.recover(ctx.claimer, ctx.amount, ctx.signature)
        if recovered is None or recovered != ctx.claimer:
            return InvalidSignatureException(ctx.claimer, recovered=recovered)
        return None

    def _guard_proof(self, ctx: ClaimContext) -> Optional[ClaimException]:
        ok = MerkleVerifier.verify_record_in_root(
            ctx.claimer,
            ctx.amount,
            ctx.proof,
            self._root,
            depth=self._config.proof_depth,
        )
        if not ok:
            return InvalidProofException(
                ctx.claimer,
                details={"proof_length": len(ctx.proof)},
            )
        return None

    # -------------------------------------------------------------------------
    # Transition
    # -------------------------------------------------------------------------

    def claim(
        self,
        claimer: str,
        amount: int,
        merkle_proof: Sequence[bytes],
        signature: Signature,
    ) -> ClaimReceipt:
        """
        Claim `amount` for `claimer`, exactly once.

        Args:
            claimer: Address receiving the payout
            amount: Entitlement committed for claimer
            merkle_proof: Sibling digests, bottom-up
            signature: Claimer's signature over (claimer, amount)

        Returns:
            ClaimReceipt carrying the emitted ClaimEvent

        Raises:
            InputException: If claimer or amount is malformed
            AlreadyClaimedException: Address already claimed
            InvalidSignatureException: Signature not by claimer
            InvalidProofException: Proof does not reach the published root
            PayoutFailureException: Token transfer failed; no state changed
            ReentrantClaimException: Called from inside another claim's payout
        """
        ctx = ClaimContext(
            claimer=normalize_address(claimer, field_path="claimer"),
            amount=validate_amount(amount, field_path="amount"),
            proof=tuple(merkle_proof),
            signature=signature,
        )

        with self._lock:
            for guard in self._guards:
                error = guard(ctx)
                if error is not None:
                    logger.warning(f"Claim rejected for {ctx.claimer}: {error.code}")
                    raise error

            self._ledger.mark_claimed(ctx.claimer)
            self._payout_in_progress = True
            try:
                delivered = self._token.transfer(ctx.claimer, ctx.amount)
            except Exception as e:
                self._ledger.revert_claim(ctx.claimer)
                logger.error(f"Payout to {ctx.claimer} raised, claim reverted: {e}")
                raise PayoutFailureException(
                    ctx.claimer, ctx.amount, details={"error": str(e)}
                ) from e
            finally:
                self._payout_in_progress = False

            if not delivered:
                self._ledger.revert_claim(ctx.claimer)
                logger.error(f"Payout to {ctx.claimer} declined, claim reverted")
                raise PayoutFailureException(ctx.claimer, ctx.amount)

            event = ClaimEvent(
                sequence=len(self._events),
                claimer=ctx.claimer,
                amount=ctx.amount,
                merkle_root=to_hex(self._root),
            )
            self._events.append(event)

        logger.info(f"Claim: {ctx.claimer} received {ctx.amount}")
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Claim listener failed for event {event.sequence}")

        return ClaimReceipt(claimer=ctx.claimer, amount=ctx.amount, event=event)

    def claim_request(self, request: ClaimRequest) -> ClaimReceipt:
        """Claim from the structured parameter bundle."""
        return self.claim(
            request.claimer,
            request.amount,
            request.proof_bytes,
            request.signature,
        )


__all__ = [
    "ClaimContext",
    "ClaimGuard",
    "ClaimListener",
    "ClaimAuthority",
]
