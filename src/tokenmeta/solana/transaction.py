"""Transaction signing, submission and confirmation."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction import Transaction

from tokenmeta.solana.errors import SubmissionError, SubmissionExpiredError
from tokenmeta.solana.rpc import SolanaRPCClient, SolanaRPCError

logger = logging.getLogger(__name__)

COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")
EXPIRED_MARKERS = ("blockhash not found", "block height exceeded")


def _is_expired(exc: SolanaRPCError) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in EXPIRED_MARKERS)


def _reached(level: str | None, target: str) -> bool:
    if level not in COMMITMENT_LEVELS:
        return False
    return COMMITMENT_LEVELS.index(level) >= COMMITMENT_LEVELS.index(target)


@dataclass
class TransactionSubmitter:
    """Signs instructions with a single payer, sends them and waits for confirmation."""

    rpc: SolanaRPCClient
    commitment: str = "confirmed"
    confirm_timeout: float = 60.0
    poll_interval: float = 0.5
    _sleep: Callable[[float], None] = time.sleep
    _clock: Callable[[], float] = time.monotonic

    def submit(self, instructions: Sequence[Instruction], payer: Keypair, *, action: str = "metadata") -> Signature:
        failure = f"Failed to send {action} transaction"
        try:
            latest = self.rpc.get_latest_blockhash()
        except SolanaRPCError as exc:
            raise SubmissionError(f"{failure}: unable to fetch a recent blockhash") from exc

        transaction = Transaction.new_signed_with_payer(
            list(instructions),
            payer.pubkey(),
            [payer],
            latest.blockhash,
        )
        signature = transaction.signatures[0]

        try:
            self.rpc.send_transaction(bytes(transaction))
        except SolanaRPCError as exc:
            if _is_expired(exc):
                raise SubmissionExpiredError(f"{failure}: blockhash {latest.blockhash} expired") from exc
            raise SubmissionError(failure) from exc

        logger.debug("Sent transaction %s; waiting for %s", signature, self.commitment)
        self._await_confirmation(str(signature), latest.last_valid_block_height, failure)
        logger.debug("Transaction %s reached %s", signature, self.commitment)
        return signature

    def _await_confirmation(self, signature: str, last_valid_block_height: int, failure: str) -> None:
        deadline = self._clock() + self.confirm_timeout
        while True:
            try:
                status = self.rpc.get_signature_status(signature)
                if status is not None:
                    err = status.get("err")
                    if err is not None:
                        raise SubmissionError(f"{failure}: transaction {signature} failed: {err}")
                    if _reached(status.get("confirmationStatus"), self.commitment):
                        return
                    block_height = None
                else:
                    block_height = self.rpc.get_block_height()
            except SolanaRPCError as exc:
                raise SubmissionError(f"{failure}: unable to confirm transaction {signature}") from exc

            # a reported status means the transaction landed inside its window
            if block_height is not None and block_height > last_valid_block_height:
                raise SubmissionExpiredError(
                    f"{failure}: blockhash expired before confirmation "
                    f"(block height {block_height} > {last_valid_block_height})"
                )
            if self._clock() >= deadline:
                raise SubmissionError(
                    f"{failure}: timed out after {self.confirm_timeout:.0f}s waiting for transaction {signature}"
                )
            self._sleep(self.poll_interval)


__all__ = ["COMMITMENT_LEVELS", "TransactionSubmitter"]
