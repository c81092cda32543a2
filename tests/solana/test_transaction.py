from __future__ import annotations

import base64
from typing import Any

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from tokenmeta.solana.errors import SubmissionError, SubmissionExpiredError
from tokenmeta.solana.instructions import build_update_instruction, new_record
from tokenmeta.solana.metadata import derive_metadata_address
from tokenmeta.solana.transaction import TransactionSubmitter


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _instruction(payer: Keypair) -> Any:
    metadata = derive_metadata_address(Pubkey.new_unique())
    return build_update_instruction(metadata, payer.pubkey(), new_record(name="Foo", symbol="FOO"))


def _submitter(rpc: Any, clock: FakeClock, **kwargs: Any) -> TransactionSubmitter:
    return TransactionSubmitter(rpc=rpc.client(), _sleep=clock.sleep, _clock=clock, **kwargs)


def test_submit_signs_sends_and_confirms(scripted_rpc: Any, healthy_endpoint: Any, payer: Keypair) -> None:
    rpc = scripted_rpc(healthy_endpoint())
    clock = FakeClock()

    signature = _submitter(rpc, clock).submit([_instruction(payer)], payer, action="update metadata")

    assert rpc.methods() == ["getLatestBlockhash", "sendTransaction", "getSignatureStatuses"]
    sent = Transaction.from_bytes(base64.b64decode(rpc.calls[1][1][0]))
    sent.verify()
    assert sent.signatures == [signature]
    assert sent.message.account_keys[0] == payer.pubkey()
    assert rpc.calls[2][1] == [[str(signature)]]
    assert clock.sleeps == []


def test_submit_waits_until_commitment_reached(scripted_rpc: Any, healthy_endpoint: Any, payer: Keypair) -> None:
    statuses = iter(
        [
            None,
            {"slot": 5, "err": None, "confirmationStatus": "processed"},
            {"slot": 5, "err": None, "confirmationStatus": "confirmed"},
        ]
    )
    handlers = healthy_endpoint()
    handlers["getSignatureStatuses"] = lambda _params: {"context": {"slot": 5}, "value": [next(statuses)]}
    rpc = scripted_rpc(handlers)
    clock = FakeClock()

    _submitter(rpc, clock, poll_interval=0.25).submit([_instruction(payer)], payer)

    assert rpc.methods().count("getSignatureStatuses") == 3
    assert clock.sleeps == [0.25, 0.25]


def test_submit_expired_blockhash_at_send(scripted_rpc: Any, healthy_endpoint: Any, payer: Keypair) -> None:
    handlers = healthy_endpoint()
    handlers["sendTransaction"] = lambda _params: {
        "error": {"code": -32002, "message": "Transaction simulation failed: Blockhash not found", "data": {}}
    }
    rpc = scripted_rpc(handlers)

    with pytest.raises(SubmissionExpiredError, match="Failed to send create metadata transaction"):
        _submitter(rpc, FakeClock()).submit([_instruction(payer)], payer, action="create metadata")

    assert "getSignatureStatuses" not in rpc.methods()


def test_submit_expired_while_waiting_for_confirmation(
    scripted_rpc: Any, healthy_endpoint: Any, payer: Keypair
) -> None:
    handlers = healthy_endpoint(last_valid_block_height=500)
    handlers["getSignatureStatuses"] = lambda _params: {"context": {"slot": 9}, "value": [None]}
    heights = iter([499, 500, 501])
    handlers["getBlockHeight"] = lambda _params: next(heights)
    rpc = scripted_rpc(handlers)
    clock = FakeClock()

    with pytest.raises(SubmissionExpiredError, match="501 > 500"):
        _submitter(rpc, clock).submit([_instruction(payer)], payer)

    assert rpc.methods().count("sendTransaction") == 1


def test_submit_landed_transaction_is_not_reported_expired(
    scripted_rpc: Any, healthy_endpoint: Any, payer: Keypair
) -> None:
    statuses = iter(
        [
            {"slot": 9, "err": None, "confirmationStatus": "processed"},
            {"slot": 9, "err": None, "confirmationStatus": "confirmed"},
        ]
    )
    handlers = healthy_endpoint(last_valid_block_height=500)
    handlers["getSignatureStatuses"] = lambda _params: {"context": {"slot": 9}, "value": [next(statuses)]}
    handlers["getBlockHeight"] = lambda _params: 501
    rpc = scripted_rpc(handlers)
    clock = FakeClock()

    signature = _submitter(rpc, clock).submit([_instruction(payer)], payer)

    assert rpc.calls[-1][1] == [[str(signature)]]
    assert "getBlockHeight" not in rpc.methods()
    assert len(clock.sleeps) == 1


def test_submit_program_rejection_is_passed_through(
    scripted_rpc: Any, healthy_endpoint: Any, payer: Keypair
) -> None:
    message = "Transaction simulation failed: Error processing Instruction 0: custom program error: 0x39"
    handlers = healthy_endpoint()
    handlers["sendTransaction"] = lambda _params: {"error": {"code": -32002, "message": message}}
    rpc = scripted_rpc(handlers)

    with pytest.raises(SubmissionError) as excinfo:
        _submitter(rpc, FakeClock()).submit([_instruction(payer)], payer, action="update metadata")

    assert str(excinfo.value) == "Failed to send update metadata transaction"
    assert str(excinfo.value.__cause__) == message


def test_submit_on_chain_failure(scripted_rpc: Any, healthy_endpoint: Any, payer: Keypair) -> None:
    handlers = healthy_endpoint()
    handlers["getSignatureStatuses"] = lambda _params: {
        "context": {"slot": 9},
        "value": [{"slot": 9, "err": {"InstructionError": [0, {"Custom": 57}]}, "confirmationStatus": "confirmed"}],
    }
    rpc = scripted_rpc(handlers)

    with pytest.raises(SubmissionError, match="Custom"):
        _submitter(rpc, FakeClock()).submit([_instruction(payer)], payer)


def test_submit_times_out(scripted_rpc: Any, healthy_endpoint: Any, payer: Keypair) -> None:
    handlers = healthy_endpoint()
    handlers["getSignatureStatuses"] = lambda _params: {"context": {"slot": 9}, "value": [None]}
    rpc = scripted_rpc(handlers)
    clock = FakeClock()

    with pytest.raises(SubmissionError, match="timed out"):
        _submitter(rpc, clock, confirm_timeout=2.0, poll_interval=0.5).submit([_instruction(payer)], payer)

    assert clock.now == pytest.approx(2.0)


def test_submit_blockhash_unavailable(scripted_rpc: Any, payer: Keypair) -> None:
    rpc = scripted_rpc({})

    with pytest.raises(SubmissionError, match="recent blockhash"):
        _submitter(rpc, FakeClock()).submit([_instruction(payer)], payer)
