from __future__ import annotations

import base64
import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from tokenmeta.solana.layouts import METADATA_ACCOUNT_LAYOUT
from tokenmeta.solana.rpc import SolanaRPCClient

RPC_URL = "https://api.devnet.solana.com"
METADATA_ACCOUNT_SIZE = 679


def pad(value: str, width: int) -> str:
    return value + "\x00" * (width - len(value.encode("utf-8")))


def make_response(status_code: int, json_data: dict[str, Any]) -> httpx.Response:
    request = httpx.Request("POST", RPC_URL)
    return httpx.Response(status_code=status_code, json=json_data, request=request)


class ScriptedRPC:
    """Answers JSON-RPC calls from per-method handlers and records every request."""

    def __init__(self, handlers: dict[str, Callable[[list[Any]], Any]]) -> None:
        self.handlers = handlers
        self.calls: list[tuple[str, list[Any]]] = []

    def __call__(self, _url: str, *, json: dict[str, Any], timeout: float) -> httpx.Response:  # noqa: ARG002
        method = json["method"]
        params = json["params"]
        self.calls.append((method, params))
        handler = self.handlers.get(method)
        if handler is None:
            return make_response(200, {"jsonrpc": "2.0", "error": {"code": -32601, "message": f"Method not found: {method}"}, "id": json["id"]})
        outcome = handler(params)
        if isinstance(outcome, dict) and "error" in outcome:
            return make_response(200, {"jsonrpc": "2.0", "error": outcome["error"], "id": json["id"]})
        return make_response(200, {"jsonrpc": "2.0", "result": outcome, "id": json["id"]})

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def client(self, **kwargs: Any) -> SolanaRPCClient:
        return SolanaRPCClient(endpoint=RPC_URL, _request=self, **kwargs)


def confirmed_handlers(
    *,
    account: bytes | None = None,
    blockhash: Hash | None = None,
    last_valid_block_height: int = 1_000,
) -> dict[str, Callable[[list[Any]], Any]]:
    """Handlers for a healthy endpoint that confirms every transaction immediately."""
    recent = blockhash or Hash.new_unique()

    def account_info(_params: list[Any]) -> Any:
        if account is None:
            return {"context": {"slot": 1}, "value": None}
        return {
            "context": {"slot": 1},
            "value": {
                "data": [base64.b64encode(account).decode("ascii"), "base64"],
                "executable": False,
                "lamports": 5_616_720,
                "owner": "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s",
                "rentEpoch": 0,
            },
        }

    def send(params: list[Any]) -> Any:
        tx = Transaction.from_bytes(base64.b64decode(params[0]))
        return str(tx.signatures[0])

    return {
        "getAccountInfo": account_info,
        "getLatestBlockhash": lambda _params: {
            "context": {"slot": 1},
            "value": {"blockhash": str(recent), "lastValidBlockHeight": last_valid_block_height},
        },
        "sendTransaction": send,
        "getSignatureStatuses": lambda _params: {
            "context": {"slot": 2},
            "value": [{"slot": 2, "confirmations": 0, "err": None, "confirmationStatus": "confirmed"}],
        },
        "getBlockHeight": lambda _params: last_valid_block_height - 100,
    }


def build_metadata_account(
    *,
    mint: Pubkey,
    update_authority: Pubkey,
    name: str = "Old Name",
    symbol: str = "OLD",
    uri: str = "https://example.com/old.json",
    seller_fee_basis_points: int = 500,
    creators: list[dict[str, Any]] | None = None,
    collection: dict[str, Any] | None = None,
    uses: dict[str, Any] | None = None,
    key: int = 4,
) -> bytes:
    """Serialize a MetadataV1 account the way the program stores it, padding included."""
    raw = METADATA_ACCOUNT_LAYOUT.build(
        {
            "key": key,
            "update_authority": bytes(update_authority),
            "mint": bytes(mint),
            "data": {
                "name": pad(name, 32),
                "symbol": pad(symbol, 10),
                "uri": pad(uri, 200),
                "seller_fee_basis_points": seller_fee_basis_points,
                "creators": creators,
            },
            "primary_sale_happened": False,
            "is_mutable": True,
            "edition_nonce": 254,
            "token_standard": 2,
            "collection": collection,
            "uses": uses,
        }
    )
    return raw + b"\x00" * (METADATA_ACCOUNT_SIZE - len(raw))


@pytest.fixture()
def payer() -> Keypair:
    return Keypair()


@pytest.fixture()
def mint() -> Pubkey:
    return Pubkey.new_unique()


@pytest.fixture()
def keypair_file(tmp_path: Path, payer: Keypair) -> Path:
    path = tmp_path / "id.json"
    path.write_text(json.dumps(list(bytes(payer))))
    return path


@pytest.fixture()
def scripted_rpc() -> type[ScriptedRPC]:
    return ScriptedRPC


@pytest.fixture()
def healthy_endpoint() -> Callable[..., dict[str, Callable[[list[Any]], Any]]]:
    return confirmed_handlers


@pytest.fixture()
def account_builder() -> Callable[..., bytes]:
    return build_metadata_account
