"""Solana JSON-RPC helpers."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any, Callable

import httpx
from solders.hash import Hash

logger = logging.getLogger(__name__)


class SolanaRPCError(RuntimeError):
    """Raised when Solana RPC calls fail."""

    def __init__(self, message: str, *, code: int | None = None, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data


RequestFn = Callable[..., httpx.Response]


@dataclass(frozen=True)
class LatestBlockhash:
    """A recent blockhash and the last block height at which it is accepted."""

    blockhash: Hash
    last_valid_block_height: int


@dataclass
class SolanaRPCClient:
    """Thin wrapper around Solana's JSON-RPC interface."""

    endpoint: str
    timeout: float = 30.0
    commitment: str = "confirmed"
    _request: RequestFn | None = None

    def __post_init__(self) -> None:
        if self._request is None:
            self._request = httpx.post

    def get_account_data(self, address: str) -> bytes | None:
        """Return raw account bytes for `address`, or None when the account does not exist."""
        result = self._call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": self.commitment}],
        )
        if not isinstance(result, dict):
            raise SolanaRPCError("Malformed RPC response; missing account info")
        value = result.get("value")
        if value is None:
            logger.debug("Account %s not found", address)
            return None
        try:
            encoded, encoding = value["data"]
        except (KeyError, TypeError, ValueError) as exc:
            raise SolanaRPCError("Malformed RPC response; missing account data") from exc
        if encoding != "base64":
            raise SolanaRPCError(f"Unexpected account data encoding '{encoding}'")
        try:
            raw = base64.b64decode(encoded, validate=True)
        except (binascii.Error, TypeError) as exc:
            raise SolanaRPCError("Account data is not valid base64") from exc
        logger.debug("Fetched %d bytes for account %s", len(raw), address)
        return raw

    def get_latest_blockhash(self) -> LatestBlockhash:
        result = self._call("getLatestBlockhash", [{"commitment": self.commitment}])
        try:
            value = result["value"]
            blockhash = Hash.from_string(value["blockhash"])
            last_valid = int(value["lastValidBlockHeight"])
        except (KeyError, TypeError, ValueError) as exc:
            raise SolanaRPCError("Malformed RPC response; missing blockhash") from exc
        logger.debug("Latest blockhash %s valid through block height %d", blockhash, last_valid)
        return LatestBlockhash(blockhash=blockhash, last_valid_block_height=last_valid)

    def send_transaction(self, raw: bytes) -> str:
        """Submit a signed, serialized transaction and return its signature."""
        encoded = base64.b64encode(raw).decode("ascii")
        result = self._call(
            "sendTransaction",
            [
                encoded,
                {
                    "encoding": "base64",
                    "skipPreflight": False,
                    "preflightCommitment": self.commitment,
                },
            ],
        )
        if not isinstance(result, str):
            raise SolanaRPCError("Malformed RPC response; missing transaction signature")
        return result

    def get_signature_status(self, signature: str) -> dict[str, Any] | None:
        result = self._call("getSignatureStatuses", [[signature]])
        try:
            status = result["value"][0]
        except (KeyError, IndexError, TypeError) as exc:
            raise SolanaRPCError("Malformed RPC response; missing signature status") from exc
        if status is not None and not isinstance(status, dict):
            raise SolanaRPCError("Signature status is not an object")
        return status

    def get_block_height(self) -> int:
        result = self._call("getBlockHeight", [{"commitment": self.commitment}])
        if not isinstance(result, int):
            raise SolanaRPCError("Block height is not an integer")
        return result

    def _call(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }
        logger.debug("RPC %s -> %s", method, self.endpoint)
        try:
            response = self._request(self.endpoint, json=payload, timeout=self.timeout)  # type: ignore[misc]
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise SolanaRPCError(f"RPC request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:  # pragma: no cover - unexpected for compliant RPC
            raise SolanaRPCError("Invalid JSON in RPC response") from exc

        if not isinstance(data, dict):
            raise SolanaRPCError(f"Malformed RPC response for {method}; expected a JSON object")

        if "error" in data:
            error = data["error"]
            if not isinstance(error, dict):
                error = {"message": str(error)}
            message = error.get("message", "Unknown RPC error")
            raise SolanaRPCError(message, code=error.get("code"), data=error.get("data"))

        if "result" not in data:
            raise SolanaRPCError(f"Malformed RPC response for {method}; missing result")
        return data["result"]


__all__ = ["LatestBlockhash", "SolanaRPCClient", "SolanaRPCError"]
