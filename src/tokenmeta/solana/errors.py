"""Errors raised by the metadata pipeline."""

from __future__ import annotations


class TokenMetadataError(RuntimeError):
    """Base class for failures surfaced to the CLI."""


class InvalidAddressError(TokenMetadataError):
    """Raised when a textual address is not a valid 32-byte base58 pubkey."""


class KeyLoadError(TokenMetadataError):
    """Raised when the signer keypair file cannot be read or parsed."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message)
        self.path = path


class AccountNotFoundError(TokenMetadataError):
    """Raised when the metadata account does not exist on-chain."""


class MetadataFetchError(TokenMetadataError):
    """Raised when the metadata account could not be read from the RPC endpoint."""


class DecodeError(TokenMetadataError):
    """Raised when account bytes do not match the metadata layout."""


class SubmissionError(TokenMetadataError):
    """Raised when the endpoint or program rejects a transaction."""


class SubmissionExpiredError(TokenMetadataError):
    """Raised when the transaction's blockhash expired before it landed."""


__all__ = [
    "TokenMetadataError",
    "InvalidAddressError",
    "KeyLoadError",
    "AccountNotFoundError",
    "MetadataFetchError",
    "DecodeError",
    "SubmissionError",
    "SubmissionExpiredError",
]
