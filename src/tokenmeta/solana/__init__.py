"""Solana-facing building blocks for token metadata management."""

from .errors import (
    AccountNotFoundError,
    DecodeError,
    InvalidAddressError,
    KeyLoadError,
    MetadataFetchError,
    SubmissionError,
    SubmissionExpiredError,
    TokenMetadataError,
)
from .instructions import build_create_instruction, build_update_instruction, merge_update_data, new_record
from .metadata import DataV2, MetadataAccount, decode_metadata, derive_metadata_address, fetch_metadata, strip_padding
from .rpc import SolanaRPCClient, SolanaRPCError
from .transaction import TransactionSubmitter
from .wallet import DEFAULT_KEYPAIR_PATH, expand_home, load_signer

__all__ = [
    "AccountNotFoundError",
    "DecodeError",
    "InvalidAddressError",
    "KeyLoadError",
    "MetadataFetchError",
    "SubmissionError",
    "SubmissionExpiredError",
    "TokenMetadataError",
    "build_create_instruction",
    "build_update_instruction",
    "merge_update_data",
    "new_record",
    "DataV2",
    "MetadataAccount",
    "decode_metadata",
    "derive_metadata_address",
    "fetch_metadata",
    "strip_padding",
    "SolanaRPCClient",
    "SolanaRPCError",
    "TransactionSubmitter",
    "DEFAULT_KEYPAIR_PATH",
    "expand_home",
    "load_signer",
]
