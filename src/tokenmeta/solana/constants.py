"""Well-known Solana program identifiers."""

from __future__ import annotations

from solders.pubkey import Pubkey

TOKEN_METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")
SYSTEM_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")

METADATA_SEED = b"metadata"

# Account key discriminator for Metaplex MetadataV1 accounts.
METADATA_V1_KEY = 4

CREATE_METADATA_ACCOUNT_V3 = 33
UPDATE_METADATA_ACCOUNT_V2 = 15

__all__ = [
    "TOKEN_METADATA_PROGRAM_ID",
    "SYSTEM_PROGRAM_ID",
    "METADATA_SEED",
    "METADATA_V1_KEY",
    "CREATE_METADATA_ACCOUNT_V3",
    "UPDATE_METADATA_ACCOUNT_V2",
]
