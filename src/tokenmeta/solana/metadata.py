"""Token Metadata records: address derivation, decoding and fetching."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from construct import ConstructError
from solders.pubkey import Pubkey

from tokenmeta.solana.constants import METADATA_SEED, METADATA_V1_KEY, TOKEN_METADATA_PROGRAM_ID
from tokenmeta.solana.errors import AccountNotFoundError, DecodeError, MetadataFetchError
from tokenmeta.solana.layouts import DATA_V2_LAYOUT, METADATA_ACCOUNT_LAYOUT
from tokenmeta.solana.rpc import SolanaRPCClient, SolanaRPCError

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch metadata account. Does it exist?"


class UseMethod(IntEnum):
    BURN = 0
    MULTIPLE = 1
    SINGLE = 2


@dataclass(frozen=True)
class Creator:
    address: Pubkey
    verified: bool
    share: int


@dataclass(frozen=True)
class Collection:
    verified: bool
    key: Pubkey


@dataclass(frozen=True)
class Uses:
    use_method: UseMethod
    remaining: int
    total: int


@dataclass(frozen=True)
class DataV2:
    """The descriptive record written by create and update instructions."""

    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    creators: tuple[Creator, ...] | None = None
    collection: Collection | None = None
    uses: Uses | None = None

    def to_layout(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "uri": self.uri,
            "seller_fee_basis_points": self.seller_fee_basis_points,
            "creators": None
            if self.creators is None
            else [
                {"address": bytes(creator.address), "verified": creator.verified, "share": creator.share}
                for creator in self.creators
            ],
            "collection": None
            if self.collection is None
            else {"verified": self.collection.verified, "key": bytes(self.collection.key)},
            "uses": None
            if self.uses is None
            else {
                "use_method": int(self.uses.use_method),
                "remaining": self.uses.remaining,
                "total": self.uses.total,
            },
        }

    def encode(self) -> bytes:
        """Serialize with the borsh DataV2 layout."""
        return DATA_V2_LAYOUT.build(self.to_layout())


@dataclass(frozen=True)
class MetadataAccount:
    """A decoded MetadataV1 account.

    String fields keep the fixed-width null padding stored on-chain.
    """

    key: int
    update_authority: Pubkey
    mint: Pubkey
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    creators: tuple[Creator, ...] | None
    primary_sale_happened: bool
    is_mutable: bool
    edition_nonce: int | None
    token_standard: int | None
    collection: Collection | None
    uses: Uses | None


def find_metadata_pda(
    mint: Pubkey,
    *,
    label: bytes = METADATA_SEED,
    program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID,
) -> tuple[Pubkey, int]:
    """Return the metadata PDA and its bump for `mint`."""
    seeds = [label, bytes(program_id), bytes(mint)]
    return Pubkey.find_program_address(seeds, program_id)


def derive_metadata_address(mint: Pubkey, program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID) -> Pubkey:
    address, _bump = find_metadata_pda(mint, program_id=program_id)
    return address


def strip_padding(value: str) -> str:
    """Drop the trailing null bytes used to pad on-chain string fields."""
    return value.rstrip("\x00")


def decode_metadata(raw: bytes) -> MetadataAccount:
    """Decode MetadataV1 account bytes."""
    if not raw:
        raise DecodeError("Failed to deserialize metadata: account data is empty")
    if raw[0] != METADATA_V1_KEY:
        raise DecodeError(
            f"Failed to deserialize metadata: unexpected account key {raw[0]} (expected {METADATA_V1_KEY})"
        )
    try:
        parsed = METADATA_ACCOUNT_LAYOUT.parse(raw)
        data = parsed.data
        return MetadataAccount(
            key=parsed.key,
            update_authority=_pubkey(parsed.update_authority),
            mint=_pubkey(parsed.mint),
            name=data.name,
            symbol=data.symbol,
            uri=data.uri,
            seller_fee_basis_points=data.seller_fee_basis_points,
            creators=None
            if data.creators is None
            else tuple(
                Creator(address=_pubkey(item.address), verified=bool(item.verified), share=item.share)
                for item in data.creators
            ),
            primary_sale_happened=bool(parsed.primary_sale_happened),
            is_mutable=bool(parsed.is_mutable),
            edition_nonce=parsed.edition_nonce,
            token_standard=parsed.token_standard,
            collection=None
            if parsed.collection is None
            else Collection(verified=bool(parsed.collection.verified), key=_pubkey(parsed.collection.key)),
            uses=None
            if parsed.uses is None
            else Uses(
                use_method=UseMethod(parsed.uses.use_method),
                remaining=parsed.uses.remaining,
                total=parsed.uses.total,
            ),
        )
    except (ConstructError, UnicodeDecodeError, ValueError) as exc:
        raise DecodeError(f"Failed to deserialize metadata: {exc}") from exc


def fetch_metadata(rpc: SolanaRPCClient, address: Pubkey) -> MetadataAccount:
    """Read and decode the metadata account stored at `address`."""
    try:
        raw = rpc.get_account_data(str(address))
    except SolanaRPCError as exc:
        raise MetadataFetchError(FETCH_FAILED_MESSAGE) from exc
    if raw is None:
        raise AccountNotFoundError(f"{FETCH_FAILED_MESSAGE} No account found at {address}")
    account = decode_metadata(raw)
    logger.debug("Decoded metadata for mint %s", account.mint)
    return account


def _pubkey(raw: Any) -> Pubkey:
    return Pubkey.from_bytes(bytes(raw))


__all__ = [
    "Collection",
    "Creator",
    "DataV2",
    "MetadataAccount",
    "UseMethod",
    "Uses",
    "decode_metadata",
    "derive_metadata_address",
    "fetch_metadata",
    "find_metadata_pda",
    "strip_padding",
]
