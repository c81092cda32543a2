"""Create and update flows, from resolved arguments to ready-to-sign instructions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from tokenmeta.solana.errors import InvalidAddressError
from tokenmeta.solana.instructions import (
    build_create_instruction,
    build_update_instruction,
    merge_update_data,
    new_record,
)
from tokenmeta.solana.metadata import DataV2, MetadataAccount, derive_metadata_address, fetch_metadata
from tokenmeta.solana.rpc import SolanaRPCClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatePlan:
    mint: Pubkey
    metadata: Pubkey
    data: DataV2
    is_mutable: bool
    instruction: Instruction


@dataclass(frozen=True)
class UpdatePlan:
    mint: Pubkey
    metadata: Pubkey
    existing: MetadataAccount
    data: DataV2
    instruction: Instruction


def parse_address(value: str, *, label: str = "mint") -> Pubkey:
    """Parse a base58 address, raising InvalidAddressError when malformed."""
    try:
        return Pubkey.from_string(value.strip())
    except ValueError as exc:
        raise InvalidAddressError(f"Invalid {label} address '{value}'") from exc


def plan_create(
    mint: Pubkey,
    authority: Pubkey,
    *,
    name: str,
    symbol: str,
    uri: str = "",
    is_mutable: bool = True,
    seller_fee_basis_points: int = 0,
) -> CreatePlan:
    metadata = derive_metadata_address(mint)
    logger.debug("Metadata PDA for mint %s is %s", mint, metadata)
    data = new_record(name=name, symbol=symbol, uri=uri, seller_fee_basis_points=seller_fee_basis_points)
    instruction = build_create_instruction(metadata, mint, authority, data, is_mutable=is_mutable)
    return CreatePlan(mint=mint, metadata=metadata, data=data, is_mutable=is_mutable, instruction=instruction)


def plan_update(
    rpc: SolanaRPCClient,
    mint: Pubkey,
    authority: Pubkey,
    *,
    name: str | None = None,
    symbol: str | None = None,
    uri: str | None = None,
) -> UpdatePlan:
    """Fetch the current record and build an update carrying unchanged fields forward."""
    metadata = derive_metadata_address(mint)
    logger.debug("Metadata PDA for mint %s is %s", mint, metadata)
    existing = fetch_metadata(rpc, metadata)
    data = merge_update_data(existing, name=name, symbol=symbol, uri=uri)
    instruction = build_update_instruction(metadata, authority, data)
    return UpdatePlan(mint=mint, metadata=metadata, existing=existing, data=data, instruction=instruction)


__all__ = ["CreatePlan", "UpdatePlan", "parse_address", "plan_create", "plan_update"]
