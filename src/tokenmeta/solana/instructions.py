"""Instruction builders for the Token Metadata program."""

from __future__ import annotations

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from tokenmeta.solana.constants import (
    CREATE_METADATA_ACCOUNT_V3,
    SYSTEM_PROGRAM_ID,
    TOKEN_METADATA_PROGRAM_ID,
    UPDATE_METADATA_ACCOUNT_V2,
)
from tokenmeta.solana.layouts import CREATE_METADATA_ACCOUNT_V3_ARGS, UPDATE_METADATA_ACCOUNT_V2_ARGS
from tokenmeta.solana.metadata import Collection, DataV2, MetadataAccount, Uses


def new_record(
    *,
    name: str,
    symbol: str,
    uri: str = "",
    seller_fee_basis_points: int = 0,
) -> DataV2:
    """Return a fresh record with no creators, collection or uses."""
    return DataV2(
        name=name,
        symbol=symbol,
        uri=uri,
        seller_fee_basis_points=seller_fee_basis_points,
        creators=None,
        collection=None,
        uses=None,
    )


def merge_update_data(
    existing: MetadataAccount,
    *,
    name: str | None = None,
    symbol: str | None = None,
    uri: str | None = None,
) -> DataV2:
    """Overlay caller-supplied fields on the fetched record.

    Seller fee, creators, collection and uses are always taken from `existing`.
    """
    return DataV2(
        name=existing.name if name is None else name,
        symbol=existing.symbol if symbol is None else symbol,
        uri=existing.uri if uri is None else uri,
        seller_fee_basis_points=existing.seller_fee_basis_points,
        creators=existing.creators,
        collection=None
        if existing.collection is None
        else Collection(verified=existing.collection.verified, key=existing.collection.key),
        uses=None
        if existing.uses is None
        else Uses(
            use_method=existing.uses.use_method,
            remaining=existing.uses.remaining,
            total=existing.uses.total,
        ),
    )


def build_create_instruction(
    metadata: Pubkey,
    mint: Pubkey,
    authority: Pubkey,
    data: DataV2,
    *,
    is_mutable: bool = True,
    program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID,
) -> Instruction:
    """Build CreateMetadataAccountV3 with `authority` as mint authority, payer and update authority."""
    payload = CREATE_METADATA_ACCOUNT_V3_ARGS.build(
        {
            "instruction": CREATE_METADATA_ACCOUNT_V3,
            "data": data.to_layout(),
            "is_mutable": is_mutable,
            "collection_details": None,
        }
    )
    accounts = [
        AccountMeta(pubkey=metadata, is_signer=False, is_writable=True),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        # optional rent sysvar slot; the program id marks it as omitted
        AccountMeta(pubkey=program_id, is_signer=False, is_writable=False),
    ]
    return Instruction(program_id=program_id, data=payload, accounts=accounts)


def build_update_instruction(
    metadata: Pubkey,
    authority: Pubkey,
    data: DataV2,
    *,
    program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID,
) -> Instruction:
    """Build UpdateMetadataAccountV2 replacing the record's data and nothing else."""
    payload = UPDATE_METADATA_ACCOUNT_V2_ARGS.build(
        {
            "instruction": UPDATE_METADATA_ACCOUNT_V2,
            "data": data.to_layout(),
            "new_update_authority": None,
            "primary_sale_happened": None,
            "is_mutable": None,
        }
    )
    accounts = [
        AccountMeta(pubkey=metadata, is_signer=False, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
    ]
    return Instruction(program_id=program_id, data=payload, accounts=accounts)


__all__ = [
    "build_create_instruction",
    "build_update_instruction",
    "merge_update_data",
    "new_record",
]
