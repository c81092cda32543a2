"""Borsh layouts for Token Metadata accounts and instruction arguments."""

from __future__ import annotations

from borsh_construct import U8, U16, U64, CStruct, Option, String, Vec
from construct import Mapping

PUBKEY = U8[32]

# borsh only allows 0 and 1; any other byte fails to parse with MappingError
BOOL = Mapping(U8, {False: 0, True: 1})

CREATOR_LAYOUT = CStruct(
    "address" / PUBKEY,
    "verified" / BOOL,
    "share" / U8,
)

COLLECTION_LAYOUT = CStruct(
    "verified" / BOOL,
    "key" / PUBKEY,
)

# use_method is a fieldless enum, encoded as its u8 variant index
USES_LAYOUT = CStruct(
    "use_method" / U8,
    "remaining" / U64,
    "total" / U64,
)

DATA_LAYOUT = CStruct(
    "name" / String,
    "symbol" / String,
    "uri" / String,
    "seller_fee_basis_points" / U16,
    "creators" / Option(Vec(CREATOR_LAYOUT)),
)

DATA_V2_LAYOUT = CStruct(
    "name" / String,
    "symbol" / String,
    "uri" / String,
    "seller_fee_basis_points" / U16,
    "creators" / Option(Vec(CREATOR_LAYOUT)),
    "collection" / Option(COLLECTION_LAYOUT),
    "uses" / Option(USES_LAYOUT),
)

# Trailing fields after `uses` (collection details, programmable config) and
# the account's zero padding are not needed and are left unparsed.
METADATA_ACCOUNT_LAYOUT = CStruct(
    "key" / U8,
    "update_authority" / PUBKEY,
    "mint" / PUBKEY,
    "data" / DATA_LAYOUT,
    "primary_sale_happened" / BOOL,
    "is_mutable" / BOOL,
    "edition_nonce" / Option(U8),
    "token_standard" / Option(U8),
    "collection" / Option(COLLECTION_LAYOUT),
    "uses" / Option(USES_LAYOUT),
)

CREATE_METADATA_ACCOUNT_V3_ARGS = CStruct(
    "instruction" / U8,
    "data" / DATA_V2_LAYOUT,
    "is_mutable" / BOOL,
    # CollectionDetails is always omitted for newly created records
    "collection_details" / Option(U8),
)

UPDATE_METADATA_ACCOUNT_V2_ARGS = CStruct(
    "instruction" / U8,
    "data" / Option(DATA_V2_LAYOUT),
    "new_update_authority" / Option(PUBKEY),
    "primary_sale_happened" / Option(BOOL),
    "is_mutable" / Option(BOOL),
)

__all__ = [
    "CREATOR_LAYOUT",
    "COLLECTION_LAYOUT",
    "USES_LAYOUT",
    "DATA_LAYOUT",
    "DATA_V2_LAYOUT",
    "METADATA_ACCOUNT_LAYOUT",
    "CREATE_METADATA_ACCOUNT_V3_ARGS",
    "UPDATE_METADATA_ACCOUNT_V2_ARGS",
]
